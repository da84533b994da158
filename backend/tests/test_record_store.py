"""
Record Store Tests

Runs the same contract against the in-memory store and the SQLAlchemy
store (SQLite in memory), then checks storage-fault handling with a
mocked session.
"""

import pytest
from dataclasses import replace
from datetime import date
from unittest.mock import MagicMock

from sqlalchemy.exc import SQLAlchemyError

from road_registry.database import create_session_factory
from road_registry.exceptions import StorageError
from road_registry.models import DemeritEvent, Person
from road_registry.models.db_models import PersonDB
from road_registry.services.registry import InMemoryRecordStore, SqlAlchemyRecordStore


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def sqlite_session():
    """Fresh SQLite in-memory database per test."""
    SessionFactory = create_session_factory("sqlite://")
    db = SessionFactory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(params=["memory", "sqlalchemy"])
def store(request, sqlite_session):
    if request.param == "memory":
        return InMemoryRecordStore()
    return SqlAlchemyRecordStore(sqlite_session)


@pytest.fixture
def alice():
    return Person("23#$abCDEF", "Alice", "Smith", "123|Main St|Melbourne|Victoria|Australia", "01-01-2000")


@pytest.fixture
def bob():
    return Person("35!!abCDEF", "Bob", "Jones", "10|Oak Rd|Melbourne|Victoria|Australia", "31-12-1999")


# =============================================================================
# TEST: Store contract
# =============================================================================

class TestRecordStoreContract:
    """Behaviour shared by every RecordStore."""

    def test_create_then_find(self, store, alice):
        assert store.create_record(alice.person_id, alice) is True
        found = store.find_record(alice.person_id)
        assert found == alice
        assert found.suspended is False

    def test_find_missing(self, store):
        assert store.find_record("99!!abcdZZ") is None

    def test_duplicate_create_rejected(self, store, alice):
        store.create_record(alice.person_id, alice)
        assert store.create_record(alice.person_id, replace(alice, first_name="Other")) is False
        assert store.find_record(alice.person_id).first_name == "Alice"

    def test_returned_records_are_copies(self, store, alice):
        store.create_record(alice.person_id, alice)
        found = store.find_record(alice.person_id)
        found.first_name = "Mutated"
        assert store.find_record(alice.person_id).first_name == "Alice"

    def test_replace_in_place(self, store, alice):
        store.create_record(alice.person_id, alice)
        updated = replace(alice, last_name="Jones", suspended=True)
        assert store.replace_record(alice.person_id, updated) is True
        assert store.find_record(alice.person_id) == updated

    def test_replace_with_new_identifier(self, store, bob):
        store.create_record(bob.person_id, bob)
        renamed = replace(bob, person_id="37!!abCDEF")
        assert store.replace_record(bob.person_id, renamed) is True
        assert store.find_record(bob.person_id) is None
        assert store.find_record("37!!abCDEF") == renamed

    def test_replace_onto_taken_identifier_rejected(self, store, alice, bob):
        store.create_record(alice.person_id, alice)
        store.create_record(bob.person_id, bob)
        assert store.replace_record(bob.person_id, replace(bob, person_id=alice.person_id)) is False
        assert store.find_record(bob.person_id) == bob
        assert store.find_record(alice.person_id) == alice

    def test_replace_missing(self, store, alice):
        assert store.replace_record(alice.person_id, alice) is False

    def test_demerit_events_by_identifier(self, store, alice, bob):
        first = DemeritEvent(alice.person_id, date(2024, 1, 1), 3)
        second = DemeritEvent(alice.person_id, date(2023, 1, 1), 2)
        other = DemeritEvent(bob.person_id, date(2024, 1, 1), 6)
        for item in (first, other, second):
            assert store.append_demerit_event(item) is True

        events = store.demerit_events_for(alice.person_id)
        assert sorted(events, key=lambda e: e.offense_date) == [second, first]
        # re-enumerable
        assert len(store.demerit_events_for(alice.person_id)) == 2
        assert store.demerit_events_for("99!!abcdZZ") == []


# =============================================================================
# TEST: SQLAlchemy row layout
# =============================================================================

class TestSqlAlchemyLayout:
    """Address is stored as five columns and dates as DATE."""

    def test_structured_columns(self, sqlite_session, alice):
        SqlAlchemyRecordStore(sqlite_session).create_record(alice.person_id, alice)
        row = sqlite_session.get(PersonDB, alice.person_id)
        assert row.street_number == "123"
        assert row.street == "Main St"
        assert row.city == "Melbourne"
        assert row.state == "Victoria"
        assert row.country == "Australia"
        assert row.birth_date == date(2000, 1, 1)
        assert row.suspended is False

    def test_independent_registries(self, alice):
        """Two session factories never see each other's records."""
        first = SqlAlchemyRecordStore(create_session_factory("sqlite://")())
        second = SqlAlchemyRecordStore(create_session_factory("sqlite://")())
        first.create_record(alice.person_id, alice)
        assert second.find_record(alice.person_id) is None


# =============================================================================
# TEST: Storage faults
# =============================================================================

class TestSqlAlchemyStorageFaults:
    """SQLAlchemy errors become StorageError after a rollback."""

    @pytest.fixture
    def mock_db(self):
        db = MagicMock()
        db.get = MagicMock(return_value=None)
        db.add = MagicMock()
        db.commit = MagicMock()
        db.rollback = MagicMock()
        return db

    def test_commit_failure_on_create(self, mock_db, alice):
        mock_db.commit.side_effect = SQLAlchemyError("disk I/O error")
        store = SqlAlchemyRecordStore(mock_db)
        with pytest.raises(StorageError):
            store.create_record(alice.person_id, alice)
        mock_db.rollback.assert_called_once()

    def test_read_failure(self, mock_db):
        mock_db.get.side_effect = SQLAlchemyError("connection lost")
        store = SqlAlchemyRecordStore(mock_db)
        with pytest.raises(StorageError):
            store.find_record("23#$abCDEF")

    def test_append_failure(self, mock_db):
        mock_db.commit.side_effect = SQLAlchemyError("disk full")
        store = SqlAlchemyRecordStore(mock_db)
        with pytest.raises(StorageError):
            store.append_demerit_event(DemeritEvent("23#$abCDEF", date(2024, 1, 1), 3))
        mock_db.rollback.assert_called_once()
