"""
Record Store

Narrow persistence interface the registry service talks to:
- create_record / find_record / replace_record for Person records
- append_demerit_event / demerit_events_for for the offense log

The demerit log is append-only: there is no update or delete.
Stores raise StorageError for I/O faults and nothing else.
"""
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...exceptions import StorageError
from ...models.db_models import DemeritEventDB, PersonDB
from ...models.domain import Address, DemeritEvent, Person
from .validators import format_date, parse_date


class RecordStore(ABC):
    """Key-value persistence of persons plus their demerit events."""

    @abstractmethod
    def create_record(self, person_id: str, person: Person) -> bool:
        """Store a new record. False if the identifier is already taken."""

    @abstractmethod
    def find_record(self, person_id: str) -> Optional[Person]:
        """The stored record, or None."""

    @abstractmethod
    def replace_record(self, person_id: str, person: Person) -> bool:
        """
        Overwrite the record stored under person_id with person.

        person.person_id may differ from person_id (identifier change).
        False if nothing is stored under person_id or the new identifier
        belongs to another record.
        """

    @abstractmethod
    def append_demerit_event(self, event: DemeritEvent) -> bool:
        """Append an offense to the log."""

    @abstractmethod
    def demerit_events_for(self, person_id: str) -> List[DemeritEvent]:
        """All offenses recorded against person_id, in no particular order."""


# =============================================================================
# IN-MEMORY STORE
# =============================================================================

class InMemoryRecordStore(RecordStore):
    """
    Dict-backed store.

    Records are copied on the way in and out so callers never hold a
    reference into stored state.
    """

    def __init__(self):
        self._persons: Dict[str, Person] = {}
        self._events: List[DemeritEvent] = []

    def create_record(self, person_id: str, person: Person) -> bool:
        if person_id in self._persons:
            return False
        self._persons[person_id] = replace(person)
        return True

    def find_record(self, person_id: str) -> Optional[Person]:
        person = self._persons.get(person_id)
        return replace(person) if person else None

    def replace_record(self, person_id: str, person: Person) -> bool:
        if person_id not in self._persons:
            return False
        if person.person_id != person_id and person.person_id in self._persons:
            return False
        del self._persons[person_id]
        self._persons[person.person_id] = replace(person)
        return True

    def append_demerit_event(self, event: DemeritEvent) -> bool:
        self._events.append(event)
        return True

    def demerit_events_for(self, person_id: str) -> List[DemeritEvent]:
        return [event for event in self._events if event.person_id == person_id]


# =============================================================================
# SQLALCHEMY STORE
# =============================================================================

class SqlAlchemyRecordStore(RecordStore):
    """
    Relational store over the persons / demerit_events tables.

    Each mutation is committed on its own; a failed one is rolled back
    and surfaced as StorageError.
    """

    def __init__(self, db: Session):
        self.db = db

    # -------------------------------------------------------------------------
    # Row mapping
    # -------------------------------------------------------------------------

    @staticmethod
    def _to_person(row: PersonDB) -> Person:
        address = Address(
            street_number=row.street_number,
            street=row.street,
            city=row.city,
            state=row.state,
            country=row.country,
        )
        return Person(
            person_id=row.id,
            first_name=row.first_name,
            last_name=row.last_name,
            address=address.to_text(),
            birth_date=format_date(row.birth_date),
            suspended=bool(row.suspended),
        )

    @staticmethod
    def _apply(row: PersonDB, person: Person) -> None:
        address = person.structured_address
        birth_date = parse_date(person.birth_date)
        if address is None or birth_date is None:
            raise ValueError(f"Person {person.person_id} is not in storable form")

        row.id = person.person_id
        row.first_name = person.first_name
        row.last_name = person.last_name
        row.street_number = address.street_number
        row.street = address.street
        row.city = address.city
        row.state = address.state
        row.country = address.country
        row.birth_date = birth_date
        row.suspended = person.suspended

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Failed to {action}: {e}") from e

    # -------------------------------------------------------------------------
    # Persons
    # -------------------------------------------------------------------------

    def create_record(self, person_id: str, person: Person) -> bool:
        try:
            if self.db.get(PersonDB, person_id) is not None:
                return False
            row = PersonDB()
            self._apply(row, replace(person, person_id=person_id))
            self.db.add(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Failed to create person {person_id}: {e}") from e
        self._commit(f"create person {person_id}")
        return True

    def find_record(self, person_id: str) -> Optional[Person]:
        try:
            row = self.db.get(PersonDB, person_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Failed to read person {person_id}: {e}") from e
        return self._to_person(row) if row else None

    def replace_record(self, person_id: str, person: Person) -> bool:
        try:
            row = self.db.get(PersonDB, person_id)
            if row is None:
                return False
            if person.person_id != person_id and self.db.get(PersonDB, person.person_id) is not None:
                return False
            self._apply(row, person)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Failed to replace person {person_id}: {e}") from e
        self._commit(f"replace person {person_id}")
        return True

    # -------------------------------------------------------------------------
    # Demerit events
    # -------------------------------------------------------------------------

    def append_demerit_event(self, event: DemeritEvent) -> bool:
        self.db.add(DemeritEventDB(
            person_id=event.person_id,
            offense_date=event.offense_date,
            points=event.points,
        ))
        self._commit(f"append demerit event for {event.person_id}")
        return True

    def demerit_events_for(self, person_id: str) -> List[DemeritEvent]:
        try:
            rows = self.db.query(DemeritEventDB).filter(
                DemeritEventDB.person_id == person_id
            ).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Failed to read demerit events for {person_id}: {e}") from e
        return [
            DemeritEvent(person_id=row.person_id, offense_date=row.offense_date, points=row.points)
            for row in rows
        ]
