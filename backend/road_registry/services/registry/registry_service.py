"""
Road Registry Service

Orchestrates registration, constrained updates and demerit recording
against an explicit RecordStore handle.

Outcome model:
- Every operation returns an OperationResult tagged with an OutcomeKind
- Rejections never mutate the store
- Storage faults are logged at error level, apart from business rejections
- Crossing the suspension threshold is a successful outcome

The store offers no transactions. Callers that share a store across
threads must serialize calls around each operation themselves.
"""
from dataclasses import replace
from datetime import date
from typing import Callable
import logging

from ...exceptions import StorageError
from ...models.domain import DemeritEvent, OperationResult, OutcomeKind, Person
from .demerits import DemeritCalculator, points_in_window
from .record_store import RecordStore
from .update_rules import evaluate_update
from .validators import (
    ValidationResult,
    parse_date,
    validate_date,
    validate_person_fields,
    validate_points,
)

logger = logging.getLogger(__name__)

LEGACY_SUCCESS = "Success"
LEGACY_FAILURE = "Failed"


def _validation_failure(result: ValidationResult) -> OperationResult:
    return OperationResult.failure(
        OutcomeKind.VALIDATION_FAILURE,
        result.error_message,
        error_code=result.error_code,
        field_name=result.field_name,
    )


def _storage_failure(action: str, error: StorageError) -> OperationResult:
    logger.error(f"Storage failure while trying to {action}: {error}")
    return OperationResult.failure(OutcomeKind.STORAGE_FAILURE, str(error))


class RoadRegistryService:
    """
    Main service for the person / demerit registry.

    The clock returns "today" and is only consulted by the under-18
    address rule of the update path.
    """

    def __init__(self, store: RecordStore, clock: Callable[[], date] = date.today):
        self.store = store
        self.clock = clock
        self.calculator = DemeritCalculator()

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def register_person(self, person: Person) -> OperationResult:
        """
        Create a new record after identifier, address and birth date checks.

        The stored record always starts unsuspended.
        """
        check = validate_person_fields(person)
        if not check.is_valid:
            logger.warning(f"Registration of {person.person_id!r} rejected: {check.error_message}")
            return _validation_failure(check)

        record = replace(person, suspended=False)
        try:
            created = self.store.create_record(record.person_id, record)
        except StorageError as e:
            return _storage_failure(f"register {record.person_id}", e)

        if not created:
            logger.warning(f"Registration of {record.person_id} rejected: identifier already registered")
            return OperationResult.failure(
                OutcomeKind.DUPLICATE,
                f"Person {record.person_id} is already registered",
                field_name="person_id",
            )

        logger.info(f"Registered person {record.person_id}")
        return OperationResult.success(person=record, suspended=False)

    # =========================================================================
    # CONSTRAINED UPDATE
    # =========================================================================

    def update_person(self, person_id: str, candidate: Person) -> OperationResult:
        """
        Replace identifier, names, address and birth date of an existing record.

        candidate.suspended is ignored; the stored flag is carried over.
        Policy rules run before the format checks on the new values.
        """
        try:
            original = self.store.find_record(person_id)
        except StorageError as e:
            return _storage_failure(f"look up {person_id}", e)

        if original is None:
            logger.warning(f"Update rejected: no person {person_id}")
            return OperationResult.failure(OutcomeKind.NOT_FOUND, f"No person with id {person_id}")

        violation = evaluate_update(original, candidate, self.clock())
        if violation is not None:
            logger.warning(f"Update of {person_id} rejected by {violation.rule_code}: {violation.description}")
            return OperationResult.failure(
                OutcomeKind.RULE_VIOLATION,
                violation.description,
                error_code=violation.rule_code,
            )

        check = validate_person_fields(candidate)
        if not check.is_valid:
            logger.warning(f"Update of {person_id} rejected: {check.error_message}")
            return _validation_failure(check)

        updated = replace(candidate, suspended=original.suspended)
        try:
            replaced = self.store.replace_record(person_id, updated)
        except StorageError as e:
            return _storage_failure(f"update {person_id}", e)

        if not replaced:
            logger.warning(f"Update of {person_id} rejected: identifier {updated.person_id} already registered")
            return OperationResult.failure(
                OutcomeKind.DUPLICATE,
                f"Person {updated.person_id} is already registered",
                field_name="person_id",
            )

        logger.info(f"Updated person {person_id} -> {updated.person_id}")
        return OperationResult.success(person=updated, suspended=updated.suspended)

    # =========================================================================
    # DEMERIT RECORDING
    # =========================================================================

    def record_demerit_points(self, person_id: str, offense_date: str, points: int) -> OperationResult:
        """
        Record an offense and re-evaluate suspension.

        The event is appended whenever the inputs validate and the person
        exists. Suspension only ever flips false -> true.
        """
        date_check = validate_date(offense_date, field_name="offense_date")
        if not date_check.is_valid:
            logger.warning(f"Demerit for {person_id} rejected: {date_check.error_message}")
            return _validation_failure(date_check)

        points_check = validate_points(points)
        if not points_check.is_valid:
            logger.warning(f"Demerit for {person_id} rejected: {points_check.error_message}")
            return _validation_failure(points_check)

        offense = parse_date(offense_date)

        try:
            person = self.store.find_record(person_id)
            if person is None:
                logger.warning(f"Demerit rejected: no person {person_id}")
                return OperationResult.failure(OutcomeKind.NOT_FOUND, f"No person with id {person_id}")

            existing = self.store.demerit_events_for(person_id)
            assessment = self.calculator.assess(
                birth_date=person.birth_date_value,
                offense_date=offense,
                new_points=points,
                existing_events=existing,
            )

            self.store.append_demerit_event(
                DemeritEvent(person_id=person_id, offense_date=offense, points=points)
            )

            newly_suspended = False
            if assessment.exceeds_threshold and not person.suspended:
                person = replace(person, suspended=True)
                self.store.replace_record(person_id, person)
                newly_suspended = True
        except StorageError as e:
            return _storage_failure(f"record demerit points for {person_id}", e)

        logger.info(
            f"Recorded {points} demerit points for {person_id} on {offense_date}: "
            f"{assessment.total_points} in window, threshold {assessment.threshold}"
        )
        if newly_suspended:
            logger.info(f"Person {person_id} suspended")

        return OperationResult.success(
            person=person,
            points_in_window=assessment.total_points,
            threshold=assessment.threshold,
            suspended=person.suspended,
            newly_suspended=newly_suspended,
        )

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_person(self, person_id: str) -> OperationResult:
        try:
            person = self.store.find_record(person_id)
        except StorageError as e:
            return _storage_failure(f"look up {person_id}", e)

        if person is None:
            return OperationResult.failure(OutcomeKind.NOT_FOUND, f"No person with id {person_id}")
        return OperationResult.success(person=person, suspended=person.suspended)

    def demerit_points_as_of(self, person_id: str, as_of: str) -> OperationResult:
        """Points recorded in the two-year window ending at as_of; records nothing."""
        check = validate_date(as_of, field_name="as_of")
        if not check.is_valid:
            return _validation_failure(check)

        try:
            person = self.store.find_record(person_id)
            if person is None:
                return OperationResult.failure(OutcomeKind.NOT_FOUND, f"No person with id {person_id}")
            events = self.store.demerit_events_for(person_id)
        except StorageError as e:
            return _storage_failure(f"read demerit points for {person_id}", e)

        return OperationResult.success(
            person=person,
            points_in_window=points_in_window(events, parse_date(as_of)),
            suspended=person.suspended,
        )

    # =========================================================================
    # LEGACY-SHAPED ENTRY POINTS
    # =========================================================================

    def add_person(self, person: Person) -> bool:
        return self.register_person(person).succeeded

    def update_personal_details(self, person_id: str, candidate: Person) -> bool:
        return self.update_person(person_id, candidate).succeeded

    def add_demerit_points(self, person_id: str, offense_date: str, points: int) -> str:
        result = self.record_demerit_points(person_id, offense_date, points)
        return LEGACY_SUCCESS if result.succeeded else LEGACY_FAILURE

