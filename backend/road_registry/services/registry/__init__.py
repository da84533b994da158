"""
Registry Module

Field validators, update rule engine, demerit calculator, record stores
and the service that orchestrates them.
"""

from .validators import (
    ValidationResult,
    parse_date,
    validate_address,
    validate_date,
    validate_identifier,
    validate_person_fields,
    validate_points,
)
from .update_rules import (
    RuleViolation,
    UpdateRules,
    age_in_years,
    evaluate_update,
)
from .demerits import (
    DemeritCalculator,
    SuspensionAssessment,
    points_in_window,
    suspension_threshold,
    window_start,
)
from .record_store import (
    InMemoryRecordStore,
    RecordStore,
    SqlAlchemyRecordStore,
)
from .registry_service import RoadRegistryService

__all__ = [
    # Validators
    "ValidationResult",
    "parse_date",
    "validate_address",
    "validate_date",
    "validate_identifier",
    "validate_person_fields",
    "validate_points",
    # Update rules
    "RuleViolation",
    "UpdateRules",
    "age_in_years",
    "evaluate_update",
    # Demerits
    "DemeritCalculator",
    "SuspensionAssessment",
    "points_in_window",
    "suspension_threshold",
    "window_start",
    # Stores
    "InMemoryRecordStore",
    "RecordStore",
    "SqlAlchemyRecordStore",
    # Service
    "RoadRegistryService",
]
