"""
Road Registry

Registry of people and their traffic-offense demerit points.

Pipeline:
- Candidate Person → Validators → RecordStore (registration)
- Candidate Person → UpdateRules → Validators → RecordStore (constrained update)
- Offense → Validators → DemeritCalculator → RecordStore (demerit recording)
"""
from .exceptions import RoadRegistryError, StorageError
from .models import Address, DemeritEvent, OperationResult, OutcomeKind, Person
from .services.registry import (
    InMemoryRecordStore,
    RecordStore,
    RoadRegistryService,
    SqlAlchemyRecordStore,
)

__version__ = "1.0.0"

__all__ = [
    "RoadRegistryError",
    "StorageError",
    "Address",
    "DemeritEvent",
    "OperationResult",
    "OutcomeKind",
    "Person",
    "InMemoryRecordStore",
    "RecordStore",
    "RoadRegistryService",
    "SqlAlchemyRecordStore",
]
