"""Road Registry - Data Models"""
from .domain import (
    # Enums
    OutcomeKind,
    # Entities
    Address, Person, DemeritEvent,
    # Results
    OperationResult,
)

__all__ = [
    "OutcomeKind",
    "Address", "Person", "DemeritEvent",
    "OperationResult",
]
