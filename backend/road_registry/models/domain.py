"""
Road Registry - Domain Models

The data holders passed between validators, the update rule engine,
the demerit calculator and the record store.

Person carries the caller-supplied textual form (address as the
'|'-joined 5-tuple, birth date as DD-MM-YYYY) so that a candidate can be
represented before it has been validated.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


ADDRESS_DELIMITER = "|"
DATE_FORMAT = "%d-%m-%Y"


# =============================================================================
# ENUMS
# =============================================================================

class OutcomeKind(str, Enum):
    """Why an operation ended the way it did."""
    SUCCESS = "success"
    VALIDATION_FAILURE = "validation_failure"
    NOT_FOUND = "not_found"
    RULE_VIOLATION = "rule_violation"
    DUPLICATE = "duplicate"
    STORAGE_FAILURE = "storage_failure"


# =============================================================================
# PERSON
# =============================================================================

@dataclass(frozen=True)
class Address:
    """Structured address: street number, street name, city, state, country."""
    street_number: str
    street: str
    city: str
    state: str
    country: str

    @classmethod
    def parse(cls, text: str) -> Optional["Address"]:
        """Split on the delimiter; None unless there are exactly five parts."""
        if text is None:
            return None
        parts = text.split(ADDRESS_DELIMITER)
        if len(parts) != 5:
            return None
        return cls(*parts)

    def parts(self) -> List[str]:
        return [self.street_number, self.street, self.city, self.state, self.country]

    def to_text(self) -> str:
        return ADDRESS_DELIMITER.join(self.parts())


@dataclass
class Person:
    """A registered (or candidate) person."""
    person_id: str
    first_name: str
    last_name: str
    address: str  # e.g. "20|King St|Melbourne|Victoria|Australia"
    birth_date: str  # DD-MM-YYYY
    suspended: bool = False

    @property
    def structured_address(self) -> Optional[Address]:
        return Address.parse(self.address)

    @property
    def birth_date_value(self) -> Optional[date]:
        """Parsed birth date, or None when the text is not a strict DD-MM-YYYY date."""
        from ..services.registry.validators import parse_date
        return parse_date(self.birth_date)

    def to_dict(self) -> Dict[str, Any]:
        address = self.structured_address
        return {
            "id": self.person_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "address": {
                "street_number": address.street_number,
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "country": address.country,
            } if address else self.address,
            "birth_date": self.birth_date,
            "suspended": self.suspended,
        }


# =============================================================================
# DEMERIT EVENTS
# =============================================================================

@dataclass(frozen=True)
class DemeritEvent:
    """A single recorded offense. Append-only; never mutated after creation."""
    person_id: str
    offense_date: date
    points: int

    def to_dict(self) -> Dict[str, Any]:
        from ..services.registry.validators import format_date
        return {
            "person_id": self.person_id,
            "offense_date": format_date(self.offense_date),
            "points": self.points,
        }


# =============================================================================
# OPERATION RESULT
# =============================================================================

@dataclass
class OperationResult:
    """
    Tagged outcome of a registry operation.

    Rejections keep their kind so callers (and tests) can tell a bad
    field from a missing record, a policy rejection or a storage fault.
    Crossing the suspension threshold is a SUCCESS.
    """
    kind: OutcomeKind
    reason: Optional[str] = None
    error_code: Optional[str] = None  # validator error code or rule code
    field_name: Optional[str] = None
    person: Optional[Person] = None

    # Demerit recording details
    points_in_window: Optional[int] = None
    threshold: Optional[int] = None
    suspended: Optional[bool] = None
    newly_suspended: bool = False

    completed_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def succeeded(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    def __bool__(self) -> bool:
        return self.succeeded

    @classmethod
    def success(cls, **kwargs) -> "OperationResult":
        return cls(kind=OutcomeKind.SUCCESS, **kwargs)

    @classmethod
    def failure(cls, kind: OutcomeKind, reason: str, **kwargs) -> "OperationResult":
        return cls(kind=kind, reason=reason, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "kind": self.kind.value,
            "succeeded": self.succeeded,
            "reason": self.reason,
            "error_code": self.error_code,
            "field_name": self.field_name,
            "person": self.person.to_dict() if self.person else None,
            "points_in_window": self.points_in_window,
            "threshold": self.threshold,
            "suspended": self.suspended,
            "newly_suspended": self.newly_suspended,
            "completed_at": self.completed_at.isoformat(),
        }
