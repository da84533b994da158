"""
Registry Field Validators

Pure format checks for the identifier, address, date and point fields.
Every validator returns a ValidationResult; none of them raise on bad input.

Usage:
    result = validate_identifier("23#$abCDEF")
    if not result.is_valid:
        print(f"Error: {result.error_message}")
"""
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional, Union

from ...models.domain import ADDRESS_DELIMITER, DATE_FORMAT, Address, Person


# 10 characters: two digits 2-9, six of anything, two uppercase letters,
# with at least two non-alphanumeric characters somewhere in the string.
IDENTIFIER_PATTERN = re.compile(
    r"^(?=.{10}$)(?=.*[^A-Za-z0-9].*[^A-Za-z0-9])[2-9]{2}.{6}[A-Z]{2}$"
)
DATE_PATTERN = re.compile(r"^\d{2}-\d{2}-\d{4}$", re.ASCII)

REQUIRED_STATE = "Victoria"
ADDRESS_PART_COUNT = 5
STATE_INDEX = 3

MIN_POINTS = 1
MAX_POINTS = 6


@dataclass
class ValidationResult:
    """Result of a single field check."""
    is_valid: bool
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    field_name: Optional[str] = None
    original_value: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "is_valid": self.is_valid,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "field_name": self.field_name,
            "original_value": self.original_value,
        }


def _ok(field_name: str, value: Any) -> ValidationResult:
    return ValidationResult(is_valid=True, field_name=field_name, original_value=value)


def _fail(field_name: str, value: Any, code: str, message: str) -> ValidationResult:
    return ValidationResult(
        is_valid=False,
        error_code=code,
        error_message=message,
        field_name=field_name,
        original_value=value,
    )


# =============================================================================
# IDENTIFIER
# =============================================================================

def validate_identifier(person_id: Any, field_name: str = "person_id") -> ValidationResult:
    """Check the 10-character identifier pattern."""
    if not isinstance(person_id, str):
        return _fail(field_name, person_id, "ID_NOT_TEXT", "Identifier must be a string")

    if len(person_id) != 10:
        return _fail(
            field_name, person_id, "ID_LENGTH",
            f"Identifier must be exactly 10 characters, got {len(person_id)}",
        )

    if not IDENTIFIER_PATTERN.match(person_id):
        return _fail(
            field_name, person_id, "ID_PATTERN",
            "Identifier must start with two digits 2-9, end with two uppercase letters "
            "and contain at least two non-alphanumeric characters",
        )

    return _ok(field_name, person_id)


# =============================================================================
# ADDRESS
# =============================================================================

def validate_address(address: Union[str, Address, None], field_name: str = "address") -> ValidationResult:
    """
    Check the 5-part address and its state.

    An Address is checked through its delimited text, so a subfield that
    itself contains the delimiter fails the part count.
    """
    text = address.to_text() if isinstance(address, Address) else address
    if not isinstance(text, str):
        return _fail(field_name, address, "ADDRESS_NOT_TEXT", "Address must be a string")

    parts = text.split(ADDRESS_DELIMITER)
    if len(parts) != ADDRESS_PART_COUNT:
        return _fail(
            field_name, text, "ADDRESS_PART_COUNT",
            f"Address must have {ADDRESS_PART_COUNT} '{ADDRESS_DELIMITER}'-separated parts, "
            f"got {len(parts)}",
        )

    if any(part == "" for part in parts):
        return _fail(field_name, text, "ADDRESS_EMPTY_PART", "Address parts must not be empty")

    if parts[STATE_INDEX] != REQUIRED_STATE:
        return _fail(
            field_name, text, "ADDRESS_STATE",
            f"Address state must be {REQUIRED_STATE}, got '{parts[STATE_INDEX]}'",
        )

    return _ok(field_name, text)


# =============================================================================
# DATES
# =============================================================================

def parse_date(text: Any) -> Optional[date]:
    """
    Parse a strict DD-MM-YYYY date.

    Returns None for anything else, including calendar overflow
    such as 30-02-2010.
    """
    if not isinstance(text, str) or not DATE_PATTERN.match(text):
        return None
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return None


def format_date(value: date) -> str:
    """DD-MM-YYYY with the year zero-padded (strftime drops the padding below 1000)."""
    return f"{value.day:02d}-{value.month:02d}-{value.year:04d}"


def validate_date(text: Any, field_name: str = "birth_date") -> ValidationResult:
    """Check a strict DD-MM-YYYY calendar date."""
    if parse_date(text) is None:
        return _fail(
            field_name, text, "DATE_FORMAT",
            "Date must be a valid calendar date in DD-MM-YYYY form",
        )
    return _ok(field_name, text)


# =============================================================================
# POINTS
# =============================================================================

def validate_points(points: Any, field_name: str = "points") -> ValidationResult:
    """Demerit points must be an integer in [1, 6]."""
    if isinstance(points, bool) or not isinstance(points, int):
        return _fail(field_name, points, "POINTS_NOT_INTEGER", "Points must be an integer")

    if points < MIN_POINTS or points > MAX_POINTS:
        return _fail(
            field_name, points, "POINTS_RANGE",
            f"Points must be between {MIN_POINTS} and {MAX_POINTS}, got {points}",
        )

    return _ok(field_name, points)


# =============================================================================
# WHOLE PERSON
# =============================================================================

def validate_person_fields(person: Person) -> ValidationResult:
    """Identifier, then address, then birth date; first failure wins."""
    for result in (
        validate_identifier(person.person_id),
        validate_address(person.address),
        validate_date(person.birth_date),
    ):
        if not result.is_valid:
            return result
    return ValidationResult(is_valid=True, original_value=person.person_id)
