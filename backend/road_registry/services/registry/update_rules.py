"""
Update Rules

Deterministic policy checks for a constrained update (full replacement
of a person's identifier, name, address and birth date).

Rule order:
1. ADDRESS_LOCKED_UNDER_18 - under-18s cannot change address
2. BIRTH_DATE_NOT_EXCLUSIVE - a birth date change must be the only change
3. ID_LOCKED_EVEN_PREFIX - identifiers starting with an even digit cannot change

Ages are computed from years alone against the supplied "today", using
the stored (original) birth date.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional

from ...models.domain import Person
from .validators import parse_date


ADULT_AGE = 18


@dataclass
class RuleViolation:
    """A policy rule that rejected an update."""
    rule_code: str
    description: str
    evidence: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule_code": self.rule_code,
            "description": self.description,
            "evidence": self.evidence,
        }


def age_in_years(birth_year: int, on_year: int) -> int:
    """Year-only age; the day and month are ignored."""
    return on_year - birth_year


class UpdateRules:
    """One static check per rule; each returns a RuleViolation or None."""

    @staticmethod
    def check_address_lock(original: Person, candidate: Person, today: date) -> Optional[RuleViolation]:
        """Under 18 (by stored birth year): the address must not change."""
        birth = parse_date(original.birth_date)
        if birth is None:
            # Stored records always carry a valid date
            raise ValueError(f"Stored birth date for {original.person_id} is unreadable")

        age = age_in_years(birth.year, today.year)
        if age < ADULT_AGE and candidate.address != original.address:
            return RuleViolation(
                rule_code="ADDRESS_LOCKED_UNDER_18",
                description=f"Address cannot change while under {ADULT_AGE} (age {age})",
                evidence={"age": age, "current_year": today.year},
            )
        return None

    @staticmethod
    def check_birth_date_exclusive(original: Person, candidate: Person) -> Optional[RuleViolation]:
        """A new birth date is only accepted when nothing else changes."""
        if candidate.birth_date == original.birth_date:
            return None

        changed = [
            name for name, before, after in (
                ("person_id", original.person_id, candidate.person_id),
                ("first_name", original.first_name, candidate.first_name),
                ("last_name", original.last_name, candidate.last_name),
                ("address", original.address, candidate.address),
            )
            if before != after
        ]
        if changed:
            return RuleViolation(
                rule_code="BIRTH_DATE_NOT_EXCLUSIVE",
                description="Birth date can only be changed on its own",
                evidence={"also_changed": changed},
            )
        return None

    @staticmethod
    def check_identifier_lock(original: Person, candidate: Person) -> Optional[RuleViolation]:
        """Original identifier starting with an even digit: the identifier is fixed."""
        first = original.person_id[:1]
        if first.isdigit() and int(first) % 2 == 0 and candidate.person_id != original.person_id:
            return RuleViolation(
                rule_code="ID_LOCKED_EVEN_PREFIX",
                description=f"Identifier starting with even digit {first} cannot change",
                evidence={"original_id": original.person_id, "requested_id": candidate.person_id},
            )
        return None


def evaluate_update(original: Person, candidate: Person, today: date) -> Optional[RuleViolation]:
    """Run the rules in order; the first violation is returned."""
    for violation in (
        UpdateRules.check_address_lock(original, candidate, today),
        UpdateRules.check_birth_date_exclusive(original, candidate),
        UpdateRules.check_identifier_lock(original, candidate),
    ):
        if violation is not None:
            return violation
    return None
