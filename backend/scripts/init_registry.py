#!/usr/bin/env python3
"""
Registry Init Script
Creates the registry tables and optionally registers one person.

Usage:
    python -m scripts.init_registry
    python -m scripts.init_registry <id> <first_name> <last_name> <address> <birth_date>

Example:
    python -m scripts.init_registry '23#$abCDEF' Alice Smith "123|Main St|Melbourne|Victoria|Australia" 01-01-2000
"""
import logging
import sys
import os

# Add the parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from road_registry.database import DATABASE_URL, SessionLocal, init_db
from road_registry.models import Person
from road_registry.services.registry import RoadRegistryService, SqlAlchemyRecordStore


def register_person(person_id: str, first_name: str, last_name: str, address: str, birth_date: str) -> bool:
    """Register a person in the configured database."""
    db = SessionLocal()
    try:
        service = RoadRegistryService(SqlAlchemyRecordStore(db))
        result = service.register_person(Person(
            person_id=person_id,
            first_name=first_name,
            last_name=last_name,
            address=address,
            birth_date=birth_date,
        ))
        if result.succeeded:
            print(f"Registered {person_id} ({first_name} {last_name}).")
        else:
            print(f"Error [{result.kind.value}]: {result.reason}")
        return result.succeeded
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    init_db()
    print(f"Registry tables ready at {DATABASE_URL}")

    if len(sys.argv) == 1:
        sys.exit(0)

    if len(sys.argv) != 6:
        print(__doc__)
        sys.exit(1)

    success = register_person(*sys.argv[1:6])
    sys.exit(0 if success else 1)
