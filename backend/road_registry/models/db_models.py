"""
Road Registry - SQLAlchemy ORM Models
Relational tables for persons and their demerit events
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Boolean, Date
from ..database import Base


class PersonDB(Base):
    """Registered person. The address is kept as five columns, never as joined text."""
    __tablename__ = "persons"

    id = Column(String(10), primary_key=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)

    # ==========================================================================
    # ADDRESS (street number, street, city, state, country)
    # ==========================================================================
    street_number = Column(String(20), nullable=False)
    street = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    country = Column(String(100), nullable=False)

    birth_date = Column(Date, nullable=False)

    # Cached from the demerit events; only ever flips false -> true
    suspended = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class DemeritEventDB(Base):
    """
    Recorded offense (append-only).

    person_id is a plain identifier reference, not a foreign key: events
    outlive any particular person row.
    """
    __tablename__ = "demerit_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    person_id = Column(String(10), nullable=False, index=True)
    offense_date = Column(Date, nullable=False)
    points = Column(Integer, nullable=False)
    recorded_at = Column(DateTime, default=datetime.utcnow)
