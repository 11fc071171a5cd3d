import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import func

from .database import Base


def generate_id():
    """Generate an opaque string primary key"""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp with microsecond precision (stable ordering on SQLite)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)  # Stored lower-cased
    role = Column(String(20), nullable=False, default="employee")  # owner, manager, leader, employee
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=generate_id)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False, index=True)
    day = Column(String(10), nullable=False)  # Monday..Sunday
    time = Column(String(5), nullable=False)  # HH:MM
    booked_at = Column(DateTime, nullable=False, default=utcnow)
    # Rating fields move from NULL to set exactly once
    rating = Column(Integer, nullable=True)
    comment = Column(Text, nullable=True)
    rated_at = Column(DateTime, nullable=True)

    __table_args__ = (Index("ix_bookings_day_time", "day", "time"),)


class Setting(Base):
    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(JSON, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
