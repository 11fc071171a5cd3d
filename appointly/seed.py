"""
Seed demo staff accounts and the default schedule
Usage: python -m appointly.seed
"""

import logging
import os

from .database import Base, SessionLocal, engine
from .domain.scheduling.repository import ScheduleRepository
from .domain.scheduling.service import default_schedule
from .domain.users.repository import UserRepository
from .models import utcnow
from .security_utils import hash_password_bcrypt

logger = logging.getLogger(__name__)

DEMO_PASSWORD = os.getenv("SEED_PASSWORD", "password123")

DEMO_USERS = [
    {"email": "owner@company.com", "name": "Alex Owner", "role": "owner"},
    {"email": "manager@company.com", "name": "Maria Manager", "role": "manager"},
    {"email": "leader@company.com", "name": "Leo Leader", "role": "leader"},
    {"email": "employee@company.com", "name": "Eva Employee", "role": "employee"},
]


def seed(db, password: str = DEMO_PASSWORD) -> None:
    """Upsert the demo users and store the default schedule if none exists"""
    users = UserRepository()
    for data in DEMO_USERS:
        existing = users.get_user_by_email(db, data["email"])
        fields = {**data, "password_hash": hash_password_bcrypt(password)}
        if existing:
            users.update_user(db, existing, **fields)
        else:
            users.create_user(db, **fields)
        logger.info(f"Seeded user {data['email']} ({data['role']})")

    schedules = ScheduleRepository()
    if not schedules.get_schedule(db):
        value = default_schedule().model_dump(mode="json")
        value["updatedAt"] = utcnow().isoformat()
        schedules.save_schedule(db, value)
        logger.info("Seeded default schedule")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()
    logger.info("✅ Seed done.")


if __name__ == "__main__":
    main()
