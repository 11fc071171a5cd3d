"""Schedule repository - the weekly schedule is stored as JSON in the settings table"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Setting

SCHEDULE_KEY = "schedule"


class ScheduleRepository:
    """Repository for schedule database operations"""

    @staticmethod
    def get_schedule(db: Session) -> Optional[Setting]:
        """Get the stored schedule setting, if any"""
        return db.query(Setting).filter(Setting.key == SCHEDULE_KEY).first()

    @staticmethod
    def save_schedule(db: Session, value: dict) -> Setting:
        """Insert or replace the stored schedule"""
        setting = db.query(Setting).filter(Setting.key == SCHEDULE_KEY).first()
        if setting:
            setting.value = value
        else:
            setting = Setting(key=SCHEDULE_KEY, value=value)
            db.add(setting)

        db.commit()
        db.refresh(setting)
        return setting
