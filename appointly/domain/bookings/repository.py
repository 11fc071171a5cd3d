"""Booking repository - Database operations for the booking ledger"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from ...models import Booking


def _contains_pattern(term: str) -> str:
    """ILIKE pattern matching `term` literally anywhere in the value"""
    escaped = term.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_booking_by_id(db: Session, booking_id: str) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def create_booking(db: Session, **booking_data) -> Booking:
        booking = Booking(**booking_data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def delete_booking(db: Session, booking: Booking) -> None:
        db.delete(booking)
        db.commit()

    @staticmethod
    def count_for_slot(db: Session, day: str, time: str) -> int:
        return (
            db.query(func.count(Booking.id))
            .filter(Booking.day == day, Booking.time == time)
            .scalar()
        )

    @staticmethod
    def count_by_slot(db: Session) -> dict[tuple[str, str], int]:
        """Booking counts keyed by (day, time)"""
        rows = (
            db.query(Booking.day, Booking.time, func.count(Booking.id))
            .group_by(Booking.day, Booking.time)
            .all()
        )
        return {(day, time): count for day, time, count in rows}

    @staticmethod
    def find_latest_unrated_by_email(db: Session, email: str) -> Optional[Booking]:
        """Most recently booked unrated booking for an email (case-insensitive exact match)"""
        return (
            db.query(Booking)
            .filter(
                func.lower(Booking.customer_email) == email.strip().lower(),
                Booking.rated_at.is_(None),
            )
            .order_by(Booking.booked_at.desc())
            .first()
        )

    @staticmethod
    def mark_rated(
        db: Session, booking_id: str, rating: int, comment: Optional[str], rated_at: datetime
    ) -> bool:
        """
        Set the rating fields only if the booking is still unrated.

        The guard lives in the UPDATE's WHERE clause, so of two concurrent
        writers exactly one matches a row. Returns True if this call won.
        """
        result = db.execute(
            update(Booking)
            .where(Booking.id == booking_id, Booking.rated_at.is_(None))
            .values(rating=rating, comment=comment, rated_at=rated_at)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return result.rowcount == 1

    @staticmethod
    def search_bookings(
        db: Session,
        day: Optional[str] = None,
        rated: Optional[bool] = None,
        email: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Booking]:
        """Filtered listing, most recently booked first"""
        query = db.query(Booking)

        if day:
            query = query.filter(Booking.day == day)

        if rated is True:
            query = query.filter(Booking.rated_at.isnot(None))
        elif rated is False:
            query = query.filter(Booking.rated_at.is_(None))

        if email and email.strip():
            query = query.filter(Booking.customer_email.ilike(_contains_pattern(email), escape="\\"))

        if search and search.strip():
            search_term = _contains_pattern(search)
            query = query.filter(
                (Booking.customer_name.ilike(search_term, escape="\\"))
                | (Booking.customer_email.ilike(search_term, escape="\\"))
                | (Booking.day.ilike(search_term, escape="\\"))
                | (Booking.time.ilike(search_term, escape="\\"))
            )

        return query.order_by(Booking.booked_at.desc()).all()

    @staticmethod
    def get_rated_bookings(db: Session) -> list[Booking]:
        """Rated bookings, most recently rated first"""
        return (
            db.query(Booking)
            .filter(Booking.rated_at.isnot(None))
            .order_by(Booking.rated_at.desc())
            .all()
        )

    @staticmethod
    def get_rating_stats(db: Session) -> tuple[int, Optional[float]]:
        count, average = (
            db.query(func.count(Booking.id), func.avg(Booking.rating))
            .filter(Booking.rated_at.isnot(None))
            .one()
        )
        return count, (float(average) if average is not None else None)
