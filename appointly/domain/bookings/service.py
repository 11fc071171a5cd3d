"""Booking service - the booking ledger"""

import csv
import logging
import threading
from io import StringIO
from typing import Optional

from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ... import config
from ...errors import AlreadyRated, InvalidInput, NotFound, SlotFull
from ...models import Booking, utcnow
from .repository import BookingRepository
from .schemas import RatingsSummary

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5

# Count-then-insert for a slot runs under that slot's lock
_slot_locks: dict[tuple[str, str], threading.Lock] = {}
_slot_locks_guard = threading.Lock()


def _slot_lock(day: str, time: str) -> threading.Lock:
    with _slot_locks_guard:
        return _slot_locks.setdefault((day, time), threading.Lock())


class BookingService:
    """Service layer for booking ledger operations"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.repo.get_booking_by_id(self.db, booking_id)
        if not booking:
            raise NotFound("Booking not found")
        return booking

    def create_booking(
        self,
        customer_name: str,
        customer_email: str,
        day: str,
        time: str,
        capacity: Optional[int] = None,
    ) -> Booking:
        """
        Append a booking for (day, time).

        The caller is responsible for checking that (day, time) is a slot of the
        current schedule. When `capacity` is given and capacity enforcement is
        on, the booking is refused once the slot already holds that many.
        """
        if not customer_name or not customer_name.strip():
            raise InvalidInput("customerName is required")
        if not customer_email or not customer_email.strip():
            raise InvalidInput("customerEmail is required")
        if not day or not time:
            raise InvalidInput("day and time are required")

        booking_data = {
            "customer_name": customer_name.strip(),
            "customer_email": customer_email.strip(),
            "day": day,
            "time": time,
            "booked_at": utcnow(),
        }

        if capacity is None or not config.ENFORCE_SLOT_CAPACITY:
            booking = self.repo.create_booking(self.db, **booking_data)
        else:
            with _slot_lock(day, time):
                taken = self.repo.count_for_slot(self.db, day, time)
                if taken >= capacity:
                    logger.warning(f"🚫 Slot {day} {time} is full ({taken}/{capacity})")
                    raise SlotFull(f"{day} {time} is fully booked")
                booking = self.repo.create_booking(self.db, **booking_data)

        logger.info(f"📥 Booking {booking.id} created for {day} {time}")
        return booking

    def find_unrated_by_email(self, email: str) -> Optional[Booking]:
        """Latest unrated booking for the email, or None"""
        if not email or not email.strip():
            return None
        return self.repo.find_latest_unrated_by_email(self.db, email)

    def submit_rating(self, booking_id: str, rating: int, comment: Optional[str] = None) -> Booking:
        """Rate a booking exactly once"""
        if isinstance(rating, bool) or not isinstance(rating, int):
            raise InvalidInput("rating must be an integer between 1 and 5")
        if not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidInput("rating must be an integer between 1 and 5")

        booking = self.get_booking(booking_id)
        if booking.rated_at is not None:
            raise AlreadyRated()

        comment = comment.strip() if comment and comment.strip() else None
        if not self.repo.mark_rated(self.db, booking_id, rating, comment, utcnow()):
            # Lost the race against another rating, or the booking vanished
            self.get_booking(booking_id)
            raise AlreadyRated()

        logger.info(f"⭐ Booking {booking_id} rated {rating}")
        return self.get_booking(booking_id)

    def list_rated(self) -> list[Booking]:
        return self.repo.get_rated_bookings(self.db)

    def ratings_summary(self) -> RatingsSummary:
        count, average = self.repo.get_rating_stats(self.db)
        return RatingsSummary(count=count, average=round(average, 2) if average is not None else None)

    def list_all(
        self,
        day: Optional[str] = None,
        rated: Optional[bool] = None,
        email: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Booking]:
        return self.repo.search_bookings(self.db, day=day, rated=rated, email=email, search=search)

    def delete_booking(self, booking_id: str) -> None:
        booking = self.get_booking(booking_id)
        self.repo.delete_booking(self.db, booking)
        logger.info(f"🗑️ Booking {booking_id} deleted")

    def export_bookings_csv(
        self,
        day: Optional[str] = None,
        rated: Optional[bool] = None,
        email: Optional[str] = None,
        search: Optional[str] = None,
    ) -> StreamingResponse:
        """Export the filtered listing as CSV"""
        bookings = self.list_all(day=day, rated=rated, email=email, search=search)
        logger.info(f"📊 Exporting {len(bookings)} bookings to CSV")

        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(
            ["ID", "Customer Name", "Customer Email", "Day", "Time", "Booked At", "Rating", "Comment", "Rated At"]
        )
        for b in bookings:
            writer.writerow(
                [
                    b.id,
                    b.customer_name,
                    b.customer_email,
                    b.day,
                    b.time,
                    b.booked_at.isoformat() if b.booked_at else "",
                    b.rating if b.rating is not None else "",
                    b.comment or "",
                    b.rated_at.isoformat() if b.rated_at else "",
                ]
            )

        output.seek(0)
        filename = f"bookings_{utcnow().strftime('%Y%m%d_%H%M%S')}.csv"
        return StreamingResponse(
            iter([output.getvalue()]),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
