"""Booking router - FastAPI endpoints for the booking ledger"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ... import config
from ...access import Capability
from ...auth import AuthSession, get_current_session, require_capability
from ...database import get_db
from ...errors import InvalidInput
from ...models import Booking
from ...rate_limiter import create_rate_limiter
from ..scheduling.router import get_schedule_service
from ..scheduling.schemas import Weekday
from ..scheduling.service import ScheduleService
from .schemas import (
    BookingCreate,
    BookingLinkResponse,
    BookingResponse,
    RatedBookingsResponse,
    RatingSubmit,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])
link_router = APIRouter(prefix="/api/booking-link", tags=["Bookings"])

booking_rate_limit = create_rate_limiter(limit=30, window_seconds=3600, key_prefix="booking")
rating_rate_limit = create_rate_limiter(limit=30, window_seconds=3600, key_prefix="rating")


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


def to_response(booking: Booking) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        customerName=booking.customer_name,
        customerEmail=booking.customer_email,
        day=booking.day,
        time=booking.time,
        bookedAt=booking.booked_at,
        rating=booking.rating,
        comment=booking.comment,
        ratedAt=booking.rated_at,
    )


# ============================================================================
# PUBLIC ENDPOINTS
# ============================================================================


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    _: None = Depends(booking_rate_limit),
    service: BookingService = Depends(get_booking_service),
    schedule: ScheduleService = Depends(get_schedule_service),
):
    """Public: book an open slot"""
    slot = schedule.find_slot(data.day, data.time)
    if slot is None:
        raise InvalidInput(f"{data.day.value} {data.time} is not an available slot")

    booking = service.create_booking(
        data.customerName, data.customerEmail, data.day.value, slot.time, capacity=slot.capacity
    )
    return to_response(booking)


@router.get("/unrated", response_model=Optional[BookingResponse])
@router.get("/public/find", response_model=Optional[BookingResponse], include_in_schema=False)
async def find_unrated_booking(
    email: str = Query(..., min_length=1),
    service: BookingService = Depends(get_booking_service),
):
    """Public: latest booking still waiting for a rating, or null"""
    booking = service.find_unrated_by_email(email)
    return to_response(booking) if booking else None


@router.patch("/{booking_id}/rate", response_model=BookingResponse)
async def rate_booking(
    booking_id: str,
    data: RatingSubmit,
    _: None = Depends(rating_rate_limit),
    service: BookingService = Depends(get_booking_service),
):
    """Public: rate a booking once"""
    booking = service.submit_rating(booking_id, data.rating, data.comment)
    return to_response(booking)


# ============================================================================
# STAFF ENDPOINTS
# ============================================================================


@router.get("", response_model=list[BookingResponse])
async def list_bookings(
    day: Optional[Weekday] = Query(None),
    rated: Optional[bool] = Query(None),
    email: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Matches customer name, email, day or time"),
    _session: AuthSession = Depends(get_current_session),
    service: BookingService = Depends(get_booking_service),
):
    """List bookings, most recently booked first"""
    bookings = service.list_all(
        day=day.value if day else None, rated=rated, email=email, search=search
    )
    return [to_response(b) for b in bookings]


@router.get("/rated", response_model=RatedBookingsResponse)
async def list_rated_bookings(
    _session: AuthSession = Depends(require_capability(Capability.VIEW_RATINGS)),
    service: BookingService = Depends(get_booking_service),
):
    """Ratings dashboard: rated bookings, most recently rated first"""
    return RatedBookingsResponse(
        summary=service.ratings_summary(),
        bookings=[to_response(b) for b in service.list_rated()],
    )


@router.get("/export")
async def export_bookings_csv(
    day: Optional[Weekday] = Query(None),
    rated: Optional[bool] = Query(None),
    email: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Matches customer name, email, day or time"),
    _session: AuthSession = Depends(get_current_session),
    service: BookingService = Depends(get_booking_service),
):
    """Export bookings as CSV with optional filters"""
    return service.export_bookings_csv(
        day=day.value if day else None, rated=rated, email=email, search=search
    )


@router.delete("/{booking_id}", status_code=204)
async def delete_booking(
    booking_id: str,
    session: AuthSession = Depends(get_current_session),
    service: BookingService = Depends(get_booking_service),
):
    """Delete a booking"""
    service.delete_booking(booking_id)
    logger.info(f"Booking {booking_id} removed by {session.email}")
    return Response(status_code=204)


@link_router.get("", response_model=BookingLinkResponse)
async def get_booking_link(
    _session: AuthSession = Depends(require_capability(Capability.VIEW_BOOKING_LINK)),
):
    """Public links to share with customers"""
    base = config.FRONTEND_URL.rstrip("/")
    return BookingLinkResponse(bookingUrl=f"{base}/#/book", ratingUrl=f"{base}/#/rate")
