"""Booking domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, StrictInt, field_validator

from ...shared.validators import require_text, validate_email, validate_time
from ..scheduling.schemas import Weekday


class BookingCreate(BaseModel):
    """Schema for a public booking submission"""

    customerName: str = Field(..., max_length=255)
    customerEmail: str = Field(..., max_length=255)
    day: Weekday
    time: str

    @field_validator("customerName")
    @classmethod
    def validate_name(cls, v):
        return require_text(v, "customerName")

    @field_validator("customerEmail")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(require_text(v, "customerEmail"))

    @field_validator("time")
    @classmethod
    def validate_time_field(cls, v):
        return validate_time(v)


class RatingSubmit(BaseModel):
    """Schema for rating a booking; the 1..5 range is enforced by the ledger"""

    # No coercion: true or "5" must not turn into a rating
    rating: StrictInt
    comment: Optional[str] = None


class BookingResponse(BaseModel):
    id: str
    customerName: str
    customerEmail: str
    day: str
    time: str
    bookedAt: Optional[datetime] = None
    rating: Optional[int] = None
    comment: Optional[str] = None
    ratedAt: Optional[datetime] = None


class RatingsSummary(BaseModel):
    count: int
    average: Optional[float] = None


class RatedBookingsResponse(BaseModel):
    summary: RatingsSummary
    bookings: list[BookingResponse]


class BookingLinkResponse(BaseModel):
    bookingUrl: str
    ratingUrl: str
