"""Domain errors raised by services and mapped to HTTP responses in main.py"""

from typing import Optional


class AppError(Exception):
    """Base class for errors surfaced to API clients"""

    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidInput(AppError):
    status_code = 400
    default_detail = "Invalid input"


class Unauthorized(AppError):
    status_code = 401
    default_detail = "Not authenticated"


class Forbidden(AppError):
    status_code = 403
    default_detail = "Forbidden"


class NotFound(AppError):
    status_code = 404
    default_detail = "Not found"


class Conflict(AppError):
    status_code = 409
    default_detail = "Conflict"


class AlreadyRated(Conflict):
    default_detail = "Booking has already been rated"


class SlotFull(Conflict):
    default_detail = "This time slot is fully booked"


class Unavailable(AppError):
    status_code = 503
    default_detail = "Service temporarily unavailable"
