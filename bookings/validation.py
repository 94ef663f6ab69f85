# bookings/validation.py

from core.exceptions import InvalidStatusError, MissingRequiredFieldError
from models.booking import BOOKING_STATUSES, BookingBase


def validate_status(status: str) -> str:
    if status not in BOOKING_STATUSES:
        raise InvalidStatusError(status)
    return status


def validate_booking(booking: BookingBase) -> None:
    """Checks run before an admin edit is written back."""
    organizer = booking.customer_info.organizer if booking.customer_info else None
    if organizer is None or not (organizer.name or "").strip():
        raise MissingRequiredFieldError("organizer.name", "Organizer name is required")
    if not (organizer.email or "").strip():
        raise MissingRequiredFieldError("organizer.email", "Organizer email is required")
    if booking.participants is None or booking.participants < 1:
        raise MissingRequiredFieldError("participants", "At least one participant is required")
    if booking.amount is not None and booking.amount < 0:
        raise MissingRequiredFieldError("amount", "Amount cannot be negative")
    if booking.status is not None:
        validate_status(booking.status)
