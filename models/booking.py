import logging
from pydantic import BaseModel, ConfigDict, ValidationError
from typing import Any, Iterable, List, Optional

from models.base import DocumentModel

logger = logging.getLogger(__name__)

STATUS_CONFIRMED = "confirmed"
STATUS_PENDING = "pending"
STATUS_CANCELLED = "cancelled"
BOOKING_STATUSES = (STATUS_CONFIRMED, STATUS_PENDING, STATUS_CANCELLED)

CURRENCY_USD = "USD"
CURRENCY_INR = "INR"


class Participant(DocumentModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    passport: Optional[str] = None
    emergency_contact: Optional[str] = None
    medical_info: Optional[str] = None


class CustomerInfo(DocumentModel):
    organizer: Optional[Participant] = None
    members: List[Participant] = []


class BookingRef(DocumentModel):
    id: Optional[str] = None
    type: Optional[str] = None


class SlotDetails(DocumentModel):
    id: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    max_participants: Optional[int] = None
    booked_participants: Optional[int] = None
    price_multiplier: Optional[float] = None


class BookingBase(DocumentModel):
    # Checkout writes fields this admin API never reads (top-level date, etc.).
    model_config = ConfigDict(extra="allow")

    booking_id: str = ""
    booking: Optional[BookingRef] = None
    mountain_id: Optional[str] = None
    mountain_name: Optional[str] = None
    slot_details: Optional[SlotDetails] = None
    customer_info: Optional[CustomerInfo] = None
    participants: Optional[int] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    status: Optional[str] = None
    payment_method: Optional[str] = None
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    created_at: Any = None
    user_email: Optional[str] = None


class BookingUpdate(BookingBase):
    pass


class Booking(BookingBase):
    id: Optional[str] = None

    @property
    def organizer(self) -> Optional[Participant]:
        return self.customer_info.organizer if self.customer_info else None

    @property
    def members(self) -> List[Participant]:
        return self.customer_info.members if self.customer_info else []

    @property
    def product_id(self) -> Optional[str]:
        if self.booking and self.booking.id:
            return self.booking.id
        return self.mountain_id

    @property
    def product_type(self) -> Optional[str]:
        return self.booking.type if self.booking else None

    @property
    def organizer_email(self) -> Optional[str]:
        organizer = self.organizer
        return (organizer.email if organizer else None) or self.user_email

    @property
    def slot_date(self) -> Optional[str]:
        return self.slot_details.date if self.slot_details else None

    @property
    def is_confirmed(self) -> bool:
        return self.status == STATUS_CONFIRMED


class BookingStatusUpdate(BaseModel):
    status: str


def load_booking(document: dict) -> Optional[Booking]:
    """Build a Booking from a stored document, or None if it cannot be read."""
    try:
        return Booking.model_validate(document)
    except ValidationError as e:
        logger.warning(f"Skipping malformed booking {document.get('id')}: {e.error_count()} invalid field(s)")
        return None


def load_bookings(documents: Iterable[dict]) -> List[Booking]:
    bookings = []
    for document in documents:
        booking = load_booking(document)
        if booking is not None:
            bookings.append(booking)
    return bookings


class BookingPage(BaseModel):
    items: List[Booking] = []
    page: int = 1
    per_page: int = 10
    total: int = 0
    total_pages: int = 1
