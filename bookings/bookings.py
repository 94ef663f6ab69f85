# bookings/bookings.py

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, Request, Depends, Query
from typing import List, Optional

from auth.admin import get_current_admin
from bookings.filters import filter_bookings, paginate
from bookings.validation import validate_booking, validate_status
from config import settings
from core.timeutils import parse_timestamp
from database.store import CollectionStore
from models.analytics import BookingListStats
from analytics.aggregation import booking_list_stats
from models.booking import (
    Booking,
    BookingPage,
    BookingStatusUpdate,
    BookingUpdate,
    load_booking,
    load_bookings,
)
from models.filters import ALL, BookingFilters, DateRange
from models.product import PRODUCT_TYPE_TREKKING

logger = logging.getLogger(__name__)

BOOKINGS = "bookings"

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)

router = APIRouter(
    prefix="/api/admin/bookings",
    tags=["bookings"],
    dependencies=[Depends(get_current_admin)],
)


async def fetch_bookings(store: CollectionStore) -> List[Booking]:
    """All readable bookings, newest first."""
    bookings = load_bookings(await store.list(BOOKINGS))
    bookings.sort(key=lambda b: parse_timestamp(b.created_at) or _EPOCH, reverse=True)
    return bookings


def booking_filters(
    search: str = "",
    status: str = ALL,
    product_id: str = ALL,
    product_type: Optional[str] = None,
    date_range: DateRange = DateRange.ALL,
) -> BookingFilters:
    return BookingFilters(
        search=search,
        status=status,
        product_id=product_id,
        product_type=product_type,
        date_range=date_range,
    )


async def load_stored_booking(request: Request, booking_id: str) -> Booking:
    doc = await request.app.store.get(BOOKINGS, booking_id)
    booking = load_booking(doc) if doc else None
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


# --- Booking Endpoints ---

@router.get("/", response_model=BookingPage)
async def list_bookings(
    request: Request,
    search: str = "",
    status: str = ALL,
    product_id: str = ALL,
    product_type: str = PRODUCT_TYPE_TREKKING,
    date_range: DateRange = DateRange.ALL,
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.BOOKINGS_PER_PAGE, ge=1, le=100),
):
    """One product-type tab of the bookings screen, filtered and paginated."""
    filters = booking_filters(search, status, product_id, product_type, date_range)
    bookings = filter_bookings(await fetch_bookings(request.app.store), filters)
    return paginate(bookings, page, per_page)


@router.get("/stats", response_model=BookingListStats)
async def get_booking_stats(request: Request, product_type: str = PRODUCT_TYPE_TREKKING):
    return booking_list_stats(await fetch_bookings(request.app.store), product_type)


@router.get("/{booking_id}", response_model=Booking)
async def get_booking(booking_id: str, request: Request):
    return await load_stored_booking(request, booking_id)


@router.patch("/{booking_id}/status", response_model=Booking)
async def update_booking_status(booking_id: str, update: BookingStatusUpdate, request: Request):
    # Slot counters are not touched; see the reconcile-capacity endpoint.
    validate_status(update.status)
    await load_stored_booking(request, booking_id)
    doc = await request.app.store.patch(BOOKINGS, booking_id, {"status": update.status})
    if not doc:
        raise HTTPException(status_code=404, detail="Booking not found")
    logger.info(f"Booking {booking_id} status set to {update.status}")
    return Booking.model_validate(doc)


@router.put("/{booking_id}", response_model=Booking)
async def update_booking(booking_id: str, booking_in: BookingUpdate, request: Request):
    """Merge the sent fields into the stored booking; anything not sent is kept."""
    stored = await load_stored_booking(request, booking_id)
    fields = booking_in.model_dump(by_alias=True, exclude_unset=True)
    fields.pop("id", None)
    fields.pop("_id", None)
    validate_booking(BookingUpdate.model_validate({**stored.to_document(), **fields}))
    if not fields:
        return stored
    doc = await request.app.store.patch(BOOKINGS, booking_id, fields)
    if not doc:
        raise HTTPException(status_code=404, detail="Booking not found")
    logger.info(f"Booking {booking_id} updated ({', '.join(sorted(fields))})")
    return Booking.model_validate(doc)


@router.delete("/{booking_id}")
async def delete_booking(booking_id: str, request: Request):
    deleted = await request.app.store.delete(BOOKINGS, booking_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Booking not found")
    logger.info(f"Booking {booking_id} deleted")
    return {"message": "Booking deleted successfully"}
