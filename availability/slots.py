# availability/slots.py
"""
Availability model for a product: dates -> time slots -> capacity counters.

These helpers mutate the in-memory Product they are given. Callers load a full
product document, apply edits here, and write the whole document back.
"""

import logging
import uuid
from collections import defaultdict
from typing import Iterable, Optional

from core.exceptions import (
    DateNotFoundError,
    DuplicateDateError,
    DuplicateTimeError,
    MissingRequiredFieldError,
    SlotNotFoundError,
)
from models.booking import Booking
from models.product import AvailableDate, Product, Slot

logger = logging.getLogger(__name__)

FILLING_FAST_RATIO = 0.8


def new_slot_id() -> str:
    return f"slot_{uuid.uuid4().hex[:12]}"


def _get_date(product: Product, date_index: int) -> AvailableDate:
    if not 0 <= date_index < len(product.available_dates):
        raise DateNotFoundError(f"No date at position {date_index}.")
    return product.available_dates[date_index]


def find_date_index(product: Product, date: str) -> Optional[int]:
    for index, entry in enumerate(product.available_dates):
        if entry.date == date:
            return index
    return None


def add_date(product: Product, date: str) -> AvailableDate:
    date = (date or "").strip()
    if not date:
        raise MissingRequiredFieldError("date", "Please select a date.")
    if find_date_index(product, date) is not None:
        raise DuplicateDateError(date)
    entry = AvailableDate(date=date, slots=[])
    product.available_dates.append(entry)
    return entry


def remove_date(product: Product, date_index: int) -> AvailableDate:
    """Drop a date and every slot on it. Booking snapshots are left alone."""
    entry = _get_date(product, date_index)
    del product.available_dates[date_index]
    return entry


def add_slot(product: Product, date_index: int, slot: Slot) -> Slot:
    entry = _get_date(product, date_index)
    if not (slot.time or "").strip():
        raise MissingRequiredFieldError("time", "Please select a time for the slot.")
    if any(existing.time == slot.time for existing in entry.slots):
        raise DuplicateTimeError(entry.date, slot.time)

    new_slot = slot.model_copy(update={"id": slot.id or new_slot_id()})
    entry.slots.append(new_slot)
    # zero-padded "HH:MM" sorts correctly as a string
    entry.slots.sort(key=lambda s: s.time)
    return new_slot


def normalize_dates(product: Product) -> Product:
    """Reject repeated dates or slot times in a whole-document save; sort and id the slots."""
    seen = set()
    for entry in product.available_dates:
        if entry.date in seen:
            raise DuplicateDateError(entry.date)
        seen.add(entry.date)
        times = set()
        for slot in entry.slots:
            if slot.time in times:
                raise DuplicateTimeError(entry.date, slot.time)
            times.add(slot.time)
            slot.id = slot.id or new_slot_id()
        entry.slots.sort(key=lambda s: s.time)
    return product


def remove_slot(product: Product, date_index: int, slot_index: int) -> Slot:
    entry = _get_date(product, date_index)
    if not 0 <= slot_index < len(entry.slots):
        raise SlotNotFoundError(f"No time slot at position {slot_index} on {entry.date}.")
    return entry.slots.pop(slot_index)


def available_capacity(slot: Slot) -> int:
    return max(0, slot.max_participants - slot.booked_participants)


def is_full(slot: Slot) -> bool:
    return slot.booked_participants >= slot.max_participants


def slot_status_label(slot: Slot) -> str:
    if is_full(slot):
        return "Full"
    if slot.booked_participants > slot.max_participants * FILLING_FAST_RATIO:
        return "Filling fast"
    return f"{available_capacity(slot)} spots left"


def total_slot_count(product: Product) -> int:
    return sum(len(entry.slots) for entry in product.available_dates)


def total_available_capacity(product: Product) -> int:
    return sum(available_capacity(slot) for entry in product.available_dates for slot in entry.slots)


def base_price(product: Product, currency: Optional[str] = None) -> float:
    if currency == "USD" and product.price_usd:
        return product.price_usd
    if currency == "INR" and product.price_inr:
        return product.price_inr
    return product.price


def effective_price(product: Product, slot: Slot, currency: Optional[str] = None) -> float:
    return base_price(product, currency) * slot.price_multiplier


def reconcile_slot_capacity(product: Product, bookings: Iterable[Booking]) -> Product:
    """
    Recompute every slot's bookedParticipants from confirmed bookings.

    Nothing updates slot counters when a booking is confirmed or cancelled, so
    this is an explicit admin action. A booking counts toward a slot when its
    snapshot has the same date and either the same slot id or, for snapshots
    without an id, the same time.
    """
    by_id = defaultdict(int)
    by_time = defaultdict(int)
    for booking in bookings:
        if not booking.is_confirmed or booking.product_id != product.id:
            continue
        details = booking.slot_details
        if details is None or not details.date:
            continue
        count = booking.participants or 0
        if details.id:
            by_id[(details.date, details.id)] += count
        elif details.time:
            by_time[(details.date, details.time)] += count

    for entry in product.available_dates:
        for slot in entry.slots:
            booked = by_id[(entry.date, slot.id)] + by_time[(entry.date, slot.time)]
            if booked != slot.booked_participants:
                logger.info(
                    f"Reconciled {product.id} {entry.date} {slot.time}: "
                    f"{slot.booked_participants} -> {booked} booked"
                )
            slot.booked_participants = booked
    return product
