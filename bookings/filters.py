# bookings/filters.py
"""
Booking filter engine.

Every filter is a predicate over a single booking; a BookingFilters value turns
on the ones it needs and they are AND-ed together. Nothing here mutates the
input or raises on incomplete booking documents.
"""

import math
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional, Sequence

from core.timeutils import parse_calendar_date, utcnow
from models.booking import Booking
from models.filters import ALL, BookingFilters, DateRange

Predicate = Callable[[Booking], bool]


def _contains(value: Optional[str], term: str) -> bool:
    return bool(value) and term in value.lower()


def search_predicate(term: str) -> Predicate:
    term = (term or "").strip().lower()

    def matches(booking: Booking) -> bool:
        if not term:
            return True
        organizer = booking.organizer
        fields = [booking.booking_id, booking.mountain_name]
        if organizer is not None:
            fields += [organizer.name, organizer.email, organizer.country]
        return any(_contains(value, term) for value in fields)

    return matches


def status_predicate(status: str) -> Predicate:
    return lambda booking: status == ALL or booking.status == status


def product_predicate(product_id: str) -> Predicate:
    # booking.id first, legacy documents only carry mountainId
    return lambda booking: product_id == ALL or booking.product_id == product_id


def product_type_predicate(product_type: Optional[str]) -> Predicate:
    return lambda booking: product_type in (None, ALL) or booking.product_type == product_type


def date_range_predicate(date_range: DateRange, now: Optional[datetime] = None) -> Predicate:
    now = now or utcnow()
    week_ago = now - timedelta(days=7)
    month_ago = now - timedelta(days=30)

    def matches(booking: Booking) -> bool:
        if date_range == DateRange.ALL:
            return True
        booking_date = parse_calendar_date(booking.slot_date)
        if booking_date is None:
            return False
        if date_range == DateRange.TODAY:
            return booking_date.date() == now.date()
        # week/month have no upper bound: future trips match too
        if date_range == DateRange.WEEK:
            return booking_date >= week_ago
        if date_range == DateRange.MONTH:
            return booking_date >= month_ago
        if date_range == DateRange.UPCOMING:
            return booking_date >= now
        if date_range == DateRange.PAST:
            return booking_date < now
        return True

    return matches


def build_predicates(filters: BookingFilters, now: Optional[datetime] = None) -> List[Predicate]:
    return [
        product_type_predicate(filters.product_type),
        search_predicate(filters.search),
        status_predicate(filters.status),
        product_predicate(filters.product_id),
        date_range_predicate(filters.date_range, now),
    ]


def filter_bookings(
    bookings: Iterable[Booking],
    filters: BookingFilters,
    now: Optional[datetime] = None,
) -> List[Booking]:
    """Return the bookings passing every active filter, in input order."""
    predicates = build_predicates(filters, now)
    return [booking for booking in bookings if all(p(booking) for p in predicates)]


def paginate(items: Sequence, page: int, per_page: int) -> dict:
    total = len(items)
    total_pages = max(1, math.ceil(total / per_page)) if per_page > 0 else 1
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return {
        "items": list(items[start:start + per_page]),
        "page": page,
        "per_page": per_page,
        "total": total,
        "total_pages": total_pages,
    }
