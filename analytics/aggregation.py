# analytics/aggregation.py
"""
Aggregations behind the admin dashboard and the summary exports.

Every fold groups by key and sums with math.fsum at the end, so the result
does not depend on the order bookings arrive in. Revenue only ever counts
confirmed bookings and is kept per currency; the combined figure is derived
from RevenueTotals.combined_usd and is for display only.

Missing organizer or slot data lands in fallback buckets instead of raising.
"""

import logging
import math
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from config import settings
from core.timeutils import month_key, parse_calendar_date, parse_timestamp, utcnow
from models.analytics import (
    BookingListStats,
    CategorySplit,
    CategoryStats,
    CustomerActivity,
    DashboardStats,
    MonthlyFinancials,
    MountainSummary,
    ProductPerformance,
    RevenueTotals,
)
from models.booking import (
    CURRENCY_INR,
    CURRENCY_USD,
    STATUS_CANCELLED,
    STATUS_CONFIRMED,
    STATUS_PENDING,
    Booking,
)
from models.product import PRODUCT_TYPE_TOUR, PRODUCT_TYPE_TREKKING

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"
UNKNOWN_USER = "Unknown User"
UNKNOWN_EMAIL = "unknown"
UNKNOWN_PRODUCT = "unknown"


class RevenueAccumulator:
    """Collects confirmed amounts per currency and totals them exactly."""

    def __init__(self):
        self._amounts: Dict[str, List[float]] = {CURRENCY_USD: [], CURRENCY_INR: []}

    def add(self, booking: Booking) -> None:
        if not booking.is_confirmed:
            return
        currency = booking.currency or CURRENCY_USD
        if currency not in self._amounts:
            logger.debug(f"Ignoring revenue of {booking.booking_id} in unsupported currency {currency}")
            return
        self._amounts[currency].append(booking.amount or 0)

    def totals(self) -> RevenueTotals:
        return RevenueTotals(
            usd=math.fsum(self._amounts[CURRENCY_USD]),
            inr=math.fsum(self._amounts[CURRENCY_INR]),
        )


def revenue_by_currency(bookings: Iterable[Booking]) -> RevenueTotals:
    accumulator = RevenueAccumulator()
    for booking in bookings:
        accumulator.add(booking)
    return accumulator.totals()


def _percent(part: float, other: float) -> float:
    denominator = part + other
    return part / denominator * 100 if denominator else 0


class _Group:
    def __init__(self, name: str):
        self.name = name
        self.count = 0
        self.revenue = RevenueAccumulator()

    def add(self, booking: Booking) -> None:
        self.count += 1
        self.revenue.add(booking)


def product_performance(
    bookings: Iterable[Booking],
    product_type: Optional[str] = None,
    limit: Optional[int] = None,
    inr_per_usd: Optional[float] = None,
) -> List[ProductPerformance]:
    """Bookings (all statuses) and confirmed revenue per product, best first."""
    rate = inr_per_usd or settings.INR_PER_USD
    groups: Dict[str, _Group] = {}
    types: Dict[str, str] = {}
    for booking in bookings:
        product_id = booking.booking.id if booking.booking else None
        if not product_id:
            continue
        if product_type is not None and booking.product_type != product_type:
            continue
        if product_id not in groups:
            groups[product_id] = _Group(booking.mountain_name or UNKNOWN_NAME)
            types[product_id] = booking.product_type or ""
        groups[product_id].add(booking)

    results = []
    for product_id, group in groups.items():
        revenue = group.revenue.totals()
        results.append(ProductPerformance(
            product_id=product_id,
            name=group.name,
            type=types[product_id],
            bookings=group.count,
            revenue=revenue,
            combined_revenue_usd=revenue.combined_usd(rate),
        ))
    results.sort(key=lambda p: (-p.combined_revenue_usd, p.name, p.product_id))
    return results if limit is None else results[:limit]


def customer_activity(
    bookings: Iterable[Booking],
    limit: Optional[int] = None,
    inr_per_usd: Optional[float] = None,
) -> List[CustomerActivity]:
    """Bookings and confirmed revenue per organizer email, best first."""
    rate = inr_per_usd or settings.INR_PER_USD
    groups: Dict[str, _Group] = {}
    for booking in bookings:
        email = booking.organizer_email or UNKNOWN_EMAIL
        if email not in groups:
            organizer = booking.organizer
            groups[email] = _Group((organizer.name if organizer else None) or UNKNOWN_USER)
        groups[email].add(booking)

    results = []
    for email, group in groups.items():
        revenue = group.revenue.totals()
        results.append(CustomerActivity(
            email=email,
            name=group.name,
            bookings=group.count,
            revenue=revenue,
            combined_revenue_usd=revenue.combined_usd(rate),
        ))
    results.sort(key=lambda c: (-c.combined_revenue_usd, c.email))
    return results if limit is None else results[:limit]


def category_split(bookings: Iterable[Booking], inr_per_usd: Optional[float] = None) -> CategorySplit:
    """Confirmed trekking vs tour bookings and revenue, with percentage shares."""
    rate = inr_per_usd or settings.INR_PER_USD
    groups = {PRODUCT_TYPE_TREKKING: _Group("mountains"), PRODUCT_TYPE_TOUR: _Group("tours")}
    for booking in bookings:
        if booking.is_confirmed and booking.product_type in groups:
            groups[booking.product_type].add(booking)

    treks, tours = groups[PRODUCT_TYPE_TREKKING], groups[PRODUCT_TYPE_TOUR]
    trek_revenue, tour_revenue = treks.revenue.totals(), tours.revenue.totals()
    trek_combined, tour_combined = trek_revenue.combined_usd(rate), tour_revenue.combined_usd(rate)
    return CategorySplit(
        mountains=CategoryStats(
            bookings=treks.count,
            revenue=trek_revenue,
            combined_revenue_usd=trek_combined,
            booking_percent=_percent(treks.count, tours.count),
            revenue_percent=_percent(trek_combined, tour_combined),
        ),
        tours=CategoryStats(
            bookings=tours.count,
            revenue=tour_revenue,
            combined_revenue_usd=tour_combined,
            booking_percent=_percent(tours.count, treks.count),
            revenue_percent=_percent(tour_combined, trek_combined),
        ),
    )


def mountain_summary(bookings: Iterable[Booking], now: Optional[datetime] = None) -> List[MountainSummary]:
    """Per-product rollup used by the mountain summary export."""
    now = now or utcnow()
    groups: Dict[str, dict] = {}
    for booking in bookings:
        product_id = booking.product_id or UNKNOWN_PRODUCT
        if product_id not in groups:
            groups[product_id] = {
                "name": booking.mountain_name or UNKNOWN_NAME,
                "statuses": defaultdict(int),
                "participants": 0,
                "upcoming": 0,
                "revenue": RevenueAccumulator(),
                "total": 0,
            }
        stats = groups[product_id]
        stats["total"] += 1
        stats["participants"] += booking.participants or 0
        stats["statuses"][booking.status] += 1
        stats["revenue"].add(booking)

        trip_date = parse_calendar_date(booking.slot_date)
        if trip_date is not None and trip_date >= now:
            stats["upcoming"] += 1

    summaries = [
        MountainSummary(
            product_id=product_id,
            mountain_name=stats["name"],
            total_bookings=stats["total"],
            total_participants=stats["participants"],
            total_revenue=stats["revenue"].totals(),
            confirmed_bookings=stats["statuses"][STATUS_CONFIRMED],
            pending_bookings=stats["statuses"][STATUS_PENDING],
            cancelled_bookings=stats["statuses"][STATUS_CANCELLED],
            upcoming_trips=stats["upcoming"],
        )
        for product_id, stats in groups.items()
    ]
    summaries.sort(key=lambda s: (s.mountain_name, s.product_id))
    return summaries


def monthly_financials(
    bookings: Iterable[Booking],
    inr_per_usd: Optional[float] = None,
) -> List[MonthlyFinancials]:
    """Confirmed bookings rolled up by the month they were created in."""
    rate = inr_per_usd or settings.INR_PER_USD
    months: Dict[str, dict] = {}
    for booking in bookings:
        if not booking.is_confirmed:
            continue
        created = parse_timestamp(booking.created_at)
        if created is None:
            logger.debug(f"Booking {booking.booking_id} has no usable createdAt, left out of monthly rollup")
            continue
        key = month_key(created)
        stats = months.setdefault(key, {"revenue": RevenueAccumulator(), "bookings": 0, "participants": 0})
        stats["revenue"].add(booking)
        stats["bookings"] += 1
        stats["participants"] += booking.participants or 0

    results = []
    for key in sorted(months):
        stats = months[key]
        revenue = stats["revenue"].totals()
        results.append(MonthlyFinancials(
            month=key,
            total_revenue=revenue,
            total_bookings=stats["bookings"],
            total_participants=stats["participants"],
            average_booking_value=revenue.combined_usd(rate) / stats["bookings"],
        ))
    return results


def dashboard_stats(
    bookings: List[Booking],
    mountain_count: int = 0,
    tour_count: int = 0,
    inr_per_usd: Optional[float] = None,
) -> DashboardStats:
    rate = inr_per_usd or settings.INR_PER_USD
    revenue = revenue_by_currency(bookings)
    users = {booking.organizer_email for booking in bookings}
    return DashboardStats(
        total_bookings=len(bookings),
        revenue=revenue,
        combined_revenue_usd=revenue.combined_usd(rate),
        active_mountains=mountain_count,
        active_tours=tour_count,
        total_users=len(users),
    )


def booking_list_stats(
    bookings: List[Booking],
    product_type: str,
    inr_per_usd: Optional[float] = None,
) -> BookingListStats:
    """Header figures of the bookings screen for one product-type tab."""
    rate = inr_per_usd or settings.INR_PER_USD
    current = [b for b in bookings if b.product_type == product_type]
    statuses = defaultdict(int)
    for booking in current:
        statuses[booking.status] += 1
    revenue = revenue_by_currency(current)
    return BookingListStats(
        product_type=product_type,
        total_bookings=len(current),
        trekking_count=sum(1 for b in bookings if b.product_type == PRODUCT_TYPE_TREKKING),
        tour_count=sum(1 for b in bookings if b.product_type == PRODUCT_TYPE_TOUR),
        confirmed_count=statuses[STATUS_CONFIRMED],
        pending_count=statuses[STATUS_PENDING],
        cancelled_count=statuses[STATUS_CANCELLED],
        revenue=revenue,
        combined_revenue_usd=revenue.combined_usd(rate),
    )
