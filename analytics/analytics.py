# analytics/analytics.py

from fastapi import APIRouter, Request, Depends, Query
from typing import List, Optional

from analytics import aggregation
from auth.admin import get_current_admin
from bookings.bookings import booking_filters, fetch_bookings
from bookings.filters import filter_bookings
from config import settings
from models.analytics import (
    CategorySplit,
    CustomerActivity,
    DashboardResponse,
    MonthlyFinancials,
    MountainSummary,
    ProductPerformance,
    RevenueTotals,
)
from models.filters import BookingFilters
from models.product import PRODUCT_COLLECTIONS, PRODUCT_TYPE_TOUR, PRODUCT_TYPE_TREKKING

router = APIRouter(
    prefix="/api/admin/analytics",
    tags=["analytics"],
    dependencies=[Depends(get_current_admin)],
)


async def filtered_bookings(request: Request, filters: BookingFilters):
    return filter_bookings(await fetch_bookings(request.app.store), filters)


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(request: Request):
    """Headline stats, leaderboards and the trekking/tour split."""
    store = request.app.store
    bookings = await fetch_bookings(store)
    mountains = await store.list(PRODUCT_COLLECTIONS[PRODUCT_TYPE_TREKKING])
    tours = await store.list(PRODUCT_COLLECTIONS[PRODUCT_TYPE_TOUR])
    limit = settings.TOP_PERFORMERS_LIMIT
    return DashboardResponse(
        stats=aggregation.dashboard_stats(bookings, len(mountains), len(tours)),
        top_mountains=aggregation.product_performance(bookings, PRODUCT_TYPE_TREKKING, limit),
        top_tours=aggregation.product_performance(bookings, PRODUCT_TYPE_TOUR, limit),
        active_users=aggregation.customer_activity(bookings, limit),
        category_split=aggregation.category_split(bookings),
    )


@router.get("/top-products", response_model=List[ProductPerformance])
async def get_top_products(
    request: Request,
    product_type: Optional[str] = None,
    limit: int = Query(settings.TOP_PERFORMERS_LIMIT, ge=1, le=100),
):
    return aggregation.product_performance(await fetch_bookings(request.app.store), product_type, limit)


@router.get("/top-customers", response_model=List[CustomerActivity])
async def get_top_customers(request: Request, limit: int = Query(settings.TOP_PERFORMERS_LIMIT, ge=1, le=100)):
    return aggregation.customer_activity(await fetch_bookings(request.app.store), limit)


@router.get("/category-split", response_model=CategorySplit)
async def get_category_split(request: Request):
    return aggregation.category_split(await fetch_bookings(request.app.store))


@router.get("/revenue", response_model=RevenueTotals)
async def get_revenue(request: Request, filters: BookingFilters = Depends(booking_filters)):
    return aggregation.revenue_by_currency(await filtered_bookings(request, filters))


@router.get("/mountain-summary", response_model=List[MountainSummary])
async def get_mountain_summary(request: Request, filters: BookingFilters = Depends(booking_filters)):
    return aggregation.mountain_summary(await filtered_bookings(request, filters))


@router.get("/monthly-financials", response_model=List[MonthlyFinancials])
async def get_monthly_financials(request: Request, filters: BookingFilters = Depends(booking_filters)):
    return aggregation.monthly_financials(await filtered_bookings(request, filters))
