from pydantic import BaseModel, Field
from typing import List


class RevenueTotals(BaseModel):
    """Confirmed revenue kept apart per currency."""
    usd: float = Field(0, alias="USD")
    inr: float = Field(0, alias="INR")

    model_config = {"populate_by_name": True}

    def combined_usd(self, inr_per_usd: float) -> float:
        """Approximate single figure for display only; never a stored total."""
        return self.usd + (self.inr / inr_per_usd if inr_per_usd else 0)


class ProductPerformance(BaseModel):
    product_id: str
    name: str
    type: str = ""
    bookings: int = 0
    revenue: RevenueTotals = Field(default_factory=RevenueTotals)
    combined_revenue_usd: float = 0


class CustomerActivity(BaseModel):
    email: str
    name: str
    bookings: int = 0
    revenue: RevenueTotals = Field(default_factory=RevenueTotals)
    combined_revenue_usd: float = 0


class CategoryStats(BaseModel):
    bookings: int = 0
    revenue: RevenueTotals = Field(default_factory=RevenueTotals)
    combined_revenue_usd: float = 0
    booking_percent: float = 0
    revenue_percent: float = 0


class CategorySplit(BaseModel):
    mountains: CategoryStats = Field(default_factory=CategoryStats)
    tours: CategoryStats = Field(default_factory=CategoryStats)


class MountainSummary(BaseModel):
    product_id: str
    mountain_name: str
    total_bookings: int = 0
    total_participants: int = 0
    total_revenue: RevenueTotals = Field(default_factory=RevenueTotals)
    confirmed_bookings: int = 0
    pending_bookings: int = 0
    cancelled_bookings: int = 0
    upcoming_trips: int = 0


class MonthlyFinancials(BaseModel):
    month: str
    total_revenue: RevenueTotals = Field(default_factory=RevenueTotals)
    total_bookings: int = 0
    total_participants: int = 0
    # Derived from the combined display figure.
    average_booking_value: float = 0


class DashboardStats(BaseModel):
    total_bookings: int = 0
    revenue: RevenueTotals = Field(default_factory=RevenueTotals)
    combined_revenue_usd: float = 0
    active_mountains: int = 0
    active_tours: int = 0
    total_users: int = 0


class BookingListStats(BaseModel):
    product_type: str
    total_bookings: int = 0
    trekking_count: int = 0
    tour_count: int = 0
    confirmed_count: int = 0
    pending_count: int = 0
    cancelled_count: int = 0
    revenue: RevenueTotals = Field(default_factory=RevenueTotals)
    combined_revenue_usd: float = 0


class DashboardResponse(BaseModel):
    stats: DashboardStats
    top_mountains: List[ProductPerformance] = []
    top_tours: List[ProductPerformance] = []
    active_users: List[CustomerActivity] = []
    category_split: CategorySplit = Field(default_factory=CategorySplit)
