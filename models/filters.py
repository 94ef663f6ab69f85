from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Optional

ALL = "all"


class DateRange(str, Enum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    UPCOMING = "upcoming"
    PAST = "past"


class BookingFilters(BaseModel):
    model_config = ConfigDict(frozen=True)

    search: str = ""
    status: str = ALL
    product_id: str = ALL
    product_type: Optional[str] = None
    date_range: DateRange = DateRange.ALL


class ExportOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    include_members: bool = True
    include_payment_info: bool = True
    include_contact_info: bool = True
    include_medical_info: bool = False
