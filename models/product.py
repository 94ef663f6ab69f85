from pydantic import ConfigDict, Field, field_validator
from typing import List, Optional

from models.base import DocumentModel

PRODUCT_TYPE_TREKKING = "trekking"
PRODUCT_TYPE_TOUR = "tour"

PRODUCT_COLLECTIONS = {
    PRODUCT_TYPE_TREKKING: "mountains",
    PRODUCT_TYPE_TOUR: "tourist-packages",
}


class Slot(DocumentModel):
    id: str = ""
    time: str = ""
    max_participants: int = Field(10, gt=0)
    booked_participants: int = Field(0, ge=0)
    price_multiplier: float = Field(1.0, gt=0)


class AvailableDate(DocumentModel):
    date: str
    slots: List[Slot] = []


class ProductBase(DocumentModel):
    # Keep description, itinerary, images etc. through a whole-document save.
    model_config = ConfigDict(extra="allow")

    name: str = ""
    type: str = PRODUCT_TYPE_TREKKING
    category: Optional[str] = None
    location: str = ""
    duration: str = ""
    group_size: str = ""
    price: float = 0
    price_inr: float = Field(0, alias="priceINR")
    price_usd: float = Field(0, alias="priceUSD")
    available_dates: List[AvailableDate] = []

    @field_validator("available_dates", mode="before")
    @classmethod
    def _upgrade_plain_dates(cls, value):
        # Older mountain documents stored availableDates as bare date strings.
        if isinstance(value, list):
            return [{"date": item, "slots": []} if isinstance(item, str) else item for item in value]
        return value


class ProductCreate(ProductBase):
    pass


class Product(ProductBase):
    id: Optional[str] = None


class SlotCreate(DocumentModel):
    time: str
    max_participants: int = Field(10, gt=0)
    booked_participants: int = Field(0, ge=0)
    price_multiplier: float = Field(1.0, gt=0)


class DateCreate(DocumentModel):
    date: str


class SlotAvailability(DocumentModel):
    id: str
    time: str
    max_participants: int
    booked_participants: int
    available_capacity: int
    is_full: bool
    label: str
    price_usd: float
    price_inr: float


class DateAvailability(DocumentModel):
    date: str
    slots: List[SlotAvailability] = []


class ProductAvailability(DocumentModel):
    id: str
    name: str
    type: str
    total_slots: int
    total_available_capacity: int
    dates: List[DateAvailability] = []


class PriceQuote(DocumentModel):
    currency: str
    unit_price: float
    participants: int
    subtotal: float
    service_fee: float
    total: float
