# availability/availability.py

from fastapi import APIRouter, HTTPException, Request, Query

from availability import slots
from availability.pricing import quote
from products.products import get_collection
from models.product import (
    DateAvailability,
    PriceQuote,
    Product,
    ProductAvailability,
    SlotAvailability,
)

router = APIRouter(prefix="/api/products", tags=["availability"])


async def get_public_product(request: Request, product_type: str, product_id: str) -> Product:
    doc = await request.app.store.get(get_collection(product_type), product_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Product not found")
    return Product.model_validate(doc)


def describe_availability(product: Product) -> ProductAvailability:
    return ProductAvailability(
        id=product.id,
        name=product.name,
        type=product.type,
        total_slots=slots.total_slot_count(product),
        total_available_capacity=slots.total_available_capacity(product),
        dates=[
            DateAvailability(
                date=entry.date,
                slots=[
                    SlotAvailability(
                        id=slot.id,
                        time=slot.time,
                        max_participants=slot.max_participants,
                        booked_participants=slot.booked_participants,
                        available_capacity=slots.available_capacity(slot),
                        is_full=slots.is_full(slot),
                        label=slots.slot_status_label(slot),
                        price_usd=slots.effective_price(product, slot, "USD"),
                        price_inr=slots.effective_price(product, slot, "INR"),
                    )
                    for slot in entry.slots
                ],
            )
            for entry in product.available_dates
        ],
    )


@router.get("/{product_type}/{product_id}/availability", response_model=ProductAvailability)
async def get_availability(product_type: str, product_id: str, request: Request):
    """Dates, slots and spots left for the booking calendar."""
    return describe_availability(await get_public_product(request, product_type, product_id))


@router.get("/{product_type}/{product_id}/quote", response_model=PriceQuote)
async def get_quote(
    product_type: str,
    product_id: str,
    request: Request,
    date: str,
    time: str,
    participants: int = Query(1, ge=1),
    currency: str = Query("USD", pattern="^(USD|INR)$"),
):
    product = await get_public_product(request, product_type, product_id)
    return quote(product, date, time, participants, currency)
