# availability/pricing.py

from core.exceptions import (
    CapacityExceededError,
    DateNotFoundError,
    MissingRequiredFieldError,
    SlotNotFoundError,
)
from availability.slots import available_capacity, effective_price, find_date_index
from models.product import PriceQuote, Product

INR_GATEWAY_RATE = 0.02
INR_GST_ON_FEE = 0.18
USD_GATEWAY_RATE = 0.029
USD_GATEWAY_FIXED = 0.30


def service_fee(currency: str, amount: float) -> float:
    """Payment gateway fee charged on top of a booking amount."""
    if currency == "INR":
        fee = amount * INR_GATEWAY_RATE
        return round(fee + fee * INR_GST_ON_FEE, 2)
    if currency == "USD":
        return round(amount * USD_GATEWAY_RATE + USD_GATEWAY_FIXED, 2)
    return 0


def quote(product: Product, date: str, time: str, participants: int, currency: str = "USD") -> PriceQuote:
    if participants < 1:
        raise MissingRequiredFieldError("participants", "At least one participant is required.")

    date_index = find_date_index(product, date)
    if date_index is None:
        raise DateNotFoundError(f"{product.name} is not available on {date}.")
    slot = next((s for s in product.available_dates[date_index].slots if s.time == time), None)
    if slot is None:
        raise SlotNotFoundError(f"No {time} slot on {date}.")

    spots = available_capacity(slot)
    if participants > spots:
        raise CapacityExceededError(participants, spots)

    unit_price = effective_price(product, slot, currency)
    subtotal = round(unit_price * participants, 2)
    fee = service_fee(currency, subtotal)
    return PriceQuote(
        currency=currency,
        unit_price=unit_price,
        participants=participants,
        subtotal=subtotal,
        service_fee=fee,
        total=round(subtotal + fee, 2),
    )
