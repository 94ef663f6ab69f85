# products/validation.py

from availability.slots import normalize_dates
from core.exceptions import MissingRequiredFieldError
from models.product import PRODUCT_COLLECTIONS, PRODUCT_TYPE_TOUR, ProductBase


def validate_product(product: ProductBase) -> None:
    """Reject a product save that is missing what the site needs to sell it."""
    if product.type not in PRODUCT_COLLECTIONS:
        raise MissingRequiredFieldError("type", f"Unknown product type '{product.type}'.")
    if not product.name.strip():
        raise MissingRequiredFieldError("name", "Name is required")
    if not product.location.strip():
        raise MissingRequiredFieldError("location", "Location is required")
    if product.type == PRODUCT_TYPE_TOUR:
        if not product.duration.strip():
            raise MissingRequiredFieldError("duration", "Duration is required")
        if not product.group_size.strip():
            raise MissingRequiredFieldError("groupSize", "Group size is required")
    if product.price_inr <= 0 or product.price_usd <= 0:
        raise MissingRequiredFieldError("price", "Both INR and USD prices are required")
    # whole-document saves bypass add_date/add_slot
    normalize_dates(product)
