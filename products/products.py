# products/products.py

import logging
from fastapi import APIRouter, HTTPException, Request, Depends
from typing import List

from auth.admin import get_current_admin
from availability import slots as availability
from bookings.bookings import fetch_bookings
from database.store import new_document_id
from models.product import (
    PRODUCT_COLLECTIONS,
    DateCreate,
    Product,
    ProductCreate,
    Slot,
    SlotCreate,
)
from products.validation import validate_product

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin/products",
    tags=["products"],
    dependencies=[Depends(get_current_admin)],
)


def get_collection(product_type: str) -> str:
    collection = PRODUCT_COLLECTIONS.get(product_type)
    if collection is None:
        raise HTTPException(status_code=404, detail=f"Unknown product type '{product_type}'.")
    return collection


async def load_product(request: Request, product_type: str, product_id: str) -> Product:
    doc = await request.app.store.get(get_collection(product_type), product_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Product not found")
    return Product.model_validate(doc)


async def save_product(request: Request, product: Product) -> Product:
    # whole-document replace; the last admin to save wins
    collection = get_collection(product.type)
    await request.app.store.put(collection, product.id, product.to_document())
    return product


# --- Products ---

@router.get("/{product_type}", response_model=List[Product])
async def list_products(product_type: str, request: Request):
    docs = await request.app.store.list(get_collection(product_type))
    return [Product.model_validate(doc) for doc in docs]


@router.get("/{product_type}/{product_id}", response_model=Product)
async def get_product(product_type: str, product_id: str, request: Request):
    return await load_product(request, product_type, product_id)


@router.post("/{product_type}", response_model=Product, status_code=201)
async def create_product(product_type: str, product_in: ProductCreate, request: Request):
    get_collection(product_type)
    product = Product.model_validate({**product_in.model_dump(by_alias=True), "type": product_type})
    validate_product(product)
    product.id = new_document_id()
    await save_product(request, product)
    logger.info(f"Created {product_type} {product.id} ({product.name})")
    return product


@router.put("/{product_type}/{product_id}", response_model=Product)
async def replace_product(product_type: str, product_id: str, product_in: ProductCreate, request: Request):
    await load_product(request, product_type, product_id)
    product = Product.model_validate({**product_in.model_dump(by_alias=True), "type": product_type})
    validate_product(product)
    product.id = product_id
    await save_product(request, product)
    logger.info(f"Updated {product_type} {product_id}")
    return product


@router.delete("/{product_type}/{product_id}")
async def delete_product(product_type: str, product_id: str, request: Request):
    deleted = await request.app.store.delete(get_collection(product_type), product_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Product not found")
    logger.info(f"Deleted {product_type} {product_id}")
    return {"message": "Product deleted successfully"}


# --- Dates & slots ---

@router.post("/{product_type}/{product_id}/dates", response_model=Product)
async def add_available_date(product_type: str, product_id: str, date_in: DateCreate, request: Request):
    product = await load_product(request, product_type, product_id)
    availability.add_date(product, date_in.date)
    return await save_product(request, product)


@router.delete("/{product_type}/{product_id}/dates/{date_index}", response_model=Product)
async def remove_available_date(product_type: str, product_id: str, date_index: int, request: Request):
    product = await load_product(request, product_type, product_id)
    removed = availability.remove_date(product, date_index)
    logger.info(f"Removed {removed.date} ({len(removed.slots)} slots) from {product_id}")
    return await save_product(request, product)


@router.post("/{product_type}/{product_id}/dates/{date_index}/slots", response_model=Product)
async def add_time_slot(product_type: str, product_id: str, date_index: int, slot_in: SlotCreate, request: Request):
    product = await load_product(request, product_type, product_id)
    availability.add_slot(product, date_index, Slot(**slot_in.model_dump()))
    return await save_product(request, product)


@router.delete("/{product_type}/{product_id}/dates/{date_index}/slots/{slot_index}", response_model=Product)
async def remove_time_slot(product_type: str, product_id: str, date_index: int, slot_index: int, request: Request):
    product = await load_product(request, product_type, product_id)
    availability.remove_slot(product, date_index, slot_index)
    return await save_product(request, product)


@router.post("/{product_type}/{product_id}/reconcile-capacity", response_model=Product)
async def reconcile_capacity(product_type: str, product_id: str, request: Request):
    """Recount booked participants per slot from confirmed bookings."""
    product = await load_product(request, product_type, product_id)
    bookings = await fetch_bookings(request.app.store)
    availability.reconcile_slot_capacity(product, bookings)
    return await save_product(request, product)
