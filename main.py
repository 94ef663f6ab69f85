# main.py

import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from core.exceptions import BookingCoreError
from database.connection import get_client, get_database
from database.store import InMemoryCollectionStore, MongoCollectionStore

# Import routers
from auth.admin import router as admin_auth_router, ensure_bootstrap_admin
from products.products import router as products_router
from availability.availability import router as availability_router
from bookings.bookings import router as bookings_router
from analytics.analytics import router as analytics_router
from exports.exports import router as exports_router

logging.config.dictConfig(settings.LOGGING)
logger = logging.getLogger(__name__)

app = FastAPI(title="Summit Bookings Admin API", version="1.0.0")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BookingCoreError)
async def booking_core_error_handler(request: Request, exc: BookingCoreError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.on_event("startup")
async def startup_store():
    if settings.STORE_BACKEND == "memory":
        logger.warning("Demo mode: using the in-memory store, data will not persist")
        app.store = InMemoryCollectionStore()
    else:
        client = get_client()
        app.store = MongoCollectionStore(client, get_database(client))
        logger.info(f"Connected store to {settings.DATABASE_NAME}")
    await ensure_bootstrap_admin(app.store)


@app.on_event("shutdown")
async def shutdown_store():
    app.store.close()


# Include all routers
app.include_router(admin_auth_router)
app.include_router(products_router)
app.include_router(availability_router)
app.include_router(bookings_router)
app.include_router(analytics_router)
app.include_router(exports_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
