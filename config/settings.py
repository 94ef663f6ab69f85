# config/settings.py

import os
from dotenv import load_dotenv

load_dotenv()

# --- Storage ---
MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "summit-bookings")
# "mongo" for a live database, "memory" for demo mode (nothing persists)
STORE_BACKEND = os.getenv("STORE_BACKEND", "mongo").lower()

# --- Auth ---
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720"))
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# --- Reporting ---
# Approximate rate, only used for the combined "display" revenue figure.
INR_PER_USD = float(os.getenv("INR_PER_USD", "83"))
TOP_PERFORMERS_LIMIT = int(os.getenv("TOP_PERFORMERS_LIMIT", "4"))
BOOKINGS_PER_PAGE = int(os.getenv("BOOKINGS_PER_PAGE", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "uvicorn.access": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}
