# auth/admin.py

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, Request, Depends
from fastapi.security import HTTPBearer

from auth.jwt_handler import create_access_token, is_admin_token, verify_token
from auth.password_handler import hash_password, verify_password
from config import settings
from database.store import CollectionStore, new_document_id
from models.admin import AdminLogin, AdminResponse, TokenResponse

logger = logging.getLogger(__name__)

ADMINS = "admins"

router = APIRouter(prefix="/api/admin/auth", tags=["admin-auth"])

security = HTTPBearer(auto_error=False)


# --- Dependencies ---

async def get_current_admin(request: Request) -> dict:
    credentials = await security(request)
    if credentials is None:
        raise HTTPException(status_code=401, detail="Authentication credentials were not provided.")
    payload = verify_token(credentials.credentials)
    if not is_admin_token(payload):
        raise HTTPException(status_code=401, detail="Invalid token.")
    admin = await request.app.store.get(ADMINS, payload["sub"])
    if not admin:
        raise HTTPException(status_code=401, detail="Admin not found.")
    return admin


async def find_admin_by_email(store: CollectionStore, email: str):
    matches = await store.list(ADMINS, {"email": email.lower()})
    return matches[0] if matches else None


async def ensure_bootstrap_admin(store: CollectionStore) -> None:
    """Create the admin from ADMIN_EMAIL / ADMIN_PASSWORD if it does not exist yet."""
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return
    if await find_admin_by_email(store, settings.ADMIN_EMAIL):
        return
    await store.put(ADMINS, new_document_id(), {
        "email": settings.ADMIN_EMAIL.lower(),
        "password": hash_password(settings.ADMIN_PASSWORD),
        "full_name": "Administrator",
        "created_at": datetime.now(timezone.utc),
    })
    logger.info(f"Created bootstrap admin {settings.ADMIN_EMAIL}")


# --- Endpoints ---

@router.post("/login", response_model=TokenResponse)
async def login_admin(credentials: AdminLogin, request: Request):
    admin = await find_admin_by_email(request.app.store, credentials.email)
    if not admin or not verify_password(credentials.password, admin.get("password")):
        logger.warning(f"Failed admin login for {credentials.email}")
        raise HTTPException(status_code=401, detail="Invalid credentials")
    access_token = create_access_token(data={"sub": admin["id"]})
    return {"access_token": access_token, "token_type": "bearer", "admin": AdminResponse(**admin)}


@router.get("/me", response_model=AdminResponse)
async def get_admin_info(current_admin: dict = Depends(get_current_admin)):
    return current_admin
