from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime


class AdminLogin(BaseModel):
    email: EmailStr
    password: str


class AdminResponse(BaseModel):
    id: Optional[str] = None
    email: EmailStr
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None


class Admin(AdminResponse):
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    admin: AdminResponse
