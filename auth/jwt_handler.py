from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

from config import settings

ADMIN_ROLE = "admin"


def create_access_token(
    data: Dict[str, Any],
    role: str = ADMIN_ROLE,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed JWT for a back-office session.
    """
    now = datetime.now(timezone.utc)
    to_encode = data.copy()
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({
        "exp": expire,
        "role": role,
        "iat": now
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Return the token payload if the signature and expiry check out, else None.
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def is_admin_token(payload: Optional[Dict[str, Any]]) -> bool:
    return bool(payload) and payload.get("role") == ADMIN_ROLE and bool(payload.get("sub"))
