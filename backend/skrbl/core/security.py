from datetime import timedelta
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from skrbl.core.config import settings
from skrbl.utils.time import utc_now


def create_access_token(subject: str, email: Optional[str] = None,
                        expires_delta: Optional[timedelta] = None) -> str:
    expire = utc_now() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload: Dict[str, Any] = {"sub": str(subject), "exp": expire}
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the claims, or None for an invalid, expired or subject-less token."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload
