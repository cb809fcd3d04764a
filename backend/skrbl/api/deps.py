from dataclasses import dataclass
from typing import Optional
import logging
import secrets

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from skrbl.core.config import settings
from skrbl.core.exceptions import UnauthorizedError
from skrbl.core.security import decode_access_token
from skrbl.db.session import get_db
from skrbl.models import UserRole
from skrbl.services.messaging import ResendClient, TwilioClient, get_resend_client, get_twilio_client
from skrbl.services.n8n_client import N8nClient, get_n8n_client
from skrbl.services.ai.text_generation import get_text_generation_service

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    id: str
    email: Optional[str] = None


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Missing bearer token")
    claims = decode_access_token(credentials.credentials)
    if claims is None:
        raise UnauthorizedError("Invalid or expired token")
    return CurrentUser(id=claims["sub"], email=claims.get("email"))


def is_admin(db: Session, user: CurrentUser) -> bool:
    """Admin when a user_roles row grants an admin role or the email domain is allowlisted."""
    role = (
        db.query(UserRole)
        .filter(UserRole.user_id == user.id, UserRole.role.in_(settings.ADMIN_ROLES))
        .first()
    )
    if role is not None:
        return True
    if user.email and "@" in user.email:
        domain = user.email.rsplit("@", 1)[1].lower()
        return domain in {d.lower() for d in settings.ADMIN_EMAIL_DOMAINS}
    return False


def require_admin(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CurrentUser:
    if not is_admin(db, user):
        logger.warning(f"Non-admin user {user.id} denied admin route")
        raise UnauthorizedError("Admin role required")
    return user


def verify_cron_secret(x_cron_secret: Optional[str] = Header(None)) -> None:
    if not settings.CRON_SECRET or not secrets.compare_digest(x_cron_secret or "", settings.CRON_SECRET):
        raise UnauthorizedError("Invalid cron secret")


def get_n8n() -> N8nClient:
    return get_n8n_client()


def get_twilio() -> TwilioClient:
    return get_twilio_client()


def get_resend() -> ResendClient:
    return get_resend_client()


def get_text_service():
    return get_text_generation_service()
