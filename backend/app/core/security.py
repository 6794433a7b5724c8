"""
Security utilities: customer identity from request headers, and the
customer-scoped access tokens used to call Integration.app.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Depends, Header, status
from jose import jwt

from app.core.config import get_settings
from app.core.errors import APIError

ALGORITHM = "HS512"
ACCESS_TOKEN_EXPIRE_MINUTES = 120


@dataclass(frozen=True)
class AuthContext:
    customer_id: str | None
    customer_name: str | None = None


def create_access_token(auth: AuthContext, expires_delta: Optional[timedelta] = None) -> str:
    """Sign an Integration.app token for the customer with the workspace secret."""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode: dict[str, Any] = {
        "id": auth.customer_id,
        "name": auth.customer_name or auth.customer_id,
        "iss": settings.integration_app_workspace_key,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.integration_app_workspace_secret, algorithm=ALGORITHM)


async def get_auth_context(
    x_auth_id: str | None = Header(None, alias="x-auth-id"),
    x_customer_name: str | None = Header(None, alias="x-customer-name"),
) -> AuthContext:
    """Dependency: identity sent by the web app; customer_id may be missing."""
    customer_id = x_auth_id.strip() if x_auth_id and x_auth_id.strip() else None
    customer_name = x_customer_name.strip() if x_customer_name and x_customer_name.strip() else None
    return AuthContext(customer_id=customer_id, customer_name=customer_name)


async def get_current_auth(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
    """Dependency: require a customer identity. Raises 401 if missing."""
    if not auth.customer_id:
        raise APIError("Unauthorized", status_code=status.HTTP_401_UNAUTHORIZED)
    return auth


async def get_current_customer_id(auth: AuthContext = Depends(get_current_auth)) -> str:
    return auth.customer_id
