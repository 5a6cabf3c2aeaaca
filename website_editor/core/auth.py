"""Authentication: FastAPI dependency resolving the calling user.

Public interface:
    ``require_auth``: returns AuthContext or raises 401.

When ``settings.auth_enabled`` is False every request acts as
``settings.dev_user_id`` (seeded on startup) so the development workflow is
unbroken. Authorization beyond ownership checks is not part of this service;
ownership is enforced in the service layer.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import settings
from .token_factory import decode_token
from ..database import get_db
from ..exceptions import AuthenticationError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Resolved identity of the caller."""

    user_id: str
    role: str = "user"


def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthContext:
    """Require a valid JWT for an active user and return the caller's AuthContext."""
    if not settings.auth_enabled:
        return AuthContext(user_id=settings.dev_user_id)

    if credentials is None:
        raise AuthenticationError("Missing authentication token")

    payload = decode_token(
        credentials.credentials, settings.jwt_secret_key, settings.jwt_algorithm
    )
    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    from ..repositories.user_repository import UserRepository

    user = UserRepository(db).get(payload.sub)
    if user is None:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("Account is deactivated")

    return AuthContext(user_id=user.user_id, role=payload.role)
