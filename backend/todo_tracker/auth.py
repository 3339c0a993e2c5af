import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from jose import jwt, JWTError
from fastapi import Depends, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .config import Settings
from .errors import InvalidTokenError, MissingTokenError

logger = logging.getLogger(__name__)

# auto_error=False so a missing header becomes our own 401 instead of FastAPI's
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Identity taken from a verified token, passed explicitly into store calls."""

    id: int
    username: str


def issue_token(settings: Settings, user_id: int, username: str) -> str:
    """Sign a bearer token for the user that expires after TOKEN_TTL_HOURS."""
    expires = datetime.now(timezone.utc) + timedelta(hours=settings.token_ttl_hours)
    claims = {"id": user_id, "username": username, "exp": expires}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(settings: Settings, token: Optional[str]) -> Dict:
    """
    Verify a bearer token signed with the server secret.
    Returns the decoded claims if valid.
    Raises MissingTokenError when there is no token, InvalidTokenError otherwise.
    """
    if not token:
        raise MissingTokenError()

    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise InvalidTokenError()

    if not isinstance(claims.get("id"), int):
        logger.warning("Rejected bearer token: missing id claim")
        raise InvalidTokenError()

    return claims


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _token_from_header(request: Request) -> Optional[str]:
    # any scheme is accepted, the token is the second word of the header
    parts = request.headers.get("authorization", "").split(" ")
    return parts[1] if len(parts) > 1 and parts[1] else None


def get_current_user(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
        settings: Settings = Depends(get_app_settings),
) -> CurrentUser:
    """
    FastAPI dependency to get current authenticated user
    Usage: user = Depends(get_current_user)
    """
    token = credentials.credentials if credentials else _token_from_header(request)
    claims = verify_token(settings, token)
    return CurrentUser(id=claims["id"], username=claims.get("username", ""))
