"""Auth dependencies: bearer extraction, principal resolution and role gates."""

import logging
import uuid
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import AuthenticationError, AuthorizationError, ValidationError
from app.core.roles import Role, has_any_role, has_role
from app.core.security import SessionTokenError, decode_session_token
from app.schemas.auth import Principal
from app.services.api_tokens import looks_like_api_token, validate_api_token

logger = logging.getLogger(__name__)

MISSING_TOKEN_MESSAGE = "Authorization token required"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"
FORBIDDEN_MESSAGE = "Insufficient permissions"


def extract_bearer_token(header: str | None) -> str | None:
    """Return the credential from `Bearer <token>`; anything else (or no header) is None."""
    if not header:
        return None
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


def parse_uuid(value: str, label: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except (ValueError, AttributeError, TypeError) as e:
        raise ValidationError(f"Invalid {label} ID") from e


def _principal_from_api_token(db: Session, token: str) -> Principal:
    try:
        user = validate_api_token(db, token)
    except AuthenticationError as e:
        logger.warning("Invalid API token", extra={"reason": e.message})
        raise AuthenticationError(INVALID_TOKEN_MESSAGE) from e
    return Principal(id=user.id, username=user.username, role=user.role, auth_method="api_token")


def _principal_from_session_token(token: str) -> Principal:
    try:
        claims = decode_session_token(token)
        user_id = uuid.UUID(claims.user_id)
    except SessionTokenError as e:
        logger.warning("Invalid token", extra={"reason": e.reason})
        raise AuthenticationError(INVALID_TOKEN_MESSAGE) from e
    except ValueError as e:
        logger.warning("Invalid token", extra={"reason": "bad_subject"})
        raise AuthenticationError(INVALID_TOKEN_MESSAGE) from e
    return Principal(id=user_id, username=claims.username, role=claims.role, auth_method="session")


def get_current_principal(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> Principal:
    """
    Dependency: require a valid bearer credential and return the caller.

    64-hex-character credentials are API tokens; everything else is verified as
    a session token. Every verification failure yields the same 401.
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise AuthenticationError(MISSING_TOKEN_MESSAGE)

    if looks_like_api_token(token):
        principal = _principal_from_api_token(db, token)
    else:
        principal = _principal_from_session_token(token)

    request.state.principal = principal
    return principal


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


def _deny(principal: Principal, required: str) -> AuthorizationError:
    logger.warning(
        "Insufficient permissions",
        extra={
            "user_id": str(principal.id),
            "user_role": principal.role,
            "required_role": required,
        },
    )
    return AuthorizationError(FORBIDDEN_MESSAGE)


def require_role(min_role: Role) -> Callable[[Principal], Principal]:
    """Dependency factory: caller's role must be at or above `min_role`."""

    def dependency(principal: CurrentPrincipal) -> Principal:
        if not has_role(principal.role, min_role):
            raise _deny(principal, min_role.value)
        return principal

    return dependency


def require_any_role(*roles: Role) -> Callable[[Principal], Principal]:
    """
    Dependency factory: caller must meet at least one of `roles`.

    With a total order this admits anyone at or above the lowest role listed.
    """

    def dependency(principal: CurrentPrincipal) -> Principal:
        if not has_any_role(principal.role, roles):
            raise _deny(principal, ",".join(r.value for r in roles))
        return principal

    return dependency
