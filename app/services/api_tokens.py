"""API token manager: issue, validate, list and revoke long-lived opaque tokens."""

import logging
import re
import secrets
import uuid
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import AuthenticationError, ConflictError, InternalError, NotFoundError
from app.models import APIToken, User
from app.models.base import as_utc

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32
# Shape of a token value: 32 random bytes, lowercase hex.
API_TOKEN_PATTERN = re.compile(r"^[0-9a-f]{64}$")


def generate_token_value() -> str:
    """Return 64 hex characters of cryptographically random data (256 bits)."""
    return secrets.token_hex(TOKEN_BYTES)


def looks_like_api_token(value: str) -> bool:
    return bool(API_TOKEN_PATTERN.match(value))


def resolve_lifetime_hours(requested: int | None, settings: "Settings") -> int:
    """Missing or zero means the default lifetime; anything above the cap is clamped."""
    if not requested or requested <= 0:
        hours = settings.TOKEN_DURATION_HOURS
    else:
        hours = requested
    return min(hours, settings.api_token_max_hours)


def is_expired(token: APIToken, now: datetime | None = None) -> bool:
    return (now or datetime.now(UTC)) > as_utc(token.expires_at)


def create_api_token(
    db: Session,
    user_id: uuid.UUID,
    name: str,
    expires_in_hours: int | None = None,
    settings: "Settings | None" = None,
    now: datetime | None = None,
) -> APIToken:
    """
    Issue and persist a new token for `user_id`.

    The returned record carries the plaintext value; callers show it to the owner.
    """
    settings = settings or get_settings()
    created = now or datetime.now(UTC)
    hours = resolve_lifetime_hours(expires_in_hours, settings)
    api_token = APIToken(
        id=uuid.uuid4(),
        user_id=user_id,
        name=name,
        token=generate_token_value(),
        expires_at=created + timedelta(hours=hours),
        created_at=created,
    )
    db.add(api_token)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("API token insert hit a uniqueness constraint", extra={"user_id": str(user_id)})
        raise ConflictError("Token already exists") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to create API token: %s", e, extra={"user_id": str(user_id)})
        raise InternalError("Failed to create token") from e
    db.refresh(api_token)

    logger.info(
        "API token created",
        extra={"user_id": str(user_id), "token_id": str(api_token.id), "token_name": name},
    )
    return api_token


def validate_api_token(db: Session, token_value: str, now: datetime | None = None) -> User:
    """
    Resolve a token value to its owning user.

    Raises AuthenticationError("Invalid API token") when unknown and
    AuthenticationError("API token expired") when past expires_at. A failed
    last-used update is logged and does not fail the request.
    """
    checked_at = now or datetime.now(UTC)
    api_token = db.query(APIToken).filter(APIToken.token == token_value).first()
    if api_token is None or api_token.user is None:
        raise AuthenticationError("Invalid API token")
    if is_expired(api_token, checked_at):
        raise AuthenticationError("API token expired")

    user = api_token.user
    token_id = str(api_token.id)
    try:
        api_token.last_used_at = checked_at
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(
            "Failed to update token last used timestamp: %s",
            e,
            extra={"token_id": token_id},
        )
    return user


def list_api_tokens(db: Session, user_id: uuid.UUID) -> list[APIToken]:
    """All tokens owned by `user_id`, newest first."""
    try:
        return (
            db.query(APIToken)
            .filter(APIToken.user_id == user_id)
            .order_by(APIToken.created_at.desc())
            .all()
        )
    except SQLAlchemyError as e:
        raise InternalError("Failed to get tokens") from e


def revoke_api_token(db: Session, token_id: uuid.UUID, user_id: uuid.UUID) -> None:
    """
    Hard-delete a token owned by `user_id`.

    A missing token and another user's token are reported identically.
    """
    try:
        deleted = (
            db.query(APIToken)
            .filter(APIToken.id == token_id, APIToken.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError("Failed to revoke token") from e

    if deleted == 0:
        raise NotFoundError("Token not found or access denied")

    logger.info("API token revoked", extra={"user_id": str(user_id), "token_id": str(token_id)})
