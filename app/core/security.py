"""Password hashing (Argon2id) and session token (JWT) issuance/verification."""

import hmac
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt
from argon2.low_level import Type, hash_secret_raw

from app.core.config import JWT_ALGORITHM, settings

if TYPE_CHECKING:
    from app.models.user import User

# Argon2id parameters. Changing these invalidates every stored hash; only raise them
# together with a rehash-on-login migration.
ARGON2_TIME_COST = 1
ARGON2_MEMORY_COST_KIB = 64 * 1024
ARGON2_PARALLELISM = 4
SALT_BYTES = 16
KEY_BYTES = 32
STORED_HASH_HEX_LEN = (SALT_BYTES + KEY_BYTES) * 2

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 50
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


def _derive_key(password: str, salt: bytes) -> bytes:
    return hash_secret_raw(
        secret=password.encode("utf-8"),
        salt=salt,
        time_cost=ARGON2_TIME_COST,
        memory_cost=ARGON2_MEMORY_COST_KIB,
        parallelism=ARGON2_PARALLELISM,
        hash_len=KEY_BYTES,
        type=Type.ID,
    )


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage as hex(salt || key). Do not store plain passwords."""
    salt = secrets.token_bytes(SALT_BYTES)
    return (salt + _derive_key(plain_password, salt)).hex()


def verify_password(plain_password: str, stored: str) -> bool:
    """Verify a plain password against a stored hash. Malformed stored values never match."""
    if not stored or len(stored) != STORED_HASH_HEX_LEN:
        return False
    try:
        combined = bytes.fromhex(stored)
    except (ValueError, TypeError):
        return False
    salt, expected = combined[:SALT_BYTES], combined[SALT_BYTES:]
    return hmac.compare_digest(_derive_key(plain_password, salt), expected)


# Computed once so unknown-username logins cost the same as wrong-password logins.
_DUMMY_HASH = hash_password("projectdesk-timing-dummy")


def burn_password_check(plain_password: str) -> None:
    """Run a full verification against a throwaway hash and discard the result."""
    verify_password(plain_password, _DUMMY_HASH)


class SessionTokenError(Exception):
    """Base for session token verification failures."""

    reason = "invalid"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MalformedTokenError(SessionTokenError):
    reason = "malformed"


class InvalidSignatureError(SessionTokenError):
    reason = "bad_signature"


class ExpiredTokenError(SessionTokenError):
    reason = "expired"


@dataclass(frozen=True)
class SessionClaims:
    """Verified identity carried by a session token."""

    user_id: str
    username: str
    role: str
    issued_at: datetime
    not_before: datetime
    expires_at: datetime


def _signing_key() -> str:
    return settings.JWT_SECRET.get_secret_value()


def create_session_token(
    user: "User",
    now: datetime | None = None,
    duration: timedelta | None = None,
) -> tuple[str, datetime]:
    """Sign a session token for `user`; returns (token, expires_at)."""
    issued = now or datetime.now(UTC)
    lifetime = duration if duration is not None else timedelta(hours=settings.SESSION_DURATION_HOURS)
    expires_at = issued + lifetime
    payload: dict[str, Any] = {
        "sub": str(user.id),
        "user_id": str(user.id),
        "username": user.username,
        "role": user.role,
        "iat": issued,
        "nbf": issued,
        "exp": expires_at,
    }
    token = jwt.encode(payload, _signing_key(), algorithm=JWT_ALGORITHM)
    return token, expires_at


def decode_session_token(token: str, now: datetime | None = None) -> SessionClaims:
    """
    Verify a session token and return its claims.

    Raises MalformedTokenError, InvalidSignatureError or ExpiredTokenError.
    Only HS256 is accepted; a token whose exp has passed is rejected even if the
    library itself accepted it.
    """
    if not token or token.count(".") != 2:
        raise MalformedTokenError("Token is not a compact JWS")
    try:
        header = jwt.get_unverified_header(token)
    except jwt.DecodeError as e:
        raise MalformedTokenError("Token header cannot be decoded") from e
    if header.get("alg") != JWT_ALGORITHM:
        raise InvalidSignatureError("Unexpected signing algorithm")

    try:
        payload = jwt.decode(
            token,
            _signing_key(),
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "iat", "nbf"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise ExpiredTokenError("Token has expired") from e
    except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
        raise InvalidSignatureError("Token signature is invalid") from e
    except jwt.PyJWTError as e:
        raise MalformedTokenError(f"Token is invalid: {e}") from e

    try:
        expires_at = datetime.fromtimestamp(int(payload["exp"]), UTC)
        issued_at = datetime.fromtimestamp(int(payload["iat"]), UTC)
        not_before = datetime.fromtimestamp(int(payload["nbf"]), UTC)
        user_id = str(payload["user_id"])
        username = str(payload["username"])
        role = str(payload["role"])
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedTokenError("Token payload is missing required claims") from e

    if expires_at <= (now or datetime.now(UTC)):
        raise ExpiredTokenError("Token has expired")

    return SessionClaims(
        user_id=user_id,
        username=username,
        role=role,
        issued_at=issued_at,
        not_before=not_before,
        expires_at=expires_at,
    )
