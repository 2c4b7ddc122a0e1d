"""Account orchestration: signup, login and session issuance."""

import logging
import uuid
from datetime import datetime

import jwt
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import AuthenticationError, ConflictError, InternalError, ValidationError
from app.core.roles import Role
from app.core.security import (
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    burn_password_check,
    create_session_token,
    hash_password,
    verify_password,
)
from app.models import User

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "User with username or email already exists"
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    role: Role | str = Role.USER,
) -> User:
    """
    Create a user with a hashed password.

    The lookup below is only a fast path; the unique constraints on username and
    email decide, and a constraint violation from a concurrent insert is reported
    as the same ConflictError.
    """
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN) or username != username.strip():
        raise ValidationError(
            f"username must be {USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} characters without surrounding spaces"
        )
    email = normalize_email(email)

    existing = (
        db.query(User.id)
        .filter(or_(User.username == username, User.email == email))
        .first()
    )
    if existing is not None:
        raise ConflictError(DUPLICATE_USER_MESSAGE)

    user = User(
        id=uuid.uuid4(),
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=Role(role).value,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(DUPLICATE_USER_MESSAGE) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to create user: %s", e)
        raise InternalError("Failed to create user") from e
    db.refresh(user)

    logger.info("User created", extra={"user_id": str(user.id), "username": user.username})
    return user


def signup(db: Session, username: str, email: str, password: str) -> User:
    """Self-service registration; always assigns the default `user` role."""
    return create_user(db, username, email, password, role=Role.USER)


def authenticate(db: Session, username: str, password: str) -> User:
    """
    Check username/password. Unknown user and wrong password raise the same
    AuthenticationError and cost the same hashing work.
    """
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        burn_password_check(password)
        logger.warning("Authentication failed", extra={"username": username})
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)
    if not verify_password(password, user.password_hash):
        logger.warning("Authentication failed", extra={"username": username})
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    logger.info("User authenticated", extra={"user_id": str(user.id), "username": user.username})
    return user


def issue_session(user: User) -> tuple[str, datetime]:
    """Sign a session token for an authenticated user; signing failures are internal errors."""
    try:
        return create_session_token(user)
    except (jwt.PyJWTError, TypeError, ValueError) as e:
        logger.exception("Failed to generate session token", extra={"user_id": str(user.id)})
        raise InternalError("Failed to create session") from e


def get_user(db: Session, user_id: uuid.UUID) -> User | None:
    return db.query(User).filter(User.id == user_id).first()
