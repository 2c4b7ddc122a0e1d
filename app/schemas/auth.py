"""Request/response schemas for auth endpoints."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, USERNAME_MAX_LEN, USERNAME_MIN_LEN


class SignupRequest(BaseModel):
    """New account: username, email and password. Username length applies after trimming."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v


class LoginRequest(BaseModel):
    """Credentials for login. No length policy here; any wrong value is just a failed login."""

    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")


class UserResponse(BaseModel):
    """User as returned to clients (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    email: str
    role: str
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    """Returned by signup and login."""

    user: UserResponse
    session_token: str = Field(..., description="Signed session token; send as Bearer")
    expires_at: datetime = Field(..., description="Session token expiry (UTC)")


class CreateTokenRequest(BaseModel):
    """API token creation. expires_in_hours 0 or omitted uses the default lifetime."""

    name: str = Field(..., min_length=1, max_length=100, description="Human-readable name")
    expires_in_hours: int | None = Field(
        default=None, ge=0, description="Lifetime in hours; clamped to the configured maximum"
    )


class APITokenResponse(BaseModel):
    """API token record including the plaintext token value."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    token: str
    expires_at: datetime
    last_used_at: datetime | None = None
    created_at: datetime


class MessageResponse(BaseModel):
    message: str


class Principal(BaseModel):
    """Authenticated caller (id, username, role) injected into handlers."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    username: str
    role: str
    auth_method: Literal["session", "api_token"]
