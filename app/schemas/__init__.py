"""Pydantic request/response schemas."""

from app.schemas.auth import (
    APITokenResponse,
    AuthResponse,
    CreateTokenRequest,
    LoginRequest,
    MessageResponse,
    Principal,
    SignupRequest,
    UserResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.project import (
    ProjectCreate,
    ProjectResponse,
    ProjectStatsResponse,
    ProjectUpdate,
)

__all__ = [
    "APITokenResponse",
    "AuthResponse",
    "CreateTokenRequest",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "Principal",
    "ProjectCreate",
    "ProjectResponse",
    "ProjectStatsResponse",
    "ProjectUpdate",
    "SignupRequest",
    "UserResponse",
]
