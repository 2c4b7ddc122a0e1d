"""Signup/login, current user, logout and API token management."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.deps import CurrentPrincipal, parse_uuid
from app.core.database import get_db
from app.core.errors import AuthenticationError
from app.schemas.auth import (
    APITokenResponse,
    AuthResponse,
    CreateTokenRequest,
    LoginRequest,
    MessageResponse,
    SignupRequest,
    UserResponse,
)
from app.services import api_tokens
from app.services import auth as auth_service

router = APIRouter()


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Create an account with the default `user` role and return a session token."""
    user = auth_service.signup(db, body.username, body.email, body.password)
    token, expires_at = auth_service.issue_session(user)
    return AuthResponse(
        user=UserResponse.model_validate(user),
        session_token=token,
        expires_at=expires_at,
    )


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with username and password; returns a session token.
    Include the token in the Authorization header as: Bearer <session_token>
    """
    user = auth_service.authenticate(db, body.username, body.password)
    token, expires_at = auth_service.issue_session(user)
    return AuthResponse(
        user=UserResponse.model_validate(user),
        session_token=token,
        expires_at=expires_at,
    )


@router.get("/me", response_model=UserResponse)
def me(
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Current user's profile. A token for a since-deleted user is rejected."""
    user = auth_service.get_user(db, principal.id)
    if user is None:
        raise AuthenticationError("Invalid or expired token")
    return UserResponse.model_validate(user)


@router.post("/logout", response_model=MessageResponse)
def logout(_principal: CurrentPrincipal) -> MessageResponse:
    """Session tokens are stateless; the client discards its token."""
    return MessageResponse(message="Logged out successfully")


@router.post("/tokens", response_model=APITokenResponse, status_code=status.HTTP_201_CREATED)
def create_token(
    body: CreateTokenRequest,
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> APITokenResponse:
    """Issue an API token for the caller. Lifetime defaults to 4 hours, capped by config."""
    api_token = api_tokens.create_api_token(
        db, principal.id, body.name, expires_in_hours=body.expires_in_hours
    )
    return APITokenResponse.model_validate(api_token)


@router.get("/tokens", response_model=list[APITokenResponse])
def list_tokens(
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> list[APITokenResponse]:
    """Caller's API tokens, newest first."""
    return [APITokenResponse.model_validate(t) for t in api_tokens.list_api_tokens(db, principal.id)]


@router.delete("/tokens/{token_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_token(
    token_id: str,
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Revoke one of the caller's tokens. Another user's token is reported as not found."""
    api_tokens.revoke_api_token(db, parse_uuid(token_id, "token"), principal.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
