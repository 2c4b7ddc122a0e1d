"""SQLAlchemy ORM models."""

from app.models.api_token import APIToken
from app.models.base import Base
from app.models.project import Project
from app.models.user import User

__all__ = ["APIToken", "Base", "Project", "User"]
