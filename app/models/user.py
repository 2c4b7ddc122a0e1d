"""ORM model for application users (auth and RBAC)."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, String, Uuid

from app.core.roles import ROLE_VALUES, Role
from app.models.base import Base, utcnow

_ROLE_CHECK = "role IN ({})".format(", ".join(f"'{r}'" for r in sorted(ROLE_VALUES)))


class User(Base):
    """
    User account for session/API-token authentication and role-based access control.

    role: one of guest, user, localadmin, sysadmin, superuser.
    password_hash is hex(salt || argon2id key) and is never serialized outward.
    """

    __tablename__ = "users"
    __table_args__ = (CheckConstraint(_ROLE_CHECK, name="ck_users_role"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=Role.USER.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
