"""Shared test helpers: in-memory SQLite store and a TestClient wired to it."""

import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import unittest
import uuid
from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.limiter import limiter
from app.core.database import get_db
from app.core.roles import Role
from app.main import app
from app.models import Base, User
from app.services.auth import create_user

DEFAULT_PASSWORD = "password1"


def make_session_factory() -> tuple[object, sessionmaker]:
    """One shared in-memory SQLite database per call (StaticPool keeps a single connection)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine, sessionmaker(bind=engine, autocommit=False, autoflush=False)


class DatabaseTestCase(unittest.TestCase):
    """Fresh schema per test; self.db is an open session."""

    def setUp(self) -> None:
        self.engine, self.SessionLocal = make_session_factory()
        self.db: Session = self.SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()

    def make_user(
        self,
        username: str | None = None,
        role: Role = Role.USER,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        username = username or f"user_{uuid.uuid4().hex[:8]}"
        return create_user(self.db, username, f"{username}@corp.io", password, role=role)


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient whose get_db uses the same in-memory store."""

    def setUp(self) -> None:
        super().setUp()
        limiter.enabled = False

        def override_get_db() -> Generator[Session, None, None]:
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        super().tearDown()

    @staticmethod
    def bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def login(self, username: str, password: str = DEFAULT_PASSWORD) -> str:
        resp = self.client.post("/api/auth/login", json={"username": username, "password": password})
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()["session_token"]

    def token_for_role(self, role: Role) -> str:
        user = self.make_user(role=role)
        return self.login(user.username)
