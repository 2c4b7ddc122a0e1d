"""Unit tests for app.services.api_tokens: issue, validate, list and revoke."""

import unittest
import uuid
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from pydantic import SecretStr
from sqlalchemy.exc import OperationalError

from support import DatabaseTestCase
from app.core.config import Settings
from app.core.errors import AuthenticationError, NotFoundError
from app.models import APIToken
from app.models.base import as_utc
from app.services.api_tokens import (
    create_api_token,
    generate_token_value,
    list_api_tokens,
    looks_like_api_token,
    resolve_lifetime_hours,
    revoke_api_token,
    validate_api_token,
)


def _settings(default: int = 4, maximum: int = 24) -> Settings:
    return Settings(
        _env_file=None,
        JWT_SECRET=SecretStr("test-secret"),
        TOKEN_DURATION_HOURS=default,
        TOKEN_MAX_DURATION_HOURS=maximum,
    )


class TestTokenValue(unittest.TestCase):
    """Token values are 64 lowercase hex characters and unique."""

    def test_shape(self) -> None:
        value = generate_token_value()
        self.assertEqual(len(value), 64)
        self.assertTrue(looks_like_api_token(value))

    def test_values_differ(self) -> None:
        self.assertEqual(len({generate_token_value() for _ in range(50)}), 50)

    def test_session_token_shape_is_not_api_token(self) -> None:
        self.assertFalse(looks_like_api_token("eyJhbGciOiJIUzI1NiJ9.e30.sig"))
        self.assertFalse(looks_like_api_token("A" * 64))


class TestResolveLifetime(unittest.TestCase):
    """Missing/zero uses the default; values above the cap are clamped."""

    def test_missing_and_zero_default_to_four_hours(self) -> None:
        settings = _settings()
        self.assertEqual(resolve_lifetime_hours(None, settings), 4)
        self.assertEqual(resolve_lifetime_hours(0, settings), 4)

    def test_in_range_value_kept(self) -> None:
        self.assertEqual(resolve_lifetime_hours(12, _settings()), 12)

    def test_clamped_to_max(self) -> None:
        self.assertEqual(resolve_lifetime_hours(1000, _settings(maximum=24)), 24)


class TestCreateAndList(DatabaseTestCase):
    def test_create_defaults_to_four_hours(self) -> None:
        user = self.make_user()
        now = datetime.now(UTC)
        api_token = create_api_token(self.db, user.id, "ci", expires_in_hours=0, settings=_settings(), now=now)
        self.assertEqual(as_utc(api_token.expires_at) - as_utc(api_token.created_at), timedelta(hours=4))
        self.assertTrue(looks_like_api_token(api_token.token))
        self.assertIsNone(api_token.last_used_at)
        self.assertEqual(api_token.user_id, user.id)

    def test_create_clamps_long_lifetime(self) -> None:
        user = self.make_user()
        api_token = create_api_token(self.db, user.id, "long", expires_in_hours=500, settings=_settings())
        lifetime = as_utc(api_token.expires_at) - as_utc(api_token.created_at)
        self.assertEqual(lifetime, timedelta(hours=24))

    def test_list_newest_first_and_scoped_to_owner(self) -> None:
        owner = self.make_user()
        other = self.make_user()
        base = datetime.now(UTC)
        first = create_api_token(self.db, owner.id, "first", now=base - timedelta(minutes=2))
        second = create_api_token(self.db, owner.id, "second", now=base - timedelta(minutes=1))
        create_api_token(self.db, other.id, "theirs", now=base)

        tokens = list_api_tokens(self.db, owner.id)
        self.assertEqual([t.id for t in tokens], [second.id, first.id])


class TestValidate(DatabaseTestCase):
    def test_unknown_token_is_invalid(self) -> None:
        with self.assertRaises(AuthenticationError) as ctx:
            validate_api_token(self.db, generate_token_value())
        self.assertEqual(ctx.exception.message, "Invalid API token")

    def test_expired_token(self) -> None:
        user = self.make_user()
        past = datetime.now(UTC) - timedelta(hours=5)
        api_token = create_api_token(self.db, user.id, "old", expires_in_hours=4, now=past)
        with self.assertRaises(AuthenticationError) as ctx:
            validate_api_token(self.db, api_token.token)
        self.assertEqual(ctx.exception.message, "API token expired")

    def test_valid_token_returns_user_and_records_use(self) -> None:
        user = self.make_user()
        api_token = create_api_token(self.db, user.id, "ci")
        checked_at = datetime.now(UTC)
        resolved = validate_api_token(self.db, api_token.token, now=checked_at)
        self.assertEqual(resolved.id, user.id)

        stored = self.db.query(APIToken).filter(APIToken.id == api_token.id).one()
        self.assertIsNotNone(stored.last_used_at)
        self.assertEqual(as_utc(stored.last_used_at), checked_at)

    def test_last_used_failure_is_not_fatal(self) -> None:
        user = MagicMock()
        token_row = MagicMock()
        token_row.id = uuid.uuid4()
        token_row.user = user
        token_row.expires_at = datetime.now(UTC) + timedelta(hours=1)
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = token_row
        session.commit.side_effect = OperationalError("UPDATE api_tokens", {}, Exception("db down"))

        with self.assertLogs("app.services.api_tokens", level="WARNING"):
            resolved = validate_api_token(session, "a" * 64)

        self.assertIs(resolved, user)
        session.rollback.assert_called_once()


class TestRevoke(DatabaseTestCase):
    def test_owner_can_revoke(self) -> None:
        user = self.make_user()
        api_token = create_api_token(self.db, user.id, "ci")
        revoke_api_token(self.db, api_token.id, user.id)
        self.assertEqual(list_api_tokens(self.db, user.id), [])

    def test_other_user_cannot_revoke(self) -> None:
        owner = self.make_user()
        intruder = self.make_user()
        api_token = create_api_token(self.db, owner.id, "ci")
        with self.assertRaises(NotFoundError) as ctx:
            revoke_api_token(self.db, api_token.id, intruder.id)
        self.assertEqual(ctx.exception.message, "Token not found or access denied")
        self.assertEqual(len(list_api_tokens(self.db, owner.id)), 1)

    def test_missing_token_reports_same_error(self) -> None:
        user = self.make_user()
        with self.assertRaises(NotFoundError) as ctx:
            revoke_api_token(self.db, uuid.uuid4(), user.id)
        self.assertEqual(ctx.exception.message, "Token not found or access denied")

    def test_second_revoke_is_not_found(self) -> None:
        user = self.make_user()
        token_id = create_api_token(self.db, user.id, "ci").id
        revoke_api_token(self.db, token_id, user.id)
        with self.assertRaises(NotFoundError):
            revoke_api_token(self.db, token_id, user.id)
