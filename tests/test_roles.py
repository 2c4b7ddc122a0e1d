"""Unit tests for app.core.roles and the bearer/role-gate dependencies in app.api.deps."""

import itertools
import unittest
import uuid

import support  # noqa: F401
from app.api.deps import extract_bearer_token, require_any_role, require_role
from app.core.errors import AuthorizationError
from app.core.roles import ROLE_LEVELS, Role, has_any_role, has_role, role_level
from app.schemas.auth import Principal


def _principal(role: str) -> Principal:
    return Principal(id=uuid.uuid4(), username="alice", role=role, auth_method="session")


class TestRoleLevels(unittest.TestCase):
    """role_level maps the fixed order and returns 0 for unknown roles."""

    def test_levels(self) -> None:
        self.assertEqual(role_level(Role.GUEST), 1)
        self.assertEqual(role_level("user"), 2)
        self.assertEqual(role_level("localadmin"), 3)
        self.assertEqual(role_level(Role.SYSADMIN), 4)
        self.assertEqual(role_level("superuser"), 5)

    def test_unknown_roles_are_zero(self) -> None:
        for role in ("admin", "", "SUPERUSER", None):
            with self.subTest(role=role):
                self.assertEqual(role_level(role), 0)

    def test_mapping_is_read_only(self) -> None:
        with self.assertRaises(TypeError):
            ROLE_LEVELS["admin"] = 99  # type: ignore[index]


class TestHasRole(unittest.TestCase):
    """has_role is "at least as privileged as"."""

    def test_equal_and_higher_pass(self) -> None:
        self.assertTrue(has_role("localadmin", Role.LOCALADMIN))
        self.assertTrue(has_role("sysadmin", Role.LOCALADMIN))
        self.assertTrue(has_role("superuser", Role.LOCALADMIN))

    def test_lower_fails(self) -> None:
        self.assertFalse(has_role("user", Role.LOCALADMIN))
        self.assertFalse(has_role("guest", Role.USER))

    def test_unknown_role_fails_every_gate(self) -> None:
        for required in Role:
            with self.subTest(required=required):
                self.assertFalse(has_role("admin", required))
                self.assertFalse(has_role(None, required))


class TestHasAnyRole(unittest.TestCase):
    """has_any_role collapses to has_role(min(roles)) under a total order."""

    def test_collapses_to_lowest_required(self) -> None:
        roles = list(Role)
        for actual in roles:
            for size in range(1, len(roles) + 1):
                for subset in itertools.combinations(roles, size):
                    lowest = min(subset, key=role_level)
                    with self.subTest(actual=actual, subset=subset):
                        self.assertEqual(
                            has_any_role(actual, subset),
                            has_role(actual, lowest),
                        )

    def test_user_passes_when_any_listed_role_is_user(self) -> None:
        # Listing superuser alongside user does not restrict to superusers.
        self.assertTrue(has_any_role("user", [Role.SUPERUSER, Role.USER]))

    def test_empty_set_never_passes(self) -> None:
        self.assertFalse(has_any_role("superuser", []))


class TestExtractBearerToken(unittest.TestCase):
    """Only `Bearer <token>` with exactly two parts yields a credential."""

    def test_valid_header(self) -> None:
        self.assertEqual(extract_bearer_token("Bearer abc.def.ghi"), "abc.def.ghi")

    def test_rejected_headers(self) -> None:
        for header in (None, "", "Bearer", "Bearer ", "Token abc", "bearer abc", "Bearer a b", "Basic dXNlcjpwYXNz"):
            with self.subTest(header=header):
                self.assertIsNone(extract_bearer_token(header))


class TestRoleGates(unittest.TestCase):
    """require_role / require_any_role dependencies raise AuthorizationError (403)."""

    def test_require_localadmin_rejects_user(self) -> None:
        gate = require_role(Role.LOCALADMIN)
        with self.assertRaises(AuthorizationError) as ctx:
            gate(_principal("user"))
        self.assertEqual(ctx.exception.status_code, 403)

    def test_require_localadmin_accepts_higher_roles(self) -> None:
        gate = require_role(Role.LOCALADMIN)
        for role in ("localadmin", "sysadmin", "superuser"):
            with self.subTest(role=role):
                principal = _principal(role)
                self.assertIs(gate(principal), principal)

    def test_require_role_rejects_unknown_role(self) -> None:
        with self.assertRaises(AuthorizationError):
            require_role(Role.GUEST)(_principal("admin"))

    def test_require_any_role_uses_lowest(self) -> None:
        gate = require_any_role(Role.SYSADMIN, Role.LOCALADMIN)
        self.assertEqual(gate(_principal("localadmin")).role, "localadmin")
        with self.assertRaises(AuthorizationError):
            gate(_principal("user"))
