"""Role hierarchy: a fixed total order used for "at least this privileged" checks."""

from collections.abc import Iterable
from enum import Enum
from types import MappingProxyType


class Role(str, Enum):
    GUEST = "guest"
    USER = "user"
    LOCALADMIN = "localadmin"
    SYSADMIN = "sysadmin"
    SUPERUSER = "superuser"


ROLE_VALUES: frozenset[str] = frozenset(r.value for r in Role)

# Lowest sentinel for anything outside the enumeration; fails every gate.
UNKNOWN_ROLE_LEVEL = 0

ROLE_LEVELS = MappingProxyType(
    {
        Role.GUEST.value: 1,
        Role.USER.value: 2,
        Role.LOCALADMIN.value: 3,
        Role.SYSADMIN.value: 4,
        Role.SUPERUSER.value: 5,
    }
)


def role_level(role: str | Role | None) -> int:
    """Return the hierarchy level of a role; unknown or missing roles are 0."""
    if role is None:
        return UNKNOWN_ROLE_LEVEL
    key = role.value if isinstance(role, Role) else role
    return ROLE_LEVELS.get(key, UNKNOWN_ROLE_LEVEL)


def has_role(actual: str | Role | None, required: str | Role) -> bool:
    """True if `actual` is at or above `required`. Unknown roles never pass."""
    actual_level = role_level(actual)
    if actual_level == UNKNOWN_ROLE_LEVEL:
        return False
    return actual_level >= role_level(required)


def has_any_role(actual: str | Role | None, roles: Iterable[str | Role]) -> bool:
    """
    True if `actual` meets any role in `roles`.

    Because the order is total this is the same as has_role(actual, min(roles));
    an empty collection never passes.
    """
    return any(has_role(actual, required) for required in roles)
