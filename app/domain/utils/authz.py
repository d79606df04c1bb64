from collections.abc import Iterable

from app.utils.app_errors import AuthorizationError

ROLE_ADMIN = "admin"
ROLE_RESELLER = "revenda"

# Roles allowed to block, unblock and remove streaming entities
DESTRUCTIVE_ROLES = frozenset({ROLE_ADMIN, ROLE_RESELLER})


def authorize(caller_role: str | None, required_roles: Iterable[str]) -> None:
    """Raise AuthorizationError unless `caller_role` is one of `required_roles`."""
    if not caller_role or caller_role not in set(required_roles):
        raise AuthorizationError(errmesg="Unauthorized access", error=f"role={caller_role!r}")
