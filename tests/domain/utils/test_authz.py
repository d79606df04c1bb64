import pytest

from app.domain.utils.authz import DESTRUCTIVE_ROLES, ROLE_ADMIN, ROLE_RESELLER, authorize
from app.utils.app_errors import AppErrorCode, AuthorizationError


@pytest.mark.parametrize("role", [ROLE_ADMIN, ROLE_RESELLER])
def test_allowed_roles(role):
    authorize(role, DESTRUCTIVE_ROLES)


@pytest.mark.parametrize("role", ["cliente", "Admin", "", None])
def test_rejected_roles(role):
    with pytest.raises(AuthorizationError) as exc_info:
        authorize(role, DESTRUCTIVE_ROLES)

    assert exc_info.value.status_code == 403
    assert exc_info.value.errcode == AppErrorCode.E_FORBIDDEN.value


def test_custom_role_set():
    authorize("cliente", ["cliente"])
    with pytest.raises(AuthorizationError):
        authorize("admin", ["cliente"])
