from __future__ import annotations

import pytest

from incidentsync.authz import can_create_alert, require_admin, require_identity
from incidentsync.exceptions import NotAuthenticatedError, NotAuthorizedError
from incidentsync.models import Identity, Role

USER = Identity(id="U1", role=Role.USER)
ADMIN = Identity(id="A1", role=Role.ADMIN)


@pytest.mark.parametrize(
    ("identity", "allowed"),
    [(None, False), (USER, False), (ADMIN, True)],
)
def test_can_create_alert(identity: Identity | None, allowed: bool) -> None:
    assert can_create_alert(identity) is allowed


def test_require_admin_rejects_user_and_anonymous() -> None:
    with pytest.raises(NotAuthorizedError):
        require_admin(USER)
    with pytest.raises(NotAuthorizedError):
        require_admin(None)
    assert require_admin(ADMIN) is ADMIN


def test_require_identity() -> None:
    with pytest.raises(NotAuthenticatedError):
        require_identity(None)
    assert require_identity(USER) is USER
