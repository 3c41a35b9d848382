from __future__ import annotations

import pytest
from fastapi import HTTPException

from itamdb import security
from itamdb.apps.accounts import models as account_models
from itamdb.apps.accounts import services as account_services

BOOTSTRAP_ENV = {
    "ADMIN_USER": "Admin",
    "ADMIN_PASS": "admin-pass",
    "USER_USER": "viewer",
    "USER_PASS": "viewer-pass",
}


def test_bootstrap_creates_accounts_once(db_session):
    created = account_services.ensure_bootstrap_users(db_session, environ=BOOTSTRAP_ENV)
    again = account_services.ensure_bootstrap_users(db_session, environ=BOOTSTRAP_ENV)

    assert {(u.username, u.role) for u in created} == {
        ("admin", account_models.AccountRole.ADMIN),
        ("viewer", account_models.AccountRole.USER),
    }
    assert again == []
    assert db_session.query(account_models.User).count() == 2
    assert created[0].id.startswith("USR-")


def test_bootstrap_skips_incomplete_pairs(db_session):
    created = account_services.ensure_bootstrap_users(db_session, environ={"ADMIN_USER": "admin"})

    assert created == []


def test_authenticate_user(db_session):
    account_services.ensure_bootstrap_users(db_session, environ=BOOTSTRAP_ENV)

    user = account_services.authenticate_user(db_session, username=" ADMIN ", password="admin-pass")
    assert user.is_admin

    with pytest.raises(account_services.AuthenticationError):
        account_services.authenticate_user(db_session, username="admin", password="wrong")
    with pytest.raises(account_services.AuthenticationError):
        account_services.authenticate_user(db_session, username="ghost", password="admin-pass")


def test_token_resolves_to_current_user(db_session):
    account_services.ensure_bootstrap_users(db_session, environ=BOOTSTRAP_ENV)
    user = account_services.get_user_by_username(db_session, "viewer")

    token, expires_in = account_services.issue_access_token_for_user(user)

    assert expires_in == security.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    assert security.get_current_user(token=token, db=db_session).id == user.id
    with pytest.raises(HTTPException) as exc:
        security.get_current_user(token=token + "tampered", db=db_session)
    assert exc.value.status_code == 401


def test_require_admin_rejects_read_only_users(db_session):
    account_services.ensure_bootstrap_users(db_session, environ=BOOTSTRAP_ENV)
    admin = account_services.get_user_by_username(db_session, "admin")
    viewer = account_services.get_user_by_username(db_session, "viewer")

    assert security.require_admin(current_user=admin) is admin
    with pytest.raises(HTTPException) as exc:
        security.require_admin(current_user=viewer)
    assert exc.value.status_code == 403


def test_duplicate_username_is_conflict(db_session):
    account_services.create_user(db_session, username="ops", password="pw")

    with pytest.raises(HTTPException) as exc:
        account_services.create_user(db_session, username="OPS", password="pw2")
    assert exc.value.status_code == 409
