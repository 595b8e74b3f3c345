# blog_api/api/auth/test_auth_services.py
from unittest.mock import MagicMock

import pytest
import requests

from blog_api.api.auth.services import AuthService
from blog_api.repositories.auth_repository import AuthRepository
from blog_api.services.identity_toolkit_service import IdentityToolkitClient


def test_signup_creates_profile_and_session(auth_service, fake_db):
    result = auth_service.signup("a@example.com", "secret123", "Alice")

    assert result.success
    assert result.status == 201
    profile = result.data["user"]
    assert profile.email == "a@example.com"
    assert profile.display_name == "Alice"
    assert result.data["idToken"]
    assert result.data["customToken"] == f"custom-token-{profile.uid}"
    assert profile.uid in fake_db.data["users"]


def test_signup_rejected_by_provider(auth_service):
    auth_service.signup("a@example.com", "secret123")

    result = auth_service.signup("a@example.com", "another123")
    assert not result.success
    assert result.status == 400
    assert result.error == "EMAIL_EXISTS"


def test_login_returns_fresh_token_and_stamps_last_login(auth_service, signup):
    _, profile = signup("a@example.com")

    result = auth_service.login("a@example.com", "secret123")

    assert result.success
    assert result.status == 200
    assert result.data["user"].uid == profile.uid
    assert result.data["user"].last_login_at >= profile.last_login_at
    assert result.data["user"].created_at == profile.created_at


def test_login_creates_missing_profile(auth_service, fake_identity, fake_db):
    # Account exists at the provider but was never mirrored
    created = fake_identity.sign_up("legacy@example.com", "secret123", "Legacy")
    assert created["localId"] not in fake_db.data.get("users", {})

    result = auth_service.login("legacy@example.com", "secret123")

    assert result.success
    assert result.data["user"].display_name == "Legacy"
    assert created["localId"] in fake_db.data["users"]


def test_login_with_bad_credentials(auth_service, signup):
    signup("a@example.com")

    result = auth_service.login("a@example.com", "wrong-password")
    assert not result.success
    assert result.status == 401

    result = auth_service.login("nobody@example.com", "secret123")
    assert result.status == 401


def test_verify_token(auth_service, author):
    token, profile = author

    result = auth_service.verify_token(token)
    assert result.success
    assert result.data["user"].uid == profile.uid


def test_verify_token_failures(auth_service, fake_auth, fake_db, author):
    token, profile = author

    result = auth_service.verify_token("garbage")
    assert (result.success, result.status, result.error) == (False, 401, "Invalid token")

    fake_auth.expired.add(token)
    result = auth_service.verify_token(token)
    assert (result.status, result.error) == (401, "Token has expired")
    fake_auth.expired.clear()

    # Valid token, but the profile mirror is gone
    del fake_db.data["users"][profile.uid]
    result = auth_service.verify_token(token)
    assert (result.status, result.error) == (401, "User profile not found")


def test_logout_revokes_earlier_tokens(auth_service, author):
    token, profile = author

    assert auth_service.logout(profile.uid).success

    result = auth_service.verify_token(token)
    assert not result.success
    assert result.status == 401
    assert result.error == "Token has been revoked"

    fresh = auth_service.login("author@example.com", "secret123")
    assert auth_service.verify_token(fresh.data["idToken"]).success


def test_logout_unknown_user(auth_service):
    result = auth_service.logout("uid-unknown")
    assert not result.success
    assert result.status == 404


@pytest.mark.parametrize("account_state, message", [
    ("disabled", "User account is disabled"),
    ("deleted", "User not found"),
])
def test_verify_token_for_unusable_account(auth_service, fake_auth, author, account_state, message):
    token, profile = author
    getattr(fake_auth, account_state).add(profile.uid)

    result = auth_service.verify_token(token)

    assert (result.success, result.status, result.error) == (False, 401, message)


def provider_backed_service(fake_db, fake_auth, api_key="web-key", response=None, error=None):
    session = MagicMock()
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = response
    identity_client = IdentityToolkitClient(api_key, session=session)
    return AuthService(AuthRepository(fake_db, fake_auth, identity_client))


def test_missing_api_key_is_a_server_error(fake_db, fake_auth):
    service = provider_backed_service(fake_db, fake_auth, api_key=None)

    for result in (service.signup("a@example.com", "secret123"), service.login("a@example.com", "secret123")):
        assert (result.success, result.status) == (False, 500)
        assert result.error == "Firebase API key not configured"


def test_unreachable_provider_is_a_server_error(fake_db, fake_auth):
    service = provider_backed_service(fake_db, fake_auth, error=requests.ConnectionError("down"))

    assert service.signup("a@example.com", "secret123").status == 500
    assert service.login("a@example.com", "secret123").status == 500


def test_provider_outage_vs_rejection(fake_db, fake_auth):
    outage = MagicMock(ok=False, status_code=503)
    outage.json.return_value = {"error": {"message": "UNAVAILABLE"}}
    service = provider_backed_service(fake_db, fake_auth, response=outage)
    assert service.login("a@example.com", "secret123").status == 500

    rejected = MagicMock(ok=False, status_code=400)
    rejected.json.return_value = {"error": {"message": "INVALID_LOGIN_CREDENTIALS"}}
    service = provider_backed_service(fake_db, fake_auth, response=rejected)
    result = service.login("a@example.com", "secret123")
    assert (result.status, result.error) == (401, "INVALID_LOGIN_CREDENTIALS")
    assert service.signup("a@example.com", "secret123").status == 400
