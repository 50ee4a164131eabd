"""Owner password checks and session tokens."""

from __future__ import annotations

from datetime import timedelta

import pytest

from myvoice.config.settings import settings
from myvoice.utils import AuthenticationError, create_owner_token, decode_owner_token, is_authorized


def test_password_comparison():
    assert is_authorized(settings.security.owner_password.get_secret_value())
    assert not is_authorized("not-the-password")
    assert not is_authorized(None)
    assert not is_authorized("")


def test_token_round_trip_and_expiry():
    payload = decode_owner_token(create_owner_token())
    assert payload.sub == "owner"

    expired = create_owner_token(expires_delta=timedelta(seconds=-5))
    with pytest.raises(AuthenticationError):
        decode_owner_token(expired)

    with pytest.raises(AuthenticationError):
        decode_owner_token("garbage")


def test_login_issues_token_usable_as_owner(client, owner_headers):
    response = client.post(
        "/api/owner/login",
        json={"password": owner_headers["X-Owner-Password"]},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["tokenType"] == "bearer"
    assert body["expiresIn"] == settings.security.token_expires_minutes * 60

    bearer = {"Authorization": f"Bearer {body['accessToken']}"}
    assert client.get("/api/owner/session", headers=bearer).json() == {"owner": True}
    created = client.post("/api/demos", json={"demo": {"name": "Via token"}}, headers=bearer)
    assert created.status_code == 201


def test_login_rejects_wrong_password(client):
    response = client.post("/api/owner/login", json={"password": "nope"})
    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid password"}


def test_session_rejects_bad_token(client):
    response = client.get("/api/owner/session", headers={"Authorization": "Bearer forged"})
    assert response.status_code == 401
