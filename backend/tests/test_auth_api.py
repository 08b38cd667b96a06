"""Google login, logout, profile and account deletion."""

import pytest

from medtracker.api.routes import auth as auth_routes


@pytest.fixture
def google_claims(monkeypatch):
    """Replace Google id_token verification; tests mutate the returned claims."""
    claims = {
        "iss": "https://accounts.google.com",
        "sub": "google-sub-42",
        "email": "Resident@Example.com",
        "email_verified": True,
        "given_name": "Casey",
        "family_name": "Ng",
        "picture": "https://example.com/avatar.png",
    }

    def fake_verify(token, request, audience):
        if token != "valid-token":
            raise ValueError("Token used too late")
        return dict(claims)

    monkeypatch.setattr(auth_routes.google_id_token, "verify_oauth2_token", fake_verify)
    return claims


async def test_google_login_creates_user(client, google_claims):
    response = await client.post("/api/auth/google", json={"id_token": "valid-token"})

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert "access_token" in response.cookies

    me = await client.get("/api/auth/user", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    profile = me.json()
    assert profile["id"] == "google-sub-42"
    assert profile["email"] == "resident@example.com"
    assert profile["first_name"] == "Casey"


async def test_repeat_login_updates_profile(client, google_claims):
    await client.post("/api/auth/google", json={"id_token": "valid-token"})
    google_claims["given_name"] = "Cas"

    response = await client.post("/api/auth/google", json={"id_token": "valid-token"})
    token = response.json()["access_token"]

    me = await client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["first_name"] == "Cas"
    stats = await client.get("/api/user/stats", headers={"Authorization": f"Bearer {token}"})
    assert stats.status_code == 200


async def test_unverified_email_not_stored(client, google_claims):
    google_claims["email_verified"] = False

    response = await client.post("/api/auth/google", json={"id_token": "valid-token"})
    token = response.json()["access_token"]

    me = await client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] is None


async def test_invalid_token_rejected(client, google_claims):
    response = await client.post("/api/auth/google", json={"id_token": "forged"})
    assert response.status_code == 401


async def test_wrong_issuer_rejected(client, google_claims):
    google_claims["iss"] = "https://evil.example.com"

    response = await client.post("/api/auth/google", json={"id_token": "valid-token"})
    assert response.status_code == 401


async def test_logout_clears_cookie(client):
    response = await client.post("/api/auth/logout")

    assert response.status_code == 204
    set_cookie = response.headers["set-cookie"].lower()
    assert set_cookie.startswith("access_token=")
    assert "max-age=0" in set_cookie


async def test_delete_account(client, auth_headers, storage, user):
    await storage.create_note({"user_id": user.id, "title": "A", "content": "a"})

    response = await client.delete("/api/auth/user", headers=auth_headers)

    assert response.status_code == 204
    after = await client.get("/api/auth/user", headers=auth_headers)
    assert after.status_code == 401


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
