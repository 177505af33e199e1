"""Integration tests for signup, login and profile updates."""
from uuid import uuid4

from tests.integration.conftest import (
    PASSWORD,
    anon_headers,
    bearer_headers,
    create_reading,
    signup,
)


class TestSignup:
    """Tests for POST /api/v1/user."""

    def test_signup_uses_anonymous_id(self, client, anon_id):
        body = signup(client, anon_id)

        user = body["user"]["authenticated"]
        assert user["id"] == str(anon_id)
        assert user["email"] == "ana@example.com"
        assert user["selfDescription"] == "curious"
        assert body["accessToken"].startswith("at-")
        assert "password" not in str(body)

    def test_duplicate_email(self, client):
        signup(client)

        response = client.post(
            "/api/v1/user",
            json={"email": "ana@example.com", "name": "Other", "password": PASSWORD},
            headers=anon_headers(),
        )

        assert response.status_code == 400

    def test_signup_while_authenticated_is_forbidden(self, client):
        token = signup(client)["accessToken"]

        response = client.post(
            "/api/v1/user",
            json={"email": "bia@example.com", "name": "Bia", "password": PASSWORD},
            headers=bearer_headers(token),
        )

        assert response.status_code == 403

    def test_signed_up_anonymous_id_is_rejected(self, client, anon_id):
        signup(client, anon_id)

        response = client.get("/api/v1/user", headers=anon_headers(anon_id))

        assert response.status_code == 401


class TestGetUser:
    """Tests for GET /api/v1/user."""

    def test_anonymous(self, client, anon_id):
        response = client.get("/api/v1/user", headers=anon_headers(anon_id))

        assert response.get_json() == {"anonymous": {"id": str(anon_id)}}

    def test_authenticated_records_client(self, client):
        token = signup(client)["accessToken"]

        response = client.get(
            "/api/v1/user",
            headers=bearer_headers(
                token, **{"User-Agent": "pytest-agent", "X-Forwarded-For": "10.1.2.3, 10.0.0.1"}
            ),
        )

        access_token = response.get_json()["authenticated"]["accessToken"]
        assert access_token["lastUserAgent"] == "pytest-agent"
        assert access_token["lastUserIp"] == "10.1.2.3"

    def test_unknown_token(self, client):
        response = client.get("/api/v1/user", headers=bearer_headers(f"at-{uuid4()}"))

        assert response.status_code == 401


class TestUpdateUser:
    """Tests for PATCH /api/v1/user."""

    def test_update_profile(self, client):
        token = signup(client)["accessToken"]

        response = client.patch(
            "/api/v1/user",
            json={"name": "Ana Maria", "selfDescription": "calm"},
            headers=bearer_headers(token),
        )

        assert response.status_code == 200
        user = response.get_json()["authenticated"]
        assert user["name"] == "Ana Maria"
        assert user["selfDescription"] == "calm"

    def test_new_readings_carry_updated_profile(self, client, explain_service):
        token = signup(client)["accessToken"]
        client.patch(
            "/api/v1/user",
            json={"name": "Ana Maria", "selfDescription": "calm"},
            headers=bearer_headers(token),
        )

        create_reading(client, bearer_headers(token))

        assert explain_service.calls[-1]["user_name"] == "Ana Maria"
        assert explain_service.calls[-1]["user_self_description"] == "calm"

    def test_anonymous_cannot_update(self, client, headers):
        response = client.patch(
            "/api/v1/user", json={"name": "Nobody"}, headers=headers
        )

        assert response.status_code == 403


class TestLogin:
    """Tests for POST /api/v1/login."""

    def test_login_moves_anonymous_readings(self, client):
        account_id = uuid4()
        signup(client, account_id)
        device = uuid4()
        reading_id = create_reading(client, anon_headers(device))["interpretationId"]

        response = client.post(
            "/api/v1/login",
            json={"email": "ana@example.com", "password": PASSWORD},
            headers=anon_headers(device),
        )

        assert response.status_code == 200
        body = response.get_json()
        assert body["user"]["authenticated"]["id"] == str(account_id)
        history = client.get(
            "/api/v1/interpretation/history", headers=bearer_headers(body["accessToken"])
        ).get_json()
        assert [item["Done"][0]["id"] for item in history] == [reading_id]
        assert client.get(
            "/api/v1/interpretation/history", headers=anon_headers(device)
        ).get_json() == []

    def test_wrong_password(self, client):
        signup(client)

        response = client.post(
            "/api/v1/login",
            json={"email": "ana@example.com", "password": "wrong-password"},
            headers=anon_headers(**{"X-Locale": "en"}),
        )

        assert response.status_code == 403
        assert response.get_json() == {"error": "Forbidden"}

    def test_login_while_authenticated(self, client):
        token = signup(client)["accessToken"]

        response = client.post(
            "/api/v1/login",
            json={"email": "ana@example.com", "password": PASSWORD},
            headers=bearer_headers(token),
        )

        assert response.status_code == 403

    def test_each_login_issues_new_token(self, client):
        first = signup(client)["accessToken"]

        second = client.post(
            "/api/v1/login",
            json={"email": "ana@example.com", "password": PASSWORD},
            headers=anon_headers(),
        ).get_json()["accessToken"]

        assert first != second
        assert client.get("/api/v1/user", headers=bearer_headers(first)).status_code == 200
        assert client.get("/api/v1/user", headers=bearer_headers(second)).status_code == 200
