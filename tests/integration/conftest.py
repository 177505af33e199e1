"""Integration test fixtures: identities and API helpers."""
from uuid import uuid4

import pytest

PASSWORD = "correct-horse-battery"


def anon_headers(user_id=None, **extra):
    headers = {"x-user-uuid": str(user_id or uuid4())}
    headers.update(extra)
    return headers


def bearer_headers(token, **extra):
    headers = {"Authorization": f"Bearer {token}"}
    headers.update(extra)
    return headers


def create_reading(client, headers, question="test question", cards=3, **body):
    response = client.post(
        "/api/v1/reading",
        json={"question": question, "cards": cards, **body},
        headers=headers,
    )
    assert response.status_code == 200, response.get_json()
    return response.get_json()


def signup(client, user_id=None, email="ana@example.com", name="Ana", password=PASSWORD):
    """Sign up ``user_id`` (a fresh anonymous id by default); returns the response body."""
    response = client.post(
        "/api/v1/user",
        json={
            "email": email,
            "name": name,
            "password": password,
            "selfDescription": "curious",
        },
        headers=anon_headers(user_id),
    )
    assert response.status_code == 201, response.get_json()
    return response.get_json()


@pytest.fixture
def anon_id():
    return uuid4()


@pytest.fixture
def headers(anon_id):
    return anon_headers(anon_id)
