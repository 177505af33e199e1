"""Tests for user request schemas."""
import pytest
from marshmallow import ValidationError

from webtarot.schemas.user_schemas import (
    LoginRequestSchema,
    SignupRequestSchema,
    UpdateUserRequestSchema,
)


class TestSignupRequestSchema:
    """Tests for SignupRequestSchema."""

    def test_load_maps_self_description(self):
        data = SignupRequestSchema().load(
            {
                "email": "ana@example.com",
                "name": "Ana",
                "password": "password123",
                "selfDescription": "curious",
            }
        )

        assert data["self_description"] == "curious"

    def test_self_description_defaults_to_empty(self):
        data = SignupRequestSchema().load(
            {"email": "ana@example.com", "name": "Ana", "password": "password123"}
        )

        assert data["self_description"] == ""

    def test_rejects_invalid_email(self):
        with pytest.raises(ValidationError) as exc_info:
            SignupRequestSchema().load(
                {"email": "not-an-email", "name": "Ana", "password": "password123"}
            )

        assert "email" in exc_info.value.messages

    def test_rejects_short_password(self):
        with pytest.raises(ValidationError) as exc_info:
            SignupRequestSchema().load(
                {"email": "ana@example.com", "name": "Ana", "password": "short"}
            )

        assert "password" in exc_info.value.messages


class TestLoginRequestSchema:
    """Tests for LoginRequestSchema."""

    def test_requires_both_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            LoginRequestSchema().load({})

        assert set(exc_info.value.messages) == {"email", "password"}


class TestUpdateUserRequestSchema:
    """Tests for UpdateUserRequestSchema."""

    def test_ignores_email(self):
        data = UpdateUserRequestSchema().load(
            {"name": "Bia", "selfDescription": "new", "email": "x@example.com"}
        )

        assert data == {"name": "Bia", "self_description": "new"}
