"""Tests for UserService."""
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from webtarot.domain.user import AnonymousUser
from webtarot.errors import Forbidden, NotFound
from webtarot.services.user_service import UserService


class TestUpdateProfile:
    """Tests for UserService.update_profile()."""

    def setup_method(self):
        self.user_repo = MagicMock()
        self.token_repo = MagicMock()
        self.service = UserService(self.user_repo, self.token_repo)
        self.current = SimpleNamespace(
            id=uuid4(), is_authenticated=True, access_token=SimpleNamespace(id=3)
        )

    def test_anonymous_is_forbidden(self):
        with pytest.raises(Forbidden):
            self.service.update_profile(AnonymousUser(id=uuid4()), "Ana", "")

        self.user_repo.update_profile.assert_not_called()

    def test_updates_profile(self):
        user = MagicMock()
        token = MagicMock()
        self.user_repo.find_by_id.return_value = user
        self.token_repo.find_by_id.return_value = token

        result = self.service.update_profile(self.current, "Bia", "new me")

        self.user_repo.update_profile.assert_called_once_with(user, "Bia", "new me")
        user.to_identity.assert_called_once_with(token)
        assert result == user.to_identity.return_value

    def test_missing_user(self):
        self.user_repo.find_by_id.return_value = None

        with pytest.raises(NotFound):
            self.service.update_profile(self.current, "Bia", "")
