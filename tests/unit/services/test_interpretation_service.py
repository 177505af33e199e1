"""Tests for InterpretationService."""
from contextlib import contextmanager
from datetime import datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from tests.fixtures.fakes import FakeExplainService, InlineExecutor
from webtarot.domain.card import Arcana, Card
from webtarot.domain.interpretation import Done, Failed, Pending
from webtarot.domain.reading import Reading
from webtarot.domain.user import AnonymousUser
from webtarot.models.enums import InterpretationBackend, MajorArcana
from webtarot.services.broadcaster import Broadcaster
from webtarot.services.interpretation_service import (
    DEFAULT_HISTORY_LIMIT,
    InterpretationService,
    clamp_history_limit,
)
from webtarot.services.llm_adapter import MissingApiKey, UnexpectedError


def make_reading(user_id=None, **overrides):
    values = dict(
        id=uuid4(),
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        question="Will it work?",
        shuffled_times=5,
        cards=[Card(Arcana.of_major(MajorArcana.SUN))],
        user_id=user_id,
    )
    values.update(overrides)
    return Reading(**values)


@pytest.fixture
def repo():
    repository = MagicMock()
    repository.update.side_effect = lambda interpretation: interpretation
    return repository


@pytest.fixture
def explain():
    return FakeExplainService()


@pytest.fixture
def executor():
    return InlineExecutor(hold=True)


@pytest.fixture
def broadcaster():
    return Broadcaster()


@pytest.fixture
def activity_logger():
    return MagicMock()


@pytest.fixture
def service(repo, explain, broadcaster, executor, activity_logger):
    @contextmanager
    def worker_repository(app):
        yield repo

    return InterpretationService(
        reading_repository=repo,
        explain_service=explain,
        broadcaster=broadcaster,
        executor=executor,
        activity_logger=activity_logger,
        worker_repository=worker_repository,
    )


class TestRequestInterpretation:
    """Tests for InterpretationService.request_interpretation()."""

    def test_stores_pending_before_dispatch(self, service, repo, executor):
        reading = make_reading(user_id=uuid4())

        result = service.request_interpretation(reading, "en", AnonymousUser(id=reading.user_id))

        assert isinstance(result, Pending)
        repo.insert.assert_called_once_with(result)
        assert len(executor.queued) == 1
        repo.update.assert_not_called()

    def test_worker_completes_and_publishes(
        self, service, repo, executor, broadcaster, explain, activity_logger
    ):
        subscription = broadcaster.subscribe()
        reading = make_reading(user_id=uuid4(), context="  ", user_name="Ana")

        service.request_interpretation(reading, "pt", AnonymousUser(id=reading.user_id))
        executor.run_pending()

        stored = repo.update.call_args.args[0]
        assert isinstance(stored, Done)
        assert stored.text == explain.text
        assert subscription.get(timeout=0.1) == stored

        call = explain.calls[0]
        assert call["context"] is None
        assert call["user_name"] == "Ana"
        assert call["backend"] == InterpretationBackend.CHATGPT
        assert call["locale"] == "pt"

        metric = activity_logger.log_interpretation_request.call_args.kwargs
        assert metric["success"] is True
        assert metric["card_count"] == 1

    def test_worker_uses_requested_backend(self, service, executor, explain):
        reading = make_reading(backend=InterpretationBackend.GEMINI)

        service.request_interpretation(reading, "en", AnonymousUser(id=uuid4()))
        executor.run_pending()

        assert explain.calls[0]["backend"] == InterpretationBackend.GEMINI

    def test_backend_error_becomes_localized_failure(
        self, service, repo, executor, explain, activity_logger
    ):
        explain.error = MissingApiKey("no key")
        reading = make_reading()

        service.request_interpretation(reading, "en", AnonymousUser(id=uuid4()))
        executor.run_pending()

        stored = repo.update.call_args.args[0]
        assert isinstance(stored, Failed)
        assert stored.error == MissingApiKey("no key").localize("en")
        metric = activity_logger.log_interpretation_request.call_args.kwargs
        assert metric["success"] is False

    def test_unexpected_backend_error_still_fails_and_publishes(
        self, service, repo, executor, explain, broadcaster, activity_logger
    ):
        explain.error = ValueError("Error rendering prompt 'reading'")
        subscription = broadcaster.subscribe()

        service.request_interpretation(make_reading(), "pt", AnonymousUser(id=uuid4()))
        executor.run_pending()

        stored = repo.update.call_args.args[0]
        assert isinstance(stored, Failed)
        assert stored.error == UnexpectedError("boom").localize("pt")
        assert subscription.get(timeout=0.1) == stored
        metric = activity_logger.log_interpretation_request.call_args.kwargs
        assert metric["success"] is False

    def test_worker_crash_is_logged_not_raised(self, service, repo, executor, broadcaster):
        repo.update.side_effect = RuntimeError("database went away")
        subscription = broadcaster.subscribe()

        service.request_interpretation(make_reading(), "en", AnonymousUser(id=uuid4()))
        executor.run_pending()

        assert subscription.get(timeout=0.05) is None

    def test_publishes_stored_state(self, service, repo, executor, broadcaster):
        """The event carries the state as stored, including a newer owner."""
        owner = uuid4()
        repo.update.side_effect = lambda interpretation: interpretation.with_owner(owner)
        subscription = broadcaster.subscribe()

        service.request_interpretation(make_reading(), "en", AnonymousUser(id=uuid4()))
        executor.run_pending()

        assert subscription.get(timeout=0.1).reading.user_id == owner


class TestOwnership:
    """Tests for assignment, reassignment and deletion."""

    def test_assign_unowned_reading(self, service, repo):
        reading = make_reading()
        user_id = uuid4()
        repo.get.side_effect = [Pending(reading), Pending(reading.with_owner(user_id))]
        repo.claim_unowned.return_value = 1

        result = service.assign_to_user(reading.id, user_id)

        repo.claim_unowned.assert_called_once_with(reading.id, user_id)
        assert result.reading.user_id == user_id

    def test_assign_owned_reading_is_noop(self, service, repo):
        owner = uuid4()
        reading = make_reading(user_id=owner)
        repo.get.return_value = Pending(reading)

        result = service.assign_to_user(reading.id, uuid4())

        repo.claim_unowned.assert_not_called()
        assert result.reading.user_id == owner

    def test_assign_unknown_reading(self, service, repo):
        repo.get.return_value = None

        assert service.assign_to_user(uuid4(), uuid4()) is None

    def test_reassign_returns_count(self, service, repo):
        repo.reassign_owner.return_value = 3
        anon_id, user_id = uuid4(), uuid4()

        assert service.reassign_from_anon_to_user(anon_id, user_id) == 3
        repo.reassign_owner.assert_called_once_with(anon_id, user_id)

    def test_delete_owned(self, service, repo):
        repo.soft_delete.return_value = True

        assert service.delete_interpretation(uuid4(), uuid4()) is True

    def test_delete_not_owned_returns_none(self, service, repo):
        repo.soft_delete.return_value = False

        assert service.delete_interpretation(uuid4(), uuid4()) is None


class TestHistory:
    """Tests for paged history."""

    @pytest.mark.parametrize(
        "limit,expected",
        [(None, DEFAULT_HISTORY_LIMIT), (0, 1), (-5, 1), (1, 1), (50, 50), (1000, 200)],
    )
    def test_clamp_history_limit(self, limit, expected):
        assert clamp_history_limit(limit) == expected

    def test_history_passes_clamped_limit(self, service, repo):
        user_id = uuid4()
        before = datetime(2026, 1, 1, tzinfo=timezone.utc)

        service.get_history_for_user_paged(user_id, before=before, limit=500)

        repo.find_by_owner.assert_called_once_with(user_id, before, 200)


class TestRenotify:
    """Tests for renotify() and subscribe()."""

    def test_renotify_publishes_current_state(self, service, repo):
        done = Pending(make_reading()).complete("text")
        repo.get.return_value = done
        subscription = service.subscribe()

        assert service.renotify(done.id) == done
        assert subscription.get(timeout=0.1) == done

    def test_renotify_unknown_publishes_nothing(self, service, repo):
        repo.get.return_value = None
        subscription = service.subscribe()

        assert service.renotify(uuid4()) is None
        assert subscription.get(timeout=0.01) is None
