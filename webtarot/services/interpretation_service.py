"""Interpretation store and dispatcher."""
import logging
import time
from concurrent.futures import Executor
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, ContextManager, List, Optional
from uuid import UUID

from flask import current_app, has_app_context

from webtarot.domain.interpretation import Done, Interpretation, Pending
from webtarot.domain.reading import Reading
from webtarot.domain.user import CurrentUser
from webtarot.extensions import db
from webtarot.models.enums import InterpretationBackend
from webtarot.repositories.reading_repository import ReadingRepository
from webtarot.services.activity_logger import ActivityLogger
from webtarot.services.broadcaster import Broadcaster, Subscription
from webtarot.services.explain_service import ExplainService
from webtarot.services.llm_adapter import ExplainError, UnexpectedError

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 30
MIN_HISTORY_LIMIT = 1
MAX_HISTORY_LIMIT = 200


def clamp_history_limit(limit: Optional[int]) -> int:
    """Default to 30 and keep the page size within [1, 200]."""
    if limit is None:
        return DEFAULT_HISTORY_LIMIT
    return max(MIN_HISTORY_LIMIT, min(MAX_HISTORY_LIMIT, limit))


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value


@contextmanager
def app_worker_repository(app):
    """ReadingRepository bound to a fresh session in a new app context."""
    with app.app_context():
        yield ReadingRepository(db.session)


class InterpretationService:
    """
    Owns the interpretation lifecycle of every reading.

    ``request_interpretation`` stores the reading as Pending and returns;
    the backend call runs on the executor. When it finishes, the terminal
    state is persisted first and then published on the broadcaster.
    """

    def __init__(
        self,
        reading_repository: ReadingRepository,
        explain_service: ExplainService,
        broadcaster: Broadcaster,
        executor: Executor,
        activity_logger: ActivityLogger,
        worker_repository: Callable[[object], ContextManager[ReadingRepository]] = app_worker_repository,
    ):
        self._repo = reading_repository
        self._explain = explain_service
        self._broadcaster = broadcaster
        self._executor = executor
        self._activity = activity_logger
        self._worker_repository = worker_repository

    def request_interpretation(
        self, reading: Reading, locale: str, user: CurrentUser
    ) -> Pending:
        """
        Persist the reading as Pending and dispatch the backend call.

        Returns as soon as the Pending state is stored; no handle to the
        background task is kept.

        Args:
            reading: Freshly created reading
            locale: Language for the prompt and for any error message
            user: Requesting identity

        Returns:
            The stored Pending interpretation
        """
        pending = Pending(reading)
        self._repo.insert(pending)
        logger.info(
            f"Reading {reading.id} pending ({len(reading.cards)} cards, user={user.id})"
        )

        app = current_app._get_current_object() if has_app_context() else None
        self._executor.submit(self._run_worker, app, pending, locale)
        return pending

    def _run_worker(self, app, pending: Pending, locale: str) -> None:
        try:
            with self._worker_repository(app) as repository:
                self._interpret(repository, pending, locale)
        except Exception:
            logger.exception(f"Interpretation worker for reading {pending.id} crashed")

    def _interpret(
        self, repository: ReadingRepository, pending: Pending, locale: str
    ) -> Interpretation:
        reading = pending.reading
        backend = reading.backend or InterpretationBackend.CHATGPT

        started = time.monotonic()
        try:
            text = self._explain.explain(
                question=reading.question,
                context=_blank_to_none(reading.context),
                cards=reading.cards,
                user_name=_blank_to_none(reading.user_name),
                user_self_description=_blank_to_none(reading.user_self_description),
                backend=backend,
                locale=locale,
            )
            outcome: Interpretation = pending.complete(text)
        except ExplainError as e:
            logger.warning(f"Interpretation of reading {reading.id} failed: {e!r}")
            outcome = pending.fail(e.localize(locale))
        except Exception as e:
            logger.exception(f"Unexpected error interpreting reading {reading.id}")
            outcome = pending.fail(UnexpectedError(str(e)).localize(locale))
        elapsed = time.monotonic() - started

        self._activity.log_interpretation_request(
            success=isinstance(outcome, Done),
            card_count=len(reading.cards),
            elapsed_seconds=elapsed,
            user_id=str(reading.user_id) if reading.user_id else None,
        )

        stored = repository.update(outcome) or outcome
        self._broadcaster.publish(stored)
        return stored

    def get_interpretation(self, reading_id: UUID) -> Optional[Interpretation]:
        """Current state of a reading, None if unknown."""
        return self._repo.get(reading_id)

    def assign_to_user(self, reading_id: UUID, user_id: UUID) -> Optional[Interpretation]:
        """
        Give an ownerless reading to ``user_id``.

        Readings that already have an owner are returned unchanged; when
        two callers race for the same reading the first claim wins.

        Returns:
            Current state after the claim, None if the reading is unknown
        """
        current = self._repo.get(reading_id)
        if current is None or current.reading.user_id is not None:
            return current
        if self._repo.claim_unowned(reading_id, user_id):
            logger.info(f"Reading {reading_id} assigned to {user_id}")
        return self._repo.get(reading_id)

    def reassign_from_anon_to_user(self, anon_id: UUID, user_id: UUID) -> int:
        """
        Move every reading of an anonymous id to an account.

        Raises:
            InternalError: If the update fails; callers must abort login
        """
        count = self._repo.reassign_owner(anon_id, user_id)
        logger.info(f"Reassigned {count} reading(s) from {anon_id} to {user_id}")
        return count

    def get_history_for_user_paged(
        self,
        user_id: UUID,
        before: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Interpretation]:
        """A page of the user's readings, newest first."""
        return self._repo.find_by_owner(user_id, before, clamp_history_limit(limit))

    def delete_interpretation(self, reading_id: UUID, user_id: UUID) -> Optional[bool]:
        """
        Soft-delete a reading owned by ``user_id``.

        Returns:
            True when deleted, None when the reading is missing or not owned
        """
        if self._repo.soft_delete(reading_id, user_id):
            logger.info(f"Reading {reading_id} deleted by {user_id}")
            return True
        return None

    def get_all_interpretations(self) -> List[Interpretation]:
        """Every non-deleted interpretation (statistics only)."""
        return self._repo.list_all_non_deleted()

    def renotify(self, reading_id: UUID) -> Optional[Interpretation]:
        """Publish the current state of a reading again."""
        current = self._repo.get(reading_id)
        if current is not None:
            self._broadcaster.publish(current)
        return current

    def subscribe(self) -> Subscription:
        """Subscribe to every future state change."""
        return self._broadcaster.subscribe()
