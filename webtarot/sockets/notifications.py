"""
Interpretation completion notifications over Socket.IO.

Clients connect to the notify namespace, then emit ``subscribe`` with the
id of one of their readings. When that reading reaches a terminal state
the server emits ``done`` with ``{"done": {"uuid": "..."}}``.
"""
import logging
import threading
from typing import Any, Dict, Optional, Set
from uuid import UUID

from flask import current_app, request, session

from webtarot.domain.user import CurrentUser
from webtarot.errors import AppError
from webtarot.middleware.auth import resolve_current_user
from webtarot.services.broadcaster import Subscription

logger = logging.getLogger(__name__)

NAMESPACE = "/api/v1/interpretation/notify"
RELAY_POLL_SECONDS = 1.0
SESSION_KEY = "notify"


class ConnectionState:
    """Identity, bus subscription and watched reading ids of one socket."""

    def __init__(self, user: CurrentUser, subscription: Subscription):
        self.user = user
        self.subscription = subscription
        self._lock = threading.Lock()
        self._watched: Set[UUID] = set()

    def watch(self, reading_id: UUID) -> None:
        with self._lock:
            self._watched.add(reading_id)

    def take(self, reading_id: UUID) -> bool:
        """Stop watching ``reading_id``; True if it was watched."""
        with self._lock:
            if reading_id in self._watched:
                self._watched.discard(reading_id)
                return True
            return False


def subscription_id(payload: Any) -> Optional[UUID]:
    """Reading id from ``{"subscribe": {"uuid": ...}}`` or ``{"uuid": ...}``."""
    if not isinstance(payload, dict):
        return None
    inner = payload.get("subscribe", payload)
    if not isinstance(inner, dict):
        return None
    try:
        return UUID(str(inner.get("uuid")))
    except ValueError:
        return None


def done_message(reading_id: UUID) -> Dict[str, Any]:
    return {"done": {"uuid": str(reading_id)}}


def register_socket_handlers(socketio) -> None:
    """
    Attach the notify namespace handlers to ``socketio``.

    Per-connection state lives in the Socket.IO session of that
    connection, so it is created on connect and dropped on disconnect.
    """

    def relay(sid: str, state: ConnectionState) -> None:
        subscription = state.subscription
        while not subscription.closed:
            event = subscription.get(timeout=RELAY_POLL_SECONDS)
            if event is None or not event.is_terminal:
                continue
            if not state.take(event.id):
                continue
            try:
                socketio.emit("done", done_message(event.id), to=sid, namespace=NAMESPACE)
            except Exception:
                logger.exception(f"Relay emit to {sid} failed, dropping connection")
                subscription.close()
                socketio.server.disconnect(sid, namespace=NAMESPACE)
        logger.debug(f"Relay for {sid} stopped")

    @socketio.on("connect", namespace=NAMESPACE)
    def on_connect(auth=None):
        auth = auth if isinstance(auth, dict) else {}
        token = auth.get("token")
        try:
            user = resolve_current_user(
                anonymous_id=auth.get("userId"),
                authorization=f"Bearer {token}" if token else None,
            )
        except AppError as e:
            logger.info(f"Rejected notify connection: {e}")
            return False

        interpretation_service = current_app.container.interpretation_service()
        state = ConnectionState(user, interpretation_service.subscribe())
        session[SESSION_KEY] = state
        socketio.start_background_task(relay, request.sid, state)
        logger.debug(f"Notify connection {request.sid} for user {user.id}")
        return True

    @socketio.on("disconnect", namespace=NAMESPACE)
    def on_disconnect(*args):
        state = session.pop(SESSION_KEY, None)
        if state is not None:
            state.subscription.close()

    @socketio.on("subscribe", namespace=NAMESPACE)
    def on_subscribe(payload=None):
        state = session.get(SESSION_KEY)
        if state is None or state.subscription.closed:
            return

        reading_id = subscription_id(payload)
        if reading_id is None:
            logger.debug(f"Ignoring malformed subscribe from {request.sid}")
            return

        interpretation_service = current_app.container.interpretation_service()
        current = interpretation_service.get_interpretation(reading_id)
        if current is None or current.reading.user_id != state.user.id:
            logger.debug(f"Ignoring subscribe to {reading_id} from {request.sid}")
            return

        state.watch(reading_id)
        # The worker may have finished before the id was watched.
        latest = interpretation_service.get_interpretation(reading_id)
        if latest is not None and latest.is_terminal:
            interpretation_service.renotify(reading_id)
