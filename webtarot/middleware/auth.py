"""Identity decorators."""
from functools import wraps
from typing import Any, Callable, Optional

from flask import current_app, g, request

ANONYMOUS_ID_HEADER = "x-user-uuid"
UUID_LENGTH = 36
DEFAULT_CLIENT_IP = "127.0.0.1"


def client_ip() -> str:
    """First X-Forwarded-For hop, else the peer address."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded.strip():
        return forwarded.split(",")[0].strip()
    return request.remote_addr or DEFAULT_CLIENT_IP


def anonymous_id_from_request() -> Optional[str]:
    """
    Anonymous id from ``x-user-uuid``.

    Browsers cannot set headers on WebSocket handshakes, so a 36-character
    ``Sec-WebSocket-Protocol`` value is accepted as well.
    """
    value = request.headers.get(ANONYMOUS_ID_HEADER)
    if value:
        return value
    protocol = request.headers.get("Sec-WebSocket-Protocol", "").strip()
    if len(protocol) == UUID_LENGTH:
        return protocol
    return None


def resolve_current_user(
    anonymous_id: Optional[str] = None,
    authorization: Optional[str] = None,
):
    """
    Resolve the caller's identity for the current request.

    Explicit arguments override the request headers (used by the socket
    handshake, where credentials may arrive in the auth payload).

    Raises:
        Unauthorized: If no valid identity is presented
        ValidateError: If the anonymous id is malformed
    """
    auth_service = current_app.container.auth_service()
    return auth_service.resolve(
        anonymous_id=anonymous_id or anonymous_id_from_request(),
        authorization=authorization or request.headers.get("Authorization"),
        ip=client_ip(),
        user_agent=request.headers.get("User-Agent", ""),
    )


def require_user(fn: Callable) -> Callable:
    """
    Decorator resolving the caller into ``g.user``.

    Usage:
        @readings_bp.route("/reading", methods=["POST"])
        @require_user
        def create_reading():
            user = g.user
            ...

    Errors propagate to the AppError handler (401/400).
    """

    @wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        g.user = resolve_current_user()
        return fn(*args, **kwargs)

    return wrapper
