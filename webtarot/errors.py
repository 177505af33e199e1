"""Application error kinds surfaced to API clients."""
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class AppError(Exception):
    """
    Base class for client-observable errors.

    Each subclass carries an HTTP status code and an i18n message key.
    The handler registered in app.py renders the message in the request
    locale as {"error": "..."}.
    """

    status_code = 500
    message_key = "error.internal"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.message_key)
        self.detail = detail


class NotFound(AppError):
    """Requested entity does not exist."""

    status_code = 404
    message_key = "error.not_found"


class AlreadyExists(AppError):
    """Duplicate unique identity (email, user id)."""

    status_code = 400
    message_key = "error.already_exists"


class ValidateError(AppError):
    """Caller input was rejected."""

    status_code = 400
    message_key = "error.validate"


class Forbidden(AppError):
    """Action not permitted for the caller's identity state."""

    status_code = 403
    message_key = "error.forbidden"


class Unauthorized(AppError):
    """Missing or invalid identity."""

    status_code = 401
    message_key = "error.unauthorized"


class InternalError(AppError):
    """Opaque catch-all. Detail is logged, never returned to clients."""

    status_code = 500
    message_key = "error.internal"


def internal_with_log(message: str, exc: Optional[BaseException] = None) -> InternalError:
    """
    Log an internal failure with full context and return the opaque error.

    Args:
        message: Context for the server log
        exc: Underlying exception, if any

    Returns:
        InternalError ready to raise
    """
    if exc is not None:
        logger.error(f"{message}: {exc}", exc_info=exc)
    else:
        logger.error(message)
    return InternalError(message)
