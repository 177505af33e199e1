"""Locale negotiation for incoming requests."""
from flask import current_app, g, request
from webtarot.i18n import FALLBACK_LOCALE, negotiate_locale


def request_locale() -> str:
    """Locale of the current request from X-Locale / Accept-Language."""
    return negotiate_locale(
        request.headers.get("X-Locale"),
        request.headers.get("Accept-Language"),
        current_app.config.get("DEFAULT_LOCALE", FALLBACK_LOCALE),
    )


def init_locale(app) -> None:
    """Store the negotiated locale on ``g.locale`` before every request."""

    @app.before_request
    def set_request_locale():
        g.locale = request_locale()
