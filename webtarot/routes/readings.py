"""Reading creation routes."""
from flask import Blueprint, current_app, g, jsonify, request
from marshmallow import ValidationError

from webtarot.domain.reading import perform_reading, reading_from_cards
from webtarot.errors import ValidateError
from webtarot.extensions import limiter
from webtarot.middleware.auth import require_user
from webtarot.schemas.reading_schemas import (
    CreateInterpretationRequestSchema,
    CreateReadingRequestSchema,
    CreateReadingResponseSchema,
)

# Create blueprint
readings_bp = Blueprint("readings", __name__, url_prefix="/api/v1")

# Initialize schemas
create_reading_schema = CreateReadingRequestSchema()
create_interpretation_schema = CreateInterpretationRequestSchema()
create_reading_response_schema = CreateReadingResponseSchema()


def load_body(schema):
    """Validate the JSON body against ``schema``; raise ValidateError on failure."""
    try:
        return schema.load(request.get_json(silent=True) or {})
    except ValidationError as err:
        raise ValidateError(str(err.messages))


@readings_bp.route("/reading", methods=["POST"])
@require_user
@limiter.limit("30 per minute")
def create_reading():
    """
    Shuffle, draw and queue an interpretation.

    ---
    Request body:
        {
            "question": "Will it work out?",
            "cards": 3,
            "context": "",
            "backend": "ChatGPT"
        }

    Returns:
        200: {
            "shuffledTimes": 4211,
            "cards": [{"arcana": {"major": {"name": "fool"}}, "flipped": false}, ...],
            "interpretationId": "uuid-here"
        }
        400: Invalid body
        401: No identity
    """
    data = load_body(create_reading_schema)

    reading = perform_reading(
        question=data["question"],
        card_count=data["cards"],
        context=data["context"],
        backend=data["backend"],
        user=g.user,
    )
    interpretation_service = current_app.container.interpretation_service()
    interpretation_service.request_interpretation(reading, g.locale, g.user)

    return jsonify(create_reading_response_schema.dump(reading)), 200


@readings_bp.route("/interpretation", methods=["POST"])
@require_user
@limiter.limit("30 per minute")
def create_interpretation():
    """
    Queue an interpretation for cards drawn by the client.

    Returns:
        200: {"interpretationId": "uuid-here"}
    """
    data = load_body(create_interpretation_schema)

    reading = reading_from_cards(
        question=data["question"],
        cards=data["cards"],
        context=data["context"],
        user=g.user,
    )
    interpretation_service = current_app.container.interpretation_service()
    interpretation_service.request_interpretation(reading, g.locale, g.user)

    return jsonify({"interpretationId": str(reading.id)}), 200
