"""Interpretation lookup, history and deletion routes."""
from uuid import UUID

from flask import Blueprint, current_app, g, jsonify, request
from marshmallow import ValidationError

from webtarot.domain.interpretation import not_found_result
from webtarot.errors import NotFound, ValidateError
from webtarot.middleware.auth import require_user
from webtarot.schemas.reading_schemas import HistoryQuerySchema

# Create blueprint
interpretations_bp = Blueprint(
    "interpretations", __name__, url_prefix="/api/v1/interpretation"
)

history_query_schema = HistoryQuerySchema()


def _parse_uuid(value: str):
    try:
        return UUID(value)
    except ValueError:
        return None


@interpretations_bp.route("/history", methods=["GET"])
@require_user
def get_history():
    """
    List the caller's readings, newest first.

    Query params:
        before: RFC3339 timestamp; only readings created strictly earlier
        limit: page size, default 30, clamped to [1, 200]

    Returns:
        200: [{"Pending": {...}}, {"Done": [{...}, "text", "2026-..."]}, ...]
    """
    try:
        query = history_query_schema.load(request.args)
    except ValidationError as err:
        raise ValidateError(str(err.messages))

    interpretation_service = current_app.container.interpretation_service()
    history = interpretation_service.get_history_for_user_paged(
        g.user.id, before=query["before"], limit=query["limit"]
    )
    return jsonify([item.to_tagged_dict() for item in history]), 200


@interpretations_bp.route("/<reading_id>", methods=["GET"])
@require_user
def get_interpretation(reading_id: str):
    """
    Current state of a reading.

    Readings without an owner are assigned to the caller on first lookup.

    Returns:
        200: {"done": bool, "error": str, "interpretation": str,
              "reading": {...}, "interpretationDoneAt": str | null}
        404: Same shape with "reading": null
    """
    parsed = _parse_uuid(reading_id)
    if parsed is None:
        return jsonify(not_found_result(g.locale)), 404

    interpretation_service = current_app.container.interpretation_service()
    interpretation = interpretation_service.get_interpretation(parsed)
    if interpretation is None:
        return jsonify(not_found_result(g.locale)), 404

    if interpretation.reading.user_id is None:
        interpretation = (
            interpretation_service.assign_to_user(parsed, g.user.id) or interpretation
        )

    return jsonify(interpretation.to_result()), 200


@interpretations_bp.route("/<reading_id>", methods=["DELETE"])
@require_user
def delete_interpretation(reading_id: str):
    """
    Soft-delete one of the caller's readings.

    Returns:
        204: Deleted
        400: Malformed id
        404: Unknown or owned by someone else
    """
    parsed = _parse_uuid(reading_id)
    if parsed is None:
        raise ValidateError("invalid interpretation id")

    interpretation_service = current_app.container.interpretation_service()
    if interpretation_service.delete_interpretation(parsed, g.user.id) is None:
        raise NotFound("interpretation")

    return "", 204
