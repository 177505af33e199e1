"""Statistics route."""
from flask import Blueprint, current_app, jsonify

from webtarot.extensions import limiter

stats_bp = Blueprint("stats", __name__, url_prefix="/api/v1")


@stats_bp.route("/stats", methods=["GET"])
@limiter.limit("20 per minute")
def get_stats():
    """Draw statistics over every non-deleted reading. No identity required."""
    stats_service = current_app.container.stats_service()
    return jsonify(stats_service.get_stats().to_dict()), 200
