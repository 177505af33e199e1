"""User account routes: signup, profile and login."""
from flask import Blueprint, current_app, g, jsonify, request

from webtarot.extensions import limiter
from webtarot.middleware.auth import client_ip, require_user
from webtarot.routes.readings import load_body
from webtarot.schemas.user_schemas import (
    LoginRequestSchema,
    SignupRequestSchema,
    UpdateUserRequestSchema,
)

# Create blueprint
users_bp = Blueprint("users", __name__, url_prefix="/api/v1")

# Initialize schemas
signup_schema = SignupRequestSchema()
login_schema = LoginRequestSchema()
update_user_schema = UpdateUserRequestSchema()


def _user_agent() -> str:
    return request.headers.get("User-Agent", "")


@users_bp.route("/user", methods=["POST"])
@require_user
@limiter.limit("5 per minute")
def signup():
    """
    Turn the caller's anonymous id into an account.

    ---
    Request body:
        {
            "email": "user@example.com",
            "name": "Ana",
            "password": "secret123",
            "selfDescription": "..."
        }

    Returns:
        201: {"accessToken": "at-...", "user": {"authenticated": {...}}}
        400: Invalid body or email already registered
        403: Caller is already authenticated
    """
    data = load_body(signup_schema)

    auth_service = current_app.container.auth_service()
    result = auth_service.signup(
        g.user,
        email=data["email"],
        name=data["name"],
        password=data["password"],
        self_description=data["self_description"],
        ip=client_ip(),
        user_agent=_user_agent(),
    )
    return jsonify(result.to_dict()), 201


@users_bp.route("/user", methods=["GET"])
@require_user
def get_user():
    """The caller's identity."""
    return jsonify(g.user.to_dict()), 200


@users_bp.route("/user", methods=["PATCH"])
@require_user
def update_user():
    """
    Update name and self-description.

    Returns:
        200: {"authenticated": {...}}
        403: Caller is anonymous
    """
    data = load_body(update_user_schema)

    user_service = current_app.container.user_service()
    user = user_service.update_profile(g.user, data["name"], data["self_description"])
    return jsonify(user.to_dict()), 200


@users_bp.route("/login", methods=["POST"])
@require_user
@limiter.limit("10 per minute")
def login():
    """
    Log in and adopt the anonymous caller's readings.

    Returns:
        200: {"accessToken": "at-...", "user": {"authenticated": {...}}}
        403: Already authenticated or invalid credentials
    """
    data = load_body(login_schema)

    auth_service = current_app.container.auth_service()
    result = auth_service.login(
        g.user,
        email=data["email"],
        password=data["password"],
        ip=client_ip(),
        user_agent=_user_agent(),
    )
    return jsonify(result.to_dict()), 200
