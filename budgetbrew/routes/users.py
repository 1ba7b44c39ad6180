# routes/users.py
"""
User profile, leaderboard, ingredients, activity and metrics routes.
Any <user_id> may be "me" to address the caller.
"""
from flask import Blueprint, request, jsonify

from budgetbrew.auth_middleware import optional_auth, resolve_user_ref
from budgetbrew.errors import ValidationError
from budgetbrew.services import users
from budgetbrew.services import dashboard

users_bp = Blueprint("users", __name__)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@users_bp.get("/user/me")
@optional_auth
def current_user():
    """Current user with FinScore; verified Firebase users are created on first contact."""
    return jsonify(users.get_current_user(request.user)), 200


@users_bp.get("/user/<user_id>")
@optional_auth
def user_by_id(user_id):
    return jsonify(users.get_user(resolve_user_ref(user_id))), 200


@users_bp.get("/users")
def leaderboard():
    """
    GET /api/users?limit=10

    All users sorted by FinScore (descending), each with teamName.
    """
    limit = request.args.get("limit")
    if limit is not None:
        try:
            limit = int(limit)
        except ValueError:
            raise ValidationError("limit must be an integer") from None
    return jsonify(users.leaderboard(limit)), 200


@users_bp.get("/user/<user_id>/ingredients")
@optional_auth
def get_ingredients(user_id):
    return jsonify(users.get_ingredients(resolve_user_ref(user_id))), 200


@users_bp.post("/user/<user_id>/ingredients")
@optional_auth
def set_ingredients(user_id):
    """
    Request body:
    {"ingredients": {"savings": 4, "knowledge": 1}}
    """
    data = _json_body()
    return jsonify(users.set_ingredients(resolve_user_ref(user_id), data.get("ingredients"))), 200


@users_bp.post("/user/<user_id>/activity")
@optional_auth
def record_activity(user_id):
    """
    Request body:
    {"activityType": "budget", "score": 85}

    Response:
    {"ingredients": {...}, "ingredientsAwarded": {"budget": 3, "savings": 1}}
    """
    data = _json_body()
    result = users.record_activity(resolve_user_ref(user_id), data.get("activityType"), data.get("score"))
    return jsonify(result), 200


@users_bp.put("/user/<user_id>/metrics")
@optional_auth
def update_metrics(user_id):
    """Update any of budgetAdherence / savingProgress / investmentPerformance (clamped to 0-100)."""
    return jsonify(users.update_metrics(resolve_user_ref(user_id), _json_body())), 200


@users_bp.get("/user/<user_id>/dashboard")
@optional_auth
def user_dashboard(user_id):
    return jsonify(dashboard.get_dashboard(resolve_user_ref(user_id))), 200
