# routes/teams.py
from flask import Blueprint, request, jsonify

from budgetbrew.auth_middleware import optional_auth, resolve_user_ref
from budgetbrew.services import teams

teams_bp = Blueprint("teams", __name__)


def _body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@teams_bp.get("/teams")
def list_teams():
    """Teams sorted by average member FinScore."""
    return jsonify(teams.list_teams()), 200


@teams_bp.post("/teams")
def create_team():
    data = _body()
    return jsonify(teams.create_team(data.get("name"), data.get("userId"))), 200


@teams_bp.post("/teams/join")
def join_team():
    data = _body()
    return jsonify(teams.join_team(data.get("code"), data.get("userId"))), 200


@teams_bp.post("/teams/leave")
def leave_team():
    data = _body()
    return jsonify(teams.leave_team(data.get("userId"))), 200


@teams_bp.get("/user/<user_id>/team")
@optional_auth
def user_team(user_id):
    return jsonify(teams.team_for_user(resolve_user_ref(user_id))), 200
