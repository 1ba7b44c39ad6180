# routes/potions.py
from flask import Blueprint, request, jsonify

from budgetbrew.auth_middleware import optional_auth, resolve_user_ref
from budgetbrew.services import potions

potions_bp = Blueprint("potions", __name__)


@potions_bp.get("/potions/recipes")
def recipes():
    return jsonify(potions.recipes()), 200


@potions_bp.get("/user/<user_id>/potions")
@optional_auth
def active_potions(user_id):
    """Active potions; expired ones are removed from the record on this read."""
    return jsonify(potions.active_potions(resolve_user_ref(user_id))), 200


@potions_bp.post("/user/<user_id>/potions/brew")
@optional_auth
def brew(user_id):
    """
    Request body:
    {"potionType": "challenge"}

    Errors:
    400 {"error": "Invalid potion type"}
    400 {"error": "Not enough savings ingredients", "required": 3, "have": 1}
    """
    data = request.get_json(silent=True)
    data = data if isinstance(data, dict) else {}
    return jsonify(potions.brew(resolve_user_ref(user_id), data.get("potionType"))), 200
