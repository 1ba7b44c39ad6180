# routes/expenses.py
from flask import Blueprint, request, jsonify

from budgetbrew.auth_middleware import optional_auth, resolve_user_ref
from budgetbrew.services import expenses

expenses_bp = Blueprint("expenses", __name__)


@expenses_bp.post("/expenses/categorize")
def categorize():
    """
    Request body: {"description": "Starbucks latte"}
    Response:     {"category": "food"}
    """
    data = request.get_json(silent=True)
    data = data if isinstance(data, dict) else {}
    return jsonify({"category": expenses.categorize(str(data.get("description") or ""))}), 200


@expenses_bp.get("/user/<user_id>/expenses")
@optional_auth
def list_expenses(user_id):
    return jsonify(expenses.list_expenses(resolve_user_ref(user_id))), 200


@expenses_bp.post("/user/<user_id>/expenses")
@optional_auth
def add_expense(user_id):
    """
    Request body:
    {
        "amount": 12.5,
        "description": "Uber downtown",
        "category": "transport",     # optional, guessed from description
        "isImpulse": false
    }

    Response includes the stored expense, the recomputed metrics,
    any ingredients awarded and the new FinScore.
    """
    result = expenses.add_expense(resolve_user_ref(user_id), request.get_json(silent=True))
    return jsonify(result), 201


@expenses_bp.delete("/user/<user_id>/expenses/<expense_id>")
@optional_auth
def delete_expense(user_id, expense_id):
    return jsonify(expenses.delete_expense(resolve_user_ref(user_id), expense_id)), 200
