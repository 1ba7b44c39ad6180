# routes/quiz.py
from flask import Blueprint, request, jsonify

from budgetbrew.auth_middleware import optional_auth
from budgetbrew.services import quiz

quiz_bp = Blueprint("quiz", __name__)


@quiz_bp.get("/quiz")
def get_quiz():
    """Question bank: [{"id", "question", "options"}, ...]"""
    return jsonify(quiz.get_questions()), 200


@quiz_bp.post("/quiz/submit")
@optional_auth
def submit_quiz():
    """
    Request body:
    {
        "answers": {"1": 2, "2": 0},
        "userId": "1"            # only used without a verified token
    }

    Response:
    {
        "score": 50,
        "finScore": 61.4,
        "ingredientsAwarded": {"knowledge": 2, "savings": 0},
        "ingredients": {...}
    }
    """
    data = request.get_json(silent=True)
    data = data if isinstance(data, dict) else {}
    return jsonify(quiz.submit(request.user, data.get("answers"))), 200
