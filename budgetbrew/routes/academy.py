# routes/academy.py
from flask import Blueprint, jsonify

from budgetbrew.auth_middleware import optional_auth, resolve_user_ref
from budgetbrew.services import academy

academy_bp = Blueprint("academy", __name__)


@academy_bp.get("/academy/courses")
def courses():
    return jsonify(academy.list_courses()), 200


@academy_bp.post("/user/<user_id>/courses/<course_id>/complete")
@optional_auth
def complete_course(user_id, course_id):
    """Award course ingredients on first completion; repeats return alreadyCompleted=true."""
    return jsonify(academy.complete_course(resolve_user_ref(user_id), course_id)), 200
