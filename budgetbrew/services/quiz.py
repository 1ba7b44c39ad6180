# services/quiz.py
from __future__ import annotations
from typing import Dict, Any, List, Mapping
import logging

from budgetbrew.errors import ValidationError
from budgetbrew.services.datastore import get_store
from budgetbrew.services import rewards
from budgetbrew.services import users

logger = logging.getLogger(__name__)


def get_questions() -> List[Dict[str, Any]]:
    """Question bank as shown to players (correct indices stay on the server)."""
    data = get_store().load()
    return [
        {k: v for k, v in q.items() if k != "correct"}
        for q in data["quizQuestions"]
    ]


def _selected(answers: Mapping[Any, Any], question_id: Any):
    # JSON object keys are always strings, question ids may be ints in the data file
    if question_id in answers:
        return answers[question_id]
    return answers.get(str(question_id))


def score_answers(questions: List[Dict[str, Any]], answers: Mapping[Any, Any]) -> int:
    """Percentage of questions answered correctly, rounded half-up."""
    if not questions:
        return 0
    correct = 0
    for q in questions:
        picked = _selected(answers, q.get("id"))
        # only an exact option index counts: no floats, numeric strings or booleans
        if isinstance(picked, int) and not isinstance(picked, bool) and picked == q.get("correct"):
            correct += 1
    return int(rewards.round_half_up(correct / len(questions) * 100))


def submit(identity: Mapping[str, Any], answers: Any) -> Dict[str, Any]:
    """
    Score a full quiz submission, store it as the user's quizScore, pay out
    quiz ingredients and log the activity.
    """
    if not isinstance(answers, dict):
        raise ValidationError("answers must be an object mapping question id to option index")

    with get_store().transaction() as data:
        user = users.user_for_identity(data, identity)
        score = score_answers(data["quizQuestions"], answers)

        user["quizScore"] = score
        awards = rewards.award_ingredients("quiz", score)
        rewards.apply_awards(user["ingredients"], awards)
        users.log_activity(user, "quiz", score, awards)

        logger.info("Quiz submitted for user %s: score=%s", user.get("id"), score)
        return {
            "score": score,
            "finScore": rewards.fin_score_for(user),
            "ingredientsAwarded": awards,
            "ingredients": dict(user["ingredients"]),
        }
