# services/dashboard.py
"""
Brew dashboard: turns a user's metrics into the cauldron view.
Budget score is the inverse of adherence (0 = perfectly on budget).
"""

from __future__ import annotations
from typing import Dict, Any, Mapping

from budgetbrew.services.datastore import get_store
from budgetbrew.services import rewards
from budgetbrew.services import users

CAULDRON_STATES = [
    (25, {
        "state": "excellent",
        "animation": "good",
        "title": "Excellent Budget Control!",
        "description": "Your cauldron is stable and well-managed. Keep up the great work!",
    }),
    (50, {
        "state": "good",
        "animation": "good",
        "title": "Good Budget Management",
        "description": "Your spending is under control. You're on the right track!",
    }),
    (75, {
        "state": "overflowing",
        "animation": "overflowing",
        "title": "Cauldron Overflowing!",
        "description": "You're spending more than planned. Time to review your expenses.",
    }),
    (100, {
        "state": "critical",
        "animation": "overflowing",
        "title": "Critical Overflow!",
        "description": "Your budget is severely over. Immediate action needed to stabilize.",
    }),
]


def budget_score(user: Mapping[str, Any]) -> float:
    return 100 - rewards.clamp_percent(user.get("budgetAdherence") or 0)


def cauldron_state(score: float) -> Dict[str, Any]:
    for ceiling, info in CAULDRON_STATES:
        if score <= ceiling:
            return dict(info)
    return dict(CAULDRON_STATES[-1][1])


def focus_area(user: Mapping[str, Any]) -> str:
    if (user.get("budgetAdherence") or 0) < 70:
        return "budget adherence"
    if (user.get("savingProgress") or 0) < 70:
        return "saving progress"
    return "investment performance"


def summary_text(user: Mapping[str, Any], fin_score: float) -> str:
    adherence = user.get("budgetAdherence") or 0
    if fin_score >= 80:
        text = (
            "Excellent! Your financial potion is highly stable. "
            f"Your budget adherence of {adherence}% shows great discipline. Keep brewing!"
        )
    elif fin_score >= 60:
        text = (
            f"Good progress! Your potion stability is at {fin_score:.1f}%. "
            f"Focus on improving your {focus_area(user)} to boost your score."
        )
    else:
        text = (
            "Your potion needs more stability. Consider reviewing your spending habits "
            f"and setting clearer budget goals. Your current score is {fin_score:.1f}%."
        )

    if adherence >= 80:
        control = "excellent"
    elif adherence >= 60:
        control = "good"
    else:
        control = "room for improvement"
    return f"{text}\n\nThis week: Your spending patterns show {control} budget control."


def get_dashboard(ref: str) -> Dict[str, Any]:
    user = users.require_user(get_store().load(), ref)
    fin_score = rewards.fin_score_for(user)
    score = budget_score(user)
    return {
        "userId": user.get("id"),
        "finScore": fin_score,
        "budgetScore": score,
        "cauldron": cauldron_state(score),
        "metrics": {k: user.get(k) or 0 for k in rewards.METRIC_KEYS},
        "summary": summary_text(user, fin_score),
    }
