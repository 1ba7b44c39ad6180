# services/academy.py
from __future__ import annotations
from typing import Dict, Any, List
import logging

from budgetbrew.errors import NotFoundError
from budgetbrew.services.datastore import get_store
from budgetbrew.services import rewards
from budgetbrew.services import users

logger = logging.getLogger(__name__)

COURSES = {
    "compound": {
        "title": "Scroll of Compound Interest",
        "summary": "Interest on interest: how principal, rate and compounding frequency grow money over time.",
    },
    "credit": {
        "title": "Runes of Credit Utilization",
        "summary": "Keep card balances below 30% of your limits to protect your credit score.",
    },
    "budgeting": {
        "title": "Tome of Budgeting",
        "summary": "The 50/30/20 rule and the steps to build and track a monthly budget.",
    },
    "investment": {
        "title": "Grimoire of Investments",
        "summary": "Stocks, bonds, funds and ETFs; diversification, risk vs return and dollar-cost averaging.",
    },
    "emergency": {
        "title": "Codex of Emergency Funds",
        "summary": "How much to set aside for emergencies, where to keep it and when to use it.",
    },
    "debt": {
        "title": "Manual of Debt Management",
        "summary": "Snowball, avalanche and consolidation strategies for paying down debt.",
    },
}


def list_courses() -> List[Dict[str, Any]]:
    return [
        {"id": key, **course, "reward": rewards.COURSE_REWARDS[key]}
        for key, course in COURSES.items()
    ]


def complete_course(ref: str, course_id: str) -> Dict[str, Any]:
    """Mark a course finished. Only the first completion pays out ingredients."""
    if course_id not in COURSES:
        raise NotFoundError("Course not found")

    with get_store().transaction() as data:
        user = users.require_user(data, ref)
        progress = user.setdefault("courseProgress", {})
        already = progress.get(course_id, 0) >= 100

        awards: Dict[str, int] = {}
        if not already:
            awards = dict(rewards.COURSE_REWARDS[course_id])
            rewards.apply_awards(user["ingredients"], awards)
            progress[course_id] = 100
            users.log_activity(user, "course", 100, awards, course=course_id)
            logger.info("User %s completed course %s", user.get("id"), course_id)

        return {
            "course": course_id,
            "alreadyCompleted": already,
            "ingredientsAwarded": awards,
            "ingredients": dict(user["ingredients"]),
            "courseProgress": dict(progress),
        }
