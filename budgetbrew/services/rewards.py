# services/rewards.py
"""
Reward economy: FinScore, ingredient awards, potion recipes and course rewards.
Everything here is pure arithmetic over plain dicts so routes and services can
share it without touching the datastore.

FinScore weights:
- Budget adherence      30%
- Saving progress       30%
- Investment perf.      20%
- Quiz score            20%
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any, Mapping, Optional
import math

# ============================================================================
# Configuration
# ============================================================================

METRIC_KEYS = ("budgetAdherence", "savingProgress", "investmentPerformance", "quizScore")

FIN_SCORE_WEIGHTS = {
    "budgetAdherence": 0.3,
    "savingProgress": 0.3,
    "investmentPerformance": 0.2,
    "quizScore": 0.2,
}

INGREDIENT_TYPES = ("savings", "budget", "knowledge", "investment")

# Score buckets shared by every activity type
HIGH_SCORE = 80
MID_SCORE = 60

# Metric updates only pay out above these values
METRIC_AWARD_THRESHOLDS = {
    "budgetAdherence": ("budget", 80),
    "savingProgress": ("savings", 70),
    "investmentPerformance": ("investment", 70),
}

DAY_MS = 24 * 60 * 60 * 1000

POTION_RECIPES: Dict[str, Dict[str, Any]] = {
    "challenge": {
        "name": "Challenge Potion",
        "icon": "🛡",
        "requirements": {"savings": 3, "budget": 2},
        "effect": "Reduces penalties and improves budget adherence",
        "duration": 7,
    },
    "savings": {
        "name": "Savings Elixir",
        "icon": "💎",
        "requirements": {"savings": 5, "investment": 2},
        "effect": "Boosts score multipliers and accelerates savings",
        "duration": 14,
    },
    "subscription": {
        "name": "Subscription Dissolver",
        "icon": "🧹",
        "requirements": {"budget": 4, "knowledge": 2},
        "effect": "AI suggests unused subscriptions to cancel",
        "duration": 30,
    },
    "knowledge": {
        "name": "Knowledge Boost",
        "icon": "🧠",
        "requirements": {"knowledge": 5, "savings": 2},
        "effect": "Unlocks advanced financial literacy modules",
        "duration": 30,
    },
    "investment": {
        "name": "Investment Catalyst",
        "icon": "📈",
        "requirements": {"investment": 4, "knowledge": 3},
        "effect": "Enhances investment performance insights",
        "duration": 14,
    },
    "budget": {
        "name": "Budget Stabilizer",
        "icon": "⚖",
        "requirements": {"budget": 5, "savings": 3},
        "effect": "Maintains consistent budget adherence",
        "duration": 7,
    },
}

COURSE_REWARDS: Dict[str, Dict[str, int]] = {
    "compound": {"knowledge": 2},
    "credit": {"knowledge": 2},
    "budgeting": {"knowledge": 2, "budget": 1},
    "investment": {"knowledge": 3, "investment": 1},
    "emergency": {"knowledge": 2, "savings": 1},
    "debt": {"knowledge": 2, "budget": 1},
}

# ============================================================================
# Number helpers
# ============================================================================

def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round like a calculator (0.5 goes up), not banker's rounding."""
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))

def clamp_percent(value: float) -> float:
    return max(0.0, min(100.0, float(value)))

def _metric(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0

# ============================================================================
# FinScore
# ============================================================================

def calculate_fin_score(
    budget_adherence: Any,
    saving_progress: Any,
    investment_performance: Any,
    quiz_score: Any,
) -> float:
    """Weighted average of the four 0-100 metrics. Missing values count as 0."""
    return (
        _metric(budget_adherence) * FIN_SCORE_WEIGHTS["budgetAdherence"]
        + _metric(saving_progress) * FIN_SCORE_WEIGHTS["savingProgress"]
        + _metric(investment_performance) * FIN_SCORE_WEIGHTS["investmentPerformance"]
        + _metric(quiz_score) * FIN_SCORE_WEIGHTS["quizScore"]
    )

def fin_score_for(user: Mapping[str, Any]) -> float:
    """FinScore of a user record, rounded to two decimals."""
    raw = calculate_fin_score(*(user.get(k) for k in METRIC_KEYS))
    return round_half_up(raw, 2)

# ============================================================================
# Ingredient awards
# ============================================================================

def _tiered(score: float, high: int, mid: int, low: int) -> int:
    if score >= HIGH_SCORE:
        return high
    if score >= MID_SCORE:
        return mid
    return low

def award_ingredients(activity_type: str, score: float) -> Dict[str, int]:
    """
    Fixed lookup from (activity type, score bucket) to ingredient awards.
    Unknown activity types earn nothing. Zero awards are kept in the mapping.
    """
    score = float(score)
    if activity_type == "quiz":
        return {
            "knowledge": int(math.floor(score / 20)),  # 1 per 20 points
            "savings": _tiered(score, 2, 1, 0),
        }
    if activity_type == "budget":
        return {
            "budget": _tiered(score, 3, 2, 1),
            "savings": 1 if score >= HIGH_SCORE else 0,
        }
    if activity_type == "savings":
        return {"savings": _tiered(score, 3, 2, 1)}
    if activity_type == "investment":
        return {"investment": _tiered(score, 3, 2, 1)}
    return {}

def empty_ingredients() -> Dict[str, int]:
    return {k: 0 for k in INGREDIENT_TYPES}

def apply_awards(ingredients: Dict[str, int], awards: Mapping[str, int]) -> Dict[str, int]:
    """Add awards onto an ingredient mapping in place and return it."""
    for kind, amount in awards.items():
        ingredients[kind] = int(ingredients.get(kind) or 0) + int(amount)
    return ingredients

def metric_awards(metric: str, value: float) -> Dict[str, int]:
    """Awards earned by setting `metric` to `value` (empty below the payout threshold)."""
    activity_type, threshold = METRIC_AWARD_THRESHOLDS[metric]
    if value < threshold:
        return {}
    return award_ingredients(activity_type, value)

# ============================================================================
# Potions
# ============================================================================

def missing_ingredient(
    ingredients: Mapping[str, int], requirements: Mapping[str, int]
) -> Optional[Dict[str, Any]]:
    """First unmet requirement as {"ingredient", "required", "have"}, or None."""
    for kind, amount in requirements.items():
        have = int(ingredients.get(kind) or 0)
        if have < amount:
            return {"ingredient": kind, "required": amount, "have": have}
    return None

def make_potion(potion_type: str, now_ms: int) -> Dict[str, Any]:
    recipe = POTION_RECIPES[potion_type]
    return {
        "type": potion_type,
        "name": recipe["name"],
        "icon": recipe["icon"],
        "effect": recipe["effect"],
        "brewedAt": now_ms,
        "expiresAt": now_ms + recipe["duration"] * DAY_MS,
    }

def recipe_list():
    return [{"type": key, **recipe} for key, recipe in POTION_RECIPES.items()]
