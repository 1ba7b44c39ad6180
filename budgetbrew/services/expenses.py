# services/expenses.py
"""
Expense log ("ingredients" on the shelf). Each change recomputes the user's
budget adherence, saving progress and investment performance from the whole
log, then applies them exactly like a metrics update (clamping and awards).

Derived metrics (monthly budget B, total spend T, N expenses, I impulse buys):
- budgetAdherence       = max(0, 100 - 100*T/B)      (100 with no expenses)
- savingProgress        = max(0, 100 - 50*I/N)       (100 with no expenses)
- investmentPerformance = min(100, 100*(N-I)/N)      (100 with no expenses)
"""

from __future__ import annotations
from typing import Dict, Any, List, Iterable
from collections import defaultdict
from datetime import datetime, timezone
from uuid import uuid4
import logging

from flask import current_app

from budgetbrew.errors import NotFoundError, ValidationError
from budgetbrew.services.datastore import get_store
from budgetbrew.services import rewards
from budgetbrew.services import users

logger = logging.getLogger(__name__)

CATEGORIES = ("food", "transport", "entertainment", "shopping", "bills", "health", "other")

# Checked in order; first category with a matching keyword wins
CATEGORY_KEYWORDS = [
    ("food", ["coffee", "food", "restaurant", "starbucks", "mcdonald"]),
    ("transport", ["uber", "taxi", "gas", "fuel", "parking"]),
    ("entertainment", ["movie", "netflix", "spotify", "game"]),
    ("shopping", ["amazon", "store", "shopping", "clothes"]),
    ("bills", ["bill", "electric", "water", "internet"]),
    ("health", ["doctor", "pharmacy", "medicine", "hospital"]),
]

# ============================================================================
# Pure helpers
# ============================================================================

def categorize(description: str) -> str:
    """Keyword-based category guess for an expense description."""
    text = (description or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(k in text for k in keywords):
            return category
    return "other"

def compute_budget_metrics(expenses: Iterable[Dict[str, Any]], monthly_budget: float) -> Dict[str, int]:
    expenses = list(expenses)
    count = len(expenses)
    if count == 0:
        return {"budgetAdherence": 100, "savingProgress": 100, "investmentPerformance": 100}

    total = sum(float(e.get("amount") or 0) for e in expenses)
    budget_used = (total / monthly_budget) * 100 if monthly_budget > 0 else 100
    impulse = sum(1 for e in expenses if e.get("isImpulse"))
    impulse_ratio = impulse / count
    planned_ratio = (count - impulse) / count

    return {
        "budgetAdherence": int(rewards.round_half_up(max(0.0, 100 - budget_used))),
        "savingProgress": int(rewards.round_half_up(max(0.0, 100 - impulse_ratio * 50))),
        "investmentPerformance": int(rewards.round_half_up(min(100.0, planned_ratio * 100))),
    }

def summarize(expenses: List[Dict[str, Any]]) -> Dict[str, Any]:
    by_category: Dict[str, float] = defaultdict(float)
    for e in expenses:
        by_category[e.get("category") or "other"] += float(e.get("amount") or 0)
    return {
        "expenses": expenses,
        "count": len(expenses),
        "total": rewards.round_half_up(sum(by_category.values()), 2),
        "byCategory": {k: rewards.round_half_up(v, 2) for k, v in sorted(by_category.items())},
    }

def _monthly_budget() -> float:
    return float(current_app.config.get("MONTHLY_BUDGET", 2000))

def _validated_expense(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError("Expense body must be an object")

    amount = users.as_number(payload.get("amount"), "amount")
    if amount <= 0:
        raise ValidationError("Please enter a valid amount")

    description = str(payload.get("description") or "").strip()
    if not description:
        raise ValidationError("Please enter a description")

    category = str(payload.get("category") or "").strip().lower()
    if category not in CATEGORIES:
        category = categorize(description)

    return {
        "id": uuid4().hex[:12],
        "date": datetime.now(timezone.utc).date().isoformat(),
        "description": description,
        "category": category,
        "amount": rewards.round_half_up(amount, 2),
        "isImpulse": bool(payload.get("isImpulse", False)),
    }

def _recompute(user: Dict[str, Any]) -> Dict[str, int]:
    metrics = compute_budget_metrics(user["expenses"], _monthly_budget())
    return users.apply_metric_updates(user, metrics)

# ============================================================================
# Public API
# ============================================================================

def list_expenses(ref: str) -> Dict[str, Any]:
    user = users.require_user(get_store().load(), ref)
    # stored newest first
    return summarize(list(user.get("expenses") or []))

def add_expense(ref: str, payload: Any) -> Dict[str, Any]:
    expense = _validated_expense(payload)

    with get_store().transaction() as data:
        user = users.require_user(data, ref)
        user.setdefault("expenses", []).insert(0, expense)
        awards = _recompute(user)
        logger.info("User %s logged %s expense %.2f", user.get("id"), expense["category"], expense["amount"])
        return {
            "expense": expense,
            "metrics": {k: user[k] for k in rewards.METRIC_AWARD_THRESHOLDS},
            "ingredientsAwarded": awards,
            "finScore": rewards.fin_score_for(user),
        }

def delete_expense(ref: str, expense_id: str) -> Dict[str, Any]:
    with get_store().transaction() as data:
        user = users.require_user(data, ref)
        expenses = user.setdefault("expenses", [])
        remaining = [e for e in expenses if str(e.get("id")) != str(expense_id)]
        if len(remaining) == len(expenses):
            raise NotFoundError("Expense not found")
        user["expenses"] = remaining
        awards = _recompute(user)
        return {
            "success": True,
            "metrics": {k: user[k] for k in rewards.METRIC_AWARD_THRESHOLDS},
            "ingredientsAwarded": awards,
            "finScore": rewards.fin_score_for(user),
        }
