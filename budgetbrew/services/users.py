# services/users.py
"""
User records: lookup, first-contact creation, leaderboard, ingredients,
activity log and metric updates. FinScore is always computed on read.
"""

from __future__ import annotations
from typing import Dict, Any, List, Optional, Mapping
import logging
import math
import time

from budgetbrew.errors import NotFoundError, ValidationError
from budgetbrew.services.datastore import get_store
from budgetbrew.services import rewards

logger = logging.getLogger(__name__)

# ============================================================================
# Helpers
# ============================================================================

def now_ms() -> int:
    return int(time.time() * 1000)

def as_number(value: Any, field: str) -> float:
    """Coerce a JSON value to a number or raise a 400."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number") from None
    # NaN and Infinity are not valid JSON numbers
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number")
    return number

def _ensure_shape(user: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(user.get("ingredients"), dict):
        user["ingredients"] = rewards.empty_ingredients()
    user.setdefault("activePotions", [])
    user.setdefault("activities", [])
    return user

def find_user(data: Mapping[str, Any], ref: Any) -> Optional[Dict[str, Any]]:
    """Match a user by app id or Firebase UID."""
    ref = str(ref)
    for u in data.get("users", []):
        if str(u.get("id")) == ref or (u.get("firebaseUid") and u.get("firebaseUid") == ref):
            return u
    return None

def require_user(data: Mapping[str, Any], ref: Any) -> Dict[str, Any]:
    user = find_user(data, ref)
    if user is None:
        raise NotFoundError("User not found")
    return _ensure_shape(user)

def public_user(user: Mapping[str, Any]) -> Dict[str, Any]:
    return {**user, "finScore": rewards.fin_score_for(user)}

def _next_user_id(users: List[Dict[str, Any]]) -> str:
    numeric = [int(u["id"]) for u in users if str(u.get("id", "")).isdigit()]
    return str(max(numeric, default=0) + 1)

def new_user_record(user_id: str, firebase_uid: Optional[str], email: Optional[str], name: Optional[str] = None) -> Dict[str, Any]:
    return {
        "id": user_id,
        "firebaseUid": firebase_uid,
        "email": email,
        "name": name or (email.split("@")[0] if email else "User"),
        "budgetAdherence": 0,
        "savingProgress": 0,
        "investmentPerformance": 0,
        "quizScore": 0,
        "ingredients": rewards.empty_ingredients(),
        "activePotions": [],
        "activities": [],
    }

def get_or_create_user(data: Dict[str, Any], firebase_uid: str, email: Optional[str], name: Optional[str] = None) -> Dict[str, Any]:
    """Find the user owning `firebase_uid` or append a fresh record to `data`."""
    for u in data["users"]:
        if u.get("firebaseUid") == firebase_uid:
            return _ensure_shape(u)
    user = new_user_record(_next_user_id(data["users"]), firebase_uid, email, name)
    data["users"].append(user)
    logger.info("Created new user: %s (%s)", user["name"], firebase_uid)
    return user

def user_for_identity(data: Dict[str, Any], identity: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Resolve request.user to a record. Verified Firebase identities are looked up
    by UID and created on first contact; trusted ids must already exist.
    """
    if identity.get("verified"):
        return get_or_create_user(data, identity["uid"], identity.get("email"), identity.get("name"))
    return require_user(data, identity["uid"])

# ============================================================================
# Public API
# ============================================================================

def get_current_user(identity: Mapping[str, Any]) -> Dict[str, Any]:
    store = get_store()
    if identity.get("verified"):
        with store.transaction() as data:
            user = user_for_identity(data, identity)
            return public_user(user)
    return public_user(require_user(store.load(), identity["uid"]))

def get_user(ref: str) -> Dict[str, Any]:
    return public_user(require_user(get_store().load(), ref))

def leaderboard(limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """All users with FinScore and team name, best first."""
    data = get_store().load()
    board = [
        {**public_user(u), "teamName": u.get("teamName") or None}
        for u in data["users"]
    ]
    board.sort(key=lambda u: u["finScore"], reverse=True)
    if limit is not None:
        board = board[:max(0, limit)]
    return board

def get_ingredients(ref: str) -> Dict[str, int]:
    user = find_user(get_store().load(), ref)
    if user is None:
        raise NotFoundError("User not found")
    return user.get("ingredients") or rewards.empty_ingredients()

def set_ingredients(ref: str, updates: Any) -> Dict[str, int]:
    """Overwrite known ingredient counters; negative values floor at 0, unknown keys are ignored."""
    if not isinstance(updates, dict):
        raise ValidationError("ingredients must be an object")
    clean = {k: as_number(v, k) for k, v in updates.items() if k in rewards.INGREDIENT_TYPES}

    with get_store().transaction() as data:
        user = require_user(data, ref)
        for kind, value in clean.items():
            user["ingredients"][kind] = max(0, int(value))
        return dict(user["ingredients"])

def log_activity(user: Dict[str, Any], activity_type: str, score: float, awards: Mapping[str, int], **extra: Any) -> Dict[str, Any]:
    entry = {
        "type": activity_type,
        "score": score,
        "timestamp": now_ms(),
        "ingredientsAwarded": dict(awards),
        **extra,
    }
    user["activities"].append(entry)
    return entry

def record_activity(ref: str, activity_type: Any, score: Any) -> Dict[str, Any]:
    if not isinstance(activity_type, str) or not activity_type:
        raise ValidationError("activityType is required")
    score = as_number(score, "score")

    with get_store().transaction() as data:
        user = require_user(data, ref)
        awards = rewards.award_ingredients(activity_type, score)
        rewards.apply_awards(user["ingredients"], awards)
        log_activity(user, activity_type, score, awards)
        return {"ingredients": dict(user["ingredients"]), "ingredientsAwarded": awards}

def apply_metric_updates(user: Dict[str, Any], updates: Mapping[str, Any]) -> Dict[str, int]:
    """
    Clamp each provided metric into 0-100 and pay out threshold awards.
    Returns the combined awards.
    """
    total: Dict[str, int] = {}
    for metric in rewards.METRIC_AWARD_THRESHOLDS:
        if updates.get(metric) is None:
            continue
        value = rewards.clamp_percent(as_number(updates[metric], metric))
        user[metric] = int(value) if value.is_integer() else value
        awards = rewards.metric_awards(metric, value)
        rewards.apply_awards(user["ingredients"], awards)
        rewards.apply_awards(total, awards)
    return total

def update_metrics(ref: str, updates: Mapping[str, Any]) -> Dict[str, Any]:
    # Validate everything before opening the transaction so a bad field writes nothing
    for metric in rewards.METRIC_AWARD_THRESHOLDS:
        if updates.get(metric) is not None:
            as_number(updates[metric], metric)

    with get_store().transaction() as data:
        user = require_user(data, ref)
        apply_metric_updates(user, updates)
        return public_user(user)
