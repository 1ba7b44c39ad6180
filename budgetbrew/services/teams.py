# services/teams.py
"""
Teams: create / join / leave / list. Average score and member count are
computed from the current user records on every read; nothing about
membership is stored on the team itself. There is no referential integrity:
a user may point at a team id that no longer exists.
"""

from __future__ import annotations
from typing import Dict, Any, List, Optional
import logging
import random
import string

from budgetbrew.errors import NotFoundError, ValidationError
from budgetbrew.services.datastore import get_store
from budgetbrew.services import rewards
from budgetbrew.services import users

logger = logging.getLogger(__name__)

CODE_LENGTH = 6
CODE_ALPHABET = string.ascii_uppercase + string.digits

# ============================================================================
# Helpers
# ============================================================================

def _members(data: Dict[str, Any], team_id: str) -> List[Dict[str, Any]]:
    return [u for u in data["users"] if u.get("teamId") is not None and str(u["teamId"]) == str(team_id)]

def _average_score(members: List[Dict[str, Any]]) -> float:
    if not members:
        return 0
    total = sum(rewards.fin_score_for(u) for u in members)
    return rewards.round_half_up(total / len(members), 2)

def _new_code(existing: set) -> str:
    while True:
        code = "".join(random.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
        if code not in existing:
            return code

def _next_team_id(teams: List[Dict[str, Any]]) -> str:
    numeric = [int(t["id"]) for t in teams if str(t.get("id", "")).isdigit()]
    return str(max(numeric, default=0) + 1)

def _required_str(value: Any, message: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(message)
    return str(value).strip()

# ============================================================================
# Public API
# ============================================================================

def list_teams() -> List[Dict[str, Any]]:
    data = get_store().load()
    out = []
    for team in data["teams"]:
        members = _members(data, team["id"])
        out.append({
            "id": team["id"],
            "name": team["name"],
            "code": team["code"],
            "averageScore": _average_score(members),
            "memberCount": len(members),
        })
    out.sort(key=lambda t: t["averageScore"], reverse=True)
    return out

def create_team(name: Any, user_id: Any) -> Dict[str, Any]:
    if not name or not user_id:
        raise ValidationError("Team name and user ID required")
    name = _required_str(name, "Team name and user ID required")

    with get_store().transaction() as data:
        team = {
            "id": _next_team_id(data["teams"]),
            "name": name,
            "code": _new_code({t.get("code") for t in data["teams"]}),
            "createdAt": users.now_ms(),
        }
        data["teams"].append(team)

        user = users.find_user(data, user_id)
        if user is not None:
            user["teamId"] = team["id"]
            user["teamName"] = team["name"]
        else:
            logger.warning("Team %s created for unknown user %s", team["id"], user_id)

        logger.info("Created team %s (%s)", team["name"], team["code"])
        return dict(team)

def join_team(code: Any, user_id: Any) -> Dict[str, Any]:
    if not code or not user_id:
        raise ValidationError("Team code and user ID required")
    code = _required_str(code, "Team code and user ID required").upper()

    with get_store().transaction() as data:
        team = next((t for t in data["teams"] if t.get("code") == code), None)
        if team is None:
            raise NotFoundError("Team not found")
        user = users.find_user(data, user_id)
        if user is None:
            raise NotFoundError("User not found")

        user["teamId"] = team["id"]
        user["teamName"] = team["name"]
        return {"success": True, "team": dict(team)}

def leave_team(user_id: Any) -> Dict[str, Any]:
    if not user_id:
        raise ValidationError("User ID required")

    with get_store().transaction() as data:
        user = users.find_user(data, user_id)
        if user is None:
            raise NotFoundError("User not found")
        user.pop("teamId", None)
        user.pop("teamName", None)
        return {"success": True}

def team_for_user(ref: str) -> Dict[str, Optional[Dict[str, Any]]]:
    data = get_store().load()
    user = users.find_user(data, ref)
    if user is None or not user.get("teamId"):
        return {"team": None}

    team = next((t for t in data["teams"] if str(t.get("id")) == str(user["teamId"])), None)
    if team is None:
        return {"team": None}

    members = _members(data, team["id"])
    return {
        "team": {
            **team,
            "averageScore": _average_score(members),
            "memberCount": len(members),
            "members": [{"id": u.get("id"), "name": u.get("name") or u.get("email")} for u in members],
        }
    }
