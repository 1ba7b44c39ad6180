# services/potions.py
from __future__ import annotations
from typing import Dict, Any, List
import logging

from budgetbrew.errors import ValidationError
from budgetbrew.services.datastore import get_store
from budgetbrew.services import rewards
from budgetbrew.services import users

logger = logging.getLogger(__name__)


def active_potions(ref: str) -> List[Dict[str, Any]]:
    """Drop expired potions from the user's record (persisted) and return the rest."""
    now = users.now_ms()
    with get_store().transaction() as data:
        user = users.require_user(data, ref)
        before = len(user["activePotions"])
        user["activePotions"] = [p for p in user["activePotions"] if p.get("expiresAt", 0) > now]
        pruned = before - len(user["activePotions"])
        if pruned:
            logger.info("Pruned %d expired potion(s) for user %s", pruned, user.get("id"))
        return list(user["activePotions"])


def brew(ref: str, potion_type: Any) -> Dict[str, Any]:
    """
    Spend a recipe's ingredients and add the potion. There is no idempotency key:
    two identical requests brew twice if the balance allows it.
    """
    if not isinstance(potion_type, str) or potion_type not in rewards.POTION_RECIPES:
        raise ValidationError("Invalid potion type")
    recipe = rewards.POTION_RECIPES[potion_type]

    with get_store().transaction() as data:
        user = users.require_user(data, ref)
        ingredients = user["ingredients"]

        missing = rewards.missing_ingredient(ingredients, recipe["requirements"])
        if missing:
            raise ValidationError(
                f"Not enough {missing['ingredient']} ingredients",
                required=missing["required"],
                have=missing["have"],
            )

        for kind, amount in recipe["requirements"].items():
            ingredients[kind] = int(ingredients.get(kind) or 0) - amount

        potion = rewards.make_potion(potion_type, users.now_ms())
        user["activePotions"].append(potion)
        logger.info("User %s brewed %s", user.get("id"), potion_type)

        return {"success": True, "potion": potion, "ingredients": dict(ingredients)}


def recipes() -> List[Dict[str, Any]]:
    return rewards.recipe_list()
