import unittest

from budgetbrew.services import rewards


class FinScoreTests(unittest.TestCase):
    def test_weighted_average(self):
        self.assertAlmostEqual(rewards.calculate_fin_score(80, 70, 60, 50), 67.0)
        self.assertAlmostEqual(rewards.calculate_fin_score(100, 100, 100, 100), 100.0)

    def test_missing_metrics_count_as_zero(self):
        self.assertAlmostEqual(rewards.calculate_fin_score(50, None, None, None), 15.0)
        self.assertEqual(rewards.fin_score_for({"budgetAdherence": 50}), 15.0)

    def test_fin_score_rounds_to_two_decimals(self):
        user = {"budgetAdherence": 33, "savingProgress": 33, "investmentPerformance": 33, "quizScore": 34}
        # 9.9 + 9.9 + 6.6 + 6.8
        self.assertEqual(rewards.fin_score_for(user), 33.2)

    def test_round_half_up(self):
        self.assertEqual(rewards.round_half_up(2.5), 3.0)
        self.assertEqual(rewards.round_half_up(0.125, 2), 0.13)
        self.assertEqual(rewards.round_half_up(66.666, 2), 66.67)


class IngredientAwardTests(unittest.TestCase):
    def test_quiz_awards(self):
        self.assertEqual(rewards.award_ingredients("quiz", 100), {"knowledge": 5, "savings": 2})
        self.assertEqual(rewards.award_ingredients("quiz", 79), {"knowledge": 3, "savings": 1})
        self.assertEqual(rewards.award_ingredients("quiz", 59), {"knowledge": 2, "savings": 0})

    def test_budget_awards(self):
        self.assertEqual(rewards.award_ingredients("budget", 80), {"budget": 3, "savings": 1})
        self.assertEqual(rewards.award_ingredients("budget", 60), {"budget": 2, "savings": 0})
        self.assertEqual(rewards.award_ingredients("budget", 10), {"budget": 1, "savings": 0})

    def test_savings_and_investment_awards(self):
        self.assertEqual(rewards.award_ingredients("savings", 85), {"savings": 3})
        self.assertEqual(rewards.award_ingredients("investment", 61), {"investment": 2})
        self.assertEqual(rewards.award_ingredients("investment", 0), {"investment": 1})

    def test_unknown_activity_awards_nothing(self):
        self.assertEqual(rewards.award_ingredients("skydiving", 100), {})

    def test_apply_awards_creates_missing_counters(self):
        ingredients = {"savings": 1}
        rewards.apply_awards(ingredients, {"savings": 2, "knowledge": 3})
        self.assertEqual(ingredients, {"savings": 3, "knowledge": 3})

    def test_metric_awards_respect_thresholds(self):
        self.assertEqual(rewards.metric_awards("budgetAdherence", 79), {})
        self.assertEqual(rewards.metric_awards("budgetAdherence", 80), {"budget": 3, "savings": 1})
        self.assertEqual(rewards.metric_awards("savingProgress", 70), {"savings": 2})
        self.assertEqual(rewards.metric_awards("investmentPerformance", 69), {})


class PotionRecipeTests(unittest.TestCase):
    def test_missing_ingredient_reports_first_shortfall(self):
        missing = rewards.missing_ingredient({"savings": 2, "budget": 9}, {"savings": 3, "budget": 2})
        self.assertEqual(missing, {"ingredient": "savings", "required": 3, "have": 2})
        self.assertIsNone(rewards.missing_ingredient({"savings": 3, "budget": 2}, {"savings": 3, "budget": 2}))

    def test_make_potion_duration(self):
        potion = rewards.make_potion("savings", 1000)
        self.assertEqual(potion["name"], "Savings Elixir")
        self.assertEqual(potion["expiresAt"] - potion["brewedAt"], 14 * rewards.DAY_MS)

    def test_recipe_list_covers_every_recipe(self):
        types = {r["type"] for r in rewards.recipe_list()}
        self.assertEqual(types, set(rewards.POTION_RECIPES))


if __name__ == "__main__":
    unittest.main()
