import unittest

from budgetbrew.services.quiz import score_answers
from tests.helpers import AppTestCase, FIXTURE


class ScoreAnswersTests(unittest.TestCase):
    questions = FIXTURE["quizQuestions"]

    def test_string_and_int_keys_both_match(self):
        self.assertEqual(score_answers(self.questions, {"1": 1, 2: 2}), 40)

    def test_empty_bank_scores_zero(self):
        self.assertEqual(score_answers([], {"1": 0}), 0)

    def test_garbage_answers_are_wrong(self):
        self.assertEqual(score_answers(self.questions, {"1": "b", "2": None, "3": True}), 0)

    def test_only_exact_indices_count(self):
        answers = {"1": 1.9, "2": 2.5, "3": 0.99, "4": 3.7, "5": "0"}
        self.assertEqual(score_answers(self.questions, answers), 0)

    def test_rounds_half_up(self):
        questions = [{"id": i, "correct": 0} for i in range(8)]
        # 1/8 = 12.5%
        self.assertEqual(score_answers(questions, {"0": 0}), 13)


class QuizRouteTests(AppTestCase):
    def test_questions_hide_correct_index(self):
        resp = self.client.get("/api/quiz")
        self.assertEqual(resp.status_code, 200)
        questions = resp.get_json()
        self.assertEqual(len(questions), 5)
        self.assertEqual(questions[0]["options"], ["a", "b", "c", "d"])
        self.assertTrue(all("correct" not in q for q in questions))

    def test_submit_scores_awards_and_logs(self):
        answers = {"1": 1, "2": 2, "3": 0, "4": 0, "5": 1}
        resp = self.client.post("/api/quiz/submit", json={"answers": answers, "userId": "1"})
        self.assertEqual(resp.status_code, 200)
        payload = resp.get_json()
        self.assertEqual(payload["score"], 60)
        self.assertEqual(payload["ingredientsAwarded"], {"knowledge": 3, "savings": 1})
        self.assertEqual(payload["ingredients"]["knowledge"], 6)
        self.assertEqual(payload["ingredients"]["savings"], 6)
        # 80*0.3 + 70*0.3 + 60*0.2 + 60*0.2
        self.assertEqual(payload["finScore"], 69.0)

        user = self.user_record("1")
        self.assertEqual(user["quizScore"], 60)
        self.assertEqual(user["activities"][-1]["type"], "quiz")
        self.assertEqual(user["activities"][-1]["score"], 60)

    def test_perfect_score(self):
        answers = {"1": 1, "2": 2, "3": 0, "4": 3, "5": 0}
        payload = self.client.post("/api/quiz/submit", json={"answers": answers, "userId": "1"}).get_json()
        self.assertEqual(payload["score"], 100)
        self.assertEqual(payload["ingredientsAwarded"], {"knowledge": 5, "savings": 2})

    def test_submit_defaults_to_default_user(self):
        resp = self.client.post("/api/quiz/submit", json={"answers": {}})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.user_record("1")["quizScore"], 0)

    def test_submit_unknown_user(self):
        resp = self.client.post("/api/quiz/submit", json={"answers": {}, "userId": "42"})
        self.assertEqual(resp.status_code, 404)

    def test_submit_requires_answer_object(self):
        resp = self.client.post("/api/quiz/submit", json={"answers": [1, 2], "userId": "1"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.user_record("1")["quizScore"], 50)


if __name__ == "__main__":
    unittest.main()
