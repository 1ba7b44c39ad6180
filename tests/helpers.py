import copy
import json
import shutil
import tempfile
import unittest
from pathlib import Path

from budgetbrew.app import create_app

FIXTURE = {
    "users": [
        {
            "id": "1",
            "name": "Alex",
            "email": "alex@example.com",
            "budgetAdherence": 80,
            "savingProgress": 70,
            "investmentPerformance": 60,
            "quizScore": 50,
            "ingredients": {"savings": 5, "budget": 4, "knowledge": 3, "investment": 2},
            "activePotions": [],
            "activities": [],
        },
        {
            "id": "2",
            "firebaseUid": "fb-2",
            "name": "Jordan",
            "email": "jordan@example.com",
            "budgetAdherence": 100,
            "savingProgress": 100,
            "investmentPerformance": 100,
            "quizScore": 100,
            "ingredients": {"savings": 0, "budget": 0, "knowledge": 0, "investment": 0},
            "activePotions": [],
            "activities": [],
            "teamId": "1",
            "teamName": "Savers",
        },
        {
            "id": "3",
            "name": "Casey",
            "budgetAdherence": 50,
        },
    ],
    "quizQuestions": [
        {"id": 1, "question": "Q1", "options": ["a", "b", "c", "d"], "correct": 1},
        {"id": 2, "question": "Q2", "options": ["a", "b", "c", "d"], "correct": 2},
        {"id": 3, "question": "Q3", "options": ["a", "b", "c", "d"], "correct": 0},
        {"id": 4, "question": "Q4", "options": ["a", "b", "c", "d"], "correct": 3},
        {"id": 5, "question": "Q5", "options": ["a", "b", "c", "d"], "correct": 0},
    ],
    "teams": [
        {"id": "1", "name": "Savers", "code": "ABC123", "createdAt": 1700000000000},
    ],
}


class AppTestCase(unittest.TestCase):
    """Flask test client over a throwaway copy of FIXTURE."""

    config_overrides = {}

    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp())
        self.data_file = self.tmpdir / "data.json"
        self.write_data(copy.deepcopy(FIXTURE))

        overrides = {
            "TESTING": True,
            "DATA_FILE": str(self.data_file),
            "SEED_FILE": None,
            "STATIC_FOLDER": str(self.tmpdir / "public"),
            "FIREBASE_ENABLED": False,
            "REQUIRE_AUTH": False,
            "LOG_LEVEL": "WARNING",
        }
        overrides.update(self.config_overrides)
        self.app = create_app(overrides)
        self.client = self.app.test_client()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def write_data(self, data):
        self.data_file.write_text(json.dumps(data), encoding="utf-8")

    def read_data(self):
        return json.loads(self.data_file.read_text(encoding="utf-8"))

    def user_record(self, user_id):
        return next(u for u in self.read_data()["users"] if u["id"] == user_id)
