#!/usr/bin/env python3
"""
Smoke test a running BudgetBrew server over HTTP.

Usage:
    python scripts/api_smoke_test.py [base_url] [user_id]
Example:
    python scripts/api_smoke_test.py http://localhost:3000 1

Mutating calls (quiz submit, activity, expense) change the data file of the
target server; run it against a scratch copy.
"""

import json
import sys
import time

import requests

BACKEND_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:3000"
USER_ID = sys.argv[2] if len(sys.argv) > 2 else "1"


class BackendTester:
    def __init__(self, base_url):
        self.base_url = base_url.rstrip("/")
        self.results = []

    def test(self, name, method, endpoint, expect=(200, 201), **kwargs):
        """Call one endpoint and record whether the status matched `expect`."""
        print(f"\nTesting: {name}")
        url = f"{self.base_url}{endpoint}"

        try:
            start = time.time()
            response = requests.request(method, url, timeout=10, **kwargs)
            elapsed = time.time() - start
        except requests.RequestException as e:
            print(f"    ERROR: {e}")
            self.results.append({"name": name, "status": "error", "elapsed": "0s", "success": False})
            return None

        success = response.status_code in expect
        self.results.append({
            "name": name,
            "status": response.status_code,
            "elapsed": f"{elapsed:.3f}s",
            "success": success,
        })

        label = "SUCCESS" if success else "FAILED"
        print(f"   {label} (Status: {response.status_code}, Time: {elapsed:.3f}s)")
        try:
            data = response.json()
            print(f"   Response: {json.dumps(data, indent=6)[:600]}")
            return data
        except ValueError:
            print(f"   Response: {response.text[:200]}")
            return None

    def summary(self):
        """Print test summary; returns the number of failures"""
        print("\n" + "=" * 60)
        print("TEST SUMMARY")
        print("=" * 60)

        for result in self.results:
            status_icon = "GOOD" if result["success"] else "BAD"
            print(f"{status_icon} {result['name']:<40} {str(result['status']):<10} {result['elapsed']}")

        total = len(self.results)
        passed = sum(1 for r in self.results if r["success"])

        print("=" * 60)
        print(f"Total: {total} | Passed: {passed} | Failed: {total - passed}")
        print("=" * 60)
        return total - passed


if __name__ == "__main__":
    print("=" * 60)
    print("BUDGETBREW API SMOKE TEST")
    print(f"Testing: {BACKEND_URL} as user {USER_ID}")
    print("=" * 60)

    tester = BackendTester(BACKEND_URL)

    tester.test("Health Check", "GET", "/api/health")
    tester.test("Ping", "GET", "/api/test/ping")
    tester.test("User Profile", "GET", f"/api/user/{USER_ID}")
    tester.test("Leaderboard", "GET", "/api/users")

    questions = tester.test("Quiz Questions", "GET", "/api/quiz") or []
    answers = {str(q["id"]): 0 for q in questions}
    tester.test("Quiz Submit", "POST", "/api/quiz/submit", json={"answers": answers, "userId": USER_ID})

    tester.test("Ingredients", "GET", f"/api/user/{USER_ID}/ingredients")
    tester.test("Record Activity", "POST", f"/api/user/{USER_ID}/activity",
                json={"activityType": "savings", "score": 65})
    tester.test("Active Potions", "GET", f"/api/user/{USER_ID}/potions")
    tester.test("Brew Invalid Potion (expect 400)", "POST", f"/api/user/{USER_ID}/potions/brew",
                expect=(400,), json={"potionType": "dragon"})
    tester.test("Log Expense", "POST", f"/api/user/{USER_ID}/expenses",
                json={"amount": 4.75, "description": "Starbucks latte", "isImpulse": True})
    tester.test("Dashboard", "GET", f"/api/user/{USER_ID}/dashboard")
    tester.test("Teams", "GET", "/api/teams")
    tester.test("Unknown User (expect 404)", "GET", "/api/user/does-not-exist", expect=(404,))

    failures = tester.summary()
    sys.exit(1 if failures else 0)
