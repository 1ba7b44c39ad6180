#!/usr/bin/env python3
"""
Reset the BudgetBrew data file from the bundled seed (or another JSON file).

Usage:
    python scripts/reset_data.py                  # data file from BUDGETBREW_DATA_FILE / ./data.json
    python scripts/reset_data.py --data other.json --seed my_seed.json
    python scripts/reset_data.py --yes            # skip the confirmation prompt
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from budgetbrew.config import Config
from budgetbrew.services.datastore import JsonDataStore


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Reset the BudgetBrew JSON data file")
    parser.add_argument("--data", default=Config.DATA_FILE, help="data file to overwrite")
    parser.add_argument("--seed", default=Config.SEED_FILE, help="seed document to copy from")
    parser.add_argument("--yes", action="store_true", help="do not ask for confirmation")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    seed_path = Path(args.seed)
    if not seed_path.exists():
        print(f"Seed file not found: {seed_path}")
        return 1

    with seed_path.open("r", encoding="utf-8") as fh:
        seed = json.load(fh)

    store = JsonDataStore(args.data)
    print(f"\n{'=' * 60}")
    print("RESETTING BUDGETBREW DATA")
    print(f"{'=' * 60}")
    print(f"Data file: {store.path}")
    print(f"Seed:      {seed_path}")
    print(f"Users: {len(seed.get('users', []))} | "
          f"Questions: {len(seed.get('quizQuestions', []))} | "
          f"Teams: {len(seed.get('teams', []))}")

    if store.path.exists() and not args.yes:
        answer = input("\nOverwrite existing data file? (yes/no): ").strip().lower()
        if answer not in ("y", "yes"):
            print("Cancelled. No changes made.")
            return 0

    store.save(seed)
    print("\nData file reset.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
