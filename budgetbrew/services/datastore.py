# services/datastore.py
"""
Flat-file datastore. The whole application state is one JSON document:

    {"users": [...], "quizQuestions": [...], "teams": [...]}

Every mutation reads the entire document, changes it in memory and writes the
entire document back. A process-local lock serializes read-modify-write cycles
inside one server process; separate processes still race (last writer wins).
"""

from __future__ import annotations
import json
import logging
import os
import shutil
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator

from flask import current_app

from budgetbrew.errors import DataStoreError

logger = logging.getLogger(__name__)

EXTENSION_KEY = "budgetbrew.datastore"


class JsonDataStore:
    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self._lock = threading.RLock()

    def ensure_seeded(self, seed_path: str | os.PathLike | None) -> bool:
        """Copy the seed document into place if the data file does not exist yet."""
        if self.path.exists() or not seed_path:
            return False
        seed = Path(seed_path)
        if not seed.exists():
            logger.warning("Seed file %s not found; data file %s stays missing", seed, self.path)
            return False
        self.path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(seed, self.path)
        logger.info("Seeded data file %s from %s", self.path, seed)
        return True

    def load(self) -> Dict[str, Any]:
        if not self.path.exists():
            logger.error("Data file not found: %s", self.path)
            raise DataStoreError(f"{self.path.name} not found")
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.error("Error reading %s: %s", self.path, e)
            raise DataStoreError(f"could not read {self.path.name}: {e}") from e

        if not isinstance(data, dict):
            raise DataStoreError(f"{self.path.name} must contain a JSON object")
        data.setdefault("users", [])
        data.setdefault("quizQuestions", [])
        data.setdefault("teams", [])
        return data

    def save(self, data: Dict[str, Any]) -> None:
        # Write to a sibling temp file and swap it in so readers never see half a document
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    @contextmanager
    def transaction(self) -> Iterator[Dict[str, Any]]:
        """
        Read the document, hand it to the caller and write it back on clean exit.
        If the block raises, nothing is written.
        """
        with self._lock:
            data = self.load()
            yield data
            self.save(data)


def init_store(app) -> JsonDataStore:
    store = JsonDataStore(app.config["DATA_FILE"])
    store.ensure_seeded(app.config.get("SEED_FILE"))
    app.extensions[EXTENSION_KEY] = store
    return store


def get_store() -> JsonDataStore:
    """Return the datastore bound to the current Flask app."""
    return current_app.extensions[EXTENSION_KEY]
