# config.py
import os, json
from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parent


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Config:
    # Persistence: one JSON document holds users, quiz questions and teams
    DATA_FILE = os.getenv("BUDGETBREW_DATA_FILE", str(Path.cwd() / "data.json"))
    SEED_FILE = os.getenv("BUDGETBREW_SEED_FILE", str(PACKAGE_ROOT / "data" / "seed.json"))

    # Frontend assets are served from here when the folder exists
    STATIC_FOLDER = os.getenv("BUDGETBREW_STATIC_FOLDER", str(Path.cwd() / "public"))

    # Trusted fallback identity when no verified token is present
    DEFAULT_USER_ID = os.getenv("BUDGETBREW_DEFAULT_USER_ID", "1")

    # Used to derive budget adherence from logged expenses
    MONTHLY_BUDGET = float(os.getenv("BUDGETBREW_MONTHLY_BUDGET", "2000"))

    # "auto" enables Firebase only when credentials can be found; "on" / "off" force it
    FIREBASE_AUTH = os.getenv("FIREBASE_AUTH", "auto").strip().lower()
    REQUIRE_AUTH = _env_bool("REQUIRE_AUTH", False)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    PORT = int(os.getenv("PORT", "3000"))

    @staticmethod
    def resolve_firebase_cred_path() -> str | None:
        """
        Tries multiple ways to find a service account credential:
          1) FIREBASE_SERVICE_ACCOUNT_JSON (env contains the full JSON blob)
          2) GOOGLE_APPLICATION_CREDENTIALS (absolute or relative file path)
             - If relative or not found, try ./firebase/credentials/<basename>
          3) ./firebase-admin-key.json
          4) First *.json found under ./firebase/credentials
        Returns a path string, "" when the JSON blob should be used,
        or None when nothing is configured (authentication disabled).
        """
        json_blob = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON")
        if json_blob:
            try:
                json.loads(json_blob)  # validate it's JSON
                return ""
            except ValueError as e:
                raise RuntimeError(f"Invalid FIREBASE_SERVICE_ACCOUNT_JSON: {e}") from e

        root = Path.cwd()
        cred_dir = root / "firebase" / "credentials"

        p = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
        if p:
            p = p.strip().strip('"').strip("'")
            p = os.path.expanduser(os.path.expandvars(p))
            path = Path(p)
            if path.exists():
                return str(path)
            fallback = cred_dir / path.name
            if fallback.exists():
                return str(fallback)
            rel_try = (root / p).resolve()
            if rel_try.exists():
                return str(rel_try)
            raise FileNotFoundError(
                "Firebase credential file not found. Tried:\n"
                f" - {path}\n - {fallback}\n - {rel_try}\n"
                "Set FIREBASE_SERVICE_ACCOUNT_JSON or GOOGLE_APPLICATION_CREDENTIALS."
            )

        legacy = root / "firebase-admin-key.json"
        if legacy.exists():
            return str(legacy)

        if cred_dir.exists():
            matches = sorted(cred_dir.glob("*.json"))
            if matches:
                return str(matches[0])

        return None
