# services/firebase.py
import os, json
import logging

import firebase_admin
from firebase_admin import credentials

from budgetbrew.config import Config

logger = logging.getLogger(__name__)


def _resolve_cred():
    """Return a firebase_admin credential, or None when nothing is configured."""
    cred_path = Config.resolve_firebase_cred_path()
    if cred_path is None:
        return None
    if cred_path == "":
        return credentials.Certificate(json.loads(os.environ["FIREBASE_SERVICE_ACCOUNT_JSON"]))
    return credentials.Certificate(cred_path)


def init_firebase_admin(mode: str = "auto") -> bool:
    """
    Initialize Firebase Admin once per process (for verifying ID tokens).

    mode:
      "off"  - never initialize; every request uses the trusted userId fallback
      "on"   - initialize, falling back to default credentials (Cloud Run / GCE)
      "auto" - initialize only when a credential can be found
    Returns True when token verification is available.
    """
    if mode == "off":
        logger.info("Firebase authentication disabled by configuration")
        return False
    if firebase_admin._apps:
        return True

    try:
        cred = _resolve_cred()
    except (RuntimeError, FileNotFoundError) as e:
        logger.warning("Firebase credentials unusable (%s); authentication disabled", e)
        return False

    try:
        if cred is not None:
            firebase_admin.initialize_app(cred)
        elif mode == "on":
            logger.info("Initializing Firebase with default credentials")
            firebase_admin.initialize_app()
        else:
            logger.warning(
                "Firebase Admin key not found; authentication disabled. "
                "Set FIREBASE_SERVICE_ACCOUNT_JSON or GOOGLE_APPLICATION_CREDENTIALS, "
                "or save the key as firebase-admin-key.json."
            )
            return False
    except (ValueError, OSError) as e:
        logger.error("Error initializing Firebase Admin: %s; authentication disabled", e)
        return False

    logger.info("Firebase initialized successfully")
    return True
