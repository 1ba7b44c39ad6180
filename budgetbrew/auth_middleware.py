from functools import wraps
import logging

from flask import current_app, request
from firebase_admin import auth as fb_auth

from budgetbrew.errors import AuthError

logger = logging.getLogger(__name__)


def _firebase_enabled() -> bool:
    return bool(current_app.config.get("FIREBASE_ENABLED"))


def _verify_bearer(hdr: str) -> None:
    """Verify 'Bearer <token>' and set request.user, or raise a 401."""
    try:
        token = hdr.split(" ", 1)[1].strip()
        decoded = fb_auth.verify_id_token(token)
    except Exception as e:
        logger.info("Token verification error: %s", e)
        raise AuthError("Invalid or expired token") from e
    request.user = {
        "uid": decoded["uid"],
        "email": decoded.get("email"),
        "name": decoded.get("name"),
        "verified": True,
    }


def _trusted_user_id(view_kwargs) -> str:
    body = request.get_json(silent=True) if request.is_json else None
    body_uid = body.get("userId") if isinstance(body, dict) else None
    path_uid = view_kwargs.get("user_id")
    if path_uid == "me":
        path_uid = None
    uid = (
        request.args.get("userId")
        or body_uid
        or path_uid
        or current_app.config["DEFAULT_USER_ID"]
    )
    return str(uid)


def resolve_user_ref(user_id: str) -> str:
    """Map the 'me' path alias to the caller's identity."""
    if user_id == "me":
        return request.user["uid"]
    return user_id


def require_auth(fn):
    """
    Verify Firebase ID token from 'Authorization: Bearer <token>'.
    Sets request.user = {"uid": ..., "email": ..., "name": ..., "verified": True}
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        hdr = request.headers.get("Authorization", "")
        if not hdr.startswith("Bearer "):
            raise AuthError("No authorization token provided")
        if not _firebase_enabled():
            raise AuthError("Authentication is not configured")
        _verify_bearer(hdr)
        return fn(*args, **kwargs)
    return wrapper


def optional_auth(fn):
    """
    Use the Firebase token when one is sent and Firebase is configured.
    Otherwise trust userId from the query string, the JSON body or the path
    (development mode), defaulting to DEFAULT_USER_ID.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if current_app.config.get("REQUIRE_AUTH"):
            return require_auth(fn)(*args, **kwargs)

        hdr = request.headers.get("Authorization", "")
        if hdr.startswith("Bearer ") and _firebase_enabled():
            _verify_bearer(hdr)
        else:
            request.user = {
                "uid": _trusted_user_id(kwargs),
                "email": None,
                "name": None,
                "verified": False,
            }
        return fn(*args, **kwargs)
    return wrapper
