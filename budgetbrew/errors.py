"""
API error types. Services raise these; the app factory renders them as
{"error": "..."} JSON with the matching status code.
"""

from __future__ import annotations
from typing import Any, Dict, Optional


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, **extra: Any):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, **self.extra}


class ValidationError(ApiError):
    status_code = 400


class AuthError(ApiError):
    status_code = 401


class NotFoundError(ApiError):
    status_code = 404


class DataStoreError(ApiError):
    """The JSON data file is missing or unreadable. Details go to the log, not the client."""
    status_code = 500

    def __init__(self, detail: str):
        super().__init__("Server error")
        self.detail = detail

    def __str__(self) -> str:
        return self.detail
