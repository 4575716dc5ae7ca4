from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ApiError(Exception):
    """Raise to return a consistent JSON error response."""

    status_code: int
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self, request_id: str | None = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details or {},
                "request_id": request_id,
            }
        }
        return payload


def abort_json(status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> None:
    """Convenience wrapper."""
    raise ApiError(status_code=status_code, code=code, message=message, details=details)


class BackendError(Exception):
    """A call to the REST backend failed."""

    default_message = "Something went wrong. Please try again."

    def __init__(
        self,
        status_code: int,
        code: str = "backend_error",
        message: str | None = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.code = code
        # what the backend said, if anything; callers pick their own fallback
        self.backend_message = message or None
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_api_error(self) -> ApiError:
        return ApiError(self.status_code, self.code, self.message, self.details)


class BackendUnauthorized(BackendError):
    default_message = "Please log in to continue."

    def __init__(self, message: str | None = None):
        super().__init__(401, "unauthorized", message)


class BackendForbidden(BackendError):
    default_message = "You are not authorized to access this resource"

    def __init__(self):
        super().__init__(403, "forbidden")


class BackendUnavailable(BackendError):
    default_message = "The store is temporarily unavailable. Please try again shortly."

    def __init__(self, reason: str | None = None):
        super().__init__(503, "backend_unavailable", details={"reason": reason} if reason else None)
