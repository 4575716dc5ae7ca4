"""Customer account endpoints: register, verify email, login."""

from __future__ import annotations

from typing import Any, Dict

from gravis.app.common.errors import BackendError
from gravis.app.extensions import backend
from gravis.app.models import AuthSession


def _session(data: Any, require_customer: bool) -> AuthSession:
    if not isinstance(data, dict) or not data.get("token"):
        raise BackendError(502, "invalid_response", "Unexpected response from server")
    session = AuthSession.model_validate(data)
    if require_customer and session.customer is None:
        raise BackendError(502, "invalid_response", "Unexpected response from server")
    return session


def register_customer(data: Dict[str, Any]) -> AuthSession:
    """POST /customers/register. Returns a verification token, no customer yet."""
    return _session(backend.post("/customers/register", json=data), require_customer=False)


def verify_customer_email(token: str, otp: str) -> AuthSession:
    return _session(
        backend.post("/customers/verify-email", json={"token": token, "otp": otp}),
        require_customer=True,
    )


def login_customer(email: str, password: str) -> AuthSession:
    return _session(
        backend.post("/customers/login", json={"email": email, "password": password}),
        require_customer=True,
    )
