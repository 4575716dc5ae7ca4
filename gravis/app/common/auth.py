"""Cookie-backed auth context for storefront customers.

The backend issues a bearer token on login / email verification. We keep the
token and the customer record in cookies that expire together with the token,
hydrate them into `g` at the start of every request and drop them on logout or
when the backend rejects the token.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from urllib.parse import quote, unquote

from flask import current_app, g, request, url_for
from pydantic import ValidationError

from gravis.app.models import Customer

USER_COOKIE = "user"
TOKEN_COOKIE = "token"
GUEST_ID_COOKIE = "guest_id"

logger = logging.getLogger(__name__)


def hydrate_auth() -> None:
    g.auth_token = request.cookies.get(TOKEN_COOKIE) or None
    g.guest_id = request.cookies.get(GUEST_ID_COOKIE) or None
    g.auth_user = None

    raw_user = request.cookies.get(USER_COOKIE)
    if raw_user:
        try:
            g.auth_user = Customer.model_validate_json(unquote(raw_user))
        except ValidationError:
            logger.debug("Ignoring malformed %s cookie", USER_COOKIE)


def current_user() -> Customer | None:
    return g.get("auth_user")


def current_token() -> str | None:
    return g.get("auth_token")


def current_guest_id() -> str | None:
    return g.get("guest_id")


def is_logged_in() -> bool:
    return current_user() is not None


def _parse_expiry(expires_at: str | None) -> datetime | None:
    if not expires_at:
        return None
    try:
        parsed = datetime.fromisoformat(expires_at.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "samesite": "Lax",
        "secure": current_app.config.get("AUTH_COOKIE_SECURE", False),
    }


def login_user(response, customer: Customer, token: str, expires_at: str | None):
    """Persist credentials on `response` and make them visible for the rest of the request."""
    expires = _parse_expiry(expires_at)
    options = _cookie_options()
    response.set_cookie(USER_COOKIE, quote(customer.model_dump_json(), safe=""), expires=expires, **options)
    response.set_cookie(TOKEN_COOKIE, token, expires=expires, **options)
    g.auth_user = customer
    g.auth_token = token
    return response


def logout_user(response):
    response.delete_cookie(USER_COOKIE)
    response.delete_cookie(TOKEN_COOKIE)
    g.auth_user = None
    g.auth_token = None
    return response


def remember_guest_id(response, guest_id: str | None):
    if not guest_id or guest_id == current_guest_id():
        return response
    # guest carts outlive a browser session
    response.set_cookie(GUEST_ID_COOKIE, guest_id, max_age=60 * 60 * 24 * 365, **_cookie_options())
    g.guest_id = guest_id
    return response


def current_url() -> str:
    query = request.query_string.decode("utf-8", "replace")
    return f"{request.path}?{query}" if query else request.path


def login_url(next_url: str | None = None) -> str:
    return url_for("auth.login", redirect_url=next_url or current_url())


def safe_redirect_target(raw: str | None) -> str:
    """Only local absolute paths are accepted; anything else sends the user home."""
    if raw and raw.startswith("/") and not raw.startswith("//"):
        return raw
    return "/"


def post_auth_target(raw: str | None) -> str:
    target = safe_redirect_target(raw)
    # product pages reopen the enquiry dialog the visitor was heading for
    if target.startswith("/products/"):
        separator = "&" if "?" in target else "?"
        target = f"{target}{separator}open_enquiry=true"
    return target

