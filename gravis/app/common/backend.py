"""HTTP client for the Gravis REST backend.

Every domain read and write goes through `BackendClient.request`, which
attaches the caller's credentials, unwraps JSON bodies and turns failures into
`BackendError` subclasses. GETs are memoised for the lifetime of one request so
the layout and the page body can ask for the same resource without a second
round trip; writes invalidate by path prefix.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from flask import Flask, current_app, g

from gravis.app.common.auth import current_guest_id, current_token
from gravis.app.common.errors import (
    BackendError,
    BackendForbidden,
    BackendUnauthorized,
    BackendUnavailable,
)
from gravis.app.common.request_context import REQUEST_ID_HEADER, current_request_id

logger = logging.getLogger(__name__)

GUEST_ID_HEADER = "x-guest-id"
_CACHE_ATTR = "_backend_cache"


def _freeze(params: Optional[Dict[str, Any]]) -> tuple:
    if not params:
        return ()
    frozen = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            value = tuple(value)
        frozen.append((key, value))
    return tuple(sorted(frozen))


class BackendClient:
    def __init__(self, app: Flask | None = None):
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        app.config.setdefault("BACKEND_TIMEOUT", 10.0)
        app.extensions["gravis_backend"] = self

    def _url(self, path: str) -> str:
        return f"{current_app.config['BACKEND_URL'].rstrip('/')}/{path.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        token = current_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        guest_id = current_guest_id()
        if guest_id:
            headers[GUEST_ID_HEADER] = guest_id
        request_id = current_request_id()
        if request_id:
            headers[REQUEST_ID_HEADER] = request_id
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        try:
            resp = self.session.request(
                method,
                self._url(path),
                params=params,
                json=json,
                headers=self._headers(),
                timeout=current_app.config["BACKEND_TIMEOUT"],
            )
        except requests.RequestException as exc:
            logger.warning("backend %s %s unreachable: %s (request_id=%s)", method, path, exc, current_request_id())
            raise BackendUnavailable(str(exc)) from exc

        if resp.status_code >= 400:
            err = self._error_for(resp)
            logger.warning(
                "backend %s %s -> %s %s (request_id=%s)",
                method, path, resp.status_code, err.code, current_request_id(),
            )
            raise err

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise BackendError(502, "invalid_response", "Unexpected response from server") from exc

    @staticmethod
    def _error_for(resp: requests.Response) -> BackendError:
        try:
            body = resp.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}
        code = body.get("code")
        message = body.get("message") if isinstance(body.get("message"), str) else None

        if resp.status_code == 401 and code == "unauthorized":
            return BackendUnauthorized(message)
        if resp.status_code == 403:
            return BackendForbidden()
        if resp.status_code == 500:
            return BackendError(500, "server_error", "Internal server error")
        details = body.get("details") if isinstance(body.get("details"), dict) else None
        return BackendError(resp.status_code, code or "backend_error", message, details)

    # --- convenience verbs ---

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        cache = g.setdefault(_CACHE_ATTR, {})
        key = (path, _freeze(params))
        if key not in cache:
            cache[key] = self.request("GET", path, params=params)
        return cache[key]

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def invalidate(self, prefix: str) -> None:
        cache = g.get(_CACHE_ATTR)
        if not cache:
            return
        for key in [k for k in cache if k[0].startswith(prefix)]:
            del cache[key]
