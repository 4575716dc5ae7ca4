import pytest
import requests
import responses
from flask import g

from gravis.app.common.errors import BackendError, BackendForbidden, BackendUnauthorized, BackendUnavailable
from gravis.app.config import TestConfig
from gravis.app.extensions import backend

BACKEND = TestConfig.BACKEND_URL


def test_attaches_token_guest_id_and_request_id(app, backend_mock):
    backend_mock.add(responses.GET, f"{BACKEND}/cart", json={"items": []})
    with app.test_request_context("/", headers={"X-Request-ID": "rid-1"}):
        app.preprocess_request()
        g.auth_token = "tok-123"
        g.guest_id = "guest-9"
        backend.get("/cart")

    sent = backend_mock.calls[0].request.headers
    assert sent["Authorization"] == "Bearer tok-123"
    assert sent["x-guest-id"] == "guest-9"
    assert sent["X-Request-ID"] == "rid-1"


def test_anonymous_request_has_no_auth_headers(app, backend_mock):
    backend_mock.add(responses.GET, f"{BACKEND}/products", json=[])
    with app.test_request_context("/"):
        app.preprocess_request()
        backend.get("/products")

    sent = backend_mock.calls[0].request.headers
    assert "Authorization" not in sent
    assert "x-guest-id" not in sent


def test_unauthorized_code_maps_to_backend_unauthorized(app, backend_mock):
    backend_mock.add(responses.GET, f"{BACKEND}/cart", json={"code": "unauthorized", "message": "Token expired"}, status=401)
    with app.test_request_context("/"):
        with pytest.raises(BackendUnauthorized) as exc:
            backend.request("GET", "/cart")
    assert exc.value.message == "Token expired"


def test_401_without_unauthorized_code_is_plain_error(app, backend_mock):
    backend_mock.add(responses.POST, f"{BACKEND}/customers/login", json={"code": "invalid_credentials", "message": "Wrong password"}, status=401)
    with app.test_request_context("/"):
        with pytest.raises(BackendError) as exc:
            backend.post("/customers/login", json={})
    assert not isinstance(exc.value, BackendUnauthorized)
    assert exc.value.status_code == 401
    assert exc.value.message == "Wrong password"


def test_forbidden_has_generic_message(app, backend_mock):
    backend_mock.add(responses.GET, f"{BACKEND}/cart", json={"message": "nope"}, status=403)
    with app.test_request_context("/"):
        with pytest.raises(BackendForbidden) as exc:
            backend.request("GET", "/cart")
    assert exc.value.message == "You are not authorized to access this resource"


def test_server_error_has_generic_message(app, backend_mock):
    backend_mock.add(responses.GET, f"{BACKEND}/cart", json={"message": "stack trace"}, status=500)
    with app.test_request_context("/"):
        with pytest.raises(BackendError) as exc:
            backend.request("GET", "/cart")
    assert exc.value.status_code == 500
    assert exc.value.message == "Internal server error"


def test_other_errors_keep_code_and_message(app, backend_mock):
    backend_mock.add(responses.GET, f"{BACKEND}/products/x", json={"code": "not_found", "message": "Product not found"}, status=404)
    with app.test_request_context("/"):
        with pytest.raises(BackendError) as exc:
            backend.request("GET", "/products/x")
    assert (exc.value.status_code, exc.value.code, exc.value.message) == (404, "not_found", "Product not found")


def test_connection_error_maps_to_unavailable(app, backend_mock):
    backend_mock.add(responses.GET, f"{BACKEND}/cart", body=requests.ConnectionError("refused"))
    with app.test_request_context("/"):
        with pytest.raises(BackendUnavailable) as exc:
            backend.request("GET", "/cart")
    assert exc.value.status_code == 503


def test_empty_body_returns_none(app, backend_mock):
    backend_mock.add(responses.PUT, f"{BACKEND}/cart/p1", body="", status=204)
    with app.test_request_context("/"):
        assert backend.put("/cart/p1", json={"quantity": 1}) is None


def test_non_json_body_is_bad_gateway(app, backend_mock):
    backend_mock.add(responses.GET, f"{BACKEND}/products", body="<html>oops</html>", status=200)
    with app.test_request_context("/"):
        with pytest.raises(BackendError) as exc:
            backend.request("GET", "/products")
    assert exc.value.status_code == 502


def test_get_is_cached_within_a_request(app, backend_mock):
    backend_mock.add(responses.GET, f"{BACKEND}/cart", json={"items": []})
    with app.test_request_context("/"):
        backend.get("/cart")
        backend.get("/cart")
    assert len(backend_mock.calls) == 1


def test_cache_key_includes_params(app, backend_mock):
    backend_mock.add(responses.GET, f"{BACKEND}/products", json=[])
    with app.test_request_context("/"):
        backend.get("/products", params={"offset": 0})
        backend.get("/products", params={"offset": 24})
        backend.get("/products", params={"offset": 0})
    assert len(backend_mock.calls) == 2


def test_invalidate_drops_matching_prefix(app, backend_mock):
    backend_mock.add(responses.GET, f"{BACKEND}/cart", json={"items": []})
    backend_mock.add(responses.GET, f"{BACKEND}/products", json=[])
    with app.test_request_context("/"):
        backend.get("/cart")
        backend.get("/products")
        backend.invalidate("/cart")
        backend.get("/cart")
        backend.get("/products")
    assert [c.request.path_url.split("?")[0] for c in backend_mock.calls] == ["/api/cart", "/api/products", "/api/cart"]


def test_cache_does_not_outlive_the_request(app, backend_mock):
    backend_mock.add(responses.GET, f"{BACKEND}/cart", json={"items": []})
    with app.test_request_context("/"):
        backend.get("/cart")
    with app.test_request_context("/"):
        backend.get("/cart")
    assert len(backend_mock.calls) == 2
