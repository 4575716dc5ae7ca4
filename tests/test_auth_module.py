import json
from urllib.parse import parse_qs, unquote, urlsplit

import responses

from gravis.app.config import TestConfig
from gravis.modules.auth.routes import PENDING_REGISTRATION_KEY

from conftest import CUSTOMER

BACKEND = TestConfig.BACKEND_URL

REGISTRATION = {
    "first_name": "Asha",
    "last_name": "Verma",
    "email": "Asha@Example.com",
    "password": "s3cret-pass",
    "phone_number": "9876543210",
}


def _session_json(token="tok-123"):
    return {"token": token, "expires_at": "2030-01-01T00:00:00Z", "customer": CUSTOMER}


def _posts(backend_mock):
    # page renders also ask for the header cart, so only writes are counted
    return [c for c in backend_mock.calls if c.request.method == "POST"]


def _flashes(client):
    with client.session_transaction() as sess:
        return sess.get("_flashes", [])


# AUTH-001: login
def test_login_page_renders(client):
    r = client.get("/login?redirect_url=/cart")
    assert r.status_code == 200
    assert b'name="redirect_url" value="/cart"' in r.data


def test_login_success_sets_cookies_and_redirects(client, backend_mock):
    backend_mock.add(responses.POST, f"{BACKEND}/customers/login", json=_session_json())
    r = client.post("/login", data={"email": " ASHA@example.com ", "password": "pw", "redirect_url": "/cart"})
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/cart")
    assert json.loads(backend_mock.calls[0].request.body) == {"email": "asha@example.com", "password": "pw"}
    assert client.get_cookie("token").value == "tok-123"
    assert json.loads(unquote(client.get_cookie("user").value))["email"] == "asha@example.com"
    assert ("success", "Signed in successfully.") in _flashes(client)


def test_login_to_product_reopens_enquiry(client, backend_mock):
    backend_mock.add(responses.POST, f"{BACKEND}/customers/login", json=_session_json())
    r = client.post("/login", data={"email": "asha@example.com", "password": "pw", "redirect_url": "/products/p1"})
    assert r.headers["Location"].endswith("/products/p1?open_enquiry=true")


def test_login_ignores_offsite_redirect(client, backend_mock):
    backend_mock.add(responses.POST, f"{BACKEND}/customers/login", json=_session_json())
    r = client.post("/login", data={"email": "asha@example.com", "password": "pw", "redirect_url": "https://evil.example"})
    assert urlsplit(r.headers["Location"]).path == "/"


def test_login_validation_errors_inline(client, backend_mock):
    r = client.post("/login", data={"email": "not-an-email", "password": ""})
    assert r.status_code == 400
    assert b"Please enter a valid email" in r.data
    assert b"Password is required" in r.data
    assert not _posts(backend_mock)


def test_login_backend_error_shown_inline(client, backend_mock):
    backend_mock.add(responses.POST, f"{BACKEND}/customers/login", json={"code": "invalid_credentials", "message": "Invalid email or password"}, status=401)
    r = client.post("/login", data={"email": "asha@example.com", "password": "wrong"})
    assert r.status_code == 401
    assert b"Invalid email or password" in r.data
    assert client.get_cookie("token") is None


# AUTH-002: register + verify
def test_register_redirects_to_verification(client, backend_mock):
    backend_mock.add(responses.POST, f"{BACKEND}/customers/register", json={"token": "verify-tok", "expires_at": "2030-01-01T00:00:00Z"})
    r = client.post("/register", data=dict(REGISTRATION, redirect_url="/products/p1"))
    assert r.status_code == 302
    location = urlsplit(r.headers["Location"])
    assert location.path == "/verify-email"
    assert parse_qs(location.query) == {"token": ["verify-tok"], "redirect_url": ["/products/p1"]}
    sent = json.loads(backend_mock.calls[0].request.body)
    assert sent["email"] == "asha@example.com"
    with client.session_transaction() as sess:
        assert sess[PENDING_REGISTRATION_KEY]["first_name"] == "Asha"
    assert ("success", "Account created! Verify your email to finish signing in.") in _flashes(client)


def test_register_validation(client, backend_mock):
    r = client.post("/register", data=dict(REGISTRATION, password="short", first_name=" "))
    assert r.status_code == 400
    assert b"Password must be at least 8 characters" in r.data
    assert b"First name is required" in r.data
    assert not _posts(backend_mock)


def test_verify_email_logs_in(client, backend_mock):
    backend_mock.add(responses.POST, f"{BACKEND}/customers/verify-email", json=_session_json("session-tok"))
    with client.session_transaction() as sess:
        sess[PENDING_REGISTRATION_KEY] = REGISTRATION
    r = client.post("/verify-email?token=verify-tok&redirect_url=/products/p1", data={"otp": "123456"})
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/products/p1?open_enquiry=true")
    assert json.loads(backend_mock.calls[0].request.body) == {"token": "verify-tok", "otp": "123456"}
    assert client.get_cookie("token").value == "session-tok"
    with client.session_transaction() as sess:
        assert PENDING_REGISTRATION_KEY not in sess


def test_verify_email_requires_token(client, backend_mock):
    r = client.post("/verify-email", data={"otp": "123456"})
    assert r.status_code == 400
    assert b"Verification token is required." in r.data
    assert not _posts(backend_mock)


def test_verify_email_rejects_short_otp(client):
    r = client.post("/verify-email?token=verify-tok", data={"otp": "123"})
    assert r.status_code == 400
    assert b"OTP must be 6 digits" in r.data


def test_resend_without_pending_registration(client):
    r = client.post("/verify-email/resend", data={"token": "verify-tok"})
    assert r.status_code == 302
    assert ("error", "Please register again to resend the code.") in _flashes(client)


def test_resend_reregisters(client, backend_mock):
    backend_mock.add(responses.POST, f"{BACKEND}/customers/register", json={"token": "verify-tok-2"})
    with client.session_transaction() as sess:
        sess[PENDING_REGISTRATION_KEY] = REGISTRATION
    r = client.post("/verify-email/resend", data={"token": "verify-tok"})
    assert parse_qs(urlsplit(r.headers["Location"]).query)["token"] == ["verify-tok-2"]
    assert ("success", "A new code has been sent.") in _flashes(client)


# AUTH-003: session lifecycle
def test_header_shows_signed_in_customer(client, logged_in):
    body = client.get("/about").get_data(as_text=True)
    assert "Asha Verma" in body
    assert "Log out" in body


def test_malformed_user_cookie_is_ignored(client):
    client.set_cookie("user", "%7Bnot-json")
    body = client.get("/about").get_data(as_text=True)
    assert "Log in" in body


def test_logout_clears_cookies(client, logged_in):
    r = client.post("/logout")
    assert r.status_code == 302
    assert client.get_cookie("token") is None
    assert client.get_cookie("user") is None


def test_expired_token_redirects_to_login(client, backend_mock, logged_in):
    backend_mock.add(responses.GET, f"{BACKEND}/cart", json={"code": "unauthorized", "message": "Token expired"}, status=401)
    r = client.get("/cart?tab=1")
    assert r.status_code == 302
    location = urlsplit(r.headers["Location"])
    assert location.path == "/login"
    assert parse_qs(location.query) == {"redirect_url": ["/cart?tab=1"]}
    assert client.get_cookie("token") is None


def test_forbidden_shows_generic_message(client, backend_mock, logged_in):
    backend_mock.add(responses.GET, f"{BACKEND}/cart", status=403)
    r = client.post("/cart/p1", data={"action": "increment"})
    # cart row updates swallow backend failures into a flash
    assert r.status_code == 302

    backend_mock.add(responses.GET, f"{BACKEND}/products/p1", status=403)
    r = client.get("/products/p1")
    assert r.status_code == 403
    assert b"You are not allowed to access this resource" in r.data


def test_expired_token_on_catalog_page_redirects_to_login(client, backend_mock, logged_in):
    expired = {"code": "unauthorized", "message": "Token expired"}
    for path in ("/products", "/product-categories", "/product-categories/banners", "/cart"):
        backend_mock.add(responses.GET, f"{BACKEND}{path}", json=expired, status=401)
    r = client.get("/products")
    assert r.status_code == 302
    location = urlsplit(r.headers["Location"])
    assert location.path == "/login"
    assert parse_qs(location.query) == {"redirect_url": ["/products"]}
    assert client.get_cookie("token") is None
    assert client.get_cookie("user") is None


def test_expired_token_in_header_cart_redirects_to_login(client, backend_mock, logged_in):
    backend_mock.add(responses.GET, f"{BACKEND}/cart", json={"code": "unauthorized"}, status=401)
    r = client.get("/about")
    assert r.status_code == 302
    location = urlsplit(r.headers["Location"])
    assert location.path == "/login"
    assert parse_qs(location.query) == {"redirect_url": ["/about"]}
    assert client.get_cookie("token") is None
    assert client.get_cookie("user") is None


def test_expired_token_on_login_page_only_clears_cookies(client, backend_mock, logged_in):
    backend_mock.add(responses.GET, f"{BACKEND}/cart", json={"code": "unauthorized"}, status=401)
    r = client.get("/login")
    assert r.status_code == 200
    assert "Asha Verma" not in r.get_data(as_text=True)
    assert client.get_cookie("token") is None


# AUTH-004: fallback messages when the backend gives no reason
def test_login_failure_without_backend_message(client, backend_mock):
    backend_mock.add(responses.POST, f"{BACKEND}/customers/login", json={"code": "bad_request"}, status=400)
    r = client.post("/login", data={"email": "asha@example.com", "password": "pw"})
    body = r.get_data(as_text=True)
    assert r.status_code == 400
    assert "Login failed. Please try again." in body
    assert "Something went wrong" not in body


def test_register_failure_without_backend_message(client, backend_mock):
    backend_mock.add(responses.POST, f"{BACKEND}/customers/register", json={}, status=409)
    r = client.post("/register", data=REGISTRATION)
    assert r.status_code == 409
    assert b"Registration failed. Please try again." in r.data


def test_verify_failure_without_backend_message(client, backend_mock):
    backend_mock.add(responses.POST, f"{BACKEND}/customers/verify-email", body="", status=400)
    r = client.post("/verify-email?token=verify-tok", data={"otp": "123456"})
    assert r.status_code == 400
    assert b"Verification failed. Please try again." in r.data
