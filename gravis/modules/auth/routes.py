from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, session, url_for

from gravis.app.common.auth import login_user, logout_user, post_auth_target, safe_redirect_target
from gravis.app.common.errors import BackendError
from gravis.app.common.validation import validate_form
from gravis.modules.auth.forms import LoginForm, RegisterForm, VerifyEmailForm
from gravis.modules.auth.service import login_customer, register_customer, verify_customer_email

bp = Blueprint("auth", __name__)

PENDING_REGISTRATION_KEY = "pending_customer_register"


def _redirect_url() -> str | None:
    return request.values.get("redirect_url") or None


def _render(template: str, status: int = 200, **context):
    context.setdefault("errors", {})
    context.setdefault("form_values", request.form)
    context.setdefault("error_message", None)
    return render_template(template, redirect_url=_redirect_url(), **context), status


@bp.route("/login", methods=["GET", "POST"])
def login():
    """GET/POST /login - Authenticate against the backend and keep the token in cookies."""
    if request.method == "GET":
        return _render("auth/login.html", form_values={})

    form, errors = validate_form(LoginForm, request.form)
    if errors:
        return _render("auth/login.html", 400, errors=errors)

    try:
        auth = login_customer(form.email, form.password)
    except BackendError as exc:
        # a 401 here means bad credentials, not an expired session
        return _render(
            "auth/login.html",
            exc.status_code,
            error_message=exc.backend_message or "Login failed. Please try again.",
        )

    response = redirect(post_auth_target(_redirect_url()))
    login_user(response, auth.customer, auth.token, auth.expires_at)
    flash("Signed in successfully.", "success")
    return response


@bp.route("/register", methods=["GET", "POST"])
def register():
    if request.method == "GET":
        return _render("auth/register.html", form_values={})

    form, errors = validate_form(RegisterForm, request.form)
    if errors:
        flash("Please fix the highlighted fields", "error")
        return _render("auth/register.html", 400, errors=errors)

    payload = form.model_dump()
    try:
        auth = register_customer(payload)
    except BackendError as exc:
        return _render(
            "auth/register.html",
            exc.status_code,
            error_message=exc.backend_message or "Registration failed. Please try again.",
        )

    # kept so the verification page can re-request a code
    session[PENDING_REGISTRATION_KEY] = payload
    flash("Account created! Verify your email to finish signing in.", "success")
    return redirect(url_for(
        "auth.verify_email",
        token=auth.token,
        redirect_url=safe_redirect_target(_redirect_url()),
    ))


@bp.route("/verify-email", methods=["GET", "POST"])
def verify_email():
    """GET/POST /verify-email - Exchange the emailed 6-digit code for a session."""
    token = request.args.get("token", "")
    if request.method == "GET":
        return _render("auth/verify_email.html", token=token, form_values={})

    if not token.strip():
        flash("Verification token is required.", "error")
        return _render("auth/verify_email.html", 400, token=token)

    form, errors = validate_form(VerifyEmailForm, {"token": token, "otp": request.form.get("otp", "")})
    if errors:
        flash("Please fix the highlighted fields", "error")
        return _render("auth/verify_email.html", 400, token=token, errors=errors)

    try:
        auth = verify_customer_email(form.token, form.otp)
    except BackendError as exc:
        return _render(
            "auth/verify_email.html",
            exc.status_code,
            token=token,
            error_message=exc.backend_message or "Verification failed. Please try again.",
        )

    response = redirect(post_auth_target(_redirect_url()))
    login_user(response, auth.customer, auth.token, auth.expires_at)
    session.pop(PENDING_REGISTRATION_KEY, None)
    flash("Email verified! You're now signed in.", "success")
    return response


@bp.post("/verify-email/resend")
def resend_verification():
    redirect_url = _redirect_url()
    pending = session.get(PENDING_REGISTRATION_KEY)
    if not pending:
        flash("Please register again to resend the code.", "error")
        return redirect(url_for("auth.verify_email", token=request.values.get("token", ""), redirect_url=redirect_url))

    try:
        auth = register_customer(pending)
    except BackendError as exc:
        flash(exc.backend_message or "Verification failed. Please try again.", "error")
        return redirect(url_for("auth.verify_email", token=request.values.get("token", ""), redirect_url=redirect_url))

    flash("A new code has been sent.", "success")
    return redirect(url_for("auth.verify_email", token=auth.token, redirect_url=redirect_url))


@bp.post("/logout")
def logout():
    response = redirect(url_for("pages.home"))
    logout_user(response)
    flash("Logged out.", "success")
    return response
