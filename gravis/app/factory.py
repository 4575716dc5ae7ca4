from __future__ import annotations

import logging
from datetime import datetime, timezone
from urllib.parse import urlsplit

from flask import Flask, flash, g, jsonify, redirect, render_template, request
from werkzeug.exceptions import HTTPException

from gravis.app.api.register import register_blueprints
from gravis.app.cli import cli_bp
from gravis.app.common import query as url_state
from gravis.app.common.auth import current_url, current_user, hydrate_auth, login_url, logout_user
from gravis.app.common.errors import ApiError, BackendError, BackendForbidden, BackendUnauthorized
from gravis.app.common.formatting import format_inr, paisa_to_rupee, tel_href
from gravis.app.common.request_context import echo_request_id, init_request_id
from gravis.app.config import Config
from gravis.app.extensions import backend, cors
from gravis.modules.cart.service import get_cart
from gravis.modules.pages.content import CONTACT, FOOTER_GROUPS, NAV_LINKS, SOCIAL_LINKS


def _wants_json() -> bool:
    return request.path.startswith("/api/") or request.path == "/api"


def _return_url() -> str:
    """Where to send the visitor after they log in again."""
    if request.method == "GET":
        return current_url()
    referrer = urlsplit(request.referrer or "")
    if referrer.netloc in ("", request.host) and referrer.path.startswith("/"):
        return f"{referrer.path}?{referrer.query}" if referrer.query else referrer.path
    return "/"


def create_app(config_object: type[Config] = Config) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object)

    # Basic logging
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # Extensions
    backend.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS") or "*"}})

    @app.before_request
    def _before_request():
        init_request_id()
        hydrate_auth()

    app.after_request(echo_request_id)

    @app.after_request
    def _expire_rejected_session(response):
        # the header cart fetch was refused with 401 while rendering this page
        if not g.get("auth_rejected"):
            return response
        if request.blueprint == "auth":
            return logout_user(response)
        return logout_user(redirect(login_url(_return_url())))

    # Health endpoint (for Docker/uptime checks)
    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    register_blueprints(app)

    # CLI (flask backend check)
    app.register_blueprint(cli_bp)

    # --- templates ---
    app.add_template_filter(format_inr, "inr")
    app.add_template_filter(paisa_to_rupee, "paisa_to_rupee")
    app.add_template_filter(tel_href, "tel_href")

    @app.template_global()
    def products_url(action: str, *args):
        """URL-state links for the catalog page, e.g. products_url('toggle_option', opt.id)."""
        helpers = {
            "search": url_state.with_search,
            "category": url_state.with_category,
            "toggle_option": url_state.toggle_option,
            "clear_options": url_state.clear_options,
            "offset": url_state.with_offset,
        }
        return helpers[action](request.args, *args)

    @app.context_processor
    def inject_layout():
        """Inject header/footer data (user + cart badge count) into all templates."""
        try:
            cart_count = get_cart().item_count
        except BackendUnauthorized:
            # templates can't redirect; _expire_rejected_session does it after rendering
            g.auth_rejected = True
            cart_count = 0
        except BackendError:
            cart_count = 0
        return {
            "nav_user": None if g.get("auth_rejected") else current_user(),
            "nav_cart_count": cart_count,
            "nav_links": NAV_LINKS,
            "social_links": SOCIAL_LINKS,
            "footer_groups": FOOTER_GROUPS,
            "contact": CONTACT,
            "staging": app.config.get("STAGING", False),
            "current_year": datetime.now(timezone.utc).year,
        }

    # --- error handlers ---
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return jsonify(err.to_dict(g.get("request_id"))), err.status_code

    @app.errorhandler(BackendUnauthorized)
    def handle_backend_unauthorized(err: BackendUnauthorized):
        # stored token is no longer accepted; drop it and ask for a fresh login
        if _wants_json():
            response = jsonify(err.to_api_error().to_dict(g.get("request_id")))
            response.status_code = 401
        else:
            response = redirect(login_url(_return_url()))
        logout_user(response)
        return response

    @app.errorhandler(BackendError)
    def handle_backend_error(err: BackendError):
        app.logger.warning("Backend error on %s %s: %s %s", request.method, request.path, err.status_code, err.code)
        if _wants_json():
            return jsonify(err.to_api_error().to_dict(g.get("request_id"))), err.status_code
        if isinstance(err, BackendForbidden):
            flash("You are not allowed to access this resource", "error")
        elif err.status_code >= 500:
            flash("Internal server error" if err.status_code == 500 else err.message, "error")
        else:
            flash(err.message, "error")
        return render_template("errors/error.html", status=err.status_code, message=err.message), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        if _wants_json():
            # Normalize Werkzeug errors into our JSON shape
            payload = {
                "error": {
                    "code": "http_error",
                    "message": err.description,
                    "details": {"name": err.name},
                    "request_id": g.get("request_id"),
                }
            }
            return jsonify(payload), err.code or 500
        return render_template("errors/error.html", status=err.code, message=err.description), err.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        app.logger.exception("Unhandled exception")
        if _wants_json():
            payload = {
                "error": {
                    "code": "internal_error",
                    "message": "Internal server error",
                    "details": {},
                    "request_id": g.get("request_id"),
                }
            }
            return jsonify(payload), 500
        return render_template("errors/error.html", status=500, message="Internal server error"), 500

    return app
