from __future__ import annotations

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from gravis.app.common.errors import BackendError, BackendUnauthorized
from gravis.app.common.validation import validate_form
from gravis.modules.catalog.service import list_categories, list_products
from gravis.modules.inquiry.forms import ContactForm
from gravis.modules.inquiry.service import submit_contact_inquiry
from gravis.modules.pages.content import CONTACT, HERO, OFFICES, PERKS

bp = Blueprint("pages", __name__)


@bp.get("/")
def home():
    """Homepage: hero, category tiles, popular products."""
    popular = list_products({"limit": current_app.config["POPULAR_PRODUCTS_LIMIT"], "offset": 0})
    return render_template(
        "pages/home.html",
        hero=HERO,
        categories=list_categories(),
        popular_products=popular,
        perks=PERKS,
    )


@bp.get("/about")
def about():
    return render_template("pages/about.html", perks=PERKS)


def _render_contact(status: int = 200, **context):
    context.setdefault("errors", {})
    context.setdefault("form_values", {})
    return render_template(
        "pages/contact.html",
        contact=CONTACT,
        offices=OFFICES,
        maps_key=current_app.config.get("GOOGLE_MAPS_API_KEY"),
        **context,
    ), status


@bp.route("/contact", methods=["GET", "POST"])
def contact():
    if request.method == "GET":
        return _render_contact()

    form, errors = validate_form(ContactForm, request.form)
    if errors:
        return _render_contact(400, errors=errors, form_values=request.form)

    try:
        message = submit_contact_inquiry(form.name, form.email, form.phone_number, form.message)
    except BackendUnauthorized:
        raise
    except BackendError as exc:
        current_app.logger.warning("Contact enquiry failed: %s", exc)
        flash(exc.backend_message or "Failed to send your message. Please try again.", "error")
        return _render_contact(exc.status_code, form_values=request.form)

    flash(message, "success")
    return redirect(url_for("pages.contact"))
