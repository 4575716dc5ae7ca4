from __future__ import annotations

from flask import Blueprint, abort, current_app, flash, redirect, request, url_for

from gravis.app.common.auth import is_logged_in, login_url
from gravis.app.common.errors import BackendError, BackendUnauthorized, abort_json
from gravis.app.common.validation import get_json, validate_form
from gravis.modules.catalog.routes import render_product_page
from gravis.modules.catalog.service import get_product
from gravis.modules.inquiry.forms import ContactForm, GuestEnquiryForm, ProductEnquiryForm
from gravis.modules.inquiry.service import (
    submit_contact_inquiry,
    submit_guest_product_inquiry,
    submit_product_inquiry,
)

bp = Blueprint("inquiry", __name__)
api_bp = Blueprint("inquiry_api", __name__)

ENQUIRY_FAILED = "Failed to submit enquiry. Please try again."


def _product_or_404(product_id: str):
    product = get_product(product_id)
    if product is None:
        abort(404)
    return product


@bp.post("/products/<product_id>/enquiry")
def product_enquiry(product_id: str):
    """POST /products/<id>/enquiry - Enquiry from a signed-in customer."""
    product_url = url_for("catalog.product_detail", product_id=product_id)
    if not is_logged_in():
        return redirect(login_url(product_url))

    product = _product_or_404(product_id)
    form, errors = validate_form(ProductEnquiryForm, request.form)
    if errors:
        flash("Please fix the highlighted fields", "error")
        return render_product_page(product, 400, errors=errors, form_values=request.form, form_kind="member")

    try:
        submit_product_inquiry(product.id, form.message, form.quantity)
    except BackendUnauthorized:
        raise
    except BackendError as exc:
        current_app.logger.warning("Product enquiry for %s failed: %s", product.id, exc)
        flash(exc.backend_message or ENQUIRY_FAILED, "error")
        return render_product_page(product, exc.status_code, form_values=request.form, form_kind="member")

    flash("Your enquiry has been submitted. We'll get back to you soon.", "success")
    return redirect(product_url)


@bp.post("/products/<product_id>/guest-enquiry")
def guest_product_enquiry(product_id: str):
    """POST /products/<id>/guest-enquiry - Callback request without an account."""
    product = _product_or_404(product_id)
    form, errors = validate_form(GuestEnquiryForm, request.form)
    if errors:
        flash("Please fix the highlighted fields", "error")
        return render_product_page(product, 400, errors=errors, form_values=request.form, form_kind="guest")

    try:
        message = submit_guest_product_inquiry(
            product.id,
            name=form.name,
            phone_number=form.phone_number,
            message=form.message,
            quantity=form.quantity,
        )
    except BackendUnauthorized:
        raise
    except BackendError as exc:
        current_app.logger.warning("Guest enquiry for %s failed: %s", product.id, exc)
        flash(ENQUIRY_FAILED, "error")
        return render_product_page(product, exc.status_code, form_values=request.form, form_kind="guest")

    current_app.logger.info("Guest enquiry for %s accepted: %s", product.id, message)
    return render_product_page(product, enquiry_sent=True)


@api_bp.post("/inquiry/contact")
def api_contact_inquiry():
    """POST /api/inquiry/contact - JSON variant of the contact form."""
    form, errors = validate_form(ContactForm, get_json())
    if errors:
        abort_json(400, "validation_error", "Invalid enquiry", errors)
    message = submit_contact_inquiry(form.name, form.email, form.phone_number, form.message)
    return {"message": message}, 201
