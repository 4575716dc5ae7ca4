"""Enquiry submission. Enquiries are write-only from the storefront's side."""

from __future__ import annotations

from typing import Any, Dict, Optional

from gravis.app.extensions import backend


def _message(data: Any, default: str) -> str:
    if isinstance(data, dict) and isinstance(data.get("message"), str) and data["message"]:
        return data["message"]
    return default


def _with_quantity(payload: Dict[str, Any], quantity: Optional[int]) -> Dict[str, Any]:
    if quantity is not None:
        payload["quantity"] = quantity
    return payload


def submit_product_inquiry(product_id: str, message: str, quantity: Optional[int] = None) -> str:
    """POST /inquiry/product for the signed-in customer."""
    data = backend.post(
        "/inquiry/product",
        json=_with_quantity({"product_id": product_id, "message": message}, quantity),
    )
    # the product now reports has_pending_inquiry
    backend.invalidate(f"/products/{product_id}")
    return _message(data, "Your enquiry has been submitted. We'll get back to you soon.")


def submit_guest_product_inquiry(
    product_id: str,
    name: str,
    phone_number: str,
    message: str = "",
    quantity: Optional[int] = None,
) -> str:
    data = backend.post(
        "/inquiry/product/guest",
        json=_with_quantity(
            {"product_id": product_id, "name": name, "phone_number": phone_number, "message": message},
            quantity,
        ),
    )
    return _message(data, "Thank you! We've received your enquiry and will call you shortly.")


def submit_contact_inquiry(name: str, email: str, phone_number: str, message: str) -> str:
    data = backend.post(
        "/inquiry/contact",
        json={"name": name, "email": email, "phone_number": phone_number, "message": message},
    )
    return _message(data, "Thanks for reaching out! We'll get back to you soon.")
