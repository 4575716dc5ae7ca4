from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from flask import url_for
from pydantic import field_validator

from gravis.app.common.auth import is_logged_in, login_url
from gravis.app.common.validation import EMAIL_REGEX, FormSchema, optional_quantity
from gravis.app.models import Product

NAME_MAX = 255
MESSAGE_MAX = 1000


def _message(value, required: bool) -> str:
    value = (value or "").strip()
    if required and not value:
        raise ValueError("Message is required")
    if len(value) > MESSAGE_MAX:
        raise ValueError(f"Message must be less than {MESSAGE_MAX} characters")
    return value


def _name(value) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("Name is required")
    if len(value) > NAME_MAX:
        raise ValueError(f"Name must be less than {NAME_MAX} characters")
    return value


class GuestEnquiryForm(FormSchema):
    """Enquiry from a visitor who isn't signed in. Mirrors the backend limits."""

    name: str = ""
    phone_number: str = ""
    message: str = ""
    quantity: Optional[int] = None

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value):
        return _name(value)

    @field_validator("phone_number", mode="before")
    @classmethod
    def _check_phone(cls, value):
        digits = re.sub(r"\D", "", value or "")
        if not re.fullmatch(r"[0-9]{10}", digits):
            raise ValueError("Phone number must be 10 digits")
        return digits

    @field_validator("message", mode="before")
    @classmethod
    def _check_message(cls, value):
        return _message(value, required=False)

    @field_validator("quantity", mode="before")
    @classmethod
    def _check_quantity(cls, value):
        return optional_quantity(value)


class ProductEnquiryForm(FormSchema):
    message: str = ""
    quantity: Optional[int] = None

    @field_validator("message", mode="before")
    @classmethod
    def _check_message(cls, value):
        return _message(value, required=True)

    @field_validator("quantity", mode="before")
    @classmethod
    def _check_quantity(cls, value):
        return optional_quantity(value)


class ContactForm(FormSchema):
    name: str = ""
    email: str = ""
    phone_number: str = ""
    message: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value):
        return _name(value)

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value):
        value = (value or "").strip().lower()
        if not re.match(EMAIL_REGEX, value):
            raise ValueError("Please enter a valid email")
        return value

    @field_validator("phone_number", mode="before")
    @classmethod
    def _check_phone(cls, value):
        value = (value or "").strip()
        if len(value) < 7 or len(value) > 20:
            raise ValueError("Please enter a valid phone number")
        return value

    @field_validator("message", mode="before")
    @classmethod
    def _check_message(cls, value):
        return _message(value, required=True)


@dataclass
class EnquiryWidget:
    logged_in: bool
    pending: bool
    label: str
    disabled: bool
    open: bool
    login_href: str


def enquiry_widget(
    product: Product,
    open_requested: bool = False,
    has_errors: bool = False,
    sent: bool = False,
) -> EnquiryWidget:
    """State of the enquiry button/dialog on a product page."""
    logged_in = is_logged_in()
    pending = logged_in and product.has_pending_inquiry
    if pending:
        label = f"Enquiry pending for {product.name}" if product.name else "Enquiry pending"
    else:
        label = "Enquire now"
    # open_enquiry=true is appended after login/verification
    auto_open = open_requested and logged_in and not pending
    return EnquiryWidget(
        logged_in=logged_in,
        pending=pending,
        label=label,
        disabled=pending,
        open=auto_open or has_errors or sent,
        login_href=login_url(url_for("catalog.product_detail", product_id=product.id)),
    )
