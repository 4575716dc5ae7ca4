from __future__ import annotations

import re

from pydantic import field_validator

from gravis.app.common.validation import EMAIL_REGEX, FormSchema


def _email(value) -> str:
    value = (value or "").strip().lower()
    if not re.match(EMAIL_REGEX, value):
        raise ValueError("Please enter a valid email")
    return value


class LoginForm(FormSchema):
    email: str = ""
    password: str = ""

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value):
        return _email(value)

    @field_validator("password", mode="before")
    @classmethod
    def _check_password(cls, value):
        value = (value or "").strip()
        if not value:
            raise ValueError("Password is required")
        if len(value) > 100:
            raise ValueError("Password must be at most 100 characters")
        return value


class RegisterForm(FormSchema):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    password: str = ""
    phone_number: str = ""

    @field_validator("first_name", mode="before")
    @classmethod
    def _check_first_name(cls, value):
        value = (value or "").strip()
        if not value:
            raise ValueError("First name is required")
        return value

    @field_validator("last_name", mode="before")
    @classmethod
    def _check_last_name(cls, value):
        value = (value or "").strip()
        if not value:
            raise ValueError("Last name is required")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value):
        return _email(value)

    @field_validator("password", mode="before")
    @classmethod
    def _check_password(cls, value):
        value = value or ""
        if len(value) < 8:
            raise ValueError("Password must be at least 8 characters")
        return value

    @field_validator("phone_number", mode="before")
    @classmethod
    def _check_phone(cls, value):
        value = (value or "").strip()
        if len(value) < 7 or len(value) > 20:
            raise ValueError("Please enter a valid phone number")
        return value


class VerifyEmailForm(FormSchema):
    token: str = ""
    otp: str = ""

    @field_validator("token", mode="before")
    @classmethod
    def _check_token(cls, value):
        value = (value or "").strip()
        if not value:
            raise ValueError("Verification token is required")
        return value

    @field_validator("otp", mode="before")
    @classmethod
    def _check_otp(cls, value):
        value = (value or "").strip()
        if len(value) != 6:
            raise ValueError("OTP must be 6 digits")
        return value
