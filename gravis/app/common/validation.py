from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Tuple, Type, TypeVar

from flask import request
from pydantic import BaseModel, ConfigDict, ValidationError

from gravis.app.common.errors import abort_json

M = TypeVar("M", bound=BaseModel)


def get_json() -> Dict[str, Any]:
    if not request.is_json:
        abort_json(400, "invalid_json", "Request must be application/json")
    data = request.get_json(silent=True)
    if data is None or not isinstance(data, dict):
        abort_json(400, "invalid_json", "Malformed JSON body")
    return data


def require_fields(data: Dict[str, Any], fields: Iterable[str]) -> None:
    missing = [f for f in fields if f not in data]
    if missing:
        abort_json(400, "validation_error", "Missing required fields", {"missing": missing})


def field_errors(exc: ValidationError) -> Dict[str, str]:
    """First message per field, keyed by field name, ready for inline rendering."""
    errors: Dict[str, str] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "__all__"
        if field in errors:
            continue
        message = err["msg"]
        # custom validators raise ValueError("..."); pydantic prefixes those
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors[field] = message
    return errors


def validate_form(schema: Type[M], data: Mapping[str, Any]) -> Tuple[M | None, Dict[str, str]]:
    try:
        raw = data.to_dict() if hasattr(data, "to_dict") else dict(data)
        return schema.model_validate(raw), {}
    except ValidationError as exc:
        return None, field_errors(exc)


EMAIL_REGEX = r'^[^\s@]+@[^\s@]+\.[^\s@]{2,}$'


class FormSchema(BaseModel):
    """Base for HTML form schemas: fields default to blank and are always validated."""

    model_config = ConfigDict(validate_default=True, extra="ignore")


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def optional_quantity(value: Any, minimum: int = 1, maximum: int = 1000) -> int | None:
    value = blank_to_none(value)
    if value is None:
        return None
    try:
        quantity = int(str(value).strip())
    except ValueError:
        raise ValueError("Quantity must be a whole number") from None
    if quantity < minimum or quantity > maximum:
        raise ValueError(f"Quantity must be between {minimum} and {maximum}")
    return quantity
