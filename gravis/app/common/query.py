"""Product listing query: parsing from the URL and URL-state helpers.

Search text, the selected category and the selected filter options all live
in the query string so listings can be linked, bookmarked and shared.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, Field, ValidationError, field_validator
from werkzeug.datastructures import MultiDict

ALL_CATEGORIES_VALUE = "__all__"
PAGING_KEYS = ("offset",)

_UUID7 = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-7[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE)


def is_uuid7(value: Any) -> bool:
    return isinstance(value, str) and bool(_UUID7.match(value))


class ProductListQuery(BaseModel):
    category_id: Optional[str] = None
    search: Optional[str] = None
    option_ids: List[str] = Field(default_factory=list)

    @field_validator("category_id", mode="before")
    @classmethod
    def _category_id(cls, value):
        if value in (None, ""):
            return None
        if not is_uuid7(value):
            raise ValueError("Invalid category ID")
        return value

    @field_validator("search", mode="before")
    @classmethod
    def _search(cls, value):
        value = (value or "").strip().lower()
        return value or None

    @field_validator("option_ids", mode="before")
    @classmethod
    def _option_ids(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        value = [v for v in value if v]
        # one bad id drops the whole selection rather than filtering on a subset
        if not all(is_uuid7(v) for v in value):
            return []
        return value

    def to_backend_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.category_id:
            params["category_id"] = self.category_id
        if self.search:
            params["search"] = self.search
        if self.option_ids:
            params["option_ids"] = list(self.option_ids)
        return params

    @property
    def has_active_filters(self) -> bool:
        return bool(self.option_ids)


def parse_product_query(args: MultiDict) -> ProductListQuery:
    raw = {
        "category_id": args.get("category_id", ""),
        "search": args.get("search", ""),
        "option_ids": args.getlist("option_ids"),
    }
    try:
        return ProductListQuery.model_validate(raw)
    except ValidationError:
        return ProductListQuery()


def _copy(args: MultiDict) -> MultiDict:
    params = MultiDict(args)
    for key in PAGING_KEYS:
        params.pop(key, None)
    return params


def build_url(path: str, params: MultiDict) -> str:
    query = urlencode(list(params.items(multi=True)))
    return f"{path}?{query}" if query else path


def with_search(args: MultiDict, search: str | None, path: str = "/products") -> str:
    params = _copy(args)
    search = (search or "").strip()
    if search:
        params["search"] = search
    else:
        params.pop("search", None)
    return build_url(path, params)


def with_category(args: MultiDict, category_id: str | None, path: str = "/products") -> str:
    params = _copy(args)
    if not category_id or category_id == ALL_CATEGORIES_VALUE:
        params.pop("category_id", None)
    else:
        params["category_id"] = category_id
    # option ids belong to the previous category's filters
    params.poplist("option_ids")
    return build_url(path, params)


def toggle_option(args: MultiDict, option_id: str, path: str = "/products") -> str:
    params = _copy(args)
    selected = params.poplist("option_ids")
    if option_id in selected:
        selected = [o for o in selected if o != option_id]
    else:
        selected.append(option_id)
    for oid in selected:
        params.add("option_ids", oid)
    return build_url(path, params)


def clear_options(args: MultiDict, path: str = "/products") -> str:
    params = _copy(args)
    params.poplist("option_ids")
    return build_url(path, params)


def with_offset(args: MultiDict, offset: int, path: str = "/products") -> str:
    params = _copy(args)
    if offset:
        params["offset"] = str(offset)
    return build_url(path, params)
