"""Typed wrappers around the products and product-categories endpoints.

Listing calls degrade to empty results when the backend misbehaves so a page
can still render its shell; single-product lookups propagate errors except
for 404, which means "no such product".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from pydantic import ValidationError

from gravis.app.common.errors import BackendError, BackendUnauthorized
from gravis.app.extensions import backend
from gravis.app.models import CategoryBanner, CategoryFilter, Product, ProductCategory

logger = logging.getLogger(__name__)


def _parse_list(model, data: Any) -> list:
    if not isinstance(data, list):
        return []
    items = []
    for raw in data:
        try:
            items.append(model.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Skipping malformed %s: %s", model.__name__, exc.errors()[:1])
    return items


# --- products ---

def list_products(query: Optional[Dict[str, Any]] = None) -> List[Product]:
    try:
        data = backend.get("/products", params=query or {})
    except BackendUnauthorized:
        raise
    except BackendError as exc:
        logger.error("Error fetching products: %s", exc)
        return []
    return _parse_list(Product, data)


def get_product(product_id: str) -> Optional[Product]:
    try:
        data = backend.get(f"/products/{quote(product_id, safe='')}")
    except BackendError as exc:
        if exc.status_code in (400, 404):
            return None
        raise
    if not isinstance(data, dict):
        return None
    try:
        return Product.model_validate(data)
    except ValidationError as exc:
        logger.warning("Malformed product %s: %s", product_id, exc.errors()[:1])
        raise BackendError(502, "invalid_response", "Unexpected response from server") from exc


@dataclass
class ProductPage:
    items: List[Product]
    offset: int
    limit: int

    @property
    def next_offset(self) -> Optional[int]:
        # a short page means we've reached the end
        if len(self.items) == self.limit:
            return self.offset + self.limit
        return None


def list_products_page(query: Dict[str, Any], offset: int, limit: int) -> ProductPage:
    params = dict(query)
    params.update(offset=offset, limit=limit)
    return ProductPage(items=list_products(params), offset=offset, limit=limit)


# --- categories ---

def list_categories() -> List[ProductCategory]:
    try:
        return _parse_list(ProductCategory, backend.get("/product-categories"))
    except BackendUnauthorized:
        raise
    except BackendError as exc:
        logger.warning("Error fetching product categories: %s", exc)
        return []


def list_category_banners() -> List[CategoryBanner]:
    try:
        return _parse_list(CategoryBanner, backend.get("/product-categories/banners"))
    except BackendUnauthorized:
        raise
    except BackendError as exc:
        logger.warning("Error fetching category banners: %s", exc)
        return []


def normalize_filters(raw: Any) -> List[CategoryFilter]:
    """Accept the shapes the filters endpoint has returned over time."""
    if isinstance(raw, list):
        entries = raw
    elif isinstance(raw, dict) and isinstance(raw.get("data"), list):
        entries = raw["data"]
    elif isinstance(raw, dict) and isinstance(raw.get("filters"), list):
        entries = raw["filters"]
    else:
        entries = []

    filters: List[CategoryFilter] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        filter_id = str(entry.get("id") if entry.get("id") is not None else "")
        raw_options = entry.get("options", entry.get("filter_options"))
        options = []
        if isinstance(raw_options, list):
            for opt in raw_options:
                opt = opt if isinstance(opt, dict) else {}
                category_filter_id = opt.get("category_filter_id")
                options.append({
                    "id": str(opt.get("id") if opt.get("id") is not None else ""),
                    "category_filter_id": str(category_filter_id if category_filter_id is not None else filter_id),
                    "value": str(opt.get("value") if opt.get("value") is not None else ""),
                    "sort_order": _sort_order(opt.get("sort_order")),
                })
        filters.append(CategoryFilter.model_validate({
            "id": filter_id,
            "category_id": str(entry.get("category_id") if entry.get("category_id") is not None else ""),
            "name": str(entry.get("name") if entry.get("name") is not None else ""),
            "slug": str(entry["slug"]) if entry.get("slug") is not None else None,
            "sort_order": _sort_order(entry.get("sort_order")),
            "options": options,
        }))
    return filters


def _sort_order(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def get_category_filters(category_id: Optional[str]) -> List[CategoryFilter]:
    if not category_id or not category_id.strip():
        return []
    try:
        data = backend.get(f"/product-categories/{quote(category_id, safe='')}/filters")
    except BackendUnauthorized:
        raise
    except BackendError as exc:
        logger.warning("Error fetching filters for category %s: %s", category_id, exc)
        return []
    return normalize_filters(data)
