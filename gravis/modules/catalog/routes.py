from __future__ import annotations

from typing import List, Optional

from flask import Blueprint, abort, current_app, render_template, request, url_for

from gravis.app.common.query import parse_product_query
from gravis.app.models import CategoryBanner, Product
from gravis.modules.catalog.service import (
    get_category_filters,
    get_product,
    list_categories,
    list_category_banners,
    list_products_page,
)
from gravis.modules.inquiry.forms import enquiry_widget

bp = Blueprint("catalog", __name__)
api_bp = Blueprint("catalog_api", __name__)

DEFAULT_BANNER = {"url": "/static/images/hero-banner.svg", "alt": "Gravis promotional banner"}


def _offset_arg() -> int:
    try:
        return max(0, int(request.args.get("offset", 0)))
    except ValueError:
        return 0


def _banner_for(category_id: Optional[str], banners: List[CategoryBanner]) -> dict:
    if not category_id:
        return DEFAULT_BANNER
    for b in banners:
        if b.id == category_id and b.banner_image and b.banner_image.url:
            return {"url": b.banner_image.url, "alt": b.name or "Category banner"}
    return DEFAULT_BANNER


@bp.get("/products")
def products():
    """GET /products - Catalog listing driven entirely by URL state.

    Query params:
      - search: free text, debounced client side before it lands here
      - category_id: UUIDv7 of the selected category
      - option_ids: repeated, selected filter options of that category
      - offset: first product of the page
    """
    query = parse_product_query(request.args)
    page = list_products_page(
        query.to_backend_params(),
        offset=_offset_arg(),
        limit=current_app.config["PRODUCTS_PAGE_SIZE"],
    )
    categories = list_categories()
    return render_template(
        "catalog/products.html",
        query=query,
        page=page,
        categories=categories,
        current_category=next((c for c in categories if c.id == query.category_id), None),
        category_filters=get_category_filters(query.category_id),
        banner=_banner_for(query.category_id, list_category_banners()),
        debounce_ms=current_app.config["SEARCH_DEBOUNCE_MS"],
    )


def render_product_page(product: Product, status: int = 200, **context):
    """Shared by the enquiry handlers, which re-render with inline form errors."""
    context.setdefault("errors", {})
    context.setdefault("form_values", {})
    context.setdefault("enquiry_sent", False)
    widget = enquiry_widget(
        product,
        open_requested=request.args.get("open_enquiry") == "true",
        has_errors=bool(context["errors"]),
        sent=context["enquiry_sent"],
    )
    left, right = product.technical_detail_columns
    return render_template(
        "catalog/product_detail.html",
        product=product,
        enquiry=widget,
        details_left=left,
        details_right=right,
        **context,
    ), status


@bp.get("/products/<product_id>")
def product_detail(product_id: str):
    product = get_product(product_id)
    if product is None:
        abort(404)
    return render_product_page(product)


# --- JSON endpoints (client-side infinite scroll and filter widgets) ---

def _product_json(p: Product) -> dict:
    return {
        "id": p.id,
        "name": p.name,
        "category": p.category.name if p.category else None,
        "sale_price_in_paisa": p.sale_price_in_paisa,
        "sale_price_in_rupee": p.sale_price_in_rupee,
        "image_url": p.primary_image_url,
        "points": p.points[:3],
        "product_label": p.product_label,
        "warranty_label": p.warranty_label,
        "url": url_for("catalog.product_detail", product_id=p.id),
    }


@api_bp.get("/products")
def api_list_products():
    """GET /api/products - One page of products for the current URL state."""
    query = parse_product_query(request.args)
    limit = current_app.config["PRODUCTS_PAGE_SIZE"]
    try:
        limit = max(1, min(int(request.args.get("limit", limit)), 100))
    except ValueError:
        pass
    page = list_products_page(query.to_backend_params(), offset=_offset_arg(), limit=limit)
    return {
        "items": [_product_json(p) for p in page.items],
        "paging": {"limit": page.limit, "offset": page.offset, "next_offset": page.next_offset},
    }, 200


@api_bp.get("/product-categories")
def api_list_categories():
    return {"items": [c.model_dump(mode="json") for c in list_categories()]}, 200


@api_bp.get("/product-categories/<category_id>/filters")
def api_category_filters(category_id: str):
    return {"items": [f.model_dump(mode="json") for f in get_category_filters(category_id)]}, 200
