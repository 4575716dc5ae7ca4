from __future__ import annotations

from flask import Blueprint, flash, make_response, redirect, render_template, request, url_for

from gravis.app.common.auth import remember_guest_id, safe_redirect_target
from gravis.app.common.errors import BackendError, BackendUnauthorized, abort_json
from gravis.app.common.validation import get_json, require_fields
from gravis.app.models import Cart
from gravis.modules.cart.service import (
    clamp_quantity,
    get_cart,
    max_quantity,
    set_quantity,
    update_cart_item,
)

bp = Blueprint("cart", __name__)
api_bp = Blueprint("cart_api", __name__)


@bp.get("/cart")
def view_cart():
    load_error = False
    try:
        cart = get_cart()
    except BackendUnauthorized:
        raise
    except BackendError as exc:
        flash(exc.message, "error")
        cart, load_error = Cart(), True
    return render_template("cart/cart.html", cart=cart, load_error=load_error, max_quantity=max_quantity())


def _requested_quantity(current: int) -> int | None:
    action = request.form.get("action", "")
    if action == "increment":
        return clamp_quantity(current + 1)
    if action == "decrement":
        return clamp_quantity(current - 1)
    if action == "remove":
        return 0
    try:
        return clamp_quantity(int(request.form.get("quantity", "")))
    except ValueError:
        return None


@bp.post("/cart/<product_id>")
def update_item(product_id: str):
    """POST /cart/<product_id> - +/-/remove or an explicit quantity for one row."""
    response = make_response(redirect(url_for("cart.view_cart")))
    try:
        cart = get_cart()
        item = cart.find(product_id)
        quantity = _requested_quantity(item.quantity if item else 0)
        if quantity is None:
            flash("Please enter a valid quantity", "error")
            return response
        changed, guest_id = set_quantity(cart, product_id, quantity)
    except BackendUnauthorized:
        raise
    except BackendError:
        flash("Failed to update cart", "error")
        return response

    remember_guest_id(response, guest_id)
    if changed and quantity == 0:
        flash("Item removed from cart", "success")
    return response


@bp.post("/products/<product_id>/add-to-cart")
def add_to_cart(product_id: str):
    name = (request.form.get("product_name") or "").strip() or "item"
    target = safe_redirect_target(request.form.get("next") or url_for("catalog.product_detail", product_id=product_id))
    response = make_response(redirect(target))
    try:
        quantity = clamp_quantity(int(request.form.get("quantity") or 1))
    except ValueError:
        quantity = 1
    try:
        guest_id = update_cart_item(product_id, max(quantity, 1))
    except BackendUnauthorized:
        raise
    except BackendError:
        flash("Failed to add to cart", "error")
        return response
    remember_guest_id(response, guest_id)
    flash(f"Added {name} to cart", "success")
    return response


# --- JSON endpoints (optimistic quantity updates from the cart page) ---

def _cart_json(cart: Cart) -> dict:
    return {
        "items": [
            {
                "product_id": i.product_id,
                "product_name": i.product_name,
                "quantity": i.quantity,
                "sale_price_in_paisa": i.sale_price_in_paisa,
                "line_total_rupee": i.line_total_rupee,
                "image_url": i.primary_image.url if i.primary_image else None,
            }
            for i in cart.items
        ],
        "total": cart.total,
        "item_count": cart.item_count,
        "subtotal_rupee": cart.subtotal_rupee,
    }


@api_bp.get("/cart")
def api_get_cart():
    return _cart_json(get_cart()), 200


@api_bp.put("/cart/<product_id>")
def api_update_cart_item(product_id: str):
    """PUT /api/cart/<product_id> - Set a line's quantity; 0 removes it."""
    data = get_json()
    require_fields(data, ["quantity"])
    try:
        quantity = int(data["quantity"])
    except (TypeError, ValueError):
        abort_json(400, "validation_error", "Quantity must be a whole number")
    if quantity != clamp_quantity(quantity):
        abort_json(400, "validation_error", f"Quantity must be between 0 and {max_quantity()}")

    guest_id = update_cart_item(product_id, quantity)
    body = _cart_json(get_cart())

    response = make_response(body, 200)
    remember_guest_id(response, guest_id)
    return response
