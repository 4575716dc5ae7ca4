from __future__ import annotations

import logging
from urllib.parse import quote

from flask import current_app

from gravis.app.extensions import backend
from gravis.app.models import Cart

logger = logging.getLogger(__name__)

CART_PATH = "/cart"
MIN_QUANTITY = 0


def max_quantity() -> int:
    return current_app.config.get("CART_MAX_QUANTITY", 100)


def clamp_quantity(quantity: int) -> int:
    return max(MIN_QUANTITY, min(quantity, max_quantity()))


def get_cart() -> Cart:
    data = backend.get(CART_PATH)
    if not isinstance(data, dict):
        return Cart()
    return Cart.model_validate(data)


def update_cart_item(product_id: str, quantity: int) -> str | None:
    """PUT /cart/<product_id>. Quantity 0 removes the line.

    Returns the guest id the backend assigned, if any, so the caller can keep
    it for the visitor's next requests.
    """
    data = backend.put(f"{CART_PATH}/{quote(product_id, safe='')}", json={"quantity": quantity})
    backend.invalidate(CART_PATH)
    if isinstance(data, dict) and data.get("guest_id"):
        return str(data["guest_id"])
    return None


def set_quantity(cart: Cart, product_id: str, quantity: int) -> tuple[bool, str | None]:
    """Apply a quantity control change for one cart row.

    Unchanged or out-of-range quantities are ignored, matching the +/- control
    which never leaves [0, CART_MAX_QUANTITY]. Returns (changed, guest_id).
    """
    item = cart.find(product_id)
    current = item.quantity if item else 0
    if quantity == current or quantity < MIN_QUANTITY or quantity > max_quantity():
        return False, None
    guest_id = update_cart_item(product_id, quantity)
    logger.info("cart %s: %s -> %s", product_id, current, quantity)
    return True, guest_id
