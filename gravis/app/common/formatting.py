from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

PAISA_PER_RUPEE = 100


def paisa_to_rupee(paisa: int | float | None) -> float:
    return (paisa or 0) / PAISA_PER_RUPEE


def _group_indian(digits: str) -> str:
    # 12345678 -> 1,23,45,678
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_inr(rupee: int | float | Decimal | None) -> str:
    """Whole-rupee price with Indian digit grouping, e.g. ``₹1,23,456``."""
    amount = Decimal(str(rupee or 0)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}₹{_group_indian(str(abs(int(amount))))}"


def tel_href(phone: str) -> str:
    return "tel:" + "".join(phone.split())
