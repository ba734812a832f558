"""Order pricing from the static price table."""

from __future__ import annotations

from typing import Optional, Tuple

from src.integrations.contracts.interfaces import Order
from src.utils.config_loader import PriceRule, PricingConfig


def _matches(rule: PriceRule, item: str, size: Optional[str]) -> bool:
    item_l = item.lower()
    if rule.keyword.lower() not in item_l:
        return False
    if rule.size is None:
        return True
    wanted = rule.size.lower()
    return (size or "").strip().lower() == wanted or wanted in item_l


def unit_price_for(item: str, size: Optional[str], pricing: PricingConfig) -> int:
    """First matching rule wins; anything unmatched uses the default unit price."""
    for rule in pricing.rules:
        if _matches(rule, item, size):
            return rule.unit_price
    return pricing.default_unit_price


def compute_total(order: Order, pricing: PricingConfig) -> Tuple[int, int]:
    """Return (unit_price, total) for the order."""
    unit_price = unit_price_for(order.item, order.size, pricing)
    return unit_price, unit_price * order.quantity
