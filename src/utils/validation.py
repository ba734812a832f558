"""Request validation for the storefront endpoints.

The storefront posts plain JSON objects. These helpers check that required
fields are present and well-formed, collecting one message per field.

On validation failure, raise `FormValidationError` so the API can return HTTP 400
with structured `field_errors`.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from src.integrations.contracts.interfaces import Order
from src.integrations.errors import FormValidationError

ORDER_REQUIRED_FIELDS = ("name", "email", "phone", "item", "quantity")
STK_PUSH_REQUIRED_FIELDS = ("phone", "amount")


def _as_str(v: Any) -> str:
    return "" if v is None else str(v)


def _strip(v: Any) -> str:
    return _as_str(v).strip()


def is_missing(v: Any) -> bool:
    """Missing means absent, blank, false or zero."""
    if v is None or v is False:
        return True
    if isinstance(v, str):
        return not v.strip()
    if isinstance(v, (int, float)):
        return v == 0
    return False


def add_error(errors: Dict[str, str], field: str, message: str) -> None:
    if field not in errors:
        errors[field] = message


def require_fields(payload: Dict[str, Any], fields: Iterable[str], errors: Dict[str, str]) -> None:
    for field in fields:
        if is_missing(payload.get(field)):
            add_error(errors, field, f"{field} is required")


def optional_str(payload: Dict[str, Any], field: str) -> Optional[str]:
    return _strip(payload.get(field)) or None


def parse_positive_int(payload: Dict[str, Any], field: str, errors: Dict[str, str]) -> int:
    raw = payload.get(field)
    if isinstance(raw, bool):
        add_error(errors, field, f"{field} must be a whole number")
        return 0
    try:
        val = int(_strip(raw))
    except (TypeError, ValueError):
        add_error(errors, field, f"{field} must be a whole number")
        return 0
    if val <= 0:
        add_error(errors, field, f"{field} must be at least 1")
    return val


def validate_order(payload: Dict[str, Any]) -> Order:
    errors: Dict[str, str] = {}
    require_fields(payload, ORDER_REQUIRED_FIELDS, errors)
    if errors:
        raise FormValidationError(errors, message="All fields are required.")

    quantity = parse_positive_int(payload, "quantity", errors)
    if errors:
        raise FormValidationError(errors, message="Quantity must be a positive whole number.")

    return Order(
        name=_strip(payload["name"]),
        email=_strip(payload["email"]),
        phone=_strip(payload["phone"]),
        item=_strip(payload["item"]),
        quantity=quantity,
        size=optional_str(payload, "size"),
        color=optional_str(payload, "color"),
    )


def validate_stk_push(payload: Dict[str, Any]) -> Dict[str, Any]:
    errors: Dict[str, str] = {}
    require_fields(payload, STK_PUSH_REQUIRED_FIELDS, errors)
    if errors:
        raise FormValidationError(errors, message="Phone and amount are required.")
    return {
        "phone": _strip(payload["phone"]),
        "amount": payload["amount"],
        "item": optional_str(payload, "item"),
    }


def validate_newsletter(payload: Dict[str, Any]) -> str:
    errors: Dict[str, str] = {}
    require_fields(payload, ("email",), errors)
    if errors:
        raise FormValidationError(errors, message="Email is required.")
    return _strip(payload["email"])
