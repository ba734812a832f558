from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from src.integrations.contracts.interfaces import AccessToken
from src.integrations.contracts.payments import StkCallback
from src.integrations.errors import AuthError, IntegrationError

DEFAULT_TOKEN_LIFETIME_SECONDS = 3599


class IntegrationResponseError(IntegrationError, ValueError):
    pass


class TokenResponseModel(BaseModel):
    access_token: str = Field(min_length=1)
    expires_in: int = DEFAULT_TOKEN_LIFETIME_SECONDS


class CallbackItemModel(BaseModel):
    Name: str
    Value: Any = None


class StkCallbackModel(BaseModel):
    MerchantRequestID: str = ""
    CheckoutRequestID: str = Field(min_length=1)
    ResultCode: int
    ResultDesc: str = ""
    items: List[CallbackItemModel] = Field(default_factory=list)


def normalize_token_response(raw: Any, *, now: Optional[datetime] = None) -> AccessToken:
    if not isinstance(raw, dict) or not raw.get("access_token"):
        raise AuthError("Token response did not include an access_token.", payload=raw)

    expires_in = raw.get("expires_in")
    try:
        model = TokenResponseModel(
            access_token=str(raw["access_token"]),
            expires_in=int(expires_in) if expires_in not in (None, "") else DEFAULT_TOKEN_LIFETIME_SECONDS,
        )
    except (TypeError, ValueError) as exc:
        raise AuthError(f"Token response validation failed: {exc}", payload=raw) from exc

    now = now or datetime.now(timezone.utc)
    return AccessToken(value=model.access_token, expires_at=now + timedelta(seconds=model.expires_in))


def checkout_request_id(raw: Dict[str, Any]) -> Optional[str]:
    value = _first_non_empty(raw, "CheckoutRequestID", "checkoutRequestID", "checkout_request_id", default="")
    return str(value) or None


def merchant_request_id(raw: Dict[str, Any]) -> Optional[str]:
    value = _first_non_empty(raw, "MerchantRequestID", "merchantRequestID", "merchant_request_id", default="")
    return str(value) or None


def parse_stk_callback(raw: Any) -> StkCallback:
    """
    Parse the gateway result callback:

        {"Body": {"stkCallback": {"MerchantRequestID": ..., "CheckoutRequestID": ...,
                                  "ResultCode": 0, "ResultDesc": ...,
                                  "CallbackMetadata": {"Item": [{"Name": ..., "Value": ...}]}}}}
    """
    if not isinstance(raw, dict):
        raise IntegrationResponseError("Callback body must be a JSON object.", payload=raw)

    body = raw.get("Body") or {}
    callback = body.get("stkCallback") if isinstance(body, dict) else None
    if not isinstance(callback, dict):
        raise IntegrationResponseError("Callback body is missing Body.stkCallback.", payload=raw)

    metadata = callback.get("CallbackMetadata") or {}
    items = metadata.get("Item") if isinstance(metadata, dict) else None

    model = _build_model(
        StkCallbackModel,
        {
            "MerchantRequestID": str(callback.get("MerchantRequestID") or ""),
            "CheckoutRequestID": str(callback.get("CheckoutRequestID") or ""),
            "ResultCode": callback.get("ResultCode"),
            "ResultDesc": str(callback.get("ResultDesc") or ""),
            "items": items if isinstance(items, list) else [],
        },
        raw,
    )
    values = {item.Name: item.Value for item in model.items}

    return StkCallback(
        merchant_request_id=model.MerchantRequestID,
        checkout_request_id=model.CheckoutRequestID,
        result_code=model.ResultCode,
        result_desc=model.ResultDesc,
        amount=_coerce_amount(values.get("Amount")),
        receipt_number=_optional_str(values.get("MpesaReceiptNumber")),
        transaction_date=_optional_str(values.get("TransactionDate")),
        phone_number=_optional_str(values.get("PhoneNumber")),
        raw_payload=raw,
    )


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    if default is not None:
        return default
    raise IntegrationResponseError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def _coerce_amount(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise IntegrationResponseError(f"Invalid callback amount: {value!r}") from exc


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _build_model(model_type, payload: Dict[str, Any], raw: Any):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc
