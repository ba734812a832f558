from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_order_service
from src.api.request_body import read_json_object
from src.error_handler import error_handler
from src.integrations.policy.order_service import OrderService
from src.utils.validation import validate_order

api = APIRouter()
orders_api = api


@api.post("/order", tags=["Orders"])
async def submit_order(request: Request, service: OrderService = Depends(get_order_service)):
    """
    Price the order and email the customer confirmation and admin notification.
    """
    try:
        payload = await read_json_object(request)
        order = validate_order(payload)
        receipt = await service.submit_order(order)
    except Exception as e:
        return error_handler.to_response(e, "Failed to send confirmation email.", context={"endpoint": "order"})

    return {
        "success": True,
        "message": "Order submitted! Check your email for confirmation.",
        "total": receipt.total,
        "currency": receipt.currency,
    }
