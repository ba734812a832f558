"""Error handling helpers for the API layer."""
from typing import Any, Dict, Optional
import logging

from fastapi.responses import JSONResponse

from src.integrations.errors import FormValidationError, GatewayError, IntegrationError

logger = logging.getLogger(__name__)


class ErrorHandler:
    """
    Logs failures with full diagnostic detail and builds the caller-facing body.

    Caller messages stay generic. Endpoints that relay a payment gateway may opt in
    to echoing the raw gateway diagnostic under `details`.
    """

    def handle_exception(
        self,
        exc: Exception,
        message: str,
        context: Dict[str, Any] = None,
        expose_details: bool = False,
    ) -> Dict[str, Any]:
        payload: Optional[Any] = getattr(exc, "payload", None)
        logger.error("%s: %s | payload=%s | context=%s", message, exc, payload, context or {}, exc_info=True)

        body: Dict[str, Any] = {"success": False, "message": message}
        if expose_details and isinstance(exc, GatewayError) and payload:
            body["details"] = payload
        return body

    def to_response(
        self,
        exc: Exception,
        message: str,
        context: Dict[str, Any] = None,
        expose_details: bool = False,
    ) -> JSONResponse:
        if isinstance(exc, FormValidationError):
            logger.info("Rejected request: %s %s", exc.message, exc.field_errors)
            return JSONResponse(
                status_code=400,
                content={"success": False, "message": exc.message, "field_errors": exc.field_errors},
            )
        if not isinstance(exc, IntegrationError):
            logger.error("Unhandled exception: %s", exc, exc_info=True)
            return JSONResponse(status_code=500, content={"success": False, "message": message})
        return JSONResponse(status_code=500, content=self.handle_exception(exc, message, context, expose_details))


error_handler = ErrorHandler()
