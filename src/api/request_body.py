from typing import Any, Dict

from fastapi import Request

from src.integrations.errors import FormValidationError


async def read_json_object(request: Request) -> Dict[str, Any]:
    """Parse the request body, rejecting anything that isn't a JSON object with a 400."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        raise FormValidationError({"body": "must be a JSON object"}, message="Request body must be a JSON object.")
    return payload
