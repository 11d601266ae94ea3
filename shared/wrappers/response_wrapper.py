import json
import logging
from typing import Any, Callable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shared.core.schemas import JsonOutResult

logger = logging.getLogger(__name__)

LIST_KEYS = {
    "items", "lines", "reservations", "requirements", "assigned_team", "suggestions",
    "leads", "visits", "quotes", "orders", "work_orders", "warranties", "purchase_orders",
}


def replace_nulls_with_empty(value: Any):
    """
    Recursively replaces None based on expected structure:
    - List fields -> []
    - Primitives -> ""
    """
    if isinstance(value, dict):
        cleaned = {}
        for k, v in value.items():
            if v is None and k.lower() in LIST_KEYS:
                cleaned[k] = []
            else:
                cleaned[k] = replace_nulls_with_empty(v)
        return cleaned

    if isinstance(value, list):
        return [replace_nulls_with_empty(v) for v in value]

    if value is None:
        return ""

    return value


def _is_wrapped(data: Any) -> bool:
    return isinstance(data, dict) and {"status", "status_code", "message"}.issubset(data.keys())


class JsonResponseMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        # Skip docs/openapi endpoints
        if request.url.path.startswith(("/openapi", "/docs", "/redoc")):
            return await call_next(request)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception("Request %s %s failed", request.method, request.url.path)
            wrapped_error = JsonOutResult(
                data="",
                status="Failure",
                status_code="500",
                message=f"Internal Server Error: {e}",
            ).model_dump(exclude_none=False)
            return JSONResponse(content=replace_nulls_with_empty(wrapped_error), status_code=500)

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            return response

        body_bytes = b""
        async for chunk in response.body_iterator:
            body_bytes += chunk

        try:
            data = json.loads(body_bytes.decode("utf-8")) if body_bytes else None
        except ValueError:
            data = None

        headers = {k: v for k, v in response.headers.items() if k.lower() != "content-length"}

        if not (200 <= response.status_code < 400):
            if _is_wrapped(data):
                wrapped_error = data
            else:
                message = ""
                if isinstance(data, dict):
                    message = str(data.get("detail") or data.get("message") or "")
                wrapped_error = JsonOutResult(
                    data="",
                    status="Failure",
                    status_code=str(response.status_code),
                    message=message or "An unexpected error occurred",
                ).model_dump(exclude_none=False)

            return JSONResponse(
                content=replace_nulls_with_empty(wrapped_error),
                status_code=response.status_code,
                headers=headers,
            )

        # endpoint returned a JsonOutResult itself
        if _is_wrapped(data):
            return JSONResponse(content=replace_nulls_with_empty(data), status_code=response.status_code, headers=headers)

        wrapped = JsonOutResult(
            data=data if data not in [None, {}] else "",
            status="Success",
            status_code=str(response.status_code),
            message="Data retrieved successfully"
        ).model_dump(exclude_none=False)

        return JSONResponse(
            content=replace_nulls_with_empty(wrapped),
            status_code=response.status_code,
            headers=headers,
        )
