# shared/helpers/json_response_helper.py
from fastapi import HTTPException

from shared.utils.app_status_code import AppStatusCode
from shared.core.schemas import JsonOutResult


def error_response(message: str, status_code: str = AppStatusCode.OPERATION_FAILED, http_status: int = 400):
    """Abort the request with a Failure envelope; JsonResponseMiddleware passes it through as is."""
    raise HTTPException(
        status_code=http_status,
        detail=JsonOutResult(
            data=None,
            status="Failure",
            status_code=status_code,
            message=message
        ).model_dump()
    )


def not_found_response(entity: str):
    return error_response(
        message=f"{entity} not found",
        status_code=AppStatusCode.OPERATION_ERROR,
        http_status=404
    )
