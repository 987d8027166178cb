import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from app.models.api_response import APIResponse, APIError
from app.core.exceptions import SearchError

async def search_error_handler(request: Request, exc: Exception):
    assert isinstance(exc, SearchError)

    logging.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)

    body = APIResponse(
        status="error",
        error=APIError(code=exc.code, message=exc.message, details=exc.details),
    )
    # null data/meta are left out of error bodies
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
    )
