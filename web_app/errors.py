"""Exception handlers rendering errors as JSON bodies."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortlinks.common.logging_config import get_logger
from shortlinks.errors import ShortenerError, StorageFailureError

logger = get_logger("web")


def _is_development(request: Request) -> bool:
    config = getattr(request.app.state, "config", None)
    return bool(config and config.is_development)


async def shortener_error_handler(request: Request, exc: ShortenerError) -> JSONResponse:
    """Render service errors with their own status code."""
    request.state.error_code = exc.code
    body = {"success": False, "error": exc.message, "code": exc.code}

    if isinstance(exc, StorageFailureError):
        logger.error(
            f"Storage failure on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
        )
        if not _is_development(request):
            body["error"] = StorageFailureError.default_message
    elif exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(status_code=exc.status_code, content=body)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors; unmatched routes get the endpoint-not-found body."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        request.state.error_code = "EndpointNotFound"
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": "Endpoint not found",
                "path": request.url.path,
                "method": request.method,
            },
        )

    request.state.error_code = "HTTPError"
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render invalid query/body parameters as 400."""
    request.state.error_code = "InvalidRequest"
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("query", "body"))
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": "Invalid request parameters", "details": problems},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort handler; exception detail only in development."""
    logger.exception(f"Server error on {request.method} {request.url.path}", exc_info=exc)

    body = {"success": False, "error": "Internal server error"}
    if _is_development(request):
        body["message"] = str(exc)

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShortenerError, shortener_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
