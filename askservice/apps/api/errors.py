"""Mapping of failures to HTTP status codes and JSON error bodies.

Every error response has the shape ``{"error": <message>, "code": <CODE>}``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from askservice.core.ai import AiServiceError, ErrorKind

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.EMPTY_QUESTION: 400,
    ErrorKind.UPSTREAM_AUTH: 502,
    ErrorKind.UPSTREAM_NETWORK: 502,
    ErrorKind.UPSTREAM_RATE_LIMITED: 503,
    ErrorKind.UPSTREAM_TIMEOUT: 504,
}

_HTTP_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    415: "UNSUPPORTED_MEDIA_TYPE",
}


def error_response(message: str, code: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message, "code": code}, status_code=status_code)


def service_error_response(error: AiServiceError) -> JSONResponse:
    status_code = ERROR_STATUS.get(error.kind, 500)
    if error.is_upstream:
        logger.warning("Upstream failure: %s", error.code, extra={"code": error.code})
    return error_response(error.message, error.code, status_code)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_CODES.get(exc.status_code, f"HTTP_{exc.status_code}")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404:
        message = f"Route {request.method} {request.url.path} not found"
    response = error_response(message, code, exc.status_code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        return error_response("Request body is not valid JSON", "INVALID_JSON", 400)
    fields = sorted({".".join(str(part) for part in err.get("loc", ()) if part != "body") for err in errors})
    detail = ", ".join(field for field in fields if field) or "body"
    return error_response(f"Invalid request body: {detail}", "UNPROCESSABLE_ENTITY", 422)


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response("Internal server error", "INTERNAL_ERROR", 500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)


__all__ = ["ERROR_STATUS", "error_response", "register_exception_handlers", "service_error_response"]
