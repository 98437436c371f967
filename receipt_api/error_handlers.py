"""
Exception handlers that render every failure as ``{error, message[, details]}``.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from receipt_api.errors import ErrorKind, ReceiptError, UploadValidationError
from receipt_api.schemas import ErrorOut

logger = logging.getLogger("receipt_api")

# kind -> (status, error, client message)
ERROR_RESPONSES = {
    ErrorKind.CONFIG: (500, "Server configuration error", None),
    ErrorKind.VALIDATION: (400, "Invalid request", None),
    ErrorKind.AUTH: (401, "Authentication failed", "Invalid or expired AI provider API key"),
    ErrorKind.QUOTA: (429, "Rate limit exceeded", "API quota exceeded. Please try again later"),
    ErrorKind.NO_JSON: (422, "Processing failed", "Could not extract structured data from the receipt image"),
    ErrorKind.PARSE: (422, "Processing failed", "Could not extract structured data from the receipt image"),
    ErrorKind.PROVIDER: (500, "Internal server error", "Failed to process receipt. Please try again"),
}

HTTP_ERRORS = {
    404: ("Not found", "The requested resource does not exist"),
    405: ("Method not allowed", "This endpoint does not accept this request method"),
}

# left out of 405 messages
IMPLICIT_METHODS = {"HEAD", "OPTIONS"}


def _json_error(status_code: int, body: ErrorOut, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True), headers=headers)


def error_body(exc: ReceiptError, development: bool = False) -> tuple[int, ErrorOut]:
    status_code, error, message = ERROR_RESPONSES[exc.kind]
    if isinstance(exc, UploadValidationError):
        error = exc.error
    # config and validation messages are written for the client
    body = ErrorOut(error=error, message=message or exc.message)
    if exc.kind == ErrorKind.PROVIDER and development:
        body.details = exc.message
    return status_code, body


def receipt_error_handler(request: Request, exc: ReceiptError):
    settings = request.app.state.settings
    status_code, body = error_body(exc, development=settings.is_development)
    return _json_error(status_code, body)


def method_not_allowed_message(headers: dict | None) -> str | None:
    allow = (headers or {}).get("Allow", "")
    methods = sorted(m.strip() for m in allow.split(",") if m.strip() and m.strip() not in IMPLICIT_METHODS)
    if not methods:
        return None
    return f"This endpoint only accepts {' or '.join(methods)} requests"


def http_exception_handler(request: Request, exc: StarletteHTTPException):
    error, message = HTTP_ERRORS.get(exc.status_code, ("Request failed", str(exc.detail)))
    if exc.status_code == 405:
        message = method_not_allowed_message(exc.headers) or message
    return _json_error(exc.status_code, ErrorOut(error=error, message=message), headers=exc.headers)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(
        "Client rate limit exceeded",
        extra={"extra_data": {"path": request.url.path, "limit": str(exc.detail)}},
    )
    body = ErrorOut(error="Rate limit exceeded", message=f"Too many requests ({exc.detail}). Please try again later")
    return _json_error(429, body)
