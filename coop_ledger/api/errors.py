"""Translation of ledger errors into HTTP responses"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from coop_ledger.api.dependencies import get_request_id
from coop_ledger.domain.exceptions import ErrorKind, LedgerError, ValidationError

STATUS_BY_KIND = {
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.DUPLICATE_ENTRY: 409,
    ErrorKind.MEMBER_NOT_FOUND: 404,
    ErrorKind.ACCOUNT_NOT_FOUND: 404,
    ErrorKind.PERIOD_NOT_FOUND: 404,
    ErrorKind.MEMBER_INACTIVE: 403,
    ErrorKind.INTERNAL_ERROR: 500,
}


def error_response(exc: LedgerError) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_KIND.get(exc.kind, 500),
        content={"success": False, "error": exc.kind.value, "message": exc.message},
    )


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    if STATUS_BY_KIND.get(exc.kind, 500) >= 500:
        logging.error(f"Internal error: {exc.message}", extra={"request_id": get_request_id(request)})
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and query strings are reported as VALIDATION_ERROR"""
    problems = []
    for error in exc.errors():
        # Drop the leading "body"/"query" location segment
        field = ".".join(str(part) for part in error.get("loc", ())[1:])
        problems.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return error_response(ValidationError("; ".join(problems) or None))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
