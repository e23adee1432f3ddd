from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette import status
import logging

logger = logging.getLogger("lira_checker.errors")


# Domain errors ----------------------------------------------


class LiraCheckerError(Exception):
    """Root of the service's own exceptions."""


class UpstreamFetchError(LiraCheckerError):
    """The rate provider could not deliver a usable rate table.

    Covers network failures, timeouts, non-success responses and malformed
    payloads. Only the refresh scheduler ever sees it.
    """


class CurrencyListError(LiraCheckerError):
    """The supported-currency list could not be loaded."""


class NoDataYet(LiraCheckerError):
    """No snapshot is available for the requested base currency."""

    def __init__(self, base: str | None = None):
        self.base = base
        msg = f"no rates available for {base}" if base else "no rates available"
        super().__init__(msg)


class BadRequestError(LiraCheckerError):
    """Request parameters rejected before any rate lookup."""


class InvalidCurrencyCode(BadRequestError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Currency '{code}' is unknown")


class TooManyTargets(BadRequestError):
    def __init__(self, requested: int, limit: int):
        self.requested = requested
        self.limit = limit
        super().__init__(f"At most {limit} target currencies allowed, got {requested}")


class InternalFormattingError(LiraCheckerError):
    """Response construction hit a state the data invariants should exclude."""


# FastAPI handlers -------------------------------------------


def not_found_handler(request: Request, exc):  # type: ignore
    if exc.status_code != status.HTTP_404_NOT_FOUND:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "http_error", "detail": exc.detail},
        )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "not_found",
            "detail": f"No route for {request.method} {request.url.path}",
        },
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": exc.errors(),
        },
    )


def no_data_handler(request: Request, exc: NoDataYet):  # type: ignore
    logger.debug("no data: %s", exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def bad_request_handler(request: Request, exc: BadRequestError):  # type: ignore
    error = "invalid_currency" if isinstance(exc, InvalidCurrencyCode) else "bad_request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": error, "detail": str(exc)},
    )


def formatting_error_handler(request: Request, exc: InternalFormattingError):  # type: ignore
    logger.error("failed to build response: %s", exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "Unable to build the requested response.",
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
