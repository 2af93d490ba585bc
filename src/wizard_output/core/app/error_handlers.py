from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException

from wizard_output.core.common.exceptions import WizardOutputError
from wizard_output.core.constants import HTTP_500_INTERNAL_SERVER_ERROR_MESSAGE

logger = logging.getLogger(__name__)


def _error_content(
    message: str, error_type: str, status_code: int, details: Any = None
) -> dict[str, Any]:
    error: dict[str, Any] = {
        "message": message,
        "type": error_type,
        "status_code": status_code,
    }
    if details:
        error["details"] = details
    return {"detail": {"error": error}}


async def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    """Handle FastAPI HTTP exceptions.

    Args:
        request: The request that caused the exception
        exc: The HTTP exception

    Returns:
        JSON response with error details
    """
    if logger.isEnabledFor(logging.WARNING):
        logger.warning("HTTP error %s: %s", exc.status_code, exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(str(exc.detail), "HttpError", exc.status_code),
        headers=getattr(exc, "headers", None),
    )


async def wizard_exception_handler(
    request: Request, exc: WizardOutputError
) -> Response:
    """Handle wizard output errors raised before the response started.

    Once a response has started, Starlette does not call handlers; the error
    propagates to the server, which drops the connection.
    """
    if exc.status_code >= 500:
        logger.error(
            "%s (%s) on %s: %s",
            exc.__class__.__name__,
            exc.status_code,
            request.url.path,
            exc.message,
        )
    elif logger.isEnabledFor(logging.WARNING):
        logger.warning(
            "%s (%s): %s", exc.__class__.__name__, exc.status_code, exc.message
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(
            exc.message, exc.__class__.__name__, exc.status_code, exc.details
        ),
    )


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle any exception that no other handler claimed."""
    logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content=_error_content(
            HTTP_500_INTERNAL_SERVER_ERROR_MESSAGE, "InternalError", 500
        ),
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """Register the exception handlers on ``app``."""
    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(WizardOutputError, wizard_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)
