"""Domain exceptions and JSON exception handlers for the web layer."""

import logging

from litestar import Request, Response
from litestar.exceptions import HTTPException
from litestar.status_codes import HTTP_500_INTERNAL_SERVER_ERROR

logger = logging.getLogger(__name__)


class RevisionError(Exception):
    """Base class for revision history failures."""


class RevisionDeleteError(RevisionError):
    """The host refused or failed to delete a revision."""


class InvalidNonceError(RevisionError):
    """A request failed its authenticity check."""


def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    """Render HTTP exceptions in the editor's success/data envelope."""
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return Response(
        content={"success": False, "data": detail},
        status_code=exc.status_code,
        media_type="application/json",
    )


def internal_server_error_handler(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled error on %s", request.url.path)
    return Response(
        content={"success": False, "data": "Internal Server Error"},
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        media_type="application/json",
    )
