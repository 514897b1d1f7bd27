"""Exception handlers translating domain errors into problem-details responses."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING

import structlog
from litestar import Response
from litestar.status_codes import (
    HTTP_404_NOT_FOUND,
    HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from chatsim.lib.exceptions import ChatSimError, InvalidDraft, OversizedPayload, UnknownPersona

if TYPE_CHECKING:
    from litestar import Request

logger = structlog.get_logger()

PROBLEM_JSON = "application/problem+json"

_STATUS_BY_ERROR: dict[type[ChatSimError], int] = {
    InvalidDraft: HTTP_422_UNPROCESSABLE_ENTITY,
    OversizedPayload: HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    UnknownPersona: HTTP_404_NOT_FOUND,
}


def chat_error_to_response(request: Request, exc: ChatSimError) -> Response:
    """Render a ``ChatSimError`` as ``application/problem+json``."""
    status_code = next(
        (status for error_cls, status in _STATUS_BY_ERROR.items() if isinstance(exc, error_cls)),
        HTTP_500_INTERNAL_SERVER_ERROR,
    )
    logger.info("Rejected chat command", error=type(exc).__name__, detail=exc.detail, path=request.url.path)
    return Response(
        content={
            "type": type(exc).__name__,
            "title": HTTPStatus(status_code).phrase,
            "status": status_code,
            "detail": exc.detail,
        },
        status_code=status_code,
        media_type=PROBLEM_JSON,
    )


exception_handlers = {ChatSimError: chat_error_to_response}
