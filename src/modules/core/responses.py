"""Problem-document responses for the HTTP layer.

Two entry points share one JSON shape::

    {"type", "title", "status", "detail", "errorCode",
     "errors": [{"code", "detail", "attr"}]}

- ``problem_response(error)`` renders a ``Result`` failure.
- ``problem_exception_handler`` is DRF's ``EXCEPTION_HANDLER``; it renders
  framework errors (auth, parse, 404) and turns anything unexpected into a
  generic 500 instead of leaking a traceback.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from shared.domain.cancellation import OperationCancelled
from shared.domain.result import Error, ErrorCode

logger = structlog.get_logger(__name__)

STATUS_BY_CODE = {
    ErrorCode.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.CACHE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.STORE_UNAVAILABLE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

TITLE_BY_CODE = {
    ErrorCode.VALIDATION: "Validation failed",
    ErrorCode.NOT_FOUND: "Resource not found",
    ErrorCode.CONFLICT: "Conflict",
    ErrorCode.CACHE_UNAVAILABLE: "Service unavailable",
    ErrorCode.STORE_UNAVAILABLE: "Server Error",
}

SERVER_ERROR_CODE = "server.unexpected"
CANCELLED_CODE = "request.cancelled"


def _problem(
    status_code: int,
    title: str,
    detail: str,
    error_code: str,
    errors: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    return {
        "type": "about:blank",
        "title": title,
        "status": status_code,
        "detail": detail,
        "errorCode": error_code,
        "errors": errors or [{"code": error_code, "detail": detail, "attr": None}],
    }


def problem_response(error: Error) -> Response:
    """Render a ``Result`` failure as a problem document."""
    status_code = STATUS_BY_CODE[error.code]
    detail = error.message
    if error.code is ErrorCode.STORE_UNAVAILABLE:
        # Store failures are opaque to clients.
        detail = "An unexpected error occurred."
    errors = [
        {"code": error.code.value, "detail": message, "attr": field}
        for field, messages in error.details.items()
        for message in messages
    ]
    body = _problem(status_code, TITLE_BY_CODE[error.code], detail, error.code.value, errors)
    return Response(body, status=status_code)


def _flatten(data: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    if isinstance(data, dict):
        items: List[Dict[str, Any]] = []
        for key, value in data.items():
            name = None if key in ("detail", "non_field_errors") else key
            items.extend(_flatten(value, name if attr is None else f"{attr}.{key}"))
        return items
    if isinstance(data, list):
        return [item for value in data for item in _flatten(value, attr)]
    code = getattr(data, "code", None) or "error"
    return [{"code": str(code), "detail": str(data), "attr": attr}]


def problem_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """DRF ``EXCEPTION_HANDLER`` producing problem documents."""
    if isinstance(exc, OperationCancelled):
        logger.warning("http.request_cancelled", error=str(exc))
        body = _problem(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Request cancelled",
            str(exc),
            CANCELLED_CODE,
        )
        return Response(body, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    response = exception_handler(exc, context)
    if response is None:
        logger.exception("http.unhandled_exception", error=repr(exc))
        body = _problem(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Server Error",
            "An unexpected error occurred.",
            SERVER_ERROR_CODE,
        )
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    errors = _flatten(response.data)
    first = errors[0] if errors else {"code": "error", "detail": "Request failed."}
    response.data = _problem(
        response.status_code,
        "Request failed",
        first["detail"],
        first["code"],
        errors,
    )
    return response
