"""Business error base class and the DRF exception handler.

Services raise ``BusinessError`` subclasses; the API layer never catches
them one by one.  ``exception_handler`` renders them, together with DRF's
own API exceptions, in a single error format::

    {"type": "client_error",
     "errors": [{"code": "insufficient_stock", "detail": "...", "attr": null}]}

Anything else (database errors included) is left to DRF/Django and ends up
as a 500.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = structlog.get_logger(__name__)


class BusinessError(Exception):
    """A non-retryable, client-reported business rule violation."""

    code: str = "business_error"
    http_status: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__doc__ or self.code)

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""


def _flatten(detail: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    if isinstance(detail, dict):
        errors: List[Dict[str, Any]] = []
        for key, value in detail.items():
            name = key if attr is None else f"{attr}.{key}"
            errors.extend(_flatten(value, name))
        return errors
    if isinstance(detail, list):
        errors = []
        for index, value in enumerate(detail):
            name = attr
            if isinstance(value, (dict, list)) and attr is not None:
                name = f"{attr}.{index}"
            errors.extend(_flatten(value, name))
        return errors
    code = getattr(detail, "code", None) or "invalid"
    return [{"code": str(code), "detail": str(detail), "attr": attr}]


def exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """Translate business and API errors into the standard error payload."""
    if isinstance(exc, BusinessError):
        logger.info("api.business_error", code=exc.code, detail=exc.message)
        return Response(
            {
                "type": "client_error",
                "errors": [{"code": exc.code, "detail": exc.message, "attr": None}],
            },
            status=exc.http_status,
        )

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, drf_exceptions.ValidationError):
        errors = _flatten(exc.detail)
        error_type = "validation_error"
    else:
        detail = getattr(exc, "detail", str(exc))
        errors = _flatten(detail)
        error_type = (
            "server_error" if response.status_code >= 500 else "client_error"
        )
    response.data = {"type": error_type, "errors": errors}
    return response
