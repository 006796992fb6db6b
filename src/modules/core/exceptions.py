"""Standardised error envelope for DRF-raised exceptions.

Every error produced by the framework (authentication, permission,
parsing, serializer validation, throttling) is rendered as::

    {"type": "validation_error", "errors": [{"code": ..., "detail": ..., "attr": ...}]}

Domain exceptions are translated by the views themselves and keep the
plain ``{"detail": ...}`` body.
"""

from __future__ import annotations

from typing import Any, Iterator

import structlog
from rest_framework.exceptions import ValidationError
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


def standard_exception_handler(exc: Exception, context: dict[str, Any]):
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        error_type = "validation_error"
    elif response.status_code >= 500:
        error_type = "server_error"
    else:
        error_type = "client_error"

    errors = list(_flatten(response.data))
    logger.info(
        "api.error",
        type=error_type,
        status_code=response.status_code,
        codes=[error["code"] for error in errors],
    )
    response.data = {"type": error_type, "errors": errors}
    return response


def _flatten(detail: Any, attr: str | None = None) -> Iterator[dict[str, Any]]:
    if isinstance(detail, dict):
        for key, value in detail.items():
            if key in ("detail", "non_field_errors"):
                child = attr
            else:
                child = key if attr is None else f"{attr}.{key}"
            yield from _flatten(value, child)
    elif isinstance(detail, list):
        for item in detail:
            yield from _flatten(item, attr)
    else:
        yield {
            "code": getattr(detail, "code", None) or "error",
            "detail": str(detail),
            "attr": attr,
        }
