import time
from typing import Any, Callable, Dict

import structlog
from django.core.cache import cache
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.models import OutboxEvent

logger = structlog.get_logger(__name__)

HEALTH_CACHE_KEY = "_health_check"


def _ping_database() -> Dict[str, Any]:
    with connections["default"].cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()
    return {}


def _ping_cache() -> Dict[str, Any]:
    cache.set(HEALTH_CACHE_KEY, "ok", 10)
    if cache.get(HEALTH_CACHE_KEY) != "ok":
        raise ConnectionError("Cache read failed")
    return {}


def _outbox_backlog() -> Dict[str, Any]:
    # informational: a growing backlog means the relay beat is not running
    return {"pending_events": OutboxEvent.objects.pending().count()}


def _probe(name: str, check: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    started = time.monotonic()
    try:
        extra = check()
    except (DatabaseError, ConnectionError, OSError) as exc:
        logger.error("health_check.failed", service=name, error=str(exc))
        return {"status": "down"}
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - started) * 1000, 2),
        **extra,
    }


def health_check(request: HttpRequest) -> JsonResponse:
    """GET /health: database and cache must be up; the outbox is reported."""
    services = {
        "database": _probe("database", _ping_database),
        "cache": _probe("cache", _ping_cache),
    }
    healthy = all(service["status"] == "up" for service in services.values())
    if services["database"]["status"] == "up":
        services["outbox"] = _probe("outbox", _outbox_backlog)

    status = "healthy" if healthy else "unhealthy"
    logger.info("health_check.completed", status=status)
    return JsonResponse(
        {"status": status, "timestamp": timezone.now().isoformat(), "services": services},
        status=200 if healthy else 503,
    )


class CurrentUserView(APIView):
    """Profile of the authenticated user, including role and company."""

    permission_classes = [IsAuthenticated]

    def get(self, request: HttpRequest) -> Response:
        user = request.user
        return Response(
            {
                "id": str(user.pk),
                "username": user.get_username(),
                "name": user.name,
                "email": user.email,
                "role": user.role,
                "company_id": str(user.company_id) if user.company_id else None,
            }
        )
