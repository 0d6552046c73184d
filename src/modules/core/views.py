import time
from typing import Any, Callable, Dict

import structlog
from django.conf import settings
from django.core.cache import caches
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger(__name__)


def _probe(check: Callable[[], None]) -> Dict[str, Any]:
    start = time.monotonic()
    check()
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
    }


def _check_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _check_cache(alias: str) -> Callable[[], None]:
    def check() -> None:
        cache = caches[alias]
        cache.set("_health_check", "ok", 10)
        if cache.get("_health_check") != "ok":
            raise ConnectionError(f"Cache '{alias}' read failed")

    return check


def health_check(request: HttpRequest) -> JsonResponse:
    probes = {
        "database": _check_database,
        "cache": _check_cache("default"),
        "settings_cache": _check_cache(settings.SETTINGS_CACHE_ALIAS),
    }
    services: Dict[str, Dict[str, Any]] = {}
    overall_healthy = True

    for name, check in probes.items():
        try:
            services[name] = _probe(check)
        except Exception as exc:  # noqa: BLE001 - a failed probe is reported, not raised
            services[name] = {"status": "down"}
            overall_healthy = False
            logger.error("health_check.probe_failed", service=name, error=str(exc))

    logger.info(
        "health_check.completed",
        status="healthy" if overall_healthy else "unhealthy",
    )

    return JsonResponse(
        {
            "status": "healthy" if overall_healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if overall_healthy else 503,
    )
