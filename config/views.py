import structlog
from django.conf import settings  # type: ignore
from django.db import DatabaseError, connection  # type: ignore
from django.http import JsonResponse  # type: ignore
from django.utils import timezone  # type: ignore
from django.views.decorators.csrf import csrf_exempt  # type: ignore
from django.views.decorators.http import require_http_methods  # type: ignore

logger = structlog.get_logger(__name__)


@csrf_exempt
@require_http_methods(["GET"])
def health_check(request):
    """Liveness probe: app version plus a round trip to the database."""
    payload = {
        "timestamp": timezone.now().isoformat(),
        "version": settings.APP_VERSION,
    }
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as exc:
        logger.error("health.fail", error=str(exc))
        return JsonResponse({"status": "unhealthy", **payload}, status=503)
    logger.debug("health.ok", database="connected")
    return JsonResponse({"status": "healthy", **payload}, status=200)
