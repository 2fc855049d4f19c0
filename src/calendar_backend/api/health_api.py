from fastapi import APIRouter, Depends
import logging

from calendar_backend import __version__
from calendar_backend.core.config import Settings
from calendar_backend.core.database import get_database_health
from calendar_backend.core.dependencies import get_app_settings
from calendar_backend.schemas.common import HealthCheckResponse

logger = logging.getLogger("HEALTH_API_LOGGER")

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthCheckResponse)
def health_status(settings: Settings = Depends(get_app_settings)):
    """
    Aggregate health check.

    Reports database connectivity; Google is not probed since every call to it
    needs a user's credentials.
    """
    database_health = get_database_health()
    overall_status = "healthy" if database_health.get("status") == "healthy" else "degraded"
    if overall_status != "healthy":
        logger.warning(f"Health check degraded: {database_health}")

    return HealthCheckResponse(
        status=overall_status,
        auth_mode=settings.auth_mode,
        database=database_health,
        version=__version__,
    )
