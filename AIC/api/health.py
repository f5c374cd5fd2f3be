from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from AIC.api.dependencies import get_config, get_session_service
from packages.aic_core.config import AICConfig
from packages.aic_service.session_service import SessionService

router = APIRouter()


@router.get("/health")
async def health_check(
    config: AICConfig = Depends(get_config),
    service: SessionService = Depends(get_session_service)
):
    """
    Liveness probe with the active back-ends and the number of open sessions.
    """
    return {
        "status": "ok",
        "version": config.VERSION,
        "providers": config.PROVIDER_MODE,
        "media": config.MEDIA_BACKEND,
        "active_sessions": service.active_session_count,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
