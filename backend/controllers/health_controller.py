"""
/**
 * @file backend/controllers/health_controller.py
 * @description 健康检查控制器。
 */
"""

from fastapi import APIRouter, Depends

from backend.config import Settings
from backend.controllers.dependencies import get_rate_limiter, get_settings
from backend.services.rate_limiter_service import FixedWindowRateLimiter


router = APIRouter()


@router.get("/health")
def health(
    settings: Settings = Depends(get_settings),
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
):
    api_keys_status = {"openai": bool(settings.resolve_openai_key())}
    is_healthy = all(api_keys_status.values())

    return {
        "status": "ok" if is_healthy else "degraded",
        "checks": {
            "api_keys": api_keys_status,
            "rate_limiter": {"tracked_clients": len(limiter.store)},
        },
    }
