"""
/**
 * @file backend/controllers/dependencies.py
 * @description 路由依赖：从 app.state 取共享的限流器与翻译服务，便于测试替换。
 */
"""

from __future__ import annotations

from fastapi import Request

from backend.config import Settings, load_settings
from backend.services.rate_limiter_service import FixedWindowRateLimiter
from backend.services.translation_service import TranslationService


def get_settings() -> Settings:
    return load_settings()


def get_rate_limiter(request: Request) -> FixedWindowRateLimiter:
    return request.app.state.rate_limiter


def get_translation_service(request: Request) -> TranslationService:
    return request.app.state.translation_service
