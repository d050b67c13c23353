"""
/**
 * @file backend/controllers/__init__.py
 * @description 控制器（路由）导出。
 */
"""

from .health_controller import router as health_router
from .languages_controller import router as languages_router
from .translate_controller import router as translate_router

__all__ = [
    "health_router",
    "languages_router",
    "translate_router",
]
