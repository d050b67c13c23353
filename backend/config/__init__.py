"""
/**
 * @file backend/config/__init__.py
 * @description 配置模块导出。
 */
"""

from .settings import Settings, load_settings, reload_settings, CONFIG_PATH, CONFIG_LOCAL_PATH

__all__ = ["Settings", "load_settings", "reload_settings", "CONFIG_PATH", "CONFIG_LOCAL_PATH"]
