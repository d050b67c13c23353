"""
/**
 * @file backend/utils/__init__.py
 * @description 工具函数导出。
 */
"""

from .request_utils import UNKNOWN_CLIENT, client_identifier

__all__ = ["UNKNOWN_CLIENT", "client_identifier"]
