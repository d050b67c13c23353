"""
/**
 * @file backend/services/__init__.py
 * @description 业务服务层导出。
 */
"""

from .chat_completion_client_service import ChatCompletionClient, extract_content
from .language_catalog_service import list_languages, normalize_language_tag
from .rate_limiter_service import FixedWindowRateLimiter, InMemoryRateLimitStore, RateLimitStore
from .translation_service import TranslationService, build_messages, build_system_prompt

__all__ = [
    "ChatCompletionClient",
    "extract_content",
    "list_languages",
    "normalize_language_tag",
    "FixedWindowRateLimiter",
    "InMemoryRateLimitStore",
    "RateLimitStore",
    "TranslationService",
    "build_messages",
    "build_system_prompt",
]
