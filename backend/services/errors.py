"""
/**
 * @file backend/services/errors.py
 * @description 翻译代理的错误分类，每类错误携带对外的 HTTP 状态码。
 */
"""

from __future__ import annotations


class TranslationError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class TranslationValidationError(TranslationError):
    status_code = 400


class RateLimitExceededError(TranslationError):
    status_code = 429

    def __init__(self, message: str, retry_after: int | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class UpstreamRateLimitError(TranslationError):
    status_code = 429


class ConfigurationError(TranslationError):
    status_code = 500


class UpstreamError(TranslationError):
    """Non-2xx or transport failure from the chat-completion service."""

    status_code = 502


class UpstreamTimeoutError(UpstreamError):
    status_code = 504


class EmptyTranslationError(TranslationError):
    status_code = 500
