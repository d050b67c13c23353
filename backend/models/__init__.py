"""
/**
 * @file backend/models/__init__.py
 * @description 数据模型导出。
 */
"""

from .rate_limit_models import RateLimitDecision, RateLimitRecord
from .translate_request_model import ErrorResponse, TranslateRequest, TranslateResponse

__all__ = ["ErrorResponse", "RateLimitDecision", "RateLimitRecord", "TranslateRequest", "TranslateResponse"]
