"""
/**
 * @file backend/controllers/translate_controller.py
 * @description 翻译控制器：校验 → 限流 → 转发上游 → 统一错误响应。
 */
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from backend.config import Settings
from backend.controllers.dependencies import get_rate_limiter, get_settings, get_translation_service
from backend.models.translate_request_model import ErrorResponse, TranslateRequest, TranslateResponse
from backend.services.errors import RateLimitExceededError, TranslationError, TranslationValidationError
from backend.services.rate_limiter_service import FixedWindowRateLimiter
from backend.services.translation_service import TranslationService
from backend.utils import client_identifier


logger = logging.getLogger("translation.controller")

router = APIRouter()

MISSING_FIELDS_MESSAGE = "Missing required fields: inputText, inputLang, outputLang"
RATE_LIMITED_MESSAGE = "Rate limit exceeded. Please wait before making another request."
INTERNAL_ERROR_MESSAGE = "Internal server error during translation"


async def _parse_request(request: Request) -> TranslateRequest:
    try:
        body = await request.json()
    except ValueError as e:
        raise TranslationValidationError("Request body must be valid JSON") from e
    if not isinstance(body, dict):
        raise TranslationValidationError(MISSING_FIELDS_MESSAGE)
    try:
        req = TranslateRequest.model_validate(body)
    except ValidationError as e:
        raise TranslationValidationError(MISSING_FIELDS_MESSAGE) from e
    if req.missing_fields():
        raise TranslationValidationError(MISSING_FIELDS_MESSAGE)
    return req


def _error(status_code: int, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (400, 429, 500)}


@router.post("/api/translate", response_model=TranslateResponse, responses=ERROR_RESPONSES)
@router.post("/translate", response_model=TranslateResponse, responses=ERROR_RESPONSES, include_in_schema=False)
async def translate(
    request: Request,
    settings: Settings = Depends(get_settings),
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
    service: TranslationService = Depends(get_translation_service),
):
    rate_headers: Dict[str, str] = {}
    try:
        req = await _parse_request(request)

        limits = settings.rate_limit
        now = limiter.clock()
        decision = limiter.check(client_identifier(request.headers), limits["limit"], limits["window_ms"])
        rate_headers = decision.headers()
        if not decision.allowed:
            raise RateLimitExceededError(RATE_LIMITED_MESSAGE, retry_after=decision.retry_after_seconds(now))

        translated = await service.translate(req.input_text, req.input_lang, req.output_lang)
        return JSONResponse(status_code=200, content={"translated": translated}, headers=rate_headers)
    except RateLimitExceededError as e:
        return _error(e.status_code, e.message, {**rate_headers, "Retry-After": str(e.retry_after)})
    except TranslationError as e:
        return _error(e.status_code, e.message, rate_headers)
    except Exception:
        logger.exception("Translation error")
        return _error(500, INTERNAL_ERROR_MESSAGE)
