"""
/**
 * @file backend/services/chat_completion_client_service.py
 * @description Chat Completions 调用封装（httpx 异步客户端，无重试）。
 */
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Dict, List, Optional

import httpx

from backend.config import Settings, load_settings
from backend.services.errors import (
    ConfigurationError,
    EmptyTranslationError,
    UpstreamError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
)


logger = logging.getLogger("translation.upstream")


def _json_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {}


def extract_content(data: Any) -> str:
    choices = data.get("choices") if isinstance(data, dict) else None
    if isinstance(choices, list) and choices:
        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if isinstance(content, str) and content.strip():
            return content.strip()
    raise EmptyTranslationError("No translation received from OpenAI")


class ChatCompletionClient:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings_provider: Callable[[], Settings] = load_settings,
    ):
        self._client = http_client
        self._settings_provider = settings_provider

    @property
    def settings(self) -> Settings:
        return self._settings_provider()

    def _get_headers(self, api_key: Optional[str]) -> Dict[str, str]:
        if not api_key:
            raise ConfigurationError(
                "OpenAI API key is not configured. Set OPENAI_API_KEY or api_keys.openai in config.local.json."
            )
        return {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}

    async def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        api_key: Optional[str],
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        settings = self.settings
        headers = self._get_headers(api_key)
        payload = {
            "model": model or settings.translation_model,
            "messages": messages,
            "max_tokens": max_tokens if max_tokens is not None else settings.max_tokens,
            "temperature": temperature if temperature is not None else settings.temperature,
        }

        timeout = settings.upstream_timeout_seconds
        try:
            # httpx applies its timeout per phase; wait_for caps the whole exchange.
            response = await asyncio.wait_for(
                self._client.post(settings.chat_completions_url, headers=headers, json=payload, timeout=timeout),
                timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.error(f"Upstream request timed out after {settings.upstream_timeout_seconds}s: {e!r}")
            raise UpstreamTimeoutError("OpenAI API request timed out") from e
        except httpx.TransportError as e:
            logger.error(f"Upstream transport error: {e!r}")
            raise UpstreamError(f"OpenAI API unreachable: {e}") from e

        if response.is_success:
            data = _json_payload(response)
            return data if isinstance(data, dict) else {}

        error_data = _json_payload(response)
        details = json.dumps(error_data, ensure_ascii=False, separators=(",", ":"))
        logger.error(f"OpenAI API error: status={response.status_code} details={details}")
        if response.status_code == 429:
            raise UpstreamRateLimitError(f"OpenAI rate limit exceeded. Details: {details}")
        raise UpstreamError(
            f"OpenAI API error: {response.status_code} {response.reason_phrase}. Details: {details}",
            status_code=response.status_code,
        )
