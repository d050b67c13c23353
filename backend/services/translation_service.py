"""
/**
 * @file backend/services/translation_service.py
 * @description 医疗场景语音翻译服务（基于 Chat Completions）。
 */
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from backend.config import Settings, load_settings
from backend.services.chat_completion_client_service import ChatCompletionClient, extract_content
from backend.services.errors import ConfigurationError
from backend.services.language_catalog_service import language_display_name


logger = logging.getLogger("translation.service")

SYSTEM_PROMPT_TEMPLATE = """You are a professional healthcare translation assistant specializing in medical terminology and patient communication. Your role is to provide accurate, clear translations that maintain medical accuracy while being easily understandable.

Key guidelines:
1. Translate medical terms accurately using appropriate terminology in the target language
2. Maintain the professional but compassionate tone typical in healthcare settings
3. Ensure the translation is natural and conversational, not robotic
4. Preserve any medical context or urgency in the message
5. Use formal language appropriate for healthcare communication
6. If there are medical terms that don't have direct translations, provide the closest equivalent and consider adding a brief explanation if needed

Translate the following text from {input_lang} to {output_lang}. Provide only the translated text without any additional explanations, formatting, or metadata."""


def build_system_prompt(input_lang: str, output_lang: str, template: Optional[str] = None) -> str:
    values = {
        "input_lang": language_display_name(input_lang),
        "output_lang": language_display_name(output_lang),
    }
    if template:
        try:
            return template.format(**values)
        except (KeyError, IndexError, ValueError):
            logger.warning("Invalid prompts.system_template in config, falling back to built-in prompt")
    return SYSTEM_PROMPT_TEMPLATE.format(**values)


def build_messages(input_text: str, input_lang: str, output_lang: str, template: Optional[str] = None) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": build_system_prompt(input_lang, output_lang, template)},
        {"role": "user", "content": input_text},
    ]


class TranslationService:
    def __init__(self, client: ChatCompletionClient, settings_provider: Callable[[], Settings] = load_settings):
        self.client = client
        self._settings_provider = settings_provider

    async def translate(self, input_text: str, input_lang: str, output_lang: str) -> str:
        settings = self._settings_provider()
        api_key = settings.resolve_openai_key()
        if not api_key:
            logger.error("OpenAI API key is missing")
            raise ConfigurationError(
                "OpenAI API key is not configured. Please set OPENAI_API_KEY in the server environment."
            )

        logger.info(f"Translating from {input_lang} to {output_lang}: {input_text[:50]}...")
        data = await self.client.complete(
            build_messages(input_text, input_lang, output_lang, settings.system_prompt_template),
            api_key=api_key,
            model=settings.translation_model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        )
        return extract_content(data)
