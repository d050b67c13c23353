"""
/**
 * @file backend/services/language_catalog_service.py
 * @description 语言目录：语音识别输入语言与翻译输出语言列表。
 */
"""

from __future__ import annotations

from typing import Dict, List


INPUT_LANGUAGES: List[Dict[str, str]] = [
    {"code": "en-US", "name": "English (US)"},
    {"code": "es-ES", "name": "Spanish"},
    {"code": "fr-FR", "name": "French"},
    {"code": "de-DE", "name": "German"},
    {"code": "it-IT", "name": "Italian"},
    {"code": "pt-BR", "name": "Portuguese (Brazil)"},
    {"code": "ru-RU", "name": "Russian"},
    {"code": "zh-CN", "name": "Chinese (Simplified)"},
    {"code": "ja-JP", "name": "Japanese"},
    {"code": "ko-KR", "name": "Korean"},
    {"code": "ar-SA", "name": "Arabic"},
    {"code": "hi-IN", "name": "Hindi"},
]

OUTPUT_LANGUAGES: List[Dict[str, str]] = [
    {"code": "en", "name": "English"},
    {"code": "es", "name": "Spanish"},
    {"code": "fr", "name": "French"},
    {"code": "de", "name": "German"},
    {"code": "it", "name": "Italian"},
    {"code": "pt", "name": "Portuguese"},
    {"code": "ru", "name": "Russian"},
    {"code": "zh", "name": "Chinese"},
    {"code": "ja", "name": "Japanese"},
    {"code": "ko", "name": "Korean"},
    {"code": "ar", "name": "Arabic"},
    {"code": "hi", "name": "Hindi"},
]

_NAMES = {item["code"].lower(): item["name"] for item in INPUT_LANGUAGES + OUTPUT_LANGUAGES}


def list_languages() -> Dict[str, List[Dict[str, str]]]:
    return {"input": [dict(x) for x in INPUT_LANGUAGES], "output": [dict(x) for x in OUTPUT_LANGUAGES]}


def normalize_language_tag(tag: str) -> str:
    """'en-US' -> 'en', 'pt_BR' -> 'pt'."""
    return tag.strip().replace("_", "-").split("-")[0].lower()


def language_display_name(tag: str) -> str:
    cleaned = tag.strip()
    key = cleaned.replace("_", "-").lower()
    if key in _NAMES:
        return _NAMES[key]
    return _NAMES.get(normalize_language_tag(cleaned), cleaned)
