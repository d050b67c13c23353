"""
/**
 * @file backend/models/translate_request_model.py
 * @description 翻译请求/响应模型（Pydantic）。
 */
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TranslateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    input_text: Any = Field(default=None, alias="inputText")
    input_lang: Any = Field(default=None, alias="inputLang")
    output_lang: Any = Field(default=None, alias="outputLang")

    def missing_fields(self) -> list[str]:
        missing = []
        for alias, value in (
            ("inputText", self.input_text),
            ("inputLang", self.input_lang),
            ("outputLang", self.output_lang),
        ):
            if not isinstance(value, str) or not value.strip():
                missing.append(alias)
        return missing


class TranslateResponse(BaseModel):
    translated: str


class ErrorResponse(BaseModel):
    error: str
