"""
/**
 * @file backend/config/settings.py
 * @description 后端配置加载与合并（config.json + config.local.json），支持热更新。
 */
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_PATH = os.path.join(REPO_ROOT, "config.json")
CONFIG_LOCAL_PATH = os.path.join(REPO_ROOT, "config.local.json")
CONFIG_EXAMPLE_PATH = os.path.join(REPO_ROOT, "config.example.json")

DEFAULT_CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_TRANSLATION_MODEL = "gpt-3.5-turbo"

logger = logging.getLogger("config_loader")


def _load_json(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            value = json.load(f)
            return value if isinstance(value, dict) else {}
    except FileNotFoundError:
        return {}


def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge_dicts(base[key], value)
        else:
            base[key] = value
    return base


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name, {})
    return value if isinstance(value, dict) else {}


def _positive_int(value: Any, default: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Settings:
    raw: Dict[str, Any]

    @property
    def endpoints(self) -> Dict[str, str]:
        return _section(self.raw, "endpoints")

    @property
    def models(self) -> Dict[str, str]:
        return _section(self.raw, "models")

    @property
    def api_keys(self) -> Dict[str, str]:
        return _section(self.raw, "api_keys")

    @property
    def prompts(self) -> Dict[str, str]:
        return _section(self.raw, "prompts")

    @property
    def parameters(self) -> Dict[str, Any]:
        return _section(self.raw, "parameters")

    @property
    def chat_completions_url(self) -> str:
        value = self.endpoints.get("chat_completions")
        return value if isinstance(value, str) and value else DEFAULT_CHAT_COMPLETIONS_URL

    @property
    def translation_model(self) -> str:
        value = self.models.get("translation")
        return value if isinstance(value, str) and value else DEFAULT_TRANSLATION_MODEL

    @property
    def max_tokens(self) -> int:
        return _positive_int(self.parameters.get("max_tokens"), 1000)

    @property
    def temperature(self) -> float:
        return _float(self.parameters.get("temperature"), 0.3)

    @property
    def upstream_timeout_seconds(self) -> float:
        value = _float(self.parameters.get("upstream_timeout_seconds"), 30.0)
        return value if value > 0 else 30.0

    @property
    def system_prompt_template(self) -> Optional[str]:
        value = self.prompts.get("system_template")
        return value if isinstance(value, str) and value.strip() else None

    @property
    def rate_limit(self) -> Dict[str, int]:
        section = _section(self.raw, "rate_limit")
        return {
            "limit": _positive_int(section.get("limit"), 10),
            "window_ms": _positive_int(section.get("window_ms"), 60000),
            "max_entries": _positive_int(section.get("max_entries"), 10000),
            "sweep_interval_ms": _positive_int(section.get("sweep_interval_ms"), 60000),
        }

    @property
    def cors_origins(self) -> List[str]:
        origins = _section(self.raw, "cors").get("allow_origins")
        if isinstance(origins, list) and origins:
            return [str(o) for o in origins]
        return ["*"]

    def resolve_openai_key(self) -> Optional[str]:
        # Read on every call so a key exported after startup is picked up.
        return os.getenv("OPENAI_API_KEY") or (
            self.api_keys.get("openai") if isinstance(self.api_keys.get("openai"), str) else None
        )


_CACHED_SETTINGS: Optional[Settings] = None
_CONFIG_HASH = ""
_SETTINGS_LOCK = threading.Lock()


def _deep_diff(d1: Dict[str, Any], d2: Dict[str, Any], path="") -> list:
    diffs = []
    for k in sorted(set(d1.keys()) | set(d2.keys())):
        p = f"{path}.{k}" if path else k
        if k not in d1:
            diffs.append(f"Added: {p}")
        elif k not in d2:
            diffs.append(f"Removed: {p}")
        elif isinstance(d1[k], dict) and isinstance(d2[k], dict):
            diffs.extend(_deep_diff(d1[k], d2[k], p))
        elif d1[k] != d2[k]:
            # Values under api_keys stay out of the log.
            if p.startswith("api_keys"):
                diffs.append(f"Changed: {p}")
            else:
                diffs.append(f"Changed: {p} ({d1[k]} -> {d2[k]})")
    return diffs


def reload_settings(
    base_path: str = CONFIG_PATH,
    local_path: str = CONFIG_LOCAL_PATH,
    example_path: str = CONFIG_EXAMPLE_PATH,
) -> Settings:
    global _CACHED_SETTINGS, _CONFIG_HASH

    with _SETTINGS_LOCK:
        try:
            base_cfg = _load_json(base_path)
            if not base_cfg.get("endpoints") and os.path.exists(example_path):
                base_cfg = _merge_dicts(_load_json(example_path), base_cfg)

            local_cfg = _load_json(local_path)
            merged = _merge_dicts(base_cfg, local_cfg)

            new_hash = hashlib.md5(json.dumps(merged, sort_keys=True).encode("utf-8")).hexdigest()
            # Watchdog fires several events per save; identical content is a no-op.
            if _CACHED_SETTINGS and new_hash == _CONFIG_HASH:
                return _CACHED_SETTINGS

            is_reload = _CACHED_SETTINGS is not None
            if is_reload:
                diffs = _deep_diff(_CACHED_SETTINGS.raw, merged)
                if diffs:
                    logger.info(f"Config changes detected: {'; '.join(diffs)}")

            _CACHED_SETTINGS = Settings(raw=merged)
            _CONFIG_HASH = new_hash

            if is_reload:
                logger.info("Configuration reloaded successfully.")

        except (OSError, ValueError) as e:
            logger.error(f"Failed to reload config: {e}. Keeping old config.")
            if not _CACHED_SETTINGS:
                logger.warning("Initializing with empty settings due to load failure.")
                _CACHED_SETTINGS = Settings(raw={})

    return _CACHED_SETTINGS


def load_settings() -> Settings:
    """
    Get current settings. Lazy loads on first call.
    Subsequent reloads are handled by the file watcher calling reload_settings().
    """
    if _CACHED_SETTINGS is None:
        return reload_settings()
    return _CACHED_SETTINGS
