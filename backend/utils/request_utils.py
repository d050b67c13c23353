"""
/**
 * @file backend/utils/request_utils.py
 * @description 请求辅助：从代理头推导客户端标识（限流键）。
 */
"""

from __future__ import annotations

from typing import Mapping, Optional


UNKNOWN_CLIENT = "unknown"


def client_identifier(headers: Mapping[str, str]) -> str:
    # Clients without either header share the "unknown" bucket.
    forwarded: Optional[str] = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip: Optional[str] = headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    return UNKNOWN_CLIENT
