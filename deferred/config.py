"""
Environment-driven configuration for the transport and CLI.

Environment Variables:
    DEFERRED_USER_AGENT: User-Agent header sent by default - default: Mozilla/5.0 (deferred)
    DEFERRED_TIMEOUT_SECONDS: Socket timeout, 0 disables it - default: 0
    DEFERRED_FOLLOW_REDIRECTS: Follow 3xx responses (1/0) - default: 1
    DEFERRED_METRICS_ENABLED: Start the /metrics server from the CLI (true/false) - default: false
    DEFERRED_METRICS_PORT: Port for the /metrics server - default: 9100
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_USER_AGENT = "Mozilla/5.0 (deferred)"


def _env_float(key: str, default: float) -> float:
    val = os.getenv(key)
    if not val:
        return default
    try:
        parsed = float(val)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _env_int(key: str, default: int) -> int:
    val = os.getenv(key)
    if not val:
        return default
    try:
        parsed = int(val)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@dataclass(frozen=True)
class TransportConfig:
    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = 0.0
    follow_redirects: bool = True
    metrics_enabled: bool = False
    metrics_port: int = 9100

    @staticmethod
    def from_env() -> "TransportConfig":
        return TransportConfig(
            user_agent=os.getenv("DEFERRED_USER_AGENT") or DEFAULT_USER_AGENT,
            timeout_seconds=_env_float("DEFERRED_TIMEOUT_SECONDS", 0.0),
            follow_redirects=os.getenv("DEFERRED_FOLLOW_REDIRECTS", "1") != "0",
            metrics_enabled=os.getenv("DEFERRED_METRICS_ENABLED", "false").lower() == "true",
            metrics_port=_env_int("DEFERRED_METRICS_PORT", 9100),
        )
