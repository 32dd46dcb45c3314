"""
Client settings from the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_TIMEOUT_S = 30.0


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class ClientSettings:
    base_url: str = DEFAULT_BASE_URL
    api_key: str = ""
    timeout_s: float = DEFAULT_TIMEOUT_S

    @classmethod
    def from_env(cls) -> ClientSettings:
        return cls(
            base_url=os.environ.get("TABLEGATE_BASE_URL", "").strip() or DEFAULT_BASE_URL,
            api_key=os.environ.get("TABLEGATE_API_KEY", "").strip(),
            timeout_s=_env_float("TABLEGATE_TIMEOUT", DEFAULT_TIMEOUT_S),
        )
