"""Service configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BASE_URL = "https://shamba2shelf.co.ke"


def _safe_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class TraceConfig:
    base_url: str = DEFAULT_BASE_URL
    max_workers: int = 8

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "max_workers", max(1, self.max_workers))

    @classmethod
    def from_env(cls) -> "TraceConfig":
        base_url = os.getenv("SHAMBA_TRACE_BASE_URL") or os.getenv("FRONTEND_URL") or DEFAULT_BASE_URL
        return cls(
            base_url=base_url.strip(),
            max_workers=_safe_int(os.getenv("SHAMBA_TRACE_MAX_WORKERS"), 8),
        )
