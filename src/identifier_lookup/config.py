from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_API_BASE = "https://veerulookup.onrender.com"
DEFAULT_TIMEOUT_S = 10.0
DEFAULT_USER_AGENT = "identifier-lookup/0.1"

API_BASE_ENV = "IDENTIFIER_LOOKUP_API_BASE"
TIMEOUT_ENV = "IDENTIFIER_LOOKUP_TIMEOUT"


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


@dataclass(frozen=True)
class LookupSettings:
    api_base: str = DEFAULT_API_BASE
    timeout_s: float = DEFAULT_TIMEOUT_S
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> LookupSettings:
        """Explicit options win, then environment variables, then defaults."""

        opts = dict(options or {})
        api_base = (
            str(opts.get("api_base") or "").strip()
            or os.environ.get(API_BASE_ENV, "").strip()
            or cls.api_base
        )
        timeout_s = opts.get("timeout_s")
        if timeout_s is None:
            timeout_s = _env_float(TIMEOUT_ENV)
        if timeout_s is None or float(timeout_s) <= 0:
            timeout_s = cls.timeout_s
        return cls(
            api_base=api_base.rstrip("/"),
            timeout_s=float(timeout_s),
            user_agent=str(opts.get("user_agent") or cls.user_agent),
        )


__all__ = [
    "API_BASE_ENV",
    "DEFAULT_API_BASE",
    "DEFAULT_TIMEOUT_S",
    "DEFAULT_USER_AGENT",
    "LookupSettings",
    "TIMEOUT_ENV",
]
