# FILE: neurolens/config.py
"""
Runtime settings for NeuroLens.

Everything is read from the environment (a local .env file is loaded first).
One model id is pinned for both image and text analysis so the requested
output schema behaves the same across kinds.

Environment:
- OPENAI_API_KEY: credential for the chat completion service
- NEUROLENS_MODEL: model id (default gpt-4o)
- NEUROLENS_MAX_TOKENS: completion budget (default 2000)
- NEUROLENS_READY_GRACE_SECONDS: one-shot wait for a late client (default 1.0)
- NEUROLENS_REQUEST_TIMEOUT: SDK request timeout in seconds (default 60)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
DEFAULT_MAX_TOKENS = 2000
DEFAULT_GRACE_SECONDS = 1.0
DEFAULT_REQUEST_TIMEOUT = 60

API_KEY_ENV = "OPENAI_API_KEY"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().strip('"').strip("'")
    return value or None


def get_api_key() -> Optional[str]:
    """Get the service API key from environment."""
    return _clean(os.getenv(API_KEY_ENV))


def _env_int(name: str, default: int) -> int:
    raw = _clean(os.getenv(name))
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("[config] %s=%r is not an integer; using %s", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = _clean(os.getenv(name))
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("[config] %s=%r is not a number; using %s", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    ready_grace_seconds: float = DEFAULT_GRACE_SECONDS
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    api_key: Optional[str] = None


def get_settings(reload_env: bool = False) -> Settings:
    """
    Build Settings from the environment.

    Args:
        reload_env: re-read .env, overriding variables already set
    """
    load_dotenv(override=reload_env)
    return Settings(
        model=_clean(os.getenv("NEUROLENS_MODEL")) or DEFAULT_MODEL,
        max_tokens=_env_int("NEUROLENS_MAX_TOKENS", DEFAULT_MAX_TOKENS),
        ready_grace_seconds=max(0.0, _env_float("NEUROLENS_READY_GRACE_SECONDS", DEFAULT_GRACE_SECONDS)),
        request_timeout=_env_int("NEUROLENS_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        api_key=get_api_key(),
    )


__all__ = [
    "Settings",
    "get_settings",
    "get_api_key",
    "API_KEY_ENV",
    "DEFAULT_MODEL",
]
