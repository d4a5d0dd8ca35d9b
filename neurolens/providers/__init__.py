# FILE: neurolens/providers/__init__.py
"""AI and auth service interfaces plus the OpenAI-backed implementation."""

from neurolens.providers.base import AIService, AuthService
from neurolens.providers.readiness import ReadinessProbe, SessionState
from neurolens.providers.openai_service import (
    OpenAIChatService,
    EnvKeyAuthService,
    load_openai_service,
)

__all__ = [
    "AIService",
    "AuthService",
    "ReadinessProbe",
    "SessionState",
    "OpenAIChatService",
    "EnvKeyAuthService",
    "load_openai_service",
]
