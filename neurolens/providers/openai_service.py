# FILE: neurolens/providers/openai_service.py
"""
OpenAI-backed implementation of the service interfaces.

- OpenAIChatService: one chat completion per analyze() call. Images go in as
  an image_url content part carrying the data URI; text prompts are a plain
  user message.
- EnvKeyAuthService: "signed in" means an API key is configured. sign_in()
  re-reads the .env file, which is as interactive as a library gets.
- load_openai_service(): client loader for the readiness probe; None when the
  SDK is missing. A missing key only surfaces at call time, as AuthRequiredError.

The reply is reduced to {"message": {"role", "content"}, "model", "usage"} so
it lines up with the first probe of the normalizer.

SDK exceptions are mapped onto the failure taxonomy:
- APIConnectionError / APITimeoutError         → NetworkFailureError
- AuthenticationError / PermissionDeniedError  → AuthRequiredError
- RateLimitError / NotFoundError / BadRequest  → ModelFailureError
- any other APIError                           → keyword classification
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from neurolens.config import Settings, get_api_key, get_settings
from neurolens.errors import (
    AuthRequiredError,
    ModelFailureError,
    NetworkFailureError,
    classify_failure_text,
    error_for_category,
)
from neurolens.providers.base import AIService, AuthService

logger = logging.getLogger(__name__)


def _openai_token_param_name(model_id: str) -> str:
    """
    OpenAI token-limit parameter name differs for some newer models.
    - Legacy: max_tokens
    - Newer chat models (gpt-5.*, o-series): max_completion_tokens
    """
    m = (model_id or "").strip().lower()
    if m.startswith("gpt-5") or m.startswith("o1") or m.startswith("o3") or m.startswith("o4"):
        return "max_completion_tokens"
    return "max_tokens"


def build_messages(prompt_text: str, content_ref: Optional[str] = None) -> List[Dict[str, Any]]:
    if content_ref:
        return [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt_text},
                    {"type": "image_url", "image_url": {"url": content_ref}},
                ],
            }
        ]
    return [{"role": "user", "content": prompt_text}]


def _map_sdk_error(exc: Exception) -> Exception:
    import openai

    msg = str(exc) or exc.__class__.__name__
    if isinstance(exc, (openai.APIConnectionError, openai.APITimeoutError)):
        return NetworkFailureError(f"Network error contacting OpenAI: {msg}")
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return AuthRequiredError(f"OpenAI rejected the credentials: {msg}")
    if isinstance(exc, (openai.RateLimitError, openai.NotFoundError, openai.BadRequestError)):
        return ModelFailureError(f"Model request failed: {msg}")
    if isinstance(exc, openai.APIError):
        return error_for_category(classify_failure_text(msg), msg)
    return exc


class OpenAIChatService(AIService):
    """Chat completion through AsyncOpenAI."""

    def __init__(self, settings: Optional[Settings] = None, client: Any = None):
        self._settings = settings or Settings()
        self._client = client

    @property
    def max_tokens(self) -> int:
        return self._settings.max_tokens

    def _get_client(self) -> Any:
        """Lazy init; the key is read at call time so a later sign-in takes effect."""
        if self._client is None:
            api_key = get_api_key() or self._settings.api_key
            if not api_key:
                raise AuthRequiredError("No OpenAI API key configured. Please sign in.")

            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(api_key=api_key, timeout=self._settings.request_timeout)
            logger.info("[openai] Client initialized")
        return self._client

    async def analyze(
        self,
        prompt_text: str,
        content_ref: Optional[str] = None,
        *,
        model: str,
    ) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "model": model,
            "messages": build_messages(prompt_text, content_ref),
            _openai_token_param_name(model): int(self.max_tokens),
        }

        client = self._get_client()
        try:
            resp = await client.chat.completions.create(**kwargs)
        except Exception as exc:
            mapped = _map_sdk_error(exc)
            if mapped is exc:
                raise
            raise mapped from exc

        if not getattr(resp, "choices", None):
            return {"model": model, "message": None}

        msg = resp.choices[0].message
        usage = getattr(resp, "usage", None)
        return {
            "model": getattr(resp, "model", model),
            "message": {"role": getattr(msg, "role", "assistant"), "content": msg.content},
            "usage": {
                "prompt_tokens": getattr(usage, "prompt_tokens", 0) if usage else 0,
                "completion_tokens": getattr(usage, "completion_tokens", 0) if usage else 0,
            },
        }


class EnvKeyAuthService(AuthService):
    """Signed in while OPENAI_API_KEY is set."""

    def is_signed_in(self) -> bool:
        return get_api_key() is not None

    async def sign_in(self) -> None:
        get_settings(reload_env=True)
        if self.is_signed_in():
            logger.info("[openai] API key found after sign-in")
        else:
            logger.warning("[openai] Sign-in did not yield an API key; set OPENAI_API_KEY")


def load_openai_service(settings: Optional[Settings] = None) -> Optional[OpenAIChatService]:
    """Client loader: the service if it can be built right now, else None."""
    try:
        import openai  # noqa: F401
    except ImportError as e:
        logger.warning("[openai] SDK not available: %s", e)
        return None
    return OpenAIChatService(settings or get_settings())


__all__ = [
    "OpenAIChatService",
    "EnvKeyAuthService",
    "load_openai_service",
    "build_messages",
]
