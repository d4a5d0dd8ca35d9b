# FILE: tests/test_openai_service.py
"""
Tests for neurolens/providers/openai_service.py
Chat completion adapter with a mocked AsyncOpenAI client.
"""

import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from types import SimpleNamespace

import httpx
import openai
import pytest
from unittest.mock import AsyncMock, Mock, patch

from neurolens.config import Settings
from neurolens.errors import AuthRequiredError, ModelFailureError, NetworkFailureError
from neurolens.providers.openai_service import (
    EnvKeyAuthService,
    OpenAIChatService,
    _openai_token_param_name,
    build_messages,
    load_openai_service,
)

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _completion(content="hello", model="gpt-4o"):
    return SimpleNamespace(
        model=model,
        choices=[SimpleNamespace(message=SimpleNamespace(role="assistant", content=content))],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=34),
    )


def _client(result=None, error=None):
    client = Mock()
    client.chat.completions.create = AsyncMock(return_value=result, side_effect=error)
    return client


def _status_error(cls, status):
    return cls(f"status {status}", response=httpx.Response(status, request=_REQUEST), body=None)


class TestHelpers:
    """Message building and token parameter selection."""

    def test_token_param_legacy(self):
        """gpt-4o uses max_tokens."""
        assert _openai_token_param_name("gpt-4o") == "max_tokens"

    @pytest.mark.parametrize("model", ["gpt-5.1", "o1-mini", "o3", "o4-mini"])
    def test_token_param_new(self, model):
        """Newer models use max_completion_tokens."""
        assert _openai_token_param_name(model) == "max_completion_tokens"

    def test_text_messages(self):
        """Text prompts are a single user string."""
        assert build_messages("hi") == [{"role": "user", "content": "hi"}]

    def test_image_messages(self):
        """Images ride along as an image_url part."""
        msgs = build_messages("look", "data:image/png;base64,AA")
        parts = msgs[0]["content"]
        assert parts[0] == {"type": "text", "text": "look"}
        assert parts[1] == {"type": "image_url", "image_url": {"url": "data:image/png;base64,AA"}}


class TestAnalyze:
    """One completion per call."""

    @pytest.mark.asyncio
    async def test_reply_shape(self):
        """The reply is reduced to message/model/usage."""
        client = _client(_completion("{\"a\": \"b\"}"))
        svc = OpenAIChatService(Settings(max_tokens=500), client=client)
        reply = await svc.analyze("prompt", model="gpt-4o")

        assert reply["message"] == {"role": "assistant", "content": "{\"a\": \"b\"}"}
        assert reply["model"] == "gpt-4o"
        assert reply["usage"] == {"prompt_tokens": 12, "completion_tokens": 34}
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["max_tokens"] == 500

    @pytest.mark.asyncio
    async def test_image_request(self):
        """content_ref becomes an image_url part."""
        client = _client(_completion())
        svc = OpenAIChatService(Settings(), client=client)
        await svc.analyze("prompt", "data:image/png;base64,AA", model="gpt-4o")
        messages = client.chat.completions.create.call_args.kwargs["messages"]
        assert messages[0]["content"][1]["type"] == "image_url"

    @pytest.mark.asyncio
    async def test_no_choices(self):
        """No choices means no message."""
        client = _client(SimpleNamespace(choices=[], model="gpt-4o"))
        svc = OpenAIChatService(Settings(), client=client)
        assert await svc.analyze("prompt", model="gpt-4o") == {"model": "gpt-4o", "message": None}

    @pytest.mark.asyncio
    async def test_missing_key_is_auth(self, monkeypatch):
        """Without a key the call asks for sign-in."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        svc = OpenAIChatService(Settings(api_key=None))
        with pytest.raises(AuthRequiredError):
            await svc.analyze("prompt", model="gpt-4o")

    @pytest.mark.asyncio
    async def test_client_created_lazily(self, monkeypatch):
        """The SDK client is built on first use with the current key."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        with patch("openai.AsyncOpenAI") as factory:
            factory.return_value = _client(_completion())
            svc = OpenAIChatService(Settings(request_timeout=15))
            factory.assert_not_called()
            await svc.analyze("prompt", model="gpt-4o")
        factory.assert_called_once_with(api_key="sk-test", timeout=15)


class TestErrorMapping:
    """SDK exceptions map onto the failure taxonomy."""

    @pytest.mark.asyncio
    async def test_connection_error(self):
        """Connection problems are network failures."""
        svc = OpenAIChatService(Settings(), client=_client(error=openai.APIConnectionError(request=_REQUEST)))
        with pytest.raises(NetworkFailureError):
            await svc.analyze("p", model="gpt-4o")

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Timeouts are network failures."""
        svc = OpenAIChatService(Settings(), client=_client(error=openai.APITimeoutError(request=_REQUEST)))
        with pytest.raises(NetworkFailureError):
            await svc.analyze("p", model="gpt-4o")

    @pytest.mark.asyncio
    async def test_authentication(self):
        """Rejected credentials need sign-in."""
        err = _status_error(openai.AuthenticationError, 401)
        svc = OpenAIChatService(Settings(), client=_client(error=err))
        with pytest.raises(AuthRequiredError) as exc_info:
            await svc.analyze("p", model="gpt-4o")
        assert exc_info.value.__cause__ is err

    @pytest.mark.asyncio
    @pytest.mark.parametrize("cls,status", [
        (openai.RateLimitError, 429),
        (openai.NotFoundError, 404),
        (openai.BadRequestError, 400),
    ])
    async def test_model_failures(self, cls, status):
        """Quota, unknown model and bad request are model failures."""
        svc = OpenAIChatService(Settings(), client=_client(error=_status_error(cls, status)))
        with pytest.raises(ModelFailureError):
            await svc.analyze("p", model="gpt-4o")

    @pytest.mark.asyncio
    async def test_foreign_error_untouched(self):
        """Non-SDK exceptions are re-raised as they are."""
        svc = OpenAIChatService(Settings(), client=_client(error=ValueError("weird")))
        with pytest.raises(ValueError):
            await svc.analyze("p", model="gpt-4o")


class TestAuthAndLoader:
    """Key-based sign-in and the client loader."""

    def test_signed_in_with_key(self, monkeypatch):
        """A configured key counts as signed in."""
        monkeypatch.setenv("OPENAI_API_KEY", " 'sk-abc' ")
        assert EnvKeyAuthService().is_signed_in() is True

    def test_signed_out_without_key(self, monkeypatch):
        """No key, not signed in."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert EnvKeyAuthService().is_signed_in() is False

    @pytest.mark.asyncio
    async def test_sign_in_reloads_env(self, monkeypatch):
        """sign_in re-reads .env."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with patch("neurolens.config.load_dotenv") as load:
            await EnvKeyAuthService().sign_in()
        load.assert_called_once_with(override=True)

    def test_loader_returns_service(self):
        """With the SDK installed the loader yields a service."""
        svc = load_openai_service(Settings(max_tokens=100))
        assert isinstance(svc, OpenAIChatService)
        assert svc.max_tokens == 100

    def test_loader_without_sdk(self):
        """A missing SDK means not ready."""
        with patch.dict(sys.modules, {"openai": None}):
            assert load_openai_service(Settings()) is None
