# FILE: neurolens/providers/base.py
"""
Service interfaces consumed by the pipeline.

The pipeline never looks a client up globally; an AIService and an
AuthService are handed in, so tests can substitute their own.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class AIService(ABC):
    """Chat completion capability."""

    @abstractmethod
    async def analyze(
        self,
        prompt_text: str,
        content_ref: Optional[str] = None,
        *,
        model: str,
    ) -> Any:
        """
        Run one analysis request.

        Args:
            prompt_text: Full prompt
            content_ref: Image data URI (image requests only)
            model: Model id to pin the request to

        Returns:
            The raw reply. Its shape is not guaranteed; the normalizer
            deals with it.
        """
        pass


class AuthService(ABC):
    """Identity side of the service."""

    @abstractmethod
    def is_signed_in(self) -> bool:
        pass

    @abstractmethod
    async def sign_in(self) -> None:
        """Interactive sign-in. May prompt outside the pipeline's control."""
        pass


__all__ = ["AIService", "AuthService"]
