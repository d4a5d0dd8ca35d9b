# FILE: neurolens/providers/readiness.py
"""
Readiness checks for the AI service.

Two independent questions, asked on demand:
1. Is the AI client loaded? A presence test on the client loader, with ONE
   bounded grace wait to tolerate a late load. If it is still missing after
   that, the answer stays False for the session until refresh().
2. Is the session signed in? Asked fresh before every dispatch, since sign-in
   can change out-of-band. Never cached.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from neurolens.providers.base import AIService, AuthService

logger = logging.getLogger(__name__)

ClientLoader = Callable[[], Optional[AIService]]


@dataclass(frozen=True)
class SessionState:
    service_ready: bool
    signed_in: Optional[bool]  # None = unknown


class ReadinessProbe:
    def __init__(self, client_loader: ClientLoader, auth: AuthService, grace_seconds: float = 1.0):
        self._client_loader = client_loader
        self._auth = auth
        self._grace_seconds = grace_seconds
        self._service: Optional[AIService] = None
        self._gave_up = False

    @property
    def service(self) -> Optional[AIService]:
        return self._service

    @property
    def gave_up(self) -> bool:
        return self._gave_up

    def _probe(self) -> Optional[AIService]:
        if self._service is None:
            try:
                self._service = self._client_loader()
            except Exception:
                logger.exception("[readiness] AI client loader failed; treating the client as absent")
                self._service = None
        return self._service

    async def ensure_service_ready(self) -> bool:
        if self._service is not None:
            return True
        if self._gave_up:
            return False

        if self._probe() is not None:
            return True

        logger.info("[readiness] AI client not loaded yet; waiting %.1fs", self._grace_seconds)
        await asyncio.sleep(self._grace_seconds)

        if self._probe() is not None:
            logger.info("[readiness] AI client loaded after grace period")
            return True

        self._gave_up = True
        logger.error("[readiness] AI client not loaded after grace period; refresh required")
        return False

    def refresh(self) -> None:
        """Forget the previous verdict so the next check probes again."""
        self._service = None
        self._gave_up = False

    async def check_signed_in(self) -> Optional[bool]:
        try:
            return bool(self._auth.is_signed_in())
        except Exception as e:
            logger.warning("[readiness] Sign-in status unknown: %s", e)
            return None

    async def session_state(self) -> SessionState:
        ready = await self.ensure_service_ready()
        signed_in = await self.check_signed_in()
        return SessionState(service_ready=ready, signed_in=signed_in)

    async def sign_in(self) -> Optional[bool]:
        """Run the interactive sign-in, then report the fresh status."""
        await self._auth.sign_in()
        signed_in = await self.check_signed_in()
        logger.info("[readiness] Sign-in finished (signed_in=%s)", signed_in)
        return signed_in


__all__ = ["SessionState", "ReadinessProbe", "ClientLoader"]
