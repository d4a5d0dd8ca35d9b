# FILE: neurolens/analysis/dispatcher.py
"""
Analysis dispatch: payload → exactly one call to the AI service.

Preconditions:
- service_ready is a hard gate (ServiceUnavailableError)
- signed_in is soft: False or unknown only logs a warning, because the
  service may prompt for sign-in as a side effect of the call

Both kinds go to the same pinned model. At most one call is outstanding per
dispatcher; a second dispatch while one is in flight raises
PipelineBusyError and leaves the first alone.

Errors raised by the service that are already AnalysisErrors pass through.
Anything else is bucketed by keyword into auth / network / model.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from neurolens.analysis.prompts import AnalysisPrompt, build_prompt
from neurolens.content.ingestor import ContentPayload
from neurolens.errors import (
    AnalysisError,
    PipelineBusyError,
    ServiceUnavailableError,
    classify_failure_text,
    error_for_category,
)
from neurolens.providers.readiness import SessionState
from neurolens.providers.base import AIService

logger = logging.getLogger(__name__)


class AnalysisDispatcher:
    def __init__(self, service: Optional[AIService], model: str):
        self._service = service
        self.model = model
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def bind_service(self, service: AIService) -> None:
        """Attach the service once the readiness probe has loaded it."""
        self._service = service

    async def dispatch(self, payload: ContentPayload, session: SessionState) -> Any:
        """
        Issue the analysis request for a payload.

        Returns:
            The raw service reply, untouched

        Raises:
            PipelineBusyError: a dispatch is already outstanding
            ServiceUnavailableError: the service is not ready
            AnalysisError: the call itself failed
        """
        if self._in_flight:
            raise PipelineBusyError("An analysis request is already in progress")
        if not session.service_ready or self._service is None:
            raise ServiceUnavailableError("AI service not loaded. Please refresh and try again.")
        if not session.signed_in:
            logger.warning(
                "[dispatcher] Session not signed in (signed_in=%s); dispatching anyway",
                session.signed_in,
            )

        prompt = build_prompt(payload)

        self._in_flight = True
        try:
            return await self._call(prompt)
        finally:
            self._in_flight = False

    async def _call(self, prompt: AnalysisPrompt) -> Any:
        logger.info("[dispatcher] Dispatching %s analysis to %s", prompt.kind.value, self.model)
        try:
            raw = await self._service.analyze(prompt.text, prompt.content_ref, model=self.model)
        except AnalysisError:
            raise
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            mapped = error_for_category(classify_failure_text(message), message)
            logger.error("[dispatcher] Service call failed (%s): %s", mapped.kind.value, message)
            raise mapped from exc

        logger.debug("[dispatcher] Raw reply type: %s", type(raw).__name__)
        return raw


__all__ = ["AnalysisDispatcher"]
