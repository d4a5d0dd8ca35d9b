# FILE: neurolens/pipeline/orchestrator.py
"""
AnalysisPipeline: selection → ingestion → readiness gate → dispatch →
normalization → sentiment, driven through the state machine.

Flow per analyze() call:
1. begin_reading (progress 0), ingest off the event loop (progress to 50)
2. readiness gate: the client must be loaded (ServiceUnavailableError)
3. session check: not signed in only logs a warning
4. begin_dispatch (progress 50), exactly one service call
5. normalize the reply, derive the sentiment verdict, succeed (progress 100)

Any AnalysisError moves the machine to FAILED and is re-raised for the
caller to surface; a foreign exception is classified into one first. A read that is overtaken by a new selection is dropped
and analyze() returns None.

Usage:
    pipeline = create_pipeline()
    pipeline.select_file(ContentSource.from_path("poster.png"))
    result = await pipeline.analyze()
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from neurolens.analysis.dispatcher import AnalysisDispatcher
from neurolens.analysis.normalizer import ResponseNormalizer
from neurolens.analysis.results import NormalizedResult
from neurolens.analysis.sentiment import SentimentVerdict, classify_sentiment
from neurolens.config import Settings, get_settings
from neurolens.content.classifier import ContentKind, ContentSource, classify_source
from neurolens.content.ingestor import ContentIngestor
from neurolens.errors import (
    AnalysisError,
    ReadFailureError,
    ServiceUnavailableError,
    UnsupportedContentTypeError,
    classify_failure_text,
    error_for_category,
)
from neurolens.pipeline.state import Listener, PipelinePhase, PipelineSnapshot, PipelineStateMachine
from neurolens.providers.base import AuthService
from neurolens.providers.openai_service import EnvKeyAuthService, load_openai_service
from neurolens.providers.readiness import ClientLoader, ReadinessProbe

logger = logging.getLogger(__name__)


class AnalysisPipeline:
    def __init__(
        self,
        probe: ReadinessProbe,
        dispatcher: AnalysisDispatcher,
        ingestor: Optional[ContentIngestor] = None,
        normalizer: Optional[ResponseNormalizer] = None,
    ):
        self._probe = probe
        self._dispatcher = dispatcher
        self._ingestor = ingestor or ContentIngestor()
        self._normalizer = normalizer or ResponseNormalizer()
        self._machine = PipelineStateMachine()

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def machine(self) -> PipelineStateMachine:
        return self._machine

    @property
    def phase(self) -> PipelinePhase:
        return self._machine.phase

    @property
    def result(self) -> Optional[NormalizedResult]:
        return self._machine.result

    @property
    def verdict(self) -> Optional[SentimentVerdict]:
        return self._machine.verdict

    @property
    def error(self) -> Optional[AnalysisError]:
        return self._machine.error

    def snapshot(self) -> PipelineSnapshot:
        return self._machine.snapshot()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._machine.subscribe(listener)

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def select_file(self, source: ContentSource) -> ContentKind:
        """
        Hold a new selection.

        Raises:
            PipelineBusyError: a request is being dispatched
            UnsupportedContentTypeError: neither image nor text; the machine is
                left in FAILED with this error attached
        """
        kind = classify_source(source)
        self._machine.select(source, kind)
        if kind == ContentKind.UNSUPPORTED:
            error = UnsupportedContentTypeError(
                "Please upload an image or text document.",
                mime_type=source.mime_type or None,
                filename=source.name,
            )
            self._machine.fail(error)
            raise error
        logger.info("[pipeline] Selected %s (%s, %d bytes)", source.name, kind.value, source.size_bytes)
        return kind

    def select_text(self, text: str) -> ContentKind:
        source = ContentSource.from_text(text)
        if not text.strip():
            self._machine.select(source, ContentKind.TEXT)
            error = ReadFailureError("Please enter some text to analyze.")
            self._machine.fail(error)
            raise error
        return self.select_file(source)

    def reset(self) -> None:
        self._machine.reset()

    # -------------------------------------------------------------------------
    # Analysis
    # -------------------------------------------------------------------------

    def _superseded(self, generation: int) -> bool:
        return self._machine.generation != generation

    async def analyze(self) -> Optional[NormalizedResult]:
        """
        Run one request for the held selection.

        Returns:
            The normalized result, or None when a new selection replaced the
            one being read

        Raises:
            PipelineBusyError: a request is already outstanding
            InvalidTransitionError: nothing analyzable is selected
            AnalysisError: the request failed (the machine is in FAILED)
        """
        generation = self._machine.begin_reading()
        source = self._machine.source
        kind = self._machine.kind

        def on_progress(percent: int) -> None:
            if not self._superseded(generation):
                self._machine.set_progress(percent)

        try:
            payload = await self._ingestor.ingest(source, kind, on_progress=on_progress)
            if self._superseded(generation):
                logger.info("[pipeline] Selection changed while reading %s; dropping it", source.name)
                return None

            session = await self._probe.session_state()
            if self._superseded(generation):
                logger.info("[pipeline] Selection changed before dispatch; dropping %s", source.name)
                return None
            if not session.service_ready or self._probe.service is None:
                raise ServiceUnavailableError("AI service not loaded. Please refresh and try again.")

            self._dispatcher.bind_service(self._probe.service)
            self._machine.begin_dispatch(payload)
            raw = await self._dispatcher.dispatch(payload, session)

            result = self._normalizer.normalize(raw, kind)
            verdict = classify_sentiment(result.overall)
        except AnalysisError as e:
            if self._superseded(generation):
                logger.info("[pipeline] Dropping failure for replaced selection %s: %s", source.name, e)
                return None
            self._machine.fail(e)
            raise
        except Exception as e:
            if self._superseded(generation):
                logger.info("[pipeline] Dropping failure for replaced selection %s: %s", source.name, e)
                return None
            message = str(e) or e.__class__.__name__
            mapped = error_for_category(classify_failure_text(message), message)
            logger.exception("[pipeline] Unexpected failure during analysis (%s)", mapped.kind.value)
            self._machine.fail(mapped)
            raise mapped from e

        self._machine.succeed(result, verdict)
        logger.info("[pipeline] Analysis complete (%s, %s)", result.variant, verdict.value)
        return result

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    async def sign_in(self) -> Optional[bool]:
        return await self._probe.sign_in()

    def refresh_service(self) -> None:
        """Manual refresh after the readiness probe gave up."""
        self._probe.refresh()


def create_pipeline(
    settings: Optional[Settings] = None,
    client_loader: Optional[ClientLoader] = None,
    auth: Optional[AuthService] = None,
) -> AnalysisPipeline:
    """Wire a pipeline against the OpenAI-backed services unless overridden."""
    settings = settings or get_settings()
    loader = client_loader or (lambda: load_openai_service(settings))
    probe = ReadinessProbe(loader, auth or EnvKeyAuthService(), grace_seconds=settings.ready_grace_seconds)
    dispatcher = AnalysisDispatcher(service=None, model=settings.model)
    return AnalysisPipeline(probe, dispatcher)


__all__ = ["AnalysisPipeline", "create_pipeline"]
