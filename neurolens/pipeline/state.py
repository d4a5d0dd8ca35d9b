# FILE: neurolens/pipeline/state.py
"""
Pipeline lifecycle state.

Phases:
    IDLE → SELECTING → READING → DISPATCHING → SUCCESS | FAILED

- SUCCESS and FAILED go back to IDLE (retry) or SELECTING (new selection)
  on the next user action
- A new selection from any phase except DISPATCHING drops the held payload,
  result and error and lands in SELECTING
- DISPATCHING is entered only from READING, and only one request may be
  outstanding; anything that would disturb it raises PipelineBusyError
- Failures land in FAILED with the error attached; they never fall back to
  IDLE silently

The machine is the only owner of the phase, the selection, the payload and
the result. Transition methods are the only way to change them.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional

from neurolens.analysis.results import NormalizedResult
from neurolens.analysis.sentiment import SentimentVerdict
from neurolens.content.classifier import ContentKind, ContentSource
from neurolens.content.ingestor import READ_PROGRESS_SPAN, ContentPayload
from neurolens.errors import AnalysisError, InvalidTransitionError, PipelineBusyError

logger = logging.getLogger(__name__)


class PipelinePhase(str, Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    READING = "reading"
    DISPATCHING = "dispatching"
    SUCCESS = "success"
    FAILED = "failed"


ALLOWED_TRANSITIONS: Dict[PipelinePhase, FrozenSet[PipelinePhase]] = {
    PipelinePhase.IDLE: frozenset({PipelinePhase.SELECTING, PipelinePhase.READING}),
    PipelinePhase.SELECTING: frozenset({
        PipelinePhase.SELECTING, PipelinePhase.READING, PipelinePhase.FAILED, PipelinePhase.IDLE,
    }),
    PipelinePhase.READING: frozenset({
        PipelinePhase.DISPATCHING, PipelinePhase.FAILED, PipelinePhase.SELECTING, PipelinePhase.IDLE,
    }),
    PipelinePhase.DISPATCHING: frozenset({PipelinePhase.SUCCESS, PipelinePhase.FAILED}),
    PipelinePhase.SUCCESS: frozenset({PipelinePhase.IDLE, PipelinePhase.SELECTING}),
    PipelinePhase.FAILED: frozenset({PipelinePhase.IDLE, PipelinePhase.SELECTING}),
}

COMPLETE_PROGRESS = 100


@dataclass(frozen=True)
class PipelineSnapshot:
    """Read-only view handed to observers."""
    phase: PipelinePhase
    kind: Optional[ContentKind] = None
    source_name: Optional[str] = None
    result: Optional[NormalizedResult] = None
    verdict: Optional[SentimentVerdict] = None
    error: Optional[AnalysisError] = None
    progress: Optional[int] = None

    @property
    def busy(self) -> bool:
        """True while the analyze action should be disabled."""
        return self.phase in (PipelinePhase.READING, PipelinePhase.DISPATCHING)


Listener = Callable[[PipelineSnapshot], None]


class PipelineStateMachine:
    def __init__(self):
        self._phase = PipelinePhase.IDLE
        self._source: Optional[ContentSource] = None
        self._kind: Optional[ContentKind] = None
        self._payload: Optional[ContentPayload] = None
        self._result: Optional[NormalizedResult] = None
        self._verdict: Optional[SentimentVerdict] = None
        self._error: Optional[AnalysisError] = None
        self._progress: Optional[int] = None
        self._generation = 0
        self._listeners: List[Listener] = []

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def phase(self) -> PipelinePhase:
        return self._phase

    @property
    def source(self) -> Optional[ContentSource]:
        return self._source

    @property
    def kind(self) -> Optional[ContentKind]:
        return self._kind

    @property
    def payload(self) -> Optional[ContentPayload]:
        return self._payload

    @property
    def result(self) -> Optional[NormalizedResult]:
        return self._result

    @property
    def verdict(self) -> Optional[SentimentVerdict]:
        return self._verdict

    @property
    def error(self) -> Optional[AnalysisError]:
        return self._error

    @property
    def progress(self) -> Optional[int]:
        return self._progress

    @property
    def generation(self) -> int:
        """Bumped on every new selection or reset."""
        return self._generation

    @property
    def dispatching(self) -> bool:
        return self._phase == PipelinePhase.DISPATCHING

    def snapshot(self) -> PipelineSnapshot:
        return PipelineSnapshot(
            phase=self._phase,
            kind=self._kind,
            source_name=self._source.name if self._source else None,
            result=self._result,
            verdict=self._verdict,
            error=self._error,
            progress=self._progress,
        )

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("[pipeline] State listener failed")

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def _transition(self, target: PipelinePhase) -> None:
        if target not in ALLOWED_TRANSITIONS[self._phase]:
            raise InvalidTransitionError(f"Cannot go from {self._phase.value} to {target.value}")
        logger.info("[pipeline] %s → %s", self._phase.value, target.value)
        self._phase = target

    def _clear_outcome(self) -> None:
        self._payload = None
        self._result = None
        self._verdict = None
        self._error = None
        self._progress = None

    def select(self, source: ContentSource, kind: ContentKind) -> None:
        """New selection: drop everything held and enter SELECTING."""
        if self.dispatching:
            raise PipelineBusyError("Cannot change the selection while an analysis is in progress")
        self._transition(PipelinePhase.SELECTING)
        self._clear_outcome()
        self._source = source
        self._kind = kind
        self._generation += 1
        self._notify()

    def begin_reading(self) -> int:
        """
        Start a request for the held selection.

        Returns:
            The selection generation the request belongs to
        """
        if self._phase in (PipelinePhase.READING, PipelinePhase.DISPATCHING):
            raise PipelineBusyError("An analysis request is already in progress")
        if self._source is None or self._kind in (None, ContentKind.UNSUPPORTED):
            raise InvalidTransitionError("Nothing selected to analyze")
        if self._phase in (PipelinePhase.SUCCESS, PipelinePhase.FAILED):
            self._transition(PipelinePhase.IDLE)
        self._transition(PipelinePhase.READING)
        self._clear_outcome()
        self._progress = 0
        self._notify()
        return self._generation

    def begin_dispatch(self, payload: ContentPayload) -> None:
        if self.dispatching:
            raise PipelineBusyError("An analysis request is already in progress")
        if self._phase != PipelinePhase.READING:
            raise InvalidTransitionError(f"Cannot dispatch from {self._phase.value}")
        self._transition(PipelinePhase.DISPATCHING)
        self._payload = payload
        self._progress = READ_PROGRESS_SPAN
        self._notify()

    def succeed(self, result: NormalizedResult, verdict: SentimentVerdict) -> None:
        self._transition(PipelinePhase.SUCCESS)
        self._payload = None
        self._result = result
        self._verdict = verdict
        self._error = None
        self._progress = COMPLETE_PROGRESS
        self._notify()

    def fail(self, error: AnalysisError) -> None:
        self._transition(PipelinePhase.FAILED)
        self._clear_outcome()
        self._error = error
        logger.warning("[pipeline] Failed (%s): %s", error.kind.value, error)
        self._notify()

    def set_progress(self, percent: int) -> None:
        self._progress = max(0, min(COMPLETE_PROGRESS, int(percent)))
        self._notify()

    def reset(self) -> None:
        """Back to IDLE with nothing selected."""
        if self.dispatching:
            raise PipelineBusyError("Cannot reset while an analysis is in progress")
        if self._phase != PipelinePhase.IDLE:
            self._transition(PipelinePhase.IDLE)
        self._clear_outcome()
        self._source = None
        self._kind = None
        self._generation += 1
        self._notify()


__all__ = [
    "PipelinePhase",
    "PipelineSnapshot",
    "PipelineStateMachine",
    "ALLOWED_TRANSITIONS",
    "COMPLETE_PROGRESS",
]
