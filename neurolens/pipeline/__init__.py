# FILE: neurolens/pipeline/__init__.py
"""Lifecycle state and orchestration."""

from neurolens.pipeline.state import (
    PipelinePhase,
    PipelineSnapshot,
    PipelineStateMachine,
)
from neurolens.pipeline.orchestrator import AnalysisPipeline, create_pipeline

__all__ = [
    "PipelinePhase",
    "PipelineSnapshot",
    "PipelineStateMachine",
    "AnalysisPipeline",
    "create_pipeline",
]
