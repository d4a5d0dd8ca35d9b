# FILE: neurolens/__init__.py
"""
NeuroLens: neurodiversity-friendliness analysis of images and text.

Usage:
    from neurolens import ContentSource, create_pipeline

    pipeline = create_pipeline()
    pipeline.select_text("Please read the attached notes before Monday.")
    result = await pipeline.analyze()
    print(result.overall, pipeline.verdict)
"""

from neurolens.config import Settings, get_settings
from neurolens.errors import (
    AnalysisError,
    FailureKind,
    FailureNotice,
    PipelineBusyError,
    PipelineError,
    describe_failure,
)
from neurolens.content import ContentKind, ContentPayload, ContentSource
from neurolens.analysis import (
    NormalizedResult,
    PlainTextResult,
    SentimentVerdict,
    StructuredImageResult,
    StructuredTextResult,
)
from neurolens.pipeline import AnalysisPipeline, PipelinePhase, PipelineSnapshot, create_pipeline

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "get_settings",
    "AnalysisError",
    "FailureKind",
    "FailureNotice",
    "PipelineBusyError",
    "PipelineError",
    "describe_failure",
    "ContentKind",
    "ContentPayload",
    "ContentSource",
    "NormalizedResult",
    "PlainTextResult",
    "SentimentVerdict",
    "StructuredImageResult",
    "StructuredTextResult",
    "AnalysisPipeline",
    "PipelinePhase",
    "PipelineSnapshot",
    "create_pipeline",
]
