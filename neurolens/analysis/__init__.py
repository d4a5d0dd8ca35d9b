# FILE: neurolens/analysis/__init__.py
"""Prompting, dispatch and reply normalization."""

from neurolens.analysis.prompts import AnalysisPrompt, build_prompt
from neurolens.analysis.results import (
    StructuredImageResult,
    StructuredTextResult,
    PlainTextResult,
    NormalizedResult,
)
from neurolens.analysis.normalizer import ResponseNormalizer
from neurolens.analysis.sentiment import SentimentVerdict, classify_sentiment
from neurolens.analysis.dispatcher import AnalysisDispatcher

__all__ = [
    "AnalysisPrompt",
    "build_prompt",
    "StructuredImageResult",
    "StructuredTextResult",
    "PlainTextResult",
    "NormalizedResult",
    "ResponseNormalizer",
    "SentimentVerdict",
    "classify_sentiment",
    "AnalysisDispatcher",
]
