# FILE: neurolens/analysis/sentiment.py
"""
Keyword verdict on the overall assessment string.

Negative findings take precedence: any negative keyword makes the verdict
NOT_FRIENDLY even if positive keywords are present. Plain substring matching
on lower-cased text, so "unclear" counts as "clear". This only drives a
UI badge and never gates the pipeline.
"""

from enum import Enum
from typing import Optional, Tuple

POSITIVE_KEYWORDS: Tuple[str, ...] = (
    "friendly", "suitable", "accessible", "clear", "good contrast", "well-structured",
)

NEGATIVE_KEYWORDS: Tuple[str, ...] = (
    "challenging", "overwhelming", "low contrast", "complex", "ambiguous",
    "difficult", "confusing", "visually cluttered",
)


class SentimentVerdict(str, Enum):
    FRIENDLY = "friendly"
    NOT_FRIENDLY = "not_friendly"
    NEUTRAL = "neutral"


def classify_sentiment(text: Optional[str]) -> SentimentVerdict:
    if not text:
        return SentimentVerdict.NEUTRAL
    lowered = text.lower()
    if any(kw in lowered for kw in NEGATIVE_KEYWORDS):
        return SentimentVerdict.NOT_FRIENDLY
    if any(kw in lowered for kw in POSITIVE_KEYWORDS):
        return SentimentVerdict.FRIENDLY
    return SentimentVerdict.NEUTRAL


__all__ = [
    "SentimentVerdict",
    "classify_sentiment",
    "POSITIVE_KEYWORDS",
    "NEGATIVE_KEYWORDS",
]
