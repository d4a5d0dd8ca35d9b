# FILE: tests/test_sentiment.py
"""
Tests for neurolens/analysis/sentiment.py
Keyword verdict; negatives win.
"""

import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest

from neurolens.analysis.sentiment import SentimentVerdict, classify_sentiment


class TestClassifySentiment:
    """Substring keyword matching."""

    def test_negative_wins(self):
        """Both kinds of keyword present: not friendly."""
        text = "Friendly overall, but some sections are challenging."
        assert classify_sentiment(text) == SentimentVerdict.NOT_FRIENDLY

    @pytest.mark.parametrize("text", [
        "This layout is suitable.",
        "Very accessible writing.",
        "GOOD CONTRAST throughout.",
        "Well-structured and calm.",
    ])
    def test_positive(self, text):
        """Positive keywords alone, any case."""
        assert classify_sentiment(text) == SentimentVerdict.FRIENDLY

    @pytest.mark.parametrize("text", [
        "Visually cluttered background.",
        "Low contrast captions.",
        "The phrasing is ambiguous.",
    ])
    def test_negative(self, text):
        """Negative keywords alone."""
        assert classify_sentiment(text) == SentimentVerdict.NOT_FRIENDLY

    @pytest.mark.parametrize("text", ["", None, "A photo of a cat."])
    def test_neutral(self, text):
        """No keyword or no text."""
        assert classify_sentiment(text) == SentimentVerdict.NEUTRAL

    def test_substring_match(self):
        """Matching is by substring, so 'unclear' reads as 'clear'."""
        assert classify_sentiment("The instructions are unclear.") == SentimentVerdict.FRIENDLY
