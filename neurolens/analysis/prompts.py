# FILE: neurolens/analysis/prompts.py
"""
Prompt templates for neurodiversity-friendliness analysis.

Each content kind has a fixed key set that the model is asked to return as a
JSON object. The last key of each set is the "overall" verdict and doubles as
the discriminant when decoding the reply:

IMAGE (7 keys): colorContrast, visualComplexity, patternDensity,
    textLegibility, sensoryLoad, layoutPredictability, overallSuitability
TEXT (6 keys): readability, clarity, potentialForMisinterpretation,
    structure, literalLanguage, overallAssessment

The image itself never appears in the prompt text; its data URI travels
alongside as content_ref.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from neurolens.content.classifier import ContentKind
from neurolens.content.ingestor import ContentPayload

IMAGE_RESULT_KEYS: Tuple[str, ...] = (
    "colorContrast",
    "visualComplexity",
    "patternDensity",
    "textLegibility",
    "sensoryLoad",
    "layoutPredictability",
    "overallSuitability",
)

TEXT_RESULT_KEYS: Tuple[str, ...] = (
    "readability",
    "clarity",
    "potentialForMisinterpretation",
    "structure",
    "literalLanguage",
    "overallAssessment",
)

IMAGE_DISCRIMINANT = "overallSuitability"
TEXT_DISCRIMINANT = "overallAssessment"

RESULT_KEYS: Dict[ContentKind, Tuple[str, ...]] = {
    ContentKind.IMAGE: IMAGE_RESULT_KEYS,
    ContentKind.TEXT: TEXT_RESULT_KEYS,
}

DISCRIMINANTS: Dict[ContentKind, str] = {
    ContentKind.IMAGE: IMAGE_DISCRIMINANT,
    ContentKind.TEXT: TEXT_DISCRIMINANT,
}

_IMAGE_KEY_HINTS = {
    "colorContrast": "are foreground/background colours distinguishable; any low-contrast areas",
    "visualComplexity": "amount of visual detail competing for attention",
    "patternDensity": "repetitive or high-frequency patterns that may cause discomfort",
    "textLegibility": "size, font and placement of any text in the image",
    "sensoryLoad": "brightness, saturation and overall sensory intensity",
    "layoutPredictability": "how clear and predictable the layout and focal points are",
    "overallSuitability": "overall assessment of suitability for neurodivergent viewers",
}

_TEXT_KEY_HINTS = {
    "readability": "sentence length, vocabulary and reading level",
    "clarity": "how directly the main points are expressed",
    "potentialForMisinterpretation": "idioms, sarcasm, implied meaning or ambiguity",
    "structure": "headings, lists, paragraphing and logical order",
    "literalLanguage": "reliance on figurative versus literal phrasing",
    "overallAssessment": "overall assessment of neurodiversity friendliness",
}

IMAGE_PROMPT_TEMPLATE = (
    "Analyze this image for neurodiversity-friendliness, considering aspects like color contrast, "
    "visual complexity, and pattern density. Provide a detailed assessment of its suitability for "
    "individuals with neurodevelopmental conditions. Be specific about the elements that may pose "
    "challenges or be beneficial.\n\n"
    "Respond ONLY with a JSON object with exactly these string fields:\n"
    "{schema}"
)

TEXT_PROMPT_TEMPLATE = (
    "Analyze the following text for neurodiversity-friendliness, considering readability, clarity, "
    "and potential for misinterpretation. Provide an overall assessment.\n\n"
    "Respond ONLY with a JSON object with exactly these string fields:\n"
    "{schema}\n\n"
    "Text: {text}"
)


def _schema_block(hints: Dict[str, str]) -> str:
    return json.dumps(hints, indent=2)


@dataclass(frozen=True)
class AnalysisPrompt:
    kind: ContentKind
    text: str
    content_ref: Optional[str] = None

    @property
    def expected_keys(self) -> Tuple[str, ...]:
        return RESULT_KEYS[self.kind]

    @property
    def discriminant(self) -> str:
        return DISCRIMINANTS[self.kind]


def build_prompt(payload: ContentPayload) -> AnalysisPrompt:
    """
    Build the kind-specific prompt for a payload.

    Raises:
        ValueError: payload kind is not IMAGE or TEXT
    """
    if payload.kind == ContentKind.IMAGE:
        text = IMAGE_PROMPT_TEMPLATE.format(schema=_schema_block(_IMAGE_KEY_HINTS))
        return AnalysisPrompt(ContentKind.IMAGE, text, content_ref=payload.data)
    if payload.kind == ContentKind.TEXT:
        # replace() rather than format(): user text may contain braces
        text = TEXT_PROMPT_TEMPLATE.replace("{schema}", _schema_block(_TEXT_KEY_HINTS))
        text = text.replace("{text}", payload.data)
        return AnalysisPrompt(ContentKind.TEXT, text)
    raise ValueError(f"No prompt for content kind {payload.kind.value}")


__all__ = [
    "AnalysisPrompt",
    "build_prompt",
    "IMAGE_RESULT_KEYS",
    "TEXT_RESULT_KEYS",
    "IMAGE_DISCRIMINANT",
    "TEXT_DISCRIMINANT",
    "RESULT_KEYS",
    "DISCRIMINANTS",
]
