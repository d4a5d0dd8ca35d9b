# FILE: neurolens/analysis/results.py
"""
Normalized analysis results.

NormalizedResult is a tagged union; exactly one variant is produced per
successful request:
- StructuredImageResult: the 7 image fields, all strings
- StructuredTextResult: the 6 text fields, all strings
- PlainTextResult: the cleaned reply text, when the structured decode missed

Field names are snake_case; the camelCase keys the model is asked for are
accepted as aliases and used again by to_wire().
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class _StructuredResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"variant"})


class StructuredImageResult(_StructuredResult):
    variant: Literal["image"] = "image"
    color_contrast: StrictStr = Field(alias="colorContrast")
    visual_complexity: StrictStr = Field(alias="visualComplexity")
    pattern_density: StrictStr = Field(alias="patternDensity")
    text_legibility: StrictStr = Field(alias="textLegibility")
    sensory_load: StrictStr = Field(alias="sensoryLoad")
    layout_predictability: StrictStr = Field(alias="layoutPredictability")
    overall_suitability: StrictStr = Field(alias="overallSuitability")

    @property
    def overall(self) -> str:
        return self.overall_suitability


class StructuredTextResult(_StructuredResult):
    variant: Literal["text"] = "text"
    readability: StrictStr
    clarity: StrictStr
    potential_for_misinterpretation: StrictStr = Field(alias="potentialForMisinterpretation")
    structure: StrictStr
    literal_language: StrictStr = Field(alias="literalLanguage")
    overall_assessment: StrictStr = Field(alias="overallAssessment")

    @property
    def overall(self) -> str:
        return self.overall_assessment


class PlainTextResult(BaseModel):
    """Degraded result: the reply was usable text but not the requested JSON."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    variant: Literal["plain"] = "plain"
    analysis_result: str = Field(alias="analysisResult")

    @property
    def overall(self) -> str:
        return self.analysis_result

    def to_wire(self) -> dict:
        return {"analysisResult": self.analysis_result}


NormalizedResult = Union[StructuredImageResult, StructuredTextResult, PlainTextResult]


def is_structured(result: NormalizedResult) -> bool:
    return not isinstance(result, PlainTextResult)


__all__ = [
    "StructuredImageResult",
    "StructuredTextResult",
    "PlainTextResult",
    "NormalizedResult",
    "is_structured",
]
