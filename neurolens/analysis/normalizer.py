# FILE: neurolens/analysis/normalizer.py
"""
Response normalization: raw service reply → NormalizedResult.

The chat service's reply shape is not guaranteed. ALL shape probing happens
in extract_response_text(), in this fixed order:

1. reply.message.content is a string        → that text
2. reply.text is a string                   → that text
3. reply is itself a string                 → the reply
4. reply.error is a string (or carries one) → ServiceError
5. reply.message is a string mentioning an
   error                                    → ServiceError
otherwise                                   → EmptyResponseError

Then:
- strip_code_fence(): drop a ```json ... ``` wrapper if present
- decode_structured(): JSON object with the kind's discriminant and every
  other key as strings → structured variant, else MalformedResponseError

normalize() absorbs MalformedResponseError and degrades to PlainTextResult.
It never hands back a half-filled structured result.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import ValidationError

from neurolens.analysis.prompts import DISCRIMINANTS, RESULT_KEYS
from neurolens.analysis.results import (
    NormalizedResult,
    PlainTextResult,
    StructuredImageResult,
    StructuredTextResult,
)
from neurolens.content.classifier import ContentKind
from neurolens.errors import EmptyResponseError, MalformedResponseError, ServiceError

logger = logging.getLogger(__name__)

ERROR_INDICATORS = ("error",)

_FENCE_RE = re.compile(r"^```[\w+-]*[ \t]*\r?\n?(?P<body>[\s\S]*?)\r?\n?```\s*$")

_MODELS = {
    ContentKind.IMAGE: StructuredImageResult,
    ContentKind.TEXT: StructuredTextResult,
}


# =============================================================================
# STEP 1: TEXT EXTRACTION
# =============================================================================

def _field(obj: Any, name: str) -> Any:
    """Read a field from a mapping or an attribute-style object."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    if isinstance(obj, (str, bytes, int, float, bool, list, tuple)):
        return None
    return getattr(obj, name, None)


def _is_empty(raw: Any) -> bool:
    if raw is None:
        return True
    if isinstance(raw, (str, bytes, Mapping, list, tuple)):
        return len(raw) == 0
    return False


def _dump(raw: Any) -> str:
    try:
        return json.dumps(raw, default=str)[:500]
    except (TypeError, ValueError):
        return repr(raw)[:500]


def _error_text(raw: Any) -> Optional[str]:
    error = _field(raw, "error")
    if isinstance(error, str) and error.strip():
        return error.strip()
    nested = _field(error, "message")
    if isinstance(nested, str) and nested.strip():
        return nested.strip()
    return None


def extract_response_text(raw: Any) -> str:
    """
    Pull the reply text out of a raw service response.

    Raises:
        ServiceError: the reply carries an explicit error
        EmptyResponseError: nothing usable in the reply
    """
    message = _field(raw, "message")

    content = _field(message, "content")
    if isinstance(content, str):
        text = content
    elif isinstance(_field(raw, "text"), str):
        text = _field(raw, "text")
    elif isinstance(raw, str):
        text = raw
    else:
        error = _error_text(raw)
        if error:
            raise ServiceError(error)
        if isinstance(message, str) and any(kw in message.lower() for kw in ERROR_INDICATORS):
            raise ServiceError(message.strip())
        if _is_empty(raw):
            raise EmptyResponseError("Analysis returned an empty result.")
        raise EmptyResponseError(f"Analysis returned an unexpected result: {_dump(raw)}")

    if not text.strip():
        raise EmptyResponseError("Analysis returned an empty result.")
    return text


# =============================================================================
# STEP 2: FENCE STRIPPING
# =============================================================================

def strip_code_fence(text: str) -> str:
    """Remove a wrapping ``` / ```json fence. Unwrapped text is returned stripped."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match:
        return match.group("body").strip()
    return stripped


# =============================================================================
# STEP 3: SCHEMA DECODE
# =============================================================================

def decode_structured(text: str, kind: ContentKind) -> NormalizedResult:
    """
    Decode cleaned text as the kind's structured result.

    Raises:
        MalformedResponseError: not JSON, not an object, wrong/missing keys,
            non-string values, or a kind with no schema
    """
    model = _MODELS.get(kind)
    if model is None:
        raise MalformedResponseError(f"No result schema for kind {getattr(kind, 'value', kind)}")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Reply is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedResponseError(f"Reply JSON is a {type(data).__name__}, not an object")

    discriminant = DISCRIMINANTS[kind]
    if not isinstance(data.get(discriminant), str):
        raise MalformedResponseError(f"Reply JSON has no string '{discriminant}' field")

    fields = {key: data.get(key) for key in RESULT_KEYS[kind]}
    try:
        return model.model_validate(fields)
    except ValidationError as e:
        raise MalformedResponseError(f"Reply JSON does not match the {kind.value} schema: {e}") from e


# =============================================================================
# NORMALIZER
# =============================================================================

class ResponseNormalizer:
    """Reconciles a raw reply into exactly one NormalizedResult."""

    def normalize(self, raw: Any, kind: ContentKind) -> NormalizedResult:
        text = extract_response_text(raw)
        cleaned = strip_code_fence(text)
        if not cleaned:
            raise EmptyResponseError("Analysis returned an empty result.")

        try:
            result = decode_structured(cleaned, kind)
        except MalformedResponseError as e:
            logger.warning("[normalizer] Structured decode failed, using plain text: %s", e)
            return PlainTextResult(analysis_result=cleaned)

        logger.info("[normalizer] Structured %s result decoded", result.variant)
        return result


__all__ = [
    "ResponseNormalizer",
    "extract_response_text",
    "strip_code_fence",
    "decode_structured",
    "ERROR_INDICATORS",
]
