# FILE: neurolens/errors.py
"""
Failure taxonomy for the analysis pipeline.

Two families:
- AnalysisError: something went wrong with *this* request. The pipeline moves
  to FAILED and the error is attached to the snapshot.
- PipelineError: the caller asked for something the pipeline cannot do right
  now (busy, illegal transition). No state changes.

MalformedResponseError is part of the taxonomy but never escapes the
normalizer; it degrades to a plain-text result.

User-facing phrasing is picked by keyword-matching the error text into
auth / network / model / generic buckets. Best-effort only.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class FailureKind(str, Enum):
    UNSUPPORTED_CONTENT_TYPE = "unsupported_content_type"
    READ_FAILURE = "read_failure"
    SERVICE_UNAVAILABLE = "service_unavailable"
    AUTH_REQUIRED = "auth_required"
    NETWORK_FAILURE = "network_failure"
    MODEL_FAILURE = "model_failure"
    SERVICE_ERROR = "service_error"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_RESPONSE = "malformed_response"


class FailureCategory(str, Enum):
    """Keyword bucket used for user-facing phrasing."""
    AUTH = "auth"
    NETWORK = "network"
    MODEL = "model"
    GENERIC = "generic"


# =============================================================================
# EXCEPTIONS
# =============================================================================

class AnalysisError(Exception):
    """Base class for request failures."""
    kind: FailureKind = FailureKind.SERVICE_ERROR


class UnsupportedContentTypeError(AnalysisError):
    kind = FailureKind.UNSUPPORTED_CONTENT_TYPE

    def __init__(self, message: str, mime_type: Optional[str] = None, filename: Optional[str] = None):
        super().__init__(message)
        self.mime_type = mime_type
        self.filename = filename


class ReadFailureError(AnalysisError):
    """The selected content could not be decoded."""
    kind = FailureKind.READ_FAILURE


class ServiceUnavailableError(AnalysisError):
    """The AI client never loaded."""
    kind = FailureKind.SERVICE_UNAVAILABLE


class AuthRequiredError(AnalysisError):
    kind = FailureKind.AUTH_REQUIRED


class NetworkFailureError(AnalysisError):
    kind = FailureKind.NETWORK_FAILURE


class ModelFailureError(AnalysisError):
    kind = FailureKind.MODEL_FAILURE


class ServiceError(AnalysisError):
    """The service replied with an explicit error."""
    kind = FailureKind.SERVICE_ERROR


class EmptyResponseError(AnalysisError):
    kind = FailureKind.EMPTY_RESPONSE


class MalformedResponseError(AnalysisError):
    """Reply text did not match the requested schema."""
    kind = FailureKind.MALFORMED_RESPONSE


class PipelineError(Exception):
    """Base class for pipeline control errors."""


class PipelineBusyError(PipelineError):
    """An analysis request is already outstanding."""


class InvalidTransitionError(PipelineError):
    pass


# =============================================================================
# KEYWORD CLASSIFICATION
# =============================================================================

AUTH_KEYWORDS: Tuple[str, ...] = (
    "auth", "sign in", "sign-in", "signin", "log in", "login", "logged in",
    "unauthorized", "forbidden", "permission", "api key", "401", "403",
)

NETWORK_KEYWORDS: Tuple[str, ...] = (
    "network", "fetch", "connection", "connect", "timeout", "timed out",
    "unreachable", "offline", "socket", "dns",
)

MODEL_KEYWORDS: Tuple[str, ...] = (
    "model", "quota", "rate limit", "rate_limit", "429", "overloaded",
    "context length", "content policy",
)


def classify_failure_text(text: Optional[str]) -> FailureCategory:
    """
    Bucket an error string by keyword.

    Checked in order auth, network, model; the first bucket with a hit wins.
    """
    if not text:
        return FailureCategory.GENERIC
    lowered = text.lower()
    if any(kw in lowered for kw in AUTH_KEYWORDS):
        return FailureCategory.AUTH
    if any(kw in lowered for kw in NETWORK_KEYWORDS):
        return FailureCategory.NETWORK
    if any(kw in lowered for kw in MODEL_KEYWORDS):
        return FailureCategory.MODEL
    return FailureCategory.GENERIC


def error_for_category(category: FailureCategory, message: str) -> AnalysisError:
    """Wrap a foreign exception message in the matching AnalysisError."""
    if category == FailureCategory.AUTH:
        return AuthRequiredError(message)
    if category == FailureCategory.MODEL:
        return ModelFailureError(message)
    return NetworkFailureError(message)


# =============================================================================
# USER-FACING NOTICES
# =============================================================================

@dataclass(frozen=True)
class FailureNotice:
    title: str
    message: str
    detail: str = ""


_CATEGORY_NOTICES = {
    FailureCategory.AUTH: (
        "Sign-in Required",
        "Please sign in to the AI service and try again.",
    ),
    FailureCategory.NETWORK: (
        "Network Error",
        "Could not reach the AI service. Check your connection and try again.",
    ),
    FailureCategory.MODEL: (
        "Model Error",
        "The AI model could not complete the analysis. Please try again later.",
    ),
    FailureCategory.GENERIC: (
        "Analysis Failed",
        "An unknown error occurred during analysis. Please ensure you are signed in and try again.",
    ),
}

_KIND_CATEGORY = {
    FailureKind.AUTH_REQUIRED: FailureCategory.AUTH,
    FailureKind.NETWORK_FAILURE: FailureCategory.NETWORK,
    FailureKind.MODEL_FAILURE: FailureCategory.MODEL,
}


def describe_failure(error: BaseException) -> FailureNotice:
    """Pick a title and message to show the user for a failure."""
    detail = str(error)

    if isinstance(error, UnsupportedContentTypeError):
        shown = error.mime_type or "unknown"
        return FailureNotice(
            "Unsupported File Type",
            f'File type "{shown}" is not supported. Please upload a standard image or text document.',
            detail,
        )
    if isinstance(error, ReadFailureError):
        return FailureNotice("File Read Error", "Could not read the selected content.", detail)
    if isinstance(error, ServiceUnavailableError):
        return FailureNotice(
            "Service Unavailable",
            "The AI service is not loaded. Please refresh the page and try again.",
            detail,
        )
    if isinstance(error, EmptyResponseError):
        return FailureNotice(
            "Analysis Failed",
            "Analysis returned an unexpected or empty result.",
            detail,
        )

    if isinstance(error, AnalysisError) and error.kind in _KIND_CATEGORY:
        category = _KIND_CATEGORY[error.kind]
    else:
        # ServiceError and foreign exceptions: go by the text
        category = classify_failure_text(detail)

    title, message = _CATEGORY_NOTICES[category]
    return FailureNotice(title, message, detail)


__all__ = [
    "FailureKind",
    "FailureCategory",
    "AnalysisError",
    "UnsupportedContentTypeError",
    "ReadFailureError",
    "ServiceUnavailableError",
    "AuthRequiredError",
    "NetworkFailureError",
    "ModelFailureError",
    "ServiceError",
    "EmptyResponseError",
    "MalformedResponseError",
    "PipelineError",
    "PipelineBusyError",
    "InvalidTransitionError",
    "classify_failure_text",
    "error_for_category",
    "FailureNotice",
    "describe_failure",
]
