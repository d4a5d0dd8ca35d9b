# FILE: neurolens/content/__init__.py
"""Selection classification and ingestion."""

from neurolens.content.classifier import (
    ContentKind,
    ContentSource,
    classify_file,
    classify_text,
    classify_source,
)
from neurolens.content.ingestor import (
    ContentPayload,
    ContentIngestor,
)

__all__ = [
    "ContentKind",
    "ContentSource",
    "classify_file",
    "classify_text",
    "classify_source",
    "ContentPayload",
    "ContentIngestor",
]
