# FILE: neurolens/content/classifier.py
"""
Content classification for analysis requests.

Maps a selected file (name + declared MIME type) or a pasted string into
exactly ONE content kind:
- IMAGE: anything the host reports as image/*, plus an explicit allow-list
  for edge formats (SVG)
- TEXT: plain text and documents, by MIME allow-list or by extension
- UNSUPPORTED: everything else

Host-reported MIME types for documents are unreliable (often empty or
application/octet-stream), so the extension is consulted as a fallback.
Image wins when a file could match both.

Usage:
    from neurolens.content.classifier import classify_source, ContentSource

    source = ContentSource.from_path("notes.md")
    kind = classify_source(source)
"""

import logging
import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class ContentKind(str, Enum):
    IMAGE = "image"
    TEXT = "text"
    UNSUPPORTED = "unsupported"


# =============================================================================
# ACCEPTED TYPES
# =============================================================================

ACCEPTED_IMAGE_TYPES = frozenset({
    "image/png", "image/jpeg", "image/jpg", "image/webp",
    "image/gif", "image/bmp", "image/svg+xml",
})

ACCEPTED_TEXT_TYPES = frozenset({
    "text/plain",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/markdown",
    "text/html",
    "application/rtf",
    "text/csv",
})

TEXT_EXTENSIONS = frozenset({
    ".txt", ".md", ".markdown", ".pdf", ".doc", ".docx",
    ".html", ".htm", ".rtf", ".csv",
})

PASTED_TEXT_NAME = "pasted_text.txt"


# =============================================================================
# CONTENT SOURCE
# =============================================================================

@dataclass
class ContentSource:
    """
    A selection handed over by the host: file picker, drag-and-drop or paste.

    The bytes are whatever the host read; nothing here touches the
    filesystem except from_path.
    """
    name: str
    mime_type: str = ""
    data: bytes = b""
    size_bytes: int = 0
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        if not self.size_bytes:
            self.size_bytes = len(self.data)

    @property
    def extension(self) -> str:
        return Path(self.name).suffix.lower() if self.name else ""

    @classmethod
    def from_bytes(cls, name: str, data: bytes, mime_type: Optional[str] = None) -> "ContentSource":
        return cls(name=name, mime_type=mime_type or "", data=data)

    @classmethod
    def from_path(cls, path: Union[str, Path], mime_type: Optional[str] = None) -> "ContentSource":
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"File not found: {p}")
        if mime_type is None:
            mime_type, _ = mimetypes.guess_type(p.name)
        return cls(name=p.name, mime_type=mime_type or "", data=p.read_bytes())

    @classmethod
    def from_text(cls, text: str) -> "ContentSource":
        """Wrap pasted text the way the host does: a small text/plain file."""
        return cls(
            name=PASTED_TEXT_NAME,
            mime_type="text/plain",
            data=text.encode("utf-8"),
            metadata={"pasted": True},
        )


# =============================================================================
# CLASSIFICATION
# =============================================================================

def base_mime_type(mime_type: Optional[str]) -> str:
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().lower()


def is_image_type(mime_type: Optional[str]) -> bool:
    mime = base_mime_type(mime_type)
    if not mime:
        return False
    return mime.startswith("image/") or mime in ACCEPTED_IMAGE_TYPES


def is_text_type(mime_type: Optional[str], filename: Optional[str] = None) -> bool:
    if base_mime_type(mime_type) in ACCEPTED_TEXT_TYPES:
        return True
    ext = Path(filename).suffix.lower() if filename else ""
    return ext in TEXT_EXTENSIONS


def classify_file(filename: str, mime_type: Optional[str] = None, size_bytes: int = 0) -> ContentKind:
    """
    Classify a selected file.

    Args:
        filename: Original filename
        mime_type: MIME type as reported by the host (may be empty)
        size_bytes: File size, logged only

    Returns:
        ContentKind; UNSUPPORTED is a result, not an error
    """
    if is_image_type(mime_type):
        logger.debug(f"[classifier] {filename} → image (mime={mime_type})")
        return ContentKind.IMAGE

    if is_text_type(mime_type, filename):
        logger.debug(f"[classifier] {filename} → text (mime={mime_type or 'none'})")
        return ContentKind.TEXT

    logger.debug(f"[classifier] {filename} → unsupported (mime={mime_type or 'none'}, {size_bytes} bytes)")
    return ContentKind.UNSUPPORTED


def classify_text(text: str) -> ContentKind:
    """Pasted or typed text is always text."""
    return ContentKind.TEXT


def classify_source(source: ContentSource) -> ContentKind:
    if source.metadata.get("pasted"):
        return classify_text(source.data.decode("utf-8", errors="replace"))
    return classify_file(source.name, source.mime_type, source.size_bytes)


__all__ = [
    "ContentKind",
    "ContentSource",
    "ACCEPTED_IMAGE_TYPES",
    "ACCEPTED_TEXT_TYPES",
    "TEXT_EXTENSIONS",
    "PASTED_TEXT_NAME",
    "base_mime_type",
    "is_image_type",
    "is_text_type",
    "classify_file",
    "classify_text",
    "classify_source",
]
