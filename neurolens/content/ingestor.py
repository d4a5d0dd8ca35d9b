# FILE: neurolens/content/ingestor.py
"""
Content ingestion: classified source → canonical payload.

- IMAGE: full bytes base64-encoded into a data URI (data:<mime>;base64,...),
  the wire format the vision endpoint accepts
- TEXT: decoded text. PDF pages go through pypdf, DOCX paragraphs through
  python-docx, everything else is strict UTF-8

Ingestion is single-shot. Progress is an integer percent in [0, 50]; the
upper half of the bar belongs to the network dispatch.
"""

from __future__ import annotations

import asyncio
import base64
import io
import logging
import mimetypes
from dataclasses import dataclass
from typing import Callable, Optional

from neurolens.content.classifier import ContentKind, ContentSource, base_mime_type
from neurolens.errors import ReadFailureError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]

# Read occupies the first half of the two-phase progress bar
READ_PROGRESS_SPAN = 50

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@dataclass(frozen=True)
class ContentPayload:
    kind: ContentKind
    data: str

    @property
    def is_image(self) -> bool:
        return self.kind == ContentKind.IMAGE


# =============================================================================
# IMAGE
# =============================================================================

def _image_mime(source: ContentSource) -> str:
    mime = base_mime_type(source.mime_type)
    if mime:
        return mime
    guessed, _ = mimetypes.guess_type(source.name or "")
    return guessed or "application/octet-stream"


def encode_data_uri(data: bytes, mime_type: str) -> str:
    b64 = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{b64}"


# =============================================================================
# TEXT
# =============================================================================

def _extract_pdf_text(data: bytes) -> str:
    from pypdf import PdfReader

    reader = PdfReader(io.BytesIO(data))
    pages = [page.extract_text() or "" for page in reader.pages]
    return "\n".join(pages)


def _extract_docx_text(data: bytes) -> str:
    from docx import Document

    doc = Document(io.BytesIO(data))
    return "\n".join(para.text for para in doc.paragraphs)


def _decode_utf8(data: bytes) -> str:
    text = data.decode("utf-8-sig")
    if "\x00" in text:
        raise ValueError("null bytes in text content (binary file?)")
    return text


def decode_text(source: ContentSource) -> str:
    """
    Decode a text-kind source.

    Raises:
        ReadFailureError: undecodable, unextractable or empty content
    """
    mime = base_mime_type(source.mime_type)
    ext = source.extension

    try:
        if ext == ".pdf" or mime == PDF_MIME:
            text = _extract_pdf_text(source.data)
        elif ext == ".docx" or mime == DOCX_MIME:
            text = _extract_docx_text(source.data)
        else:
            text = _decode_utf8(source.data)
    except Exception as e:
        raise ReadFailureError(f"Could not read {source.name or 'content'} as text: {e}") from e

    if not text.strip():
        raise ReadFailureError(f"{source.name or 'Content'} contains no readable text")
    return text


# =============================================================================
# INGESTOR
# =============================================================================

def build_payload(source: ContentSource, kind: ContentKind) -> ContentPayload:
    """Synchronous core of ingestion."""
    if kind == ContentKind.IMAGE:
        if not source.data:
            raise ReadFailureError(f"{source.name or 'Image'} is empty")
        return ContentPayload(ContentKind.IMAGE, encode_data_uri(source.data, _image_mime(source)))
    if kind == ContentKind.TEXT:
        return ContentPayload(ContentKind.TEXT, decode_text(source))
    raise ReadFailureError(f"Cannot ingest content of kind {kind.value}")


class ContentIngestor:
    """Turns a classified ContentSource into a ContentPayload off the event loop."""

    async def ingest(
        self,
        source: ContentSource,
        kind: ContentKind,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ContentPayload:
        total = source.size_bytes or len(source.data)
        if on_progress:
            on_progress(0)

        payload = await asyncio.to_thread(build_payload, source, kind)

        if on_progress:
            on_progress(READ_PROGRESS_SPAN)

        logger.info(
            "[ingestor] %s ingested as %s (%d bytes → %d chars)",
            source.name, kind.value, total, len(payload.data),
        )
        return payload


__all__ = [
    "ContentPayload",
    "ContentIngestor",
    "ProgressCallback",
    "READ_PROGRESS_SPAN",
    "encode_data_uri",
    "decode_text",
    "build_payload",
]
