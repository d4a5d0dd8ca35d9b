# FILE: tests/test_content_classifier.py
"""
Tests for neurolens/content/classifier.py
Selection classification: image vs text vs unsupported.
"""

import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest

from neurolens.content.classifier import (
    ContentKind,
    ContentSource,
    PASTED_TEXT_NAME,
    base_mime_type,
    classify_file,
    classify_source,
    classify_text,
    is_image_type,
)


class TestImageClassification:
    """Image MIME types win first."""

    @pytest.mark.parametrize("mime", [
        "image/png", "image/jpeg", "image/jpg", "image/webp",
        "image/gif", "image/bmp", "image/svg+xml",
    ])
    def test_allow_listed_image_types(self, mime):
        """Every explicitly accepted image type is IMAGE."""
        assert classify_file("picture", mime) == ContentKind.IMAGE

    def test_any_image_prefix(self):
        """Unlisted image/* types are still images."""
        assert classify_file("scan.tiff", "image/tiff") == ContentKind.IMAGE

    def test_image_wins_over_text_extension(self):
        """Image MIME beats a text-looking extension."""
        assert classify_file("diagram.md", "image/png") == ContentKind.IMAGE

    def test_mime_params_and_case_ignored(self):
        """Parameters and case do not affect the decision."""
        assert classify_file("a", "IMAGE/PNG; foo=bar") == ContentKind.IMAGE
        assert base_mime_type("Text/Plain; charset=UTF-8") == "text/plain"

    def test_empty_mime_is_not_image(self):
        """No MIME type means no image."""
        assert is_image_type("") is False
        assert is_image_type(None) is False


class TestTextClassification:
    """Text by MIME allow-list or by extension."""

    @pytest.mark.parametrize("filename", ["report.pdf", "letter.doc", "essay.docx", "README.md"])
    @pytest.mark.parametrize("mime", ["", "application/octet-stream"])
    def test_document_extensions_with_generic_mime(self, filename, mime):
        """Document extensions classify as TEXT with empty or generic MIME."""
        assert classify_file(filename, mime) == ContentKind.TEXT

    @pytest.mark.parametrize("mime", [
        "text/plain",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/markdown",
        "text/html",
        "application/rtf",
        "text/csv",
    ])
    def test_allow_listed_text_types(self, mime):
        """Accepted text MIME types are TEXT regardless of name."""
        assert classify_file("upload", mime) == ContentKind.TEXT

    def test_text_charset_param(self):
        """text/plain with a charset is still text."""
        assert classify_file("notes", "text/plain; charset=utf-8") == ContentKind.TEXT

    def test_extension_case_insensitive(self):
        """Upper-case extensions are recognised."""
        assert classify_file("NOTES.TXT", None) == ContentKind.TEXT

    def test_pasted_text_always_text(self):
        """Pasted strings are TEXT, even empty ones."""
        assert classify_text("anything") == ContentKind.TEXT
        assert classify_text("") == ContentKind.TEXT


class TestUnsupported:
    """Everything else is UNSUPPORTED, as a value."""

    def test_zip_is_unsupported(self):
        """Archives are neither image nor text."""
        assert classify_file("bundle.zip", "application/zip") == ContentKind.UNSUPPORTED

    def test_no_mime_no_extension(self):
        """Nothing to go on means unsupported."""
        assert classify_file("blob", "", 1024) == ContentKind.UNSUPPORTED

    def test_video_is_unsupported(self):
        """Video is out of scope."""
        assert classify_file("clip.mp4", "video/mp4") == ContentKind.UNSUPPORTED


class TestContentSource:
    """ContentSource constructors."""

    def test_from_bytes_sets_size(self):
        """size_bytes defaults to the data length."""
        src = ContentSource.from_bytes("a.txt", b"hello", "text/plain")
        assert src.size_bytes == 5
        assert src.extension == ".txt"

    def test_from_text_mirrors_paste(self):
        """Pasted text becomes pasted_text.txt / text/plain."""
        src = ContentSource.from_text("hi there")
        assert src.name == PASTED_TEXT_NAME
        assert src.mime_type == "text/plain"
        assert src.data == b"hi there"
        assert classify_source(src) == ContentKind.TEXT

    def test_from_path_guesses_mime(self, tmp_path):
        """from_path reads bytes and guesses the MIME type."""
        path = tmp_path / "photo.png"
        path.write_bytes(b"\x89PNG")
        src = ContentSource.from_path(path)
        assert src.mime_type == "image/png"
        assert src.data == b"\x89PNG"
        assert classify_source(src) == ContentKind.IMAGE

    def test_from_path_missing(self, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ContentSource.from_path(tmp_path / "nope.txt")

    def test_classify_source_uses_name(self):
        """File sources classify by MIME then name."""
        src = ContentSource.from_bytes("chapter.docx", b"PK..")
        assert classify_source(src) == ContentKind.TEXT
