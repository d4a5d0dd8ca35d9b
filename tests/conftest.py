# FILE: tests/conftest.py
"""
Pytest configuration for the NeuroLens test suite.

Configures:
- pytest-asyncio for async test support
- Shared content sources and service doubles
"""
import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest

pytest_plugins = ["pytest_asyncio"]

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


@pytest.fixture
def png_source():
    from neurolens.content.classifier import ContentSource
    return ContentSource.from_bytes("poster.png", PNG_BYTES, "image/png")


@pytest.fixture
def text_source():
    from neurolens.content.classifier import ContentSource
    return ContentSource.from_bytes("notes.txt", b"Meet at the library at 3pm.", "text/plain")
