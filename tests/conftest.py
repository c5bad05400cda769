"""Shared fixtures: fake Gemini client, sample images and recipe payloads."""

import json
from typing import Any, Optional
from unittest.mock import MagicMock, Mock

import pytest

from chefinbox.services.gemini import reset_gemini_client

# Magic bytes are enough for format sniffing
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
GIF_BYTES = b"GIF89a\x01\x00\x01\x00\x80\x00\x00"


def make_recipe_dict(title: str = "Pasta al pomodoro", servings: int = 4, **overrides: Any) -> dict:
    """A recipe record as Gemini returns it (camelCase wire names)."""
    record = {
        "title": title,
        "description": "Un classico della cucina italiana.",
        "ingredients": [f"{80 * servings} g di spaghetti", f"{100 * servings} g di pomodori", "basilico q.b."],
        "instructions": ["Cuocere la pasta.", "Preparare il sugo.", "Mantecare e servire."],
        "prepTime": "25 minuti",
        "difficulty": "Easy",
        "calories": "450 kcal",
        "imageUrl": "https://example.com/pasta.jpg",
        "servings": servings,
    }
    record.update(overrides)
    return record


def make_gemini_client(payload: Optional[Any] = None, text: Optional[str] = None, error: Optional[Exception] = None):
    """Build a MagicMock standing in for ``genai.Client``.

    ``payload`` is JSON-encoded into ``response.text``; ``text`` sets it verbatim;
    ``error`` makes ``generate_content`` raise.
    """
    client = MagicMock()
    if error is not None:
        client.models.generate_content.side_effect = error
    else:
        response = Mock()
        response.text = text if text is not None else json.dumps(payload)
        client.models.generate_content.return_value = response
    return client


@pytest.fixture
def jpeg_bytes() -> bytes:
    return JPEG_BYTES


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def recipe_dict():
    return make_recipe_dict


@pytest.fixture
def gemini_client():
    return make_gemini_client


@pytest.fixture(autouse=True)
def _fresh_gemini_client():
    """Never leak a cached Gemini client between tests."""
    reset_gemini_client()
    yield
    reset_gemini_client()
