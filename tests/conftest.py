"""Pytest fixtures for format converter tests."""

import io
import os
from pathlib import Path
from typing import List, Optional, Tuple

import pytest
from PIL import Image
from rich.console import Console

from format_converter.config import Settings
from format_converter.core.catalog import FormatCatalog
from format_converter.core.conversion.engine import ImageEngine, ImageHandle
from format_converter.core.conversion.invoker import ConversionInvoker
from format_converter.models.conversion import ConversionHints


class RecordingEngine(ImageEngine):
    """Engine double that records every call and writes placeholder bytes."""

    def __init__(self, fail_with: Optional[Exception] = None):
        self.calls: List[Tuple] = []
        self.hints: Optional[ConversionHints] = None
        self.fail_with = fail_with

    def load(self, path: Path) -> ImageHandle:
        self.calls.append(("load", Path(path)))
        return ImageHandle(Path(path))

    def configure(self, handle: ImageHandle, hints: ConversionHints) -> None:
        self.calls.append(("configure", hints))
        self.hints = hints
        handle.hints = hints

    def write(self, handle: ImageHandle, path: Path, target_format: str) -> None:
        self.calls.append(("write", Path(path), target_format))
        Path(path).write_bytes(b"partial")
        if self.fail_with is not None:
            raise self.fail_with
        Path(path).write_bytes(b"converted")

    @property
    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def catalog():
    """Default format catalog."""
    return FormatCatalog.default()


@pytest.fixture
def settings(monkeypatch):
    """Settings with no environment overrides."""
    for key in list(os.environ):
        if key.startswith("FORMAT_CONVERTER_"):
            monkeypatch.delenv(key, raising=False)
    return Settings(_env_file=None)


@pytest.fixture
def recording_engine():
    return RecordingEngine()


@pytest.fixture
def failing_engine():
    """Factory for an engine whose write leaves a partial file then raises."""

    def _make(error: Exception) -> RecordingEngine:
        return RecordingEngine(fail_with=error)

    return _make


@pytest.fixture
def invoker(catalog, recording_engine):
    """Invoker wired to the recording engine."""
    return ConversionInvoker(catalog, engine=recording_engine)


@pytest.fixture
def make_image(tmp_path):
    """Write a small Pillow-generated image and return its path."""

    def _make(
        name: str = "photo.png",
        size: Tuple[int, int] = (20, 10),
        mode: str = "RGB",
        color=(200, 40, 40),
        image_format: Optional[str] = None,
        **save_params,
    ) -> Path:
        path = tmp_path / name
        img = Image.new(mode, size, color)
        img.save(path, format=image_format, **save_params)
        return path

    return _make


@pytest.fixture
def make_file(tmp_path):
    """Write arbitrary bytes under a given file name."""

    def _make(name: str, content: bytes = b"not an image") -> Path:
        path = tmp_path / name
        path.write_bytes(content)
        return path

    return _make


@pytest.fixture
def output_console():
    """Rich console writing plain text into a buffer."""
    buffer = io.StringIO()
    return Console(file=buffer, width=200, force_terminal=False, color_system=None)
