import io
import os
import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Ensure the project sources are importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Render Qt headless in CI.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PIL import Image

from PhotoEdit.core.raster import Raster


def encode_image(array: np.ndarray, image_format: str = "PNG", **save_kwargs) -> bytes:
    """Encode a ``uint8`` array with Pillow and return the file bytes."""

    buffer = io.BytesIO()
    Image.fromarray(array).save(buffer, format=image_format, **save_kwargs)
    return buffer.getvalue()


def uniform_array(value: int, size: tuple[int, int] = (8, 6), channels: int = 3) -> np.ndarray:
    height, width = size
    return np.full((height, width, channels), value, dtype=np.uint8)


class FakeThreadPool:
    """Collects runnables instead of starting them so tests pick the completion order."""

    def __init__(self) -> None:
        self.started = []

    def start(self, runnable) -> None:
        self.started.append(runnable)

    def waitForDone(self, msecs: int = -1) -> bool:
        return True

    def run_all(self) -> None:
        pending, self.started = self.started, []
        for runnable in pending:
            runnable.run()


@pytest.fixture
def fake_pool() -> FakeThreadPool:
    return FakeThreadPool()


@pytest.fixture
def gray_png() -> bytes:
    return encode_image(uniform_array(128))


@pytest.fixture
def gray_raster() -> Raster:
    return Raster.from_array(uniform_array(128))


@pytest.fixture
def colour_raster() -> Raster:
    rng = np.random.default_rng(1234)
    return Raster.from_array(rng.integers(0, 256, size=(12, 16, 3), dtype=np.uint8))


@pytest.fixture
def encode():
    return encode_image


@pytest.fixture
def uniform():
    return uniform_array
