"""Immutable pixel buffer shared by every stage of the edit pipeline."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError
from PySide6.QtGui import QImage

from ..errors import DecodeError

_LOGGER = logging.getLogger(__name__)

_EXIF_ORIENTATION_TAG = 0x0112


def _freeze(array: np.ndarray) -> np.ndarray:
    """Return *array* as a read-only, C-contiguous ``float32`` buffer.

    Arrays that are already frozen are reused as-is.  Writeable input is copied
    so callers keep ownership of the buffer they handed in.
    """

    if (
        array.dtype == np.float32
        and array.flags["C_CONTIGUOUS"]
        and not array.flags.writeable
    ):
        return array
    frozen = np.array(array, dtype=np.float32, order="C", copy=True)
    frozen.flags.writeable = False
    return frozen


@dataclass(frozen=True, eq=False)
class Raster:
    """A decoded photograph.

    ``pixels`` holds sRGB encoded samples in ``[0, 1]`` with shape
    ``(height, width, 3)``.  ``alpha`` is an optional ``(height, width)`` plane
    that every transform carries through untouched.  ``orientation`` is the
    EXIF orientation tag of the source file; it is metadata only and the
    pixels are never rotated.
    """

    pixels: np.ndarray
    alpha: Optional[np.ndarray] = None
    orientation: int = 1
    icc_profile: Optional[bytes] = None

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError(f"Raster pixels must have shape (h, w, 3), got {pixels.shape}")
        object.__setattr__(self, "pixels", _freeze(pixels))

        if self.alpha is not None:
            alpha = np.asarray(self.alpha)
            if alpha.shape != pixels.shape[:2]:
                raise ValueError("Raster alpha plane does not match the pixel grid")
            object.__setattr__(self, "alpha", _freeze(alpha))

        orientation = int(self.orientation)
        if orientation < 1 or orientation > 8:
            orientation = 1
        object.__setattr__(self, "orientation", orientation)

    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def has_alpha(self) -> bool:
        return self.alpha is not None

    @classmethod
    def from_array(
        cls,
        array: np.ndarray,
        *,
        orientation: int = 1,
        icc_profile: Optional[bytes] = None,
    ) -> "Raster":
        """Build a raster from a grey, RGB or RGBA array.

        Integer arrays are normalised by their dtype's maximum; float arrays are
        assumed to already live in ``[0, 1]`` and are clipped into that range.
        """

        data = np.asarray(array)
        if np.issubdtype(data.dtype, np.integer):
            scale = float(np.iinfo(data.dtype).max)
            samples = data.astype(np.float32) / np.float32(scale)
        else:
            samples = np.clip(data.astype(np.float32), 0.0, 1.0)

        if samples.ndim == 2:
            samples = np.repeat(samples[:, :, None], 3, axis=2)
        if samples.ndim != 3 or samples.shape[2] not in (3, 4):
            raise ValueError(f"Unsupported raster array shape {data.shape}")

        alpha = None
        if samples.shape[2] == 4:
            alpha = samples[:, :, 3]
            samples = samples[:, :, :3]
        return cls(samples, alpha, orientation, icc_profile)

    def with_pixels(self, rgb: np.ndarray) -> "Raster":
        """Return a new raster with *rgb* samples and this raster's metadata.

        The caller hands over ownership of *rgb*; it is frozen in place rather
        than copied.
        """

        if rgb.dtype == np.float32 and rgb.flags["C_CONTIGUOUS"]:
            rgb.flags.writeable = False
        return Raster(rgb, self.alpha, self.orientation, self.icc_profile)

    def equals(self, other: "Raster", *, tolerance: float = 0.0) -> bool:
        """Return ``True`` when *other* carries the same samples and metadata."""

        if other is self:
            return True
        if self.pixels.shape != other.pixels.shape:
            return False
        if self.orientation != other.orientation or self.icc_profile != other.icc_profile:
            return False
        if (self.alpha is None) != (other.alpha is None):
            return False
        if tolerance > 0.0:
            same = np.allclose(self.pixels, other.pixels, rtol=0.0, atol=tolerance)
        else:
            same = np.array_equal(self.pixels, other.pixels)
        if same and self.alpha is not None:
            same = np.array_equal(self.alpha, other.alpha)
        return bool(same)

    # ------------------------------------------------------------------
    def to_uint8(self) -> np.ndarray:
        """Return the raster as an RGB or RGBA ``uint8`` array."""

        rgb = np.rint(np.clip(self.pixels, 0.0, 1.0) * np.float32(255.0)).astype(np.uint8)
        if self.alpha is None:
            return rgb
        alpha = np.rint(np.clip(self.alpha, 0.0, 1.0) * np.float32(255.0)).astype(np.uint8)
        return np.dstack((rgb, alpha))

    def to_qimage(self) -> QImage:
        """Return a detached :class:`QImage` copy for display or export."""

        data = np.ascontiguousarray(self.to_uint8())
        channels = data.shape[2]
        image_format = (
            QImage.Format.Format_RGBA8888 if channels == 4 else QImage.Format.Format_RGB888
        )
        image = QImage(data.tobytes(), self.width, self.height, self.width * channels, image_format)
        # The constructor above borrows the Python buffer; ``copy`` gives Qt its
        # own storage before ``data`` goes out of scope.
        return image.copy()

    def thumbnail(self, max_edge: int) -> "Raster":
        """Return an aspect-preserving copy whose longest edge is *max_edge*."""

        max_edge = max(1, int(max_edge))
        if max(self.width, self.height) <= max_edge:
            return self

        image = Image.fromarray(self.to_uint8())
        image.thumbnail((max_edge, max_edge), Image.Resampling.LANCZOS)
        return Raster.from_array(
            np.asarray(image),
            orientation=self.orientation,
            icc_profile=self.icc_profile,
        )


def decode_raster(data: bytes) -> Raster:
    """Decode encoded image *data* into a :class:`Raster`.

    Raises :class:`DecodeError` when Pillow cannot identify or read the bytes.
    """

    if not data:
        raise DecodeError("No image data supplied")

    try:
        with Image.open(io.BytesIO(bytes(data))) as image:
            image.load()
            orientation = int(image.getexif().get(_EXIF_ORIENTATION_TAG, 1) or 1)
            icc_profile = image.info.get("icc_profile")
            has_alpha = "A" in image.getbands() or (
                image.mode == "P" and "transparency" in image.info
            )
            converted = image.convert("RGBA" if has_alpha else "RGB")
            array = np.asarray(converted)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError(f"Could not decode image data: {exc}") from exc

    raster = Raster.from_array(array, orientation=orientation, icc_profile=icc_profile)
    _LOGGER.debug(
        "Decoded %dx%d raster (orientation=%d, alpha=%s)",
        raster.width,
        raster.height,
        raster.orientation,
        raster.has_alpha,
    )
    return raster


__all__ = ["Raster", "decode_raster"]
