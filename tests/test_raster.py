import numpy as np
import pytest
from PIL import Image

from PhotoEdit.core.raster import Raster, decode_raster
from PhotoEdit.errors import DecodeError


def test_decode_png_normalises_samples(encode, uniform):
    raster = decode_raster(encode(uniform(128)))

    assert (raster.width, raster.height) == (6, 8)
    assert raster.pixels.dtype == np.float32
    assert not raster.has_alpha
    assert raster.orientation == 1
    assert np.allclose(raster.pixels, 128 / 255.0)


def test_decode_keeps_alpha_plane(encode, uniform):
    rgba = uniform(200, channels=4)
    rgba[:, :, 3] = 64
    raster = decode_raster(encode(rgba))

    assert raster.has_alpha
    assert np.allclose(raster.alpha, 64 / 255.0)
    assert raster.to_uint8().shape == (8, 6, 4)


def test_decode_reads_exif_orientation(encode, uniform):
    exif = Image.Exif()
    exif[0x0112] = 6
    raster = decode_raster(encode(uniform(90), "JPEG", exif=exif.tobytes()))

    assert raster.orientation == 6
    # Orientation is metadata only; the pixel grid is not rotated.
    assert (raster.width, raster.height) == (6, 8)


@pytest.mark.parametrize("payload", [b"", b"definitely not an image", b"\x89PNG\r\n\x1a\n\x00"])
def test_decode_errors(payload):
    with pytest.raises(DecodeError):
        decode_raster(payload)


def test_raster_is_immutable(gray_raster):
    with pytest.raises(ValueError):
        gray_raster.pixels[0, 0, 0] = 1.0
    with pytest.raises(AttributeError):
        gray_raster.orientation = 3


def test_from_array_copies_caller_buffer():
    data = np.zeros((2, 2, 3), dtype=np.float32)
    raster = Raster.from_array(data)
    data[0, 0, 0] = 1.0
    assert raster.pixels[0, 0, 0] == 0.0


def test_from_array_expands_grey_and_clips_floats():
    raster = Raster.from_array(np.array([[1.5, -0.5]], dtype=np.float32))
    assert raster.pixels.shape == (1, 2, 3)
    assert raster.pixels[0, 0].tolist() == [1.0, 1.0, 1.0]
    assert raster.pixels[0, 1].tolist() == [0.0, 0.0, 0.0]


def test_invalid_orientation_falls_back_to_identity(gray_raster):
    raster = Raster(gray_raster.pixels, orientation=42)
    assert raster.orientation == 1


def test_equals_compares_samples_and_metadata(gray_raster):
    same = Raster(gray_raster.pixels.copy())
    assert gray_raster.equals(same)
    assert not gray_raster.equals(Raster(gray_raster.pixels, orientation=3))

    nudged = Raster(gray_raster.pixels + np.float32(1e-4))
    assert not gray_raster.equals(nudged)
    assert gray_raster.equals(nudged, tolerance=1e-3)


def test_thumbnail_preserves_aspect(uniform):
    raster = Raster.from_array(uniform(50, size=(100, 200)))
    thumb = raster.thumbnail(70)

    assert max(thumb.width, thumb.height) == 70
    assert thumb.width == 70 and thumb.height == 35
    assert raster.thumbnail(500) is raster


def test_to_qimage_returns_detached_copy(qapp, uniform):
    raster = Raster.from_array(uniform(255, size=(4, 5)))
    image = raster.to_qimage()

    assert image.width() == 5
    assert image.height() == 4
    assert image.pixelColor(0, 0).red() == 255
