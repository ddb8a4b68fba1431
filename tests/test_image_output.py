import numpy as np
import pytest
from PIL import Image

from fractal_engine import ImageExporter, RenderMetadata
from fractal_engine.rendering.image_output import rgb_ints_to_array


@pytest.fixture
def frame():
    return np.array([[0xFF0000, 0x00FF00], [0x0000FF, 0x123456]], dtype=np.int64)


@pytest.fixture
def metadata():
    return RenderMetadata(
        fractal_type='julia', dimensions=(2, 2), center=(0.0, 0.0), scale=(4.0, 4.0),
        max_iterations=16, gradient='rainbow', gradient_size=8,
        render_time_seconds=0.01, fractal_parameters={'c_real': -0.75, 'c_imag': 0.1})


def test_rgb_ints_to_array(frame):
    pixels = rgb_ints_to_array(frame)
    assert pixels.shape == (2, 2, 3)
    assert pixels.dtype == np.uint8
    assert pixels[0, 0].tolist() == [255, 0, 0]
    assert pixels[1, 1].tolist() == [0x12, 0x34, 0x56]


def test_rgb_ints_to_array_rejects_flat_input():
    with pytest.raises(ValueError):
        rgb_ints_to_array(np.zeros(4, dtype=np.int64))


def test_save_image_writes_pixels(frame, tmp_path):
    path = ImageExporter().save_image(frame, tmp_path / "out" / "frame.png")
    with Image.open(path) as image:
        assert image.size == (2, 2)
        assert image.getpixel((1, 0)) == (0, 255, 0)


def test_save_image_rejects_other_formats(frame, tmp_path):
    with pytest.raises(ValueError, match="Unsupported format"):
        ImageExporter().save_image(frame, tmp_path / "frame.jpg")


def test_numbered_saves(frame, tmp_path):
    exporter = ImageExporter(tmp_path / "frame")
    first = exporter.save(frame)
    second = exporter.save(frame)
    assert first.name == "frame0.png"
    assert second.name == "frame1.png"
    assert exporter.image_count == 2


def test_numbered_save_needs_base_path(frame):
    with pytest.raises(ValueError):
        ImageExporter().save(frame)


def test_metadata_round_trip(frame, metadata, tmp_path):
    path = ImageExporter().save_image(frame, tmp_path / "frame.png", metadata)
    restored = ImageExporter.extract_metadata(path)
    assert restored == metadata


def test_missing_metadata(frame, tmp_path):
    path = ImageExporter().save_image(frame, tmp_path / "frame.png")
    assert ImageExporter.extract_metadata(path) is None
