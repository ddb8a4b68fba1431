import pytest

from fractal_engine import FractalFunction, Gradient, RenderConfig


@pytest.fixture
def mandelbrot():
    return FractalFunction.mandelbrot()


@pytest.fixture
def rainbow():
    return Gradient.rainbow(64)


@pytest.fixture
def small_config():
    """A tiny frame that renders quickly."""
    return RenderConfig(width=8, height=8, max_iterations=32, max_colors=16, band_height=3)
