import numpy as np
import pytest

from fractal_engine import FractalFunction
from fractal_engine.acceleration.multiprocessing import (
    ParallelFrameRenderer,
    create_band_grid,
    process_band,
)
from fractal_engine.core.math_functions import FractalIterator, Viewport


def test_band_grid_covers_every_row():
    bands = create_band_grid(10, 4)
    assert [(b.y_start, b.y_end) for b in bands] == [(0, 4), (4, 8), (8, 10)]
    assert sum(b.height for b in bands) == 10


def test_band_grid_rejects_bad_height():
    with pytest.raises(ValueError):
        create_band_grid(10, 0)


def test_process_band(mandelbrot):
    viewport = Viewport(5, 5)
    band = create_band_grid(5, 2)[1]
    result = process_band(mandelbrot, viewport, 30, band)
    expected = FractalIterator(30).iterate_rows(mandelbrot, viewport, 2, 4)
    assert result.y_start == 2
    assert np.array_equal(result.iterations, expected)


@pytest.mark.parametrize("processes", [1, 2])
def test_compute_matches_sequential(processes):
    fractal = FractalFunction.julia(-0.75, 0.1)
    viewport = Viewport(9, 7, scale_x=3.0, scale_y=3.0)
    iterator = FractalIterator(40)

    expected = iterator.iterate_frame(fractal, viewport)
    frame = ParallelFrameRenderer(processes, band_height=2).compute(fractal, viewport, iterator)
    assert np.array_equal(frame, expected)
