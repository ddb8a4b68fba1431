"""
Core iteration driver and coordinate mapping.

This module provides the escape-time loop shared by every fractal variant,
the bailout predicate used by all built-in variants, and the mapping from
pixel coordinates to points of the complex plane.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from .complex_numbers import ComplexNumber
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Returned by the escape-time loop when the orbit never bailed out.
BOUNDED = -1

UpdateRule = Callable[[ComplexNumber, float, float], ComplexNumber]
BailoutRule = Callable[[ComplexNumber, float, float], bool]


def escape_time(update: UpdateRule, bailout: BailoutRule, z0: ComplexNumber,
                x: float, y: float, max_iterations: int) -> int:
    """
    Run the escape-time loop for a single point.
    
    Args:
        update: Function producing the next z from (z, x, y)
        bailout: Predicate signalling that the orbit diverged
        z0: Starting value
        x, y: Plane coordinates of the point
        max_iterations: Iteration budget
        
    Returns:
        The step at which the bailout triggered, or BOUNDED if it never did
    """
    z = z0
    for i in range(max_iterations):
        if bailout(z, x, y):
            return i
        z = update(z, x, y)
    return BOUNDED


def beyond_radius(z: ComplexNumber, radius: float) -> bool:
    """Check |z| >= radius; a NaN modulus also counts as escaped."""
    return not z.abs() < radius


@dataclass(frozen=True)
class Viewport:
    """
    Region of the complex plane shown in a frame of pixels.
    
    The centre pixel (width // 2, height // 2) maps to the centre point, and
    the full width and height of the frame span scale_x and scale_y.
    """
    
    width: int
    height: int
    center_x: float = 0.0
    center_y: float = 0.0
    scale_x: float = 4.0
    scale_y: float = 4.0
    
    def __post_init__(self):
        """Validate frame size and scale."""
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError("Width and height must be positive")
        if not (np.isfinite(self.scale_x) and np.isfinite(self.scale_y)):
            raise ConfigurationError("Scale must be finite")
        if self.scale_x <= 0 or self.scale_y <= 0:
            raise ConfigurationError("Scale must be positive")
        if not (np.isfinite(self.center_x) and np.isfinite(self.center_y)):
            raise ConfigurationError("Center must be finite")
    
    @property
    def dimensions(self) -> Tuple[int, int]:
        return (self.width, self.height)
    
    def x_coord(self, px: int) -> float:
        """Convert a pixel column to a real-axis coordinate."""
        return self.scale_x / self.width * (px - self.width // 2) + self.center_x
    
    def y_coord(self, py: int) -> float:
        """Convert a pixel row to an imaginary-axis coordinate."""
        return self.scale_y / self.height * (py - self.height // 2) + self.center_y
    
    def pixel_to_complex(self, px: int, py: int) -> ComplexNumber:
        """Convert pixel coordinates to a point of the plane."""
        return ComplexNumber(self.x_coord(px), self.y_coord(py))
    
    def x_coords(self) -> np.ndarray:
        """Real-axis coordinates of every pixel column."""
        return np.array([self.x_coord(px) for px in range(self.width)], dtype=np.float64)
    
    def y_coords(self) -> np.ndarray:
        """Imaginary-axis coordinates of every pixel row."""
        return np.array([self.y_coord(py) for py in range(self.height)], dtype=np.float64)


class FractalIterator:
    """Drives a fractal over pixels and frames with a fixed iteration budget."""
    
    def __init__(self, max_iterations: int = 256):
        """
        Initialize fractal iterator.
        
        Args:
            max_iterations: Maximum number of iterations per point
        """
        if not isinstance(max_iterations, int) or isinstance(max_iterations, bool):
            raise ConfigurationError(f"max_iterations must be an integer, got {max_iterations!r}")
        if max_iterations <= 0:
            raise ConfigurationError("max_iterations must be positive")
        self.max_iterations = max_iterations
    
    def iterate_point(self, fractal, x: float, y: float) -> int:
        """
        Iterate a single point of the plane.
        
        Variants that seed their orbit from the pixel position start from
        x + yi instead of their configured z0.
        """
        start: Optional[ComplexNumber] = None
        if fractal.pixel_seeded:
            start = ComplexNumber(x, y)
        return fractal.iterate(x, y, self.max_iterations, start=start)
    
    def iterate_rows(self, fractal, viewport: Viewport,
                     y_start: int, y_end: int) -> np.ndarray:
        """
        Compute iteration counts for a horizontal band of pixel rows.
        
        Args:
            fractal: Fractal function to iterate
            viewport: Frame geometry
            y_start, y_end: Half-open range of pixel rows
            
        Returns:
            Array of shape (y_end - y_start, width) with counts or BOUNDED
        """
        xs = viewport.x_coords()
        counts = np.empty((y_end - y_start, viewport.width), dtype=np.int32)
        
        for row, py in enumerate(range(y_start, y_end)):
            y = viewport.y_coord(py)
            for px, x in enumerate(xs):
                counts[row, px] = self.iterate_point(fractal, float(x), y)
        
        return counts
    
    def iterate_frame(self, fractal, viewport: Viewport) -> np.ndarray:
        """Compute iteration counts for every pixel of the frame."""
        return self.iterate_rows(fractal, viewport, 0, viewport.height)
