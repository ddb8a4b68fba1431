"""
Escape-time and root-finding fractal engine.

This library provides an immutable complex-number type, complex polynomials,
a family of fractal iteration functions (power maps, Julia sets, polynomial
and Newton root-finding fractals) and gradient lookup tables that turn
iteration counts into colours.

Example usage:
    >>> from fractal_engine import FractalFunction, Gradient
    >>> fractal = FractalFunction.mandelbrot()
    >>> gradient = Gradient.rainbow(64)
    >>> count = fractal.iterate(0.3, 0.3, 256)
    >>> color = gradient.get(count)
"""

__version__ = "1.0.0"
__author__ = "Fractal Engine Team"

from fractal_engine.exceptions import ConfigurationError
from fractal_engine.core.complex_numbers import ComplexNumber
from fractal_engine.core.polynomial import ComplexPolynomial
from fractal_engine.core.math_functions import BOUNDED, FractalIterator, Viewport
from fractal_engine.core.fractal_types import FractalFunction, FractalKind, FractalRegistry, JULIA_PRESETS
from fractal_engine.rendering.coloring import ColorSystem, RGB, HSB, Gradient, create_gradient
from fractal_engine.rendering.image_output import ImageExporter, RenderMetadata

# Main API classes
from fractal_engine.api import FractalRenderer, RenderConfig, RenderResult

__all__ = [
    "ConfigurationError",
    "ComplexNumber",
    "ComplexPolynomial",
    "BOUNDED",
    "FractalIterator",
    "Viewport",
    "FractalFunction",
    "FractalKind",
    "FractalRegistry",
    "JULIA_PRESETS",
    "ColorSystem",
    "RGB",
    "HSB",
    "Gradient",
    "create_gradient",
    "ImageExporter",
    "RenderMetadata",
    "FractalRenderer",
    "RenderConfig",
    "RenderResult",
]
