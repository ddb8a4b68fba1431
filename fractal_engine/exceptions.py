"""
Exception types raised by the fractal engine.

Arithmetic inside the iteration loop never raises; the only failures the
engine reports are configuration problems detected before rendering starts.
"""


class ConfigurationError(ValueError):
    """Raised when a fractal, gradient or render configuration is malformed."""
