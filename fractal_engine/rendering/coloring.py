"""
Colour systems and gradient lookup tables for fractal rendering.

A Gradient maps an iteration count to a packed 24-bit RGB integer through a
precomputed, cyclic lookup table. Gradients are built from explicit colours,
from RGB or HSB control points by linear interpolation, as an evenly spaced
rainbow, or by sampling a matplotlib colormap.
"""

import math
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Union

import numpy as np
import matplotlib
import matplotlib.colors as mcolors

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

Interpolator = Callable[[float, float, float, float], float]


def pack_rgb(r: int, g: int, b: int) -> int:
    """Pack three 8-bit channels into (r << 16) | (g << 8) | b."""
    return (r << 16) | (g << 8) | b


def _unit_to_channel(values: np.ndarray) -> np.ndarray:
    """Scale 0-1 floats to 0-255 integers, rounding half up."""
    return np.floor(np.asarray(values, dtype=np.float64) * 255.0 + 0.5).astype(np.int64)


def _pack_rows(channels: np.ndarray) -> np.ndarray:
    """Pack an (N, 3) integer array into N packed RGB integers."""
    return (channels[:, 0] << 16) | (channels[:, 1] << 8) | channels[:, 2]


def hsb_to_rgb_ints(hsb: np.ndarray) -> np.ndarray:
    """
    Convert an (N, 3) array of hue, saturation, brightness rows to packed RGB.
    
    Hue is taken modulo one full turn, so any real hue is accepted.
    
    Args:
        hsb: Rows of (h, s, b) with s and b in 0-1
        
    Returns:
        Array of N packed RGB integers
    """
    hsb = np.array(hsb, dtype=np.float64).reshape(-1, 3)
    hsb[:, 0] = hsb[:, 0] - np.floor(hsb[:, 0])
    rgb = mcolors.hsv_to_rgb(hsb)
    return _pack_rows(_unit_to_channel(rgb))


class ColorSystem(ABC):
    """Base class for colour values that resolve to packed RGB integers."""
    
    @abstractmethod
    def to_rgb_int(self) -> int:
        """Resolve this colour to a packed 24-bit RGB integer."""
        pass
    
    @abstractmethod
    def interpolate(self, other: 'ColorSystem', percent1: float, percent2: float,
                    interpolator: Optional[Interpolator] = None) -> 'ColorSystem':
        """
        Blend this colour with another of the same system.
        
        Args:
            other: Colour to blend with
            percent1: Weight of this colour
            percent2: Weight of the other colour
            interpolator: Channel blending function (first, second, p1, p2)
            
        Returns:
            New colour of the same system
        """
        pass


@dataclass(frozen=True)
class RGB(ColorSystem):
    """
    RGB colour with integer channels.
    
    Channels are nominally 0-255 but are not clamped.
    """
    
    r: int
    g: int
    b: int
    
    @staticmethod
    def LINEAR_INTERPOLATOR(first: float, second: float, percent1: float, percent2: float) -> int:
        return math.floor(first * percent1 + second * percent2 + 0.5)
    
    @classmethod
    def from_rgb_int(cls, rgb: int) -> 'RGB':
        """Unpack a packed RGB integer."""
        return cls((rgb >> 16) & 0xFF, (rgb >> 8) & 0xFF, rgb & 0xFF)
    
    @classmethod
    def gray(cls, value: int) -> 'RGB':
        return cls(value, value, value)
    
    def to_rgb_int(self) -> int:
        return pack_rgb(self.r, self.g, self.b)
    
    def interpolate(self, other: 'RGB', percent1: float, percent2: float,
                    interpolator: Optional[Interpolator] = None) -> 'RGB':
        interpolator = interpolator or RGB.LINEAR_INTERPOLATOR
        return RGB(
            interpolator(self.r, other.r, percent1, percent2),
            interpolator(self.g, other.g, percent1, percent2),
            interpolator(self.b, other.b, percent1, percent2)
        )
    
    def __str__(self) -> str:
        return f"RGB({self.r}, {self.g}, {self.b})"


@dataclass(frozen=True)
class HSB(ColorSystem):
    """HSB colour with real channels, nominally 0-1."""
    
    h: float
    s: float = 1.0
    b: float = 1.0
    
    @staticmethod
    def LINEAR_INTERPOLATOR(first: float, second: float, percent1: float, percent2: float) -> float:
        return first * percent1 + second * percent2
    
    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> 'HSB':
        """Create an HSB colour from 8-bit RGB channels."""
        h, s, v = mcolors.rgb_to_hsv(np.array([r, g, b], dtype=np.float64) / 255.0)
        return cls(float(h), float(s), float(v))
    
    def to_rgb_int(self) -> int:
        return int(hsb_to_rgb_ints([[self.h, self.s, self.b]])[0])
    
    def interpolate(self, other: 'HSB', percent1: float, percent2: float,
                    interpolator: Optional[Interpolator] = None) -> 'HSB':
        """
        Blend two HSB colours along the hue wheel.
        
        When the other hue is numerically smaller, a full turn is added to it
        first and the blended hue is reduced modulo one turn afterwards.
        """
        interpolator = interpolator or HSB.LINEAR_INTERPOLATOR
        other_h = other.h + 1 if other.h < self.h else other.h
        return HSB(
            interpolator(self.h, other_h, percent1, percent2) % 1,
            interpolator(self.s, other.s, percent1, percent2),
            interpolator(self.b, other.b, percent1, percent2)
        )
    
    def __str__(self) -> str:
        return f"HSB({self.h:.2f}, {self.s:.2f}, {self.b:.2f})"


class Gradient:
    """Cyclic lookup table from iteration index to packed RGB colour."""
    
    def __init__(self, colors: Iterable[Union[int, ColorSystem]]):
        """
        Initialize gradient.
        
        Args:
            colors: Colours in order, either packed RGB integers or
                ColorSystem values (resolved immediately)
        """
        values = []
        for color in colors:
            if isinstance(color, ColorSystem):
                values.append(color.to_rgb_int())
            elif isinstance(color, (int, np.integer)) and not isinstance(color, bool):
                values.append(int(color))
            else:
                raise ConfigurationError(f"Invalid color format: {color!r}")
        
        if not values:
            raise ConfigurationError("Gradient must contain at least one color")
        
        self._values = np.array(values, dtype=np.int64)
        self._values.flags.writeable = False
        logger.debug(f"Created gradient with {len(values)} colors")
    
    @property
    def size(self) -> int:
        return len(self._values)
    
    @property
    def values(self) -> np.ndarray:
        """Read-only array of packed RGB integers."""
        return self._values
    
    def get(self, i: int) -> int:
        """Return the colour for iteration index i, wrapping modulo size."""
        return int(self._values[i % len(self._values)])
    
    def lookup(self, counts: np.ndarray, bounded_color: int = 0) -> np.ndarray:
        """
        Map an array of iteration counts to packed RGB colours.
        
        Args:
            counts: Iteration counts, negative for points that never escaped
            bounded_color: Colour for points that never escaped
            
        Returns:
            Array of packed RGB integers with the shape of counts
        """
        counts = np.asarray(counts)
        colors = self._values[np.mod(counts, len(self._values))]
        return np.where(counts < 0, np.int64(bounded_color), colors)
    
    def __len__(self) -> int:
        return len(self._values)
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, Gradient):
            return NotImplemented
        return np.array_equal(self._values, other._values)
    
    def __str__(self) -> str:
        lines = [f"Gradient {len(self._values)}["]
        lines.extend(str(RGB.from_rgb_int(int(v))) for v in self._values)
        lines.append("]")
        return "\n".join(lines)
    
    # Construction policies
    
    @classmethod
    def linear(cls, max_colors: int, control_points: Sequence[ColorSystem]) -> 'Gradient':
        """
        Build a gradient by linear interpolation between control points.
        
        Output index k sits between control points floor(k * N / M) and the
        next one (wrapping to the first), weighted by its position inside
        that interval.
        
        Args:
            max_colors: Number of colours M to generate
            control_points: N colours of a single colour system
            
        Returns:
            Gradient of max_colors entries
        """
        _check_size(max_colors)
        control_points = list(control_points)
        if not control_points:
            raise ConfigurationError("At least one control point is required")
        
        system = type(control_points[0])
        if not issubclass(system, ColorSystem):
            raise ConfigurationError(f"Invalid control point: {control_points[0]!r}")
        if any(type(point) is not system for point in control_points):
            raise ConfigurationError("Control points must all use the same color system")
        
        count = len(control_points)
        step_size = count / max_colors
        interval = 1 / step_size
        
        colors = []
        for i in range(max_colors):
            lower = int(i * step_size)
            upper = (lower + 1) % count
            fraction = i % interval / interval
            colors.append(control_points[lower].interpolate(
                control_points[upper], 1 - fraction, fraction).to_rgb_int())
        
        return cls(colors)
    
    @classmethod
    def rainbow(cls, max_colors: int) -> 'Gradient':
        """Evenly spaced hues at full saturation and brightness."""
        _check_size(max_colors)
        hues = np.arange(max_colors, dtype=np.float64) / max_colors
        hsb = np.column_stack([hues, np.ones(max_colors), np.ones(max_colors)])
        return cls(hsb_to_rgb_ints(hsb).tolist())
    
    @classmethod
    def from_colormap(cls, cmap_name: str, max_colors: int) -> 'Gradient':
        """Sample a matplotlib colormap at max_colors evenly spaced points."""
        _check_size(max_colors)
        if cmap_name not in matplotlib.colormaps:
            raise ConfigurationError(f"Unknown colormap '{cmap_name}'")
        
        cmap = matplotlib.colormaps[cmap_name]
        rgba = cmap(np.arange(max_colors, dtype=np.float64) / max_colors)
        return cls(_pack_rows(_unit_to_channel(rgba[:, :3])).tolist())


def _check_size(max_colors: int) -> None:
    if isinstance(max_colors, bool) or not isinstance(max_colors, (int, np.integer)):
        raise ConfigurationError("max_colors must be an integer")
    if max_colors <= 0:
        raise ConfigurationError("max_colors must be positive")


# Five-colour palette popularised by the Wikipedia Mandelbrot renders.
WIKIPEDIA_CONTROL_POINTS: List[HSB] = [
    HSB.from_rgb(0, 7, 100),
    HSB.from_rgb(32, 107, 203),
    HSB.from_rgb(237, 255, 255),
    HSB.from_rgb(255, 170, 0),
    HSB.from_rgb(0, 2, 0),
]

GRADIENT_NAMES = ('rainbow', 'wikipedia', 'grayscale')


def create_gradient(name: str, max_colors: int) -> Gradient:
    """
    Create a gradient by name.
    
    Args:
        name: 'rainbow', 'wikipedia', 'grayscale' or a matplotlib colormap name
        max_colors: Gradient size
        
    Returns:
        Configured gradient
    """
    key = name.lower()
    if key == 'rainbow':
        return Gradient.rainbow(max_colors)
    if key == 'wikipedia':
        return Gradient.linear(max_colors, WIKIPEDIA_CONTROL_POINTS)
    if key == 'grayscale':
        return Gradient.linear(max_colors, [RGB(0, 0, 0), RGB(255, 255, 255)])
    if name in matplotlib.colormaps:
        return Gradient.from_colormap(name, max_colors)
    
    available = ', '.join(GRADIENT_NAMES)
    raise ConfigurationError(f"Unknown gradient '{name}'. Available: {available} or a matplotlib colormap")
