"""
Main API classes for fractal generation.

This module ties the numerical core to a render pass: it maps every pixel of
a frame into the complex plane, iterates the configured fractal there and
resolves the iteration counts to colours through a gradient.
"""

import json
import logging
import math
import time
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

from .acceleration.multiprocessing import ParallelFrameRenderer
from .core.fractal_types import FractalFunction, FractalRegistry
from .core.math_functions import FractalIterator, Viewport
from .exceptions import ConfigurationError
from .rendering.coloring import Gradient, create_gradient
from .rendering.image_output import ImageExporter, RenderMetadata

logger = logging.getLogger(__name__)

# Colour of points that never escape.
BOUNDED_COLOR = 0


@dataclass
class RenderConfig:
    """Configuration for fractal rendering."""
    
    # Image parameters
    width: int = 680
    height: int = 680
    center: Tuple[float, float] = (0.0, 0.0)
    scale: Tuple[float, float] = (4.0, 4.0)
    
    # Fractal parameters
    fractal: str = 'mandelbrot'
    fractal_params: Dict[str, Any] = field(default_factory=dict)
    max_iterations: int = 256
    
    # Coloring
    gradient: str = 'rainbow'
    max_colors: int = 64
    
    # Performance
    processes: int = 1
    band_height: int = 16
    
    def validate(self):
        """Validate configuration parameters."""
        for name in ('width', 'height', 'max_iterations', 'max_colors',
                     'processes', 'band_height'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")

        for name in ('center', 'scale'):
            pair = getattr(self, name)
            if not isinstance(pair, (tuple, list)) or not all(
                    isinstance(v, (int, float)) and not isinstance(v, bool) for v in pair):
                raise ConfigurationError(f"{name} must be a pair of numbers, got {pair!r}")

        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError("Width and height must be positive")
        
        if self.max_iterations <= 0:
            raise ConfigurationError("max_iterations must be positive")
        
        if self.max_colors <= 0:
            raise ConfigurationError("max_colors must be positive")
        
        if len(self.center) != 2 or len(self.scale) != 2:
            raise ConfigurationError("center and scale must be (x, y) pairs")
        
        if not all(math.isfinite(v) for v in (*self.center, *self.scale)):
            raise ConfigurationError("center and scale must be finite")
        
        if self.scale[0] <= 0 or self.scale[1] <= 0:
            raise ConfigurationError("scale must be positive")
        
        if self.processes < 1:
            raise ConfigurationError("processes must be >= 1")
        
        if self.band_height < 1:
            raise ConfigurationError("band_height must be >= 1")
    
    @property
    def viewport(self) -> Viewport:
        return Viewport(self.width, self.height,
                        self.center[0], self.center[1],
                        self.scale[0], self.scale[1])
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RenderConfig':
        """Create a configuration from a dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        
        values = dict(data)
        for key in ('center', 'scale'):
            if key in values:
                values[key] = tuple(values[key])
        
        config = cls(**values)
        config.validate()
        return config
    
    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> 'RenderConfig':
        """Load a configuration from a JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
        
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration in {path} must be a JSON object")
        return cls.from_dict(data)
    
    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class RenderResult:
    """Output of a render pass."""
    
    iterations: np.ndarray  # (height, width) counts, -1 for bounded points
    colors: np.ndarray  # (height, width) packed RGB integers
    render_time: float
    
    @property
    def bounded_fraction(self) -> float:
        """Share of pixels that never escaped."""
        return float(np.mean(self.iterations < 0))


class FractalRenderer:
    """Main fractal rendering engine."""
    
    def __init__(self, config: Optional[RenderConfig] = None,
                 fractal: Optional[FractalFunction] = None,
                 gradient: Optional[Gradient] = None):
        """
        Initialize fractal renderer.
        
        Args:
            config: Rendering configuration (uses defaults if None)
            fractal: Fractal to render; built from the config if None
            gradient: Gradient to colour with; built from the config if None
        """
        self.config = config or RenderConfig()
        self.config.validate()
        
        self.fractal = fractal if fractal is not None else FractalRegistry.create_fractal(
            self.config.fractal, **self.config.fractal_params)
        self.gradient = gradient if gradient is not None else create_gradient(
            self.config.gradient, self.config.max_colors)
        self.viewport = self.config.viewport
        self.iterator = FractalIterator(self.config.max_iterations)
        self.backend = ParallelFrameRenderer(self.config.processes, self.config.band_height)
        
        logger.info(f"FractalRenderer initialized: {self.config.width}x{self.config.height}, "
                    f"{self.fractal.name} fractal, {self.gradient.size} colors")
    
    def color_point(self, x: float, y: float) -> int:
        """Iterate one point of the plane and resolve it to a packed colour."""
        count = self.iterator.iterate_point(self.fractal, x, y)
        return BOUNDED_COLOR if count < 0 else self.gradient.get(count)
    
    def render(self) -> RenderResult:
        """
        Render the configured frame.
        
        Returns:
            Iteration counts and packed RGB colours for every pixel
        """
        start_time = time.time()
        
        iterations = self.backend.compute(self.fractal, self.viewport, self.iterator)
        colors = self.gradient.lookup(iterations, bounded_color=BOUNDED_COLOR)
        
        render_time = time.time() - start_time
        width, height = self.viewport.dimensions
        logger.info(
            f"Dimensions: ({width}, {height}) (total={width * height}), "
            f"Center: ({self.viewport.center_x:f}, {self.viewport.center_y:f}), "
            f"Scale: ({self.viewport.scale_x:f}, {self.viewport.scale_y:f}), "
            f"Max Iterations: {self.iterator.max_iterations}, "
            f"Time elapsed: {render_time * 1000:.0f}ms")
        
        return RenderResult(iterations=iterations, colors=colors, render_time=render_time)
    
    def metadata(self, result: RenderResult) -> RenderMetadata:
        """Describe a render for embedding in the exported image."""
        return RenderMetadata(
            fractal_type=self.fractal.name,
            dimensions=self.viewport.dimensions,
            center=(self.viewport.center_x, self.viewport.center_y),
            scale=(self.viewport.scale_x, self.viewport.scale_y),
            max_iterations=self.iterator.max_iterations,
            gradient=self.config.gradient,
            gradient_size=self.gradient.size,
            render_time_seconds=result.render_time,
            fractal_parameters=self.fractal.to_dict()
        )
    
    def save(self, result: RenderResult, output_path: Union[str, Path]) -> Path:
        """Save a render as PNG with embedded metadata."""
        exporter = ImageExporter()
        return exporter.save_image(result.colors, output_path, self.metadata(result))
