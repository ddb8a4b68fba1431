"""
Image export for rendered fractal frames.

Frames are arrays of packed 24-bit RGB integers. This module converts them
to 8-bit RGB images and writes PNG files with the render parameters embedded
as text chunks.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np
from PIL import Image, PngImagePlugin

from .. import __version__

logger = logging.getLogger(__name__)


@dataclass
class RenderMetadata:
    """Metadata for fractal renders."""
    
    fractal_type: str
    dimensions: Tuple[int, int]  # width, height
    center: Tuple[float, float]
    scale: Tuple[float, float]
    max_iterations: int
    gradient: str
    gradient_size: int
    render_time_seconds: float
    
    timestamp: str = ""
    software_version: str = __version__
    
    fractal_parameters: Dict[str, Any] = field(default_factory=dict)
    
    def __post_init__(self):
        """Set default timestamp if not provided."""
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary."""
        return asdict(self)
    
    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)
    
    @classmethod
    def from_json(cls, json_str: str) -> 'RenderMetadata':
        """Create metadata from JSON string."""
        data = json.loads(json_str)
        data['dimensions'] = tuple(data['dimensions'])
        data['center'] = tuple(data['center'])
        data['scale'] = tuple(data['scale'])
        return cls(**data)


def rgb_ints_to_array(frame: np.ndarray) -> np.ndarray:
    """
    Unpack a frame of packed RGB integers.
    
    Args:
        frame: Array (height, width) of packed 24-bit RGB integers
        
    Returns:
        Array (height, width, 3) of uint8 channels
    """
    frame = np.asarray(frame, dtype=np.int64)
    if frame.ndim != 2:
        raise ValueError(f"Expected a 2D frame of packed colors, got shape {frame.shape}")
    
    channels = np.stack([(frame >> 16) & 0xFF, (frame >> 8) & 0xFF, frame & 0xFF], axis=-1)
    return channels.astype(np.uint8)


class ImageExporter:
    """PNG export with metadata and numbered output files."""
    
    def __init__(self, base_path: Optional[Union[str, Path]] = None):
        """
        Initialize image exporter.
        
        Args:
            base_path: Prefix for numbered saves; save() writes
                <base_path>0.png, <base_path>1.png, ...
        """
        self.base_path = None if base_path is None else str(base_path)
        self.image_count = 0
    
    def save_image(self, frame: np.ndarray, filepath: Union[str, Path],
                   metadata: Optional[RenderMetadata] = None) -> Path:
        """
        Save a frame of packed RGB integers as PNG.
        
        Args:
            frame: Array (height, width) of packed RGB integers
            filepath: Output file path
            metadata: Render metadata to embed
            
        Returns:
            Path written
        """
        filepath = Path(filepath)
        if filepath.suffix.lower() != '.png':
            raise ValueError(f"Unsupported format '{filepath.suffix}'. Supported: .png")
        
        pil_image = Image.fromarray(rgb_ints_to_array(frame))
        
        pnginfo = PngImagePlugin.PngInfo()
        if metadata:
            pnginfo.add_text("Title", f"Fractal: {metadata.fractal_type}")
            pnginfo.add_text("Software", f"fractal-engine v{metadata.software_version}")
            pnginfo.add_text("Creation Time", metadata.timestamp)
            pnginfo.add_text("FractalMetadata", metadata.to_json())
        
        filepath.parent.mkdir(parents=True, exist_ok=True)
        pil_image.save(filepath, "PNG", pnginfo=pnginfo)
        
        logger.info(f"Saved image {filepath} successfully ({pil_image.size[0]}x{pil_image.size[1]})")
        return filepath
    
    def save(self, frame: np.ndarray, metadata: Optional[RenderMetadata] = None) -> Path:
        """Save the frame under the next numbered file name."""
        if self.base_path is None:
            raise ValueError("ImageExporter needs a base_path for numbered saves")
        
        filepath = Path(f"{self.base_path}{self.image_count}.png")
        self.save_image(frame, filepath, metadata)
        self.image_count += 1
        return filepath
    
    @staticmethod
    def extract_metadata(filepath: Union[str, Path]) -> Optional[RenderMetadata]:
        """Read embedded render metadata back from a PNG file."""
        with Image.open(filepath) as image:
            text = getattr(image, 'text', {}) or {}
            raw = text.get("FractalMetadata")
        
        if raw is None:
            return None
        return RenderMetadata.from_json(raw)
