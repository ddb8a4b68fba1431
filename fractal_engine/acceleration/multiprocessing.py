"""
Multiprocessing backend for parallel fractal computation.

Frames are split into horizontal bands of scanlines that are iterated in
separate worker processes. Fractal configurations are immutable, so every
worker reads the same configuration and writes a disjoint band of the
output.
"""

import logging
import multiprocessing as mp
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ..core.fractal_types import FractalFunction
from ..core.math_functions import FractalIterator, Viewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BandSpec:
    """Specification for a band of pixel rows."""
    band_id: int
    y_start: int
    y_end: int
    
    @property
    def height(self) -> int:
        return self.y_end - self.y_start


@dataclass
class BandResult:
    """Iteration counts computed for a single band."""
    band_id: int
    y_start: int
    iterations: np.ndarray
    processing_time: float


def create_band_grid(height: int, band_height: int = 16) -> List[BandSpec]:
    """
    Split a frame into bands of scanlines.
    
    Args:
        height: Total frame height
        band_height: Target rows per band
        
    Returns:
        List of BandSpec objects covering every row exactly once
    """
    if band_height <= 0:
        raise ValueError("band_height must be positive")
    
    bands = [
        BandSpec(band_id=i, y_start=y, y_end=min(y + band_height, height))
        for i, y in enumerate(range(0, height, band_height))
    ]
    logger.debug(f"Created {len(bands)} bands of up to {band_height} rows")
    return bands


def process_band(fractal: FractalFunction, viewport: Viewport,
                 max_iterations: int, band: BandSpec) -> BandResult:
    """Compute one band; runs inside a worker process."""
    start_time = time.time()
    iterator = FractalIterator(max_iterations)
    iterations = iterator.iterate_rows(fractal, viewport, band.y_start, band.y_end)
    return BandResult(
        band_id=band.band_id,
        y_start=band.y_start,
        iterations=iterations,
        processing_time=time.time() - start_time
    )


def assemble_bands(band_results: List[BandResult], width: int, height: int) -> np.ndarray:
    """Place band results into a full frame of iteration counts."""
    iterations = np.empty((height, width), dtype=np.int32)
    for result in band_results:
        rows = result.iterations.shape[0]
        iterations[result.y_start:result.y_start + rows, :] = result.iterations
    return iterations


class ParallelFrameRenderer:
    """Band-parallel computation of iteration counts."""
    
    def __init__(self, num_processes: Optional[int] = None, band_height: int = 16):
        """
        Initialize parallel renderer.
        
        Args:
            num_processes: Number of worker processes (None for CPU count)
            band_height: Rows per band
        """
        if num_processes is None:
            self.num_processes = get_optimal_process_count()
        else:
            self.num_processes = max(1, num_processes)
        
        self.band_height = band_height
        logger.info(f"Parallel renderer: {self.num_processes} processes, {band_height}-row bands")
    
    def compute(self, fractal: FractalFunction, viewport: Viewport,
                iterator: FractalIterator) -> np.ndarray:
        """
        Compute iteration counts for a whole frame.
        
        Args:
            fractal: Fractal to iterate
            viewport: Frame geometry
            iterator: Iterator carrying the iteration budget
            
        Returns:
            Array (height, width) of iteration counts
        """
        start_time = time.time()
        bands = create_band_grid(viewport.height, self.band_height)
        
        if self.num_processes == 1:
            results = [process_band(fractal, viewport, iterator.max_iterations, band)
                       for band in bands]
        else:
            results = []
            with ProcessPoolExecutor(max_workers=self.num_processes) as executor:
                futures = [executor.submit(process_band, fractal, viewport,
                                           iterator.max_iterations, band)
                           for band in bands]
                
                for completed, future in enumerate(as_completed(futures), start=1):
                    results.append(future.result())
                    if completed % max(1, len(bands) // 10) == 0:
                        progress = (completed / len(bands)) * 100
                        logger.debug(f"Completed {completed}/{len(bands)} bands ({progress:.1f}%)")
        
        frame = assemble_bands(results, viewport.width, viewport.height)
        
        total_time = time.time() - start_time
        processing_time = sum(r.processing_time for r in results)
        logger.debug(f"Band computation complete: {total_time:.2f}s total, "
                     f"{processing_time:.2f}s processing time")
        return frame


def get_optimal_process_count() -> int:
    """Number of worker processes to use by default."""
    return max(1, mp.cpu_count())
