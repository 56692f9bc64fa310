from __future__ import annotations

import numpy as np

CHANNELS = 3
RASTER_DTYPE = np.uint8


class RasterError(ValueError):
    """Raised when a buffer does not have the (channels, height, width) layout."""


def allocate_raster(height: int, width: int, channels: int = CHANNELS) -> np.ndarray:
    """
    Allocate a zeroed raster indexed (channel, row, column).
    Allocation failures (MemoryError) propagate to the caller.
    """
    if height <= 0 or width <= 0:
        raise RasterError(f"Raster dimensions must be positive, got {width}x{height}.")
    if channels != CHANNELS:
        raise RasterError(f"Only RGB rasters are supported, got {channels} channels.")
    return np.zeros((channels, height, width), dtype=RASTER_DTYPE)


def validate_raster(raster: np.ndarray, name: str = "raster") -> None:
    if not isinstance(raster, np.ndarray):
        raise RasterError(f"'{name}' must be a numpy array, got {type(raster).__name__}.")
    if raster.ndim != 3 or raster.shape[0] != CHANNELS:
        raise RasterError(f"'{name}' expected shape (3, H, W), got {raster.shape}.")
    if raster.dtype != RASTER_DTYPE:
        raise RasterError(f"'{name}' expected dtype {np.dtype(RASTER_DTYPE)}, got {raster.dtype}.")
    if not raster.flags.c_contiguous or not raster.flags.writeable:
        raise RasterError(f"'{name}' must be a writeable C-contiguous buffer.")


def raster_shape(raster: np.ndarray):
    """Return (channels, height, width)."""
    c, h, w = raster.shape
    return int(c), int(h), int(w)
