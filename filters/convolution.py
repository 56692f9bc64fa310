from __future__ import annotations

import logging
import time
from typing import List, Optional

import numpy as np

from filters.gaussian import get_2d_kernel
from fractals.base import ConvolutionSettings
from kernel_sources.loader import bind_args, load_kernel
from rendering.executor import TaskExecutor
from rendering.partition import Slab, dropped_range, partition
from utils.enums import PartitionAxis, RoundingMode
from utils.raster import validate_raster

logger = logging.getLogger(__name__)


class ConvolutionFilter:
    """
    Iterative 2D convolution with a Gaussian mask.

    Each pass is one generation of row-slab tasks. Between passes the two
    buffer slots trade roles: the output of pass k is the input of pass k+1
    and the old input becomes the next write target. The barrier at the end
    of every generation guarantees nothing still reads a slot being rewritten.
    """
    name = "convolution"

    def __init__(self, settings: Optional[ConvolutionSettings] = None,
                 mask: Optional[np.ndarray] = None) -> None:
        self.settings = settings or ConvolutionSettings()
        st = self.settings
        if st.nsteps < 1:
            raise ValueError(f"nsteps must be >= 1, got {st.nsteps}.")
        if st.task_size <= 0:
            raise ValueError(f"task_size must be positive, got {st.task_size}.")
        self._mask = mask
        if mask is not None:
            self._mask = _check_mask(mask)
        elif st.kernel_width % 2 == 0:
            raise ValueError(f"kernel_width must be odd, got {st.kernel_width}.")
        self._meta = load_kernel(self.name, "slab")
        self._kernel = self._meta["func"]

    def build_mask(self) -> np.ndarray:
        if self._mask is not None:
            return self._mask
        st = self.settings
        return get_2d_kernel(st.kernel_width, st.kernel_width, st.sigma)

    def slabs(self, height: int) -> List[Slab]:
        return partition(height, self.settings.task_size, PartitionAxis.ROWS)

    def apply(self, src: np.ndarray, dst: np.ndarray, executor: TaskExecutor) -> np.ndarray:
        """
        Run `nsteps` passes from src into dst and return dst.
        Both buffers are overwritten. Rows past the last full slab are never
        written by a pass, so they end up holding whatever the result slot held:
        dst's own rows for an odd nsteps, src's original rows for an even one
        (the result is copied from src into dst).
        """
        validate_raster(src, "src")
        validate_raster(dst, "dst")
        if src.shape != dst.shape:
            raise ValueError(f"src {src.shape} and dst {dst.shape} differ in shape.")
        if src is dst or np.shares_memory(src, dst):
            raise ValueError("src and dst must be distinct buffers.")

        st = self.settings
        mask = self.build_mask()
        truncate = st.rounding is RoundingMode.TRUNCATE
        dropped = len(dropped_range(src.shape[1], st.task_size))
        if dropped:
            logger.debug("%d trailing rows are not covered by %d slabs", dropped, st.task_size)

        slots = (src, dst)
        read = 0
        for step in range(st.nsteps):
            t0 = time.perf_counter()
            args = bind_args(self._meta, {"src": slots[read], "dst": slots[1 - read],
                                          "mask": mask, "truncate": truncate})
            executor.run_generation(self._kernel, st.task_size, *args)
            logger.debug("convolution pass %d/%d in %.2f ms", step + 1, st.nsteps,
                         (time.perf_counter() - t0) * 1000.0)
            if step < st.nsteps - 1:
                read = 1 - read

        result = slots[1 - read]
        if result is not dst:
            np.copyto(dst, result)
        return dst


def _check_mask(mask: np.ndarray) -> np.ndarray:
    mask = np.ascontiguousarray(mask, dtype=np.float64)
    if mask.ndim != 2 or mask.shape[0] != mask.shape[1]:
        raise ValueError(f"Mask must be square, got shape {mask.shape}.")
    if mask.shape[0] % 2 == 0:
        raise ValueError(f"Mask size must be odd, got {mask.shape[0]}.")
    return mask
