from __future__ import annotations

import logging
from typing import List, Tuple

import numpy as np

from fractals.base import FieldSettings
from kernel_sources.loader import bind_args, load_kernel
from kernel_sources.cpu.mandelbrot import sample_point
from rendering.executor import TaskExecutor, reduce_sum
from rendering.partition import Slab, dropped_range, partition
from utils.enums import PartitionAxis
from utils.raster import raster_shape, validate_raster

logger = logging.getLogger(__name__)


def pixel_to_complex(i: int, j: int, width: int, height: int, ratio: float) -> Tuple[float, float]:
    """Sample point for column i, row j."""
    c = sample_point(i, j, width, height, ratio)
    return c.real, c.imag


class MandelbrotField:
    """
    Computes the escape-time field into a (3, H, W) raster, one column slab per task.
    """
    name = "mandelbrot"

    def __init__(self, settings: FieldSettings | None = None) -> None:
        self.settings = settings or FieldSettings()
        if self.settings.task_size <= 0:
            raise ValueError(f"task_size must be positive, got {self.settings.task_size}.")
        self._meta = load_kernel(self.name, "slab")
        self._kernel = self._meta["func"]
        self.last_counts: List[int] = []

    def _check(self, raster: np.ndarray) -> None:
        validate_raster(raster)
        _, h, w = raster_shape(raster)
        st = self.settings
        if (h, w) != (st.height, st.width):
            raise ValueError(f"Raster is {w}x{h}, settings expect {st.width}x{st.height}.")

    def _args(self, raster: np.ndarray) -> list:
        st = self.settings
        return bind_args(self._meta, {
            "raster": raster,
            "ratio": st.effective_ratio,
            "table": st.gradient.table,
            "max_iter": st.max_iter,
            "bailout": st.escape_radius,
        })

    def slabs(self) -> List[Slab]:
        return partition(self.settings.width, self.settings.task_size, PartitionAxis.COLUMNS)

    def generate_slab(self, raster: np.ndarray, task_num: int, task_size: int) -> int:
        return self._kernel(*self._args(raster), task_num, task_size)

    def generate(self, raster: np.ndarray, executor: TaskExecutor) -> int:
        """
        Fill the raster and return the number of pixels inside the set.
        Per-task counts are kept in `last_counts` (indexed by task number).
        """
        self._check(raster)
        st = self.settings
        dropped = len(dropped_range(st.width, st.task_size))
        if dropped:
            logger.debug("%d trailing columns are not covered by %d slabs",
                         dropped, st.task_size)

        counts = executor.run_generation(self._kernel, st.task_size, *self._args(raster))
        self.last_counts = [int(c) for c in counts]
        inside = reduce_sum(self.last_counts)
        logger.debug("mandelbrot field %dx%d: %d pixels inside", st.width, st.height, inside)
        return inside
