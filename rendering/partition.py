from __future__ import annotations

from dataclasses import dataclass
from typing import List

from utils.enums import PartitionAxis


@dataclass(frozen=True)
class Slab:
    """
    A contiguous half-open range [start, stop) of columns or rows owned by one task.
    """
    task_num: int
    start: int
    stop: int
    axis: PartitionAxis

    def __len__(self) -> int:
        return self.stop - self.start

    def __contains__(self, index: int) -> bool:
        return self.start <= index < self.stop


def slab_size(extent: int, task_size: int) -> int:
    if task_size <= 0:
        raise ValueError(f"task_size must be positive, got {task_size}.")
    return extent // task_size


def slab_bounds(extent: int, task_num: int, task_size: int) -> tuple[int, int]:
    """
    Bounds of slab `task_num` when `extent` is cut into `task_size` equal slabs.
    The remainder (extent % task_size) is never assigned to any slab.
    """
    size = slab_size(extent, task_size)
    return task_num * size, (task_num + 1) * size


def partition(extent: int, task_size: int,
              axis: PartitionAxis = PartitionAxis.COLUMNS) -> List[Slab]:
    slabs = []
    for task_num in range(task_size):
        start, stop = slab_bounds(extent, task_num, task_size)
        slabs.append(Slab(task_num, start, stop, axis))
    return slabs


def dropped_range(extent: int, task_size: int) -> range:
    """Indices that no slab covers."""
    return range(slab_size(extent, task_size) * task_size, extent)
