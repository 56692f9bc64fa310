from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

from kernel_sources.cpu.mandelbrot import TABLE_WIDTH, colorize

RGB = Tuple[int, int, int]


class GradientError(ValueError):
    """Invalid gradient configuration."""


@dataclass(frozen=True)
class GradientSegment:
    """
    Linear color ramp from start_color to end_color over [t_start, t_end).
    The ramp is quantized to step_count levels.
    """
    start_color: RGB
    end_color: RGB
    t_start: float
    t_end: float
    step_count: int

    def row(self) -> list:
        return [*self.start_color, *self.end_color,
                self.t_start, self.t_end, float(self.step_count)]


class Gradient:
    """
    Immutable ordered sequence of segments. Built once per run and shared
    read-only by every task; `table` is the packed form the kernels consume.
    """

    def __init__(self, segments: Iterable[GradientSegment]) -> None:
        self._segments: Tuple[GradientSegment, ...] = tuple(segments)
        _validate(self._segments)
        table = np.array([s.row() for s in self._segments], dtype=np.float64)
        table = table.reshape(len(self._segments), TABLE_WIDTH)
        table.setflags(write=False)
        self._table = table

    @property
    def segments(self) -> Tuple[GradientSegment, ...]:
        return self._segments

    @property
    def table(self) -> np.ndarray:
        return self._table

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self):
        return iter(self._segments)

    def __eq__(self, other) -> bool:
        return isinstance(other, Gradient) and self._segments == other._segments

    def __hash__(self) -> int:
        return hash(self._segments)

    def __repr__(self) -> str:
        return f"Gradient({list(self._segments)!r})"

    def find_segment(self, q: float) -> int:
        """Index of the first segment whose range holds q, or -1."""
        for idx, s in enumerate(self._segments):
            if s.t_start <= q < s.t_end:
                return idx
        return -1

    def color_at(self, q: float, iteration: int, max_iter: int) -> RGB:
        pixel = np.zeros(3, dtype=np.int64)
        colorize(pixel, float(q), int(iteration), int(max_iter), self._table)
        return int(pixel[0]), int(pixel[1]), int(pixel[2])


def _validate(segments: Tuple[GradientSegment, ...]) -> None:
    errors = []
    if not segments:
        raise GradientError("Gradient must contain at least one segment.")
    prev_end = None
    for idx, s in enumerate(segments):
        if not s.t_start < s.t_end:
            errors.append(f"segment[{idx}]: t_start {s.t_start} must be below t_end {s.t_end}.")
        if prev_end is not None and s.t_start < prev_end:
            errors.append(f"segment[{idx}]: range starts at {s.t_start}, before the previous end {prev_end}.")
        if int(s.step_count) < 1:
            errors.append(f"segment[{idx}]: step_count must be >= 1, got {s.step_count}.")
        for name, color in (("start_color", s.start_color), ("end_color", s.end_color)):
            if len(color) != 3 or any(not 0 <= v <= 255 for v in color):
                errors.append(f"segment[{idx}]: {name} {color} is not an RGB triple in [0, 255].")
        prev_end = s.t_end
    if errors:
        raise GradientError("Gradient validation failed:\n- " + "\n- ".join(errors))


DEFAULT_GRADIENT = Gradient([
    GradientSegment((0, 0, 0), (76, 57, 125), 0.0, 0.010, 2000),
    GradientSegment((76, 57, 125), (255, 255, 255), 0.010, 0.020, 2000),
    GradientSegment((255, 255, 255), (0, 0, 0), 0.020, 0.050, 2000),
    GradientSegment((0, 0, 0), (0, 0, 0), 0.050, 1.0, 2000),
])
