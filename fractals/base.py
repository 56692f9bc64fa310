from dataclasses import dataclass, field
from typing import Optional

from coloring.gradient import Gradient, DEFAULT_GRADIENT
from kernel_sources.loader import load_defaults
from utils.enums import RoundingMode

_FIELD_DEFAULTS = load_defaults("mandelbrot", "slab")
_CONV_DEFAULTS = load_defaults("convolution", "slab")


@dataclass(frozen=True)
class FieldSettings:
    """
    Holds the parameters of the Mandelbrot field.
    Ratio defaults to width / height and scales the visible real span.
    Task_size is the number of column slabs (one task each).
    """
    width: int = 1536
    height: int = 1024
    ratio: Optional[float] = None
    max_iter: int = _FIELD_DEFAULTS["max_iter"]
    escape_radius: float = _FIELD_DEFAULTS["bailout"]
    task_size: int = 512
    gradient: Gradient = field(default=DEFAULT_GRADIENT)

    @property
    def effective_ratio(self) -> float:
        if self.ratio is not None:
            return float(self.ratio)
        return self.width / float(self.height)


@dataclass(frozen=True)
class ConvolutionSettings:
    """
    Holds the parameters of the iterative Gaussian filter.
    Kernel_width must be odd. Nsteps is the number of passes.
    Task_size is the number of row slabs per pass.
    """
    kernel_width: int = _CONV_DEFAULTS["kernel_width"]
    sigma: float = _CONV_DEFAULTS["sigma"]
    nsteps: int = _CONV_DEFAULTS["nsteps"]
    task_size: int = 256
    rounding: RoundingMode = RoundingMode.NEAREST


@dataclass(frozen=True)
class RunSettings:
    num_threads: int = 16
    output: str = "mandelbrot-task.ppm"
    mandelbrot: FieldSettings = field(default_factory=FieldSettings)
    convolution: ConvolutionSettings = field(default_factory=ConvolutionSettings)
