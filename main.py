"""
Generate the Mandelbrot field, blur it with an iterative Gaussian filter and
save the result as an ASCII PPM.

Usage:
  python main.py --width 1536 --height 1024 --nsteps 20 --output mandelbrot-task.ppm
"""

import sys
import time
import argparse
import logging
from typing import List, Optional, Tuple

from filters.convolution import ConvolutionFilter
from fractals.base import ConvolutionSettings, FieldSettings, RunSettings
from fractals.mandelbrot import MandelbrotField
from rendering.executor import TaskExecutor
from utils.enums import RoundingMode
from utils.ppm import write_ppm
from utils.raster import allocate_raster

logger = logging.getLogger("mandelblur")


def build_settings(args: argparse.Namespace) -> RunSettings:
    field_settings = FieldSettings(
        width=args.width,
        height=args.height,
        ratio=args.ratio,
        max_iter=args.max_iter,
        escape_radius=args.escape_radius,
        task_size=args.field_tasks,
    )
    conv_settings = ConvolutionSettings(
        kernel_width=args.kernel_width,
        sigma=args.sigma,
        nsteps=args.nsteps,
        task_size=args.conv_tasks,
        rounding=RoundingMode[args.rounding.upper()],
    )
    return RunSettings(num_threads=args.threads, output=args.output,
                       mandelbrot=field_settings, convolution=conv_settings)


def run(settings: RunSettings) -> Tuple[int, float, float]:
    """
    Execute the full pipeline. Returns (pixels_inside, field_seconds, convolution_seconds).
    """
    fs = settings.mandelbrot
    image = allocate_raster(fs.height, fs.width)
    filtered_image = allocate_raster(fs.height, fs.width)

    with TaskExecutor(settings.num_threads) as executor:
        t1 = time.perf_counter()
        pixels_inside = MandelbrotField(fs).generate(image, executor)
        t2 = time.perf_counter()

        t3 = time.perf_counter()
        ConvolutionFilter(settings.convolution).apply(image, filtered_image, executor)
        t4 = time.perf_counter()

    write_ppm(settings.output, filtered_image)
    logger.info("Wrote %dx%d image to %s", fs.width, fs.height, settings.output)
    return pixels_inside, t2 - t1, t4 - t3


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    fd, cd, rd = FieldSettings(), ConvolutionSettings(), RunSettings()
    p = argparse.ArgumentParser(description="Parallel Mandelbrot field with iterative Gaussian blur.")
    p.add_argument("--width", type=int, default=fd.width)
    p.add_argument("--height", type=int, default=fd.height)
    p.add_argument("--ratio", type=float, default=None,
                   help="Scale ratio; defaults to width/height")
    p.add_argument("--max-iter", type=int, default=fd.max_iter)
    p.add_argument("--escape-radius", type=float, default=fd.escape_radius)
    p.add_argument("--field-tasks", type=int, default=fd.task_size,
                   help="Number of column slabs for the Mandelbrot field")
    p.add_argument("--kernel-width", type=int, default=cd.kernel_width)
    p.add_argument("--sigma", type=float, default=cd.sigma)
    p.add_argument("--nsteps", type=int, default=cd.nsteps)
    p.add_argument("--conv-tasks", type=int, default=cd.task_size,
                   help="Number of row slabs per convolution pass")
    p.add_argument("--rounding", type=str, default="nearest", choices=["nearest", "truncate"])
    p.add_argument("--threads", type=int, default=rd.num_threads)
    p.add_argument("--output", type=str, default=rd.output)
    p.add_argument("--log-level", type=str, default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        settings = build_settings(args)
        pixels_inside, field_time, conv_time = run(settings)
    except (ValueError, MemoryError) as e:
        logger.error("Run aborted: %s", e)
        return 1

    print(f"Mandelbrot time: {field_time}")
    print(f"Total Mandelbrot pixels: {pixels_inside}")
    print(f"Convolution time: {conv_time}")
    print(f"Total time: {field_time + conv_time}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
