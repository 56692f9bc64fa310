import math
import numpy as np
from numba import njit

from kernel_sources.registry import register_kernel, register_op_descriptor

# Gradient table columns: one row per segment
R0, G0, B0, R1, G1, B1, T_START, T_END, STEPS = range(9)
TABLE_WIDTH = 9

MAX_ITER = 2048
BAILOUT = 4.0

# Visible region of the complex plane
REAL_OFFSET = -1.10
IMAG_SPAN = 0.1
IMAG_OFFSET = -0.35


@njit(cache=True, nogil=True)
def escape_time(c, max_iter, bailout):
    """
    Iterate z <- z^2 + c from z = 0 while |z| <= bailout.
    Returns (iterations, |z|) for the final z.
    """
    z = 0j
    n = 0
    while abs(z) <= bailout and n < max_iter:
        z = z * z + c
        n += 1
    length = math.sqrt(z.real * z.real + z.imag * z.imag)
    return n, length


@njit(cache=True, nogil=True)
def smooth_intensity(iteration, length, max_iter):
    # Applied to bounded orbits too; length <= 1 yields NaN there.
    q = iteration + 1 - np.log(np.log(length)) / np.log(2.0)
    return q / max_iter


@njit(cache=True, nogil=True)
def colorize(pixel, q, iteration, max_iter, table):
    n_seg = table.shape[0]
    seg = -1
    for s in range(n_seg):
        if q >= table[s, T_START] and q < table[s, T_END]:
            seg = s
            break

    if seg < 0:
        if iteration < max_iter:
            raise ValueError("escape intensity is not covered by any gradient segment")
        # bounded orbit: saturate at the inside-color stop
        seg = n_seg - 1
        t = 1.0
    else:
        frac = (q - table[seg, T_START]) / (table[seg, T_END] - table[seg, T_START])
        steps = table[seg, STEPS]
        t = math.floor(frac * steps) / steps

    for ch in range(3):
        start = table[seg, R0 + ch]
        end = table[seg, R1 + ch]
        pixel[ch] = int(start + (end - start) * t)


@njit(cache=True, nogil=True)
def mandelbrot_kernel(c, pixel, table, max_iter, bailout):
    """Color one sample point into `pixel`; True if the point is inside the set."""
    n, length = escape_time(c, max_iter, bailout)
    q = smooth_intensity(n, length, max_iter)
    colorize(pixel, q, n, max_iter, table)
    return n >= max_iter


@njit(cache=True, nogil=True)
def sample_point(i, j, width, height, ratio):
    scale = ratio / 10.0
    cr = i / width * scale + REAL_OFFSET
    ci = j / height * IMAG_SPAN + IMAG_OFFSET
    return complex(cr, ci)


@njit(cache=True, nogil=True)
def mandelbrot_slab(raster, ratio, table, max_iter, bailout, task_num, task_size):
    """
    Fill columns [task_num * W // T, (task_num + 1) * W // T) over the full height.
    Returns the number of pixels classified inside.
    """
    C, H, W = raster.shape
    w_size = W // task_size
    pixel = np.zeros(3, dtype=np.int64)
    inside = 0
    for i in range(task_num * w_size, (task_num + 1) * w_size):
        for j in range(H):
            c = sample_point(i, j, W, H, ratio)
            if mandelbrot_kernel(c, pixel, table, max_iter, bailout):
                inside += 1
            for ch in range(C):
                raster[ch, j, i] = pixel[ch]
    return inside


# task_num, task_size are appended by the executor for each slab
ARG_ORDER = ["raster", "ratio", "table", "max_iter", "bailout", "task_num", "task_size"]

register_op_descriptor(
    "mandelbrot", "slab",
    default_params={"max_iter": MAX_ITER, "bailout": BAILOUT}
)

register_kernel(
    "mandelbrot", "slab",
    func=mandelbrot_slab,
    arg_order=ARG_ORDER,
)
