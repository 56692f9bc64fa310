import math
from numba import njit

from kernel_sources.registry import register_kernel, register_op_descriptor


@njit(cache=True, nogil=True)
def convolve_pixel(src, mask, ch, row, col, truncate):
    """
    Weighted sum of `mask` centred on (row, col) of channel `ch`.
    Neighbours outside the image are skipped. The result is clamped to [0, 255].
    """
    _, H, W = src.shape
    displ = mask.shape[0] // 2
    val = 0.0
    for k in range(-displ, displ + 1):
        cy = row + k
        if cy < 0 or cy > H - 1:
            continue
        for l in range(-displ, displ + 1):
            cx = col + l
            if cx < 0 or cx > W - 1:
                continue
            val += mask[k + displ, l + displ] * src[ch, cy, cx]

    if not truncate:
        val = float(math.floor(val + 0.5))
    if val > 255.0:
        return 255
    if val < 0.0:
        return 0
    return int(val)


@njit(cache=True, nogil=True)
def convolution_slab(src, dst, mask, truncate, task_num, task_size):
    """Convolve rows [task_num * H // T, (task_num + 1) * H // T) across all columns."""
    C, H, W = src.shape
    h_size = H // task_size
    for i in range(task_num * h_size, (task_num + 1) * h_size):
        for ch in range(C):
            for j in range(W):
                dst[ch, i, j] = convolve_pixel(src, mask, ch, i, j, truncate)


register_op_descriptor(
    "convolution", "slab",
    default_params={"kernel_width": 5, "sigma": 0.37, "nsteps": 20}
)

register_kernel(
    "convolution", "slab",
    func=convolution_slab,
    arg_order=["src", "dst", "mask", "truncate", "task_num", "task_size"],
)
