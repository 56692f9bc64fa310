import numpy as np


def get_2d_kernel(kernel_width: int, kernel_height: int, sigma: float) -> np.ndarray:
    """
    Normalized 2D Gaussian mask of shape (kernel_height, kernel_width).

    Parameters:
        kernel_width (int): Mask width, must be odd.
        kernel_height (int): Mask height, must be odd.
        sigma (float): Standard deviation of the Gaussian.

    Returns:
        np.ndarray: float64 weights summing to 1.
    """
    if kernel_width <= 0 or kernel_height <= 0:
        raise ValueError(f"Kernel size must be positive, got {kernel_width}x{kernel_height}.")
    if kernel_width % 2 == 0 or kernel_height % 2 == 0:
        raise ValueError(f"Kernel size must be odd, got {kernel_width}x{kernel_height}.")
    if sigma <= 0:
        raise ValueError(f"sigma must be positive, got {sigma}.")

    ys = np.arange(kernel_height, dtype=np.float64) - kernel_height // 2
    xs = np.arange(kernel_width, dtype=np.float64) - kernel_width // 2
    yy, xx = np.meshgrid(ys, xs, indexing="ij")
    kernel = np.exp(-(xx * xx + yy * yy) / (2.0 * sigma * sigma))
    return kernel / kernel.sum()
