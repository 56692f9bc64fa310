from __future__ import annotations

import numpy as np
import pytest

from filters.convolution import ConvolutionFilter
from fractals.base import ConvolutionSettings
from kernel_sources.cpu.convolution import convolve_pixel
from utils.enums import RoundingMode
from utils.raster import allocate_raster


def _filter(nsteps=1, task_size=1, mask=None, **kw) -> ConvolutionFilter:
    return ConvolutionFilter(ConvolutionSettings(nsteps=nsteps, task_size=task_size, **kw),
                             mask=mask)


def test_all_ones_mask_on_single_pixel_keeps_value(executor):
    src = allocate_raster(1, 1)
    src[:, 0, 0] = (17, 130, 255)
    dst = allocate_raster(1, 1)

    _filter(mask=np.ones((3, 3))).apply(src, dst, executor)
    assert dst[:, 0, 0].tolist() == [17, 130, 255]


def test_out_of_range_neighbours_are_skipped():
    src = np.full((3, 3, 3), 10, dtype=np.uint8)
    mask = np.full((3, 3), 1.0 / 9.0)
    # corner: 4 valid neighbours -> 40 / 9
    assert convolve_pixel(src, mask, 0, 0, 0, False) == 4
    # edge: 6 valid neighbours -> 60 / 9
    assert convolve_pixel(src, mask, 1, 0, 1, False) == 7
    assert convolve_pixel(src, mask, 2, 1, 1, False) == 10


@pytest.mark.parametrize(
    "weight, value, truncate, expected",
    [(0.5, 5, False, 3), (0.5, 5, True, 2), (0.3, 5, False, 2),
     (2.0, 200, False, 255), (-1.0, 10, False, 0)],
)
def test_rounding_and_clamping(weight, value, truncate, expected):
    src = np.full((3, 1, 1), value, dtype=np.uint8)
    mask = np.array([[weight]])
    assert convolve_pixel(src, mask, 0, 0, 0, truncate) == expected


def test_truncate_rounding_mode(executor):
    src = np.full((3, 2, 2), 5, dtype=np.uint8)
    dst = allocate_raster(2, 2)
    _filter(mask=np.array([[0.5]]), rounding=RoundingMode.TRUNCATE).apply(src, dst, executor)
    assert (dst == 2).all()


@pytest.mark.parametrize("nsteps", [1, 2, 3, 6])
def test_identity_mask_is_idempotent(executor, random_raster, nsteps):
    original = random_raster(8, 6)
    src = original.copy()
    dst = allocate_raster(8, 6)

    out = _filter(nsteps=nsteps, task_size=4, mask=np.ones((1, 1))).apply(src, dst, executor)
    assert out is dst
    np.testing.assert_array_equal(dst, original)


@pytest.mark.parametrize("nsteps", [1, 2, 3])
def test_each_pass_reads_the_previous_output(executor, random_raster, nsteps):
    # picks the right-hand neighbour: each pass shifts the image one column left
    shift = np.zeros((3, 3))
    shift[1, 2] = 1.0
    original = random_raster(4, 7)
    src = original.copy()
    dst = allocate_raster(4, 7)

    _filter(nsteps=nsteps, task_size=2, mask=shift).apply(src, dst, executor)

    expected = np.zeros_like(original)
    expected[:, :, :7 - nsteps] = original[:, :, nsteps:]
    np.testing.assert_array_equal(dst, expected)


@pytest.mark.parametrize("task_size", [2, 4, 8, 16])
def test_output_is_independent_of_partition_count(executor, random_raster, task_size):
    original = random_raster(16, 12)

    ref = allocate_raster(16, 12)
    _filter(nsteps=3, task_size=1).apply(original.copy(), ref, executor)

    out = allocate_raster(16, 12)
    _filter(nsteps=3, task_size=task_size).apply(original.copy(), out, executor)
    np.testing.assert_array_equal(ref, out)


@pytest.mark.parametrize("nsteps", [1, 2])
def test_remainder_rows_are_not_written(executor, random_raster, nsteps):
    original = random_raster(5, 4)
    src = original.copy()
    dst = np.full((3, 5, 4), 77, dtype=np.uint8)
    _filter(nsteps=nsteps, task_size=2, mask=np.ones((1, 1))).apply(src, dst, executor)

    np.testing.assert_array_equal(dst[:, :4, :], original[:, :4, :])
    if nsteps % 2:
        assert (dst[:, 4, :] == 77).all()
    else:
        # result ended in the src slot and was copied over
        np.testing.assert_array_equal(dst[:, 4, :], original[:, 4, :])


def test_gaussian_blur_smooths_an_impulse(executor):
    src = allocate_raster(9, 9)
    src[:, 4, 4] = 255
    dst = allocate_raster(9, 9)
    _filter(kernel_width=5, sigma=1.0).apply(src, dst, executor)

    assert dst[0, 4, 4] < 255
    assert dst[0, 4, 5] > 0
    assert dst[0, 4, 5] == dst[0, 4, 3] == dst[0, 3, 4] == dst[0, 5, 4]
    assert dst[0, 0, 0] == 0


def test_even_kernel_width_is_rejected():
    with pytest.raises(ValueError):
        ConvolutionFilter(ConvolutionSettings(kernel_width=4))
    with pytest.raises(ValueError):
        ConvolutionFilter(mask=np.ones((2, 2)))
    with pytest.raises(ValueError):
        ConvolutionFilter(mask=np.ones((3, 5)))


def test_invalid_buffers_are_rejected(executor):
    filt = _filter()
    a = allocate_raster(4, 4)
    with pytest.raises(ValueError):
        filt.apply(a, a, executor)
    with pytest.raises(ValueError):
        filt.apply(a, allocate_raster(4, 5), executor)
    with pytest.raises(ValueError):
        filt.apply(a, np.zeros((3, 4, 4), dtype=np.float64), executor)


def test_pass_count_must_be_positive():
    with pytest.raises(ValueError):
        ConvolutionFilter(ConvolutionSettings(nsteps=0))
