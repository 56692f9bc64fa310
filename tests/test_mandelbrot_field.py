from __future__ import annotations

import numpy as np
import pytest

from fractals.base import FieldSettings
from fractals.mandelbrot import MandelbrotField, pixel_to_complex
from utils.raster import allocate_raster


def _render(settings: FieldSettings, executor):
    raster = allocate_raster(settings.height, settings.width)
    gen = MandelbrotField(settings)
    inside = gen.generate(raster, executor)
    return raster, inside, gen.last_counts


def test_single_task_matches_four_way_partition(executor, two_segment_gradient):
    base = dict(width=4, height=4, ratio=0.15, max_iter=50, gradient=two_segment_gradient)
    single, inside_1, counts_1 = _render(FieldSettings(task_size=1, **base), executor)
    split, inside_4, counts_4 = _render(FieldSettings(task_size=4, **base), executor)

    np.testing.assert_array_equal(single, split)
    assert inside_1 == inside_4
    assert len(counts_1) == 1
    assert len(counts_4) == 4
    assert sum(counts_4) == inside_4


@pytest.mark.parametrize("task_size", [2, 4, 8, 16])
def test_output_is_independent_of_partition_count(executor, task_size):
    base = dict(width=16, height=12, max_iter=256)
    ref, ref_inside, _ = _render(FieldSettings(task_size=1, **base), executor)
    out, inside, _ = _render(FieldSettings(task_size=task_size, **base), executor)
    np.testing.assert_array_equal(ref, out)
    assert inside == ref_inside


def test_repeated_runs_are_identical(executor):
    st = FieldSettings(width=24, height=16, max_iter=128, task_size=8)
    a, inside_a, _ = _render(st, executor)
    b, inside_b, _ = _render(st, executor)
    np.testing.assert_array_equal(a, b)
    assert inside_a == inside_b


def test_inside_count_matches_manual_classification(executor, flat_gradient):
    from kernel_sources.cpu.mandelbrot import escape_time, sample_point

    st = FieldSettings(width=6, height=5, ratio=0.15, max_iter=40, task_size=3,
                       gradient=flat_gradient)
    _, inside, _ = _render(st, executor)

    expected = 0
    for i in range(st.width):
        for j in range(st.height):
            n, _ = escape_time(sample_point(i, j, st.width, st.height, 0.15), 40, 4.0)
            expected += n >= 40
    assert inside == expected


def test_remainder_columns_are_not_written(executor, flat_gradient):
    st = FieldSettings(width=10, height=2, ratio=0.15, max_iter=20, task_size=4,
                       gradient=flat_gradient)
    raster, _, _ = _render(st, executor)
    assert (raster[:, :, :8] == 200).all()
    assert (raster[:, :, 8:] == 0).all()


def test_ratio_defaults_to_aspect():
    assert FieldSettings(width=1536, height=1024).effective_ratio == 1.5
    assert FieldSettings(ratio=0.15).effective_ratio == 0.15


def test_pixel_to_complex():
    assert pixel_to_complex(0, 0, 4, 4, 0.15) == pytest.approx((-1.10, -0.35))
    re, im = pixel_to_complex(2, 2, 4, 4, 0.15)
    assert re == pytest.approx(0.5 * 0.015 - 1.10)
    assert im == pytest.approx(0.05 - 0.35)


def test_raster_must_match_settings(executor):
    gen = MandelbrotField(FieldSettings(width=8, height=8, task_size=2))
    with pytest.raises(ValueError):
        gen.generate(allocate_raster(4, 8), executor)


def test_uncovered_intensity_aborts_the_run(executor):
    from coloring.gradient import Gradient, GradientSegment

    narrow = Gradient([GradientSegment((0, 0, 0), (1, 1, 1), 0.9, 1.0, 1)])
    # ratio 30 spans real [-1.1, 1.15]; the right half escapes within a few steps
    st = FieldSettings(width=4, height=4, ratio=30.0, max_iter=50, task_size=2,
                       gradient=narrow)
    with pytest.raises(ValueError):
        _render(st, executor)
