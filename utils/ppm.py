from __future__ import annotations

import io
import os
from typing import Union

import numpy as np

from utils.raster import validate_raster

MAX_VALUE = 255


def _header(width: int, height: int) -> str:
    return f"P3\n{width} {height}\n{MAX_VALUE}"


def _pixels(raster: np.ndarray) -> np.ndarray:
    # (C, H, W) -> one row per pixel, top-to-bottom, left-to-right
    return np.ascontiguousarray(raster.transpose(1, 2, 0)).reshape(-1, raster.shape[0])


def _write(fh, raster: np.ndarray) -> None:
    _, h, w = raster.shape
    np.savetxt(fh, _pixels(raster), fmt=" %d %d %d",
               header=_header(w, h), comments="")


def format_ppm(raster: np.ndarray) -> str:
    """
    Serialize a (3, H, W) raster as ASCII PPM (P3).

    Layout:
        P3
        <width> <height>
        255
         R G B        (one line per pixel, row-major)
    """
    validate_raster(raster)
    buf = io.StringIO()
    _write(buf, raster)
    return buf.getvalue()


def write_ppm(path: Union[str, os.PathLike], raster: np.ndarray) -> None:
    validate_raster(raster)
    with open(path, "w", newline="\n") as f:
        _write(f, raster)
