"""
Convolution kernels.
https://en.wikipedia.org/wiki/Kernel_(image_processing)

Weights are applied as a true convolution: K[r][c] multiplies the pixel at
offset (kw//2 - c, kh//2 - r) from the target.
"""
from __future__ import annotations
from typing import Dict
import numpy as np

from ..errors import InvalidKernelShapeError


def as_kernel(weights) -> np.ndarray:
    """
    Coerce a nested sequence / array into a float64 (kh, kw) matrix.
    Raises InvalidKernelShapeError for ragged, non-2D or even-sized input.
    """
    try:
        kernel = np.asarray(weights, dtype=np.float64)
    except ValueError as err:  # ragged rows
        raise InvalidKernelShapeError(f"Kernel rows must have equal length: {err}") from err

    if kernel.ndim != 2 or kernel.size == 0:
        raise InvalidKernelShapeError(f"Kernel must be a non-empty 2D matrix, got shape {kernel.shape}")

    kh, kw = kernel.shape
    if kw % 2 == 0 or kh % 2 == 0:
        raise InvalidKernelShapeError(f"Kernel must be odd x odd, got {kw}x{kh}")
    return kernel


def _frozen(rows) -> np.ndarray:
    arr = np.array(rows, dtype=np.float64)
    arr.flags.writeable = False
    return arr


_GAUSS5 = np.array([
    [1, 4, 6, 4, 1],
    [4, 16, 24, 16, 4],
    [6, 24, 36, 24, 6],
    [4, 16, 24, 16, 4],
    [1, 4, 6, 4, 1],
]) / 256

_UNSHARPEN = _GAUSS5.copy()
_UNSHARPEN[2, 2] = -476 / 256


KERNELS: Dict[str, np.ndarray] = {
    "identity": _frozen([[0, 0, 0], [0, 1, 0], [0, 0, 0]]),
    "box_blur": _frozen(np.full((3, 3), 1 / 9)),
    "ridge1": _frozen([[0, -1, 0], [-1, 4, -1], [0, -1, 0]]),
    "ridge2": _frozen([[-1, -1, -1], [-1, 8, -1], [-1, -1, -1]]),
    "gaussian_blur3": _frozen(np.array([[1, 2, 1], [2, 4, 2], [1, 2, 1]]) / 16),
    "gaussian_blur5": _frozen(_GAUSS5),
    "unsharpen": _frozen(-_UNSHARPEN),
    # ── directional (Sobel-like) ──────────────────────────────────
    "top": _frozen([[1, 2, 1], [0, 0, 0], [-1, -2, -1]]),
    "bottom": _frozen([[-1, -2, -1], [0, 0, 0], [1, 2, 1]]),
    "left": _frozen([[1, 0, -1], [2, 0, -2], [1, 0, -1]]),
    # last row is [-1, 0, 1] so that right == -left
    "right": _frozen([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]]),
    "top_left": _frozen([[2, 1, 0], [1, 0, -1], [0, -1, -2]]),
    "top_right": _frozen([[0, 1, 2], [-1, 0, 1], [-2, -1, 0]]),
    "bottom_left": _frozen([[0, -1, -2], [1, 0, -1], [2, 1, 0]]),
    "bottom_right": _frozen([[-2, -1, 0], [-1, 0, 1], [0, 1, 2]]),
}
