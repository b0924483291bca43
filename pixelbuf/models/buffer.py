from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple
import numpy as np

from ..config import CHANNELS, NO_ALPHA_CHANNELS, DEFAULT_ALPHA, MAX_PIXEL, MIN_PIXEL
from ..errors import DimensionMismatchError


def saturate(values) -> np.ndarray:
    """
    Round half-to-even and clamp into [0, 255], the way a clamped byte
    array stores numbers. Returns a uint8 array.
    """
    arr = np.asarray(values)
    if arr.dtype == np.uint8:
        return arr.copy()
    if np.issubdtype(arr.dtype, np.floating):
        arr = np.rint(arr)
    return np.clip(arr, MIN_PIXEL, MAX_PIXEL).astype(np.uint8)


def _as_dimension(value) -> int:
    """Whole-number width / height as a plain int; 2.0 is fine, 1.5 is not."""
    try:
        as_int = int(value)
    except (TypeError, ValueError) as err:
        raise DimensionMismatchError(f"Buffer dimension must be an integer, got {value!r}") from err
    if as_int != value:
        raise DimensionMismatchError(f"Buffer dimension must be an integer, got {value!r}")
    return as_int


def normalize_rgba(width: int, height: int, data) -> np.ndarray:
    """
    Validate `data` against width × height and return a fresh flat RGBA
    uint8 array. 3-channel data gets an opaque alpha channel appended.
    """
    if width < 0 or height < 0:
        raise DimensionMismatchError(f"Negative buffer dimensions {width}x{height}")

    if isinstance(data, (bytes, bytearray, memoryview)):
        data = np.frombuffer(data, dtype=np.uint8)
    try:
        flat = saturate(np.asarray(data).reshape(-1))
    except ValueError as err:  # ragged rows
        raise DimensionMismatchError(f"Image data must be a flat or evenly nested sequence: {err}") from err
    n_pixels = width * height

    if flat.size == n_pixels * CHANNELS:
        return flat
    if flat.size == n_pixels * NO_ALPHA_CHANNELS:
        rgb = flat.reshape(n_pixels, NO_ALPHA_CHANNELS)
        alpha = np.full((n_pixels, 1), DEFAULT_ALPHA, dtype=np.uint8)
        return np.hstack([rgb, alpha]).reshape(-1)

    raise DimensionMismatchError(
        f"Image data length {flat.size} doesn't match {width}x{height}x"
        f"{NO_ALPHA_CHANNELS} or {width}x{height}x{CHANNELS}"
    )


@dataclass(frozen=True, eq=False)
class Buffer:
    """
    Immutable RGBA pixel buffer.
    `data` is a flat, read-only uint8 array of length width*height*4;
    RGB input is widened to RGBA (alpha 255) on construction.
    """
    width: int
    height: int
    data: np.ndarray = field(repr=False)

    def __post_init__(self):
        width, height = _as_dimension(self.width), _as_dimension(self.height)
        data = normalize_rgba(width, height, self.data)
        data.flags.writeable = False
        object.__setattr__(self, "width", width)
        object.__setattr__(self, "height", height)
        object.__setattr__(self, "data", data)

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def pixels(self) -> np.ndarray:
        """Read-only (H, W, 4) view of `data`."""
        return self.data.reshape(self.height, self.width, CHANNELS)

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        start = (y * self.width + x) * CHANNELS
        return tuple(self.data[start:start + CHANNELS].tolist())

    def __eq__(self, other):
        if not isinstance(other, Buffer):
            return NotImplemented
        return (self.width == other.width
                and self.height == other.height
                and np.array_equal(self.data, other.data))

    def __hash__(self):
        return hash((self.width, self.height, self.data.tobytes()))
