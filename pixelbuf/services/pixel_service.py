from __future__ import annotations
from typing import Callable, List, Sequence, Tuple
import logging
import math
import numpy as np

from ..config import (
    CHANNELS, NO_ALPHA_CHANNELS, DEFAULT_ALPHA, MAX_PIXEL, MIN_PIXEL,
    EngineConfig, DEFAULT_CONFIG,
)
from ..models.buffer import Buffer, saturate

logger = logging.getLogger(__name__)

Pixel = Tuple[int, int, int, int]
PixelCallback = Callable[..., Sequence[float]]


def _clamp_channel(v: float) -> int:
    return int(min(max(round(v), MIN_PIXEL), MAX_PIXEL))


def _with_alpha(pixel: Sequence[float]) -> Pixel:
    pixel = tuple(pixel)
    if len(pixel) == NO_ALPHA_CHANNELS:
        return pixel + (DEFAULT_ALPHA,)
    if len(pixel) != CHANNELS:
        raise ValueError(f"Pixel must have 3 or 4 channels, got {pixel}")
    return pixel


def group_levels(ratios: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Interval upper bounds and representative values for `group_colors`.

    For ratios [1, 1, 1]: bounds [0, 84.3, 169.7, 255], values [0, 127, 255],
    so 0-84 → 0, 85-169 → 127, 170-255 → 255.
    """
    ratios = [float(r) for r in ratios]
    total = sum(ratios)
    if len(ratios) < 2 or total <= 0:
        raise ValueError(f"Need at least two ratios with a positive sum, got {ratios}")

    bounds = [-1.0]
    for ratio in ratios:
        bounds.append(bounds[-1] + (MAX_PIXEL + 1) / total * ratio)
    bounds[0] = 0.0

    values = [MIN_PIXEL]
    for i in range(1, len(ratios) - 1):
        values.append(math.floor((bounds[i] + bounds[i + 1]) / 2 + 0.5))
    values.append(MAX_PIXEL)
    return np.asarray(bounds), np.asarray(values, dtype=np.int64)


def _group_index(bounds: np.ndarray, values: np.ndarray, channel):
    # first bound >= value, minus one; 0 falls into the first interval
    idx = np.searchsorted(bounds, channel, side="left") - 1
    return np.clip(idx, 0, len(values) - 1)


class PixelService:
    """
    Elementwise recolouring.
    The *-er methods build per-pixel callbacks; the others map a whole Buffer.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or DEFAULT_CONFIG

    # ─── per-pixel callbacks ─────────────────────────────────────
    def monochromizer(self, rgb_ratio: Sequence[float] | None = None) -> Callable[[Sequence[float]], Pixel]:
        """
        All RGB channels become r·w0 + g·w1 + b·w2; alpha is kept.

        Example: monochromizer([1, 0, 0])((244, 127, 63)) == (244, 244, 244, 255)
        """
        w0, w1, w2 = self.config.gray_ratio if rgb_ratio is None else rgb_ratio

        def callback(pixel: Sequence[float]) -> Pixel:
            r, g, b, a = _with_alpha(pixel)
            gray = _clamp_channel(r * w0 + g * w1 + b * w2)
            return gray, gray, gray, a

        return callback

    def binarizer(self, tolerance: int | None = None) -> Callable[[Sequence[float]], Pixel]:
        """Every channel, alpha included, becomes 255 if above `tolerance`, else 0."""
        if tolerance is None:
            tolerance = self.config.binarize_tolerance

        def callback(pixel: Sequence[float]) -> Pixel:
            return tuple(MAX_PIXEL if ch > tolerance else MIN_PIXEL for ch in _with_alpha(pixel))

        return callback

    def color_grouper(self, ratios: Sequence[float]) -> Callable[[Sequence[float]], Pixel]:
        """
        Quantise RGB channels into len(ratios) levels between 0 and 255.

        Example: color_grouper([1, 2, 1])((60, 120, 180)) == (0, 127, 127, 255)
        """
        bounds, values = group_levels(ratios)

        def callback(pixel: Sequence[float]) -> Pixel:
            r, g, b, a = _with_alpha(pixel)
            grouped = values[_group_index(bounds, values, [r, g, b])]
            return (*(int(v) for v in grouped), a)

        return callback

    # ─── whole-buffer transforms ─────────────────────────────────
    def manipulate_channels(self, buffer: Buffer, callback: PixelCallback, with_index: bool = False) -> Buffer:
        """
        Map every pixel through `callback` and return a new Buffer.

        The callback receives an (r, g, b, a) tuple of ints (plus the pixel's
        linear index when `with_index` is set) and returns 3 or 4 values.
        A missing alpha becomes 255; values are rounded and clamped.

        Example: manipulate_channels(buf, lambda p: (p[2], p[1], p[0]))  # RGB → BGR
        """
        logger.debug(f"Mapping {buffer.width * buffer.height} pixels through {callback!r}")
        results: List[Pixel] = []
        for index, pixel in enumerate(buffer.pixels.reshape(-1, CHANNELS).tolist()):
            pixel = tuple(pixel)
            mapped = callback(pixel, index) if with_index else callback(pixel)
            results.append(_with_alpha(mapped))

        data = saturate(np.asarray(results, dtype=np.float64).reshape(-1))
        return Buffer(buffer.width, buffer.height, data)

    def monochromize(self, buffer: Buffer, rgb_ratio: Sequence[float] | None = None) -> Buffer:
        weights = np.asarray(self.config.gray_ratio if rgb_ratio is None else rgb_ratio, dtype=np.float64)
        out = buffer.pixels.copy()
        gray = saturate(buffer.pixels[..., :NO_ALPHA_CHANNELS].astype(np.float64) @ weights)
        out[..., :NO_ALPHA_CHANNELS] = gray[..., np.newaxis]
        return Buffer(buffer.width, buffer.height, out)

    def binarize_colors(self, buffer: Buffer, tolerance: int | None = None) -> Buffer:
        """Monochromize first for a neat black / white image."""
        if tolerance is None:
            tolerance = self.config.binarize_tolerance
        out = np.where(buffer.data > tolerance, MAX_PIXEL, MIN_PIXEL).astype(np.uint8)
        return Buffer(buffer.width, buffer.height, out)

    def group_colors(self, buffer: Buffer, ratios: Sequence[float]) -> Buffer:
        bounds, values = group_levels(ratios)
        out = buffer.pixels.copy()
        rgb = buffer.pixels[..., :NO_ALPHA_CHANNELS]
        out[..., :NO_ALPHA_CHANNELS] = values[_group_index(bounds, values, rgb)]
        return Buffer(buffer.width, buffer.height, out)
