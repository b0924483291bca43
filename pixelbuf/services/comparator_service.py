from __future__ import annotations
from typing import Optional, Sequence
import numpy as np

from ..config import CHANNELS, DEFAULT_ALPHA, MAX_PIXEL, NO_ALPHA_CHANNELS, EngineConfig, DEFAULT_CONFIG
from ..errors import LengthMismatchError
from ..models.policies import AlphaOption


class ComparatorService:
    """
    Pixel and pixel-sequence distance scores. Lower means more similar.

    The RGB distance is always L1 (sum of absolute channel differences).
    With β = alpha / 255 (alpha defaults to 255 when missing):

        IGNORE        Σ |a_i - b_i|
        COMPARE       Σ |a_i - b_i| + |αa - αb|
        IGNORE_FIRST  Σ |a_i - b_i·βb|
        MULTIPLY      Σ |a_i·βa - b_i·βb|
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or DEFAULT_CONFIG

    # ─── helpers ─────────────────────────────────────────────────
    @staticmethod
    def _as_pixel_array(pixels) -> np.ndarray:
        """(N, 3|4) or single pixel → float (N, 4) with alpha filled in."""
        arr = np.asarray(pixels, dtype=np.float64)
        if arr.ndim == 1:
            arr = arr[np.newaxis, :]
        if arr.ndim != 2 or arr.shape[1] not in (NO_ALPHA_CHANNELS, CHANNELS):
            raise ValueError(f"Pixels must have 3 or 4 channels, got shape {arr.shape}")
        if arr.shape[1] == NO_ALPHA_CHANNELS:
            alpha = np.full((arr.shape[0], 1), DEFAULT_ALPHA, dtype=np.float64)
            arr = np.hstack([arr, alpha])
        return arr

    @staticmethod
    def _widen(pixel: Sequence[float]) -> tuple:
        pixel = tuple(pixel)
        return pixel if len(pixel) == CHANNELS else pixel + (DEFAULT_ALPHA,)

    # ─── public API ──────────────────────────────────────────────
    def pixel_distances(self, a, b, alpha: AlphaOption | str = AlphaOption.IGNORE) -> np.ndarray:
        """
        Vectorised per-pair score for two (N, 3|4) arrays of pixels.
        Returns a float array of shape (N,).
        """
        alpha = AlphaOption(alpha)
        a = self._as_pixel_array(a)
        b = self._as_pixel_array(b)
        if a.shape[0] != b.shape[0]:
            raise LengthMismatchError(f"Cannot compare {a.shape[0]} pixels with {b.shape[0]}")

        a_rgb, b_rgb = a[:, :NO_ALPHA_CHANNELS], b[:, :NO_ALPHA_CHANNELS]
        a_alpha, b_alpha = a[:, NO_ALPHA_CHANNELS], b[:, NO_ALPHA_CHANNELS]

        if alpha is AlphaOption.IGNORE:
            return np.abs(a_rgb - b_rgb).sum(axis=1)
        if alpha is AlphaOption.COMPARE:
            return np.abs(a_rgb - b_rgb).sum(axis=1) + np.abs(a_alpha - b_alpha)

        b_weighted = b_rgb * (b_alpha / MAX_PIXEL)[:, np.newaxis]
        if alpha is AlphaOption.IGNORE_FIRST:
            return np.abs(a_rgb - b_weighted).sum(axis=1)

        a_weighted = a_rgb * (a_alpha / MAX_PIXEL)[:, np.newaxis]
        return np.abs(a_weighted - b_weighted).sum(axis=1)

    def compare_pixels(
        self,
        a: Sequence[float],
        b: Sequence[float],
        alpha: AlphaOption | str = AlphaOption.IGNORE,
    ) -> float:
        """
        Compare one `[r, g, b, a?]` pixel against another.

        Returns:
            float: 0 for identical pixels, growing with dissimilarity.
        """
        return float(self.pixel_distances(a, b, alpha)[0])

    def compare_multiple_pixels(
        self,
        seq_a: Sequence[Optional[Sequence[float]]],
        seq_b: Sequence[Optional[Sequence[float]]],
        alpha: AlphaOption | str = AlphaOption.IGNORE,
        undefined_score: float | None = None,
    ) -> float:
        """
        Sum of `compare_pixels` over paired elements.

        Args:
            seq_a, seq_b: equally long sequences of pixels; None marks a
                missing pixel
            alpha: alpha handling policy
            undefined_score: flat score for any pair holding a None
                (defaults to 765 = 255 * 3, the largest unweighted RGB distance)

        Raises:
            LengthMismatchError: if the sequences differ in length.
        """
        if len(seq_a) != len(seq_b):
            raise LengthMismatchError(f"Lengths of pixel sequences must match ({len(seq_a)} != {len(seq_b)})")
        if undefined_score is None:
            undefined_score = self.config.undefined_score

        if isinstance(seq_a, np.ndarray) and isinstance(seq_b, np.ndarray):
            if len(seq_a) == 0:
                return 0.0
            return float(self.pixel_distances(seq_a, seq_b, alpha).sum())

        present_a, present_b = [], []
        missing = 0
        for pa, pb in zip(seq_a, seq_b):
            if pa is None or pb is None:
                missing += 1
                continue
            present_a.append(self._widen(pa))
            present_b.append(self._widen(pb))

        score = float(missing * undefined_score)
        if present_a:
            score += float(self.pixel_distances(present_a, present_b, alpha).sum())
        return score
