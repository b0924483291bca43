from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import os

from dotenv import load_dotenv

from .models.policies import AlphaOption, EdgePolicy

# Load environment variables
load_dotenv()

# ─── Fixed buffer format ─────────────────────────────────────────
CHANNELS = 4
NO_ALPHA_CHANNELS = 3
MAX_PIXEL = 0xFF
MIN_PIXEL = 0x00
DEFAULT_ALPHA = 0xFF

# Default RGB weights for grayscaling: 21 % red, 72 % green, 7 % blue
TRUE_GRAY_RATIO: Tuple[float, float, float] = (0.2125, 0.7154, 0.0721)


@dataclass(frozen=True)
class EngineConfig:
    """
    Value-object holding the tunable defaults of the transform engine.
    Services take one explicitly; `from_env()` builds it from PIXELBUF_* vars.
    """
    gray_ratio: Tuple[float, float, float] = TRUE_GRAY_RATIO
    binarize_tolerance: int = 127
    undefined_score: float = float(MAX_PIXEL * NO_ALPHA_CHANNELS)
    edge_policy: EdgePolicy = EdgePolicy.PRESERVE
    similarity_alpha: AlphaOption = AlphaOption.MULTIPLY

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Read overrides from the environment (and a `.env` file, if present)."""
        ratio_raw = os.getenv("PIXELBUF_GRAY_RATIO")
        gray_ratio = TRUE_GRAY_RATIO
        if ratio_raw:
            parts = [float(p) for p in ratio_raw.split(",") if p.strip()]
            if len(parts) != NO_ALPHA_CHANNELS:
                raise ValueError(f"PIXELBUF_GRAY_RATIO needs 3 weights, got {ratio_raw!r}")
            gray_ratio = tuple(parts)

        return cls(
            gray_ratio=gray_ratio,
            binarize_tolerance=int(os.getenv("PIXELBUF_BINARIZE_TOLERANCE", "127")),
            undefined_score=float(os.getenv("PIXELBUF_UNDEFINED_SCORE", str(MAX_PIXEL * NO_ALPHA_CHANNELS))),
            edge_policy=EdgePolicy(os.getenv("PIXELBUF_EDGE_POLICY", "preserve")),
            similarity_alpha=AlphaOption(os.getenv("PIXELBUF_SIMILARITY_ALPHA", "multiply")),
        )


DEFAULT_CONFIG = EngineConfig.from_env()
