from __future__ import annotations
import logging
import numpy as np

from ..config import CHANNELS, MAX_PIXEL, NO_ALPHA_CHANNELS, EngineConfig, DEFAULT_CONFIG
from ..errors import DimensionMismatchError
from ..models.buffer import Buffer, saturate
from ..models.policies import AlphaOption
from .comparator_service import ComparatorService

logger = logging.getLogger(__name__)


class CompositingService:
    """
    Business-level helper for putting one Buffer on top of another.

    • merge()           – alpha "over" compositing at an offset
    • similarity_mask() – tiles a block across a buffer and scores each tile
    Both return a **new** Buffer sized like their first argument.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or DEFAULT_CONFIG
        self.comparator = ComparatorService(self.config)

    # --------------------------------------------------------------
    def merge(self, background: Buffer, foreground: Buffer, offset_x: int = 0, offset_y: int = 0) -> Buffer:
        """
        Composite `foreground` over `background` with its top-left corner at
        (offset_x, offset_y). Foreground pixels landing outside the
        background are dropped.

        With αa, αb the background/foreground alpha in [0, 1]:
            αOut = αa·(1-αb) + αb
            c    = (ca·αa·(1-αb) + cb·αb) / αOut
        Pixels where both alphas are 0 stay untouched.
        """
        width, height = background.size
        out = background.pixels.copy()

        x0, y0 = max(offset_x, 0), max(offset_y, 0)
        x1 = min(offset_x + foreground.width, width)
        y1 = min(offset_y + foreground.height, height)
        if x0 >= x1 or y0 >= y1:
            logger.debug(f"Foreground at ({offset_x}, {offset_y}) misses the {width}x{height} background")
            return Buffer(width, height, out)

        dst = out[y0:y1, x0:x1].astype(np.float64)
        src = foreground.pixels[y0 - offset_y:y1 - offset_y, x0 - offset_x:x1 - offset_x].astype(np.float64)

        alpha_a = dst[..., NO_ALPHA_CHANNELS] / MAX_PIXEL
        alpha_b = src[..., NO_ALPHA_CHANNELS] / MAX_PIXEL
        weight_a = alpha_a * (1.0 - alpha_b)
        alpha_out = weight_a + alpha_b

        # αOut is 0 only when both alphas are 0
        visible = alpha_out > 0
        safe_out = np.where(visible, alpha_out, 1.0)

        blended = np.empty_like(dst)
        blended[..., :NO_ALPHA_CHANNELS] = (
            dst[..., :NO_ALPHA_CHANNELS] * weight_a[..., np.newaxis]
            + src[..., :NO_ALPHA_CHANNELS] * alpha_b[..., np.newaxis]
        ) / safe_out[..., np.newaxis]
        blended[..., NO_ALPHA_CHANNELS] = alpha_out * MAX_PIXEL

        out[y0:y1, x0:x1] = saturate(np.where(visible[..., np.newaxis], blended, dst))
        return Buffer(width, height, out)

    # --------------------------------------------------------------
    def similarity_mask(
        self,
        main: Buffer,
        block: Buffer,
        offset_x: int = 0,
        offset_y: int = 0,
        alpha: AlphaOption | str | None = None,
        undefined_score: float | None = None,
    ) -> Buffer:
        """
        Stamp `block` as a repeating tile over `main` and score every placement.

        The grid is anchored at the offset folded into
        [-block.width, 0) × [-block.height, 0). Each tile's score is the
        comparator sum (MULTIPLY policy by default, missing main pixels cost
        `undefined_score`) divided by the tile's RGB channel count, so
        0 = identical and 255 = maximally dissimilar.

        Returns:
            Buffer sized like `main`, every pixel [0, 0, 0, score of its tile].
        """
        block_w, block_h = block.size
        if block_w == 0 or block_h == 0:
            raise DimensionMismatchError(f"Block must not be empty, got {block_w}x{block_h}")
        alpha = AlphaOption(alpha or self.config.similarity_alpha)
        if undefined_score is None:
            undefined_score = self.config.undefined_score

        width, height = main.size
        start_x = offset_x % block_w - block_w
        start_y = offset_y % block_h - block_h
        tiles_x = -(-(width - start_x) // block_w)
        tiles_y = -(-(height - start_y) // block_h)
        logger.debug(
            f"Similarity scan of {width}x{height} with {block_w}x{block_h} block: "
            f"{tiles_x}x{tiles_y} tiles from ({start_x}, {start_y})"
        )

        # canvas aligned on the tile grid; cells outside `main` stay absent
        canvas = np.zeros((tiles_y * block_h, tiles_x * block_w, CHANNELS), dtype=np.float64)
        present = np.zeros(canvas.shape[:2], dtype=bool)
        top, left = -start_y, -start_x
        canvas[top:top + height, left:left + width] = main.pixels
        present[top:top + height, left:left + width] = True

        n_tiles, tile_size = tiles_y * tiles_x, block_h * block_w
        tiles = (canvas.reshape(tiles_y, block_h, tiles_x, block_w, CHANNELS)
                       .transpose(0, 2, 1, 3, 4)
                       .reshape(n_tiles * tile_size, CHANNELS))
        tile_present = (present.reshape(tiles_y, block_h, tiles_x, block_w)
                               .transpose(0, 2, 1, 3)
                               .reshape(n_tiles, tile_size))
        block_px = np.tile(block.pixels.reshape(tile_size, CHANNELS), (n_tiles, 1))

        distances = self.comparator.pixel_distances(tiles, block_px, alpha).reshape(n_tiles, tile_size)
        distances = np.where(tile_present, distances, undefined_score)
        scores = distances.sum(axis=1) / (tile_size * NO_ALPHA_CHANNELS)

        score_canvas = np.repeat(np.repeat(scores.reshape(tiles_y, tiles_x), block_h, axis=0), block_w, axis=1)
        out = np.zeros((height, width, CHANNELS), dtype=np.uint8)
        out[..., NO_ALPHA_CHANNELS] = saturate(score_canvas[top:top + height, left:left + width])
        return Buffer(width, height, out)
