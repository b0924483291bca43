import logging
import numpy as np

from ..config import CHANNELS
from ..errors import DimensionMismatchError
from ..models.buffer import Buffer

logger = logging.getLogger(__name__)


class GeometryService:
    """Crop / pad without resampling."""

    def resize(self, source: Buffer, offset_x: int, offset_y: int, new_width: int, new_height: int) -> Buffer:
        """
        Cut a new_width x new_height window out of `source`, top-left corner
        at (offset_x, offset_y). Window cells outside the source stay fully
        transparent, so negative offsets pad the leading edge.
        """
        if new_width < 0 or new_height < 0:
            raise DimensionMismatchError(f"Invalid target size {new_width}x{new_height}")
        logger.debug(
            f"Resizing {source.width}x{source.height} → {new_width}x{new_height} "
            f"from offset ({offset_x}, {offset_y})"
        )

        out = np.zeros((new_height, new_width, CHANNELS), dtype=np.uint8)

        # overlap in source coordinates
        src_l, src_t = max(offset_x, 0), max(offset_y, 0)
        src_r = min(offset_x + new_width, source.width)
        src_b = min(offset_y + new_height, source.height)

        if src_l < src_r and src_t < src_b:
            out[src_t - offset_y:src_b - offset_y, src_l - offset_x:src_r - offset_x] = \
                source.pixels[src_t:src_b, src_l:src_r]

        return Buffer(new_width, new_height, out)
