from typing import Any, Dict, Sequence
import numpy as np
from PIL import Image as PILImage

from ..config import CHANNELS, NO_ALPHA_CHANNELS
from ..errors import DimensionMismatchError
from ..models.buffer import Buffer


class BufferRepository:
    """
    Builds Buffer entities and converts them to and from plain records.
    No pixel math here.
    """

    @staticmethod
    def create_buffer(width: int, height: int, data) -> Buffer:
        return Buffer(width, height, data)

    @staticmethod
    def from_pixels(pixels: np.ndarray) -> Buffer:
        """Wrap an (H, W, 3|4) array. The array is copied."""
        if pixels.ndim != 3 or pixels.shape[2] not in (NO_ALPHA_CHANNELS, CHANNELS):
            raise DimensionMismatchError(f"Expected (H, W, 3|4) pixels, got shape {pixels.shape}")
        height, width = pixels.shape[:2]
        return Buffer(width, height, pixels)

    @staticmethod
    def blank(width: int, height: int, color: Sequence[int] = (0, 0, 0, 0)) -> Buffer:
        """Solid-colour buffer; RGB colours get alpha 255."""
        color = tuple(color)
        if len(color) not in (NO_ALPHA_CHANNELS, CHANNELS):
            raise ValueError(f"Colour must have 3 or 4 channels, got {color}")
        data = np.tile(np.asarray(color, dtype=np.int64), max(width, 0) * max(height, 0))
        return Buffer(width, height, data)

    @staticmethod
    def from_object(record: Dict[str, Any]) -> Buffer:
        """Same as Buffer(record["width"], record["height"], record["data"])."""
        try:
            width, height, data = record["width"], record["height"], record["data"]
        except KeyError as err:
            raise DimensionMismatchError(f"Buffer record is missing {err}") from err
        return Buffer(width, height, data)

    @staticmethod
    def to_object(buffer: Buffer) -> Dict[str, Any]:
        """RGBA record: width, height, data (a writable copy) and channels=4."""
        return {
            "width": buffer.width,
            "height": buffer.height,
            "data": buffer.data.copy(),
            "channels": CHANNELS,
        }

    @staticmethod
    def to_no_alpha_object(buffer: Buffer) -> Dict[str, Any]:
        """RGB record with the alpha channel stripped and channels=3."""
        rgb = buffer.pixels[..., :NO_ALPHA_CHANNELS]
        return {
            "width": buffer.width,
            "height": buffer.height,
            "data": np.ascontiguousarray(rgb).reshape(-1),
            "channels": NO_ALPHA_CHANNELS,
        }

    # ─── Pillow interop (in-memory only, no encoding) ─────────────
    @staticmethod
    def to_pil_image(buffer: Buffer) -> PILImage.Image:
        return PILImage.fromarray(buffer.pixels.copy())

    @classmethod
    def from_pil_image(cls, image: PILImage.Image) -> Buffer:
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls.from_pixels(np.asarray(image, dtype=np.uint8))
