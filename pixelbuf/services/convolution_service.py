from __future__ import annotations
import logging
import numpy as np

from ..config import DEFAULT_ALPHA, NO_ALPHA_CHANNELS, EngineConfig, DEFAULT_CONFIG
from ..models.buffer import Buffer, saturate
from ..models.kernel import as_kernel
from ..models.policies import EdgePolicy
from .kernel_index_service import KernelIndexService

logger = logging.getLogger(__name__)


class ConvolutionService:
    """
    Applies a weighted kernel over every pixel of a Buffer.
    *   Reads from the source snapshot, writes into a separate accumulator.
    *   Alpha is discarded: every output pixel is opaque.
    """

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or DEFAULT_CONFIG
        self.index_service = KernelIndexService()

    def convolve(self, buffer: Buffer, kernel, edge_policy: EdgePolicy | str | None = None) -> Buffer:
        """
        Convolve `buffer` with `kernel`.

        Args:
            buffer: source Buffer (left untouched)
            kernel: odd x odd weight matrix (nested lists or ndarray)
            edge_policy: PRESERVE copies border pixels whose window leaves the
                image; TRUNCATE sums only the cells that exist.
                Defaults to the configured policy.

        Returns:
            A new Buffer with the same dimensions.
        """
        weights = as_kernel(kernel)  # raises before any pixel work
        edge_policy = EdgePolicy(edge_policy or self.config.edge_policy)

        kh, kw = weights.shape
        half_w, half_h = kw // 2, kh // 2
        width, height = buffer.width, buffer.height
        logger.debug(f"Convolving {width}x{height} buffer with {kw}x{kh} kernel ({edge_policy.value})")

        src = buffer.pixels[..., :NO_ALPHA_CHANNELS].astype(np.float64)

        # zero frame so that absent cells contribute nothing
        padded = np.zeros((height + 2 * half_h, width + 2 * half_w, NO_ALPHA_CHANNELS))
        padded[half_h:half_h + height, half_w:half_w + width] = src

        acc = np.zeros((height, width, NO_ALPHA_CHANNELS))
        offsets = self.index_service.kernel_offsets((kw, kh))
        for weight, (dx, dy) in zip(weights.ravel(), offsets):
            if weight == 0:
                continue
            top, left = half_h + dy, half_w + dx
            acc += weight * padded[top:top + height, left:left + width]

        if edge_policy is EdgePolicy.PRESERVE:
            border = np.ones((height, width), dtype=bool)
            border[half_h:height - half_h, half_w:width - half_w] = False
            acc[border] = src[border]

        out = np.empty((height, width, NO_ALPHA_CHANNELS + 1), dtype=np.uint8)
        out[..., :NO_ALPHA_CHANNELS] = saturate(acc)
        out[..., NO_ALPHA_CHANNELS] = DEFAULT_ALPHA
        return Buffer(width, height, out)
