"""
pixelbuf – immutable RGBA pixel buffers with convolution, compositing,
crop/pad and block-similarity scoring.
"""
from .config import (
    CHANNELS, NO_ALPHA_CHANNELS, MAX_PIXEL, MIN_PIXEL, DEFAULT_ALPHA, TRUE_GRAY_RATIO,
    EngineConfig,
)
from .errors import (
    PixelBufferError, DimensionMismatchError, InvalidKernelShapeError, LengthMismatchError,
)
from .models.buffer import Buffer
from .models.kernel import KERNELS
from .models.policies import AlphaOption, EdgePolicy
from .api import (
    from_object, to_object, to_no_alpha_object,
    find_kernel_indices, convolve, resize, merge, similarity_mask,
    compare_pixels, compare_multiple_pixels,
    manipulate_channels, monochromize, binarize_colors, group_colors,
)

__version__ = "1.0.0"
