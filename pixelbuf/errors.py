class PixelBufferError(ValueError):
    """Base class for every error raised by pixelbuf."""


class DimensionMismatchError(PixelBufferError):
    """Buffer data length does not match width × height × channels."""


class InvalidKernelShapeError(PixelBufferError):
    """Kernel width or height is even, or the weights are not a 2D matrix."""


class LengthMismatchError(PixelBufferError):
    """Two pixel sequences handed to the comparator differ in length."""
