"""
Functional surface of pixelbuf: one free function per operation, each
delegating to a default-configured service. Build the services yourself
with an `EngineConfig` for non-default behaviour.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .models.buffer import Buffer
from .models.policies import AlphaOption, EdgePolicy
from .repositories.buffer_repository import BufferRepository
from .services.comparator_service import ComparatorService
from .services.compositing_service import CompositingService
from .services.convolution_service import ConvolutionService
from .services.geometry_service import GeometryService
from .services.kernel_index_service import KernelIndexService
from .services.pixel_service import PixelCallback, PixelService

_buffers = BufferRepository()
_comparator = ComparatorService()
_compositor = CompositingService()
_convolution = ConvolutionService()
_geometry = GeometryService()
_kernel_index = KernelIndexService()
_pixels = PixelService()


# ─── records ─────────────────────────────────────────────────────
def from_object(record: Dict[str, Any]) -> Buffer:
    return _buffers.from_object(record)


def to_object(buffer: Buffer) -> Dict[str, Any]:
    return _buffers.to_object(buffer)


def to_no_alpha_object(buffer: Buffer) -> Dict[str, Any]:
    return _buffers.to_no_alpha_object(buffer)


# ─── core engine ─────────────────────────────────────────────────
def find_kernel_indices(
    image_dims: Tuple[int, int],
    pixel_coord: Tuple[int, int],
    kernel_dims: Tuple[int, int],
) -> List[Optional[int]]:
    return _kernel_index.find_kernel_indices(image_dims, pixel_coord, kernel_dims)


def convolve(buffer: Buffer, kernel, edge_policy: EdgePolicy | str | None = None) -> Buffer:
    return _convolution.convolve(buffer, kernel, edge_policy)


def resize(buffer: Buffer, offset_x: int, offset_y: int, width: int, height: int) -> Buffer:
    return _geometry.resize(buffer, offset_x, offset_y, width, height)


def merge(background: Buffer, foreground: Buffer, offset_x: int = 0, offset_y: int = 0) -> Buffer:
    return _compositor.merge(background, foreground, offset_x, offset_y)


def similarity_mask(
    main: Buffer,
    block: Buffer,
    offset_x: int = 0,
    offset_y: int = 0,
    alpha: AlphaOption | str | None = None,
    undefined_score: float | None = None,
) -> Buffer:
    return _compositor.similarity_mask(main, block, offset_x, offset_y, alpha, undefined_score)


def compare_pixels(a: Sequence[float], b: Sequence[float], alpha: AlphaOption | str = AlphaOption.IGNORE) -> float:
    return _comparator.compare_pixels(a, b, alpha)


def compare_multiple_pixels(
    seq_a: Sequence[Optional[Sequence[float]]],
    seq_b: Sequence[Optional[Sequence[float]]],
    alpha: AlphaOption | str = AlphaOption.IGNORE,
    undefined_score: float | None = None,
) -> float:
    return _comparator.compare_multiple_pixels(seq_a, seq_b, alpha, undefined_score)


# ─── per-pixel recolouring ───────────────────────────────────────
def manipulate_channels(buffer: Buffer, callback: PixelCallback, with_index: bool = False) -> Buffer:
    return _pixels.manipulate_channels(buffer, callback, with_index)


def monochromize(buffer: Buffer, rgb_ratio: Sequence[float] | None = None) -> Buffer:
    return _pixels.monochromize(buffer, rgb_ratio)


def binarize_colors(buffer: Buffer, tolerance: int | None = None) -> Buffer:
    return _pixels.binarize_colors(buffer, tolerance)


def group_colors(buffer: Buffer, ratios: Sequence[float]) -> Buffer:
    return _pixels.group_colors(buffer, ratios)
