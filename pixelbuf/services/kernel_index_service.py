from typing import List, Optional, Tuple

from ..errors import InvalidKernelShapeError


class KernelIndexService:
    """
    Maps a kernel window centred on one pixel to linear pixel indices
    of the flat (row-major) image layout.
    """

    @staticmethod
    def kernel_offsets(kernel_dims: Tuple[int, int]) -> List[Tuple[int, int]]:
        """
        Relative (dx, dy) of every window cell, in index-list order:
        bottom-right cell first, right-to-left, bottom-to-top.

        The i-th entry pairs with the i-th row-major kernel weight, so
        weight K[r][c] lands on offset (kw//2 - c, kh//2 - r).
        """
        kw, kh = kernel_dims
        if kw <= 0 or kh <= 0 or kw % 2 == 0 or kh % 2 == 0:
            raise InvalidKernelShapeError(f"Kernel must be odd x odd, got {kw}x{kh}")
        half_w, half_h = kw // 2, kh // 2
        return [
            (dx, dy)
            for dy in range(half_h, -half_h - 1, -1)
            for dx in range(half_w, -half_w - 1, -1)
        ]

    def find_kernel_indices(
        self,
        image_dims: Tuple[int, int],
        pixel_coord: Tuple[int, int],
        kernel_dims: Tuple[int, int],
    ) -> List[Optional[int]]:
        """
        Args:
            image_dims: (width, height) of the image
            pixel_coord: (x, y) of the window centre
            kernel_dims: (kernel_width, kernel_height), both odd

        Returns:
            List of length kw*kh holding `row*width + col` for every window
            cell inside the image and None for cells outside it.
        """
        width, height = image_dims
        x, y = pixel_coord

        indices: List[Optional[int]] = []
        for dx, dy in self.kernel_offsets(kernel_dims):
            col, row = x + dx, y + dy
            if 0 <= col < width and 0 <= row < height:
                indices.append(row * width + col)
            else:
                indices.append(None)
        return indices

