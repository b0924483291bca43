import pytest

import pixelbuf
from pixelbuf import InvalidKernelShapeError
from pixelbuf.services.kernel_index_service import KernelIndexService

# 3x3 image:
#   0 1 2
#   3 4 5
#   6 7 8
EXPECTED_3X3 = [
    [4, 3, None, 1, 0, None, None, None, None],
    [5, 4, 3, 2, 1, 0, None, None, None],
    [None, 5, 4, None, 2, 1, None, None, None],
    [7, 6, None, 4, 3, None, 1, 0, None],
    [8, 7, 6, 5, 4, 3, 2, 1, 0],
    [None, 8, 7, None, 5, 4, None, 2, 1],
    [None, None, None, 7, 6, None, 4, 3, None],
    [None, None, None, 8, 7, 6, 5, 4, 3],
    [None, None, None, None, 8, 7, None, 5, 4],
]


@pytest.mark.parametrize("y", range(3))
@pytest.mark.parametrize("x", range(3))
def test_every_coordinate_of_3x3(x, y):
    assert pixelbuf.find_kernel_indices((3, 3), (x, y), (3, 3)) == EXPECTED_3X3[y * 3 + x]


def test_corner_has_four_present_cells():
    indices = pixelbuf.find_kernel_indices((3, 3), (0, 0), (3, 3))
    present = [i for i in indices if i is not None]
    assert sorted(present) == [0, 1, 3, 4]
    assert indices.count(None) == 5


@pytest.mark.parametrize("coord", [(0, 0), (4, 1), (-3, -3), (10, 10)])
def test_length_is_always_kernel_area(coord):
    assert len(pixelbuf.find_kernel_indices((5, 2), coord, (5, 3))) == 15


def test_far_outside_is_all_absent():
    assert pixelbuf.find_kernel_indices((3, 3), (10, 10), (3, 3)) == [None] * 9


def test_rectangular_window_on_wide_image():
    # 5x1 image, 3 wide x 1 high window centred on x=2
    assert pixelbuf.find_kernel_indices((5, 1), (2, 0), (3, 1)) == [3, 2, 1]


def test_single_cell_kernel():
    assert pixelbuf.find_kernel_indices((4, 4), (2, 3), (1, 1)) == [14]


def test_offsets_start_bottom_right():
    offsets = KernelIndexService.kernel_offsets((3, 3))
    assert offsets[0] == (1, 1)
    assert offsets[4] == (0, 0)
    assert offsets[-1] == (-1, -1)


@pytest.mark.parametrize("kernel_dims", [(2, 3), (3, 2), (0, 1), (4, 4)])
def test_even_kernel_dims_raise(kernel_dims):
    with pytest.raises(InvalidKernelShapeError):
        pixelbuf.find_kernel_indices((3, 3), (1, 1), kernel_dims)
