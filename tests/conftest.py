import pytest

from pixelbuf import Buffer

WIDTH = 3
HEIGHT = 2

RGBA = [
    60, 60, 60, 0xFF, 70, 80, 90, 0xFF, 70, 80, 90, 0xFF,
    0xFF, 0, 0, 0xFF, 0, 0xFF, 0, 0xFF, 0, 0, 0xFF, 0xFF,
]
RGB = [v for i, v in enumerate(RGBA) if i % 4 != 3]


def build_pixel(value):
    return [value] * 4


def flat(values):
    """[1, 2] -> [1, 1, 1, 1, 2, 2, 2, 2]"""
    return [ch for v in values for ch in build_pixel(v)]


@pytest.fixture
def rgba_buffer():
    return Buffer(WIDTH, HEIGHT, RGBA)


@pytest.fixture
def rgb_buffer():
    return Buffer(WIDTH, HEIGHT, RGB)


@pytest.fixture
def numbered_3x3():
    """3x3 buffer whose pixel k (row-major, 1-based) is [k, k, k, k]."""
    return Buffer(3, 3, flat(range(1, 10)))
