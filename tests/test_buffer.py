import numpy as np
import pytest
from PIL import Image as PILImage

import pixelbuf
from pixelbuf import Buffer, DimensionMismatchError
from pixelbuf.repositories.buffer_repository import BufferRepository

from .conftest import WIDTH, HEIGHT, RGBA, RGB


class TestConstruction:

    def test_rgba_data_is_stored_unchanged(self, rgba_buffer):
        assert rgba_buffer.data.tolist() == RGBA
        assert rgba_buffer.width == WIDTH
        assert rgba_buffer.height == HEIGHT

    def test_rgb_data_gets_opaque_alpha(self, rgba_buffer, rgb_buffer):
        assert rgb_buffer == rgba_buffer
        assert len(rgb_buffer.data) == WIDTH * HEIGHT * 4
        assert set(rgb_buffer.data[3::4].tolist()) == {255}

    @pytest.mark.parametrize("width, height", [(1, 1), (2, 5), (7, 3)])
    def test_any_rgb_length_is_widened(self, width, height):
        rng = np.random.default_rng(width * height)
        data = rng.integers(0, 256, width * height * 3, dtype=np.uint8)
        buf = Buffer(width, height, data)
        assert len(buf.data) == width * height * 4
        assert (buf.data[3::4] == 255).all()
        assert np.array_equal(buf.pixels[..., :3].reshape(-1), data)

    def test_accepts_bytes(self):
        buf = Buffer(1, 1, bytes([1, 2, 3]))
        assert buf.pixel(0, 0) == (1, 2, 3, 255)

    @pytest.mark.parametrize("data", [RGBA[:-1], RGB[:-1], [], RGBA + [0]])
    def test_rejects_mismatching_length(self, data):
        with pytest.raises(DimensionMismatchError):
            Buffer(WIDTH, HEIGHT, data)

    def test_rejects_negative_dimensions(self):
        with pytest.raises(DimensionMismatchError):
            Buffer(-1, 2, [])

    @pytest.mark.parametrize("width, height", [(1.5, 2), (1, 2.5), ("one", 2)])
    def test_rejects_non_integral_dimensions(self, width, height):
        with pytest.raises(DimensionMismatchError):
            Buffer(width, height, [0] * 8)

    def test_integral_float_dimensions_become_ints(self):
        buf = Buffer(2.0, 1, [0] * 8)
        assert buf.size == (2, 1)
        assert isinstance(buf.width, int)

    def test_rejects_ragged_nested_data(self):
        with pytest.raises(DimensionMismatchError):
            Buffer(1, 2, [[1, 2, 3, 4], [1, 2, 3]])

    def test_accepts_evenly_nested_data(self):
        buf = Buffer(1, 2, [[1, 2, 3, 4], [5, 6, 7, 8]])
        assert buf.pixel(0, 1) == (5, 6, 7, 8)

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            Buffer(WIDTH, HEIGHT, RGBA[:-1])

    def test_out_of_range_values_saturate(self):
        buf = Buffer(1, 1, [-20, 300, 127.5, 254.5])
        assert buf.pixel(0, 0) == (0, 255, 128, 254)


class TestImmutability:

    def test_data_is_read_only(self, rgba_buffer):
        with pytest.raises(ValueError):
            rgba_buffer.data[0] = 1

    def test_source_array_is_copied(self):
        source = np.array(RGBA, dtype=np.uint8)
        buf = Buffer(WIDTH, HEIGHT, source)
        source[0] = 0
        assert buf.data[0] == 60

    def test_attributes_are_frozen(self, rgba_buffer):
        with pytest.raises(AttributeError):
            rgba_buffer.width = 10


class TestAccessors:

    def test_pixels_view(self, rgba_buffer):
        assert rgba_buffer.pixels.shape == (HEIGHT, WIDTH, 4)
        assert rgba_buffer.pixels[1, 2].tolist() == [0, 0, 255, 255]

    def test_pixel(self, rgba_buffer):
        assert rgba_buffer.pixel(1, 0) == (70, 80, 90, 255)
        with pytest.raises(IndexError):
            rgba_buffer.pixel(3, 0)

    def test_equality(self, rgba_buffer):
        assert rgba_buffer == Buffer(WIDTH, HEIGHT, RGBA)
        assert rgba_buffer != Buffer(HEIGHT, WIDTH, RGBA)
        assert rgba_buffer != "not a buffer"

    def test_hash_follows_equality(self, rgba_buffer, rgb_buffer):
        assert hash(rgba_buffer) == hash(rgb_buffer)
        assert len({rgba_buffer, rgb_buffer, Buffer(HEIGHT, WIDTH, RGBA)}) == 2


class TestRecords:

    def test_from_object(self, rgba_buffer):
        assert pixelbuf.from_object({"width": WIDTH, "height": HEIGHT, "data": RGBA}) == rgba_buffer
        assert pixelbuf.from_object({"width": WIDTH, "height": HEIGHT, "data": RGB}) == rgba_buffer

    def test_from_object_rejects_bad_length(self):
        with pytest.raises(DimensionMismatchError):
            pixelbuf.from_object({"width": WIDTH, "height": HEIGHT, "data": RGB[:-1]})

    def test_from_object_rejects_missing_keys(self):
        with pytest.raises(DimensionMismatchError):
            pixelbuf.from_object({"width": WIDTH, "data": RGB})

    def test_to_object(self, rgba_buffer):
        record = pixelbuf.to_object(rgba_buffer)
        assert record["width"] == WIDTH
        assert record["height"] == HEIGHT
        assert record["channels"] == 4
        assert record["data"].tolist() == RGBA

    def test_to_object_data_is_independent(self, rgba_buffer):
        record = pixelbuf.to_object(rgba_buffer)
        record["data"][0] = 0
        assert rgba_buffer.data[0] == 60

    def test_to_no_alpha_object(self, rgba_buffer):
        record = pixelbuf.to_no_alpha_object(rgba_buffer)
        assert record["channels"] == 3
        assert record["data"].tolist() == RGB
        assert pixelbuf.from_object(record) == rgba_buffer


class TestRepository:

    def test_blank(self):
        repo = BufferRepository()
        assert repo.blank(2, 1).data.tolist() == [0] * 8
        assert repo.blank(1, 2, (1, 2, 3)).data.tolist() == [1, 2, 3, 255] * 2
        with pytest.raises(ValueError):
            repo.blank(1, 1, (1, 2))

    def test_from_pixels(self, rgba_buffer):
        repo = BufferRepository()
        assert repo.from_pixels(np.array(RGBA, dtype=np.uint8).reshape(2, 3, 4)) == rgba_buffer
        with pytest.raises(DimensionMismatchError):
            repo.from_pixels(np.zeros((2, 3, 2), dtype=np.uint8))

    def test_pil_round_trip(self, rgba_buffer):
        repo = BufferRepository()
        image = repo.to_pil_image(rgba_buffer)
        assert image.mode == "RGBA"
        assert image.size == (WIDTH, HEIGHT)
        assert image.getpixel((1, 0)) == (70, 80, 90, 255)
        assert repo.from_pil_image(image) == rgba_buffer

    def test_from_rgb_pil_image(self):
        image = PILImage.new("RGB", (2, 2), (10, 20, 30))
        buf = BufferRepository().from_pil_image(image)
        assert buf.size == (2, 2)
        assert buf.data.tolist() == [10, 20, 30, 255] * 4
