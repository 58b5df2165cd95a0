"""Tests for the Encoder, the Decoder and the bulk image functions."""

import colorsys
from unittest.mock import MagicMock

import numpy as np
import pytest
from PIL import Image

from hilly_sounds.codec import Decoder, Encoder, decode_image, encode_image
from hilly_sounds.strategy import HilbertSpaceStrategy, HueColorStrategy, LineSpaceStrategy

from .helpers import circular_distance


class TestEncoder:
    """Tests for Encoder."""

    @pytest.mark.parametrize("count, side", [(0, 2), (3, 2), (4, 2), (6, 2), (100, 4), (16, 4)])
    def test_length_law(self, hue, count, side):
        """The encoder yields min(number of samples, capacity) pairs."""
        space = HilbertSpaceStrategy.from_size(side)
        pairs = list(Encoder(range(count), hue, space))
        assert len(pairs) == min(count, space.size())

    def test_coords_follow_space_strategy(self, hue):
        space = HilbertSpaceStrategy.from_size(4)
        pairs = list(Encoder([0] * 16, hue, space))
        assert [coord for coord, _ in pairs] == [space.index_to_coord(i) for i in range(16)]

    def test_excess_input_is_not_read(self, hue):
        """Once the space is full, the remaining samples are left in the source."""
        samples = iter(range(6))
        encoder = Encoder(samples, hue, HilbertSpaceStrategy.from_size(2))
        assert len(list(encoder)) == 4
        assert next(samples) == 4

    def test_index_progress(self, hue, line):
        encoder = Encoder([1, 2, 3], hue, line(10))
        assert encoder.index == 0
        next(encoder)
        assert encoder.index == 1
        list(encoder)
        assert encoder.index == 3

    def test_not_restartable(self, hue, line):
        encoder = Encoder([1, 2, 3], hue, line(10))
        assert len(list(encoder)) == 3
        assert list(encoder) == []
        with pytest.raises(StopIteration):
            next(encoder)

    def test_length_hint(self, hue, line):
        encoder = Encoder([1, 2, 3], hue, line(10))
        assert encoder.__length_hint__() == 10
        next(encoder)
        assert encoder.__length_hint__() == 9

    def test_line_scenario(self, hue, line):
        """Four samples along a line of length 4 give the expected hues."""
        pairs = list(Encoder([-32768, 0, 16384, 32767], hue, line(4)))
        assert [coord for coord, _ in pairs] == [(0, 0), (1, 0), (2, 0), (3, 0)]

        hues = []
        for _, (r, g, b, a) in pairs:
            assert a == 255
            h, s, v = colorsys.rgb_to_hsv(r / 255, g / 255, b / 255)
            assert s == 1.0
            assert v == 1.0
            hues.append(h)

        assert hues[0] == pytest.approx(0.0)
        assert hues[1] == pytest.approx(0.5)
        assert hues[2] == pytest.approx(0.75, abs=1 / 1530)
        # just below a full turn, which is the same angle as 0
        assert min(hues[3], 1.0 - hues[3]) < 1 / 1530

    def test_float_samples_are_normalized(self, hue, line):
        pairs = list(Encoder(np.array([0.5, -1.0], dtype=np.float32), hue, line(2)))
        assert pairs[0][1] == hue.sample_to_color(16384)
        assert pairs[1][1] == hue.sample_to_color(-32768)

    def test_int32_samples_are_normalized(self, hue, line):
        pairs = list(Encoder([65536 * 100], hue, line(1), dtype=np.int32))
        assert pairs[0][1] == hue.sample_to_color(100)

    def test_uses_color_strategy(self, line):
        color_strategy = MagicMock()
        color_strategy.sample_to_color.return_value = (1, 2, 3, 255)
        pairs = list(Encoder([10, 20], color_strategy, line(4)))
        assert [color for _, color in pairs] == [(1, 2, 3, 255), (1, 2, 3, 255)]
        assert [c.args[0] for c in color_strategy.sample_to_color.call_args_list] == [10, 20]


class TestEncodeImage:
    """Tests for encode_image()."""

    def test_hilbert_scenario(self, hue):
        """Six samples into a 2x2 curve: the last two are dropped."""
        space = HilbertSpaceStrategy.from_size(2)
        samples = [-32768, -16384, 0, 16384, 100, 200]
        pixels = encode_image(samples, hue, space)

        assert pixels.shape == (2, 2, 4)
        assert pixels.dtype == np.uint8
        for index, sample in enumerate(samples[:4]):
            x, y = space.index_to_coord(index)
            assert tuple(pixels[y, x]) == hue.sample_to_color(sample)

    def test_unvisited_pixels_keep_background(self, hue):
        space = HilbertSpaceStrategy.from_size(2)
        pixels = encode_image([0, 0, 0], hue, space)

        x, y = space.index_to_coord(3)
        assert tuple(pixels[y, x]) == (0, 0, 0, 0)
        x, y = space.index_to_coord(2)
        assert tuple(pixels[y, x]) == hue.sample_to_color(0)

    def test_custom_background(self, hue):
        pixels = encode_image([], hue, HilbertSpaceStrategy.from_size(4), background=(9, 8, 7, 255))
        assert (pixels == np.array([9, 8, 7, 255], dtype=np.uint8)).all()

    def test_line_image_shape(self, hue, line):
        pixels = encode_image(range(5), hue, line(5))
        assert pixels.shape == (1, 5, 4)

    def test_unadapted_line(self, hue):
        """A bare one-dimensional line fills a single row."""
        pixels = encode_image([0, 16384], hue, LineSpaceStrategy(3))
        assert pixels.shape == (1, 3, 4)
        assert tuple(pixels[0, 1]) == hue.sample_to_color(16384)


class TestDecoder:
    """Tests for Decoder."""

    def test_length_law(self, hue):
        """A decoder yields exactly size() samples, whatever the image holds."""
        rng = np.random.default_rng(1234)
        pixels = rng.integers(0, 256, size=(8, 8, 4), dtype=np.uint8)
        samples = list(Decoder(pixels, hue, HilbertSpaceStrategy.from_size(8)))
        assert len(samples) == 64
        assert all(-32768 <= s <= 32767 for s in samples)

    def test_mismatched_image_raises_before_reading(self):
        """A 3x3 image cannot be decoded with a 4x4 curve."""
        color_strategy = MagicMock()
        with pytest.raises(ValueError):
            Decoder(np.zeros((3, 3, 4), dtype=np.uint8), color_strategy, HilbertSpaceStrategy.from_size(4))
        color_strategy.color_to_sample.assert_not_called()

    def test_transposed_line_raises(self, hue, line):
        with pytest.raises(ValueError):
            Decoder(np.zeros((5, 1, 4), dtype=np.uint8), hue, line(5))

    @pytest.mark.parametrize("shape", [(4, 4), (4, 4, 2), (4, 4, 5)])
    def test_invalid_pixel_array_raises(self, hue, shape):
        with pytest.raises(ValueError):
            Decoder(np.zeros(shape, dtype=np.uint8), hue, HilbertSpaceStrategy.from_size(4))

    def test_reads_along_space_strategy(self, line):
        pixels = np.zeros((1, 4, 4), dtype=np.uint8)
        pixels[0, :, 0] = [10, 20, 30, 40]
        color_strategy = MagicMock()
        color_strategy.color_to_sample.side_effect = lambda color: int(color[0])
        assert list(Decoder(pixels, color_strategy, line(4))) == [10, 20, 30, 40]

    def test_accepts_pil_image(self, hue):
        image = Image.new("RGB", (2, 2), (0, 255, 255))
        assert list(Decoder(image, hue, HilbertSpaceStrategy.from_size(2))) == [0, 0, 0, 0]

    def test_accepts_rgb_array(self, hue, line):
        pixels = np.zeros((1, 2, 3), dtype=np.uint8)
        pixels[0, 1] = (0, 255, 255)
        assert list(Decoder(pixels, hue, line(2))) == [-32768, 0]

    def test_progress_and_len(self, hue):
        decoder = Decoder(np.zeros((2, 2, 4), dtype=np.uint8), hue, HilbertSpaceStrategy.from_size(2))
        assert decoder.size == 4
        assert len(decoder) == 4
        next(decoder)
        assert decoder.index == 1
        assert len(decoder) == 3
        list(decoder)
        assert list(decoder) == []


class TestDecodeImage:
    """Tests for decode_image()."""

    def test_drains_into_sink(self, hue):
        space = HilbertSpaceStrategy.from_size(4)
        sink = []
        count = decode_image(np.zeros((4, 4, 4), dtype=np.uint8), sink, hue, space)
        assert count == 16
        assert sink == [-32768] * 16

    def test_round_trip(self, hue):
        """Decoding an encoded image recovers the samples within the color bound."""
        space = HilbertSpaceStrategy.from_size(16)
        rng = np.random.default_rng(42)
        samples = rng.integers(-32768, 32768, size=256).tolist()

        pixels = encode_image(samples, HueColorStrategy(), space)
        decoded = []
        decode_image(pixels, decoded, HueColorStrategy(), HilbertSpaceStrategy.from_size(16))

        assert len(decoded) == len(samples)
        for original, recovered in zip(samples, decoded):
            assert circular_distance(original, recovered) <= HueColorStrategy.MAX_ROUND_TRIP_ERROR

    def test_mismatch_raises(self, hue, line):
        with pytest.raises(ValueError):
            decode_image(np.zeros((1, 3, 4), dtype=np.uint8), [], hue, line(4))
