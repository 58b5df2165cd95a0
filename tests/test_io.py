"""Tests for audio and image file helpers."""

import numpy as np
import pytest
import soundfile as sf
from PIL import Image

from hilly_sounds.core.output_config import OutputConfig
from hilly_sounds.io import (
    SampleWriter,
    load_image,
    read_samples,
    resolve_output_file,
    sample_dtype,
    save_image,
)


class TestSampleDtype:
    """Tests for sample_dtype()."""

    @pytest.mark.parametrize(
        "subtype, dtype",
        [
            ("PCM_16", "int16"),
            ("PCM_U8", "int16"),
            ("PCM_24", "int32"),
            ("PCM_32", "int32"),
            ("FLOAT", "float32"),
            ("DOUBLE", "float32"),
            ("VORBIS", "float32"),
        ],
    )
    def test_mapping(self, subtype, dtype):
        assert sample_dtype(subtype) == dtype


class TestReadSamples:
    """Tests for read_samples()."""

    def test_int16_mono(self, wav_file):
        data = np.array([0, 1000, -1000, 32767, -32768], dtype=np.int16)
        assert list(read_samples(wav_file(data))) == data.tolist()

    def test_stereo_is_interleaved(self, wav_file):
        data = np.array([[1, -1], [2, -2], [3, -3]], dtype=np.int16)
        assert list(read_samples(wav_file(data))) == [1, -1, 2, -2, 3, -3]

    def test_float(self, wav_file):
        data = np.array([0.5, -0.25, 0.0], dtype=np.float32)
        path = wav_file(data, subtype="FLOAT")
        assert list(read_samples(path)) == [16384, -8192, 0]

    def test_int32(self, wav_file):
        data = np.array([3 * 65536, -65536, 65535], dtype=np.int32)
        path = wav_file(data, subtype="PCM_32")
        assert list(read_samples(path)) == [3, -1, 0]

    def test_skip(self, wav_file):
        data = np.arange(10, dtype=np.int16)
        assert list(read_samples(wav_file(data), skip=4)) == [4, 5, 6, 7, 8, 9]

    def test_small_blocks(self, wav_file):
        data = np.arange(-50, 50, dtype=np.int16)
        assert list(read_samples(wav_file(data), blocksize=7)) == data.tolist()

    def test_is_lazy(self, wav_file):
        samples = read_samples(wav_file(np.arange(100, dtype=np.int16)))
        assert next(samples) == 0
        assert next(samples) == 1


class TestSampleWriter:
    """Tests for SampleWriter."""

    def test_writes_frames(self, tmp_path):
        path = tmp_path / "out.wav"
        config = OutputConfig(sample_rate=8000, channels=2, buffer_size=2)
        with SampleWriter(path, config) as writer:
            for sample in [1, -1, 2, -2, 3, -3]:
                writer.append(sample)
            assert writer.written == 6

        data, sample_rate = sf.read(str(path), dtype="int16", always_2d=True)
        assert sample_rate == 8000
        assert data.tolist() == [[1, -1], [2, -2], [3, -3]]
        assert sf.info(str(path)).subtype == "PCM_16"

    def test_pads_last_frame(self, tmp_path):
        path = tmp_path / "out.wav"
        with SampleWriter(path, OutputConfig(channels=2)) as writer:
            writer.extend([5, 6, 7])

        data, _ = sf.read(str(path), dtype="int16", always_2d=True)
        assert data.tolist() == [[5, 6], [7, 0]]

    def test_default_config(self, tmp_path):
        path = tmp_path / "out.wav"
        writer = SampleWriter(path)
        writer.extend([0, 0])
        writer.close()
        writer.close()

        info = sf.info(str(path))
        assert info.samplerate == 48000
        assert info.channels == 2
        assert info.frames == 1


class TestImages:
    """Tests for load_image() and save_image()."""

    def test_round_trip(self, tmp_path):
        rng = np.random.default_rng(7)
        pixels = rng.integers(0, 256, size=(5, 3, 4), dtype=np.uint8)
        path = tmp_path / "image.png"
        save_image(pixels, path)
        loaded = load_image(path)
        assert loaded.shape == (5, 3, 4)
        assert (loaded == pixels).all()

    def test_load_rgb_adds_alpha(self, tmp_path):
        path = tmp_path / "rgb.png"
        Image.new("RGB", (2, 1), (10, 20, 30)).save(path)
        loaded = load_image(path)
        assert loaded.shape == (1, 2, 4)
        assert tuple(loaded[0, 0]) == (10, 20, 30, 255)


class TestResolveOutputFile:
    """Tests for resolve_output_file()."""

    def test_no_output_path(self, tmp_path):
        assert resolve_output_file(tmp_path / "song.wav", None, "png") == tmp_path / "song.png"

    def test_directory(self, tmp_path):
        out = tmp_path / "out"
        out.mkdir()
        assert resolve_output_file(tmp_path / "song.wav", out, "png") == out / "song.png"

    def test_file(self, tmp_path):
        target = tmp_path / "picture.png"
        assert resolve_output_file(tmp_path / "song.wav", target, "png") == target
