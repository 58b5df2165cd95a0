"""Test configuration and fixtures for hilly-sounds tests."""

import numpy as np
import pytest
import soundfile as sf

from hilly_sounds.strategy import HueColorStrategy, LineSpaceStrategy, SpaceStrategyAdapter


@pytest.fixture
def hue():
    """Create a hue color strategy with default saturation and value."""
    return HueColorStrategy()


@pytest.fixture
def line():
    """Create a line space strategy lifted into two dimensions."""

    def _create_line(length):
        return SpaceStrategyAdapter(LineSpaceStrategy(length), 2)

    return _create_line


@pytest.fixture
def wav_file(tmp_path):
    """Write samples to a WAV file and return its path."""

    def _write(data, name="test_audio.wav", sample_rate=8000, subtype="PCM_16"):
        path = tmp_path / name
        sf.write(str(path), np.asarray(data), sample_rate, subtype=subtype)
        return path

    return _write
