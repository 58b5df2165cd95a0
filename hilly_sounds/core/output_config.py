"""Output configuration for decoded audio.

This module provides the OutputConfig dataclass which defines the format of
the audio produced when an image is decoded, whether it is written to a WAV
file or streamed to an audio device. Decoded samples are always int16.
"""

from dataclasses import dataclass

__all__ = [
    "OutputConfig",
]


@dataclass
class OutputConfig:
    """Configuration for decoded PCM audio.

    Attributes:
        sample_rate: Sample rate in Hz (e.g., 44100, 48000)
        channels: Number of audio channels the decoded samples are interleaved over
        buffer_size: Number of frames per device buffer during playback
    """

    sample_rate: int = 48000
    channels: int = 2
    buffer_size: int = 1024

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.channels <= 0:
            raise ValueError(f"channels must be positive, got {self.channels}")

        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")

        if self.buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {self.buffer_size}")

    def duration(self, sample_count: int) -> float:
        """Return the playback duration in seconds of `sample_count` interleaved samples."""
        return sample_count / (self.sample_rate * self.channels)
