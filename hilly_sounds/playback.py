"""Real-time playback of a decoded image using sounddevice.

The Decoder is pulled from the sounddevice callback thread. It does no
locking of its own, so DecoderStream serializes every access to it.

Note: sounddevice is an optional dependency.
Install it with: pip install hilly-sounds[play]
"""

import itertools
import logging
import threading

import numpy as np

from .codec import Decoder
from .core.output_config import OutputConfig

try:
    import sounddevice as sd
except ImportError as e:
    raise ImportError(
        "sounddevice is required for audio playback. Install it with: pip install hilly-sounds[play]"
    ) from e


logger = logging.getLogger(__name__)

__all__ = [
    "DecoderStream",
    "list_output_devices",
    "find_output_device",
]


def list_output_devices() -> list[str]:
    """Return the names of the available output audio devices."""
    return [device["name"] for device in sd.query_devices() if device["max_output_channels"] > 0]


def find_output_device(name: str | None = None) -> int:
    """Return the index of the output device called `name`, or of the default one.

    Raises:
        ValueError: If no such output device exists
    """
    if name is None:
        device = sd.default.device[1]
        if device is None or device < 0:
            raise ValueError("failed to find default output device")
        return device

    for index, device in enumerate(sd.query_devices()):
        if device["name"] == name and device["max_output_channels"] > 0:
            return index
    raise ValueError(f"failed to find output device {name!r}")


class DecoderStream:
    """Stream the samples of a Decoder to an audio output device.

    Samples are interleaved over `config.channels`; once the decoder runs
    dry the rest of the buffer is filled with silence and the stream is
    marked finished.
    """

    def __init__(self, decoder: Decoder, config: OutputConfig | None = None, device=None):
        """Initialize the DecoderStream.

        Args:
            decoder: The decoder to pull samples from
            config: OutputConfig for the device stream, defaults to OutputConfig()
            device: sounddevice device index or name, None for the default device
        """
        self._decoder = decoder
        self._config = config if config is not None else OutputConfig()
        self._device = device
        self._lock = threading.Lock()
        self._finished = threading.Event()
        self._stream = None

    @property
    def config(self) -> OutputConfig:
        return self._config

    @property
    def finished(self) -> bool:
        return self._finished.is_set()

    def fill(self, outdata: np.ndarray) -> None:
        """Fill a (frames, channels) int16 buffer with the next samples."""
        with self._lock:
            samples = np.fromiter(
                itertools.islice(self._decoder, outdata.size),
                dtype=np.int16,
                count=-1,
            )
        flat = outdata.reshape(-1)
        flat[: samples.size] = samples
        if samples.size < outdata.size:
            flat[samples.size :] = 0
            self._finished.set()

    def _audio_callback(self, outdata, frames, time, status):
        """Called by sounddevice to fill the output buffer.

        Args:
            outdata: Output buffer to fill with audio data
            frames: Number of frames to write
            time: Timestamp information
            status: Stream status (e.g., underflow)
        """
        if status:
            logger.warning(f"Audio callback status: {status}")
        if self._finished.is_set():
            outdata[:] = 0
            raise sd.CallbackStop()
        self.fill(outdata)

    def _create_output_stream(self):
        config = self._config
        logger.debug(
            f"Creating sounddevice stream: {config.sample_rate}Hz, "
            f"{config.channels}ch, int16"
        )
        self._stream = sd.OutputStream(
            samplerate=config.sample_rate,
            channels=config.channels,
            dtype="int16",
            blocksize=config.buffer_size,
            device=self._device,
            callback=self._audio_callback,
        )

    def play(self, timeout: float | None = None) -> bool:
        """Play the decoder to the end, blocking the calling thread.

        Args:
            timeout: Maximum time to play in seconds, None for unlimited

        Returns:
            True if the decoder was played to the end
        """
        logger.debug("DecoderStream.play()")
        self._create_output_stream()
        try:
            self._stream.start()
            done = self._finished.wait(timeout)
        finally:
            self.close()
        return done

    def close(self) -> None:
        """Stop and close the device stream."""
        logger.debug("Closing sounddevice stream")
        if self._stream is not None:
            if self._stream.active:
                self._stream.stop()
            self._stream.close()
            self._stream = None
