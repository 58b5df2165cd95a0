"""Reading and writing the audio and image files around the codec.

Audio goes through soundfile, images through Pillow. The codec itself only
sees sample iterators, pixel arrays and sample sinks.
"""

import itertools
import logging
from collections.abc import Iterator
from pathlib import Path

import numpy as np
import soundfile as sf
from PIL import Image

from .core.output_config import OutputConfig
from .core.samples import normalize_array

logger = logging.getLogger(__name__)

__all__ = [
    "sample_dtype",
    "read_samples",
    "SampleWriter",
    "load_image",
    "save_image",
    "resolve_output_file",
]

# soundfile subtypes read as integers; anything else is read as float32
_INT16_SUBTYPES = ("PCM_S8", "PCM_U8", "PCM_16")
_INT32_SUBTYPES = ("PCM_24", "PCM_32")


def sample_dtype(subtype: str) -> str:
    """Return the dtype used to read an audio file of the given soundfile subtype."""
    if subtype in _INT16_SUBTYPES:
        return "int16"
    if subtype in _INT32_SUBTYPES:
        return "int32"
    return "float32"


def read_samples(filepath, skip: int = 0, blocksize: int = 65536) -> Iterator[int]:
    """Lazily read an audio file as int16 samples.

    Frames are interleaved into a single sample stream, so a stereo file
    yields left, right, left, right...

    Args:
        filepath: Path to the audio file
        skip: Number of leading samples to drop
        blocksize: Number of frames read from the file at once

    Returns:
        An iterator of int16 sample values
    """
    info = sf.info(str(filepath))
    dtype = sample_dtype(info.subtype)
    logger.debug(
        "read_samples(%s): %sHz, %sch, %s read as %s",
        filepath,
        info.samplerate,
        info.channels,
        info.subtype,
        dtype,
    )

    def _samples():
        for block in sf.blocks(str(filepath), blocksize=blocksize, dtype=dtype, always_2d=True):
            for sample in normalize_array(block.ravel()):
                yield int(sample)

    return itertools.islice(_samples(), skip, None)


class SampleWriter:
    """A sample sink writing 16-bit PCM WAV files.

    Samples are appended one at a time, buffered, and written in frames of
    `config.channels` interleaved samples. A trailing incomplete frame is
    padded with silence on close().
    """

    def __init__(self, filepath, config: OutputConfig | None = None):
        """Initialize the SampleWriter and open the output file.

        Args:
            filepath: Path to the WAV file to create
            config: OutputConfig for sample rate and channels, defaults to OutputConfig()
        """
        self._config = config if config is not None else OutputConfig()
        self._filepath = filepath
        self._buffer: list[int] = []
        self._written = 0
        self._chunk = self._config.buffer_size * self._config.channels
        logger.debug(
            "SampleWriter(%s): %sHz, %sch",
            filepath,
            self._config.sample_rate,
            self._config.channels,
        )
        self._sound_file = sf.SoundFile(
            str(filepath),
            mode="w",
            samplerate=self._config.sample_rate,
            channels=self._config.channels,
            format="WAV",
            subtype="PCM_16",
        )

    @property
    def config(self) -> OutputConfig:
        return self._config

    @property
    def written(self) -> int:
        """Number of samples appended so far."""
        return self._written + len(self._buffer)

    def append(self, sample: int) -> None:
        self._buffer.append(sample)
        if len(self._buffer) >= self._chunk:
            self._flush()

    def extend(self, samples) -> None:
        for sample in samples:
            self.append(sample)

    def _flush(self):
        if not self._buffer:
            return
        channels = self._config.channels
        remainder = len(self._buffer) % channels
        if remainder:
            logger.debug("SampleWriter: padding last frame with %s samples", channels - remainder)
            self._buffer.extend([0] * (channels - remainder))
        data = np.array(self._buffer, dtype=np.int16).reshape(-1, channels)
        self._sound_file.write(data)
        self._written += len(self._buffer)
        self._buffer = []

    def close(self) -> None:
        """Write any buffered samples and close the file."""
        if self._sound_file.closed:
            return
        self._flush()
        self._sound_file.close()
        logger.debug("SampleWriter(%s): closed after %s samples", self._filepath, self._written)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def load_image(filepath) -> np.ndarray:
    """Load an image file as a (height, width, 4) RGBA uint8 array."""
    logger.debug("load_image(%s)", filepath)
    with Image.open(filepath) as image:
        return np.array(image.convert("RGBA"))


def save_image(pixels: np.ndarray, filepath, format: str = "PNG") -> None:
    """Save a (height, width, 4) RGBA uint8 array as an image file."""
    logger.debug("save_image(%s, %s)", filepath, format)
    Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).save(filepath, format=format)


def resolve_output_file(input_file, output_path, extension: str) -> Path:
    """Work out where to write the result of converting `input_file`.

    Args:
        input_file: The file being converted
        output_path: A file path, a directory, or None
        extension: Extension of the output format, without the dot

    Returns:
        `output_path` itself when it is a file path; otherwise the input file
        name with the new extension, placed in `output_path` when it is a
        directory, or next to the input file when it is None
    """
    input_file = Path(input_file)
    renamed = input_file.with_suffix(f".{extension}")
    if output_path is None:
        return renamed
    output_path = Path(output_path)
    if output_path.is_dir():
        return output_path / renamed.name
    return output_path
