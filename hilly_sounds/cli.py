"""Command line interface for the hilly-sounds codec.

Usage:
    hscli encode input.wav
    hscli encode input.wav out/ --skip 1 --open
    hscli --preset line.toml decode input.png output.wav --channels 1
    hscli play input.png --device "USB Audio"
    hscli dump-preset --format json --pretty
    hscli --preset line.json dump-preset > line.toml
"""

import argparse
import logging
import os
import sys
import traceback
import webbrowser
from pathlib import Path

from . import __version__
from .codec import Decoder, encode_image
from .core.output_config import OutputConfig
from .io import SampleWriter, load_image, read_samples, resolve_output_file, save_image
from .strategy.preset import Preset, load_preset

logger = logging.getLogger(__name__)

PRESET_ENV = "HILLY_SOUNDS_PRESET"


def existing_file(value: str) -> Path:
    """argparse type accepting only paths to existing files."""
    path = Path(value)
    if not path.is_file():
        raise argparse.ArgumentTypeError(f"not a file: {value}")
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hscli",
        description="Encode audio into images along a space-filling curve, and back",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
The preset can also be given through the {PRESET_ENV} environment variable.
Without a preset, samples are encoded as hues along a 512x512 Hilbert curve.
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-p",
        "--preset",
        type=existing_file,
        default=os.environ.get(PRESET_ENV),
        help="Path to a TOML or JSON preset file, containing color and space strategies",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    encode = subparsers.add_parser("encode", help="Encode an audio file into a PNG file")
    encode.add_argument("input_file", type=existing_file, help="Path to the input audio file")
    encode.add_argument(
        "output_path",
        nargs="?",
        type=Path,
        help="Output file or directory (default: input name with the .png extension)",
    )
    encode.add_argument(
        "--skip",
        type=int,
        default=0,
        help="Number of image-sized sections of the input to skip (default: 0)",
    )
    encode.add_argument(
        "-o",
        "--open",
        action="store_true",
        help="Open the image with the default application once it is saved",
    )

    decode = subparsers.add_parser("decode", help="Decode a PNG file into a WAV file")
    decode.add_argument("input_file", type=existing_file, help="Path to the input image")
    decode.add_argument(
        "output_path",
        nargs="?",
        type=Path,
        help="Output file or directory (default: input name with the .wav extension)",
    )
    _add_output_arguments(decode)

    play = subparsers.add_parser("play", help="Decode a PNG file and play it")
    play.add_argument("input_file", type=existing_file, nargs="?", help="Path to the input image")
    _add_output_arguments(play)
    play.add_argument("-d", "--device", help="Name of the output audio device (default: system default)")
    play.add_argument(
        "-l",
        "--list-devices",
        action="store_true",
        help="List the available output audio devices and exit",
    )

    dump = subparsers.add_parser("dump-preset", help="Print the current preset")
    dump.add_argument(
        "-f",
        "--format",
        choices=["toml", "json", "debug"],
        default="toml",
        help="Output format (default: toml)",
    )
    dump.add_argument("--pretty", action="store_true", help="Pretty print the output")

    return parser


def _add_output_arguments(parser):
    defaults = OutputConfig()
    parser.add_argument(
        "-c",
        "--channels",
        type=int,
        default=defaults.channels,
        help=f"Number of output channels (default: {defaults.channels})",
    )
    parser.add_argument(
        "-s",
        "--sample-rate",
        type=int,
        default=defaults.sample_rate,
        help=f"Output sample rate in Hz (default: {defaults.sample_rate})",
    )


def get_preset(path) -> Preset:
    if path is None:
        logger.debug("No preset given, using the default preset")
        return Preset()
    return load_preset(path)


def encode(args, preset: Preset) -> Path:
    color_strategy, space_strategy = preset.to_strategies()
    output_file = resolve_output_file(args.input_file, args.output_path, "png")

    skip = args.skip * space_strategy.size()
    samples = read_samples(args.input_file, skip=skip)
    pixels = encode_image(samples, color_strategy, space_strategy)
    save_image(pixels, output_file)
    logger.info(f"Encoded {args.input_file} into {output_file} ({space_strategy.width}x{space_strategy.height})")

    if args.open:
        webbrowser.open(output_file.resolve().as_uri())
    return output_file


def decode(args, preset: Preset) -> Path:
    color_strategy, space_strategy = preset.to_strategies()
    output_file = resolve_output_file(args.input_file, args.output_path, "wav")
    config = OutputConfig(sample_rate=args.sample_rate, channels=args.channels)

    # the size check happens before the output file is created
    decoder = Decoder(load_image(args.input_file), color_strategy, space_strategy)
    with SampleWriter(output_file, config) as writer:
        writer.extend(decoder)
    logger.info(f"Decoded {args.input_file} into {output_file} ({config.duration(writer.written):.2f}s)")
    return output_file


def play(args, preset: Preset) -> None:
    # sounddevice is optional, only import it when playing
    from .playback import DecoderStream, find_output_device, list_output_devices

    if args.list_devices:
        for name in list_output_devices():
            print(name)
        return

    if args.input_file is None:
        raise ValueError("an input image is required unless --list-devices is given")

    color_strategy, space_strategy = preset.to_strategies()
    config = OutputConfig(sample_rate=args.sample_rate, channels=args.channels)
    decoder = Decoder(load_image(args.input_file), color_strategy, space_strategy)
    stream = DecoderStream(decoder, config, device=find_output_device(args.device))
    logger.info(f"Playing {args.input_file} ({config.duration(decoder.size):.2f}s)")
    stream.play()


def dump_preset(args, preset: Preset) -> None:
    print(preset.dumps(args.format, pretty=args.pretty))


COMMANDS = {
    "encode": encode,
    "decode": decode,
    "play": play,
    "dump-preset": dump_preset,
}


def main(argv=None) -> int:
    """Main entry point for the hscli command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        preset = get_preset(args.preset)
        COMMANDS[args.command](args, preset)
    except Exception as e:
        logger.error(f"Error running {args.command}: {e}")
        if args.verbose:
            traceback.print_exc()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
