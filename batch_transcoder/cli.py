"""
Command-Line Interface (CLI) setup for the Batch Transcoder.

This module uses Python's `argparse` to define the root options and the
'transcode', 'strip-audio' and 'trim' commands, configures the logger, and
hands the parsed request to the transcode pipeline.
"""
import argparse
import sys
from typing import List, Optional

from loguru import logger

from . import __version__
from .config.common import DEFAULT_LOG_LEVEL, DEFAULT_MAX_WORKERS, LOG_LEVELS, LOGGER_FORMAT
from .domain.codecs import AudioCodec, ImageCodec, SubtitleCodec, VideoCodec, VideoContainer
from .notices import COPYRIGHT, THIRD_PARTY_NOTICES
from .pipeline.transcode_pipeline import EXIT_FAILURE, EXIT_SUCCESS, TranscodePipeline


class TranscoderArgumentParser(argparse.ArgumentParser):
    """Reports invalid command-line input with the same exit code as any other failed run."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def _choices(enum_type) -> List[str]:
    return [member.value for member in enum_type]


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def _add_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", help="Input file or directory.")
    parser.add_argument("destination", help="Output directory (or output file for a single input).")
    parser.add_argument(
        "--jobs", type=_positive_int, default=DEFAULT_MAX_WORKERS,
        help=f"Number of files processed at the same time (default: {DEFAULT_MAX_WORKERS})."
    )


def build_parser() -> argparse.ArgumentParser:
    """
    Builds the argument parser for the Batch Transcoder.

    Returns:
        argparse.ArgumentParser: The root parser with its subcommands attached.
    """
    parser = TranscoderArgumentParser(
        prog="batch-transcoder",
        description="Batch transcoder for video, audio and image files.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--about", action="store_true", help="Show copyright information and exit.")
    parser.add_argument(
        "--third-party-notices", action="store_true", help="Show third-party license notices and exit."
    )
    parser.add_argument(
        "--log-level", type=str.upper, default=DEFAULT_LOG_LEVEL, choices=LOG_LEVELS,
        help="Set the logging level."
    )

    subparsers = parser.add_subparsers(dest="command")

    transcode = subparsers.add_parser("transcode", help="Transcode video, audio or image files.")
    transcode.add_argument(
        "type", type=str.lower, choices=["video", "audio", "image", "auto"],
        help="Kind of media to process. 'auto' detects it from a single input file's extension."
    )
    _add_paths(transcode)
    transcode.add_argument(
        "--preset", type=str.lower, default="normal", choices=["quality", "normal"],
        help="Quality preset."
    )
    transcode.add_argument(
        "--video-codec", type=str.lower, default=VideoCodec.COPY.value, choices=_choices(VideoCodec),
        help="Video codec. 'copy' keeps the source stream."
    )
    transcode.add_argument(
        "--audio-codec", type=str.lower, default=AudioCodec.COPY.value, choices=_choices(AudioCodec),
        help="Audio codec. 'copy' keeps the source stream."
    )
    transcode.add_argument(
        "--subtitle-codec", type=str.lower, default=SubtitleCodec.COPY.value, choices=_choices(SubtitleCodec),
        help="Subtitle codec. 'copy' keeps the source stream."
    )
    transcode.add_argument(
        "--image-codec", type=str.lower, default=ImageCodec.JPEG.value, choices=_choices(ImageCodec),
        help="Image codec."
    )
    transcode.add_argument(
        "--video-container", type=str.lower, default=VideoContainer.MKV.value, choices=_choices(VideoContainer),
        help="Output container. 'webm' forces VP9 video and Opus audio."
    )
    transcode.add_argument(
        "--force", action="store_true",
        help="Re-encode files whose extension already matches the target."
    )
    transcode.add_argument(
        "--crop", action=argparse.BooleanOptionalAction, default=True,
        help="Detect and remove black borders when re-encoding video."
    )

    strip_audio = subparsers.add_parser("strip-audio", help="Remove the audio streams from video files.")
    _add_paths(strip_audio)

    trim = subparsers.add_parser("trim", help="Cut video files to a time range without re-encoding.")
    _add_paths(trim)
    trim.add_argument("--start", default="", help="Start time, e.g. 00:01:30 or 90.")
    trim.add_argument("--end", default="", help="End time, e.g. 00:05:00 or 300.")

    return parser


def configure_logger(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOGGER_FORMAT)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point of the 'batch-transcoder' command.

    Args:
        argv: Arguments to parse. Defaults to `sys.argv[1:]`.

    Returns:
        int: The process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.about:
        print(COPYRIGHT)
        return EXIT_SUCCESS
    if args.third_party_notices:
        print(THIRD_PARTY_NOTICES)
        return EXIT_SUCCESS
    if args.command is None:
        parser.print_help()
        return EXIT_SUCCESS

    configure_logger(args.log_level)
    logger.debug(f"Parsed arguments: {args}")
    return TranscodePipeline(args).run()


if __name__ == "__main__":
    sys.exit(main())
