"""
Runs one command-line request from parsed arguments to exit code.

The pipeline builds the `EncodingJob`, selects the driver for the media kind,
wires SIGTERM to cancellation of the running task, and converts every failure
into a logged message and exit code 1.
"""
import argparse
import asyncio
import os
import signal
from pathlib import Path
from typing import Awaitable, Callable, Optional

from loguru import logger

from ..domain.codecs import (
    AudioCodec,
    EncoderPreset,
    ImageCodec,
    MediaKind,
    SubtitleCodec,
    VideoCodec,
    VideoContainer,
)
from ..domain.exceptions import (
    InvalidConfigurationException,
    OperationCancelledException,
    PathNotFoundException,
    TranscoderException,
)
from ..domain.job import EncodingJob
from ..services.audio_encoder import AudioEncoder
from ..services.encoder_base import Encoder
from ..services.file_processing_service import guess_media_kind
from ..services.image_encoder import ImageEncoder
from ..services.video_encoder import VideoEncoder

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def _enum_value(enum_type, value, label: str):
    try:
        return enum_type(str(value).lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_type)
        raise InvalidConfigurationException(
            f"Invalid {label} '{value}'. Expected one of: {allowed}"
        ) from None


def build_job(args: argparse.Namespace) -> EncodingJob:
    """Creates the job from parsed arguments. Options a command does not define keep their defaults."""
    job = EncodingJob(
        input_root=Path(args.path).resolve(),
        output_root=Path(args.destination).resolve(),
        preset=_enum_value(EncoderPreset, getattr(args, "preset", "normal"), "preset"),
        force=getattr(args, "force", False),
    )
    if getattr(args, "video_codec", None):
        job.video_codec = _enum_value(VideoCodec, args.video_codec, "video codec")
    if getattr(args, "audio_codec", None):
        job.audio_codec = _enum_value(AudioCodec, args.audio_codec, "audio codec")
    if getattr(args, "subtitle_codec", None):
        job.subtitle_codec = _enum_value(SubtitleCodec, args.subtitle_codec, "subtitle codec")
    if getattr(args, "image_codec", None):
        job.image_codec = _enum_value(ImageCodec, args.image_codec, "image codec")
    if getattr(args, "video_container", None):
        job.container = _enum_value(VideoContainer, args.video_container, "video container")
    job.validate()
    return job


def resolve_media_kind(type_arg: str, input_path: Path) -> MediaKind:
    if type_arg != "auto":
        return _enum_value(MediaKind, type_arg, "media type")
    if not input_path.exists():
        raise PathNotFoundException(input_path)
    kind = guess_media_kind(input_path)
    if kind is None:
        raise InvalidConfigurationException(
            f"Failed to detect the media type of '{input_path}', pass video, audio or image explicitly."
        )
    logger.info(f"Detected media type: {kind.value}")
    return kind


def announce_file(name: str) -> None:
    logger.info(f"Encoding file: {name}")


class TranscodePipeline:
    """
    Executes the command selected on the command line.

    Attributes:
        args (argparse.Namespace): The parsed command-line arguments.
        driver (Optional[Encoder]): The driver created for the run.
    """

    def __init__(self, args: argparse.Namespace):
        self.args = args
        self.driver: Optional[Encoder] = None

    def create_driver(self) -> Encoder:
        job = build_job(self.args)
        workers = getattr(self.args, "jobs", None)
        if self.args.command == "transcode":
            kind = resolve_media_kind(self.args.type, job.input_root)
        else:
            kind = MediaKind.VIDEO

        match kind:
            case MediaKind.VIDEO:
                driver = VideoEncoder(job, crop=getattr(self.args, "crop", False), max_workers=workers)
            case MediaKind.AUDIO:
                driver = AudioEncoder(job, max_workers=workers)
            case MediaKind.IMAGE:
                driver = ImageEncoder(job, max_workers=workers)
        driver.add_listener(announce_file)
        logger.debug(f"Created {driver.__class__.__name__} for {job!r}")
        return driver

    def operation(self, driver: Encoder) -> Callable[[], Awaitable[None]]:
        if self.args.command == "strip-audio":
            return driver.strip_audio
        if self.args.command == "trim":
            return lambda: driver.trim(self.args.start or "", self.args.end or "")
        return driver.encode

    async def run_async(self) -> None:
        loop = asyncio.get_running_loop()
        task = asyncio.current_task()
        if os.name != "nt":
            loop.add_signal_handler(signal.SIGTERM, task.cancel)
        try:
            self.driver = self.create_driver()
            await self.operation(self.driver)()
        except asyncio.CancelledError:
            raise OperationCancelledException() from None
        finally:
            if os.name != "nt":
                loop.remove_signal_handler(signal.SIGTERM)

    def run(self) -> int:
        """
        Runs the request to completion.

        Returns:
            0 on success, 1 on any failure or cancellation.
        """
        try:
            asyncio.run(self.run_async())
        except (OperationCancelledException, KeyboardInterrupt):
            logger.error("The operation was aborted")
            return EXIT_FAILURE
        except TranscoderException as e:
            logger.error(str(e))
            return EXIT_FAILURE
        except OSError as e:
            logger.error(f"File system error: {e}")
            return EXIT_FAILURE
        logger.success("Batch transcoder finished.")
        return EXIT_SUCCESS
