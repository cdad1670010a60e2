"""
This module defines the VideoEncoder, the driver for video transcoding.

For each file it resolves the effective codecs (the WebM container forces
VP9/Opus, and MP4 subtitle incompatibilities are fixed per file), gathers the
probe facts the arguments depend on, and runs either a single-pass encode or, for
VP9, a two-pass encode whose statistics live in a private temporary directory.
It also offers two lossless helpers: stripping audio and trimming by timestamp.
"""

import re
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from loguru import logger

from ..config.common import NULL_SINK
from ..config.video import (
    PASSLOG_DIR_PREFIX,
    PASSLOG_FILE_STEM,
    SILENT_SUFFIX,
    TRIMMED_SUFFIX,
)
from ..domain.codecs import MediaKind, VideoCodec
from ..domain.exceptions import InvalidConfigurationException
from ..domain.job import EncodingJob
from ..domain.media import FFprobeMediaProbe, MediaProbe
from ..utils.ffmpeg_utils import FFmpegEngine, TranscodingEngine
from ..utils.format_utils import resolve_target_path, with_name_suffix
from . import argument_builder
from .argument_builder import ArgumentBuilder, VideoSettings
from .encoder_base import Encoder

# Accepts ffmpeg durations such as '90', '90.5', '01:30', '00:01:30.250'.
TIMESTAMP_PATTERN = re.compile(r"^(\d+(\.\d+)?|(\d+:)?\d{1,2}:\d{1,2}(\.\d+)?)$")


class VideoEncoder(Encoder):
    """
    Encodes video files from the job's input path to its output path with FFmpeg.

    Per file, the driver moves through: pending, path resolved, an optional
    first pass (VP9 only), the main pass, and done. A file can instead end as
    skipped (before any work) or failed (in any pass).

    Args:
        job: The job configuration.
        probe: The probing facade; defaults to ffprobe.
        engine: The engine facade; defaults to ffmpeg.
        crop: Detect and remove black borders on re-encoded video. Off by default.
        max_workers: Files processed concurrently.
    """

    media_kind = MediaKind.VIDEO

    def __init__(
        self,
        job: EncodingJob,
        probe: Optional[MediaProbe] = None,
        engine: Optional[TranscodingEngine] = None,
        crop: bool = False,
        max_workers: Optional[int] = None,
    ):
        super().__init__(job, max_workers=max_workers)
        self.probe = probe or FFprobeMediaProbe()
        self.engine = engine or FFmpegEngine()
        self.builder = ArgumentBuilder(self.probe)
        self.crop = crop

    def target_extension(self, file: Path) -> str:
        return self.job.container.extension

    def before_run(self) -> None:
        video_codec, audio_codec = argument_builder.effective_av_codecs(self.job)
        if (video_codec, audio_codec) != (self.job.video_codec, self.job.audio_codec):
            logger.warning(
                f"The {self.job.container.value} container only supports "
                f"{video_codec.value}/{audio_codec.value}; overriding the configured "
                f"{self.job.video_codec.value}/{self.job.audio_codec.value} codecs."
            )

    def settings_for(self, file: Path) -> VideoSettings:
        """Computes the effective codecs for one file without touching the job."""
        video_codec, audio_codec = argument_builder.effective_av_codecs(self.job)
        subtitle_codec = argument_builder.effective_subtitle_codec(
            file, self.job.container, self.job.subtitle_codec
        )
        if subtitle_codec is not self.job.subtitle_codec:
            logger.warning(
                f"'{file.name}': using {subtitle_codec.value} subtitles for the "
                f"{self.job.container.value} container."
            )
        return VideoSettings(video_codec, audio_codec, subtitle_codec, self.job.container)

    async def encode_file(self, file: Path, target: Path) -> None:
        settings = self.settings_for(file)
        facts = await self.builder.facts_for_video(file, settings, self.crop)
        self._notify_started(file)
        if settings.video_codec is VideoCodec.VP9:
            await self._encode_two_pass(file, target, settings, facts)
            return
        args = argument_builder.video_args(settings, self.job.preset, facts)
        await self.engine.run(file, target, args)

    async def _encode_two_pass(
        self,
        file: Path,
        target: Path,
        settings: VideoSettings,
        facts: argument_builder.ProbeFacts,
    ) -> None:
        # Each encode gets its own statistics file so concurrent VP9 encodes
        # cannot read each other's first pass.
        passlog_dir = Path(tempfile.mkdtemp(prefix=PASSLOG_DIR_PREFIX))
        passlog = passlog_dir / PASSLOG_FILE_STEM
        try:
            first_pass = argument_builder.vp9_first_pass_args(self.job.preset, facts, passlog)
            logger.debug(f"'{file.name}': VP9 first pass")
            await self.engine.run(file, NULL_SINK, first_pass)
            second_pass = argument_builder.vp9_second_pass_args(
                settings, self.job.preset, facts, passlog
            )
            logger.debug(f"'{file.name}': VP9 second pass")
            await self.engine.run(file, target, second_pass)
        finally:
            shutil.rmtree(passlog_dir, ignore_errors=True)

    # --- Lossless helpers ---

    def _helper_target(self, file: Path, marker: str) -> Path:
        target = resolve_target_path(file, self.job.input_root, self.job.output_root, file.suffix)
        return with_name_suffix(target, marker)

    async def _copy_with_flags(self, marker: str, flags: List[str]) -> None:
        async def process(file: Path) -> None:
            target = self._helper_target(file, marker)
            if not self.claim_target(file, target):
                self.skipped.append(file)
                return

            async def step() -> None:
                self._notify_started(file)
                await self.engine.run(file, target, flags)

            await self._guarded(file, target, step)

        await self._run_batch(self.files, process)

    async def strip_audio(self) -> None:
        """Writes '<name>.silent<ext>' copies of every file with all audio removed."""
        await self._copy_with_flags(SILENT_SUFFIX, ["-c", "copy", "-an"])

    async def trim(self, start: str = "", end: str = "") -> None:
        """
        Writes '<name>.trimmed<ext>' copies of every file bounded by the given timestamps.

        Streams are copied, so cuts land on the nearest key frames.

        Raises:
            InvalidConfigurationException: If neither bound is given, or a bound
                                           is not a valid timestamp.
        """
        if not start and not end:
            raise InvalidConfigurationException("Trimming needs a start time, an end time, or both.")
        for label, value in (("start", start), ("end", end)):
            if value and not TIMESTAMP_PATTERN.match(value):
                raise InvalidConfigurationException(f"Invalid {label} time '{value}'.")

        flags = ["-c", "copy"]
        if start:
            flags.extend(["-ss", start])
        if end:
            flags.extend(["-to", end])
        await self._copy_with_flags(TRIMMED_SUFFIX, flags)
