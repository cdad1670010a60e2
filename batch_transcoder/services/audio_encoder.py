"""
This module defines the AudioEncoder service.

It converts audio files to the job's audio codec in a single pass. The output
extension follows the codec (a copy keeps the source extension), and surround
sources get a proportionally higher bitrate.
"""

from pathlib import Path
from typing import Optional

from ..domain.codecs import MediaKind
from ..domain.job import EncodingJob
from ..domain.media import FFprobeMediaProbe, MediaProbe
from ..utils.ffmpeg_utils import FFmpegEngine, TranscodingEngine
from . import argument_builder
from .argument_builder import ArgumentBuilder
from .encoder_base import Encoder


class AudioEncoder(Encoder):
    """
    Encodes audio files from the job's input path to its output path with FFmpeg.

    Responsibilities:
    - Mapping the audio codec to the output extension.
    - Probing the channel count when the audio is re-encoded, to boost the
      bitrate for 5+ and 7+ channel sources.
    - Normalising the channel layout for Opus.
    """

    media_kind = MediaKind.AUDIO

    def __init__(
        self,
        job: EncodingJob,
        probe: Optional[MediaProbe] = None,
        engine: Optional[TranscodingEngine] = None,
        max_workers: Optional[int] = None,
    ):
        super().__init__(job, max_workers=max_workers)
        self.probe = probe or FFprobeMediaProbe()
        self.engine = engine or FFmpegEngine()
        self.builder = ArgumentBuilder(self.probe)

    def target_extension(self, file: Path) -> str:
        return self.job.audio_codec.extension_for(file.suffix)

    async def encode_file(self, file: Path, target: Path) -> None:
        facts = await self.builder.facts_for_audio(file, self.job.audio_codec)
        args = argument_builder.audio_only_args(self.job.audio_codec, self.job.preset, facts)
        self._notify_started(file)
        await self.engine.run(file, target, args)
