"""
Builds the engine flags for each file.

The builder works in two steps. `ArgumentBuilder.gather_facts` asks the probing
facade only for what the chosen codecs need (channel count for re-encoded audio,
a crop suggestion for re-encoded video), running the probes concurrently. The
module-level `*_args` functions then turn those facts and the per-file settings
into a flat list of FFmpeg flags without any further I/O, which keeps the
codec x container x subtitle x two-pass decisions easy to test in isolation.
"""
import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from loguru import logger

from ..config.audio import OPUS_LAYOUT_FILTER
from ..config.video import VIDEO_SPEED_LEVEL_MAX, VP9_CPU_USED_MAX, X26X_PRESET_NAMES
from ..domain.codecs import (
    AudioCodec,
    EncoderPreset,
    SubtitleCodec,
    VideoCodec,
    VideoContainer,
)
from ..domain.job import EncodingJob
from ..domain.media import MediaProbe
from . import quality_policy


@dataclass(frozen=True)
class VideoSettings:
    """The effective codecs for one video file, after all per-file overrides."""

    video_codec: VideoCodec
    audio_codec: AudioCodec
    subtitle_codec: SubtitleCodec
    container: VideoContainer


@dataclass(frozen=True)
class ProbeFacts:
    channels: int = 0
    crop: str = ""


def effective_av_codecs(job: EncodingJob) -> Tuple[VideoCodec, AudioCodec]:
    """WebM only carries VP9/Opus here, so the container overrides whatever was requested."""
    if job.container is VideoContainer.WEBM:
        return VideoCodec.VP9, AudioCodec.OPUS
    return job.video_codec, job.audio_codec


def effective_subtitle_codec(
    source: Path, container: VideoContainer, configured: SubtitleCodec
) -> SubtitleCodec:
    """
    Returns the subtitle codec to use for one file.

    MP4 stores subtitles as MPEG-4 timed text, which no other container accepts,
    and MP4 accepts nothing else. A passthrough ("copy") request is therefore
    turned into SRT when leaving MP4 and into timed text when entering it. The
    result applies to this file only.
    """
    if configured is not SubtitleCodec.COPY:
        return configured
    source_is_mp4 = source.suffix.lower() == VideoContainer.MP4.extension
    target_is_mp4 = container is VideoContainer.MP4
    if source_is_mp4 and not target_is_mp4:
        return SubtitleCodec.SRT
    if not source_is_mp4 and target_is_mp4:
        return SubtitleCodec.MOVTEXT
    return configured


def speed_flags(codec: VideoCodec, speed_level: int) -> List[str]:
    """Translates the 0-13 speed level to the encoder's own speed option."""
    match codec:
        case VideoCodec.COPY:
            return []
        case VideoCodec.AV1:
            return ["-preset", str(speed_level)]
        case VideoCodec.AVC | VideoCodec.HEVC:
            index = round(speed_level * (len(X26X_PRESET_NAMES) - 1) / VIDEO_SPEED_LEVEL_MAX)
            return ["-preset", X26X_PRESET_NAMES[index]]
        case VideoCodec.VP9:
            return ["-cpu-used", str(round(speed_level * VP9_CPU_USED_MAX / VIDEO_SPEED_LEVEL_MAX))]


def audio_flags(codec: AudioCodec, base_bitrate: int, channels: int) -> List[str]:
    args = ["-c:a", codec.engine_name]
    if codec is AudioCodec.COPY:
        return args
    args.extend(["-b:a", str(quality_policy.boosted_audio_bitrate(base_bitrate, channels))])
    if codec is AudioCodec.OPUS:
        args.extend(["-af", OPUS_LAYOUT_FILTER])
    return args


def subtitle_flags(settings: VideoSettings) -> List[str]:
    # WebM only holds WebVTT; the engine's default subtitle encoder for the
    # container is the only one that works there.
    if settings.container is VideoContainer.WEBM:
        return []
    return ["-c:s", settings.subtitle_codec.engine_name]


def crop_flags(facts: ProbeFacts) -> List[str]:
    return ["-vf", facts.crop] if facts.crop else []


def video_args(settings: VideoSettings, preset: EncoderPreset, facts: ProbeFacts) -> List[str]:
    """Flags for a single-pass video encode (every codec except VP9)."""
    profile = quality_policy.resolve(preset, settings.video_codec)
    args = ["-c:v", settings.video_codec.engine_name]
    if settings.video_codec is not VideoCodec.COPY:
        args.extend(["-crf", str(profile.quality_factor)])
        args.extend(speed_flags(settings.video_codec, profile.speed_level))
    args.extend(audio_flags(settings.audio_codec, profile.audio_bitrate, facts.channels))
    args.extend(subtitle_flags(settings))
    if settings.video_codec is not VideoCodec.COPY:
        args.extend(crop_flags(facts))
    return args


def _vp9_base(preset: EncoderPreset, pass_number: int, passlog: Path) -> List[str]:
    profile = quality_policy.resolve(preset, VideoCodec.VP9)
    return [
        "-c:v", VideoCodec.VP9.engine_name,
        "-b:v", "0",
        "-crf", str(profile.quality_factor),
        "-pass", str(pass_number),
        "-passlogfile", str(passlog),
        "-row-mt", "1",
    ]


def vp9_first_pass_args(preset: EncoderPreset, facts: ProbeFacts, passlog: Path) -> List[str]:
    """
    Flags for the analysis pass of a VP9 encode.

    Audio is disabled and the output format is 'null'; the caller writes to the
    platform null sink. The pass statistics go to `<passlog>-0.log`.
    """
    args = _vp9_base(preset, 1, passlog)
    args.extend(["-an", "-f", "null"])
    args.extend(crop_flags(facts))
    return args


def vp9_second_pass_args(
    settings: VideoSettings, preset: EncoderPreset, facts: ProbeFacts, passlog: Path
) -> List[str]:
    """Flags for the pass that writes the real VP9 output."""
    profile = quality_policy.resolve(preset, VideoCodec.VP9)
    args = _vp9_base(preset, 2, passlog)
    args.extend(speed_flags(VideoCodec.VP9, profile.speed_level))
    args.extend(audio_flags(settings.audio_codec, profile.audio_bitrate, facts.channels))
    args.extend(subtitle_flags(settings))
    args.extend(crop_flags(facts))
    return args


def audio_only_args(codec: AudioCodec, preset: EncoderPreset, facts: ProbeFacts) -> List[str]:
    """Flags for the audio driver. Attached cover art is dropped when re-encoding."""
    args = audio_flags(codec, quality_policy.resolve(preset).audio_bitrate, facts.channels)
    if codec is not AudioCodec.COPY:
        args.append("-vn")
    return args


async def _constant(value):
    return value


class ArgumentBuilder:
    """Collects the probe results the flag builders need for one file."""

    def __init__(self, probe: MediaProbe):
        self.probe = probe

    async def gather_facts(self, file: Path, need_channels: bool, need_crop: bool) -> ProbeFacts:
        channels, crop = await asyncio.gather(
            self.probe.get_channel_count(file) if need_channels else _constant(0),
            self.probe.get_crop_suggestion(file) if need_crop else _constant(""),
        )
        facts = ProbeFacts(channels=channels, crop=crop)
        logger.debug(f"Probe facts for '{file.name}': channels={facts.channels}, crop={facts.crop or 'none'}")
        return facts

    async def facts_for_video(self, file: Path, settings: VideoSettings, crop: bool) -> ProbeFacts:
        return await self.gather_facts(
            file,
            need_channels=settings.audio_codec is not AudioCodec.COPY,
            need_crop=crop and settings.video_codec is not VideoCodec.COPY,
        )

    async def facts_for_audio(self, file: Path, codec: AudioCodec) -> ProbeFacts:
        return await self.gather_facts(file, need_channels=codec is not AudioCodec.COPY, need_crop=False)
