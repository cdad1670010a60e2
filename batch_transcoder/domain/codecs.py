"""
Codec, container and preset enumerations.

Each enum maps its members to the values the external engines understand through
a `match` statement that ends in `assert_never`, so adding a member without a
mapping is caught by the type checker instead of failing at runtime.
"""
from enum import Enum
from typing import assert_never


class EncoderPreset(Enum):
    """Presets for encoder settings."""

    QUALITY = "quality"  # Aim for quality over speed and file size.
    NORMAL = "normal"  # Balance quality, speed and file size.


class MediaKind(Enum):
    """High-level categories of supported media files."""

    VIDEO = "video"
    AUDIO = "audio"
    IMAGE = "image"


class VideoCodec(Enum):
    COPY = "copy"
    AVC = "avc"
    HEVC = "hevc"
    AV1 = "av1"
    VP9 = "vp9"

    @property
    def engine_name(self) -> str:
        match self:
            case VideoCodec.COPY:
                return "copy"
            case VideoCodec.AVC:
                return "libx264"
            case VideoCodec.HEVC:
                return "libx265"
            case VideoCodec.AV1:
                return "libsvtav1"
            case VideoCodec.VP9:
                return "libvpx-vp9"
            case _:
                assert_never(self)

    @property
    def is_av1_family(self) -> bool:
        """AV1 and VP9 share the 0-63 quality scale."""
        return self in (VideoCodec.AV1, VideoCodec.VP9)


class AudioCodec(Enum):
    COPY = "copy"
    MP3 = "mp3"
    AAC = "aac"
    OPUS = "opus"

    @property
    def engine_name(self) -> str:
        match self:
            case AudioCodec.COPY:
                return "copy"
            case AudioCodec.MP3:
                return "libmp3lame"
            case AudioCodec.AAC:
                return "aac"
            case AudioCodec.OPUS:
                return "libopus"
            case _:
                assert_never(self)

    def extension_for(self, source_extension: str) -> str:
        """Output extension for a file encoded with this codec; COPY keeps the source's."""
        match self:
            case AudioCodec.COPY:
                return source_extension
            case AudioCodec.MP3:
                return ".mp3"
            case AudioCodec.AAC:
                return ".aac"
            case AudioCodec.OPUS:
                return ".opus"
            case _:
                assert_never(self)


class SubtitleCodec(Enum):
    COPY = "copy"
    SRT = "srt"
    SSA = "ssa"
    MOVTEXT = "movtext"

    @property
    def engine_name(self) -> str:
        match self:
            case SubtitleCodec.COPY:
                return "copy"
            case SubtitleCodec.SRT:
                return "subrip"
            case SubtitleCodec.SSA:
                return "ass"
            case SubtitleCodec.MOVTEXT:
                return "mov_text"
            case _:
                assert_never(self)


class VideoContainer(Enum):
    MP4 = "mp4"
    MKV = "mkv"
    WEBM = "webm"

    @property
    def extension(self) -> str:
        match self:
            case VideoContainer.MP4:
                return ".mp4"
            case VideoContainer.MKV:
                return ".mkv"
            case VideoContainer.WEBM:
                return ".webm"
            case _:
                assert_never(self)


class ImageCodec(Enum):
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"

    @property
    def extension(self) -> str:
        match self:
            case ImageCodec.JPEG:
                return ".jpg"
            case ImageCodec.PNG:
                return ".png"
            case ImageCodec.WEBP:
                return ".webp"
            case _:
                assert_never(self)

    @property
    def pillow_format(self) -> str:
        match self:
            case ImageCodec.JPEG:
                return "JPEG"
            case ImageCodec.PNG:
                return "PNG"
            case ImageCodec.WEBP:
                return "WEBP"
            case _:
                assert_never(self)
