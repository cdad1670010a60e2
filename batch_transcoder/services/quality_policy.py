"""
The quality policy: maps a preset and a codec to concrete encoder parameters.

There is no continuous quality scale and no numeric override. Every value comes
from the tables in `config/`, selected by preset and, for video, by codec family.
"""
from dataclasses import dataclass
from typing import Optional

from ..config.audio import AUDIO_BITRATE, CHANNEL_BITRATE_MULTIPLIERS
from ..config.image import IMAGE_QUALITY
from ..config.video import (
    VIDEO_QUALITY_AV1_FAMILY,
    VIDEO_QUALITY_AVC_FAMILY,
    VIDEO_SPEED_LEVEL,
)
from ..domain.codecs import EncoderPreset, VideoCodec
from ..domain.exceptions import InvalidPresetException


@dataclass(frozen=True)
class QualityProfile:
    """Derived encoder parameters for one (preset, codec) pair."""

    speed_level: int
    quality_factor: int
    audio_bitrate: int


def _preset_key(preset: EncoderPreset) -> str:
    if not isinstance(preset, EncoderPreset):
        raise InvalidPresetException(
            f"Invalid preset '{preset}'. Expected one of: "
            + ", ".join(p.value for p in EncoderPreset)
        )
    return preset.value


def resolve(preset: EncoderPreset, codec: Optional[VideoCodec] = None) -> QualityProfile:
    """
    Resolves the quality profile for a preset and video codec.

    The quality factor depends on the codec family: AV1/VP9 and AVC/HEVC use
    different scales. `None` and `VideoCodec.COPY` resolve with the AVC/HEVC
    table; the factor is not used for copied streams.

    Raises:
        InvalidPresetException: If `preset` is not an `EncoderPreset` member.
    """
    key = _preset_key(preset)
    av1_family = codec is not None and codec.is_av1_family
    quality_table = VIDEO_QUALITY_AV1_FAMILY if av1_family else VIDEO_QUALITY_AVC_FAMILY
    return QualityProfile(
        speed_level=VIDEO_SPEED_LEVEL[key],
        quality_factor=quality_table[key],
        audio_bitrate=AUDIO_BITRATE[key],
    )


def image_quality(preset: EncoderPreset) -> int:
    return IMAGE_QUALITY[_preset_key(preset)]


def boosted_audio_bitrate(base_bitrate: int, channels: int) -> int:
    """
    Scales a stereo bitrate for surround sources.

    7 or more channels get 2.5x, 5 or 6 channels get 2x, anything else keeps
    the base bitrate.
    """
    for min_channels, multiplier in CHANNEL_BITRATE_MULTIPLIERS:
        if channels >= min_channels:
            return int(base_bitrate * multiplier)
    return base_bitrate
