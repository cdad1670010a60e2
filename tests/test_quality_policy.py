import pytest

from batch_transcoder.domain.codecs import EncoderPreset, VideoCodec
from batch_transcoder.domain.exceptions import InvalidPresetException
from batch_transcoder.services import quality_policy


@pytest.mark.parametrize(
    "preset, codec, speed, factor, bitrate",
    [
        (EncoderPreset.QUALITY, VideoCodec.AV1, 6, 27, 128_000),
        (EncoderPreset.NORMAL, VideoCodec.AV1, 10, 33, 96_000),
        (EncoderPreset.QUALITY, VideoCodec.VP9, 6, 27, 128_000),
        (EncoderPreset.QUALITY, VideoCodec.AVC, 6, 22, 128_000),
        (EncoderPreset.NORMAL, VideoCodec.HEVC, 10, 28, 96_000),
    ],
)
def test_resolve_uses_codec_family_table(preset, codec, speed, factor, bitrate):
    profile = quality_policy.resolve(preset, codec)
    assert profile.speed_level == speed
    assert profile.quality_factor == factor
    assert profile.audio_bitrate == bitrate


def test_resolve_without_codec_uses_avc_table():
    assert quality_policy.resolve(EncoderPreset.NORMAL).quality_factor == 28


def test_unknown_preset_is_rejected():
    with pytest.raises(InvalidPresetException):
        quality_policy.resolve("ultra", VideoCodec.AVC)
    with pytest.raises(InvalidPresetException):
        quality_policy.image_quality("ultra")


def test_image_quality():
    assert quality_policy.image_quality(EncoderPreset.QUALITY) == 95
    assert quality_policy.image_quality(EncoderPreset.NORMAL) == 85


@pytest.mark.parametrize(
    "channels, expected",
    [(0, 96_000), (1, 96_000), (2, 96_000), (4, 96_000), (5, 192_000), (6, 192_000), (7, 240_000), (8, 240_000)],
)
def test_boosted_audio_bitrate(channels, expected):
    assert quality_policy.boosted_audio_bitrate(96_000, channels) == expected
