"""
Defines the `EncodingJob` model: the configuration for one transcoding request.
"""
from enum import Enum
from pathlib import Path
from typing import Type

from .codecs import (
    AudioCodec,
    EncoderPreset,
    ImageCodec,
    SubtitleCodec,
    VideoCodec,
    VideoContainer,
)
from .exceptions import InvalidConfigurationException


class EncodingJob:
    """
    One directory-or-file transcoding request.

    A job is built once per command-line invocation. The codec, container and
    `force` attributes may be reassigned before a driver starts encoding; after
    that the drivers only read from it. Per-file adjustments (such as a subtitle
    codec substitution) are computed separately for each file and never written
    back here, so one file's fix cannot leak into the next file's arguments.

    Attributes:
        input_root (Path): The file or directory to transcode.
        output_root (Path): The output directory, or an output file name when the
                            path has an extension.
        preset (EncoderPreset): The quality preset.
        force (bool): Re-encode files whose extension already matches the target.
        video_codec, audio_codec, subtitle_codec, image_codec, container:
            Media-kind specific codec selections.
    """

    def __init__(
        self,
        input_root: Path,
        output_root: Path,
        preset: EncoderPreset = EncoderPreset.NORMAL,
        force: bool = False,
        video_codec: VideoCodec = VideoCodec.COPY,
        audio_codec: AudioCodec = AudioCodec.COPY,
        subtitle_codec: SubtitleCodec = SubtitleCodec.COPY,
        image_codec: ImageCodec = ImageCodec.JPEG,
        container: VideoContainer = VideoContainer.MKV,
    ):
        self.input_root = Path(input_root)
        self.output_root = Path(output_root)
        self.preset = preset
        self.force = force
        self.video_codec = video_codec
        self.audio_codec = audio_codec
        self.subtitle_codec = subtitle_codec
        self.image_codec = image_codec
        self.container = container

    def validate(self) -> None:
        """
        Checks every enumerated setting against its enum.

        Raises:
            InvalidConfigurationException: If any setting is not a member of its enum.
        """
        checks: tuple[tuple[str, object, Type[Enum]], ...] = (
            ("preset", self.preset, EncoderPreset),
            ("video codec", self.video_codec, VideoCodec),
            ("audio codec", self.audio_codec, AudioCodec),
            ("subtitle codec", self.subtitle_codec, SubtitleCodec),
            ("image codec", self.image_codec, ImageCodec),
            ("container", self.container, VideoContainer),
        )
        for label, value, enum_type in checks:
            if not isinstance(value, enum_type):
                allowed = ", ".join(m.value for m in enum_type)
                raise InvalidConfigurationException(
                    f"Invalid {label} '{value}'. Expected one of: {allowed}"
                )

    def __repr__(self) -> str:
        return (
            f"EncodingJob(input_root={self.input_root!s}, output_root={self.output_root!s}, "
            f"preset={self.preset.value if isinstance(self.preset, EncoderPreset) else self.preset}, "
            f"force={self.force})"
        )
