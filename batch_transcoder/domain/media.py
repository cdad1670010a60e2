"""
The probing facade: duration, audio channel count and crop suggestions for a file.

The drivers depend only on the abstract `MediaProbe`. `FFprobeMediaProbe` is the
production implementation; it uses `ffprobe` through the ffmpeg-python library
for stream metadata, and FFmpeg's `cropdetect` filter for black-border detection.
"""
import asyncio
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict

import ffmpeg
from loguru import logger

from ..config.common import executable
from ..config.video import (
    CROP_DETECT_FRAMES,
    CROP_LONG_VIDEO_SECONDS,
    CROP_LONG_VIDEO_START,
)
from ..utils.ffmpeg_utils import run_cmd
from .exceptions import EngineFailureException, ProbeFailureException

CROP_PATTERN = re.compile(r"crop=\S+")


class MediaProbe(ABC):
    """Reports the facts about a media file that argument building depends on."""

    @abstractmethod
    async def get_duration(self, path: Path) -> int:
        """Duration in whole seconds."""
        raise NotImplementedError

    @abstractmethod
    async def get_channel_count(self, path: Path) -> int:
        """Channel count of the first audio stream, 0 when there is none."""
        raise NotImplementedError

    @abstractmethod
    async def get_crop_suggestion(self, path: Path) -> str:
        """A crop filter expression such as 'crop=1920:800:0:140', or '' for no crop."""
        raise NotImplementedError


class FFprobeMediaProbe(MediaProbe):
    """
    `MediaProbe` backed by ffprobe/ffmpeg.

    ffmpeg-python's `probe` is synchronous, so it is run in a worker thread to
    keep the event loop free while other files are being encoded.
    """

    def __init__(self):
        self.ffprobe_cmd = executable("ffprobe")
        self.ffmpeg_cmd = executable("ffmpeg")

    async def _probe(self, path: Path, **kwargs: Any) -> Dict[str, Any]:
        try:
            return await asyncio.to_thread(
                ffmpeg.probe, str(path), cmd=self.ffprobe_cmd, **kwargs
            )
        except ffmpeg.Error as e:
            stderr = e.stderr.decode("utf-8", errors="replace") if e.stderr else ""
            raise ProbeFailureException(
                f"ffprobe failed for '{path.name}': {stderr.strip() or e}"
            ) from e
        except OSError as e:
            raise ProbeFailureException(f"Could not run ffprobe for '{path.name}': {e}") from e

    async def get_duration(self, path: Path) -> int:
        probe = await self._probe(path, select_streams="v:0")
        duration = (probe.get("format") or {}).get("duration")
        try:
            return int(float(duration))
        except (TypeError, ValueError):
            raise ProbeFailureException(
                f"{duration!r} (from file '{path.stem}') is not a number"
            ) from None

    async def get_channel_count(self, path: Path) -> int:
        probe = await self._probe(path, select_streams="a:0")
        streams = probe.get("streams") or []
        if not streams:
            return 0
        try:
            return int(streams[0].get("channels", 0))
        except (TypeError, ValueError):
            logger.warning(f"Unreadable channel count for '{path.name}', assuming stereo bitrate.")
            return 0

    def build_crop_command(self, path: Path, start: int) -> list:
        """
        Builds the cropdetect analysis command.

        Only key frames are decoded, accurate seeking is disabled and audio is
        ignored, which keeps the analysis to a fraction of a second per file.
        """
        stream = ffmpeg.input(str(path), ss=start, skip_frame="nokey", noaccurate_seek=None)
        stream = ffmpeg.output(
            stream, "-", f="null", vf="cropdetect", an=None, **{"frames:v": CROP_DETECT_FRAMES}
        )
        stream = stream.global_args("-hide_banner", "-nostats", "-nostdin")
        return ffmpeg.compile(stream, cmd=self.ffmpeg_cmd)

    async def get_crop_suggestion(self, path: Path) -> str:
        duration = await self.get_duration(path)
        start = CROP_LONG_VIDEO_START if duration >= CROP_LONG_VIDEO_SECONDS else 0
        cmd_list = self.build_crop_command(path, start)
        try:
            res = await run_cmd(cmd_list)
        except EngineFailureException as e:
            raise ProbeFailureException(str(e)) from e
        if res.returncode != 0:
            raise ProbeFailureException(
                f"Crop detection failed for '{path.name}' (rc={res.returncode}): {res.stderr.strip()}"
            )
        # cropdetect refines its estimate frame by frame; the last line wins.
        matches = CROP_PATTERN.findall(res.stderr) or CROP_PATTERN.findall(res.stdout)
        suggestion = matches[-1] if matches else ""
        logger.debug(f"Crop suggestion for '{path.name}': {suggestion or 'none'}")
        return suggestion
