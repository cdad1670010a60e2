import asyncio
import subprocess
from pathlib import Path

import ffmpeg
import pytest

from batch_transcoder.domain import media
from batch_transcoder.domain.exceptions import ProbeFailureException
from batch_transcoder.domain.media import FFprobeMediaProbe


@pytest.fixture
def probe_result(monkeypatch):
    """Replaces ffmpeg.probe with a stub returning the dict stored in the fixture."""
    result = {}
    calls = []

    def fake_probe(filename, cmd="ffprobe", **kwargs):
        calls.append(kwargs)
        if isinstance(result.get("error"), Exception):
            raise result["error"]
        return result

    monkeypatch.setattr(media.ffmpeg, "probe", fake_probe)
    result["_calls"] = calls
    return result


def test_duration_is_whole_seconds(probe_result):
    probe_result["format"] = {"duration": "123.7"}
    assert asyncio.run(FFprobeMediaProbe().get_duration(Path("a.mkv"))) == 123
    assert probe_result["_calls"][-1] == {"select_streams": "v:0"}


def test_missing_duration_is_a_probe_failure(probe_result):
    probe_result["format"] = {}
    with pytest.raises(ProbeFailureException):
        asyncio.run(FFprobeMediaProbe().get_duration(Path("a.mkv")))


def test_channel_count(probe_result):
    probe_result["streams"] = [{"channels": 6}]
    assert asyncio.run(FFprobeMediaProbe().get_channel_count(Path("a.mkv"))) == 6
    probe_result["streams"] = []
    assert asyncio.run(FFprobeMediaProbe().get_channel_count(Path("a.mkv"))) == 0


def test_ffprobe_error_is_a_probe_failure(probe_result):
    probe_result["error"] = ffmpeg.Error("ffprobe", b"", b"moov atom not found")
    with pytest.raises(ProbeFailureException, match="moov atom not found"):
        asyncio.run(FFprobeMediaProbe().get_channel_count(Path("a.mp4")))


def test_crop_command_seeks_into_long_videos():
    cmd = FFprobeMediaProbe().build_crop_command(Path("movie.mkv"), 300)
    assert cmd[cmd.index("-ss") + 1] == "300"
    assert cmd[cmd.index("-vf") + 1] == "cropdetect"
    assert cmd[cmd.index("-frames:v") + 1] == "20"
    assert "-an" in cmd
    assert cmd.index("-ss") < cmd.index("-i")


def test_last_crop_suggestion_wins(probe_result, monkeypatch):
    probe_result["format"] = {"duration": "7200"}
    seen = []

    async def fake_run_cmd(cmd_list, env=None, show_cmd=False):
        seen.append(cmd_list)
        stderr = (
            "[Parsed_cropdetect_0] x1:0 crop=1920:816:0:132\n"
            "[Parsed_cropdetect_0] x1:0 crop=1920:800:0:140\n"
        )
        return subprocess.CompletedProcess(cmd_list, 0, "", stderr)

    monkeypatch.setattr(media, "run_cmd", fake_run_cmd)

    assert asyncio.run(FFprobeMediaProbe().get_crop_suggestion(Path("movie.mkv"))) == "crop=1920:800:0:140"
    assert seen[0][seen[0].index("-ss") + 1] == "300"


def test_no_crop_lines_means_no_crop(probe_result, monkeypatch):
    probe_result["format"] = {"duration": "30"}

    async def fake_run_cmd(cmd_list, env=None, show_cmd=False):
        return subprocess.CompletedProcess(cmd_list, 0, "", "")

    monkeypatch.setattr(media, "run_cmd", fake_run_cmd)
    assert asyncio.run(FFprobeMediaProbe().get_crop_suggestion(Path("short.mkv"))) == ""
