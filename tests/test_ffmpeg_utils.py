import asyncio
import subprocess
import sys

import pytest

from batch_transcoder.config.common import NULL_SINK
from batch_transcoder.domain.exceptions import EngineFailureException
from batch_transcoder.utils import ffmpeg_utils
from batch_transcoder.utils.ffmpeg_utils import FFmpegEngine, run_cmd


def test_build_command_never_overwrites_real_targets(tmp_path):
    engine = FFmpegEngine("ffmpeg")
    cmd = engine.build_command(tmp_path / "in.mp4", tmp_path / "out.mkv", ["-c:v", "copy"])
    assert cmd == [
        "ffmpeg", "-hide_banner", "-loglevel", "error", "-nostdin", "-n",
        "-i", str(tmp_path / "in.mp4"), "-c:v", "copy", str(tmp_path / "out.mkv"),
    ]
    null_cmd = engine.build_command(tmp_path / "in.mp4", NULL_SINK, ["-f", "null"])
    assert "-y" in null_cmd and "-n" not in null_cmd
    assert null_cmd[-1] == NULL_SINK


def test_run_removes_output_it_created_on_failure(tmp_path, monkeypatch):
    target = tmp_path / "out.mkv"

    async def failing_run_cmd(cmd_list, env=None, show_cmd=False):
        assert env == {"SVT_LOG": "0"}
        target.write_bytes(b"partial")
        return subprocess.CompletedProcess(cmd_list, 1, "", "Invalid data found")

    monkeypatch.setattr(ffmpeg_utils, "run_cmd", failing_run_cmd)

    with pytest.raises(EngineFailureException) as excinfo:
        asyncio.run(FFmpegEngine("ffmpeg").run(tmp_path / "in.mp4", target, []))

    assert not target.exists()
    assert excinfo.value.returncode == 1
    assert "Invalid data found" in excinfo.value.stderr


def test_run_cmd_returns_nonzero_exit_codes():
    result = asyncio.run(run_cmd([sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"]))
    assert result.returncode == 3
    assert result.stderr == "bad"


def test_missing_executable_is_an_engine_failure(tmp_path):
    with pytest.raises(EngineFailureException):
        asyncio.run(run_cmd([str(tmp_path / "no-such-ffmpeg"), "-version"]))


def test_cancelled_command_is_killed():
    async def scenario():
        task = asyncio.create_task(run_cmd([sys.executable, "-c", "import time; time.sleep(60)"]))
        await asyncio.sleep(0.5)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(asyncio.wait_for(scenario(), timeout=30))
