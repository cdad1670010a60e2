import asyncio
from pathlib import Path
from typing import Iterable, List, Tuple

import pytest
from loguru import logger

from batch_transcoder.config.common import NULL_SINK
from batch_transcoder.domain.exceptions import EngineFailureException, ProbeFailureException
from batch_transcoder.domain.media import MediaProbe
from batch_transcoder.utils.ffmpeg_utils import TranscodingEngine
from batch_transcoder.utils.image_utils import ImageEngine


class FakeProbe(MediaProbe):
    """Answers from fixed values and records which files were probed for what."""

    def __init__(self, duration=60, channels=2, crop="", fail_on: Iterable[str] = ()):
        self.duration = duration
        self.channels = channels
        self.crop = crop
        self.fail_on = set(fail_on)
        self.calls: List[Tuple[str, str]] = []

    def _record(self, what: str, path: Path) -> None:
        self.calls.append((what, path.name))
        if path.name in self.fail_on:
            raise ProbeFailureException(f"cannot probe {path.name}")

    async def get_duration(self, path):
        self._record("duration", path)
        return self.duration

    async def get_channel_count(self, path):
        self._record("channels", path)
        return self.channels

    async def get_crop_suggestion(self, path):
        self._record("crop", path)
        return self.crop


class FakeEngine(TranscodingEngine):
    """
    Records every invocation and writes a small output file.

    Files named in `fail_on` get a partial output followed by a failure, which
    leaves the cleanup to the driver.
    """

    def __init__(self, fail_on: Iterable[str] = ()):
        self.fail_on = set(fail_on)
        self.calls: List[Tuple[Path, str, List[str]]] = []

    async def run(self, input_path, output_path, flags):
        flags = list(flags)
        self.calls.append((Path(input_path), str(output_path), flags))
        if "-passlogfile" in flags and flags[flags.index("-pass") + 1] == "1":
            passlog = flags[flags.index("-passlogfile") + 1]
            Path(f"{passlog}-0.log").write_text("first pass statistics")
        if str(output_path) == NULL_SINK:
            return
        output = Path(output_path)
        if Path(input_path).name in self.fail_on:
            output.write_bytes(b"partial")
            raise EngineFailureException(f"engine failed on {Path(input_path).name}")
        output.write_bytes(b"encoded")

    def outputs(self) -> List[str]:
        return [output for _, output, _ in self.calls]


class BlockingEngine(TranscodingEngine):
    """Writes a partial output and then waits until it is cancelled."""

    def __init__(self):
        self.started = asyncio.Event()

    async def run(self, input_path, output_path, flags):
        Path(output_path).write_bytes(b"partial")
        self.started.set()
        await asyncio.Event().wait()


class FakeImageEngine(ImageEngine):
    def __init__(self):
        self.calls = []

    def run(self, input_path, output_path, codec, quality):
        self.calls.append((input_path, output_path, codec, quality))
        output_path.write_bytes(b"image")


def make_files(root: Path, *relative: str) -> List[Path]:
    """Creates empty files under `root` and returns their paths."""
    paths = []
    for name in relative:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"source")
        paths.append(path)
    return paths


@pytest.fixture
def probe():
    return FakeProbe()


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def input_dir(tmp_path):
    path = tmp_path / "in"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "out"


@pytest.fixture(autouse=True)
def _reset_logger():
    """The CLI reconfigures loguru for a stream pytest closes after each test."""
    yield
    logger.remove()
