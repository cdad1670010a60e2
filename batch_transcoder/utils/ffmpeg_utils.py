"""
This module provides the pieces that talk to FFmpeg as an external process.

It contains an async command runner that owns the subprocess for the whole
duration of a call (the process is killed and reaped on every exit path,
including cancellation) and the `FFmpegEngine`, the facade the encoder drivers
use to run one encode from an input path, an output path and a flat list of
flags.
"""

import asyncio
import os
import shlex
import subprocess
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict, List, Optional, Sequence, Union

from loguru import logger

from ..config.common import ENGINE_BASE_ARGS, ENGINE_ENVIRONMENT, NULL_SINK, executable
from ..domain.exceptions import EngineFailureException


def format_command(cmd_list: Sequence[str]) -> str:
    """Returns a copy-pasteable rendering of a command for logs and error messages."""
    if os.name == "nt":
        return subprocess.list2cmdline(list(cmd_list))
    return shlex.join(cmd_list)


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    logger.debug(f"Killing engine process {process.pid}")
    try:
        process.kill()
    except ProcessLookupError:
        pass
    await process.wait()


@asynccontextmanager
async def engine_process(
    cmd_list: Sequence[str], env: Optional[Dict[str, str]] = None
) -> AsyncIterator[asyncio.subprocess.Process]:
    """
    Starts an external process and guarantees it does not outlive the block.

    The process is started with stdin closed and stdout/stderr piped. Whether
    the block finishes normally, raises, or is cancelled, a process that is
    still running on exit is killed and waited for.

    Args:
        cmd_list: The command and its arguments.
        env: Extra environment variables merged over the current environment.

    Raises:
        EngineFailureException: If the executable cannot be started.
    """
    merged_env = {**os.environ, **env} if env else None
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd_list,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=merged_env,
        )
    except OSError as e:
        logger.error(
            f"Error: Could not start '{cmd_list[0]}'. Ensure it's in your system's PATH or configured correctly."
        )
        raise EngineFailureException(
            f"Could not start '{cmd_list[0]}': {e}", command=cmd_list
        ) from e
    try:
        yield process
    finally:
        await _terminate(process)


async def run_cmd(
    cmd_parts: Sequence[str],
    env: Optional[Dict[str, str]] = None,
    show_cmd: bool = False,
) -> subprocess.CompletedProcess:
    """
    Executes an external command and captures its output.

    The call is an async suspension point and is not complete until the process
    has exited. If the awaiting task is cancelled, the process is killed before
    the cancellation propagates.

    Args:
        cmd_parts: The command to execute as a list of arguments.
        env: Extra environment variables for the process.
        show_cmd: If True, the command is logged at DEBUG level before execution.

    Returns:
        A `subprocess.CompletedProcess` with the decoded stdout and stderr. A
        non-zero return code is returned, not raised; callers decide what a
        failure means for them.
    """
    cmd_list: List[str] = [str(part) for part in cmd_parts]
    if not cmd_list:
        raise ValueError("run_cmd received an empty command list.")

    if show_cmd:
        logger.debug(f"Executing: {format_command(cmd_list)}")

    async with engine_process(cmd_list, env=env) as process:
        stdout, stderr = await process.communicate()

    result = subprocess.CompletedProcess(
        cmd_list,
        process.returncode,
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
    )
    if result.stderr and result.returncode != 0:
        logger.debug(f"Command stderr (error, rc={result.returncode}): {result.stderr.strip()}")
    elif result.stderr:
        logger.trace(f"Command stderr (rc={result.returncode}): {result.stderr.strip()}")
    return result


def remove_partial_output(path: Path) -> None:
    """Deletes a partially written output file, if there is one."""
    try:
        path.unlink()
        logger.debug(f"Removed partial output {path}")
    except (FileNotFoundError, NotADirectoryError):
        pass


class TranscodingEngine(ABC):
    """
    The contract for an engine that re-encodes or remuxes audio/video.

    `run` either completes with the output written, or raises. When it raises,
    any partial output it created has already been removed.
    """

    @abstractmethod
    async def run(
        self,
        input_path: Path,
        output_path: Union[Path, str],
        flags: Sequence[str],
    ) -> None:
        raise NotImplementedError


class FFmpegEngine(TranscodingEngine):
    """Runs `ffmpeg` as a subprocess for a single input/output pair."""

    def __init__(self, ffmpeg_cmd: Optional[str] = None):
        self.ffmpeg_cmd = ffmpeg_cmd or executable("ffmpeg")

    def build_command(
        self, input_path: Path, output_path: Union[Path, str], flags: Sequence[str]
    ) -> List[str]:
        # Only the null sink may be overwritten; real targets are checked by the
        # drivers and must never be clobbered.
        overwrite = "-y" if str(output_path) == NULL_SINK else "-n"
        cmd_list = [self.ffmpeg_cmd, *ENGINE_BASE_ARGS, overwrite, "-i", str(input_path)]
        cmd_list.extend(flags)
        cmd_list.append(str(output_path))
        return cmd_list

    async def run(
        self,
        input_path: Path,
        output_path: Union[Path, str],
        flags: Sequence[str],
    ) -> None:
        writes_file = str(output_path) != NULL_SINK
        target = Path(output_path)
        created_here = writes_file and not target.exists()

        cmd_list = self.build_command(input_path, output_path, flags)
        try:
            res = await run_cmd(cmd_list, env=ENGINE_ENVIRONMENT, show_cmd=True)
        except (EngineFailureException, asyncio.CancelledError):
            if created_here:
                remove_partial_output(target)
            raise

        if res.returncode != 0:
            if created_here:
                remove_partial_output(target)
            raise EngineFailureException(
                f"ffmpeg failed on '{input_path.name}' (rc={res.returncode}): {res.stderr.strip()}",
                command=cmd_list,
                stderr=res.stderr,
                returncode=res.returncode,
            )
