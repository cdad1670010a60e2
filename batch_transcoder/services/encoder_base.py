"""
The shared skeleton of the encoder drivers.

Every driver follows the same per-file flow: compute the target path, apply the
skip policy, create the target directory, build the engine arguments, run the
engine, and clean up after a failure. `Encoder` implements the flow and the
bounded worker pool; subclasses provide the target extension and the actual
encode step for their media kind.
"""

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable, Iterable, List, Optional, Set

from loguru import logger

from ..config.common import DEFAULT_MAX_WORKERS
from ..domain.codecs import MediaKind
from ..domain.exceptions import (
    BatchEncodingException,
    EngineFailureException,
    FileFailure,
    OutputPathException,
    ProbeFailureException,
)
from ..domain.job import EncodingJob
from ..utils.ffmpeg_utils import remove_partial_output
from ..utils.format_utils import format_timedelta, resolve_target_path, same_extension
from .file_processing_service import ProcessFiles

FileListener = Callable[[str], None]


class Encoder:
    """
    Base class for the video, audio and image drivers.

    Files are processed by at most `max_workers` concurrent workers. Engine and
    probe failures are isolated per file: the partial output is removed, the
    failure is recorded, and the remaining files are still processed. Once every
    file has been attempted, a `BatchEncodingException` lists the failures.
    Cancellation is not isolated; it stops all workers and propagates.

    Attributes:
        job (EncodingJob): The job configuration.
        files (ProcessFiles): The lazily discovered input files.
        max_workers (int): Number of files processed at the same time.
        encoded (List[Path]): Inputs encoded during the last run.
        skipped (List[Path]): Inputs skipped during the last run.
        failures (List[FileFailure]): Inputs that failed during the last run.
    """

    media_kind: MediaKind

    def __init__(self, job: EncodingJob, max_workers: Optional[int] = None):
        job.validate()
        self.job = job
        self.files = ProcessFiles.for_kind(job.input_root, self.media_kind)
        self.max_workers = max(1, max_workers or DEFAULT_MAX_WORKERS)
        self._listeners: List[FileListener] = []
        self.encoded: List[Path] = []
        self.skipped: List[Path] = []
        self.failures: List[FileFailure] = []
        self._claimed: Set[Path] = set()

    # --- Notifications ---

    def add_listener(self, callback: FileListener) -> None:
        """Registers a callback invoked with the file name when a file starts encoding."""
        self._listeners.append(callback)

    def _notify_started(self, file: Path) -> None:
        for callback in self._listeners:
            callback(file.name)

    # --- Per-file policy ---

    def target_extension(self, file: Path) -> str:
        raise NotImplementedError("Subclasses must implement target_extension().")

    def target_path(self, file: Path) -> Path:
        return resolve_target_path(
            file, self.job.input_root, self.job.output_root, self.target_extension(file)
        )

    def should_skip(self, file: Path, target: Path) -> bool:
        """
        Applies the skip policy.

        A file is skipped when its target already exists, which makes reruns
        idempotent, or when `force` is off and the source already has the target
        extension. A target that is not skipped is claimed for the current run.
        """
        if not self.job.force and same_extension(file.suffix, target.suffix):
            logger.debug(f"Skipping '{file.name}': already in the target format (use --force to re-encode).")
            return True
        return not self.claim_target(file, target)

    def claim_target(self, file: Path, target: Path) -> bool:
        """
        Reserves `target` for `file`.

        Returns False if the target exists on disk or another input of this run
        already claimed it. Claiming never awaits, so concurrent workers cannot
        both pass the check for the same target.
        """
        if target in self._claimed or target.exists():
            logger.debug(f"Skipping '{file.name}': target '{target}' already exists.")
            return False
        self._claimed.add(target)
        return True

    async def encode_file(self, file: Path, target: Path) -> None:
        raise NotImplementedError("Subclasses must implement encode_file().")

    # --- Orchestration ---

    def before_run(self) -> None:
        """Hook for one-time notices before any file is processed."""

    async def encode(self) -> None:
        """
        Encodes every discovered file.

        Raises:
            BatchEncodingException: If one or more files failed.
            asyncio.CancelledError: If the run was cancelled.
        """
        self.before_run()
        await self._run_batch(self.files, self._process)

    async def _run_batch(
        self, files: Iterable[Path], process: Callable[[Path], Awaitable[None]]
    ) -> None:
        self.encoded, self.skipped, self.failures = [], [], []
        self._claimed = set()
        semaphore = asyncio.Semaphore(self.max_workers)

        async def worker(file: Path) -> None:
            async with semaphore:
                await process(file)

        tasks = [asyncio.create_task(worker(file)) for file in files]
        logger.info(
            f"[{self.__class__.__name__}] {len(tasks)} file(s) to process with {self.max_workers} worker(s)."
        )
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        logger.info(
            f"[{self.__class__.__name__}] Done: {len(self.encoded)} encoded, "
            f"{len(self.skipped)} skipped, {len(self.failures)} failed."
        )
        if self.failures:
            raise BatchEncodingException(self.failures)

    async def _process(self, file: Path) -> None:
        target = self.target_path(file)
        if self.should_skip(file, target):
            self.skipped.append(file)
            return
        await self._guarded(file, target, lambda: self.encode_file(file, target))

    async def _guarded(
        self, file: Path, target: Path, step: Callable[[], Awaitable[None]]
    ) -> None:
        """
        Runs one file's encode step with directory creation, cleanup and failure isolation.

        Only an output that did not exist before the step is ever removed.
        """
        created_here = not target.exists()
        started = datetime.now()
        try:
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise OutputPathException(target, e) from e
            await step()
        except (EngineFailureException, ProbeFailureException, OutputPathException) as e:
            if created_here:
                remove_partial_output(target)
            logger.error(f"Failed to encode '{file}': {e}")
            self.failures.append(FileFailure(file, e))
            return
        except asyncio.CancelledError:
            if created_here:
                remove_partial_output(target)
            raise
        self.encoded.append(file)
        logger.debug(f"Finished '{file.name}' in {format_timedelta(datetime.now() - started)}")
