"""
Defines custom exception types for the Batch Transcoder application.

These exceptions allow for more specific error handling throughout the encoding
drivers. Instead of catching a generic `Exception`, callers can tell apart a bad
input path, a rejected configuration, an engine failure and a probe failure, and
react accordingly. The command-line entry point maps every one of them to a
message on stderr and exit code 1.

All custom exceptions inherit from the base `TranscoderException`.
"""
from pathlib import Path
from typing import List, Optional, Sequence


class TranscoderException(Exception):
    """Base class for all custom exceptions in the Batch Transcoder application."""

    pass


class PathNotFoundException(TranscoderException):
    """
    Raised when the input path is neither an existing file nor a directory.

    This is fatal for the job and is raised before any file is touched.
    """

    def __init__(self, path: Path):
        super().__init__(f"Path at '{path}' does not exist")
        self.path = path


# --- Configuration Exceptions ---
class InvalidConfigurationException(TranscoderException):
    """
    Raised when a preset, codec or container value is outside the supported set,
    or when an operation is requested with arguments that make it a no-op.

    These are always detected before any engine invocation.
    """

    pass


class InvalidPresetException(InvalidConfigurationException):
    """Raised by the quality policy for a preset that is not a known member."""

    pass


# --- Engine / Probe Exceptions ---
class EngineFailureException(TranscoderException):
    """
    Raised when an external engine exits with a non-zero status or fails to start.

    By the time this propagates, the engine facade has already removed any
    partial output it created.

    Attributes:
        command: The command line that was executed, if known.
        stderr: The engine's error output, if any.
        returncode: The engine's exit status, or None if it never started.
    """

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        stderr: str = "",
        returncode: Optional[int] = None,
    ):
        super().__init__(message)
        self.command = list(command) if command else []
        self.stderr = stderr
        self.returncode = returncode


class ProbeFailureException(TranscoderException):
    """
    Raised when the probing facade cannot produce usable data for a file,
    for example a missing or non-numeric duration.
    """

    pass


class OutputPathException(TranscoderException):
    """Raised when the directory for an output file cannot be created."""

    def __init__(self, path: Path, error: OSError):
        super().__init__(f"Cannot create the output directory for '{path}': {error}")
        self.path = path


class OperationCancelledException(TranscoderException):
    """Raised at the top level when a run is aborted by an interrupt or termination."""

    def __init__(self, message: str = "The operation was aborted"):
        super().__init__(message)


# --- Batch Reporting ---
class FileFailure:
    """A single file that failed during a multi-file run, and why."""

    def __init__(self, path: Path, error: TranscoderException):
        self.path = path
        self.error = error

    def __repr__(self) -> str:
        return f"FileFailure(path={self.path!r}, error={self.error!r})"


class BatchEncodingException(TranscoderException):
    """
    Raised after a multi-file run in which one or more files failed.

    Engine and probe failures are isolated per file so that one bad input does
    not stop the rest of the batch. The failures are collected and reported
    together once every file has been attempted.
    """

    def __init__(self, failures: List[FileFailure]):
        self.failures = failures
        lines = [f"{len(failures)} file(s) failed:"]
        lines.extend(f"  {f.path}: {f.error}" for f in failures)
        super().__init__("\n".join(lines))
