"""
This module contains helper functions for paths, extensions and human-readable output.

The most important one is `resolve_target_path`, which maps a discovered input
file to its output location, replicating the input directory structure under the
output root.
"""

from datetime import timedelta
from pathlib import Path
from typing import Iterable


def format_timedelta(td_object: timedelta) -> str:
    """
    Formats a timedelta object into a "HH:MM:SS" string.

    Returns "00:00:00" if the input is not a valid timedelta object.
    """
    if not isinstance(td_object, timedelta):
        return "00:00:00"

    total_seconds = int(td_object.total_seconds())
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def contains_any_extensions(file_path_obj: Path, extensions_to_check: Iterable[str]) -> bool:
    """
    Checks if a file's extension is present in a given collection (case-insensitive).

    Args:
        file_path_obj: A `pathlib.Path` object for the file to check.
        extensions_to_check: File extensions, with or without the leading dot.

    Returns:
        True if the file's extension is in the collection, False otherwise.
    """
    normalized_extensions = {
        ext.lower() if ext.startswith(".") else f".{ext.lower()}"
        for ext in extensions_to_check
    }
    if not normalized_extensions:
        return False
    return file_path_obj.suffix.lower() in normalized_extensions


def same_extension(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def resolve_target_path(
    file: Path, input_root: Path, output_root: Path, new_extension: str
) -> Path:
    """
    Computes the output path for a discovered file.

    If `output_root` has no extension it is treated as a directory: the file's
    path relative to `input_root` is joined onto it, however deep the nesting.
    When `input_root` is the file itself, only the file name is kept. If
    `output_root` has an extension, a single named output was requested and
    `output_root` itself is used. In both cases the extension is then replaced
    with `new_extension`.

    The parent directory of the result is not created here.

    Examples:
        >>> resolve_target_path(Path("/in/a/b/f.mp4"), Path("/in"), Path("/out"), ".mkv")
        PosixPath('/out/a/b/f.mkv')
        >>> resolve_target_path(Path("/in/f.mp4"), Path("/in/f.mp4"), Path("/out/x.mp4"), ".mkv")
        PosixPath('/out/x.mkv')
    """
    if output_root.suffix:
        target = output_root
    elif file == input_root:
        target = output_root / file.name
    else:
        target = output_root / file.relative_to(input_root)
    return target.with_suffix(new_extension)


def with_name_suffix(path: Path, marker: str) -> Path:
    """Inserts `marker` between stem and extension: 'clip.mp4' -> 'clip.silent.mp4'."""
    return path.with_name(f"{path.stem}{marker}{path.suffix}")
