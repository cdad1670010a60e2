"""
Provides the discovery of media files to process.

Discovery turns the input path of a job into the sequence of files a driver will
encode. A single file is always yielded as-is; a directory is walked recursively
and filtered by the extension allow-list of the media kind being processed.
"""

from pathlib import Path
from typing import Iterable, Iterator, Optional

from loguru import logger

from ..config.audio import AUDIO_EXTENSIONS
from ..config.image import IMAGE_EXTENSIONS
from ..config.video import VIDEO_EXTENSIONS
from ..domain.codecs import MediaKind
from ..domain.exceptions import PathNotFoundException
from ..utils.format_utils import contains_any_extensions


def extensions_for(kind: MediaKind) -> tuple:
    match kind:
        case MediaKind.VIDEO:
            return VIDEO_EXTENSIONS
        case MediaKind.AUDIO:
            return AUDIO_EXTENSIONS
        case MediaKind.IMAGE:
            return IMAGE_EXTENSIONS


def guess_media_kind(path: Path) -> Optional[MediaKind]:
    """
    Guesses the media kind of a single file from its extension.

    Returns None for directories and for files whose extension is not in any
    allow-list. Each extension belongs to exactly one kind, so the guess is never
    ambiguous.
    """
    if not path.is_file():
        return None
    for kind in MediaKind:
        if contains_any_extensions(path, extensions_for(kind)):
            return kind
    return None


class ProcessFiles:
    """
    Discovers the files a job should process.

    Iterating over an instance walks the filesystem afresh each time, so the
    sequence is lazy and can be restarted by iterating again; nothing is cached
    between iterations.

    Attributes:
        input_path (Path): The file or directory given by the user.
        extension_filter (tuple): Extensions accepted when walking a directory.
    """

    def __init__(self, input_path: Path, extension_filter: Iterable[str]):
        self.input_path = Path(input_path)
        self.extension_filter = tuple(extension_filter)
        if not self.input_path.is_file() and not self.input_path.is_dir():
            logger.error(f"Input path does not exist: {self.input_path}")
            raise PathNotFoundException(self.input_path)

    @classmethod
    def for_kind(cls, input_path: Path, kind: MediaKind) -> "ProcessFiles":
        return cls(input_path, extensions_for(kind))

    def __iter__(self) -> Iterator[Path]:
        return self.discover()

    def discover(self) -> Iterator[Path]:
        """
        Yields the files to process.

        An explicitly named file is yielded regardless of its extension. For a
        directory, every file in every subdirectory whose extension matches the
        filter (case-insensitive) is yielded in sorted order.

        Raises:
            PathNotFoundException: If the input path disappeared since construction.
        """
        if self.input_path.is_file():
            yield self.input_path
            return
        if not self.input_path.is_dir():
            raise PathNotFoundException(self.input_path)

        for path in sorted(self.input_path.rglob("*")):
            if path.is_file() and contains_any_extensions(path, self.extension_filter):
                yield path
            elif path.is_file():
                logger.trace(f"Ignoring '{path}': extension not in filter.")
