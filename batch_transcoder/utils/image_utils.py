"""
The still-image engine facade.

Image conversion is delegated to Pillow. The engine is synchronous and is meant
to be run from a worker thread by the image driver.
"""
from abc import ABC, abstractmethod
from pathlib import Path

from loguru import logger
from PIL import Image, UnidentifiedImageError
from pillow_heif import register_heif_opener

from ..domain.codecs import ImageCodec
from ..domain.exceptions import EngineFailureException
from .ffmpeg_utils import remove_partial_output

# HEIF/HEIC decoding comes from pillow-heif.
register_heif_opener()

# JPEG has no alpha channel or palette transparency.
JPEG_CONVERT_MODES = ("RGBA", "LA", "P", "PA", "CMYK", "I;16")


class ImageEngine(ABC):
    """Re-encodes one image given input path, output path, codec and quality."""

    @abstractmethod
    def run(self, input_path: Path, output_path: Path, codec: ImageCodec, quality: int) -> None:
        raise NotImplementedError


class PillowImageEngine(ImageEngine):
    def run(self, input_path: Path, output_path: Path, codec: ImageCodec, quality: int) -> None:
        """
        Writes `input_path` to `output_path` in the given codec.

        Raises:
            EngineFailureException: If the image cannot be read or written. Any
                                    partially written output is removed first.
        """
        created_here = not output_path.exists()
        try:
            with Image.open(input_path) as img:
                save_kwargs = {"quality": quality}
                if codec is ImageCodec.JPEG:
                    save_kwargs["optimize"] = True
                    if img.mode in JPEG_CONVERT_MODES:
                        img = img.convert("RGB")
                elif codec is ImageCodec.PNG:
                    # PNG is lossless; quality has no meaning for it.
                    save_kwargs = {"optimize": True}
                img.save(output_path, format=codec.pillow_format, **save_kwargs)
        except (OSError, ValueError, UnidentifiedImageError) as e:
            if created_here:
                remove_partial_output(output_path)
            logger.debug(f"Image engine error for '{input_path.name}': {e}")
            raise EngineFailureException(
                f"Image conversion failed for '{input_path.name}': {e}"
            ) from e
