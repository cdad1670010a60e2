"""
This module defines the ImageEncoder service.

Images are independent and cheap compared to video, so they are converted in
parallel worker threads with no ordering between files.
"""

import asyncio
from pathlib import Path
from typing import Optional

from ..domain.codecs import MediaKind
from ..domain.job import EncodingJob
from ..utils.image_utils import ImageEngine, PillowImageEngine
from . import quality_policy
from .encoder_base import Encoder


class ImageEncoder(Encoder):
    media_kind = MediaKind.IMAGE

    def __init__(
        self,
        job: EncodingJob,
        image_engine: Optional[ImageEngine] = None,
        max_workers: Optional[int] = None,
    ):
        super().__init__(job, max_workers=max_workers)
        self.image_engine = image_engine or PillowImageEngine()
        self.quality = quality_policy.image_quality(job.preset)

    def target_extension(self, file: Path) -> str:
        return self.job.image_codec.extension

    async def encode_file(self, file: Path, target: Path) -> None:
        self._notify_started(file)
        await asyncio.to_thread(
            self.image_engine.run, file, target, self.job.image_codec, self.quality
        )
