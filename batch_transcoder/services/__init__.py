"""
Services Package for the Batch Transcoder.

This package contains the service layer: the classes and functions that make
the per-file decisions and drive the external engines.

- **Encoder Drivers (`VideoEncoder`, `AudioEncoder`, `ImageEncoder`):**
  Discover files, apply the skip policy, resolve target paths, run the engine
  and clean up after failures. The shared flow lives in `encoder_base.Encoder`.

- **Argument Builder (`argument_builder`):**
  Turns per-file settings and probe results into engine flags.

- **Quality Policy (`quality_policy`):**
  Maps a preset and codec to numeric encoder parameters.

- **File Processing Service (`ProcessFiles`):**
  Discovers the media files of one kind below an input path.
"""
from .audio_encoder import AudioEncoder
from .image_encoder import ImageEncoder
from .video_encoder import VideoEncoder

__all__ = ["AudioEncoder", "ImageEncoder", "VideoEncoder"]
