"""
Utilities Package for the Batch Transcoder.

Modules:
    - ffmpeg_utils.py: The async command runner and the FFmpeg engine facade.
    - image_utils.py: The Pillow-backed image engine facade.
    - format_utils.py: Target path resolution and extension/formatting helpers.
"""
