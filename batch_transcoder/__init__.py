"""
Batch Transcoder: walk a file or directory tree and convert its video, audio or
image files with FFmpeg and Pillow, preserving the directory structure.

Subpackages:
    config: Static settings and the optional user YAML configuration.
    domain: Exceptions, codec enums, the job model and the probing facade.
    services: File discovery, quality policy, argument building and the drivers.
    utils: The external engine facades and path helpers.
    pipeline: Command execution, signal handling and exit codes.
"""

__version__ = "1.0.0"
