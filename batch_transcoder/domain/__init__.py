"""
This package contains the core domain models of the Batch Transcoder.

Modules:
    exceptions.py: The exception hierarchy used by drivers, facades and the CLI.
    codecs.py: Preset, media kind, codec and container enums, with their mapping
               to engine names and file extensions.
    job.py: The `EncodingJob` model holding the configuration of one run.
    media.py: The probing facade (`MediaProbe`) and its ffprobe implementation.
"""
