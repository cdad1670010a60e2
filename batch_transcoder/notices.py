"""Copyright texts printed by '--about' and '--third-party-notices'."""

from . import __version__

COPYRIGHT = f"""\
batch-transcoder {__version__}
A batch orchestrator for FFmpeg and Pillow: video, audio and image transcoding
that preserves your directory structure.

Distributed under the MIT License."""

THIRD_PARTY_NOTICES = """\
This program uses the following third-party software:

FFmpeg (https://ffmpeg.org)
    Invoked as an external program. Licensed under the LGPL v2.1+ or GPL v2+,
    depending on how the installed build was configured.

ffmpeg-python (https://github.com/kkroening/ffmpeg-python)
    Licensed under the Apache License 2.0.

Loguru (https://github.com/Delgan/loguru)
    Licensed under the MIT License.

Pillow (https://python-pillow.org)
    Licensed under the MIT-CMU License.

pillow-heif (https://github.com/bigcat88/pillow_heif)
    Licensed under the BSD 3-Clause License; bundles libheif (LGPL v3).

PyYAML (https://pyyaml.org)
    Licensed under the MIT License."""
