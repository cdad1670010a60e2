"""
Main entry point for the Batch Transcoder application.

Runs the command-line interface when the repository is used without installing
the package, e.g. `python main.py transcode video ./in ./out`.
"""

import sys

from batch_transcoder.cli import main


if __name__ == "__main__":
    sys.exit(main())
