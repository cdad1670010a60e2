"""
Configuration settings related to audio processing.

This module defines the audio extension allow-list, the per-preset target
bitrates and the channel-count thresholds used to boost them.
"""

# --- Audio File Identification ---
AUDIO_EXTENSIONS = (".mp3", ".wav", ".flac", ".ogg", ".opus", ".m4a")

# --- Audio Encoding Parameters ---
# Target bitrate in bits per second for a stereo source.
AUDIO_BITRATE = {"quality": 128_000, "normal": 96_000}

# Surround mixes need more bitrate for the same perceived quality. Checked in
# order, the first threshold the channel count reaches wins.
CHANNEL_BITRATE_MULTIPLIERS = (
    (7, 2.5),
    (5, 2.0),
)

# Opus mis-detects some channel layouts unless they are normalised first.
# See https://trac.ffmpeg.org/ticket/5718
OPUS_LAYOUT_FILTER = "aformat=channel_layouts=7.1|5.1|stereo"
