"""
Configuration settings related to video processing.

This module defines the video extension allow-list, the two-pass and crop
detection parameters, and the quality tables consumed by the quality policy.
"""

# --- Video File Identification ---
# Every extension maps to exactly one media kind, so '.m4a' lives in config/audio.py.
VIDEO_EXTENSIONS = (
    ".mkv", ".webm", ".mp4", ".m4v", ".avi", ".mov", ".qt", ".ogv",
)

# --- Quality Tables ---
# Speed level on the 0-13 scale: lower is slower with a smaller file.
VIDEO_SPEED_LEVEL = {"quality": 6, "normal": 10}
VIDEO_SPEED_LEVEL_MAX = 13

# Rate-quality factor per codec family. AV1/VP9 use a 0-63 scale, AVC/HEVC 0-51,
# so values are only comparable within one family.
VIDEO_QUALITY_AV1_FAMILY = {"quality": 27, "normal": 33}
VIDEO_QUALITY_AVC_FAMILY = {"quality": 22, "normal": 28}

# x264/x265 take named presets, slowest first.
X26X_PRESET_NAMES = (
    "placebo", "veryslow", "slower", "slow", "medium",
    "fast", "faster", "veryfast", "superfast", "ultrafast",
)
# libvpx-vp9 '-cpu-used' range used for two-pass encodes.
VP9_CPU_USED_MAX = 5

# --- Two-Pass Settings ---
PASSLOG_DIR_PREFIX = "batch_transcoder_passlog_"
PASSLOG_FILE_STEM = "ffmpeg2pass"

# --- Crop Detection ---
# Long inputs often open with logos or black intros, so analysis starts later.
CROP_LONG_VIDEO_SECONDS = 600
CROP_LONG_VIDEO_START = 300
CROP_DETECT_FRAMES = 20

# --- Auxiliary Operations ---
SILENT_SUFFIX = ".silent"
TRIMMED_SUFFIX = ".trimmed"
