"""
Common configuration settings used throughout the application.

This module contains globally shared configuration settings and constants. It
also handles the loading of user-specific configuration from an external YAML
file, allowing users to point the application at their own FFmpeg build or change
defaults without modifying the source code.
"""
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger

# --- User-Defined Configuration ---
# Settings are read from 'config.user.yaml'. The current working directory is
# checked first, then the project root.

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_FILE_NAME = "config.user.yaml"


def find_user_config() -> Optional[Path]:
    """Returns the first existing user configuration file, or None."""
    for candidate in (Path.cwd() / USER_CONFIG_FILE_NAME, PROJECT_ROOT / USER_CONFIG_FILE_NAME):
        if candidate.is_file():
            return candidate
    return None


def load_user_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads the user YAML configuration.

    A missing file yields an empty mapping. A file that cannot be read or parsed
    is reported as a warning and also yields an empty mapping, so a broken
    config never prevents a run with default settings.

    Args:
        path: Explicit path to the YAML file. When omitted, `find_user_config()`
              is used to locate it.

    Returns:
        The parsed configuration as a dictionary.
    """
    config_path = path if path is not None else find_user_config()
    if config_path is None:
        logger.debug(f"User config '{USER_CONFIG_FILE_NAME}' not found. Using defaults.")
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not load or parse '{config_path}': {e}")
        return {}
    if not isinstance(user_config, dict):
        logger.warning(f"Ignoring '{config_path}': top level must be a mapping.")
        return {}
    return user_config


USER_CONFIG: Dict[str, Any] = load_user_config()

# The directory containing the FFmpeg and ffprobe executables. If not provided,
# the executables are resolved from the system's PATH.
MODULE_PATH: Optional[Path] = None
_ffmpeg_dir = (USER_CONFIG.get("paths") or {}).get("ffmpeg_dir")
if _ffmpeg_dir:
    MODULE_PATH = Path(_ffmpeg_dir)


def executable(name: str) -> str:
    """Returns the command used to launch an external tool such as 'ffmpeg'."""
    if MODULE_PATH is not None:
        return str(MODULE_PATH / name)
    return name


# --- Logging Configuration ---

# The format string for the Loguru logger.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
DEFAULT_LOG_LEVEL = str((USER_CONFIG.get("logging") or {}).get("level", "INFO")).upper()
if DEFAULT_LOG_LEVEL not in LOG_LEVELS:
    logger.warning(f"Unknown log level '{DEFAULT_LOG_LEVEL}' in user config, using INFO.")
    DEFAULT_LOG_LEVEL = "INFO"


# --- Concurrency ---

# Number of files encoded at the same time. The engines are multi-threaded
# themselves, so this defaults to the logical CPU count rather than anything larger.
DEFAULT_MAX_WORKERS = int(
    (USER_CONFIG.get("encoding") or {}).get("max_workers") or os.cpu_count() or 1
)


# --- External Engine Settings ---

# Platform null sink used as the output of analysis-only passes.
NULL_SINK = "NUL" if os.name == "nt" else "/dev/null"

# Environment passed to the engine. SVT-AV1 prints its banner on stderr unless
# silenced, which would drown real errors at '-loglevel error'.
ENGINE_ENVIRONMENT = {"SVT_LOG": "0"}

# Arguments placed before every engine input.
ENGINE_BASE_ARGS = ["-hide_banner", "-loglevel", "error", "-nostdin"]
