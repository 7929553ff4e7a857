import os
from pathlib import Path

from adfwriter.constants import CONFIG_FILE_FILE_NAME, LOG_FILE_FILE_NAME


def _xdg_directory(variable: str, fallback: str) -> Path:
    if value := os.getenv(variable):
        return Path(value) / 'adfwriter'
    return Path.home() / fallback / 'adfwriter'


def get_config_directory() -> Path:
    return _xdg_directory('XDG_CONFIG_HOME', '.config')


def get_config_file() -> Path:
    return get_config_directory() / CONFIG_FILE_FILE_NAME


def get_state_directory() -> Path:
    return _xdg_directory('XDG_STATE_HOME', '.local/state')


def get_log_file() -> Path:
    """Returns the default log file path, creating its directory when missing."""
    directory = get_state_directory()
    directory.mkdir(parents=True, exist_ok=True)
    return directory / LOG_FILE_FILE_NAME
