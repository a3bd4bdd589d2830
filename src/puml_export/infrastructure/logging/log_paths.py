"""Log file location for puml-export."""

from pathlib import Path

import platformdirs

from puml_export.infrastructure.config import APP_NAME


def get_log_dir() -> Path:
    """Get the system-appropriate log directory.

    Returns:
        Path to the log directory (created if it doesn't exist)
        - Windows: %LOCALAPPDATA%/puml-export/Logs
        - macOS: ~/Library/Logs/puml-export
        - Linux: ~/.local/state/puml-export/log
    """
    log_dir = Path(platformdirs.user_log_dir(APP_NAME, appauthor=False))
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def get_main_log_path() -> Path:
    return get_log_dir() / f"{APP_NAME}.log"
