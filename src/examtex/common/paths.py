"""
Path utilities for handling dev vs production (frozen) file locations.

Override: EXAMTEX_HOME environment variable, used as-is
Dev mode: Uses local workspace/ directory
Frozen mode: Uses the system-standard application data location
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

from PySide6.QtCore import QStandardPaths

APP_DIR_NAME = "examtex"
HOME_ENV_VAR = "EXAMTEX_HOME"


def is_frozen() -> bool:
    """Check if running as a frozen (PyInstaller) application."""
    return getattr(sys, 'frozen', False) or hasattr(sys, '_MEIPASS')


def get_app_data_dir() -> Path:
    """
    Get the application data directory for internal state files.

    Frozen: <GenericDataLocation>/examtex
            (~/.local/share/examtex, ~/Library/Application Support/examtex,
            %LOCALAPPDATA%/examtex)
    Dev: workspace/
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    if is_frozen():
        base = Path(QStandardPaths.writableLocation(
            QStandardPaths.StandardLocation.GenericDataLocation
        ))
        return base / APP_DIR_NAME
    # Dev mode: use local workspace
    return Path.cwd() / "workspace"


def get_history_path() -> Path:
    """Get the path of the persisted generation history."""
    return get_app_data_dir() / "history_v2.json"


def get_output_dir() -> Path:
    """Get the default directory for written .tex files."""
    return get_app_data_dir() / "output_papers"


def ensure_directories() -> None:
    """Create the app data and output directories if missing."""
    get_app_data_dir().mkdir(parents=True, exist_ok=True)
    get_output_dir().mkdir(parents=True, exist_ok=True)
