"""
XDG base directory helpers.

User data lives under $XDG_DATA_HOME/openplot (default ~/.local/share/openplot).
Paths are resolved on every call so tests can redirect them through the
environment.
"""

import os
from pathlib import Path

APP_DIR_NAME = "openplot"


def get_data_home() -> Path:
    """Return the XDG data home, honouring $XDG_DATA_HOME when it is absolute."""
    xdg_data_home = os.environ.get("XDG_DATA_HOME", "")
    if xdg_data_home and os.path.isabs(xdg_data_home):
        return Path(xdg_data_home)
    return Path.home() / ".local" / "share"


def get_data_dir() -> Path:
    return get_data_home() / APP_DIR_NAME


def get_data_file_path(name: str) -> Path:
    """
    Get the path of a file or directory inside the openplot data directory.

    Does not create anything on disk.

    Args:
        name: Relative path inside the data directory

    Returns:
        Absolute path
    """
    return get_data_dir() / name
