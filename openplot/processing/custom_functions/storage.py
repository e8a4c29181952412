"""
File persistence for snippet libraries.

The registry and codec work on in-memory buffers. This module is the I/O
boundary around them:

    - the session state file, holding the saved library between sessions
    - the bundled default library, used when no state has been persisted
    - explicit library files (*.snippets.xml) loaded and saved by the user

I/O errors (OSError) propagate to the caller.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from openplot.processing.custom_functions.config import LIBRARY_SUFFIX, SnippetLibraryConfig

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_PATH = Path(__file__).parent / "resources" / "default.snippets.xml"


def default_document() -> bytes:
    """Return the snippet library shipped with openplot."""
    return DEFAULT_DOCUMENT_PATH.read_bytes()


def ensure_library_suffix(path: Union[str, Path], suffix: str = LIBRARY_SUFFIX) -> Path:
    """Append the library suffix unless the file name already ends with it."""
    path = Path(path)
    if path.name.endswith(suffix):
        return path
    return path.with_name(path.name + suffix)


class SnippetLibraryStore:
    """
    Reads and writes snippet documents on disk.

    Attributes:
        config: Persistence settings
        last_directory: Directory of the last library file read or written
    """

    def __init__(self, config: Optional[SnippetLibraryConfig] = None):
        self.config: SnippetLibraryConfig = config if config is not None else SnippetLibraryConfig()
        self.last_directory: Path = self.config.library_directory

    def load_persisted(self) -> bytes:
        """
        Return the saved library persisted by the previous session.

        Falls back to the bundled default library when nothing (or an empty
        file) was persisted.
        """
        state_file = self.config.state_file
        if state_file.exists():
            data = state_file.read_bytes()
            if data.strip():
                logger.debug(f"Loaded persisted snippets from {state_file}")
                return data
            logger.warning(f"Persisted snippet file is empty: {state_file}")

        logger.info("No persisted snippets; using default library")
        return default_document()

    def persist(self, data: bytes) -> Path:
        """Write the saved library for the next session."""
        state_file = self.config.state_file
        if not state_file.parent.exists():
            state_file.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created snippet state directory: {state_file.parent}")
        state_file.write_bytes(data)
        logger.info(f"Persisted snippets to {state_file}")
        return state_file

    def read_library(self, path: Union[str, Path]) -> bytes:
        """Read a library file chosen by the user."""
        path = Path(path)
        data = path.read_bytes()
        self.last_directory = path.resolve().parent
        logger.info(f"Read snippet library {path}")
        return data

    def write_library(self, path: Union[str, Path], data: bytes) -> Path:
        """
        Write a library file chosen by the user.

        Args:
            path: Target file; the library suffix is appended if missing
            data: Encoded snippet document

        Returns:
            The path actually written
        """
        path = ensure_library_suffix(path, self.config.library_suffix)
        path.write_bytes(data)
        self.last_directory = path.resolve().parent
        logger.info(f"Wrote snippet library {path}")
        return path
