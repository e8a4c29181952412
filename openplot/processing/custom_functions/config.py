"""
Configuration for snippet library persistence.

Process-wide settings for the editor boundary: where the saved library is
persisted between sessions and where library files are loaded from. The
registry and validator never read these; storage receives them explicitly.
"""

from dataclasses import dataclass, field
from pathlib import Path

from openplot.core.xdg_paths import get_data_file_path

LIBRARY_SUFFIX = ".snippets.xml"
STATE_FILE_NAME = "saved.snippets.xml"


def _default_state_file() -> Path:
    return get_data_file_path("custom_functions") / STATE_FILE_NAME


@dataclass(frozen=True)
class SnippetLibraryConfig:
    """
    Snippet library persistence settings.

    Attributes:
        state_file: File holding the saved library between sessions
        library_directory: Initial directory for explicit library load/save
        library_suffix: Suffix enforced on library files
    """

    state_file: Path = field(default_factory=_default_state_file)
    library_directory: Path = field(default_factory=Path.cwd)
    library_suffix: str = LIBRARY_SUFFIX
