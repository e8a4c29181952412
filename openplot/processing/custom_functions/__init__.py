"""
Custom function and snippet library system for openplot.

Users derive new time series from existing channels by writing a custom
function: a name, the channel it is linked to, global variable declarations
and an equation. Reusable expressions are kept as snippets in two tiers:
"recent" (this session's functions) and "saved" (a library persisted as XML
between sessions).

Core Components:
    - SnippetRegistry: Saved/recent namespaces with add, overwrite, rename,
      remove and move operations
    - encode / decode: Snippet document codec
    - build_function: Validates a request and returns a FunctionDescriptor
    - seed_recent / start_session / end_session: Session bootstrap
    - SnippetLibraryStore: On-disk persistence of snippet libraries
    - SnippetSignals: Qt signals for UI updates when the library changes

Example:
    >>> from openplot.processing.custom_functions import (
    ...     SnippetLibraryStore, build_function, start_session, end_session,
    ... )
    >>> store = SnippetLibraryStore()
    >>> registry = start_session(live_functions, store)
    >>> function = build_function(
    ...     {"temp", "pressure"}, True, "temp_f", "temp", "", "return value*1.8+32"
    ... )
    >>> registry.add_or_overwrite_saved("temp_f", function.to_snippet())
    >>> end_session(registry, store)
"""

from openplot.processing.custom_functions.bootstrap import end_session, seed_recent, start_session
from openplot.processing.custom_functions.codec import decode, encode
from openplot.processing.custom_functions.config import LIBRARY_SUFFIX, SnippetLibraryConfig
from openplot.processing.custom_functions.editing import (
    FunctionEditRequest,
    channel_reference,
    is_existing_channel,
)
from openplot.processing.custom_functions.exceptions import (
    DuplicateNameError,
    EncodeError,
    FunctionBuildError,
    InvalidNameError,
    ParseError,
    SchemaError,
    SnippetDocumentError,
    SnippetError,
)
from openplot.processing.custom_functions.registry import SnippetRegistry
from openplot.processing.custom_functions.signals import SnippetSignals, snippet_signals
from openplot.processing.custom_functions.storage import (
    SnippetLibraryStore,
    default_document,
    ensure_library_suffix,
)
from openplot.processing.custom_functions.types import (
    AddOutcome,
    FunctionDescriptor,
    RenameResult,
    SnippetDescriptor,
)
from openplot.processing.custom_functions.validation import (
    ValidationResult,
    build_function,
    validate_function_name,
)

__all__ = [
    # Types
    'SnippetDescriptor',
    'FunctionDescriptor',
    'AddOutcome',
    'RenameResult',
    # Codec
    'encode',
    'decode',
    # Registry
    'SnippetRegistry',
    'SnippetSignals',
    'snippet_signals',
    # Validation
    'build_function',
    'validate_function_name',
    'ValidationResult',
    'FunctionEditRequest',
    'channel_reference',
    'is_existing_channel',
    # Session / storage
    'seed_recent',
    'start_session',
    'end_session',
    'SnippetLibraryStore',
    'SnippetLibraryConfig',
    'LIBRARY_SUFFIX',
    'default_document',
    'ensure_library_suffix',
    # Errors
    'SnippetError',
    'SnippetDocumentError',
    'ParseError',
    'SchemaError',
    'EncodeError',
    'FunctionBuildError',
    'DuplicateNameError',
    'InvalidNameError',
]
