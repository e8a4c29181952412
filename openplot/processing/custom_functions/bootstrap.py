"""
Session start and end for the snippet library.

At session start the saved library is restored from the store and the
recent namespace is seeded from the custom functions that already exist, so
they can be reused as snippets. A function whose name is already saved is
skipped: the saved snippet is the authoritative definition for that name.
At session end the saved library is handed back to the store; recent is
discarded.
"""

import logging
from typing import Dict, Iterable, Mapping, Optional

from openplot.processing.custom_functions import codec
from openplot.processing.custom_functions.exceptions import SnippetDocumentError
from openplot.processing.custom_functions.registry import SnippetRegistry
from openplot.processing.custom_functions.storage import SnippetLibraryStore, default_document
from openplot.processing.custom_functions.types import FunctionDescriptor, SnippetDescriptor

logger = logging.getLogger(__name__)


def seed_recent(
    live_functions: Iterable[FunctionDescriptor],
    saved: Mapping[str, SnippetDescriptor],
) -> Dict[str, SnippetDescriptor]:
    """
    Build the recent namespace from live custom functions.

    Args:
        live_functions: Custom functions currently registered as channels
        saved: Saved namespace (names in it take precedence)

    Returns:
        Dict of name -> SnippetDescriptor for functions not shadowed by saved
    """
    recent: Dict[str, SnippetDescriptor] = {}
    for function in live_functions:
        if function.name in saved:
            continue
        recent[function.name] = function.to_snippet()
    return recent


def start_session(
    live_functions: Iterable[FunctionDescriptor],
    store: SnippetLibraryStore,
    registry: Optional[SnippetRegistry] = None,
) -> SnippetRegistry:
    """
    Restore the snippet library for a new editor session.

    A persisted library that cannot be decoded is discarded in favour of the
    default library; if that fails too the session starts with no saved
    snippets.

    Args:
        live_functions: Custom functions currently registered as channels
        store: Storage for the persisted library
        registry: Registry to populate; a new one is created if omitted

    Returns:
        The populated registry
    """
    if registry is None:
        registry = SnippetRegistry()

    data = store.load_persisted()
    try:
        registry.import_saved(data)
    except SnippetDocumentError as e:
        logger.error(f"Discarding unreadable persisted snippets: {e}")
        try:
            registry.import_saved(default_document())
        except SnippetDocumentError as default_error:
            logger.error(f"Default snippet library is unreadable: {default_error}")
            registry.import_saved(codec.encode({}))

    registry.replace_recent(seed_recent(live_functions, registry.saved))
    logger.info(
        f"Snippet session started: {len(registry.saved)} saved, {len(registry.recent)} recent"
    )
    return registry


def end_session(registry: SnippetRegistry, store: SnippetLibraryStore) -> None:
    """Persist the saved library. The recent namespace is not kept."""
    store.persist(registry.export_saved())
