"""
Two-tier snippet registry.

Holds the "saved" namespace (persisted between sessions through the codec)
and the "recent" namespace (rebuilt every session from the live custom
functions). Keys are unique within a namespace; the same name may exist in
both until it is moved across.

The registry never prompts. When a save would overwrite an existing snippet
the decision comes from an injected policy: either a plain bool or a
callable receiving (name, existing, incoming) and returning True to
overwrite.

Thread safety: Not thread-safe (all operations expected on main thread).
"""

import logging
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Union

from openplot.processing.custom_functions import codec
from openplot.processing.custom_functions.exceptions import InvalidNameError
from openplot.processing.custom_functions.signals import SnippetSignals, snippet_signals
from openplot.processing.custom_functions.types import (
    AddOutcome,
    RenameResult,
    SnippetDescriptor,
)

logger = logging.getLogger(__name__)

ConfirmOverwrite = Callable[[str, SnippetDescriptor, SnippetDescriptor], bool]
OverwriteDecision = Union[bool, ConfirmOverwrite]


class SnippetRegistry:
    """
    Registry of saved and recent snippets.

    Attributes:
        confirm_overwrite: Default overwrite decision used when an operation
            is not given one explicitly
        signals: Signal object notified after every change
    """

    def __init__(
        self,
        confirm_overwrite: OverwriteDecision = False,
        signals: Optional[SnippetSignals] = None,
    ):
        self.confirm_overwrite: OverwriteDecision = confirm_overwrite
        self.signals: SnippetSignals = signals if signals is not None else snippet_signals
        self._saved: Dict[str, SnippetDescriptor] = {}
        self._recent: Dict[str, SnippetDescriptor] = {}

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def saved(self) -> Mapping[str, SnippetDescriptor]:
        return MappingProxyType(self._saved)

    @property
    def recent(self) -> Mapping[str, SnippetDescriptor]:
        return MappingProxyType(self._recent)

    def saved_names(self) -> List[str]:
        return sorted(self._saved)

    def recent_names(self) -> List[str]:
        return sorted(self._recent)

    def get_saved(self, name: str) -> Optional[SnippetDescriptor]:
        return self._saved.get(name)

    def get_recent(self, name: str) -> Optional[SnippetDescriptor]:
        return self._recent.get(name)

    def has_saved(self, name: str) -> bool:
        return name in self._saved

    # ------------------------------------------------------------------
    # Saved namespace
    # ------------------------------------------------------------------

    def add_or_overwrite_saved(
        self,
        name: str,
        descriptor: SnippetDescriptor,
        confirm: Optional[OverwriteDecision] = None,
    ) -> AddOutcome:
        """
        Store a snippet under name, asking before replacing an existing one.

        The stored descriptor always carries name, even if the incoming
        descriptor was created under another one.

        Args:
            name: Key in the saved namespace
            descriptor: Snippet to store
            confirm: Overwrite decision for this call; falls back to
                self.confirm_overwrite

        Returns:
            ADDED, OVERWRITTEN, or CANCELLED (state unchanged)

        Raises:
            InvalidNameError: If name is empty
            EncodeError: If the snippet could not be written to a library
        """
        outcome = self._store_saved(name, descriptor, confirm)
        if outcome.stored:
            self.signals.saved_changed.emit()
        return outcome

    def _store_saved(
        self,
        name: str,
        descriptor: SnippetDescriptor,
        confirm: Optional[OverwriteDecision],
    ) -> AddOutcome:
        # Mutates without emitting; callers signal once their change is complete.
        if not name:
            raise InvalidNameError("Snippet name must not be empty")

        if descriptor.name != name:
            descriptor = descriptor.renamed(name)
        codec.check_snippet(name, descriptor)

        existing = self._saved.get(name)
        if existing is None:
            self._saved[name] = descriptor
            logger.info(f"Saved snippet '{name}'")
            return AddOutcome.ADDED

        decision = self.confirm_overwrite if confirm is None else confirm
        accepted = decision(name, existing, descriptor) if callable(decision) else bool(decision)
        if not accepted:
            logger.debug(f"Overwrite of saved snippet '{name}' declined")
            return AddOutcome.CANCELLED

        self._saved[name] = descriptor
        logger.info(f"Overwrote saved snippet '{name}'")
        return AddOutcome.OVERWRITTEN

    def remove_saved(self, name: str) -> bool:
        """Remove a saved snippet. Returns False if there was nothing to remove."""
        if self._saved.pop(name, None) is None:
            return False
        logger.info(f"Removed saved snippet '{name}'")
        self.signals.saved_changed.emit()
        return True

    def rename_saved(self, old_name: str, new_name: str) -> RenameResult:
        """
        Re-key a saved snippet.

        Never overwrites: renaming onto an existing saved name is a conflict
        and leaves the namespace unchanged.

        Args:
            old_name: Current key
            new_name: Requested key

        Returns:
            RENAMED; NO_OP if new_name is empty, equal to old_name, or
            old_name is not saved; CONFLICT if new_name is taken

        Raises:
            EncodeError: If new_name could not be written to a library
        """
        if not new_name or new_name == old_name or old_name not in self._saved:
            return RenameResult.NO_OP

        if new_name in self._saved:
            logger.debug(f"Rename '{old_name}' -> '{new_name}' refused: name taken")
            return RenameResult.CONFLICT

        codec.check_encodable(new_name, new_name, "name")

        snippet = self._saved.pop(old_name)
        self._saved[new_name] = snippet.renamed(new_name)
        logger.info(f"Renamed saved snippet '{old_name}' -> '{new_name}'")
        self.signals.saved_changed.emit()
        return RenameResult.RENAMED

    def import_saved(self, data: Union[bytes, str]) -> int:
        """
        Replace the saved namespace with the contents of a snippet document.

        This is a library load, not a merge. If decoding fails the error
        propagates and the current saved snippets are kept.

        Args:
            data: Snippet document

        Returns:
            Number of snippets loaded

        Raises:
            ParseError: If the document is malformed
            SchemaError: If a snippet lacks a name
        """
        snippets = codec.decode(data)
        self._saved = snippets
        logger.info(f"Imported {len(snippets)} saved snippet(s)")
        self.signals.saved_changed.emit()
        return len(snippets)

    def export_saved(self) -> bytes:
        """Encode the saved namespace, sorted by name."""
        return codec.encode([(name, self._saved[name]) for name in self.saved_names()])

    # ------------------------------------------------------------------
    # Recent namespace
    # ------------------------------------------------------------------

    def add_recent(self, descriptor: SnippetDescriptor) -> None:
        """
        Insert or replace a session-only snippet.

        Recent snippets are checked like saved ones so that a later move to
        the saved namespace cannot fail on encoding.

        Raises:
            InvalidNameError: If the snippet has no name
            EncodeError: If the snippet could not be written to a library
        """
        if not descriptor.name:
            raise InvalidNameError("Snippet name must not be empty")
        codec.check_snippet(descriptor.name, descriptor)
        self._recent[descriptor.name] = descriptor
        logger.debug(f"Added recent snippet '{descriptor.name}'")
        self.signals.recent_changed.emit()

    def remove_recent(self, name: str) -> bool:
        if self._recent.pop(name, None) is None:
            return False
        self.signals.recent_changed.emit()
        return True

    def replace_recent(self, snippets: Mapping[str, SnippetDescriptor]) -> None:
        self._recent = dict(snippets)
        self.signals.recent_changed.emit()

    def move_recent_to_saved(
        self,
        name: str,
        confirm: Optional[OverwriteDecision] = None,
    ) -> bool:
        """
        Promote a recent snippet to the saved namespace.

        The move is all-or-nothing: the recent entry is only dropped once the
        saved namespace holds it.

        Args:
            name: Key in the recent namespace
            confirm: Overwrite decision if name is already saved

        Returns:
            True if the snippet moved, False if it was not in recent or the
            overwrite was declined
        """
        snippet = self._recent.get(name)
        if snippet is None:
            return False

        outcome = self._store_saved(name, snippet, confirm)
        if not outcome.stored:
            return False

        del self._recent[name]
        self.signals.saved_changed.emit()
        self.signals.recent_changed.emit()
        return True
