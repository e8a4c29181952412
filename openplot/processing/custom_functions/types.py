"""
Value types for the custom function and snippet system.

Snippets and functions are immutable: registry updates and renames replace
the stored descriptor instead of mutating it.
"""

from dataclasses import dataclass, replace
from enum import Enum


@dataclass(frozen=True)
class SnippetDescriptor:
    """
    A reusable named expression.

    Attributes:
        name: Key of the snippet inside its namespace
        global_vars: Free-form declaration text evaluated once
        equation: Free-form expression body evaluated per sample
    """

    name: str
    global_vars: str = ""
    equation: str = ""

    def renamed(self, new_name: str) -> "SnippetDescriptor":
        return replace(self, name=new_name)

    def preview(self) -> str:
        """Render the read-only description shown beside the snippet lists."""
        return f"{self.global_vars}\n\nfunction calc(time,value)\n{{\n{self.equation}\n}}"


@dataclass(frozen=True)
class FunctionDescriptor:
    """
    A custom function bound to exactly one source channel.

    Attributes:
        name: Name of the derived channel
        linked_channel: Name of the channel the function reads from
        global_vars: Declaration text
        equation: Expression body
    """

    name: str
    linked_channel: str
    global_vars: str = ""
    equation: str = ""

    def to_snippet(self) -> SnippetDescriptor:
        return SnippetDescriptor(
            name=self.name,
            global_vars=self.global_vars,
            equation=self.equation,
        )


class AddOutcome(Enum):
    ADDED = "added"
    OVERWRITTEN = "overwritten"
    CANCELLED = "cancelled"

    @property
    def stored(self) -> bool:
        """True when the snippet ended up in the saved namespace."""
        return self is not AddOutcome.CANCELLED


class RenameResult(Enum):
    RENAMED = "renamed"
    NO_OP = "no_op"
    CONFLICT = "conflict"
