"""
Edit requests for the custom function editor.

FunctionEditRequest is the editor's current content as a value: which
function is being written, whether it is new, and its text. The editor
builds one from an existing function or from scratch, merges snippets into
it, and turns it into a FunctionDescriptor via build().
"""

from dataclasses import dataclass, replace
from typing import AbstractSet

from openplot.processing.custom_functions.types import FunctionDescriptor, SnippetDescriptor
from openplot.processing.custom_functions.validation import build_function

CHANNEL_REFERENCE_DELIMITER = "$$"


def channel_reference(channel_name: str) -> str:
    """Token inserted into an equation to read another channel."""
    return f"{CHANNEL_REFERENCE_DELIMITER}{channel_name}{CHANNEL_REFERENCE_DELIMITER}"


def is_existing_channel(name: str, existing_channel_names: AbstractSet[str]) -> bool:
    """True when creating `name` would modify a series instead of adding one."""
    return name in existing_channel_names


@dataclass(frozen=True)
class FunctionEditRequest:
    """
    Content of the custom function editor.

    Attributes:
        name: Function name; fixed when editing an existing function
        linked_channel: Channel the function reads from
        global_vars: Declaration text
        equation: Expression body
        is_new: True when creating, False when updating an existing function
    """

    name: str = ""
    linked_channel: str = ""
    global_vars: str = ""
    equation: str = ""
    is_new: bool = True

    @classmethod
    def from_function(cls, function: FunctionDescriptor) -> "FunctionEditRequest":
        """Start editing an existing function. Its name is locked."""
        return cls(
            name=function.name,
            linked_channel=function.linked_channel,
            global_vars=function.global_vars,
            equation=function.equation,
            is_new=False,
        )

    def with_snippet(self, snippet: SnippetDescriptor) -> "FunctionEditRequest":
        """Load a snippet's text, keeping the name and linked channel."""
        return replace(self, global_vars=snippet.global_vars, equation=snippet.equation)

    def to_snippet(self) -> SnippetDescriptor:
        return SnippetDescriptor(name=self.name, global_vars=self.global_vars, equation=self.equation)

    def build(self, existing_channel_names: AbstractSet[str]) -> FunctionDescriptor:
        return build_function(
            existing_channel_names,
            self.is_new,
            self.name,
            self.linked_channel,
            self.global_vars,
            self.equation,
        )
