"""Snippet library and custom function exceptions."""

from typing import Optional


class SnippetError(Exception):
    """Base exception for the custom function system."""

    pass


class SnippetDocumentError(SnippetError):
    """Raised when a snippet document cannot be read or written."""

    pass


class ParseError(SnippetDocumentError):
    """Document is not well-formed or lacks the <snippets> container."""

    pass


class SchemaError(SnippetDocumentError):
    """A <snippet> element is missing required data."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.message = message
        self.index = index
        if index is not None:
            message = f"{message} (snippet #{index})"
        super().__init__(message)


class EncodeError(SnippetDocumentError):
    """Snippet text cannot be represented in the document format."""

    pass


class FunctionBuildError(SnippetError):
    """Raised when a custom function cannot be constructed."""

    pass


class DuplicateNameError(FunctionBuildError):
    """
    A new function would shadow an existing channel.

    Attributes:
        name: The rejected function name
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"plot name already exists: '{name}'")


class InvalidNameError(FunctionBuildError, ValueError):
    """Function or snippet name is empty."""

    pass
