"""
XML codec for snippet libraries.

Document layout::

    <?xml version='1.0' encoding='utf-8'?>
    <snippets>
      <snippet name="NAME">
        <global>GLOBAL_VAR_TEXT</global>
        <equation>EQUATION_TEXT</equation>
      </snippet>
    </snippets>

Text nodes are restored exactly on decode, whitespace and newlines included.
The codec works on in-memory buffers only; reading and writing files is the
job of openplot.processing.custom_functions.storage.
"""

import logging
import re
import xml.etree.ElementTree as ET
from typing import Dict, Iterable, Mapping, Tuple, Union

from openplot.processing.custom_functions.exceptions import (
    EncodeError,
    ParseError,
    SchemaError,
)
from openplot.processing.custom_functions.types import SnippetDescriptor

logger = logging.getLogger(__name__)

ROOT_TAG = "snippets"
SNIPPET_TAG = "snippet"
NAME_ATTRIBUTE = "name"
GLOBAL_TAG = "global"
EQUATION_TAG = "equation"

SnippetItems = Union[Mapping[str, SnippetDescriptor], Iterable[Tuple[str, SnippetDescriptor]]]

# Characters outside the XML 1.0 Char production (control codes, lone surrogates)
_NON_XML_CHARS = re.compile(
    "[^\t\n\r\x20-%s%s-%s%s-%s]"
    % (chr(0xD7FF), chr(0xE000), chr(0xFFFD), chr(0x10000), chr(0x10FFFF))
)


def encode(snippets: SnippetItems) -> bytes:
    """
    Serialize snippets to a snippet document.

    Entries are written in iteration order; pass a sorted mapping when the
    output must be stable across runs.

    Args:
        snippets: Mapping or ordered (name, SnippetDescriptor) pairs. The key
            is written as the name attribute.

    Returns:
        UTF-8 encoded XML document

    Raises:
        EncodeError: If a name is empty or any text holds characters XML
            cannot carry
    """
    items = snippets.items() if isinstance(snippets, Mapping) else snippets

    root = ET.Element(ROOT_TAG)
    for name, snippet in items:
        check_snippet(name, snippet)

        element = ET.SubElement(root, SNIPPET_TAG, {NAME_ATTRIBUTE: name})
        ET.SubElement(element, GLOBAL_TAG).text = snippet.global_vars
        ET.SubElement(element, EQUATION_TAG).text = snippet.equation

    ET.indent(root, space="  ")
    data = ET.tostring(root, encoding="utf-8", xml_declaration=True)

    # Attribute values are already escaped, so raw CRs can only come from
    # text nodes. Parsers fold a literal CR into LF; a character reference
    # survives.
    return data.replace(b"\r", b"&#13;") + b"\n"


def decode(data: Union[bytes, str]) -> Dict[str, SnippetDescriptor]:
    """
    Parse a snippet document.

    Unknown elements and attributes are ignored. When two snippets share a
    name the last one wins.

    A library with zero snippets is the document ``<snippets/>`` and decodes
    to an empty dict. A zero-length buffer is not a document and raises
    ParseError; callers wanting a fallback for "nothing persisted" handle
    that before decoding (see SnippetLibraryStore.load_persisted).

    Args:
        data: Document bytes (or text)

    Returns:
        Dict of name -> SnippetDescriptor in document order

    Raises:
        ParseError: If the buffer is not well-formed XML or the root element
            is not <snippets>
        SchemaError: If a <snippet> element has no name
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise ParseError(f"Snippet document is not well-formed: {e}") from e

    if root.tag != ROOT_TAG:
        raise ParseError(f"Expected <{ROOT_TAG}> root element, found <{root.tag}>")

    snippets: Dict[str, SnippetDescriptor] = {}
    for index, element in enumerate(root.findall(SNIPPET_TAG)):
        name = element.get(NAME_ATTRIBUTE)
        if not name:
            raise SchemaError(
                f"<{SNIPPET_TAG}> element lacks a '{NAME_ATTRIBUTE}' attribute",
                index=index,
            )

        if name in snippets:
            logger.warning(f"Duplicate snippet '{name}' in document; keeping the last definition")

        snippets[name] = SnippetDescriptor(
            name=name,
            global_vars=_child_text(element, GLOBAL_TAG),
            equation=_child_text(element, EQUATION_TAG),
        )

    logger.debug(f"Decoded {len(snippets)} snippet(s)")
    return snippets


def _child_text(element: ET.Element, tag: str) -> str:
    child = element.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text


def check_encodable(name: str, text: str, field: str) -> None:
    """
    Reject text the document format cannot carry.

    Args:
        name: Snippet name, used in the error message
        text: Text to check
        field: Which part of the snippet the text belongs to

    Raises:
        EncodeError: If text holds characters outside XML 1.0
    """
    match = _NON_XML_CHARS.search(text)
    if match is not None:
        raise EncodeError(
            f"Snippet '{name}' {field} contains character {match.group()!r} "
            "which cannot be stored in a snippet document"
        )


def check_snippet(name: str, snippet: SnippetDescriptor) -> None:
    """Raise EncodeError unless the snippet can be written under name."""
    if not name:
        raise EncodeError("Cannot encode a snippet without a name")
    check_encodable(name, name, "name")
    check_encodable(name, snippet.global_vars, GLOBAL_TAG)
    check_encodable(name, snippet.equation, EQUATION_TAG)
