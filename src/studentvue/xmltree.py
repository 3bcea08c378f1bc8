"""List-wrapped XML trees and the accessors the mappers read them with.

StudentVUE responses are attribute-heavy documents in which almost any
element may repeat. They are converted into a uniform tree where every
attribute and child is stored as a list:

    <Course Period="1" Title="Math"><Marks/></Course>

becomes

    {"@_Period": ["1"], "@_Title": ["Math"], "Marks": [""]}

An element without attributes or children is converted to its text, so an
empty element shows up as the ``""`` placeholder. The accessors keep the
three cases apart: a value that is present, an element that is present but
empty, and a key that is absent altogether.
"""

import xml.etree.ElementTree as ET
from enum import Enum
from typing import Any

from studentvue.errors import MissingElementError

XMLNode = dict[str, list[Any]]

ATTRIBUTE_PREFIX = "@_"
TEXT_KEY = "#text"


class Presence(Enum):
    """How a key is represented on a converted node."""

    PRESENT = "present"
    EMPTY = "empty"
    ABSENT = "absent"


def _local_name(tag: str) -> str:
    """Strip an ElementTree ``{namespace}`` prefix from a tag."""
    return tag.rsplit("}", 1)[-1]


def _convert(element: ET.Element) -> XMLNode | str:
    text = (element.text or "").strip()
    children = list(element)
    if not element.attrib and not children:
        return text

    node: XMLNode = {}
    for name, value in element.attrib.items():
        node[ATTRIBUTE_PREFIX + _local_name(name)] = [value]
    for child in children:
        node.setdefault(_local_name(child.tag), []).append(_convert(child))
        # Text interleaved after inline children (e.g. "a<br/>b")
        if child.tail and child.tail.strip():
            text = f"{text}\n{child.tail.strip()}" if text else child.tail.strip()
    if text:
        node[TEXT_KEY] = [text]
    return node


def parse_xml(document: str | bytes) -> XMLNode:
    """Parse an XML document into a list-wrapped tree keyed by the root tag.

    Raises:
        xml.etree.ElementTree.ParseError: If the document is not well-formed.
    """
    root = ET.fromstring(document)
    return {_local_name(root.tag): [_convert(root)]}


def as_node(value: Any) -> XMLNode:
    """Coerce a converted value into a node.

    The empty placeholder becomes ``{}``; a text-only element becomes a node
    holding only its text.
    """
    if isinstance(value, dict):
        return value
    if value:
        return {TEXT_KEY: [str(value)]}
    return {}


def presence(node: XMLNode, key: str) -> Presence:
    """Classify how ``key`` is represented on ``node``."""
    if key not in node:
        return Presence.ABSENT
    values = node[key]
    if not values or values[0] == "" or values[0] == {}:
        return Presence.EMPTY
    return Presence.PRESENT


def first(node: XMLNode, key: str) -> Any | None:
    """Return the first value stored under ``key``, or None when absent.

    An empty element yields the ``""`` placeholder, not None.
    """
    values = node.get(key)
    if values is None:
        return None
    if not values:
        return ""
    return values[0]


def attr(node: XMLNode, name: str) -> str | None:
    """Return attribute ``name`` of ``node``, or None when the attribute is absent."""
    return first(node, ATTRIBUTE_PREFIX + name)


def text(node: XMLNode, key: str) -> str | None:
    """Return the text of child element ``key``, or None when absent."""
    value = first(node, key)
    if value is None:
        return None
    if isinstance(value, dict):
        return first(value, TEXT_KEY) or ""
    return str(value)


def element(node: XMLNode, key: str, *, required: bool = True) -> XMLNode | None:
    """Return the first child element ``key`` as a node.

    An empty element yields ``{}``. An absent element raises
    MissingElementError when ``required``, otherwise returns None.
    """
    state = presence(node, key)
    if state is Presence.ABSENT:
        if required:
            raise MissingElementError(key)
        return None
    return as_node(first(node, key))


def elements(
    node: XMLNode, container: str, item: str, *, required: bool = True
) -> list[XMLNode]:
    """Return the repeated ``item`` elements inside the first ``container``.

    Source order is preserved. An empty container (or one holding no
    ``item`` children) yields ``[]``. An absent container raises
    MissingElementError when ``required``, otherwise yields ``[]``.
    """
    state = presence(node, container)
    if state is Presence.ABSENT:
        if required:
            raise MissingElementError(f"{container}/{item}")
        return []
    if state is Presence.EMPTY:
        return []
    parent = as_node(first(node, container))
    return [as_node(value) for value in parent.get(item, [])]
