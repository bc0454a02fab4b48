"""Flatten an lxml tree into start, characters, and end events.

:author: Shay Hill
:created: 2025-11-07

The walker consumes a flat event stream instead of recursing over elements. The
stream for

    <text x="1">ab<tspan>c</tspan>d</text>

is

    ElementStart("text", {"x": "1"})
    Characters("ab")
    ElementStart("tspan", {})
    Characters("c")
    ElementEnd("tspan")
    Characters("d")
    ElementEnd("text")

Tags and attribute names lose their namespaces. Comments and processing
instructions produce no events of their own, but the text after them does.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, TypeAlias

from svg_picture.nsmap import local_name

if TYPE_CHECKING:
    from collections.abc import Iterator

    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )


@dataclasses.dataclass(frozen=True)
class ElementStart:
    """An opening tag.

    :param tag: local tag name, e.g. "rect"
    :param attrib: attributes keyed by local name
    :param elem: the element the event came from (used to clone `use` targets)
    """

    tag: str
    attrib: dict[str, str]
    elem: EtreeElement | None = dataclasses.field(
        default=None, compare=False, repr=False
    )


@dataclasses.dataclass(frozen=True)
class Characters:
    """Character data between tags."""

    text: str


@dataclasses.dataclass(frozen=True)
class ElementEnd:
    """A closing tag."""

    tag: str


XmlEvent: TypeAlias = ElementStart | Characters | ElementEnd


def get_local_attrib(elem: EtreeElement) -> dict[str, str]:
    """Get element attributes keyed by local name.

    :param elem: lxml element
    :return: attributes with namespaces stripped from the keys. If two keys share a
        local name (e.g. `href` and `xlink:href`), the later one wins.
    """
    return {local_name(str(k)): str(v) for k, v in elem.attrib.items()}


def iter_events(root: EtreeElement) -> Iterator[XmlEvent]:
    """Yield events for an element and everything inside it.

    :param root: element to walk. Its own tail text is not included.
    :yield: ElementStart, Characters, and ElementEnd events in document order
    """
    tag = local_name(root.tag)
    yield ElementStart(tag, get_local_attrib(root), root)
    if root.text:
        yield Characters(root.text)
    for child in root:
        if isinstance(child.tag, str):
            yield from iter_events(child)
        if child.tail:
            yield Characters(child.tail)
    yield ElementEnd(tag)
