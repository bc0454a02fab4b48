"""xml namespace entries for svg files.

:author: Shay Hill
:created: 1/14/2021

Input documents may use any of these namespaces. Element and attribute names are
compared without their namespace, so `svg:rect` and `rect` are the same element
and `xlink:href` and `href` are the same attribute.
"""

from __future__ import annotations

from lxml.etree import QName

_SVG_NAMESPACE = "http://www.w3.org/2000/svg"
NSMAP = {
    None: _SVG_NAMESPACE,
    "svg": _SVG_NAMESPACE,
    "xlink": "http://www.w3.org/1999/xlink",
}


def new_qname(namespace_abbreviation: str | None, tag: str) -> QName:
    """Create a qualified name for an svg element.

    :param namespace_abbreviation: The namespace abbreviation. This
        will have to be a key in NSMAP (e.g., "svg", "xlink").
    :param tag: The tag name of the element.
    :return: A qualified name for the element.
    """
    return QName(NSMAP[namespace_abbreviation], tag)


def local_name(name: str | QName) -> str:
    """Strip the namespace from an element or attribute name.

    :param name: e.g. "{http://www.w3.org/1999/xlink}href"
    :return: e.g. "href"

        >>> local_name("{http://www.w3.org/2000/svg}rect")
        'rect'
        >>> local_name("rect")
        'rect'
    """
    return QName(name).localname
