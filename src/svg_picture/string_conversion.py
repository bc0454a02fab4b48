"""Quasi-private functions for high-level string conversion.

:author: Shay Hill
:created: 7/26/2020

Rounding some numbers to ensure quality svg rendering:
* Rounding floats to six digits after the decimal

Pictures are replayed back into svg for inspection, so colors and matrices need
to go back to strings as well.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, TypeAlias, cast

import svg_path_data
from lxml import etree

from svg_picture.nsmap import new_qname

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

    from svg_picture.transformations import Matrix


_MAX_8BIT = 255

ElemAttrib: TypeAlias = "str | float | None"


def format_number(num: float | str, resolution: int | None = 6) -> str:
    """Format a number into an svg-readable float string with resolution = 6.

    :param num: number to format (string or float)
    :param resolution: number of digits after the decimal point, defaults to 6. None
        to match behavior of `str(num)`.
    :return: string representation of the number with six digits after the decimal
        (if in fixed-point notation). Will return exponential notation when shorter.
    """
    return svg_path_data.format_number(num, resolution=resolution)


def format_numbers(
    nums: Iterable[float] | Iterable[str] | Iterable[float | str],
) -> list[str]:
    """Format multiple strings to limited precision.

    :param nums: iterable of floats
    :return: list of formatted strings
    """
    return [format_number(num) for num in nums]


def svg_floats(floats: Iterable[float]) -> str:
    """Space-delimited floats.

    :param floats: and number of floats
    :return: each float formatted, space delimited
    """
    return " ".join(format_numbers(floats))


def svg_matrix(matrix: Matrix) -> str:
    """Create an svg matrix string from a tuple of floats.

    :param matrix: svg-style transformation matrix (a, b, c, d, e, f)
    :return: "matrix(a b c d e f)"
    """
    return f"matrix({svg_floats(matrix)})"


def argb_to_hex(argb: int) -> str:
    """Drop the alpha channel from an argb int and format the rest as #rrggbb.

    :param argb: 32-bit color 0xAARRGGBB
    :return: "#rrggbb"
    """
    return f"#{argb & 0xFFFFFF:06x}"


def argb_to_opacity(argb: int) -> float:
    """Get the alpha channel of an argb int as an opacity in [0, 1].

    :param argb: 32-bit color 0xAARRGGBB
    :return: alpha / 255
    """
    return ((argb >> 24) & 0xFF) / _MAX_8BIT


def _fix_key_and_format_val(key: str, val: ElemAttrib) -> tuple[str, str] | None:
    """Format one key, value pair for an svg element.

    :param key: element attribute name
    :param val: element attribute value
    :return: tuple of key, value or None if val is None

    * convert float values to formatted strings
    * replace '_' with '-' in keywords
    * remove trailing '_' from keywords
    * will convert `namespace:tag` to a qualified name
    """
    if val is None:
        return None
    if ":" in key:
        namespace, tag = key.split(":")
        key_ = str(new_qname(namespace, tag))
    else:
        key_ = key.rstrip("_").replace("_", "-")
    if isinstance(val, str):
        return key_, val
    return key_, format_number(val)


def format_attr_dict(**attributes: ElemAttrib) -> dict[str, str]:
    """Create a dict of attributes with svg names and string values.

    :param attributes: element attribute names and values. None values are dropped.
    :return: dict of attributes, each key a valid svg attribute name, each value a str
    """
    pairs = (_fix_key_and_format_val(k, v) for k, v in attributes.items())
    return dict(x for x in pairs if x is not None)


def set_attributes(elem: EtreeElement, **attributes: ElemAttrib) -> None:
    """Set name: value items as element attributes. Make every value a string.

    :param elem: element to receive element.set(keyword, str(value)) calls
    :param attributes: element attribute names and values. Knows what to do with
        'text' keyword.
    :effects: updates ``elem``
    """
    attr_dict = format_attr_dict(**attributes)
    if "text" in attr_dict:
        elem.text = attr_dict.pop("text")
    for key, val in attr_dict.items():
        elem.set(key, val)


class _TostringDefaults(Enum):
    """Default values for an svg xml_header."""

    DOCTYPE = (
        '<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN"\n'
        + '"http://www.w3.org/Graphics/SVG/1.1/DTD/svg11.dtd">'
    )
    ENCODING = "UTF-8"


def svg_tostring(xml: EtreeElement, **tostring_kwargs: str | bool | None) -> bytes:
    """Contents of svg file with optional xml declaration.

    :param xml: root node of your svg geometry
    :param tostring_kwargs: keyword arguments to etree.tostring.
        pass xml_header=True for sensible defaults, see further documentation on xml
        header in write_svg docstring.
    :return: bytestring of svg file contents
    """
    tostring_kwargs["pretty_print"] = tostring_kwargs.get("pretty_print", True)
    if tostring_kwargs.get("xml_declaration"):
        for default in _TostringDefaults:
            arg_name = default.name.lower()
            value = tostring_kwargs.get(arg_name, default.value)
            tostring_kwargs[arg_name] = value
    as_bytes = etree.tostring(etree.ElementTree(xml), **tostring_kwargs)  # type: ignore
    return cast("bytes", as_bytes)
