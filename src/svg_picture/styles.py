"""Merge inline style declarations with presentation attributes.

:author: Shay Hill
:created: 2025-11-05

For an element like

    <rect fill="red" style="fill:blue;stroke:black"/>

`Properties(elem.attrib).get_string("fill")` is "blue". Entries in the style
attribute always win over an attribute of the same name.

Colors are returned as 24-bit rgb ints (0xRRGGBB). Alpha is folded in later, when
opacity is known.
"""

from __future__ import annotations

import warnings
from contextlib import suppress
from typing import TYPE_CHECKING

from paragraphs import par
from PIL import ImageColor

from svg_picture.exceptions import UnresolvedColorWarning
from svg_picture.unit_conversion import DEFAULT_FONT_SIZE

if TYPE_CHECKING:
    from collections.abc import Mapping

    from svg_picture.unit_conversion import UnitConverter

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _hex3_to_hex6(rgb: int) -> int:
    """Expand 0xRGB to 0xRRGGBB by duplicating each nibble.

    :param rgb: 12-bit color
    :return: 24-bit color

        >>> hex(_hex3_to_hex6(0xF80))
        '0xff8800'
    """
    red, green, blue = (rgb >> 8) & 0xF, (rgb >> 4) & 0xF, rgb & 0xF
    return (red * 0x11) << 16 | (green * 0x11) << 8 | blue * 0x11


def parse_color(value: str | None) -> int | None:
    """Interpret an svg color string.

    :param value: "#RGB", "#RRGGBB", a color name, or functional syntax like
        "rgb(255, 0, 0)" or "hsl(0, 100%, 50%)"
    :return: 24-bit rgb int or None if the value is None or cannot be read
    :effects: warns with UnresolvedColorWarning if the value cannot be read
    """
    if value is None:
        return None
    value = value.strip()
    hex_part = value[1:]
    is_hex = len(hex_part) in (3, 6) and set(hex_part) <= _HEX_DIGITS
    if value.startswith("#") and is_hex:
        rgb = int(hex_part, 16)
        return _hex3_to_hex6(rgb) if len(hex_part) == 3 else rgb
    with suppress(ValueError):
        red, green, blue, *_ = ImageColor.getrgb(value)
        return red << 16 | green << 8 | blue
    msg = par(f"""Unrecognized color '{value}'. Using black.""")
    warnings.warn(msg, UnresolvedColorWarning, stacklevel=2)
    return None


class StyleSet:
    """Declarations from an inline style attribute."""

    def __init__(self, style: str | None = None) -> None:
        """Split "k:v;k2:v2" into a dict.

        :param style: the style attribute value. Pairs without exactly one ":" are
            ignored.
        """
        self.style_map: dict[str, str] = {}
        for declaration in (style or "").split(";"):
            key_val = declaration.split(":")
            if len(key_val) == 2:
                self.style_map[key_val[0].strip()] = key_val[1].strip()

    def get_style(self, name: str) -> str | None:
        """Get a declaration value or None."""
        return self.style_map.get(name)


class Properties:
    """A merged view of an element's attributes and inline style.

    :param attrib: element attributes with namespaces removed from the keys
    :param units: optional converter for length values. Without one, lengths must be
        plain numbers.
    """

    def __init__(
        self, attrib: Mapping[str, str], units: UnitConverter | None = None
    ) -> None:
        """Read the style attribute once."""
        self.attrib = attrib
        self.units = units
        self.styles = StyleSet(attrib.get("style"))

    def get_string(self, name: str) -> str | None:
        """Get a value from the style attribute, else from the attributes.

        :param name: property name, e.g. "fill"
        :return: property value or None
        """
        value = self.styles.get_style(name)
        if value is None:
            value = self.attrib.get(name)
        return value

    def has(self, name: str) -> bool:
        """True if the property is set in the style or the attributes."""
        return self.get_string(name) is not None

    def get_float(self, name: str) -> float | None:
        """Get a property as a plain float.

        :param name: property name, e.g. "opacity"
        :return: float value or None if missing or not a number
        """
        value = self.get_string(name)
        if value is None:
            return None
        with suppress(ValueError):
            return float(value)
        return None

    def get_length(
        self, name: str, font_size: float = DEFAULT_FONT_SIZE
    ) -> float | None:
        """Get a property as a length in user units.

        :param name: property name, e.g. "stroke-width"
        :param font_size: current font size for em and ex units
        :return: length or None if missing or unreadable
        """
        if self.units is None:
            return self.get_float(name)
        return self.units.get_length(name, self.get_string(name), font_size=font_size)

    def get_color(self, name: str) -> int | None:
        """Get a property as a 24-bit rgb int.

        :param name: property name, e.g. "stop-color"
        :return: rgb int or None if missing or unreadable (with a warning)
        """
        return parse_color(self.get_string(name))
