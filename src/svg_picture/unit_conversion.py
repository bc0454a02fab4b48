"""Convert svg length strings to user units.

Physical units depend on a dpi value (72 by default, so one point is one user
unit). Font-relative units depend on the current font size. Percentages depend on
the size of the picture being recorded.

:author: Shay Hill
:created: 2023-02-12
"""

from __future__ import annotations

import dataclasses
import enum
import re
from contextlib import suppress
from typing import TypeAlias

DEFAULT_DPI = 72.0

# default text size when nothing sets font-size
DEFAULT_FONT_SIZE = 12.0


class Unit(enum.Enum):
    """SVG Units of measurement.

    Value is (unit specifier, units per inch). None for units that do not scale
    with dpi.
    """

    IN = "in", 1.0  # inches
    PT = "pt", 72.0  # points
    PC = "pc", 6.0  # picas
    CM = "cm", 2.54  # centimeters
    MM = "mm", 25.4  # millimeters
    PX = "px", None  # pixels
    EM = "em", None  # font size
    EX = "ex", None  # half font size
    PERCENT = "%", None  # percent of viewport
    USER = "", None  # "user units" without a unit specifier


_UNIT_SPECIFIER2UNIT = {x.value[0]: x for x in Unit}

_NUMBER = r"[-+]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][-+]?[0-9]+)?"
_NUMBER_AND_UNIT = re.compile(
    rf"^\s*(?P<number>{_NUMBER})\s*(?P<unit>in|pt|pc|cm|mm|px|em|ex|%)?\s*$"
)

MeasurementArg: TypeAlias = float | str


def parse_unit(measurement: str) -> tuple[float, Unit]:
    """Split the value and unit from a string.

    :param measurement: The value to parse (e.g. "55.32px")
    :return: A tuple of the value and Unit
    :raise ValueError: If the value cannot be parsed

    | arg        | result              |
    | ---------- | ------------------- |
    | "55.32px"  | (55.32, Unit.PX)    |
    | "55.32"    | (55.32, Unit.USER)  |
    | "50%"      | (50.0, Unit.PERCENT)|
    """
    number_unit = _NUMBER_AND_UNIT.match(measurement)
    if number_unit is None:
        msg = f"Cannot parse value and unit from {measurement}"
        raise ValueError(msg)
    unit = _UNIT_SPECIFIER2UNIT[number_unit["unit"] or ""]
    return float(number_unit["number"]), unit


@dataclasses.dataclass
class UnitConverter:
    """Convert lengths for one parse.

    :param dpi: dots per inch for physical units
    :param viewport_width: width of the recording scope (basis for x percentages)
    :param viewport_height: height of the recording scope (basis for y percentages)
    """

    dpi: float = DEFAULT_DPI
    viewport_width: float = 0.0
    viewport_height: float = 0.0

    def _percent_basis(self, name: str) -> float:
        """Choose what a percentage of attribute `name` is a percentage of.

        Names containing "x" (x, cx, x1, ...) and "width" use the viewport width.
        Names containing "y" and "height" use the viewport height. Anything else
        uses the average of width and height.
        """
        if "x" in name or name == "width":
            return self.viewport_width
        if "y" in name or name == "height":
            return self.viewport_height
        return (self.viewport_width + self.viewport_height) / 2

    def to_user_units(
        self, name: str, value: MeasurementArg, font_size: float = DEFAULT_FONT_SIZE
    ) -> float:
        """Convert a length attribute value to user units.

        :param name: attribute name (used to resolve percentages)
        :param value: attribute value, e.g. "1in" or "50%" or 12.0
        :param font_size: current font size for em and ex units
        :return: value in user units
        :raise ValueError: if the value cannot be parsed
        """
        if isinstance(value, (int, float)):
            return float(value)
        number, unit = parse_unit(value)
        per_inch = unit.value[1]
        if per_inch is not None:
            return number * self.dpi / per_inch
        if unit is Unit.EM:
            return number * font_size
        if unit is Unit.EX:
            return number * font_size / 2
        if unit is Unit.PERCENT:
            return number * self._percent_basis(name) / 100
        return number

    def get_length(
        self,
        name: str,
        value: str | None,
        default: float | None = None,
        font_size: float = DEFAULT_FONT_SIZE,
    ) -> float | None:
        """Convert an optional attribute value, returning a default on failure.

        :param name: attribute name
        :param value: attribute value or None if the attribute is absent
        :param default: returned if the value is absent or unreadable
        :param font_size: current font size for em and ex units
        :return: value in user units or default
        """
        if value is None:
            return default
        with suppress(ValueError):
            return self.to_user_units(name, value, font_size)
        return default
