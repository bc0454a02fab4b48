"""Keep track of declared bounds and computed limits during a parse.

:author: Shay Hill
:created: 2025-11-03

Two rectangles come out of a parse:

- declared bounds: a `rect` drawn inside a group with id "bounds" (any case) says
  how big the author wants the picture to be. The last such rect wins.

- computed limits: a box around every filled geometry in root coordinates. Stroke
  widths are not included.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from svg_picture.bounding_boxes.type_rect import Rect
from svg_picture.transformations import IDENTITY

if TYPE_CHECKING:
    from svg_picture.transformations import Matrix


BOUNDS_GROUP_ID = "bounds"


class BoundsTracker:
    """Accumulate bounds for one parse."""

    def __init__(self) -> None:
        """Start with no declared bounds and empty limits."""
        self.declared_bounds: Rect | None = None
        self._limits = Rect.empty()

    @property
    def limits(self) -> Rect:
        """The raw limits rect. May be degenerate."""
        return self._limits

    @property
    def computed_bounds(self) -> Rect | None:
        """The limits rect, or None if no geometry was ever added."""
        if self._limits.is_degenerate:
            return None
        return self._limits

    def declare(self, rect: Rect) -> None:
        """Record (or overwrite) the declared bounds."""
        self.declared_bounds = rect

    def add_point(self, x: float, y: float) -> None:
        """Expand the limits to include a point in root coordinates."""
        self._limits = self._limits.union_point(x, y)

    def add_rect(self, rect: Rect, matrix: Matrix = IDENTITY) -> None:
        """Expand the limits to include a local rect seen through `matrix`.

        :param rect: rect in local coordinates
        :param matrix: transformation from local to root coordinates
        """
        self._limits = self._limits.union(rect.transformed(matrix))
