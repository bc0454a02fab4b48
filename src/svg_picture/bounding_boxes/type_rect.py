"""An immutable edge-defined rectangle.

:author: Shay Hill
:created: 2025-11-03

Picture bounds are accumulated one point at a time, so a rect is stored by its
edges (left, top, right, bottom) rather than by x, y, width, height. The empty rect
has inverted infinite edges. Any point unioned with it gives a rect around that one
point.
"""

from __future__ import annotations

import dataclasses
import math
from typing import TYPE_CHECKING

from typing_extensions import Self

from svg_picture.transformations import IDENTITY, mat_apply

if TYPE_CHECKING:
    from collections.abc import Iterable

    from svg_picture.transformations import Matrix


@dataclasses.dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in user units.

    :param left: minimum x
    :param top: minimum y (y points down)
    :param right: maximum x
    :param bottom: maximum y
    """

    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def empty(cls) -> Self:
        """Create a rect that has not received any points."""
        return cls(math.inf, math.inf, -math.inf, -math.inf)

    @classmethod
    def from_xywh(cls, x: float, y: float, width: float, height: float) -> Self:
        """Create a rect from svg-style x, y, width, height values."""
        return cls(x, y, x + width, y + height)

    @classmethod
    def around_points(cls, points: Iterable[tuple[float, float]]) -> Self:
        """Create the smallest rect around some points.

        :param points: (x, y) tuples. If there are none, return an empty rect.
        """
        xs: list[float] = []
        ys: list[float] = []
        for x, y in points:
            xs.append(x)
            ys.append(y)
        if not xs:
            return cls.empty()
        return cls(min(xs), min(ys), max(xs), max(ys))

    @property
    def is_degenerate(self) -> bool:
        """True if the rect has never received a point."""
        return math.isinf(self.left) or math.isinf(self.top)

    @property
    def width(self) -> float:
        """Width of the rect."""
        return self.right - self.left

    @property
    def height(self) -> float:
        """Height of the rect."""
        return self.bottom - self.top

    @property
    def corners(
        self,
    ) -> tuple[
        tuple[float, float],
        tuple[float, float],
        tuple[float, float],
        tuple[float, float],
    ]:
        """Get the corners of the rect. CW from top left."""
        return (
            (self.left, self.top),
            (self.right, self.top),
            (self.right, self.bottom),
            (self.left, self.bottom),
        )

    def union_point(self, x: float, y: float) -> Rect:
        """Create a rect around self and a point."""
        return Rect(
            min(self.left, x),
            min(self.top, y),
            max(self.right, x),
            max(self.bottom, y),
        )

    def union(self, other: Rect) -> Rect:
        """Create a rect around self and another rect.

        A degenerate other does not change the result.
        """
        if other.is_degenerate:
            return self
        return self.union_point(other.left, other.top).union_point(
            other.right, other.bottom
        )

    def contains(self, other: Rect) -> bool:
        """True if other lies entirely inside (or on the edges of) self."""
        return (
            self.left <= other.left
            and self.top <= other.top
            and self.right >= other.right
            and self.bottom >= other.bottom
        )

    def transformed(self, matrix: Matrix = IDENTITY) -> Rect:
        """Transform the corners of self and return the axis-aligned hull.

        :param matrix: svg-style transformation matrix
        :return: a rect around the four transformed corners. A degenerate rect is
            returned unchanged.
        """
        if self.is_degenerate or matrix == IDENTITY:
            return self
        return Rect.around_points(mat_apply(matrix, c) for c in self.corners)

    def values(self) -> tuple[float, float, float, float]:
        """Get the svg-style values of the rect.

        :return: x, y, width, height
        """
        return self.left, self.top, self.width, self.height
