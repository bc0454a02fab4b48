"""Drawing operations and the Document that holds them.

:author: Shay Hill
:created: 2025-11-08

A parse produces a Document: an ordered tuple of drawing operations plus two
optional rectangles.

- `declared_bounds` is the rect the author drew inside `<g id="bounds">`.
- `computed_bounds` is the union of everything painted with a fill.

Each operation carries a resolved Paint and the absolute matrix that was in
effect when it was recorded. Nothing in an operation refers back to a style,
gradient id, or ancestor element.

Replay a Document into anything with the Canvas methods (see `canvas.py`):

    document.replay(canvas)
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, TypeAlias

from svg_picture.bounding_boxes.type_rect import Rect
from svg_picture.canvas import SvgCanvas
from svg_picture.transformations import IDENTITY

if TYPE_CHECKING:
    from collections.abc import Iterator

    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

    from svg_picture.canvas import Canvas
    from svg_picture.image_ops import ImagePixels
    from svg_picture.paint import Paint, TextAlign
    from svg_picture.path_data import PathGeometry
    from svg_picture.transformations import Matrix


@dataclasses.dataclass(frozen=True)
class RectOp:
    """Axis-aligned rectangle in local coordinates."""

    x: float
    y: float
    width: float
    height: float
    paint: Paint
    matrix: Matrix = IDENTITY

    def local_bounds(self) -> Rect:
        """Return the rectangle itself."""
        return Rect.from_xywh(self.x, self.y, self.width, self.height)

    def replay(self, canvas: Canvas) -> None:
        """Draw self onto a canvas."""
        canvas.draw_rect(self)


@dataclasses.dataclass(frozen=True)
class RoundRectOp:
    """Rectangle with elliptical corners."""

    x: float
    y: float
    width: float
    height: float
    rx: float
    ry: float
    paint: Paint
    matrix: Matrix = IDENTITY

    def local_bounds(self) -> Rect:
        """Return the rectangle the corners are cut from."""
        return Rect.from_xywh(self.x, self.y, self.width, self.height)

    def replay(self, canvas: Canvas) -> None:
        """Draw self onto a canvas."""
        canvas.draw_round_rect(self)


@dataclasses.dataclass(frozen=True)
class CircleOp:
    """Circle by center and radius."""

    cx: float
    cy: float
    r: float
    paint: Paint
    matrix: Matrix = IDENTITY

    def local_bounds(self) -> Rect:
        """Return the square around the circle."""
        r = self.r
        return Rect(self.cx - r, self.cy - r, self.cx + r, self.cy + r)

    def replay(self, canvas: Canvas) -> None:
        """Draw self onto a canvas."""
        canvas.draw_circle(self)


@dataclasses.dataclass(frozen=True)
class EllipseOp:
    """Axis-aligned ellipse by center and radii."""

    cx: float
    cy: float
    rx: float
    ry: float
    paint: Paint
    matrix: Matrix = IDENTITY

    def local_bounds(self) -> Rect:
        """Return the rectangle around the ellipse."""
        rx, ry = self.rx, self.ry
        return Rect(self.cx - rx, self.cy - ry, self.cx + rx, self.cy + ry)

    def replay(self, canvas: Canvas) -> None:
        """Draw self onto a canvas."""
        canvas.draw_oval(self)


@dataclasses.dataclass(frozen=True)
class LineOp:
    """Single stroked line segment."""

    x1: float
    y1: float
    x2: float
    y2: float
    paint: Paint
    matrix: Matrix = IDENTITY

    def local_bounds(self) -> Rect:
        """Return the rectangle with the endpoints at opposite corners."""
        return Rect.around_points([(self.x1, self.y1), (self.x2, self.y2)])

    def replay(self, canvas: Canvas) -> None:
        """Draw self onto a canvas."""
        canvas.draw_line(self)


@dataclasses.dataclass(frozen=True)
class PathOp:
    """Path, polygon, or polyline."""

    geometry: PathGeometry
    paint: Paint
    matrix: Matrix = IDENTITY

    def local_bounds(self) -> Rect:
        """Return the exact bounds of the path."""
        return self.geometry.bounds()

    def replay(self, canvas: Canvas) -> None:
        """Draw self onto a canvas."""
        canvas.draw_path(self)


@dataclasses.dataclass(frozen=True)
class ImageOp:
    """Embedded raster image scaled into a rectangle."""

    x: float
    y: float
    width: float
    height: float
    pixels: ImagePixels
    matrix: Matrix = IDENTITY

    def local_bounds(self) -> Rect:
        """Return the rectangle the image is drawn into."""
        return Rect.from_xywh(self.x, self.y, self.width, self.height)

    def replay(self, canvas: Canvas) -> None:
        """Draw self onto a canvas."""
        canvas.draw_image(self)


@dataclasses.dataclass(frozen=True)
class TextOp:
    """One line of text. (x, y) is the anchor point on the baseline."""

    x: float
    y: float
    text: str
    paint: Paint
    align: TextAlign
    matrix: Matrix = IDENTITY

    def replay(self, canvas: Canvas) -> None:
        """Draw self onto a canvas."""
        canvas.draw_text(self)


DrawOp: TypeAlias = (
    RectOp | RoundRectOp | CircleOp | EllipseOp | LineOp | PathOp | ImageOp | TextOp
)


@dataclasses.dataclass(frozen=True)
class Document:
    """The result of parsing one svg.

    :param draw_ops: drawing operations in paint order
    :param width: recording width (whole user units)
    :param height: recording height (whole user units)
    :param declared_bounds: rect from `<g id="bounds">` or None
    :param computed_bounds: union of painted fill geometry or None if nothing was
        painted
    :param override_color: the override color the document was parsed with
    """

    draw_ops: tuple[DrawOp, ...]
    width: int = 0
    height: int = 0
    declared_bounds: Rect | None = None
    computed_bounds: Rect | None = None
    override_color: int | None = None

    def __len__(self) -> int:
        """Number of drawing operations."""
        return len(self.draw_ops)

    def __iter__(self) -> Iterator[DrawOp]:
        """Iterate over drawing operations in paint order."""
        return iter(self.draw_ops)

    @property
    def bounds(self) -> Rect | None:
        """Declared bounds if the document has them, else computed bounds."""
        if self.declared_bounds is not None:
            return self.declared_bounds
        return self.computed_bounds

    def replay(self, canvas: Canvas) -> None:
        """Replay every operation onto a canvas inside one recording scope.

        :param canvas: receives begin_recording, one draw call per op, then
            end_recording
        """
        canvas.begin_recording(self.width, self.height)
        for op in self.draw_ops:
            op.replay(canvas)
        canvas.end_recording()

    def create_svg(self) -> EtreeElement:
        """Replay into a new svg element tree.

        :return: svg root element with one child element per drawing operation
        """
        canvas = SvgCanvas()
        self.replay(canvas)
        return canvas.root
