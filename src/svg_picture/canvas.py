"""Canvases that receive a replayed Document.

:author: Shay Hill
:created: 2025-11-08

A canvas is anything with the methods of `Canvas`. Rasterizers are outside this
package. Two canvases are included:

- `RecordingCanvas` keeps a list of the calls it received. Useful in tests and for
  debugging a parse.

- `SvgCanvas` writes each operation back out as an svg element. Gradients are
  written to a `defs` element the first time a shader is used. Write the result
  with `svg_picture.write_svg`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from lxml import etree

from svg_picture.gradients import LinearShader
from svg_picture.nsmap import NSMAP
from svg_picture.paint import PaintStyle, StrokeCap, StrokeJoin
from svg_picture.string_conversion import (
    argb_to_hex,
    argb_to_opacity,
    format_number,
    set_attributes,
    svg_floats,
    svg_matrix,
)
from svg_picture.transformations import IDENTITY

if TYPE_CHECKING:
    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

    from svg_picture.display_list import (
        CircleOp,
        DrawOp,
        EllipseOp,
        ImageOp,
        LineOp,
        PathOp,
        RectOp,
        RoundRectOp,
        TextOp,
    )
    from svg_picture.gradients import Shader
    from svg_picture.paint import Paint
    from svg_picture.string_conversion import ElemAttrib
    from svg_picture.transformations import Matrix

_LOGGER = logging.getLogger(__name__)

_OPAQUE = 1.0


class Canvas(Protocol):
    """What `Document.replay` calls."""

    def begin_recording(self, width: int, height: int) -> None:
        """Open a recording scope of the given size."""
        ...

    def end_recording(self) -> None:
        """Close the recording scope."""
        ...

    def draw_rect(self, op: RectOp) -> None:
        """Draw a rectangle."""
        ...

    def draw_round_rect(self, op: RoundRectOp) -> None:
        """Draw a rectangle with rounded corners."""
        ...

    def draw_circle(self, op: CircleOp) -> None:
        """Draw a circle."""
        ...

    def draw_oval(self, op: EllipseOp) -> None:
        """Draw an ellipse."""
        ...

    def draw_line(self, op: LineOp) -> None:
        """Draw a line."""
        ...

    def draw_path(self, op: PathOp) -> None:
        """Draw a path."""
        ...

    def draw_image(self, op: ImageOp) -> None:
        """Draw an image."""
        ...

    def draw_text(self, op: TextOp) -> None:
        """Draw a line of text."""
        ...


class RecordingCanvas:
    """Remember every call.

    `calls` holds (method name, argument) pairs in call order. The argument for
    begin_recording is (width, height) and for end_recording is None.
    """

    def __init__(self) -> None:
        """Start with no calls."""
        self.calls: list[tuple[str, object]] = []

    def _record(self, name: str, arg: object) -> None:
        _LOGGER.debug("%s %s", name, arg)
        self.calls.append((name, arg))

    @property
    def ops(self) -> list[DrawOp]:
        """Every drawing operation received, in order."""
        return [
            arg  # pyright: ignore[reportReturnType]
            for name, arg in self.calls
            if name.startswith("draw_")
        ]

    def begin_recording(self, width: int, height: int) -> None:
        """Record the recording size."""
        self._record("begin_recording", (width, height))

    def end_recording(self) -> None:
        """Record the end of the recording."""
        self._record("end_recording", None)

    def draw_rect(self, op: RectOp) -> None:
        """Record a rectangle."""
        self._record("draw_rect", op)

    def draw_round_rect(self, op: RoundRectOp) -> None:
        """Record a rectangle with rounded corners."""
        self._record("draw_round_rect", op)

    def draw_circle(self, op: CircleOp) -> None:
        """Record a circle."""
        self._record("draw_circle", op)

    def draw_oval(self, op: EllipseOp) -> None:
        """Record an ellipse."""
        self._record("draw_oval", op)

    def draw_line(self, op: LineOp) -> None:
        """Record a line."""
        self._record("draw_line", op)

    def draw_path(self, op: PathOp) -> None:
        """Record a path."""
        self._record("draw_path", op)

    def draw_image(self, op: ImageOp) -> None:
        """Record an image."""
        self._record("draw_image", op)

    def draw_text(self, op: TextOp) -> None:
        """Record a line of text."""
        self._record("draw_text", op)


def _get_paint_attributes(
    paint: Paint, paint_ref: str | None
) -> dict[str, ElemAttrib]:
    """Create fill and stroke attributes for one paint.

    :param paint: fill or stroke paint
    :param paint_ref: "url(#id)" if the paint has a shader, else None
    :return: attribute names and values. The other of fill or stroke is "none".
    """
    color = paint_ref or argb_to_hex(paint.color)
    opacity = argb_to_opacity(paint.color)
    opacity_val = None if opacity == _OPAQUE else opacity
    if paint.style is PaintStyle.FILL:
        return {"fill": color, "fill_opacity": opacity_val, "stroke": "none"}
    attributes: dict[str, ElemAttrib] = {
        "fill": "none",
        "stroke": color,
        "stroke_opacity": opacity_val,
        "stroke_width": paint.stroke_width,
    }
    if paint.stroke_cap is not StrokeCap.BUTT:
        attributes["stroke_linecap"] = paint.stroke_cap.value
    if paint.stroke_join is not StrokeJoin.MITER:
        attributes["stroke_linejoin"] = paint.stroke_join.value
    if paint.dash is not None:
        attributes["stroke_dasharray"] = svg_floats(paint.dash.intervals)
        if paint.dash.phase:
            attributes["stroke_dashoffset"] = paint.dash.phase
    return attributes


class SvgCanvas:
    """Write replayed operations into an svg element tree.

    :param nsmap: optional namespace map for the root element
    """

    def __init__(self, nsmap: dict[str | None, str] | None = None) -> None:
        """Create the canvas. Nothing is written until begin_recording."""
        self._nsmap = NSMAP if nsmap is None else nsmap
        self._root: EtreeElement | None = None
        self._defs: EtreeElement | None = None
        self._shader_ids: dict[Shader, str] = {}

    @property
    def root(self) -> EtreeElement:
        """The svg root element.

        :raises ValueError: if begin_recording has not been called
        """
        if self._root is None:
            msg = "Call begin_recording before accessing the svg root."
            raise ValueError(msg)
        return self._root

    def begin_recording(self, width: int, height: int) -> None:
        """Create a new svg root of the given size."""
        # can only pass nsmap on instance creation
        root = etree.Element(f"{{{self._nsmap[None]}}}svg", nsmap=self._nsmap)
        set_attributes(
            root,
            width=width,
            height=height,
            viewBox=svg_floats((0, 0, width, height)),
        )
        self._root = root
        self._defs = None
        self._shader_ids = {}

    def end_recording(self) -> None:
        """Nothing to close. The tree is complete."""

    def _get_defs(self) -> EtreeElement:
        if self._defs is None:
            self._defs = etree.Element("defs")
            self.root.insert(0, self._defs)
        return self._defs

    def _get_shader_ref(self, shader: Shader) -> str:
        """Write a gradient for a shader (once) and return "url(#id)"."""
        if shader in self._shader_ids:
            return f"url(#{self._shader_ids[shader]})"
        shader_id = f"shader{len(self._shader_ids)}"
        self._shader_ids[shader] = shader_id
        if isinstance(shader, LinearShader):
            tag = "linearGradient"
            geometry = {"x1": shader.x1, "y1": shader.y1}
            geometry.update({"x2": shader.x2, "y2": shader.y2})
        else:
            tag = "radialGradient"
            geometry = {"cx": shader.cx, "cy": shader.cy, "r": shader.r}
        matrix = None if shader.matrix is None else svg_matrix(shader.matrix)
        gradient = etree.SubElement(self._get_defs(), tag)
        set_attributes(
            gradient,
            id=shader_id,
            gradientUnits="userSpaceOnUse",
            gradientTransform=matrix,
            **geometry,
        )
        for position, color in zip(shader.positions, shader.colors, strict=True):
            opacity = argb_to_opacity(color)
            set_attributes(
                etree.SubElement(gradient, "stop"),
                offset=format_number(position),
                stop_color=argb_to_hex(color),
                stop_opacity=None if opacity == _OPAQUE else opacity,
            )
        return f"url(#{shader_id})"

    def _add_element(
        self,
        tag: str,
        matrix: Matrix,
        paint: Paint | None,
        **attributes: ElemAttrib,
    ) -> EtreeElement:
        """Add one element to the root.

        :param tag: element tag
        :param matrix: absolute matrix of the operation
        :param paint: paint of the operation (None for images)
        :param attributes: geometry attributes
        :return: the new element
        """
        elem = etree.SubElement(self.root, tag)
        if paint is not None:
            paint_ref = None
            if paint.shader is not None:
                paint_ref = self._get_shader_ref(paint.shader)
            attributes.update(_get_paint_attributes(paint, paint_ref))
        if matrix != IDENTITY:
            attributes["transform"] = svg_matrix(matrix)
        set_attributes(elem, **attributes)
        return elem

    def draw_rect(self, op: RectOp) -> None:
        """Write a rect element."""
        _ = self._add_element(
            "rect",
            op.matrix,
            op.paint,
            x=op.x,
            y=op.y,
            width=op.width,
            height=op.height,
        )

    def draw_round_rect(self, op: RoundRectOp) -> None:
        """Write a rect element with rx and ry."""
        _ = self._add_element(
            "rect",
            op.matrix,
            op.paint,
            x=op.x,
            y=op.y,
            width=op.width,
            height=op.height,
            rx=op.rx,
            ry=op.ry,
        )

    def draw_circle(self, op: CircleOp) -> None:
        """Write a circle element."""
        _ = self._add_element(
            "circle", op.matrix, op.paint, cx=op.cx, cy=op.cy, r=op.r
        )

    def draw_oval(self, op: EllipseOp) -> None:
        """Write an ellipse element."""
        _ = self._add_element(
            "ellipse", op.matrix, op.paint, cx=op.cx, cy=op.cy, rx=op.rx, ry=op.ry
        )

    def draw_line(self, op: LineOp) -> None:
        """Write a line element."""
        _ = self._add_element(
            "line", op.matrix, op.paint, x1=op.x1, y1=op.y1, x2=op.x2, y2=op.y2
        )

    def draw_path(self, op: PathOp) -> None:
        """Write a path element."""
        _ = self._add_element("path", op.matrix, op.paint, d=op.geometry.to_svgd())

    def draw_image(self, op: ImageOp) -> None:
        """Write an image element with the image embedded as a data uri."""
        _ = self._add_element(
            "image",
            op.matrix,
            None,
            x=op.x,
            y=op.y,
            width=op.width,
            height=op.height,
            preserveAspectRatio="none",
            **{"xlink:href": op.pixels.to_data_uri()},
        )

    def draw_text(self, op: TextOp) -> None:
        """Write a text element."""
        paint = op.paint
        _ = self._add_element(
            "text",
            op.matrix,
            paint,
            x=op.x,
            y=op.y,
            font_size=paint.text_size,
            font_family=paint.font_family,
            font_style=None if paint.font_style == "normal" else paint.font_style,
            font_weight=None if paint.font_weight == "normal" else paint.font_weight,
            text_anchor=op.align.value,
            text=op.text,
        )
