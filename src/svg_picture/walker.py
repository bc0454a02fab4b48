"""Walk svg events and record drawing operations.

:author: Shay Hill
:created: 2025-11-09

One DocumentWalker reads one document. Feed it the events from
`xml_events.iter_events` and ask it for the Document when it is done:

    walker = DocumentWalker(root, config)
    walker.walk(iter_events(root))
    document = walker.to_document()

Every start event pushes exactly one GroupFrame and every end event pops one, so
the state after an element closes is the state from before it opened, no matter
what the closing tag says. A frame holds the inherited fill and stroke, the
group opacity, and the absolute matrix. Frames are immutable. A child gets a new
frame, never a changed copy of its parent's.

Three kinds of element switch off drawing for their whole subtree:

- anything with `display:none`. Nested hidden elements are counted, so drawing
  resumes only when the outermost one closes.
- `defs`. Gradients inside are still defined.
- `<g id="bounds">` (any case). A `rect` inside sets the declared bounds.
  Nothing inside is drawn.

`use` elements are expanded by cloning the referenced element into a new `g`
and walking the clone right away, inside the current state. The `g` carries the
`use` element's other attributes, and its transform is the `use` transform
followed by translate(x, y).
"""

from __future__ import annotations

import copy
import dataclasses
import logging
import math
import warnings
from contextlib import suppress
from typing import TYPE_CHECKING, TypeAlias

from lxml import etree
from paragraphs import par

from svg_picture.bounding_boxes import BOUNDS_GROUP_ID, BoundsTracker, Rect
from svg_picture.display_list import (
    CircleOp,
    Document,
    EllipseOp,
    ImageOp,
    LineOp,
    PathOp,
    RectOp,
    RoundRectOp,
    TextOp,
)
from svg_picture.exceptions import UnresolvedUseWarning
from svg_picture.font_tools.text_metrics import EstimatedTextMetrics
from svg_picture.gradients import (
    GEOMETRY_ATTRIBUTES,
    Gradient,
    GradientKind,
    GradientRegistry,
)
from svg_picture.image_ops import decode_image
from svg_picture.number_lexer import parse_number_list
from svg_picture.paint import (
    BLACK,
    PaintResolver,
    TextAlign,
    fold_alpha,
    new_fill_paint,
    new_stroke_paint,
)
from svg_picture.path_data import new_polyline, parse_path
from svg_picture.string_conversion import format_number
from svg_picture.styles import Properties
from svg_picture.transformations import IDENTITY, pre_concat, parse_transform
from svg_picture.unit_conversion import UnitConverter
from svg_picture.xml_events import Characters, ElementEnd, ElementStart, iter_events

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

    from svg_picture.display_list import DrawOp
    from svg_picture.font_tools.text_metrics import TextMetrics
    from svg_picture.main import ParserConfig
    from svg_picture.paint import Paint
    from svg_picture.path_data import PathGeometry
    from svg_picture.transformations import Matrix
    from svg_picture.xml_events import XmlEvent

_LOGGER = logging.getLogger(__name__)

_GRADIENT_KINDS = {x.value: x for x in GradientKind}

# attributes of a `use` element that are not copied to the synthesized group
_USE_ONLY_ATTRIBUTES = frozenset(("x", "y", "width", "height", "href", "transform"))

_Handler: TypeAlias = "Callable[[ElementStart, GroupFrame, Properties], GroupFrame]"


@dataclasses.dataclass(frozen=True)
class GroupFrame:
    """State in effect inside one element.

    :param tag: tag of the element that pushed the frame
    :param fill: fill paint children inherit
    :param stroke: stroke paint children inherit
    :param fill_set: True if this element or an ancestor set a fill
    :param stroke_set: True if this element or an ancestor set a stroke
    :param group_opacity: product of ancestor group opacities
    :param matrix: absolute matrix for the element's content
    :param opened_hidden: this element incremented the hidden-depth counter
    :param opened_defs: this element incremented the defs-depth counter
    :param opened_bounds: this element started declared-bounds mode
    :param opened_text: this element started a text buffer
    """

    tag: str
    fill: Paint
    stroke: Paint
    fill_set: bool = False
    stroke_set: bool = False
    group_opacity: float = 1.0
    matrix: Matrix = IDENTITY
    opened_hidden: bool = False
    opened_defs: bool = False
    opened_bounds: bool = False
    opened_text: bool = False


@dataclasses.dataclass
class _TextBuffer:
    """Characters collected between the start and end of a text element."""

    x: float
    y: float
    fill: Paint | None
    stroke: Paint | None
    valign: str | None
    text: str = ""
    baseline_y: float = dataclasses.field(init=False)

    def __post_init__(self) -> None:
        self.baseline_y = self.y

    @property
    def paint(self) -> Paint | None:
        """The paint used to measure text. Stroke if there is one."""
        return self.stroke or self.fill

    def append(self, chars: str, metrics: TextMetrics) -> None:
        """Add characters and move the baseline for middle or top alignment."""
        self.text += chars
        paint = self.paint
        if self.valign not in {"middle", "top"} or paint is None:
            return
        bounds = metrics.text_bounds(self.display_text, paint)
        if self.valign == "middle":
            self.baseline_y = self.y - (bounds.top + bounds.bottom) / 2
        else:
            self.baseline_y = self.y + bounds.height

    @property
    def display_text(self) -> str:
        """The text with runs of whitespace collapsed to one space."""
        return " ".join(self.text.split())


def _index_ids(root: EtreeElement) -> dict[str, EtreeElement]:
    """Map each id to the first element that has it."""
    index: dict[str, EtreeElement] = {}
    for elem in root.iter():
        elem_id = elem.get("id") if isinstance(elem.tag, str) else None
        if elem_id:
            _ = index.setdefault(elem_id, elem)
    return index


def _parse_offset(value: str | None) -> float:
    """Read a gradient stop offset. "50%" is 0.5. Unreadable values are 0."""
    if value is None:
        return 0.0
    value = value.strip()
    with suppress(ValueError):
        if value.endswith("%"):
            return float(value[:-1]) / 100
        return float(value)
    return 0.0


class DocumentWalker:
    """Turn a stream of svg events into drawing operations.

    :param root: root element of the document. Used only to index ids for `use`.
    :param config: parser configuration
    """

    def __init__(self, root: EtreeElement, config: ParserConfig) -> None:
        """Set up empty state for one parse."""
        self.config = config
        self.units = UnitConverter(dpi=config.dpi)
        self.gradients = GradientRegistry()
        self.resolver = PaintResolver(self.gradients, config.override_color)
        self.bounds = BoundsTracker()
        self.metrics: TextMetrics = config.text_metrics or EstimatedTextMetrics()
        self.draw_ops: list[DrawOp] = []
        self.width = 0
        self.height = 0
        self._frames = [GroupFrame("", new_fill_paint(), new_stroke_paint())]
        self._hidden_depth = 0
        self._defs_depth = 0
        self._bounds_mode = False
        self._text: _TextBuffer | None = None
        self._id_index = _index_ids(root)
        self._uses_in_progress: set[str] = set()
        self._handlers: dict[str, _Handler] = {
            "svg": self._start_svg,
            "g": self._start_group,
            "rect": self._start_rect,
            "circle": self._start_circle,
            "ellipse": self._start_ellipse,
            "line": self._start_line,
            "polygon": self._start_poly,
            "polyline": self._start_poly,
            "path": self._start_path,
            "image": self._start_image,
            "text": self._start_text,
            "use": self._start_use,
        }

    @property
    def frame(self) -> GroupFrame:
        """The state in effect for the element being read."""
        return self._frames[-1]

    @property
    def depth(self) -> int:
        """Number of open elements."""
        return len(self._frames) - 1

    def walk(self, events: Iterable[XmlEvent]) -> None:
        """Consume events. May be called again (re-entrantly) for `use` clones."""
        for event in events:
            if isinstance(event, ElementStart):
                self._start(event)
            elif isinstance(event, Characters):
                self._characters(event)
            elif isinstance(event, ElementEnd):
                self._end(event)

    def to_document(self) -> Document:
        """Create the finished Document."""
        return Document(
            draw_ops=tuple(self.draw_ops),
            width=self.width,
            height=self.height,
            declared_bounds=self.bounds.declared_bounds,
            computed_bounds=self.bounds.computed_bounds,
            override_color=self.config.override_color,
        )

    # ===========================================================================
    #   event dispatch
    # ===========================================================================

    def _start(self, event: ElementStart) -> None:
        """Push a frame for the element and record whatever it draws."""
        tag = event.tag
        props = Properties(event.attrib, self.units)
        frame = dataclasses.replace(
            self.frame,
            tag=tag,
            opened_hidden=False,
            opened_defs=False,
            opened_bounds=False,
            opened_text=False,
        )
        if tag in _GRADIENT_KINDS:
            self._start_gradient(event, props)
        elif tag == "stop":
            self._add_stop(props)
        elif self._hidden_depth or props.get_string("display") == "none":
            self._hidden_depth += 1
            frame = dataclasses.replace(frame, opened_hidden=True)
        elif self._defs_depth or tag == "defs":
            self._defs_depth += 1
            frame = dataclasses.replace(frame, opened_defs=True)
        elif self._bounds_mode:
            if tag == "rect":
                self._declare_bounds(props)
        elif tag in self._handlers:
            frame = self._handlers[tag](event, frame, props)
        else:
            _LOGGER.debug("Unrecognized tag: %s (%s)", tag, event.attrib)
        self._frames.append(frame)

    def _characters(self, event: Characters) -> None:
        """Collect text for an open text element."""
        if self._text is None or self._hidden_depth:
            return
        self._text.append(event.text, self.metrics)

    def _end(self, event: ElementEnd) -> None:
        """Pop the frame pushed by the matching start event and close it."""
        if len(self._frames) == 1:
            _LOGGER.debug("Unmatched end tag: %s", event.tag)
            return
        frame = self._frames.pop()
        if frame.tag != event.tag:
            _LOGGER.debug("End tag %s closed %s", event.tag, frame.tag)
        if frame.tag in _GRADIENT_KINDS:
            _ = self.gradients.end()
        if frame.opened_hidden:
            self._hidden_depth -= 1
        if frame.opened_defs:
            self._defs_depth -= 1
        if frame.opened_bounds:
            self._bounds_mode = False
        if frame.opened_text:
            self._end_text(frame)

    # ===========================================================================
    #   helpers
    # ===========================================================================

    def _length(
        self, props: Properties, name: str, default: float | None = 0.0
    ) -> float | None:
        """Get a length attribute in user units."""
        return self.units.get_length(
            name, props.attrib.get(name), default, font_size=self.frame.fill.text_size
        )

    def _push_transform(self, frame: GroupFrame, props: Properties) -> GroupFrame:
        """Pre-concatenate the element's transform onto the frame matrix."""
        transform = props.attrib.get("transform")
        if not transform:
            return frame
        matrix = pre_concat(frame.matrix, parse_transform(transform))
        return dataclasses.replace(frame, matrix=matrix)

    def _resolve_paints(
        self, frame: GroupFrame, props: Properties
    ) -> tuple[Paint | None, Paint | None]:
        """Get the fill and stroke paints for a leaf element.

        :return: (fill, stroke). None for one that should not be painted.
        """
        fill = self.resolver.resolve_fill(
            props,
            frame.fill,
            fill_set=frame.fill_set,
            group_opacity=frame.group_opacity,
        )
        stroke = self.resolver.resolve_stroke(
            props,
            frame.stroke,
            stroke_set=frame.stroke_set,
            group_opacity=frame.group_opacity,
        )
        return (
            fill.paint if fill.painted else None,
            stroke.paint if stroke.painted else None,
        )

    def _add_limits(self, rect: Rect, matrix: Matrix) -> None:
        """Expand the computed limits by a local rect."""
        self.bounds.add_rect(rect, matrix)

    def _emit(self, op: DrawOp) -> None:
        self.draw_ops.append(op)

    # ===========================================================================
    #   gradients
    # ===========================================================================

    def _start_gradient(self, event: ElementStart, props: Properties) -> None:
        """Open a gradient definition. Stops will be added until it closes."""
        attrib = event.attrib
        kind = _GRADIENT_KINDS[event.tag]
        geometry = {
            x: self._length(props, x) or 0.0
            for x in GEOMETRY_ATTRIBUTES
            if x in attrib
        }
        transform = attrib.get("gradientTransform")
        href = attrib.get("href")
        gradient = Gradient(
            id=attrib.get("id"),
            kind=kind,
            matrix=None if transform is None else parse_transform(transform),
            href=None if href is None else href.removeprefix("#"),
            explicit=frozenset(geometry),
            **geometry,
        )
        self.gradients.begin(gradient)

    def _add_stop(self, props: Properties) -> None:
        """Add a stop to the open gradient. Ignored outside a gradient."""
        rgb = props.get_color("stop-color")
        opacity = props.get_float("stop-opacity")
        color = fold_alpha(
            BLACK if rgb is None else rgb, 1.0 if opacity is None else opacity, 1.0
        )
        offset = _parse_offset(props.get_string("offset"))
        if not self.gradients.add_stop(offset, color):
            _LOGGER.debug("stop outside of a gradient ignored")

    # ===========================================================================
    #   containers
    # ===========================================================================

    def _declare_bounds(self, props: Properties) -> None:
        """Set the declared bounds from a rect inside the bounds group."""
        x, y = self._length(props, "x"), self._length(props, "y")
        width = self._length(props, "width", None)
        height = self._length(props, "height", None)
        if x is None or y is None or width is None or height is None:
            return
        self.bounds.declare(Rect.from_xywh(x, y, width, height))

    def _start_svg(
        self, event: ElementStart, frame: GroupFrame, props: Properties
    ) -> GroupFrame:
        """Set the recording size from the first svg element, then act as a group.

        Width and height are rounded up to whole units. If either is missing or
        zero, the rounded viewBox width and height are used instead.
        """
        if not (self.width and self.height):
            width = math.ceil(self._length(props, "width") or 0)
            height = math.ceil(self._length(props, "height") or 0)
            view_box = event.attrib.get("viewBox")
            if (width == 0 or height == 0) and view_box:
                with suppress(ValueError):
                    _, _, vb_width, vb_height = parse_number_list(view_box)[:4]
                    if vb_width > 0 and vb_height > 0:
                        width, height = round(vb_width), round(vb_height)
            self.width, self.height = width, height
            self.units.viewport_width = width
            self.units.viewport_height = height
        return self._start_group(event, frame, props)

    def _start_group(
        self, event: ElementStart, frame: GroupFrame, props: Properties
    ) -> GroupFrame:
        """Push the group's transform, opacity, fill, and stroke for its children."""
        group_id = event.attrib.get("id")
        if event.tag == "g" and group_id and group_id.lower() == BOUNDS_GROUP_ID:
            self._bounds_mode = True
            frame = dataclasses.replace(frame, opened_bounds=True)
        frame = self._push_transform(frame, props)
        opacity = props.get_float("opacity")
        group_opacity = frame.group_opacity
        if opacity is not None:
            group_opacity *= opacity
        fill = self.resolver.resolve_fill(
            props,
            frame.fill,
            fill_set=frame.fill_set,
            group_opacity=group_opacity,
            is_group=True,
        )
        stroke = self.resolver.resolve_stroke(
            props,
            frame.stroke,
            stroke_set=frame.stroke_set,
            group_opacity=group_opacity,
            is_group=True,
        )
        return dataclasses.replace(
            frame,
            fill=fill.paint,
            stroke=stroke.paint,
            fill_set=frame.fill_set or props.has("fill"),
            stroke_set=frame.stroke_set or props.has("stroke"),
            group_opacity=group_opacity,
        )

    def _start_use(
        self, event: ElementStart, frame: GroupFrame, props: Properties
    ) -> GroupFrame:
        """Expand a `use` element by walking a clone of the element it references.

        A missing id, or an id that is already being expanded (a cycle), warns and
        draws nothing.
        """
        attrib = event.attrib
        href = attrib.get("href", "")
        ref_id = href.removeprefix("#")
        target = self._id_index.get(ref_id) if href.startswith("#") else None
        if target is None:
            msg = par(f"""Didn't find an element with id '{ref_id}' for use.""")
            warnings.warn(msg, UnresolvedUseWarning, stacklevel=2)
            return frame
        if ref_id in self._uses_in_progress:
            msg = par(
                f"""Element '{ref_id}' references itself through use elements.
                Not expanding it again."""
            )
            warnings.warn(msg, UnresolvedUseWarning, stacklevel=2)
            return frame

        wrapper = etree.Element("g")
        for key, val in attrib.items():
            if key not in _USE_ONLY_ATTRIBUTES:
                wrapper.set(key, val)
        transform = attrib.get("transform", "")
        if "x" in attrib or "y" in attrib:
            x = format_number(self._length(props, "x") or 0.0)
            y = format_number(self._length(props, "y") or 0.0)
            transform += f" translate({x},{y})"
        if transform.strip():
            wrapper.set("transform", transform.strip())
        clone = copy.deepcopy(target)
        clone.tail = None
        wrapper.append(clone)

        self._uses_in_progress.add(ref_id)
        try:
            self.walk(iter_events(wrapper))
        finally:
            self._uses_in_progress.discard(ref_id)
        return frame

    # ===========================================================================
    #   shapes
    # ===========================================================================

    def _start_rect(
        self, event: ElementStart, frame: GroupFrame, props: Properties
    ) -> GroupFrame:
        """Draw a rect. If only one of rx and ry is given, the other matches it."""
        del event
        x, y = self._length(props, "x") or 0.0, self._length(props, "y") or 0.0
        width = self._length(props, "width") or 0.0
        height = self._length(props, "height") or 0.0
        if width <= 0 or height <= 0:
            return frame
        rx = self._length(props, "rx", None)
        ry = self._length(props, "ry", None)
        if rx is None:
            rx = ry
        if ry is None:
            ry = rx
        rx, ry = rx or 0.0, ry or 0.0
        frame = self._push_transform(frame, props)
        fill, stroke = self._resolve_paints(frame, props)
        for paint in (fill, stroke):
            if paint is None:
                continue
            if rx <= 0 and ry <= 0:
                op: DrawOp = RectOp(x, y, width, height, paint, frame.matrix)
            else:
                op = RoundRectOp(x, y, width, height, rx, ry, paint, frame.matrix)
            if paint is fill:
                self._add_limits(op.local_bounds(), frame.matrix)
            self._emit(op)
        return frame

    def _start_circle(
        self, event: ElementStart, frame: GroupFrame, props: Properties
    ) -> GroupFrame:
        """Draw a circle. Nothing is drawn without a positive radius."""
        del event
        r = self._length(props, "r", None)
        if r is None or r <= 0:
            return frame
        cx, cy = self._length(props, "cx") or 0.0, self._length(props, "cy") or 0.0
        frame = self._push_transform(frame, props)
        fill, stroke = self._resolve_paints(frame, props)
        if fill is not None:
            op = CircleOp(cx, cy, r, fill, frame.matrix)
            self._add_limits(op.local_bounds(), frame.matrix)
            self._emit(op)
        if stroke is not None:
            self._emit(CircleOp(cx, cy, r, stroke, frame.matrix))
        return frame

    def _start_ellipse(
        self, event: ElementStart, frame: GroupFrame, props: Properties
    ) -> GroupFrame:
        """Draw an ellipse. Nothing is drawn without two positive radii."""
        del event
        rx = self._length(props, "rx", None)
        ry = self._length(props, "ry", None)
        if rx is None or ry is None or rx <= 0 or ry <= 0:
            return frame
        cx, cy = self._length(props, "cx") or 0.0, self._length(props, "cy") or 0.0
        frame = self._push_transform(frame, props)
        fill, stroke = self._resolve_paints(frame, props)
        if fill is not None:
            op = EllipseOp(cx, cy, rx, ry, fill, frame.matrix)
            self._add_limits(op.local_bounds(), frame.matrix)
            self._emit(op)
        if stroke is not None:
            self._emit(EllipseOp(cx, cy, rx, ry, stroke, frame.matrix))
        return frame

    def _start_line(
        self, event: ElementStart, frame: GroupFrame, props: Properties
    ) -> GroupFrame:
        """Draw a line. Lines are only ever stroked. A stroked line grows the limits."""
        del event
        x1, y1 = self._length(props, "x1") or 0.0, self._length(props, "y1") or 0.0
        x2, y2 = self._length(props, "x2") or 0.0, self._length(props, "y2") or 0.0
        frame = self._push_transform(frame, props)
        _, stroke = self._resolve_paints(frame, props)
        if stroke is not None:
            op = LineOp(x1, y1, x2, y2, stroke, frame.matrix)
            self._add_limits(op.local_bounds(), frame.matrix)
            self._emit(op)
        return frame

    def _draw_geometry(
        self, geometry: PathGeometry, frame: GroupFrame, props: Properties
    ) -> GroupFrame:
        """Draw a path, polygon, or polyline."""
        frame = self._push_transform(frame, props)
        fill, stroke = self._resolve_paints(frame, props)
        if fill is not None:
            self.bounds.add_rect(geometry.bounds(frame.matrix))
            self._emit(PathOp(geometry, fill, frame.matrix))
        if stroke is not None:
            self._emit(PathOp(geometry, stroke, frame.matrix))
        return frame

    def _start_poly(
        self, event: ElementStart, frame: GroupFrame, props: Properties
    ) -> GroupFrame:
        """Draw a polygon (closed) or polyline (open). Needs at least one point."""
        points = parse_number_list(event.attrib.get("points", ""))
        if len(points) < 2:
            return frame
        geometry = new_polyline(points, close=event.tag == "polygon")
        return self._draw_geometry(geometry, frame, props)

    def _start_path(
        self, event: ElementStart, frame: GroupFrame, props: Properties
    ) -> GroupFrame:
        """Draw a path. Empty path data draws nothing."""
        geometry = parse_path(event.attrib.get("d"))
        if not geometry:
            return frame
        return self._draw_geometry(geometry, frame, props)

    def _start_image(
        self, event: ElementStart, frame: GroupFrame, props: Properties
    ) -> GroupFrame:
        """Draw an image embedded as a base64 data uri. Linked images are skipped."""
        pixels = decode_image(event.attrib.get("href"), self.config.image_decoder)
        if pixels is None:
            _LOGGER.debug("image skipped: href is not a decodable data uri")
            return frame
        x, y = self._length(props, "x") or 0.0, self._length(props, "y") or 0.0
        width = self._length(props, "width") or 0.0
        height = self._length(props, "height") or 0.0
        frame = self._push_transform(frame, props)
        op = ImageOp(x, y, width, height, pixels, frame.matrix)
        self._add_limits(op.local_bounds(), frame.matrix)
        self._emit(op)
        return frame

    # ===========================================================================
    #   text
    # ===========================================================================

    def _start_text(
        self, event: ElementStart, frame: GroupFrame, props: Properties
    ) -> GroupFrame:
        """Open a text buffer. Characters are collected until the element ends."""
        del event
        frame = self._push_transform(frame, props)
        fill, stroke = self._resolve_paints(frame, props)
        x, y = self._length(props, "x") or 0.0, self._length(props, "y") or 0.0
        valign = props.get_string("alignment-baseline")
        self._text = _TextBuffer(x, y, fill, stroke, valign)
        return dataclasses.replace(frame, opened_text=True)

    def _end_text(self, frame: GroupFrame) -> None:
        """Emit fill then stroke for the collected text."""
        buffer, self._text = self._text, None
        if buffer is None or buffer.paint is None or not buffer.display_text:
            return
        text = buffer.display_text
        x, y = buffer.x, buffer.baseline_y
        if buffer.fill is not None:
            align = buffer.fill.text_align
            bounds = self.metrics.text_bounds(text, buffer.fill)
            shift = {TextAlign.LEFT: 0, TextAlign.CENTER: 0.5, TextAlign.RIGHT: 1}
            dx = x - bounds.width * shift[align]
            left, right = bounds.left + dx, bounds.right + dx
            top, bottom = bounds.top + y, bounds.bottom + y
            self._add_limits(Rect(left, top, right, bottom), frame.matrix)
            self._emit(TextOp(x, y, text, buffer.fill, align, frame.matrix))
        if buffer.stroke is not None:
            align = buffer.stroke.text_align
            self._emit(TextOp(x, y, text, buffer.stroke, align, frame.matrix))
