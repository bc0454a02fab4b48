"""Test walking svg events into drawing operations.

:author: Shay Hill
:created: 2025-11-09
"""

import itertools
import math
import warnings

import pytest
from conftest import PNG_BASE64, wrap_svg
from lxml import etree

from svg_picture.bounding_boxes import Rect
from svg_picture.display_list import (
    CircleOp,
    EllipseOp,
    ImageOp,
    LineOp,
    PathOp,
    RectOp,
    RoundRectOp,
    TextOp,
)
from svg_picture.exceptions import SvgParseWarning, UnresolvedUseWarning
from svg_picture.main import ParserConfig, parse_svg
from svg_picture.paint import PaintStyle, TextAlign
from svg_picture.walker import DocumentWalker
from svg_picture.xml_events import Characters, ElementEnd, ElementStart, iter_events

_RED = 0xFFFF0000
_BLACK = 0xFF000000


def _ops(body: str, config: ParserConfig | None = None) -> list:
    return list(parse_svg(wrap_svg(body), config=config).draw_ops)


def _new_walker(svg: str) -> DocumentWalker:
    root = etree.fromstring(svg)
    walker = DocumentWalker(root, ParserConfig())
    walker.walk(iter_events(root))
    return walker


class TestStack:
    def test_balanced_after_walk(self):
        walker = _new_walker(
            wrap_svg('<g><g style="display:none"><rect/></g><defs><g/></defs></g>')
        )
        assert walker.depth == 0

    def test_mismatched_end_tags(self):
        """End events pop whatever frame is on top, whatever they are called."""
        walker = DocumentWalker(etree.fromstring("<svg/>"), ParserConfig())
        walker.walk(
            [
                ElementStart("g", {"fill": "red"}),
                ElementStart("rect", {"width": "1", "height": "1"}),
                ElementEnd("g"),
                ElementEnd("g"),
                ElementEnd("g"),
                ElementStart("rect", {"width": "1", "height": "1"}),
                ElementEnd("rect"),
            ]
        )
        assert walker.depth == 0
        first, second = walker.draw_ops
        assert isinstance(first, RectOp)
        assert first.paint.color == _RED
        assert isinstance(second, RectOp)
        assert second.paint.color == _BLACK

    def test_frames_restored(self):
        """A group's fill does not leak to its siblings."""
        ops = _ops(
            """
            <g fill="red"><rect width="1" height="1"/></g>
            <rect width="1" height="1"/>
            """
        )
        assert [x.paint.color for x in ops] == [_RED, _BLACK]

    def test_depth_restored_after_hidden_subtree(self):
        """A display:none subtree leaves the stack as deep as it found it."""
        root = etree.fromstring(
            wrap_svg(
                """
                <g>
                  <g style="display:none"><rect/><g display="none"><rect/></g></g>
                  <rect width="1" height="1"/>
                </g>
                """
            )
        )
        walker = DocumentWalker(root, ParserConfig())
        events = list(iter_events(root))
        start = next(
            i
            for i, x in enumerate(events)
            if isinstance(x, ElementStart) and x.attrib.get("style") == "display:none"
        )
        walker.walk(events[:start])
        depth_before = walker.depth
        end = start
        open_count = 0
        for end, event in enumerate(events[start:], start):
            walker.walk([event])
            if isinstance(event, ElementStart):
                open_count += 1
            elif isinstance(event, ElementEnd):
                open_count -= 1
            if not open_count:
                break
        assert walker.depth == depth_before
        assert not walker.draw_ops
        walker.walk(events[end + 1 :])
        assert walker.depth == 0
        assert len(walker.draw_ops) == 1


class TestPaintInheritance:
    def test_group_fill(self):
        ops = _ops(
            """
            <g fill="red">
              <rect width="1" height="1"/>
              <rect width="1" height="1" fill="none"/>
            </g>
            <g fill="none">
              <rect width="1" height="1"/>
            </g>
            """
        )
        assert len(ops) == 2
        assert ops[0].paint.color == _RED
        assert ops[1].paint.is_transparent

    def test_nested_none_group(self):
        """A fill="none" group inside a red group does not hide its red siblings."""
        ops = _ops(
            """
            <g fill="red">
              <g fill="none"><rect width="1" height="1"/></g>
              <g><rect x="2" width="1" height="1"/></g>
            </g>
            """
        )
        (op,) = ops
        assert op.x == 2
        assert op.paint.color == _RED

    def test_group_opacity(self):
        (op,) = _ops('<g opacity="0.5"><rect width="1" height="1" fill="red"/></g>')
        assert op.paint.alpha == 128

    def test_nested_group_opacity(self):
        (op,) = _ops(
            """
            <g opacity="0.5"><g opacity="0.5">
              <rect width="1" height="1" fill="red"/>
            </g></g>
            """
        )
        assert op.paint.alpha == 64

    def test_override_color(self):
        config = ParserConfig(override_color=0x00FF00)
        ops = _ops(
            """
            <rect width="1" height="1"/>
            <rect width="1" height="1" fill="red"/>
            """,
            config,
        )
        assert [x.paint.color for x in ops] == [0xFF00FF00, _RED]

    def test_style_attribute(self):
        (op,) = _ops('<rect width="1" height="1" fill="red" style="fill:#0000ff"/>')
        assert op.paint.color == 0xFF0000FF

    def test_fill_then_stroke(self):
        ops = _ops('<circle r="5" fill="red" stroke="blue"/>')
        assert [x.paint.style for x in ops] == [PaintStyle.FILL, PaintStyle.STROKE]


class TestHidden:
    def test_display_none_subtree(self):
        ops = _ops(
            """
            <g style="display:none">
              <rect width="1" height="1"/>
              <g><rect width="2" height="2"/></g>
            </g>
            <rect width="3" height="3"/>
            """
        )
        assert len(ops) == 1
        assert ops[0].width == 3

    def test_display_none_leaf(self):
        assert not _ops('<rect width="1" height="1" display="none"/>')

    def test_defs_not_drawn(self):
        assert not _ops(
            '<defs><rect width="1" height="1"/><g><circle r="1"/></g></defs>'
        )

    def test_unrecognized_children_drawn(self):
        """An unknown element draws nothing, but its children are still read."""
        ops = _ops('<metadata>about</metadata><foo><rect width="1" height="1"/></foo>')
        assert len(ops) == 1


class TestBounds:
    def test_declared_bounds(self):
        document = parse_svg(
            wrap_svg(
                """
                <g id="Bounds"><rect x="1" y="2" width="3" height="4"/></g>
                <rect x="10" y="10" width="5" height="5"/>
                """
            )
        )
        assert len(document) == 1
        assert document.declared_bounds == Rect(1, 2, 4, 6)
        assert document.computed_bounds == Rect(10, 10, 15, 15)
        assert document.bounds == document.declared_bounds

    def test_hidden_bounds_group(self):
        """A hidden bounds group declares nothing."""
        document = parse_svg(
            wrap_svg(
                '<g id="bounds" style="display:none">'
                + '<rect width="10" height="10"/></g>'
            )
        )
        assert document.declared_bounds is None

    def test_limits_grow_in_any_order(self):
        """Each shape only grows the limits, so sibling order does not matter."""
        shapes = (
            '<rect x="5" y="5" width="2" height="2"/>',
            '<circle cx="-3" cy="1" r="1"/>',
            '<path d="M0 0 L20 4 L3 9 Z"/>',
            '<line x1="0" y1="-8" x2="1" y2="1" stroke="red"/>',
        )
        want = parse_svg(wrap_svg("".join(shapes))).computed_bounds
        assert want is not None
        for order in itertools.permutations(shapes):
            assert parse_svg(wrap_svg("".join(order))).computed_bounds == want
        previous = None
        for i in range(1, len(shapes) + 1):
            bounds = parse_svg(wrap_svg("".join(shapes[:i]))).computed_bounds
            assert bounds is not None
            assert previous is None or bounds.contains(previous)
            previous = bounds

    def test_bounds_mode_ends(self):
        document = parse_svg(
            wrap_svg('<g id="bounds"><circle r="3"/></g><circle r="1"/>')
        )
        assert len(document) == 1
        assert document.declared_bounds is None
        assert document.bounds == Rect(-1, -1, 1, 1)

    def test_transformed_limits(self):
        document = parse_svg(
            wrap_svg(
                '<g transform="translate(10,20)"><rect width="5" height="5"/></g>'
            )
        )
        (op,) = document.draw_ops
        assert op.matrix == (1, 0, 0, 1, 10, 20)
        assert document.computed_bounds == Rect(10, 20, 15, 25)

    def test_element_transform(self):
        """A leaf's own transform applies inside its group transform."""
        document = parse_svg(
            wrap_svg(
                """
                <g transform="translate(10,0)">
                  <rect width="5" height="5" transform="scale(2)"/>
                </g>
                """
            )
        )
        (op,) = document.draw_ops
        assert op.matrix == (2, 0, 0, 2, 10, 0)
        assert document.computed_bounds == Rect(10, 0, 20, 10)

    def test_explicit_none_grows_limits(self):
        """An explicit fill of "none" counts toward the limits. Inherited does not."""
        document = parse_svg(wrap_svg('<circle r="5" fill="none"/>'))
        assert document.computed_bounds == Rect(-5, -5, 5, 5)
        document = parse_svg(wrap_svg('<g fill="none"><circle r="5"/></g>'))
        assert document.computed_bounds is None

    def test_stroke_does_not_grow_limits(self):
        document = parse_svg(
            wrap_svg(
                """
                <rect width="5" height="5"/>
                <g fill="none"><rect x="50" width="5" height="5" stroke="red"/></g>
                """
            )
        )
        assert document.computed_bounds == Rect(0, 0, 5, 5)


class TestSvgElement:
    def test_size_rounded_up(self):
        document = parse_svg(
            '<svg xmlns="http://www.w3.org/2000/svg" width="10.2" height="20"/>'
        )
        assert (document.width, document.height) == (11, 20)

    def test_view_box_size(self):
        document = parse_svg(
            '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24.4 11.6"/>'
        )
        assert (document.width, document.height) == (24, 12)

    def test_percent_of_viewport(self):
        svg = wrap_svg('<rect width="50%" height="25%"/>', width=200, height=40)
        (op,) = parse_svg(svg).draw_ops
        assert (op.width, op.height) == (100, 10)

    def test_svg_acts_as_group(self):
        svg = (
            '<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10" '
            + 'fill="red" transform="translate(1 1)"><rect width="1" height="1"/></svg>'
        )
        (op,) = parse_svg(svg).draw_ops
        assert op.paint.color == _RED
        assert op.matrix == (1, 0, 0, 1, 1, 1)


class TestShapes:
    def test_rect(self):
        (op,) = _ops('<rect x="1" y="2" width="3" height="4"/>')
        assert op == RectOp(1, 2, 3, 4, op.paint)

    def test_rect_one_radius(self):
        """A rect with only rx uses it for ry too."""
        (op,) = _ops('<rect width="3" height="4" rx="1"/>')
        assert isinstance(op, RoundRectOp)
        assert (op.rx, op.ry) == (1, 1)
        (op,) = _ops('<rect width="3" height="4" ry="2"/>')
        assert isinstance(op, RoundRectOp)
        assert (op.rx, op.ry) == (2, 2)

    def test_rect_zero_radius(self):
        (op,) = _ops('<rect width="3" height="4" rx="0"/>')
        assert isinstance(op, RectOp)

    def test_empty_rect(self):
        assert not _ops('<rect width="0" height="4"/><rect width="3"/>')

    def test_circle(self):
        (op,) = _ops('<circle cx="5" r="2"/>')
        assert op == CircleOp(5, 0, 2, op.paint)
        assert not _ops('<circle cx="5"/><circle r="-1"/>')

    def test_ellipse(self):
        (op,) = _ops('<ellipse cx="5" cy="6" rx="2" ry="3"/>')
        assert op == EllipseOp(5, 6, 2, 3, op.paint)
        assert op.local_bounds() == Rect(3, 3, 7, 9)
        assert not _ops('<ellipse rx="2"/>')

    def test_line(self):
        """Lines are stroked, never filled."""
        assert not _ops('<line x1="0" y1="0" x2="10" y2="10"/>')
        document = parse_svg(
            wrap_svg('<line x1="0" y1="0" x2="10" y2="5" stroke="red"/>')
        )
        (op,) = document.draw_ops
        assert isinstance(op, LineOp)
        assert op.paint.style is PaintStyle.STROKE
        assert document.computed_bounds == Rect(0, 0, 10, 5)

    def test_polygon(self):
        (op,) = _ops('<polygon points="0,0 10,0 10,10"/>')
        assert isinstance(op, PathOp)
        assert op.geometry.is_closed

    def test_polyline(self):
        (op,) = _ops('<polyline points="0,0 10,0 10,10"/>')
        assert isinstance(op, PathOp)
        assert not op.geometry.is_closed

    def test_path(self):
        document = parse_svg(wrap_svg('<path d="M0 0 A50 50 0 0 1 100 0"/>'))
        (op,) = document.draw_ops
        assert isinstance(op, PathOp)
        bounds = document.computed_bounds
        assert bounds is not None
        assert math.isclose(bounds.top, -50)

    def test_empty_path(self):
        assert not _ops('<path d=""/><path/>')


class TestUse:
    def test_use(self):
        ops = _ops(
            """
            <defs><circle id="dot" r="2" fill="red"/></defs>
            <use xlink:href="#dot" x="10" y="20" transform="scale(2)"/>
            """
        )
        (op,) = ops
        assert isinstance(op, CircleOp)
        assert op.paint.color == _RED
        assert op.matrix == (2, 0, 0, 2, 20, 40)

    def test_use_attributes_cascade(self):
        """Attributes of the use element apply to the referenced element."""
        (op,) = _ops(
            '<defs><rect id="r" width="1" height="1"/></defs>'
            + '<use href="#r" fill="red"/>'
        )
        assert op.paint.color == _RED

    def test_use_twice(self):
        ops = _ops(
            """
            <rect id="r" width="1" height="1"/>
            <use href="#r" x="5"/>
            <use href="#r" x="10"/>
            """
        )
        assert [x.matrix[4] for x in ops] == [0, 5, 10]

    def test_use_position_with_units(self):
        """A use position with units is converted, not cut off at the unit."""
        with warnings.catch_warnings():
            warnings.simplefilter("error", SvgParseWarning)
            ops = _ops(
                """
                <rect id="r" width="1" height="1"/>
                <use href="#r" x="10px" y="20px"/>
                <use href="#r" x="1in"/>
                """
            )
        assert [x.matrix[4:] for x in ops] == [(0, 0), (10, 20), (72, 0)]

    def test_missing(self):
        with pytest.warns(UnresolvedUseWarning):
            ops = _ops('<use href="#nothing"/>')
        assert not ops

    def test_cycle(self):
        with pytest.warns(UnresolvedUseWarning):
            walker = _new_walker(
                wrap_svg('<g id="a"><rect width="1" height="1"/><use href="#a"/></g>')
            )
        assert walker.depth == 0
        assert len(walker.draw_ops) == 2

    def test_use_of_hidden_element(self):
        assert not _ops(
            '<rect id="r" width="1" height="1" display="none"/><use href="#r"/>'
        )


class TestText:
    def test_text(self):
        document = parse_svg(
            wrap_svg('<text x="10" y="20" font-size="10">Hello   world</text>')
        )
        (op,) = document.draw_ops
        assert op == TextOp(10, 20, "Hello world", op.paint, TextAlign.LEFT)
        assert op.paint.text_size == 10
        assert document.computed_bounds == Rect(10, 12.5, 76, 22.5)

    def test_text_anchor(self):
        document = parse_svg(
            wrap_svg('<text x="100" font-size="10" text-anchor="end">ab</text>')
        )
        (op,) = document.draw_ops
        assert op.align is TextAlign.RIGHT
        assert document.computed_bounds == Rect(88, -7.5, 100, 2.5)

    def test_fill_then_stroke(self):
        ops = _ops('<text stroke="blue">a</text>')
        assert [x.paint.style for x in ops] == [PaintStyle.FILL, PaintStyle.STROKE]

    def test_baseline_middle(self):
        (op,) = _ops(
            '<text y="20" font-size="10" alignment-baseline="middle">abc</text>'
        )
        assert op.y == 22.5

    def test_baseline_top(self):
        (op,) = _ops('<text y="20" font-size="10" alignment-baseline="top">abc</text>')
        assert op.y == 30

    def test_tspan_text_collected(self):
        (op,) = _ops("<text>a<tspan>b</tspan>c</text>")
        assert op.text == "abc"

    def test_hidden_characters(self):
        (op,) = _ops('<text>a<tspan style="display:none">b</tspan>c</text>')
        assert op.text == "ac"

    def test_empty_text(self):
        assert not _ops("<text>   </text>")

    def test_unpainted_text(self):
        assert not _ops('<g fill="none"><text>a</text></g>')


class TestImage:
    def test_custom_decoder(self):
        config = ParserConfig(image_decoder=lambda data: (3, 4))
        document = parse_svg(
            wrap_svg(
                '<image x="1" y="1" width="6" height="8" '
                + 'xlink:href="data:image/png;base64,AAEC"/>'
            ),
            config=config,
        )
        (op,) = document.draw_ops
        assert isinstance(op, ImageOp)
        assert (op.pixels.width, op.pixels.height) == (3, 4)
        assert op.pixels.data == b"\x00\x01\x02"
        assert document.computed_bounds == Rect(1, 1, 7, 9)

    def test_pillow_decoder(self):
        (op,) = _ops(
            '<image width="6" height="8" '
            + f'href="data:image/png;base64,{PNG_BASE64}"/>'
        )
        assert isinstance(op, ImageOp)
        assert (op.pixels.width, op.pixels.height) == (1, 1)
        assert op.pixels.mime == "image/png"

    def test_linked_image_skipped(self):
        assert not _ops('<image width="6" height="8" href="picture.png"/>')

    def test_undecodable_skipped(self):
        assert not _ops(
            '<image width="6" height="8" href="data:image/png;base64,AAEC"/>'
        )


class TestEvents:
    def test_iter_events(self):
        root = etree.fromstring(
            '<text xmlns="http://www.w3.org/2000/svg" x="1">ab<tspan>c</tspan>d'
            + "<!-- note -->e</text>"
        )
        assert list(iter_events(root)) == [
            ElementStart("text", {"x": "1"}),
            Characters("ab"),
            ElementStart("tspan", {}),
            Characters("c"),
            ElementEnd("tspan"),
            Characters("d"),
            Characters("e"),
            ElementEnd("text"),
        ]

    def test_namespaced_attributes(self):
        root = etree.fromstring(
            '<use xmlns:xlink="http://www.w3.org/1999/xlink" xlink:href="#a"/>'
        )
        start = next(iter(iter_events(root)))
        assert start == ElementStart("use", {"href": "#a"})
