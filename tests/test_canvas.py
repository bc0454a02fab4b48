"""Test replaying documents onto canvases.

:author: Shay Hill
:created: 2025-11-08
"""

import pytest
from conftest import TEST_RESOURCES, wrap_svg
from lxml import etree

from svg_picture.canvas import RecordingCanvas, SvgCanvas
from svg_picture.display_list import CircleOp, Document, RectOp
from svg_picture.main import parse_svg, parse_svg_file, write_svg
from svg_picture.nsmap import NSMAP
from svg_picture.paint import new_fill_paint

_SVG = f"{{{NSMAP[None]}}}"


@pytest.fixture
def icon() -> Document:
    return parse_svg_file(TEST_RESOURCES / "icon.svg")


class TestRecordingCanvas:
    def test_replay_order(self, icon: Document):
        """One recording scope around one call per op, in paint order."""
        canvas = RecordingCanvas()
        icon.replay(canvas)
        assert canvas.calls[0] == ("begin_recording", (48, 48))
        assert canvas.calls[-1] == ("end_recording", None)
        assert canvas.ops == list(icon.draw_ops)
        assert [x for x, _ in canvas.calls[1:-1]] == [
            "draw_round_rect",
            "draw_path",
            "draw_path",
            "draw_circle",
            "draw_circle",
        ]

    def test_empty_document(self):
        canvas = RecordingCanvas()
        Document(()).replay(canvas)
        assert canvas.calls == [("begin_recording", (0, 0)), ("end_recording", None)]


class TestSvgCanvas:
    def test_root_before_recording(self):
        with pytest.raises(ValueError):
            _ = SvgCanvas().root

    def test_root(self):
        canvas = SvgCanvas()
        canvas.begin_recording(10, 20)
        canvas.end_recording()
        root = canvas.root
        assert root.tag == f"{_SVG}svg"
        assert root.get("viewBox") == "0 0 10 20"
        assert len(root) == 0

    def test_fill(self):
        document = parse_svg(wrap_svg('<rect x="1" width="2" height="3" fill="red"/>'))
        (rect,) = document.create_svg()
        assert rect.tag == "rect"
        assert rect.get("fill") == "#ff0000"
        assert rect.get("stroke") == "none"
        assert rect.get("fill-opacity") is None
        assert rect.get("transform") is None

    def test_stroke(self):
        document = parse_svg(
            wrap_svg(
                '<line x2="10" stroke="blue" stroke-opacity="0.5" stroke-width="2" '
                + 'stroke-linecap="round" stroke-dasharray="4 2"/>'
            )
        )
        (line,) = document.create_svg()
        assert line.get("fill") == "none"
        assert line.get("stroke") == "#0000ff"
        assert line.get("stroke-opacity") == ".501961"
        assert line.get("stroke-width") == "2"
        assert line.get("stroke-linecap") == "round"
        assert line.get("stroke-dasharray") == "4 2"

    def test_transform(self):
        op = CircleOp(0, 0, 1, new_fill_paint(), (2, 0, 0, 2, 5, 5))
        (circle,) = Document((op,), 10, 10).create_svg()
        assert circle.get("transform") == "matrix(2 0 0 2 5 5)"

    def test_gradient_written_once(self):
        document = parse_svg(
            wrap_svg(
                """
                <linearGradient id="g" x2="10">
                  <stop offset="0" stop-color="red"/>
                  <stop offset="1" stop-color="blue" stop-opacity="0"/>
                </linearGradient>
                <rect width="10" height="10" fill="url(#g)"/>
                <circle r="5" fill="url(#g)"/>
                """
            )
        )
        root = document.create_svg()
        defs, rect, circle = root
        assert defs.tag == "defs"
        (gradient,) = defs
        assert gradient.tag == "linearGradient"
        assert gradient.get("x2") == "10"
        assert gradient.get("gradientUnits") == "userSpaceOnUse"
        assert [x.get("stop-opacity") for x in gradient] == [None, "0"]
        assert rect.get("fill") == circle.get("fill") == "url(#shader0)"

    def test_text(self):
        document = parse_svg(
            wrap_svg('<text x="5" y="6" font-size="8" text-anchor="middle">hi</text>')
        )
        (text,) = document.create_svg()
        assert text.text == "hi"
        assert text.get("font-size") == "8"
        assert text.get("text-anchor") == "middle"

    def test_write_and_read_back(self, icon: Document, tmp_path):
        """The written svg parses back to the same geometry."""
        svg = tmp_path / "icon.svg"
        _ = write_svg(svg, icon.create_svg())
        reread = parse_svg_file(svg)
        assert (reread.width, reread.height) == (48, 48)
        filled = [x for x in reread.draw_ops if not x.paint.is_transparent]
        assert len(filled) == len(icon.draw_ops)
        assert reread.computed_bounds == icon.computed_bounds

    def test_write_to_file_object(self, tmp_path):
        document = Document((RectOp(0, 0, 1, 1, new_fill_paint()),), 1, 1)
        with (tmp_path / "rect.svg").open("wb") as svg_file:
            _ = write_svg(svg_file, document.create_svg(), xml_declaration=True)
        root = etree.parse(str(tmp_path / "rect.svg")).getroot()
        assert root.tag == f"{_SVG}svg"
