"""Test functions in string_conversion.py.

:author: Shay Hill
:created: 2023-09-23
"""

# pyright: reportPrivateUsage=false

from lxml import etree

import svg_picture.string_conversion as mod
from svg_picture.nsmap import NSMAP


class TestFormatNuber:
    """Test format_number function."""

    def test_negative_zero(self):
        """Remove "-" from "-0"."""
        assert mod.format_number(-0.0000000001) == "0"

    def test_round_to_int(self):
        """Round to int if no decimal values !- 0."""
        assert mod.format_number(1.0000000001) == "1"


class TestFormatNumbers:
    """Test format_numbers function."""

    def test_empty(self):
        """Return empty list."""
        assert mod.format_numbers([]) == []

    def test_explicit(self):
        """Return list of formatted strings."""
        assert mod.format_numbers([1, 2, 3]) == ["1", "2", "3"]

    def test_svg_floats(self):
        assert mod.svg_floats((0, 0, 10, 20)) == "0 0 10 20"

    def test_svg_matrix(self):
        assert mod.svg_matrix((1, 0, 0, 1, 5, 6)) == "matrix(1 0 0 1 5 6)"


class TestFormatAttrDict:
    """Test format_attr_dict function."""

    def test_float(self):
        """Return string of float."""
        assert mod.format_attr_dict(x=1.0) == {"x": "1"}

    def test_exponential_float(self):
        """Return string of float."""
        assert mod.format_attr_dict(x=1.0e-10) == {"x": "0"}

    def test_trailing_underscore(self):
        """Remove trailing underscore from key."""
        assert mod.format_attr_dict(x_=1) == {"x": "1"}

    def test_replace_underscore(self):
        """Replace underscore with hyphen."""
        assert mod.format_attr_dict(x_y=1) == {"x-y": "1"}

    def test_drop_none(self):
        """Drop attributes with None values."""
        assert mod.format_attr_dict(x=1, y=None) == {"x": "1"}

    def test_namespace(self):
        """Expand a namespace abbreviation."""
        attributes = mod.format_attr_dict(**{"xlink:href": "#a"})
        assert attributes == {f"{{{NSMAP['xlink']}}}href": "#a"}


class TestSetAttributes:
    def test_text(self):
        """The text keyword sets element text."""
        elem = etree.Element("text")
        mod.set_attributes(elem, x=1, text="hello")
        assert elem.text == "hello"
        assert dict(elem.attrib) == {"x": "1"}


class TestColors:
    def test_argb_to_hex(self):
        """Drop the alpha channel."""
        assert mod.argb_to_hex(0x80FF8000) == "#ff8000"
        assert mod.argb_to_hex(0xFF000000) == "#000000"

    def test_argb_to_opacity(self):
        assert mod.argb_to_opacity(0xFF000000) == 1
        assert mod.argb_to_opacity(0x00FFFFFF) == 0


class TestSvgTostring:
    def test_pretty_print_default(self):
        root = etree.Element("svg")
        _ = etree.SubElement(root, "g")
        assert mod.svg_tostring(root) == b"<svg>\n  <g/>\n</svg>\n"

    def test_xml_declaration(self):
        """Add the default doctype and encoding with the declaration."""
        svg = mod.svg_tostring(etree.Element("svg"), xml_declaration=True)
        assert svg.startswith(b"<?xml version='1.0' encoding='UTF-8'?>")
        assert b"<!DOCTYPE svg" in svg
