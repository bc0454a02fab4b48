"""Import functions into the package namespace.

:author: Shay Hill
:created: 2025-11-03
"""

from svg_picture.bounding_boxes.type_rect import Rect
from svg_picture.cache import DocumentCache
from svg_picture.canvas import Canvas, RecordingCanvas, SvgCanvas
from svg_picture.display_list import (
    CircleOp,
    Document,
    DrawOp,
    EllipseOp,
    ImageOp,
    LineOp,
    PathOp,
    RectOp,
    RoundRectOp,
    TextOp,
)
from svg_picture.exceptions import (
    InvalidPathCommandWarning,
    InvalidTransformWarning,
    MalformedNumberError,
    SvgParseError,
    SvgParseWarning,
    UnresolvedColorWarning,
    UnresolvedGradientWarning,
    UnresolvedUseWarning,
)
from svg_picture.font_tools.text_metrics import (
    EstimatedTextMetrics,
    FontToolsTextMetrics,
    TextMetrics,
)
from svg_picture.gradients import LinearShader, RadialShader, Shader
from svg_picture.image_ops import ImagePixels, decode_image
from svg_picture.main import ParserConfig, parse_svg, parse_svg_file, write_svg
from svg_picture.nsmap import NSMAP, new_qname
from svg_picture.number_lexer import parse_number_list, parse_numbers
from svg_picture.paint import (
    DashPattern,
    Paint,
    PaintStyle,
    StrokeCap,
    StrokeJoin,
    TextAlign,
)
from svg_picture.path_data import PathGeometry, parse_path
from svg_picture.string_conversion import format_attr_dict, format_number
from svg_picture.styles import parse_color
from svg_picture.transformations import (
    IDENTITY,
    Matrix,
    mat_apply,
    mat_dot,
    parse_transform,
)
from svg_picture.unit_conversion import DEFAULT_DPI, Unit, UnitConverter

__all__ = [
    "DEFAULT_DPI",
    "IDENTITY",
    "NSMAP",
    "Canvas",
    "CircleOp",
    "DashPattern",
    "Document",
    "DocumentCache",
    "DrawOp",
    "EllipseOp",
    "EstimatedTextMetrics",
    "FontToolsTextMetrics",
    "ImageOp",
    "ImagePixels",
    "InvalidPathCommandWarning",
    "InvalidTransformWarning",
    "LineOp",
    "LinearShader",
    "MalformedNumberError",
    "Matrix",
    "Paint",
    "PaintStyle",
    "ParserConfig",
    "PathGeometry",
    "PathOp",
    "RadialShader",
    "RecordingCanvas",
    "Rect",
    "RectOp",
    "RoundRectOp",
    "Shader",
    "StrokeCap",
    "StrokeJoin",
    "SvgCanvas",
    "SvgParseError",
    "SvgParseWarning",
    "TextAlign",
    "TextMetrics",
    "TextOp",
    "Unit",
    "UnitConverter",
    "UnresolvedColorWarning",
    "UnresolvedGradientWarning",
    "UnresolvedUseWarning",
    "decode_image",
    "format_attr_dict",
    "format_number",
    "mat_apply",
    "mat_dot",
    "new_qname",
    "parse_color",
    "parse_number_list",
    "parse_numbers",
    "parse_path",
    "parse_svg",
    "parse_svg_file",
    "parse_transform",
    "write_svg",
]
