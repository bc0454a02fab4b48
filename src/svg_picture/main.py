r"""Read svg documents into replayable pictures and write pictures back out.

:author: Shay Hill
created: 10/7/2019

The core of the package is one call:

    document = parse_svg(svg_text)

The returned Document holds every drawing operation in paint order, already
resolved (no styles, no gradient ids, no inheritance left to do), plus declared
and computed bounds. Replay it onto a canvas, or write it back to svg for a
look with ``write_svg(path, document.create_svg())``.

Only two problems raise: xml that cannot be read and numbers that cannot be
read. Both raise SvgParseError. Everything else is a warning (see
``svg_picture.exceptions``) and the parse continues.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import IO, TYPE_CHECKING, TypeGuard

from lxml import etree

from svg_picture.exceptions import MalformedNumberError, SvgParseError
from svg_picture.string_conversion import svg_tostring
from svg_picture.unit_conversion import DEFAULT_DPI
from svg_picture.walker import DocumentWalker
from svg_picture.xml_events import iter_events

if TYPE_CHECKING:
    import os

    from lxml.etree import (
        _Element as EtreeElement,  # pyright: ignore[reportPrivateUsage]
    )

    from svg_picture.display_list import Document
    from svg_picture.font_tools.text_metrics import TextMetrics
    from svg_picture.image_ops import ImageDecoder

_LOGGER = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ParserConfig:
    """Options for one parse.

    :param dpi: dots per inch for physical units (in, pt, pc, cm, mm). With the
        default of 72, one point is one user unit.
    :param override_color: optional 0xRRGGBB color used wherever a fill is not set
        by the element or any ancestor (and for strokes that set a width but no
        color).
    :param text_metrics: optional text measurer for `alignment-baseline`. The
        default estimates from font size.
    :param image_decoder: optional replacement for the Pillow image decoder. Takes
        encoded bytes and returns (width, height) or None.
    """

    dpi: float = DEFAULT_DPI
    override_color: int | None = None
    text_metrics: TextMetrics | None = dataclasses.field(default=None, compare=False)
    image_decoder: ImageDecoder | None = dataclasses.field(default=None, compare=False)

    def with_override_color(self, override_color: int | None) -> ParserConfig:
        """Create a copy of the config with a different override color."""
        return dataclasses.replace(self, override_color=override_color)


def _is_io_bytes(obj: object) -> TypeGuard[IO[bytes]]:
    """Determine if an object is file-like.

    :param obj: object
    :return: True if object is file-like
    """
    return hasattr(obj, "read") and hasattr(obj, "write")


def _read_root(source: str | bytes | IO[bytes] | IO[str]) -> EtreeElement:
    """Parse xml from a string, bytes, or an open file.

    :param source: svg text
    :return: root element
    :raise etree.XMLSyntaxError: if the xml cannot be read
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
    if not isinstance(source, (str, bytes)):
        source = source.read()
    if isinstance(source, str):
        source = source.encode("utf-8")
    return etree.fromstring(source, parser=parser)


def parse_svg(
    source: str | bytes | IO[bytes] | IO[str], *, config: ParserConfig | None = None
) -> Document:
    """Read an svg document into a Document.

    :param source: svg text as str or bytes, or an open file
    :param config: optional parser configuration
    :return: Document with drawing operations and bounds
    :raise SvgParseError: if the xml is malformed or a number cannot be read. The
        original error is the `__cause__`.
    :effects: warns with SvgParseWarning subclasses for recoverable problems
    """
    config = config or ParserConfig()
    try:
        root = _read_root(source)
    except etree.XMLSyntaxError as e:
        msg = f"Cannot read svg xml: {e}"
        raise SvgParseError(msg) from e
    walker = DocumentWalker(root, config)
    try:
        walker.walk(iter_events(root))
    except MalformedNumberError as e:
        msg = f"Cannot read svg numbers: {e}"
        raise SvgParseError(msg) from e
    document = walker.to_document()
    _LOGGER.debug(
        "parsed %s draw ops, %s x %s", len(document), document.width, document.height
    )
    return document


def parse_svg_file(
    path: str | os.PathLike[str], *, config: ParserConfig | None = None
) -> Document:
    """Read an svg file into a Document.

    :param path: path to an svg file
    :param config: optional parser configuration
    :return: Document with drawing operations and bounds
    :raise SvgParseError: if the xml is malformed or a number cannot be read
    """
    with Path(path).open("rb") as svg_file:
        return parse_svg(svg_file, config=config)


def write_svg(
    svg: str | Path | IO[bytes],
    root: EtreeElement,
    **tostring_kwargs: str | bool,
) -> str:
    r"""Write an xml element as an svg file.

    :param svg: open binary file object or path to output file (include extension .svg)
    :param root: root node of your svg geometry
    :param tostring_kwargs: keyword arguments to etree.tostring. xml_header=True for
        sensible default values. See below.
    :return: svg filename
    :effects: creates svg file at ``svg``
    :raises TypeError: if ``svg`` is not a Path, str, or binary file object

    It's often useful to write a temporary svg file, so a tempfile.NamedTemporaryFile
    object (or any open binary file object can be passed instead of an svg filename).

    If you pass ``xml_declaration=True`` as a tostring_kwarg, this function will
    attempt to pass the following defaults to ``lxml.etree.tostring``:

    * doctype: str = (
        '<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN"\n'
        '"http://www.w3.org/Graphics/SVG/1.1/DTD/svg11.dtd">'
    )
    * encoding = "UTF-8"

    Always, this function will default to ``pretty_print=True``

    These can be overridden by tostring_kwargs.

    e.g., ``write_svg(..., xml_declaration=True, doctype=None``)
    e.g., ``write_svg(..., xml_declaration=True, encoding='ascii')``
    """
    svg_contents = svg_tostring(root, **tostring_kwargs)

    if _is_io_bytes(svg):
        _ = svg.write(svg_contents)
        return svg.name
    if isinstance(svg, (str, Path)):
        with Path(svg).open("wb") as svg_file:
            _ = svg_file.write(svg_contents)
        return str(svg)
    msg = f"svg must be a path-like object or a file-like object, not {type(svg)}"
    raise TypeError(msg)
