"""Measure single-line text for baseline alignment.

Text elements with `alignment-baseline="middle"` or `"top"` move their baseline
by the height of the text. That needs text bounds. Two measurers are provided:

- `EstimatedTextMetrics` guesses from the font size alone. This is the default,
  because a document seldom names a font file you have.

- `FontToolsTextMetrics` reads glyph outlines and advances from one TrueType or
  OpenType file with fontTools. It ignores `font-family`, so use it when you know
  which font your documents are drawn with.

Bounds are in svg screen coordinates (+y is down) relative to the text origin
on the baseline, so `top` is negative for any glyph above the baseline.

:author: Shay Hill
:created: 2025-05-31
"""

# pyright: reportUnknownMemberType = false
# pyright: reportAttributeAccessIssue = false
# pyright: reportMissingTypeStubs = false

from __future__ import annotations

import functools as ft
import itertools as it
import logging
from contextlib import suppress
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, cast

from fontTools.pens.boundsPen import BoundsPen
from fontTools.ttLib import TTFont

from svg_picture.bounding_boxes.type_rect import Rect

if TYPE_CHECKING:
    import os

    from svg_picture.paint import Paint

logging.getLogger("fontTools").setLevel(logging.ERROR)

# proportions of the font size for the estimate
_EST_ADVANCE = 0.6
_EST_ASCENT = 0.75
_EST_DESCENT = 0.25


class TextMetrics(Protocol):
    """Anything that can measure a line of text in a paint's font size."""

    def text_bounds(self, text: str, paint: Paint) -> Rect:
        """Return the bounds of text drawn at the origin."""
        ...


class EstimatedTextMetrics:
    """Estimate text bounds from font size and character count.

    Every character is `0.6 * size` wide, rises `0.75 * size` above the baseline,
    and drops `0.25 * size` below it.
    """

    def text_bounds(self, text: str, paint: Paint) -> Rect:
        """Return the estimated bounds of text drawn at the origin.

        :param text: one line of text
        :param paint: paint with the text size
        :return: Rect relative to the text origin. Empty text has zero width.
        """
        size = paint.text_size
        width = _EST_ADVANCE * size * len(text)
        return Rect(0, -_EST_ASCENT * size, width, _EST_DESCENT * size)


class FontToolsTextMetrics:
    """Measure text with the glyphs of one font file.

    :param font: path to a ttf or otf file
    :raises FileNotFoundError: if the font file does not exist
    """

    def __init__(self, font: str | os.PathLike[str]) -> None:
        """Open the font with fontTools."""
        self._path = Path(font)
        if not self._path.exists():
            msg = f"Font file '{self._path}' does not exist."
            raise FileNotFoundError(msg)
        self._font = TTFont(self._path)

    @property
    def path(self) -> Path:
        """Return the path to the font file."""
        return self._path

    def close(self) -> None:
        """Close the font file."""
        self._font.close()

    @ft.cached_property
    def units_per_em(self) -> int:
        """Get the units per em for the font.

        :raises ValueError: If the font does not have a 'head' table.
        """
        try:
            return cast("int", self._font["head"].unitsPerEm)
        except (KeyError, AttributeError) as e:
            msg = f"Font '{self._path}' does not have a 'head' table: {e}"
            raise ValueError(msg) from e

    @ft.cached_property
    def _cmap(self) -> dict[int, str]:
        return cast("dict[int, str]", self._font.getBestCmap() or {})

    @ft.cached_property
    def _kern_table(self) -> dict[tuple[str, str], int]:
        """Get the pairs from a legacy 'kern' table. Empty if there is none."""
        with suppress(KeyError, AttributeError):
            kern_tables = cast(
                "list[dict[tuple[str, str], int]]",
                [x.kernTable for x in self._font["kern"].kernTables],
            )
            return dict(x for d in reversed(kern_tables) for x in d.items())
        return {}

    def _glyph_name(self, char: str) -> str:
        """Get the glyph name for a character, ".notdef" if the font lacks it."""
        return self._cmap.get(ord(char), ".notdef")

    def _glyph_bounds(self, glyph_name: str) -> tuple[float, float, float, float]:
        """Return min x, min y, max x, max y of a glyph in font units (+y is up)."""
        glyph_set = self._font.getGlyphSet()
        if glyph_name not in glyph_set:
            return 0, 0, 0, 0
        bounds_pen = BoundsPen(glyph_set)
        _ = glyph_set[glyph_name].draw(bounds_pen)
        pen_bounds = cast("None | tuple[float, float, float, float]", bounds_pen.bounds)
        if pen_bounds is None:
            return 0, 0, 0, 0
        return pen_bounds

    def text_bounds(self, text: str, paint: Paint) -> Rect:
        """Return the bounds of text drawn at the origin.

        :param text: one line of text
        :param paint: paint with the text size
        :return: Rect relative to the text origin

        The right edge is the sum of the advances of every glyph but the last, plus
        kerning, plus the extent of the last glyph.
        """
        if not text:
            return Rect(0, 0, 0, 0)
        hmtx = cast("dict[str, tuple[int, int]]", self._font["hmtx"].metrics)
        names = [self._glyph_name(c) for c in text]
        bounds = [self._glyph_bounds(n) for n in names]
        total_advance = sum(hmtx[n][0] for n in names[:-1] if n in hmtx)
        total_kern = sum(self._kern_table.get(p, 0) for p in it.pairwise(names))
        min_xs, min_ys, max_xs, max_ys = zip(*bounds, strict=True)
        scale = paint.text_size / self.units_per_em
        return Rect(
            min_xs[0] * scale,
            -max(max_ys) * scale,
            (total_advance + total_kern + max_xs[-1]) * scale,
            -min(min_ys) * scale,
        )
