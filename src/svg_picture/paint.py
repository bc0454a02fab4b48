"""Resolved paint and the rules for resolving it.

:author: Shay Hill
:created: 2025-11-06

A Paint is everything a canvas needs to fill or stroke one shape: an argb color
with opacity already folded into the alpha channel, an optional shader, stroke
geometry, and font settings for text. Paints are frozen. The walker keeps one fill
paint and one stroke paint per group level and replaces them (never mutates them)
as styles cascade.

Fill rules, in order:

- `display:none` paints nothing.
- `fill="none"` paints transparent. This counts as *set* for inheritance, so a
  child without its own fill inherits "none" and paints nothing.
- `fill="url(#id)"` paints the gradient, or opaque black if the id is unknown.
- any other fill value paints that color, or black if the color is unknown.
- no fill at all inherits the ancestor fill if any ancestor set one, else paints
  black (or the configured override color).

Stroke rules follow the same shape. A stroke is never painted with a width <= 0,
and a missing stroke with no ancestor stroke is not painted unless the element
sets a width and an override color is configured.

Final alpha is round(255 * element opacity * group opacity).
"""

from __future__ import annotations

import dataclasses
import enum
import re
import warnings
from typing import TYPE_CHECKING, NamedTuple

from paragraphs import par

from svg_picture.exceptions import UnresolvedGradientWarning
from svg_picture.unit_conversion import DEFAULT_FONT_SIZE

if TYPE_CHECKING:
    from svg_picture.gradients import GradientRegistry, Shader
    from svg_picture.styles import Properties

BLACK = 0x000000
OPAQUE = 0xFF000000
TRANSPARENT = 0x00000000

_DEFAULT_DASH_INTERVAL = 1.0

# url(#id), url("#id"), or url('#id'), possibly followed by a fallback color
_PAINT_URL = re.compile(r"""^url\(\s*(['"]?)#([^'"\s)]+)\1\s*\)""")


class PaintStyle(enum.Enum):
    """Fill the interior or stroke the outline."""

    FILL = "fill"
    STROKE = "stroke"


class StrokeCap(enum.Enum):
    """stroke-linecap values."""

    BUTT = "butt"
    ROUND = "round"
    SQUARE = "square"


class StrokeJoin(enum.Enum):
    """stroke-linejoin values."""

    MITER = "miter"
    ROUND = "round"
    BEVEL = "bevel"


class TextAlign(enum.Enum):
    """Horizontal text anchor."""

    LEFT = "start"
    CENTER = "middle"
    RIGHT = "end"


@dataclasses.dataclass(frozen=True)
class DashPattern:
    """A repeating on/off stroke pattern.

    :param intervals: alternating on and off lengths. Always an even count.
    :param phase: offset into the pattern, already reduced modulo its length
    """

    intervals: tuple[float, ...]
    phase: float = 0.0

    @property
    def length(self) -> float:
        """Total length of one repetition of the pattern."""
        return sum(self.intervals)

    @classmethod
    def from_svg(
        cls, dasharray: str, dashoffset: str | None = None
    ) -> DashPattern | None:
        """Read stroke-dasharray and stroke-dashoffset values.

        :param dasharray: e.g. "5,3,2". "none" for no pattern.
        :param dashoffset: optional offset
        :return: DashPattern or None for "none" or a pattern with no length

        An odd number of intervals is repeated to make an even number, so "5,3,2"
        becomes "5,3,2,5,3,2". An interval that is not a number repeats the
        previous interval (or 1 at the start).
        """
        if dasharray.strip() == "none":
            return None
        intervals: list[float] = []
        current = _DEFAULT_DASH_INTERVAL
        for token in dasharray.replace(",", " ").split():
            try:
                current = float(token)
            except ValueError:
                pass
            intervals.append(current)
        if len(intervals) % 2:
            intervals += intervals
        total = sum(intervals)
        if total <= 0:
            return None
        phase = 0.0
        if dashoffset is not None:
            try:
                phase = float(dashoffset) % total
            except ValueError:
                phase = 0.0
        return cls(tuple(intervals), phase)


@dataclasses.dataclass(frozen=True)
class Paint:
    """Resolved drawing style for one fill or one stroke.

    :param style: fill or stroke
    :param color: 32-bit argb color with opacity folded into alpha
    :param opacity: the paint's own opacity before group opacity was applied. Used
        when the paint is inherited into a differently-transparent group.
    :param is_none: True if the paint was explicitly set to "none"
    :param shader: gradient shader or None for a solid color
    :param stroke_width: stroke width in user units
    :param stroke_cap: line cap
    :param stroke_join: line join
    :param dash: dash pattern or None for a solid stroke
    :param text_size: font size in user units
    :param text_align: horizontal anchor for text
    :param font_family: font-family value or None
    :param font_style: "normal" or "italic"
    :param font_weight: "normal", "bold", or a numeric weight string
    """

    style: PaintStyle = PaintStyle.FILL
    color: int = OPAQUE | BLACK
    opacity: float = 1.0
    is_none: bool = False
    shader: Shader | None = None
    stroke_width: float = 1.0
    stroke_cap: StrokeCap = StrokeCap.BUTT
    stroke_join: StrokeJoin = StrokeJoin.MITER
    dash: DashPattern | None = None
    text_size: float = DEFAULT_FONT_SIZE
    text_align: TextAlign = TextAlign.LEFT
    font_family: str | None = None
    font_style: str = "normal"
    font_weight: str = "normal"

    @property
    def alpha(self) -> int:
        """Alpha channel, 0 to 255."""
        return (self.color >> 24) & 0xFF

    @property
    def rgb(self) -> int:
        """Color without alpha, 0xRRGGBB."""
        return self.color & 0xFFFFFF

    @property
    def is_transparent(self) -> bool:
        """True if the paint would not show up."""
        return self.is_none or (self.shader is None and self.alpha == 0)


def new_fill_paint() -> Paint:
    """Default fill paint: opaque black."""
    return Paint(style=PaintStyle.FILL)


def new_stroke_paint() -> Paint:
    """Default stroke paint: not set, so not painted."""
    return Paint(style=PaintStyle.STROKE, color=TRANSPARENT, is_none=True)


def fold_alpha(rgb: int, opacity: float, group_opacity: float) -> int:
    """Combine an rgb color with opacities into an argb color.

    :param rgb: 0xRRGGBB
    :param opacity: element opacity
    :param group_opacity: product of ancestor group opacities
    :return: 0xAARRGGBB with alpha = round(255 * opacity * group_opacity)
    """
    alpha = round(255 * opacity * group_opacity)
    alpha = max(0, min(255, alpha))
    return alpha << 24 | (rgb & 0xFFFFFF)


class Resolved(NamedTuple):
    """Result of resolving a fill or stroke.

    :param paint: the paint now in effect (store it if this is a group)
    :param painted: True if the element should be drawn with this paint
    """

    paint: Paint
    painted: bool


class PaintResolver:
    """Apply the fill and stroke rules for one parse.

    :param gradients: gradients defined so far
    :param override_color: optional rgb color used where nothing sets a color
    """

    def __init__(
        self, gradients: GradientRegistry, override_color: int | None = None
    ) -> None:
        """Keep references to the registry and the override color."""
        self.gradients = gradients
        self.override_color = override_color

    @staticmethod
    def _element_opacity(
        props: Properties, kind: PaintStyle, default: float, *, is_group: bool
    ) -> float:
        """Get the opacity an element applies to its own paint.

        :param props: element properties
        :param kind: fill or stroke
        :param default: value when nothing is set
        :param is_group: groups put `opacity` in the group opacity instead, so only
            fill-opacity or stroke-opacity applies here.
        :return: opacity. `opacity` wins over fill-opacity and stroke-opacity.
        """
        opacity = None if is_group else props.get_float("opacity")
        if opacity is None:
            opacity = props.get_float(f"{kind.value}-opacity")
        return default if opacity is None else opacity

    @staticmethod
    def _solid_paint(
        paint: Paint, rgb: int, opacity: float, group_opacity: float
    ) -> Paint:
        """Paint one solid color."""
        return dataclasses.replace(
            paint,
            color=fold_alpha(rgb, opacity, group_opacity),
            opacity=opacity,
            is_none=False,
            shader=None,
        )

    def _gradient_paint(
        self, paint: Paint, gradient_id: str, opacity: float, group_opacity: float
    ) -> Paint:
        """Look up a `url(#id)` paint. Fall back to black if the id is unknown."""
        shader = self.gradients.resolve(gradient_id)
        if shader is None:
            msg = par(
                f"""Didn't find gradient '{gradient_id}'. Using opaque black
                {paint.style.value}."""
            )
            warnings.warn(msg, UnresolvedGradientWarning, stacklevel=4)
            return self._solid_paint(paint, BLACK, 1.0, 1.0)
        paint = self._solid_paint(paint, BLACK, opacity, group_opacity)
        return dataclasses.replace(paint, shader=shader)

    def _explicit_paint(
        self,
        props: Properties,
        paint: Paint,
        value: str,
        group_opacity: float,
        *,
        is_group: bool,
    ) -> Paint:
        """Resolve an explicitly set fill or stroke value."""
        value = value.strip()
        if value.lower() == "none":
            return dataclasses.replace(
                paint, color=TRANSPARENT, opacity=1.0, is_none=True, shader=None
            )
        opacity = self._element_opacity(props, paint.style, 1.0, is_group=is_group)
        url = _PAINT_URL.match(value)
        if url:
            return self._gradient_paint(paint, url.group(2), opacity, group_opacity)
        rgb = props.get_color(paint.style.value)
        if rgb is None:
            rgb = BLACK
        return self._solid_paint(paint, rgb, opacity, group_opacity)

    def _inherited_paint(
        self, props: Properties, paint: Paint, group_opacity: float, *, is_group: bool
    ) -> Paint:
        """Recompute the alpha of an inherited paint for the current opacity."""
        if paint.is_none:
            return paint
        opacity = self._element_opacity(
            props, paint.style, paint.opacity, is_group=is_group
        )
        if is_group:
            return dataclasses.replace(paint, opacity=opacity)
        return dataclasses.replace(
            paint, color=fold_alpha(paint.rgb, opacity, group_opacity)
        )

    def resolve_fill(
        self,
        props: Properties,
        inherited: Paint,
        *,
        fill_set: bool,
        group_opacity: float,
        is_group: bool = False,
    ) -> Resolved:
        """Resolve the fill paint for an element.

        :param props: element properties
        :param inherited: fill paint in effect for the parent
        :param fill_set: True if any ancestor set a fill
        :param group_opacity: product of ancestor group opacities (including the
            element itself if it is a group)
        :param is_group: True when resolving the paint a group passes to children
        :return: Resolved(paint, painted)
        """
        if props.get_string("display") == "none":
            return Resolved(inherited, painted=False)
        paint = apply_text_properties(props, inherited)
        value = props.get_string("fill")
        if value is not None and value.strip() != "inherit":
            paint = self._explicit_paint(
                props, paint, value, group_opacity, is_group=is_group
            )
            return Resolved(paint, painted=True)
        if fill_set:
            paint = self._inherited_paint(
                props, paint, group_opacity, is_group=is_group
            )
            return Resolved(paint, painted=not paint.is_transparent)
        rgb = BLACK if self.override_color is None else self.override_color
        opacity = self._element_opacity(props, PaintStyle.FILL, 1.0, is_group=is_group)
        return Resolved(
            self._solid_paint(paint, rgb, opacity, group_opacity), painted=True
        )

    def resolve_stroke(
        self,
        props: Properties,
        inherited: Paint,
        *,
        stroke_set: bool,
        group_opacity: float,
        is_group: bool = False,
    ) -> Resolved:
        """Resolve the stroke paint for an element.

        :param props: element properties
        :param inherited: stroke paint in effect for the parent
        :param stroke_set: True if any ancestor set a stroke
        :param group_opacity: product of ancestor group opacities
        :param is_group: True when resolving the paint a group passes to children
        :return: Resolved(paint, painted)
        """
        if props.get_string("display") == "none":
            return Resolved(inherited, painted=False)
        paint = apply_stroke_properties(props, apply_text_properties(props, inherited))
        value = props.get_string("stroke")
        if value is not None and value.strip() != "inherit":
            paint = self._explicit_paint(
                props, paint, value, group_opacity, is_group=is_group
            )
        elif stroke_set:
            paint = self._inherited_paint(
                props, paint, group_opacity, is_group=is_group
            )
        elif props.has("stroke-width") and self.override_color is not None:
            opacity = self._element_opacity(
                props, PaintStyle.STROKE, 1.0, is_group=is_group
            )
            paint = self._solid_paint(
                paint, self.override_color, opacity, group_opacity
            )
        else:
            paint = dataclasses.replace(
                paint, color=TRANSPARENT, is_none=True, shader=None
            )
        painted = paint.stroke_width > 0 and not paint.is_transparent
        return Resolved(paint, painted=painted)


def apply_stroke_properties(props: Properties, paint: Paint) -> Paint:
    """Update stroke width, cap, join, and dash from element properties.

    :param props: element properties
    :param paint: stroke paint in effect
    :return: new paint with any stroke properties the element sets
    """
    updates: dict[str, object] = {}
    width = props.get_length("stroke-width", paint.text_size)
    if width is not None:
        updates["stroke_width"] = width
    linecap = props.get_string("stroke-linecap")
    if linecap in {x.value for x in StrokeCap}:
        updates["stroke_cap"] = StrokeCap(linecap)
    linejoin = props.get_string("stroke-linejoin")
    if linejoin in {x.value for x in StrokeJoin}:
        updates["stroke_join"] = StrokeJoin(linejoin)
    dasharray = props.get_string("stroke-dasharray")
    if dasharray is not None:
        dashoffset = props.get_string("stroke-dashoffset")
        updates["dash"] = DashPattern.from_svg(dasharray, dashoffset)
    if not updates:
        return paint
    return dataclasses.replace(paint, **updates)  # pyright: ignore[reportArgumentType]


def apply_text_properties(props: Properties, paint: Paint) -> Paint:
    """Update font size, family, style, weight, and anchor from element properties.

    :param props: element properties
    :param paint: paint in effect
    :return: new paint with any text properties the element sets
    """
    updates: dict[str, object] = {}
    size = props.get_length("font-size", paint.text_size)
    if size is not None:
        updates["text_size"] = size
    family = props.get_string("font-family")
    if family is not None:
        updates["font_family"] = family.strip().strip("'\"")
    font_style = props.get_string("font-style")
    if font_style is not None:
        updates["font_style"] = font_style
    font_weight = props.get_string("font-weight")
    if font_weight is not None:
        updates["font_weight"] = font_weight
    anchor = props.get_string("text-anchor")
    if anchor is not None:
        updates["text_align"] = {
            "middle": TextAlign.CENTER,
            "end": TextAlign.RIGHT,
        }.get(anchor, TextAlign.LEFT)
    if not updates:
        return paint
    return dataclasses.replace(paint, **updates)  # pyright: ignore[reportArgumentType]
