"""Collect linear and radial gradient definitions and turn them into shaders.

:author: Shay Hill
:created: 2025-11-06

Gradients may reference another gradient by id (`xlink:href="#parent"`). The
reference is resolved when the child gradient element *closes*. If the parent is
not defined yet at that moment, the link is silently dropped and the child keeps
its own (possibly empty) stops.

Stops are kept in document order. Offsets are not sorted or clamped here.
"""

from __future__ import annotations

import dataclasses
import enum
from typing import TYPE_CHECKING, TypeAlias

from svg_picture.transformations import mat_dot

if TYPE_CHECKING:
    from svg_picture.transformations import Matrix

GEOMETRY_ATTRIBUTES = ("x1", "y1", "x2", "y2", "cx", "cy", "r")


class GradientKind(enum.Enum):
    """The two gradient elements."""

    LINEAR = "linearGradient"
    RADIAL = "radialGradient"


@dataclasses.dataclass(frozen=True)
class GradientStop:
    """One color stop.

    :param offset: position along the gradient, usually in [0, 1]
    :param color: 32-bit argb color
    """

    offset: float
    color: int


@dataclasses.dataclass(frozen=True)
class LinearShader:
    """A linear gradient ready to paint with (clamped at the ends)."""

    x1: float
    y1: float
    x2: float
    y2: float
    colors: tuple[int, ...]
    positions: tuple[float, ...]
    matrix: Matrix | None = None


@dataclasses.dataclass(frozen=True)
class RadialShader:
    """A radial gradient ready to paint with (clamped at the edge)."""

    cx: float
    cy: float
    r: float
    colors: tuple[int, ...]
    positions: tuple[float, ...]
    matrix: Matrix | None = None


Shader: TypeAlias = LinearShader | RadialShader


@dataclasses.dataclass
class Gradient:
    """A gradient definition as read from the document.

    :param id: element id. Gradients without an id are never registered.
    :param kind: linear or radial
    :param x1: linear start x
    :param y1: linear start y
    :param x2: linear end x
    :param y2: linear end y
    :param cx: radial center x
    :param cy: radial center y
    :param r: radial radius
    :param stops: color stops in document order
    :param matrix: optional gradientTransform
    :param href: optional id (without "#") of a gradient to inherit from
    :param explicit: names of the geometry attributes the element actually set.
        Geometry not set here is taken from a parent gradient.
    """

    id: str | None
    kind: GradientKind
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0
    cx: float = 0.0
    cy: float = 0.0
    r: float = 0.0
    stops: list[GradientStop] = dataclasses.field(default_factory=list)
    matrix: Matrix | None = None
    href: str | None = None
    explicit: frozenset[str] = frozenset()

    def inherit_from(self, parent: Gradient) -> Gradient:
        """Create a copy of self that inherits from a parent gradient.

        :param parent: the gradient referenced by self.href
        :return: a new Gradient with self's id and kind. Geometry self did not set
            comes from the parent. Stops come from the parent unless self has stops
            of its own. The parent matrix is kept and self's matrix is applied
            inside it when both exist.
        """
        matrix = parent.matrix
        if self.matrix is not None:
            matrix = self.matrix if matrix is None else mat_dot(matrix, self.matrix)
        geometry = {
            x: getattr(parent, x) for x in GEOMETRY_ATTRIBUTES if x not in self.explicit
        }
        return dataclasses.replace(
            self,
            href=parent.id,
            stops=list(self.stops or parent.stops),
            matrix=matrix,
            **geometry,
        )

    def create_shader(self) -> Shader:
        """Create an immutable shader from the current definition."""
        colors = tuple(x.color for x in self.stops)
        positions = tuple(x.offset for x in self.stops)
        if self.kind is GradientKind.LINEAR:
            return LinearShader(
                self.x1, self.y1, self.x2, self.y2, colors, positions, self.matrix
            )
        return RadialShader(self.cx, self.cy, self.r, colors, positions, self.matrix)


class GradientRegistry:
    """Gradients defined so far in one parse, by id."""

    def __init__(self) -> None:
        """Start empty with no open gradient."""
        self._gradients: dict[str, Gradient] = {}
        self._shaders: dict[str, Shader] = {}
        self._open: Gradient | None = None

    def __contains__(self, gradient_id: str) -> bool:
        """True if a gradient with this id has been defined."""
        return gradient_id in self._gradients

    def __len__(self) -> int:
        """Number of defined gradients."""
        return len(self._gradients)

    def begin(self, gradient: Gradient) -> None:
        """Start reading a gradient element. Stops will be added to it."""
        self._open = gradient

    def add_stop(self, offset: float, color: int) -> bool:
        """Append a stop to the open gradient.

        :param offset: stop offset
        :param color: argb color
        :return: False if there is no open gradient (stop is ignored)
        """
        if self._open is None:
            return False
        self._open.stops.append(GradientStop(offset, color))
        return True

    def end(self) -> Gradient | None:
        """Close the open gradient and define it.

        :return: the gradient as defined (after any inheritance) or None if no
            gradient was open
        """
        gradient, self._open = self._open, None
        if gradient is None:
            return None
        return self.define(gradient)

    def define(self, gradient: Gradient) -> Gradient:
        """Resolve the href of a gradient and register it by id.

        :param gradient: gradient definition
        :return: the registered gradient. Without an id, the gradient is returned
            but not registered.
        """
        if gradient.href is not None:
            parent = self._gradients.get(gradient.href)
            if parent is not None:
                gradient = gradient.inherit_from(parent)
        if gradient.id is not None:
            self._gradients[gradient.id] = gradient
            _ = self._shaders.pop(gradient.id, None)
        return gradient

    def get(self, gradient_id: str) -> Gradient | None:
        """Get a defined gradient by id."""
        return self._gradients.get(gradient_id)

    def resolve(self, gradient_id: str) -> Shader | None:
        """Get (and cache) the shader for a gradient id.

        :param gradient_id: id without "#"
        :return: shader or None if no gradient has that id
        """
        if gradient_id in self._shaders:
            return self._shaders[gradient_id]
        gradient = self._gradients.get(gradient_id)
        if gradient is None:
            return None
        shader = gradient.create_shader()
        self._shaders[gradient_id] = shader
        return shader
