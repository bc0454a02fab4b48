"""Interpret svg path data as move, line, cubic, arc, and close segments.

:author: Shay Hill
:created: 2025-11-04

Uppercase commands are absolute, lowercase commands are relative to the current
point.

| command | arguments             | segment                                  |
| ------- | --------------------- | ---------------------------------------- |
| M m     | (x y)+                | MoveTo, then LineTo for later pairs      |
| L l     | (x y)+                | LineTo                                   |
| H h     | x+                    | LineTo                                   |
| V v     | y+                    | LineTo                                   |
| C c     | (x1 y1 x2 y2 x y)+    | CubicTo                                  |
| S s     | (x2 y2 x y)+          | CubicTo, first control point reflected   |
| Q q     | (x1 y1 x y)+          | CubicTo (exact degree elevation)         |
| T t     | (x y)+                | CubicTo, quadratic control reflected     |
| A a     | (rx ry rot fa fs x y)+| ArcTo (exact center parameterization)    |
| Z z     |                       | Close                                    |

Arcs keep their analytic parameters (center, radii, rotation, start angle, sweep
angle). Call `ArcTo.to_cubics` if your renderer only knows Bezier curves.

Angles in this module are in degrees. Y points down, as it does in svg.
"""

from __future__ import annotations

import dataclasses
import math
import warnings
from typing import TYPE_CHECKING, TypeAlias

from paragraphs import par

from svg_picture.bounding_boxes.type_rect import Rect
from svg_picture.exceptions import InvalidPathCommandWarning
from svg_picture.number_lexer import parse_numbers
from svg_picture.string_conversion import format_number
from svg_picture.transformations import IDENTITY, mat_apply

if TYPE_CHECKING:
    from collections.abc import Iterator

    from svg_picture.transformations import Matrix

_Point: TypeAlias = tuple[float, float]

# number of arguments consumed by each command
_ARITY = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7}

_WHITESPACE = frozenset(" \t\n\r\f,")

# largest arc span approximated by one cubic in ArcTo.to_cubics
_MAX_CUBIC_SPAN = 90.0


@dataclasses.dataclass(frozen=True)
class MoveTo:
    """Start a new subpath at (x, y)."""

    x: float
    y: float


@dataclasses.dataclass(frozen=True)
class LineTo:
    """Straight line from the current point to (x, y)."""

    x: float
    y: float


@dataclasses.dataclass(frozen=True)
class CubicTo:
    """Cubic Bezier from the current point through two control points to (x, y)."""

    x1: float
    y1: float
    x2: float
    y2: float
    x: float
    y: float


@dataclasses.dataclass(frozen=True)
class Close:
    """Straight line back to the start of the current subpath."""


@dataclasses.dataclass(frozen=True)
class ArcTo:
    """An elliptical arc in center parameterization.

    :param cx: center x
    :param cy: center y
    :param rx: x radius (after any correction for radii too small to reach)
    :param ry: y radius (after any correction)
    :param rotation: rotation of the ellipse x axis in degrees
    :param start_angle: parametric angle of the start point in degrees
    :param sweep_angle: parametric angle extent in degrees. Positive sweeps toward
        increasing angles.
    :param x: end point x (exactly as given in the path data)
    :param y: end point y
    """

    cx: float
    cy: float
    rx: float
    ry: float
    rotation: float
    start_angle: float
    sweep_angle: float
    x: float
    y: float

    def _axes(self) -> tuple[_Point, _Point]:
        """Get the rotated x and y semi-axis vectors of the ellipse."""
        phi = math.radians(self.rotation)
        cos_phi, sin_phi = math.cos(phi), math.sin(phi)
        return (
            (self.rx * cos_phi, self.rx * sin_phi),
            (-self.ry * sin_phi, self.ry * cos_phi),
        )

    def point_at(self, angle: float) -> _Point:
        """Get the point on the ellipse at a parametric angle.

        :param angle: parametric angle in degrees
        :return: (x, y)
        """
        (ux, uy), (vx, vy) = self._axes()
        theta = math.radians(angle)
        cos_t, sin_t = math.cos(theta), math.sin(theta)
        return self.cx + ux * cos_t + vx * sin_t, self.cy + uy * cos_t + vy * sin_t

    def contains_angle(self, angle: float) -> bool:
        """True if a parametric angle falls inside the sweep of this arc."""
        if self.sweep_angle >= 0:
            return (angle - self.start_angle) % 360 <= self.sweep_angle
        return (self.start_angle - angle) % 360 <= -self.sweep_angle

    def bounds(self, matrix: Matrix = IDENTITY) -> Rect:
        """Get the exact bounds of the arc seen through a matrix.

        :param matrix: transformation applied to the arc
        :return: axis-aligned rect around the transformed arc

        Any affine image of an ellipse point is `A*cos(t) + B*sin(t) + C` in each
        coordinate, so the extremes are at `t = atan2(B, A)` and the opposite angle.
        """
        (ux, uy), (vx, vy) = self._axes()
        a, b, c, d, _, _ = matrix
        tux, tuy = a * ux + c * uy, b * ux + d * uy
        tvx, tvy = a * vx + c * vy, b * vx + d * vy
        candidates = [self.start_angle, self.start_angle + self.sweep_angle]
        for aa, bb in ((tux, tvx), (tuy, tvy)):
            theta = math.degrees(math.atan2(bb, aa))
            candidates.extend(t for t in (theta, theta + 180) if self.contains_angle(t))
        points = (mat_apply(matrix, self.point_at(t)) for t in candidates)
        return Rect.around_points(points)

    def to_cubics(self) -> list[CubicTo]:
        """Approximate the arc with cubic Beziers, each spanning at most 90 degrees.

        :return: list of CubicTo segments. The last one ends exactly at (x, y).
        """
        if self.sweep_angle == 0:
            return []
        count = math.ceil(abs(self.sweep_angle) / _MAX_CUBIC_SPAN - 1e-9)
        step = self.sweep_angle / count
        kappa = 4 / 3 * math.tan(math.radians(step) / 4)
        (ux, uy), (vx, vy) = self._axes()

        def tangent(angle: float) -> _Point:
            theta = math.radians(angle)
            sin_t, cos_t = math.sin(theta), math.cos(theta)
            return -ux * sin_t + vx * cos_t, -uy * sin_t + vy * cos_t

        cubics: list[CubicTo] = []
        for i in range(count):
            beg = self.start_angle + step * i
            end = beg + step
            x0, y0 = self.point_at(beg)
            x3, y3 = (self.x, self.y) if i == count - 1 else self.point_at(end)
            t0x, t0y = tangent(beg)
            t3x, t3y = tangent(end)
            cubics.append(
                CubicTo(
                    x0 + kappa * t0x,
                    y0 + kappa * t0y,
                    x3 - kappa * t3x,
                    y3 - kappa * t3y,
                    x3,
                    y3,
                )
            )
        return cubics


Segment: TypeAlias = MoveTo | LineTo | CubicTo | ArcTo | Close


def _cubic_extrema(p0: float, p1: float, p2: float, p3: float) -> Iterator[float]:
    """Yield parameters in (0, 1) where one coordinate of a cubic peaks.

    :param p0: start value
    :param p1: first control value
    :param p2: second control value
    :param p3: end value
    :yield: t values where the derivative is zero
    """
    a = -p0 + 3 * p1 - 3 * p2 + p3
    b = 2 * (p0 - 2 * p1 + p2)
    c = p1 - p0
    if abs(a) < 1e-12:
        if abs(b) > 1e-12:
            roots = [-c / b]
        else:
            roots = []
    else:
        disc = b * b - 4 * a * c
        if disc < 0:
            roots = []
        else:
            sqrt_disc = math.sqrt(disc)
            roots = [(-b + sqrt_disc) / (2 * a), (-b - sqrt_disc) / (2 * a)]
    yield from (t for t in roots if 0 < t < 1)


def _cubic_point(pts: list[_Point], t: float) -> _Point:
    """Evaluate a cubic Bezier at t."""
    mt = 1 - t
    weights = (mt * mt * mt, 3 * mt * mt * t, 3 * mt * t * t, t * t * t)
    x = sum(w * p[0] for w, p in zip(weights, pts))
    y = sum(w * p[1] for w, p in zip(weights, pts))
    return x, y


@dataclasses.dataclass(frozen=True)
class PathGeometry:
    """An ordered, immutable sequence of path segments."""

    segments: tuple[Segment, ...] = ()

    def __len__(self) -> int:
        """Number of segments."""
        return len(self.segments)

    @property
    def subpaths(self) -> list[tuple[Segment, ...]]:
        """Split the segments at each MoveTo."""
        subpaths: list[list[Segment]] = []
        for segment in self.segments:
            if isinstance(segment, MoveTo) or not subpaths:
                subpaths.append([])
            subpaths[-1].append(segment)
        return [tuple(x) for x in subpaths]

    @property
    def is_closed(self) -> bool:
        """True if the last segment closes a subpath."""
        return bool(self.segments) and isinstance(self.segments[-1], Close)

    def iter_points(self) -> Iterator[_Point]:
        """Yield the end point of every segment that has one."""
        for segment in self.segments:
            if not isinstance(segment, Close):
                yield segment.x, segment.y

    def bounds(self, matrix: Matrix = IDENTITY) -> Rect:
        """Get the exact bounds of the path seen through a matrix.

        :param matrix: transformation from path coordinates to output coordinates
        :return: axis-aligned rect. Degenerate if the path has no points.
        """
        rect = Rect.empty()
        current: _Point = (0, 0)
        for segment in self.segments:
            if isinstance(segment, Close):
                continue
            if isinstance(segment, CubicTo):
                pts = [
                    mat_apply(matrix, p)
                    for p in (
                        current,
                        (segment.x1, segment.y1),
                        (segment.x2, segment.y2),
                        (segment.x, segment.y),
                    )
                ]
                for axis in (0, 1):
                    for t in _cubic_extrema(*(p[axis] for p in pts)):
                        rect = rect.union_point(*_cubic_point(pts, t))
            elif isinstance(segment, ArcTo):
                rect = rect.union(segment.bounds(matrix))
            rect = rect.union_point(*mat_apply(matrix, (segment.x, segment.y)))
            current = (segment.x, segment.y)
        return rect

    def transformed(self, matrix: Matrix) -> PathGeometry:
        """Transform every point of the path.

        :param matrix: svg-style transformation matrix
        :return: new PathGeometry. Arcs are flattened to cubics, because an arc under
            a general affine transformation is no longer described by the same
            parameters.
        """

        def tx(x: float, y: float) -> _Point:
            return mat_apply(matrix, (x, y))

        segments: list[Segment] = []
        for segment in self.segments:
            if isinstance(segment, MoveTo):
                segments.append(MoveTo(*tx(segment.x, segment.y)))
            elif isinstance(segment, LineTo):
                segments.append(LineTo(*tx(segment.x, segment.y)))
            elif isinstance(segment, CubicTo):
                segments.append(
                    CubicTo(
                        *tx(segment.x1, segment.y1),
                        *tx(segment.x2, segment.y2),
                        *tx(segment.x, segment.y),
                    )
                )
            elif isinstance(segment, ArcTo):
                segments.extend(
                    CubicTo(*tx(c.x1, c.y1), *tx(c.x2, c.y2), *tx(c.x, c.y))
                    for c in segment.to_cubics()
                )
            else:
                segments.append(segment)
        return PathGeometry(tuple(segments))

    def to_svgd(self) -> str:
        """Write the path as absolute svg path data.

        :return: svg `d` attribute value
        """
        words: list[str] = []
        for segment in self.segments:
            if isinstance(segment, MoveTo):
                words.append(f"M{_fmt(segment.x, segment.y)}")
            elif isinstance(segment, LineTo):
                words.append(f"L{_fmt(segment.x, segment.y)}")
            elif isinstance(segment, CubicTo):
                words.append(f"C{_fmt(*dataclasses.astuple(segment))}")
            elif isinstance(segment, ArcTo):
                large_arc = int(abs(segment.sweep_angle) > 180)
                sweep = int(segment.sweep_angle > 0)
                words.append(
                    "A"
                    + _fmt(segment.rx, segment.ry, segment.rotation)
                    + f" {large_arc} {sweep} "
                    + _fmt(segment.x, segment.y)
                )
            else:
                words.append("Z")
        return "".join(words)


def _fmt(*nums: float) -> str:
    """Space-delimit formatted numbers."""
    return " ".join(format_number(x) for x in nums)


def new_arc(
    x0: float,
    y0: float,
    x: float,
    y: float,
    rx: float,
    ry: float,
    angle: float,
    *,
    large_arc: bool,
    sweep: bool,
) -> ArcTo | LineTo | None:
    """Convert an svg endpoint-parameterized arc to center parameterization.

    :param x0: current point x
    :param y0: current point y
    :param x: end point x
    :param y: end point y
    :param rx: x radius as given
    :param ry: y radius as given
    :param angle: x-axis rotation in degrees
    :param large_arc: large-arc-flag
    :param sweep: sweep-flag
    :return: ArcTo, or LineTo if either radius is zero, or None if the end points
        coincide (svg draws nothing in that case).

    Radii too small to span the end points are scaled up uniformly until they just
    reach. The flags choose which of the two candidate centers to use.
    """
    if x0 == x and y0 == y:
        return None
    rx = abs(rx)
    ry = abs(ry)
    if rx == 0 or ry == 0:
        return LineTo(x, y)

    dx2 = (x0 - x) / 2.0
    dy2 = (y0 - y) / 2.0
    rotation = math.fmod(angle, 360.0)
    phi = math.radians(rotation)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)

    x1 = cos_phi * dx2 + sin_phi * dy2
    y1 = -sin_phi * dx2 + cos_phi * dy2

    prx, pry = rx * rx, ry * ry
    px1, py1 = x1 * x1, y1 * y1

    radii_check = px1 / prx + py1 / pry
    if radii_check > 1:
        rx *= math.sqrt(radii_check)
        ry *= math.sqrt(radii_check)
        prx, pry = rx * rx, ry * ry

    sign = -1.0 if large_arc == sweep else 1.0
    sq = (prx * pry - prx * py1 - pry * px1) / (prx * py1 + pry * px1)
    coef = sign * math.sqrt(max(sq, 0.0))
    cx1 = coef * (rx * y1 / ry)
    cy1 = coef * -(ry * x1 / rx)

    cx = (x0 + x) / 2.0 + (cos_phi * cx1 - sin_phi * cy1)
    cy = (y0 + y) / 2.0 + (sin_phi * cx1 + cos_phi * cy1)

    ux = (x1 - cx1) / rx
    uy = (y1 - cy1) / ry
    vx = (-x1 - cx1) / rx
    vy = (-y1 - cy1) / ry

    start_angle = _vector_angle(1, 0, ux, uy)
    sweep_angle = _vector_angle(ux, uy, vx, vy)
    if not sweep and sweep_angle > 0:
        sweep_angle -= 360
    elif sweep and sweep_angle < 0:
        sweep_angle += 360

    return ArcTo(
        cx,
        cy,
        rx,
        ry,
        rotation,
        math.fmod(start_angle, 360.0),
        math.fmod(sweep_angle, 360.0),
        x,
        y,
    )


def _vector_angle(ux: float, uy: float, vx: float, vy: float) -> float:
    """Signed angle in degrees from vector u to vector v."""
    norm = math.hypot(ux, uy) * math.hypot(vx, vy)
    cos_angle = max(-1.0, min(1.0, (ux * vx + uy * vy) / norm))
    sign = -1.0 if ux * vy - uy * vx < 0 else 1.0
    return math.degrees(sign * math.acos(cos_angle))


class _PathInterpreter:
    """State machine turning commands and their numbers into segments."""

    def __init__(self) -> None:
        self.segments: list[Segment] = []
        self.current: _Point = (0.0, 0.0)
        self.start: _Point = (0.0, 0.0)
        self.control: _Point = (0.0, 0.0)
        self.last_curve: str | None = None
        self.needs_move = False

    def _append(self, segment: Segment) -> None:
        """Add a drawing segment. Re-open the subpath if the last one was closed."""
        if self.needs_move and not isinstance(segment, MoveTo):
            self.segments.append(MoveTo(*self.start))
        self.needs_move = False
        self.segments.append(segment)

    def run(self, cmd: str, numbers: list[float], source: str) -> None:
        """Execute one command letter and every argument group that follows it."""
        upper = cmd.upper()
        if upper == "Z":
            if numbers:
                _warn_path(f"ignoring numbers after '{cmd}'", source)
            self.close()
            return
        arity = _ARITY[upper]
        groups, extra = divmod(len(numbers), arity)
        if extra or not groups:
            _warn_path(f"incomplete arguments for '{cmd}'", source)
        for i in range(groups):
            args = numbers[i * arity : (i + 1) * arity]
            if i > 0 and upper == "M":
                cmd = "l" if cmd == "m" else "L"
            self.step(cmd, args)

    def close(self) -> None:
        """Close the current subpath."""
        if self.segments and not self.needs_move:
            self.segments.append(Close())
        self.current = self.start
        self.control = self.current
        self.last_curve = None
        self.needs_move = True

    def step(self, cmd: str, args: list[float]) -> None:
        """Execute a single command with exactly its arguments."""
        x0, y0 = self.current
        relative = cmd.islower()
        dx, dy = (x0, y0) if relative else (0.0, 0.0)
        upper = cmd.upper()
        curve: str | None = None

        if upper == "M":
            self.current = (args[0] + dx, args[1] + dy)
            self.start = self.current
            self._append(MoveTo(*self.current))
        elif upper == "L":
            self.current = (args[0] + dx, args[1] + dy)
            self._append(LineTo(*self.current))
        elif upper == "H":
            self.current = (args[0] + dx, y0)
            self._append(LineTo(*self.current))
        elif upper == "V":
            self.current = (x0, args[0] + dy)
            self._append(LineTo(*self.current))
        elif upper in "CS":
            if upper == "C":
                x1, y1 = args[0] + dx, args[1] + dy
                args = args[2:]
            else:
                x1, y1 = self._reflected_control("cubic")
            x2, y2 = args[0] + dx, args[1] + dy
            self.current = (args[2] + dx, args[3] + dy)
            self._append(CubicTo(x1, y1, x2, y2, *self.current))
            self.control = (x2, y2)
            curve = "cubic"
        elif upper in "QT":
            if upper == "Q":
                qx, qy = args[0] + dx, args[1] + dy
                args = args[2:]
            else:
                qx, qy = self._reflected_control("quad")
            x, y = args[0] + dx, args[1] + dy
            self._append(
                CubicTo(
                    x0 + 2 / 3 * (qx - x0),
                    y0 + 2 / 3 * (qy - y0),
                    x + 2 / 3 * (qx - x),
                    y + 2 / 3 * (qy - y),
                    x,
                    y,
                )
            )
            self.current = (x, y)
            self.control = (qx, qy)
            curve = "quad"
        else:
            rx, ry, angle, large_arc, sweep = args[:5]
            x, y = args[5] + dx, args[6] + dy
            is_large, is_sweep = bool(large_arc), bool(sweep)
            arc = new_arc(
                x0, y0, x, y, rx, ry, angle, large_arc=is_large, sweep=is_sweep
            )
            if arc is not None:
                self._append(arc)
            self.current = (x, y)

        self.last_curve = curve
        if curve is None:
            self.control = self.current

    def _reflected_control(self, kind: str) -> _Point:
        """Reflect the previous control point through the current point.

        If the previous command was not the same kind of curve, the current point is
        its own reflection.
        """
        x0, y0 = self.current
        if self.last_curve != kind:
            return x0, y0
        cx, cy = self.control
        return 2 * x0 - cx, 2 * y0 - cy


def _warn_path(problem: str, source: str) -> None:
    """Report a recoverable problem in path data."""
    msg = par(f"""Invalid path data ({problem}) in '{source}'.""")
    warnings.warn(msg, InvalidPathCommandWarning, stacklevel=2)


def parse_path(path_data: str | None) -> PathGeometry:
    """Parse an svg path `d` attribute.

    :param path_data: svg path data, e.g. "M250,150L150,350L350,350Z"
    :return: PathGeometry
    :raise MalformedNumberError: if a number cannot be read. There is no way to
        recover the rest of the geometry, so this is fatal.
    :effects: warns with InvalidPathCommandWarning for unknown command letters
        (skipped) and incomplete argument groups (dropped).
    """
    interpreter = _PathInterpreter()
    if not path_data:
        return PathGeometry()
    i = 0
    while i < len(path_data):
        char = path_data[i]
        if char in _WHITESPACE:
            i += 1
            continue
        upper = char.upper()
        if upper != "Z" and upper not in _ARITY:
            _warn_path(f"unknown command '{char}'", path_data)
            numbers, i = parse_numbers(path_data, i + 1)
            continue
        numbers, i = parse_numbers(path_data, i + 1)
        interpreter.run(char, numbers, path_data)
    return PathGeometry(tuple(interpreter.segments))


def new_polyline(points: list[float], *, close: bool) -> PathGeometry:
    """Create a path through a flat list of coordinates.

    :param points: [x0, y0, x1, y1, ...]. A trailing odd value is ignored.
    :param close: close the path (polygon) or leave it open (polyline)
    :return: PathGeometry
    """
    pairs = list(zip(points[::2], points[1::2]))
    if not pairs:
        return PathGeometry()
    segments: list[Segment] = [MoveTo(*pairs[0])]
    segments.extend(LineTo(*p) for p in pairs[1:])
    if close:
        segments.append(Close())
    return PathGeometry(tuple(segments))
