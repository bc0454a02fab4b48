"""Math and parsing for svg-style transformation matrices.

:author: Shay Hill
:created: 2024-05-05

Svg uses an unusual matrix format. For 3x3 transformation matrix

[[a, c, e],
 [b, d, f],
 [0, 0, 1]]

The svg matrix is (a, b, c, d, e, f). Every matrix in this package is a tuple in
that order.

A transform attribute is read left to right, each term *pre-concatenated* onto
what came before. So `translate(10,10) scale(2)` scales a point first, then
translates it.
"""

from __future__ import annotations

import math
import re
import warnings
from typing import TypeAlias

from paragraphs import par

from svg_picture.exceptions import InvalidTransformWarning, MalformedNumberError
from svg_picture.number_lexer import parse_numbers

Matrix: TypeAlias = tuple[float, float, float, float, float, float]

IDENTITY: Matrix = (1, 0, 0, 1, 0, 0)

# one `name(args)` term of a transform attribute
_TRANSFORM_TERM = re.compile(r"([A-Za-z]+)\s*\(([^)]*)\)")

# what is allowed to sit between terms
_TERM_SEPARATOR = re.compile(r"^[\s,]*$")


def mat_dot(mat1: Matrix, mat2: Matrix) -> Matrix:
    """Matrix multiplication for svg-style matrices.

    :param mat1: transformation matrix (a, b, c, d, e, f)
    :param mat2: transformation matrix (a, b, c, d, e, f)
    :return: mat1 @ mat2. A point transformed by the result is transformed by mat2
        first, then mat1.
    """
    aa = sum(mat1[x] * mat2[y] for x, y in ((0, 0), (2, 1)))
    bb = sum(mat1[x] * mat2[y] for x, y in ((1, 0), (3, 1)))
    cc = sum(mat1[x] * mat2[y] for x, y in ((0, 2), (2, 3)))
    dd = sum(mat1[x] * mat2[y] for x, y in ((1, 2), (3, 3)))
    ee = sum(mat1[x] * mat2[y] for x, y in ((0, 4), (2, 5))) + mat1[4]
    ff = sum(mat1[x] * mat2[y] for x, y in ((1, 4), (3, 5))) + mat1[5]
    return (aa, bb, cc, dd, ee, ff)


def pre_concat(matrix: Matrix, other: Matrix) -> Matrix:
    """Compose `other` so it is applied to points *before* `matrix`.

    :param matrix: the accumulated (outer) transformation
    :param other: the new (inner) transformation
    :return: matrix @ other
    """
    return mat_dot(matrix, other)


def mat_apply(matrix: Matrix, point: tuple[float, float]) -> tuple[float, float]:
    """Apply an svg-style transformation matrix to a point.

    :param matrix: transformation matrix (a, b, c, d, e, f)
    :param point: point (x, y)
    :return: transformed point (x, y)
    """
    a, b, c, d, e, f = matrix
    x, y = point
    return a * x + c * y + e, b * x + d * y + f


def new_translation(tx: float, ty: float = 0) -> Matrix:
    """Create a translation matrix."""
    return (1, 0, 0, 1, tx, ty)


def new_scale(sx: float, sy: float | None = None) -> Matrix:
    """Create a scale matrix. Scale is uniform if `sy` is not given."""
    return (sx, 0, 0, sx if sy is None else sy, 0, 0)


def new_rotation(degrees: float) -> Matrix:
    """Create a matrix rotating about the origin.

    :param degrees: angle in degrees. Positive is clockwise on screen, where y points
        down.
    """
    rad = math.radians(degrees)
    cos, sin = math.cos(rad), math.sin(rad)
    return (cos, sin, -sin, cos, 0, 0)


def new_skew(x_degrees: float = 0, y_degrees: float = 0) -> Matrix:
    """Create a skew matrix from skewX and skewY angles in degrees."""
    return (
        1,
        math.tan(math.radians(y_degrees)),
        math.tan(math.radians(x_degrees)),
        1,
        0,
        0,
    )


def _new_term_matrix(name: str, args: list[float]) -> Matrix | None:
    """Build the matrix for one transform term.

    :param name: transform name (e.g., "rotate")
    :param args: numbers inside the parentheses
    :return: matrix or None if the name or argument count is not recognized
    """
    nargs = len(args)
    if name == "matrix" and nargs == 6:
        aa, bb, cc, dd, ee, ff = args
        return (aa, bb, cc, dd, ee, ff)
    if name == "translate" and nargs in (1, 2):
        return new_translation(*args)
    if name == "scale" and nargs in (1, 2):
        return new_scale(*args)
    if name == "rotate" and nargs == 1:
        return new_rotation(args[0])
    if name == "rotate" and nargs == 3:
        angle, cx, cy = args
        matrix = new_translation(cx, cy)
        matrix = pre_concat(matrix, new_rotation(angle))
        return pre_concat(matrix, new_translation(-cx, -cy))
    if name == "skewX" and nargs == 1:
        return new_skew(x_degrees=args[0])
    if name == "skewY" and nargs == 1:
        return new_skew(y_degrees=args[0])
    return None


def parse_transform(transform: str | None) -> Matrix:
    """Compose the terms of an svg transform attribute into one matrix.

    :param transform: e.g., "translate(10,10) rotate(45 5 5)". None or "" for the
        identity.
    :return: composed transformation matrix
    :effects: warns with InvalidTransformWarning for each term that cannot be
        read. That term is skipped. The others still apply.

        >>> mat_apply(parse_transform("translate(10,10) scale(2)"), (1, 0))
        (12.0, 10.0)
    """
    matrix = IDENTITY
    if not transform:
        return matrix
    cursor = 0
    for match in _TRANSFORM_TERM.finditer(transform):
        if not _TERM_SEPARATOR.match(transform[cursor : match.start()]):
            _warn_bad_term(transform[cursor : match.start()], transform)
        cursor = match.end()
        name, arg_str = match.group(1), match.group(2)
        try:
            args, next_index = parse_numbers(arg_str)
        except MalformedNumberError:
            _warn_bad_term(match.group(0), transform)
            continue
        if next_index < len(arg_str):
            _warn_bad_term(match.group(0), transform)
            continue
        term = _new_term_matrix(name, args)
        if term is None:
            _warn_bad_term(match.group(0), transform)
            continue
        matrix = pre_concat(matrix, term)
    if not _TERM_SEPARATOR.match(transform[cursor:]):
        _warn_bad_term(transform[cursor:], transform)
    return matrix


def _warn_bad_term(term: str, transform: str) -> None:
    """Report a transform term that will be skipped."""
    msg = par(
        f"""Skipping invalid transform term '{term.strip()}' in
        transform '{transform}'."""
    )
    warnings.warn(msg, InvalidTransformWarning, stacklevel=3)

