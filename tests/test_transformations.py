"""Test transformations of matrices.

:author: Shay Hill
:created: 2024-05-05
"""

import math

import pytest

from svg_picture.exceptions import InvalidTransformWarning
from svg_picture.transformations import (
    IDENTITY,
    mat_apply,
    mat_dot,
    parse_transform,
    pre_concat,
)


def _assert_point_close(got: tuple[float, float], want: tuple[float, float]) -> None:
    assert math.isclose(got[0], want[0], abs_tol=1e-9)
    assert math.isclose(got[1], want[1], abs_tol=1e-9)


class TestMat:
    def test_explicit(self):
        expect = (31, 46, 12, 22, 10, 14)
        assert mat_dot((1, 2, 3, 4, 5, 6), (7, 8, 9, 1, 2, 1)) == expect

    def test_apply(self):
        expect = (36, 52)
        assert mat_apply((1, 2, 3, 4, 5, 6), (7, 8)) == expect

    def test_pre_concat_order(self):
        """The inner (pre-concatenated) matrix is applied to a point first."""
        translate = (1, 0, 0, 1, 10, 0)
        scale = (2, 0, 0, 2, 0, 0)
        assert mat_apply(pre_concat(translate, scale), (1, 1)) == (12, 2)
        assert mat_apply(pre_concat(scale, translate), (1, 1)) == (22, 2)


class TestParseTransform:
    def test_empty(self):
        assert parse_transform(None) == IDENTITY
        assert parse_transform("") == IDENTITY

    def test_left_to_right(self):
        """The first term listed is applied to a point last."""
        matrix = parse_transform("translate(10,10) scale(2)")
        assert mat_apply(matrix, (1, 0)) == (12, 10)

    def test_translate_one_arg(self):
        assert parse_transform("translate(5)") == (1, 0, 0, 1, 5, 0)

    def test_matrix(self):
        assert parse_transform("matrix(1 2 3 4 5 6)") == (1, 2, 3, 4, 5, 6)

    def test_rotate(self):
        _assert_point_close(mat_apply(parse_transform("rotate(90)"), (1, 0)), (0, 1))

    def test_rotate_about_point(self):
        """The center of rotation does not move."""
        matrix = parse_transform("rotate(90, 5, 5)")
        _assert_point_close(mat_apply(matrix, (5, 5)), (5, 5))
        _assert_point_close(mat_apply(matrix, (6, 5)), (5, 6))

    def test_skew(self):
        _assert_point_close(mat_apply(parse_transform("skewX(45)"), (0, 1)), (1, 1))
        _assert_point_close(mat_apply(parse_transform("skewY(45)"), (1, 0)), (1, 1))

    def test_compact_numbers(self):
        assert parse_transform("translate(-1-2)") == (1, 0, 0, 1, -1, -2)

    def test_skip_unknown_term(self):
        """An unknown term warns and the rest of the chain still applies."""
        with pytest.warns(InvalidTransformWarning):
            matrix = parse_transform("translate(10) bogus(1) scale(2)")
        assert mat_apply(matrix, (1, 1)) == (12, 2)

    def test_skip_bad_arg_count(self):
        with pytest.warns(InvalidTransformWarning):
            matrix = parse_transform("rotate(1, 2)")
        assert matrix == IDENTITY

    def test_skip_bad_number(self):
        with pytest.warns(InvalidTransformWarning):
            matrix = parse_transform("scale(2 - 3) translate(1 1)")
        assert matrix == (1, 0, 0, 1, 1, 1)

    def test_skip_garbage_between_terms(self):
        with pytest.warns(InvalidTransformWarning):
            matrix = parse_transform("scale(2) junk translate(1 1)")
        assert mat_apply(matrix, (0, 0)) == (2, 2)

    def test_skip_letters_in_args(self):
        """A term with units in its arguments warns instead of losing values."""
        with pytest.warns(InvalidTransformWarning):
            matrix = parse_transform("translate(10px,20px) scale(2)")
        assert matrix == (2, 0, 0, 2, 0, 0)
