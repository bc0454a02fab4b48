"""Test rectangles and bounds accumulation.

:author: Shay Hill
:created: 2025-11-03
"""

import math

from svg_picture.bounding_boxes import BoundsTracker, Rect
from svg_picture.transformations import new_rotation, new_translation


class TestRect:
    def test_from_xywh(self):
        rect = Rect.from_xywh(1, 2, 3, 4)
        assert rect == Rect(1, 2, 4, 6)
        assert (rect.width, rect.height) == (3, 4)
        assert rect.values() == (1, 2, 3, 4)

    def test_empty(self):
        """Any point unioned with an empty rect gives a rect around that point."""
        rect = Rect.empty()
        assert rect.is_degenerate
        assert rect.union_point(3, 4) == Rect(3, 4, 3, 4)

    def test_around_points(self):
        assert Rect.around_points([(1, 5), (3, -1), (2, 2)]) == Rect(1, -1, 3, 5)
        assert Rect.around_points([]).is_degenerate

    def test_union(self):
        rect = Rect(0, 0, 1, 1).union(Rect(2, -1, 3, 0))
        assert rect == Rect(0, -1, 3, 1)

    def test_union_degenerate(self):
        rect = Rect(0, 0, 1, 1)
        assert rect.union(Rect.empty()) is rect

    def test_contains(self):
        assert Rect(0, 0, 10, 10).contains(Rect(0, 2, 10, 3))
        assert not Rect(0, 0, 10, 10).contains(Rect(-1, 2, 10, 3))

    def test_transformed(self):
        rect = Rect(0, 0, 2, 1).transformed(new_translation(5, 6))
        assert rect == Rect(5, 6, 7, 7)

    def test_transformed_rotation(self):
        """A rotated rect is bounded by its rotated corners."""
        rect = Rect(0, 0, 2, 1).transformed(new_rotation(90))
        for got, want in zip(rect.values(), (-1, 0, 1, 2)):
            assert math.isclose(got, want, abs_tol=1e-9)


class TestBoundsTracker:
    def test_nothing_added(self):
        tracker = BoundsTracker()
        assert tracker.computed_bounds is None
        assert tracker.declared_bounds is None
        assert tracker.limits.is_degenerate

    def test_add(self):
        tracker = BoundsTracker()
        tracker.add_point(-1, -1)
        tracker.add_rect(Rect(0, 0, 1, 1), new_translation(10, 0))
        assert tracker.computed_bounds == Rect(-1, -1, 11, 1)

    def test_declare(self):
        """The last declared rect wins."""
        tracker = BoundsTracker()
        tracker.declare(Rect(0, 0, 1, 1))
        tracker.declare(Rect(0, 0, 2, 2))
        assert tracker.declared_bounds == Rect(0, 0, 2, 2)
        assert tracker.computed_bounds is None
