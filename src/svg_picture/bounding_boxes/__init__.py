"""Rectangles and bounds accumulation.

:author: Shay Hill
:created: 2025-11-03
"""

from svg_picture.bounding_boxes.bounds_tracker import BOUNDS_GROUP_ID, BoundsTracker
from svg_picture.bounding_boxes.type_rect import Rect

__all__ = ["BOUNDS_GROUP_ID", "BoundsTracker", "Rect"]
