"""
Coverage geometry in planar property coordinates.

A coverage area is an axis-aligned rectangle. An absent area covers every
point: viewpoints registered before coverage tracking existed stay usable.
"""
import math
from typing import Optional

from app.domain.models import CoverageArea, Point2D


def contains(area: Optional[CoverageArea], point: Point2D) -> bool:
    """
    Check whether a point lies inside a coverage area (bounds inclusive).

    Args:
        area: Coverage rectangle, or None for "covers everything"
        point: Planar point to test

    Returns:
        True if the point is covered
    """
    if area is None:
        return True
    return (
        area.xmin <= point.x <= area.xmax
        and area.ymin <= point.y <= area.ymax
    )


def distance_from_center(area: Optional[CoverageArea], point: Point2D) -> float:
    """
    Euclidean distance from a point to the centroid of a coverage area.

    Args:
        area: Coverage rectangle; None has no centroid
        point: Planar point

    Returns:
        Distance in planar units, or infinity when the area is absent
    """
    if area is None:
        return math.inf
    center_x, center_y = area.center
    return math.hypot(point.x - center_x, point.y - center_y)
