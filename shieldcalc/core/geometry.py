"""Planar geometry helpers — line-of-sight tests and distances.

Segment intersection convention: segments are closed.  A proper crossing,
a touch at an endpoint and a collinear overlap all count as intersecting;
collinear segments that do not overlap do not.

Reference: Shielding calculator — Geometry.
"""

from __future__ import annotations

import math

from shieldcalc.models.scene import Point2D

# Cross products smaller than this are treated as collinear
_EPS = 1e-12


def _orientation(a: Point2D, b: Point2D, c: Point2D) -> int:
    """Sign of the turn a → b → c: 1 = CCW, -1 = CW, 0 = collinear."""
    cross = (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)
    if abs(cross) <= _EPS:
        return 0
    return 1 if cross > 0 else -1


def _on_segment(a: Point2D, b: Point2D, p: Point2D) -> bool:
    """True if collinear point *p* lies within the bounding box of a–b."""
    return (
        min(a.x, b.x) - _EPS <= p.x <= max(a.x, b.x) + _EPS
        and min(a.y, b.y) - _EPS <= p.y <= max(a.y, b.y) + _EPS
    )


def segments_intersect(
    p1: Point2D,
    p2: Point2D,
    p3: Point2D,
    p4: Point2D,
) -> bool:
    """Check whether segment p1–p2 intersects segment p3–p4.

    Args:
        p1: Start of the first segment (e.g. source).
        p2: End of the first segment (e.g. target point).
        p3: Start of the second segment (e.g. barrier start).
        p4: End of the second segment (e.g. barrier end).
    Returns:
        True if the closed segments share at least one point.
    """
    o1 = _orientation(p1, p2, p3)
    o2 = _orientation(p1, p2, p4)
    o3 = _orientation(p3, p4, p1)
    o4 = _orientation(p3, p4, p2)

    if o1 != o2 and o3 != o4:
        return True

    # Collinear / touching cases
    if o1 == 0 and _on_segment(p1, p2, p3):
        return True
    if o2 == 0 and _on_segment(p1, p2, p4):
        return True
    if o3 == 0 and _on_segment(p3, p4, p1):
        return True
    if o4 == 0 and _on_segment(p3, p4, p2):
        return True
    return False


def distance(p: Point2D, q: Point2D) -> float:
    """Euclidean distance between two points [scene units]."""
    return math.hypot(q.x - p.x, q.y - p.y)


def calibrate_scale_factor(
    p1: Point2D,
    p2: Point2D,
    known_distance_m: float,
) -> float | None:
    """Scale factor [pixels/m] from two calibration points.

    Args:
        p1: First calibration point [pixels].
        p2: Second calibration point [pixels].
        known_distance_m: Real distance between the points [m].
    Returns:
        Pixels per metre, or None if either distance is not positive.
    """
    pixel_distance = distance(p1, p2)
    if pixel_distance <= 0 or known_distance_m <= 0:
        return None
    return pixel_distance / known_distance_m
