"""
Geometry utilities for road network growth.
Foundation module, works on plain (x, y) sites.
"""

import math
from typing import Optional, Tuple

from shapely.geometry import LineString

from ..contracts import Site


def segment_intersection(
    a_start: Site,
    a_end: Site,
    b_start: Site,
    b_end: Site
) -> Optional[Tuple[Site, bool]]:
    """
    Intersect the lines through two segments.

    Each line is written as a*x + b*y = c and solved with the determinant
    method.

    Args:
        a_start, a_end: First segment
        b_start, b_end: Second segment

    Returns:
        None for parallel lines, otherwise (point, is_proper_crossing) where
        is_proper_crossing tells whether the point lies within both segments
        (bounds inclusive).
    """
    a1 = a_end.y - a_start.y
    b1 = a_start.x - a_end.x
    c1 = a1 * a_start.x + b1 * a_start.y

    a2 = b_end.y - b_start.y
    b2 = b_start.x - b_end.x
    c2 = a2 * b_start.x + b2 * b_start.y

    determinant = a1 * b2 - a2 * b1
    if determinant == 0.0:
        return None

    x = (b2 * c1 - b1 * c2) / determinant
    y = (a1 * c2 - a2 * c1) / determinant

    passing = (
        (x - a_start.x) * (x - a_end.x) <= 0.0
        and (y - a_start.y) * (y - a_end.y) <= 0.0
        and (x - b_start.x) * (x - b_end.x) <= 0.0
        and (y - b_start.y) * (y - b_end.y) <= 0.0
    )

    return Site(x, y), passing


def point_to_line_distance(point: Site, line_start: Site, line_end: Site) -> float:
    """
    Perpendicular distance from point to the infinite line through a segment.

    Args:
        point: Query point
        line_start, line_end: Two points on the line

    Returns:
        Distance in the same units as the inputs. A degenerate line falls back
        to the distance to its single point.
    """
    dx = line_end.x - line_start.x
    dy = line_end.y - line_start.y
    norm = math.hypot(dx, dy)
    if norm == 0.0:
        return point.distance_to(line_start)

    return abs(dy * point.x - dx * point.y + line_end.x * line_start.y - line_end.y * line_start.x) / norm


def midpoint(a: Site, b: Site) -> Site:
    return Site((a.x + b.x) * 0.5, (a.y + b.y) * 0.5)


def segment_to_linestring(start: Site, end: Site) -> LineString:
    """Convert a segment to a shapely LineString for export."""
    return LineString([(start.x, start.y), (end.x, end.y)])
