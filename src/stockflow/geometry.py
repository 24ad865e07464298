"""
Geometry helpers shared by layout and routing.

Rectangles are Placement objects; Side.midpoint also reads Placement.center,
so plain (x, y, width, height) records are not accepted. Points are (x, y)
tuples.
"""

import math
from typing import Iterable, Optional, Sequence, Tuple

from .models import Placement, Point, Route, Side


def clamp(value: float, low: float, high: float) -> float:
    """Clamp a value between low and high."""
    return min(max(value, low), high)


def get_center(rect: Placement) -> Point:
    """Get the center point of a rectangle."""
    return (rect.x + rect.width / 2, rect.y + rect.height / 2)


def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def average_point(points: Sequence[Point]) -> Optional[Point]:
    """Mean of the given points, or None when there are none."""
    if not points:
        return None
    n = len(points)
    return (sum(p[0] for p in points) / n, sum(p[1] for p in points) / n)


def best_side(rect: Placement, target: Point) -> Side:
    """
    Pick the side of rect whose outward direction best faces target.

    The horizontal offset is divided by the rectangle's aspect ratio so a
    wide box does not claim LEFT/RIGHT for targets that sit mostly above or
    below it. A target at the exact center defaults to RIGHT.
    """
    cx, cy = get_center(rect)
    dx = target[0] - cx
    dy = target[1] - cy

    if dx == 0 and dy == 0:
        return Side.RIGHT

    if rect.height > 0 and rect.width > 0:
        normalized_dx = dx / (rect.width / rect.height)
    else:
        normalized_dx = dx

    if abs(normalized_dx) > abs(dy):
        return Side.RIGHT if dx > 0 else Side.LEFT
    return Side.BOTTOM if dy > 0 else Side.TOP


def sample_bezier(
    start: Point, c1: Point, c2: Point, end: Point, t: float
) -> Point:
    """Point on a cubic bezier curve at parameter t in [0, 1]."""
    mt = 1 - t
    a = mt * mt * mt
    b = 3 * mt * mt * t
    c = 3 * mt * t * t
    d = t * t * t
    return (
        a * start[0] + b * c1[0] + c * c2[0] + d * end[0],
        a * start[1] + b * c1[1] + c * c2[1] + d * end[1],
    )


def point_in_rect(point: Point, rect: Placement, padding: float = 0) -> bool:
    """Check if a point lies inside rect grown by padding on every side."""
    return (
        rect.x - padding <= point[0] <= rect.x + rect.width + padding
        and rect.y - padding <= point[1] <= rect.y + rect.height + padding
    )


def bezier_intersects_rect(
    start: Point,
    c1: Point,
    c2: Point,
    end: Point,
    rect: Placement,
    padding: float = 2,
    samples: int = 20,
) -> bool:
    """
    Check if a bezier curve passes through a rectangle.

    The curve is sampled at the interior parameters i / samples for
    i in 1..samples-1, so the endpoints themselves (which sit on node
    boundaries) never count as a hit.
    """
    for i in range(1, samples):
        point = sample_bezier(start, c1, c2, end, i / samples)
        if point_in_rect(point, rect, padding):
            return True
    return False


def rects_intersect(a: Placement, b: Placement) -> bool:
    """Check if two rectangles overlap (touching edges count)."""
    return not (
        a.x + a.width < b.x
        or b.x + b.width < a.x
        or a.y + a.height < b.y
        or b.y + b.height < a.y
    )


def bounding_box(
    rects: Iterable[Placement],
) -> Optional[Tuple[float, float, float, float]]:
    """
    Get the bounding box of several rectangles.

    Returns:
        (x, y, width, height), or None when rects is empty.
    """
    rects = list(rects)
    if not rects:
        return None

    min_x = min(r.x for r in rects)
    min_y = min(r.y for r in rects)
    max_x = max(r.x + r.width for r in rects)
    max_y = max(r.y + r.height for r in rects)
    return (min_x, min_y, max_x - min_x, max_y - min_y)


def zoom_to_fit(
    rects: Iterable[Placement],
    view_width: float,
    view_height: float,
    padding: float = 50,
) -> Tuple[float, float, float]:
    """
    Calculate a viewport transform that fits every rectangle in view.

    Zoom never exceeds 1, so small diagrams are shown at natural size.

    Returns:
        (offset_x, offset_y, zoom) such that a diagram point p is drawn at
        offset + p * zoom.
    """
    bounds = bounding_box(rects)
    if bounds is None:
        return (0.0, 0.0, 1.0)

    x, y, width, height = bounds
    content_width = width + padding * 2
    content_height = height + padding * 2

    # A zero-sized content box fits at any zoom
    zoom_x = view_width / content_width if content_width > 0 else 1.0
    zoom_y = view_height / content_height if content_height > 0 else 1.0
    zoom = min(zoom_x, zoom_y, 1.0)

    center_x = x + width / 2
    center_y = y + height / 2
    return (
        view_width / 2 - center_x * zoom,
        view_height / 2 - center_y * zoom,
        zoom,
    )


def svg_path(route: Route) -> str:
    """Format a route as an SVG path string using a cubic curve command."""
    sx, sy = route.start
    ax, ay = route.c1
    bx, by = route.c2
    ex, ey = route.end
    return f"M {sx:g} {sy:g} C {ax:g} {ay:g}, {bx:g} {by:g}, {ex:g} {ey:g}"
