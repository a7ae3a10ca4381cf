"""
Vector math used by placement, force computation and edge routing.

All functions are pure and operate on (x, y) tuples. Screen coordinates are
assumed: x grows to the right, y grows downward, so a positive rotation
angle turns clockwise on screen.
"""

from __future__ import annotations

import math

from .types import Point

# Distances below this are clamped before any force is computed.
MIN_FORCE_DISTANCE = 1.0

# Scales the logarithmic spring so it stays comparable to the repulsion term.
ATTRACTION_DAMPING = 0.1


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def midpoint(a: Point, b: Point) -> Point:
    """Midpoint of segment ab."""
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


def normalize(vector: Point) -> Point:
    """Unit vector in the direction of ``vector``; the zero vector stays zero."""
    length = math.hypot(vector[0], vector[1])
    if length == 0.0:
        return (0.0, 0.0)
    return (vector[0] / length, vector[1] / length)


def direction(frm: Point, to: Point) -> Point:
    """Unit vector pointing from ``frm`` to ``to``."""
    return normalize((to[0] - frm[0], to[1] - frm[1]))


def rotate(point: Point, pivot: Point, angle_degrees: float) -> Point:
    """
    Rotate a point around a pivot.

    Args:
        point: Point to rotate
        pivot: Center of rotation
        angle_degrees: Rotation angle in degrees

    Returns:
        The rotated point
    """
    radians = math.radians(angle_degrees)
    sin = math.sin(radians)
    cos = math.cos(radians)

    tx = point[0] - pivot[0]
    ty = point[1] - pivot[1]

    return (tx * cos - ty * sin + pivot[0], tx * sin + ty * cos + pivot[1])


def angle_degrees(frm: Point, to: Point) -> float:
    """Angle of the vector frm->to, in degrees, measured from the +x axis."""
    return math.degrees(math.atan2(to[1] - frm[1], to[0] - frm[0]))


def attractive_function(dist: float, force: float, scale: float) -> float:
    """
    Scalar attraction between two adjacent nodes.

    Grows logarithmically with distance so far-apart neighbours are not
    yanked together; negative (i.e. repulsive) below ``scale``.
    """
    if dist < MIN_FORCE_DISTANCE:
        dist = MIN_FORCE_DISTANCE
    return force * math.log(dist / scale) * ATTRACTION_DAMPING


def repelling_function(dist: float, scale: float) -> float:
    """Scalar inverse-square repulsion between any two nodes."""
    if dist < MIN_FORCE_DISTANCE:
        dist = MIN_FORCE_DISTANCE
    return scale / (dist * dist)


def attractive_force(frm: Point, to: Point, force: float, scale: float) -> Point:
    """Attraction vector acting on ``frm``, pulling it toward ``to``."""
    ux, uy = direction(frm, to)
    factor = attractive_function(distance(frm, to), force, scale)
    return (ux * factor, uy * factor)


def repelling_force(frm: Point, to: Point, scale: float) -> Point:
    """Repulsion vector acting on ``frm``, pushing it away from ``to``."""
    ux, uy = direction(frm, to)
    factor = -repelling_function(distance(frm, to), scale)
    return (ux * factor, uy * factor)


def linear_decay(initial: float, final: float, dist: float, threshold: float) -> float:
    """
    Interpolate from ``initial`` at distance 0 to ``final`` at ``threshold``.

    Distances at or beyond the threshold return ``final``.
    """
    if dist >= threshold:
        return final
    return initial + (final - initial) * dist / threshold


def bound_center_coordinate(value: float, low: float, high: float, radius: float) -> float:
    """
    Clamp a center coordinate so a node of ``radius`` stays inside [low, high].

    When the range is narrower than the node, the midpoint is returned.
    """
    if high - low < 2 * radius:
        return (low + high) / 2.0
    if value < low + radius:
        return low + radius
    if value > high - radius:
        return high - radius
    return value


def boundary_point(center: Point, radius: float, toward: Point) -> Point:
    """
    Point where the ray center->toward crosses a circle of ``radius``.

    If ``toward`` coincides with the center the rightmost point is returned.
    """
    dx = toward[0] - center[0]
    dy = toward[1] - center[1]
    length = math.hypot(dx, dy)
    if length < 1e-9:
        return (center[0] + radius, center[1])
    return (center[0] + dx / length * radius, center[1] + dy / length * radius)


def cross(origin: Point, a: Point, b: Point) -> float:
    """Z component of (a - origin) x (b - origin); its sign gives the side of b."""
    return (a[0] - origin[0]) * (b[1] - origin[1]) - (a[1] - origin[1]) * (b[0] - origin[0])


__all__ = [
    "MIN_FORCE_DISTANCE",
    "ATTRACTION_DAMPING",
    "distance",
    "midpoint",
    "normalize",
    "direction",
    "rotate",
    "angle_degrees",
    "attractive_function",
    "repelling_function",
    "attractive_force",
    "repelling_force",
    "linear_decay",
    "bound_center_coordinate",
    "boundary_point",
    "cross",
]
