"""Projection and intersection routines.

Every routine here reports "no geometric solution" as ``None``.  Degenerate
input (zero-length lines, parallel lines) is not guarded: the result carries
``nan``/``inf`` coordinates and callers are expected to check
:func:`linkgeom.vector.is_finite` or test for parallelism beforehand.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple, Union

import numpy as np

from .line import Line
from .vector import Vector, add, cross, distance, length, length_squared, multiply_scalar, normalize, subtract

# relative slack on squared distances when deciding whether a point lies inside a circle
CONTAINMENT_TOLERANCE = 1e-10


def nearest_point_on_line(p: Vector, line: Line) -> Vector:
    """Orthogonal projection of ``p`` onto the infinite line through ``line``."""

    n = normalize(line.v)
    a = subtract(p, line.source)
    return add(line.source, multiply_scalar(n, n.dot(a)))


def _circle_contains(point: Vector, center: Vector, radius: float) -> bool:
    r2 = radius * radius
    return length_squared(subtract(point, center)) - r2 <= CONTAINMENT_TOLERANCE * max(1.0, r2)


def _chord_half(line: Line, center: Vector, radius: float) -> Optional[Tuple[Vector, Optional[Vector]]]:
    # foot of the perpendicular from the center and the offset to both roots
    h = nearest_point_on_line(center, line)
    hp = length(subtract(h, center))
    if radius < hp:
        return None
    if radius == hp:
        return h, None
    t = math.sqrt(radius * radius - hp * hp)
    return h, multiply_scalar(normalize(line.v), t)


def line_circle_intersection(
    source: Vector, target: Vector, center: Vector, radius: float
) -> Optional[Vector]:
    """Point where the ray from ``target`` back towards ``source`` leaves the circle.

    ``target`` must lie inside (or on) the circle, otherwise ``None`` is returned.
    """

    if not _circle_contains(target, center, radius):
        return None
    chord = _chord_half(Line(source, target), center, radius)
    if chord is None:
        return None
    h, tv = chord
    if tv is None:
        return h
    return subtract(h, tv)


def line_circle_intersection_near(
    source: Vector, target: Vector, center: Vector, radius: float, near: Vector
) -> Optional[Vector]:
    """Like :func:`line_circle_intersection` but picks the root closer to ``near``.

    Roots whose distances to ``near`` differ by less than 2 units are treated as
    a tie and resolved the same way as the plain variant.
    """

    if not _circle_contains(target, center, radius):
        return None
    chord = _chord_half(Line(source, target), center, radius)
    if chord is None:
        return None
    h, tv = chord
    if tv is None:
        return h
    ip1 = add(h, tv)
    ip2 = subtract(h, tv)
    d1 = distance(near, ip1)
    d2 = distance(near, ip2)
    if abs(d1 - d2) < 2:
        return ip2
    return ip1 if d1 < d2 else ip2


def line_line_intersection(line1: Line, line2: Line) -> Vector:
    """Intersection of two infinite lines.

    Parallel or collinear lines produce non-finite coordinates.
    """

    v = subtract(line2.source, line1.source)
    with np.errstate(divide="ignore", invalid="ignore"):
        t2 = float(np.float64(cross(v, line1.v)) / np.float64(cross(line1.v, line2.v)))
    return add(line2.source, multiply_scalar(line2.v, t2))


def circle_circle_intersection(
    center1: Vector,
    radius1: float,
    center2: Vector,
    radius2: float,
    near: Optional[Vector] = None,
) -> Union[None, Vector, Tuple[Vector, Vector]]:
    """Intersection of two circles.

    Returns ``None`` when the circles do not touch (or share a center), the
    contact point when they are tangent, and otherwise the root nearest to
    ``near``.  Without ``near`` both roots of the generic case are returned as a
    tuple.
    """

    v12 = subtract(center2, center1)
    a = length(v12)

    sum_r = radius1 + radius2
    if sum_r < a:
        return None
    sub_r = abs(radius1 - radius2)
    if a < sub_r:
        return None
    if a == 0:
        return None

    n1 = normalize(v12)
    if a == sum_r:
        return add(center1, multiply_scalar(n1, radius1))
    if a == sub_r:
        return add(center1, multiply_scalar(n1, radius1 if radius1 > radius2 else -radius1))

    b = radius1
    c = radius2
    cos = (a * a + b * b - c * c) / (2 * a * b)
    rc = b * cos
    rs = math.sqrt(max(b * b - rc * rc, 0.0))
    n2 = Vector(-n1.y, n1.x)

    base = add(center1, multiply_scalar(n1, rc))
    result1 = add(base, multiply_scalar(n2, rs))
    result2 = subtract(base, multiply_scalar(n2, rs))
    if near is None:
        return result1, result2
    return result1 if distance(result1, near) < distance(result2, near) else result2


__all__ = [
    "CONTAINMENT_TOLERANCE",
    "circle_circle_intersection",
    "line_circle_intersection",
    "line_circle_intersection_near",
    "line_line_intersection",
    "nearest_point_on_line",
]
