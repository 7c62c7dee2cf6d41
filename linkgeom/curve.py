"""Circular-arc geometry for curved edges, curved path segments and self-loops."""

from __future__ import annotations

import math
from typing import List, Optional, Tuple

import numpy as np

from .line import Line, LinePosition, apply_margin, center_of_line_position, perpendicular_line
from .point import circle_circle_intersection, line_line_intersection
from .types import CircleSpec, Curve, Loop
from .vector import Vector, add, as_vector, cos_sin, cross, float_divide, multiply_scalar, normalize, rotate, subtract

HALF_PI = math.pi / 2
TWO_PI = math.pi * 2


def move_on_circumference(pos: Vector, center: Vector, radian: float) -> Vector:
    """Rotate ``pos`` about ``center`` by ``radian`` (counter-clockwise)."""

    dx = pos.x - center.x
    dy = pos.y - center.y
    cos_r, sin_r = cos_sin(radian)
    return Vector(dx * cos_r - dy * sin_r + center.x, dx * sin_r + dy * cos_r + center.y)


def reverse_angle_radian(theta: float) -> float:
    """The same end direction reached the other way around the circle."""

    if theta > 0:
        return -(TWO_PI - theta)
    return TWO_PI + theta


def calculate_relative_angle_radian(line1: Line, line2: Line) -> float:
    v1 = line1.v
    v2 = line2.v
    return math.atan2(v1.y * v2.x - v1.x * v2.y, v1.x * v2.x + v1.y * v2.y)


def _half_arc_controls(
    center: Vector,
    middle: Vector,
    end_tangent: Line,
    middle_tangent: Line,
    theta_half: float,
    from_end: bool,
) -> List[Vector]:
    if abs(theta_half) < HALF_PI:
        return [line_line_intersection(end_tangent, middle_tangent)]
    # wider than a quarter circle: pass through the half's own midpoint
    via = move_on_circumference(middle, center, theta_half / 2)
    via_tangent = perpendicular_line(Line(center, via))
    if from_end:
        cp1 = line_line_intersection(end_tangent, via_tangent)
        cp2 = line_line_intersection(via_tangent, middle_tangent)
    else:
        cp1 = line_line_intersection(middle_tangent, via_tangent)
        cp2 = line_line_intersection(via_tangent, end_tangent)
    return [cp1, via, cp2]


def calculate_bezier_curve_control_point(
    p1: Vector, center: Vector, p2: Vector, theta0: float
) -> List[Vector]:
    """Control and via points approximating the arc ``p1 -> p2`` around ``center``.

    ``theta0`` gives the intended direction of rotation; when its sign
    disagrees with the short arc the long way around is taken.  The result is
    ``[first-half controls..., middle, second-half controls...]`` where each
    half contributes one control point, or ``[control, via, control]`` when the
    half spans a quarter circle or more.  Consecutive ``(control, point)`` pairs
    are quadratic Bezier segments.
    """

    center_to_source = Line(center, p1)
    center_to_target = Line(center, p2)

    theta = calculate_relative_angle_radian(center_to_source, center_to_target)
    if theta0 * theta < 0:
        theta = reverse_angle_radian(theta)
    middle = move_on_circumference(p1, center, -theta / 2)
    center_to_middle = Line(center, middle)
    middle_tangent = perpendicular_line(center_to_middle)

    control: List[Vector] = []
    theta1 = calculate_relative_angle_radian(center_to_source, center_to_middle)
    control.extend(
        _half_arc_controls(center, middle, perpendicular_line(center_to_source), middle_tangent, theta1, True)
    )
    control.append(middle)
    theta2 = calculate_relative_angle_radian(center_to_target, center_to_middle)
    control.extend(
        _half_arc_controls(center, middle, perpendicular_line(center_to_target), middle_tangent, theta2, False)
    )
    return control


def calculate_circle_center_and_radius_by_3_points(
    p1: Vector, p2: Vector, p3: Vector
) -> Tuple[Vector, float]:
    """Circle through three points.

    Collinear points produce non-finite results; coincident points return
    ``(p1, 0)``.
    """

    x1, y1 = p1.x, p1.y
    x2, y2 = p2.x, p2.y
    x3, y3 = p3.x, p3.y
    x12 = x1 - x2
    y12 = y1 - y2
    x32 = x3 - x2
    y32 = y3 - y2

    if (x12 == 0 and y12 == 0) or (x32 == 0 and y32 == 0):
        return p1, 0.0

    a = x12 * (x1 + x2) + y12 * (y1 + y2)
    b = x32 * (x3 + x2) + y32 * (y3 + y2)
    denominator = np.float64(2 * x12 * y32 - 2 * y12 * x32)
    with np.errstate(divide="ignore", invalid="ignore"):
        x = float((y32 * a - y12 * b) / denominator)
        y = float((-x32 * a + x12 * b) / denominator)
    radius = math.sqrt((x1 - x) ** 2 + (y1 - y) ** 2)
    return Vector(x, y), radius


def calculate_curve_position_and_state(
    origin: LinePosition,
    shifted: LinePosition,
    shift: float,
    source_margin: float,
    target_margin: float,
) -> Tuple[LinePosition, Optional[Curve]]:
    """Displayed position and arc of a curved edge.

    ``origin`` joins the node centers and ``shifted`` is the same line moved
    sideways by the edge's offset in its group; the arc passes through both
    node centers and the midpoint of ``shifted``.  A zero ``shift`` gives a
    straight edge (``curve`` is ``None``).
    """

    source, target = as_vector(origin.p1), as_vector(origin.p2)
    shifted_center = center_of_line_position(shifted)

    if shift == 0:
        if source_margin == 0 and target_margin == 0:
            return origin, None
        return apply_margin(origin, source_margin, target_margin), None

    center, radius = calculate_circle_center_and_radius_by_3_points(source, target, shifted_center)
    theta0 = calculate_relative_angle_radian(Line(center, source), Line(center, shifted_center))

    if source_margin == 0 and target_margin == 0:
        position = LinePosition(source, target)
    else:
        source_move = float_divide(source_margin, radius)
        target_move = float_divide(target_margin, radius)
        if theta0 > 0:
            source_move = -source_move
            target_move = -target_move
        position = LinePosition(
            move_on_circumference(source, center, source_move),
            move_on_circumference(target, center, -target_move),
        )

        theta1 = calculate_relative_angle_radian(Line(center, source), Line(center, target))
        theta2 = calculate_relative_angle_radian(Line(center, position.p1), Line(center, position.p2))
        if theta0 * theta1 < 0:
            theta1 = reverse_angle_radian(theta1)
            if theta0 * theta2 < 0:
                theta2 = reverse_angle_radian(theta2)
        if theta1 * theta2 < 0:
            # margins overlap: short stub at the top of the arc
            shifted_line = Line.from_line_position(shifted)
            stub = add(shifted_center, multiply_scalar(normalize(shifted_line.v), 0.5))
            return LinePosition(shifted_center, stub), None

    control = calculate_bezier_curve_control_point(position.p1, center, position.p2, theta0)
    curve = Curve(
        center=shifted_center,
        theta=theta0,
        circle=CircleSpec(center, radius),
        control=control,
    )
    return position, curve


def calculate_loop(
    node_pos: Vector,
    node_radius: float,
    loop_radius: float,
    angle_degree: float,
    is_clockwise: bool,
    source_margin: float = 0.0,
    target_margin: float = 0.0,
) -> Tuple[LinePosition, Loop]:
    """Endpoints and arc of a self-loop on a node.

    The loop circle is centered at ``sqrt(R**2 + r**2)`` from the node center
    in direction ``angle_degree``, which makes it cross the node boundary at a
    right angle.  The loop is drawn as the large arc between the two crossing
    points; ``is_clockwise`` selects the sweep direction.  Margins move the
    endpoints along the loop circle, away from the node.
    """

    direction = rotate(Vector(1.0, 0.0), math.radians(angle_degree))
    loop_center = add(node_pos, multiply_scalar(direction, math.hypot(node_radius, loop_radius)))

    roots = circle_circle_intersection(node_pos, node_radius, loop_center, loop_radius)
    if isinstance(roots, tuple):
        first, second = roots
    else:
        # zero radius on either side: the circles only touch
        first = second = roots if roots is not None else node_pos

    # ``first`` sits on the side the sweep starts from
    if cross(direction, subtract(first, loop_center)) > 0:
        first, second = second, first
    if not is_clockwise:
        first, second = second, first

    sign = 1.0 if is_clockwise else -1.0
    if loop_radius > 0 and (source_margin != 0 or target_margin != 0):
        first = move_on_circumference(first, loop_center, sign * source_margin / loop_radius)
        second = move_on_circumference(second, loop_center, -sign * target_margin / loop_radius)

    loop = Loop(
        center=loop_center,
        radius=(loop_radius, loop_radius),
        angle=angle_degree,
        is_large_arc=True,
        is_clockwise=is_clockwise,
    )
    return LinePosition(first, second), loop


__all__ = [
    "calculate_bezier_curve_control_point",
    "calculate_circle_center_and_radius_by_3_points",
    "calculate_curve_position_and_state",
    "calculate_loop",
    "calculate_relative_angle_radian",
    "move_on_circumference",
    "reverse_angle_radian",
]
