"""Node shapes and the distance from a node's center to its drawn boundary."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple, Union

from .line import Line, LinePosition
from .point import line_circle_intersection, nearest_point_on_line
from .vector import Vector, add, as_vector, length, multiply_scalar, normalize, subtract


@dataclass(frozen=True)
class CircleShape:
    radius: float
    stroke_width: float = 0.0


@dataclass(frozen=True)
class RectShape:
    width: float
    height: float
    border_radius: float = 0.0
    stroke_width: float = 0.0


ShapeStyle = Union[CircleShape, RectShape]


@dataclass(frozen=True)
class LabelAnchor:
    above: Vector
    below: Vector


@dataclass(frozen=True)
class EdgeLabelArea:
    source: LabelAnchor
    target: LabelAnchor


def node_radius(shape: ShapeStyle) -> float:
    if isinstance(shape, CircleShape):
        return shape.radius
    if isinstance(shape, RectShape):
        return min(shape.width, shape.height) / 2
    raise TypeError(f"unsupported node shape: {shape!r}")


def node_size(shape: ShapeStyle) -> float:
    """Smallest extent of the node: the diameter of a circle, the short side of a rect."""

    if isinstance(shape, CircleShape):
        return shape.radius * 2
    if isinstance(shape, RectShape):
        return min(shape.width, shape.height)
    raise TypeError(f"unsupported node shape: {shape!r}")


def _distance_to_rect_boundary(
    source_pos: Vector, target_pos: Vector, rect: RectShape, scale: float
) -> float:
    # distance from the rect at ``target_pos`` to its border along the line from ``source_pos``
    center_line = Line(source_pos, target_pos)
    half_width = (rect.width + rect.stroke_width) / 2 * scale
    half_height = (rect.height + rect.stroke_width) / 2 * scale
    border_radius = (rect.border_radius + rect.stroke_width / 2) * scale if rect.border_radius > 0 else 0.0

    angle_v = math.fmod(center_line.v.angle() - math.pi / 2, math.pi)
    angle_h = math.pi / 2 - math.fmod(angle_v, math.pi)
    w = half_height * abs(math.tan(angle_v))
    h = half_width * abs(math.tan(angle_h))
    crossed_v = w <= half_width - border_radius
    crossed_h = h <= half_height - border_radius
    if crossed_v or crossed_h or border_radius == 0:
        if crossed_v:
            return math.sqrt(half_height ** 2 + w ** 2)
        return math.sqrt(half_width ** 2 + h ** 2)

    # the line meets one of the rounded corners
    left = target_pos.x - half_width + border_radius
    top = target_pos.y - half_height + border_radius
    right = target_pos.x + half_width - border_radius
    bottom = target_pos.y + half_height - border_radius
    corners = [Vector(left, top), Vector(right, top), Vector(right, bottom), Vector(left, bottom)]
    index = int(((center_line.v.angle_degree() + 360) % 360) // 90)
    corner = corners[index]
    point = line_circle_intersection(
        center_line.source,
        nearest_point_on_line(corner, center_line),
        corner,
        border_radius,
    )
    if point is None:
        return length(subtract(center_line.target, corner)) + border_radius
    return length(subtract(center_line.target, point))


def boundary_distance(other_pos: Vector, node_pos: Vector, shape: ShapeStyle, scale: float = 1.0) -> float:
    """Distance from ``node_pos`` to the boundary of ``shape`` towards ``other_pos``."""

    if isinstance(shape, CircleShape):
        return (shape.radius + shape.stroke_width / 2) * scale
    if isinstance(shape, RectShape):
        return _distance_to_rect_boundary(as_vector(other_pos), as_vector(node_pos), shape, scale)
    raise TypeError(f"unsupported node shape: {shape!r}")


def calculate_distances_from_center_of_node_to_end_of_node(
    source_pos: Vector,
    target_pos: Vector,
    source_shape: ShapeStyle,
    target_shape: ShapeStyle,
) -> Tuple[float, float]:
    """Boundary distances of both endpoint nodes along the line joining their centers."""

    return (
        boundary_distance(target_pos, source_pos, source_shape),
        boundary_distance(source_pos, target_pos, target_shape),
    )


def calculate_edge_label_area(
    position: LinePosition,
    stroke_width: float,
    margin: float,
    padding: float,
    scale: float,
) -> EdgeLabelArea:
    """Above/below anchor points on both ends of an edge for placing its labels.

    ``position`` is the segment between the node boundaries.  Above and below
    are swapped when the line points leftwards so that "above" stays on top.
    """

    line = Line.from_line_position(position)
    n = normalize(line.v)
    sv = line.source if padding == 0 else add(line.source, multiply_scalar(n, padding * scale))
    tv = line.target if padding == 0 else subtract(line.target, multiply_scalar(n, padding * scale))

    label_margin = (stroke_width / 2 + margin) * scale
    offset = multiply_scalar(Vector(-n.y, n.x), label_margin)
    source_above, source_below = subtract(sv, offset), add(sv, offset)
    target_above, target_below = subtract(tv, offset), add(tv, offset)

    angle = line.v.angle_degree()
    if angle < -90 or angle >= 90:
        source_above, source_below = source_below, source_above
        target_above, target_below = target_below, target_above
    return EdgeLabelArea(
        source=LabelAnchor(source_above, source_below),
        target=LabelAnchor(target_above, target_below),
    )


__all__ = [
    "CircleShape",
    "EdgeLabelArea",
    "LabelAnchor",
    "RectShape",
    "ShapeStyle",
    "boundary_distance",
    "calculate_distances_from_center_of_node_to_end_of_node",
    "calculate_edge_label_area",
    "node_radius",
    "node_size",
]
