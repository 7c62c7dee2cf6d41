"""Routing of path overlays through chains of edges.

A path is an ordered list of edges in which consecutive edges share a node.
:func:`calculate_directions_of_path_edges` works out which way each edge is
walked and :func:`calculate_path_points` turns the chain into a list of
drawable entries:

* a :class:`~linkgeom.vector.Vector` is a point reached by a straight line;
* a list of vectors holds an optional leading point (when its length is odd)
  followed by ``(control, end)`` pairs of quadratic Bezier segments;
* an :class:`~linkgeom.types.ArcSegment` is an elliptical arc along a
  self-loop.
"""

from __future__ import annotations

import logging
import math
import sys
from dataclasses import dataclass, replace
from typing import List, Mapping, Optional, Sequence

from .config import PathStyle
from .curve import calculate_bezier_curve_control_point, move_on_circumference
from .edge import EdgeState
from .line import Line, inverse_line
from .logging_utils import apply_debug_logging
from .point import (
    circle_circle_intersection,
    line_circle_intersection,
    line_circle_intersection_near,
    line_line_intersection,
)
from .shape import ShapeStyle, node_radius
from .types import (
    ArcSegment,
    Curved,
    EdgeId,
    EdgeKind,
    EdgeObject,
    GeometryPreconditionError,
    Looped,
    NodeId,
    PositionOrCurve,
    SceneError,
    Straight,
)
from .vector import Vector, distance, float_divide

logger = logging.getLogger(__name__)

EPSILON = sys.float_info.epsilon * 100


@dataclass(frozen=True)
class EdgeLine:
    """An edge oriented in the path's walking order."""

    edge_id: EdgeId
    source: NodeId
    target: NodeId
    line: Line
    kind: EdgeKind


# ---------------------------------------------------------------------------
# Direction inference
# ---------------------------------------------------------------------------


def _same_pair(a: EdgeObject, b: EdgeObject) -> bool:
    return sorted((a.edge.source, a.edge.target)) == sorted((b.edge.source, b.edge.target))


def _find_joint_node(edges: Sequence[EdgeObject], index: int) -> Optional[NodeId]:
    """Node through which the walk leaves ``edges[index]``, or ``None`` if undecidable.

    Runs of edges joining the same two nodes are skipped until an edge that
    disambiguates the walk is found; each skipped edge flips the side.
    """

    k = index
    joint: Optional[NodeId] = None
    while k + 1 < len(edges):
        current = edges[k].edge
        following = edges[k + 1].edge
        if current.is_loop:
            joint = current.source
            break
        if following.is_loop:
            joint = following.source
            break
        if _same_pair(edges[k], edges[k + 1]):
            k += 1
            continue
        common = {current.source, current.target} & {following.source, following.target}
        if not common:
            return None
        joint = common.pop()
        break
    if joint is None:
        return None
    if (k - index) % 2 == 0:
        return joint
    edge = edges[k].edge
    return edge.source if edge.target == joint else edge.target


def calculate_directions_of_path_edges(edges: Sequence[EdgeObject]) -> List[bool]:
    """Walking direction of each edge: ``True`` means source to target."""

    length = len(edges)
    if length == 0:
        return []
    if length == 1:
        return [True]

    directions: List[bool] = []
    last_node: Optional[NodeId] = None
    for i, obj in enumerate(edges):
        source, target = obj.edge.source, obj.edge.target
        if i == 0:
            if length > 2:
                joint = _find_joint_node(edges, 0)
                is_forward = True if joint is None else target == joint
            else:
                is_forward = target in (edges[1].edge.source, edges[1].edge.target)
        elif source == target:
            is_forward = True
        else:
            is_forward = last_node == source
        directions.append(is_forward)
        last_node = target if is_forward else source
    return directions


# ---------------------------------------------------------------------------
# Point sequence
# ---------------------------------------------------------------------------


def _edge_line(obj: EdgeObject, direction: bool, state: EdgeState) -> EdgeLine:
    source, target = obj.edge.source, obj.edge.target
    position = state.origin
    kind: EdgeKind = Straight()
    if state.loop is not None:
        loop = state.loop
        if not direction:
            loop = replace(loop, is_clockwise=not loop.is_clockwise)
        kind = Looped(loop)
    elif state.curve is not None:
        curve = state.curve
        if not direction:
            curve = replace(curve, theta=-curve.theta)
        kind = Curved(curve)
    if not direction:
        position = inverse_line(position)
        source, target = target, source
    return EdgeLine(obj.edge_id, source, target, Line.from_line_position(position), kind)


def _slope(line: Line) -> float:
    return float_divide(line.target.y - line.source.y, line.target.x - line.source.x)


def _within(point: Vector, center: Vector, radius: float) -> bool:
    return distance(point, center) <= radius + 1e-9 * max(1.0, radius)


def _intersection_of_lines(prev: EdgeLine, next_: EdgeLine, node_pos: Vector) -> Optional[Vector]:
    pk, nk = prev.kind, next_.kind
    if isinstance(pk, Looped) or isinstance(nk, Looped):
        return None
    if isinstance(pk, Curved):
        if isinstance(nk, Curved):
            if prev.line.target.is_equal_to(next_.line.source):
                return prev.line.target
            return circle_circle_intersection(
                pk.curve.circle.center,
                pk.curve.circle.radius,
                nk.curve.circle.center,
                nk.curve.circle.radius,
                pk.curve.center,
            )
        if isinstance(nk, Straight):
            return line_circle_intersection_near(
                next_.line.target,
                next_.line.source,
                pk.curve.circle.center,
                pk.curve.circle.radius,
                node_pos,
            )
        raise TypeError(f"unknown edge kind: {nk!r}")
    if isinstance(pk, Straight):
        if isinstance(nk, Curved):
            return line_circle_intersection(
                prev.line.source, prev.line.target, nk.curve.circle.center, nk.curve.circle.radius
            )
        if isinstance(nk, Straight):
            prev_slope = _slope(prev.line)
            next_slope = _slope(next_.line)
            parallel = (not math.isfinite(prev_slope) and not math.isfinite(next_slope)) or abs(
                prev_slope - next_slope
            ) < EPSILON
            if parallel:
                return None
            return line_line_intersection(prev.line, next_.line)
        raise TypeError(f"unknown edge kind: {nk!r}")
    raise TypeError(f"unknown edge kind: {pk!r}")


def _intersection_of_line_and_node(
    edge: EdgeLine, center: Vector, radius: float, target_side: bool
) -> Optional[Vector]:
    kind = edge.kind
    if isinstance(kind, Straight):
        if target_side:
            return line_circle_intersection(edge.line.source, edge.line.target, center, radius)
        return line_circle_intersection(edge.line.target, edge.line.source, center, radius)
    if isinstance(kind, Curved):
        return circle_circle_intersection(
            center, radius, kind.curve.circle.center, kind.curve.circle.radius, kind.curve.center
        )
    if isinstance(kind, Looped):
        end = edge.line.target if target_side else edge.line.source
        return end if _within(end, center, radius) else None
    raise TypeError(f"unknown edge kind: {kind!r}")


def _calculate_edge_of_node(
    edge: EdgeLine,
    margin: float,
    node_positions: Mapping[NodeId, Vector],
    at_source: bool,
) -> Vector:
    kind = edge.kind
    if isinstance(kind, Curved):
        move = float_divide(margin, kind.curve.circle.radius)
        if kind.curve.theta > 0:
            move = -move
        if not at_source:
            move = -move
        start = edge.line.source if at_source else edge.line.target
        return move_on_circumference(start, kind.curve.circle.center, move)
    if isinstance(kind, Looped):
        move = float_divide(margin, kind.loop.radius[0])
        if not kind.loop.is_clockwise:
            move = -move
        if not at_source:
            move = -move
        start = edge.line.source if at_source else edge.line.target
        return move_on_circumference(start, kind.loop.center, move)
    if isinstance(kind, Straight):
        node_id = edge.source if at_source else edge.target
        if at_source:
            source, target = edge.line.target, edge.line.source
        else:
            source, target = edge.line.source, edge.line.target
        center = node_positions.get(node_id)
        if center is None:
            return source
        p = line_circle_intersection(source, target, center, margin)
        return source if p is None else p
    raise TypeError(f"unknown edge kind: {kind!r}")


def calculate_loop_arc_segment(edge: EdgeLine, p1: Vector, p2: Vector) -> ArcSegment:
    """Arc along a self-loop edge from ``p1`` to ``p2``."""

    if not isinstance(edge.kind, Looped):
        raise GeometryPreconditionError(f"edge {edge.edge_id} has no loop")
    loop = edge.kind.loop
    return ArcSegment(
        p1=p1,
        p2=p2,
        radius=loop.radius,
        angle=0.0,
        large_arc=loop.is_large_arc,
        sweep=loop.is_clockwise,
    )


def _last_point(points: List[PositionOrCurve]) -> Optional[Vector]:
    if not points:
        return None
    last = points[-1]
    if isinstance(last, ArcSegment):
        return last.p2
    if isinstance(last, list):
        return last[-1]
    return last


def _first_non_null(*values: Optional[Vector]) -> Vector:
    for value in values:
        if value is not None:
            return value
    raise GeometryPreconditionError("no fallback point available")


def _closer(point: Vector, a: Vector, b: Vector) -> Vector:
    return a if distance(point, a) < distance(point, b) else b


def _transit(
    prev: EdgeLine,
    next_: EdgeLine,
    node_pos: Vector,
    radius: float,
    core_radius: float,
) -> List[Vector]:
    cross_point = _intersection_of_lines(prev, next_, node_pos)

    prev_core = _intersection_of_line_and_node(prev, node_pos, core_radius, True)
    next_core = _intersection_of_line_and_node(next_, node_pos, core_radius, False)
    prev_node = _intersection_of_line_and_node(prev, node_pos, radius, True)
    next_node = _intersection_of_line_and_node(next_, node_pos, radius, False)

    if cross_point is not None:
        d = distance(cross_point, node_pos)
        if d < core_radius:
            # crossing inside the core circle: it becomes the control point
            return [
                _first_non_null(prev_core, prev_node, prev.line.target),
                cross_point,
                _first_non_null(next_core, next_node, next_.line.source),
            ]
        if d <= radius:
            # crossing inside the node: transit where the lines pass closest to it
            if prev_node is not None and prev_core is not None:
                p1 = _closer(cross_point, prev_core, prev_node)
            else:
                p1 = prev_node or prev.line.target
            if next_node is not None and next_core is not None:
                p2 = _closer(cross_point, next_core, next_node)
            else:
                p2 = next_node or next_.line.source
            return [p1, cross_point, p2]
        # crossing outside the node: turn around the node center
        if prev_core is not None and next_core is not None:
            return [prev_core, node_pos, next_core]
        if prev_node is not None and next_node is not None:
            return [prev_node, node_pos, next_node]
        return [
            _first_non_null(prev_core, prev_node, prev.line.target),
            node_pos,
            _first_non_null(next_core, next_node, next_.line.source),
        ]

    if prev_core is not None and next_core is not None:
        return [prev_core, node_pos, next_core]
    if prev_node is not None and next_node is not None:
        return [prev_node, node_pos, next_node]
    return [prev.line.target, node_pos, next_.line.source]


def _node_radius(node_shapes: Mapping[NodeId, ShapeStyle], node_id: NodeId, scale: float) -> float:
    try:
        shape = node_shapes[node_id]
    except KeyError:
        raise SceneError(f"path references node {node_id!r} without a shape") from None
    return node_radius(shape) * scale


def calculate_path_points(
    edges: Sequence[EdgeObject],
    node_shapes: Mapping[NodeId, ShapeStyle],
    node_positions: Mapping[NodeId, Vector],
    edge_states: Mapping[EdgeId, EdgeState],
    scale: float,
    style: PathStyle,
) -> List[PositionOrCurve]:
    """Drawable entries for a path walking ``edges`` in order.

    ``style.margin`` shortens both ends of the path; with ``end_type ==
    "edgeOfNode"`` the end node's radius is added to it.  When the margin eats
    up the whole first (last) edge the first (last) entry is dropped.
    """

    if not edges:
        return []
    missing = [obj.edge_id for obj in edges if obj.edge_id not in edge_states]
    if missing:
        raise SceneError(f"path references edges without geometry: {', '.join(missing)}")

    directions = calculate_directions_of_path_edges(edges)
    lines = [_edge_line(obj, directions[i], edge_states[obj.edge_id]) for i, obj in enumerate(edges)]
    margin = style.margin
    edge_of_node = style.end_type == "edgeOfNode"
    curve_in_node = style.curve_in_node

    points: List[PositionOrCurve] = []
    overrun_start = False
    overrun_end = False

    # start
    first = lines[0]
    if isinstance(first.kind, Looped):
        points.append(first.line.source if margin <= 0 else _calculate_edge_of_node(first, margin, node_positions, True))
    else:
        radius = _node_radius(node_shapes, first.source, scale)
        line_margin = margin + (radius if edge_of_node else 0.0)
        points.append(
            first.line.source if line_margin <= 0 else _calculate_edge_of_node(first, line_margin, node_positions, True)
        )
        if margin > 0:
            far_radius = _node_radius(node_shapes, first.target, scale)
            if distance(first.line.source, first.line.target) <= line_margin + far_radius:
                overrun_start = True

    # transits
    for i in range(1, len(lines)):
        prev = lines[i - 1]
        next_ = lines[i]
        node_id = next_.source
        node_pos = node_positions.get(node_id, Vector(0.0, 0.0))
        radius = _node_radius(node_shapes, node_id, scale)
        core_radius = max(radius * (2 / 3), radius - 4 * scale)

        pos = _transit(prev, next_, node_pos, radius, core_radius)

        prev_kind = prev.kind
        if isinstance(prev_kind, Curved):
            last_point = _last_point(points)
            next_point = pos[0] if curve_in_node else pos[1]
            control = calculate_bezier_curve_control_point(
                last_point, prev_kind.curve.circle.center, next_point, prev_kind.curve.theta
            )
            if curve_in_node:
                points.append([*control, *pos])
            else:
                points.append([*control, next_point])
            continue
        if isinstance(prev_kind, Looped):
            points.append(calculate_loop_arc_segment(prev, _last_point(points), prev.line.target))
        if curve_in_node:
            points.append(pos)
        elif isinstance(next_.kind, Curved):
            # the curve starts from the node center
            points.append(pos[1])
        else:
            points.append(pos[0])
            points.append(pos[2])

    # end
    last = lines[-1]
    if isinstance(last.kind, Looped):
        end_point = last.line.target if margin <= 0 else _calculate_edge_of_node(last, margin, node_positions, False)
        points.append(calculate_loop_arc_segment(last, _last_point(points), end_point))
    else:
        radius = _node_radius(node_shapes, last.target, scale)
        line_margin = margin + (radius if edge_of_node else 0.0)
        end_point = (
            last.line.target if line_margin <= 0 else _calculate_edge_of_node(last, line_margin, node_positions, False)
        )
        if isinstance(last.kind, Curved):
            control = calculate_bezier_curve_control_point(
                _last_point(points), last.kind.curve.circle.center, end_point, last.kind.curve.theta
            )
            points.append([*control, end_point])
        else:
            points.append(end_point)
        if margin > 0:
            far_radius = _node_radius(node_shapes, last.source, scale)
            if distance(last.line.source, last.line.target) <= line_margin + far_radius:
                overrun_end = True

    if overrun_start:
        points.pop(0)
        if points and isinstance(points[0], list):
            points.insert(0, points[0][0])
    if overrun_end and points:
        points.pop()

    logger.debug("Path over %d edge(s) produced %d entries", len(edges), len(points))
    return points


apply_debug_logging(globals(), logger=logger)
