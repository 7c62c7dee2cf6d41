"""Per-edge drawing state: shifted center line, margins, curve or loop."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from .config import GraphConfig
from .curve import calculate_curve_position_and_state, calculate_loop
from .group import EdgeGroupStates, calculate_edge_groups, calculate_edge_shifted_position, valid_stroke_width
from .line import LinePosition, apply_margin
from .logging_utils import apply_debug_logging
from .shape import ShapeStyle, calculate_distances_from_center_of_node_to_end_of_node, node_radius
from .types import Curve, Curved, Edge, EdgeId, EdgeKind, Loop, Looped, NodeId, Straight
from .vector import Vector, as_vector

logger = logging.getLogger(__name__)


@dataclass
class EdgeState:
    """Geometry of one edge as handed to the renderer.

    ``origin`` is the line between the node centers (shifted inside its group
    for straight edges), ``label_position`` runs between the node boundaries
    and ``position`` is the drawn segment with all margins applied.
    """

    id: EdgeId
    origin: LinePosition
    label_position: LinePosition
    position: LinePosition
    curve: Optional[Curve] = None
    loop: Optional[Loop] = None
    stroke_width: float = 1.0

    @property
    def kind(self) -> EdgeKind:
        if self.loop is not None:
            return Looped(self.loop)
        if self.curve is not None:
            return Curved(self.curve)
        return Straight()


def stroke_width_of(edge_id: EdgeId, edge: Edge, config: GraphConfig) -> float:
    return valid_stroke_width(edge_id, config.edge.width_of(edge))


def calculate_marker_margins(
    config: GraphConfig,
    stroke_width: float,
    shape_margins: Tuple[float, float],
) -> Tuple[float, float]:
    """Unscaled distances to keep free at the source and target ends."""

    source_marker = config.edge.source_marker
    target_marker = config.edge.target_marker
    source_margin = source_marker.reserved_length(stroke_width)
    target_margin = target_marker.reserved_length(stroke_width)

    source_shape, target_shape = shape_margins
    if config.edge.margin is None:
        if source_marker.type != "none" or target_marker.type != "none":
            source_margin += source_shape
            target_margin += target_shape
    else:
        source_margin += config.edge.margin + source_shape
        target_margin += config.edge.margin + target_shape
    return source_margin, target_margin


def _loop_state(
    edge_id: EdgeId,
    node_pos: Vector,
    shape: ShapeStyle,
    config: GraphConfig,
    stroke_width: float,
) -> EdgeState:
    s = config.scale
    style = config.edge.self_loop
    # loop ends already sit on the node boundary
    source_margin, target_margin = calculate_marker_margins(config, stroke_width, (0.0, 0.0))
    args = (node_pos, node_radius(shape) * s, style.radius * s, style.angle, style.is_clockwise)
    origin, loop = calculate_loop(*args)
    if source_margin == 0 and target_margin == 0:
        position = origin
    else:
        position, loop = calculate_loop(*args, source_margin * s, target_margin * s)
    return EdgeState(
        id=edge_id,
        origin=origin,
        label_position=origin,
        position=position,
        loop=loop,
        stroke_width=stroke_width,
    )


def calculate_edge_state(
    edge_id: EdgeId,
    edge: Edge,
    source_pos: Any,
    target_pos: Any,
    source_shape: ShapeStyle,
    target_shape: ShapeStyle,
    groups: EdgeGroupStates,
    config: GraphConfig,
) -> EdgeState:
    """Compute the drawing state of a single edge."""

    source = as_vector(source_pos)
    target = as_vector(target_pos)
    stroke_width = stroke_width_of(edge_id, edge, config)
    if edge.is_loop:
        return _loop_state(edge_id, source, source_shape, config, stroke_width)

    s = config.scale
    layout_point = groups.edge_layout_points.get(edge_id)
    summarized = groups.is_summarized(edge_id)
    shifted = calculate_edge_shifted_position(
        layout_point, summarized, source, target, s, config.edge.keep_order
    )

    shape_margins = calculate_distances_from_center_of_node_to_end_of_node(
        source, target, source_shape, target_shape
    )
    label_position = apply_margin(shifted, shape_margins[0] * s, shape_margins[1] * s)
    source_margin, target_margin = calculate_marker_margins(config, stroke_width, shape_margins)

    if config.edge.type == "straight":
        if source_margin == 0 and target_margin == 0:
            position = shifted
        else:
            position = apply_margin(shifted, source_margin * s, target_margin * s)
        return EdgeState(edge_id, shifted, label_position, position, stroke_width=stroke_width)

    origin = LinePosition(source, target)
    shift = 0.0
    if layout_point is not None and not summarized:
        shift = layout_point.group_width / 2 - layout_point.point_in_group
    position, curve = calculate_curve_position_and_state(
        origin, shifted, shift, source_margin * s, target_margin * s
    )
    return EdgeState(edge_id, origin, label_position, position, curve=curve, stroke_width=stroke_width)


def compute_edge_states(
    node_positions: Mapping[NodeId, Any],
    edges: Mapping[EdgeId, Edge],
    config: GraphConfig,
    node_shapes: Optional[Mapping[NodeId, ShapeStyle]] = None,
    groups: Optional[EdgeGroupStates] = None,
) -> Dict[EdgeId, EdgeState]:
    """Drawing state of every edge whose endpoints have a position.

    Node shapes default to ``config.node``; edge groups are computed from
    ``node_positions`` when not supplied.
    """

    if groups is None:
        groups = calculate_edge_groups(node_positions, edges, config)

    def shape_of(node_id: NodeId) -> ShapeStyle:
        if node_shapes is not None and node_id in node_shapes:
            return node_shapes[node_id]
        return config.node.shape_of(node_id)

    states: Dict[EdgeId, EdgeState] = {}
    for edge_id, edge in edges.items():
        source_pos = node_positions.get(edge.source)
        target_pos = node_positions.get(edge.target)
        if source_pos is None or target_pos is None:
            logger.debug("Skipping edge %s: endpoint position unknown", edge_id)
            continue
        states[edge_id] = calculate_edge_state(
            edge_id,
            edge,
            source_pos,
            target_pos,
            shape_of(edge.source),
            shape_of(edge.target),
            groups,
            config,
        )

    logger.info("Computed %d edge state(s) out of %d edge(s)", len(states), len(edges))
    return states


apply_debug_logging(globals(), logger=logger)
