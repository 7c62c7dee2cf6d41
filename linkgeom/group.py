"""Layout of parallel edges that connect the same pair of nodes."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Collection, Dict, List, Mapping, Optional, Set

import numpy as np

from .config import GraphConfig
from .line import LinePosition
from .logging_utils import apply_debug_logging
from .shape import node_size
from .types import Edge, EdgeGroupKey, EdgeId, NodeId
from .vector import Vector, as_vector

logger = logging.getLogger(__name__)

INVALID_WIDTH_FALLBACK = 1.0


@dataclass
class EdgeLayoutPoint:
    """Position of one edge inside its group.

    ``point_in_group`` runs from 0 (first edge) to ``group_width`` (last edge).
    """

    edge: Edge
    point_in_group: float
    group_width: float


@dataclass
class EdgeGroup:
    edges: Dict[EdgeId, Edge]
    group_width: float
    summarize: bool = False


@dataclass
class EdgeGroupStates:
    edge_layout_points: Dict[EdgeId, EdgeLayoutPoint] = field(default_factory=dict)
    edge_groups: Dict[EdgeGroupKey, EdgeGroup] = field(default_factory=dict)
    summarized_edges: Set[EdgeId] = field(default_factory=set)

    def is_summarized(self, edge_id: EdgeId) -> bool:
        return edge_id in self.summarized_edges


def edge_group_key(edge: Edge) -> EdgeGroupKey:
    """Key shared by all edges between the same two nodes, in either direction."""

    a, b = sorted((edge.source, edge.target))
    return (a, b)


def valid_stroke_width(edge_id: EdgeId, width: Any) -> float:
    try:
        value = float(width)
    except (TypeError, ValueError):
        value = math.nan
    if math.isnan(value):
        logger.warning("Edge width is invalid value. id=[%s] value=[%r]", edge_id, width)
        return INVALID_WIDTH_FALLBACK
    return value


def _group_gap(edges: Dict[EdgeId, Edge], config: GraphConfig) -> float:
    gap = config.edge.gap
    if callable(gap):
        return float(gap(edges, config))
    return float(gap)


def calculate_edge_groups(
    nodes: Collection[NodeId],
    edges: Mapping[EdgeId, Edge],
    config: GraphConfig,
) -> EdgeGroupStates:
    """Bucket ``edges`` by node pair and lay out each bucket.

    Edges with an endpoint missing from ``nodes`` are left out.  The returned
    groups already carry their ``summarize`` decision.
    """

    buckets: Dict[EdgeGroupKey, Dict[EdgeId, Edge]] = {}
    for edge_id, edge in edges.items():
        if edge.source not in nodes or edge.target not in nodes:
            logger.debug("Skipping edge %s: unknown endpoint", edge_id)
            continue
        buckets.setdefault(edge_group_key(edge), {})[edge_id] = edge

    states = EdgeGroupStates()
    for key, members in buckets.items():
        items = list(members.items())
        if len(items) == 1:
            edge_id, edge = items[0]
            states.edge_layout_points[edge_id] = EdgeLayoutPoint(edge, 0.0, 0.0)
            states.edge_groups[key] = EdgeGroup(members, 0.0)
            continue

        gap = _group_gap(members, config)
        half_widths = np.array(
            [valid_stroke_width(edge_id, config.edge.width_of(edge)) / 2 for edge_id, edge in items],
            dtype=float,
        )
        steps = half_widths[:-1] + gap + half_widths[1:]
        points = np.concatenate(([0.0], np.cumsum(steps)))
        group_width = float(points[-1])
        for (edge_id, edge), point in zip(items, points):
            states.edge_layout_points[edge_id] = EdgeLayoutPoint(edge, float(point), group_width)
        states.edge_groups[key] = EdgeGroup(members, group_width)

    for group in states.edge_groups.values():
        group.summarize = check_summarize(nodes, group, config)
        if group.summarize:
            states.summarized_edges.update(group.edges)

    logger.info(
        "Built %d edge group(s) from %d edge(s); %d summarized",
        len(states.edge_groups),
        len(states.edge_layout_points),
        sum(1 for g in states.edge_groups.values() if g.summarize),
    )
    return states


def check_summarize(nodes: Collection[NodeId], group: EdgeGroup, config: GraphConfig) -> bool:
    if group.group_width == 0:
        return False
    summarize = config.edge.summarize
    if callable(summarize):
        decided = summarize(group.edges, config)
        if decided is None:
            return default_check_summarize(nodes, group.edges, config, group.group_width)
        return bool(decided)
    if summarize:
        return default_check_summarize(nodes, group.edges, config, group.group_width)
    return False


def default_check_summarize(
    nodes: Collection[NodeId],
    edges: Mapping[EdgeId, Edge],
    config: GraphConfig,
    width: float,
) -> bool:
    """Summarize when the group is wider than the smallest endpoint node."""

    if len(edges) == 1:
        return False
    sizes: List[float] = [
        node_size(config.node.shape_of(node_id))
        for edge in edges.values()
        for node_id in (edge.source, edge.target)
        if node_id in nodes
    ]
    if not sizes:
        return False
    return width > min(sizes)


def _keep_order_flip(keep_order: str, radian: float) -> bool:
    if keep_order == "vertical":
        return -math.pi / 2 <= radian < math.pi / 2
    if keep_order == "horizontal":
        return radian < 0
    return False


def _shift_line(
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    scale: float,
    group_width: float,
    point_in_group: float,
    keep_order: str,
):
    dx = x2 - x1
    dy = y2 - y1

    diff = (group_width / 2 - point_in_group) * scale
    if diff != 0 and _keep_order_flip(keep_order, math.atan2(dy, dx)):
        diff = -diff

    if dx == 0:
        sign = -1 if dy < 0 else 1
        return x1 + diff * sign, y1, x2 + diff * sign, y2
    if dy == 0:
        sign = 1 if dx < 0 else -1
        return x1, y1 + diff * sign, x2, y2 + diff * sign
    move_slope = -1 / (dy / dx)
    if dy < 0:
        diff = -diff
    diff_x = diff / math.hypot(1.0, move_slope)
    return x1 + diff_x, y1 + diff_x * move_slope, x2 + diff_x, y2 + diff_x * move_slope


def calculate_edge_shifted_position(
    point: Optional[EdgeLayoutPoint],
    is_summarized: bool,
    source: Any,
    target: Any,
    scale: float,
    keep_order: str,
) -> LinePosition:
    """Node-center line of an edge, moved sideways to its slot in the group.

    The offset is computed on the line oriented from the lower node id to the
    higher one, so both directions of a node pair share one ordering.
    """

    if point is None:
        return LinePosition(Vector(0.0, 0.0), Vector(0.0, 0.0))
    s = as_vector(source)
    t = as_vector(target)
    group_width, point_in_group = (0.0, 0.0) if is_summarized else (point.group_width, point.point_in_group)

    if point.edge.source < point.edge.target:
        x1, y1, x2, y2 = _shift_line(s.x, s.y, t.x, t.y, scale, group_width, point_in_group, keep_order)
    else:
        x2, y2, x1, y1 = _shift_line(t.x, t.y, s.x, s.y, scale, group_width, point_in_group, keep_order)
    return LinePosition(Vector(x1, y1), Vector(x2, y2))


apply_debug_logging(globals(), logger=logger)
