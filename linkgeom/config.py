"""Styling parameters consumed by the geometry routines."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

from .shape import CircleShape, RectShape, ShapeStyle
from .types import ConfigError, Edge

logger = logging.getLogger(__name__)

KEEP_ORDER_TYPES = ("clock", "vertical", "horizontal")
EDGE_TYPES = ("straight", "curve")
PATH_END_TYPES = ("centerOfNode", "edgeOfNode")
MARKER_UNITS = ("strokeWidth", "user")

WidthSpec = Union[float, Callable[[Edge], Any]]
GapSpec = Union[float, Callable[[Dict[str, Edge], "GraphConfig"], float]]
SummarizeSpec = Union[bool, Callable[[Dict[str, Edge], "GraphConfig"], Optional[bool]]]
ShapeSpec = Union[ShapeStyle, Callable[[str], ShapeStyle]]


@dataclass
class NodeStyle:
    shape: ShapeSpec = field(default_factory=lambda: CircleShape(radius=16.0))

    def shape_of(self, node_id: str) -> ShapeStyle:
        if callable(self.shape):
            return self.shape(node_id)
        return self.shape


@dataclass
class MarkerStyle:
    type: str = "none"
    width: float = 5.0
    height: float = 5.0
    margin: float = -1.0
    units: str = "strokeWidth"

    def reserved_length(self, stroke_width: float) -> float:
        """Length the marker occupies at the end of the line."""

        if self.type == "none":
            return 0.0
        length = self.margin + self.width
        if self.units == "strokeWidth":
            length *= stroke_width
        return length


@dataclass
class SelfLoopStyle:
    radius: float = 12.0
    is_clockwise: bool = True
    angle: float = 270.0


@dataclass
class EdgeStyle:
    width: WidthSpec = 2.0
    gap: GapSpec = 3.0
    type: str = "straight"
    keep_order: str = "clock"
    margin: Optional[float] = None
    summarize: SummarizeSpec = True
    source_marker: MarkerStyle = field(default_factory=MarkerStyle)
    target_marker: MarkerStyle = field(default_factory=MarkerStyle)
    self_loop: SelfLoopStyle = field(default_factory=SelfLoopStyle)

    def width_of(self, edge: Edge) -> Any:
        if callable(self.width):
            return self.width(edge)
        return self.width


@dataclass
class PathStyle:
    margin: float = 0.0
    end_type: str = "centerOfNode"
    curve_in_node: bool = False


@dataclass
class GraphConfig:
    node: NodeStyle = field(default_factory=NodeStyle)
    edge: EdgeStyle = field(default_factory=EdgeStyle)
    path: PathStyle = field(default_factory=PathStyle)
    scale: float = 1.0


_DEFAULT_CONFIG = GraphConfig()


def get_default_config() -> GraphConfig:
    return copy.deepcopy(_DEFAULT_CONFIG)


def set_default_config(config: GraphConfig) -> None:
    global _DEFAULT_CONFIG
    _DEFAULT_CONFIG = copy.deepcopy(config)


def _choice(value: Any, choices: Sequence[str], name: str) -> str:
    if value not in choices:
        raise ConfigError(f"{name} must be one of {', '.join(choices)}; got {value!r}")
    return value


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a number; got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number; got {value!r}") from exc


def shape_from_dict(data: Mapping[str, Any]) -> ShapeStyle:
    kind = data.get("type", "circle")
    stroke = _number(data.get("strokeWidth", data.get("stroke_width", 0)), "strokeWidth")
    if kind == "circle":
        return CircleShape(radius=_number(data.get("radius", 16), "radius"), stroke_width=stroke)
    if kind == "rect":
        return RectShape(
            width=_number(data.get("width", 32), "width"),
            height=_number(data.get("height", 32), "height"),
            border_radius=_number(data.get("borderRadius", data.get("border_radius", 0)), "borderRadius"),
            stroke_width=stroke,
        )
    raise ConfigError(f"unknown node shape type {kind!r}")


def _marker_from_dict(data: Mapping[str, Any]) -> MarkerStyle:
    marker = MarkerStyle()
    if "type" in data:
        marker.type = str(data["type"])
    for key in ("width", "height", "margin"):
        if key in data:
            setattr(marker, key, _number(data[key], f"marker.{key}"))
    if "units" in data:
        marker.units = _choice(data["units"], MARKER_UNITS, "marker.units")
    return marker


def config_from_dict(data: Optional[Mapping[str, Any]], base: Optional[GraphConfig] = None) -> GraphConfig:
    """Build a :class:`GraphConfig` from a JSON-like mapping.

    Keys follow the scene file format (camelCase); values missing from
    ``data`` are taken from ``base`` (the module default when omitted).
    Edge widths are passed through unchecked, since invalid widths are
    recovered from when edges are grouped.
    """

    config = copy.deepcopy(base) if base is not None else get_default_config()
    if not data:
        return config

    node = data.get("node") or {}
    if "shape" in node:
        config.node.shape = shape_from_dict(node["shape"])

    edge = data.get("edge") or {}
    if "width" in edge:
        config.edge.width = edge["width"]
    if "gap" in edge:
        config.edge.gap = _number(edge["gap"], "edge.gap")
    if "type" in edge:
        config.edge.type = _choice(edge["type"], EDGE_TYPES, "edge.type")
    if "keepOrder" in edge:
        config.edge.keep_order = _choice(edge["keepOrder"], KEEP_ORDER_TYPES, "edge.keepOrder")
    if "margin" in edge:
        config.edge.margin = None if edge["margin"] is None else _number(edge["margin"], "edge.margin")
    if "summarize" in edge:
        config.edge.summarize = bool(edge["summarize"])
    markers = edge.get("marker") or {}
    if "source" in markers:
        config.edge.source_marker = _marker_from_dict(markers["source"])
    if "target" in markers:
        config.edge.target_marker = _marker_from_dict(markers["target"])
    loop = edge.get("selfLoop") or {}
    if "radius" in loop:
        config.edge.self_loop.radius = _number(loop["radius"], "edge.selfLoop.radius")
    if "isClockwise" in loop:
        config.edge.self_loop.is_clockwise = bool(loop["isClockwise"])
    if "angle" in loop:
        config.edge.self_loop.angle = _number(loop["angle"], "edge.selfLoop.angle")

    path = data.get("path") or {}
    if "margin" in path:
        config.path.margin = _number(path["margin"], "path.margin")
    if "end" in path:
        config.path.end_type = _choice(path["end"], PATH_END_TYPES, "path.end")
    if "curveInNode" in path:
        config.path.curve_in_node = bool(path["curveInNode"])

    if "scale" in data:
        config.scale = _number(data["scale"], "scale")

    logger.debug("Loaded configuration: %s", config)
    return config


__all__ = [
    "EDGE_TYPES",
    "EdgeStyle",
    "GraphConfig",
    "KEEP_ORDER_TYPES",
    "MarkerStyle",
    "NodeStyle",
    "PATH_END_TYPES",
    "PathStyle",
    "SelfLoopStyle",
    "config_from_dict",
    "get_default_config",
    "set_default_config",
    "shape_from_dict",
]
