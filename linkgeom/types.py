from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Union

from .vector import Vector

NodeId = str
EdgeId = str
EdgeGroupKey = Tuple[NodeId, NodeId]


class ConfigError(ValueError):
    """Invalid configuration value."""


class SceneError(ValueError):
    """Malformed scene description."""


class GeometryPreconditionError(RuntimeError):
    """A geometry routine was called with inputs that violate its contract."""


@dataclass(frozen=True)
class Edge:
    source: NodeId
    target: NodeId

    @property
    def is_loop(self) -> bool:
        return self.source == self.target


@dataclass(frozen=True)
class EdgeObject:
    edge_id: EdgeId
    edge: Edge


@dataclass(frozen=True)
class CircleSpec:
    center: Vector
    radius: float


@dataclass(frozen=True)
class Curve:
    """Circular-arc description of a curved edge.

    ``center`` is the arc's apex (the shifted line midpoint), ``theta`` the
    signed rotation from the source towards it as seen from ``circle.center``.
    """

    center: Vector
    theta: float
    circle: CircleSpec
    control: List[Vector] = field(default_factory=list)


@dataclass(frozen=True)
class Loop:
    """Self-loop arc drawn on a circle of radius ``radius`` around ``center``."""

    center: Vector
    radius: Tuple[float, float]
    angle: float
    is_large_arc: bool
    is_clockwise: bool


@dataclass(frozen=True)
class Straight:
    pass


@dataclass(frozen=True)
class Curved:
    curve: Curve


@dataclass(frozen=True)
class Looped:
    loop: Loop


EdgeKind = Union[Straight, Curved, Looped]


@dataclass(frozen=True)
class ArcSegment:
    """SVG elliptical-arc equivalent: ``A rx ry angle large_arc sweep p2`` from ``p1``."""

    p1: Vector
    p2: Vector
    radius: Tuple[float, float]
    angle: float
    large_arc: bool
    sweep: bool


PositionOrCurve = Union[Vector, List[Vector], ArcSegment]

NodePositions = Dict[NodeId, Vector]


__all__ = [
    "ArcSegment",
    "CircleSpec",
    "ConfigError",
    "Curve",
    "Curved",
    "Edge",
    "EdgeGroupKey",
    "EdgeId",
    "EdgeKind",
    "EdgeObject",
    "GeometryPreconditionError",
    "Loop",
    "Looped",
    "NodeId",
    "NodePositions",
    "PositionOrCurve",
    "SceneError",
    "Straight",
]
