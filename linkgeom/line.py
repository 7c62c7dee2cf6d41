"""Directed line segments and margin handling."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from .vector import Vector, add, as_vector, multiply_scalar, normalize, rotate, subtract


@dataclass(frozen=True)
class LinePosition:
    """Plain pair of endpoints, as handed to and from the rendering side."""

    p1: Vector
    p2: Vector

    def to_dict(self) -> dict:
        return {"p1": self.p1.to_dict(), "p2": self.p2.to_dict()}


@dataclass(frozen=True)
class Line:
    """Directed segment ``source -> target`` with its direction vector ``v``."""

    source: Vector
    target: Vector
    v: Vector = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "v", subtract(self.target, self.source))

    @classmethod
    def from_positions(cls, source: Any, target: Any) -> "Line":
        return cls(as_vector(source), as_vector(target))

    @classmethod
    def from_vectors(cls, source: Vector, target: Vector) -> "Line":
        return cls(source, target)

    @classmethod
    def from_line_position(cls, position: LinePosition) -> "Line":
        return cls(as_vector(position.p1), as_vector(position.p2))

    def to_line_position(self) -> LinePosition:
        return LinePosition(self.source, self.target)


def to_line_vector(source: Vector, target: Vector) -> Vector:
    return subtract(target, source)


def to_line_position(p1: Any, p2: Any) -> LinePosition:
    return LinePosition(as_vector(p1), as_vector(p2))


def center_of_line_position(position: LinePosition) -> Vector:
    return Vector((position.p1.x + position.p2.x) / 2, (position.p1.y + position.p2.y) / 2)


def perpendicular_line(line: Line) -> Line:
    """Unit-length line rooted at ``line.target``, turned +90 degrees from ``line``."""

    n = rotate(normalize(line.v), math.pi / 2)
    return Line(line.target, add(line.target, n))


def apply_margin(position: LinePosition, source_margin: float, target_margin: float) -> LinePosition:
    """Trim (or, with negative margins, extend) both ends of ``position``.

    When the trimmed endpoints cross each other a short 0.5-unit segment at the
    midpoint of the original line is returned instead.
    """

    line = Line.from_line_position(position)
    n = normalize(line.v)
    sv = add(line.source, multiply_scalar(n, source_margin))
    tv = subtract(line.target, multiply_scalar(n, target_margin))

    check = to_line_vector(sv, tv)
    if line.v.angle() * check.angle() < 0:
        # reversed
        c1 = center_of_line_position(position)
        c2 = add(c1, multiply_scalar(n, 0.5))
        return LinePosition(c1, c2)
    return LinePosition(sv, tv)


def inverse_line(position: LinePosition) -> LinePosition:
    return LinePosition(position.p2, position.p1)


__all__ = [
    "Line",
    "LinePosition",
    "apply_margin",
    "center_of_line_position",
    "inverse_line",
    "perpendicular_line",
    "to_line_position",
    "to_line_vector",
]
