"""SVG path data for edges and paths.

Quadratic ``(control, end)`` pairs are written as the equivalent cubic ``C``
commands.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .edge import EdgeState
from .types import ArcSegment, PositionOrCurve
from .vector import Vector, add, multiply_scalar, subtract

_TWO_THIRDS = 2.0 / 3.0


def format_number(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def _pt(p: Vector) -> str:
    return f"{format_number(p.x)} {format_number(p.y)}"


def quadratic_to_cubic(p0: Vector, control: Vector, end: Vector):
    """Cubic control points drawing the same curve as the quadratic ``p0, control, end``."""

    cp1 = add(p0, multiply_scalar(subtract(control, p0), _TWO_THIRDS))
    cp2 = add(end, multiply_scalar(subtract(control, end), _TWO_THIRDS))
    return cp1, cp2


def _arc(segment: ArcSegment) -> str:
    rx, ry = segment.radius
    return (
        f"A {format_number(rx)} {format_number(ry)} {format_number(segment.angle)} "
        f"{int(segment.large_arc)} {int(segment.sweep)} {_pt(segment.p2)}"
    )


def _quadratic_chain(current: Vector, points: List[Vector], commands: List[str]) -> Vector:
    for i in range(0, len(points) - 1, 2):
        control, end = points[i], points[i + 1]
        cp1, cp2 = quadratic_to_cubic(current, control, end)
        commands.append(f"C {_pt(cp1)} {_pt(cp2)} {_pt(end)}")
        current = end
    return current


def to_path_d(points: Iterable[PositionOrCurve]) -> str:
    """Render path entries as an SVG ``d`` attribute."""

    commands: List[str] = []
    current: Optional[Vector] = None
    for entry in points:
        if isinstance(entry, ArcSegment):
            if current is None:
                commands.append(f"M {_pt(entry.p1)}")
            commands.append(_arc(entry))
            current = entry.p2
        elif isinstance(entry, list):
            if not entry:
                continue
            rest = entry
            if len(entry) % 2 == 1 or current is None:
                head = entry[0]
                commands.append(f"{'M' if current is None else 'L'} {_pt(head)}")
                current = head
                rest = entry[1:]
                if len(rest) % 2 == 1:
                    # a list that opened the path still needs a lead point
                    commands.append(f"L {_pt(rest[0])}")
                    current = rest[0]
                    rest = rest[1:]
            current = _quadratic_chain(current, rest, commands)
        elif isinstance(entry, Vector):
            commands.append(f"{'M' if current is None else 'L'} {_pt(entry)}")
            current = entry
        else:
            raise TypeError(f"unsupported path entry: {entry!r}")
    return " ".join(commands)


def edge_path_d(state: EdgeState) -> str:
    """SVG ``d`` attribute for a single edge."""

    p1, p2 = state.position.p1, state.position.p2
    if state.loop is not None:
        loop = state.loop
        rx, ry = loop.radius
        return (
            f"M {_pt(p1)} A {format_number(rx)} {format_number(ry)} 0 "
            f"{int(loop.is_large_arc)} {int(loop.is_clockwise)} {_pt(p2)}"
        )
    if state.curve is not None:
        commands = [f"M {_pt(p1)}"]
        _quadratic_chain(p1, [*state.curve.control, p2], commands)
        return " ".join(commands)
    return f"M {_pt(p1)} L {_pt(p2)}"


__all__ = ["edge_path_d", "format_number", "quadratic_to_cubic", "to_path_d"]
