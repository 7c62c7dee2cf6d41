from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List

import numpy as np
import pytest

from linkgeom import compute_scene, scene_from_dict
from linkgeom.path import calculate_directions_of_path_edges
from linkgeom.scene import Scene, SceneGeometry
from linkgeom.shape import CircleShape, RectShape
from linkgeom.svg import edge_path_d, quadratic_to_cubic, to_path_d
from linkgeom.types import ArcSegment
from linkgeom.vector import Vector

DATA_DIR = Path(__file__).resolve().parent / "scenes"


@dataclass
class SceneCase:
    case_id: str
    data: Dict[str, object]
    edge_states: int
    curved: List[str] = field(default_factory=list)
    loops: List[str] = field(default_factory=list)
    directions: Dict[str, List[bool]] = field(default_factory=dict)


def _iter_cases() -> Iterable[SceneCase]:
    for scene_path in sorted(DATA_DIR.glob("*.json")):
        with scene_path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        expect = data.pop("expect", {})
        if not isinstance(expect, dict):
            raise ValueError(f"expect block of {scene_path.name} must be a JSON object")
        yield SceneCase(
            case_id=scene_path.stem,
            data=data,
            edge_states=int(expect.get("edgeStates", 0)),
            curved=list(expect.get("curved", [])),
            loops=list(expect.get("loops", [])),
            directions=dict(expect.get("directions", {})),
        )


def _cubic_points(p0: Vector, c1: Vector, c2: Vector, p3: Vector, n: int = 16) -> np.ndarray:
    t = np.linspace(0.0, 1.0, n)[:, None]
    pts = np.array([[p.x, p.y] for p in (p0, c1, c2, p3)])
    return (
        (1 - t) ** 3 * pts[0]
        + 3 * (1 - t) ** 2 * t * pts[1]
        + 3 * (1 - t) * t ** 2 * pts[2]
        + t ** 3 * pts[3]
    )


def _arc_center(p1: Vector, p2: Vector, radius: float, large_arc: bool, sweep: bool) -> Vector:
    # SVG endpoint-to-center conversion for a circular arc
    x1p = (p1.x - p2.x) / 2
    y1p = (p1.y - p2.y) / 2
    h2 = x1p * x1p + y1p * y1p
    k = math.sqrt(max(radius * radius - h2, 0.0) / h2) if h2 > 0 else 0.0
    sign = 1.0 if large_arc != sweep else -1.0
    return Vector(sign * k * y1p + (p1.x + p2.x) / 2, -sign * k * x1p + (p1.y + p2.y) / 2)


def _arc_points(p1: Vector, p2: Vector, radius: float, large_arc: bool, sweep: bool, n: int = 48) -> np.ndarray:
    c = _arc_center(p1, p2, radius, large_arc, sweep)
    t1 = math.atan2(p1.y - c.y, p1.x - c.x)
    t2 = math.atan2(p2.y - c.y, p2.x - c.x)
    dt = t2 - t1
    if sweep and dt < 0:
        dt += 2 * math.pi
    elif not sweep and dt > 0:
        dt -= 2 * math.pi
    t = np.linspace(t1, t1 + dt, n)
    return np.column_stack((c.x + radius * np.cos(t), c.y + radius * np.sin(t)))


def _polyline(points) -> np.ndarray:
    chunks: List[np.ndarray] = []
    current = None
    for entry in points:
        if isinstance(entry, ArcSegment):
            chunks.append(_arc_points(entry.p1, entry.p2, entry.radius[0], entry.large_arc, entry.sweep))
            current = entry.p2
        elif isinstance(entry, list):
            rest = entry
            if len(entry) % 2 == 1 or current is None:
                current = entry[0]
                chunks.append(np.array([[current.x, current.y]]))
                rest = entry[1:]
            for control, end in zip(rest[0::2], rest[1::2]):
                cp1, cp2 = quadratic_to_cubic(current, control, end)
                chunks.append(_cubic_points(current, cp1, cp2, end))
                current = end
        else:
            chunks.append(np.array([[entry.x, entry.y]]))
            current = entry
    return np.vstack(chunks) if chunks else np.zeros((0, 2))


def _edge_polyline(state) -> np.ndarray:
    p1, p2 = state.position.p1, state.position.p2
    if state.loop is not None:
        loop = state.loop
        return _arc_points(p1, p2, loop.radius[0], loop.is_large_arc, loop.is_clockwise)
    if state.curve is not None:
        return _polyline([p1, [*state.curve.control, p2]])
    return np.array([[p1.x, p1.y], [p2.x, p2.y]])


_PLACEHOLDER_PNG = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\x0cIDATx\x9cc````\x00\x00\x00\x05"
    b"\x00\x01\x0d\n-\xb4\x00\x00\x00\x00IEND\xaeB`\x82"
)


def _render_scene_plot(path: Path, scene: Scene, geometry: SceneGeometry, case_id: str) -> None:
    try:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        from matplotlib.patches import Circle, FancyBboxPatch
    except Exception:
        path.write_bytes(_PLACEHOLDER_PNG)
        return

    fig, ax = plt.subplots(figsize=(5, 5))
    for node_id, pos in scene.node_positions.items():
        shape = scene.node_shapes[node_id]
        if isinstance(shape, CircleShape):
            patch = Circle((pos.x, pos.y), shape.radius, fill=False, color="#1f77b4")
        elif isinstance(shape, RectShape):
            patch = FancyBboxPatch(
                (pos.x - shape.width / 2, pos.y - shape.height / 2),
                shape.width,
                shape.height,
                boxstyle=f"round,pad=0,rounding_size={shape.border_radius}",
                fill=False,
                color="#1f77b4",
            )
        else:
            raise TypeError(f"unsupported node shape: {shape!r}")
        ax.add_patch(patch)
        ax.text(pos.x, pos.y, node_id, fontsize=7, ha="center", va="center")

    for state in geometry.edge_states.values():
        xy = _edge_polyline(state)
        ax.plot(xy[:, 0], xy[:, 1], color="#555555", linewidth=1)

    for points in geometry.paths.values():
        xy = _polyline(points)
        if len(xy):
            ax.plot(xy[:, 0], xy[:, 1], linewidth=4, alpha=0.4)

    ax.set_aspect("equal", adjustable="datalim")
    ax.invert_yaxis()
    ax.set_title(case_id)
    ax.grid(True, linestyle="--", linewidth=0.5, alpha=0.5)
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)


def _finite(*vectors: Vector) -> bool:
    return all(math.isfinite(v.x) and math.isfinite(v.y) for v in vectors)


def _path_vectors(points) -> List[Vector]:
    out: List[Vector] = []
    for entry in points:
        if isinstance(entry, ArcSegment):
            out.extend((entry.p1, entry.p2))
        elif isinstance(entry, list):
            out.extend(entry)
        else:
            out.append(entry)
    return out


@pytest.mark.parametrize("case", list(_iter_cases()), ids=lambda case: case.case_id)
def test_scene_geometry_renders(case: SceneCase, tmp_path: Path) -> None:
    scene = scene_from_dict(case.data)
    geometry = compute_scene(scene)

    assert len(geometry.edge_states) == case.edge_states
    assert sorted(e for e, s in geometry.edge_states.items() if s.curve is not None) == sorted(case.curved)
    assert sorted(e for e, s in geometry.edge_states.items() if s.loop is not None) == sorted(case.loops)

    for edge_id, state in geometry.edge_states.items():
        assert _finite(state.origin.p1, state.origin.p2, state.position.p1, state.position.p2), edge_id
        assert edge_path_d(state).startswith("M "), edge_id
        if state.loop is not None:
            # drawing flags must put the arc on the loop circle
            center = _arc_center(
                state.origin.p1, state.origin.p2, state.loop.radius[0], state.loop.is_large_arc, state.loop.is_clockwise
            )
            assert center.x == pytest.approx(state.loop.center.x, abs=1e-6)
            assert center.y == pytest.approx(state.loop.center.y, abs=1e-6)

    for path_id, expected in case.directions.items():
        assert calculate_directions_of_path_edges(scene.path_edges(path_id)) == expected, path_id

    for path_id, points in geometry.paths.items():
        assert points, path_id
        assert _finite(*_path_vectors(points)), path_id
        assert to_path_d(points).startswith("M "), path_id

    image_path = tmp_path / f"{case.case_id}.png"
    _render_scene_plot(image_path, scene, geometry, case.case_id)
    assert image_path.stat().st_size > 0
