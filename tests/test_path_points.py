import pytest

from linkgeom.config import PathStyle
from linkgeom.line import Line
from linkgeom.path import EdgeLine, calculate_loop_arc_segment, calculate_path_points
from linkgeom.scene import compute_scene, scene_from_dict
from linkgeom.svg import to_path_d
from linkgeom.types import ArcSegment, Edge, EdgeObject, GeometryPreconditionError, SceneError, Straight
from linkgeom.vector import Vector, distance

NODES = {
    "n1": {"x": 0, "y": 0},
    "n2": {"x": 100, "y": 0},
    "n3": {"x": 100, "y": 100},
}


def _path_points(path, edges=None, config=None):
    data = {
        "nodes": NODES,
        "edges": edges or {
            "e1": {"source": "n1", "target": "n2"},
            "e2": {"source": "n2", "target": "n3"},
        },
        "paths": {"p": path},
        "config": config or {},
    }
    scene = scene_from_dict(data)
    return compute_scene(scene).paths["p"]


def _xy(entry):
    assert isinstance(entry, Vector)
    return (round(entry.x, 6), round(entry.y, 6))


def test_straight_path_turns_at_core_circle():
    points = _path_points(["e1", "e2"])
    assert [_xy(p) for p in points] == [(0, 0), (88, 0), (100, 12), (100, 100)]
    assert to_path_d(points) == "M 0 0 L 88 0 L 100 12 L 100 100"


def test_reversed_walk_produces_mirrored_points():
    points = _path_points(["e2", "e1"])
    assert [_xy(p) for p in points] == [(100, 100), (100, 12), (88, 0), (0, 0)]


def test_curve_in_node_keeps_crossing_as_control_point():
    points = _path_points(["e1", "e2"], config={"path": {"curveInNode": True}})
    assert len(points) == 3
    assert [_xy(p) for p in points[1]] == [(88, 0), (100, 0), (100, 12)]
    assert to_path_d(points) == "M 0 0 L 88 0 C 96 0 100 4 100 12 L 100 100"


def test_edge_of_node_end_type_stops_at_boundaries():
    points = _path_points(["e1", "e2"], config={"path": {"end": "edgeOfNode"}})
    assert [_xy(p) for p in points] == [(16, 0), (88, 0), (100, 12), (100, 84)]


def test_overrun_margin_drops_end_entries():
    points = _path_points(["e1", "e2"], config={"path": {"margin": 90}})
    assert [_xy(p) for p in points] == [(88, 0), (100, 12)]


def test_overrun_margin_keeps_lead_point_of_curve():
    points = _path_points(["e1", "e2"], config={"path": {"margin": 90, "curveInNode": True}})
    assert len(points) == 2
    assert _xy(points[0]) == (88, 0)
    assert [_xy(p) for p in points[1]] == [(88, 0), (100, 0), (100, 12)]


def test_path_through_self_loop_contains_arc():
    edges = {
        "e1": {"source": "n1", "target": "n2"},
        "loop": {"source": "n2", "target": "n2"},
        "e2": {"source": "n2", "target": "n3"},
    }
    points = _path_points(["e1", "loop", "e2"], edges=edges)

    assert len(points) == 7
    arc = points[3]
    assert isinstance(arc, ArcSegment)
    assert arc.p1 == points[2]
    assert arc.p2 == points[4]
    assert arc.radius == (12, 12)
    assert arc.large_arc and arc.sweep
    for end in (arc.p1, arc.p2):
        assert distance(end, Vector(100, 0)) == pytest.approx(16)
    assert _xy(points[1]) == (84, 0)
    assert _xy(points[5]) == (100, 16)
    assert " A 12 12 0 1 1 " in to_path_d(points)


def test_path_over_curved_edge_emits_quadratic_chain():
    edges = {
        "e1": {"source": "n1", "target": "n2"},
        "e1b": {"source": "n1", "target": "n2"},
        "e2": {"source": "n2", "target": "n3"},
    }
    points = _path_points(["e1", "e2"], edges=edges, config={"edge": {"type": "curve"}})

    assert len(points) == 3
    assert _xy(points[0]) == (0, 0)
    curve = points[1]
    assert isinstance(curve, list)
    assert len(curve) % 2 == 0
    assert _xy(points[2]) == (100, 100)
    assert to_path_d(points).startswith("M 0 0 C ")


def test_empty_path():
    assert calculate_path_points([], {}, {}, {}, 1, PathStyle()) == []


def test_missing_geometry_is_reported():
    edges = [EdgeObject("e1", Edge("n1", "n2"))]
    with pytest.raises(SceneError):
        calculate_path_points(edges, {}, {}, {}, 1, PathStyle())


def test_arc_segment_requires_loop():
    line = EdgeLine("e1", "n1", "n2", Line(Vector(0, 0), Vector(1, 0)), Straight())
    with pytest.raises(GeometryPreconditionError):
        calculate_loop_arc_segment(line, Vector(0, 0), Vector(1, 0))
