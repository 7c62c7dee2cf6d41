"""Scene files: nodes, edges and paths with their configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from .config import GraphConfig, config_from_dict, shape_from_dict
from .edge import EdgeState, compute_edge_states
from .group import EdgeGroupStates, calculate_edge_groups
from .logging_utils import apply_debug_logging
from .path import calculate_directions_of_path_edges, calculate_path_points
from .shape import ShapeStyle
from .svg import edge_path_d, to_path_d
from .types import ConfigError, Edge, EdgeId, EdgeObject, NodeId, PositionOrCurve, SceneError
from .vector import Vector

logger = logging.getLogger(__name__)


@dataclass
class Scene:
    node_positions: Dict[NodeId, Vector] = field(default_factory=dict)
    node_shapes: Dict[NodeId, ShapeStyle] = field(default_factory=dict)
    edges: Dict[EdgeId, Edge] = field(default_factory=dict)
    paths: Dict[str, List[EdgeId]] = field(default_factory=dict)
    config: GraphConfig = field(default_factory=GraphConfig)

    def path_edges(self, path_id: str) -> List[EdgeObject]:
        return [EdgeObject(edge_id, self.edges[edge_id]) for edge_id in self.paths[path_id]]


@dataclass
class SceneGeometry:
    groups: EdgeGroupStates
    edge_states: Dict[EdgeId, EdgeState]
    paths: Dict[str, List[PositionOrCurve]]


def _position(node_id: str, data: Mapping[str, Any]) -> Vector:
    try:
        return Vector(float(data["x"]), float(data["y"]))
    except KeyError as exc:
        raise SceneError(f"node {node_id!r} has no {exc.args[0]!r} coordinate") from None
    except (TypeError, ValueError) as exc:
        raise SceneError(f"node {node_id!r} has a non-numeric position") from exc


def scene_from_dict(data: Mapping[str, Any]) -> Scene:
    if not isinstance(data, Mapping):
        raise SceneError("scene must be a JSON object")
    config = config_from_dict(data.get("config"))
    scene = Scene(config=config)

    for node_id, node in (data.get("nodes") or {}).items():
        scene.node_positions[node_id] = _position(node_id, node)
        shape = config.node.shape_of(node_id)
        if "shape" in node:
            try:
                shape = shape_from_dict(node["shape"])
            except ConfigError as exc:
                logger.warning("Node %s: %s; using the default shape", node_id, exc)
        scene.node_shapes[node_id] = shape

    for edge_id, edge in (data.get("edges") or {}).items():
        try:
            scene.edges[edge_id] = Edge(str(edge["source"]), str(edge["target"]))
        except KeyError as exc:
            raise SceneError(f"edge {edge_id!r} has no {exc.args[0]!r}") from None

    for path_id, path in (data.get("paths") or {}).items():
        edge_ids = path.get("edges") if isinstance(path, Mapping) else path
        if not isinstance(edge_ids, list):
            raise SceneError(f"path {path_id!r} must list its edges")
        unknown = [edge_id for edge_id in edge_ids if edge_id not in scene.edges]
        if unknown:
            raise SceneError(f"path {path_id!r} references unknown edge(s): {', '.join(unknown)}")
        for a, b in zip(edge_ids, edge_ids[1:]):
            ea, eb = scene.edges[a], scene.edges[b]
            if not {ea.source, ea.target} & {eb.source, eb.target}:
                logger.warning("Path %s: edges %s and %s do not share a node", path_id, a, b)
        scene.paths[path_id] = list(edge_ids)

    logger.info(
        "Loaded scene with %d node(s), %d edge(s), %d path(s)",
        len(scene.node_positions),
        len(scene.edges),
        len(scene.paths),
    )
    return scene


def load_scene(path: Union[str, Path]) -> Scene:
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SceneError(f"{path}: invalid JSON ({exc})") from exc
    return scene_from_dict(data)


def compute_scene(scene: Scene) -> SceneGeometry:
    config = scene.config
    groups = calculate_edge_groups(scene.node_positions, scene.edges, config)
    edge_states = compute_edge_states(
        scene.node_positions, scene.edges, config, node_shapes=scene.node_shapes, groups=groups
    )
    paths: Dict[str, List[PositionOrCurve]] = {}
    for path_id in scene.paths:
        paths[path_id] = calculate_path_points(
            scene.path_edges(path_id),
            scene.node_shapes,
            scene.node_positions,
            edge_states,
            config.scale,
            config.path,
        )
    return SceneGeometry(groups=groups, edge_states=edge_states, paths=paths)


def _point(p: Vector) -> List[float]:
    return [p.x, p.y]


def geometry_report(scene: Scene, geometry: SceneGeometry) -> Dict[str, Any]:
    """JSON-serializable summary of the computed geometry."""

    edges: Dict[str, Any] = {}
    for edge_id, state in geometry.edge_states.items():
        entry: Dict[str, Any] = {
            "origin": [_point(state.origin.p1), _point(state.origin.p2)],
            "position": [_point(state.position.p1), _point(state.position.p2)],
            "labelPosition": [_point(state.label_position.p1), _point(state.label_position.p2)],
            "d": edge_path_d(state),
        }
        if state.curve is not None:
            entry["curve"] = {
                "center": _point(state.curve.circle.center),
                "radius": state.curve.circle.radius,
                "theta": state.curve.theta,
            }
        if state.loop is not None:
            entry["loop"] = {
                "center": _point(state.loop.center),
                "radius": list(state.loop.radius),
                "isClockwise": state.loop.is_clockwise,
            }
        edges[edge_id] = entry

    groups = {
        "<=>".join(key): {
            "edges": list(group.edges),
            "groupWidth": group.group_width,
            "summarize": group.summarize,
        }
        for key, group in geometry.groups.edge_groups.items()
    }
    paths = {
        path_id: {
            "directions": calculate_directions_of_path_edges(scene.path_edges(path_id)),
            "d": to_path_d(points),
        }
        for path_id, points in geometry.paths.items()
    }
    return {"edges": edges, "groups": groups, "paths": paths}


apply_debug_logging(globals(), logger=logger)
