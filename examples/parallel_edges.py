"""Example: curved parallel edges and a path routed over them."""

from linkgeom import compute_scene, scene_from_dict
from linkgeom.svg import edge_path_d, to_path_d

SCENE = {
    "config": {
        "edge": {"type": "curve", "gap": 4, "marker": {"target": {"type": "arrow"}}},
        "path": {"margin": 2, "end": "edgeOfNode"},
    },
    "nodes": {
        "web": {"x": 0, "y": 0},
        "api": {"x": 160, "y": 0},
        "db": {"x": 160, "y": 120, "shape": {"type": "rect", "width": 48, "height": 28, "borderRadius": 4}},
    },
    "edges": {
        "request": {"source": "web", "target": "api"},
        "response": {"source": "api", "target": "web"},
        "push": {"source": "api", "target": "web"},
        "query": {"source": "api", "target": "db"},
        "retry": {"source": "api", "target": "api"},
    },
    "paths": {
        "lookup": ["request", "query"],
    },
}


def main() -> None:
    scene = scene_from_dict(SCENE)
    geometry = compute_scene(scene)

    print("Edge groups:")
    for key, group in geometry.groups.edge_groups.items():
        flag = " (summarized)" if group.summarize else ""
        print(f"  {key[0]} <=> {key[1]}: width={group.group_width:g}{flag} edges={list(group.edges)}")

    print("\nEdges:")
    for edge_id, state in geometry.edge_states.items():
        print(f"  {edge_id:<9} {type(state.kind).__name__:<8} d=\"{edge_path_d(state)}\"")

    print("\nPaths:")
    for path_id, points in geometry.paths.items():
        print(f"  {path_id}: d=\"{to_path_d(points)}\"")


if __name__ == "__main__":
    main()
