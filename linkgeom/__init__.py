from .vector import MutableVector, Vector, as_vector
from .line import Line, LinePosition, apply_margin, inverse_line, perpendicular_line
from .point import (
    circle_circle_intersection,
    line_circle_intersection,
    line_circle_intersection_near,
    line_line_intersection,
    nearest_point_on_line,
)
from .shape import (
    CircleShape,
    RectShape,
    calculate_distances_from_center_of_node_to_end_of_node,
    calculate_edge_label_area,
    node_radius,
)
from .curve import (
    calculate_bezier_curve_control_point,
    calculate_circle_center_and_radius_by_3_points,
    calculate_curve_position_and_state,
    calculate_loop,
    move_on_circumference,
    reverse_angle_radian,
)
from .types import (
    ArcSegment,
    ConfigError,
    Curve,
    Curved,
    Edge,
    EdgeObject,
    GeometryPreconditionError,
    Loop,
    Looped,
    SceneError,
    Straight,
)
from .config import (
    EdgeStyle,
    GraphConfig,
    MarkerStyle,
    NodeStyle,
    PathStyle,
    SelfLoopStyle,
    config_from_dict,
    get_default_config,
    set_default_config,
)
from .group import EdgeGroup, EdgeGroupStates, calculate_edge_groups, calculate_edge_shifted_position
from .edge import EdgeState, calculate_edge_state, compute_edge_states
from .path import calculate_directions_of_path_edges, calculate_path_points
from .svg import edge_path_d, to_path_d
from .scene import Scene, SceneGeometry, compute_scene, geometry_report, load_scene, scene_from_dict

__all__ = [
    'MutableVector',
    'Vector',
    'as_vector',
    'Line',
    'LinePosition',
    'apply_margin',
    'inverse_line',
    'perpendicular_line',
    'circle_circle_intersection',
    'line_circle_intersection',
    'line_circle_intersection_near',
    'line_line_intersection',
    'nearest_point_on_line',
    'CircleShape',
    'RectShape',
    'calculate_distances_from_center_of_node_to_end_of_node',
    'calculate_edge_label_area',
    'node_radius',
    'calculate_bezier_curve_control_point',
    'calculate_circle_center_and_radius_by_3_points',
    'calculate_curve_position_and_state',
    'calculate_loop',
    'move_on_circumference',
    'reverse_angle_radian',
    'ArcSegment',
    'ConfigError',
    'Curve',
    'Curved',
    'Edge',
    'EdgeObject',
    'GeometryPreconditionError',
    'Loop',
    'Looped',
    'SceneError',
    'Straight',
    'EdgeStyle',
    'GraphConfig',
    'MarkerStyle',
    'NodeStyle',
    'PathStyle',
    'SelfLoopStyle',
    'config_from_dict',
    'get_default_config',
    'set_default_config',
    'EdgeGroup',
    'EdgeGroupStates',
    'calculate_edge_groups',
    'calculate_edge_shifted_position',
    'EdgeState',
    'calculate_edge_state',
    'compute_edge_states',
    'calculate_directions_of_path_edges',
    'calculate_path_points',
    'edge_path_d',
    'to_path_d',
    'Scene',
    'SceneGeometry',
    'compute_scene',
    'geometry_report',
    'load_scene',
    'scene_from_dict',
]
