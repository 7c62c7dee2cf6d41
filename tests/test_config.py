import pytest

from linkgeom import config as config_module
from linkgeom.config import (
    GraphConfig,
    MarkerStyle,
    config_from_dict,
    get_default_config,
    set_default_config,
    shape_from_dict,
)
from linkgeom.shape import CircleShape, RectShape
from linkgeom.types import ConfigError


def test_defaults():
    config = get_default_config()
    assert config.node.shape == CircleShape(radius=16.0)
    assert config.edge.width == 2.0
    assert config.edge.gap == 3.0
    assert config.edge.type == "straight"
    assert config.edge.keep_order == "clock"
    assert config.edge.margin is None
    assert config.edge.summarize is True
    assert config.edge.self_loop.radius == 12.0
    assert config.path.end_type == "centerOfNode"
    assert config.scale == 1.0


def test_default_config_is_copied(monkeypatch):
    monkeypatch.setattr(config_module, "_DEFAULT_CONFIG", GraphConfig())
    config = get_default_config()
    config.edge.gap = 99
    assert get_default_config().edge.gap == 3.0

    replacement = GraphConfig(scale=2.0)
    set_default_config(replacement)
    replacement.scale = 5.0
    assert get_default_config().scale == 2.0


def test_config_from_dict_reads_camel_case_keys():
    config = config_from_dict(
        {
            "node": {"shape": {"type": "rect", "width": 40, "height": 20, "borderRadius": 4}},
            "edge": {
                "gap": 5,
                "type": "curve",
                "keepOrder": "vertical",
                "margin": 2,
                "summarize": False,
                "marker": {"target": {"type": "arrow", "width": 4, "units": "user"}},
                "selfLoop": {"radius": 8, "isClockwise": False, "angle": 90},
            },
            "path": {"margin": 3, "end": "edgeOfNode", "curveInNode": True},
            "scale": 1.5,
        }
    )
    assert config.node.shape == RectShape(width=40, height=20, border_radius=4)
    assert config.edge.gap == 5
    assert config.edge.type == "curve"
    assert config.edge.keep_order == "vertical"
    assert config.edge.margin == 2
    assert config.edge.summarize is False
    assert config.edge.target_marker.reserved_length(10) == 3
    assert config.edge.source_marker.type == "none"
    assert (config.edge.self_loop.radius, config.edge.self_loop.is_clockwise, config.edge.self_loop.angle) == (
        8,
        False,
        90,
    )
    assert config.path.margin == 3
    assert config.path.end_type == "edgeOfNode"
    assert config.path.curve_in_node is True
    assert config.scale == 1.5


def test_config_from_dict_keeps_base_values():
    base = GraphConfig(scale=3.0)
    config = config_from_dict({"edge": {"gap": 1}}, base=base)
    assert config.scale == 3.0
    assert config.edge.gap == 1
    assert base.edge.gap == 3.0
    assert config_from_dict(None).edge.gap == get_default_config().edge.gap


@pytest.mark.parametrize(
    "data",
    [
        {"edge": {"type": "spline"}},
        {"edge": {"keepOrder": "random"}},
        {"edge": {"gap": "wide"}},
        {"edge": {"marker": {"source": {"units": "px"}}}},
        {"path": {"end": "outside"}},
        {"scale": True},
        {"node": {"shape": {"type": "star"}}},
    ],
)
def test_invalid_values_raise_config_error(data):
    with pytest.raises(ConfigError):
        config_from_dict(data)


def test_shape_from_dict_defaults_to_circle():
    assert shape_from_dict({}) == CircleShape(radius=16)
    assert shape_from_dict({"radius": 8, "strokeWidth": 2}) == CircleShape(radius=8, stroke_width=2)


def test_marker_reserved_length():
    assert MarkerStyle().reserved_length(2) == 0
    assert MarkerStyle(type="arrow").reserved_length(2) == 8
    assert MarkerStyle(type="arrow", units="user").reserved_length(2) == 4
