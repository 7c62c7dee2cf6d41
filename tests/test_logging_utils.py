import logging

import numpy as np
import pytest

from linkgeom import edge as edge_module
from linkgeom.config import GraphConfig
from linkgeom.line import LinePosition
from linkgeom.logging_utils import debug_log_call, summarize_value
from linkgeom.types import Edge
from linkgeom.vector import Vector


def test_summarize_value_compacts_geometry():
    assert summarize_value(Vector(1.0, 2.5)) == "(1, 2.5)"
    assert summarize_value(LinePosition(Vector(0, 0), Vector(1, 1))) == "LinePosition(p1=(0, 0), p2=(1, 1))"
    assert summarize_value(np.zeros((3, 2))).startswith("ndarray(shape=(3, 2)")
    assert "10 total" in summarize_value(list(range(10)))


def test_debug_log_call_traces_and_reraises(caplog):
    logger = logging.getLogger("linkgeom.tests")

    @debug_log_call(logger)
    def divide(a, b):
        return a / b

    with caplog.at_level(logging.DEBUG, logger="linkgeom.tests"):
        assert divide(4, 2) == 2
        with pytest.raises(ZeroDivisionError):
            divide(1, 0)

    messages = [record.getMessage() for record in caplog.records]
    assert any(m.startswith("Entering") and "divide" in m for m in messages)
    assert any("Exiting" in m and "-> 2" in m for m in messages)
    assert any(m.startswith("Exception in") for m in messages)


def test_module_functions_are_traced(caplog):
    positions = {"a": Vector(0, 0), "b": Vector(10, 0)}
    with caplog.at_level(logging.DEBUG, logger="linkgeom.edge"):
        edge_module.compute_edge_states(positions, {"ab": Edge("a", "b")}, GraphConfig())
    assert any("Entering calculate_edge_state" in r.getMessage() for r in caplog.records)
