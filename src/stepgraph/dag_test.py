# dag_test.py
from __future__ import annotations

import pytest

from stepgraph import settings
from stepgraph.dag import (
    ValidateConfig,
    build_adjacency,
    build_graph,
    topo_levels,
    validate_steps,
)
from stepgraph.dsl import after_any, step, steps
from stepgraph.model import STANDARD, StructuralError
from stepgraph.states import StateAttributes, StateRegistry


def scenario():
    return {
        "A": {"dependencies": []},
        "B": {"dependencies": ["A"]},
        "C": {"dependencies": ["A:ANY"]},
    }


# -------------------------
# validation
# -------------------------

def test_empty_map_is_invalid():
    result = validate_steps({})
    assert not result.valid
    assert "empty" in result.error_message


def test_missing_target_names_step_and_target():
    result = validate_steps({"A": {"dependencies": ["B"]}})
    assert not result.valid
    assert "'A'" in result.error_message
    assert "'B'" in result.error_message


def test_first_violation_is_reported():
    result = validate_steps({
        "A": {"dependencies": ["X"]},
        "B": {"dependencies": ["Y"]},
    })
    assert result.error_message == "Step 'A' has a dependency on 'X' which does not exist"


def test_condition_suffix_is_ignored_for_existence():
    assert validate_steps({"A": {}, "B": {"dependencies": ["A:ANY", "A:WHATEVER"]}}).valid
    assert not validate_steps({"B": {"dependencies": ["Z:ANY"]}}).valid


def test_valid_map():
    result = validate_steps(scenario())
    assert result.valid
    assert result.error_message == ""
    assert bool(result) is True


def test_cycles_pass_by_default(monkeypatch):
    monkeypatch.delenv("STEPGRAPH_DETECT_CYCLES", raising=False)
    monkeypatch.setattr(settings, "DETECT_CYCLES", settings._flag("STEPGRAPH_DETECT_CYCLES"))
    cyclic = {"A": {"dependencies": ["B"]}, "B": {"dependencies": ["A"]}}
    assert ValidateConfig().detect_cycles is False
    assert validate_steps(cyclic).valid
    assert validate_steps(cyclic, ValidateConfig(detect_cycles=False)).valid


def test_cycle_detection_follows_environment(monkeypatch):
    monkeypatch.setenv("STEPGRAPH_DETECT_CYCLES", "1")
    monkeypatch.setattr(settings, "DETECT_CYCLES", settings._flag("STEPGRAPH_DETECT_CYCLES"))
    cyclic = {"A": {"dependencies": ["B"]}, "B": {"dependencies": ["A"]}}
    assert ValidateConfig().detect_cycles is True
    result = validate_steps(cyclic)
    assert not result.valid
    assert "Circular" in result.error_message
    assert validate_steps(cyclic, ValidateConfig(detect_cycles=False)).valid


def test_cycle_detection_when_enabled():
    cyclic = {
        "start": {},
        "A": {"dependencies": ["start", "B"]},
        "B": {"dependencies": ["A"]},
    }
    result = validate_steps(cyclic, ValidateConfig(detect_cycles=True))
    assert not result.valid
    assert "Circular" in result.error_message
    assert "'A'" in result.error_message and "'B'" in result.error_message


def test_self_dependency_is_a_cycle():
    result = validate_steps({"A": {"dependencies": ["A"]}}, ValidateConfig(detect_cycles=True))
    assert not result.valid


def test_duplicate_dependencies_rejected_only_when_asked():
    dup = {"A": {}, "B": {"dependencies": ["A", "A:ANY"]}}
    assert validate_steps(dup).valid
    result = validate_steps(dup, ValidateConfig(reject_duplicate_dependencies=True))
    assert not result.valid
    assert "more than one dependency on 'A'" in result.error_message


# -------------------------
# building
# -------------------------

def test_build_scenario():
    g = build_graph(scenario())
    assert g.node_ids() == ["A", "B", "C"]
    assert [(e.source, e.target, e.condition) for e in g.edges] == [
        ("A", "B", "DONE"),
        ("A", "C", "ANY"),
    ]
    assert all(n.style_class == STANDARD for n in g.nodes)
    assert all(e.style_class == STANDARD for e in g.edges)
    assert g.selected is None


def test_build_counts_every_reference():
    m = steps(
        step("a"),
        step("b", "a"),
        step("c", "a", "b"),
        step("d", "a", after_any("c"), "a:DONE"),
    )
    g = build_graph(m)
    assert len(g.nodes) == 4
    assert len(g.edges) == 6


def test_edge_order_is_step_then_dependency_order():
    m = {
        "z": {},
        "y": {"dependencies": ["z"]},
        "x": {"dependencies": ["y", "z"]},
    }
    g = build_graph(m)
    assert [(e.source, e.target) for e in g.edges] == [("z", "y"), ("y", "x"), ("z", "x")]


def test_node_attributes_come_from_registry():
    g = build_graph({
        "a": {"state": "DONE"},
        "b": {"state": "MY_CUSTOM_STATE", "dependencies": ["a"]},
        "c": {},
    })
    assert g.node("a").attributes.shape == "shape_green"
    assert g.node("b").attributes.key == "MY_CUSTOM_STATE"
    assert g.node("b").attributes.shape == "shape_orange"
    assert g.node("c").attributes.shape == "shape_black"
    assert g.edges[0].dependency_state == "DONE"


def test_injected_registry_is_used():
    reg = StateRegistry(states=[])
    g = build_graph({"a": {"state": "DONE"}}, reg)
    assert g.node("a").attributes.color == reg.default.color
    assert g.node("a").attributes.key == "DONE"


def test_node_display_fields():
    g = build_graph({"buildImage": {"state": "RUNNING", "description": "docker build"}})
    n = g.node("buildImage")
    assert n.label == "buildImage"
    assert n.display_label == "build Image"
    assert n.tooltip == "buildImage : RUNNING\ndocker build"


def test_build_refuses_invalid_input():
    with pytest.raises(StructuralError) as exc:
        build_graph({"A": {"dependencies": ["Z"]}})
    assert exc.value.kind == "missing_dependency"
    assert exc.value.step == "A"
    assert exc.value.target == "Z"

    with pytest.raises(StructuralError) as exc:
        build_graph({})
    assert exc.value.kind == "empty"


def test_build_does_not_mutate_input():
    m = scenario()
    build_graph(m)
    assert m == scenario()


# -------------------------
# adjacency / levels
# -------------------------

def test_topo_levels():
    m = steps(
        step("setup"),
        step("lint", "setup"),
        step("unit", "setup"),
        step("package", "lint", "unit"),
        step("e2e", "package"),
    )
    adj, indeg = build_adjacency(m)
    assert adj["setup"] == {"lint", "unit"}
    assert indeg["package"] == 2
    assert topo_levels(adj, indeg) == [["setup"], ["lint", "unit"], ["package"], ["e2e"]]


def test_repeated_reference_counts_once_in_adjacency():
    adj, indeg = build_adjacency({"a": {}, "b": {"dependencies": ["a", "a:ANY"]}})
    assert adj["a"] == {"b"}
    assert indeg["b"] == 1


def test_topo_levels_reports_cycle():
    adj, indeg = build_adjacency({"a": {"dependencies": ["b"]}, "b": {"dependencies": ["a"]}})
    with pytest.raises(StructuralError) as exc:
        topo_levels(adj, indeg)
    assert exc.value.kind == "cycle"
    assert exc.value.details["steps"] == ["a", "b"]


def test_empty_registry_is_not_replaced():
    fallback = StateAttributes("", "#123456", "black", "shape_white", "question", False, False)
    reg = StateRegistry([], default=fallback)
    assert len(reg) == 0

    g = build_graph({"A": {"state": "DONE"}}, reg)
    a = g.node("A")
    assert a.attributes.color == "#123456"
    assert a.attributes.key == "DONE"
