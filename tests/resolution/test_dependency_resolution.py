from __future__ import annotations

from memento.core.resolution.dependencies import has_self_dependency, resolve_dependencies


def test_dependencies_precede_dependents():
    graph = {"app": ["db", "cache"], "db": ["base"], "cache": ["base"], "base": []}
    result = resolve_dependencies(["app"], graph.get)
    assert result.ok
    assert result.resolved == ["base", "db", "cache", "app"]


def test_roots_can_be_excluded():
    graph = {"a": ["b"], "b": []}
    assert resolve_dependencies(["a"], graph.get, include_roots=False).resolved == ["b"]


def test_two_node_cycle_reports_both_nodes():
    graph = {"A": ["B"], "B": ["A"]}
    result = resolve_dependencies(["A"], graph.get)
    assert not result.ok
    assert set(result.circular) == {"A", "B"}
    assert "A" not in result.resolved and "B" not in result.resolved
    assert result.errors() == ["Circular dependencies: A, B"]


def test_cycle_below_a_healthy_node():
    graph = {"root": ["x"], "x": ["y"], "y": ["z"], "z": ["x"]}
    result = resolve_dependencies(["root"], graph.get)
    assert result.circular == ["x", "y", "z"]


def test_missing_nodes_are_reported_once():
    graph = {"a": ["ghost", "b"], "b": ["ghost"]}
    result = resolve_dependencies(["a"], graph.get)
    assert result.missing == ["ghost"]
    assert result.resolved == ["b", "a"]
    assert result.errors() == ["Missing dependencies: ghost"]


def test_missing_and_circular_are_both_listed():
    graph = {"a": ["a2", "nope"], "a2": ["a"]}
    result = resolve_dependencies(["a"], graph.get)
    assert result.errors() == ["Missing dependencies: nope", "Circular dependencies: a, a2"]


def test_self_dependency_check():
    assert has_self_dependency("a", ["b", "a"])
    assert not has_self_dependency("a", ["b"])
