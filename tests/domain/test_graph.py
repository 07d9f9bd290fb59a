"""Tests for DependencyGraph — construction, cycle detection, batching, builder."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from wsplan.domain.errors import (
    CircularDependencyError,
    DuplicateProjectError,
    SchedulingInvariantError,
    UnknownProjectReferenceError,
)
from wsplan.domain.graph import DependencyGraph, build_dependency_graph
from wsplan.domain.projects import ProjectDescriptor

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _project(name: str, *deps: str, dev: tuple[str, ...] = ()) -> ProjectDescriptor:
    return ProjectDescriptor(
        name=name,
        dependencies=dict.fromkeys(deps, "workspace:*"),
        dev_dependencies=dict.fromkeys(dev, "workspace:*"),
    )


def _names(batches: list[list[ProjectDescriptor]]) -> list[list[str]]:
    return [[p.name for p in batch] for batch in batches]


def _graph(*edges: tuple[str, str], nodes: tuple[str, ...] = ()) -> DependencyGraph:
    """Graph with *nodes* (in order) plus any node named by *edges*."""
    g = DependencyGraph()
    for name in nodes:
        g.add_project(_project(name))
    for source, target in edges:
        g.add_project(_project(source))
        g.add_project(_project(target))
        g.add_dependency(source, target)
    return g


def _assert_valid_batches(graph: DependencyGraph) -> None:
    batches = graph.get_topological_batches()
    index = {p.name: i for i, batch in enumerate(batches) for p in batch}
    flat = [p.name for batch in batches for p in batch]

    assert sorted(flat) == sorted(graph.get_all_project_names())
    assert len(flat) == len(set(flat))
    for node in graph.get_all_nodes():
        for dep in node.dependencies:
            assert index[dep] < index[node.name]
    for batch in batches:
        names = {p.name for p in batch}
        for p in batch:
            assert not names & set(graph.get_node(p.name).dependencies)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestAddProject:
    def test_adds_node(self) -> None:
        g = DependencyGraph()
        a = _project("a")
        g.add_project(a)
        node = g.get_node("a")
        assert node is not None
        assert node.name == "a"
        assert node.project is a
        assert not node.dependencies
        assert not node.dependents

    def test_readding_is_idempotent(self) -> None:
        g = _graph(("a", "b"), ("c", "a"))
        before = g.get_node("a")
        deps, dependents = dict(before.dependencies), dict(before.dependents)

        g.add_project(_project("a", "zzz"))

        after = g.get_node("a")
        assert after is before
        assert after.dependencies == deps
        assert after.dependents == dependents
        assert len(g) == 3

    def test_preserves_insertion_order(self) -> None:
        g = _graph(nodes=("c", "a", "b"))
        assert g.get_all_project_names() == ["c", "a", "b"]
        assert [n.name for n in g.get_all_nodes()] == ["c", "a", "b"]
        assert list(g) == ["c", "a", "b"]


class TestAddDependency:
    def test_edge_is_symmetric(self) -> None:
        g = _graph(("a", "b"))
        assert "b" in g.get_node("a").dependencies
        assert "a" in g.get_node("b").dependents
        assert not g.get_node("b").dependencies
        assert not g.get_node("a").dependents

    def test_duplicate_edge_is_idempotent(self) -> None:
        g = _graph(("a", "b"))
        g.add_dependency("a", "b")
        assert list(g.get_node("a").dependencies) == ["b"]
        assert list(g.get_node("b").dependents) == ["a"]

    def test_unknown_source(self) -> None:
        g = _graph(nodes=("a",))
        with pytest.raises(UnknownProjectReferenceError) as exc_info:
            g.add_dependency("x", "a")
        assert exc_info.value.name == "x"
        assert exc_info.value.side == "from"
        assert "x" in str(exc_info.value)

    def test_unknown_target(self) -> None:
        g = _graph(nodes=("a",))
        with pytest.raises(UnknownProjectReferenceError) as exc_info:
            g.add_dependency("a", "x")
        assert exc_info.value.name == "x"
        assert exc_info.value.side == "to"

    def test_unknown_reference_leaves_graph_unchanged(self) -> None:
        g = _graph(nodes=("a",))
        with pytest.raises(LookupError):
            g.add_dependency("a", "x")
        assert not g.get_node("a").dependencies

    def test_self_loop_allowed(self) -> None:
        g = _graph(("a", "a"))
        assert "a" in g.get_node("a").dependencies
        assert "a" in g.get_node("a").dependents


class TestQueries:
    def test_missing_node(self) -> None:
        assert DependencyGraph().get_node("nope") is None

    def test_empty_graph(self) -> None:
        g = DependencyGraph()
        assert g.get_all_nodes() == []
        assert g.get_all_project_names() == []
        assert "a" not in g
        assert len(g) == 0


# ---------------------------------------------------------------------------
# Cycle detection
# ---------------------------------------------------------------------------


class TestDetectCycle:
    def test_acyclic(self) -> None:
        g = _graph(("c", "b"), ("b", "a"), ("c", "a"))
        assert g.detect_cycle() is None

    def test_empty(self) -> None:
        assert DependencyGraph().detect_cycle() is None

    def test_two_cycle(self) -> None:
        g = _graph(("a", "b"), ("b", "a"))
        assert g.detect_cycle() == ["a", "b"]

    def test_two_cycle_other_insertion_order(self) -> None:
        g = _graph(("b", "a"), ("a", "b"))
        assert g.detect_cycle() == ["b", "a"]

    def test_self_loop(self) -> None:
        g = _graph(("a", "a"))
        assert g.detect_cycle() == ["a"]

    def test_trace_starts_where_stack_is_reentered(self) -> None:
        # root -> a -> b -> c -> a: the root is on the path but not in the cycle
        g = _graph(("root", "a"), ("a", "b"), ("b", "c"), ("c", "a"))
        assert g.detect_cycle() == ["a", "b", "c"]

    def test_diamond_is_not_a_cycle(self) -> None:
        g = _graph(("top", "left"), ("top", "right"), ("left", "base"), ("right", "base"))
        assert g.detect_cycle() is None

    def test_first_found_in_insertion_order(self) -> None:
        g = _graph(("x", "y"), ("y", "x"), ("a", "b"), ("b", "a"))
        assert g.detect_cycle() == ["x", "y"]

    def test_cycle_reachable_from_later_root(self) -> None:
        g = _graph(("ok", "leaf"), ("p", "q"), ("q", "p"))
        assert g.detect_cycle() == ["p", "q"]

    def test_deep_chain_does_not_recurse(self) -> None:
        g = DependencyGraph()
        names = [f"p{i}" for i in range(5000)]
        for name in names:
            g.add_project(_project(name))
        for upper, lower in zip(names, names[1:], strict=False):
            g.add_dependency(upper, lower)
        assert g.detect_cycle() is None

        g.add_dependency(names[-1], names[0])
        assert g.detect_cycle() == names


# ---------------------------------------------------------------------------
# Batch scheduling
# ---------------------------------------------------------------------------


class TestTopologicalBatches:
    def test_chain_scenario(self) -> None:
        projects = [_project("A"), _project("B", "A"), _project("C", "A", "B")]
        g = build_dependency_graph(projects)
        assert _names(g.get_topological_batches()) == [["A"], ["B"], ["C"]]

    def test_independent_projects_single_batch(self) -> None:
        g = build_dependency_graph([_project("A"), _project("B")])
        assert _names(g.get_topological_batches()) == [["A", "B"]]

    def test_batches_hold_original_descriptors(self) -> None:
        a, b = _project("A"), _project("B", "A")
        batches = build_dependency_graph([a, b]).get_topological_batches()
        assert batches[0][0] is a
        assert batches[1][0] is b

    def test_batch_order_is_insertion_order(self) -> None:
        projects = [_project("zeta"), _project("alpha"), _project("mid", "zeta")]
        g = build_dependency_graph(projects)
        assert _names(g.get_topological_batches()) == [["zeta", "alpha"], ["mid"]]

    def test_dependency_declared_before_dependency_exists_in_order(self) -> None:
        projects = [_project("app", "lib"), _project("lib")]
        g = build_dependency_graph(projects)
        assert _names(g.get_topological_batches()) == [["lib"], ["app"]]

    def test_cycle_scenario(self) -> None:
        g = build_dependency_graph([_project("A", "B"), _project("B", "A")])
        with pytest.raises(CircularDependencyError) as exc_info:
            g.get_topological_batches()
        assert exc_info.value.cycle == ["A", "B"]
        assert exc_info.value.trace == "A -> B -> A"
        assert "Circular dependency detected: A -> B -> A" in str(exc_info.value)

    def test_cycle_anywhere_aborts_whole_plan(self) -> None:
        g = build_dependency_graph(
            [_project("free"), _project("x", "y"), _project("y", "z"), _project("z", "x")]
        )
        with pytest.raises(CircularDependencyError) as exc_info:
            g.get_topological_batches()
        assert exc_info.value.trace == "x -> y -> z -> x"

    def test_empty_graph(self) -> None:
        assert DependencyGraph().get_topological_batches() == []

    @pytest.mark.parametrize(
        "edges",
        [
            [],
            [("b", "a"), ("c", "a"), ("d", "b"), ("d", "c")],
            [("e", "d"), ("d", "c"), ("c", "b"), ("b", "a"), ("e", "a")],
            [("app", "ui"), ("app", "api"), ("ui", "core"), ("api", "core"), ("cli", "core")],
        ],
    )
    def test_batch_properties(self, edges: list[tuple[str, str]]) -> None:
        g = _graph(*edges, nodes=("standalone",))
        _assert_valid_batches(g)

    def test_maximal_parallelism(self) -> None:
        g = _graph(("b", "a"), ("c", "a"), ("d", "b"), ("d", "c"))
        assert _names(g.get_topological_batches()) == [["a"], ["b", "c"], ["d"]]

    def test_topological_order_flattens_batches(self) -> None:
        g = _graph(("b", "a"), ("c", "a"), ("d", "b"))
        assert g.get_topological_order() == ["a", "b", "c", "d"]

    def test_invariant_violation_is_loud(self, monkeypatch: pytest.MonkeyPatch) -> None:
        g = _graph(("a", "b"), ("b", "a"))
        monkeypatch.setattr(g, "detect_cycle", lambda: None)
        with pytest.raises(SchedulingInvariantError) as exc_info:
            g.get_topological_batches()
        assert exc_info.value.remaining == ["a", "b"]
        assert "Unable to determine topological order" in str(exc_info.value)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class TestBuildDependencyGraph:
    def test_external_dependencies_ignored(self) -> None:
        g = build_dependency_graph([_project("app", "react", "lib"), _project("lib", "lodash")])
        assert list(g.get_node("app").dependencies) == ["lib"]
        assert not g.get_node("lib").dependencies
        assert "react" not in g

    def test_dev_dependencies_are_edges(self) -> None:
        g = build_dependency_graph([_project("app", dev=("lib",)), _project("lib")])
        assert "lib" in g.get_node("app").dependencies

    def test_dev_dependencies_can_be_excluded(self) -> None:
        g = build_dependency_graph(
            [_project("app", dev=("lib",)), _project("lib")], include_dev=False
        )
        assert not g.get_node("app").dependencies

    def test_runtime_and_dev_union(self) -> None:
        app = _project("app", "a", dev=("a", "b"))
        g = build_dependency_graph([app, _project("a"), _project("b")])
        assert list(g.get_node("app").dependencies) == ["a", "b"]

    def test_workspace_known_but_undiscovered_collected(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        warnings: list[str] = []
        with caplog.at_level(logging.WARNING, logger="wsplan"):
            g = build_dependency_graph(
                [_project("app", "lib", "react")],
                {"app", "lib"},
                warnings=warnings,
            )
        assert not g.get_node("app").dependencies
        assert warnings == ["app depends on lib which is in workspace but not discovered"]
        assert caplog.text == ""

    def test_workspace_known_but_undiscovered_logged(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="wsplan"):
            build_dependency_graph([_project("app", "lib", "react")], {"app", "lib"})
        assert "app depends on lib" in caplog.text
        assert "react" not in caplog.text

    def test_no_warning_without_workspace_names(self) -> None:
        warnings: list[str] = []
        build_dependency_graph([_project("app", "lib")], warnings=warnings)
        assert warnings == []

    def test_inputs_not_mutated(self) -> None:
        app = _project("app", "lib", "react")
        projects = [app, _project("lib")]
        build_dependency_graph(projects, {"app", "lib", "other"})
        assert [p.name for p in projects] == ["app", "lib"]
        assert app.dependencies == {"lib": "workspace:*", "react": "workspace:*"}

    def test_accepts_iterator(self) -> None:
        g = build_dependency_graph(iter([_project("b", "a"), _project("a")]))
        assert g.get_all_project_names() == ["b", "a"]
        assert "a" in g.get_node("b").dependencies

    def test_duplicate_names_rejected(self) -> None:
        first = ProjectDescriptor(name="dup", manifest_path=Path("a/package.json"))
        second = ProjectDescriptor(name="dup", manifest_path=Path("b/package.json"))
        with pytest.raises(DuplicateProjectError) as exc_info:
            build_dependency_graph([first, second])
        assert exc_info.value.name == "dup"
        assert exc_info.value.locations == [Path("a/package.json"), Path("b/package.json")]
        assert "a/package.json" in str(exc_info.value)

    def test_same_descriptor_twice_is_not_a_duplicate(self) -> None:
        a = _project("a")
        g = build_dependency_graph([a, a])
        assert g.get_all_project_names() == ["a"]
