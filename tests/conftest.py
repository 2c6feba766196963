"""Shared pytest fixtures and test helpers for schemapath tests."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import networkx as nx
import pytest

from schemapath.config.settings import PathSettings
from schemapath.core.path_graph import PathGraph
from schemapath.domain.schema import AssociationKind, DataModel

# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def build_model(
    associations: Iterable[tuple[str, str] | tuple[str, str, AssociationKind]],
    *,
    tables: Iterable[str] = (),
) -> DataModel:
    """Build a DataModel from ``(source, destination[, kind])`` tuples.

    Extra isolated tables can be declared via *tables*.
    """
    model = DataModel()
    for name in tables:
        model.add_table(name)
    for entry in associations:
        source, destination, *rest = entry
        kind: AssociationKind = rest[0] if rest else "association"
        model.associate(source, destination, kind=kind)
    return model


def path_graph(
    model: DataModel,
    source: str,
    destination: str,
    *,
    excluded: Iterable[str] = (),
    waypoints: Iterable[str] = (),
    strict_waypoints: bool = False,
) -> PathGraph:
    """Construct a PathGraph addressing tables by name."""

    def table(name: str):
        t = model.get_table(name)
        assert t is not None, f"unknown table {name}"
        return t

    return PathGraph(
        model,
        table(source),
        table(destination),
        {table(n) for n in excluded},
        [table(n) for n in waypoints],
        strict_waypoints=strict_waypoints,
    )


def columns_of(graph: PathGraph) -> dict[str, int]:
    """Map table name -> column for every node in *graph*."""
    return {node.table.name: node.column for node in graph.nodes()}


def edge_names(graph: PathGraph) -> set[tuple[str, str]]:
    return {(a.table.name, b.table.name) for a, b, _ in graph.edges()}


def assert_well_formed(graph: PathGraph) -> None:
    """Check the structural invariants every constructed graph satisfies."""
    if graph.is_empty():
        assert list(graph.edges()) == []
        return
    g = graph.to_networkx()
    src = graph.source.name
    dest = graph.destination.name
    assert nx.is_directed_acyclic_graph(g)
    distances = nx.single_source_shortest_path_length(g, src)
    for node in graph.nodes():
        name = node.table.name
        assert graph.get_node(node.table) is node
        assert distances[name] == node.column
        assert nx.has_path(g, name, dest)
        for succ in node.next:
            assert succ.column == node.column + 1
            assert node in succ.prev


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def diamond() -> DataModel:
    """A -> B -> D and A -> C -> D, plus a dead end B -> E."""
    return build_model([("A", "B"), ("A", "C"), ("B", "D"), ("C", "D"), ("B", "E")])


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> PathSettings:
    """Default settings isolated from any schemapath.toml or env vars."""
    monkeypatch.delenv("SCHEMAPATH_CONFIG", raising=False)
    monkeypatch.delenv("SCHEMAPATH_PATH__STRICT_WAYPOINTS", raising=False)
    monkeypatch.delenv("SCHEMAPATH_LOGGING__VERBOSE", raising=False)
    return PathSettings.load(root=tmp_path)
