"""PathGraph — union of equal-length paths between two tables as a layered DAG.

Nodes are placed in columns by breadth-first frontier expansion from the
source table. An association is only followed into the next column; an edge
to a table already placed in any other column is dropped, which keeps the
graph acyclic. Required path stations collapse the frontier in order.

Construction runs two passes. The first discovers which tables reach the
destination; the second rebuilds the graph from scratch with every other
table excluded, so columns and edge types are exactly what a single build
over the narrowed schema would produce.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable, Iterator, Sequence
from typing import TYPE_CHECKING

import networkx as nx

from schemapath.domain.types import Direction, EdgeType
from schemapath.services.telemetry import Span, trace_span

if TYPE_CHECKING:
    from schemapath.domain.schema import DataModelLike, TableLike

logger = logging.getLogger(__name__)


class Node:
    """One table placed at one column of a path graph."""

    __slots__ = ("column", "next", "prev", "table")

    def __init__(self, table: TableLike, column: int) -> None:
        self.table = table
        self.column = column
        self.next: set[Node] = set()
        self.prev: set[Node] = set()

    def __str__(self) -> str:
        return f"{self.table.name}:{self.column}"

    def __repr__(self) -> str:
        return f"Node({self})"

    def collect_prev_closure(self, closure: set[TableLike] | None = None) -> set[TableLike]:
        """Add this node's table and every table that reaches it to *closure*."""
        return _collect_closure(self, closure, lambda node: node.prev)

    def collect_next_closure(self, closure: set[TableLike] | None = None) -> set[TableLike]:
        """Add this node's table and every table reachable from it to *closure*."""
        return _collect_closure(self, closure, lambda node: node.next)


def _collect_closure(
    start: Node,
    closure: set[TableLike] | None,
    neighbors: Callable[[Node], set[Node]],
) -> set[TableLike]:
    # Tables already in a caller-provided set are not expanded again.
    if closure is None:
        closure = set()
    stack = [start]
    while stack:
        node = stack.pop()
        if node.table in closure:
            continue
        closure.add(node.table)
        stack.extend(n for n in neighbors(node) if n.table not in closure)
    return closure


class PathGraph:
    """Union of equal-length paths from *source* to *destination*.

    Args:
        data_model: Schema providing every table.
        source: Start table (column 0).
        destination: End table.
        excluded_tables: Tables no path may pass through.
        path_stations: Tables every path must pass through, in order.
        strict_waypoints: Treat a path station that cannot be reached in
            order as "no path" instead of ignoring it.

    An empty graph means no path exists. Path stations that were never
    reached are listed in :attr:`unsatisfied_waypoints`; unless
    *strict_waypoints* is set, such a station can still appear as an
    ordinary node, in any column. Reached stations occupy strictly
    increasing columns in the order given.
    """

    def __init__(
        self,
        data_model: DataModelLike,
        source: TableLike,
        destination: TableLike,
        excluded_tables: Collection[TableLike] = (),
        path_stations: Sequence[TableLike] = (),
        *,
        strict_waypoints: bool = False,
    ) -> None:
        self._source = source
        self._destination = destination
        self._node_per_table: dict[TableLike, Node] = {}
        self._edge_types: dict[tuple[Node, Node], EdgeType] = {}
        self.unsatisfied_waypoints: tuple[TableLike, ...] = ()

        excluded = set(excluded_tables)
        path_stations = list(path_stations)
        with trace_span("pass_1") as span:
            self._create_graph(excluded, path_stations)
            self._annotate(span)
        dest_node = self._node_per_table.get(destination)
        if dest_node is None:
            logger.debug("No path from %s to %s", source.name, destination.name)
            self._reset()
            return

        dest_closure = dest_node.collect_prev_closure()
        narrowed = {table for table in data_model.tables if table not in dest_closure}
        narrowed |= excluded
        with trace_span("pass_2") as span:
            consumed = self._create_graph(narrowed, path_stations)
            self._annotate(span)

        # Stations outside the destination's closure are dropped by the
        # second pass, so they are checked against the external exclusions.
        self.unsatisfied_waypoints = tuple(
            table
            for table in self._required_stations(path_stations, excluded)
            if table not in consumed
        )
        if strict_waypoints and self.unsatisfied_waypoints:
            logger.debug(
                "Path stations %s unreachable in order",
                [t.name for t in self.unsatisfied_waypoints],
            )
            self._reset()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def source(self) -> TableLike:
        """The start table; its node, if any, is in column 0."""
        return self._source

    @property
    def destination(self) -> TableLike:
        """The end table every remaining node leads to."""
        return self._destination

    def get_node(self, table: TableLike) -> Node | None:
        """Return the node representing *table*, or None if it is on no path."""
        return self._node_per_table.get(table)

    def get_nodes(self, column: int) -> list[Node]:
        """Return all nodes in *column*. Order is unspecified."""
        return [node for node in self._node_per_table.values() if node.column == column]

    def get_edge_type(self, from_node: Node, to_node: Node) -> EdgeType | None:
        """Return the type of the edge *from_node* -> *to_node*, if any."""
        return self._edge_types.get((from_node, to_node))

    def is_empty(self) -> bool:
        """True when no path exists (no nodes at all)."""
        return not self._node_per_table

    def nodes(self) -> list[Node]:
        """Return every node. Order is unspecified."""
        return list(self._node_per_table.values())

    def edges(self) -> Iterator[tuple[Node, Node, EdgeType]]:
        """Yield ``(from_node, to_node, edge_type)`` for every edge."""
        for (from_node, to_node), edge_type in self._edge_types.items():
            yield from_node, to_node, edge_type

    @property
    def column_count(self) -> int:
        """Number of columns, 0 for an empty graph."""
        if not self._node_per_table:
            return 0
        return max(node.column for node in self._node_per_table.values()) + 1

    def closure(self, table: TableLike, direction: Direction = Direction.FORWARD) -> set[TableLike]:
        """Tables reachable from *table* in *direction*, including itself.

        Empty when *table* has no node in this graph.
        """
        node = self._node_per_table.get(table)
        if node is None:
            return set()
        if Direction(direction) is Direction.BACKWARD:
            return node.collect_prev_closure()
        return node.collect_next_closure()

    def to_networkx(self) -> nx.DiGraph:
        """Export as a DiGraph keyed by table name.

        Nodes carry ``column``; edges carry ``edge_type``.
        """
        g: nx.DiGraph = nx.DiGraph()
        for node in self._node_per_table.values():
            g.add_node(node.table.name, column=node.column)
        for from_node, to_node, edge_type in self.edges():
            g.add_edge(from_node.table.name, to_node.table.name, edge_type=edge_type.value)
        return g

    def __contains__(self, table: object) -> bool:
        return table in self._node_per_table

    def __len__(self) -> int:
        return len(self._node_per_table)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        self._node_per_table.clear()
        self._edge_types.clear()

    def _required_stations(
        self, path_stations: Iterable[TableLike], excluded: Collection[TableLike]
    ) -> list[TableLike]:
        """Path stations still to be visited, in order, each listed once."""
        return list(
            dict.fromkeys(
                table
                for table in path_stations
                if table != self._source
                and table != self._destination
                and table not in excluded
            )
        )

    def _annotate(self, span: Span | None) -> None:
        if span:
            span.annotate("nodes", len(self._node_per_table))
            span.annotate("edges", len(self._edge_types))

    def _create_graph(
        self, excluded: set[TableLike], path_stations: Iterable[TableLike]
    ) -> set[TableLike]:
        """Build one pass from scratch. Returns the path stations consumed."""
        self._reset()

        column = 0
        self._node_per_table[self._source] = Node(self._source, column)
        # dicts are used as insertion-ordered sets
        current_column: dict[TableLike, None] = {self._source: None}
        stations = self._required_stations(path_stations, excluded)
        consumed: set[TableLike] = set()

        while current_column:
            if stations and stations[0] in current_column:
                station = stations.pop(0)
                consumed.add(station)
                current_column = {station: None}

            next_column: dict[TableLike, None] = {}
            for table in current_column:
                node = self._node_per_table[table]
                for association in table.associations:
                    if association.is_ignored():
                        continue
                    dest = association.destination
                    if dest in excluded:
                        continue
                    new_node = self._node_per_table.get(dest)
                    if new_node is not None and new_node.column != column + 1:
                        continue
                    next_column[dest] = None
                    if new_node is None:
                        new_node = Node(dest, column + 1)
                        self._node_per_table[dest] = new_node
                    self._link(node, new_node, EdgeType.of(association))
            column += 1
            current_column = next_column

        logger.debug(
            "Built path graph: %d nodes, %d edges, %d columns",
            len(self._node_per_table),
            len(self._edge_types),
            column,
        )
        return consumed

    def _link(self, node: Node, new_node: Node, edge_type: EdgeType) -> None:
        key = (node, new_node)
        old_type = self._edge_types.get(key)
        if old_type is not None and old_type is not edge_type:
            edge_type = EdgeType.ASSOCIATION
        self._edge_types[key] = edge_type
        node.next.add(new_node)
        new_node.prev.add(node)
