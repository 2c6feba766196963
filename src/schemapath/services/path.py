"""PathService — path graph queries addressed by table name.

Builds a :class:`PathGraph` per call and flattens it into plain data for
consumers such as a visualization layer: columns of table names and typed
edges. Uses ``PathSettings`` for defaults (strict waypoints, telemetry).
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Sequence
from typing import Any, Concatenate, ParamSpec

from schemapath.config.settings import PathSettings
from schemapath.core.path_graph import PathGraph
from schemapath.domain.schema import DataModel, Table
from schemapath.domain.types import Direction
from schemapath.services.result import ServiceError, ServiceResult
from schemapath.services.telemetry import telemetry_scope, trace_span, traced

logger = logging.getLogger(__name__)

_P = ParamSpec("_P")


def _scoped(
    method: Callable[Concatenate[PathService, _P], ServiceResult],
) -> Callable[Concatenate[PathService, _P], ServiceResult]:
    """Enable telemetry for one call when ``[logging] verbose`` is set."""

    @functools.wraps(method)
    def wrapper(self: PathService, /, *args: _P.args, **kwargs: _P.kwargs) -> ServiceResult:
        with telemetry_scope(self._settings.logging.verbose):
            return method(self, *args, **kwargs)

    return wrapper


class PathService:
    """Finds and describes paths between tables of a data model."""

    def __init__(self, data_model: DataModel, settings: PathSettings | None = None) -> None:
        self._data_model = data_model
        self._settings = settings if settings is not None else PathSettings.load()

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _not_found(op: str, name: str) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code="NOT_FOUND",
                message=f"Table '{name}' not found in data model",
                detail={"table": name},
            ),
        )

    def _resolve_optional(self, names: Sequence[str], label: str, warnings: list[str]) -> list[Table]:
        """Resolve *names*, warning about (and skipping) unknown tables."""
        tables: list[Table] = []
        for name in names:
            table = self._data_model.get_table(name)
            if table is None:
                warnings.append(f"Unknown {label} table '{name}' ignored")
                continue
            tables.append(table)
        return tables

    def _build(
        self,
        op: str,
        source: str,
        destination: str,
        excluded: Sequence[str],
        waypoints: Sequence[str],
        strict_waypoints: bool | None,
        warnings: list[str],
    ) -> PathGraph | ServiceResult:
        src = self._data_model.get_table(source)
        if src is None:
            return self._not_found(op, source)
        dest = self._data_model.get_table(destination)
        if dest is None:
            return self._not_found(op, destination)

        excluded_tables = self._resolve_optional(excluded, "excluded", warnings)
        stations = self._resolve_optional(waypoints, "waypoint", warnings)
        if strict_waypoints is None:
            strict_waypoints = self._settings.path.strict_waypoints

        with trace_span("build_path_graph") as span:
            graph = PathGraph(
                self._data_model,
                src,
                dest,
                excluded_tables,
                stations,
                strict_waypoints=strict_waypoints,
            )
            if span:
                span.annotate("nodes", len(graph))
                span.annotate("edges", sum(1 for _ in graph.edges()))
                span.annotate("columns", graph.column_count)

        for table in graph.unsatisfied_waypoints:
            warnings.append(f"Waypoint '{table.name}' is not on any path in the required order")
        return graph

    # ------------------------------------------------------------------
    # find_paths — union of equal-length paths
    # ------------------------------------------------------------------

    @_scoped
    @traced
    def find_paths(
        self,
        source: str,
        destination: str,
        *,
        excluded: Sequence[str] = (),
        waypoints: Sequence[str] = (),
        strict_waypoints: bool | None = None,
    ) -> ServiceResult:
        """Compute all equal-length paths from *source* to *destination*.

        Args:
            source: Name of the start table.
            destination: Name of the end table.
            excluded: Names of tables no path may pass through.
            waypoints: Names of tables every path must pass, in order.
            strict_waypoints: Override ``[path] strict_waypoints``.
        """
        warnings: list[str] = []
        built = self._build(
            "find_paths", source, destination, excluded, waypoints, strict_waypoints, warnings
        )
        if isinstance(built, ServiceResult):
            return built
        graph = built

        if graph.is_empty():
            logger.info("No path from %s to %s", source, destination)
            warnings.append(f"No path from '{source}' to '{destination}'")

        columns = [
            sorted(node.table.name for node in graph.get_nodes(column))
            for column in range(graph.column_count)
        ]
        edge_list: list[dict[str, Any]] = sorted(
            (
                {"source": a.table.name, "target": b.table.name, "type": edge_type.value}
                for a, b, edge_type in graph.edges()
            ),
            key=lambda e: (e["source"], e["target"]),
        )

        return ServiceResult(
            ok=True,
            op="find_paths",
            data={
                "source": source,
                "destination": destination,
                "found": not graph.is_empty(),
                "column_count": graph.column_count,
                "columns": columns,
                "edges": edge_list,
                "unsatisfied_waypoints": [t.name for t in graph.unsatisfied_waypoints],
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # impact — ancestors/descendants of one table on the path graph
    # ------------------------------------------------------------------

    @_scoped
    @traced
    def impact(
        self,
        source: str,
        destination: str,
        table: str,
        *,
        direction: str = Direction.FORWARD,
        excluded: Sequence[str] = (),
        waypoints: Sequence[str] = (),
    ) -> ServiceResult:
        """List the tables upstream or downstream of *table* on the path graph.

        ``direction="forward"`` returns *table* and every table after it
        towards the destination; ``"backward"`` returns the tables leading to
        it from the source.
        """
        try:
            walk = Direction(direction)
        except ValueError:
            return ServiceResult(
                ok=False,
                op="impact",
                error=ServiceError(
                    code="INVALID_DIRECTION",
                    message=f"Direction must be 'forward' or 'backward', got '{direction}'",
                ),
            )

        warnings: list[str] = []
        built = self._build("impact", source, destination, excluded, waypoints, None, warnings)
        if isinstance(built, ServiceResult):
            return built
        graph = built

        target = self._data_model.get_table(table)
        if target is None:
            return self._not_found("impact", table)
        if target not in graph:
            return ServiceResult(
                ok=False,
                op="impact",
                error=ServiceError(
                    code="NOT_ON_PATH",
                    message=f"Table '{table}' is not on any path from '{source}' to '{destination}'",
                    detail={"table": table},
                ),
                warnings=warnings,
            )

        tables = sorted(t.name for t in graph.closure(target, walk))
        return ServiceResult(
            ok=True,
            op="impact",
            data={
                "table": table,
                "direction": walk.value,
                "count": len(tables),
                "tables": tables,
            },
            warnings=warnings,
        )
