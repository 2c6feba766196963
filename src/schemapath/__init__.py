"""schemapath — union of equal-length association paths between schema tables."""

from __future__ import annotations

from schemapath.context import AppContext
from schemapath.core.path_graph import Node, PathGraph
from schemapath.domain.schema import Association, DataModel, Table
from schemapath.domain.types import Direction, EdgeType

__version__ = "0.1.0"

__all__ = [
    "AppContext",
    "Association",
    "DataModel",
    "Direction",
    "EdgeType",
    "Node",
    "PathGraph",
    "Table",
    "__version__",
]
