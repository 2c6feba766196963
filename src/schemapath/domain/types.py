"""Edge classification and traversal direction enums."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from schemapath.domain.schema import AssociationLike


class EdgeType(StrEnum):
    """Classification of a directed node-to-node edge in a path graph."""

    PARENT = "parent"
    CHILD = "child"
    ASSOCIATION = "association"

    @classmethod
    def of(cls, association: AssociationLike) -> EdgeType:
        """Classify *association* by its insertion-order predicates.

        PARENT when the destination must be inserted before the source,
        CHILD when the source must be inserted before the destination,
        ASSOCIATION otherwise.
        """
        if association.is_insert_destination_before_source():
            return cls.PARENT
        if association.is_insert_source_before_destination():
            return cls.CHILD
        return cls.ASSOCIATION


class Direction(StrEnum):
    """Traversal direction for closure queries."""

    FORWARD = "forward"
    BACKWARD = "backward"
