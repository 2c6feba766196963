"""Schema interface and an in-memory reference model.

The path graph only reads a schema through the attributes described by
:class:`TableLike`, :class:`AssociationLike` and :class:`DataModelLike`.
:class:`DataModel`, :class:`Table` and :class:`Association` implement that
interface for callers that build a schema in code.

Tables compare and hash by identity: two tables with the same name in
different data models are different tables.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Literal, Protocol

type AssociationKind = Literal["parent", "child", "association"]


class AssociationLike(Protocol):
    """A directed association between two tables."""

    @property
    def destination(self) -> TableLike: ...

    def is_ignored(self) -> bool: ...

    def is_insert_destination_before_source(self) -> bool: ...

    def is_insert_source_before_destination(self) -> bool: ...


class TableLike(Protocol):
    """A table with a name and outgoing associations."""

    @property
    def name(self) -> str: ...

    @property
    def associations(self) -> Sequence[AssociationLike]: ...


class DataModelLike(Protocol):
    """Enumerates every table of a schema."""

    @property
    def tables(self) -> Iterable[TableLike]: ...


@dataclass(eq=False)
class Table:
    """A schema table. Hashed by identity."""

    name: str
    associations: list[Association] = field(default_factory=list)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Table({self.name!r})"


@dataclass(eq=False)
class Association:
    """Directed association from *source* to *destination*.

    Attributes:
        source: Table owning the association.
        destination: Table the association points to.
        insert_destination_before_source: Destination rows must exist first
            (the destination is a parent of the source).
        insert_source_before_destination: Source rows must exist first
            (the destination is a child of the source).
        ignored: Excluded from path computations.
        name: Optional association name.
    """

    source: Table
    destination: Table
    insert_destination_before_source: bool = False
    insert_source_before_destination: bool = False
    ignored: bool = False
    name: str | None = None

    def is_ignored(self) -> bool:
        """Ignored associations are never followed when building paths."""
        return self.ignored

    def is_insert_destination_before_source(self) -> bool:
        """True when the destination row must exist first (a PARENT edge)."""
        return self.insert_destination_before_source

    def is_insert_source_before_destination(self) -> bool:
        """True when the source row must exist first (a CHILD edge)."""
        return self.insert_source_before_destination

    def __repr__(self) -> str:
        label = f" {self.name!r}" if self.name else ""
        return f"Association({self.source.name} -> {self.destination.name}{label})"


class DataModel:
    """In-memory schema: tables in insertion order, looked up by name."""

    def __init__(self) -> None:
        self._tables: dict[str, Table] = {}

    @property
    def tables(self) -> tuple[Table, ...]:
        """Every table, in insertion order."""
        return tuple(self._tables.values())

    def add_table(self, name: str) -> Table:
        """Return the table called *name*, creating it if needed."""
        table = self._tables.get(name)
        if table is None:
            table = Table(name)
            self._tables[name] = table
        return table

    def get_table(self, name: str) -> Table | None:
        """Return the table called *name*, or None if there is none."""
        return self._tables.get(name)

    def associate(
        self,
        source: Table | str,
        destination: Table | str,
        *,
        kind: AssociationKind = "association",
        ignored: bool = False,
        name: str | None = None,
    ) -> Association:
        """Add an association from *source* to *destination*.

        Table names are resolved (and created) through :meth:`add_table`.
        *kind* ``"parent"`` means the destination is inserted before the
        source, ``"child"`` the reverse.
        """
        if kind not in ("parent", "child", "association"):
            msg = f"Unknown association kind: {kind!r}"
            raise ValueError(msg)
        src = self.add_table(source) if isinstance(source, str) else source
        dest = self.add_table(destination) if isinstance(destination, str) else destination
        association = Association(
            source=src,
            destination=dest,
            insert_destination_before_source=kind == "parent",
            insert_source_before_destination=kind == "child",
            ignored=ignored,
            name=name,
        )
        src.associations.append(association)
        return association

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._tables
        return any(table is item for table in self._tables.values())

    def __iter__(self) -> Iterator[Table]:
        return iter(self._tables.values())

    def __len__(self) -> int:
        return len(self._tables)
