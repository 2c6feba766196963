"""Tests for the in-memory schema model."""

from __future__ import annotations

import pytest

from schemapath.domain.schema import Association, DataModel, Table


class TestDataModel:
    def test_add_table_is_idempotent(self) -> None:
        model = DataModel()
        first = model.add_table("orders")
        assert model.add_table("orders") is first
        assert len(model) == 1

    def test_tables_in_insertion_order(self) -> None:
        model = DataModel()
        for name in ("c", "a", "b"):
            model.add_table(name)
        assert [t.name for t in model.tables] == ["c", "a", "b"]
        assert [t.name for t in model] == ["c", "a", "b"]

    def test_get_table_missing(self) -> None:
        assert DataModel().get_table("nope") is None

    def test_contains_by_name_and_table(self) -> None:
        model = DataModel()
        table = model.add_table("orders")
        assert "orders" in model
        assert table in model
        assert Table("orders") not in model

    def test_associate_creates_tables(self) -> None:
        model = DataModel()
        assoc = model.associate("orders", "customers", kind="parent", name="fk_customer")
        orders, customers = model.get_table("orders"), model.get_table("customers")
        assert assoc.source is orders
        assert assoc.destination is customers
        assert orders.associations == [assoc]
        assert customers.associations == []

    def test_associate_accepts_tables(self) -> None:
        model = DataModel()
        a, b = model.add_table("a"), model.add_table("b")
        assoc = model.associate(a, b)
        assert a.associations == [assoc]

    def test_associate_rejects_unknown_kind(self) -> None:
        with pytest.raises(ValueError, match="Unknown association kind"):
            DataModel().associate("a", "b", kind="sibling")  # type: ignore[arg-type]


class TestAssociation:
    @pytest.mark.parametrize(
        ("kind", "dest_first", "src_first"),
        [
            ("parent", True, False),
            ("child", False, True),
            ("association", False, False),
        ],
    )
    def test_kind_predicates(self, kind: str, dest_first: bool, src_first: bool) -> None:
        assoc = DataModel().associate("a", "b", kind=kind)  # type: ignore[arg-type]
        assert assoc.is_insert_destination_before_source() is dest_first
        assert assoc.is_insert_source_before_destination() is src_first
        assert assoc.is_ignored() is False

    def test_ignored_flag(self) -> None:
        assoc = DataModel().associate("a", "b", ignored=True)
        assert assoc.is_ignored() is True

    def test_repr(self) -> None:
        a, b = Table("a"), Table("b")
        assert repr(Association(a, b, name="fk")) == "Association(a -> b 'fk')"
        assert repr(Association(a, b)) == "Association(a -> b)"


class TestTable:
    def test_identity_equality(self) -> None:
        assert Table("t") != Table("t")
        t = Table("t")
        assert {t: 1}[t] == 1

    def test_str(self) -> None:
        assert str(Table("orders")) == "orders"
