"""Shared fixtures for dbml-codegen tests.

Schemas are built in memory; anything touching the filesystem writes
under pytest's tmp_path.
"""

from __future__ import annotations

import sqlite3

import pytest

from dbml_codegen.codegen.core.config import GenerationOptions
from dbml_codegen.codegen.core.schema import (
    Association,
    Cardinality,
    Column,
    Database,
    Table,
    TableType,
)


# ---------------------------------------------------------------------------
# In-memory schemas
# ---------------------------------------------------------------------------

def build_orders_database(
    class_name: str = "OrdersContext",
    order_cardinality: Cardinality | None = Cardinality.ONE,
    order_is_foreign_key: bool = True,
) -> Database:
    """Customers (1) <- (many) Orders, with both sides of the association."""
    customer = TableType(
        name="Customer",
        columns=[
            Column("CustomerId", "System.Int32", is_primary_key=True, can_be_null=False),
            Column("Name", "System.String"),
        ],
        associations=[
            Association(
                name="FK_Orders_Customers",
                type="Order",
                this_key="CustomerId",
                other_key="CustomerId",
                cardinality=Cardinality.MANY,
                is_foreign_key=False,
                member="Orders",
            )
        ],
    )
    order = TableType(
        name="Order",
        columns=[
            Column("OrderId", "System.Int32", is_primary_key=True, can_be_null=False),
            Column("CustomerId", "System.Int32", can_be_null=False),
            Column("Total", "System.Decimal"),
            Column("ShippedOn", "System.DateTime", name="shipped_on"),
        ],
        associations=[
            Association(
                name="FK_Orders_Customers",
                type="Customer",
                this_key="CustomerId",
                other_key="CustomerId",
                cardinality=order_cardinality,
                is_foreign_key=order_is_foreign_key,
                member="Customer",
            )
        ],
    )
    return Database(
        name="Orders",
        class_name=class_name,
        provider="sqlite",
        tables=[
            Table("dbo.Customers", customer, member="Customers"),
            Table("dbo.Orders", order, member="Orders"),
        ],
    )


@pytest.fixture
def orders_database():
    return build_orders_database()


@pytest.fixture
def invalid_database():
    """Order owns the foreign key while declaring cardinality Many."""
    return build_orders_database(order_cardinality=Cardinality.MANY)


@pytest.fixture
def csharp_options(tmp_path):
    return GenerationOptions(language="csharp", output_dir=str(tmp_path))


# ---------------------------------------------------------------------------
# SQLite databases on disk
# ---------------------------------------------------------------------------

@pytest.fixture
def shop_db(tmp_path):
    """A small SQLite database with one foreign key."""
    path = tmp_path / "shop.db"
    connection = sqlite3.connect(str(path))
    try:
        connection.executescript(
            """
            CREATE TABLE customers (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                email VARCHAR(100)
            );
            CREATE TABLE orders (
                id INTEGER PRIMARY KEY,
                customer_id INTEGER NOT NULL REFERENCES customers(id),
                total DECIMAL(10, 2),
                placed_at DATETIME
            );
            """
        )
        connection.commit()
    finally:
        connection.close()
    return path


@pytest.fixture
def sqlite_db(tmp_path):
    """Factory creating a SQLite database file from a DDL script."""

    def create(script, name="shop"):
        path = tmp_path / f"{name}.db"
        connection = sqlite3.connect(str(path))
        try:
            connection.executescript(script)
            connection.commit()
        finally:
            connection.close()
        return path

    return create
