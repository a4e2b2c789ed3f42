"""Tests for association validation."""

import pytest

from conftest import build_orders_database
from dbml_codegen.codegen.core.schema import Association, Cardinality
from dbml_codegen.codegen.core.validation import (
    FOREIGN_KEY_ON_MANY,
    find_reciprocal,
    validate_associations,
)
from dbml_codegen.errors import SchemaResolutionDefect


class TestValidateAssociations:
    """Cardinality/foreign-key rule over every association."""

    def test_valid_schema(self, orders_database):
        result = validate_associations(orders_database)
        assert result.is_valid
        assert result.diagnostics == []
        assert bool(result)

    def test_foreign_key_on_many_side(self, invalid_database):
        result = validate_associations(invalid_database)
        assert not result.is_valid
        assert len(result.diagnostics) == 1

        diagnostic = result.diagnostics[0]
        assert diagnostic.code == FOREIGN_KEY_ON_MANY
        assert diagnostic.table_type == "Order"
        assert diagnostic.association == "FK_Orders_Customers"
        assert diagnostic.message == (
            "The IsForeignKey attribute of the Association element "
            "'FK_Orders_Customers' of the Type element 'Order' cannot be "
            "'True' when the Cardinality attribute is 'Many'."
        )
        assert str(diagnostic).startswith("Error DBML1059: ")

    def test_one_diagnostic_per_bad_association(self, invalid_database):
        """Every table is visited, no short-circuit after the first error."""
        customer = invalid_database.tables[0].type
        customer.associations[0].is_foreign_key = True

        result = validate_associations(invalid_database)
        assert [d.table_type for d in result.diagnostics] == ["Customer", "Order"]

    def test_unspecified_cardinality_is_not_many(self):
        database = build_orders_database(order_cardinality=None)
        assert validate_associations(database).is_valid

    def test_many_without_foreign_key_is_valid(self):
        database = build_orders_database(
            order_cardinality=Cardinality.MANY, order_is_foreign_key=False
        )
        assert validate_associations(database).is_valid

    def test_no_tables(self, orders_database):
        orders_database.tables = []
        assert validate_associations(orders_database).is_valid


class TestResolution:
    """Unresolvable references are fatal, not diagnostics."""

    def test_unknown_type(self, orders_database):
        orders_database.tables[1].type.associations[0].type = "Missing"
        with pytest.raises(SchemaResolutionDefect, match="Missing"):
            validate_associations(orders_database)

    def test_duplicate_type(self, orders_database):
        orders_database.tables.append(orders_database.tables[0])
        with pytest.raises(SchemaResolutionDefect, match="Found 2"):
            validate_associations(orders_database)

    def test_unknown_other_key(self, orders_database):
        orders_database.tables[1].type.associations[0].other_key = "Nope"
        with pytest.raises(SchemaResolutionDefect, match="Nope"):
            validate_associations(orders_database)


class TestFindReciprocal:
    def test_found(self, orders_database):
        customers, orders = orders_database.tables
        association = orders.type.associations[0]
        reciprocal = find_reciprocal(orders, customers.type, association)
        assert reciprocal is customers.type.associations[0]

    def test_missing_reciprocal_does_not_change_verdict(self, orders_database):
        customers, orders = orders_database.tables
        customers.type.associations = []

        assert find_reciprocal(orders, customers.type, orders.type.associations[0]) is None
        assert validate_associations(orders_database).is_valid

    def test_extra_association_without_reciprocal(self, orders_database):
        orders_database.tables[0].type.associations.append(
            Association(
                name="FK_Self",
                type="Customer",
                this_key="Name",
                other_key="CustomerId",
                cardinality=Cardinality.ONE,
                is_foreign_key=True,
            )
        )
        assert validate_associations(orders_database).is_valid
