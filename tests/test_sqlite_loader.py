"""Tests for the SQLite schema loader and the loader registry."""

import pytest

from dbml_codegen.codegen.core.config import GenerationOptions
from dbml_codegen.codegen.core.naming import CasePolicy, NameAliases, NameFormat
from dbml_codegen.codegen.core.schema import Cardinality
from dbml_codegen.codegen.core.validation import validate_associations
from dbml_codegen.codegen.loaders import (
    LoaderRegistry,
    SchemaLoader,
    SqliteSchemaLoader,
    create_default_loader_registry,
)
from dbml_codegen.codegen.processor import Processor
from dbml_codegen.errors import ConfigurationError


class TestLoaderRegistry:
    def test_default_providers(self):
        registry = create_default_loader_registry()
        assert registry.list_providers() == ["sqlite", "sqlite3"]
        assert isinstance(registry.create("SQLite"), SqliteSchemaLoader)

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="'mysql' is not supported"):
            create_default_loader_registry().create("mysql")

    def test_no_provider(self):
        with pytest.raises(ConfigurationError, match="none given"):
            create_default_loader_registry().create(None)

    def test_register_rejects_non_loader(self):
        with pytest.raises(ConfigurationError):
            LoaderRegistry().register("x", dict)

    def test_register_custom(self):
        class NullLoader(SchemaLoader):
            vendor_name = "Null"

            def load(self, database, name_format, include_stored_procedures=False,
                     namespace=None, context_name_mode="context", aliases=None):
                raise NotImplementedError

        registry = LoaderRegistry()
        registry.register("null", NullLoader, aliases=["nothing"])
        assert registry.is_supported("NOTHING")
        assert registry.create("null").vendor_name == "Null"


class TestSqliteSchemaLoader:
    def load(self, path, **kwargs):
        name_format = kwargs.pop("name_format", NameFormat())
        return SqliteSchemaLoader().load(str(path), name_format, **kwargs)

    def test_database_names(self, shop_db):
        database = self.load(shop_db, namespace="Shop.Data")
        assert database.name == "shop"
        assert database.class_name == "ShopContext"
        assert database.provider == "sqlite"
        assert database.context_namespace == "Shop.Data"
        assert database.entity_namespace == "Shop.Data"

    def test_database_context_name_mode(self, shop_db):
        database = self.load(shop_db, context_name_mode="database")
        assert database.class_name == "Shop"

    def test_tables_and_columns(self, shop_db):
        database = self.load(shop_db)

        assert [t.name for t in database.tables] == ["customers", "orders"]
        assert [t.type.name for t in database.tables] == ["Customers", "Orders"]

        orders = database.tables[1].type
        assert [c.member for c in orders.columns] == ["Id", "CustomerId", "Total", "PlacedAt"]
        assert [c.name for c in orders.columns] == ["id", "customer_id", "total", "placed_at"]

        columns = {column.member: column for column in orders.columns}
        assert columns["Id"].is_primary_key
        assert not columns["Id"].can_be_null
        assert not columns["CustomerId"].can_be_null
        assert columns["Total"].can_be_null
        assert columns["Total"].storage_type == "DECIMAL(10, 2)"

    def test_foreign_key_associations(self, shop_db):
        customers, orders = self.load(shop_db).tables

        child = orders.type.associations[0]
        assert child.type == "Customers"
        assert child.this_key == "CustomerId"
        assert child.other_key == "Id"
        assert child.cardinality == Cardinality.ONE
        assert child.is_foreign_key
        assert child.member == "Customer"

        parent = customers.type.associations[0]
        assert parent.name == child.name
        assert parent.type == "Orders"
        assert parent.cardinality == Cardinality.MANY
        assert not parent.is_foreign_key
        assert parent.member == "Orders"

    def test_loaded_schema_validates(self, shop_db):
        assert validate_associations(self.load(shop_db)).is_valid

    def test_pluralize(self, shop_db):
        database = self.load(shop_db, name_format=NameFormat(pluralize=True))
        customers = database.tables[0]
        assert customers.type.name == "Customer"
        assert customers.member == "Customers"

    def test_camel_case(self, shop_db):
        database = self.load(shop_db, name_format=NameFormat(case=CasePolicy.CAMEL))
        assert database.class_name == "shopContext"
        assert database.tables[1].type.columns[1].member == "customerId"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            self.load(tmp_path / "missing.db")

    def test_quoted_path(self, shop_db):
        assert self.load(f'"{shop_db}"').name == "shop"


def load(path, **kwargs):
    name_format = kwargs.pop("name_format", NameFormat())
    return SqliteSchemaLoader().load(str(path), name_format, **kwargs)


def associations_of(database, table_name):
    table = next(t for t in database.tables if t.name == table_name)
    return {a.member: a for a in table.type.associations}


class TestForeignKeyResolution:
    """Foreign keys resolve regardless of identifier case and naming clashes."""

    def test_references_in_other_case(self, sqlite_db):
        path = sqlite_db(
            """
            CREATE TABLE customers (id INTEGER PRIMARY KEY, name TEXT);
            CREATE TABLE orders (
                id INTEGER PRIMARY KEY,
                customer_id INTEGER REFERENCES Customers(ID)
            );
            """
        )
        database = load(path)

        child = associations_of(database, "orders")["Customer"]
        assert child.type == "Customers"
        assert child.this_key == "CustomerId"
        assert child.other_key == "Id"
        assert associations_of(database, "customers")["Orders"].type == "Orders"
        assert validate_associations(database).is_valid

    def test_references_without_column_use_primary_key(self, sqlite_db):
        path = sqlite_db(
            """
            CREATE TABLE Customers (ID INTEGER PRIMARY KEY);
            CREATE TABLE orders (id INTEGER PRIMARY KEY, customer_id INTEGER REFERENCES CUSTOMERS);
            """
        )
        child = associations_of(load(path), "orders")["Customer"]
        assert child.other_key == "Id"

    def test_two_keys_to_same_parent(self, sqlite_db):
        path = sqlite_db(
            """
            CREATE TABLE customers (id INTEGER PRIMARY KEY);
            CREATE TABLE orders (
                id INTEGER PRIMARY KEY,
                billed_to INTEGER REFERENCES customers(id),
                shipped_to INTEGER REFERENCES customers(id)
            );
            """
        )
        database = load(path)

        references = associations_of(database, "orders")
        assert sorted(references) == ["Customers", "CustomersByShippedTo"]
        assert references["Customers"].this_key == "BilledTo"
        assert references["CustomersByShippedTo"].this_key == "ShippedTo"

        collections = associations_of(database, "customers")
        assert sorted(collections) == ["Orders", "OrdersByShippedTo"]
        assert collections["Orders"].other_key == "BilledTo"
        assert collections["OrdersByShippedTo"].other_key == "ShippedTo"
        assert validate_associations(database).is_valid

    def test_self_reference(self, sqlite_db):
        path = sqlite_db(
            """
            CREATE TABLE employees (
                id INTEGER PRIMARY KEY,
                manager_id INTEGER REFERENCES employees(id)
            );
            """
        )
        database = load(path)

        members = associations_of(database, "employees")
        assert sorted(members) == ["EmployeesByManager", "Manager"]
        assert members["Manager"].is_foreign_key
        assert members["EmployeesByManager"].cardinality == Cardinality.MANY
        assert validate_associations(database).is_valid

    def test_navigation_avoids_column_names(self, sqlite_db):
        path = sqlite_db(
            """
            CREATE TABLE customers (id INTEGER PRIMARY KEY);
            CREATE TABLE orders (
                id INTEGER PRIMARY KEY,
                customer TEXT,
                customer_id INTEGER REFERENCES customers(id)
            );
            """
        )
        members = associations_of(load(path), "orders")
        assert list(members) == ["CustomersByCustomer"]

    def test_unknown_parent_is_skipped(self, sqlite_db):
        path = sqlite_db(
            """
            CREATE TABLE orders (id INTEGER PRIMARY KEY, customer_id INTEGER REFERENCES gone(id));
            """
        )
        assert load(path).tables[0].type.associations == []

    def test_generated_entities_have_unique_properties(self, sqlite_db, tmp_path):
        path = sqlite_db(
            """
            CREATE TABLE customers (id INTEGER PRIMARY KEY);
            CREATE TABLE orders (
                id INTEGER PRIMARY KEY,
                billed_to INTEGER REFERENCES customers(id),
                shipped_to INTEGER REFERENCES customers(id)
            );
            CREATE TABLE employees (
                id INTEGER PRIMARY KEY,
                manager_id INTEGER REFERENCES employees(id)
            );
            """
        )
        output_dir = tmp_path / "out"
        output_dir.mkdir()
        options = GenerationOptions(
            provider="sqlite", database=str(path), language="csharp", output_dir=str(output_dir)
        )

        result = Processor().run(options)

        assert result.success, result.error_message
        entities = (output_dir / "ShopEntities.cs").read_text(encoding="utf-8")
        found = set()
        for entity in entities.split("partial class ")[1:]:
            properties = [
                line.split("{ get; set; }")[0].split()[-1]
                for line in entity.splitlines()
                if "{ get; set; }" in line
            ]
            assert len(properties) == len(set(properties))
            found.update(properties)
        assert {"CustomersByShippedTo", "EmployeesByManager"} <= found


class TestNameAliases:
    """Aliases rename tables and columns before names are formatted."""

    ALIASES = NameAliases(
        tables={"Customers": "client"},
        columns={"customers": {"EMAIL": "email_address"}},
    )

    def test_table_alias(self, shop_db):
        database = load(shop_db, aliases=self.ALIASES)
        customers = database.tables[0]
        assert customers.name == "customers"
        assert customers.type.name == "Client"
        assert customers.member == "Client"
        assert associations_of(database, "orders")["Customer"].type == "Client"

    def test_table_alias_is_pluralized(self, shop_db):
        database = load(shop_db, aliases=self.ALIASES, name_format=NameFormat(pluralize=True))
        customers = database.tables[0]
        assert customers.type.name == "Client"
        assert customers.member == "Clients"

    def test_column_alias_keeps_database_name(self, shop_db):
        customers = load(shop_db, aliases=self.ALIASES).tables[0]
        email = customers.type.columns[2]
        assert email.member == "EmailAddress"
        assert email.name == "email"

    def test_unaliased_names_unchanged(self, shop_db):
        orders = load(shop_db, aliases=self.ALIASES).tables[1]
        assert orders.type.name == "Orders"
        assert [c.member for c in orders.type.columns] == ["Id", "CustomerId", "Total", "PlacedAt"]

    def test_aliased_key_column_names_navigation(self, shop_db):
        aliases = NameAliases(columns={"orders": {"customer_id": "buyer_id"}})
        database = load(shop_db, aliases=aliases)
        child = associations_of(database, "orders")["Buyer"]
        assert child.this_key == "BuyerId"
        assert validate_associations(database).is_valid

    def test_lookup_ignores_case(self):
        assert self.ALIASES.table("CUSTOMERS") == "client"
        assert self.ALIASES.column("Customers", "email") == "email_address"
        assert self.ALIASES.column("orders", "email") == "email"
        assert NameAliases().table("orders") == "orders"
