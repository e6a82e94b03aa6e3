# tests/test_store/test_schema_registry.py

import pytest

from pynemo.errors import SchemaError
from pynemo.store.schema import SchemaRegistry, default_schema_path, get_registry


@pytest.fixture(scope="module")
def schema():
    return SchemaRegistry(default_schema_path())


class TestSchemaRegistry:
    """Tests for loading the data dictionary."""

    def test_kinds(self, schema):
        """Sets, parameters and results are told apart."""
        assert schema.is_set("REGION")
        assert schema.is_param("CapitalCost")
        assert schema.is_result("vtotalcapacityannual")
        assert not schema.is_param("REGION")

    def test_dimensions(self, schema):
        """Parameter dimensions follow the dictionary order."""
        assert schema.dimensions("OutputActivityRatio") == ["r", "t", "f", "m", "y"]
        assert schema.dimensions("ReserveMargin") == ["r", "f", "y"]

    def test_dimensions_of_set_raises(self, schema):
        """Only parameters have dimensions."""
        with pytest.raises(SchemaError, match="not a parameter"):
            schema.dimensions("REGION")

    def test_unknown_table_raises(self, schema):
        """Unknown names raise SchemaError."""
        with pytest.raises(SchemaError, match="No schema entry"):
            schema.create_table_sql("NotATable")

    def test_missing_file_raises(self, tmp_path):
        """A missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            SchemaRegistry(str(tmp_path / "missing.yaml"))

    def test_file_without_tables_raises(self, tmp_path):
        """A config without a tables mapping is rejected."""
        path = tmp_path / "bad.yaml"
        path.write_text("retired: [A]\n")
        with pytest.raises(SchemaError, match="no 'tables' mapping"):
            SchemaRegistry(str(path))

    def test_sparse_default_flag(self, schema):
        """Activity ratios treat a zero default as no default."""
        assert schema.sparse_default("OutputActivityRatio")
        assert schema.sparse_default("InputActivityRatio")
        assert not schema.sparse_default("DiscountRate")

    def test_units(self, schema):
        """Compound units are recorded as ratios."""
        assert schema.unit("CapitalCost") == "cost/power"
        assert "SpecifiedAnnualDemand" in schema.names_by_unit("energy")
        assert "energy" in schema.units()

    def test_get_registry_is_cached(self):
        assert get_registry() is get_registry()


class TestCreateTableSql:
    """Tests for generated DDL."""

    def test_param_table(self, schema):
        sql = schema.create_table_sql("DiscountRate")
        assert sql == (
            "CREATE TABLE IF NOT EXISTS `DiscountRate` (`id` INTEGER NOT NULL UNIQUE, "
            "`r` TEXT, `val` REAL, PRIMARY KEY(`id`))"
        )

    def test_integer_param(self, schema):
        """RampingReset values are integers."""
        assert "`val` INTEGER" in schema.create_table_sql("RampingReset")

    def test_foreign_keys(self, schema):
        """Dimension columns reference their sets when requested."""
        sql = schema.create_table_sql("TransmissionAvailabilityFactor", foreign_keys=True)
        assert "FOREIGN KEY(`tr`) REFERENCES `TransmissionLine`(`id`)" in sql
        assert "FOREIGN KEY(`y`) REFERENCES `YEAR`(`val`)" in sql

    def test_timeslice_group_key(self, schema):
        """Timeslice groups are keyed by name."""
        assert "PRIMARY KEY(`name`)" in schema.create_table_sql("TSGROUP1")

    def test_unique_constraint(self, schema):
        assert "UNIQUE(`rg`, `r`)" in schema.create_table_sql("RRGroup")
