# tests/test_units.py

import pytest

from pynemo.store import get_default, set_default
from pynemo.units import convert_scenario_units, unit_factor

from .conftest import insert_rows


class TestUnitFactor:
    """Tests for per-unit factors."""

    def test_base_unit(self):
        assert unit_factor("energy", {"energy": 3.6}) == 3.6

    def test_ratio(self):
        assert unit_factor("cost/power", {"cost": 2.0, "power": 4.0}) == 0.5


class TestConvertScenarioUnits:
    """Tests for rescaling a store in place."""

    def test_values_and_defaults_scaled(self, seeded_store):
        insert_rows(
            seeded_store, "SpecifiedAnnualDemand", ["id", "r", "f", "y", "val"],
            [(1, "R1", "F1", "2020", 10.0)],
        )
        insert_rows(
            seeded_store, "CapitalCost", ["id", "r", "t", "y", "val"],
            [(1, "R1", "T1", "2020", 1000.0)],
        )
        insert_rows(seeded_store, "DiscountRate", ["id", "r", "val"], [(1, "R1", 0.05)])
        set_default(seeded_store, "CapitalCost", 500.0)

        converted = convert_scenario_units(seeded_store, energy=2.0, power=4.0, cost=2.0)

        assert "SpecifiedAnnualDemand" in converted
        assert seeded_store.query("select val from SpecifiedAnnualDemand") == [(20.0,)]
        assert seeded_store.query("select val from CapitalCost") == [(500.0,)]
        assert get_default(seeded_store, "CapitalCost") == 250.0
        assert seeded_store.query("select val from DiscountRate") == [(0.05,)]
        assert "DiscountRate" not in converted

    def test_identity_leaves_values(self, seeded_store):
        insert_rows(
            seeded_store, "SpecifiedAnnualDemand", ["id", "r", "f", "y", "val"],
            [(1, "R1", "F1", "2020", 10.0)],
        )
        convert_scenario_units(seeded_store)
        assert seeded_store.query("select val from SpecifiedAnnualDemand") == [(10.0,)]

    def test_result_tables_scaled(self, store):
        with store.transaction():
            store.execute("create table vtotaldiscountedcost (r text, y text, val real, solvedtm text)")
            store.execute("insert into vtotaldiscountedcost values ('R1', '2020', 8.0, '')")
        converted = convert_scenario_units(store, cost=0.5)
        assert "vtotaldiscountedcost" in converted
        assert store.query("select val from vtotaldiscountedcost") == [(4.0,)]

    def test_absent_result_tables_skipped(self, store):
        assert "vtotaldiscountedcost" not in convert_scenario_units(store, cost=0.5)

    @pytest.mark.parametrize("bad", [0, -1.0])
    def test_non_positive_rejected(self, store, bad):
        with pytest.raises(ValueError, match="energy multiplier must be positive"):
            convert_scenario_units(store, energy=bad)
