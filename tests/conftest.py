# tests/conftest.py

"""
Shared fixtures for scenario store tests.

Provides stores at various stages:
- A freshly created store (current version, no data)
- A store seeded with dimension sets
- A version-2 store with data, as written by older releases
"""

import pytest

from pynemo.store import create_store


# =============================================================================
# Helpers
# =============================================================================

def insert_rows(store, table, columns, rows):
    """Insert `rows` into `table` in one transaction."""
    placeholders = ", ".join("?" for _ in columns)
    with store.transaction():
        store.executemany(
            f"insert into {table} ({', '.join(columns)}) values ({placeholders})",
            rows,
        )


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "scenario.sqlite")


@pytest.fixture
def store(db_path):
    """Create a fresh store with no data."""
    store = create_store(db_path)
    yield store
    store.close()


@pytest.fixture
def seeded_store(store):
    """
    Fresh store with dimension sets populated.

    Regions: ['R1', 'R2']
    Technologies: ['T1', 'T2']
    Fuels: ['F1', 'F2']
    Years: ['2020', '2025', '2030']
    Timeslices: ['L1', 'L2']
    Emissions: ['CO2']
    Modes: ['1']
    """
    insert_rows(store, "REGION", ["val"], [("R1",), ("R2",)])
    insert_rows(store, "TECHNOLOGY", ["val"], [("T1",), ("T2",)])
    insert_rows(store, "FUEL", ["val"], [("F1",), ("F2",)])
    insert_rows(store, "YEAR", ["val"], [("2020",), ("2025",), ("2030",)])
    insert_rows(store, "TIMESLICE", ["val"], [("L1",), ("L2",)])
    insert_rows(store, "EMISSION", ["val"], [("CO2",)])
    insert_rows(store, "MODE_OF_OPERATION", ["val"], [("1",)])
    insert_rows(
        store, "YearSplit", ["id", "l", "y", "val"],
        [(i, l, y, 0.5) for i, (l, y) in enumerate(
            [(l, y) for l in ("L1", "L2") for y in ("2020", "2025", "2030")], start=1
        )],
    )
    return store


# Tables introduced after version 2
_ADDED_AFTER_V2 = [
    "RampRate", "RampingReset", "MinimumUtilization", "InterestRateStorage",
    "InterestRateTechnology", "MinShareProduction", "REGIONGROUP",
    "REMinProductionTargetRG", "RRGroup", "TransmissionAvailabilityFactor",
    "MinAnnualTransmissionNodes", "MaxAnnualTransmissionNodes",
]


@pytest.fixture
def legacy_store(store):
    """
    Version-2 store with data in every table later migrations reshape.

    - TransmissionLine without efficiency or interest rate
    - TransmissionCapacityToActivityUnit without a region column
    - REMinProductionTarget by (r, y), with RETagFuel
    - ReserveMargin by (r, y) and ReserveMarginTagTechnology by (r, t, y),
      with ReserveMarginTagFuel
    """
    with store.transaction():
        for table in _ADDED_AFTER_V2:
            store.execute(f"drop table `{table}`")
        for table in (
            "TransmissionLine", "TransmissionCapacityToActivityUnit",
            "REMinProductionTarget", "ReserveMargin", "ReserveMarginTagTechnology",
        ):
            store.execute(f"drop table `{table}`")

        store.execute(
            "CREATE TABLE `TransmissionLine` ( `id` TEXT, `n1` TEXT, `n2` TEXT, `f` TEXT, `maxflow` REAL, "
            "`reactance` REAL, `yconstruction` INTEGER, `capitalcost` REAL, `fixedcost` REAL, "
            "`variablecost` REAL, `operationallife` INTEGER, PRIMARY KEY(`id`) )"
        )
        store.execute(
            "CREATE TABLE `TransmissionCapacityToActivityUnit` ( `id` INTEGER NOT NULL UNIQUE, `f` TEXT, "
            "`val` REAL, PRIMARY KEY(`id`) )"
        )
        store.execute(
            "CREATE TABLE `REMinProductionTarget` ( `id` INTEGER NOT NULL UNIQUE, `r` TEXT, `y` TEXT, "
            "`val` REAL, PRIMARY KEY(`id`) )"
        )
        store.execute(
            "CREATE TABLE `RETagFuel` ( `id` INTEGER NOT NULL UNIQUE, `r` TEXT, `f` TEXT, `y` TEXT, "
            "`val` REAL, PRIMARY KEY(`id`) )"
        )
        store.execute(
            "CREATE TABLE `ReserveMargin` ( `id` INTEGER NOT NULL UNIQUE, `r` TEXT, `y` TEXT, "
            "`val` REAL, PRIMARY KEY(`id`) )"
        )
        store.execute(
            "CREATE TABLE `ReserveMarginTagTechnology` ( `id` INTEGER NOT NULL UNIQUE, `r` TEXT, `t` TEXT, "
            "`y` TEXT, `val` REAL, PRIMARY KEY(`id`) )"
        )
        store.execute(
            "CREATE TABLE `ReserveMarginTagFuel` ( `id` INTEGER NOT NULL UNIQUE, `r` TEXT, `f` TEXT, "
            "`y` TEXT, `val` REAL, PRIMARY KEY(`id`) )"
        )
        store.set_version(2)

    insert_rows(store, "REGION", ["val"], [("R1",)])
    insert_rows(store, "FUEL", ["val"], [("F1",), ("F2",)])
    insert_rows(store, "TECHNOLOGY", ["val"], [("T1",)])
    insert_rows(store, "YEAR", ["val"], [("2020",)])
    insert_rows(store, "NODE", ["val", "r"], [("N1", "R1"), ("N2", "R1")])
    insert_rows(
        store, "TransmissionLine",
        ["id", "n1", "n2", "f", "maxflow", "reactance", "yconstruction",
         "capitalcost", "fixedcost", "variablecost", "operationallife"],
        [("TL1", "N1", "N2", "F1", 100.0, 0.1, 2020, 1000.0, 10.0, 1.0, 40)],
    )
    insert_rows(store, "TransmissionCapacityToActivityUnit", ["id", "f", "val"], [(1, "F1", 31.536)])
    insert_rows(store, "REMinProductionTarget", ["id", "r", "y", "val"], [(1, "R1", "2020", 0.3)])
    insert_rows(store, "RETagFuel", ["id", "r", "f", "y", "val"], [(1, "R1", "F1", "2020", 1)])
    insert_rows(store, "ReserveMargin", ["id", "r", "y", "val"], [(1, "R1", "2020", 1.2)])
    insert_rows(store, "ReserveMarginTagFuel", ["id", "r", "f", "y", "val"], [(1, "R1", "F1", "2020", 1)])
    insert_rows(store, "ReserveMarginTagTechnology", ["id", "r", "t", "y", "val"], [(1, "R1", "T1", "2020", 1)])
    insert_rows(
        store, "DefaultParams", ["tablename", "val"],
        [("RETagFuel", 0.0), ("ReserveMarginTagFuel", 0.0), ("DiscountRate", 0.05)],
    )
    return store
