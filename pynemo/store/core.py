# pynemo/store/core.py

"""
Creation of scenario stores.

``create_store`` lays down the complete current schema (dimension sets,
structural tables, parameter tables, DefaultParams and the version marker)
in a single transaction, writes any supplied defaults, and compacts the
file. It is destructive: every table the schema knows about is dropped and
recreated.

Example
-------
>>> from pynemo.store import create_store
>>> store = create_store("scenario.sqlite", defaults={"DiscountRate": 0.05})
>>> store.version
11
"""

import logging
import math
import numbers
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from ..constants import LATEST_VERSION
from ..errors import DefaultsConfigError
from .connection import ScenarioStore
from .defaults import drop_default_views
from .schema import SchemaRegistry, get_registry

logger = logging.getLogger(__name__)


def validate_defaults(defaults: Optional[Mapping[str, float]]) -> Dict[str, float]:
    """
    Check that every default is numeric and return them as floats.

    Raises
    ------
    DefaultsConfigError
        Naming the first key whose value is missing, not numeric or not finite.
    """
    validated: Dict[str, float] = {}
    for key, value in (defaults or {}).items():
        if not isinstance(key, str) or not key:
            raise DefaultsConfigError(str(key), "table name must be a non-empty string")
        if value is None or isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise DefaultsConfigError(key, f"default must be numeric, got {value!r}")
        if not math.isfinite(value):
            raise DefaultsConfigError(key, f"default must be finite, got {value!r}")
        validated[key] = float(value)
    return validated


def create_store(
    path: Union[str, Path],
    defaults: Optional[Mapping[str, float]] = None,
    foreign_keys: bool = False,
    registry: Optional[SchemaRegistry] = None,
) -> ScenarioStore:
    """
    Create the scenario schema at `path` and return the open store.

    Parameters
    ----------
    path : str or Path
        Target SQLite file (created if missing).
    defaults : mapping of str to float, optional
        Parameter table name -> default value, written to DefaultParams.
    foreign_keys : bool, optional
        If True, declare FOREIGN KEY constraints from parameter dimension
        columns to their dimension tables.
    registry : SchemaRegistry, optional
        Data dictionary to build from (default: packaged schema).

    Returns
    -------
    ScenarioStore
        The open store, at the latest structural version.

    Raises
    ------
    OSError
        If `path` cannot be opened.
    DefaultsConfigError
        If a default value is not numeric.
    """
    registry = registry or get_registry()
    validated = validate_defaults(defaults)
    for key in validated:
        if not registry.is_param(key):
            logger.warning(f"Default supplied for '{key}', which is not a known parameter table")

    store = ScenarioStore.open(path)
    logger.info(f"Opened SQLite database at {store.path}.")

    try:
        # Views referencing tables about to be rebuilt would go stale
        drop_default_views(store)

        with store.transaction():
            for name in registry.retired + registry.tables() + ["DefaultParams", "Version"]:
                store.execute(f"drop table if exists `{name}`")

            store.execute("CREATE TABLE `Version` (`version` INTEGER, PRIMARY KEY(`version`))")
            store.set_version(LATEST_VERSION)

            for name in registry.tables():
                store.execute(registry.create_table_sql(name, foreign_keys=foreign_keys))

            store.execute(
                "CREATE TABLE IF NOT EXISTS `DefaultParams` ( `id` INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT, "
                "`tablename` TEXT NOT NULL, `val` REAL NOT NULL )"
            )
            store.execute(
                "CREATE UNIQUE INDEX `DefaultParams_tablename_unique` ON `DefaultParams` (`tablename`)"
            )
            store.executemany(
                "INSERT INTO DefaultParams (tablename, val) values (?, ?)",
                list(validated.items()),
            )

        store.vacuum()
    except BaseException:
        store.close()
        raise

    logger.info(f"Added scenario structure (version {LATEST_VERSION}) to SQLite database at {store.path}.")
    return store
