# pynemo/store/defaults.py

"""
Default-value views for parameter tables.

Parameter tables are sparse: a missing row for a key combination means the
table-level default from DefaultParams applies. For each parameter table T
this module maintains a view ``T_def`` that is dense when T has a default
(every combination of its dimension sets, left-joined to T's rows, with
the default substituted where no row exists) and a plain projection of T
otherwise.

A ``T_def`` view is only valid while:
- a unique index ``T_fks_unique`` exists on T's dimension columns, and
- its SQL matches T's current entry in DefaultParams.

``set_default`` is therefore the only supported way to change a default
after a store has been created; it regenerates the view in the same call.
"""

import logging
import math
import numbers
from typing import Iterable, List, Optional

from ..constants import (
    DEFAULT_VIEW_SUFFIX,
    ID_COLUMN,
    UNIQUE_INDEX_SUFFIX,
    VALUE_COLUMN,
    translate_set_abbreviation,
)
from ..errors import DefaultsConfigError
from .connection import ScenarioStore
from .schema import SchemaRegistry, get_registry

logger = logging.getLogger(__name__)


def view_name(table: str) -> str:
    return table + DEFAULT_VIEW_SUFFIX


def index_name(table: str) -> str:
    return table + UNIQUE_INDEX_SUFFIX


def dimension_columns(store: ScenarioStore, table: str) -> List[str]:
    """Every column of `table` except the identifier and value columns."""
    return [c for c in store.columns(table) if c not in (ID_COLUMN, VALUE_COLUMN)]


def get_default(store: ScenarioStore, table: str) -> Optional[float]:
    """
    Current default for a parameter table.

    Returns
    -------
    float or None
        The registered default, or None if the table has none.
    """
    rows = store.query("select val from DefaultParams where tablename = ?", (table,))
    return None if not rows else float(rows[0][0])


def default_view_sql(table: str, dims: List[str], default: Optional[float]) -> str:
    """
    Build the ``CREATE VIEW`` statement for ``<table>_def``.

    Parameters
    ----------
    table : str
        Parameter table name.
    dims : list of str
        Dimension columns of the table, in table order.
    default : float or None
        Default value, or None for a plain projection.

    Returns
    -------
    str
    """
    if default is None or not dims:
        return f"create view {view_name(table)} as select * from {table}"

    outer = ", ".join(dims)
    inner = []
    sources = []
    joins = []
    for dim in dims:
        set_table, key = translate_set_abbreviation(dim)
        inner.append(f"{dim}_tab.{key} as {dim}")
        sources.append(f"{set_table} as {dim}_tab")
        joins.append(f"t.{dim} = {dim}_tab.{key}")
    inner.append(f"t.{VALUE_COLUMN} as {VALUE_COLUMN}")

    return (
        f"create view {view_name(table)} as select {outer}, ifnull({VALUE_COLUMN}, {default!r}) as {VALUE_COLUMN} "
        f"from (select {', '.join(inner)} from {', '.join(sources)} "
        f"left join {table} t on {' and '.join(joins)})"
    )


def refresh_default_views(
    store: ScenarioStore,
    tables: Iterable[str],
    registry: Optional[SchemaRegistry] = None,
) -> None:
    """
    Rebuild the unique index and ``_def`` view of each named table.

    For each table: drop its view and unique index, derive the dimension
    columns from the table's current columns, recreate the unique index,
    and recreate the view using the table's current default. All tables
    are processed in one transaction; any failure rolls back every change
    and re-raises.

    Parameters
    ----------
    store : ScenarioStore
        Open store.
    tables : iterable of str
        Parameter table names (case-sensitive).
    registry : SchemaRegistry, optional
        Source of the per-table ``sparse_default`` flag (default: packaged schema).
    """
    registry = registry or get_registry()
    tables = list(tables)

    with store.transaction():
        for table in tables:
            _rebuild_view(store, table, registry)

    logger.debug(f"Refreshed default views for {len(tables)} table(s)")


def _rebuild_view(store: ScenarioStore, table: str, registry: SchemaRegistry) -> None:
    # Caller owns the transaction
    store.execute(f"drop view if exists {view_name(table)}")
    store.execute(f"drop index if exists {index_name(table)}")

    dims = dimension_columns(store, table)
    default = get_default(store, table)
    if default is not None and default == 0.0 and registry.sparse_default(table):
        # Zero-valued entries of sparse parameters are never read
        default = None

    if dims:
        store.execute(f"create unique index {index_name(table)} on {table} ({', '.join(dims)})")
    store.execute(default_view_sql(table, dims, default))


def set_default(
    store: ScenarioStore,
    table: str,
    value: float,
    registry: Optional[SchemaRegistry] = None,
) -> None:
    """
    Set the default value for a parameter table and regenerate its view.

    The upsert into DefaultParams and the view rebuild share one
    transaction, so the view never disagrees with the stored default.

    Raises
    ------
    DefaultsConfigError
        If `value` is not a finite number.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise DefaultsConfigError(table, f"default must be numeric, got {value!r}")
    if not math.isfinite(value):
        raise DefaultsConfigError(table, f"default must be finite, got {value!r}")
    registry = registry or get_registry()

    with store.transaction():
        store.execute(
            "INSERT OR REPLACE INTO DefaultParams (tablename, val) values (?, ?)",
            (table, float(value)),
        )
        _rebuild_view(store, table, registry)
    logger.info(f"Updated default value for parameter {table}. New default = {float(value)}.")


def drop_default_views(store: ScenarioStore) -> List[str]:
    """
    Drop every view whose name ends with ``_def`` and compact the store.

    Returns
    -------
    list of str
        Names of the dropped views.
    """
    dropped = []
    with store.transaction():
        for name in store.views():
            if name.endswith(DEFAULT_VIEW_SUFFIX):
                store.execute(f"DROP VIEW {name}")
                dropped.append(name)
    store.vacuum()
    return dropped


def default_view_tables(registry: Optional[SchemaRegistry] = None) -> List[str]:
    """Parameter tables whose ``_def`` views are read during a solve step."""
    registry = registry or get_registry()
    return registry.names('param')
