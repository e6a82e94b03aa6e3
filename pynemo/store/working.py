# pynemo/store/working.py

"""
Working tables, auxiliary indices and result-table cleanup.

Working tables are computed once per solve step from parameter views and
joins, read by the step's queries, and dropped afterward. They are plain
tables rather than SQLite TEMP tables so that every connection opened by
the parallel query runner can see them.

- nodalstorage: storage eligible for nodal modeling (node, storage, year)
- yearintervals: gap in years between each modeled year and the previous modeled one
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .connection import ScenarioStore

logger = logging.getLogger(__name__)

WORKING_TABLES = ("nodalstorage", "yearintervals")

_NODALSTORAGE_SQL = """create table nodalstorage as
select distinct n.r as r, nsc.n as n, nsc.s as s, nsc.y as y, nsc.val as val
from NodalDistributionStorageCapacity_def nsc, NODE n,
    NodalDistributionTechnologyCapacity_def ntc, TransmissionModelingEnabled tme,
    (select r, t, f, m, y from OutputActivityRatio_def where val <> 0
    union
    select r, t, f, m, y from InputActivityRatio_def where val <> 0) ar,
    (select r, t, s, m from TechnologyFromStorage_def where val = 1
    union
    select r, t, s, m from TechnologyToStorage_def where val = 1) ts
where nsc.val > 0
and n.val = nsc.n
and ntc.val > 0 and ntc.n = nsc.n and ntc.t = ar.t and ntc.y = nsc.y
and tme.r = n.r and tme.f = ar.f and tme.y = nsc.y
and ar.r = n.r and ar.y = nsc.y
and ts.r = n.r and ts.t = ntc.t and ts.s = nsc.s and ts.m = ar.m"""


def year_intervals(years: Iterable[int], calc_years: Optional[Sequence[Sequence[int]]] = None) -> List[Tuple[str, int]]:
    """
    Gap between each modeled year and the previous modeled year.

    Modeled years are the members of `years` found in any group of
    `calc_years`; with no groups (or only empty ones) every year is
    modeled. The first modeled year gets an interval of 1.

    Examples
    --------
    >>> year_intervals([2020, 2025, 2030], [[2020], [2030]])
    [('2020', 1), ('2030', 10)]
    """
    modeled = sorted({int(y) for y in years})
    selected = {int(y) for group in (calc_years or []) for y in group}
    if selected:
        modeled = [y for y in modeled if y in selected]

    rows = []
    for i, y in enumerate(modeled):
        rows.append((str(y), y - modeled[i - 1] if i > 0 else 1))
    return rows


def create_working_tables(store: ScenarioStore, calc_years: Optional[Sequence[Sequence[int]]] = None) -> None:
    """
    (Re)build the working tables for a solve step.

    Requires the ``_def`` views of NodalDistributionStorageCapacity,
    NodalDistributionTechnologyCapacity, OutputActivityRatio,
    InputActivityRatio, TechnologyFromStorage and TechnologyToStorage.

    Parameters
    ----------
    store : ScenarioStore
        Store being solved.
    calc_years : sequence of sequence of int, optional
        All calculation year groups of the run. ``yearintervals`` then
        holds only the modeled years, each measured to the previous
        modeled year. Default: every year in YEAR.

    Raises
    ------
    sqlite3.OperationalError
        If a required view is missing (the transaction is rolled back).
    """
    with store.transaction():
        for name in WORKING_TABLES:
            store.execute(f"DROP TABLE IF EXISTS {name}")
        store.execute(_NODALSTORAGE_SQL)

        years = [row[0] for row in store.query("select val from YEAR")]
        store.execute("create table yearintervals (y text, intv integer)")
        store.executemany("insert into yearintervals values (?, ?)", year_intervals(years, calc_years))
    logger.debug("Created working tables")


def drop_working_tables(store: ScenarioStore) -> None:
    with store.transaction():
        for name in WORKING_TABLES:
            store.execute(f"DROP TABLE IF EXISTS {name}")


def create_other_indices(store: ScenarioStore) -> None:
    """Create miscellaneous indices read by solve-step queries."""
    with store.transaction():
        store.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS `TransmissionModelingEnabled_fks_unique` "
            "ON `TransmissionModelingEnabled` ( `r`, `f`, `y` )"
        )


def drop_result_tables(store: ScenarioStore) -> List[str]:
    """
    Drop every table whose name begins with ``v`` or ``sqlite_stat``.

    Both prefixes are case-sensitive, so ``Version`` is kept.

    Returns
    -------
    list of str
        Names of the dropped tables.
    """
    dropped = []
    with store.transaction():
        for name in store.tables():
            if name.startswith("v") or name.startswith("sqlite_stat"):
                store.execute(f"drop table `{name}`")
                dropped.append(name)
                logger.debug(f"Dropped table {name}.")
    return dropped


def transmission_modeling_enabled(store: ScenarioStore) -> bool:
    """Whether any region/fuel/year has a transmission modeling type."""
    rows = store.query("select count(*) from TransmissionModelingEnabled where type is not null")
    return rows[0][0] > 0
