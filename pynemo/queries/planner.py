# pynemo/queries/planner.py

"""
Planning and parallel execution of solve-step queries.

``plan_queries`` renders the subset of the query catalog that applies to a
step's flags; ``run_queries`` executes a plan concurrently, one read-only
connection per query, and returns one DataFrame per query name.

Example
-------
>>> flags = QueryFlags(transmission_modeling=True, restrict_years=True, in_years=(2020, 2025))
>>> plan = plan_queries("scenario.sqlite", flags)
>>> frames = run_queries(plan)
>>> frames["queryvtrade"].head()
"""

import logging
import os
import sqlite3
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import closing
from types import MappingProxyType
from typing import Dict, Mapping, NamedTuple, Optional

import pandas as pd

from .catalog import QUERY_SPECS
from .flags import QueryFlags

logger = logging.getLogger(__name__)


class Query(NamedTuple):
    """A rendered query: the store it runs against and its SQL."""
    db_path: str
    sql: str


def plan_queries(db_path: str, flags: QueryFlags) -> Mapping[str, Query]:
    """
    Render every catalog query whose condition holds for `flags`.

    Parameters
    ----------
    db_path : str
        Path of the scenario store the queries will run against.
    flags : QueryFlags
        Options of the solve step.

    Returns
    -------
    Mapping[str, Query]
        Read-only mapping of query name to Query, in catalog order.

    Raises
    ------
    ValueError
        If `flags` are inconsistent (see QueryFlags.validate).
    """
    flags.validate()
    db_path = str(db_path)
    plan = {
        spec.name: Query(db_path, spec.build(flags))
        for spec in QUERY_SPECS
        if spec.condition(flags)
    }
    logger.debug(f"Planned {len(plan)} queries for {db_path}")
    return MappingProxyType(plan)


class QueryPlanner:
    """Plans solve-step queries for one scenario store."""

    def __init__(self, db_path: str):
        self.db_path = str(db_path)

    def plan(self, flags: QueryFlags) -> Mapping[str, Query]:
        return plan_queries(self.db_path, flags)


def _run_query(query: Query) -> pd.DataFrame:
    uri = "file:" + os.path.abspath(query.db_path) + "?mode=ro"
    with closing(sqlite3.connect(uri, uri=True)) as connection:
        return pd.read_sql_query(query.sql, connection)


def run_queries(queries: Mapping[str, Query], max_workers: Optional[int] = None) -> Dict[str, pd.DataFrame]:
    """
    Execute `queries` concurrently and collect their results.

    Parameters
    ----------
    queries : Mapping[str, Query]
        Output of ``plan_queries``.
    max_workers : int, optional
        Thread cap (default: CPU count).

    Returns
    -------
    dict of str to pandas.DataFrame
        One result per query name.

    Raises
    ------
    Exception
        The first failure raised by any query; remaining results are discarded.
    """
    results: Dict[str, pd.DataFrame] = {}
    if not queries:
        return results

    lock = threading.Lock()
    workers = max(1, min(max_workers or os.cpu_count() or 1, len(queries)))

    def collect(name: str, query: Query) -> None:
        frame = _run_query(query)
        with lock:
            results[name] = frame

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(collect, name, query) for name, query in queries.items()]
        for future in as_completed(futures):
            future.result()

    logger.debug(f"Ran {len(results)} queries with {workers} worker(s)")
    return results
