# pynemo/results/persister.py

"""
Writing solved quantities back to the scenario store, and reading them out.

Each saved quantity becomes a table named after it, with one text column
per dimension plus ``val`` and ``solvedtm``. Quantities indexed by year
(``y``) are appended to, so successive year groups of a limited-foresight
run accumulate in one table; all others are replaced on every write.

Example
-------
>>> containers = {"vtotalcapacityannual": MappingResult(["r", "t", "y"], {("R1", "T1", "2020"): 5.0})}
>>> persist(containers, {"vtotalcapacityannual"}, store, datetime.now())
{'vtotalcapacityannual': 1}
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, Collection, Dict, Hashable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from ..constants import MIN_ROWS_PER_WORKER, SOLVED_AT_COLUMN, SOLVED_AT_FORMAT, VALUE_COLUMN, YEAR_DIMENSION
from ..parallel import contiguous_blocks, worker_count
from ..store.connection import ScenarioStore
from .containers import ResultContainer, index_tuple

logger = logging.getLogger(__name__)

Row = Tuple[object, ...]


def format_solved_at(solved_at: Union[str, datetime]) -> str:
    """
    Render a solve timestamp as stored in result tables.

    Examples
    --------
    >>> format_solved_at(datetime(2024, 5, 1, 12, 30, 15, 123456))
    '2024-05-01 12:30:15.123'
    """
    if isinstance(solved_at, datetime):
        return solved_at.strftime(SOLVED_AT_FORMAT)[:-3]
    return str(solved_at)


def _to_rows(
    items: Sequence[Tuple[Tuple[Hashable, ...], float]],
    solved_at: str,
    keep_zeros: bool,
) -> List[Row]:
    rows = []
    for index, value in items:
        value = float(value)
        if value == 0 and not keep_zeros:
            continue
        rows.append(tuple(str(i) for i in index) + (value, solved_at))
    return rows


def _read_rows(
    container: ResultContainer,
    keys: Sequence[Any],
    solved_at: str,
    keep_zeros: bool,
) -> List[Row]:
    """Read the values of `keys` from `container` and convert them to rows."""
    items = []
    for key in keys:
        value = container.value(key)
        if value is None:
            continue
        items.append((index_tuple(key), value))
    return _to_rows(items, solved_at, keep_zeros)


def _write(store: ScenarioStore, name: str, dimensions: Sequence[str], rows: List[Row]) -> None:
    columns = [f"'{d}' text" for d in dimensions]
    columns += [f"'{VALUE_COLUMN}' real", f"'{SOLVED_AT_COLUMN}' text"]
    placeholders = ", ".join("?" for _ in range(len(dimensions) + 2))

    with store.transaction():
        if YEAR_DIMENSION not in dimensions:
            store.execute(f"drop table if exists '{name}'")
        store.execute(f"create table if not exists '{name}' ({', '.join(columns)})")
        store.executemany(f"insert into '{name}' values ({placeholders})", rows)


def _selected_names(containers: Mapping[str, ResultContainer], selected: Collection[str]) -> List[str]:
    return sorted(set(selected) & set(containers))


def persist(
    containers: Mapping[str, ResultContainer],
    selected: Collection[str],
    store: ScenarioStore,
    solved_at: Union[str, datetime],
    keep_zeros: bool = False,
) -> Dict[str, int]:
    """
    Save each selected quantity to its own table.

    Parameters
    ----------
    containers : Mapping[str, ResultContainer]
        Quantity name -> result container.
    selected : collection of str
        Names to save; names without a container are ignored.
    store : ScenarioStore
        Target store.
    solved_at : str or datetime
        Solve timestamp written to every row.
    keep_zeros : bool, optional
        If False (default), zero-valued entries are not written.

    Returns
    -------
    dict of str to int
        Rows written per quantity.

    Raises
    ------
    sqlite3.Error
        If a write fails. That quantity's transaction is rolled back;
        quantities written earlier stay committed.
    """
    stamp = format_solved_at(solved_at)
    written: Dict[str, int] = {}
    for name in _selected_names(containers, selected):
        container = containers[name]
        rows = _to_rows(list(container.items()), stamp, keep_zeros)
        _write(store, name, list(container.dimensions), rows)
        written[name] = len(rows)
        logger.debug(f"Saved {len(rows)} rows to {name}")
    logger.info(f"Saved results for {len(written)} quantities to {store.path}.")
    return written


def persist_parallel(
    containers: Mapping[str, ResultContainer],
    selected: Collection[str],
    store: ScenarioStore,
    solved_at: Union[str, datetime],
    keep_zeros: bool = False,
    max_workers: Optional[int] = None,
    min_rows_per_worker: int = MIN_ROWS_PER_WORKER,
) -> Dict[str, int]:
    """
    Same output as ``persist``, with value extraction spread over threads.

    Each quantity's keys are split into contiguous slices. Workers read the
    values of their slice from the container and convert them; the rows
    are reassembled in slice order and the calling thread performs the
    write. A worker exception propagates before anything is written for
    that quantity.
    """
    stamp = format_solved_at(solved_at)
    written: Dict[str, int] = {}
    cap = max_workers or os.cpu_count() or 1

    with ThreadPoolExecutor(max_workers=cap) as executor:
        for name in _selected_names(containers, selected):
            container = containers[name]
            keys = container.keys()
            workers = worker_count(len(keys), cap, min_rows_per_worker)
            blocks = contiguous_blocks(len(keys), workers)
            futures = [
                executor.submit(_read_rows, container, keys[start:stop], stamp, keep_zeros)
                for start, stop in blocks
            ]
            rows: List[Row] = []
            for future in futures:
                rows.extend(future.result())

            _write(store, name, list(container.dimensions), rows)
            written[name] = len(rows)
            logger.debug(f"Saved {len(rows)} rows to {name} using {workers} worker(s)")

    logger.info(f"Saved results for {len(written)} quantities to {store.path}.")
    return written


def read_results(store: ScenarioStore, name: str) -> pd.DataFrame:
    """
    Read a saved quantity.

    Raises
    ------
    KeyError
        If the store has no table for `name`.
    """
    if not store.has_table(name):
        raise KeyError(f"No saved results for '{name}' in {store.path}")
    return store.read_sql(f"select * from '{name}'")


def read_start_values(
    path: str,
    selected: Optional[Collection[str]] = None,
) -> Dict[str, Dict[Tuple[str, ...], float]]:
    """
    Read saved quantities from a previously solved store, for use as
    solver start values.

    Parameters
    ----------
    path : str
        Path of the solved store.
    selected : collection of str, optional
        Quantities to read (default: every saved quantity).

    Returns
    -------
    dict
        Quantity name -> {index tuple: value}. Empty if `path` does not
        exist or is not a scenario store. Where a year-indexed quantity
        was saved more than once, the most recent row wins.
    """
    if not os.path.isfile(path):
        logger.info(f"Could not find start values database {path}; continuing without start values.")
        return {}
    try:
        store = ScenarioStore.open(path)
    except OSError as exc:
        logger.info(f"Could not open start values database {path} ({exc}); continuing without start values.")
        return {}

    values: Dict[str, Dict[Tuple[str, ...], float]] = {}
    with store:
        wanted = set(selected) if selected is not None else None
        for name in store.tables():
            if not name.startswith("v") or (wanted is not None and name not in wanted):
                continue
            dims = [c for c in store.columns(name) if c not in (VALUE_COLUMN, SOLVED_AT_COLUMN)]
            select = ", ".join([f"`{d}`" for d in dims] + [f"`{VALUE_COLUMN}`"])
            rows = store.query(f"select {select} from `{name}` order by `{SOLVED_AT_COLUMN}`")
            values[name] = {tuple(row[:-1]): row[-1] for row in rows}
    logger.info(f"Loaded start values for {len(values)} quantities from {path}.")
    return values
