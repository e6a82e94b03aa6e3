# pynemo/indexing.py

"""
Prefix indexes over query results.

A prefix index answers "given the values of the first i columns, which
values occur in column i+1?". The model builder uses these to restrict
variables and constraints to index combinations that actually occur in the
scenario data, rather than the full Cartesian product of the sets.

For columns ``[c0, c1, c2]`` the result is two dicts:

- ``{(v0,): {v1, ...}}``
- ``{(v0, v1): {v2, ...}}``

Example
-------
>>> rows = [("R1", "T1", "2020"), ("R1", "T2", "2020")]
>>> build_index(rows, [0, 1, 2])
[{('R1',): {'T1', 'T2'}}, {('R1', 'T1'): {'2020'}, ('R1', 'T2'): {'2020'}}]
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Hashable, List, Optional, Sequence, Set, Tuple, Union

import pandas as pd

from .constants import MIN_ROWS_PER_WORKER
from .parallel import contiguous_blocks, worker_count

logger = logging.getLogger(__name__)

PrefixIndex = List[Dict[Tuple[Hashable, ...], Set[Hashable]]]
Rows = Union[pd.DataFrame, Sequence[Sequence[Any]]]


def _as_rows(rows: Rows, columns: Sequence[Union[int, str]]) -> List[Tuple[Any, ...]]:
    """Project `rows` onto `columns`, as a list of tuples."""
    if len(columns) < 2:
        raise ValueError("build_index needs at least two columns")
    if isinstance(rows, pd.DataFrame):
        if all(isinstance(c, str) for c in columns):
            frame = rows.loc[:, list(columns)]
        else:
            frame = rows.iloc[:, list(columns)]
        return list(frame.itertuples(index=False, name=None))
    return [tuple(row[c] for c in columns) for row in rows]


def _index_block(rows: Sequence[Tuple[Any, ...]], depth: int) -> PrefixIndex:
    index: PrefixIndex = [dict() for _ in range(depth - 1)]
    for row in rows:
        for i in range(depth - 1):
            index[i].setdefault(row[: i + 1], set()).add(row[i + 1])
    return index


def build_index(rows: Rows, columns: Sequence[Union[int, str]]) -> PrefixIndex:
    """
    Build a prefix index over `columns` of `rows`.

    Parameters
    ----------
    rows : pandas.DataFrame or sequence of sequences
        Query result.
    columns : sequence of int or str
        Column positions (0-based), or names when `rows` is a DataFrame.

    Returns
    -------
    list of dict
        ``len(columns) - 1`` dicts; dict i maps tuples of the first i+1
        column values to the set of values seen in column i+1.

    Raises
    ------
    ValueError
        If fewer than two columns are given.
    """
    projected = _as_rows(rows, columns)
    return _index_block(projected, len(columns))


def _merge(into: PrefixIndex, other: PrefixIndex) -> None:
    for target, source in zip(into, other):
        for key, values in source.items():
            target.setdefault(key, set()).update(values)


def build_index_parallel(
    rows: Rows,
    columns: Sequence[Union[int, str]],
    max_workers: Optional[int] = None,
    min_rows_per_worker: int = MIN_ROWS_PER_WORKER,
) -> PrefixIndex:
    """
    Same result as ``build_index``, built over contiguous row blocks in a
    thread pool and merged by set union.

    Small inputs (at most `min_rows_per_worker` rows) are indexed serially.
    An exception in any block propagates to the caller.
    """
    projected = _as_rows(rows, columns)
    depth = len(columns)
    workers = worker_count(len(projected), max_workers, min_rows_per_worker)
    if workers == 1:
        return _index_block(projected, depth)

    blocks = contiguous_blocks(len(projected), workers)
    logger.debug(f"Indexing {len(projected)} rows in {workers} blocks")

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_index_block, projected[start:stop], depth) for start, stop in blocks]
        partials = [future.result() for future in futures]

    merged: PrefixIndex = [dict() for _ in range(depth - 1)]
    for partial in partials:
        _merge(merged, partial)
    return merged
