# pynemo/parallel.py

"""
Helpers for splitting row-oriented work across a thread pool.
"""

import os
from typing import List, Optional, Tuple

from .constants import MIN_ROWS_PER_WORKER


def worker_count(n_rows: int, max_workers: Optional[int] = None,
                 min_rows_per_worker: int = MIN_ROWS_PER_WORKER) -> int:
    """
    Number of workers to use for `n_rows` rows.

    One worker per `min_rows_per_worker` rows (rounded up), capped at
    `max_workers` (default: CPU count). Never less than 1.

    Examples
    --------
    >>> worker_count(10000, max_workers=8)
    1
    >>> worker_count(10001, max_workers=8)
    2
    """
    if min_rows_per_worker < 1:
        raise ValueError("min_rows_per_worker must be at least 1")
    cap = max_workers or os.cpu_count() or 1
    if n_rows <= 0:
        return 1
    return max(1, min(cap, (n_rows - 1) // min_rows_per_worker + 1))


def contiguous_blocks(n_rows: int, workers: int) -> List[Tuple[int, int]]:
    """
    Split ``range(n_rows)`` into `workers` contiguous ``(start, stop)`` blocks.

    Blocks have ``n_rows // workers`` rows each; the last block also takes
    the remainder.

    Examples
    --------
    >>> contiguous_blocks(10, 3)
    [(0, 3), (3, 6), (6, 10)]
    """
    if workers < 1:
        raise ValueError("workers must be at least 1")
    size = n_rows // workers
    blocks = []
    for i in range(workers):
        start = i * size
        stop = n_rows if i == workers - 1 else start + size
        blocks.append((start, stop))
    return blocks
