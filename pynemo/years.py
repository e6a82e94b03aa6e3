# pynemo/years.py

"""
Calculation year groups.

A scenario can be solved in one pass over every year in YEAR, or in
sequential groups of years (limited foresight), each group solved with
perfect foresight and seeded with the results of the previous one. Groups
are given as lists of years; a single empty group means "all years".
"""

import logging
from typing import List, Sequence

from .queries.flags import QueryFlags, in_years_predicate
from .store.connection import ScenarioStore

logger = logging.getLogger(__name__)


def check_calc_years(groups: Sequence[Sequence[int]]) -> None:
    """
    Validate calculation year groups.

    Raises
    ------
    ValueError
        If an empty group appears alongside other groups, or the groups
        overlap or are out of chronological order.

    Examples
    --------
    >>> check_calc_years([[2020, 2025], [2030]])
    >>> check_calc_years([[2030], [2020]])
    Traceback (most recent call last):
    ...
    ValueError: ...
    """
    if len(groups) > 1 and any(len(g) == 0 for g in groups):
        raise ValueError(
            "An empty group of calculation years (all years) must be the only group"
        )
    for previous, group in zip(groups, groups[1:]):
        if min(group) <= max(previous):
            raise ValueError(
                "Groups of calculation years must not overlap and must be in chronological order"
            )


def filter_calc_years(store: ScenarioStore, groups: Sequence[Sequence[int]]) -> List[List[int]]:
    """
    Drop groups that contain no year present in the store's YEAR table.

    Returns ``[[]]`` (all years) if no group remains.
    """
    known = {int(row[0]) for row in store.query("select val from YEAR")}
    kept = [list(g) for g in groups if known.intersection(int(y) for y in g)]
    if not kept and groups and not any(groups):
        return [[]]
    dropped = len(groups) - len(kept)
    if dropped:
        logger.info(f"Ignoring {dropped} group(s) of calculation years not found in YEAR")
    return kept or [[]]


def in_years_clause(years: Sequence[int]) -> str:
    """
    Quoted SQL ``IN`` list for `years`.

    Examples
    --------
    >>> in_years_clause([2020, 2025])
    "('2020', '2025')"
    """
    return in_years_predicate(years)


def year_groups_to_flags(groups: Sequence[Sequence[int]], index: int, **flags) -> QueryFlags:
    """
    Query flags for solving group `index` of `groups`.

    Parameters
    ----------
    groups : sequence of sequence of int
        Validated calculation year groups.
    index : int
        Position of the group being solved.
    **flags
        Remaining QueryFlags fields (e.g. ``transmission_modeling``).

    Returns
    -------
    QueryFlags
    """
    group = sorted(int(y) for y in groups[index])
    limited_foresight = len(groups) > 1
    last_year_prev_group = None
    if limited_foresight and index > 0:
        last_year_prev_group = max(int(y) for y in groups[index - 1])

    return QueryFlags(
        restrict_years=bool(group),
        in_years=tuple(group),
        limited_foresight=limited_foresight,
        last_year_prev_group=last_year_prev_group,
        first_modeled_year=group[0] if group else None,
        **flags,
    )
