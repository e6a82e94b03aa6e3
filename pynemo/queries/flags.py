# pynemo/queries/flags.py

"""
Flags that select and shape the queries of one solve step.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


def in_years_predicate(years: Iterable[int]) -> str:
    """
    Parenthesized, quoted list of years for an SQL ``IN`` predicate.

    Years are stored as text, so each one is quoted.

    Examples
    --------
    >>> in_years_predicate([2020, 2025])
    "('2020', '2025')"
    """
    return "(" + ", ".join(f"'{int(y)}'" for y in years) + ")"


@dataclass(frozen=True)
class QueryFlags:
    """
    Options of a solve step that determine which queries run and how.

    Attributes
    ----------
    transmission_modeling : bool
        Whether any region/fuel/year has transmission modeling enabled.
        Adds the nodal, transmission and storage-level queries.
    vproductionbytechnology_saved : bool
        Whether vproductionbytechnology is among the saved results. With
        transmission modeling, adds its nodal index queries.
    vusebytechnology_saved : bool
        Same as above, for vusebytechnology.
    restrict_years : bool
        Whether the step models a subset of YEAR.
    in_years : tuple of int
        Years modeled by the step; used when `restrict_years` is set.
    limited_foresight : bool
        Whether the step is one of several year groups solved in sequence.
    last_year_prev_group : int, optional
        Last year of the previous group, or None for the first group.
    first_modeled_year : int, optional
        First year of the current group.
    """
    transmission_modeling: bool = False
    vproductionbytechnology_saved: bool = False
    vusebytechnology_saved: bool = False
    restrict_years: bool = False
    in_years: Tuple[int, ...] = ()
    limited_foresight: bool = False
    last_year_prev_group: Optional[int] = None
    first_modeled_year: Optional[int] = None

    @property
    def has_previous_group(self) -> bool:
        """Whether results of an earlier year group are available to join."""
        return self.limited_foresight and self.last_year_prev_group is not None

    def validate(self) -> None:
        """
        Raises
        ------
        ValueError
            If years are restricted but none are given.
        """
        if self.restrict_years and not self.in_years:
            raise ValueError("restrict_years is set but in_years is empty")
        if not self.transmission_modeling and (
            self.vproductionbytechnology_saved or self.vusebytechnology_saved
        ):
            logger.warning(
                "Saved-quantity flags only add queries when transmission modeling is enabled; ignoring them"
            )

    def years_in(self, column: str, keyword: str = "and") -> str:
        """
        Year restriction on `column`, prefixed with `keyword`, or '' if years
        are not restricted.
        """
        if not self.restrict_years:
            return ""
        return f"{keyword} {column} in {in_years_predicate(self.in_years)}"
