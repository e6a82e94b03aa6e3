# pynemo/config.py

"""
Run configuration loaded from a YAML file.

Example ``nemo.yaml``::

    calcyears: ["2020|2025", "2030"]
    varstosave: [vtotalcapacityannual, vproductionbytechnologyannual]
    restrictvars: true
    reportzeros: false
    quiet: false
    startvalsdbpath: previous_run.sqlite
    startvalsvars: [vnewcapacity]
    defaults:
      DiscountRate: 0.05
      OutputActivityRatio: 0

Each ``calcyears`` entry is a group of years solved together; years
within a group are separated by vertical bars. An empty list (or no
``calcyears`` key) means one group covering all years.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from .errors import DefaultsConfigError
from .store.core import validate_defaults
from .years import check_calc_years

logger = logging.getLogger(__name__)

_BOOL_KEYS = ("restrictvars", "reportzeros", "quiet")
_KNOWN_KEYS = ("calcyears", "varstosave", "startvalsdbpath", "startvalsvars", "defaults") + _BOOL_KEYS


@dataclass(frozen=True)
class RunConfig:
    """
    Options for calculating a scenario.

    Attributes
    ----------
    calcyears : tuple of tuple of int
        Year groups solved in sequence; ``((),)`` means all years at once.
    varstosave : tuple of str
        Result quantities to save, lower-cased.
    restrictvars : bool
        Restrict variables to index combinations present in the data.
    reportzeros : bool
        Save zero-valued results.
    quiet : bool
        Suppress console logging.
    startvalsdbpath : str, optional
        Previously solved store to read start values from.
    startvalsvars : tuple of str
        Quantities to read start values for (empty: all).
    defaults : dict of str to float
        Parameter defaults applied when creating a store.
    """
    calcyears: Tuple[Tuple[int, ...], ...] = ((),)
    varstosave: Tuple[str, ...] = ()
    restrictvars: bool = True
    reportzeros: bool = False
    quiet: bool = False
    startvalsdbpath: Optional[str] = None
    startvalsvars: Tuple[str, ...] = ()
    defaults: Dict[str, float] = field(default_factory=dict)


def _parse_year(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a year")
    return int(str(value).strip())


def parse_calc_years(value: Any) -> List[List[int]]:
    """
    Normalize a ``calcyears`` setting to a list of year groups.

    Accepts a single year, a list of years or ``"2020|2025"`` strings, or a
    list of lists. None or an empty list means all years (``[[]]``).

    Examples
    --------
    >>> parse_calc_years("2020|2025")
    [[2020, 2025]]
    >>> parse_calc_years([2020, "2025|2030"])
    [[2020], [2025, 2030]]
    """
    if value is None or value == [] or value == "":
        return [[]]
    if not isinstance(value, list):
        value = [value]

    groups = []
    for entry in value:
        if isinstance(entry, list):
            groups.append([_parse_year(y) for y in entry])
        else:
            groups.append([_parse_year(y) for y in str(entry).split("|") if y.strip()])
    return groups


def _string_list(key: str, value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [v for v in value.split(",") if v.strip()]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise DefaultsConfigError(key, "expected a list of names")
    return tuple(v.strip() for v in value)


def load_defaults(source: Union[str, Path, Mapping[str, Any]]) -> Dict[str, float]:
    """
    Load parameter defaults from a YAML file or a mapping.

    A file may hold the mapping at top level or under a ``defaults`` key.

    Raises
    ------
    FileNotFoundError
        If `source` is a path that does not exist.
    DefaultsConfigError
        Naming the first key whose value is not numeric.
    """
    if isinstance(source, Mapping):
        return validate_defaults(source)

    if not os.path.exists(source):
        raise FileNotFoundError(f"Defaults file not found: {source}")
    with open(source, "r") as f:
        document = yaml.safe_load(f) or {}
    if not isinstance(document, dict):
        raise DefaultsConfigError("defaults", "expected a mapping of table name to value")
    if isinstance(document.get("defaults"), dict):
        document = document["defaults"]
    return validate_defaults(document)


def load_run_config(path: Union[str, Path]) -> RunConfig:
    """
    Load and validate a run configuration.

    Raises
    ------
    FileNotFoundError
        If `path` does not exist.
    DefaultsConfigError
        Naming the key whose value cannot be used.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Run config file not found: {path}")
    with open(path, "r") as f:
        document = yaml.safe_load(f) or {}
    if not isinstance(document, dict):
        raise DefaultsConfigError("<root>", "expected a mapping of settings")

    for key in document:
        if key not in _KNOWN_KEYS:
            logger.warning(f"Ignoring unknown configuration key '{key}' in {path}")

    try:
        groups = parse_calc_years(document.get("calcyears"))
        check_calc_years(groups)
    except ValueError as exc:
        raise DefaultsConfigError("calcyears", str(exc)) from exc

    flags = {}
    for key in _BOOL_KEYS:
        if key in document:
            if not isinstance(document[key], bool):
                raise DefaultsConfigError(key, f"expected true or false, got {document[key]!r}")
            flags[key] = document[key]

    startvalsdbpath = document.get("startvalsdbpath")
    if startvalsdbpath is not None and not isinstance(startvalsdbpath, str):
        raise DefaultsConfigError("startvalsdbpath", "expected a path")

    defaults = document.get("defaults") or {}
    if not isinstance(defaults, dict):
        raise DefaultsConfigError("defaults", "expected a mapping of table name to value")

    config = RunConfig(
        calcyears=tuple(tuple(g) for g in groups),
        varstosave=tuple(v.lower() for v in _string_list("varstosave", document.get("varstosave"))),
        startvalsdbpath=startvalsdbpath,
        startvalsvars=tuple(v.lower() for v in _string_list("startvalsvars", document.get("startvalsvars"))),
        defaults=validate_defaults(defaults),
        **flags,
    )
    logger.info(f"Read run configuration from {path}.")
    return config
