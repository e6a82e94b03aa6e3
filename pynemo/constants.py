# pynemo/constants.py

"""
Constants shared across the scenario store, query and persistence layers.

This module defines the structural version of the store, the reserved
column names of parameter tables, and the mapping from the set
abbreviations used as dimension column names to the dimension tables
they index.
"""

from typing import Dict, Tuple

# Structural version written by create_store and reached by migrate
LATEST_VERSION = 11

# Oldest version the migration chain can upgrade
OLDEST_SUPPORTED_VERSION = 2

# Reserved columns of parameter tables
ID_COLUMN = "id"
VALUE_COLUMN = "val"

# Result tables carry the solve timestamp in this column
SOLVED_AT_COLUMN = "solvedtm"

# Year dimension; result tables indexed by it are appended, not replaced
YEAR_DIMENSION = "y"

# Suffix of views that substitute defaults for missing parameter rows
DEFAULT_VIEW_SUFFIX = "_def"

# Suffix of the unique index on a parameter table's dimension columns
UNIQUE_INDEX_SUFFIX = "_fks_unique"

# Below this many rows per worker, partitioned work runs serially
MIN_ROWS_PER_WORKER = 10000

# Timestamp format written to result tables (milliseconds precision)
SOLVED_AT_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

# Set abbreviation -> (dimension table, key column)
SET_ABBREVIATIONS: Dict[str, Tuple[str, str]] = {
    "y": ("YEAR", "val"),
    "t": ("TECHNOLOGY", "val"),
    "f": ("FUEL", "val"),
    "e": ("EMISSION", "val"),
    "m": ("MODE_OF_OPERATION", "val"),
    "r": ("REGION", "val"),
    "rr": ("REGION", "val"),
    "rg": ("REGIONGROUP", "val"),
    "s": ("STORAGE", "val"),
    "l": ("TIMESLICE", "val"),
    "n": ("NODE", "val"),
    "n1": ("NODE", "val"),
    "n2": ("NODE", "val"),
    "tg1": ("TSGROUP1", "name"),
    "tg2": ("TSGROUP2", "name"),
    "tr": ("TransmissionLine", "id"),
    "ls": ("SEASON", "val"),
    "ld": ("DAYTYPE", "val"),
    "lh": ("DAILYTIMEBRACKET", "val"),
}


def translate_set_abbreviation(abbreviation: str) -> Tuple[str, str]:
    """
    Resolve a dimension column name to its dimension table and key column.

    Unknown abbreviations are returned unchanged as the table name, keyed
    on ``val``.

    Examples
    --------
    >>> translate_set_abbreviation("y")
    ('YEAR', 'val')
    >>> translate_set_abbreviation("tg1")
    ('TSGROUP1', 'name')
    """
    return SET_ABBREVIATIONS.get(abbreviation, (abbreviation, VALUE_COLUMN))
