# pynemo/store/schema.py

"""
Schema registry for the scenario store.

This module loads the store's data dictionary (``nemo_schema.yaml``) and
turns its entries into table DDL. Every table the store knows about is
described there: dimension sets, structural tables, parameter tables, and
the result quantities written after a solve.

Usage:
    from pynemo.store.schema import SchemaRegistry
    schema = SchemaRegistry()
    schema.create_table_sql("CapitalCost", foreign_keys=True)
"""

import importlib.resources
import os
from functools import lru_cache
from typing import Any, Dict, List, Optional

import yaml

from ..constants import ID_COLUMN, VALUE_COLUMN, translate_set_abbreviation
from ..errors import SchemaError

_SET_COLUMNS = {VALUE_COLUMN: "TEXT NOT NULL UNIQUE", "desc": "TEXT"}


def default_schema_path() -> str:
    """Path of the data dictionary shipped with the package."""
    return str(importlib.resources.files("pynemo").joinpath("nemo_schema.yaml"))


def quote(name: str) -> str:
    """Quote an SQL identifier with backticks."""
    return f"`{name}`"


class SchemaRegistry:
    """
    Loads and stores the scenario store's data dictionary.

    Provides methods to retrieve table kinds, dimension columns, unit
    metadata, and the ``CREATE TABLE`` statement for each table.
    """

    def __init__(self, config_path: Optional[str] = None):
        config_path = config_path or default_schema_path()
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Schema config file not found: {config_path}")
        with open(config_path, "r") as f:
            document = yaml.safe_load(f)
        if not isinstance(document, dict) or not isinstance(document.get("tables"), dict):
            raise SchemaError(f"Schema config {config_path} has no 'tables' mapping")
        self.schema: Dict[str, Dict[str, Any]] = document["tables"]
        self.retired: List[str] = list(document.get("retired") or [])

    def get_schema(self, name: str) -> Optional[Dict[str, Any]]:
        """
        Get schema definition for a given set/table/param/result name.
        E.g., 'YEAR', 'CapacityFactor', etc.
        """
        return self.schema.get(name)

    def _entry(self, name: str) -> Dict[str, Any]:
        entry = self.get_schema(name)
        if entry is None:
            raise SchemaError(f"No schema entry for '{name}'")
        return entry

    def is_set(self, name: str) -> bool:
        entry = self.get_schema(name)
        return entry is not None and entry.get('type') == 'set'

    def is_param(self, name: str) -> bool:
        entry = self.get_schema(name)
        return entry is not None and entry.get('type') == 'param'

    def is_result(self, name: str) -> bool:
        entry = self.get_schema(name)
        return entry is not None and entry.get('type') == 'result'

    def names(self, kind: str) -> List[str]:
        """All entries of one type ('set', 'table', 'param' or 'result'), in file order."""
        return [name for name, entry in self.schema.items() if entry.get('type') == kind]

    def tables(self) -> List[str]:
        """Every table created in a fresh store: sets, structural tables, then parameters."""
        return self.names('set') + self.names('table') + self.names('param')

    def dimensions(self, name: str) -> List[str]:
        """
        Dimension (index) columns of a parameter table.

        Raises
        ------
        SchemaError
            If `name` is not a parameter.
        """
        entry = self._entry(name)
        if entry.get('type') != 'param':
            raise SchemaError(f"'{name}' is not a parameter table")
        return list(entry.get('indices', []))

    def sparse_default(self, name: str) -> bool:
        """Whether a zero default for this table means "no default"."""
        entry = self.get_schema(name)
        return bool(entry and entry.get('sparse_default', False))

    def unit(self, name: str) -> Optional[str]:
        entry = self.get_schema(name)
        return entry.get('unit') if entry else None

    def names_by_unit(self, unit: str) -> List[str]:
        """Parameters and results denominated in `unit` (e.g. 'energy', 'cost/power')."""
        return [name for name, entry in self.schema.items() if entry.get('unit') == unit]

    def units(self) -> List[str]:
        """Distinct units in the dictionary, in first-seen order."""
        seen: List[str] = []
        for entry in self.schema.values():
            unit = entry.get('unit')
            if unit and unit not in seen:
                seen.append(unit)
        return seen

    # -------------------------------------------------------------------------
    # DDL
    # -------------------------------------------------------------------------

    def columns(self, name: str) -> Dict[str, str]:
        """Column name -> SQL type/constraint fragment, in table order."""
        entry = self._entry(name)
        kind = entry.get('type')
        if kind == 'set':
            columns = dict(entry.get('columns') or _SET_COLUMNS)
            columns.update(entry.get('extra_columns') or {})
            return columns
        if kind == 'table':
            return dict(entry['columns'])
        if kind == 'param':
            columns = {ID_COLUMN: "INTEGER NOT NULL UNIQUE"}
            for dim in entry.get('indices', []):
                columns[dim] = "TEXT"
            columns[VALUE_COLUMN] = entry.get('dtype', 'REAL')
            return columns
        raise SchemaError(f"'{name}' is a {kind} entry and has no table definition")

    def foreign_keys(self, name: str) -> Dict[str, str]:
        """Column -> 'TABLE.column' reference for every constrained column."""
        entry = self._entry(name)
        if entry.get('type') == 'param':
            refs = {}
            for dim in entry.get('indices', []):
                table, key = translate_set_abbreviation(dim)
                refs[dim] = f"{table}.{key}"
            return refs
        return dict(entry.get('references') or {})

    def create_table_sql(self, name: str, foreign_keys: bool = False) -> str:
        """
        Build the ``CREATE TABLE IF NOT EXISTS`` statement for a table.

        Parameters
        ----------
        name : str
            Table name (case-sensitive).
        foreign_keys : bool, optional
            If True, declare FOREIGN KEY constraints on dimension columns.

        Returns
        -------
        str
            The DDL statement.

        Raises
        ------
        SchemaError
            If the table is unknown or is a result entry.

        Examples
        --------
        >>> SchemaRegistry().create_table_sql("DiscountRate")
        'CREATE TABLE IF NOT EXISTS `DiscountRate` (`id` INTEGER NOT NULL UNIQUE, `r` TEXT, `val` REAL, PRIMARY KEY(`id`))'
        """
        entry = self._entry(name)
        parts = [f"{quote(col)} {sqltype}" for col, sqltype in self.columns(name).items()]

        kind = entry.get('type')
        if kind == 'set':
            parts.append(f"PRIMARY KEY({quote(entry.get('key', VALUE_COLUMN))})")
        elif kind == 'param':
            parts.append(f"PRIMARY KEY({quote(ID_COLUMN)})")
        elif entry.get('primary_key'):
            parts.append(f"PRIMARY KEY({', '.join(quote(c) for c in entry['primary_key'])})")

        if entry.get('unique'):
            parts.append(f"UNIQUE({', '.join(quote(c) for c in entry['unique'])})")

        if foreign_keys:
            for col, target in self.foreign_keys(name).items():
                table, key = target.split(".")
                parts.append(f"FOREIGN KEY({quote(col)}) REFERENCES {quote(table)}({quote(key)})")

        return f"CREATE TABLE IF NOT EXISTS {quote(name)} ({', '.join(parts)})"


@lru_cache(maxsize=None)
def get_registry(config_path: Optional[str] = None) -> SchemaRegistry:
    """Shared registry instance per config path."""
    return SchemaRegistry(config_path)
