# pynemo/store/connection.py

"""
Connection wrapper for a scenario store (a single SQLite file).

ScenarioStore holds one ``sqlite3`` connection opened in autocommit mode
so that transaction boundaries are always explicit: every mutating
operation in pynemo runs inside ``store.transaction()``, which commits on
success and rolls back and re-raises on failure.

Example
-------
>>> with ScenarioStore.open("scenario.sqlite") as store:
...     with store.transaction():
...         store.execute("insert into REGION (val) values (?)", ("R1",))
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional, Sequence, Union

import pandas as pd

logger = logging.getLogger(__name__)


class ScenarioStore:
    """
    An open scenario store.

    Attributes
    ----------
    path : str
        Filesystem path of the SQLite file.
    connection : sqlite3.Connection
        Underlying connection (autocommit; transactions are explicit).
    """

    def __init__(self, path: str, connection: sqlite3.Connection):
        self.path = path
        self.connection = connection

    @classmethod
    def open(cls, path: Union[str, Path], foreign_keys: bool = False) -> "ScenarioStore":
        """
        Open (or create) the store at `path`.

        Parameters
        ----------
        path : str or Path
            Path to the SQLite file. Created if it does not exist.
        foreign_keys : bool, optional
            If True, enforce FOREIGN KEY constraints on this connection.

        Returns
        -------
        ScenarioStore

        Raises
        ------
        OSError
            If the file cannot be opened or is not an SQLite database.
        """
        path = str(path)
        parent = os.path.dirname(os.path.abspath(path))
        if not os.path.isdir(parent):
            raise OSError(f"Cannot open scenario store at {path}: directory {parent} does not exist")
        if os.path.isdir(path):
            raise OSError(f"Cannot open scenario store at {path}: path is a directory")

        try:
            connection = sqlite3.connect(path, isolation_level=None, check_same_thread=False)
        except sqlite3.Error as exc:
            raise OSError(f"Cannot open scenario store at {path}: {exc}") from exc

        try:
            # Fails on files that are not SQLite databases
            connection.execute("select 1 from sqlite_master limit 1").fetchall()
            if foreign_keys:
                connection.execute("PRAGMA foreign_keys = ON")
        except sqlite3.DatabaseError as exc:
            connection.close()
            raise OSError(f"Cannot open scenario store at {path}: {exc}") from exc

        logger.debug(f"Opened scenario store at {path}")
        return cls(path, connection)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> "ScenarioStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run the enclosed block in one transaction.

        Commits on normal exit. On any exception the transaction is rolled
        back and the original exception re-raised.
        """
        self.connection.execute("BEGIN")
        try:
            yield self.connection
        except BaseException:
            self.connection.execute("ROLLBACK")
            raise
        else:
            self.connection.execute("COMMIT")

    @property
    def in_transaction(self) -> bool:
        return self.connection.in_transaction

    def vacuum(self) -> None:
        """Reclaim free space. Must run outside a transaction."""
        self.connection.execute("VACUUM")

    # -------------------------------------------------------------------------
    # Statements
    # -------------------------------------------------------------------------

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        return self.connection.execute(sql, params)

    def executemany(self, sql: str, rows) -> sqlite3.Cursor:
        return self.connection.executemany(sql, rows)

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[tuple]:
        """Run a SELECT and return all rows as tuples."""
        return self.connection.execute(sql, params).fetchall()

    def read_sql(self, sql: str, params: Sequence[Any] = ()) -> pd.DataFrame:
        """Run a SELECT and return the result as a DataFrame."""
        return pd.read_sql_query(sql, self.connection, params=list(params))

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def tables(self) -> List[str]:
        rows = self.query("select name from sqlite_master where type = 'table' order by name")
        return [row[0] for row in rows]

    def views(self) -> List[str]:
        rows = self.query("select name from sqlite_master where type = 'view' order by name")
        return [row[0] for row in rows]

    def indexes(self, table: Optional[str] = None) -> List[str]:
        if table is None:
            rows = self.query("select name from sqlite_master where type = 'index' order by name")
        else:
            rows = self.query(
                "select name from sqlite_master where type = 'index' and tbl_name = ? order by name",
                (table,),
            )
        return [row[0] for row in rows]

    def has_table(self, name: str) -> bool:
        rows = self.query("select 1 from sqlite_master where type = 'table' and name = ?", (name,))
        return len(rows) > 0

    def columns(self, table: str) -> List[str]:
        """Column names of a table or view, in declaration order ([] if absent)."""
        rows = self.query(f"PRAGMA table_info('{table}')")
        return [row[1] for row in rows]

    @property
    def version(self) -> Optional[int]:
        """Structural version recorded in the Version table, or None if absent."""
        if not self.has_table("Version"):
            return None
        rows = self.query("select max(version) from Version")
        return None if rows[0][0] is None else int(rows[0][0])

    def set_version(self, version: int) -> None:
        """Overwrite the version marker; call inside a transaction."""
        self.execute("delete from Version")
        self.execute("insert into Version (version) values (?)", (version,))
