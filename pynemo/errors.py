# pynemo/errors.py

"""
Exception types raised by pynemo.

Write-path failures (schema creation, migration, persistence) are not
wrapped: the enclosing transaction is rolled back and the original
exception propagates. The types below cover structural and configuration
problems detected by pynemo itself.
"""


class PyNemoError(Exception):
    """Base class for pynemo errors."""
    pass


class SchemaError(PyNemoError):
    """Raised when a table is unknown to, or malformed in, the schema registry."""
    pass


class MigrationError(PyNemoError):
    """Raised when a store cannot be migrated or the migration chain is malformed."""
    pass


class DefaultsConfigError(PyNemoError):
    """
    Raised when a configured value cannot be used.

    Attributes
    ----------
    key : str
        The offending configuration key (for defaults, the table name).
    reason : str
        Human-readable description of the problem.
    """

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid configuration value for '{key}': {reason}")
