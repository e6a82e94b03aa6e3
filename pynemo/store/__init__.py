# pynemo/store/__init__.py

"""
Scenario store: a single SQLite file holding a scenario's dimension sets,
parameter tables, default values, structural version and results.

This package creates stores at the current structural version, upgrades
older stores step by step, and maintains the default-value views and
working tables read when a scenario is solved.
"""

from .connection import ScenarioStore
from .schema import SchemaRegistry, get_registry
from .core import create_store, validate_defaults
from .defaults import (
    refresh_default_views,
    set_default,
    get_default,
    drop_default_views,
    default_view_tables,
)
from .migrations import (
    MigrationStep,
    MIGRATIONS,
    run_step,
    migrate,
    validate_chain,
    pending_steps,
)
from .working import (
    create_working_tables,
    drop_working_tables,
    create_other_indices,
    drop_result_tables,
    transmission_modeling_enabled,
    year_intervals,
)

__all__ = [
    # Store
    'ScenarioStore',
    'SchemaRegistry',
    'get_registry',
    # Creation
    'create_store',
    'validate_defaults',
    # Defaults
    'refresh_default_views',
    'set_default',
    'get_default',
    'drop_default_views',
    'default_view_tables',
    # Migrations
    'MigrationStep',
    'MIGRATIONS',
    'run_step',
    'migrate',
    'validate_chain',
    'pending_steps',
    # Working tables
    'create_working_tables',
    'drop_working_tables',
    'create_other_indices',
    'drop_result_tables',
    'transmission_modeling_enabled',
    'year_intervals',
]
