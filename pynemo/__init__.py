# pynemo/__init__.py

"""
PyNEMO: scenario data engine for the NEMO energy system model.

Manages the SQLite scenario database a NEMO optimization reads from and
writes to: its schema and structural version, default values for sparse
parameters, the queries that feed model building, and the persistence of
solved results.

Main Components
---------------
ScenarioStore : class
    An open scenario database with explicit transactions.
create_store, migrate : functions
    Lay down the current schema, or upgrade an older database to it.
plan_queries, run_queries : functions
    Render and execute the read-only queries of a solve step.
persist : function
    Save solved quantities to the database.

Subpackages
-----------
store : Schema, migrations, default views and working tables
queries : Query catalog, flags and parallel runner
results : Result containers and persistence
logs : Per-run logger setup

Example
-------
>>> from pynemo import create_store, plan_queries, run_queries, QueryFlags
>>> store = create_store("scenario.sqlite", defaults={"DiscountRate": 0.05})
>>> frames = run_queries(plan_queries(store.path, QueryFlags()))
"""

from .store import (
    ScenarioStore,
    create_store,
    migrate,
    refresh_default_views,
    set_default,
    get_default,
)
from .queries import QueryFlags, QueryPlanner, plan_queries, run_queries
from .indexing import build_index, build_index_parallel
from .results import MappingResult, PyomoResult, persist, persist_parallel
from .config import RunConfig, load_run_config

__all__ = [
    # Store
    'ScenarioStore',
    'create_store',
    'migrate',
    'refresh_default_views',
    'set_default',
    'get_default',
    # Queries
    'QueryFlags',
    'QueryPlanner',
    'plan_queries',
    'run_queries',
    # Indexing
    'build_index',
    'build_index_parallel',
    # Results
    'MappingResult',
    'PyomoResult',
    'persist',
    'persist_parallel',
    # Configuration
    'RunConfig',
    'load_run_config',
]

__version__ = '0.1.0'
