# pynemo/queries/__init__.py

"""
Solve-step queries: the catalog of read-only SQL, the flags that select
from it, and the parallel runner.
"""

from .flags import QueryFlags, in_years_predicate
from .catalog import QuerySpec, QUERY_SPECS
from .planner import Query, QueryPlanner, plan_queries, run_queries

__all__ = [
    'QueryFlags',
    'in_years_predicate',
    'QuerySpec',
    'QUERY_SPECS',
    'Query',
    'QueryPlanner',
    'plan_queries',
    'run_queries',
]
