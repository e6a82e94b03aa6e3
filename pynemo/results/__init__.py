# pynemo/results/__init__.py

"""
Result containers and their persistence to the scenario store.
"""

from .containers import ResultContainer, MappingResult, PyomoResult, as_container, index_tuple
from .persister import (
    format_solved_at,
    persist,
    persist_parallel,
    read_results,
    read_start_values,
)

__all__ = [
    # Containers
    'ResultContainer',
    'MappingResult',
    'PyomoResult',
    'as_container',
    'index_tuple',
    # Persistence
    'format_solved_at',
    'persist',
    'persist_parallel',
    'read_results',
    'read_start_values',
]
