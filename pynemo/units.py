# pynemo/units.py

"""
Rescaling a scenario store to different units.

Every parameter and result table in the data dictionary may carry a
``unit``: one of the base units (energy, power, cost, emissions) or a
ratio of two of them (e.g. ``cost/power``). Conversion multiplies each
existing table's values, and its DefaultParams entry, by the matching
factor.
"""

import logging
from typing import Dict, List, Optional

from .store.connection import ScenarioStore
from .store.schema import SchemaRegistry, get_registry

logger = logging.getLogger(__name__)

BASE_UNITS = ("energy", "power", "cost", "emissions")


def unit_factor(unit: str, multipliers: Dict[str, float]) -> float:
    """
    Factor applied to values denominated in `unit`.

    Examples
    --------
    >>> unit_factor("cost/power", {"cost": 2.0, "power": 4.0})
    0.5
    """
    numerator, _, denominator = unit.partition("/")
    factor = multipliers[numerator]
    if denominator:
        factor /= multipliers[denominator]
    return factor


def convert_scenario_units(
    store: ScenarioStore,
    energy: float = 1.0,
    power: float = 1.0,
    cost: float = 1.0,
    emissions: float = 1.0,
    registry: Optional[SchemaRegistry] = None,
) -> List[str]:
    """
    Multiply values in every existing unit-bearing table.

    Parameters
    ----------
    store : ScenarioStore
        Store to convert in place.
    energy, power, cost, emissions : float, optional
        New units per old unit for each base unit (default 1.0).
    registry : SchemaRegistry, optional
        Source of per-table units (default: packaged schema).

    Returns
    -------
    list of str
        Tables converted, grouped by unit.

    Raises
    ------
    ValueError
        If a multiplier is not positive.
    """
    multipliers = {"energy": energy, "power": power, "cost": cost, "emissions": emissions}
    for name, value in multipliers.items():
        if not value > 0:
            raise ValueError(f"{name} multiplier must be positive, got {value}")
    registry = registry or get_registry()

    existing = set(store.tables())
    converted: List[str] = []
    with store.transaction():
        for unit in registry.units():
            factor = unit_factor(unit, multipliers)
            for table in registry.names_by_unit(unit):
                if table not in existing or table in converted:
                    continue
                store.execute(f"update `{table}` set val = val * ?", (factor,))
                store.execute("update DefaultParams set val = val * ? where tablename = ?", (factor, table))
                converted.append(table)

    logger.info(f"Converted units in {len(converted)} tables of database at {store.path}.")
    return converted
