# pynemo/store/migrations.py

"""
Structural migrations for scenario stores.

Each migration is a ``MigrationStep`` bridging one version to the next.
``MIGRATIONS`` holds the complete chain in ascending order, from the
oldest supported version to ``LATEST_VERSION``, so the chain can be
enumerated and validated before any step runs.

Step contract:
- A step whose target version has already been reached is a no-op.
- Within a step, each structural change is skipped if already present.
- The step's changes and the version marker update share one
  transaction; on failure the store stays at its pre-step version.

Example
-------
>>> from pynemo.store import ScenarioStore, migrate
>>> with ScenarioStore.open("old.sqlite") as store:
...     applied = migrate(store)
>>> applied
['2→3', '3→4', ...]
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ..constants import LATEST_VERSION
from ..errors import MigrationError
from .connection import ScenarioStore
from .defaults import drop_default_views, refresh_default_views

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrationStep:
    """
    One version-to-version structural upgrade.

    Attributes
    ----------
    from_version : int
        Version the step upgrades from.
    to_version : int
        Version the step upgrades to.
    description : str
        What the step changes.
    apply : callable
        ``apply(store)``; performs the change. Runs inside the step's
        transaction and must not open its own.
    prepare : callable, optional
        ``prepare(store)``; runs before the step's transaction (e.g. to
        build ``_def`` views the step reads).
    """
    from_version: int
    to_version: int
    description: str
    apply: Callable[[ScenarioStore], None]
    prepare: Optional[Callable[[ScenarioStore], None]] = None

    @property
    def name(self) -> str:
        return f"{self.from_version}→{self.to_version}"

    def validate(self) -> None:
        if self.to_version != self.from_version + 1:
            raise MigrationError(f"Migration {self.name} must advance exactly one version")


# =============================================================================
# Helpers
# =============================================================================

def _rebuild(store: ScenarioStore, table: str, create_sql: str, insert_select: str) -> None:
    """Rename `table` aside, create its new shape, copy rows across, drop the old copy."""
    store.execute(f"alter table {table} rename to {table}_old")
    store.execute(create_sql)
    store.execute(f"insert into {table} {insert_select.format(old=table + '_old')}")
    store.execute(f"drop table {table}_old")


def _create_if_missing(store: ScenarioStore, table: str, create_sql: str) -> None:
    if not store.has_table(table):
        store.execute(create_sql)


# =============================================================================
# Steps
# =============================================================================

def _v2_to_v3(store: ScenarioStore) -> None:
    if "efficiency" in store.columns("TransmissionLine"):
        return
    _rebuild(
        store, "TransmissionLine",
        "CREATE TABLE IF NOT EXISTS `TransmissionLine` ( `id` TEXT, `n1` TEXT, `n2` TEXT, `f` TEXT, "
        "`maxflow` REAL, `reactance` REAL, `yconstruction` INTEGER, `capitalcost` REAL, `fixedcost` REAL, "
        "`variablecost` REAL, `operationallife` INTEGER, `efficiency` REAL, PRIMARY KEY(`id`) )",
        "select id, n1, n2, f, maxflow, reactance, yconstruction, capitalcost, fixedcost, variablecost, "
        "operationallife, 1.0 from {old}",
    )


def _v3_to_v4(store: ScenarioStore) -> None:
    if "r" in store.columns("TransmissionCapacityToActivityUnit"):
        return
    # Existing values apply to every region
    _rebuild(
        store, "TransmissionCapacityToActivityUnit",
        "CREATE TABLE IF NOT EXISTS `TransmissionCapacityToActivityUnit` ( `id` INTEGER NOT NULL UNIQUE, "
        "`r` TEXT, `f` TEXT, `val` REAL, PRIMARY KEY(`id`) )",
        "select count(*) over (rows unbounded preceding), r.val, tcta.f, tcta.val "
        "from {old} tcta, REGION r",
    )


def _v4_to_v5(store: ScenarioStore) -> None:
    _create_if_missing(
        store, "RampRate",
        "CREATE TABLE `RampRate` (`id` INTEGER NOT NULL UNIQUE, `r` TEXT, `t` TEXT, `y` TEXT, `l` TEXT, "
        "`val` REAL, PRIMARY KEY(`id`))",
    )
    _create_if_missing(
        store, "RampingReset",
        "CREATE TABLE `RampingReset` (`id` INTEGER NOT NULL UNIQUE, `r` TEXT, `val` INTEGER, PRIMARY KEY(`id`))",
    )


def _v5_to_v6(store: ScenarioStore) -> None:
    _create_if_missing(
        store, "MinimumUtilization",
        "CREATE TABLE `MinimumUtilization` ( `id` INTEGER NOT NULL UNIQUE, `r` TEXT, `t` TEXT, `l` TEXT, "
        "`y` TEXT, `val` REAL, PRIMARY KEY(`id`))",
    )
    _create_if_missing(
        store, "DiscountRateStorage",
        "CREATE TABLE IF NOT EXISTS `DiscountRateStorage` ( `id` INTEGER NOT NULL UNIQUE, `r` TEXT, `s` TEXT, "
        "`val` REAL, PRIMARY KEY(`id`))",
    )
    _create_if_missing(
        store, "DiscountRateTechnology",
        "CREATE TABLE IF NOT EXISTS `DiscountRateTechnology` ( `id` INTEGER NOT NULL UNIQUE, `r` TEXT, `t` TEXT, "
        "`val` REAL, PRIMARY KEY(`id`))",
    )
    if "discountrate" not in store.columns("TransmissionLine"):
        _rebuild(
            store, "TransmissionLine",
            "CREATE TABLE IF NOT EXISTS `TransmissionLine` ( `id` TEXT, `n1` TEXT, `n2` TEXT, `f` TEXT, "
            "`maxflow` REAL, `reactance` REAL, `yconstruction` INTEGER, `capitalcost` REAL, `fixedcost` REAL, "
            "`variablecost` REAL, `operationallife` INTEGER, `efficiency` REAL, `discountrate` REAL, "
            "PRIMARY KEY(`id`))",
            "select id, n1, n2, f, maxflow, reactance, yconstruction, capitalcost, fixedcost, variablecost, "
            "operationallife, efficiency, null from {old}",
        )


def _v6_to_v7(store: ScenarioStore) -> None:
    for table in ("DiscountRateStorage", "DiscountRateTechnology"):
        store.execute(f"drop view if exists {table}_def")
        store.execute(f"drop table if exists {table}")

    _create_if_missing(
        store, "InterestRateStorage",
        "CREATE TABLE IF NOT EXISTS `InterestRateStorage` ( `id` INTEGER NOT NULL UNIQUE, `r` TEXT, `s` TEXT, "
        "`y` TEXT, `val` REAL, PRIMARY KEY(`id`))",
    )
    _create_if_missing(
        store, "InterestRateTechnology",
        "CREATE TABLE IF NOT EXISTS `InterestRateTechnology` ( `id` INTEGER NOT NULL UNIQUE, `r` TEXT, `t` TEXT, "
        "`y` TEXT, `val` REAL, PRIMARY KEY(`id`))",
    )
    if "interestrate" not in store.columns("TransmissionLine"):
        _rebuild(
            store, "TransmissionLine",
            "CREATE TABLE IF NOT EXISTS `TransmissionLine` ( `id` TEXT, `n1` TEXT, `n2` TEXT, `f` TEXT, "
            "`maxflow` REAL, `reactance` REAL, `yconstruction` INTEGER, `capitalcost` REAL, `fixedcost` REAL, "
            "`variablecost` REAL, `operationallife` INTEGER, `efficiency` REAL, `interestrate` REAL, "
            "PRIMARY KEY(`id`))",
            "select id, n1, n2, f, maxflow, reactance, yconstruction, capitalcost, fixedcost, variablecost, "
            "operationallife, efficiency, null from {old}",
        )


def _v7_to_v8_prepare(store: ScenarioStore) -> None:
    if "f" not in store.columns("REMinProductionTarget") and store.has_table("RETagFuel"):
        refresh_default_views(store, ["REMinProductionTarget", "RETagFuel"])


def _v7_to_v8(store: ScenarioStore) -> None:
    if "f" not in store.columns("REMinProductionTarget"):
        if store.has_table("RETagFuel"):
            # Targets carry over to every fuel tagged as renewable
            select = (
                "select count(*) over (rows unbounded preceding) as id, rmp.r, rtf.f, rmp.y, rmp.val "
                "from REMinProductionTarget_def rmp, RETagFuel_def rtf "
                "where rmp.r = rtf.r and rmp.y = rtf.y and rtf.val = 1 and rmp.val > 0"
            )
        else:
            select = "select id, r, null, y, val from {old}"
        _rebuild(
            store, "REMinProductionTarget",
            "CREATE TABLE IF NOT EXISTS `REMinProductionTarget` ( `id` INTEGER NOT NULL UNIQUE, `r` TEXT, "
            "`f` TEXT, `y` TEXT, `val` REAL, PRIMARY KEY(`id`))",
            select,
        )
        store.execute("drop view if exists REMinProductionTarget_def")

    store.execute("drop view if exists RETagFuel_def")
    store.execute("drop table if exists RETagFuel")

    # Their old behavior now lives in REMinProductionTarget's rows
    store.execute("delete from DefaultParams where tablename in ('REMinProductionTarget', 'RETagFuel')")

    _create_if_missing(
        store, "MinShareProduction",
        "CREATE TABLE IF NOT EXISTS `MinShareProduction` ( `id` INTEGER NOT NULL UNIQUE, `r` TEXT, `t` TEXT, "
        "`f` TEXT, `y` TEXT, `val` REAL, PRIMARY KEY(`id`) )",
    )


def _v8_to_v9(store: ScenarioStore) -> None:
    store.execute("CREATE TABLE IF NOT EXISTS `REGIONGROUP` (`val` TEXT NOT NULL UNIQUE, `desc` TEXT, PRIMARY KEY(`val`))")
    store.execute(
        "CREATE TABLE IF NOT EXISTS `REMinProductionTargetRG` ( `id` INTEGER PRIMARY KEY NOT NULL, `rg` TEXT, "
        "`f` TEXT, `y` TEXT, `val` REAL )"
    )
    store.execute(
        "CREATE TABLE IF NOT EXISTS `RRGroup` ( `id` INTEGER PRIMARY KEY NOT NULL, `rg` TEXT, `r` TEXT, "
        "UNIQUE(`rg`, `r`) )"
    )


_RESERVE_MARGIN_FUEL = (
    "(select r, f, y from "
    "(select r, f, y, count(f) over (partition by r, y rows between unbounded preceding and unbounded following) as cnt "
    "from ReserveMarginTagFuel_def where val = 1) "
    "where cnt = 1) rmf"
)


def _reserve_margin_migrated(store: ScenarioStore) -> bool:
    return "f" in store.columns("ReserveMargin") and "f" in store.columns("ReserveMarginTagTechnology")


def _v9_to_v10_prepare(store: ScenarioStore) -> None:
    if not _reserve_margin_migrated(store) and store.has_table("ReserveMarginTagFuel"):
        refresh_default_views(store, ["ReserveMargin", "ReserveMarginTagTechnology", "ReserveMarginTagFuel"])


def _v9_to_v10(store: ScenarioStore) -> None:
    if _reserve_margin_migrated(store):
        store.execute("drop view if exists ReserveMarginTagFuel_def")
        store.execute("drop table if exists ReserveMarginTagFuel")
        return

    if not store.has_table("ReserveMarginTagFuel"):
        # Nothing to derive fuels from
        store.execute("create table ReserveMarginTagFuel (id INTEGER, r TEXT, f TEXT, y TEXT, val REAL)")
        store.execute("create view ReserveMarginTagFuel_def as select * from ReserveMarginTagFuel")
        for table in ("ReserveMargin", "ReserveMarginTagTechnology"):
            store.execute(f"drop view if exists {table}_def")
            store.execute(f"create view {table}_def as select * from {table}")

    # Renames rewrite the _def views to read the _old tables; both renames
    # must happen before either _old table is dropped
    store.execute("alter table ReserveMargin rename to ReserveMargin_old")
    store.execute("alter table ReserveMarginTagTechnology rename to ReserveMarginTagTechnology_old")
    store.execute(
        "CREATE TABLE IF NOT EXISTS `ReserveMargin` ( `id` INTEGER NOT NULL UNIQUE, `r` TEXT, `f` TEXT, "
        "`y` TEXT, `val` REAL, PRIMARY KEY(`id`))"
    )
    store.execute(
        "CREATE TABLE IF NOT EXISTS `ReserveMarginTagTechnology` ( `id` INTEGER NOT NULL UNIQUE, `r` TEXT, "
        "`t` TEXT, `f` TEXT, `y` TEXT, `val` REAL, PRIMARY KEY(`id`))"
    )

    # Only (r, y) pairs tagged with exactly one fuel can be carried over
    store.execute(
        "insert into ReserveMargin select null, rm.r, rmf.f, rm.y, rm.val from ReserveMargin_def rm, "
        f"{_RESERVE_MARGIN_FUEL} where rm.r = rmf.r and rm.y = rmf.y"
    )
    store.execute(
        "insert into ReserveMarginTagTechnology "
        "select null, rmt.r, rmt.t, rmf.f, rmt.y, rmt.val from ReserveMarginTagTechnology_def rmt, "
        f"{_RESERVE_MARGIN_FUEL} where rmt.r = rmf.r and rmt.y = rmf.y and rmt.val > 0"
    )

    migrated = store.query("select count(*) from ReserveMargin")[0][0]
    source = store.query("select count(*) from ReserveMargin_def")[0][0]
    if migrated != source:
        logger.warning(
            "Could not migrate some reserve margin data when upgrading database to version 10. "
            "Please verify data in ReserveMargin and ReserveMarginTagTechnology tables."
        )

    for table in ("ReserveMarginTagFuel", "ReserveMarginTagTechnology", "ReserveMargin"):
        store.execute(f"drop view if exists {table}_def")
    for table in ("ReserveMarginTagFuel", "ReserveMarginTagTechnology_old", "ReserveMargin_old"):
        store.execute(f"drop table if exists {table}")

    # Their old behavior now lives in the rows of ReserveMargin and ReserveMarginTagTechnology
    store.execute(
        "delete from DefaultParams where tablename in "
        "('ReserveMargin', 'ReserveMarginTagTechnology', 'ReserveMarginTagFuel')"
    )


def _v10_to_v11(store: ScenarioStore) -> None:
    _create_if_missing(
        store, "TransmissionAvailabilityFactor",
        "CREATE TABLE IF NOT EXISTS `TransmissionAvailabilityFactor` ( `id` INTEGER NOT NULL UNIQUE, `tr` TEXT, "
        "`l` TEXT, `y` TEXT, `val` REAL, PRIMARY KEY(`id`))",
    )
    for table in ("MinAnnualTransmissionNodes", "MaxAnnualTransmissionNodes"):
        _create_if_missing(
            store, table,
            f"CREATE TABLE IF NOT EXISTS `{table}` ( `id` INTEGER NOT NULL UNIQUE, `n1` TEXT, `n2` TEXT, "
            "`f` TEXT, `y` TEXT, `val` REAL, PRIMARY KEY(`id`))",
        )


MIGRATIONS: Tuple[MigrationStep, ...] = (
    MigrationStep(2, 3, "Add TransmissionLine.efficiency", _v2_to_v3),
    MigrationStep(3, 4, "Add TransmissionCapacityToActivityUnit.r", _v3_to_v4),
    MigrationStep(4, 5, "Add RampRate and RampingReset", _v4_to_v5),
    MigrationStep(
        5, 6,
        "Add MinimumUtilization, DiscountRateStorage, DiscountRateTechnology and TransmissionLine.discountrate",
        _v5_to_v6,
    ),
    MigrationStep(
        6, 7,
        "Replace discount rates for storage, technologies and lines with interest rates",
        _v6_to_v7,
    ),
    MigrationStep(
        7, 8,
        "Remove RETagFuel; add REMinProductionTarget.f and MinShareProduction",
        _v7_to_v8, prepare=_v7_to_v8_prepare,
    ),
    MigrationStep(8, 9, "Add REGIONGROUP, REMinProductionTargetRG and RRGroup", _v8_to_v9),
    MigrationStep(
        9, 10,
        "Add ReserveMargin.f and ReserveMarginTagTechnology.f; remove ReserveMarginTagFuel",
        _v9_to_v10, prepare=_v9_to_v10_prepare,
    ),
    MigrationStep(
        10, 11,
        "Add TransmissionAvailabilityFactor, MinAnnualTransmissionNodes and MaxAnnualTransmissionNodes",
        _v10_to_v11,
    ),
)


# =============================================================================
# Runner
# =============================================================================

def validate_chain(steps: Sequence[MigrationStep] = MIGRATIONS) -> None:
    """
    Check that `steps` form a contiguous chain ending at LATEST_VERSION.

    Raises
    ------
    MigrationError
        If a step skips a version, steps are out of order, or the chain
        does not reach the latest version.
    """
    if not steps:
        raise MigrationError("Migration chain is empty")
    for step in steps:
        step.validate()
    for previous, step in zip(steps, steps[1:]):
        if step.from_version != previous.to_version:
            raise MigrationError(f"Migration chain broken between {previous.name} and {step.name}")
    if steps[-1].to_version != LATEST_VERSION:
        raise MigrationError(
            f"Migration chain ends at version {steps[-1].to_version}, expected {LATEST_VERSION}"
        )


def run_step(store: ScenarioStore, step: MigrationStep) -> bool:
    """
    Apply one migration step.

    Returns
    -------
    bool
        True if the step ran, False if the store was already at or past
        its target version.

    Raises
    ------
    MigrationError
        If the store has no version marker or is older than the step's
        starting version.
    """
    version = store.version
    if version is None:
        raise MigrationError(f"Store at {store.path} has no Version table")
    if version >= step.to_version:
        return False
    if version < step.from_version:
        raise MigrationError(
            f"Store at {store.path} is at version {version}; migration {step.name} needs {step.from_version}"
        )

    if step.prepare is not None:
        step.prepare(store)
    with store.transaction():
        step.apply(store)
        store.set_version(step.to_version)

    logger.info(f"Upgraded database to version {step.to_version}.")
    return True


def pending_steps(store: ScenarioStore, steps: Sequence[MigrationStep] = MIGRATIONS) -> List[MigrationStep]:
    version = store.version
    if version is None:
        raise MigrationError(f"Store at {store.path} has no Version table")
    return [step for step in steps if step.to_version > version]


def migrate(store: ScenarioStore, steps: Sequence[MigrationStep] = MIGRATIONS) -> List[str]:
    """
    Bring `store` to the latest structural version.

    Default views are dropped before and after the pending steps, since
    table renames would otherwise leave them referencing stale shapes.

    Returns
    -------
    list of str
        Names of the steps applied, e.g. ``['9→10', '10→11']``.

    Raises
    ------
    MigrationError
        If the chain is malformed, or the store predates the oldest step.
    """
    validate_chain(steps)
    version = store.version
    if version is None:
        raise MigrationError(f"Store at {store.path} has no Version table")
    if version < steps[0].from_version:
        raise MigrationError(
            f"Store at {store.path} is at version {version}; oldest supported version is {steps[0].from_version}"
        )

    todo = pending_steps(store, steps)
    if not todo:
        return []

    drop_default_views(store)
    applied = [step.name for step in todo if run_step(store, step)]
    drop_default_views(store)
    return applied
