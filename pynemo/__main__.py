"""
pynemo/__main__.py

Entry point for the scenario store CLI.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import load_defaults
from .errors import PyNemoError
from .logs import LOG_FORMAT
from .store import (
    ScenarioStore,
    create_store,
    default_view_tables,
    drop_result_tables,
    migrate,
    refresh_default_views,
    set_default,
)
from .units import convert_scenario_units

logger = logging.getLogger("pynemo")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pynemo",
        description="Create, upgrade and maintain NEMO scenario databases",
    )
    parser.add_argument("--loglevel", type=str, default="INFO", help="Set logging level.")
    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create", help="Create an empty scenario database.")
    create.add_argument("path", help="Path of the SQLite file.")
    create.add_argument("--defaults", type=str, help="YAML file of parameter defaults.")
    create.add_argument("--foreign-keys", action="store_true", help="Declare foreign key constraints.")

    upgrade = commands.add_parser("migrate", help="Upgrade a database to the current version.")
    upgrade.add_argument("path")

    default = commands.add_parser("set-default", help="Set a parameter's default value.")
    default.add_argument("path")
    default.add_argument("table")
    default.add_argument("value", type=float)

    views = commands.add_parser("refresh-views", help="Rebuild default-value views.")
    views.add_argument("path")
    views.add_argument("tables", nargs="*", help="Tables to refresh (default: all parameters).")

    results = commands.add_parser("drop-results", help="Drop saved result tables.")
    results.add_argument("path")

    units = commands.add_parser("convert-units", help="Rescale values to new units.")
    units.add_argument("path")
    for unit in ("energy", "power", "cost", "emissions"):
        units.add_argument(f"--{unit}", type=float, default=1.0, help=f"New {unit} units per old unit.")

    return parser


def _run(args: argparse.Namespace) -> None:
    if args.command == "create":
        defaults = load_defaults(args.defaults) if args.defaults else None
        create_store(args.path, defaults=defaults, foreign_keys=args.foreign_keys).close()
        return

    with ScenarioStore.open(args.path) as store:
        if args.command == "migrate":
            applied = migrate(store)
            logger.info(f"Applied {len(applied)} migration(s); database is at version {store.version}.")
        elif args.command == "set-default":
            set_default(store, args.table, args.value)
        elif args.command == "refresh-views":
            tables = args.tables or [t for t in default_view_tables() if store.has_table(t)]
            refresh_default_views(store, tables)
            logger.info(f"Refreshed default views for {len(tables)} table(s).")
        elif args.command == "drop-results":
            dropped = drop_result_tables(store)
            store.vacuum()
            logger.info(f"Dropped {len(dropped)} result table(s).")
        elif args.command == "convert-units":
            convert_scenario_units(
                store, energy=args.energy, power=args.power, cost=args.cost, emissions=args.emissions
            )


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.loglevel.upper(), format=LOG_FORMAT)

    try:
        _run(args)
    except (PyNemoError, OSError, ValueError) as exc:
        logger.error(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
