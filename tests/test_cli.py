# tests/test_cli.py

import pytest
import yaml

from pynemo.__main__ import main
from pynemo.constants import LATEST_VERSION
from pynemo.store import ScenarioStore, get_default

from .conftest import insert_rows


@pytest.fixture
def cli_db(tmp_path):
    path = str(tmp_path / "cli.sqlite")
    assert main(["create", path]) == 0
    return path


class TestCli:
    """Tests for the command-line entry point."""

    def test_create_with_defaults(self, tmp_path):
        defaults = tmp_path / "defaults.yaml"
        defaults.write_text(yaml.safe_dump({"DiscountRate": 0.05}))
        path = str(tmp_path / "new.sqlite")
        assert main(["create", path, "--defaults", str(defaults)]) == 0
        with ScenarioStore.open(path) as store:
            assert store.version == LATEST_VERSION
            assert get_default(store, "DiscountRate") == 0.05

    def test_migrate_current(self, cli_db):
        assert main(["migrate", cli_db]) == 0

    def test_set_default(self, cli_db):
        assert main(["set-default", cli_db, "DiscountRate", "0.07"]) == 0
        with ScenarioStore.open(cli_db) as store:
            assert get_default(store, "DiscountRate") == 0.07
            assert "DiscountRate_def" in store.views()

    def test_refresh_views(self, cli_db):
        assert main(["refresh-views", cli_db, "CapitalCost"]) == 0
        with ScenarioStore.open(cli_db) as store:
            assert store.views() == ["CapitalCost_def"]

    def test_drop_results(self, cli_db):
        with ScenarioStore.open(cli_db) as store:
            with store.transaction():
                store.execute("create table vnewcapacity (r text, val real, solvedtm text)")
        assert main(["drop-results", cli_db]) == 0
        with ScenarioStore.open(cli_db) as store:
            assert not store.has_table("vnewcapacity")

    def test_convert_units(self, cli_db):
        with ScenarioStore.open(cli_db) as store:
            insert_rows(store, "SpecifiedAnnualDemand", ["id", "r", "f", "y", "val"], [(1, "R1", "F1", "2020", 1.0)])
        assert main(["convert-units", cli_db, "--energy", "3.6"]) == 0
        with ScenarioStore.open(cli_db) as store:
            assert store.query("select val from SpecifiedAnnualDemand") == [(3.6,)]

    def test_errors_return_nonzero(self, tmp_path, caplog):
        missing_dir = str(tmp_path / "absent" / "db.sqlite")
        assert main(["migrate", missing_dir]) == 1
        assert "does not exist" in caplog.text

    def test_bad_multiplier(self, cli_db):
        assert main(["convert-units", cli_db, "--cost", "0"]) == 1

    def test_command_required(self):
        with pytest.raises(SystemExit):
            main([])
