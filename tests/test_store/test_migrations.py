# tests/test_store/test_migrations.py

import pytest

from pynemo.constants import LATEST_VERSION, OLDEST_SUPPORTED_VERSION
from pynemo.errors import MigrationError
from pynemo.store import (
    MIGRATIONS,
    MigrationStep,
    create_store,
    get_default,
    migrate,
    pending_steps,
    run_step,
    validate_chain,
)


def structure(store):
    """Table name -> column list, ignoring views and indexes."""
    return {table: store.columns(table) for table in store.tables() if not table.startswith("sqlite_")}


class TestMigrationChain:
    """Tests for the migration registry."""

    def test_chain_is_valid(self):
        validate_chain()

    def test_chain_bounds(self):
        assert MIGRATIONS[0].from_version == OLDEST_SUPPORTED_VERSION
        assert MIGRATIONS[-1].to_version == LATEST_VERSION

    def test_step_names(self):
        assert [s.name for s in MIGRATIONS][:2] == ["2→3", "3→4"]

    def test_gap_rejected(self):
        steps = (MIGRATIONS[0], MIGRATIONS[2])
        with pytest.raises(MigrationError, match="broken"):
            validate_chain(steps)

    def test_skip_rejected(self):
        with pytest.raises(MigrationError, match="exactly one version"):
            validate_chain((MigrationStep(2, 4, "skip", lambda store: None),))


class TestMigrate:
    """Tests for upgrading stores."""

    def test_fresh_store_is_noop(self, store):
        """A current store needs no steps."""
        assert pending_steps(store) == []
        assert migrate(store) == []
        assert store.version == LATEST_VERSION

    def test_legacy_store_reaches_latest(self, legacy_store):
        applied = migrate(legacy_store)
        assert applied == [step.name for step in MIGRATIONS]
        assert legacy_store.version == LATEST_VERSION

    def test_matches_fresh_structure(self, legacy_store, tmp_path):
        """Migrating from version 2 yields the same tables and columns as a fresh store."""
        migrate(legacy_store)
        fresh = create_store(str(tmp_path / "fresh.sqlite"))
        try:
            assert structure(legacy_store) == structure(fresh)
        finally:
            fresh.close()

    def test_idempotent(self, legacy_store):
        """A second run changes nothing."""
        migrate(legacy_store)
        before = structure(legacy_store)
        assert migrate(legacy_store) == []
        assert structure(legacy_store) == before

    def test_step_rerun_is_noop(self, legacy_store):
        migrate(legacy_store)
        assert run_step(legacy_store, MIGRATIONS[0]) is False

    def test_no_views_left(self, legacy_store):
        migrate(legacy_store)
        assert not [v for v in legacy_store.views() if v.endswith("_def")]

    def test_too_old_rejected(self, legacy_store):
        with legacy_store.transaction():
            legacy_store.set_version(1)
        with pytest.raises(MigrationError, match="oldest supported version"):
            migrate(legacy_store)

    def test_missing_version_rejected(self, store):
        with store.transaction():
            store.execute("drop table Version")
        with pytest.raises(MigrationError, match="no Version table"):
            migrate(store)

    def test_step_out_of_order_rejected(self, legacy_store):
        with pytest.raises(MigrationError, match="needs 5"):
            run_step(legacy_store, MIGRATIONS[3])

    def test_failed_step_keeps_version(self, legacy_store):
        """A failing step rolls back and leaves the version unchanged."""
        def explode(store):
            store.execute("create table half_done (x)")
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            run_step(legacy_store, MigrationStep(2, 3, "fails", explode))
        assert legacy_store.version == 2
        assert not legacy_store.has_table("half_done")


class TestMigratedData:
    """Tests that data survives each reshape."""

    @pytest.fixture
    def migrated(self, legacy_store):
        migrate(legacy_store)
        return legacy_store

    def test_transmission_line(self, migrated):
        rows = migrated.query("select id, efficiency, interestrate from TransmissionLine")
        assert rows == [("TL1", 1.0, None)]

    def test_capacity_to_activity_unit_gains_region(self, migrated):
        rows = migrated.query("select r, f, val from TransmissionCapacityToActivityUnit")
        assert rows == [("R1", "F1", 31.536)]

    def test_re_target_moves_to_tagged_fuel(self, migrated):
        rows = migrated.query("select r, f, y, val from REMinProductionTarget")
        assert rows == [("R1", "F1", "2020", 0.3)]
        assert not migrated.has_table("RETagFuel")

    def test_reserve_margin_gains_fuel(self, migrated):
        assert migrated.query("select r, f, y, val from ReserveMargin") == [("R1", "F1", "2020", 1.2)]
        assert migrated.query("select r, t, f, y, val from ReserveMarginTagTechnology") == [
            ("R1", "T1", "F1", "2020", 1.0)
        ]
        assert not migrated.has_table("ReserveMarginTagFuel")

    def test_retired_defaults_removed(self, migrated):
        assert get_default(migrated, "RETagFuel") is None
        assert get_default(migrated, "ReserveMarginTagFuel") is None
        assert get_default(migrated, "DiscountRate") == 0.05

    def test_ambiguous_reserve_margin_fuel_warns(self, legacy_store, caplog):
        """Regions tagging more than one fuel cannot be carried over."""
        with legacy_store.transaction():
            legacy_store.execute(
                "insert into ReserveMarginTagFuel (id, r, f, y, val) values (2, 'R1', 'F2', '2020', 1)"
            )
        with caplog.at_level("WARNING"):
            migrate(legacy_store)
        assert legacy_store.query("select count(*) from ReserveMargin")[0][0] == 0
        assert "Could not migrate some reserve margin data" in caplog.text
