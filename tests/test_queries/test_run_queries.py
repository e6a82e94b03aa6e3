# tests/test_queries/test_run_queries.py

import pandas as pd
import pytest

from pynemo.queries import Query, QueryFlags, plan_queries, run_queries
from pynemo.store import create_working_tables, default_view_tables, refresh_default_views
from pynemo.years import year_groups_to_flags

from ..conftest import insert_rows


@pytest.fixture
def ready_store(seeded_store):
    """Seeded store with default views and working tables, as before a solve step."""
    refresh_default_views(seeded_store, default_view_tables())
    create_working_tables(seeded_store)
    with seeded_store.transaction():
        seeded_store.execute("create table vtotaltechnologyannualactivity (r text, t text, y text, val real, solvedtm text)")
        seeded_store.execute("create table vannualemissions (r text, e text, y text, val real, solvedtm text)")
    return seeded_store


class TestRunQueries:
    """Tests for parallel query execution."""

    def test_every_query_runs(self, ready_store):
        """All queries are valid SQL against a current store."""
        flags = QueryFlags(
            transmission_modeling=True,
            vproductionbytechnology_saved=True,
            vusebytechnology_saved=True,
            restrict_years=True,
            in_years=(2025, 2030),
            limited_foresight=True,
            last_year_prev_group=2020,
            first_modeled_year=2025,
        )
        plan = plan_queries(ready_store.path, flags)
        results = run_queries(plan, max_workers=4)
        assert set(results) == set(plan)
        assert all(isinstance(frame, pd.DataFrame) for frame in results.values())

    def test_trade_routes(self, ready_store):
        insert_rows(
            ready_store, "TradeRoute", ["id", "r", "rr", "f", "y", "val"],
            [(1, "R1", "R2", "F1", "2020", 1), (2, "R1", "R2", "F1", "2025", 1)],
        )
        flags = QueryFlags(restrict_years=True, in_years=(2025,))
        results = run_queries(plan_queries(ready_store.path, flags))
        trade = results["queryvtradeannual"]
        assert trade.to_dict("records") == [{"r": "R1", "rr": "R2", "f": "F1", "y": "2025"}]

    def test_discount_rate_with_intervals(self, ready_store):
        insert_rows(ready_store, "DiscountRate", ["id", "r", "val"], [(1, "R1", 0.05)])
        results = run_queries(plan_queries(ready_store.path, QueryFlags()))
        rtydr = results["queryrtydr"]
        assert len(rtydr) == 2 * 3
        assert set(rtydr["dr"]) == {0.05}
        assert rtydr["prevcalcval"].isna().all()

    def test_previous_group_values(self, ready_store):
        """Previous-group results are joined one interval back."""
        insert_rows(ready_store, "DiscountRate", ["id", "r", "val"], [(1, "R1", 0.05)])
        insert_rows(
            ready_store, "vtotaltechnologyannualactivity", ["r", "t", "y", "val", "solvedtm"],
            [("R1", "T1", "2020", 42.0, "2024-01-01 00:00:00.000")],
        )
        flags = QueryFlags(
            restrict_years=True, in_years=(2025,), limited_foresight=True,
            last_year_prev_group=2020, first_modeled_year=2025,
        )
        rtydr = run_queries(plan_queries(ready_store.path, flags))["queryrtydr"]
        row = rtydr[(rtydr["t"] == "T1") & (rtydr["y"] == "2025")]
        assert row["prevcalcval"].tolist() == [42.0]

    def test_previous_group_skips_unmodeled_year(self, ready_store):
        """A group after a skipped year joins the last solved year, not the skipped one."""
        groups = [[2020], [2030]]
        create_working_tables(ready_store, groups)
        insert_rows(ready_store, "DiscountRate", ["id", "r", "val"], [(1, "R1", 0.05)])
        insert_rows(
            ready_store, "vtotaltechnologyannualactivity", ["r", "t", "y", "val", "solvedtm"],
            [("R1", "T1", "2020", 42.0, "2024-01-01 00:00:00.000")],
        )
        flags = year_groups_to_flags(groups, 1)
        rtydr = run_queries(plan_queries(ready_store.path, flags))["queryrtydr"]
        row = rtydr[(rtydr["t"] == "T1") & (rtydr["y"] == "2030")]
        assert row["prevcalcval"].tolist() == [42.0]

    def test_empty_plan(self):
        assert run_queries({}) == {}

    def test_error_propagates(self, ready_store):
        queries = {
            "good": Query(ready_store.path, "select val from REGION"),
            "bad": Query(ready_store.path, "select * from no_such_table"),
        }
        with pytest.raises(Exception, match="no_such_table"):
            run_queries(queries)

    def test_queries_are_read_only(self, ready_store):
        queries = {"write": Query(ready_store.path, "insert into REGION (val) values ('R9')")}
        with pytest.raises(Exception, match="readonly"):
            run_queries(queries)
