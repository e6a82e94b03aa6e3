# tests/test_years.py

import pytest

from pynemo.years import check_calc_years, filter_calc_years, in_years_clause, year_groups_to_flags


class TestCheckCalcYears:
    """Tests for year group validation."""

    @pytest.mark.parametrize("groups", [[[]], [[2020]], [[2020, 2025], [2030]]])
    def test_valid(self, groups):
        check_calc_years(groups)

    def test_empty_group_must_be_alone(self):
        with pytest.raises(ValueError, match="must be the only group"):
            check_calc_years([[2020], []])

    @pytest.mark.parametrize("groups", [[[2030], [2020]], [[2020, 2025], [2025, 2030]]])
    def test_overlap_or_order(self, groups):
        with pytest.raises(ValueError, match="must not overlap"):
            check_calc_years(groups)


class TestFilterCalcYears:
    """Tests for dropping groups outside YEAR."""

    def test_unknown_groups_dropped(self, seeded_store):
        assert filter_calc_years(seeded_store, [[2010, 2015], [2020, 2040], [2030]]) == [[2020, 2040], [2030]]

    def test_nothing_left_means_all_years(self, seeded_store):
        assert filter_calc_years(seeded_store, [[2050]]) == [[]]

    def test_all_years_unchanged(self, seeded_store):
        assert filter_calc_years(seeded_store, [[]]) == [[]]


class TestYearGroupsToFlags:
    """Tests for per-group query flags."""

    def test_single_all_years_group(self):
        flags = year_groups_to_flags([[]], 0, transmission_modeling=True)
        assert not flags.restrict_years
        assert not flags.limited_foresight
        assert flags.transmission_modeling

    def test_first_group(self):
        flags = year_groups_to_flags([[2025, 2020], [2030]], 0)
        assert flags.in_years == (2020, 2025)
        assert flags.limited_foresight
        assert flags.last_year_prev_group is None
        assert flags.first_modeled_year == 2020

    def test_later_group(self):
        flags = year_groups_to_flags([[2020, 2025], [2030]], 1)
        assert flags.last_year_prev_group == 2025
        assert flags.has_previous_group

    def test_in_years_clause(self):
        assert in_years_clause([2030]) == "('2030')"
