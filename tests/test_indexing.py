# tests/test_indexing.py

import itertools

import pandas as pd
import pytest

from pynemo.indexing import build_index, build_index_parallel


@pytest.fixture
def rows():
    """Query-like rows over (r, t, f, y), with duplicates."""
    combos = itertools.product(["R1", "R2"], ["T1", "T2", "T3"], ["F1", "F2"], ["2020", "2025", "2030"])
    data = [c for i, c in enumerate(combos) if i % 5 != 1]
    return data + data[:5]


class TestBuildIndex:
    """Tests for serial prefix indexes."""

    def test_small_example(self):
        index = build_index([("R1", "T1", "2020"), ("R1", "T2", "2020")], [0, 1, 2])
        assert index == [
            {("R1",): {"T1", "T2"}},
            {("R1", "T1"): {"2020"}, ("R1", "T2"): {"2020"}},
        ]

    def test_column_subset(self, rows):
        """Columns may be any subset, in any order."""
        index = build_index(rows, [3, 0])
        assert index == [{("2020",): {"R1", "R2"}, ("2025",): {"R1", "R2"}, ("2030",): {"R1", "R2"}}]

    def test_dataframe_by_name_and_position(self, rows):
        frame = pd.DataFrame(rows, columns=["r", "t", "f", "y"])
        assert build_index(frame, ["r", "t", "y"]) == build_index(rows, [0, 1, 3])
        assert build_index(frame, [0, 1, 3]) == build_index(rows, [0, 1, 3])

    def test_needs_two_columns(self, rows):
        with pytest.raises(ValueError, match="at least two columns"):
            build_index(rows, [0])

    def test_empty(self):
        assert build_index([], [0, 1, 2]) == [{}, {}]


class TestBuildIndexParallel:
    """Tests for the threaded variant."""

    @pytest.mark.parametrize("max_workers", [1, 2, 3, 8])
    def test_matches_serial(self, rows, max_workers):
        expected = build_index(rows, [0, 1, 2, 3])
        result = build_index_parallel(rows, [0, 1, 2, 3], max_workers=max_workers, min_rows_per_worker=4)
        assert result == expected

    def test_small_input_is_serial(self, rows):
        assert build_index_parallel(rows, [0, 1]) == build_index(rows, [0, 1])

    def test_worker_error_propagates(self):
        """Unhashable values fail inside a worker and surface to the caller."""
        bad = [("R1", ["unhashable"])] * 20
        with pytest.raises(TypeError):
            build_index_parallel(bad, [0, 1], max_workers=4, min_rows_per_worker=2)
