"""
Unit tests for allocation week expansion.
"""

from datetime import date

import pytest
from hypothesis import given, settings, strategies as st

from conftest import make_allocation
from resourceplanner.engine.allocation_expander import (
    expand,
    expand_all,
    overlaps_window,
    qualifying_allocations,
    total_hours,
)
from resourceplanner.engine.models import PeriodWindow

KEYS = ["2024-W11", "2024-W12", "2024-W13"]
WINDOW = PeriodWindow(date(2024, 3, 11), date(2024, 3, 31))


class TestExpand:

    def test_weekly_map_wins_over_total(self):
        allocation = make_allocation(hours=100, weekly={"2024-W11": 10, "2024-W12": 5})
        assert expand(allocation, KEYS, WINDOW) == {"2024-W11": 10.0, "2024-W12": 5.0, "2024-W13": 0.0}

    def test_total_spread_evenly_without_map(self):
        allocation = make_allocation(hours=30)
        assert expand(allocation, KEYS, WINDOW) == {key: 10.0 for key in KEYS}

    def test_empty_map_falls_back_to_total(self):
        allocation = make_allocation(hours=30, weekly={})
        assert expand(allocation, KEYS, WINDOW) == {key: 10.0 for key in KEYS}

    def test_allocation_outside_window_contributes_nothing(self):
        allocation = make_allocation(start=date(2024, 5, 1), end=date(2024, 5, 31), hours=40)
        assert expand(allocation, KEYS, WINDOW) == {key: 0.0 for key in KEYS}

    def test_no_week_keys(self):
        assert expand(make_allocation(hours=30), [], WINDOW) == {}

    def test_non_numeric_weekly_hours_count_as_zero(self):
        allocation = make_allocation(weekly={"2024-W11": "abc", "2024-W12": "7.5"})
        hours = expand(allocation, KEYS, WINDOW)
        assert hours["2024-W11"] == 0.0
        assert hours["2024-W12"] == 7.5

    def test_expand_all_sums_per_week(self):
        allocations = [
            make_allocation(id=1, weekly={"2024-W11": 10}),
            make_allocation(id=2, hours=30),
        ]
        assert expand_all(allocations, KEYS, WINDOW) == {
            "2024-W11": 20.0,
            "2024-W12": 10.0,
            "2024-W13": 10.0,
        }

    def test_total_hours(self):
        assert total_hours([make_allocation(hours=10), make_allocation(hours=2.5)]) == 12.5

    @given(
        hours=st.floats(min_value=0, max_value=1000, allow_nan=False),
        weeks=st.integers(min_value=1, max_value=12),
    )
    @settings(max_examples=200, deadline=None)
    def test_even_distribution_conserves_total(self, hours, weeks):
        keys = [f"2024-W{n:02d}" for n in range(11, 11 + weeks)]
        expanded = expand(make_allocation(hours=hours), keys)
        assert sum(expanded.values()) == pytest.approx(hours)


class TestQualifyingAllocations:

    def test_filters_resource_status_and_window(self):
        allocations = [
            make_allocation(id=1),
            make_allocation(id=2, resource_id=2),
            make_allocation(id=3, status="planned"),
            make_allocation(id=4, start=date(2024, 1, 1), end=date(2024, 1, 31)),
            make_allocation(id=5, start=date(2024, 3, 1), end=date(2024, 3, 11)),
        ]
        result = qualifying_allocations(allocations, 1, WINDOW)
        assert [a.id for a in result] == [1, 5]

    def test_unbounded_window_accepts_everything(self):
        allocation = make_allocation(start=date(2020, 1, 1), end=date(2020, 1, 2))
        assert overlaps_window(allocation, None)
        assert overlaps_window(allocation, PeriodWindow(None, None))
