"""
Unit tests for alert classification.
"""

import pytest
from hypothesis import given, strategies as st

from conftest import make_resource
from resourceplanner.engine.alert_classifier import (
    CATEGORY_ORDER,
    classify,
    classify_percent,
    empty_categories,
    group_by_category,
)
from resourceplanner.engine.models import AlertCategoryType, AlertSettings, UtilizationResult

DEFAULTS = AlertSettings()


def _result(peak):
    return UtilizationResult(
        resource_id=1,
        effective_weekly_capacity=32,
        weeks=(),
        peak_utilization_percent=peak,
        peak_week_key=None,
        total_allocated_hours=0,
    )


class TestClassifyPercent:

    @pytest.mark.parametrize(
        "peak, expected",
        [
            (150, AlertCategoryType.CRITICAL),
            (120, AlertCategoryType.CRITICAL),
            (119, AlertCategoryType.ERROR),
            (100, AlertCategoryType.ERROR),
            (99, AlertCategoryType.WARNING),
            (90, AlertCategoryType.WARNING),
            (89, None),
            (50, None),
            (49, AlertCategoryType.INFO),
            (1, AlertCategoryType.INFO),
            (0, AlertCategoryType.UNASSIGNED),
        ],
    )
    def test_default_bands(self, peak, expected):
        assert classify_percent(peak, DEFAULTS) == expected

    def test_custom_thresholds(self):
        custom = AlertSettings(warning_threshold=80, error_threshold=95, critical_threshold=110,
                               under_utilization_threshold=30)
        assert classify_percent(88, custom) == AlertCategoryType.WARNING
        assert classify_percent(110, custom) == AlertCategoryType.CRITICAL
        assert classify_percent(40, custom) is None

    @given(st.integers(min_value=0, max_value=500))
    def test_only_gap_band_is_unclassified(self, peak):
        category = classify_percent(peak, DEFAULTS)
        in_gap = DEFAULTS.under_utilization_threshold <= peak < DEFAULTS.warning_threshold
        assert (category is None) == in_gap


class TestClassify:

    def test_inactive_resource_is_never_classified(self):
        assert classify(make_resource(is_active=False), _result(150), DEFAULTS) is None

    def test_active_resource(self):
        assert classify(make_resource(), _result(0), DEFAULTS) == AlertCategoryType.UNASSIGNED


class TestCategories:

    def test_empty_categories_order_and_presentation(self):
        categories = empty_categories(DEFAULTS)
        assert list(categories) == list(CATEGORY_ORDER)

        critical = categories[AlertCategoryType.CRITICAL]
        assert critical.title == "Critical Overallocation"
        assert critical.color == "#dc2626"
        assert critical.threshold == 120
        assert critical.count == 0

        assert categories[AlertCategoryType.INFO].icon == "trending-down"
        assert categories[AlertCategoryType.UNASSIGNED].threshold is None

    def test_group_by_category_drops_unclassified(self):
        a, b, c = make_resource(id=1), make_resource(id=2), make_resource(id=3)
        groups = group_by_category([
            (a, AlertCategoryType.CRITICAL),
            (b, None),
            (c, AlertCategoryType.CRITICAL),
        ])
        assert groups[AlertCategoryType.CRITICAL] == [a, c]
        assert sum(len(members) for members in groups.values()) == 2
