"""
Alert classification.

Maps a resource's peak-week utilization onto one of five severity categories.
Peak utilization between the under-utilization and warning thresholds falls
in no category and the resource is left out of the alert payload.
"""

from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Tuple

from resourceplanner.engine.models import (
    AlertCategory,
    AlertCategoryType,
    AlertSettings,
    Resource,
    UtilizationResult,
)

CATEGORY_ORDER: Tuple[AlertCategoryType, ...] = (
    AlertCategoryType.CRITICAL,
    AlertCategoryType.ERROR,
    AlertCategoryType.WARNING,
    AlertCategoryType.INFO,
    AlertCategoryType.UNASSIGNED,
)

# (title, description, color, icon)
CATEGORY_PRESENTATION: Dict[AlertCategoryType, Tuple[str, str, str, str]] = {
    AlertCategoryType.CRITICAL: (
        "Critical Overallocation", "Resources severely overallocated", "#dc2626", "alert-circle",
    ),
    AlertCategoryType.ERROR: (
        "Overallocation Detected", "Resources over capacity", "#ea580c", "alert-circle",
    ),
    AlertCategoryType.WARNING: (
        "Near Capacity", "Resources approaching capacity limits", "#ca8a04", "alert-triangle",
    ),
    AlertCategoryType.INFO: (
        "Under-utilized", "Resources available for additional work", "#2563eb", "trending-down",
    ),
    AlertCategoryType.UNASSIGNED: (
        "Unassigned Resources", "Resources with no project allocations", "#6b7280", "user-x",
    ),
}


def classify_percent(peak_percent: float, settings: AlertSettings) -> Optional[AlertCategoryType]:
    """First matching band wins; None for the unclassified middle band."""
    if peak_percent >= settings.critical_threshold:
        return AlertCategoryType.CRITICAL
    if peak_percent >= settings.error_threshold:
        return AlertCategoryType.ERROR
    if peak_percent >= settings.warning_threshold:
        return AlertCategoryType.WARNING
    if 0 < peak_percent < settings.under_utilization_threshold:
        return AlertCategoryType.INFO
    if peak_percent == 0:
        return AlertCategoryType.UNASSIGNED
    return None


def classify(
    resource: Resource,
    result: UtilizationResult,
    settings: AlertSettings,
) -> Optional[AlertCategoryType]:
    """Category for an active resource, None for inactive or unclassified ones."""
    if not resource.is_active:
        return None
    return classify_percent(result.peak_utilization_percent, settings)


def category_threshold(category: AlertCategoryType, settings: AlertSettings) -> Optional[float]:
    return {
        AlertCategoryType.CRITICAL: settings.critical_threshold,
        AlertCategoryType.ERROR: settings.error_threshold,
        AlertCategoryType.WARNING: settings.warning_threshold,
        AlertCategoryType.INFO: settings.under_utilization_threshold,
    }.get(category)


def empty_categories(settings: AlertSettings) -> "OrderedDict[AlertCategoryType, AlertCategory]":
    """All five categories, in payload order, with no resources yet."""
    categories: "OrderedDict[AlertCategoryType, AlertCategory]" = OrderedDict()
    for category in CATEGORY_ORDER:
        title, description, color, icon = CATEGORY_PRESENTATION[category]
        categories[category] = AlertCategory(
            type=category,
            title=title,
            description=description,
            color=color,
            icon=icon,
            threshold=category_threshold(category, settings),
        )
    return categories


def group_by_category(
    classified: Iterable[Tuple[Resource, Optional[AlertCategoryType]]],
) -> Dict[AlertCategoryType, List[Resource]]:
    """Group resources by category, dropping unclassified ones."""
    groups: Dict[AlertCategoryType, List[Resource]] = {category: [] for category in CATEGORY_ORDER}
    for resource, category in classified:
        if category is not None:
            groups[category].append(resource)
    return groups
