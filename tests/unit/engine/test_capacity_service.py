"""
Unit tests for the capacity service and snapshot loader, backed by SQLite.
"""

from datetime import date
from unittest.mock import MagicMock

import pytest

from conftest import NOW
from resourceplanner.engine.alert_cache import AlertCache
from resourceplanner.engine.capacity_service import CapacityService
from resourceplanner.engine.models import AlertCategoryType, AlertSettings
from resourceplanner.engine.snapshot_loader import CapacitySnapshotLoader, to_alert_settings
from resourceplanner.storage.models import (
    AlertSettingsModel,
    AllocationModel,
    ProjectModel,
    ResourceModel,
)
from resourceplanner.storage.repositories import (
    AlertSettingsRepository,
    AllocationRepository,
    ProjectRepository,
    ResourceRepository,
)


@pytest.fixture
def loader():
    return CapacitySnapshotLoader(
        resource_repo=ResourceRepository(),
        project_repo=ProjectRepository(),
        allocation_repo=AllocationRepository(),
        settings_repo=AlertSettingsRepository(),
    )


@pytest.fixture
def seeded(session):
    alice = ResourceModel(name="Alice", email="alice@example.com", department="Engineering", weekly_capacity=40)
    bob = ResourceModel(name="Bob", email="bob@example.com", department="Design", weekly_capacity=40)
    gone = ResourceModel(name="Gone", email="gone@example.com", department="Design", is_deleted=True)
    apollo = ProjectModel(name="Apollo")
    session.add_all([alice, bob, gone, apollo])
    session.flush()
    session.add_all([
        AllocationModel(resource_id=alice.id, project_id=apollo.id, allocated_hours=44,
                        start_date=date(2024, 3, 11), end_date=date(2024, 3, 17)),
        AllocationModel(resource_id=bob.id, project_id=apollo.id, allocated_hours=0,
                        start_date=date(2024, 3, 11), end_date=date(2024, 3, 24),
                        weekly_allocations={"2024-W11": 28, "2024-W12": 2}),
        AllocationModel(resource_id=bob.id, project_id=apollo.id, allocated_hours=500,
                        start_date=date(2023, 1, 2), end_date=date(2023, 1, 8)),
    ])
    session.commit()
    return {"alice": alice, "bob": bob, "gone": gone, "apollo": apollo}


@pytest.fixture
def service(loader):
    return CapacityService(loader=loader, cache=AlertCache(ttl_seconds=300), clock=lambda: NOW)


class TestSnapshotLoader:

    def test_load_converts_rows(self, session, seeded, loader):
        snapshot = loader.load(session, date(2024, 3, 11), date(2024, 3, 24))

        assert sorted(r.name for r in snapshot.resources) == ["Alice", "Bob"]
        assert len(snapshot.allocations) == 2
        bob_allocation = next(a for a in snapshot.allocations if a.resource_id == seeded["bob"].id)
        assert bob_allocation.weekly_hours == {"2024-W11": 28, "2024-W12": 2}
        assert snapshot.projects[seeded["apollo"].id].name == "Apollo"

    def test_load_single_resource(self, session, seeded, loader):
        snapshot = loader.load(session, resource_id=seeded["alice"].id)
        assert [r.name for r in snapshot.resources] == ["Alice"]
        assert all(a.resource_id == seeded["alice"].id for a in snapshot.allocations)

    def test_alert_settings_default_and_stored(self, session, loader):
        assert loader.load_alert_settings(session) == AlertSettings()

        session.add(AlertSettingsModel(type="capacity", warning_threshold=80))
        session.commit()
        assert loader.load_alert_settings(session).warning_threshold == 80

    def test_disabled_settings_are_ignored(self, session, loader):
        session.add(AlertSettingsModel(type="capacity", warning_threshold=70, is_enabled=False))
        session.commit()
        assert loader.load_alert_settings(session) == AlertSettings()

    def test_to_alert_settings_none(self):
        assert to_alert_settings(None) == AlertSettings()


class TestCapacityService:

    def test_alerts(self, session, seeded, service):
        payload = service.get_alerts(session, "2024-03-11", "2024-03-17")

        assert [group.type for group in payload.categories] == [AlertCategoryType.CRITICAL]
        assert payload.categories[0].resources[0].name == "Alice"
        assert payload.metadata.generated_at == NOW

    def test_alerts_use_stored_thresholds(self, session, seeded, service):
        session.add(AlertSettingsModel(type="capacity", warning_threshold=80))
        session.commit()

        payload = service.get_alerts(session, "2024-03-11", "2024-03-17", severity="warning")
        assert [r.name for r in payload.categories[0].resources] == ["Bob"]

    def test_alerts_are_cached_until_invalidated(self, session, seeded, loader):
        spy = MagicMock(wraps=loader)
        service = CapacityService(loader=spy, cache=AlertCache(ttl_seconds=300), clock=lambda: NOW)

        first = service.get_alerts(session, "2024-03-11", "2024-03-17")
        second = service.get_alerts(session, "2024-03-11", "2024-03-17")
        assert second is first
        assert spy.load.call_count == 1

        service.invalidate()
        service.get_alerts(session, "2024-03-11", "2024-03-17")
        assert spy.load.call_count == 2

    def test_invalidate_commits_before_clearing(self):
        order = []
        session = MagicMock()
        session.commit.side_effect = lambda: order.append("commit")
        cache = MagicMock(spec=AlertCache)
        cache.invalidate.side_effect = lambda: order.append("invalidate")

        CapacityService(loader=MagicMock(), cache=cache).invalidate(session)

        assert order == ["commit", "invalidate"]

    def test_write_during_load_is_not_cached(self, session, seeded, loader):
        cache = AlertCache(ttl_seconds=300)
        service = CapacityService(loader=loader, cache=cache, clock=lambda: NOW)
        real_load = loader.load

        def load_then_concurrent_write(*args, **kwargs):
            snapshot = real_load(*args, **kwargs)
            service.invalidate()
            return snapshot

        spy = MagicMock(wraps=loader)
        spy.load.side_effect = load_then_concurrent_write
        service.loader = spy

        service.get_alerts(session, "2024-03-11", "2024-03-17")
        assert len(cache) == 0

        spy.load.side_effect = real_load
        service.get_alerts(session, "2024-03-11", "2024-03-17")
        assert len(cache) == 1

    def test_storage_errors_propagate(self, session):
        failing = MagicMock()
        failing.load.side_effect = RuntimeError("db down")
        service = CapacityService(loader=failing, clock=lambda: NOW)
        with pytest.raises(RuntimeError):
            service.get_alerts(session, "2024-03-11", "2024-03-24")

    def test_breakdown(self, session, seeded, service):
        breakdown = service.get_resource_breakdown(session, seeded["bob"].id, "2024-03-11", "2024-03-24")
        assert [p.utilization for p in breakdown.periods] == [88, 6]
        assert breakdown.contributing_projects[0].project_name == "Apollo"

    def test_breakdown_unknown_or_deleted_resource(self, session, seeded, service):
        assert service.get_resource_breakdown(session, 999, "2024-03-11", "2024-03-24") is None
        assert service.get_resource_breakdown(session, seeded["gone"].id, "2024-03-11", "2024-03-24") is None

    def test_heatmap(self, session, seeded, service):
        rows = service.get_heatmap(session, "2024-03-11", "2024-03-24", department="Design")
        assert [row["name"] for row in rows] == ["Bob"]
        assert rows[0]["utilization"] == 47

    def test_kpis(self, session, seeded, service):
        summary = service.get_kpis(session, "2024-03-11", "2024-03-17")

        assert summary.total_resources == 2
        assert summary.active_projects == 1
        # Alice 44h and Bob 28h against 32h each
        assert summary.conflicts == 1
        assert summary.available_resources == 1
        assert summary.utilization == 112.5
        assert summary.trends["utilization"].trend_data[-1] == 112.5

    def test_kpis_load_the_trend_weeks(self, session, seeded, loader):
        spy = MagicMock(wraps=loader)
        service = CapacityService(loader=spy, clock=lambda: NOW)

        service.get_kpis(session, "2024-03-11", "2024-03-17")
        spy.load.assert_called_once_with(session, date(2024, 1, 29), date(2024, 3, 17))

        spy.load.reset_mock()
        service.get_kpis(session, "2024-03-11", "2024-03-17", include_trends=False)
        spy.load.assert_called_once_with(session, date(2024, 3, 11), date(2024, 3, 17))
