import pytest
from datetime import date
from resourceplanner.storage.models import (
    AlertSettingsModel,
    AllocationModel,
    ProjectModel,
    ResourceModel,
    TimeEntryModel,
    WeeklySubmissionModel,
)
from resourceplanner.storage.repositories import (
    AlertSettingsRepository,
    AllocationRepository,
    ProjectRepository,
    ResourceRepository,
    TimeEntryRepository,
    WeeklySubmissionRepository,
)


@pytest.fixture
def resource(session):
    return ResourceRepository().create(session, ResourceModel(name="Alice", department="Engineering"))


@pytest.fixture
def project(session):
    return ProjectRepository().create(session, ProjectModel(name="Apollo"))


def test_resource_repository(session):
    repo = ResourceRepository()

    created = repo.create(session, ResourceModel(name="Alice", email="alice@example.com", department="Engineering"))
    assert created.id is not None
    assert created.weekly_capacity == 40
    assert created.is_active is True

    repo.create(session, ResourceModel(name="Bob", department="Design", is_active=False))

    assert [r.name for r in repo.list(session)] == ["Alice", "Bob"]
    assert [r.name for r in repo.list(session, department="Design")] == ["Bob"]
    assert [r.name for r in repo.list(session, active_only=True)] == ["Alice"]

    updated = repo.update(session, created.id, {"weekly_capacity": 32, "id": 999})
    assert updated.weekly_capacity == 32
    assert updated.id == created.id

    assert repo.update(session, 12345, {"name": "Nobody"}) is None

def test_resource_soft_delete(session, resource):
    repo = ResourceRepository()

    assert repo.delete(session, resource.id) is True
    assert repo.get(session, resource.id) is None
    assert repo.list_all(session) == []
    assert resource.is_deleted is True
    assert resource.deleted_at is not None

    assert repo.delete(session, resource.id) is False

def test_project_repository(session):
    repo = ProjectRepository()
    apollo = repo.create(session, ProjectModel(name="Apollo"))
    gemini = repo.create(session, ProjectModel(name="Gemini", priority="high"))

    assert apollo.status == "active"
    assert {p.name for p in repo.get_many(session, [apollo.id, gemini.id, apollo.id])} == {"Apollo", "Gemini"}
    assert repo.get_many(session, []) == []

    repo.update(session, gemini.id, {"status": "closure"})
    assert repo.get(session, gemini.id).status == "closure"

    assert repo.delete(session, apollo.id) is True
    assert repo.get(session, apollo.id) is None
    assert repo.delete(session, apollo.id) is False

def test_allocation_repository(session, resource, project):
    repo = AllocationRepository()

    def allocation(start, end, **kwargs):
        return repo.create(session, AllocationModel(
            resource_id=resource.id, project_id=project.id,
            start_date=start, end_date=end, **kwargs,
        ))

    march = allocation(date(2024, 3, 1), date(2024, 3, 31), allocated_hours=80,
                       weekly_allocations={"2024-W11": 20})
    april = allocation(date(2024, 4, 1), date(2024, 4, 30), status="planned")

    assert march.status == "active"
    assert repo.get(session, march.id).weekly_allocations == {"2024-W11": 20}

    in_range = repo.list_in_range(session, date(2024, 3, 25), date(2024, 4, 2))
    assert [a.id for a in in_range] == [march.id, april.id]
    assert [a.id for a in repo.list_in_range(session, date(2024, 4, 15), None)] == [april.id]
    assert len(repo.list_in_range(session)) == 2

    assert [a.id for a in repo.list(session, resource_id=resource.id)] == [march.id, april.id]
    assert repo.list(session, project_id=project.id + 1) == []

    repo.update(session, march.id, {"weekly_allocations": {"2024-W11": 10, "2024-W12": 10}})
    assert repo.get(session, march.id).weekly_allocations == {"2024-W11": 10, "2024-W12": 10}

    assert repo.delete(session, april.id) is True
    assert repo.get(session, april.id) is None

def test_alert_settings_repository(session):
    repo = AlertSettingsRepository()
    assert repo.get_by_type(session) is None

    created = repo.upsert(session, {"warning_threshold": 85, "unknown": 1})
    assert created.warning_threshold == 85
    assert created.critical_threshold == 120

    repo.upsert(session, {"is_enabled": False})
    assert repo.get_by_type(session) is None
    assert repo.get_by_type(session, enabled_only=False).warning_threshold == 85
    assert len(repo.list(session)) == 1

    other = repo.create(session, AlertSettingsModel(type="budget"))
    assert repo.get_by_type(session, "budget").id == other.id

def test_project_list_all(session):
    repo = ProjectRepository()
    repo.create(session, ProjectModel(name="Apollo"))
    repo.create(session, ProjectModel(name="Gemini", status="closed"))
    assert [p.name for p in repo.list_all(session)] == ["Apollo", "Gemini"]

def test_time_entry_repository(session, resource, project):
    allocation = AllocationRepository().create(session, AllocationModel(
        resource_id=resource.id, project_id=project.id,
        start_date=date(2024, 3, 1), end_date=date(2024, 3, 31),
    ))
    repo = TimeEntryRepository()

    first = repo.create(session, TimeEntryModel(
        resource_id=resource.id, allocation_id=allocation.id, week_start_date=date(2024, 3, 11),
        monday_hours=8, tuesday_hours=7.5,
    ))
    repo.create(session, TimeEntryModel(
        resource_id=resource.id, allocation_id=allocation.id, week_start_date=date(2024, 3, 18),
        friday_hours=4,
    ))

    assert first.sunday_hours == 0
    assert first.total_hours == 15.5
    assert [e.id for e in repo.list_for_week(session, resource.id, date(2024, 3, 11))] == [first.id]
    assert len(repo.list(session, resource_id=resource.id)) == 2
    assert repo.list(session, week_start_date=date(2024, 3, 4)) == []
    assert repo.exists_for_allocation(session, allocation.id) is True
    assert repo.exists_for_allocation(session, allocation.id + 1) is False

    updated = repo.update(session, first.id, {"monday_hours": 6, "week_start_date": date(2024, 1, 1)})
    assert updated.total_hours == 13.5
    assert updated.week_start_date == date(2024, 3, 11)

    assert repo.delete(session, first.id) is True
    assert repo.delete(session, first.id) is False

def test_weekly_submission_repository(session, resource):
    repo = WeeklySubmissionRepository()
    bob = ResourceRepository().create(session, ResourceModel(name="Bob"))

    submitted = repo.create(session, WeeklySubmissionModel(
        resource_id=resource.id, week_start_date=date(2024, 3, 11), is_submitted=True, total_hours=40,
    ))
    reopened = repo.create(session, WeeklySubmissionModel(resource_id=bob.id, week_start_date=date(2024, 3, 11)))

    assert reopened.is_submitted is False
    assert repo.get_for_week(session, resource.id, date(2024, 3, 11)).id == submitted.id
    assert repo.get_for_week(session, resource.id, date(2024, 3, 18)) is None
    assert repo.submitted_resource_ids(session, date(2024, 3, 11)) == {resource.id}
    assert [s.id for s in repo.list(session, pending_only=True)] == [reopened.id]
    assert [s.id for s in repo.list(session, resource_id=resource.id)] == [submitted.id]
