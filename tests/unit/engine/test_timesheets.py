"""
Unit tests for the timesheet service, backed by SQLite.
"""

from datetime import date

import pytest

from conftest import NOW
from resourceplanner.engine.timesheets import TimesheetLockedError, TimesheetService
from resourceplanner.storage.models import AllocationModel, ProjectModel, ResourceModel

WEEK = date(2024, 3, 11)


@pytest.fixture
def service():
    return TimesheetService(clock=lambda: NOW)


@pytest.fixture
def seeded(session):
    alice = ResourceModel(name="Alice", email="alice@example.com")
    bob = ResourceModel(name="Bob", email="bob@example.com")
    carol = ResourceModel(name="Carol", email="carol@example.com", is_active=False)
    dave = ResourceModel(name="Dave", email="dave@example.com")
    apollo = ProjectModel(name="Apollo")
    session.add_all([alice, bob, carol, dave, apollo])
    session.flush()

    def allocation(resource, start=date(2024, 3, 1), end=date(2024, 3, 31), status="active"):
        row = AllocationModel(resource_id=resource.id, project_id=apollo.id,
                              start_date=start, end_date=end, status=status)
        session.add(row)
        return row

    rows = {
        "alice": alice,
        "bob": bob,
        "carol": carol,
        "dave": dave,
        "alice_allocation": allocation(alice),
        "bob_allocation": allocation(bob),
        "carol_allocation": allocation(carol),
        # planned work does not expect hours to be logged
        "dave_allocation": allocation(dave, status="planned"),
    }
    session.flush()
    return rows


def _entry(seeded, **overrides):
    data = {
        "resource_id": seeded["alice"].id,
        "allocation_id": seeded["alice_allocation"].id,
        "week_start_date": WEEK,
        "monday_hours": 8.0,
        "tuesday_hours": 8.0,
    }
    data.update(overrides)
    return data


class TestTimeEntries:

    def test_create(self, session, seeded, service):
        entry = service.create_entry(session, _entry(seeded))
        assert entry.id is not None
        assert entry.total_hours == 16

    def test_week_must_start_on_monday(self, session, seeded, service):
        with pytest.raises(ValueError, match="Monday"):
            service.create_entry(session, _entry(seeded, week_start_date=date(2024, 3, 12)))

    def test_missing_references(self, session, seeded, service):
        assert service.create_entry(session, _entry(seeded, resource_id=999)) is None
        assert service.create_entry(session, _entry(seeded, allocation_id=999)) is None

    def test_allocation_must_belong_to_resource(self, session, seeded, service):
        with pytest.raises(ValueError, match="does not belong"):
            service.create_entry(session, _entry(seeded, allocation_id=seeded["bob_allocation"].id))

    def test_update_and_delete(self, session, seeded, service):
        entry = service.create_entry(session, _entry(seeded))

        updated = service.update_entry(session, entry.id, {"friday_hours": 4.0, "notes": "release"})
        assert updated.total_hours == 20
        assert updated.notes == "release"

        with pytest.raises(ValueError, match="Allocation not found"):
            service.update_entry(session, entry.id, {"allocation_id": 999})

        assert service.update_entry(session, 999, {"friday_hours": 1.0}) is None
        assert service.delete_entry(session, entry.id) is True
        assert service.delete_entry(session, entry.id) is False


class TestWeeklySubmission:

    def test_submit_totals_the_week(self, session, seeded, service):
        service.create_entry(session, _entry(seeded))
        service.create_entry(session, _entry(seeded, monday_hours=0.0, tuesday_hours=0.0, friday_hours=6.5))
        service.create_entry(session, _entry(seeded, week_start_date=date(2024, 3, 18)))

        submission = service.submit_week(session, seeded["alice"].id, WEEK)

        assert submission.is_submitted is True
        assert submission.submitted_at == NOW
        assert submission.total_hours == 22.5
        assert service.is_week_submitted(session, seeded["alice"].id, WEEK)

    def test_resubmit_updates_the_same_row(self, session, seeded, service):
        first = service.submit_week(session, seeded["alice"].id, WEEK)
        service.unsubmit_week(session, seeded["alice"].id, WEEK)
        second = service.submit_week(session, seeded["alice"].id, WEEK)
        assert second.id == first.id
        assert second.is_submitted is True

    def test_submit_unknown_resource(self, session, seeded, service):
        assert service.submit_week(session, 999, WEEK) is None

    def test_submitted_week_is_locked(self, session, seeded, service):
        entry = service.create_entry(session, _entry(seeded))
        service.submit_week(session, seeded["alice"].id, WEEK)

        with pytest.raises(TimesheetLockedError):
            service.create_entry(session, _entry(seeded))
        with pytest.raises(TimesheetLockedError):
            service.update_entry(session, entry.id, {"monday_hours": 1.0})
        with pytest.raises(TimesheetLockedError):
            service.delete_entry(session, entry.id)

        # other weeks stay open
        assert service.create_entry(session, _entry(seeded, week_start_date=date(2024, 3, 18))) is not None

    def test_unsubmit_reopens_the_week(self, session, seeded, service):
        entry = service.create_entry(session, _entry(seeded))
        service.submit_week(session, seeded["alice"].id, WEEK)

        reopened = service.unsubmit_week(session, seeded["alice"].id, WEEK)

        assert reopened.is_submitted is False
        assert reopened.submitted_at is None
        assert service.update_entry(session, entry.id, {"monday_hours": 1.0}).total_hours == 9

    def test_unsubmit_without_submission(self, session, seeded, service):
        assert service.unsubmit_week(session, seeded["alice"].id, WEEK) is None

    def test_unsubmitted_resources(self, session, seeded, service):
        service.submit_week(session, seeded["bob"].id, WEEK)

        names = [r.name for r in service.unsubmitted_resources(session, WEEK)]

        # Bob submitted, Carol is inactive, Dave has only planned work
        assert names == ["Alice"]
        assert service.unsubmitted_resources(session, date(2024, 4, 1)) == []

    def test_unsubmitted_requires_monday(self, session, seeded, service):
        with pytest.raises(ValueError):
            service.unsubmitted_resources(session, date(2024, 3, 13))
