"""
Tests for WeekStatusService.

Covers:
- The status upsert and its idempotence
- Transition enforcement (opt-in for upserts, always for named actions)
- The submit / approve / reject / reopen flow
- Week start and permission checks
"""

from datetime import date

import pytest

from timesheet_kernel.domain.dtos import WeekStatus
from timesheet_kernel.domain.week_status import WeekAction
from timesheet_kernel.exceptions import (
    InvalidWeekTransitionError,
    LockedWeekError,
    NotWeekStartError,
    PermissionDeniedError,
    ValidationError,
)
from timesheet_kernel.selectors.week_status_selector import WeekStatusSelector

WEEK = date(2024, 4, 15)


@pytest.fixture
def statuses(session):
    return WeekStatusSelector(session)


class TestUpsert:

    def test_missing_week_reads_as_draft(self, week_service, regular_user):
        assert week_service.get_week_status(regular_user.id, WEEK) is None
        assert week_service.status_of(regular_user.id, WEEK) is WeekStatus.DRAFT

    def test_upsert_creates_record(self, week_service, admin, regular_user, clock):
        info = week_service.update_week_status(
            admin, regular_user.id, WEEK, WeekStatus.APPROVED,
        )
        assert info.status is WeekStatus.APPROVED
        assert info.changed_by_id == admin.id
        assert info.changed_at == clock.now()

    def test_same_status_twice_keeps_one_record(
        self, week_service, admin, regular_user, statuses,
    ):
        first = week_service.update_week_status(admin, regular_user.id, WEEK, "pending")
        second = week_service.update_week_status(admin, regular_user.id, WEEK, "pending")
        assert second == first
        assert len(statuses.list_for_week(WEEK)) == 1

    def test_change_bumps_version(self, week_service, admin, regular_user, clock):
        first = week_service.update_week_status(admin, regular_user.id, WEEK, "pending")
        clock.advance(60)
        second = week_service.update_week_status(admin, regular_user.id, WEEK, "approved")
        assert second.id == first.id
        assert second.version == first.version + 1
        assert second.changed_at == clock.now()

    def test_unenforced_upsert_allows_any_move(self, week_service, regular_user):
        week_service.update_week_status(regular_user, regular_user.id, WEEK, "approved")
        info = week_service.update_week_status(regular_user, regular_user.id, WEEK, "draft")
        assert info.status is WeekStatus.DRAFT

    def test_enforced_upsert_follows_table(self, strict_week_service, regular_user):
        with pytest.raises(InvalidWeekTransitionError) as exc_info:
            strict_week_service.update_week_status(
                regular_user, regular_user.id, WEEK, "approved",
            )
        assert exc_info.value.from_status == "draft"
        assert exc_info.value.role == "user"
        assert strict_week_service.get_week_status(regular_user.id, WEEK) is None

    def test_enforced_upsert_of_current_status_is_noop(
        self, strict_week_service, regular_user,
    ):
        info = strict_week_service.update_week_status(
            regular_user, regular_user.id, WEEK, "draft",
        )
        assert info.status is WeekStatus.DRAFT

    def test_unknown_status_rejected(self, week_service, admin, regular_user):
        with pytest.raises(ValidationError):
            week_service.update_week_status(admin, regular_user.id, WEEK, "archived")

    def test_week_start_must_be_monday(self, week_service, admin, regular_user):
        with pytest.raises(NotWeekStartError):
            week_service.update_week_status(
                admin, regular_user.id, date(2024, 4, 17), "pending",
            )

    def test_user_cannot_touch_another_users_week(
        self, week_service, regular_user, other_user,
    ):
        with pytest.raises(PermissionDeniedError):
            week_service.update_week_status(regular_user, other_user.id, WEEK, "pending")

    def test_change_is_logged(self, week_service, admin, regular_user, captured_logs):
        week_service.update_week_status(admin, regular_user.id, WEEK, "pending")
        changes = [r for r in captured_logs() if r["message"] == "week_status_changed"]
        assert len(changes) == 1
        assert changes[0]["to_status"] == "pending"
        assert changes[0]["week_start"] == "2024-04-15"


class TestNamedActions:

    def test_submit_then_approve(self, week_service, admin, regular_user):
        assert week_service.submit(regular_user, regular_user.id, WEEK).status is (
            WeekStatus.PENDING
        )
        assert week_service.approve(admin, regular_user.id, WEEK).status is (
            WeekStatus.APPROVED
        )

    def test_user_cannot_approve(self, week_service, regular_user):
        week_service.submit(regular_user, regular_user.id, WEEK)
        with pytest.raises(InvalidWeekTransitionError):
            week_service.approve(regular_user, regular_user.id, WEEK)
        assert week_service.status_of(regular_user.id, WEEK) is WeekStatus.PENDING

    def test_submit_twice_is_rejected(self, week_service, regular_user):
        week_service.submit(regular_user, regular_user.id, WEEK)
        with pytest.raises(InvalidWeekTransitionError):
            week_service.submit(regular_user, regular_user.id, WEEK)

    def test_reject_reopen_resubmit(self, week_service, admin, regular_user):
        week_service.submit(regular_user, regular_user.id, WEEK)
        week_service.reject(admin, regular_user.id, WEEK)
        week_service.reopen(admin, regular_user.id, WEEK)
        info = week_service.submit(regular_user, regular_user.id, WEEK)
        assert info.status is WeekStatus.PENDING

    def test_approved_week_cannot_be_rejected_directly(
        self, week_service, admin, regular_user,
    ):
        week_service.approve(admin, regular_user.id, WEEK)
        with pytest.raises(InvalidWeekTransitionError):
            week_service.reject(admin, regular_user.id, WEEK)

    def test_perform_by_name(self, week_service, regular_user):
        info = week_service.perform(regular_user, regular_user.id, WEEK, "submit")
        assert info.status is WeekAction.SUBMIT.target


class TestRequireEditable:

    def test_creates_draft_record(self, week_service, regular_user):
        assert week_service.require_editable(regular_user, regular_user.id, WEEK) is (
            WeekStatus.DRAFT
        )
        assert week_service.get_week_status(regular_user.id, WEEK) is not None

    def test_pending_week_locked_for_user(self, week_service, regular_user):
        week_service.submit(regular_user, regular_user.id, WEEK)
        with pytest.raises(LockedWeekError) as exc_info:
            week_service.require_editable(regular_user, regular_user.id, WEEK)
        assert exc_info.value.week_start == "2024-04-15"

    def test_admin_always_editable(self, week_service, admin, regular_user):
        week_service.approve(admin, regular_user.id, WEEK)
        assert week_service.require_editable(admin, regular_user.id, WEEK) is (
            WeekStatus.APPROVED
        )
