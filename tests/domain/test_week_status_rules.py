"""
Tests for the pure week status state machine.

Covers:
- Transition table per role
- Editability predicate for every status
- Named actions and their targets
- Status name parsing
"""

from uuid import uuid4

import pytest

from timesheet_kernel.domain.dtos import Role, UserInfo, WeekStatus
from timesheet_kernel.domain.week_status import (
    ADMIN_TRANSITIONS,
    USER_TRANSITIONS,
    WeekAction,
    allowed_transitions,
    can_edit_timesheet,
    effective_status,
    is_transition_allowed,
    parse_week_status,
    require_transition,
)
from timesheet_kernel.exceptions import InvalidWeekTransitionError, ValidationError

ADMIN = UserInfo(id=uuid4(), name="Ada", email="ada@example.com", role=Role.ADMIN)
USER = UserInfo(id=uuid4(), name="Uma", email="uma@example.com", role=Role.USER)


class TestTransitionTable:
    """The role-gated moves."""

    def test_tables_cover_every_status(self):
        assert set(USER_TRANSITIONS) == set(WeekStatus)
        assert set(ADMIN_TRANSITIONS) == set(WeekStatus)

    @pytest.mark.parametrize(
        "status, expected",
        [
            (WeekStatus.DRAFT, {WeekStatus.PENDING}),
            (WeekStatus.PENDING, set()),
            (WeekStatus.APPROVED, set()),
            (WeekStatus.REJECTED, set()),
            (WeekStatus.REOPENED, {WeekStatus.PENDING}),
        ],
    )
    def test_regular_user(self, status, expected):
        assert allowed_transitions(status, USER) == expected

    @pytest.mark.parametrize(
        "status, expected",
        [
            (
                WeekStatus.DRAFT,
                {WeekStatus.PENDING, WeekStatus.APPROVED, WeekStatus.REJECTED},
            ),
            (WeekStatus.PENDING, {WeekStatus.APPROVED, WeekStatus.REJECTED}),
            (WeekStatus.APPROVED, {WeekStatus.REOPENED}),
            (WeekStatus.REJECTED, {WeekStatus.REOPENED}),
            (WeekStatus.REOPENED, {WeekStatus.APPROVED, WeekStatus.REJECTED}),
        ],
    )
    def test_admin(self, status, expected):
        assert allowed_transitions(status, ADMIN) == expected

    def test_missing_record_is_draft(self):
        assert effective_status(None) is WeekStatus.DRAFT
        assert allowed_transitions(None, USER) == {WeekStatus.PENDING}

    def test_no_terminal_state_for_admin(self):
        for status in WeekStatus:
            assert allowed_transitions(status, ADMIN)

    def test_require_transition_raises_with_details(self):
        with pytest.raises(InvalidWeekTransitionError) as exc_info:
            require_transition("2024-04-15", WeekStatus.PENDING, WeekStatus.APPROVED, USER)
        err = exc_info.value
        assert err.from_status == "pending"
        assert err.to_status == "approved"
        assert err.role == "user"
        assert err.code == "INVALID_WEEK_TRANSITION"

    def test_require_transition_allows_table_move(self):
        require_transition("2024-04-15", None, WeekStatus.PENDING, USER)
        assert is_transition_allowed(WeekStatus.PENDING, WeekStatus.REJECTED, ADMIN)


class TestEditability:
    """can_edit_timesheet for both roles."""

    @pytest.mark.parametrize("status", [None, *WeekStatus])
    def test_admin_can_always_edit(self, status):
        assert can_edit_timesheet(status, ADMIN) is True

    @pytest.mark.parametrize(
        "status, editable",
        [
            (None, True),
            (WeekStatus.DRAFT, True),
            (WeekStatus.PENDING, False),
            (WeekStatus.APPROVED, False),
            (WeekStatus.REJECTED, False),
            (WeekStatus.REOPENED, True),
        ],
    )
    def test_regular_user_only_draft_or_reopened(self, status, editable):
        assert can_edit_timesheet(status, USER) is editable


class TestActionsAndParsing:
    """Named actions and status names."""

    @pytest.mark.parametrize(
        "action, target",
        [
            ("submit", WeekStatus.PENDING),
            ("approve", WeekStatus.APPROVED),
            ("reject", WeekStatus.REJECTED),
            ("reopen", WeekStatus.REOPENED),
        ],
    )
    def test_action_targets(self, action, target):
        assert WeekAction(action).target is target

    def test_parse_is_case_insensitive(self):
        assert parse_week_status(" Approved ") is WeekStatus.APPROVED

    def test_parse_rejects_legacy_vocabulary(self):
        with pytest.raises(ValidationError):
            parse_week_status("submitted")
