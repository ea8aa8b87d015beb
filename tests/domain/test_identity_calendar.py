"""Tests for role predicates, ISO week arithmetic and the injectable clock."""

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from timesheet_kernel.domain.calendar import (
    in_week,
    is_week_start,
    iso_week_start,
    parse_iso_date,
    week_dates,
    week_end,
)
from timesheet_kernel.domain.clock import DeterministicClock
from timesheet_kernel.domain.dtos import Role, UserInfo
from timesheet_kernel.domain.identity import can_act_for, can_manage_timesheets, parse_role
from timesheet_kernel.exceptions import InvalidRoleError


def _user(role):
    return UserInfo(id=uuid4(), name="X", email="x@example.com", role=role)


class TestIdentity:

    def test_only_admin_manages_timesheets(self):
        assert can_manage_timesheets(_user(Role.ADMIN)) is True
        assert can_manage_timesheets(_user(Role.USER)) is False

    def test_user_acts_for_self_only(self):
        user = _user(Role.USER)
        assert can_act_for(user, user.id)
        assert not can_act_for(user, uuid4())

    def test_admin_acts_for_anyone(self):
        assert can_act_for(_user(Role.ADMIN), uuid4())

    def test_parse_role(self):
        assert parse_role("ADMIN") is Role.ADMIN
        assert parse_role(Role.USER) is Role.USER

    def test_parse_unknown_role(self):
        with pytest.raises(InvalidRoleError) as exc_info:
            parse_role("manager")
        assert exc_info.value.role == "manager"


class TestCalendar:

    @pytest.mark.parametrize(
        "day",
        [date(2024, 4, 15), date(2024, 4, 17), date(2024, 4, 21)],
    )
    def test_iso_week_start(self, day):
        assert iso_week_start(day) == date(2024, 4, 15)

    def test_week_start_across_year_boundary(self):
        assert iso_week_start(date(2025, 1, 1)) == date(2024, 12, 30)

    def test_is_week_start(self):
        assert is_week_start(date(2024, 4, 15))
        assert not is_week_start(date(2024, 4, 16))

    def test_week_dates_and_end(self):
        days = week_dates(date(2024, 4, 15))
        assert len(days) == 7
        assert days[-1] == week_end(date(2024, 4, 15)) == date(2024, 4, 21)

    def test_in_week_bounds(self):
        monday = date(2024, 4, 15)
        assert in_week(monday, monday)
        assert in_week(date(2024, 4, 21), monday)
        assert not in_week(date(2024, 4, 22), monday)
        assert not in_week(date(2024, 4, 14), monday)

    def test_parse_iso_date(self):
        assert parse_iso_date("2024-04-15") == date(2024, 4, 15)
        assert parse_iso_date(datetime(2024, 4, 15, 12, 0)) == date(2024, 4, 15)
        with pytest.raises(ValueError):
            parse_iso_date("15/04/2024")


class TestClock:

    def test_deterministic_clock_is_stable_until_advanced(self):
        clock = DeterministicClock()
        first = clock.now()
        assert clock.now() == first
        assert clock.advance(90) == first + timedelta(seconds=90)
        assert clock.advance(days=1).date() == date(2024, 4, 16)

    def test_current_week_start_is_monday(self):
        clock = DeterministicClock(datetime(2024, 4, 21, 23, 30, tzinfo=timezone.utc))
        assert clock.today() == date(2024, 4, 21)
        assert clock.current_week_start() == date(2024, 4, 15)

    def test_start_normalized_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        clock = DeterministicClock(datetime(2024, 4, 22, 1, 0, tzinfo=plus_two))
        assert clock.now().tzinfo == timezone.utc
        assert clock.current_week_start() == date(2024, 4, 15)

    def test_naive_start_rejected(self):
        with pytest.raises(ValueError):
            DeterministicClock(datetime(2024, 4, 15, 9, 0))
