"""
Tests for UserService.

Covers:
- Creation with role and daily rate
- Field validation
- Update and delete, including the referenced-user guard
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from timesheet_kernel.domain.dtos import Role
from timesheet_kernel.exceptions import (
    InvalidEmailError,
    InvalidRateError,
    InvalidRoleError,
    MissingFieldError,
    UserNotFoundError,
    UserReferencedError,
)


class TestAddUser:

    def test_add_user_defaults_to_user_role(self, user_service, test_actor_id):
        user = user_service.add_user("Uma", "uma@example.com", test_actor_id)
        assert user.role is Role.USER
        assert user.daily_rate is None
        assert user_service.get_user(user.id) == user

    def test_add_admin_with_rate(self, user_service, test_actor_id):
        user = user_service.add_user(
            "Ada", "ada@example.com", test_actor_id, role="admin", daily_rate="750.50",
        )
        assert user.is_admin
        assert user.daily_rate == Decimal("750.50")

    def test_name_required(self, user_service, test_actor_id):
        with pytest.raises(MissingFieldError):
            user_service.add_user("", "x@example.com", test_actor_id)

    def test_email_required(self, user_service, test_actor_id):
        with pytest.raises(MissingFieldError):
            user_service.add_user("X", None, test_actor_id)

    def test_email_must_contain_at(self, user_service, test_actor_id):
        with pytest.raises(InvalidEmailError):
            user_service.add_user("X", "x.example.com", test_actor_id)

    def test_negative_rate_rejected(self, user_service, test_actor_id):
        with pytest.raises(InvalidRateError):
            user_service.add_user("X", "x@example.com", test_actor_id, daily_rate=-1)

    def test_sub_cent_rate_rejected(self, user_service, test_actor_id):
        with pytest.raises(InvalidRateError):
            user_service.add_user("X", "x@example.com", test_actor_id, daily_rate="400.005")

    def test_unknown_role_rejected(self, user_service, test_actor_id):
        with pytest.raises(InvalidRoleError):
            user_service.add_user("X", "x@example.com", test_actor_id, role="owner")

    def test_list_users_sorted_by_name(self, user_service, test_actor_id):
        user_service.add_user("Zed", "z@example.com", test_actor_id)
        user_service.add_user("Amy", "a@example.com", test_actor_id)
        assert [u.name for u in user_service.list_users()] == ["Amy", "Zed"]


class TestUpdateAndDelete:

    def test_update_role_and_rate(self, user_service, regular_user, admin):
        updated = user_service.update_user(
            replace(regular_user, role=Role.ADMIN, daily_rate=Decimal("500")), admin.id,
        )
        assert updated.role is Role.ADMIN
        assert user_service.get_user(regular_user.id).daily_rate == Decimal("500")

    def test_update_unknown_user(self, user_service, regular_user, admin):
        with pytest.raises(UserNotFoundError):
            user_service.update_user(replace(regular_user, id=uuid4()), admin.id)

    def test_delete_user_without_entries(self, user_service, regular_user, admin):
        user_service.delete_user(regular_user.id, admin.id)
        with pytest.raises(UserNotFoundError):
            user_service.get_user(regular_user.id)

    def test_delete_user_with_entries_blocked(
        self, user_service, entry_service, regular_user, admin, customer, project,
    ):
        entry_service.add_time_entry(
            regular_user, date(2024, 4, 15), customer.id, project.id, "4",
        )
        with pytest.raises(UserReferencedError) as exc_info:
            user_service.delete_user(regular_user.id, admin.id)
        assert exc_info.value.entry_count == 1
        assert user_service.get_user(regular_user.id) == regular_user

    def test_delete_unknown_user(self, user_service, admin):
        with pytest.raises(UserNotFoundError):
            user_service.delete_user(uuid4(), admin.id)
