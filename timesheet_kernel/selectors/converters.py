"""ORM row -> domain DTO conversion, shared by selectors and services."""

from timesheet_kernel.domain.dtos import (
    CustomerInfo,
    ProjectInfo,
    Role,
    TimeEntryInfo,
    UserInfo,
    WeekStatus,
    WeekStatusInfo,
)
from timesheet_kernel.models import Customer, Project, TimeEntry, User, WeekStatusRecord


def user_to_info(user: User) -> UserInfo:
    return UserInfo(
        id=user.id,
        name=user.name,
        email=user.email,
        role=Role(user.role),
        daily_rate=user.daily_rate,
    )


def customer_to_info(customer: Customer) -> CustomerInfo:
    return CustomerInfo(
        id=customer.id,
        name=customer.name,
        contact_person=customer.contact_person,
        email=customer.email,
        active=customer.active,
    )


def project_to_info(project: Project) -> ProjectInfo:
    return ProjectInfo(
        id=project.id,
        name=project.name,
        customer_id=project.customer_id,
        description=project.description,
        active=project.active,
        budget_days=project.budget_days,
        budget_cost=project.budget_cost,
    )


def entry_to_info(entry: TimeEntry) -> TimeEntryInfo:
    return TimeEntryInfo(
        id=entry.id,
        user_id=entry.user_id,
        entry_date=entry.entry_date,
        customer_id=entry.customer_id,
        project_id=entry.project_id,
        hours=entry.hours,
        description=entry.description,
    )


def week_status_to_info(record: WeekStatusRecord) -> WeekStatusInfo:
    return WeekStatusInfo(
        id=record.id,
        user_id=record.user_id,
        week_start=record.week_start,
        status=WeekStatus(record.status),
        version=record.version,
        changed_at=record.changed_at,
        changed_by_id=record.changed_by_id,
    )
