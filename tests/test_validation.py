"""
Tests for the schedule validators and the cross-field validation pass.

Tests cover:
- The mutator guard predicates
- Status/date consistency for every status
- Issue collection and EntityValidationError
- End-to-end construction scenarios
"""

from datetime import datetime, timedelta, timezone

import pytest

from project_tracker.domain.builders import ProjectBuilder, TaskBuilder
from project_tracker.domain.exceptions import EntityValidationError
from project_tracker.domain.ids import ProjectId, TaskId
from project_tracker.domain.models import ProjectChild
from project_tracker.domain.project import Project
from project_tracker.domain.status import SchedulableStatus
from project_tracker.domain.task import Task
from project_tracker.domain.validation import (
    IssueCode,
    ensure_utc,
    ensure_valid,
    has_inconsistent_status,
    has_incorrect_schedule,
    is_valid_due_date,
    is_valid_start_date,
    is_valid_tag,
    validate_schedulable,
)

S = SchedulableStatus
NOW = datetime(2030, 6, 15, 12, 0, tzinfo=timezone.utc)
PAST = NOW - timedelta(days=10)
PAST_2 = NOW - timedelta(days=2)
FUTURE = NOW + timedelta(days=10)
FUTURE_2 = NOW + timedelta(days=20)


class TestGuards:
    def test_is_valid_tag(self):
        assert is_valid_tag("a", ["b"]) is True
        assert is_valid_tag("a", ["a"]) is False

    def test_start_date(self):
        assert is_valid_start_date(FUTURE, None)
        assert is_valid_start_date(PAST, FUTURE)
        assert is_valid_start_date(FUTURE, FUTURE)
        assert not is_valid_start_date(FUTURE_2, FUTURE)

    def test_due_date_with_start(self):
        assert is_valid_due_date(FUTURE, PAST, now=NOW)
        assert is_valid_due_date(PAST_2, PAST, now=NOW)
        assert not is_valid_due_date(PAST, FUTURE, now=NOW)

    def test_due_date_without_start_must_not_be_past(self):
        assert is_valid_due_date(FUTURE, None, now=NOW)
        assert not is_valid_due_date(PAST, None, now=NOW)

    def test_ensure_utc(self):
        naive = datetime(2030, 1, 1, 12, 0)
        assert ensure_utc(naive) == datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
        offset = datetime(2030, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert ensure_utc(offset).hour == 12
        assert ensure_utc(None) is None
        with pytest.raises(TypeError):
            ensure_utc("2030-01-01")


class TestStatusConsistency:
    @pytest.mark.parametrize("status,start,due,inconsistent", [
        (S.NOT_STARTED, None, None, False),
        (S.NOT_STARTED, FUTURE, None, False),
        (S.NOT_STARTED, PAST, None, True),
        (S.PLANNED, FUTURE, None, False),
        (S.PLANNED, None, None, True),
        (S.PLANNED, PAST, None, True),
        (S.IN_PROGRESS, PAST, None, False),
        (S.IN_PROGRESS, PAST, FUTURE, False),
        (S.IN_PROGRESS, PAST, PAST_2, True),
        (S.IN_PROGRESS, FUTURE, None, True),
        (S.IN_PROGRESS, None, None, True),
        (S.IN_REVIEW, PAST, FUTURE, False),
        (S.IN_REVIEW, PAST, None, True),
        (S.IN_REVIEW, PAST, PAST_2, True),
        (S.COMPLETED, PAST, PAST_2, False),
        (S.COMPLETED, PAST, FUTURE, True),
        (S.COMPLETED, PAST, None, True),
        (S.COMPLETED, None, PAST_2, True),
        (S.ARCHIVED, None, None, False),
        (S.ARCHIVED, FUTURE, PAST, False),
        (S.CANCELED, PAST, None, False),
    ])
    def test_table(self, status, start, due, inconsistent):
        assert has_inconsistent_status(status, start, due, now=NOW) is inconsistent

    def test_incorrect_schedule(self):
        assert has_incorrect_schedule(FUTURE, PAST)
        assert not has_incorrect_schedule(PAST, FUTURE)
        assert not has_incorrect_schedule(None, PAST)


class TestCrossFieldValidation:
    def test_all_issues_are_collected(self):
        project_id = ProjectId.new()
        project = Project(
            id=project_id,
            start_date=FUTURE_2,
            due_date=FUTURE,
            status=S.COMPLETED,
            children=[ProjectChild.project(project_id)],
            dependencies=[project_id],
        )
        codes = [issue.code for issue in validate_schedulable(project, now=NOW)]
        assert codes == [
            IssueCode.INCORRECT_SCHEDULE,
            IssueCode.INCONSISTENT_STATUS,
            IssueCode.SELF_PARENTING,
            IssueCode.SELF_DEPENDENCY,
        ]

    def test_task_self_references(self):
        task_id = TaskId.new()
        task = Task(id=task_id, children=[task_id], dependencies=[task_id])
        issues = validate_schedulable(task, now=NOW)
        assert {i.field for i in issues} == {"children", "dependencies"}
        assert all(i.message.startswith("provided task") for i in issues)

    def test_ensure_valid_raises_with_every_issue(self):
        task = TaskBuilder().with_status(S.PLANNED).with_start_date(FUTURE_2).with_due_date(FUTURE).build()
        with pytest.raises(EntityValidationError) as exc_info:
            ensure_valid(task, now=NOW)
        error = exc_info.value
        assert error.entity_id == task.id
        assert len(error.issues) == 1
        assert "incorrect schedule" in error.messages[0]

    def test_ensure_valid_returns_entity(self):
        task = TaskBuilder().build()
        assert ensure_valid(task, now=NOW) is task

    def test_issue_to_dict(self):
        task = TaskBuilder().with_status(S.PLANNED).build()
        issue = validate_schedulable(task, now=NOW)[0]
        assert issue.to_dict() == {
            "code": "inconsistent_status",
            "field": "status",
            "message": issue.message,
        }


class TestScenarios:
    def test_new_project_without_dates_is_valid(self):
        project = ProjectBuilder().with_name("Launch").build()
        assert project.status is S.NOT_STARTED
        assert validate_schedulable(project) == []

    def test_planned_project_started_yesterday_is_inconsistent(self, yesterday):
        project = ProjectBuilder().with_status(S.PLANNED).with_start_date(yesterday).build()
        issues = validate_schedulable(project)
        assert [i.code for i in issues] == [IssueCode.INCONSISTENT_STATUS]
        with pytest.raises(EntityValidationError):
            ensure_valid(project)

    def test_project_cannot_adopt_itself(self):
        project = ProjectBuilder().build()
        project.add_child(project.id)
        assert len(project.children) == 0

    def test_task_start_after_due(self, tomorrow, day_after_tomorrow):
        task = TaskBuilder().build()
        assert task.is_valid_due_date(tomorrow)
        task.set_due_date(tomorrow)
        task.start_at(day_after_tomorrow)
        assert task.is_valid_start_date(day_after_tomorrow) is False
