"""
Unit tests for the Project entity.

Tests cover:
- Getters, predicates and copy semantics
- Tag, schedule, child and dependency mutators
- Silent rejections and their try_* counterparts
- Fail-fast and atomic removals
"""

from datetime import datetime, timedelta, timezone

import pytest

from project_tracker.domain.builders import ProjectBuilder
from project_tracker.domain.exceptions import ElementNotFoundError
from project_tracker.domain.ids import PersonId, ProjectId, TagId, TaskId
from project_tracker.domain.models import ChildKind, ProjectChild
from project_tracker.domain.project import Project
from project_tracker.domain.schedulable import Schedulable
from project_tracker.domain.status import SchedulableStatus


@pytest.fixture
def project():
    return ProjectBuilder().with_name("Launch").build()


class TestProjectBasics:
    def test_defaults(self, project):
        assert project.name == "Launch"
        assert project.description == ""
        assert not project.has_description()
        assert not project.has_owner()
        assert not project.has_tags()
        assert not project.has_start_date()
        assert not project.has_due_date()
        assert not project.has_children()
        assert not project.has_dependencies()
        assert project.status is SchedulableStatus.NOT_STARTED

    def test_is_schedulable(self, project):
        assert isinstance(project, Schedulable)

    def test_requires_project_id(self):
        with pytest.raises(TypeError):
            Project(id=TaskId.new(), name="wrong")

    def test_getters_return_copies(self, project):
        project.add_tag(TagId.new())
        project.tags.clear()
        project.children.append(ProjectChild.task(TaskId.new()))
        project.dependencies.append(ProjectId.new())
        assert len(project.tags) == 1
        assert project.children == []
        assert project.dependencies == []

    def test_identity_mutators_chain(self, project):
        owner = PersonId.new()
        result = project.rename("Relaunch").transfer_ownership(owner).set_description("Second try")
        assert result is project
        assert project.name == "Relaunch"
        assert project.owner_id == owner
        assert project.description == "Second try"
        project.clear_description()
        assert not project.has_description()

    def test_naive_dates_are_utc(self):
        project = ProjectBuilder().with_start_date(datetime(2030, 1, 1, 9, 0)).build()
        assert project.start_date.tzinfo is timezone.utc

    def test_equality(self, project):
        twin = Project(id=project.id, name="Launch")
        assert twin == project
        twin.rename("Other")
        assert twin != project

    def test_str_summary(self):
        project = (
            ProjectBuilder()
            .with_name("Launch")
            .with_description("Rocket")
            .with_start_date(datetime(2030, 3, 4, tzinfo=timezone.utc))
            .build()
        )
        text = str(project)
        assert text.startswith("[[Launch]]")
        assert f"- Project Id: {project.id}" in text
        assert "- Project Description: Rocket" in text
        assert "- Project starts on: 4-3-2030 [Week 10]" in text
        assert "- Project status: NotStarted" in text
        assert "- Project has 0 children" in text


class TestProjectTags:
    def test_duplicate_tag_is_ignored(self, project):
        tag = TagId.new()
        assert project.try_add_tag(tag) is True
        assert project.try_add_tag(tag) is False
        project.add_tag(tag)
        assert project.tags == [tag]

    def test_add_tags_keeps_order(self, project):
        tags = [TagId.new() for _ in range(3)]
        project.add_tags(tags)
        assert project.tags == tags

    def test_remove_tag(self, project):
        tag = TagId.new()
        project.add_tag(tag).remove_tag(tag)
        assert not project.has_tags()

    def test_remove_missing_tag_raises(self, project):
        with pytest.raises(ElementNotFoundError):
            project.remove_tag(TagId.new())

    def test_remove_tags_is_atomic(self, project):
        kept = TagId.new()
        project.add_tag(kept)
        with pytest.raises(ElementNotFoundError):
            project.remove_tags([kept, TagId.new()])
        assert project.tags == [kept]

    def test_remove_all_tags(self, project):
        project.add_tags([TagId.new(), TagId.new()]).remove_all_tags()
        assert project.tags == []


class TestProjectSchedule:
    def test_start_now(self, project, now):
        project.start_now()
        assert abs(project.start_date - now) < timedelta(seconds=5)

    def test_start_after_due_is_rejected(self, project, tomorrow, day_after_tomorrow, caplog):
        project.set_due_date(tomorrow)
        with caplog.at_level("ERROR"):
            project.start_at(day_after_tomorrow)
        assert project.start_date is None
        assert "invalid" in caplog.text
        assert project.try_start_at(day_after_tomorrow) is False

    def test_due_before_start_is_rejected(self, project, tomorrow, day_after_tomorrow):
        project.start_at(day_after_tomorrow)
        assert project.try_set_due_date(tomorrow) is False
        assert project.due_date is None

    def test_past_due_without_start_is_rejected(self, project, yesterday):
        project.set_due_date(yesterday)
        assert not project.has_due_date()

    def test_past_due_after_past_start_is_accepted(self, project, yesterday, now):
        project.start_at(yesterday - timedelta(days=1))
        assert project.try_set_due_date(yesterday) is True

    def test_remove_dates(self, project, tomorrow):
        project.start_now().set_due_date(tomorrow)
        project.remove_start_date().remove_due_date()
        assert not project.has_start_date()
        assert not project.has_due_date()

    def test_schedule_ordering_property(self, project, tomorrow, day_after_tomorrow):
        # due < start: each date is invalid once the other is set
        start, due = day_after_tomorrow, tomorrow
        project.start_at(start)
        assert project.is_valid_due_date(due) is False
        other = ProjectBuilder().build().set_due_date(due)
        assert other.is_valid_start_date(start) is False


class TestProjectChildren:
    def test_mixed_children(self, project):
        sub_project, task = ProjectId.new(), TaskId.new()
        project.add_children([sub_project, ProjectChild.task(task)])
        assert project.children == [ProjectChild.project(sub_project), ProjectChild.task(task)]
        assert project.project_children() == [sub_project]
        assert project.task_children() == [task]
        assert project.has_child(task)

    def test_self_child_is_rejected(self, project):
        project.add_child(project.id)
        assert project.try_add_child(ProjectChild.project(project.id)) is False
        assert len(project.children) == 0

    def test_task_with_same_token_is_not_self(self, project):
        assert project.is_valid_child(ProjectChild(ChildKind.TASK, TaskId(project.id._ulid)))

    def test_child_kind_is_checked(self):
        with pytest.raises(TypeError):
            ProjectChild(ChildKind.PROJECT, TaskId.new())
        with pytest.raises(TypeError):
            ProjectChild.of(TagId.new())

    def test_duplicate_children_are_kept(self, project):
        task = TaskId.new()
        project.add_child(task).add_child(task)
        assert len(project.children) == 2

    def test_remove_child(self, project):
        task = TaskId.new()
        project.add_child(task).remove_child(task)
        assert not project.has_children()

    def test_remove_missing_child_raises(self, project):
        with pytest.raises(ElementNotFoundError) as exc_info:
            project.remove_child(TaskId.new())
        assert exc_info.value.entity_id == project.id

    def test_remove_children_is_atomic(self, project):
        task = TaskId.new()
        project.add_child(task)
        with pytest.raises(ElementNotFoundError):
            project.remove_children([task, ProjectId.new()])
        assert project.has_child(task)

    def test_remove_all_children(self, project):
        project.add_children([TaskId.new(), ProjectId.new()]).remove_all_children()
        assert project.children == []


class TestProjectDependencies:
    def test_add_dependency(self, project):
        dep = ProjectId.new()
        project.add_dependency(dep)
        assert project.has_dependency(dep)

    def test_self_dependency_is_rejected(self, project):
        project.add_dependency(project.id)
        assert project.try_add_dependency(project.id) is False
        assert project.dependencies == []

    def test_remove_dependency(self, project):
        deps = [ProjectId.new(), ProjectId.new()]
        project.add_dependencies(deps).remove_dependency(deps[0])
        assert project.dependencies == [deps[1]]

    def test_remove_missing_dependency_raises(self, project):
        with pytest.raises(ElementNotFoundError):
            project.remove_dependency(ProjectId.new())

    def test_remove_dependencies_is_atomic(self, project):
        dep = ProjectId.new()
        project.add_dependency(dep)
        with pytest.raises(ElementNotFoundError):
            project.remove_dependencies([dep, ProjectId.new()])
        assert project.dependencies == [dep]

    def test_remove_all_dependencies(self, project):
        project.add_dependencies([ProjectId.new()]).remove_all_dependencies()
        assert not project.has_dependencies()

    def test_dependency_kind_is_checked(self, project):
        with pytest.raises(TypeError):
            project.add_dependency(TaskId.new())
        with pytest.raises(TypeError):
            project.try_add_dependency(TaskId.new())
        with pytest.raises(TypeError):
            Project(id=ProjectId.new(), dependencies=[TaskId.new()])
        assert project.dependencies == []


class TestProjectIdKinds:
    def test_tag_kind_is_checked(self, project):
        with pytest.raises(TypeError):
            project.add_tag(ProjectId.new())
        with pytest.raises(TypeError):
            Project(id=ProjectId.new(), tags=[PersonId.new()])
        assert project.tags == []

    def test_owner_kind_is_checked(self, project):
        with pytest.raises(TypeError):
            project.transfer_ownership(TagId.new())
        with pytest.raises(TypeError):
            Project(id=ProjectId.new(), owner_id=TaskId.new())
        assert not project.has_owner()
