import pytest

from project_tracker.domain.builders import TaskBuilder
from project_tracker.domain.exceptions import ElementNotFoundError
from project_tracker.domain.ids import ProjectId, TagId, TaskId
from project_tracker.domain.schedulable import Schedulable
from project_tracker.domain.task import Task


@pytest.fixture
def task():
    return TaskBuilder().with_name("Write docs").build()


class TestTask:
    def test_is_schedulable(self, task):
        assert isinstance(task, Schedulable)

    def test_requires_task_id(self):
        with pytest.raises(TypeError):
            Task(id=ProjectId.new())

    def test_children_must_be_task_ids(self, task):
        with pytest.raises(TypeError):
            task.add_child(ProjectId.new())
        with pytest.raises(TypeError):
            task.add_dependency(ProjectId.new())

    def test_subtasks(self, task):
        subtasks = [TaskId.new(), TaskId.new()]
        task.add_children(subtasks)
        assert task.children == subtasks
        assert task.has_child(subtasks[0])

    def test_self_child_is_rejected(self, task, caplog):
        with caplog.at_level("WARNING"):
            task.add_child(task.id)
        assert task.children == []
        assert "own sub-task" in caplog.text
        assert task.is_valid_child(task.id) is False

    def test_self_dependency_is_rejected(self, task):
        assert task.try_add_dependency(task.id) is False
        assert not task.has_dependencies()

    def test_remove_children_is_atomic(self, task):
        kept = TaskId.new()
        task.add_child(kept)
        with pytest.raises(ElementNotFoundError):
            task.remove_children([kept, TaskId.new()])
        assert task.children == [kept]

    def test_remove_missing_dependency_raises(self, task):
        with pytest.raises(ElementNotFoundError):
            task.remove_dependency(TaskId.new())

    def test_remove_dependencies(self, task):
        deps = [TaskId.new(), TaskId.new()]
        task.add_dependencies(deps).remove_dependencies(deps)
        assert task.dependencies == []

    def test_tags(self, task):
        tag = TagId.new()
        task.add_tag(tag).add_tag(tag)
        assert task.tags == [tag]
        with pytest.raises(ElementNotFoundError):
            task.remove_tags([TagId.new()])
        assert task.remove_all_tags().tags == []

    def test_tag_and_owner_kinds_are_checked(self, task):
        with pytest.raises(TypeError):
            task.add_tag(ProjectId.new())
        with pytest.raises(TypeError):
            task.transfer_ownership(TaskId.new())
        with pytest.raises(TypeError):
            Task(id=TaskId.new(), children=[ProjectId.new()])
        assert task.tags == []
        assert not task.has_owner()

    def test_due_date_scenario(self, task, tomorrow, day_after_tomorrow):
        # due tomorrow with no start, then a start after the due date
        assert task.is_valid_due_date(tomorrow) is True
        task.set_due_date(tomorrow)
        assert task.due_date == tomorrow
        task.start_at(day_after_tomorrow)
        assert task.start_date is None
        assert task.is_valid_start_date(day_after_tomorrow) is False

    def test_str_uses_task_label(self, task):
        assert f"- Task Id: {task.id}" in str(task)
        assert repr(task).startswith("Task(id=task-")
