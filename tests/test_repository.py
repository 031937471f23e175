import asyncio

import pytest

from project_tracker.domain.builders import PersonBuilder, ProjectBuilder, TaskBuilder
from project_tracker.domain.ids import ProjectId, TaskId
from project_tracker.storage.exceptions import RecordError
from project_tracker.storage.records import project_to_record, record_to_project
from project_tracker.storage.repository import InMemoryRepository, Repository, RepositoryRegistry
from project_tracker.utils.errors import DuplicateEntityError, NotFoundError


@pytest.fixture
def registry():
    return RepositoryRegistry()


@pytest.mark.asyncio
class TestInMemoryRepository:
    async def test_create_and_get(self, registry):
        project = ProjectBuilder().with_name("Launch").build()
        await registry.projects.create(project)
        fetched = await registry.projects.get_by_id(project.id)
        assert fetched == project
        assert fetched is not project

    async def test_get_missing_returns_none(self, registry):
        assert await registry.projects.get_by_id(ProjectId.new()) is None

    async def test_duplicate_create(self, registry):
        task = TaskBuilder().build()
        await registry.tasks.create(task)
        with pytest.raises(DuplicateEntityError) as exc_info:
            await registry.tasks.create(task)
        assert exc_info.value.status_code == 409
        assert exc_info.value.details["kind"] == "task"

    async def test_fetched_copies_are_independent(self, registry):
        task = TaskBuilder().with_name("original").build()
        await registry.tasks.create(task)
        fetched = await registry.tasks.get_by_id(task.id)
        fetched.rename("changed")
        assert (await registry.tasks.get_by_id(task.id)).name == "original"

    async def test_update(self, registry):
        task = TaskBuilder().build()
        await registry.tasks.create(task)
        task.promote()
        await registry.tasks.update(task)
        assert (await registry.tasks.get_by_id(task.id)).status is task.status

    async def test_update_missing(self, registry):
        with pytest.raises(NotFoundError):
            await registry.tasks.update(TaskBuilder().build())

    async def test_delete(self, registry):
        task = TaskBuilder().build()
        await registry.tasks.create(task)
        await registry.tasks.delete(task.id)
        assert await registry.tasks.count() == 0
        with pytest.raises(NotFoundError):
            await registry.tasks.delete(task.id)

    async def test_list_is_ordered_by_id(self, registry):
        ids = sorted(TaskId.new() for _ in range(5))
        for task_id in reversed(ids):
            await registry.tasks.create(TaskBuilder().with_id(task_id).build())
        assert [t.id for t in await registry.tasks.list_all()] == ids

    async def test_concurrent_creates(self, registry):
        people = [PersonBuilder().with_first_name(str(i)).build() for i in range(20)]
        await asyncio.gather(*(registry.people.create(p) for p in people))
        assert await registry.people.count() == 20


@pytest.fixture
def lossy_projects():
    """A project repository whose encoder writes a status the decoder rejects."""
    return InMemoryRepository(
        "project",
        lambda p: {**project_to_record(p), "status": "Paused"},
        record_to_project,
    )


@pytest.mark.asyncio
class TestUndecodableRecords:
    async def test_create_stores_nothing(self, lossy_projects):
        with pytest.raises(RecordError):
            await lossy_projects.create(ProjectBuilder().with_name("Launch").build())
        assert await lossy_projects.count() == 0
        assert await lossy_projects.list_all() == []

    async def test_update_keeps_previous_record(self, lossy_projects):
        project = ProjectBuilder().with_name("Launch").build()
        lossy_projects._records[project.id] = project_to_record(project)
        project.rename("Renamed")
        with pytest.raises(RecordError):
            await lossy_projects.update(project)
        assert (await lossy_projects.get_by_id(project.id)).name == "Launch"


class TestRegistry:
    def test_for_kind(self, registry):
        assert registry.for_kind("project") is registry.projects
        assert registry.for_kind("person") is registry.people

    def test_unknown_kind(self, registry):
        with pytest.raises(ValueError):
            registry.for_kind("epic")

    def test_repositories_satisfy_protocol(self, registry):
        assert isinstance(registry.tags, InMemoryRepository)
        assert isinstance(registry.tags, Repository)
