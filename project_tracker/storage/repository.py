"""In-memory repositories for every entity kind.

Entities are stored as records, not live objects, so every read hands the
caller an independent copy and mutating a fetched entity changes nothing
until it is passed back to ``update``.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Generic, List, Optional, Protocol, TypeVar, runtime_checkable

from project_tracker.domain.ids import Identifier
from project_tracker.domain.models import Person, Tag
from project_tracker.domain.project import Project
from project_tracker.domain.task import Task
from project_tracker.utils.errors import DuplicateEntityError, NotFoundError
from .records import (
    Record,
    person_to_record,
    project_to_record,
    record_to_person,
    record_to_project,
    record_to_tag,
    record_to_task,
    tag_to_record,
    task_to_record,
)

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")


@runtime_checkable
class Repository(Protocol[EntityT]):
    """CRUD surface every repository offers."""

    async def create(self, entity: EntityT) -> EntityT: ...
    async def get_by_id(self, entity_id: Identifier) -> Optional[EntityT]: ...
    async def list_all(self) -> List[EntityT]: ...
    async def update(self, entity: EntityT) -> EntityT: ...
    async def delete(self, entity_id: Identifier) -> None: ...


class InMemoryRepository(Generic[EntityT]):
    """Dict-backed repository keyed by identifier, guarded by an asyncio lock."""

    def __init__(
        self,
        kind: str,
        to_record: Callable[[EntityT], Record],
        from_record: Callable[[Record], EntityT],
    ):
        self.kind = kind
        self._to_record = to_record
        self._from_record = from_record
        self._records: Dict[Identifier, Record] = {}
        self._lock = asyncio.Lock()

    async def create(self, entity: EntityT) -> EntityT:
        entity_id = entity.id
        async with self._lock:
            if entity_id in self._records:
                raise DuplicateEntityError(entity_id, kind=self.kind)
            record = self._to_record(entity)
            stored = self._from_record(record)
            self._records[entity_id] = record
        logger.info(f"Created {self.kind} {entity_id}")
        return stored

    async def get_by_id(self, entity_id: Identifier) -> Optional[EntityT]:
        async with self._lock:
            record = self._records.get(entity_id)
        return self._from_record(record) if record is not None else None

    async def list_all(self) -> List[EntityT]:
        """All stored entities, oldest identifier first."""
        async with self._lock:
            records = [self._records[key] for key in sorted(self._records)]
        return [self._from_record(r) for r in records]

    async def update(self, entity: EntityT) -> EntityT:
        entity_id = entity.id
        async with self._lock:
            if entity_id not in self._records:
                raise NotFoundError(entity_id, kind=self.kind)
            record = self._to_record(entity)
            stored = self._from_record(record)
            self._records[entity_id] = record
        logger.debug(f"Updated {self.kind} {entity_id}")
        return stored

    async def delete(self, entity_id: Identifier) -> None:
        async with self._lock:
            if entity_id not in self._records:
                raise NotFoundError(entity_id, kind=self.kind)
            del self._records[entity_id]
        logger.info(f"Deleted {self.kind} {entity_id}")

    async def count(self) -> int:
        async with self._lock:
            return len(self._records)


class RepositoryRegistry:
    """One repository per entity kind."""

    def __init__(
        self,
        people: Optional[Repository[Person]] = None,
        tags: Optional[Repository[Tag]] = None,
        projects: Optional[Repository[Project]] = None,
        tasks: Optional[Repository[Task]] = None,
    ):
        self.people = people or InMemoryRepository("person", person_to_record, record_to_person)
        self.tags = tags or InMemoryRepository("tag", tag_to_record, record_to_tag)
        self.projects = projects or InMemoryRepository("project", project_to_record, record_to_project)
        self.tasks = tasks or InMemoryRepository("task", task_to_record, record_to_task)

    def for_kind(self, kind: str) -> Any:
        try:
            return {
                "person": self.people,
                "tag": self.tags,
                "project": self.projects,
                "task": self.tasks,
            }[kind]
        except KeyError:
            raise ValueError(f"Unknown entity kind '{kind}'") from None
