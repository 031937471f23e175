"""Builders for every entity kind.

A builder starts with a freshly generated identifier and empty defaults.
``with_*`` setters store values without validating them and return the
builder, so a whole entity can be described in one chained expression:

    project = (
        ProjectBuilder()
        .with_name("Launch")
        .with_owner_id(owner.id)
        .with_due_date(due)
        .build()
    )

Reconstructing a stored entity goes through ``with_id``. Each builder is
consumed by ``build()``; building a second time raises ``RuntimeError``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, List, Optional, Type

from .ids import Identifier, PersonId, ProjectId, TagId, TaskId
from .models import Person, ProjectChild, Tag
from .project import ChildLike, Project
from .status import SchedulableStatus
from .task import Task


class _Builder:
    """Shared id handling and the build-once guard."""

    id_type: Type[Identifier]

    def __init__(self):
        self._id = self.id_type.new()
        self._built = False

    def with_id(self, entity_id: Identifier):
        if not isinstance(entity_id, self.id_type):
            raise TypeError(
                f"{type(self).__name__} needs a {self.id_type.__name__}, "
                f"got {type(entity_id).__name__}"
            )
        self._id = entity_id
        return self

    def build(self) -> Any:
        if self._built:
            raise RuntimeError(f"{type(self).__name__} has already been built")
        self._built = True
        return self._build()

    def _build(self) -> Any:
        raise NotImplementedError


class PersonBuilder(_Builder):
    id_type = PersonId

    def __init__(self):
        super().__init__()
        self._first_name = ""
        self._last_name = ""

    def with_first_name(self, first_name: str) -> PersonBuilder:
        self._first_name = first_name
        return self

    def with_last_name(self, last_name: str) -> PersonBuilder:
        self._last_name = last_name
        return self

    def _build(self) -> Person:
        return Person(id=self._id, first_name=self._first_name, last_name=self._last_name)


class TagBuilder(_Builder):
    id_type = TagId

    def __init__(self):
        super().__init__()
        self._name = ""
        self._description: Optional[str] = None
        self._parents: List[TagId] = []

    def with_name(self, name: str) -> TagBuilder:
        self._name = name
        return self

    def with_description(self, description: Optional[str]) -> TagBuilder:
        self._description = description
        return self

    def with_parents(self, parents: Iterable[TagId]) -> TagBuilder:
        self._parents = list(parents)
        return self

    def _build(self) -> Tag:
        return Tag(
            id=self._id,
            name=self._name,
            description=self._description,
            parents=self._parents,
        )


class _SchedulableBuilder(_Builder):
    """Fields common to projects and tasks."""

    def __init__(self):
        super().__init__()
        self._name = ""
        self._owner_id: Optional[PersonId] = None
        self._description: Optional[str] = None
        self._tags: List[TagId] = []
        self._start_date: Optional[datetime] = None
        self._due_date: Optional[datetime] = None
        self._children: List[Any] = []
        self._dependencies: List[Any] = []
        self._status = SchedulableStatus.NOT_STARTED

    def with_name(self, name: str):
        self._name = name
        return self

    def with_owner_id(self, owner_id: Optional[PersonId]):
        self._owner_id = owner_id
        return self

    def with_description(self, description: Optional[str]):
        self._description = description
        return self

    def with_tags(self, tags: Iterable[TagId]):
        """Append tags to the ones already collected."""
        self._tags.extend(tags)
        return self

    def with_start_date(self, start_date: Optional[datetime]):
        self._start_date = start_date
        return self

    def with_due_date(self, due_date: Optional[datetime]):
        self._due_date = due_date
        return self

    def with_children(self, children: Iterable[Any]):
        """Replace the collected children."""
        self._children = list(children)
        return self

    def with_dependencies(self, dependencies: Iterable[Any]):
        """Replace the collected dependencies."""
        self._dependencies = list(dependencies)
        return self

    def with_status(self, status: SchedulableStatus):
        self._status = SchedulableStatus(status)
        return self

    def _fields(self) -> dict:
        return dict(
            id=self._id,
            name=self._name,
            owner_id=self._owner_id,
            description=self._description,
            tags=self._tags,
            start_date=self._start_date,
            due_date=self._due_date,
            children=self._children,
            dependencies=self._dependencies,
            status=self._status,
        )


class ProjectBuilder(_SchedulableBuilder):
    """Builds a ``Project``. Children may be ``ProjectChild`` values or bare ids."""

    id_type = ProjectId

    def with_children(self, children: Iterable[ChildLike]) -> ProjectBuilder:
        self._children = [ProjectChild.of(c) for c in children]
        return self

    def _build(self) -> Project:
        return Project(**self._fields())


class TaskBuilder(_SchedulableBuilder):
    id_type = TaskId

    def _build(self) -> Task:
        return Task(**self._fields())
