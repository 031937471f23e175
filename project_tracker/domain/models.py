"""People, tags and the tagged child reference used by projects.

Projects and tasks live in their own modules (``project.py``, ``task.py``);
this module holds the simpler entity records they refer to.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Union

from .exceptions import ElementNotFoundError
from .ids import PersonId, ProjectId, TagId, TaskId, require_id

logger = logging.getLogger(__name__)


class Person:
    """Someone who can own projects and tasks."""

    def __init__(self, *, id: PersonId, first_name: str = "", last_name: str = ""):
        if not isinstance(id, PersonId):
            raise TypeError(f"Person id must be a PersonId, got {type(id).__name__}")
        self._id = id
        self._first_name = first_name
        self._last_name = last_name

    @property
    def id(self) -> PersonId:
        return self._id

    @property
    def first_name(self) -> str:
        return self._first_name

    @property
    def last_name(self) -> str:
        return self._last_name

    @property
    def full_name(self) -> str:
        return f"{self._first_name} {self._last_name}".strip()

    def rename(self, first_name: str, last_name: str) -> Person:
        self._first_name = first_name
        self._last_name = last_name
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Person):
            return NotImplemented
        return (self._id, self._first_name, self._last_name) == (
            other._id, other._first_name, other._last_name
        )

    __hash__ = None  # mutable

    def __str__(self) -> str:
        return self.full_name

    def __repr__(self) -> str:
        return f"[{self.full_name}]-[{self._id}]"


class Tag:
    """A label that can be attached to projects and tasks.

    Tags form a hierarchy through their parent list. Only direct
    self-parenting is rejected; longer cycles are not detected.
    """

    def __init__(
        self,
        *,
        id: TagId,
        name: str = "",
        description: Optional[str] = None,
        parents: Iterable[TagId] = (),
    ):
        if not isinstance(id, TagId):
            raise TypeError(f"Tag id must be a TagId, got {type(id).__name__}")
        self._id = id
        self._name = name
        self._description = description
        self._parents: List[TagId] = [require_id(TagId, p) for p in parents]

    @property
    def id(self) -> TagId:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description or ""

    @property
    def parents(self) -> List[TagId]:
        return list(self._parents)

    def has_description(self) -> bool:
        return self._description is not None

    def has_parents(self) -> bool:
        return bool(self._parents)

    def has_parent(self, parent_id: TagId) -> bool:
        return parent_id in self._parents

    def rename(self, name: str) -> Tag:
        self._name = name
        return self

    def set_description(self, description: str) -> Tag:
        self._description = description
        return self

    def clear_description(self) -> Tag:
        self._description = None
        return self

    def is_valid_parent(self, parent_id: TagId) -> bool:
        return parent_id != self._id

    def try_add_parent(self, parent_id: TagId) -> bool:
        """Add a parent tag. Returns False (and changes nothing) for a self reference."""
        parent_id = require_id(TagId, parent_id)
        if not self.is_valid_parent(parent_id):
            logger.warning(f"Tag {self._id} cannot be its own parent")
            return False
        self._parents.append(parent_id)
        return True

    def add_parent(self, parent_id: TagId) -> Tag:
        self.try_add_parent(parent_id)
        return self

    def remove_parent(self, parent_id: TagId) -> Tag:
        if parent_id not in self._parents:
            raise ElementNotFoundError(
                f"Tag {self._id} has no parent {parent_id}", self._id, parent_id
            )
        self._parents.remove(parent_id)
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return (self._id, self._name, self._description, self._parents) == (
            other._id, other._name, other._description, other._parents
        )

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Tag(id={self._id}, name={self._name!r}, parents={len(self._parents)})"


class ChildKind(str, Enum):
    PROJECT = "project"
    TASK = "task"


@dataclass(frozen=True)
class ProjectChild:
    """A child of a project: either another project or a task.

    Use ``ProjectChild.project(...)`` / ``ProjectChild.task(...)`` or
    ``ProjectChild.of(some_id)`` rather than building it field by field.
    """

    kind: ChildKind
    id: Union[ProjectId, TaskId]

    def __post_init__(self):
        expected = ProjectId if self.kind is ChildKind.PROJECT else TaskId
        if not isinstance(self.id, expected):
            raise TypeError(
                f"A {self.kind.value} child needs a {expected.__name__}, got {type(self.id).__name__}"
            )

    @classmethod
    def project(cls, project_id: ProjectId) -> ProjectChild:
        return cls(ChildKind.PROJECT, project_id)

    @classmethod
    def task(cls, task_id: TaskId) -> ProjectChild:
        return cls(ChildKind.TASK, task_id)

    @classmethod
    def of(cls, value: Union[ProjectChild, ProjectId, TaskId]) -> ProjectChild:
        """Wrap a bare project or task id; pass existing children through."""
        if isinstance(value, ProjectChild):
            return value
        if isinstance(value, ProjectId):
            return cls.project(value)
        if isinstance(value, TaskId):
            return cls.task(value)
        raise TypeError(f"Cannot use {type(value).__name__} as a project child")

    @property
    def is_project(self) -> bool:
        return self.kind is ChildKind.PROJECT

    @property
    def is_task(self) -> bool:
        return self.kind is ChildKind.TASK

    def __str__(self) -> str:
        return str(self.id)
