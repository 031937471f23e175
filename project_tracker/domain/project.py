"""The Project entity.

A project groups child projects and tasks (``ProjectChild``), can depend
on other projects, and walks the shared status lifecycle. Every mutator
returns the project so calls can be chained. Guarded mutators
(``add_tag``, ``start_at``, ``set_due_date``, ``add_child``,
``add_dependency``) silently skip invalid input and log it; their
``try_*`` counterparts report whether the change was applied.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Union

from . import status as lifecycle
from .exceptions import ElementNotFoundError
from .ids import PersonId, ProjectId, TagId, TaskId, require_id
from .models import ProjectChild
from .schedulable import describe
from .status import SchedulableStatus
from .validation import (
    ensure_utc,
    is_self_reference,
    is_valid_due_date,
    is_valid_start_date,
    is_valid_tag,
    now_utc,
)

logger = logging.getLogger(__name__)

ChildLike = Union[ProjectChild, ProjectId, TaskId]


class Project:
    """Schedulable container of child projects and tasks."""

    def __init__(
        self,
        *,
        id: ProjectId,
        name: str = "",
        owner_id: Optional[PersonId] = None,
        description: Optional[str] = None,
        tags: Iterable[TagId] = (),
        start_date: Optional[datetime] = None,
        due_date: Optional[datetime] = None,
        children: Iterable[ChildLike] = (),
        dependencies: Iterable[ProjectId] = (),
        status: SchedulableStatus = SchedulableStatus.NOT_STARTED,
    ):
        if not isinstance(id, ProjectId):
            raise TypeError(f"Project id must be a ProjectId, got {type(id).__name__}")
        self._id = id
        self._name = name
        self._owner_id = require_id(PersonId, owner_id) if owner_id is not None else None
        self._description = description
        self._tags: List[TagId] = [require_id(TagId, t) for t in tags]
        self._start_date = ensure_utc(start_date)
        self._due_date = ensure_utc(due_date)
        self._children: List[ProjectChild] = [ProjectChild.of(c) for c in children]
        self._dependencies: List[ProjectId] = [require_id(ProjectId, d) for d in dependencies]
        self._status = SchedulableStatus(status)

    # ==================== Getters ====================

    @property
    def id(self) -> ProjectId:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def owner_id(self) -> Optional[PersonId]:
        return self._owner_id

    @property
    def description(self) -> str:
        return self._description or ""

    @property
    def tags(self) -> List[TagId]:
        return list(self._tags)

    @property
    def start_date(self) -> Optional[datetime]:
        return self._start_date

    @property
    def due_date(self) -> Optional[datetime]:
        return self._due_date

    @property
    def status(self) -> SchedulableStatus:
        return self._status

    @property
    def children(self) -> List[ProjectChild]:
        return list(self._children)

    @property
    def dependencies(self) -> List[ProjectId]:
        return list(self._dependencies)

    def project_children(self) -> List[ProjectId]:
        """Ids of the children that are projects."""
        return [c.id for c in self._children if c.is_project]

    def task_children(self) -> List[TaskId]:
        """Ids of the children that are tasks."""
        return [c.id for c in self._children if c.is_task]

    def has_owner(self) -> bool:
        return self._owner_id is not None

    def has_description(self) -> bool:
        return self._description is not None

    def has_tags(self) -> bool:
        return bool(self._tags)

    def has_start_date(self) -> bool:
        return self._start_date is not None

    def has_due_date(self) -> bool:
        return self._due_date is not None

    def has_child(self, child: ChildLike) -> bool:
        return ProjectChild.of(child) in self._children

    def has_children(self) -> bool:
        return bool(self._children)

    def has_dependency(self, dependency: ProjectId) -> bool:
        return dependency in self._dependencies

    def has_dependencies(self) -> bool:
        return bool(self._dependencies)

    # ==================== Identity ====================

    def rename(self, name: str) -> Project:
        self._name = name
        return self

    def transfer_ownership(self, owner_id: PersonId) -> Project:
        self._owner_id = require_id(PersonId, owner_id)
        return self

    def set_description(self, description: str) -> Project:
        self._description = description
        return self

    def clear_description(self) -> Project:
        self._description = None
        return self

    # ==================== Tags ====================

    def try_add_tag(self, tag_id: TagId) -> bool:
        tag_id = require_id(TagId, tag_id)
        if not self.is_valid_tag(tag_id):
            logger.debug(f"Project {self._id} already has tag {tag_id}")
            return False
        self._tags.append(tag_id)
        return True

    def add_tag(self, tag_id: TagId) -> Project:
        self.try_add_tag(tag_id)
        return self

    def add_tags(self, tag_ids: Iterable[TagId]) -> Project:
        for tag_id in tag_ids:
            self.add_tag(tag_id)
        return self

    def remove_tag(self, tag_id: TagId) -> Project:
        if tag_id not in self._tags:
            raise ElementNotFoundError(f"Project {self._id} has no tag {tag_id}", self._id, tag_id)
        self._tags.remove(tag_id)
        return self

    def remove_tags(self, tag_ids: Iterable[TagId]) -> Project:
        tag_ids = list(tag_ids)
        missing = [t for t in tag_ids if t not in self._tags]
        if missing:
            raise ElementNotFoundError(
                f"Project {self._id} has no tag(s) {', '.join(map(str, missing))}", self._id, missing
            )
        for tag_id in tag_ids:
            self._tags.remove(tag_id)
        return self

    def remove_all_tags(self) -> Project:
        self._tags.clear()
        return self

    # ==================== Schedule ====================

    def start_now(self) -> Project:
        return self.start_at(now_utc())

    def try_start_at(self, start_date: datetime) -> bool:
        start_date = ensure_utc(start_date)
        if not self.is_valid_start_date(start_date):
            logger.error(f"Provided start date ({start_date.isoformat()}) is invalid for project {self._id}")
            return False
        self._start_date = start_date
        return True

    def start_at(self, start_date: datetime) -> Project:
        self.try_start_at(start_date)
        return self

    def remove_start_date(self) -> Project:
        self._start_date = None
        return self

    def try_set_due_date(self, due_date: datetime) -> bool:
        due_date = ensure_utc(due_date)
        if not self.is_valid_due_date(due_date):
            logger.warning(f"Provided due date ({due_date.isoformat()}) is invalid for project {self._id}")
            return False
        self._due_date = due_date
        return True

    def set_due_date(self, due_date: datetime) -> Project:
        self.try_set_due_date(due_date)
        return self

    def remove_due_date(self) -> Project:
        self._due_date = None
        return self

    # ==================== Children ====================

    def try_add_child(self, child: ChildLike) -> bool:
        child = ProjectChild.of(child)
        if not self.is_valid_child(child):
            logger.warning(f"Project {self._id} cannot be its own child")
            return False
        self._children.append(child)
        return True

    def add_child(self, child: ChildLike) -> Project:
        self.try_add_child(child)
        return self

    def add_children(self, children: Iterable[ChildLike]) -> Project:
        for child in children:
            self.add_child(child)
        return self

    def remove_child(self, child: ChildLike) -> Project:
        child = ProjectChild.of(child)
        if child not in self._children:
            raise ElementNotFoundError(f"Project {self._id} has no child {child}", self._id, child)
        self._children.remove(child)
        return self

    def remove_children(self, children: Iterable[ChildLike]) -> Project:
        children = [ProjectChild.of(c) for c in children]
        missing = [c for c in children if c not in self._children]
        if missing:
            raise ElementNotFoundError(
                f"Project {self._id} has no child(ren) {', '.join(map(str, missing))}", self._id, missing
            )
        for child in children:
            self._children.remove(child)
        return self

    def remove_all_children(self) -> Project:
        self._children.clear()
        return self

    # ==================== Dependencies ====================

    def try_add_dependency(self, dependency: ProjectId) -> bool:
        dependency = require_id(ProjectId, dependency)
        if not self.is_valid_dependency(dependency):
            logger.warning(f"Project {self._id} cannot depend on itself")
            return False
        self._dependencies.append(dependency)
        return True

    def add_dependency(self, dependency: ProjectId) -> Project:
        self.try_add_dependency(dependency)
        return self

    def add_dependencies(self, dependencies: Iterable[ProjectId]) -> Project:
        for dependency in dependencies:
            self.add_dependency(dependency)
        return self

    def remove_dependency(self, dependency: ProjectId) -> Project:
        if dependency not in self._dependencies:
            raise ElementNotFoundError(
                f"Project {self._id} has no dependency {dependency}", self._id, dependency
            )
        self._dependencies.remove(dependency)
        return self

    def remove_dependencies(self, dependencies: Iterable[ProjectId]) -> Project:
        dependencies = list(dependencies)
        missing = [d for d in dependencies if d not in self._dependencies]
        if missing:
            raise ElementNotFoundError(
                f"Project {self._id} has no dependency {', '.join(map(str, missing))}", self._id, missing
            )
        for dependency in dependencies:
            self._dependencies.remove(dependency)
        return self

    def remove_all_dependencies(self) -> Project:
        self._dependencies.clear()
        return self

    # ==================== Status ====================

    def promote(self) -> Project:
        self._status = lifecycle.promoted(self._status)
        return self

    def demote(self) -> Project:
        self._status = lifecycle.demoted(self._status)
        return self

    def archive(self) -> Project:
        self._status = lifecycle.archived(self._status)
        return self

    def try_cancel(self) -> bool:
        if not lifecycle.can_cancel(self._status):
            logger.info(f"Project {self._id} is already {self._status.value} and cannot be canceled")
            return False
        self._status = lifecycle.canceled(self._status)
        return True

    def cancel(self) -> Project:
        self.try_cancel()
        return self

    # ==================== Validation ====================

    def is_valid_tag(self, tag_id: TagId) -> bool:
        return is_valid_tag(tag_id, self._tags)

    def is_valid_start_date(self, start_date: Optional[datetime]) -> bool:
        return is_valid_start_date(start_date, self._due_date)

    def is_valid_due_date(self, due_date: Optional[datetime]) -> bool:
        return is_valid_due_date(due_date, self._start_date)

    def is_valid_child(self, child: ChildLike) -> bool:
        """Only a project child pointing at this very project is rejected."""
        child = ProjectChild.of(child)
        return not (child.is_project and is_self_reference(child.id, self._id))

    def is_valid_dependency(self, dependency: ProjectId) -> bool:
        return not is_self_reference(dependency, self._id)

    # ==================== Dunder ====================

    def _state(self) -> tuple:
        return (
            self._id, self._name, self._owner_id, self._description, self._tags,
            self._start_date, self._due_date, self._children, self._dependencies, self._status,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Project):
            return NotImplemented
        return self._state() == other._state()

    __hash__ = None  # mutable

    def __str__(self) -> str:
        return describe(self, "Project")

    def __repr__(self) -> str:
        return f"Project(id={self._id}, name={self._name!r}, status={self._status.value})"
