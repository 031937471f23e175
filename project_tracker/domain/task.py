"""The Task entity.

Same shape as a project, except that children and dependencies are
always other tasks.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from . import status as lifecycle
from .exceptions import ElementNotFoundError
from .ids import PersonId, TagId, TaskId, require_id
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


class Task:
    """Schedulable unit of work with sub-tasks and task dependencies."""

    def __init__(
        self,
        *,
        id: TaskId,
        name: str = "",
        owner_id: Optional[PersonId] = None,
        description: Optional[str] = None,
        tags: Iterable[TagId] = (),
        start_date: Optional[datetime] = None,
        due_date: Optional[datetime] = None,
        children: Iterable[TaskId] = (),
        dependencies: Iterable[TaskId] = (),
        status: SchedulableStatus = SchedulableStatus.NOT_STARTED,
    ):
        if not isinstance(id, TaskId):
            raise TypeError(f"Task id must be a TaskId, got {type(id).__name__}")
        self._id = id
        self._name = name
        self._owner_id = require_id(PersonId, owner_id) if owner_id is not None else None
        self._description = description
        self._tags: List[TagId] = [require_id(TagId, t) for t in tags]
        self._start_date = ensure_utc(start_date)
        self._due_date = ensure_utc(due_date)
        self._children: List[TaskId] = [require_id(TaskId, c) for c in children]
        self._dependencies: List[TaskId] = [require_id(TaskId, d) for d in dependencies]
        self._status = SchedulableStatus(status)

    # ==================== Getters ====================

    @property
    def id(self) -> TaskId:
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
    def children(self) -> List[TaskId]:
        return list(self._children)

    @property
    def dependencies(self) -> List[TaskId]:
        return list(self._dependencies)

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

    def has_child(self, child: TaskId) -> bool:
        return child in self._children

    def has_children(self) -> bool:
        return bool(self._children)

    def has_dependency(self, dependency: TaskId) -> bool:
        return dependency in self._dependencies

    def has_dependencies(self) -> bool:
        return bool(self._dependencies)

    # ==================== Identity ====================

    def rename(self, name: str) -> Task:
        self._name = name
        return self

    def transfer_ownership(self, owner_id: PersonId) -> Task:
        self._owner_id = require_id(PersonId, owner_id)
        return self

    def set_description(self, description: str) -> Task:
        self._description = description
        return self

    def clear_description(self) -> Task:
        self._description = None
        return self

    # ==================== Tags ====================

    def try_add_tag(self, tag_id: TagId) -> bool:
        tag_id = require_id(TagId, tag_id)
        if not self.is_valid_tag(tag_id):
            logger.debug(f"Task {self._id} already has tag {tag_id}")
            return False
        self._tags.append(tag_id)
        return True

    def add_tag(self, tag_id: TagId) -> Task:
        self.try_add_tag(tag_id)
        return self

    def add_tags(self, tag_ids: Iterable[TagId]) -> Task:
        for tag_id in tag_ids:
            self.add_tag(tag_id)
        return self

    def remove_tag(self, tag_id: TagId) -> Task:
        if tag_id not in self._tags:
            raise ElementNotFoundError(f"Task {self._id} has no tag {tag_id}", self._id, tag_id)
        self._tags.remove(tag_id)
        return self

    def remove_tags(self, tag_ids: Iterable[TagId]) -> Task:
        tag_ids = list(tag_ids)
        missing = [t for t in tag_ids if t not in self._tags]
        if missing:
            raise ElementNotFoundError(
                f"Task {self._id} has no tag(s) {', '.join(map(str, missing))}", self._id, missing
            )
        for tag_id in tag_ids:
            self._tags.remove(tag_id)
        return self

    def remove_all_tags(self) -> Task:
        self._tags.clear()
        return self

    # ==================== Schedule ====================

    def start_now(self) -> Task:
        return self.start_at(now_utc())

    def try_start_at(self, start_date: datetime) -> bool:
        start_date = ensure_utc(start_date)
        if not self.is_valid_start_date(start_date):
            logger.error(f"Provided start date ({start_date.isoformat()}) is invalid for task {self._id}")
            return False
        self._start_date = start_date
        return True

    def start_at(self, start_date: datetime) -> Task:
        self.try_start_at(start_date)
        return self

    def remove_start_date(self) -> Task:
        self._start_date = None
        return self

    def try_set_due_date(self, due_date: datetime) -> bool:
        due_date = ensure_utc(due_date)
        if not self.is_valid_due_date(due_date):
            logger.warning(f"Provided due date ({due_date.isoformat()}) is invalid for task {self._id}")
            return False
        self._due_date = due_date
        return True

    def set_due_date(self, due_date: datetime) -> Task:
        self.try_set_due_date(due_date)
        return self

    def remove_due_date(self) -> Task:
        self._due_date = None
        return self

    # ==================== Children ====================

    def try_add_child(self, child: TaskId) -> bool:
        child = require_id(TaskId, child)
        if not self.is_valid_child(child):
            logger.warning(f"Task {self._id} cannot be its own sub-task")
            return False
        self._children.append(child)
        return True

    def add_child(self, child: TaskId) -> Task:
        self.try_add_child(child)
        return self

    def add_children(self, children: Iterable[TaskId]) -> Task:
        for child in children:
            self.add_child(child)
        return self

    def remove_child(self, child: TaskId) -> Task:
        if child not in self._children:
            raise ElementNotFoundError(f"Task {self._id} has no child {child}", self._id, child)
        self._children.remove(child)
        return self

    def remove_children(self, children: Iterable[TaskId]) -> Task:
        children = list(children)
        missing = [c for c in children if c not in self._children]
        if missing:
            raise ElementNotFoundError(
                f"Task {self._id} has no child(ren) {', '.join(map(str, missing))}", self._id, missing
            )
        for child in children:
            self._children.remove(child)
        return self

    def remove_all_children(self) -> Task:
        self._children.clear()
        return self

    # ==================== Dependencies ====================

    def try_add_dependency(self, dependency: TaskId) -> bool:
        dependency = require_id(TaskId, dependency)
        if not self.is_valid_dependency(dependency):
            logger.warning(f"Task {self._id} cannot depend on itself")
            return False
        self._dependencies.append(dependency)
        return True

    def add_dependency(self, dependency: TaskId) -> Task:
        self.try_add_dependency(dependency)
        return self

    def add_dependencies(self, dependencies: Iterable[TaskId]) -> Task:
        for dependency in dependencies:
            self.add_dependency(dependency)
        return self

    def remove_dependency(self, dependency: TaskId) -> Task:
        if dependency not in self._dependencies:
            raise ElementNotFoundError(
                f"Task {self._id} has no dependency {dependency}", self._id, dependency
            )
        self._dependencies.remove(dependency)
        return self

    def remove_dependencies(self, dependencies: Iterable[TaskId]) -> Task:
        dependencies = list(dependencies)
        missing = [d for d in dependencies if d not in self._dependencies]
        if missing:
            raise ElementNotFoundError(
                f"Task {self._id} has no dependency {', '.join(map(str, missing))}", self._id, missing
            )
        for dependency in dependencies:
            self._dependencies.remove(dependency)
        return self

    def remove_all_dependencies(self) -> Task:
        self._dependencies.clear()
        return self

    # ==================== Status ====================

    def promote(self) -> Task:
        self._status = lifecycle.promoted(self._status)
        return self

    def demote(self) -> Task:
        self._status = lifecycle.demoted(self._status)
        return self

    def archive(self) -> Task:
        self._status = lifecycle.archived(self._status)
        return self

    def try_cancel(self) -> bool:
        if not lifecycle.can_cancel(self._status):
            logger.info(f"Task {self._id} is already {self._status.value} and cannot be canceled")
            return False
        self._status = lifecycle.canceled(self._status)
        return True

    def cancel(self) -> Task:
        self.try_cancel()
        return self

    # ==================== Validation ====================

    def is_valid_tag(self, tag_id: TagId) -> bool:
        return is_valid_tag(tag_id, self._tags)

    def is_valid_start_date(self, start_date: Optional[datetime]) -> bool:
        return is_valid_start_date(start_date, self._due_date)

    def is_valid_due_date(self, due_date: Optional[datetime]) -> bool:
        return is_valid_due_date(due_date, self._start_date)

    def is_valid_child(self, child: TaskId) -> bool:
        return not is_self_reference(child, self._id)

    def is_valid_dependency(self, dependency: TaskId) -> bool:
        return not is_self_reference(dependency, self._id)

    # ==================== Dunder ====================

    def _state(self) -> tuple:
        return (
            self._id, self._name, self._owner_id, self._description, self._tags,
            self._start_date, self._due_date, self._children, self._dependencies, self._status,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self._state() == other._state()

    __hash__ = None  # mutable

    def __str__(self) -> str:
        return describe(self, "Task")

    def __repr__(self) -> str:
        return f"Task(id={self._id}, name={self._name!r}, status={self._status.value})"
