"""The Schedulable capability shared by projects and tasks.

``Project`` and ``Task`` are independent classes; neither inherits from the
other or from a common base. Both satisfy the ``Schedulable`` protocol,
which is generic over the child element type (``ProjectChild`` for
projects, ``TaskId`` for tasks) and the dependency type.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Protocol, TypeVar, runtime_checkable

from .ids import Identifier, PersonId, TagId
from .status import SchedulableStatus

ChildT = TypeVar("ChildT")
DepT = TypeVar("DepT")


@runtime_checkable
class Schedulable(Protocol[ChildT, DepT]):
    """Uniform get/set/validate surface over a schedulable entity."""

    # Core getters
    @property
    def id(self) -> Identifier: ...
    @property
    def name(self) -> str: ...
    @property
    def owner_id(self) -> Optional[PersonId]: ...
    @property
    def description(self) -> str: ...
    @property
    def tags(self) -> List[TagId]: ...
    @property
    def start_date(self) -> Optional[datetime]: ...
    @property
    def due_date(self) -> Optional[datetime]: ...
    @property
    def status(self) -> SchedulableStatus: ...
    @property
    def children(self) -> List[ChildT]: ...
    @property
    def dependencies(self) -> List[DepT]: ...

    def has_owner(self) -> bool: ...
    def has_description(self) -> bool: ...
    def has_tags(self) -> bool: ...
    def has_start_date(self) -> bool: ...
    def has_due_date(self) -> bool: ...
    def has_child(self, child: ChildT) -> bool: ...
    def has_children(self) -> bool: ...
    def has_dependency(self, dependency: DepT) -> bool: ...
    def has_dependencies(self) -> bool: ...

    # Identity and description
    def rename(self, name: str) -> Schedulable[ChildT, DepT]: ...
    def transfer_ownership(self, owner_id: PersonId) -> Schedulable[ChildT, DepT]: ...
    def set_description(self, description: str) -> Schedulable[ChildT, DepT]: ...
    def clear_description(self) -> Schedulable[ChildT, DepT]: ...

    # Tags
    def add_tag(self, tag_id: TagId) -> Schedulable[ChildT, DepT]: ...
    def add_tags(self, tag_ids: Iterable[TagId]) -> Schedulable[ChildT, DepT]: ...
    def remove_tag(self, tag_id: TagId) -> Schedulable[ChildT, DepT]: ...
    def remove_tags(self, tag_ids: Iterable[TagId]) -> Schedulable[ChildT, DepT]: ...
    def remove_all_tags(self) -> Schedulable[ChildT, DepT]: ...

    # Schedule
    def start_now(self) -> Schedulable[ChildT, DepT]: ...
    def start_at(self, start_date: datetime) -> Schedulable[ChildT, DepT]: ...
    def remove_start_date(self) -> Schedulable[ChildT, DepT]: ...
    def set_due_date(self, due_date: datetime) -> Schedulable[ChildT, DepT]: ...
    def remove_due_date(self) -> Schedulable[ChildT, DepT]: ...

    # Children
    def add_child(self, child: ChildT) -> Schedulable[ChildT, DepT]: ...
    def add_children(self, children: Iterable[ChildT]) -> Schedulable[ChildT, DepT]: ...
    def remove_child(self, child: ChildT) -> Schedulable[ChildT, DepT]: ...
    def remove_children(self, children: Iterable[ChildT]) -> Schedulable[ChildT, DepT]: ...
    def remove_all_children(self) -> Schedulable[ChildT, DepT]: ...

    # Dependencies
    def add_dependency(self, dependency: DepT) -> Schedulable[ChildT, DepT]: ...
    def add_dependencies(self, dependencies: Iterable[DepT]) -> Schedulable[ChildT, DepT]: ...
    def remove_dependency(self, dependency: DepT) -> Schedulable[ChildT, DepT]: ...
    def remove_dependencies(self, dependencies: Iterable[DepT]) -> Schedulable[ChildT, DepT]: ...
    def remove_all_dependencies(self) -> Schedulable[ChildT, DepT]: ...

    # Status
    def promote(self) -> Schedulable[ChildT, DepT]: ...
    def demote(self) -> Schedulable[ChildT, DepT]: ...
    def archive(self) -> Schedulable[ChildT, DepT]: ...
    def cancel(self) -> Schedulable[ChildT, DepT]: ...

    # Validation
    def is_valid_tag(self, tag_id: TagId) -> bool: ...
    def is_valid_start_date(self, start_date: Optional[datetime]) -> bool: ...
    def is_valid_due_date(self, due_date: Optional[datetime]) -> bool: ...
    def is_valid_child(self, child: ChildT) -> bool: ...
    def is_valid_dependency(self, dependency: DepT) -> bool: ...


def format_schedule_date(value: datetime) -> str:
    """Render a date as ``day-month-year [Week n]``."""
    return f"{value.day}-{value.month}-{value.year} [Week {value.isocalendar()[1]}]"


def describe(entity: Schedulable, label: str) -> str:
    """Human-readable multi-line summary of a project or task."""
    lines = [f"[[{entity.name}]]", f"- {label} Id: {entity.id}"]
    if entity.has_description():
        lines.append(f"- {label} Description: {entity.description}")
    if entity.has_owner():
        lines.append(f"- {label} Owner: {entity.owner_id}")
    if entity.has_start_date():
        lines.append(f"- {label} starts on: {format_schedule_date(entity.start_date)}")
    if entity.has_due_date():
        lines.append(f"- {label} is due on: {format_schedule_date(entity.due_date)}")
    lines.append(f"- {label} status: {entity.status.value}")
    lines.append(f"- {label} has {len(entity.children)} children")
    lines.append(f"- {label} has {len(entity.dependencies)} dependencies")
    lines.append(f"- {label} has {len(entity.tags)} tags")
    return "\n".join(lines)
