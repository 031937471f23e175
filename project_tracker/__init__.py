"""Project Tracker - projects and tasks owned by people, with tags, schedules,
hierarchical children and dependencies.

The package is organised around a shared schedulable entity model:
- Typed, sortable identifiers per entity kind
- Builders for every entity
- A seven-state status lifecycle shared by projects and tasks
- Schedule and status/date consistency validation
- An in-memory repository, a FastAPI web API and a Typer terminal client

Example Usage:
    ```python
    from project_tracker import ProjectBuilder, ensure_valid

    project = ProjectBuilder().with_name("Launch").build()
    ensure_valid(project)
    project.promote()
    ```
"""

from ._version import __author__, __license__, __version__
from .domain import (
    EntityValidationError,
    IdParseError,
    Person,
    PersonBuilder,
    PersonId,
    Project,
    ProjectBuilder,
    ProjectChild,
    ProjectId,
    Schedulable,
    SchedulableStatus,
    Tag,
    TagBuilder,
    TagId,
    Task,
    TaskBuilder,
    TaskId,
    ensure_valid,
    validate_schedulable,
)

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "PersonId",
    "TagId",
    "ProjectId",
    "TaskId",
    "Person",
    "Tag",
    "Project",
    "ProjectChild",
    "Task",
    "Schedulable",
    "SchedulableStatus",
    "PersonBuilder",
    "TagBuilder",
    "ProjectBuilder",
    "TaskBuilder",
    "validate_schedulable",
    "ensure_valid",
    "IdParseError",
    "EntityValidationError",
]
