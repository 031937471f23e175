"""
Schedulable entity model: typed identifiers, people, tags, projects and
tasks, their builders, the status lifecycle and the validators.
"""

from .builders import PersonBuilder, ProjectBuilder, TagBuilder, TaskBuilder
from .exceptions import (
    DomainError,
    ElementNotFoundError,
    EntityValidationError,
    IdParseError,
    InvalidFormatError,
    InvalidUlidError,
    WrongPrefixError,
)
from .ids import EntityKind, Identifier, PersonId, ProjectId, TagId, TaskId, id_type_for
from .models import ChildKind, Person, ProjectChild, Tag
from .project import Project
from .schedulable import Schedulable
from .status import SchedulableStatus, StatusAction
from .task import Task
from .validation import IssueCode, ValidationIssue, ensure_valid, validate_schedulable

__all__ = [
    # Identifiers
    "EntityKind",
    "Identifier",
    "PersonId",
    "TagId",
    "ProjectId",
    "TaskId",
    "id_type_for",
    # Entities
    "Person",
    "Tag",
    "ChildKind",
    "ProjectChild",
    "Project",
    "Task",
    "Schedulable",
    # Builders
    "PersonBuilder",
    "TagBuilder",
    "ProjectBuilder",
    "TaskBuilder",
    # Lifecycle
    "SchedulableStatus",
    "StatusAction",
    # Validation
    "IssueCode",
    "ValidationIssue",
    "validate_schedulable",
    "ensure_valid",
    # Exceptions
    "DomainError",
    "IdParseError",
    "InvalidFormatError",
    "WrongPrefixError",
    "InvalidUlidError",
    "ElementNotFoundError",
    "EntityValidationError",
]
