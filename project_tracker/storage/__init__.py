"""Record mapping and in-memory repositories."""

from .exceptions import RecordError, StorageError
from .records import (
    person_to_record,
    project_to_record,
    record_to_person,
    record_to_project,
    record_to_tag,
    record_to_task,
    tag_to_record,
    task_to_record,
)
from .repository import InMemoryRepository, Repository, RepositoryRegistry

__all__ = [
    "StorageError",
    "RecordError",
    "person_to_record",
    "record_to_person",
    "tag_to_record",
    "record_to_tag",
    "project_to_record",
    "record_to_project",
    "task_to_record",
    "record_to_task",
    "Repository",
    "InMemoryRepository",
    "RepositoryRegistry",
]
