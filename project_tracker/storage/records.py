"""Conversion between entities and plain-dict records.

Records hold only JSON-friendly values: identifiers and dates as strings,
status by its lifecycle name, project children as tagged dicts
``{"kind": "task", "id": "task-01J..."}``. Decoding rebuilds entities
through the builders with ``with_id``, so stored state is restored as-is
without going through the mutator guards.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from project_tracker.domain.builders import PersonBuilder, ProjectBuilder, TagBuilder, TaskBuilder
from project_tracker.domain.exceptions import IdParseError
from project_tracker.domain.ids import Identifier, PersonId, ProjectId, TagId, TaskId
from project_tracker.domain.models import ChildKind, Person, ProjectChild, Tag
from project_tracker.domain.project import Project
from project_tracker.domain.status import SchedulableStatus
from project_tracker.domain.task import Task
from .exceptions import RecordError

IdT = TypeVar("IdT", bound=Identifier)

Record = Dict[str, Any]


# ==================== Field helpers ====================

def _date_to_str(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _str_to_date(record: Record, key: str) -> Optional[datetime]:
    raw = record.get(key)
    if raw is None:
        return None
    try:
        return datetime.fromisoformat(raw)
    except (TypeError, ValueError) as e:
        raise RecordError(f"Field '{key}' is not an ISO-8601 date: {raw!r}", key, raw) from e


def _parse_id(id_type: Type[IdT], raw: Any, key: str) -> IdT:
    try:
        return id_type.parse(raw)
    except IdParseError as e:
        raise RecordError(f"Field '{key}' holds an invalid {id_type.__name__}: {e}", key, raw) from e


def _optional_id(id_type: Type[IdT], record: Record, key: str) -> Optional[IdT]:
    raw = record.get(key)
    return _parse_id(id_type, raw, key) if raw is not None else None


def _id_list(id_type: Type[IdT], record: Record, key: str) -> List[IdT]:
    raw = record.get(key) or []
    if not isinstance(raw, list):
        raise RecordError(f"Field '{key}' must be a list", key, raw)
    return [_parse_id(id_type, item, key) for item in raw]


def _require(record: Record, key: str) -> Any:
    if not isinstance(record, dict):
        raise RecordError(f"Expected a record dict, got {type(record).__name__}", None, record)
    if key not in record:
        raise RecordError(f"Record is missing required field '{key}'", key, None)
    return record[key]


def _status(record: Record) -> SchedulableStatus:
    raw = record.get("status", SchedulableStatus.NOT_STARTED.value)
    try:
        return SchedulableStatus.from_name(raw)
    except ValueError as e:
        raise RecordError(str(e), "status", raw) from e


# ==================== Project children ====================

def child_to_record(child: ProjectChild) -> Record:
    return {"kind": child.kind.value, "id": str(child.id)}


def record_to_child(raw: Any) -> ProjectChild:
    """Decode a project child.

    Accepts the tagged form, and also plain id strings written before
    children were tagged; those are tried against each typed parser in turn.
    """
    if isinstance(raw, dict):
        try:
            kind = ChildKind(raw.get("kind"))
        except ValueError as e:
            raise RecordError(f"Unknown child kind {raw.get('kind')!r}", "children", raw) from e
        id_type = ProjectId if kind is ChildKind.PROJECT else TaskId
        return ProjectChild(kind, _parse_id(id_type, raw.get("id"), "children"))

    parsers: List[Callable[[Any], ProjectChild]] = [
        lambda value: ProjectChild.project(ProjectId.parse(value)),
        lambda value: ProjectChild.task(TaskId.parse(value)),
    ]
    for parser in parsers:
        try:
            return parser(raw)
        except IdParseError:
            continue
    raise RecordError(f"Child {raw!r} is neither a project id nor a task id", "children", raw)


# ==================== Entities ====================

def person_to_record(person: Person) -> Record:
    return {
        "id": str(person.id),
        "first_name": person.first_name,
        "last_name": person.last_name,
    }


def record_to_person(record: Record) -> Person:
    return (
        PersonBuilder()
        .with_id(_parse_id(PersonId, _require(record, "id"), "id"))
        .with_first_name(record.get("first_name", ""))
        .with_last_name(record.get("last_name", ""))
        .build()
    )


def tag_to_record(tag: Tag) -> Record:
    return {
        "id": str(tag.id),
        "name": tag.name,
        "description": tag.description if tag.has_description() else None,
        "parents": [str(p) for p in tag.parents],
    }


def record_to_tag(record: Record) -> Tag:
    return (
        TagBuilder()
        .with_id(_parse_id(TagId, _require(record, "id"), "id"))
        .with_name(record.get("name", ""))
        .with_description(record.get("description"))
        .with_parents(_id_list(TagId, record, "parents"))
        .build()
    )


def _schedulable_fields(entity: Any) -> Record:
    return {
        "id": str(entity.id),
        "name": entity.name,
        "owner_id": str(entity.owner_id) if entity.has_owner() else None,
        "description": entity.description if entity.has_description() else None,
        "tags": [str(t) for t in entity.tags],
        "start_date": _date_to_str(entity.start_date),
        "due_date": _date_to_str(entity.due_date),
        "dependencies": [str(d) for d in entity.dependencies],
        "status": entity.status.value,
    }


def _fill_builder(builder: Any, record: Record) -> Any:
    return (
        builder
        .with_name(record.get("name", ""))
        .with_owner_id(_optional_id(PersonId, record, "owner_id"))
        .with_description(record.get("description"))
        .with_tags(_id_list(TagId, record, "tags"))
        .with_start_date(_str_to_date(record, "start_date"))
        .with_due_date(_str_to_date(record, "due_date"))
        .with_status(_status(record))
    )


def project_to_record(project: Project) -> Record:
    record = _schedulable_fields(project)
    record["children"] = [child_to_record(c) for c in project.children]
    return record


def record_to_project(record: Record) -> Project:
    builder = ProjectBuilder().with_id(_parse_id(ProjectId, _require(record, "id"), "id"))
    children = record.get("children") or []
    if not isinstance(children, list):
        raise RecordError("Field 'children' must be a list", "children", children)
    return (
        _fill_builder(builder, record)
        .with_children([record_to_child(c) for c in children])
        .with_dependencies(_id_list(ProjectId, record, "dependencies"))
        .build()
    )


def task_to_record(task: Task) -> Record:
    record = _schedulable_fields(task)
    record["children"] = [str(c) for c in task.children]
    return record


def record_to_task(record: Record) -> Task:
    builder = TaskBuilder().with_id(_parse_id(TaskId, _require(record, "id"), "id"))
    return (
        _fill_builder(builder, record)
        .with_children(_id_list(TaskId, record, "children"))
        .with_dependencies(_id_list(TaskId, record, "dependencies"))
        .build()
    )
