"""Request-handling services for the Project Tracker.

Each service turns an incoming DTO into an entity through its builder,
runs the cross-field validation pass, and stores the result. Every
malformed field and every validation issue of a request is reported
together in one ``MultipleErrors``; nothing is stored unless the whole
payload is acceptable.
"""

import logging
from datetime import datetime
from typing import Any, List, Optional, Type, TypeVar

from project_tracker.domain.builders import PersonBuilder, ProjectBuilder, TagBuilder, TaskBuilder
from project_tracker.domain.exceptions import IdParseError
from project_tracker.domain.ids import Identifier, PersonId, ProjectId, TagId, TaskId
from project_tracker.domain.models import ChildKind, Person, ProjectChild, Tag
from project_tracker.domain.project import Project
from project_tracker.domain.status import SchedulableStatus, StatusAction
from project_tracker.domain.task import Task
from project_tracker.domain.validation import IssueCode, validate_schedulable
from project_tracker.storage.repository import RepositoryRegistry
from project_tracker.utils.errors import InvalidPayloadError, MultipleErrors, NotFoundError
from project_tracker.web.dto import PersonDTO, ProjectDTO, SchedulableDTO, TagDTO, TaskDTO

logger = logging.getLogger(__name__)

IdT = TypeVar("IdT", bound=Identifier)

# Payload fields each validation issue is computed from
_ISSUE_INPUTS = {
    IssueCode.INCORRECT_SCHEDULE: {"start_date", "due_date"},
    IssueCode.INCONSISTENT_STATUS: {"status", "start_date", "due_date"},
    IssueCode.SELF_PARENTING: {"id", "children"},
    IssueCode.SELF_DEPENDENCY: {"id", "dependencies"},
}


# ==================== Payload parsing ====================

def _parse_id(id_type: Type[IdT], raw: Optional[str], field: str, errors: List[str]) -> Optional[IdT]:
    if raw is None:
        return None
    try:
        return id_type.parse(raw)
    except IdParseError as e:
        errors.append(f"{field}: {e}")
        return None


def _parse_ids(id_type: Type[IdT], raws: List[str], field: str, errors: List[str]) -> List[IdT]:
    parsed = [_parse_id(id_type, raw, field, errors) for raw in raws]
    return [p for p in parsed if p is not None]


def parse_date(raw: Optional[str], field: str, errors: List[str]) -> Optional[datetime]:
    """Parse an ISO-8601 date, accepting a trailing ``Z`` for UTC."""
    if raw is None or not raw.strip():
        return None
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        errors.append(f"{field}: '{raw}' is not an ISO-8601 date")
        return None


def _parse_status(raw: str, errors: List[str]) -> SchedulableStatus:
    try:
        return SchedulableStatus.from_name(raw)
    except ValueError as e:
        errors.append(f"status: {e}")
        return SchedulableStatus.NOT_STARTED


def _parse_action(raw: str) -> StatusAction:
    try:
        return StatusAction(str(raw).lower())
    except ValueError:
        valid = ", ".join(a.value for a in StatusAction)
        raise InvalidPayloadError(
            f"Unknown action '{raw}'. Valid options: {valid}",
            details={"action": raw},
        ) from None


def _fill_common(builder: Any, payload: SchedulableDTO, id_type: Type[Identifier], errors: List[str]) -> Any:
    """Copy the fields shared by projects and tasks onto ``builder``."""
    if payload.id is not None:
        entity_id = _parse_id(id_type, payload.id, "id", errors)
        if entity_id is not None:
            builder.with_id(entity_id)
    return (
        builder
        .with_name(payload.name)
        .with_owner_id(_parse_id(PersonId, payload.owner_id, "owner_id", errors))
        .with_description(payload.description)
        .with_tags(_parse_ids(TagId, payload.tags, "tags", errors))
        .with_start_date(parse_date(payload.start_date, "start_date", errors))
        .with_due_date(parse_date(payload.due_date, "due_date", errors))
        .with_status(_parse_status(payload.status, errors))
    )


# ==================== Services ====================

class _SchedulableService:
    """Create/get/list/transition for one schedulable kind."""

    kind: str
    id_type: Type[Identifier]

    def __init__(self, repository):
        self.repository = repository

    def _parse_entity_id(self, id_str: str) -> Identifier:
        try:
            return self.id_type.parse(id_str)
        except IdParseError as e:
            raise InvalidPayloadError(str(e), details={"id": id_str}) from e

    def _build(self, payload: SchedulableDTO, errors: List[str]) -> Any:
        """Build an entity from the fields that parse.

        Each malformed field appends a ``"field: message"`` entry to ``errors``.
        """
        raise NotImplementedError

    async def create(self, payload: SchedulableDTO) -> Any:
        """Build, validate and store a new entity.

        Raises:
            MultipleErrors: If any field is malformed or the entity fails validation
            DuplicateEntityError: If the payload carries an id that is already stored
        """
        errors: List[str] = []
        entity = self._build(payload, errors)
        malformed = {error.split(":", 1)[0] for error in errors}
        errors.extend(
            issue.message for issue in validate_schedulable(entity)
            if not _ISSUE_INPUTS[issue.code] & malformed
        )
        if errors:
            logger.info(f"Rejected {self.kind} payload {payload.name!r}: {len(errors)} error(s)")
            raise MultipleErrors(errors)
        return await self.repository.create(entity)

    async def get(self, id_str: str) -> Any:
        entity_id = self._parse_entity_id(id_str)
        entity = await self.repository.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(entity_id, kind=self.kind)
        return entity

    async def list(self) -> List[Any]:
        return await self.repository.list_all()

    async def transition(self, id_str: str, action: str) -> Any:
        """Apply a lifecycle action (promote, demote, archive, cancel) and store the result.

        Actions that do not apply to the current status leave it unchanged.
        """
        status_action = _parse_action(action)
        entity = await self.get(id_str)
        previous = entity.status
        getattr(entity, status_action.value)()
        if entity.status is previous:
            logger.info(f"{status_action.value} left {self.kind} {entity.id} at {previous.value}")
        else:
            logger.info(f"{self.kind.capitalize()} {entity.id}: {previous.value} -> {entity.status.value}")
        return await self.repository.update(entity)


class ProjectService(_SchedulableService):
    kind = "project"
    id_type = ProjectId

    def _build(self, payload: ProjectDTO, errors: List[str]) -> Project:
        builder = _fill_common(ProjectBuilder(), payload, ProjectId, errors)

        children: List[ProjectChild] = []
        for child in payload.children:
            if child.kind == ChildKind.PROJECT.value:
                child_id = _parse_id(ProjectId, child.id, "children", errors)
            else:
                child_id = _parse_id(TaskId, child.id, "children", errors)
            if child_id is not None:
                children.append(ProjectChild.of(child_id))
        builder.with_children(children)
        builder.with_dependencies(_parse_ids(ProjectId, payload.dependencies, "dependencies", errors))

        return builder.build()


class TaskService(_SchedulableService):
    kind = "task"
    id_type = TaskId

    def _build(self, payload: TaskDTO, errors: List[str]) -> Task:
        builder = _fill_common(TaskBuilder(), payload, TaskId, errors)
        builder.with_children(_parse_ids(TaskId, payload.children, "children", errors))
        builder.with_dependencies(_parse_ids(TaskId, payload.dependencies, "dependencies", errors))

        return builder.build()


class PersonService:
    kind = "person"

    def __init__(self, repository):
        self.repository = repository

    async def create(self, payload: PersonDTO) -> Person:
        errors: List[str] = []
        builder = PersonBuilder()
        if payload.id is not None:
            person_id = _parse_id(PersonId, payload.id, "id", errors)
            if person_id is not None:
                builder.with_id(person_id)
        if not f"{payload.first_name} {payload.last_name}".strip():
            errors.append("provided person has no name")
        if errors:
            raise MultipleErrors(errors)
        person = builder.with_first_name(payload.first_name).with_last_name(payload.last_name).build()
        return await self.repository.create(person)

    async def get(self, id_str: str) -> Person:
        try:
            person_id = PersonId.parse(id_str)
        except IdParseError as e:
            raise InvalidPayloadError(str(e), details={"id": id_str}) from e
        person = await self.repository.get_by_id(person_id)
        if person is None:
            raise NotFoundError(person_id, kind=self.kind)
        return person

    async def list(self) -> List[Person]:
        return await self.repository.list_all()


class TagService:
    kind = "tag"

    def __init__(self, repository):
        self.repository = repository

    async def create(self, payload: TagDTO) -> Tag:
        errors: List[str] = []
        builder = TagBuilder()
        if payload.id is not None:
            tag_id = _parse_id(TagId, payload.id, "id", errors)
            if tag_id is not None:
                builder.with_id(tag_id)
        if not payload.name.strip():
            errors.append("provided tag has no name")
        builder.with_parents(_parse_ids(TagId, payload.parents, "parents", errors))
        if errors:
            raise MultipleErrors(errors)

        tag = builder.with_name(payload.name).with_description(payload.description).build()
        if any(not tag.is_valid_parent(p) for p in tag.parents):
            raise MultipleErrors(["provided tag lists itself as its own parent"])
        return await self.repository.create(tag)

    async def get(self, id_str: str) -> Tag:
        try:
            tag_id = TagId.parse(id_str)
        except IdParseError as e:
            raise InvalidPayloadError(str(e), details={"id": id_str}) from e
        tag = await self.repository.get_by_id(tag_id)
        if tag is None:
            raise NotFoundError(tag_id, kind=self.kind)
        return tag

    async def list(self) -> List[Tag]:
        return await self.repository.list_all()


class TrackerServices:
    """Bundle of services sharing one set of repositories."""

    def __init__(self, repositories: Optional[RepositoryRegistry] = None):
        self.repositories = repositories or RepositoryRegistry()
        self.people = PersonService(self.repositories.people)
        self.tags = TagService(self.repositories.tags)
        self.projects = ProjectService(self.repositories.projects)
        self.tasks = TaskService(self.repositories.tasks)
