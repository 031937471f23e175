"""Request and response bodies for the web API.

Identifiers and dates travel as plain strings. They are parsed by the
services, which report every malformed field together instead of failing
on the first one.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field  # type: ignore

from project_tracker.domain.models import Person, ProjectChild, Tag
from project_tracker.domain.project import Project
from project_tracker.domain.status import SchedulableStatus
from project_tracker.domain.task import Task


def _date(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


class ChildDTO(BaseModel):
    kind: Literal["project", "task"]
    id: str

    @classmethod
    def from_child(cls, child: ProjectChild) -> "ChildDTO":
        return cls(kind=child.kind.value, id=str(child.id))


class PersonDTO(BaseModel):
    id: Optional[str] = None
    first_name: str = ""
    last_name: str = ""

    @classmethod
    def from_entity(cls, person: Person) -> "PersonDTO":
        return cls(id=str(person.id), first_name=person.first_name, last_name=person.last_name)


class TagDTO(BaseModel):
    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    parents: List[str] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, tag: Tag) -> "TagDTO":
        return cls(
            id=str(tag.id),
            name=tag.name,
            description=tag.description if tag.has_description() else None,
            parents=[str(p) for p in tag.parents],
        )


class SchedulableDTO(BaseModel):
    """Fields shared by project and task payloads.

    ``id`` is optional on creation; the server generates one when absent.
    ``status`` accepts the lifecycle name ("InProgress") or its snake form.
    """
    id: Optional[str] = None
    name: str
    owner_id: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    start_date: Optional[str] = None
    due_date: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)
    status: str = SchedulableStatus.NOT_STARTED.value


class ProjectDTO(SchedulableDTO):
    children: List[ChildDTO] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, project: Project) -> "ProjectDTO":
        return cls(
            id=str(project.id),
            name=project.name,
            owner_id=str(project.owner_id) if project.has_owner() else None,
            description=project.description if project.has_description() else None,
            tags=[str(t) for t in project.tags],
            start_date=_date(project.start_date),
            due_date=_date(project.due_date),
            children=[ChildDTO.from_child(c) for c in project.children],
            dependencies=[str(d) for d in project.dependencies],
            status=project.status.value,
        )


class TaskDTO(SchedulableDTO):
    children: List[str] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, task: Task) -> "TaskDTO":
        return cls(
            id=str(task.id),
            name=task.name,
            owner_id=str(task.owner_id) if task.has_owner() else None,
            description=task.description if task.has_description() else None,
            tags=[str(t) for t in task.tags],
            start_date=_date(task.start_date),
            due_date=_date(task.due_date),
            children=[str(c) for c in task.children],
            dependencies=[str(d) for d in task.dependencies],
            status=task.status.value,
        )
