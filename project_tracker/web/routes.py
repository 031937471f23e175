from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request # type: ignore
import logging

from project_tracker import __version__
from project_tracker.services import TrackerServices
from project_tracker.utils.errors import TrackerError
from project_tracker.web.dto import PersonDTO, ProjectDTO, TagDTO, TaskDTO

logger = logging.getLogger(__name__)


def _format_error_response(error: Exception, status_code: int = 500) -> HTTPException:
    """Format error as HTTPException with structured error detail."""
    if isinstance(error, TrackerError):
        return HTTPException(
            status_code=getattr(error, "status_code", status_code),
            detail={"error": error.to_dict()}
        )
    else:
        # Wrap errors that are not ours
        tracker_error = TrackerError(
            message=str(error),
            code="INTERNAL_ERROR",
            recoverable=False,
            suggested_action="contact_support"
        )
        return HTTPException(
            status_code=status_code,
            detail={"error": tracker_error.to_dict()}
        )


router = APIRouter()


async def get_services(request: Request) -> TrackerServices:
    return request.app.state.services


@router.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


# ==================== Projects ====================

@router.get("/projects", response_model=List[ProjectDTO])
async def list_projects(services: TrackerServices = Depends(get_services)):
    projects = await services.projects.list()
    return [ProjectDTO.from_entity(p) for p in projects]


@router.post("/projects", response_model=ProjectDTO, status_code=201)
async def create_project(payload: ProjectDTO, services: TrackerServices = Depends(get_services)):
    try:
        project = await services.projects.create(payload)
    except TrackerError as e:
        logger.warning(f"Project creation rejected: {e}")
        raise _format_error_response(e)
    return ProjectDTO.from_entity(project)


@router.get("/projects/{project_id}", response_model=ProjectDTO)
async def get_project(project_id: str, services: TrackerServices = Depends(get_services)):
    try:
        project = await services.projects.get(project_id)
    except TrackerError as e:
        raise _format_error_response(e)
    return ProjectDTO.from_entity(project)


@router.post("/projects/{project_id}/{action}", response_model=ProjectDTO)
async def transition_project(project_id: str, action: str, services: TrackerServices = Depends(get_services)):
    try:
        project = await services.projects.transition(project_id, action)
    except TrackerError as e:
        raise _format_error_response(e)
    return ProjectDTO.from_entity(project)


# ==================== Tasks ====================

@router.get("/tasks", response_model=List[TaskDTO])
async def list_tasks(services: TrackerServices = Depends(get_services)):
    tasks = await services.tasks.list()
    return [TaskDTO.from_entity(t) for t in tasks]


@router.post("/tasks", response_model=TaskDTO, status_code=201)
async def create_task(payload: TaskDTO, services: TrackerServices = Depends(get_services)):
    try:
        task = await services.tasks.create(payload)
    except TrackerError as e:
        logger.warning(f"Task creation rejected: {e}")
        raise _format_error_response(e)
    return TaskDTO.from_entity(task)


@router.get("/tasks/{task_id}", response_model=TaskDTO)
async def get_task(task_id: str, services: TrackerServices = Depends(get_services)):
    try:
        task = await services.tasks.get(task_id)
    except TrackerError as e:
        raise _format_error_response(e)
    return TaskDTO.from_entity(task)


@router.post("/tasks/{task_id}/{action}", response_model=TaskDTO)
async def transition_task(task_id: str, action: str, services: TrackerServices = Depends(get_services)):
    try:
        task = await services.tasks.transition(task_id, action)
    except TrackerError as e:
        raise _format_error_response(e)
    return TaskDTO.from_entity(task)


# ==================== People & tags ====================

@router.get("/people", response_model=List[PersonDTO])
async def list_people(services: TrackerServices = Depends(get_services)):
    return [PersonDTO.from_entity(p) for p in await services.people.list()]


@router.post("/people", response_model=PersonDTO, status_code=201)
async def create_person(payload: PersonDTO, services: TrackerServices = Depends(get_services)):
    try:
        person = await services.people.create(payload)
    except TrackerError as e:
        raise _format_error_response(e)
    return PersonDTO.from_entity(person)


@router.get("/tags", response_model=List[TagDTO])
async def list_tags(services: TrackerServices = Depends(get_services)):
    return [TagDTO.from_entity(t) for t in await services.tags.list()]


@router.post("/tags", response_model=TagDTO, status_code=201)
async def create_tag(payload: TagDTO, services: TrackerServices = Depends(get_services)):
    try:
        tag = await services.tags.create(payload)
    except TrackerError as e:
        raise _format_error_response(e)
    return TagDTO.from_entity(tag)
