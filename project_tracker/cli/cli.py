"""
Terminal client for the Project Tracker.

Commands:
   - project new: Build a project locally, validate it, preview it and optionally submit it
   - project show / list / transition: Read and move projects through the lifecycle via the API
   - task list / show: Read tasks via the API
   - serve: Run the web API with uvicorn
"""

from typing import Any, Dict, List, Optional

import typer  # type: ignore
from rich.console import Console as RichConsole  # type: ignore
from rich.panel import Panel  # type: ignore
from rich.table import Table  # type: ignore
from rich.text import Text  # type: ignore

from project_tracker.cli.client import TrackerClient, TrackerClientError
from project_tracker.config import Config, ConfigError
from project_tracker.domain.builders import ProjectBuilder, TagBuilder
from project_tracker.domain.exceptions import IdParseError
from project_tracker.domain.ids import PersonId, TagId
from project_tracker.domain.project import Project
from project_tracker.domain.status import SchedulableStatus
from project_tracker.domain.validation import validate_schedulable
from project_tracker.services import parse_date
from project_tracker.web.dto import ProjectDTO

app = typer.Typer(
    help="Project Tracker - plan projects and tasks from the command line."
)
console = RichConsole()

project_app = typer.Typer(help="Project commands")
app.add_typer(project_app, name="project")

task_app = typer.Typer(help="Task commands")
app.add_typer(task_app, name="task")

STATUS_STYLES = {
    SchedulableStatus.NOT_STARTED.value: "dim",
    SchedulableStatus.PLANNED.value: "cyan",
    SchedulableStatus.IN_PROGRESS.value: "yellow",
    SchedulableStatus.IN_REVIEW.value: "magenta",
    SchedulableStatus.COMPLETED.value: "green",
    SchedulableStatus.ARCHIVED.value: "dim",
    SchedulableStatus.CANCELED.value: "red",
}


def _load_config() -> Config:
    try:
        return Config.load_config()
    except ConfigError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(code=1)


def get_client(config: Config) -> TrackerClient:
    return TrackerClient(api_url=config.client.api_url, timeout=config.client.timeout)


def _fail(errors: List[str], title: str = "Cannot create project") -> None:
    console.print(f"[bold red]❌ {title}:[/bold red]")
    for error in errors:
        console.print(f"[red]  • {error}[/red]")
    raise typer.Exit(code=1)


def validate_form(name: str, description: Optional[str], config: Config) -> List[str]:
    """Check the form fields a user typed, before any entity is built."""
    errors: List[str] = []
    name_limit = config.validation.name_max_length
    description_limit = config.validation.description_max_length
    if not name.strip():
        errors.append("Project name is required")
    elif len(name) > name_limit:
        errors.append(f"Project name must be {name_limit} characters or less")
    if description is not None and len(description) > description_limit:
        errors.append(f"Description must be {description_limit} characters or less")
    return errors


def _unique(values: List[str]) -> List[str]:
    seen: List[str] = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen


def _status_text(status: str) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status}[/{style}]"


def _short_date(value: Optional[str]) -> str:
    return value[:16].replace("T", " ") if value else "-"


def _render_project(data: Dict[str, Any]) -> Panel:
    lines = [
        f"[bold]Id:[/bold] {data['id']}",
        f"[bold]Status:[/bold] {_status_text(data['status'])}",
    ]
    if data.get("description"):
        lines.append(f"[bold]Description:[/bold] {data['description']}")
    if data.get("owner_id"):
        lines.append(f"[bold]Owner:[/bold] {data['owner_id']}")
    lines.append(f"[bold]Start:[/bold] {_short_date(data.get('start_date'))}")
    lines.append(f"[bold]Due:[/bold] {_short_date(data.get('due_date'))}")
    if data.get("tags"):
        lines.append(f"[bold]Tags:[/bold] {', '.join(data['tags'])}")
    for child in data.get("children", []):
        lines.append(f"  [dim]{child['kind']}[/dim] {child['id']}")
    lines.append(
        f"[dim]{len(data.get('children', []))} children, "
        f"{len(data.get('dependencies', []))} dependencies[/dim]"
    )
    return Panel("\n".join(lines), title=f"📁 {data['name']}", border_style="cyan")


# ==================== project ====================

@project_app.command("new")
def project_new(
    name: str = typer.Argument(..., help="Project name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Project description"),
    start: Optional[str] = typer.Option(None, "--start", help="Start date (ISO-8601)"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date (ISO-8601)"),
    status: str = typer.Option(SchedulableStatus.NOT_STARTED.value, "--status", "-s", help="Initial status"),
    tags: Optional[List[str]] = typer.Option(None, "--tag", "-t", help="Tag name or tag id (repeatable)"),
    owner: Optional[str] = typer.Option(None, "--owner", help="Owner person id"),
    submit: bool = typer.Option(False, "--submit", help="Send the project to the API after previewing it"),
):
    """Build a project, validate it and show a preview."""
    config = _load_config()

    errors = validate_form(name, description, config)
    start_date = parse_date(start, "start_date", errors)
    due_date = parse_date(due, "due_date", errors)
    try:
        initial_status = SchedulableStatus.from_name(status)
    except ValueError as e:
        errors.append(str(e))
        initial_status = SchedulableStatus.NOT_STARTED

    owner_id = None
    if owner:
        try:
            owner_id = PersonId.parse(owner)
        except IdParseError as e:
            errors.append(f"owner: {e}")

    # Tag values that already are tag ids are kept; anything else is a new tag name
    tag_ids: List[TagId] = []
    new_tag_names: List[str] = []
    for value in _unique(tags or []):
        try:
            tag_ids.append(TagId.parse(value))
        except IdParseError:
            new_tag_names.append(value)

    if errors:
        _fail(errors)

    draft_tags = {tag_name: TagBuilder().with_name(tag_name).build() for tag_name in new_tag_names}
    project: Project = (
        ProjectBuilder()
        .with_name(name.strip())
        .with_description(description.strip() if description and description.strip() else None)
        .with_owner_id(owner_id)
        .with_tags(tag_ids + [t.id for t in draft_tags.values()])
        .with_start_date(start_date)
        .with_due_date(due_date)
        .with_status(initial_status)
        .build()
    )

    issues = validate_schedulable(project)
    if issues:
        _fail([issue.message for issue in issues])

    console.print(Panel(Text(str(project)), title="👀 Preview", border_style="blue"))

    if not submit:
        console.print("[dim]Not submitted. Re-run with --submit to create it.[/dim]")
        return

    client = get_client(config)
    try:
        created_tags = [
            client.create_tag({"id": str(tag.id), "name": tag.name}) for tag in draft_tags.values()
        ]
        created = client.create_project(ProjectDTO.from_entity(project).model_dump())
    except TrackerClientError as e:
        _fail(e.messages, title="Server rejected the project")
    finally:
        client.close()

    for tag in created_tags:
        console.print(f"[dim]🏷  Created tag {tag['name']} ({tag['id']})[/dim]")
    console.print(f"[bold green]✅ Created project {created['id']}[/bold green]")


@project_app.command("show")
def project_show(project_id: str = typer.Argument(..., help="Project ID")):
    """Show one project."""
    config = _load_config()
    client = get_client(config)
    try:
        data = client.get_project(project_id)
    except TrackerClientError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        client.close()
    console.print(_render_project(data))


@project_app.command("list")
def project_list():
    """List all projects"""
    config = _load_config()
    client = get_client(config)
    try:
        projects = client.list_projects()
    except TrackerClientError as e:
        console.print(f"[red]Error listing projects: {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        client.close()

    if not projects:
        console.print("[yellow]No projects found. Create one with 'tracker project new <name> --submit'[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta", title="📁 Projects")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Status")
    table.add_column("Start", style="dim")
    table.add_column("Due", style="dim")
    table.add_column("Children", style="yellow")
    for project in projects:
        table.add_row(
            project["id"],
            project["name"],
            _status_text(project["status"]),
            _short_date(project.get("start_date")),
            _short_date(project.get("due_date")),
            str(len(project.get("children", []))),
        )
    console.print(table)


@project_app.command("transition")
def project_transition(
    project_id: str = typer.Argument(..., help="Project ID"),
    action: str = typer.Argument(..., help="promote, demote, archive or cancel"),
):
    """Move a project through its lifecycle."""
    config = _load_config()
    client = get_client(config)
    try:
        data = client.transition_project(project_id, action)
    except TrackerClientError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        client.close()
    console.print(f"[green]✅ {data['name']} is now {_status_text(data['status'])}[/green]")


# ==================== task ====================

@task_app.command("list")
def task_list():
    """List all tasks"""
    config = _load_config()
    client = get_client(config)
    try:
        tasks = client.list_tasks()
    except TrackerClientError as e:
        console.print(f"[red]Error listing tasks: {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        client.close()

    if not tasks:
        console.print("[yellow]No tasks found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta", title="📝 Tasks")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Status")
    table.add_column("Due", style="dim")
    table.add_column("Depends on", style="yellow")
    for task in tasks:
        table.add_row(
            task["id"],
            task["name"],
            _status_text(task["status"]),
            _short_date(task.get("due_date")),
            str(len(task.get("dependencies", []))),
        )
    console.print(table)


@task_app.command("show")
def task_show(task_id: str = typer.Argument(..., help="Task ID")):
    """Show one task."""
    config = _load_config()
    client = get_client(config)
    try:
        data = client.get_task(task_id)
    except TrackerClientError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        client.close()

    table = Table(show_header=False, title=f"📝 {data['name']}")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("ID", data["id"])
    table.add_row("Status", _status_text(data["status"]))
    table.add_row("Start", _short_date(data.get("start_date")))
    table.add_row("Due", _short_date(data.get("due_date")))
    table.add_row("Sub-tasks", str(len(data.get("children", []))))
    table.add_row("Depends on", ", ".join(data.get("dependencies", [])) or "-")
    console.print(table)


# ==================== serve ====================

@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (defaults to config)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (defaults to config)"),
):
    """Run the web API."""
    import uvicorn  # type: ignore

    from project_tracker.utils.logs import setup_logger
    from project_tracker.web.app import create_app

    config = _load_config()
    if host:
        config.server.host = host
    if port:
        config.server.port = port

    setup_logger(
        log_file=config.logging.file,
        log_level=config.logging.level,
        log_dir=config.logging.directory,
    )
    console.print(f"[bold cyan]🚀 Serving Project Tracker on http://{config.server.host}:{config.server.port}[/bold cyan]")
    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
    )


if __name__ == "__main__":
    app()
