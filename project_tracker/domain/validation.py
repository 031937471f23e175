"""Schedule and relationship validators.

Pure predicates consulted by the entity mutators, plus the whole-entity
cross-field pass used before a project or task is accepted by a service.
The cross-field pass collects every issue instead of stopping at the first.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from .exceptions import EntityValidationError
from .status import SchedulableStatus

if TYPE_CHECKING:
    from .schedulable import Schedulable


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value is None:
        return None
    if not isinstance(value, datetime):
        raise TypeError(f"Expected a datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ==================== Mutator guards ====================

def is_valid_tag(tag_id: Any, tags: Iterable[Any]) -> bool:
    return tag_id not in list(tags)


def is_valid_start_date(candidate: Optional[datetime], due_date: Optional[datetime]) -> bool:
    """A start date may not fall after an existing due date."""
    if candidate is None or due_date is None:
        return True
    return ensure_utc(candidate) <= ensure_utc(due_date)


def is_valid_due_date(
    candidate: Optional[datetime],
    start_date: Optional[datetime],
    now: Optional[datetime] = None,
) -> bool:
    """A due date may not precede the start date, nor lie in the past when there is no start date."""
    if candidate is None:
        return True
    candidate = ensure_utc(candidate)
    if start_date is not None:
        return ensure_utc(start_date) <= candidate
    return candidate >= (ensure_utc(now) if now is not None else now_utc())


def is_self_reference(candidate: Any, own_id: Any) -> bool:
    return candidate == own_id


# ==================== Cross-field validation ====================

class IssueCode(str, Enum):
    INCORRECT_SCHEDULE = "incorrect_schedule"
    INCONSISTENT_STATUS = "inconsistent_status"
    SELF_PARENTING = "self_parenting"
    SELF_DEPENDENCY = "self_dependency"


@dataclass(frozen=True)
class ValidationIssue:
    code: IssueCode
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"code": self.code.value, "field": self.field, "message": self.message}


def has_incorrect_schedule(start_date: Optional[datetime], due_date: Optional[datetime]) -> bool:
    if start_date is None or due_date is None:
        return False
    return ensure_utc(due_date) < ensure_utc(start_date)


def has_inconsistent_status(
    status: SchedulableStatus,
    start_date: Optional[datetime],
    due_date: Optional[datetime],
    now: Optional[datetime] = None,
) -> bool:
    """Check whether ``status`` contradicts the dates of an entity.

    Archived and Canceled entities are unconstrained.
    """
    now = ensure_utc(now) if now is not None else now_utc()
    start = ensure_utc(start_date)
    due = ensure_utc(due_date)
    started = start is not None and start <= now

    if status is SchedulableStatus.NOT_STARTED:
        return started
    if status is SchedulableStatus.PLANNED:
        return start is None or start <= now
    if status is SchedulableStatus.IN_PROGRESS:
        return not started or (due is not None and due < now)
    if status is SchedulableStatus.IN_REVIEW:
        return not started or due is None or due < now
    if status is SchedulableStatus.COMPLETED:
        return not started or due is None or due > now
    return False


_STATUS_EXPECTATIONS = {
    SchedulableStatus.NOT_STARTED: "must not have a start date in the past",
    SchedulableStatus.PLANNED: "requires a start date in the future",
    SchedulableStatus.IN_PROGRESS: "requires a past start date and no past due date",
    SchedulableStatus.IN_REVIEW: "requires a past start date and a future due date",
    SchedulableStatus.COMPLETED: "requires a past start date and a past due date",
}


def validate_schedulable(entity: Schedulable, now: Optional[datetime] = None) -> List[ValidationIssue]:
    """Run every cross-field check on a fully assembled project or task.

    Args:
        entity: Project or Task to check
        now: Reference time (defaults to the current UTC time)

    Returns:
        All issues found; an empty list means the entity is acceptable
    """
    issues: List[ValidationIssue] = []
    kind = entity.id.kind.value

    if has_incorrect_schedule(entity.start_date, entity.due_date):
        issues.append(ValidationIssue(
            IssueCode.INCORRECT_SCHEDULE,
            "due_date",
            f"provided {kind} has incorrect schedule: due date precedes start date",
        ))

    if has_inconsistent_status(entity.status, entity.start_date, entity.due_date, now):
        expectation = _STATUS_EXPECTATIONS.get(entity.status, "")
        issues.append(ValidationIssue(
            IssueCode.INCONSISTENT_STATUS,
            "status",
            f"provided {kind} has status {entity.status.value} inconsistent with provided dates "
            f"({entity.status.value} {expectation})",
        ))

    if any(not entity.is_valid_child(child) for child in entity.children):
        issues.append(ValidationIssue(
            IssueCode.SELF_PARENTING,
            "children",
            f"provided {kind} lists itself as its own child",
        ))

    if any(not entity.is_valid_dependency(dep) for dep in entity.dependencies):
        issues.append(ValidationIssue(
            IssueCode.SELF_DEPENDENCY,
            "dependencies",
            f"provided {kind} lists itself as its own dependency",
        ))

    return issues


def ensure_valid(entity: Schedulable, now: Optional[datetime] = None) -> Schedulable:
    """Return ``entity`` unchanged, or raise with every issue found."""
    issues = validate_schedulable(entity, now)
    if issues:
        raise EntityValidationError(issues, entity_id=entity.id)
    return entity
