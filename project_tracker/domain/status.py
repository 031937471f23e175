"""Status lifecycle shared by projects and tasks.

The lifecycle has a forward chain (NotStarted -> Planned -> InProgress ->
InReview -> Completed) walked by ``promote``/``demote``, plus two exits:
``archive`` (reachable from everywhere) and ``cancel`` (refused once an
entity is Completed or Archived). Transitions that do not apply leave the
status unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet


class SchedulableStatus(Enum):
    """Lifecycle status of a project or task."""
    NOT_STARTED = "NotStarted"
    PLANNED = "Planned"
    IN_PROGRESS = "InProgress"
    IN_REVIEW = "InReview"
    COMPLETED = "Completed"
    ARCHIVED = "Archived"
    CANCELED = "Canceled"

    @classmethod
    def from_name(cls, raw: str) -> SchedulableStatus:
        """Resolve a status from its value ("InProgress") or member name ("in_progress")."""
        if isinstance(raw, cls):
            return raw
        text = str(raw).strip()
        for status in cls:
            if text == status.value or text.upper() == status.name:
                return status
        compact = text.replace("_", "").replace("-", "").replace(" ", "").lower()
        for status in cls:
            if compact == status.value.lower():
                return status
        valid = ", ".join(s.value for s in cls)
        raise ValueError(f"Unknown status '{raw}'. Valid options: {valid}")

    def __str__(self) -> str:
        return self.value


class StatusAction(str, Enum):
    """Transitions callers can request on a schedulable entity."""
    PROMOTE = "promote"
    DEMOTE = "demote"
    ARCHIVE = "archive"
    CANCEL = "cancel"


_PROMOTIONS: Dict[SchedulableStatus, SchedulableStatus] = {
    SchedulableStatus.NOT_STARTED: SchedulableStatus.PLANNED,
    SchedulableStatus.PLANNED: SchedulableStatus.IN_PROGRESS,
    SchedulableStatus.IN_PROGRESS: SchedulableStatus.IN_REVIEW,
    SchedulableStatus.IN_REVIEW: SchedulableStatus.COMPLETED,
}

_DEMOTIONS: Dict[SchedulableStatus, SchedulableStatus] = {
    SchedulableStatus.PLANNED: SchedulableStatus.NOT_STARTED,
    SchedulableStatus.IN_PROGRESS: SchedulableStatus.PLANNED,
    SchedulableStatus.IN_REVIEW: SchedulableStatus.IN_PROGRESS,
}

# Too final to cancel
NON_CANCELABLE: FrozenSet[SchedulableStatus] = frozenset({
    SchedulableStatus.COMPLETED,
    SchedulableStatus.ARCHIVED,
})


def promoted(status: SchedulableStatus) -> SchedulableStatus:
    """Next status in the forward chain, or ``status`` itself when there is none."""
    return _PROMOTIONS.get(status, status)


def demoted(status: SchedulableStatus) -> SchedulableStatus:
    """Previous status in the forward chain, or ``status`` itself when there is none."""
    return _DEMOTIONS.get(status, status)


def archived(status: SchedulableStatus) -> SchedulableStatus:
    return SchedulableStatus.ARCHIVED


def can_cancel(status: SchedulableStatus) -> bool:
    return status not in NON_CANCELABLE


def canceled(status: SchedulableStatus) -> SchedulableStatus:
    """Canceled, unless the status is Completed or Archived."""
    return SchedulableStatus.CANCELED if can_cancel(status) else status


def apply_action(status: SchedulableStatus, action: StatusAction) -> SchedulableStatus:
    """Return the status reached by applying ``action`` to ``status``."""
    transitions = {
        StatusAction.PROMOTE: promoted,
        StatusAction.DEMOTE: demoted,
        StatusAction.ARCHIVE: archived,
        StatusAction.CANCEL: canceled,
    }
    return transitions[StatusAction(action)](status)
