import pytest

from project_tracker.domain.builders import ProjectBuilder, TaskBuilder
from project_tracker.domain.status import (
    SchedulableStatus,
    StatusAction,
    apply_action,
    archived,
    can_cancel,
    canceled,
    demoted,
    promoted,
)

S = SchedulableStatus

PROMOTE = {
    S.NOT_STARTED: S.PLANNED,
    S.PLANNED: S.IN_PROGRESS,
    S.IN_PROGRESS: S.IN_REVIEW,
    S.IN_REVIEW: S.COMPLETED,
    S.COMPLETED: S.COMPLETED,
    S.ARCHIVED: S.ARCHIVED,
    S.CANCELED: S.CANCELED,
}

DEMOTE = {
    S.NOT_STARTED: S.NOT_STARTED,
    S.PLANNED: S.NOT_STARTED,
    S.IN_PROGRESS: S.PLANNED,
    S.IN_REVIEW: S.IN_PROGRESS,
    S.COMPLETED: S.COMPLETED,
    S.ARCHIVED: S.ARCHIVED,
    S.CANCELED: S.CANCELED,
}

CANCEL = {
    S.NOT_STARTED: S.CANCELED,
    S.PLANNED: S.CANCELED,
    S.IN_PROGRESS: S.CANCELED,
    S.IN_REVIEW: S.CANCELED,
    S.COMPLETED: S.COMPLETED,
    S.ARCHIVED: S.ARCHIVED,
    S.CANCELED: S.CANCELED,
}


class TestTransitionTable:
    @pytest.mark.parametrize("start,expected", PROMOTE.items())
    def test_promote(self, start, expected):
        assert promoted(start) is expected

    @pytest.mark.parametrize("start,expected", DEMOTE.items())
    def test_demote(self, start, expected):
        assert demoted(start) is expected

    @pytest.mark.parametrize("start", list(S))
    def test_archive_from_anywhere(self, start):
        assert archived(start) is S.ARCHIVED

    @pytest.mark.parametrize("start,expected", CANCEL.items())
    def test_cancel(self, start, expected):
        assert canceled(start) is expected

    def test_can_cancel(self):
        assert can_cancel(S.IN_PROGRESS)
        assert not can_cancel(S.COMPLETED)
        assert not can_cancel(S.ARCHIVED)

    def test_apply_action(self):
        assert apply_action(S.PLANNED, StatusAction.PROMOTE) is S.IN_PROGRESS
        assert apply_action(S.PLANNED, "demote") is S.NOT_STARTED
        with pytest.raises(ValueError):
            apply_action(S.PLANNED, "explode")


class TestStatusNames:
    @pytest.mark.parametrize("raw", ["InProgress", "IN_PROGRESS", "in_progress", "in-progress", "inprogress"])
    def test_from_name_variants(self, raw):
        assert S.from_name(raw) is S.IN_PROGRESS

    def test_from_name_unknown(self):
        with pytest.raises(ValueError, match="Valid options"):
            S.from_name("Paused")

    def test_str_is_value(self):
        assert str(S.NOT_STARTED) == "NotStarted"


class TestEntityLifecycle:
    @pytest.mark.parametrize("builder_type", [ProjectBuilder, TaskBuilder])
    def test_promotion_chain(self, builder_type):
        entity = builder_type().with_name("chain").build()
        for _ in range(4):
            entity.promote()
        assert entity.status is S.COMPLETED
        entity.promote()
        assert entity.status is S.COMPLETED

    @pytest.mark.parametrize("builder_type", [ProjectBuilder, TaskBuilder])
    @pytest.mark.parametrize("terminal", [S.COMPLETED, S.ARCHIVED])
    def test_cancel_from_terminal_is_refused(self, builder_type, terminal, caplog):
        entity = builder_type().with_status(terminal).build()
        with caplog.at_level("INFO"):
            assert entity.try_cancel() is False
            entity.cancel()
        assert entity.status is terminal
        assert "cannot be canceled" in caplog.text

    @pytest.mark.parametrize("start", list(S))
    def test_archive_is_idempotent(self, start):
        project = ProjectBuilder().with_status(start).build()
        assert project.archive().status is S.ARCHIVED
        assert project.archive().status is S.ARCHIVED

    def test_demote_then_promote(self):
        task = TaskBuilder().with_status(S.IN_REVIEW).build()
        assert task.demote().demote().status is S.PLANNED
        assert task.promote().status is S.IN_PROGRESS

    def test_cancel_returns_entity(self):
        task = TaskBuilder().build()
        assert task.cancel() is task
        assert task.status is S.CANCELED
