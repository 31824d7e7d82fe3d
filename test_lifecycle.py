"""Pure state-machine tests: block overlay and review metadata rules."""

import pytest

from mission_control import lifecycle
from mission_control.exceptions import InvalidState
from mission_control.models import Task


def make_task(**overrides) -> Task:
    fields = dict(
        title="Write report",
        description="",
        priority="P1",
        status="inbox",
        assignee_ids=[],
        created_by=None,
        reviewer_id=None,
        review_comment=None,
        reviewed_at=None,
        is_blocked=False,
        original_status=None,
        state_changed_at=0,
        created_at=0,
        updated_at=0,
    )
    fields.update(overrides)
    return Task(**fields)


@pytest.mark.parametrize("stage", ["inbox", "assigned", "in_progress", "review", "done"])
@pytest.mark.parametrize("target", ["inbox", "assigned", "in_progress", "review", "done"])
@pytest.mark.parametrize("reblocks", [1, 3])
def test_block_then_move_clears_overlay(stage, target, reblocks):
    task = make_task(status=stage)
    for _ in range(reblocks):
        lifecycle.apply_status(task, "blocked", 10)
        assert task.original_status == stage
        assert task.is_blocked is True
        assert task.status == stage

    lifecycle.apply_status(task, target, 20)

    assert task.status == target
    assert task.is_blocked is False
    assert task.original_status is None


def test_effective_status_follows_overlay():
    task = make_task(status="review")
    assert lifecycle.effective_status(task) == "review"

    old, new = lifecycle.enter_block(task, 5)
    assert (old, new) == ("review", "review")
    assert lifecycle.effective_status(task) == "review"
    assert task.effective_status == "review"


def test_reblock_reports_stage_not_sentinel():
    task = make_task(status="in_progress")
    lifecycle.apply_status(task, "blocked", 1)
    old, new = lifecycle.apply_status(task, "blocked", 2)
    assert old == new == "in_progress"
    assert task.original_status == "in_progress"


def test_legacy_blocked_status_never_captured_as_original():
    task = make_task(status="blocked")
    old, _ = lifecycle.enter_block(task, 1)
    assert task.original_status == "in_progress"
    assert old == "in_progress"


def test_block_stamps_state_changed_at():
    task = make_task(status="assigned")
    lifecycle.apply_status(task, "blocked", 42)
    assert task.state_changed_at == 42
    assert task.updated_at == 42


def test_generic_move_to_in_progress_drops_review_metadata():
    task = make_task(status="review", reviewer_id="rex", review_comment="looks off", reviewed_at=7)
    lifecycle.apply_status(task, "in_progress", 9)
    assert task.reviewer_id is None
    assert task.review_comment is None
    assert task.reviewed_at is None


def test_generic_move_elsewhere_keeps_review_metadata():
    task = make_task(status="in_progress", reviewer_id="rex", review_comment="fix it", reviewed_at=7)
    lifecycle.apply_status(task, "done", 9)
    assert task.reviewer_id == "rex"
    assert task.review_comment == "fix it"


def test_reject_keeps_reviewer_note():
    task = make_task(status="review", is_blocked=True, original_status="review")
    old, new = lifecycle.reject(task, 11, "rex", "needs more work")
    assert (old, new) == ("review", "in_progress")
    assert task.reviewer_id == "rex"
    assert task.review_comment == "needs more work"
    assert task.reviewed_at == 11
    assert task.is_blocked is False
    assert task.original_status is None


def test_reject_without_reviewer_is_invalid():
    with pytest.raises(InvalidState):
        lifecycle.reject(make_task(status="review"), 1, "", "nope")


def test_approve_retains_comment_when_none_given():
    task = make_task(status="review", review_comment="ready")
    lifecycle.approve(task, 3, "rex", None)
    assert task.status == "done"
    assert task.review_comment == "ready"
    assert task.reviewed_at == 3

    lifecycle.approve(task, 4, "rex", "ship it")
    assert task.review_comment == "ship it"


def test_submit_clears_reviewed_at_and_block():
    task = make_task(status="in_progress", reviewed_at=5, is_blocked=True, original_status="in_progress")
    lifecycle.submit(task, 6, "done", None)
    assert task.status == "review"
    assert task.review_comment == "done"
    assert task.reviewed_at is None
    assert task.is_blocked is False


def test_unknown_status_is_invalid():
    with pytest.raises(InvalidState):
        lifecycle.apply_status(make_task(), "archived", 1)


def test_primary_recipient_rule():
    assert lifecycle.primary_recipient(["a", "b"], "c") == "a"
    assert lifecycle.primary_recipient([], "c") == "c"
    assert lifecycle.primary_recipient([], None) is None


def test_request_schemas_share_lifecycle_enums():
    from mission_control.schemas import agent as agent_schemas
    from mission_control.schemas import task as task_schemas

    assert task_schemas.TaskStatus is lifecycle.TaskStatus
    assert task_schemas.Priority is lifecycle.Priority
    assert agent_schemas.AgentStatus is lifecycle.AgentStatus


@pytest.mark.parametrize("status", lifecycle.TASK_STATUSES)
def test_every_lifecycle_status_is_accepted_by_requests(status):
    from mission_control.schemas.task import UpdateStatusRequest

    assert UpdateStatusRequest(status=status, updated_by="a").status == status
