"""Tests for the job lifecycle policy."""

import pytest

from gigboard.jobs import policy
from gigboard.jobs.policy import VALID_JOB_TRANSITIONS, DecisionKind, validate
from gigboard.types import JobStatus, UserRole


class TestTransitionTable:
    """The transition table itself."""

    def test_edges(self):
        assert VALID_JOB_TRANSITIONS[JobStatus.OPEN] == {JobStatus.ACCEPTED, JobStatus.CANCELLED}
        assert VALID_JOB_TRANSITIONS[JobStatus.ACCEPTED] == {JobStatus.IN_PROGRESS}
        assert VALID_JOB_TRANSITIONS[JobStatus.IN_PROGRESS] == {JobStatus.COMPLETED}

    @pytest.mark.parametrize("status", [JobStatus.COMPLETED, JobStatus.CANCELLED])
    def test_terminal_statuses_have_no_exits(self, status):
        assert VALID_JOB_TRANSITIONS[status] == frozenset()
        assert policy.is_terminal(status)

    def test_accepted_cannot_be_cancelled(self):
        assert not policy.can_transition("accepted", "cancelled")

    def test_no_skipping_steps(self):
        assert not policy.can_transition("open", "in_progress")
        assert not policy.can_transition("accepted", "completed")
        assert not policy.can_transition("in_progress", "open")

    def test_unknown_status_has_no_targets(self):
        assert policy.allowed_targets("paused") == frozenset()
        assert not policy.can_transition("open", "paused")


class TestValidate:
    """Decisions for each actor."""

    def test_worker_accepts_open_job(self):
        decision = validate("open", "accepted", "worker", is_actor_employer_of_job=False)
        assert decision.allowed
        assert decision

    def test_employer_cannot_accept(self):
        decision = validate("open", "accepted", UserRole.EMPLOYER, is_actor_employer_of_job=False)
        assert decision.kind == DecisionKind.FORBIDDEN
        assert "Only workers" in decision.reason

    def test_cannot_accept_own_job(self):
        decision = validate("open", "accepted", "worker", is_actor_employer_of_job=True)
        assert decision.kind == DecisionKind.FORBIDDEN
        assert "own job" in decision.reason

    def test_owner_cancels_open_job(self):
        assert validate("open", "cancelled", "employer", is_actor_employer_of_job=True)

    def test_other_employer_cannot_cancel(self):
        decision = validate("open", "cancelled", "employer", is_actor_employer_of_job=False)
        assert decision.kind == DecisionKind.FORBIDDEN

    def test_worker_cannot_start_job(self):
        decision = validate(
            "accepted",
            "in_progress",
            "worker",
            is_actor_employer_of_job=False,
            is_actor_assigned_worker=True,
        )
        assert decision.kind == DecisionKind.FORBIDDEN

    @pytest.mark.parametrize(
        "current,target",
        [("open", "cancelled"), ("accepted", "in_progress"), ("in_progress", "completed")],
    )
    def test_assigned_worker_flag_changes_nothing(self, current, target):
        for role in ("worker", "employer"):
            with_flag = validate(current, target, role, False, is_actor_assigned_worker=True)
            without = validate(current, target, role, False, is_actor_assigned_worker=False)
            assert with_flag == without

    def test_owner_walks_the_lifecycle(self):
        assert validate("accepted", "in_progress", "employer", is_actor_employer_of_job=True)
        assert validate("in_progress", "completed", "employer", is_actor_employer_of_job=True)

    @pytest.mark.parametrize(
        "role,is_owner,is_worker",
        [
            ("employer", True, False),
            ("employer", False, False),
            ("worker", False, True),
            ("worker", False, False),
        ],
    )
    def test_completed_to_open_is_illegal_for_everyone(self, role, is_owner, is_worker):
        decision = validate("completed", "open", role, is_owner, is_worker)
        assert decision.kind == DecisionKind.ILLEGAL_TRANSITION
        assert "completed" in decision.reason

    def test_missing_edge_checked_before_actor(self):
        # A worker asking for an edge that doesn't exist learns it's illegal,
        # not that they lack permission.
        decision = validate("accepted", "cancelled", "worker", is_actor_employer_of_job=False)
        assert decision.kind == DecisionKind.ILLEGAL_TRANSITION

    def test_unknown_status_is_illegal(self):
        decision = validate("open", "archived", "employer", is_actor_employer_of_job=True)
        assert decision.kind == DecisionKind.ILLEGAL_TRANSITION
        assert "archived" in decision.reason


class TestNextActions:
    def test_worker_on_open_job(self):
        assert policy.next_actions("open", "worker", False) == [JobStatus.ACCEPTED]

    def test_owner_on_open_job(self):
        assert policy.next_actions("open", "employer", True) == [JobStatus.CANCELLED]

    def test_stranger_employer_has_nothing(self):
        assert policy.next_actions("accepted", "employer", False) == []

    def test_terminal_job_has_nothing(self):
        assert policy.next_actions("cancelled", "employer", True) == []
