"""Job lifecycle policy.

Pure decision logic over an explicit transition table. Given a job's current
status, the requested status and who is asking, decide whether the change is
allowed. Holds no state; all state lives on the Job.

    open --(worker)--> accepted --(employer)--> in_progress --(employer)--> completed
      \\
       `--(employer)--> cancelled

``completed`` and ``cancelled`` are terminal. A job cannot be cancelled once
it has been accepted, and a worker cannot back out after accepting.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

from gigboard.types import TERMINAL_STATUSES, JobStatus, UserRole


class Actor(str, Enum):
    """Who may perform a transition, relative to the job."""

    # Any worker who is not the job's employer
    WORKER = "worker"
    # The employer who owns the job
    OWNING_EMPLOYER = "owning_employer"


@dataclass(frozen=True)
class Rule:
    """One row of the transition table."""

    from_status: JobStatus
    to_status: JobStatus
    actor: Actor


TRANSITION_RULES: Tuple[Rule, ...] = (
    Rule(JobStatus.OPEN, JobStatus.ACCEPTED, Actor.WORKER),
    Rule(JobStatus.OPEN, JobStatus.CANCELLED, Actor.OWNING_EMPLOYER),
    Rule(JobStatus.ACCEPTED, JobStatus.IN_PROGRESS, Actor.OWNING_EMPLOYER),
    Rule(JobStatus.IN_PROGRESS, JobStatus.COMPLETED, Actor.OWNING_EMPLOYER),
)

_RULES_BY_EDGE: Dict[Tuple[JobStatus, JobStatus], Rule] = {
    (r.from_status, r.to_status): r for r in TRANSITION_RULES
}

VALID_JOB_TRANSITIONS: Dict[JobStatus, FrozenSet[JobStatus]] = {
    status: frozenset(r.to_status for r in TRANSITION_RULES if r.from_status == status)
    for status in JobStatus
}


class DecisionKind(str, Enum):
    ALLOWED = "allowed"
    # The (from, to) edge does not exist
    ILLEGAL_TRANSITION = "illegal_transition"
    # The edge exists but the caller is not the party allowed to take it
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy check."""

    kind: DecisionKind
    reason: str = ""

    @property
    def allowed(self) -> bool:
        return self.kind == DecisionKind.ALLOWED

    def __bool__(self) -> bool:
        return self.allowed


ALLOWED = Decision(DecisionKind.ALLOWED)

StatusLike = Union[JobStatus, str]


def _status(value: StatusLike) -> Optional[JobStatus]:
    try:
        return JobStatus(value)
    except ValueError:
        return None


def validate(
    current_status: StatusLike,
    requested_status: StatusLike,
    actor_role: Union[UserRole, str],
    is_actor_employer_of_job: bool,
    is_actor_assigned_worker: bool = False,
) -> Decision:
    """Decide whether ``actor`` may move a job from one status to another.

    Args:
        current_status: The job's status now
        requested_status: The status the caller asks for
        actor_role: The caller's verified role
        is_actor_employer_of_job: Caller owns the job
        is_actor_assigned_worker: Caller is the job's assigned worker. No rule
            in the table reads it yet; the assigned worker never moves a job
            after accepting.

    Returns:
        A Decision. Never raises.
    """
    current = _status(current_status)
    requested = _status(requested_status)
    if current is None or requested is None:
        return Decision(
            DecisionKind.ILLEGAL_TRANSITION,
            f"Unknown status: {current_status if current is None else requested_status}",
        )

    rule = _RULES_BY_EDGE.get((current, requested))
    if rule is None:
        if current in TERMINAL_STATUSES:
            reason = f"Job is {current.value} and cannot change status"
        else:
            reason = f"Cannot move job from {current.value} to {requested.value}"
        return Decision(DecisionKind.ILLEGAL_TRANSITION, reason)

    role = actor_role.value if isinstance(actor_role, UserRole) else actor_role

    if rule.actor == Actor.WORKER:
        if role != UserRole.WORKER.value:
            return Decision(DecisionKind.FORBIDDEN, "Only workers can accept jobs")
        if is_actor_employer_of_job:
            return Decision(DecisionKind.FORBIDDEN, "Cannot accept your own job")
        return ALLOWED

    if role != UserRole.EMPLOYER.value or not is_actor_employer_of_job:
        return Decision(
            DecisionKind.FORBIDDEN,
            f"Only the job's employer can move it to {requested.value}",
        )
    return ALLOWED


def allowed_targets(status: StatusLike) -> FrozenSet[JobStatus]:
    """Statuses reachable from ``status`` by anyone."""
    current = _status(status)
    if current is None:
        return frozenset()
    return VALID_JOB_TRANSITIONS[current]


def can_transition(from_status: StatusLike, to_status: StatusLike) -> bool:
    """Check whether the (from, to) edge exists, ignoring who asks."""
    target = _status(to_status)
    return target is not None and target in allowed_targets(from_status)


def is_terminal(status: StatusLike) -> bool:
    current = _status(status)
    return current in TERMINAL_STATUSES


def next_actions(
    status: StatusLike,
    actor_role: Union[UserRole, str],
    is_actor_employer_of_job: bool,
    is_actor_assigned_worker: bool = False,
) -> List[JobStatus]:
    """Statuses the given caller could move a job to right now."""
    return [
        target
        for target in sorted(allowed_targets(status), key=lambda s: list(JobStatus).index(s))
        if validate(status, target, actor_role, is_actor_employer_of_job, is_actor_assigned_worker)
    ]
