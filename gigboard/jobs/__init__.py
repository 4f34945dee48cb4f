"""Jobs subsystem for gigboard.

Models:
- Job: A work order posted by an employer
- JobDraft: Unvalidated input for a new job
- JobFilter: Filter for the open-jobs listing
- EmployerStats: Dashboard totals

Policy:
- validate: Decide whether a status change is allowed
- VALID_JOB_TRANSITIONS: The transition table, by source status

Service:
- JobService: Job operations (list, create, accept, advance, cancel)
- JobListing: Lazy, restartable listing result
"""

from gigboard.jobs.models import EmployerStats, Job, JobDraft, JobFilter
from gigboard.jobs.policy import VALID_JOB_TRANSITIONS, Decision, DecisionKind, validate
from gigboard.jobs.service import JobListing, JobService
from gigboard.jobs.storage import InMemoryJobStorage, JobStorage, SupabaseJobStorage

__all__ = [
    # Models
    "Job",
    "JobDraft",
    "JobFilter",
    "EmployerStats",
    # Policy
    "validate",
    "Decision",
    "DecisionKind",
    "VALID_JOB_TRANSITIONS",
    # Service
    "JobService",
    "JobListing",
    # Storage
    "JobStorage",
    "InMemoryJobStorage",
    "SupabaseJobStorage",
]
