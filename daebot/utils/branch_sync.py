"""Decide whether a PR branch should be updated with its base branch."""

from datetime import datetime, timedelta

import isodate
from pydantic import BaseModel, ConfigDict

# Committer name GitHub uses for web-flow commits (e.g. a previous auto merge)
GITHUB_COMMITTER = "GitHub"


class DurationError(ValueError):
    """Raised for an invalid ISO-8601 duration."""

    pass


class SyncDecision(BaseModel):
    """Outcome of the staleness check for one PR branch."""

    model_config = ConfigDict(frozen=True)

    age_deadline: datetime
    exceeds_age_timeout: bool
    should_sync: bool


def parse_max_age(value: str) -> timedelta | isodate.Duration:
    """Parse an ISO-8601 duration such as P1D or PT12H."""
    try:
        return isodate.parse_duration(value)
    except (isodate.ISO8601Error, ValueError, TypeError) as e:
        raise DurationError(f"invalid ISO-8601 duration {value!r}: {e}") from e


def decide_branch_sync(
    status: str,
    merge_base_date: datetime,
    pr_date: datetime,
    committer_name: str,
    max_age: timedelta | isodate.Duration,
) -> SyncDecision:
    """Pure decision over (status, merge_base_date + max_age, pr_date, committer_name).

    Only a "diverged" branch whose last commit was not made by GitHub is synced.
    The age timeout only applies to "ahead" branches, so it never blocks a
    diverged one.
    """
    age_deadline = merge_base_date + max_age
    exceeds_age_timeout = age_deadline > pr_date and status == "ahead"
    should_sync = not exceeds_age_timeout and committer_name != GITHUB_COMMITTER and status == "diverged"
    return SyncDecision(
        age_deadline=age_deadline,
        exceeds_age_timeout=exceeds_age_timeout,
        should_sync=should_sync,
    )
