"""Pure helpers: release tags, PR title labels, branch sync decision, changelog splicing."""

from daebot.utils.branch_sync import (
    DurationError,
    SyncDecision,
    decide_branch_sync,
    parse_max_age,
)
from daebot.utils.changelog import (
    ChangelogError,
    ReleaseMetadata,
    release_date,
    release_notes_from_issue,
    splice_changelog,
)
from daebot.utils.pr_labels import classify_pr_title, is_testable, labels_for_pr, parse_pr_type, requires_testing
from daebot.utils.release_tag import extract_release_tag, is_prerelease

__all__ = [
    "ChangelogError",
    "DurationError",
    "ReleaseMetadata",
    "SyncDecision",
    "classify_pr_title",
    "decide_branch_sync",
    "extract_release_tag",
    "is_prerelease",
    "is_testable",
    "labels_for_pr",
    "parse_max_age",
    "parse_pr_type",
    "release_date",
    "release_notes_from_issue",
    "requires_testing",
    "splice_changelog",
]
