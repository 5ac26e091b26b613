"""Classify pull request titles by their conventional-commit type.

"fix(core): memory leak" -> type "fix" -> label "fix";
"docs: update README" -> label "documentation".
"""

import re
from typing import List

TYPE_RE = re.compile(r"^(?P<type>\w+)(\([^)]*\))?:")

# type token -> label, in priority order
LABEL_BY_TYPE = {
    "fix": "fix",
    "feat": "feature",
    "feature": "feature",
    "patch": "patch",
    "ci": "ci",
    "optimize": "optimize",
    "chore": "chore",
    "refactor": "refactor",
    "style": "style",
    "doc": "documentation",
    "docs": "documentation",
    "fixture": "fixture",
}

# Kinds that change behaviour and must be tested before merge
STRICT_TYPES = frozenset(["fix", "feat", "feature", "patch", "ci", "optimize", "chore", "refactor"])

# Kinds a "tested" label can approve
TESTABLE_TYPES = frozenset(["fix", "hotfix", "feat", "feature", "patch", "ci", "optimize", "chore", "refactor"])

NOT_YET_TESTED = "not-yet-tested"


def parse_pr_type(title: str) -> str | None:
    """Leading type token of a title ("fix(core): x" -> "fix"), or None."""
    match = TYPE_RE.match(title or "")
    return match.group("type") if match else None


def classify_pr_title(title: str) -> str | None:
    """Label for the title's type, or None when the type is unknown."""
    pr_type = parse_pr_type(title)
    if pr_type is None:
        return None
    return LABEL_BY_TYPE.get(pr_type)


def requires_testing(title: str) -> bool:
    return parse_pr_type(title) in STRICT_TYPES


def is_testable(title: str) -> bool:
    return parse_pr_type(title) in TESTABLE_TYPES


def labels_for_pr(title: str) -> List[str]:
    """Labels to add to an unlabeled PR: the kind, plus not-yet-tested for strict kinds."""
    label = classify_pr_title(title)
    if label is None:
        return []
    labels = [label]
    if requires_testing(title):
        labels.append(NOT_YET_TESTED)
    return labels
