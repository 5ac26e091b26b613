"""Extract semantic-version-like release tags from free-form text."""

import re

# Tried in order; the first pattern that matches anywhere wins.
TAG_PATTERNS = (
    re.compile(r"v[0-9]+\.[0-9]+\.[0-9]+rc[0-9]+"),
    re.compile(r"v[0-9]+\.[0-9]+\.[0-9]+p[0-9]+"),
    re.compile(r"v[0-9]+\.[0-9]+\.[0-9]+"),
)


def extract_release_tag(text: str) -> str | None:
    """Return the release tag in text (rc form, then p form, then bare), or None.

    Example: "@daebot proceed to release-v0.1.0rc2" -> "v0.1.0rc2".
    """
    for pattern in TAG_PATTERNS:
        match = pattern.search(text or "")
        if match:
            return match.group(0)
    return None


def is_prerelease(tag: str) -> bool:
    """Release candidates are published as pre-releases."""
    return "rc" in tag
