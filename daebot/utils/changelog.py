"""Splice a new release into CHANGELOGS.md.

The changelog carries two placeholder comments; new entries are inserted
right after them so the newest release is always on top::

    <!-- BEGIN NEW TOC ENTRY -->
    - [v0.1.0rc2 (Pre-release)](#v010rc2-pre-release)
    ...
    <!-- BEGIN NEW CHANGELOGS -->

    ### v0.1.0rc2 (Pre-release)

    > Release date: 2023/05/01

    <release notes>

Release notes are taken from the release issue body, after its own
placeholder.
"""

from pydantic import BaseModel

from daebot.utils.release_tag import is_prerelease

TOC_PLACEHOLDER = "<!-- BEGIN NEW TOC ENTRY -->"
CONTENT_PLACEHOLDER = "<!-- BEGIN NEW CHANGELOGS -->"
ISSUE_PLACEHOLDER = "<!-- BEGIN CHANGELOGS -->"


class ChangelogError(Exception):
    """Raised when a placeholder needed for splicing is missing."""

    pass


class ReleaseMetadata(BaseModel):
    """Release being drafted from an issue comment."""

    tag: str
    prerelease: bool
    md_ref_link: str
    branch: str
    date: str

    @classmethod
    def from_tag(cls, tag: str, date: str) -> "ReleaseMetadata":
        return cls(
            tag=tag,
            prerelease=is_prerelease(tag),
            md_ref_link=tag.replace(".", ""),
            branch=f"release-{tag}",
            date=date,
        )

    @property
    def kind(self) -> str:
        return "Pre-release" if self.prerelease else "Latest"

    @property
    def anchor(self) -> str:
        return f"#{self.md_ref_link}-{'pre-release' if self.prerelease else 'latest'}"


def release_date(created_at: str) -> str:
    """Comment timestamp to changelog date (2023-05-01T10:00:00Z -> 2023/05/01)."""
    return created_at.split("T")[0].replace("-", "/")


def release_notes_from_issue(body: str) -> str:
    """Text of the issue body following the changelog placeholder."""
    parts = (body or "").split(ISSUE_PLACEHOLDER)
    if len(parts) < 2:
        raise ChangelogError(f"issue body has no {ISSUE_PLACEHOLDER} placeholder")
    return parts[1]


def _splice(content: str, placeholder: str, block: str) -> str:
    if placeholder not in content:
        raise ChangelogError(f"changelog has no {placeholder} placeholder")
    # first occurrence only
    return content.replace(placeholder, block.strip(), 1)


def splice_changelog(content: str, release: ReleaseMetadata, notes: str) -> str:
    """Insert the TOC entry and the release section after their placeholders."""
    toc_entry = f"{TOC_PLACEHOLDER}\n- [{release.tag} ({release.kind})]({release.anchor})"
    section = (
        f"{CONTENT_PLACEHOLDER}\n\n"
        f"### {release.tag} ({release.kind})\n\n"
        f"> Release date: {release.date}\n\n"
        f"{notes}"
    )
    content = _splice(content, TOC_PLACEHOLDER, toc_entry)
    return _splice(content, CONTENT_PLACEHOLDER, section)
