"""GitHub API adapter."""

import base64
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List
from urllib.parse import quote

import requests

from daebot.adapters.base import GitPlatformAdapter, GitPlatformError
from daebot.models import PR, Comment, Commit, Comparison, FileContent, WorkflowRun


@contextmanager
def _parsing(what: str) -> Iterator[None]:
    """Turn a malformed 2xx body (bad JSON, missing keys) into GitPlatformError."""
    try:
        yield
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise GitPlatformError(f"malformed {what} response: {type(e).__name__}: {e}") from e


def _parse_iso(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _commit_from_api(data: Dict[str, Any]) -> Commit:
    committer = (data.get("commit") or {}).get("committer") or {}
    date = committer.get("date")
    return Commit(
        sha=data["sha"],
        committer_name=committer.get("name") or "",
        committer_date=_parse_iso(date) if date else None,
    )


def _pr_from_api(data: Dict[str, Any]) -> PR:
    head = data.get("head") or {}
    base = data.get("base") or {}
    return PR(
        number=data["number"],
        title=data.get("title") or "",
        html_url=data.get("html_url"),
        head_branch=head.get("ref", ""),
        base_branch=base.get("ref", ""),
    )


def _comment_from_api(data: Dict[str, Any]) -> Comment:
    return Comment(
        id=data["id"],
        body=data.get("body") or "",
        html_url=data.get("html_url"),
    )


def _run_from_api(data: Dict[str, Any]) -> WorkflowRun:
    return WorkflowRun(
        id=data["id"],
        html_url=data.get("html_url") or "",
        status=data.get("status"),
    )


class GitHubAdapter(GitPlatformAdapter):
    """GitHub API implementation."""

    def __init__(self, token: str, api_url: str = "https://api.github.com") -> None:
        self._api_url = api_url.rstrip("/")
        self._session = requests.Session()
        if token:
            self._session.headers["Authorization"] = f"token {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
        json: Dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        try:
            resp = self._session.request(method, url, params=params, json=json, timeout=30)
        except requests.RequestException as e:
            raise GitPlatformError(f"{method} {path}: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                msg = resp.json().get("message", msg)
            except ValueError:
                pass
            raise GitPlatformError(f"{resp.status_code}: {msg}")
        return resp

    def get_commit(self, repo: str, ref: str) -> Commit:
        resp = self._request("GET", f"/repos/{repo}/commits/{quote(ref, safe='')}")
        with _parsing("commit"):
            return _commit_from_api(resp.json())

    def compare_commits(self, repo: str, base: str, head: str) -> Comparison:
        basehead = f"{quote(base, safe='')}...{quote(head, safe='')}"
        resp = self._request("GET", f"/repos/{repo}/compare/{basehead}")
        with _parsing("compare"):
            data = resp.json()
            return Comparison(
                status=data["status"],
                merge_base_commit=_commit_from_api(data["merge_base_commit"]),
                ahead_by=data.get("ahead_by", 0),
                behind_by=data.get("behind_by", 0),
            )

    def create_ref(self, repo: str, ref: str, sha: str) -> None:
        self._request("POST", f"/repos/{repo}/git/refs", json={"ref": ref, "sha": sha})

    def delete_ref(self, repo: str, ref: str) -> None:
        self._request("DELETE", f"/repos/{repo}/git/refs/{ref}")

    def get_file(self, repo: str, path: str, ref: str | None = None) -> FileContent:
        params = {"ref": ref} if ref else None
        resp = self._request("GET", f"/repos/{repo}/contents/{path}", params=params)
        with _parsing("contents"):
            data = resp.json()
            raw = base64.b64decode(data.get("content") or "")
            return FileContent(path=data.get("path", path), sha=data["sha"], content=raw.decode("utf-8"))

    def update_file(
        self,
        repo: str,
        path: str,
        content: str,
        sha: str,
        branch: str,
        message: str,
        committer: Dict[str, str] | None = None,
    ) -> None:
        body: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "sha": sha,
            "branch": branch,
        }
        if committer:
            body["committer"] = committer
            body["author"] = committer
        self._request("PUT", f"/repos/{repo}/contents/{path}", json=body)

    def create_pr(self, repo: str, title: str, body: str, head: str, base: str) -> PR:
        resp = self._request(
            "POST",
            f"/repos/{repo}/pulls",
            json={"title": title, "body": body, "head": head, "base": base},
        )
        with _parsing("pull request"):
            return _pr_from_api(resp.json())

    def merge_branches(self, repo: str, base: str, head: str) -> str | None:
        resp = self._request("POST", f"/repos/{repo}/merges", json={"base": base, "head": head})
        if resp.status_code == 204:
            return None
        with _parsing("merge"):
            return resp.json().get("sha")

    def add_labels(self, repo: str, issue_number: int, labels: List[str]) -> None:
        self._request("POST", f"/repos/{repo}/issues/{issue_number}/labels", json={"labels": labels})

    def add_assignees(self, repo: str, issue_number: int, assignees: List[str]) -> None:
        self._request(
            "POST",
            f"/repos/{repo}/issues/{issue_number}/assignees",
            json={"assignees": assignees},
        )

    def request_reviewers(
        self,
        repo: str,
        pr_number: int,
        reviewers: List[str] | None = None,
        team_reviewers: List[str] | None = None,
    ) -> None:
        body: Dict[str, Any] = {}
        if reviewers:
            body["reviewers"] = reviewers
        if team_reviewers:
            body["team_reviewers"] = team_reviewers
        self._request("POST", f"/repos/{repo}/pulls/{pr_number}/requested_reviewers", json=body)

    def create_review(self, repo: str, pr_number: int, body: str, commit_id: str, event: str) -> None:
        self._request(
            "POST",
            f"/repos/{repo}/pulls/{pr_number}/reviews",
            json={"body": body, "commit_id": commit_id, "event": event},
        )

    def create_workflow_dispatch(
        self,
        repo: str,
        workflow_id: str,
        ref: str,
        inputs: Dict[str, str] | None = None,
    ) -> None:
        self._request(
            "POST",
            f"/repos/{repo}/actions/workflows/{workflow_id}/dispatches",
            json={"ref": ref, "inputs": inputs or {}},
        )

    def list_workflow_runs(self, repo: str, workflow_id: str, per_page: int = 1) -> List[WorkflowRun]:
        resp = self._request(
            "GET",
            f"/repos/{repo}/actions/workflows/{workflow_id}/runs",
            params={"per_page": per_page},
        )
        with _parsing("workflow runs"):
            data = resp.json() or {}
            return [_run_from_api(d) for d in data.get("workflow_runs") or []]

    def list_issue_labels(self, repo: str, issue_number: int) -> List[str]:
        resp = self._request("GET", f"/repos/{repo}/issues/{issue_number}/labels")
        with _parsing("labels"):
            data = resp.json() or []
            return [lb["name"] for lb in data if isinstance(lb, dict) and "name" in lb]

    def create_comment(self, repo: str, issue_number: int, body: str) -> Comment:
        resp = self._request("POST", f"/repos/{repo}/issues/{issue_number}/comments", json={"body": body})
        with _parsing("comment"):
            return _comment_from_api(resp.json())
