"""Delivery envelope and the payload fields shared by every GitHub event."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from daebot.models import RepositoryRef


class WebhookModel(BaseModel):
    """Payload object; unknown GitHub fields are ignored."""

    model_config = ConfigDict(extra="ignore")


class User(WebhookModel):
    login: str
    html_url: str | None = None


class Organization(WebhookModel):
    login: str


class Repository(WebhookModel):
    name: str
    full_name: str = ""
    default_branch: str = "main"
    html_url: str | None = None
    stargazers_count: int | None = None
    owner: User | None = None


class WebhookPayload(WebhookModel):
    """Fields present on every repository event."""

    action: str | None = None
    repository: Repository
    organization: Organization | None = None
    sender: User | None = None

    def repository_ref(self) -> RepositoryRef:
        """Owner is the organization, or the repository owner for user repos."""
        if self.organization is not None:
            owner = self.organization.login
        elif self.repository.owner is not None:
            owner = self.repository.owner.login
        else:
            owner = self.repository.full_name.split("/")[0]
        return RepositoryRef(owner=owner, name=self.repository.name)


class WebhookEvent(BaseModel):
    """One webhook delivery: event name, optional action and raw payload."""

    model_config = ConfigDict(frozen=True)

    name: str
    action: str | None = None
    delivery_id: str | None = None
    payload: Dict[str, Any] = Field(default_factory=dict)

    @property
    def key(self) -> str:
        """Registry key, e.g. "pull_request.opened" or "push"."""
        return f"{self.name}.{self.action}" if self.action else self.name
