"""Repository reference derived from a webhook payload."""

from pydantic import BaseModel, ConfigDict


class RepositoryRef(BaseModel):
    """Owner (organization) and name of the repository an event belongs to."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"
