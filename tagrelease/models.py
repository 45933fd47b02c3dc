"""Value types flowing through the release note pipeline."""

from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class Commit(BaseModel):
    """A commit as returned by the hosting platform."""

    model_config = ConfigDict(frozen=True)

    id: str
    parent_ids: Tuple[str, ...] = ()


class ChangeRequest(BaseModel):
    """A pull request (GitHub) or merge request (GitLab).

    Identity is ``number``: two records with the same number describe the
    same change request.
    """

    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    url: str
    labels: Tuple[str, ...] = ()
    merged_at: Optional[datetime] = None

    @property
    def first_label(self) -> str:
        """Label that decides the section, empty when unlabelled."""
        return self.labels[0] if self.labels else ""


class Associated(BaseModel):
    """A commit paired with the change requests found for it."""

    model_config = ConfigDict(frozen=True)

    commit: Commit
    requests: Tuple[ChangeRequest, ...] = ()


class ReleaseNotes(BaseModel):
    """Title and rendered body of a release."""

    model_config = ConfigDict(frozen=True)

    title: str
    body: str
