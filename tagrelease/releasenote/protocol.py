"""Operations the pipeline needs from a hosting platform."""

from typing import List, Protocol

from ..models import ChangeRequest, Commit


class ReleaseClient(Protocol):
    """Implemented by the GitHub and GitLab clients."""

    def resolve_tag_to_commit(self, tag_name: str) -> str:
        ...

    def fetch_commit(self, commit_id: str) -> Commit:
        ...

    def find_requests_for_commit(self, commit_id: str) -> List[ChangeRequest]:
        ...

    def publish_release(self, tag_name: str, title: str, body: str,
                        draft: bool, prerelease: bool) -> None:
        ...
