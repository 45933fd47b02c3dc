"""GitHub REST API client built on requests."""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from dateutil.parser import isoparse

from ..config import Settings
from ..errors import PlatformError
from ..models import ChangeRequest, Commit

API_VERSION = "2022-11-28"

# Annotated tags can point at other tags; give up after this many hops.
MAX_TAG_DEREFERENCES = 5


class GitHubClient:
    """Release client for a GitHub repository.

    Pull requests play the part of change requests.
    """

    def __init__(self, settings: Settings, owner: str, repo: str,
                 logger: Optional[logging.Logger] = None,
                 session: Optional[requests.Session] = None,
                 timeout: float = 30):
        """Initialize GitHub client.

        Args:
            settings: Connection settings
            owner: Repository owner
            repo: Repository name
            logger: Logger instance
            session: Session to send requests with
            timeout: Per request timeout in seconds
        """
        self.settings = settings
        self.owner = owner
        self.repo = repo
        self.logger = logger or logging.getLogger(__name__)
        self.timeout = timeout

        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': API_VERSION,
        })
        if settings.token:
            self.session.headers['Authorization'] = f"Bearer {settings.token}"

        self.base_url = f"{settings.api_host}/repos/{quote(owner)}/{quote(repo)}"

    def _request(self, operation: str, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        self.logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise PlatformError(operation, e) from e

    def resolve_tag_to_commit(self, tag_name: str) -> str:
        """Return the id of the commit a tag points at.

        Annotated tags are followed until a commit is reached.
        """
        ref = self._request(f"get tag {tag_name}", "GET", f"/git/ref/tags/{quote(tag_name)}")
        target = ref['object']

        for _ in range(MAX_TAG_DEREFERENCES):
            if target['type'] != 'tag':
                break
            tag = self._request(f"get annotated tag {target['sha']}", "GET", f"/git/tags/{target['sha']}")
            target = tag['object']

        if target['type'] != 'commit':
            raise PlatformError(f"get tag {tag_name}",
                                ValueError(f"tag points at a {target['type']}, not a commit"))
        return target['sha']

    def fetch_commit(self, commit_id: str) -> Commit:
        """Get commit by ID."""
        data = self._request(f"get commit {commit_id}", "GET", f"/git/commits/{commit_id}")
        return Commit(id=data['sha'], parent_ids=tuple(p['sha'] for p in data.get('parents', [])))

    def find_requests_for_commit(self, commit_id: str) -> List[ChangeRequest]:
        """List the pull requests associated with a commit."""
        pulls = self._request(f"list pull requests for commit {commit_id}", "GET",
                              f"/commits/{commit_id}/pulls", params={'per_page': 100})
        return [self._to_change_request(pr) for pr in pulls]

    def publish_release(self, tag_name: str, title: str, body: str,
                        draft: bool, prerelease: bool) -> None:
        """Create a release for a tag."""
        release = self._request(f"create release for tag {tag_name}", "POST", "/releases", json={
            'tag_name': tag_name,
            'name': title,
            'body': body,
            'draft': draft,
            'prerelease': prerelease,
        })
        self.logger.info(f"Created release {release.get('html_url', tag_name)}")

    @staticmethod
    def _to_change_request(pr: Dict[str, Any]) -> ChangeRequest:
        return ChangeRequest(
            number=pr['number'],
            title=pr['title'],
            url=pr['html_url'],
            labels=tuple(label['name'] for label in pr.get('labels') or () if label.get('name')),
            merged_at=isoparse(pr['merged_at']) if pr.get('merged_at') else None,
        )
