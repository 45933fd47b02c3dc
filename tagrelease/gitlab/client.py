"""GitLab client wrapper using python-gitlab library."""

import logging
from typing import Any, Dict, List, Optional

import gitlab
from dateutil.parser import isoparse
from gitlab.v4.objects import Project

from ..config import Settings
from ..errors import PlatformError
from ..models import ChangeRequest, Commit


class GitLabClient:
    """Release client for a GitLab project.

    Merge requests play the part of change requests: ``iid`` is the number
    and ``web_url`` the link.
    """

    def __init__(self, settings: Settings, owner: str, repo: str,
                 logger: Optional[logging.Logger] = None):
        """Initialize GitLab client.

        Args:
            settings: Connection settings
            owner: Group or user namespace of the project
            repo: Project name
            logger: Logger instance
        """
        self.settings = settings
        self.project_path = f"{owner}/{repo}"
        self.logger = logger or logging.getLogger(__name__)

        self.gl = gitlab.Gitlab(
            url=settings.api_host,
            private_token=settings.token,
            timeout=300
        )

        self._project: Optional[Project] = None

    def _get_project(self) -> Project:
        """Get project instance with caching."""
        if self._project is None:
            try:
                self._project = self.gl.projects.get(self.project_path)
            except gitlab.GitlabError as e:
                raise PlatformError(f"get project {self.project_path}", e) from e
        return self._project

    def resolve_tag_to_commit(self, tag_name: str) -> str:
        """Return the id of the commit a tag points at."""
        proj = self._get_project()
        try:
            tag = proj.tags.get(tag_name)
        except gitlab.GitlabError as e:
            raise PlatformError(f"get tag {tag_name}", e) from e
        return tag.commit['id']

    def fetch_commit(self, commit_id: str) -> Commit:
        """Get commit by ID."""
        proj = self._get_project()
        try:
            commit = proj.commits.get(commit_id)
        except gitlab.GitlabError as e:
            raise PlatformError(f"get commit {commit_id}", e) from e
        return Commit(id=commit.id, parent_ids=tuple(commit.parent_ids or ()))

    def find_requests_for_commit(self, commit_id: str) -> List[ChangeRequest]:
        """List the merge requests that introduced a commit."""
        proj = self._get_project()
        try:
            mrs = proj.commits.get(commit_id, lazy=True).merge_requests(get_all=True)
        except gitlab.GitlabError as e:
            raise PlatformError(f"list merge requests for commit {commit_id}", e) from e
        return [self._to_change_request(mr) for mr in mrs]

    def publish_release(self, tag_name: str, title: str, body: str,
                        draft: bool, prerelease: bool) -> None:
        """Create a release for an existing tag.

        GitLab releases have neither a draft nor a pre-release state, the
        flags are reported and otherwise ignored.
        """
        if draft or prerelease:
            self.logger.warning(
                f"GitLab does not support draft or pre-release releases, "
                f"publishing {tag_name} as a regular release"
            )

        proj = self._get_project()
        try:
            proj.releases.create({
                'tag_name': tag_name,
                'name': title,
                'description': body,
            })
        except gitlab.GitlabError as e:
            raise PlatformError(f"create release for tag {tag_name}", e) from e

    @staticmethod
    def _to_change_request(mr: Dict[str, Any]) -> ChangeRequest:
        return ChangeRequest(
            number=mr['iid'],
            title=mr['title'],
            url=mr['web_url'],
            labels=tuple(mr.get('labels') or ()),
            merged_at=isoparse(mr['merged_at']) if mr.get('merged_at') else None,
        )
