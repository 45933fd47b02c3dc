"""Walking the commit chain between two tags."""

import logging
from typing import List

from ..errors import BoundaryUnreachable, NonLinearHistory, SameCommit
from ..models import Commit
from .protocol import ReleaseClient

logger = logging.getLogger(__name__)


def walk(client: ReleaseClient, start_commit_id: str, boundary_commit_id: str) -> List[Commit]:
    """Collect the commits from start back to (but excluding) the boundary.

    History must be linear: every visited commit needs exactly one parent.
    Merge commits are rejected instead of silently following one parent,
    which would drop changes from the changelog.

    Args:
        client: Platform client used to fetch each commit
        start_commit_id: Commit of the new tag, included in the result
        boundary_commit_id: Commit of the previous tag, excluded

    Returns:
        Commits in start -> boundary order

    Raises:
        SameCommit: start and boundary are equal
        NonLinearHistory: a commit has zero or several parents
        BoundaryUnreachable: the root was reached without meeting the boundary
    """
    if start_commit_id == boundary_commit_id:
        raise SameCommit(start_commit_id)

    commits: List[Commit] = []
    commit_id = start_commit_id
    while True:
        commit = client.fetch_commit(commit_id)
        logger.debug(f"Visited commit {commit.id}")
        commits.append(commit)

        if not commit.parent_ids:
            raise BoundaryUnreachable(boundary_commit_id, commit.id)
        if len(commit.parent_ids) != 1:
            raise NonLinearHistory(commit.id, commit.parent_ids)

        parent_id = commit.parent_ids[0]
        if parent_id == boundary_commit_id:
            logger.info(f"Reached boundary commit {boundary_commit_id} after {len(commits)} commits")
            return commits
        commit_id = parent_id
