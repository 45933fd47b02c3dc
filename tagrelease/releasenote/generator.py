"""Release note generation between two tags."""

import logging

from ..config.changelog import UNCLASSIFIED, Configuration
from ..models import ReleaseNotes
from .association import ABUSE_LIMIT_BATCH_SIZE, dedupe, resolve
from .grouping import classify, sort_groups
from .history import walk
from .protocol import ReleaseClient
from .render import render

logger = logging.getLogger(__name__)


def generate(client: ReleaseClient, start_tag: str, boundary_tag: str, config: Configuration,
             batch_size: int = ABUSE_LIMIT_BATCH_SIZE) -> ReleaseNotes:
    """Generate the changelog for the changes between two tags.

    Args:
        client: Platform client
        start_tag: The new tag, its commit is the first in range
        boundary_tag: The previous tag, its commit is excluded
        config: Merged configuration
        batch_size: Maximum number of concurrent change request lookups

    Returns:
        Release title and rendered body
    """
    title = config.title or start_tag

    start_commit_id = client.resolve_tag_to_commit(start_tag)
    boundary_commit_id = client.resolve_tag_to_commit(boundary_tag)
    if start_commit_id == boundary_commit_id:
        logger.warning(f"Tags {start_tag} and {boundary_tag} point at the same commit {start_commit_id}")
        return ReleaseNotes(title=title, body=config.no_changes_message)

    commits = walk(client, start_commit_id, boundary_commit_id)
    logger.info(f"Found {len(commits)} commits between {boundary_tag} and {start_tag}")

    requests = dedupe(resolve(client, commits, batch_size))
    logger.info(f"Found {len(requests)} unique change requests")

    grouped = sort_groups(classify(requests, config.sections))
    unclassified = grouped.get(UNCLASSIFIED, ())
    if unclassified:
        numbers = ", ".join(f"#{r.number}" for r in unclassified)
        logger.info(f"Leaving out {len(unclassified)} change requests that match no section: {numbers}")

    return ReleaseNotes(title=title, body=render(config, grouped))


def publish(client: ReleaseClient, tag_name: str, notes: ReleaseNotes, config: Configuration) -> None:
    """Create the release for tag_name. Existing releases are left untouched."""
    logger.info(f"Publishing release {notes.title!r} for tag {tag_name} "
                f"(draft={config.draft}, prerelease={config.prerelease})")
    client.publish_release(tag_name, notes.title, notes.body, config.draft, config.prerelease)
