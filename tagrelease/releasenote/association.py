"""Resolving commits to change requests and collapsing duplicates."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence, Set

from ..errors import AssociationLookupFailed
from ..models import Associated, ChangeRequest, Commit
from .protocol import ReleaseClient

logger = logging.getLogger(__name__)

# Upper bound on lookups in flight at once. Hosting APIs answer bursts of
# concurrent requests with secondary rate limit ("abuse") errors.
ABUSE_LIMIT_BATCH_SIZE = 10


def batched(commits: Sequence[Commit], batch_size: int) -> List[List[Commit]]:
    """Split commits into consecutive batches of at most batch_size."""
    if batch_size < 1:
        raise ValueError(f"batch size must be at least 1, got {batch_size}")
    return [list(commits[i:i + batch_size]) for i in range(0, len(commits), batch_size)]


def resolve(client: ReleaseClient, commits: Sequence[Commit],
            batch_size: int = ABUSE_LIMIT_BATCH_SIZE) -> List[Associated]:
    """Look up the change requests of every commit.

    Lookups inside a batch run concurrently; the next batch is only started
    once every lookup of the current one has finished. A single failed
    lookup fails the whole resolution.

    Args:
        client: Platform client
        commits: Commits in traversal order
        batch_size: Maximum number of concurrent lookups

    Returns:
        One Associated per commit, in the order of ``commits``

    Raises:
        AssociationLookupFailed: any lookup raised
    """
    batches = batched(commits, batch_size)
    associated: List[Associated] = []

    for number, batch in enumerate(batches, start=1):
        logger.info(f"Resolving change requests for batch {number}/{len(batches)} ({len(batch)} commits)")
        with ThreadPoolExecutor(max_workers=len(batch)) as executor:
            futures = [executor.submit(client.find_requests_for_commit, commit.id) for commit in batch]

            for commit, future in zip(batch, futures):
                try:
                    requests = future.result()
                except Exception as e:
                    raise AssociationLookupFailed(commit.id, e) from e

                if not requests:
                    logger.debug(f"No change request associated with commit {commit.id}")
                associated.append(Associated(commit=commit, requests=tuple(requests)))

    return associated


def dedupe(associated: Sequence[Associated]) -> List[ChangeRequest]:
    """Flatten the per-commit matches, keeping the first record per number."""
    seen: Set[int] = set()
    unique: List[ChangeRequest] = []
    for item in associated:
        for request in item.requests:
            if request.number in seen:
                continue
            seen.add(request.number)
            unique.append(request)
    return unique
