"""Errors raised while generating or publishing release notes."""

from typing import Optional, Sequence


class ReleaseNotesError(Exception):
    """Base class for every failure that aborts a run."""


class SameCommit(ReleaseNotesError):
    """Start and boundary point at the same commit."""

    def __init__(self, commit_id: str):
        self.commit_id = commit_id
        super().__init__(f"start and boundary are the same commit {commit_id}, changelog would be empty")


class NonLinearHistory(ReleaseNotesError):
    """A commit in range does not have exactly one parent."""

    def __init__(self, commit_id: str, parent_ids: Sequence[str]):
        self.commit_id = commit_id
        self.parent_ids = tuple(parent_ids)
        super().__init__(
            f"expected commit {commit_id} to have a single parent, found: {list(self.parent_ids)}"
        )


class BoundaryUnreachable(ReleaseNotesError):
    """The walk ran out of parents before reaching the boundary commit."""

    def __init__(self, boundary_id: str, last_commit_id: str):
        self.boundary_id = boundary_id
        self.last_commit_id = last_commit_id
        super().__init__(
            f"boundary commit {boundary_id} was not reached, history ends at {last_commit_id}; "
            f"is the previous tag an ancestor of the new one?"
        )


class AssociationLookupFailed(ReleaseNotesError):
    """Looking up the change requests of a commit failed."""

    def __init__(self, commit_id: str, cause: Optional[BaseException] = None):
        self.commit_id = commit_id
        message = f"could not look up change requests for commit {commit_id}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class PlatformError(ReleaseNotesError):
    """A call to the hosting platform failed."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        message = f"{operation} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ConfigError(ReleaseNotesError):
    """The configuration module could not be loaded or is invalid."""
