"""GitLab integration."""

from .client import GitLabClient

__all__ = ["GitLabClient"]
