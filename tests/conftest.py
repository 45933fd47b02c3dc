import threading
import time
from datetime import datetime, timezone

import pytest

from tagrelease.config import DEFAULTS, merge
from tagrelease.models import ChangeRequest, Commit


def ts(day):
    return datetime(2024, 1, day, tzinfo=timezone.utc)


def pr(number, title=None, labels=(), merged_at=None):
    return ChangeRequest(
        number=number,
        title=title or f"Change {number}",
        url=f"https://example.com/pulls/{number}",
        labels=tuple(labels),
        merged_at=merged_at,
    )


class FakeClient:
    """In-memory platform with a configurable commit graph."""

    def __init__(self, parents=None, tags=None, requests=None, lookup_delay=0.0):
        self.parents = parents or {}
        self.tags = tags or {}
        self.requests = requests or {}
        self.lookup_delay = lookup_delay
        self.failing = set()

        self.fetched = []
        self.looked_up = []
        self.published = []
        self.events = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    @classmethod
    def linear(cls, count, **kwargs):
        """Chain c0 <- c1 <- ... <- c{count}; tag v1 on c0, v2 on the tip."""
        parents = {"c0": ()}
        for i in range(1, count + 1):
            parents[f"c{i}"] = (f"c{i - 1}",)
        tags = {"v1": "c0", "v2": f"c{count}"}
        return cls(parents=parents, tags=tags, **kwargs)

    def resolve_tag_to_commit(self, tag_name):
        return self.tags[tag_name]

    def fetch_commit(self, commit_id):
        self.fetched.append(commit_id)
        return Commit(id=commit_id, parent_ids=tuple(self.parents[commit_id]))

    def find_requests_for_commit(self, commit_id):
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            self.events.append(("start", commit_id))
        try:
            if self.lookup_delay:
                time.sleep(self.lookup_delay)
            if commit_id in self.failing:
                raise RuntimeError(f"lookup of {commit_id} exploded")
            self.looked_up.append(commit_id)
            return list(self.requests.get(commit_id, []))
        finally:
            with self._lock:
                self.in_flight -= 1
                self.events.append(("end", commit_id))

    def publish_release(self, tag_name, title, body, draft, prerelease):
        self.published.append((tag_name, title, body, draft, prerelease))


@pytest.fixture
def config():
    return merge(DEFAULTS, {}, {})


@pytest.fixture
def scenario_config():
    return merge(DEFAULTS, {
        "sections": [
            {"title": "Features", "labels": ["feat"]},
            {"title": "Fixes", "labels": ["bug"]},
        ],
        "header": "",
    }, {})
