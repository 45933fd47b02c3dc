"""Classifying change requests into sections and ordering each section."""

from datetime import datetime
from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence, Tuple

from ..config.changelog import UNCLASSIFIED, Section
from ..models import ChangeRequest

Grouping = Mapping[str, Tuple[ChangeRequest, ...]]


def classify_one(request: ChangeRequest, sections: Sequence[Section]) -> str:
    """Return the group key of a single change request.

    Only the first label counts. Sections are tried in declaration order and
    the first one listing that label wins; with no match the request goes to
    the unclassified group.
    """
    label = request.first_label
    for section in sections:
        if label in section.labels:
            return section.title
    return UNCLASSIFIED


def classify(requests: Sequence[ChangeRequest], sections: Sequence[Section]) -> Grouping:
    """Group change requests by section title.

    Every request lands in exactly one group. Groups keep the order in which
    their requests arrived; the returned mapping is read-only.
    """
    groups: Dict[str, List[ChangeRequest]] = {}
    for request in requests:
        groups.setdefault(classify_one(request, sections), []).append(request)
    return MappingProxyType({key: tuple(members) for key, members in groups.items()})


def sort_group(requests: Sequence[ChangeRequest]) -> Tuple[ChangeRequest, ...]:
    """Order requests most recently merged first.

    Requests without a merge timestamp go last. The sort is stable, so
    requests with equal or missing timestamps keep their incoming order.
    """
    merged = [r for r in requests if r.merged_at is not None]
    unmerged = [r for r in requests if r.merged_at is None]
    merged.sort(key=_merged_at, reverse=True)
    return tuple(merged + unmerged)


def sort_groups(grouping: Grouping) -> Grouping:
    """Apply sort_group to each group independently."""
    return MappingProxyType({key: sort_group(members) for key, members in grouping.items()})


def _merged_at(request: ChangeRequest) -> datetime:
    return request.merged_at
