import pytest

from tagrelease.errors import AssociationLookupFailed
from tagrelease.models import Associated, Commit
from tagrelease.releasenote import batched, dedupe, resolve

from .conftest import FakeClient, pr


def commits(count):
    return [Commit(id=f"c{i}", parent_ids=(f"c{i - 1}",)) for i in range(count, 0, -1)]


def test_batched_sizes():
    batches = batched(commits(10), 4)

    assert [len(b) for b in batches] == [4, 4, 2]


def test_batched_rejects_zero():
    with pytest.raises(ValueError):
        batched(commits(3), 0)


def test_resolve_preserves_commit_order():
    client = FakeClient(requests={"c3": [pr(3)], "c2": [pr(2)], "c1": [pr(1)]})

    associated = resolve(client, commits(3), batch_size=2)

    assert [a.commit.id for a in associated] == ["c3", "c2", "c1"]
    assert [a.requests[0].number for a in associated] == [3, 2, 1]


def test_resolve_runs_batches_one_after_another():
    client = FakeClient(lookup_delay=0.02)
    chain = commits(10)

    resolve(client, chain, batch_size=4)

    assert client.max_in_flight <= 4
    # every lookup of a batch ends before any lookup of the next batch starts
    batches = [[c.id for c in b] for b in batched(chain, 4)]
    position = {event: i for i, event in enumerate(client.events)}
    for current, following in zip(batches, batches[1:]):
        last_end = max(position[("end", cid)] for cid in current)
        first_start = min(position[("start", cid)] for cid in following)
        assert last_end < first_start


def test_resolve_issues_lookups_concurrently_within_a_batch():
    client = FakeClient(lookup_delay=0.05)

    resolve(client, commits(4), batch_size=4)

    assert client.max_in_flight > 1


def test_resolve_keeps_commits_without_requests():
    client = FakeClient(requests={"c2": [pr(2)]})

    associated = resolve(client, commits(2))

    assert associated[1].commit.id == "c1"
    assert associated[1].requests == ()


def test_resolve_keeps_every_request_of_a_commit():
    client = FakeClient(requests={"c1": [pr(1), pr(2)]})

    associated = resolve(client, commits(1))

    assert [r.number for r in associated[0].requests] == [1, 2]


def test_resolve_failure_aborts_and_skips_later_batches():
    client = FakeClient()
    client.failing.add("c5")

    with pytest.raises(AssociationLookupFailed) as excinfo:
        resolve(client, commits(6), batch_size=2)

    assert excinfo.value.commit_id == "c5"
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    started = {cid for kind, cid in client.events if kind == "start"}
    assert started == {"c6", "c5"}


def test_resolve_empty():
    assert resolve(FakeClient(), []) == []


def test_dedupe_keeps_first_occurrence():
    seven = pr(7)
    associated = [
        Associated(commit=Commit(id="a"), requests=(pr(1),)),
        Associated(commit=Commit(id="b"), requests=(seven,)),
        Associated(commit=Commit(id="c"), requests=(pr(2),)),
        Associated(commit=Commit(id="d"), requests=(pr(7, title="other snapshot"),)),
    ]

    unique = dedupe(associated)

    assert [r.number for r in unique] == [1, 7, 2]
    assert unique[1] is seven


def test_dedupe_is_idempotent():
    associated = [
        Associated(commit=Commit(id="a"), requests=(pr(3), pr(1))),
        Associated(commit=Commit(id="b"), requests=(pr(1), pr(2), pr(3))),
    ]

    once = dedupe(associated)
    twice = dedupe([Associated(commit=Commit(id="x"), requests=tuple(once))])

    assert twice == once
    assert len({r.number for r in once}) == len(once)


def test_dedupe_empty():
    assert dedupe([]) == []
