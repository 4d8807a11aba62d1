import dataclasses
from datetime import datetime, timezone

import pytest

from src.history.models import Commit, CommitDraft

TS = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_draft(**overrides):
    fields = dict(message="Initial commit", parents=(), created_by_branch="main", timestamp=TS, sequence=1)
    fields.update(overrides)
    return CommitDraft(**fields)


def test_draft_serialization():
    data = make_draft(parents=("abc",)).serialize()
    assert b"parent abc" in data
    assert b"branch main" in data
    assert b"sequence 1" in data
    assert data.endswith(b"\n\nInitial commit")


def test_compute_oid_is_sha1_hex():
    oid = make_draft().compute_oid()
    assert len(oid) == 40
    int(oid, 16)


def test_compute_oid_is_deterministic():
    assert make_draft().compute_oid() == make_draft().compute_oid()


def test_sequence_distinguishes_identical_content():
    assert make_draft(sequence=1).compute_oid() != make_draft(sequence=2).compute_oid()


def test_build_commit():
    commit = make_draft(parents=("p1", "p2")).build()
    assert commit.parents == ("p1", "p2")
    assert commit.is_merge
    assert not commit.is_root
    assert commit.short_id == commit.id[:7]


def test_commit_is_immutable():
    commit = make_draft().build()
    assert commit.is_root
    with pytest.raises(dataclasses.FrozenInstanceError):
        commit.message = "changed"


def test_commit_equality_is_by_value():
    a = Commit(id="1", message="m", parents=(), created_by_branch="main", timestamp=TS)
    b = Commit(id="1", message="m", parents=(), created_by_branch="main", timestamp=TS)
    assert a == b
