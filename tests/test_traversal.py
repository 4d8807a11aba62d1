from datetime import datetime, timezone

import pytest

from src.history.models import Commit
from src.history.traversal import first_parent_chain, reachable_from, topological_sort

TS = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_dag(*specs):
    """specs: (oid, [parent oids])"""
    return {
        oid: Commit(id=oid, message=oid, parents=tuple(parents), created_by_branch="main", timestamp=TS)
        for oid, parents in specs
    }


@pytest.fixture
def merge_dag():
    # C1 <- C2
    # C1 <- C3
    # C2, C3 <- C4 (Merge)
    return make_dag(("11", []), ("22", ["11"]), ("33", ["11"]), ("44", ["22", "33"]))


def test_reachable_crosses_merges(merge_dag):
    assert reachable_from(merge_dag, ["44"]) == {"11", "22", "33", "44"}
    assert reachable_from(merge_dag, ["33"]) == {"11", "33"}


def test_reachable_from_several_starts(merge_dag):
    assert reachable_from(merge_dag, ["22", "33"]) == {"11", "22", "33"}


def test_reachable_skips_unknown_ids(merge_dag):
    assert reachable_from(merge_dag, ["nope"]) == set()


def test_first_parent_chain_follows_mainline(merge_dag):
    assert first_parent_chain(merge_dag, "44") == ["44", "22", "11"]


def test_topological_sort_simple_chain():
    dag = make_dag(("1111", []), ("2222", ["1111"]), ("3333", ["2222"]))
    assert [c.id for c in topological_sort(dag)] == ["3333", "2222", "1111"]


def test_topological_sort_merge(merge_dag):
    oids = [c.id for c in topological_sort(merge_dag)]

    # Valid order: C4 comes first. C1 comes last.
    # C2 and C3 can be in any order between C4 and C1.
    assert oids[0] == "44"
    assert oids[-1] == "11"
    assert set(oids[1:3]) == {"22", "33"}


def test_topological_sort_detects_cycle():
    dag = make_dag(("a", ["b"]), ("b", ["a"]))
    with pytest.raises(ValueError, match="Cycle"):
        topological_sort(dag)


def test_topological_sort_deep_linear_history():
    depth = 5000
    dag = make_dag(*[(f"{i:05d}", [f"{i - 1:05d}"] if i else []) for i in range(depth)])

    oids = [c.id for c in topological_sort(dag)]

    assert len(oids) == depth
    assert oids[0] == f"{depth - 1:05d}"
    assert oids[-1] == "00000"
