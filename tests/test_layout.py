from datetime import datetime, timedelta, timezone

from src.history.models import Commit
from src.layout.lanes import assign_branch_lanes, assign_lanes, discover_branches, pick_center
from src.layout.levels import calculate_levels, compress_levels

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_commit(oid, parents=(), seconds=0, branch="main"):
    return Commit(
        id=oid,
        message=oid,
        parents=tuple(parents),
        created_by_branch=branch,
        timestamp=T0 + timedelta(seconds=seconds),
    )


def as_map(*commits):
    return {c.id: c for c in commits}


def test_empty_graph_has_no_levels():
    assert calculate_levels({}) == {}


def test_linear_history_is_chronological():
    commits = as_map(make_commit("a", seconds=0), make_commit("b", ["a"], 1), make_commit("c", ["b"], 2))
    assert calculate_levels(commits) == {"a": 0, "b": 1, "c": 2}


def test_branches_share_no_column_order_violation():
    # a <- b (feature), a <- c (main), merge m(c, b)
    commits = as_map(
        make_commit("a", seconds=0),
        make_commit("b", ["a"], 1, "feature"),
        make_commit("c", ["a"], 2),
        make_commit("m", ["c", "b"], 3),
    )
    assert calculate_levels(commits) == {"a": 0, "b": 1, "c": 2, "m": 3}


def test_child_pushed_past_later_parent():
    # m is stamped before its parent b, so it has to move right of b.
    commits = as_map(
        make_commit("a", seconds=0),
        make_commit("b", ["a"], 4),
        make_commit("c", ["a"], 1),
        make_commit("m", ["b", "c"], 2),
    )
    levels = calculate_levels(commits)
    assert levels == {"a": 0, "c": 1, "b": 2, "m": 3}


def test_equal_timestamps_keep_creation_order():
    commits = as_map(make_commit("x"), make_commit("y", ["x"]), make_commit("z", ["y"]))
    assert calculate_levels(commits) == {"x": 0, "y": 1, "z": 2}


def test_missing_parents_are_ignored():
    commits = as_map(make_commit("b", ["gone"], 1), make_commit("c", ["b"], 2))
    assert calculate_levels(commits) == {"b": 0, "c": 1}


def test_compress_levels_removes_gaps_and_keeps_ties():
    assert compress_levels({"a": 0, "b": 5, "c": 5, "d": 9}) == {"a": 0, "b": 1, "c": 1, "d": 2}


def test_discover_branches_in_creation_order():
    commits = as_map(
        make_commit("a"),
        make_commit("b", ["a"], 1, "feature"),
        make_commit("c", ["a"], 2, "hotfix"),
        make_commit("d", ["b"], 3, "feature"),
    )
    assert discover_branches(commits) == ["main", "feature", "hotfix"]


def test_pick_center():
    assert pick_center(["feature", "master"]) == "master"
    assert pick_center(["feature", "main", "master"]) == "main"
    assert pick_center(["feature", "docs"]) == "feature"
    assert pick_center([]) is None


def test_branch_lanes_alternate_around_main():
    lanes = assign_branch_lanes(["main", "feature", "hotfix", "docs"])
    # feature above main, hotfix below, docs above feature
    assert lanes == {"docs": 0, "feature": 1, "main": 2, "hotfix": 3}


def test_single_branch_lane():
    assert assign_branch_lanes(["main"]) == {"main": 0}
    assert assign_branch_lanes([]) == {}


def test_commit_lane_follows_creating_branch():
    commits = as_map(
        make_commit("a"),
        make_commit("b", ["a"], 1, "feature"),
        make_commit("c", ["b"], 2),
    )
    lanes = assign_lanes(commits)
    assert lanes["a"] == lanes["c"]
    assert lanes["b"] == lanes["a"] - 1
