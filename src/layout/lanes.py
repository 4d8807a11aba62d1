from typing import Dict, List, Mapping, Optional

from src.history.models import Commit

CENTER_BRANCHES = ("main", "master")


def discover_branches(commits: Mapping[str, Commit]) -> List[str]:
    """Distinct creating branches, in order of first appearance."""
    seen: Dict[str, None] = {}
    for commit in commits.values():
        if commit.created_by_branch:
            seen.setdefault(commit.created_by_branch, None)
    return list(seen)


def pick_center(branch_names: List[str]) -> Optional[str]:
    for name in CENTER_BRANCHES:
        if name in branch_names:
            return name
    return branch_names[0] if branch_names else None


def assign_branch_lanes(branch_names: List[str]) -> Dict[str, int]:
    """Centre band for main/master, others alternate above and below it.

    Above means a lower lane number. The first non-centre branch goes above,
    the second below, and so on. Lanes are shifted to start at 0.
    """
    center = pick_center(branch_names)
    if center is None:
        return {}

    offsets = {center: 0}
    k = 0
    for name in branch_names:
        if name == center:
            continue
        k += 1
        distance = (k + 1) // 2
        offsets[name] = -distance if k % 2 else distance

    lowest = min(offsets.values())
    return {name: offset - lowest for name, offset in offsets.items()}


def assign_lanes(commits: Mapping[str, Commit]) -> Dict[str, int]:
    """Lane per commit, derived only from the branch that created it."""
    branch_names = discover_branches(commits)
    branch_lanes = assign_branch_lanes(branch_names)
    center_lane = branch_lanes.get(pick_center(branch_names), 0)

    return {
        oid: branch_lanes.get(commit.created_by_branch, center_lane)
        for oid, commit in commits.items()
    }
