from typing import Dict, List, Mapping, Optional


def resolve_ref(branches: Mapping[str, str], name: Optional[str]) -> Optional[str]:
    """Resolves a branch name to its tip id."""
    if not name:
        return None
    return branches.get(name)


def resolve_head(branches: Mapping[str, str], head: Optional[str]) -> Optional[str]:
    """Resolves HEAD (a branch name) to the current commit id."""
    return resolve_ref(branches, head)


def branches_at(branches: Mapping[str, str], commit_id: str) -> List[str]:
    """Names of the branches whose tip is `commit_id`, sorted."""
    return sorted(name for name, tip in branches.items() if tip == commit_id)


def branch_tips_index(branches: Mapping[str, str]) -> Dict[str, List[str]]:
    """Returns a dictionary of tip ids to the (sorted) branch names on them."""
    index: Dict[str, List[str]] = {}
    for name in sorted(branches):
        index.setdefault(branches[name], []).append(name)
    return index
