from typing import Iterable, List, Mapping, Set, Deque
from collections import deque

from src.history.models import Commit


def reachable_from(commits: Mapping[str, Commit], start_ids: Iterable[str]) -> Set[str]:
    """BFS over all parents (crosses merges). Ids missing from `commits` are skipped."""
    queue: Deque[str] = deque(start_ids)
    visited: Set[str] = set()

    while queue:
        oid = queue.popleft()
        if oid in visited:
            continue
        commit = commits.get(oid)
        if commit is None:
            continue
        visited.add(oid)
        queue.extend(commit.parents)

    return visited


def first_parent_chain(commits: Mapping[str, Commit], start_id: str) -> List[str]:
    """Ids from `start_id` back to the root following mainline parents only."""
    chain = []
    seen = set()
    current = start_id
    while current in commits and current not in seen:
        seen.add(current)
        chain.append(current)
        parents = commits[current].parents
        if not parents:
            break
        current = parents[0]
    return chain


def topological_sort(commits: Mapping[str, Commit]) -> List[Commit]:
    """Sorts commits topologically (children before parents).

    Edges point child -> parent, so a DFS post-order lists parents first;
    the reversed result is newest first, like `git log`. The walk keeps its
    own stack, so history depth is not bounded by the recursion limit.
    """
    result = []
    visited = set()
    temp_mark = set()

    # Deterministic starting order
    for start in sorted(commits.keys()):
        if start in visited:
            continue
        temp_mark.add(start)
        # (oid, index of the next parent to visit)
        stack = [(start, 0)]

        while stack:
            oid, i = stack[-1]
            commit = commits.get(oid)
            parents = commit.parents if commit else ()

            if i < len(parents):
                stack[-1] = (oid, i + 1)
                parent = parents[i]
                if parent in visited:
                    continue
                if parent in temp_mark:
                    raise ValueError("Cycle detected in commit graph")
                temp_mark.add(parent)
                stack.append((parent, 0))
                continue

            stack.pop()
            temp_mark.remove(oid)
            visited.add(oid)
            if commit:
                result.append(commit)

    return list(reversed(result))
