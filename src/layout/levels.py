from typing import Dict, Mapping

from src.history.models import Commit


def calculate_levels(commits: Mapping[str, Commit]) -> Dict[str, int]:
    """Assigns every commit a column, left (old) to right (new).

    Starts from chronological rank, then pushes each commit past its latest
    parent. A pushed commit drags chronologically later commits that it now
    overlaps one column to the right. Columns are compressed at the end so
    there are no empty ones.
    """
    if not commits:
        return {}

    # Stable: equal timestamps keep creation (mapping) order.
    chronological = sorted(commits, key=lambda oid: commits[oid].timestamp)
    rank = {oid: i for i, oid in enumerate(chronological)}
    levels = dict(rank)

    max_iterations = len(commits) * 2
    iterations = 0
    changed = True
    while changed and iterations < max_iterations:
        changed = False
        iterations += 1

        for oid in chronological:
            parent_levels = [levels[p] for p in commits[oid].parents if p in levels]
            if not parent_levels:
                continue

            max_parent = max(parent_levels)
            current = levels[oid]
            if current > max_parent:
                continue

            levels[oid] = max_parent + 1
            changed = True

            for other in chronological[rank[oid] + 1:]:
                if current < levels[other] <= max_parent + 1:
                    levels[other] += 1

    return compress_levels(levels)


def compress_levels(levels: Mapping[str, int]) -> Dict[str, int]:
    """Renumbers columns to 0..k keeping order and ties."""
    distinct = sorted(set(levels.values()))
    dense = {level: i for i, level in enumerate(distinct)}
    return {oid: dense[level] for oid, level in levels.items()}
