import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Set

from src.history.gc import collect_garbage
from src.history.models import Commit, CommitDraft
from src.history.refs import branches_at, resolve_head
from src.history.results import ErrorKind, OperationResult
from src.history.traversal import first_parent_chain, reachable_from

logger = logging.getLogger(__name__)

ROOT_MESSAGE = "Initial commit"
DEFAULT_BRANCH = "main"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CommitGraph:
    """In-memory commit DAG with branches, HEAD and deferred orphan deletion.

    One instance per session. Mutations validate first and either apply fully
    or return a failed OperationResult with the graph untouched. Accessors
    hand out copies; nothing outside this class mutates its maps.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or utcnow
        self._commits: Dict[str, Commit] = {}
        self._branches: Dict[str, str] = {}
        self._orphaned: Set[str] = set()
        self._sequence = 0
        self._last_timestamp: Optional[datetime] = None

        root = self._create_commit(ROOT_MESSAGE, (), DEFAULT_BRANCH)
        self._branches[DEFAULT_BRANCH] = root.id
        self._head = DEFAULT_BRANCH

    # --- Read access ---

    @property
    def commits(self) -> Dict[str, Commit]:
        return dict(self._commits)

    @property
    def branches(self) -> Dict[str, str]:
        return dict(self._branches)

    @property
    def head(self) -> str:
        return self._head

    @property
    def orphaned_commits(self) -> Set[str]:
        return set(self._orphaned)

    @property
    def head_commit_id(self) -> Optional[str]:
        return resolve_head(self._branches, self._head)

    def get_commit(self, commit_id: str) -> Optional[Commit]:
        return self._commits.get(commit_id)

    def branches_at(self, commit_id: str) -> List[str]:
        return branches_at(self._branches, commit_id)

    def get_reachable_commits(self, start_id: str) -> OperationResult[Set[str]]:
        if start_id not in self._commits:
            return self._fail(ErrorKind.NOT_FOUND, f"Commit '{start_id}' not found")
        return OperationResult.success(reachable_from(self._commits, [start_id]))

    def log(self, limit: Optional[int] = None) -> List[Commit]:
        """Commits newest first; equal timestamps fall back to creation order."""
        ordered = list(self._commits.values())
        ordered.reverse()
        ordered.sort(key=lambda c: c.timestamp, reverse=True)
        if limit is not None:
            ordered = ordered[:max(limit, 0)]
        return ordered

    def stats(self) -> Dict[str, int]:
        return {
            "commits": len(self._commits),
            "branches": len(self._branches),
            "orphaned": len(self._orphaned),
        }

    # --- Mutations ---

    def commit(self, message: str) -> OperationResult[str]:
        message = (message or "").strip()
        if not message:
            return self._fail(ErrorKind.INVALID_ARGUMENT, "Commit message cannot be empty")
        head_tip = self.head_commit_id
        if head_tip is None:
            return self._head_unresolved()

        collect_garbage(self._commits, self._orphaned)

        new_commit = self._create_commit(message, (head_tip,), self._head)
        self._branches[self._head] = new_commit.id
        logger.info("Committed %s on %s: %s", new_commit.short_id, self._head, message)
        return OperationResult.success(new_commit.id)

    def create_branch(self, name: str) -> OperationResult[str]:
        name = (name or "").strip()
        if not name:
            return self._fail(ErrorKind.INVALID_ARGUMENT, "Branch name cannot be empty")
        if name in self._branches:
            return self._fail(ErrorKind.ALREADY_EXISTS, f"Branch '{name}' already exists")
        head_tip = self.head_commit_id
        if head_tip is None:
            return self._head_unresolved()

        self._branches[name] = head_tip
        logger.info("Created branch %s at %s", name, head_tip[:7])
        return OperationResult.success(head_tip)

    def checkout(self, name: str) -> OperationResult[str]:
        name = (name or "").strip()
        if not name:
            return self._fail(ErrorKind.INVALID_ARGUMENT, "Branch name cannot be empty")
        if name not in self._branches:
            return self._fail(ErrorKind.NOT_FOUND, f"Branch '{name}' does not exist")

        self._head = name
        logger.info("Switched to branch %s", name)
        return OperationResult.success(name)

    def merge(self, source_branch: str) -> OperationResult[str]:
        source_branch = (source_branch or "").strip()
        if not source_branch:
            return self._fail(ErrorKind.INVALID_ARGUMENT, "Source branch name cannot be empty")
        if source_branch not in self._branches:
            return self._fail(ErrorKind.NOT_FOUND, f"Branch '{source_branch}' does not exist")
        head_tip = self.head_commit_id
        if head_tip is None:
            return self._head_unresolved()
        if source_branch == self._head:
            return self._fail(ErrorKind.NO_OP, f"Cannot merge branch '{source_branch}' into itself")
        source_tip = self._branches[source_branch]
        if source_tip == head_tip:
            return self._fail(ErrorKind.NO_OP, "Nothing to merge: branches point at the same commit")

        message = f"Merge branch '{source_branch}' into {self._head}"
        merge_commit = self._create_commit(message, (head_tip, source_tip), self._head)
        self._branches[self._head] = merge_commit.id
        logger.info("Merged %s into %s as %s", source_branch, self._head, merge_commit.short_id)
        return OperationResult.success(merge_commit.id)

    def rebase(self, source_branch: str, target_branch: str) -> OperationResult[List[str]]:
        """Replays `source_branch`'s own first-parent commits on top of `target_branch`."""
        source_branch = (source_branch or "").strip()
        target_branch = (target_branch or "").strip()
        if not source_branch or not target_branch:
            return self._fail(ErrorKind.INVALID_ARGUMENT, "Both source and target branches are required")
        for name in (source_branch, target_branch):
            if name not in self._branches:
                return self._fail(ErrorKind.NOT_FOUND, f"Branch '{name}' does not exist")
        if source_branch == target_branch:
            return self._fail(ErrorKind.INVALID_ARGUMENT, "Cannot rebase a branch onto itself")

        source_tip = self._branches[source_branch]
        target_tip = self._branches[target_branch]
        target_history = set(first_parent_chain(self._commits, target_tip))

        to_replay = []
        for oid in first_parent_chain(self._commits, source_tip):
            if oid in target_history:
                break
            to_replay.append(oid)
        if not to_replay:
            return self._fail(
                ErrorKind.NO_OP,
                f"Branch '{source_branch}' is already up to date with '{target_branch}'",
            )
        to_replay.reverse()

        previously_reachable = reachable_from(self._commits, [source_tip])

        new_ids = []
        parent_id = target_tip
        for oid in to_replay:
            original = self._commits[oid]
            if original.is_merge:
                # Only the mainline is replayed; the merged-in side is dropped.
                logger.warning("Rebase flattens merge commit %s onto its mainline", original.short_id)
            replayed = self._create_commit(original.message, (parent_id,), source_branch)
            new_ids.append(replayed.id)
            parent_id = replayed.id

        self._branches[source_branch] = parent_id
        orphaned = self._update_orphans(previously_reachable)
        self._head = source_branch
        logger.info(
            "Rebased %s onto %s: %d commit(s) replayed, %d orphaned",
            source_branch, target_branch, len(new_ids), orphaned,
        )
        return OperationResult.success(new_ids)

    def revert(self, commit_id: str) -> OperationResult[str]:
        commit_id = (commit_id or "").strip()
        if not commit_id:
            return self._fail(ErrorKind.INVALID_ARGUMENT, "No commit selected")
        original = self._commits.get(commit_id)
        if original is None:
            return self._fail(ErrorKind.NOT_FOUND, f"Commit '{commit_id}' not found")
        head_tip = self.head_commit_id
        if head_tip is None:
            return self._head_unresolved()

        revert_commit = self._create_commit(f'Revert "{original.message}"', (head_tip,), self._head)
        self._branches[self._head] = revert_commit.id
        logger.info("Reverted %s on %s as %s", original.short_id, self._head, revert_commit.short_id)
        return OperationResult.success(revert_commit.id)

    def reset(self, commit_id: str) -> OperationResult[int]:
        """Moves the HEAD branch to `commit_id`; the value is the number of commits orphaned."""
        commit_id = (commit_id or "").strip()
        if not commit_id:
            return self._fail(ErrorKind.INVALID_ARGUMENT, "No commit selected")
        if commit_id not in self._commits:
            return self._fail(ErrorKind.NOT_FOUND, f"Commit '{commit_id}' not found")
        head_tip = self.head_commit_id
        if head_tip is None:
            return self._head_unresolved()

        previously_reachable = reachable_from(self._commits, [head_tip])
        self._branches[self._head] = commit_id
        orphaned = self._update_orphans(previously_reachable)
        logger.info("Reset %s to %s, %d commit(s) orphaned", self._head, commit_id[:7], orphaned)
        return OperationResult.success(orphaned)

    # --- Internals ---

    def _create_commit(self, message: str, parents: tuple, branch: str) -> Commit:
        timestamp = self._clock()
        if self._last_timestamp is not None and timestamp < self._last_timestamp:
            timestamp = self._last_timestamp
        self._last_timestamp = timestamp
        self._sequence += 1

        draft = CommitDraft(
            message=message,
            parents=tuple(parents),
            created_by_branch=branch,
            timestamp=timestamp,
            sequence=self._sequence,
        )
        commit = draft.build()
        self._commits[commit.id] = commit
        return commit

    def _update_orphans(self, previously_reachable: Set[str]) -> int:
        """Orphans what just became unreachable and un-orphans what is reachable again."""
        now_reachable = reachable_from(self._commits, self._branches.values())
        newly_orphaned = previously_reachable - now_reachable
        self._orphaned |= newly_orphaned
        self._orphaned -= now_reachable
        return len(newly_orphaned)

    def _fail(self, kind: ErrorKind, message: str) -> OperationResult:
        logger.info("Rejected %s: %s", kind.value, message)
        return OperationResult.failure(kind, message)

    def _head_unresolved(self) -> OperationResult:
        logger.error("HEAD '%s' does not resolve to a branch", self._head)
        return OperationResult.failure(
            ErrorKind.INVARIANT_VIOLATION, f"HEAD '{self._head}' does not resolve to a branch"
        )
