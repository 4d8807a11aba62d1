import logging
import threading
import uuid
from collections import OrderedDict
from typing import Callable, List, Optional, TypeVar

from src.history.graph import CommitGraph
from src.history.models import Commit
from src.history.results import OperationResult
from src.history.traversal import topological_sort
from src.layout.projection import project_graph
from src.api.schemas import (
    BranchResponse,
    CommitResponse,
    CreateBranchRequest,
    CreateCommitRequest,
    GraphResponse,
    OperationResponse,
    SessionResponse,
    StatsResponse,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def map_result(result: OperationResult[T], fn: Callable[[T], R]) -> OperationResult[R]:
    if not result.ok:
        return OperationResult(error=result.error)
    return OperationResult.success(fn(result.value))


class GraphSession:
    """One independent commit graph plus the lock serializing access to it."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.graph = CommitGraph()
        self.lock = threading.Lock()


class GraphService:
    def __init__(self, max_sessions: int = 100):
        self.max_sessions = max(1, max_sessions)
        self._sessions: "OrderedDict[str, GraphSession]" = OrderedDict()
        self._lock = threading.Lock()

    # --- Sessions ---

    def create_session(self) -> SessionResponse:
        session = GraphSession(uuid.uuid4().hex)
        with self._lock:
            self._sessions[session.session_id] = session
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info(f"Evicted least recently used session {evicted}")
        logger.info(f"Created session {session.session_id}")
        return SessionResponse(session_id=session.session_id, head=session.graph.head)

    def get_session(self, session_id: str) -> Optional[GraphSession]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
            return session

    def delete_session(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def clear(self):
        with self._lock:
            self._sessions.clear()

    # --- Queries ---

    def get_graph_data(self, session: GraphSession) -> GraphResponse:
        with session.lock:
            return project_graph(session.graph)

    def get_commit(self, session: GraphSession, oid: str) -> Optional[CommitResponse]:
        with session.lock:
            commit = session.graph.get_commit(oid)
            if not commit:
                return None
            return self._to_response(session.graph, commit)

    def get_commits(self, session: GraphSession, limit: int = 50, skip: int = 0) -> List[CommitResponse]:
        with session.lock:
            graph = session.graph
            selection = topological_sort(graph.commits)[skip : skip + limit]
            return [self._to_response(graph, c) for c in selection]

    def get_log(self, session: GraphSession, limit: int = 8) -> List[CommitResponse]:
        with session.lock:
            graph = session.graph
            return [self._to_response(graph, c) for c in graph.log(limit)]

    def get_branches(self, session: GraphSession) -> List[BranchResponse]:
        with session.lock:
            graph = session.graph
            return [
                BranchResponse(name=name, tip=tip, is_head=name == graph.head)
                for name, tip in graph.branches.items()
            ]

    def get_reachable(self, session: GraphSession, oid: str) -> OperationResult[List[str]]:
        with session.lock:
            return map_result(session.graph.get_reachable_commits(oid), sorted)

    def get_stats(self, session: GraphSession) -> StatsResponse:
        with session.lock:
            return StatsResponse(**session.graph.stats())

    # --- Mutations ---

    def create_commit(self, session: GraphSession, req: CreateCommitRequest) -> OperationResult[CommitResponse]:
        with session.lock:
            graph = session.graph
            return map_result(graph.commit(req.message), lambda oid: self._to_response(graph, graph.get_commit(oid)))

    def create_branch(self, session: GraphSession, req: CreateBranchRequest) -> OperationResult[BranchResponse]:
        with session.lock:
            graph = session.graph
            name = req.name.strip()
            return map_result(
                graph.create_branch(name),
                lambda tip: BranchResponse(name=name, tip=tip, is_head=name == graph.head),
            )

    def checkout(self, session: GraphSession, branch: str) -> OperationResult[OperationResponse]:
        with session.lock:
            graph = session.graph
            return map_result(graph.checkout(branch), lambda _: self._operation(graph))

    def merge(self, session: GraphSession, source: str) -> OperationResult[OperationResponse]:
        with session.lock:
            graph = session.graph
            return map_result(graph.merge(source), lambda oid: self._operation(graph, commit_id=oid))

    def rebase(self, session: GraphSession, source: str, target: str) -> OperationResult[OperationResponse]:
        with session.lock:
            graph = session.graph
            return map_result(
                graph.rebase(source, target),
                lambda oids: self._operation(graph, commit_id=oids[-1], commit_ids=oids),
            )

    def revert(self, session: GraphSession, commit_id: str) -> OperationResult[OperationResponse]:
        with session.lock:
            graph = session.graph
            return map_result(graph.revert(commit_id), lambda oid: self._operation(graph, commit_id=oid))

    def reset(self, session: GraphSession, commit_id: str) -> OperationResult[OperationResponse]:
        with session.lock:
            graph = session.graph
            return map_result(
                graph.reset(commit_id),
                lambda count: self._operation(graph, commit_id=graph.head_commit_id, orphaned=count),
            )

    def _operation(self, graph: CommitGraph, **fields) -> OperationResponse:
        return OperationResponse(head=graph.head, **fields)

    def _to_response(self, graph: CommitGraph, commit: Commit) -> CommitResponse:
        return CommitResponse(
            oid=commit.id,
            message=commit.message,
            parent_oids=list(commit.parents),
            created_by_branch=commit.created_by_branch,
            timestamp=commit.timestamp,
            branches=graph.branches_at(commit.id),
            is_orphaned=commit.id in graph.orphaned_commits,
        )
