from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from typing import List
import os

from src.api.service import GraphService, GraphSession
from src.api.schemas import (
    BranchResponse,
    CheckoutRequest,
    CommitResponse,
    CreateBranchRequest,
    CreateCommitRequest,
    GraphResponse,
    MergeRequest,
    OperationResponse,
    RebaseRequest,
    ResetRequest,
    RevertRequest,
    SessionResponse,
    StatsResponse,
)
from src.history.results import ErrorKind, OperationResult

import logging

# Configure Logging
logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Git Graph Visualizer API")

# Allow CORS
# In production, set ALLOWED_ORIGINS to a comma-separated list of domains
allowed_origins_env = os.getenv("ALLOWED_ORIGINS", "*")
allowed_origins = [origin.strip() for origin in allowed_origins_env.split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Every session owns its own commit graph; MAX_SESSIONS caps how many live at once.
service = GraphService(max_sessions=int(os.getenv("MAX_SESSIONS", "100")))

STATUS_BY_KIND = {
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.NO_OP: 409,
    ErrorKind.INVARIANT_VIOLATION: 500,
}


def unwrap_or_raise(result: OperationResult):
    if not result.ok:
        raise HTTPException(
            status_code=STATUS_BY_KIND.get(result.error.kind, 400),
            detail={"error": result.error.kind.value, "message": result.error.message},
        )
    return result.value


def get_session_or_404(session_id: str) -> GraphSession:
    session = service.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@app.post("/api/sessions", response_model=SessionResponse, status_code=201)
def create_session():
    """Start a fresh history: one root commit on main."""
    return service.create_session()


@app.delete("/api/sessions/{session_id}", status_code=204)
def delete_session(session_id: str):
    if not service.delete_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return Response(status_code=204)


@app.get("/api/sessions/{session_id}/graph", response_model=GraphResponse)
def get_graph(session_id: str):
    """Get the laid-out commit graph (nodes and edges)."""
    return service.get_graph_data(get_session_or_404(session_id))


@app.get("/api/sessions/{session_id}/commits", response_model=List[CommitResponse])
def get_commits(session_id: str, limit: int = Query(50, ge=0), skip: int = Query(0, ge=0)):
    """Get list of commits (topological order)."""
    return service.get_commits(get_session_or_404(session_id), limit, skip)


@app.get("/api/sessions/{session_id}/commits/{oid}", response_model=CommitResponse)
def get_commit(session_id: str, oid: str):
    """Get details of a specific commit."""
    commit = service.get_commit(get_session_or_404(session_id), oid)
    if not commit:
        raise HTTPException(status_code=404, detail="Commit not found")
    return commit


@app.post("/api/sessions/{session_id}/commits", response_model=CommitResponse, status_code=201)
def create_commit(session_id: str, req: CreateCommitRequest):
    """Create a new commit on the checked-out branch."""
    return unwrap_or_raise(service.create_commit(get_session_or_404(session_id), req))


@app.get("/api/sessions/{session_id}/branches", response_model=List[BranchResponse])
def get_branches(session_id: str):
    return service.get_branches(get_session_or_404(session_id))


@app.post("/api/sessions/{session_id}/branches", response_model=BranchResponse, status_code=201)
def create_branch(session_id: str, req: CreateBranchRequest):
    return unwrap_or_raise(service.create_branch(get_session_or_404(session_id), req))


@app.post("/api/sessions/{session_id}/checkout", response_model=OperationResponse)
def checkout(session_id: str, req: CheckoutRequest):
    return unwrap_or_raise(service.checkout(get_session_or_404(session_id), req.branch))


@app.post("/api/sessions/{session_id}/merge", response_model=OperationResponse)
def merge(session_id: str, req: MergeRequest):
    """Merge `source` into the checked-out branch."""
    return unwrap_or_raise(service.merge(get_session_or_404(session_id), req.source))


@app.post("/api/sessions/{session_id}/rebase", response_model=OperationResponse)
def rebase(session_id: str, req: RebaseRequest):
    return unwrap_or_raise(service.rebase(get_session_or_404(session_id), req.source, req.target))


@app.post("/api/sessions/{session_id}/revert", response_model=OperationResponse)
def revert(session_id: str, req: RevertRequest):
    return unwrap_or_raise(service.revert(get_session_or_404(session_id), req.commit_id))


@app.post("/api/sessions/{session_id}/reset", response_model=OperationResponse)
def reset(session_id: str, req: ResetRequest):
    """Move the checked-out branch to a commit; reports how many commits were orphaned."""
    return unwrap_or_raise(service.reset(get_session_or_404(session_id), req.commit_id))


@app.get("/api/sessions/{session_id}/reachable/{oid}", response_model=List[str])
def get_reachable(session_id: str, oid: str):
    return unwrap_or_raise(service.get_reachable(get_session_or_404(session_id), oid))


@app.get("/api/sessions/{session_id}/log", response_model=List[CommitResponse])
def get_log(session_id: str, limit: int = Query(8, ge=0)):
    """Most recent commits, newest first."""
    return service.get_log(get_session_or_404(session_id), limit)


@app.get("/api/sessions/{session_id}/stats", response_model=StatsResponse)
def get_stats(session_id: str):
    return service.get_stats(get_session_or_404(session_id))


@app.get("/health")
def health_check():
    return {"status": "ok", "sessions": service.session_count()}
