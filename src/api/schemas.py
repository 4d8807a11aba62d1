from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from src.layout.models import ProjectedGraph

GraphResponse = ProjectedGraph

__all__ = [
    "BranchResponse",
    "CheckoutRequest",
    "CommitResponse",
    "CreateBranchRequest",
    "CreateCommitRequest",
    "GraphResponse",
    "MergeRequest",
    "OperationResponse",
    "RebaseRequest",
    "ResetRequest",
    "RevertRequest",
    "SessionResponse",
    "StatsResponse",
]


class CommitResponse(BaseModel):
    oid: str
    message: str
    parent_oids: List[str]
    created_by_branch: str
    timestamp: datetime
    branches: List[str] = []
    is_orphaned: bool = False


class BranchResponse(BaseModel):
    name: str
    tip: str
    is_head: bool


class SessionResponse(BaseModel):
    session_id: str
    head: str


class StatsResponse(BaseModel):
    commits: int
    branches: int
    orphaned: int


class OperationResponse(BaseModel):
    head: str
    commit_id: Optional[str] = None
    commit_ids: List[str] = []
    orphaned: int = 0


class CreateCommitRequest(BaseModel):
    message: str


class CreateBranchRequest(BaseModel):
    name: str


class CheckoutRequest(BaseModel):
    branch: str


class MergeRequest(BaseModel):
    source: str


class RebaseRequest(BaseModel):
    source: str
    target: str


class RevertRequest(BaseModel):
    commit_id: str


class ResetRequest(BaseModel):
    commit_id: str
