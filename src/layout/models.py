from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel


class Position(BaseModel):
    x: float
    y: float


class GraphNode(BaseModel):
    id: str
    label: str
    message: str
    parent_ids: List[str]
    created_by_branch: str
    timestamp: datetime
    column: int
    lane: int
    position: Position
    color: str
    # Branch badges: branches whose tip is this commit
    branches: List[str] = []
    branch_colors: Dict[str, str] = {}
    is_head: bool = False
    is_merge: bool = False
    is_orphaned: bool = False


class EdgeStyle(BaseModel):
    stroke: str
    stroke_width: float
    opacity: float
    dash: Optional[str] = None


class GraphEdge(BaseModel):
    id: str
    source: str
    target: str
    is_mainline: bool
    is_orphaned: bool = False
    style: EdgeStyle


class ProjectedGraph(BaseModel):
    head: Optional[str] = None
    nodes: List[GraphNode]
    edges: List[GraphEdge]
