from typing import Dict, List, Mapping, Optional, Set

from src.history.graph import CommitGraph
from src.history.models import Commit
from src.history.refs import branch_tips_index
from src.layout.colors import get_branch_color
from src.layout.lanes import assign_lanes
from src.layout.levels import calculate_levels
from src.layout.models import EdgeStyle, GraphEdge, GraphNode, Position, ProjectedGraph

COLUMN_SPACING = 200
MIN_LANE_SPACING = 200
LANE_SPAN = 800
ORIGIN_X = 150
ORIGIN_Y = 100
LABEL_MESSAGE_LENGTH = 30

ORPHAN_STROKE = "#9ca3af"
FALLBACK_STROKE = "#667eea"


def node_label(commit: Commit) -> str:
    # First line of the message, truncated
    short_msg = commit.message.splitlines()[0][:LABEL_MESSAGE_LENGTH] if commit.message else ""
    return f"{commit.short_id} - {short_msg}"


def edge_style(is_mainline: bool, is_orphaned: bool, color: str) -> EdgeStyle:
    if is_orphaned:
        return EdgeStyle(stroke=ORPHAN_STROKE, stroke_width=2, opacity=0.4, dash="8,8")
    if not is_mainline:
        return EdgeStyle(stroke=color, stroke_width=2.5, opacity=0.7, dash="8,4")
    return EdgeStyle(stroke=color, stroke_width=3, opacity=1.0)


def project(
    commits: Mapping[str, Commit],
    branches: Mapping[str, str],
    head: Optional[str],
    orphaned: Set[str],
) -> ProjectedGraph:
    """Lays out the commits left to right and builds renderer-agnostic nodes and edges."""
    if not commits:
        return ProjectedGraph(head=head, nodes=[], edges=[])

    levels = calculate_levels(commits)
    lanes = assign_lanes(commits)

    lane_count = max(lanes.values()) + 1
    lane_spacing = max(MIN_LANE_SPACING, LANE_SPAN / max(lane_count, 1))

    tips = branch_tips_index(branches)
    head_tip = branches.get(head) if head else None

    nodes: List[GraphNode] = []
    by_id: Dict[str, GraphNode] = {}
    for oid, commit in commits.items():
        column = levels.get(oid, 0)
        lane = lanes.get(oid, 0)
        names = tips.get(oid, [])

        node = GraphNode(
            id=oid,
            label=node_label(commit),
            message=commit.message,
            parent_ids=list(commit.parents),
            created_by_branch=commit.created_by_branch,
            timestamp=commit.timestamp,
            column=column,
            lane=lane,
            position=Position(
                x=column * COLUMN_SPACING + ORIGIN_X,
                y=lane * lane_spacing + ORIGIN_Y,
            ),
            # Color follows the creating branch, so it survives branch moves
            color=get_branch_color(commit.created_by_branch or "main"),
            branches=names,
            branch_colors={name: get_branch_color(name) for name in names},
            is_head=oid == head_tip,
            is_merge=commit.is_merge,
            is_orphaned=oid in orphaned,
        )
        nodes.append(node)
        by_id[oid] = node

    edges: List[GraphEdge] = []
    for oid, commit in commits.items():
        child = by_id[oid]
        for i, parent_id in enumerate(commit.parents):
            parent = by_id.get(parent_id)
            if parent is None:
                continue

            is_mainline = i == 0
            is_orphaned = child.is_orphaned or parent.is_orphaned
            # Mainline continues the parent's color; merge lines show what came in
            color = parent.color if is_mainline else child.color

            edges.append(GraphEdge(
                id=f"{parent_id}-{oid}",
                source=parent_id,
                target=oid,
                is_mainline=is_mainline,
                is_orphaned=is_orphaned,
                style=edge_style(is_mainline, is_orphaned, color or FALLBACK_STROKE),
            ))

    return ProjectedGraph(head=head, nodes=nodes, edges=edges)


def project_graph(graph: CommitGraph) -> ProjectedGraph:
    return project(graph.commits, graph.branches, graph.head, graph.orphaned_commits)
