from src.history.graph import CommitGraph
from src.history.traversal import topological_sort
from src.layout.projection import project_graph


def build_scenario() -> CommitGraph:
    graph = CommitGraph()
    graph.commit("Add README").unwrap()
    graph.create_branch("feature/login").unwrap()
    graph.checkout("feature/login").unwrap()
    graph.commit("Login form").unwrap()
    graph.commit("Login validation").unwrap()
    graph.checkout("main").unwrap()
    graph.commit("Fix typo").unwrap()
    graph.merge("feature/login").unwrap()
    graph.create_branch("hotfix").unwrap()
    graph.checkout("hotfix").unwrap()
    graph.commit("Patch crash").unwrap()
    return graph


def main():
    print("Building history...")
    graph = build_scenario()
    print(f"Loaded {len(graph.commits)} commits on {len(graph.branches)} branches.")
    print(f"HEAD is {graph.head} at {graph.head_commit_id[:7]}")

    print("\nLog (Topological Sort):")
    for c in topological_sort(graph.commits):
        parents = " ".join(p[:7] for p in c.parents)
        badges = ", ".join(graph.branches_at(c.id))
        suffix = f" [{badges}]" if badges else ""
        print(f"* {c.short_id} ({parents}) - {c.message}{suffix}")

    print("\nLayout (column, lane, color):")
    projected = project_graph(graph)
    for node in sorted(projected.nodes, key=lambda n: (n.column, n.lane)):
        print(f"  col {node.column:2d}  lane {node.lane}  {node.color}  {node.label}")


if __name__ == "__main__":
    main()
