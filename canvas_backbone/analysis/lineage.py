"""Lineage highlighting for a selected canvas node.

The lineage of a node is every node and edge reachable from it when edges
are followed in either direction: descendants, ancestors, and sibling
inputs of a shared target (e.g. a section and a model both feeding the
same compiler).
"""

from collections import defaultdict, deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from canvas_backbone.utils.identifiers import build_edge_id
from canvas_backbone.utils.records import read_field


@dataclass
class Lineage:
    """Node and edge ids in the selected node's connected component."""

    node_ids: set[str] = field(default_factory=set)
    edge_ids: set[str] = field(default_factory=set)


def compute_lineage(edges: Iterable[Any], selected_node_id: str) -> Lineage:
    """Collect the weakly connected component around `selected_node_id`.

    Args:
        edges: edge records exposing `source` and `target` (and optionally `id`).
        selected_node_id: the node to start from.

    Returns:
        Lineage containing at least the selected node itself.
    """
    # node id -> [(neighbour id, edge id), ...]
    adjacency: dict[str, list[tuple[str, str]]] = defaultdict(list)
    for edge in edges:
        source = read_field(edge, "source")
        target = read_field(edge, "target")
        edge_id = read_field(edge, "id") or build_edge_id(source, target)
        adjacency[source].append((target, edge_id))
        adjacency[target].append((source, edge_id))

    lineage = Lineage(node_ids={selected_node_id})
    queue = deque([selected_node_id])
    while queue:
        current = queue.popleft()
        for neighbour, edge_id in adjacency.get(current, []):
            lineage.edge_ids.add(edge_id)
            if neighbour not in lineage.node_ids:
                lineage.node_ids.add(neighbour)
                queue.append(neighbour)

    return lineage
