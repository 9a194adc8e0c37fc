"""Connection rules and auto-connect planning for the canvas graph.

Three pure pieces share one type/adjacency model:

- `is_valid_connection` answers whether a manual edge between two node
  types is legal.
- `find_missing_prerequisite` answers whether adding a node type is blocked
  by a missing dependency type.
- the planner functions compute the edges to materialize alongside a newly
  added node (structural wiring and model-input propagation).

Nothing here raises or mutates its inputs. Unknown node types match no rule
and degrade to `False`, `None` or an empty edge list.
"""

from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from canvas_backbone.models.canvas_graph import (
    SECTION_NODE_TYPES,
    CanvasEdge,
    NodeType,
)
from canvas_backbone.utils.records import read_field


_SECTION_TARGETS = frozenset({NodeType.compiler})

# source type -> types it may point to
VALID_CONNECTIONS: Mapping[str, frozenset[NodeType]] = MappingProxyType({
    **{section: _SECTION_TARGETS for section in SECTION_NODE_TYPES},
    NodeType.design_system: frozenset({NodeType.hypothesis}),
    NodeType.compiler: frozenset({NodeType.hypothesis}),
    NodeType.hypothesis: frozenset({NodeType.variant}),
    NodeType.variant: frozenset({
        NodeType.compiler,
        NodeType.existing_design,
        NodeType.critique,
    }),
    NodeType.critique: frozenset({NodeType.compiler}),
    NodeType.model: frozenset({
        NodeType.compiler,
        NodeType.hypothesis,
        NodeType.design_system,
    }),
})

# node type -> type that must already exist on the canvas
PREREQUISITES: Mapping[str, NodeType] = MappingProxyType({
    NodeType.compiler: NodeType.model,
    NodeType.hypothesis: NodeType.model,
    NodeType.design_system: NodeType.model,
})

MODEL_DEPENDENT_TYPES: frozenset[NodeType] = frozenset(PREREQUISITES)


def is_valid_connection(source_type: str, target_type: str) -> bool:
    """Whether a manual edge `source_type -> target_type` is allowed."""
    targets = VALID_CONNECTIONS.get(source_type)
    if targets is None:
        return False
    return target_type in targets


def find_missing_prerequisite(
    new_node_type: str,
    existing_nodes: Iterable[Any],
) -> NodeType | None:
    """Return the node type that must exist before `new_node_type` can be added.

    Returns None when the type has no prerequisite or it is already present.
    The check is advisory; blocking the add is up to the caller.
    """
    required = PREREQUISITES.get(new_node_type)
    if required is None:
        return None
    if any(read_field(node, "type") == required for node in existing_nodes):
        return None
    return required


def _nodes_of_type(nodes: Iterable[Any], node_type: NodeType) -> list[Any]:
    return [node for node in nodes if read_field(node, "type") == node_type]


def _dedupe(edges: Iterable[CanvasEdge]) -> list[CanvasEdge]:
    seen: set[str] = set()
    unique: list[CanvasEdge] = []
    for edge in edges:
        if edge.id in seen:
            continue
        seen.add(edge.id)
        unique.append(edge)
    return unique


def build_auto_connect_edges(
    new_node_id: str,
    new_node_type: str,
    existing_nodes: Sequence[Any],
) -> list[CanvasEdge]:
    """Structural edges to create when a node is added.

    Model wiring is not included; see `build_model_edge_for_node` and
    `build_model_edges_from_parent`.
    """
    edges: list[CanvasEdge] = []

    if new_node_type in SECTION_NODE_TYPES:
        compilers = _nodes_of_type(existing_nodes, NodeType.compiler)
        # several compilers make the routing target ambiguous
        if len(compilers) == 1:
            edges.append(CanvasEdge.between(new_node_id, read_field(compilers[0], "id")))

    if new_node_type == NodeType.compiler:
        # fan-in happens only for the first compiler on the canvas
        if not _nodes_of_type(existing_nodes, NodeType.compiler):
            for node in existing_nodes:
                if read_field(node, "type") in SECTION_NODE_TYPES:
                    edges.append(CanvasEdge.between(read_field(node, "id"), new_node_id))

    if new_node_type == NodeType.design_system:
        for node in _nodes_of_type(existing_nodes, NodeType.hypothesis):
            edges.append(CanvasEdge.between(new_node_id, read_field(node, "id")))

    if new_node_type == NodeType.hypothesis:
        for node in _nodes_of_type(existing_nodes, NodeType.design_system):
            edges.append(CanvasEdge.between(read_field(node, "id"), new_node_id))

    return _dedupe(edges)


def find_models_connected_to(
    parent_id: str,
    nodes: Iterable[Any],
    edges: Iterable[Any],
) -> list[Any]:
    """Model nodes that feed `parent_id` through an incoming edge."""
    source_ids = {
        read_field(edge, "source")
        for edge in edges
        if read_field(edge, "target") == parent_id
    }
    return [
        node
        for node in _nodes_of_type(nodes, NodeType.model)
        if read_field(node, "id") in source_ids
    ]


def build_model_edges_from_parent(
    parent_id: str,
    child_ids: Sequence[str],
    nodes: Sequence[Any],
    edges: Iterable[Any],
) -> list[CanvasEdge]:
    """Propagate the parent's model inputs to each of its children.

    When the parent has no connected model, the first model on the canvas
    is used instead. With no model anywhere, nothing is returned.
    """
    models = find_models_connected_to(parent_id, nodes, edges)
    if not models:
        models = _nodes_of_type(nodes, NodeType.model)[:1]

    return _dedupe(
        CanvasEdge.between(read_field(model, "id"), child_id)
        for model in models
        for child_id in child_ids
    )


def build_model_edge_for_node(
    node_id: str,
    node_type: str,
    existing_nodes: Iterable[Any],
) -> list[CanvasEdge]:
    """Connect the first model on the canvas to a directly added node."""
    if node_type not in MODEL_DEPENDENT_TYPES:
        return []
    models = _nodes_of_type(existing_nodes, NodeType.model)
    if not models:
        return []
    return [CanvasEdge.between(read_field(models[0], "id"), node_id)]
