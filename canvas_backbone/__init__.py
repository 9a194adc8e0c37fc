"""Canvas Backbone - topology engine for a design-assistant canvas graph."""

from canvas_backbone.models.canvas_graph import (
    SECTION_NODE_TYPES,
    CanvasEdge,
    CanvasNode,
    CanvasSnapshot,
    EdgeStatus,
    EdgeType,
    NodeStatus,
    NodeType,
)
from canvas_backbone.topology.connections import (
    build_auto_connect_edges,
    build_model_edge_for_node,
    build_model_edges_from_parent,
    find_missing_prerequisite,
    find_models_connected_to,
    is_valid_connection,
)
from canvas_backbone.analysis.lineage import Lineage, compute_lineage
from canvas_backbone.node_status import (
    filled_or_empty,
    processing_or_filled,
    variant_status,
)
from canvas_backbone.utils.identifiers import build_edge_id
from canvas_backbone.config import CanvasSettings, configure_logging
from canvas_backbone.canvas import Canvas, MissingPrerequisiteError

__all__ = [
    # Graph model
    "NodeType",
    "EdgeType",
    "EdgeStatus",
    "NodeStatus",
    "SECTION_NODE_TYPES",
    "CanvasNode",
    "CanvasEdge",
    "CanvasSnapshot",
    "build_edge_id",
    # Topology engine
    "is_valid_connection",
    "find_missing_prerequisite",
    "build_auto_connect_edges",
    "find_models_connected_to",
    "build_model_edges_from_parent",
    "build_model_edge_for_node",
    # Lineage
    "Lineage",
    "compute_lineage",
    # Node status
    "filled_or_empty",
    "processing_or_filled",
    "variant_status",
    # High-level APIs
    "Canvas",
    "CanvasSettings",
    "MissingPrerequisiteError",
    "configure_logging",
]
