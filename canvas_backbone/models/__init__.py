"""Core data models for the canvas backbone."""

from canvas_backbone.models.canvas_graph import (
    SECTION_NODE_TYPES,
    CanvasEdge,
    CanvasNode,
    CanvasSnapshot,
    EdgeData,
    EdgeStatus,
    EdgeType,
    NodeStatus,
    NodeType,
)

__all__ = [
    # Tags
    "NodeType",
    "EdgeType",
    "EdgeStatus",
    "NodeStatus",
    "SECTION_NODE_TYPES",
    # Records
    "CanvasNode",
    "CanvasEdge",
    "EdgeData",
    "CanvasSnapshot",
]
