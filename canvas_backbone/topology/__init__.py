"""Topology rules for the canvas graph."""

from canvas_backbone.topology.connections import (
    MODEL_DEPENDENT_TYPES,
    PREREQUISITES,
    VALID_CONNECTIONS,
    build_auto_connect_edges,
    build_model_edge_for_node,
    build_model_edges_from_parent,
    find_missing_prerequisite,
    find_models_connected_to,
    is_valid_connection,
)

__all__ = [
    # Tables
    "VALID_CONNECTIONS",
    "PREREQUISITES",
    "MODEL_DEPENDENT_TYPES",
    # Validation
    "is_valid_connection",
    "find_missing_prerequisite",
    # Planning
    "build_auto_connect_edges",
    "find_models_connected_to",
    "build_model_edges_from_parent",
    "build_model_edge_for_node",
]
