"""Utility functions for the canvas backbone."""

from canvas_backbone.utils.identifiers import (
    build_edge_id,
    generate_id,
    generate_node_id,
    utc_timestamp,
)

__all__ = [
    "build_edge_id",
    "generate_id",
    "generate_node_id",
    "utc_timestamp",
]
