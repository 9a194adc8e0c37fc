"""Analysis utilities for the canvas graph."""

from canvas_backbone.analysis.lineage import Lineage, compute_lineage

__all__ = [
    "Lineage",
    "compute_lineage",
]
