"""Data model for the design canvas graph.

Nodes are typed by a closed tag set; edges are directed data-flow links
whose id is derived from their endpoints.

For the data models, we use pydantic so snapshots validate on the way in.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from canvas_backbone.utils.identifiers import build_edge_id


class NodeType(str, Enum):
    """Identity class of a canvas node. Never changes after creation."""

    # section nodes (document inputs that feed a compiler)
    design_brief = "design-brief"
    existing_design = "existing-design"
    research_context = "research-context"
    objectives_metrics = "objectives-metrics"
    design_constraints = "design-constraints"

    design_system = "design-system"
    compiler = "compiler"
    hypothesis = "hypothesis"
    variant = "variant"
    critique = "critique"
    model = "model"


SECTION_NODE_TYPES: frozenset[NodeType] = frozenset({
    NodeType.design_brief,
    NodeType.existing_design,
    NodeType.research_context,
    NodeType.objectives_metrics,
    NodeType.design_constraints,
})


class EdgeType(str, Enum):
    """Types of edges drawn on the canvas."""

    data_flow = "data-flow"


class EdgeStatus(str, Enum):
    """Data-flow status carried on an edge."""

    idle = "idle"
    processing = "processing"
    complete = "complete"
    error = "error"


class NodeStatus(str, Enum):
    """Visual border/fill state of a node."""

    selected = "selected"
    processing = "processing"
    error = "error"
    dimmed = "dimmed"
    filled = "filled"
    empty = "empty"


class CanvasNode(BaseModel):
    """a node on the canvas."""

    id: str
    type: str  # a NodeType value; unknown strings match no topology rule
    data: dict[str, Any] = Field(default_factory=dict)


class EdgeData(BaseModel):
    status: EdgeStatus = EdgeStatus.idle


class CanvasEdge(BaseModel):
    """a directed data-flow edge between two nodes."""

    id: str
    source: str
    target: str
    type: EdgeType = EdgeType.data_flow
    data: EdgeData = Field(default_factory=EdgeData)

    @classmethod
    def between(cls, source: str, target: str) -> "CanvasEdge":
        """Create an idle data-flow edge with the deterministic id."""
        return cls(id=build_edge_id(source, target), source=source, target=target)


class CanvasSnapshot(BaseModel):
    """the full canvas graph as a plain serializable value."""

    nodes: list[CanvasNode]
    edges: list[CanvasEdge]
    created_at: str
    updated_at: str
