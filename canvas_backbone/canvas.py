"""In-memory canvas store that applies topology engine output.

Owns the node and edge lists, runs the prerequisite check before a node is
committed, and inserts the node together with its auto-connected edges in a
single step.

Usage:
    from canvas_backbone import Canvas, NodeType

    canvas = Canvas()
    model = canvas.add_node(NodeType.model)
    compiler = canvas.add_node(NodeType.compiler)
    canvas.add_node(NodeType.design_brief)  # auto-wired to the compiler
"""

import logging
from typing import Any

from canvas_backbone.analysis.lineage import Lineage, compute_lineage
from canvas_backbone.config import CanvasSettings
from canvas_backbone.models.canvas_graph import (
    SECTION_NODE_TYPES,
    CanvasEdge,
    CanvasNode,
    CanvasSnapshot,
    EdgeData,
    EdgeStatus,
    NodeType,
)
from canvas_backbone.topology.connections import (
    build_auto_connect_edges,
    build_model_edge_for_node,
    build_model_edges_from_parent,
    find_missing_prerequisite,
    is_valid_connection,
)
from canvas_backbone.utils.identifiers import generate_node_id, utc_timestamp
from canvas_backbone.utils.records import tag_value

logger = logging.getLogger(__name__)


class MissingPrerequisiteError(ValueError):
    """Raised when a node is added before the node type it depends on."""

    def __init__(self, node_type: str, required_type: str) -> None:
        self.node_type = node_type
        self.required_type = required_type
        super().__init__(
            f"cannot add '{node_type}' node: add a '{required_type}' node first"
        )


class Canvas:
    """Mutable canvas graph built on the pure topology functions.

    The engine functions never see this object; they receive snapshots of
    `nodes` and `edges` and return new edges, which are committed here.
    """

    def __init__(self, settings: CanvasSettings | None = None) -> None:
        self.settings = settings or CanvasSettings.from_env()
        self._nodes: list[CanvasNode] = []
        self._edges: list[CanvasEdge] = []
        self.created_at = utc_timestamp()
        self.updated_at = self.created_at

    @property
    def nodes(self) -> list[CanvasNode]:
        """Copy of the current node list, in insertion order."""
        return list(self._nodes)

    @property
    def edges(self) -> list[CanvasEdge]:
        """Copy of the current edge list, in insertion order."""
        return list(self._edges)

    def get_node(self, node_id: str) -> CanvasNode | None:
        return next((n for n in self._nodes if n.id == node_id), None)

    def get_edge(self, edge_id: str) -> CanvasEdge | None:
        return next((e for e in self._edges if e.id == edge_id), None)

    def _commit(self, nodes: list[CanvasNode], edges: list[CanvasEdge]) -> list[CanvasEdge]:
        """Append nodes and the edges whose id is not already present."""
        existing_ids = {edge.id for edge in self._edges}
        fresh = []
        for edge in edges:
            if edge.id in existing_ids:
                continue
            existing_ids.add(edge.id)
            fresh.append(edge)

        self._nodes = [*self._nodes, *nodes]
        self._edges = [*self._edges, *fresh]
        self.updated_at = utc_timestamp()
        return fresh

    # -- adding nodes ------------------------------------------------------

    def _has_section(self, type_value: str) -> bool:
        return type_value in SECTION_NODE_TYPES and any(n.type == type_value for n in self._nodes)

    def _check_prerequisite(self, type_value: str) -> None:
        """Raise or warn, per settings, when the required node type is absent."""
        missing = find_missing_prerequisite(type_value, self._nodes)
        if missing is None:
            return
        if self.settings.enforce_prerequisites:
            raise MissingPrerequisiteError(type_value, missing.value)
        logger.warning(
            "adding '%s' node without required '%s' node", type_value, missing.value
        )

    def initialize(self) -> None:
        """Seed an empty canvas with the default brief -> compiler template."""
        if self._nodes:
            return
        brief, compiler = (
            CanvasNode(id=generate_node_id(t.value), type=t.value)
            for t in (NodeType.design_brief, NodeType.compiler)
        )
        self._commit([brief, compiler], [CanvasEdge.between(brief.id, compiler.id)])
        logger.debug("initialized canvas with %s -> %s", brief.id, compiler.id)

    def add_node(
        self,
        node_type: NodeType | str,
        node_id: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> CanvasNode | None:
        """Add a node and its auto-connected edges.

        Section nodes are singletons; adding a second one of the same type
        is a no-op returning None.

        Raises:
            MissingPrerequisiteError: the required node type is absent and
                `settings.enforce_prerequisites` is on.
            ValueError: `node_id` is already used on the canvas.
        """
        type_value = tag_value(node_type)

        if self._has_section(type_value):
            logger.debug("section '%s' already on canvas, skipping add", type_value)
            return None

        self._check_prerequisite(type_value)

        node_id = node_id or generate_node_id(type_value)
        if self.get_node(node_id) is not None:
            raise ValueError(f"node already exists: {node_id}")

        node = CanvasNode(id=node_id, type=type_value, data=data or {})
        planned = [
            *build_auto_connect_edges(node_id, type_value, self._nodes),
            *build_model_edge_for_node(node_id, type_value, self._nodes),
        ]
        added = self._commit([node], planned)
        logger.debug("added node %s with %d auto edge(s)", node_id, len(added))
        return node

    def expand_node(
        self,
        parent_id: str,
        child_type: NodeType | str,
        count: int = 1,
        data: dict[str, Any] | None = None,
    ) -> list[CanvasNode]:
        """Spawn `count` children of `parent_id` (e.g. hypotheses from a compiler).

        Each child is wired from the parent when that connection is valid,
        and inherits the parent's model inputs.
        Section children follow the singleton rule: when one of that type
        already exists nothing is added and an empty list is returned.

        Raises:
            MissingPrerequisiteError: the required node type is absent and
                `settings.enforce_prerequisites` is on.
            KeyError: `parent_id` is not on the canvas.
            ValueError: `count` is not positive, or is above one for a
                section type.
        """
        parent = self.get_node(parent_id)
        if parent is None:
            raise KeyError(parent_id)
        if count < 1:
            raise ValueError(f"count must be positive, got {count}")

        type_value = tag_value(child_type)
        if type_value in SECTION_NODE_TYPES:
            if count > 1:
                raise ValueError(f"section '{type_value}' is a singleton, got count={count}")
            if self._has_section(type_value):
                logger.debug("section '%s' already on canvas, skipping expand", type_value)
                return []
        self._check_prerequisite(type_value)

        children = [
            CanvasNode(id=generate_node_id(type_value), type=type_value, data=dict(data or {}))
            for _ in range(count)
        ]
        child_ids = [child.id for child in children]

        planned: list[CanvasEdge] = []
        if is_valid_connection(parent.type, type_value):
            planned.extend(CanvasEdge.between(parent_id, child_id) for child_id in child_ids)
        planned.extend(
            build_model_edges_from_parent(parent_id, child_ids, self._nodes, self._edges)
        )

        added = self._commit(children, planned)
        logger.debug(
            "expanded %s into %d '%s' node(s) with %d edge(s)",
            parent_id, count, type_value, len(added),
        )
        return children

    # -- manual connections ------------------------------------------------

    def is_valid_connection(self, source_id: str, target_id: str) -> bool:
        """Whether a manual edge between two existing nodes is allowed."""
        source = self.get_node(source_id)
        target = self.get_node(target_id)
        if source is None or target is None:
            return False
        return is_valid_connection(source.type, target.type)

    def connect(self, source_id: str, target_id: str) -> CanvasEdge | None:
        """Draw a manual edge. Invalid or duplicate connections return None."""
        if not self.is_valid_connection(source_id, target_id):
            logger.debug("rejected connection %s -> %s", source_id, target_id)
            return None
        added = self._commit([], [CanvasEdge.between(source_id, target_id)])
        return added[0] if added else None

    # -- removal -----------------------------------------------------------

    def remove_node(self, node_id: str) -> None:
        """Remove a node and every edge touching it."""
        if self.get_node(node_id) is None:
            return
        self._nodes = [n for n in self._nodes if n.id != node_id]
        self._edges = [
            e for e in self._edges if e.source != node_id and e.target != node_id
        ]
        self.updated_at = utc_timestamp()
        logger.debug("removed node %s", node_id)

    def remove_edge(self, edge_id: str) -> None:
        self._edges = [e for e in self._edges if e.id != edge_id]
        self.updated_at = utc_timestamp()

    def disconnect_outputs(self, node_id: str) -> None:
        """Drop every outgoing edge of a node."""
        self._edges = [e for e in self._edges if e.source != node_id]
        self.updated_at = utc_timestamp()

    # -- updates -----------------------------------------------------------

    def update_node_data(self, node_id: str, data: dict[str, Any]) -> None:
        """Shallow-merge `data` into a node's payload."""
        self._nodes = [
            n.model_copy(update={"data": {**n.data, **data}}) if n.id == node_id else n
            for n in self._nodes
        ]
        self.updated_at = utc_timestamp()

    def _set_edge_status(
        self,
        status: EdgeStatus | str,
        *,
        source: str | None = None,
        target: str | None = None,
    ) -> None:
        edge_data = EdgeData(status=status)
        self._edges = [
            e.model_copy(update={"data": edge_data})
            if (source is not None and e.source == source)
            or (target is not None and e.target == target)
            else e
            for e in self._edges
        ]
        self.updated_at = utc_timestamp()

    def set_edge_status_by_source(self, source_id: str, status: EdgeStatus | str) -> None:
        self._set_edge_status(status, source=source_id)

    def set_edge_status_by_target(self, target_id: str, status: EdgeStatus | str) -> None:
        self._set_edge_status(status, target=target_id)

    # -- queries -----------------------------------------------------------

    def lineage(self, selected_node_id: str | None) -> Lineage:
        """Lineage of the selected node; empty when it has no connections."""
        if not selected_node_id:
            return Lineage()
        lineage = compute_lineage(self._edges, selected_node_id)
        if len(lineage.node_ids) <= 1:
            return Lineage()
        return lineage

    def missing_prerequisite(self, node_type: NodeType | str) -> NodeType | None:
        """Prerequisite check against the current nodes."""
        return find_missing_prerequisite(tag_value(node_type), self._nodes)

    # -- snapshots ---------------------------------------------------------

    def snapshot(self) -> CanvasSnapshot:
        return CanvasSnapshot(
            nodes=[n.model_copy(deep=True) for n in self._nodes],
            edges=[e.model_copy(deep=True) for e in self._edges],
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_snapshot(
        cls,
        snapshot: CanvasSnapshot,
        settings: CanvasSettings | None = None,
    ) -> "Canvas":
        canvas = cls(settings)
        canvas._nodes = [n.model_copy(deep=True) for n in snapshot.nodes]
        canvas._edges = [e.model_copy(deep=True) for e in snapshot.edges]
        canvas.created_at = snapshot.created_at
        canvas.updated_at = snapshot.updated_at
        return canvas

    def reset(self) -> None:
        self._nodes = []
        self._edges = []
        self.updated_at = utc_timestamp()

    def __repr__(self) -> str:
        return f"Canvas(nodes={len(self._nodes)}, edges={len(self._edges)})"
