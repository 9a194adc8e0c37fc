"""ID generation and timestamp utilities."""

import uuid
from datetime import datetime, timezone


def build_edge_id(source: str, target: str) -> str:
    """Build the deterministic id of a directed edge.

    The same ordered endpoint pair always yields the same id, so duplicate
    edges can be detected by id equality.
    """
    return f"edge-{source}-to-{target}"


def generate_id() -> str:
    """Generate a short random id suffix (12-char hex string)."""
    return uuid.uuid4().hex[:12]


def generate_node_id(node_type: str) -> str:
    """Generate a unique canvas node id prefixed with its type."""
    return f"{node_type}-{generate_id()}"


def utc_timestamp() -> str:
    """Generate an ISO8601 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat()
