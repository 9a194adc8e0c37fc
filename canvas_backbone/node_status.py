"""Map simple node flags to a visual node status."""

from canvas_backbone.models.canvas_graph import NodeStatus


def filled_or_empty(has_content: bool) -> NodeStatus:
    """Simple filled/empty status based on whether the node has content."""
    return NodeStatus.filled if has_content else NodeStatus.empty


def processing_or_filled(is_processing: bool) -> NodeStatus:
    """Processing -> filled status for nodes that run an async operation."""
    return NodeStatus.processing if is_processing else NodeStatus.filled


def variant_status(
    *,
    is_archived: bool,
    is_error: bool,
    is_generating: bool,
    has_code: bool,
) -> NodeStatus:
    """Full variant status.

    Precedence: archived > error > generating > has code > empty.
    """
    if is_archived:
        return NodeStatus.dimmed
    if is_error:
        return NodeStatus.error
    if is_generating:
        return NodeStatus.processing
    return NodeStatus.filled if has_code else NodeStatus.empty
