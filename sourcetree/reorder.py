# sourcetree/reorder.py
"""
Drag-and-drop interpretation: where a drop lands relative to its target node,
and which nodes move.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from sourcetree.contracts import NodeStore

logger = logging.getLogger(__name__)


class PlaceType(Enum):
    BEFORE = "before"
    AFTER = "after"
    INSIDE = "inside"


@dataclass(frozen=True)
class DropInfo:
    """
    A finished drop gesture as reported by the tree widget.

    ``target_pos`` is the dash-separated position path of the target row
    (e.g. ``"0-2-1"``: root 0, its child 2, that child's child 1).
    ``drop_position`` is the sibling index the pointer resolved to, and
    ``drop_to_gap`` is True when the pointer was in the gap between rows.
    ``drag_node_ids`` is the dragged node followed by its descendants.
    """
    drag_node_id: str
    target_node_id: str
    target_is_leaf: bool
    target_pos: str
    drop_position: int
    drop_to_gap: bool
    drag_node_ids: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True)
class ReorderRequest:
    node_ids: List[str]
    destination_id: str
    placement: PlaceType


def resolve_placement(drop: DropInfo) -> PlaceType:
    if not drop.drop_to_gap and not drop.target_is_leaf:
        return PlaceType.INSIDE

    last_segment = int(drop.target_pos.split("-")[-1])
    delta = drop.drop_position - last_segment
    return PlaceType.AFTER if delta > 0 else PlaceType.BEFORE


def nodes_to_move(
    store: NodeStore,
    selected_ids: Sequence[str],
    drag_node_id: str,
    drag_node_ids: Sequence[str] = (),
) -> List[str]:
    """
    The whole selection moves when the dragged node is part of it. Otherwise
    the dragged nodes reported by the widget move, or just the dragged node
    when none were reported (a folder carries its subtree implicitly).
    """
    if selected_ids and drag_node_id in selected_ids:
        order = {node.id: index for index, node in enumerate(store.get_nodes())}
        return sorted(selected_ids, key=lambda node_id: order.get(node_id, len(order)))
    return list(drag_node_ids) or [drag_node_id]


def resolve_reorder(
    store: NodeStore,
    selected_ids: Sequence[str],
    drop: DropInfo,
) -> Optional[ReorderRequest]:
    """Resolve a drop into a reorder request, or None if it cannot apply."""
    node_ids = nodes_to_move(store, selected_ids, drop.drag_node_id, drop.drag_node_ids)
    missing = [node_id for node_id in node_ids if store.get_node(node_id) is None]
    if missing or not node_ids:
        logger.debug("Dropped nodes no longer exist: %s", missing)
        return None

    destination = store.get_node(drop.target_node_id)
    if destination is None:
        logger.debug("Drop target no longer exists: %s", drop.target_node_id)
        return None

    if _inside_moved_nodes(store, destination.id, node_ids):
        logger.debug("Drop target %s is inside the moved nodes", destination.id)
        return None

    return ReorderRequest(
        node_ids=node_ids,
        destination_id=destination.id,
        placement=resolve_placement(drop),
    )


def _inside_moved_nodes(store: NodeStore, node_id: str, moved_ids: Sequence[str]) -> bool:
    moved = set(moved_ids)
    node = store.get_node(node_id)
    while node is not None:
        if node.id in moved:
            return True
        node = store.get_node(node.parent_id) if node.parent_id else None
    return False
