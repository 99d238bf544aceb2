# sourcetree/aggregator.py
"""
Node aggregation: per-node display state derived from the items beneath it.

A folder is visible when anything inside it can be seen, but it only counts
as locked (or stream/recording visible) when every item inside it is.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from sourcetree.catalogs import DisplayCatalogs, folder_icon, source_icon
from sourcetree.contracts import NodeStore
from sourcetree.errors import NodeNotFoundError
from sourcetree.nodes import SceneItem, SceneNode, SceneNodeView, is_item


@dataclass(frozen=True)
class AggregatedState:
    """Boolean reductions over a set of items."""
    is_visible: bool
    is_locked: bool
    is_stream_visible: bool
    is_recording_visible: bool

    @classmethod
    def of(cls, items: Sequence[SceneItem]) -> AggregatedState:
        # all() over an empty folder is True; the folder then reads as locked
        return cls(
            is_visible=any(i.visible for i in items),
            is_locked=all(i.locked for i in items),
            is_stream_visible=all(i.stream_visible for i in items),
            is_recording_visible=all(i.recording_visible for i in items),
        )


def items_under(store: NodeStore, node_id: str) -> List[SceneItem]:
    """Every item at or below ``node_id``, in store order."""
    nodes = store.get_nodes()
    node = next((n for n in nodes if n.id == node_id), None)
    if node is None:
        raise NodeNotFoundError(node_id)
    return _collect_items(nodes, node)


def _collect_items(nodes: Sequence[SceneNode], node: SceneNode) -> List[SceneItem]:
    if is_item(node):
        return [node]

    items: List[SceneItem] = []
    for child in nodes:
        if child.parent_id == node.id:
            items.extend(_collect_items(nodes, child))
    return items


def title_for_node(store: NodeStore, node: SceneNode) -> str:
    if is_item(node):
        source = store.get_source(node.source_id)
        return source.name if source else node.name
    return node.name


def determine_icon(
    store: NodeStore,
    node: SceneNode,
    expanded_folder_ids: Iterable[str],
    catalogs: DisplayCatalogs,
) -> str:
    if not is_item(node):
        return folder_icon(node.id, expanded_folder_ids)
    return source_icon(store.get_source(node.source_id), catalogs)


def derive_view(
    store: NodeStore,
    node: SceneNode,
    expanded_folder_ids: Iterable[str] = (),
    catalogs: Optional[DisplayCatalogs] = None,
) -> SceneNodeView:
    state = AggregatedState.of(_collect_items(store.get_nodes(), node))
    return SceneNodeView(
        id=node.id,
        title=title_for_node(store, node),
        icon=determine_icon(store, node, list(expanded_folder_ids), catalogs or DisplayCatalogs()),
        is_visible=state.is_visible,
        is_locked=state.is_locked,
        is_stream_visible=state.is_stream_visible,
        is_recording_visible=state.is_recording_visible,
        is_folder=not is_item(node),
        parent_id=node.parent_id,
    )


def derive_views(
    store: NodeStore,
    expanded_folder_ids: Iterable[str] = (),
    catalogs: Optional[DisplayCatalogs] = None,
) -> List[SceneNodeView]:
    """Views for every node, in store order. Recomputed on each call."""
    expanded = list(expanded_folder_ids)
    catalogs = catalogs or DisplayCatalogs()
    return [derive_view(store, node, expanded, catalogs) for node in store.get_nodes()]
