# sourcetree/selection.py
"""
Selection handling for the source tree: click/ctrl/shift selection, folder
expansion, and auto-expanding folders when something else selects a node.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from sourcetree.aggregator import derive_views
from sourcetree.contracts import NodeStore, SelectionStore
from sourcetree.tree_builder import build_tree, flatten_tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Modifiers:
    """Keyboard modifiers held during a click. ctrl wins over shift."""
    ctrl: bool = False
    shift: bool = False


class SelectionModel:
    """Reference selection store. Every ``select`` notifies the listeners."""

    def __init__(self):
        self._selected_ids: List[str] = []
        self._last_selected_id: Optional[str] = None
        self._listeners: List[Callable[[], None]] = []

    @property
    def selected_ids(self) -> List[str]:
        return list(self._selected_ids)

    @property
    def last_selected_id(self) -> Optional[str]:
        return self._last_selected_id

    def select(self, ids: Sequence[str]) -> None:
        unique: List[str] = []
        for node_id in ids:
            if node_id not in unique:
                unique.append(node_id)
        self._selected_ids = unique
        self._last_selected_id = unique[-1] if unique else None
        for listener in list(self._listeners):
            listener()

    def deselect_missing(self, store: NodeStore) -> None:
        """Drop ids whose nodes were removed from the store."""
        alive = [node_id for node_id in self._selected_ids if store.get_node(node_id) is not None]
        if alive != self._selected_ids:
            self.select(alive)

    def subscribe(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)


# ----------------------------
# Tree helpers
# ----------------------------

def ancestors_of(store: NodeStore, node_id: str) -> List[str]:
    """Folder ids above the node, outermost first. Excludes the node itself."""
    ancestors: List[str] = []
    node = store.get_node(node_id)
    while node is not None and node.parent_id is not None:
        ancestors.insert(0, node.parent_id)
        node = store.get_node(node.parent_id)
    return ancestors


def root_selection(store: NodeStore, ids: Sequence[str]) -> List[str]:
    """Selected ids that have no selected ancestor."""
    selected = set(ids)
    return [
        node_id for node_id in ids
        if store.get_node(node_id) is not None
        and not any(a in selected for a in ancestors_of(store, node_id))
    ]


def closest_parent_id(store: NodeStore, ids: Sequence[str]) -> Optional[str]:
    roots = root_selection(store, ids)
    if not roots:
        return None
    return store.get_node(roots[0]).parent_id


def can_group_into_folder(store: NodeStore, ids: Sequence[str]) -> bool:
    roots = root_selection(store, ids)
    if not roots:
        return False
    parent_id = store.get_node(roots[0]).parent_id
    return all(store.get_node(node_id).parent_id == parent_id for node_id in roots)


# ----------------------------
# Coordinator
# ----------------------------

class SelectionCoordinator:
    """
    Owns the expanded-folder list and translates clicks into selections.

    Selections made here set a one-shot flag so that the echo coming back
    through the selection store does not auto-expand and scroll.
    """

    def __init__(
        self,
        store: NodeStore,
        selection: SelectionStore,
        scroll_into_view: Optional[Callable[[str], None]] = None,
    ):
        self.store = store
        self.selection = selection
        self.scroll_into_view = scroll_into_view
        self.expanded_folder_ids: List[str] = []
        self.call_came_from_inside = False
        selection.subscribe(self.on_external_selection_change)

    def set_active(self, node_id: str, modifiers: Modifiers = Modifiers()) -> List[str]:
        previous = self.selection.selected_ids
        ids = [node_id]

        if modifiers.ctrl:
            ids = previous + [i for i in ids if i not in previous]
        elif modifiers.shift:
            ids = self._range_selection(previous, node_id)

        self.call_came_from_inside = True
        self.selection.select(ids)
        return ids

    def _range_selection(self, previous: Sequence[str], node_id: str) -> List[str]:
        # pre-order of the rendered tree
        order = flatten_tree(build_tree(derive_views(self.store, self.expanded_folder_ids)))
        anchor = previous[-1] if previous else None
        if anchor not in order or node_id not in order:
            logger.debug("Range anchor %s or target %s not in the current order", anchor, node_id)
            return [node_id]

        idx1 = order.index(anchor)
        idx2 = order.index(node_id)
        return order[min(idx1, idx2):max(idx1, idx2) + 1]

    def on_external_selection_change(self) -> None:
        if self.call_came_from_inside:
            self.call_came_from_inside = False
            return

        selected = self.selection.selected_ids
        if len(selected) != 1:
            return

        node_id = selected[0]
        if self.store.get_node(node_id) is None:
            return

        for folder_id in ancestors_of(self.store, node_id):
            if folder_id not in self.expanded_folder_ids:
                self.expanded_folder_ids.append(folder_id)

        if self.scroll_into_view is not None:
            self.scroll_into_view(node_id)

    def toggle_folder_expansion(self, folder_id: str) -> None:
        if folder_id in self.expanded_folder_ids:
            self.expanded_folder_ids.remove(folder_id)
        else:
            self.expanded_folder_ids.append(folder_id)
