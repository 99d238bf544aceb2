# sourcetree/controller.py
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional

from sourcetree import contracts
from sourcetree.aggregator import AggregatedState, derive_views, items_under
from sourcetree.catalogs import DisplayCatalogs
from sourcetree.config import FOLDER_HELP_TIP, SelectorConfig
from sourcetree.contracts import CommandSubmitter, NodeStore, SelectionStore, SessionState
from sourcetree.errors import ControllerError, NodeNotFoundError
from sourcetree.nodes import SceneItem, SceneNodeView, is_item
from sourcetree.reorder import DropInfo, resolve_reorder
from sourcetree.selection import (
    Modifiers,
    SelectionCoordinator,
    can_group_into_folder,
    closest_parent_id,
)
from sourcetree.selective_recording import (
    cycle_flags,
    selective_recording_locked,
    toggle_global_selective_recording,
)
from sourcetree.tree_builder import TreeNode, build_tree

logger = logging.getLogger(__name__)


class SourceSelectorController:
    """
    Mediates the source tree widget <-> scene store, selection, session and
    command layer. Every read is recomputed from the store; every write is a
    command submission.
    """

    def __init__(
        self,
        store: Optional[NodeStore],
        selection: SelectionStore,
        commands: CommandSubmitter,
        session: SessionState,
        catalogs: Optional[DisplayCatalogs] = None,
        config: Optional[SelectorConfig] = None,
        scroll_into_view: Optional[Callable[[str], None]] = None,
    ):
        self.store = store
        self.selection = selection
        self.commands = commands
        self.session = session
        self.catalogs = catalogs or DisplayCatalogs()
        self.config = config
        self.coordinator = SelectionCoordinator(store, selection, scroll_into_view) if store is not None else None

    # ---------- Scene ----------

    @property
    def has_scene(self) -> bool:
        return self.store is not None

    @property
    def scene(self) -> NodeStore:
        if self.store is None:
            raise ControllerError("No active scene.")
        return self.store

    def set_scroll_handler(self, handler: Optional[Callable[[str], None]]) -> None:
        if self.coordinator is not None:
            self.coordinator.scroll_into_view = handler

    # ---------- Derived data ----------

    @property
    def node_data(self) -> List[SceneNodeView]:
        if self.store is None:
            return []
        return derive_views(self.store, self.expanded_folder_ids, self.catalogs)

    @property
    def tree_data(self) -> List[TreeNode]:
        return build_tree(self.node_data)

    @property
    def active_item_ids(self) -> List[str]:
        return self.selection.selected_ids

    @property
    def last_selected_id(self) -> Optional[str]:
        return self.selection.last_selected_id

    @property
    def expanded_folder_ids(self) -> List[str]:
        if self.coordinator is None:
            return []
        return list(self.coordinator.expanded_folder_ids)

    def view_for(self, node_id: str) -> Optional[SceneNodeView]:
        return next((v for v in self.node_data if v.id == node_id), None)

    def is_selected(self, node_id: str) -> bool:
        return node_id in self.selection.selected_ids

    @property
    def selective_recording_enabled(self) -> bool:
        return self.session.selective_recording

    @property
    def selective_recording_locked(self) -> bool:
        return selective_recording_locked(self.session)

    @property
    def show_folder_help_tip(self) -> bool:
        if self.config is not None and self.config.is_dismissed(FOLDER_HELP_TIP):
            return False
        return any(v.is_folder for v in self.node_data)

    def dismiss_folder_help_tip(self) -> None:
        if self.config is not None:
            self.config.dismiss(FOLDER_HELP_TIP)

    # ---------- Selection / expansion ----------

    def make_active(self, node_id: str, modifiers: Modifiers = Modifiers()) -> List[str]:
        return self._require_coordinator().set_active(node_id, modifiers)

    def toggle_folder(self, folder_id: str) -> None:
        self._require_coordinator().toggle_folder_expansion(folder_id)

    # ---------- Drag and drop ----------

    def handle_sort(self, drop: DropInfo) -> Any:
        request = resolve_reorder(self.scene, self.active_item_ids, drop)
        if request is None:
            return None
        return self.commands.submit(
            contracts.REORDER_NODES,
            request.node_ids,
            request.destination_id,
            request.placement,
        )

    # ---------- Per-node toggles ----------

    def toggle_visibility(self, node_id: str) -> None:
        items = self._items_for(node_id)
        if items is None:
            return
        visible = not AggregatedState.of(items).is_visible
        self.commands.submit(contracts.HIDE_ITEMS, [i.id for i in items], not visible)

    def toggle_lock(self, node_id: str) -> None:
        items = self._items_for(node_id)
        if items is None:
            return
        locked = not AggregatedState.of(items).is_locked
        self.commands.submit(contracts.SET_ITEM_SETTINGS, [i.id for i in items], {"locked": locked})

    def cycle_selective_recording(self, node_id: str) -> None:
        items = self._items_for(node_id)
        if items is None:
            return
        state = AggregatedState.of(items)
        if state.is_locked:
            logger.debug("Selective recording cycle blocked: %s is locked", node_id)
            return
        stream_visible, recording_visible = cycle_flags(state.is_stream_visible, state.is_recording_visible)
        self.commands.submit(
            contracts.SET_SELECTIVE_RECORDING,
            [i.id for i in items],
            stream_visible,
            recording_visible,
        )

    def toggle_selective_recording(self) -> bool:
        return toggle_global_selective_recording(self.session)

    def can_show_actions(self, node_id: str) -> bool:
        items = self._items_for(node_id)
        return bool(items)

    # ---------- Studio controls ----------

    def add_source(self) -> None:
        if not self.has_scene:
            return
        self.commands.submit(contracts.SHOW_SOURCE_SHOWCASE)

    def add_folder(self) -> None:
        if not self.has_scene:
            return
        items_to_group: List[str] = []
        parent_id = ""
        selected = self.active_item_ids
        if can_group_into_folder(self.scene, selected):
            items_to_group = selected
            parent_id = closest_parent_id(self.scene, selected) or ""
        self.commands.submit(
            contracts.SHOW_NAME_FOLDER,
            {
                "items_to_group": items_to_group,
                "parent_id": parent_id,
                "scene_id": self.scene.scene_id,
            },
        )

    def remove_items(self) -> None:
        selected = self.active_item_ids
        if not selected:
            return
        self.commands.submit(contracts.REMOVE_NODES, selected)

    def source_properties(self, node_id: Optional[str]) -> None:
        node = self.scene.get_node(node_id) if node_id else None
        if node is None:
            selected = [self.scene.get_node(i) for i in self.active_item_ids]
            node = next((n for n in selected if n is not None), None)
        if node is None:
            return

        item = node if is_item(node) else next(iter(items_under(self.scene, node.id)), None)
        if item is None:
            return

        if item.type == "scene":
            self.commands.submit(contracts.MAKE_SCENE_ACTIVE, item.source_id)
            return

        if not item.video:
            self.commands.submit(contracts.SHOW_ADVANCED_AUDIO_SETTINGS, item.source_id)
            return

        self.commands.submit(contracts.SHOW_SOURCE_PROPERTIES, item.source_id)

    def can_show_properties(self) -> bool:
        if not self.active_item_ids or self.store is None:
            return False
        node = self.store.get_node(self.last_selected_id) if self.last_selected_id else None
        if node is None or not is_item(node):
            return False
        source = self.store.get_source(node.source_id)
        return bool(source and source.has_props)

    def show_context_menu(self, node_id: Optional[str] = None) -> Dict[str, Any]:
        node = self.scene.get_node(node_id) if node_id else None
        source_id = ""

        if node is not None:
            if is_item(node):
                source_id = node.source_id
            else:
                items = items_under(self.scene, node.id)
                source_id = items[0].source_id if items else ""
            if not self.is_selected(node.id):
                self.selection.select([node.id])

        if node is not None:
            options = {
                "selected_scene_id": self.scene.scene_id,
                "show_scene_item_menu": True,
                "selected_source_id": source_id,
            }
        else:
            options = {"selected_scene_id": self.scene.scene_id}

        self.commands.submit(contracts.SHOW_EDIT_MENU, options)
        return options

    # ---------- Internals ----------

    def _items_for(self, node_id: str) -> Optional[List[SceneItem]]:
        if self.store is None:
            return None
        try:
            return items_under(self.store, node_id)
        except NodeNotFoundError:
            logger.debug("Node %s no longer exists", node_id)
            return None

    def _require_coordinator(self) -> SelectionCoordinator:
        if self.coordinator is None:
            raise ControllerError("No active scene.")
        return self.coordinator
