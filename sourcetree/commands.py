# sourcetree/commands.py
"""
Reference command layer.

Store-mutating commands are applied to a SceneStore. UI requests (dialogs,
menus, the source showcase) are forwarded to handlers the presentation layer
registers; without one they are only recorded.
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from sourcetree import contracts
from sourcetree.reorder import PlaceType
from sourcetree.scene_store import SceneStore

logger = logging.getLogger(__name__)

UI_REQUESTS = (
    contracts.SHOW_NAME_FOLDER,
    contracts.SHOW_SOURCE_SHOWCASE,
    contracts.SHOW_SOURCE_PROPERTIES,
    contracts.SHOW_ADVANCED_AUDIO_SETTINGS,
    contracts.MAKE_SCENE_ACTIVE,
    contracts.SHOW_EDIT_MENU,
)


class CommandBus:
    """Dispatches named commands to handlers and keeps a history."""

    def __init__(self, store: SceneStore):
        self.store = store
        self.history: List[Tuple[str, Tuple[Any, ...]]] = []
        self._handlers: Dict[str, Callable[..., Any]] = {
            contracts.HIDE_ITEMS: self._hide_items,
            contracts.SET_ITEM_SETTINGS: self._set_item_settings,
            contracts.SET_SELECTIVE_RECORDING: self._set_selective_recording,
            contracts.REORDER_NODES: self._reorder_nodes,
            contracts.REMOVE_NODES: self._remove_nodes,
            contracts.CREATE_FOLDER: self._create_folder,
        }
        for name in UI_REQUESTS:
            self._handlers[name] = self._ignore

    def register(self, command_name: str, handler: Callable[..., Any]) -> None:
        self._handlers[command_name] = handler

    def submit(self, command_name: str, *args: Any) -> Any:
        handler = self._handlers[command_name]
        logger.debug("Submitting %s%r", command_name, args)
        self.history.append((command_name, args))
        return handler(*args)

    def last(self, command_name: Optional[str] = None) -> Optional[Tuple[str, Tuple[Any, ...]]]:
        for entry in reversed(self.history):
            if command_name is None or entry[0] == command_name:
                return entry
        return None

    # ---------- Handlers ----------

    def _hide_items(self, item_ids: Sequence[str], hidden: bool) -> None:
        self.store.set_item_fields(item_ids, visible=not hidden)

    def _set_item_settings(self, item_ids: Sequence[str], settings: Dict[str, Any]) -> None:
        self.store.set_item_fields(item_ids, **settings)

    def _set_selective_recording(self, item_ids: Sequence[str], stream_visible: bool, recording_visible: bool) -> None:
        self.store.set_item_fields(
            item_ids,
            stream_visible=stream_visible,
            recording_visible=recording_visible,
        )

    def _reorder_nodes(self, node_ids: Sequence[str], destination_id: str, placement: PlaceType) -> None:
        self.store.reorder(node_ids, destination_id, placement)

    def _remove_nodes(self, node_ids: Sequence[str]) -> None:
        self.store.remove(node_ids)

    def _create_folder(self, name: str, items_to_group: Sequence[str] = (), parent_id: Optional[str] = None):
        return self.store.create_folder(name, items_to_group, parent_id)

    def _ignore(self, *args: Any) -> None:
        return None
