# sourcetree/contracts.py
"""
Collaborator contracts consumed by the source selector core.

The core only reads nodes and issues requests; whatever implements these
protocols owns the data and executes the commands.
"""
from __future__ import annotations
from typing import Any, Callable, List, Optional, Protocol, Sequence

from sourcetree.nodes import SceneNode, Source

# ----------------------------
# Command names
# ----------------------------

HIDE_ITEMS = "HideItemsCommand"
SET_ITEM_SETTINGS = "SetItemSettingsCommand"
SET_SELECTIVE_RECORDING = "SetSelectiveRecordingCommand"
REORDER_NODES = "ReorderNodesCommand"
REMOVE_NODES = "RemoveNodesCommand"
CREATE_FOLDER = "CreateFolderCommand"
SHOW_NAME_FOLDER = "ShowNameFolder"
SHOW_SOURCE_SHOWCASE = "ShowSourceShowcase"
SHOW_SOURCE_PROPERTIES = "ShowSourceProperties"
SHOW_ADVANCED_AUDIO_SETTINGS = "ShowAdvancedAudioSettings"
MAKE_SCENE_ACTIVE = "MakeSceneActive"
SHOW_EDIT_MENU = "ShowEditMenu"


# ----------------------------
# Protocols
# ----------------------------

class NodeStore(Protocol):
    scene_id: str

    def get_nodes(self) -> List[SceneNode]: ...

    def get_node(self, node_id: str) -> Optional[SceneNode]: ...

    def get_source(self, source_id: str) -> Optional[Source]: ...


class SelectionStore(Protocol):
    @property
    def selected_ids(self) -> List[str]: ...

    @property
    def last_selected_id(self) -> Optional[str]: ...

    def select(self, ids: Sequence[str]) -> None: ...

    def subscribe(self, listener: Callable[[], None]) -> None: ...


class CommandSubmitter(Protocol):
    def submit(self, command_name: str, *args: Any) -> Any: ...


class SessionState(Protocol):
    @property
    def is_idle(self) -> bool: ...

    @property
    def is_replay_buffer_active(self) -> bool: ...

    @property
    def selective_recording(self) -> bool: ...

    def set_selective_recording(self, value: bool) -> None: ...
