# sourcetree/nodes.py
"""
Scene node data model.

Nodes reference their parent by id; folders never own their children. The
tree is rebuilt from the flat node list every time it is needed.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, Union


class NodeType(Enum):
    ITEM = "item"
    FOLDER = "folder"


class PropertiesManagerType(Enum):
    DEFAULT = "default"
    WIDGET = "widget"
    STREAMLABELS = "streamlabels"


@dataclass
class Source:
    """The source an item renders. Owned by the external store."""
    id: str
    name: str
    type: str
    properties_manager_type: PropertiesManagerType = PropertiesManagerType.DEFAULT
    widget_type: Optional[str] = None
    has_props: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "properties_manager_type": self.properties_manager_type.value,
            "widget_type": self.widget_type,
            "has_props": self.has_props,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Source:
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            type=data.get("type", ""),
            properties_manager_type=PropertiesManagerType(data.get("properties_manager_type", "default")),
            widget_type=data.get("widget_type"),
            has_props=data.get("has_props", True),
        )


@dataclass
class SceneItem:
    """Leaf scene node backed by a source."""
    id: str
    source_id: str
    name: str = ""
    parent_id: Optional[str] = None
    visible: bool = True
    locked: bool = False
    stream_visible: bool = True
    recording_visible: bool = True
    video: bool = True
    type: str = ""  # "scene" for nested scene references, else the source type

    node_type = NodeType.ITEM

    def is_item(self) -> bool:
        return True

    def is_folder(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "node_type": self.node_type.value,
            "source_id": self.source_id,
            "name": self.name,
            "parent_id": self.parent_id,
            "visible": self.visible,
            "locked": self.locked,
            "stream_visible": self.stream_visible,
            "recording_visible": self.recording_visible,
            "video": self.video,
            "type": self.type,
        }


@dataclass
class SceneFolder:
    """Grouping node. Its children are the nodes whose parent_id is its id."""
    id: str
    name: str
    parent_id: Optional[str] = None

    node_type = NodeType.FOLDER

    def is_item(self) -> bool:
        return False

    def is_folder(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "node_type": self.node_type.value,
            "name": self.name,
            "parent_id": self.parent_id,
        }


SceneNode = Union[SceneItem, SceneFolder]


def is_item(node: SceneNode) -> bool:
    return node.node_type is NodeType.ITEM


def node_from_dict(data: Dict[str, Any]) -> SceneNode:
    """Build a node from its dict form; ``node_type`` selects the variant."""
    node_type = NodeType(data.get("node_type", "item"))
    if node_type is NodeType.FOLDER:
        return SceneFolder(
            id=data["id"],
            name=data.get("name", ""),
            parent_id=data.get("parent_id"),
        )
    return SceneItem(
        id=data["id"],
        source_id=data["source_id"],
        name=data.get("name", ""),
        parent_id=data.get("parent_id"),
        visible=data.get("visible", True),
        locked=data.get("locked", False),
        stream_visible=data.get("stream_visible", True),
        recording_visible=data.get("recording_visible", True),
        video=data.get("video", True),
        type=data.get("type", ""),
    )


@dataclass(frozen=True)
class SceneNodeView:
    """Derived, render-ready metadata for one node. Never stored."""
    id: str
    title: str
    icon: str
    is_visible: bool
    is_locked: bool
    is_stream_visible: bool
    is_recording_visible: bool
    is_folder: bool
    parent_id: Optional[str] = None
