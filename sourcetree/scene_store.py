# sourcetree/scene_store.py
"""
In-memory scene store: an arena of nodes keyed by id plus the display order.

This is the reference implementation of the NodeStore contract used by the
demo app and the tests. The node order is kept in pre-order (every folder is
immediately followed by its subtree) so subtrees always move as one block.
"""
from __future__ import annotations
import logging
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from sourcetree.errors import NodeNotFoundError, SceneStoreError
from sourcetree.nodes import SceneFolder, SceneNode, Source, is_item, node_from_dict
from sourcetree.reorder import PlaceType

logger = logging.getLogger(__name__)


class SceneStore:
    """Holds the nodes and sources of one scene."""

    def __init__(
        self,
        scene_id: str,
        nodes: Iterable[SceneNode] = (),
        sources: Iterable[Source] = (),
    ):
        self.scene_id = scene_id
        self._sources: Dict[str, Source] = {s.id: s for s in sources}
        self._nodes: Dict[str, SceneNode] = {}
        self._order: List[str] = []
        self._listeners: List[Callable[[], None]] = []

        for node in nodes:
            if node.id in self._nodes:
                raise SceneStoreError(f"Duplicate node id: {node.id}")
            self._nodes[node.id] = node
            self._order.append(node.id)

        self.validate()
        self._order = self._preorder(self._order)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SceneStore:
        """
        Build a store from ``{"scene_id", "sources": [...], "nodes": [...]}``.

        Nodes are listed in display order; ``node_type`` selects item/folder.
        """
        return cls(
            scene_id=data.get("scene_id", "scene"),
            nodes=[node_from_dict(n) for n in data.get("nodes", [])],
            sources=[Source.from_dict(s) for s in data.get("sources", [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scene_id": self.scene_id,
            "sources": [s.to_dict() for s in self._sources.values()],
            "nodes": [n.to_dict() for n in self.get_nodes()],
        }

    # ---------- Change notification ----------

    def subscribe(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    # ---------- Reads ----------

    def get_nodes(self) -> List[SceneNode]:
        return [self._nodes[node_id] for node_id in self._order]

    def get_node(self, node_id: Optional[str]) -> Optional[SceneNode]:
        if node_id is None:
            return None
        return self._nodes.get(node_id)

    def get_source(self, source_id: str) -> Optional[Source]:
        return self._sources.get(source_id)

    def add_source(self, source: Source) -> None:
        self._sources[source.id] = source

    def children_of(self, node_id: Optional[str]) -> List[SceneNode]:
        return [n for n in self.get_nodes() if n.parent_id == node_id]

    def path_of(self, node_id: str) -> List[str]:
        """Root-first ids from the outermost folder down to the node itself."""
        node = self._require(node_id)
        path = [node.id]
        while node.parent_id is not None:
            node = self._require(node.parent_id)
            path.insert(0, node.id)
        return path

    def subtree_ids(self, node_id: str) -> List[str]:
        """The node followed by all of its descendants, in display order."""
        self._require(node_id)
        start = self._order.index(node_id)
        end = start + 1
        while end < len(self._order) and self._is_descendant(self._order[end], node_id):
            end += 1
        return self._order[start:end]

    # ---------- Validation ----------

    def validate(self) -> None:
        """Reject unknown parents, non-folder parents and parent cycles."""
        for node in self._nodes.values():
            if node.parent_id is None:
                continue
            parent = self._nodes.get(node.parent_id)
            if parent is None:
                raise SceneStoreError(f"Node {node.id} references unknown parent {node.parent_id}")
            if is_item(parent):
                raise SceneStoreError(f"Node {node.id} has an item as parent: {parent.id}")

        for node in self._nodes.values():
            seen = {node.id}
            current = node
            while current.parent_id is not None:
                if current.parent_id in seen:
                    raise SceneStoreError(f"Parent cycle through node {node.id}")
                seen.add(current.parent_id)
                current = self._nodes[current.parent_id]

        for node in self._nodes.values():
            if is_item(node) and node.source_id not in self._sources:
                logger.debug("Item %s references unknown source %s", node.id, node.source_id)

    # ---------- Mutations (driven by the command bus) ----------

    def set_item_fields(self, item_ids: Sequence[str], **fields: Any) -> None:
        allowed = {"visible", "locked", "stream_visible", "recording_visible"}
        unknown = set(fields) - allowed
        if unknown:
            raise SceneStoreError(f"Unsupported item fields: {sorted(unknown)}")
        nodes = [self._require(item_id) for item_id in item_ids]
        for node in nodes:
            if not is_item(node):
                raise SceneStoreError(f"Not an item: {node.id}")
        for node in nodes:
            for key, value in fields.items():
                setattr(node, key, bool(value))
        self._notify()

    def reorder(self, node_ids: Sequence[str], destination_id: str, placement: PlaceType) -> None:
        """Move nodes (with their subtrees) before, after or inside a destination."""
        for node_id in node_ids:
            self._require(node_id)
        destination = self._require(destination_id)

        moved = set(node_ids)
        top_level = [
            node_id for node_id in self._order
            if node_id in moved and not any(a in moved for a in self.path_of(node_id)[:-1])
        ]
        block: List[str] = []
        for node_id in top_level:
            block.extend(self.subtree_ids(node_id))
        if destination_id in block:
            raise SceneStoreError(f"Cannot move nodes relative to their own subtree: {destination_id}")

        block_set = set(block)
        remaining = [node_id for node_id in self._order if node_id not in block_set]
        dest_index = remaining.index(destination_id)

        if placement is PlaceType.INSIDE:
            if is_item(destination):
                raise SceneStoreError(f"Cannot move nodes inside an item: {destination_id}")
            new_parent = destination.id
            insert_at = dest_index + 1
        elif placement is PlaceType.BEFORE:
            new_parent = destination.parent_id
            insert_at = dest_index
        else:
            new_parent = destination.parent_id
            insert_at = dest_index + 1
            while insert_at < len(remaining) and self._is_descendant(remaining[insert_at], destination_id):
                insert_at += 1

        for node_id in top_level:
            self._nodes[node_id].parent_id = new_parent
        self._order = remaining[:insert_at] + block + remaining[insert_at:]
        self._notify()

    def remove(self, node_ids: Sequence[str]) -> None:
        """Remove nodes and everything nested under them. Unknown ids are ignored."""
        doomed = set()
        for node_id in node_ids:
            if node_id in self._nodes:
                doomed.update(self.subtree_ids(node_id))
        for node_id in doomed:
            del self._nodes[node_id]
        self._order = [node_id for node_id in self._order if node_id not in doomed]
        self._notify()

    def create_folder(
        self,
        name: str,
        items_to_group: Sequence[str] = (),
        parent_id: Optional[str] = None,
    ) -> SceneFolder:
        """Create a folder under ``parent_id`` and move ``items_to_group`` into it."""
        if parent_id:
            parent = self._require(parent_id)
            if is_item(parent):
                raise SceneStoreError(f"Cannot create a folder inside an item: {parent_id}")
        else:
            parent_id = None

        folder = SceneFolder(id=self._generate_id(), name=name, parent_id=parent_id)
        wanted = set(items_to_group)
        grouped = [node_id for node_id in self._order if node_id in wanted]

        if grouped:
            insert_at = self._order.index(grouped[0])
        elif parent_id is not None:
            insert_at = self._order.index(parent_id) + 1
        else:
            insert_at = 0

        self._nodes[folder.id] = folder
        self._order.insert(insert_at, folder.id)
        if grouped:
            self.reorder(grouped, folder.id, PlaceType.INSIDE)
        else:
            self._notify()
        return folder

    # ---------- Internals ----------

    def _require(self, node_id: str) -> SceneNode:
        node = self._nodes.get(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def _is_descendant(self, node_id: str, ancestor_id: str) -> bool:
        node = self._nodes[node_id]
        while node.parent_id is not None:
            if node.parent_id == ancestor_id:
                return True
            node = self._nodes[node.parent_id]
        return False

    def _preorder(self, order: List[str]) -> List[str]:
        children: Dict[Optional[str], List[str]] = {}
        for node_id in order:
            children.setdefault(self._nodes[node_id].parent_id, []).append(node_id)

        result: List[str] = []

        def visit(parent_id: Optional[str]) -> None:
            for child_id in children.get(parent_id, []):
                result.append(child_id)
                visit(child_id)

        visit(None)
        return result

    def _generate_id(self) -> str:
        return str(uuid.uuid4())
