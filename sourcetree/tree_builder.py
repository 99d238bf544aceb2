# sourcetree/tree_builder.py
"""
Turns the flat, ordered list of node views into the nested structure the
tree widget renders.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from sourcetree.nodes import SceneNodeView


@dataclass
class TreeNode:
    view: SceneNodeView
    is_leaf: bool
    children: List[TreeNode] = field(default_factory=list)

    @property
    def key(self) -> str:
        return self.view.id


def build_tree(views: Sequence[SceneNodeView]) -> List[TreeNode]:
    """
    Nest ``views`` by ``parent_id``, starting from the roots.

    Sibling order follows the input order. Folders are never leaves, even
    when empty, so they stay valid drop targets.
    """
    by_parent: Dict[Optional[str], List[SceneNodeView]] = {}
    for view in views:
        by_parent.setdefault(view.parent_id or None, []).append(view)

    def attach(siblings: List[SceneNodeView]) -> List[TreeNode]:
        nodes = []
        for view in siblings:
            children = attach(by_parent.get(view.id, [])) if view.is_folder else []
            nodes.append(TreeNode(view=view, is_leaf=not view.is_folder, children=children))
        return nodes

    return attach(by_parent.get(None, []))


def flatten_tree(tree: Sequence[TreeNode]) -> List[str]:
    """Pre-order ids of a built tree."""
    ids: List[str] = []
    for node in tree:
        ids.append(node.key)
        ids.extend(flatten_tree(node.children))
    return ids


def find_tree_node(tree: Sequence[TreeNode], node_id: str) -> Optional[TreeNode]:
    for node in tree:
        if node.key == node_id:
            return node
        found = find_tree_node(node.children, node_id)
        if found is not None:
            return found
    return None
