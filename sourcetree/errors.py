# sourcetree/errors.py
from __future__ import annotations


class SourceTreeError(Exception):
    pass


class NodeNotFoundError(SourceTreeError, LookupError):
    """Raised when a node id is absent from the current store snapshot."""

    def __init__(self, node_id: str):
        super().__init__(f"Scene node not found: {node_id}")
        self.node_id = node_id


class SceneStoreError(SourceTreeError):
    """Malformed scene data (unknown parent, parent not a folder, cycles)."""


class ControllerError(SourceTreeError):
    pass
