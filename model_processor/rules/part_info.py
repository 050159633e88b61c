# File: rules/part_info.py
# Purpose: Read-only view of a node's place in the tree, taken at visit time

from dataclasses import dataclass

from ..core.schema import SceneNode


@dataclass(frozen=True)
class PartInfo:
    """
    Snapshot used by condition evaluation.

    Built fresh for every visited node; earlier actions may have renamed
    ancestors, so a PartInfo is never reused after the tree changed.
    """
    node: SceneNode
    name: str
    hierarchy_path: str
    child_depth: int

    @classmethod
    def of(cls, node: SceneNode) -> "PartInfo":
        return cls(node=node, name=node.name,
                   hierarchy_path=node.hierarchy_path, child_depth=node.depth)

    @property
    def is_root(self) -> bool:
        return self.child_depth == 0
