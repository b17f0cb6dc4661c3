# OCSYNC Tree Nodes
# Navigable node forest shared by the scanner and the registry catalog

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ocsync.registry.model import Item


class NodeKind(str, Enum):
    """Kind of tree node."""

    FOLDER = "folder"
    PACK = "pack"
    ITEM = "item"


@dataclass
class TreeNode:
    """
    One node of a selection tree.

    Folders and packs hold ordered children; items reference their Item.
    ``children_loaded`` is False for containers whose children are fetched
    lazily.
    """

    id: str
    label: str
    kind: NodeKind
    depth: int
    children: list["TreeNode"] = field(default_factory=list)
    item: Optional[Item] = None
    description: str = ""
    parent_id: Optional[str] = None
    children_loaded: bool = True

    @property
    def is_container(self) -> bool:
        """Check if node can hold children."""
        return self.kind != NodeKind.ITEM

    def iter_nodes(self) -> Iterator["TreeNode"]:
        """This node and all descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def leaves(self) -> list["TreeNode"]:
        """Descendant item nodes (the node itself when it is an item)."""
        return [node for node in self.iter_nodes() if node.kind == NodeKind.ITEM]


def path_node_id(rel_path: str) -> str:
    """Node id for a normalized relative path."""
    return f"path:{rel_path}"


def sort_tree(nodes: list[TreeNode]) -> list[TreeNode]:
    """Sort siblings by label at every level, in place. Returns the list."""
    nodes.sort(key=lambda node: node.label)
    for node in nodes:
        if node.children:
            sort_tree(node.children)
    return nodes


def iter_tree(nodes: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """All nodes of a forest, depth first."""
    for node in nodes:
        yield from node.iter_nodes()


def index_tree(nodes: Iterable[TreeNode]) -> dict[str, TreeNode]:
    """Map node id to node for a whole forest."""
    return {node.id: node for node in iter_tree(nodes)}


def flatten_tree(nodes: Iterable[TreeNode], expanded: set[str]) -> list[TreeNode]:
    """
    Depth-first list of visible nodes.

    Children of a container are visible only when the container is expanded.
    """
    flat: list[TreeNode] = []

    def walk(node: TreeNode) -> None:
        flat.append(node)
        if node.is_container and node.id not in expanded:
            return
        for child in node.children:
            walk(child)

    for node in nodes:
        walk(node)
    return flat
