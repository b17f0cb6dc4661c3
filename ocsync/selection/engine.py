# OCSYNC Selection Engine
# Tri-state selection, expansion and cursor over a node forest

from collections.abc import Iterable
from enum import Enum
from typing import Optional

from ocsync.registry.model import Item
from ocsync.scan.tree import TreeNode, flatten_tree, index_tree, iter_tree


class TriState(str, Enum):
    """Aggregate selection state of a node."""

    SELECTED = "selected"
    PARTIAL = "partial"
    EMPTY = "empty"


class SelectionEngine:
    """
    Desired-set selection over a tree of nodes.

    The authoritative state is the set of selected node ids. Only leaves
    (items and containers without children) are stored; a container's state
    is always derived from its leaves. The cursor is tracked by node id so
    it survives expand/collapse and lazily loaded children.
    """

    def __init__(
        self,
        nodes: list[TreeNode],
        *,
        selected: Iterable[str] = (),
        expanded: Iterable[str] = (),
    ):
        """
        Initialize engine.

        Args:
            nodes: Root nodes of the forest.
            selected: Initially selected node ids.
            expanded: Initially expanded container ids.
        """
        self.nodes = nodes
        self._index = index_tree(nodes)
        self.selected: set[str] = {node_id for node_id in selected if node_id in self._index}
        self.expanded: set[str] = {node_id for node_id in expanded if node_id in self._index}
        visible = self.visible()
        self._cursor_id: Optional[str] = visible[0].id if visible else None

    # Read model

    def node(self, node_id: str) -> TreeNode:
        """
        Look up a node.

        Raises:
            KeyError: If the id is unknown.
        """
        return self._index[node_id]

    def state(self, node_id: str) -> TriState:
        """Tri-state of a single node."""
        return self._derive(self.node(node_id), {})

    def states(self) -> dict[str, TriState]:
        """Tri-state of every node, derived in one pass."""
        memo: dict[str, TriState] = {}
        for node in self.nodes:
            self._derive(node, memo)
        return memo

    def _derive(self, node: TreeNode, memo: dict[str, TriState]) -> TriState:
        if not node.children:
            state = TriState.SELECTED if node.id in self.selected else TriState.EMPTY
        else:
            child_states = [self._derive(child, memo) for child in node.children]
            if all(s == TriState.SELECTED for s in child_states):
                state = TriState.SELECTED
            elif any(s != TriState.EMPTY for s in child_states):
                state = TriState.PARTIAL
            else:
                state = TriState.EMPTY
        memo[node.id] = state
        return state

    def visible(self) -> list[TreeNode]:
        """Depth-first list of nodes shown under the current expansion."""
        return flatten_tree(self.nodes, self.expanded)

    def selected_items(self) -> list[Item]:
        """Selected items in tree order, one per item key."""
        return [node.item for node in self.nodes_with_items() if node.id in self.selected and node.item is not None]

    def nodes_with_items(self) -> list[TreeNode]:
        """Item nodes in tree order, one per item key."""
        found: list[TreeNode] = []
        seen: set[str] = set()
        for node in iter_tree(self.nodes):
            if node.item is not None and node.item.key not in seen:
                seen.add(node.item.key)
                found.append(node)
        return found

    def selected_nodes(self) -> list[TreeNode]:
        """Topmost fully selected nodes in tree order."""
        states = self.states()
        found: list[TreeNode] = []

        def walk(node: TreeNode) -> None:
            if states[node.id] == TriState.SELECTED:
                found.append(node)
                return
            for child in node.children:
                walk(child)

        for node in self.nodes:
            walk(node)
        return found

    # Selection

    def toggle(self, node_id: Optional[str] = None) -> TriState:
        """
        Toggle a node (default: the cursor node).

        A fully selected node is cleared, otherwise every leaf below it is
        selected.

        Returns:
            The node's new state.
        """
        node = self._target(node_id)
        if node is None:
            return TriState.EMPTY
        if self.state(node.id) == TriState.SELECTED:
            self.selected.difference_update(n.id for n in node.iter_nodes())
        else:
            self.selected.update(leaf.id for leaf in _selectable(node))
        return self.state(node.id)

    def select_all(self) -> None:
        """Select every leaf."""
        for node in self.nodes:
            self.selected.update(leaf.id for leaf in _selectable(node))

    def clear(self) -> None:
        """Deselect everything."""
        self.selected.clear()

    def toggle_all(self) -> None:
        """Select all when any visible node is not fully selected, otherwise clear."""
        states = self.states()
        if any(states[node.id] != TriState.SELECTED for node in self.visible()):
            self.select_all()
        else:
            self.clear()

    def select_items(self, keys: Iterable[str]) -> None:
        """Replace the selection with the item nodes whose item key is in keys."""
        wanted = set(keys)
        self.selected = {
            node.id for node in iter_tree(self.nodes) if node.item is not None and node.item.key in wanted
        }

    # Expansion

    def expand(self, node_id: Optional[str] = None) -> None:
        """Expand a container."""
        node = self._target(node_id)
        if node is not None and node.is_container:
            self.expanded.add(node.id)

    def collapse(self, node_id: Optional[str] = None) -> None:
        """Collapse a container; a hidden cursor moves to the nearest visible ancestor."""
        node = self._target(node_id)
        if node is not None:
            self.expanded.discard(node.id)
            self._restore_cursor()

    def toggle_expanded(self, node_id: Optional[str] = None) -> None:
        """Flip the expansion of a container."""
        node = self._target(node_id)
        if node is None:
            return
        if node.id in self.expanded:
            self.collapse(node.id)
        else:
            self.expand(node.id)

    def set_children(self, node_id: str, children: list[TreeNode]) -> None:
        """
        Attach lazily loaded children to a container.

        Children of a selected container start selected.
        """
        node = self.node(node_id)
        was_selected = self.state(node_id) == TriState.SELECTED
        for child in node.iter_nodes():
            if child is not node:
                self._index.pop(child.id, None)
                self.selected.discard(child.id)

        for child in children:
            child.parent_id = node.id
            child.depth = node.depth + 1
        node.children = children
        node.children_loaded = True
        self._index.update(index_tree(children))
        if self._cursor_id is not None and self._cursor_id not in self._index:
            self._cursor_id = node.id

        if was_selected:
            self.selected.discard(node.id)
            self.selected.update(leaf.id for leaf in _selectable(node))
        self._restore_cursor()

    # Cursor

    @property
    def cursor(self) -> Optional[TreeNode]:
        """Node under the cursor."""
        if self._cursor_id is None:
            return None
        return self._index.get(self._cursor_id)

    @property
    def cursor_index(self) -> int:
        """Position of the cursor in the visible list."""
        for index, node in enumerate(self.visible()):
            if node.id == self._cursor_id:
                return index
        return 0

    def focus(self, node_id: str) -> None:
        """Move the cursor to a node."""
        self._cursor_id = self.node(node_id).id
        self._restore_cursor()

    def move_up(self) -> None:
        visible = self.visible()
        if visible:
            self._cursor_id = visible[max(self.cursor_index - 1, 0)].id

    def move_down(self) -> None:
        visible = self.visible()
        if visible:
            self._cursor_id = visible[min(self.cursor_index + 1, len(visible) - 1)].id

    def move_to_parent(self) -> None:
        """Move the cursor to the parent of the cursor node."""
        node = self.cursor
        if node is not None and node.parent_id is not None:
            self._cursor_id = node.parent_id

    def _restore_cursor(self) -> None:
        """Keep the cursor on its node, else its nearest visible ancestor, else the top."""
        visible_ids = {node.id for node in self.visible()}
        node_id = self._cursor_id
        while node_id is not None:
            if node_id in visible_ids:
                self._cursor_id = node_id
                return
            node = self._index.get(node_id)
            node_id = node.parent_id if node is not None else None
        self._cursor_id = self.nodes[0].id if self.nodes else None

    def _target(self, node_id: Optional[str]) -> Optional[TreeNode]:
        if node_id is None:
            return self.cursor
        return self.node(node_id)


def _selectable(node: TreeNode) -> list[TreeNode]:
    """Leaves under node: items and containers without children."""
    return [n for n in node.iter_nodes() if not n.children]
