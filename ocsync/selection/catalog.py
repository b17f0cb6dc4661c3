# OCSYNC Registry Catalog
# Present a registry as a selectable node forest

from ocsync.config.schema import InstallMode
from ocsync.registry.model import Item, ItemType, Registry
from ocsync.scan.tree import NodeKind, TreeNode

PACKS_CATEGORY = ("packs", "Packs", "Collections of agents, skills and commands")

STANDALONE_CATEGORIES = [
    ("agents", "Agents", ItemType.AGENT, "Standalone agents"),
    ("commands", "Commands", ItemType.COMMAND, "Standalone commands"),
    ("skills", "Skills", ItemType.SKILL, "Standalone skills"),
    ("docs", "Docs", ItemType.DOC, "Project documents"),
]


def category_node_id(category: str) -> str:
    return f"category:{category}"


def pack_node_id(name: str) -> str:
    return f"pack:{name}"


def item_node_id(item: Item) -> str:
    return f"item:{item.key}"


def is_visible(item: Item, mode: InstallMode) -> bool:
    """Check if an item can be selected in a mode. Docs are local only."""
    return not (mode == InstallMode.GLOBAL and item.type == ItemType.DOC)


def build_catalog_tree(registry: Registry, mode: InstallMode) -> list[TreeNode]:
    """
    Build the selection forest for a registry.

    A Packs category with one node per pack comes first, followed by one
    category per standalone item type. Declaration order is kept and empty
    categories or packs are left out.

    Args:
        registry: Loaded registry.
        mode: Install mode; global mode hides doc items.

    Returns:
        Category nodes.
    """
    categories: list[TreeNode] = []

    category_id, title, description = PACKS_CATEGORY
    packs = TreeNode(
        id=category_node_id(category_id),
        label=title,
        kind=NodeKind.FOLDER,
        depth=0,
        description=description,
    )
    for pack in registry.pack_index.values():
        pack_node = TreeNode(
            id=pack_node_id(pack.name),
            label=pack.name,
            kind=NodeKind.PACK,
            depth=1,
            description=pack.description,
            parent_id=packs.id,
        )
        pack_node.children = [
            _item_node(item, pack_node) for item in pack.items if is_visible(item, mode)
        ]
        if pack_node.children:
            packs.children.append(pack_node)
    if packs.children:
        categories.append(packs)

    for category_id, title, item_type, description in STANDALONE_CATEGORIES:
        category = TreeNode(
            id=category_node_id(category_id),
            label=title,
            kind=NodeKind.FOLDER,
            depth=0,
            description=description,
        )
        category.children = [
            _item_node(item, category)
            for item in registry.standalone
            if item.type == item_type and is_visible(item, mode)
        ]
        if category.children:
            categories.append(category)

    return categories


def _item_node(item: Item, parent: TreeNode) -> TreeNode:
    return TreeNode(
        id=item_node_id(item),
        label=item.name,
        kind=NodeKind.ITEM,
        depth=parent.depth + 1,
        item=item,
        description=item.description,
        parent_id=parent.id,
    )
