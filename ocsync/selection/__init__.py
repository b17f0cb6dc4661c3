# OCSYNC Selection Module
# Tri-state selection engine and registry catalog tree

from ocsync.selection.catalog import build_catalog_tree, item_node_id, pack_node_id
from ocsync.selection.engine import SelectionEngine, TriState

__all__ = [
    "SelectionEngine",
    "TriState",
    "build_catalog_tree",
    "item_node_id",
    "pack_node_id",
]
