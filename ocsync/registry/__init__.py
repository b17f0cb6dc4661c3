# OCSYNC Registry Module
# Registry records and install path resolution

from ocsync.registry.model import Item, ItemType, Pack, Registry, normalize_source, validate_registry
from ocsync.registry.resolver import find_installed_items, resolve_target_path

__all__ = [
    "Item",
    "ItemType",
    "Pack",
    "Registry",
    "normalize_source",
    "validate_registry",
    "resolve_target_path",
    "find_installed_items",
]
