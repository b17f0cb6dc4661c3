# OCSYNC Diff Engine
# Derive install, refresh and remove sets from desired and installed items

from collections.abc import Iterable
from dataclasses import dataclass, field

from ocsync.registry.model import Item


@dataclass
class Changes:
    """Items to install, refresh and remove."""

    install: list[Item] = field(default_factory=list)
    refresh: list[Item] = field(default_factory=list)
    remove: list[Item] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.install) + len(self.refresh) + len(self.remove)

    @property
    def is_empty(self) -> bool:
        """Check if there is nothing to do."""
        return self.total == 0


def compute_changes(desired: Iterable[Item], installed: Iterable[Item]) -> Changes:
    """
    Compute the changes that turn the installed set into the desired set.

    Items are compared by key. ``install`` and ``refresh`` follow the order
    of ``desired``; ``remove`` follows the order of ``installed``. Neither
    input is modified.

    Args:
        desired: Items the user wants installed.
        installed: Items currently found on disk.

    Returns:
        Changes with pairwise disjoint install, refresh and remove lists.
    """
    desired_items = _unique(desired)
    installed_items = _unique(installed)
    desired_keys = {item.key for item in desired_items}
    installed_keys = {item.key for item in installed_items}

    return Changes(
        install=[item for item in desired_items if item.key not in installed_keys],
        refresh=[item for item in desired_items if item.key in installed_keys],
        remove=[item for item in installed_items if item.key not in desired_keys],
    )


def _unique(items: Iterable[Item]) -> list[Item]:
    seen: set[str] = set()
    unique: list[Item] = []
    for item in items:
        if item.key not in seen:
            seen.add(item.key)
            unique.append(item)
    return unique
