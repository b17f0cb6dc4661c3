# OCSYNC Target Resolver
# Maps items to install paths and detects what is already installed

from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from ocsync.config.schema import InstallConfig, InstallMode
from ocsync.registry.model import Item


def resolve_target_path(
    item: Item,
    mode: InstallMode,
    install: InstallConfig,
    *,
    cwd: Optional[Path] = None,
) -> Path:
    """
    Resolve the absolute install path of an item.

    Prefixed types land under the mode's install root; the rest (docs)
    land relative to the working directory.

    Args:
        item: Item to resolve.
        mode: Global or local install.
        install: Install path policy.
        cwd: Working directory for unprefixed types (default: current).

    Returns:
        Absolute path of the installed file or directory.
    """
    if install.is_prefixed(item.type.value):
        return Path(install.root_for(mode)) / item.target_path
    return (cwd or Path.cwd()) / item.target_path


def find_installed_items(
    items: Iterable[Item],
    mode: InstallMode,
    install: InstallConfig,
    *,
    cwd: Optional[Path] = None,
) -> list[Item]:
    """
    Return the items whose install path exists, in input order.

    Items are deduplicated by key.
    """
    installed: list[Item] = []
    seen: set[str] = set()
    for item in items:
        if item.key in seen:
            continue
        if resolve_target_path(item, mode, install, cwd=cwd).exists():
            installed.append(item)
            seen.add(item.key)
    return installed
