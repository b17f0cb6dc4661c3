# OCSYNC Registry Builder
# Build a registry from scanned items, user overrides and include roots

from collections.abc import Iterable, Mapping
from typing import Optional

from ocsync.exceptions import RegistryError
from ocsync.registry.model import Item, ItemType, Pack, Registry
from ocsync.scan.scanner import ScannedItem, assign_packs
from ocsync.utils.paths import normalize_rel_path

PACK_OVERRIDE = "pack"
OVERRIDE_CHOICES = (*(t.value for t in ItemType), PACK_OVERRIDE)


def parse_override(value: str) -> tuple[str, str]:
    """
    Parse a PATH=TYPE override.

    Raises:
        RegistryError: If the value is malformed or the type is unknown.
    """
    path, sep, kind = value.partition("=")
    path = normalize_rel_path(path)
    kind = kind.strip().lower()
    if not sep or not path:
        raise RegistryError(f"Invalid override '{value}', expected PATH=TYPE")
    if kind not in OVERRIDE_CHOICES:
        raise RegistryError(f"Invalid override type '{kind}', expected one of: {', '.join(OVERRIDE_CHOICES)}")
    return path, kind


def retarget(item: Item, item_type: ItemType) -> Item:
    """
    Copy of item with a new type and the matching target.

    Docs land at their basename; agents and commands go to
    <type>/<basename>. A skill is a directory holding SKILL.md, so a
    file cannot become a skill and a skill cannot become a file.

    Raises:
        RegistryError: If the change crosses between skill and file types.
    """
    if item_type == item.type:
        return item
    if ItemType.SKILL in (item_type, item.type):
        raise RegistryError(f"{item.key}: cannot change type from {item.type.value} to {item_type.value}")
    basename = item.key.rsplit("/", 1)[-1]
    target = basename if item_type == ItemType.DOC else f"{item_type.value}/{basename}"
    return Item(
        name=item.name,
        description=item.description,
        type=item_type,
        source_path=item.source_path,
        target_path=target,
        files=item.files,
    )


def build_registry(
    name: str,
    items: Iterable[Item],
    *,
    overrides: Optional[Mapping[str, str]] = None,
    include_roots: Iterable[str] = (),
    version: str = "1.0.0",
) -> Registry:
    """
    Build a registry from scanned items.

    Args:
        name: Registry name.
        items: Scanned items, in scan order.
        overrides: Path to item type, or "pack" to mark a directory as a pack root.
        include_roots: Keep only items below these roots (all when empty).
        version: Registry version.

    Returns:
        Registry with explicit and surviving inferred packs; empty packs are dropped.
    """
    overrides = {normalize_rel_path(k): v for k, v in (overrides or {}).items()}
    roots = [normalize_rel_path(r) for r in include_roots if normalize_rel_path(r)]
    pack_roots = [path for path, kind in overrides.items() if kind == PACK_OVERRIDE]

    scanned: list[ScannedItem] = []
    for item in items:
        if roots and not any(item.key == r or item.key.startswith(f"{r}/") for r in roots):
            continue
        kind = overrides.get(item.key)
        if kind is not None and kind != PACK_OVERRIDE:
            item = retarget(item, ItemType(kind))
        scanned.append(ScannedItem(item=item))

    assign_packs(scanned, pack_roots)

    packs: dict[str, Pack] = {}
    standalone: list[Item] = []
    for entry in scanned:
        if entry.pack_root is None:
            standalone.append(entry.item)
            continue
        pack = packs.setdefault(
            entry.pack_root,
            Pack(name=entry.pack_name or entry.pack_root, root_path=entry.pack_root),
        )
        pack.items.append(entry.item)

    return Registry(
        name=name,
        version=version,
        packs=[pack for pack in packs.values() if pack.items],
        standalone=standalone,
    )
