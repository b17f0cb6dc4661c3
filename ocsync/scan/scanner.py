# OCSYNC Tree Scanner
# Walk local subtrees, classify files into items and build the node forest

import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ocsync.exceptions import ScanError
from ocsync.registry.model import Item, ItemType, Pack, Registry
from ocsync.scan.classify import (
    Classification,
    classify_path,
    find_skill_dirs,
    is_markdown,
    pack_candidate,
    should_skip_dir,
)
from ocsync.scan.frontmatter import normalize_description, read_frontmatter
from ocsync.scan.tree import NodeKind, TreeNode, path_node_id, sort_tree
from ocsync.utils.paths import normalize_rel_path

ROOT_PREFIX = "root:"


@dataclass
class ScannedItem:
    """An item discovered by the scanner with its pack assignment."""

    item: Item
    pack_name: Optional[str] = None
    pack_root: Optional[str] = None


@dataclass
class ScanResult:
    """Output of a scan: items, node forest and per-subtree errors."""

    root: Path
    items: list[ScannedItem] = field(default_factory=list)
    nodes: list[TreeNode] = field(default_factory=list)
    directories: list[str] = field(default_factory=list)
    errors: list[ScanError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if every subtree was read."""
        return not self.errors

    @property
    def packs(self) -> dict[str, list[Item]]:
        """Items grouped by pack root, in discovery order."""
        grouped: dict[str, list[Item]] = {}
        for scanned in self.items:
            if scanned.pack_root is not None:
                grouped.setdefault(scanned.pack_root, []).append(scanned.item)
        return grouped

    @property
    def standalone(self) -> list[Item]:
        """Items outside any pack."""
        return [scanned.item for scanned in self.items if scanned.pack_root is None]

    def to_registry(self, name: str, version: str = "1.0.0") -> Registry:
        """Registry with the scanned pack structure."""
        packs = [
            Pack(name=root.rsplit("/", 1)[-1], root_path=root, items=items) for root, items in self.packs.items()
        ]
        return Registry(name=name, version=version, packs=packs, standalone=self.standalone)


def reduce_roots(paths: Iterable[str]) -> list[str]:
    """
    Collapse selected root paths to the minimal covering set.

    A path below another selected path is dropped; order is shortest first.
    """
    normalized = sorted({normalize_rel_path(p) for p in paths if normalize_rel_path(p)}, key=lambda p: (len(p), p))
    reduced: list[str] = []
    for value in normalized:
        if not any(value == root or value.startswith(f"{root}/") for root in reduced):
            reduced.append(value)
    return reduced


def assign_packs(items: list[ScannedItem], pack_roots: Iterable[str] = ()) -> list[ScannedItem]:
    """
    Assign pack membership in place.

    Explicit pack roots win (longest root first). Otherwise items under
    agents/<name>/ form an implicit pack, which is dissolved back into
    standalone items unless it holds a skill or a command.
    """
    explicit = sorted({normalize_rel_path(r) for r in pack_roots if normalize_rel_path(r)}, key=len, reverse=True)
    inferred: dict[str, list[ScannedItem]] = {}

    for scanned in items:
        key = scanned.item.key
        root = next((r for r in explicit if key == r or key.startswith(f"{r}/")), None)
        if root is not None:
            scanned.pack_root = root
            scanned.pack_name = root.rsplit("/", 1)[-1]
            continue

        scanned.pack_root = None
        scanned.pack_name = None
        candidate = pack_candidate(key)
        if candidate is not None:
            inferred.setdefault(candidate, []).append(scanned)

    for name, members in inferred.items():
        if not any(m.item.type in (ItemType.SKILL, ItemType.COMMAND) for m in members):
            continue
        for member in members:
            member.pack_name = name
            member.pack_root = f"agents/{name}"

    return items


def scan_tree(
    root: Path,
    allowed_roots: Iterable[str],
    *,
    pack_roots: Iterable[str] = (),
) -> ScanResult:
    """
    Scan allowed subtrees of root into items and a node forest.

    An unreadable directory ends the scan of that subtree and is recorded
    on the result; missing roots are skipped.

    Args:
        root: Repository root directory.
        allowed_roots: Relative subtrees to scan.
        pack_roots: Directories explicitly marked as packs.

    Returns:
        ScanResult with items, nodes and errors.
    """
    result = ScanResult(root=root)
    files: list[str] = []

    for allowed in reduce_roots(allowed_roots):
        if any(should_skip_dir(part) for part in allowed.split("/")):
            continue
        if not (root / allowed).is_dir():
            continue
        result.directories.append(allowed)
        _walk(root, allowed, files, result)

    skill_dirs = find_skill_dirs(files)
    classified: list[tuple[str, Classification]] = []
    for rel_path in files:
        classification = classify_path(rel_path, skill_dirs)
        if classification is not None:
            classified.append((rel_path, classification))

    result.items = assign_packs(_build_items(root, classified), pack_roots)
    result.nodes = build_nodes(result.items, result.directories)
    return result


def build_nodes(items: list[ScannedItem], directories: list[str]) -> list[TreeNode]:
    """
    Build the sorted node forest from items and scanned directories.

    Every intermediate directory gets a folder node; a surviving pack root
    becomes a pack node; a skill is a leaf at its directory.
    """
    nodes: dict[str, TreeNode] = {}
    forest: list[TreeNode] = []
    pack_roots = {s.pack_root for s in items if s.pack_root is not None}
    skill_dirs = {s.item.key for s in items if s.item.type == ItemType.SKILL}

    def get_or_create(path: str) -> TreeNode:
        if path in nodes:
            return nodes[path]
        segments = path.split("/")
        node = TreeNode(
            id=path_node_id(path),
            label=segments[-1],
            kind=NodeKind.PACK if path in pack_roots else NodeKind.FOLDER,
            depth=len(segments) - 1,
        )
        nodes[path] = node
        if len(segments) > 1:
            parent = get_or_create("/".join(segments[:-1]))
            node.parent_id = parent.id
            parent.children.append(node)
        else:
            forest.append(node)
        return node

    for scanned in items:
        node = get_or_create(scanned.item.key)
        node.kind = NodeKind.ITEM
        node.item = scanned.item
        node.description = scanned.item.description

    for directory in directories:
        if any(directory == d or directory.startswith(f"{d}/") for d in skill_dirs):
            continue
        get_or_create(directory)

    for pack_root in pack_roots:
        if pack_root in nodes and nodes[pack_root].kind != NodeKind.ITEM:
            nodes[pack_root].kind = NodeKind.PACK

    return sort_tree(forest)


def scan_root_tree(root: Path) -> list[TreeNode]:
    """
    First-level directories of root as lazily loaded folder nodes.

    Raises:
        ScanError: If root cannot be read.
    """
    return [
        TreeNode(id=f"{ROOT_PREFIX}{name}", label=name, kind=NodeKind.FOLDER, depth=0, children_loaded=False)
        for name in _list_child_dirs(root)
    ]


def load_children(root: Path, node: TreeNode) -> list[TreeNode]:
    """
    Child directory nodes one level below a root-picker node.

    Raises:
        ScanError: If the directory cannot be read.
    """
    rel_path = root_path_of(node.id)
    return [
        TreeNode(
            id=f"{ROOT_PREFIX}{rel_path}/{name}",
            label=name,
            kind=NodeKind.FOLDER,
            depth=node.depth + 1,
            parent_id=node.id,
            children_loaded=False,
        )
        for name in _list_child_dirs(root / rel_path)
    ]


def root_path_of(node_id: str) -> str:
    """Relative path encoded in a root-picker or path node id."""
    _, _, rel_path = node_id.partition(":")
    return normalize_rel_path(rel_path)


def _list_dir(path: Path) -> list[os.DirEntry]:
    """List a directory sorted by name, raising ScanError when unreadable."""
    try:
        with os.scandir(path) as entries:
            return sorted(entries, key=lambda entry: entry.name)
    except OSError as e:
        raise ScanError(str(path), e.strerror or str(e)) from e


def _list_child_dirs(path: Path) -> list[str]:
    names = []
    for entry in _list_dir(path):
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
            raise ScanError(str(path / entry.name), e.strerror or str(e)) from e
        if is_dir and not should_skip_dir(entry.name):
            names.append(entry.name)
    return names


def _walk(root: Path, rel_dir: str, files: list[str], result: ScanResult) -> None:
    try:
        entries = _list_dir(root / rel_dir)
    except ScanError as e:
        result.errors.append(e)
        return

    for entry in entries:
        rel_path = f"{rel_dir}/{entry.name}"
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = not is_dir and entry.is_file(follow_symlinks=False)
        except OSError as e:
            result.errors.append(ScanError(str(root / rel_path), e.strerror or str(e)))
            continue

        if is_dir:
            if should_skip_dir(entry.name):
                continue
            result.directories.append(rel_path)
            _walk(root, rel_path, files, result)
        elif is_file:
            files.append(rel_path)


def _build_items(root: Path, classified: list[tuple[str, Classification]]) -> list[ScannedItem]:
    """Turn classifications into items, folding skill assets into their skill."""
    assets: dict[str, list[str]] = {}
    markers: dict[str, str] = {}
    for rel_path, classification in classified:
        if classification.type != ItemType.SKILL:
            continue
        member = rel_path[len(classification.source_path) + 1:]
        if classification.is_asset:
            assets.setdefault(classification.source_path, []).append(member)
        else:
            markers[classification.source_path] = member

    items: list[ScannedItem] = []
    for rel_path, classification in classified:
        if classification.is_asset:
            continue

        name = rel_path.rsplit("/", 1)[-1]
        if name.lower().endswith(".md"):
            name = name[:-3]
        description = ""
        files: tuple[str, ...] = ()

        if classification.type == ItemType.SKILL:
            name = classification.source_path.rsplit("/", 1)[-1]
            files = (markers[classification.source_path], *sorted(assets.get(classification.source_path, [])))

        if is_markdown(rel_path):
            frontmatter = read_frontmatter(root / rel_path)
            if frontmatter.name:
                name = frontmatter.name
            if frontmatter.description:
                description = normalize_description(frontmatter.description)

        items.append(
            ScannedItem(
                item=Item(
                    name=name,
                    description=description,
                    type=classification.type,
                    source_path=classification.source_path,
                    target_path=classification.target,
                    files=files,
                )
            )
        )

    return items
