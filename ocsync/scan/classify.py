# OCSYNC Path Classification
# Infer item type, target and grouping from a repository-relative path

from dataclasses import dataclass
from typing import Optional

from ocsync.registry.model import ItemType

MARKER_DIR = ".opencode"
AGENTS_ROOT = "agents"
SKILL_MARKER = "skill.md"

TYPE_DIRS: dict[str, ItemType] = {
    "agent": ItemType.AGENT,
    "command": ItemType.COMMAND,
    "skill": ItemType.SKILL,
}

EXCLUDED_FILES = frozenset(
    {
        "package.json",
        "package-lock.json",
        "pnpm-lock.yaml",
        "yarn.lock",
        "bun.lock",
        "bun.lockb",
        "registry.json",
        "registry.yaml",
    }
)

EXCLUDED_DIRS = frozenset({"node_modules", "build", "dist", ".git"})


@dataclass(frozen=True)
class Classification:
    """
    Result of classifying one file.

    For skills ``source_path`` is the skill directory; ``is_asset`` marks
    files that ride along with a skill instead of being listed.
    """

    type: ItemType
    source_path: str
    target: str
    is_asset: bool = False


def should_skip_dir(name: str) -> bool:
    """Check if a directory is never scanned."""
    if name in EXCLUDED_DIRS:
        return True
    return name.startswith(".") and name != MARKER_DIR


def is_excluded_file(basename: str) -> bool:
    """Dotfiles, lockfiles/manifests and README files are never items."""
    if basename.startswith("."):
        return True
    if basename in EXCLUDED_FILES:
        return True
    return basename.lower().startswith("readme")


def is_skill_marker(basename: str) -> bool:
    """Check if a file pivots its directory into a skill."""
    return basename.lower() == SKILL_MARKER


def is_markdown(basename: str) -> bool:
    return basename.lower().endswith(".md")


def find_skill_dirs(files: list[str]) -> set[str]:
    """Directories that contain a SKILL.md."""
    dirs: set[str] = set()
    for rel_path in files:
        parent, _, basename = rel_path.rpartition("/")
        if parent and is_skill_marker(basename):
            dirs.add(parent)
    return dirs


def pack_candidate(source_path: str) -> Optional[str]:
    """Pack name implied by an agents/<name>/... location."""
    segments = source_path.split("/")
    if segments[0] == AGENTS_ROOT and len(segments) > 2:
        return segments[1]
    return None


def classify_path(rel_path: str, skill_dirs: set[str]) -> Optional[Classification]:
    """
    Classify a repository-relative file path.

    Rules, first match wins: excluded names; the .opencode/<type> marker;
    membership in a skill directory; the nearest agent/command/skill
    ancestor; a file directly under agents/; markdown docs.

    Args:
        rel_path: Normalized posix path relative to the scan root.
        skill_dirs: Directories known to contain a SKILL.md.

    Returns:
        Classification, or None when the file is excluded.
    """
    segments = rel_path.split("/")
    basename = segments[-1]
    parents = segments[:-1]

    if is_excluded_file(basename):
        return None

    markdown = is_markdown(basename)

    if MARKER_DIR in parents:
        index = parents.index(MARKER_DIR)
        kind = parents[index + 1] if index + 1 < len(parents) else None
        if kind in ("agent", "command"):
            return _flat(TYPE_DIRS[kind], rel_path, basename) if markdown else None
        if kind == "skill":
            if index + 2 >= len(parents):
                return None
            skill_dir = "/".join(parents[: index + 3])
            if skill_dir not in skill_dirs:
                return None
            return _skill_member(rel_path, basename, skill_dir)

    skill_dir = _nearest_skill_dir(parents, skill_dirs)
    if skill_dir is not None:
        return _skill_member(rel_path, basename, skill_dir)

    for name in reversed(parents):
        if name in ("agent", "command"):
            return _flat(TYPE_DIRS[name], rel_path, basename) if markdown else None
        if name == "skill":
            # not inside a directory holding SKILL.md
            return None

    if not markdown:
        return None

    if len(segments) == 2 and segments[0] == AGENTS_ROOT:
        return _flat(ItemType.AGENT, rel_path, basename)

    return Classification(type=ItemType.DOC, source_path=rel_path, target=basename)


def _flat(item_type: ItemType, rel_path: str, basename: str) -> Classification:
    return Classification(type=item_type, source_path=rel_path, target=f"{item_type.value}/{basename}")


def _nearest_skill_dir(parents: list[str], skill_dirs: set[str]) -> Optional[str]:
    for end in range(len(parents), 0, -1):
        candidate = "/".join(parents[:end])
        if candidate in skill_dirs:
            return candidate
    return None


def _skill_member(rel_path: str, basename: str, skill_dir: str) -> Classification:
    skill_name = skill_dir.rsplit("/", 1)[-1]
    is_marker = rel_path == f"{skill_dir}/{basename}" and is_skill_marker(basename)
    return Classification(
        type=ItemType.SKILL,
        source_path=skill_dir,
        target=f"skill/{skill_name}",
        is_asset=not is_marker,
    )
