# OCSYNC Registry Model
# Declarative item, pack and registry records

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ocsync.utils.paths import normalize_rel_path


class ItemType(str, Enum):
    """Type of an installable item."""

    AGENT = "agent"
    SKILL = "skill"
    COMMAND = "command"
    DOC = "doc"


def normalize_source(source_path: str) -> str:
    """
    Normalize a source location into an item key.

    URLs only lose trailing slashes; repository paths get posix separators
    and no leading/trailing slashes.
    """
    if "://" in source_path:
        return source_path.strip().rstrip("/")
    return normalize_rel_path(source_path)


@dataclass(frozen=True)
class Item:
    """
    A single installable content unit.

    ``source_path`` points into the content source (URL or repository-relative
    path); ``target_path`` is relative to the install root. Skills are
    directories: ``files`` lists their contents relative to ``source_path``.
    """

    name: str
    description: str
    type: ItemType
    source_path: str
    target_path: str
    files: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        """Stable identity used for set membership."""
        return normalize_source(self.source_path)

    @property
    def is_directory(self) -> bool:
        """Check if item installs as a directory."""
        return self.type == ItemType.SKILL

    def validate(self) -> list[str]:
        """Return structural problems with this item."""
        errors: list[str] = []
        label = self.name or self.source_path or "<unnamed>"
        if not self.name.strip():
            errors.append(f"{label}: name is empty")
        if not self.key:
            errors.append(f"{label}: source path is empty")
        if not self.target_path.strip():
            errors.append(f"{label}: target path is empty")
        elif self.target_path.startswith("/") or ".." in self.target_path.replace("\\", "/").split("/"):
            errors.append(f"{label}: target path must stay inside the install root")
        if self.is_directory and not self.files:
            errors.append(f"{label}: skill lists no files")
        return errors

    def with_source(self, source_path: str) -> "Item":
        """Copy of this item pointing at another source location."""
        return Item(
            name=self.name,
            description=self.description,
            type=self.type,
            source_path=source_path,
            target_path=self.target_path,
            files=self.files,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to registry JSON shape."""
        data: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "type": self.type.value,
            "path": self.source_path,
            "target": self.target_path,
        }
        if self.files:
            data["files"] = list(self.files)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Item":
        """Create from registry JSON shape."""
        item_type = ItemType(data.get("type", "doc"))
        files = tuple(data.get("files") or ())
        if item_type == ItemType.SKILL and not files:
            files = ("SKILL.md",)
        return cls(
            name=str(data.get("name", "")),
            description=str(data.get("description") or ""),
            type=item_type,
            source_path=str(data.get("path", "")),
            target_path=str(data.get("target", "")),
            files=files,
        )


@dataclass
class Pack:
    """A named group of items."""

    name: str
    description: str = ""
    root_path: str = ""
    items: list[Item] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to registry JSON shape."""
        return {
            "name": self.name,
            "description": self.description,
            "path": self.root_path,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Pack":
        """Create from registry JSON shape."""
        return cls(
            name=str(data.get("name", "")),
            description=str(data.get("description") or ""),
            root_path=str(data.get("path") or ""),
            items=[Item.from_dict(item) for item in data.get("items", [])],
        )


@dataclass
class Registry:
    """The declarative catalog of one content source."""

    name: str
    version: str = "1.0.0"
    packs: list[Pack] = field(default_factory=list)
    standalone: list[Item] = field(default_factory=list)

    def get_all_items(self) -> list[Item]:
        """All items, pack items first, in declaration order."""
        items = [item for pack in self.packs for item in pack.items]
        items.extend(self.standalone)
        return items

    @property
    def pack_index(self) -> dict[str, Pack]:
        """Packs by name. Later packs overwrite earlier ones with the same name."""
        return {pack.name: pack for pack in self.packs}

    def find_item(self, key: str) -> Optional[Item]:
        """Look up an item by key."""
        wanted = normalize_source(key)
        for item in self.get_all_items():
            if item.key == wanted:
                return item
        return None

    def with_base(self, base_url: str) -> "Registry":
        """Copy with relative item sources made absolute under base_url."""
        base = base_url if base_url.endswith("/") else base_url + "/"

        def rebase(item: Item) -> Item:
            if "://" in item.source_path:
                return item
            return item.with_source(base + normalize_rel_path(item.source_path))

        return Registry(
            name=self.name,
            version=self.version,
            packs=[
                Pack(
                    name=pack.name,
                    description=pack.description,
                    root_path=pack.root_path,
                    items=[rebase(item) for item in pack.items],
                )
                for pack in self.packs
            ],
            standalone=[rebase(item) for item in self.standalone],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to registry JSON shape."""
        return {
            "name": self.name,
            "version": self.version,
            "packs": [pack.to_dict() for pack in self.packs],
            "standalone": [item.to_dict() for item in self.standalone],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Registry":
        """Create from registry JSON shape."""
        return cls(
            name=str(data.get("name", "")),
            version=str(data.get("version", "1.0.0")),
            packs=[Pack.from_dict(pack) for pack in data.get("packs", [])],
            standalone=[Item.from_dict(item) for item in data.get("standalone", [])],
        )


def validate_registry(registry: Registry) -> list[str]:
    """
    Check structural validity of a registry.

    Duplicate pack names are not reported; the name-indexed view keeps the
    last one.

    Returns:
        List of error messages (empty when valid).
    """
    errors: list[str] = []
    seen: dict[str, str] = {}

    def check(item: Item, owner: str) -> None:
        errors.extend(item.validate())
        key = item.key
        if key and key in seen:
            errors.append(f"{item.name}: listed in both {seen[key]} and {owner}")
        elif key:
            seen[key] = owner

    for pack in registry.packs:
        for item in pack.items:
            check(item, f"pack '{pack.name}'")
    for item in registry.standalone:
        check(item, "standalone")

    return errors
