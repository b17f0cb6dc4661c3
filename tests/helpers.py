# OCSYNC Test Helpers
# File and item builders shared by the test modules

from pathlib import Path

from ocsync.registry.model import Item, ItemType


def write(path: Path, content: str = "") -> Path:
    """Write a file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def make_item(name: str, item_type: ItemType = ItemType.AGENT, **kwargs) -> Item:
    """Create an item with conventional source and target paths."""
    if item_type == ItemType.SKILL:
        defaults = {
            "source_path": f"skills/{name}",
            "target_path": f"skill/{name}",
            "files": ("SKILL.md",),
        }
    elif item_type == ItemType.DOC:
        defaults = {"source_path": f"docs/{name}.md", "target_path": f"{name}.md"}
    else:
        defaults = {
            "source_path": f"{item_type.value}/{name}.md",
            "target_path": f"{item_type.value}/{name}.md",
        }
    defaults.update(kwargs)
    return Item(name=name, description=defaults.pop("description", ""), type=item_type, **defaults)
