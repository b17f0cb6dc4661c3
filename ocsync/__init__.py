"""OCSYNC - Opencode registry scanner and sync tool.

Scans local content trees into a declarative registry of agents, skills,
commands and docs, and reconciles an install directory with the items a
user selects from a registry.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "Item",
    "ItemType",
    "Pack",
    "Registry",
    "Changes",
    "compute_changes",
    "SelectionEngine",
    "TriState",
    "SyncExecutor",
    "SyncResult",
    "SyncSession",
    "scan_tree",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("Item", "ItemType", "Pack", "Registry"):
        from ocsync.registry import model

        return getattr(model, name)
    if name in ("Changes", "compute_changes"):
        from ocsync.sync import diff

        return getattr(diff, name)
    if name in ("SelectionEngine", "TriState"):
        from ocsync.selection import engine

        return getattr(engine, name)
    if name in ("SyncExecutor", "SyncResult"):
        from ocsync.sync import executor

        return getattr(executor, name)
    if name == "SyncSession":
        from ocsync.session import SyncSession

        return SyncSession
    if name == "scan_tree":
        from ocsync.scan.scanner import scan_tree

        return scan_tree
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
