# OCSYNC Utilities Module
# Helper functions for path handling and file operations

from ocsync.utils.paths import (
    atomic_write,
    ensure_dir,
    expand_path,
    normalize_rel_path,
    safe_delete,
)

__all__ = [
    "expand_path",
    "normalize_rel_path",
    "safe_delete",
    "ensure_dir",
    "atomic_write",
]
