# OCSYNC Path Utilities
# Safe file operations with atomic writes and path normalization

import os
import shutil
import tempfile
from pathlib import Path, PurePosixPath


def expand_path(path: str | Path, *, base: Path | None = None) -> Path:
    """
    Expand ~ and environment variables in path.

    Relative paths are resolved against ``base`` (default: current directory).

    Args:
        path: Path string or Path object.
        base: Directory used for relative paths.

    Returns:
        Absolute Path object.
    """
    path_str = os.path.expandvars(os.path.expanduser(str(path)))
    expanded = Path(path_str)
    if not expanded.is_absolute():
        expanded = (base or Path.cwd()) / expanded
    return expanded


def normalize_rel_path(value: str) -> str:
    """
    Normalize a relative path to posix form without leading/trailing slashes.

    Args:
        value: Path using either separator.

    Returns:
        Normalized path string ("" for the root).
    """
    cleaned = value.replace("\\", "/").strip().strip("/")
    if not cleaned:
        return ""
    parts = [p for p in PurePosixPath(cleaned).parts if p not in ("", ".")]
    return "/".join(parts)


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.

    Returns:
        The path that was ensured.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def safe_delete(path: Path, *, missing_ok: bool = False) -> bool:
    """
    Safely delete file or directory.

    Args:
        path: Path to delete.
        missing_ok: If True, don't raise error if path doesn't exist.

    Returns:
        True if something was deleted, False if path didn't exist.

    Raises:
        FileNotFoundError: If path doesn't exist and missing_ok is False.
    """
    if not path.exists() and not path.is_symlink():
        if missing_ok:
            return False
        raise FileNotFoundError(f"Path does not exist: {path}")

    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
    return True


def atomic_write(path: Path, content: str | bytes, *, encoding: str = "utf-8") -> None:
    """
    Atomically write content to file.

    Uses a temporary file and atomic rename. An existing file is replaced.

    Args:
        path: Target file path.
        content: Content to write (str or bytes).
        encoding: Encoding for string content (default utf-8).
    """
    ensure_dir(path.parent)

    # Create temp file in same directory for atomic rename
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        if isinstance(content, str):
            with os.fdopen(fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
        os.replace(temp_path, path)
    except Exception:
        # Cleanup on failure
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise

