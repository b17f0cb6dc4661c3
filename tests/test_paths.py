# OCSYNC Path Utility Tests
# Tests for path expansion, normalization and safe file operations

from pathlib import Path

import pytest

from helpers import write
from ocsync.utils.paths import atomic_write, expand_path, normalize_rel_path, safe_delete


class TestExpandPath:
    """Tests for expand_path."""

    def test_home(self, temp_home: Path):
        assert expand_path("~/.config/opencode") == temp_home / ".config" / "opencode"

    def test_relative_to_base(self, temp_dir: Path):
        assert expand_path(".opencode", base=temp_dir) == temp_dir / ".opencode"

    def test_env_var(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("OCSYNC_TEST_DIR", str(temp_dir))
        assert expand_path("$OCSYNC_TEST_DIR/x") == temp_dir / "x"


class TestNormalizeRelPath:
    """Tests for normalize_rel_path."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("agents/research/", "agents/research"),
            ("/agents", "agents"),
            ("agents\\research", "agents/research"),
            ("./agents/./x.md", "agents/x.md"),
            ("", ""),
            ("/", ""),
        ],
    )
    def test_normalize(self, value: str, expected: str):
        assert normalize_rel_path(value) == expected


class TestSafeDelete:
    """Tests for safe_delete."""

    def test_file(self, temp_dir: Path):
        path = write(temp_dir / "a.md")
        assert safe_delete(path) is True
        assert not path.exists()

    def test_directory(self, temp_dir: Path):
        write(temp_dir / "skill" / "search" / "SKILL.md")
        assert safe_delete(temp_dir / "skill" / "search") is True
        assert not (temp_dir / "skill" / "search").exists()

    def test_missing(self, temp_dir: Path):
        assert safe_delete(temp_dir / "missing", missing_ok=True) is False
        with pytest.raises(FileNotFoundError):
            safe_delete(temp_dir / "missing")


class TestAtomicWrite:
    """Tests for atomic_write."""

    def test_creates_parents(self, temp_dir: Path):
        path = temp_dir / "a" / "b" / "c.md"
        atomic_write(path, "text")
        assert path.read_text(encoding="utf-8") == "text"

    def test_replaces_bytes(self, temp_dir: Path):
        path = write(temp_dir / "c.md", "old")
        atomic_write(path, b"new")
        assert path.read_bytes() == b"new"
        assert [p.name for p in temp_dir.iterdir()] == ["c.md"]
