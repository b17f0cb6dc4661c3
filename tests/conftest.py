# OCSYNC Test Fixtures
# Pytest fixtures for OCSYNC tests

import json
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from helpers import make_item, write
from ocsync.config.schema import InstallConfig
from ocsync.registry.model import ItemType, Pack, Registry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("OPENCODE_CONFIG_DIR", raising=False)
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    return home


@pytest.fixture
def content_tree(temp_dir: Path) -> Path:
    """Create a content repository with every classification case."""
    root = temp_dir / "content"

    write(
        root / "agents" / "research" / "agent" / "finder.md",
        "---\ndescription: Finds relevant sources\n---\n\n# Finder\n",
    )
    write(
        root / "agents" / "research" / "command" / "research.md",
        "---\nname: research\ndescription: |\n  Run a research\n  session\n---\n",
    )
    write(root / "agents" / "utils" / "agent" / "lint.md", "# Lint\n")
    write(root / "agents" / "utils" / "agent" / "format.md", "# Format\n")
    write(root / "agents" / "orchestrator.md", "---\nname: Orchestrator\n---\n")
    write(
        root / "skills" / "search" / "SKILL.md",
        "---\nname: search\ndescription: Search the web\n---\n",
    )
    write(root / "skills" / "search" / "reference.txt", "reference")
    write(root / "skills" / "search" / "scripts" / "query.sh", "#!/bin/sh\n")
    write(root / "docs" / "notes.md", "# Notes\n")
    write(root / "docs" / "README.md", "# Readme\n")
    write(root / "docs" / "diagram.png", "png")
    write(root / "docs" / ".hidden.md", "hidden")
    write(root / "docs" / "node_modules" / "pkg" / "index.md", "vendored")
    write(root / "package.json", "{}")
    (root / "empty").mkdir()

    return root


@pytest.fixture
def sample_registry() -> Registry:
    """A registry with one pack and standalone items of every type."""
    return Registry(
        name="Sample",
        packs=[
            Pack(
                name="research",
                description="Research toolkit",
                root_path="agents/research",
                items=[
                    make_item("finder", source_path="agents/research/agent/finder.md"),
                    make_item(
                        "research",
                        ItemType.COMMAND,
                        source_path="agents/research/command/research.md",
                    ),
                ],
            )
        ],
        standalone=[
            make_item("orchestrator", source_path="agents/orchestrator.md", target_path="agent/orchestrator.md"),
            make_item("search", ItemType.SKILL, files=("SKILL.md", "reference.txt")),
            make_item("notes", ItemType.DOC),
        ],
    )


@pytest.fixture
def local_registry(temp_dir: Path, sample_registry: Registry) -> Path:
    """Create a registry directory with registry.json and item content."""
    root = temp_dir / "registry"
    write(root / "registry.json", json.dumps(sample_registry.to_dict(), indent=2))
    write(root / "agents" / "research" / "agent" / "finder.md", "# Finder\n")
    write(root / "agents" / "research" / "command" / "research.md", "# Research\n")
    write(root / "agents" / "orchestrator.md", "# Orchestrator\n")
    write(root / "skills" / "search" / "SKILL.md", "# Search\n")
    write(root / "skills" / "search" / "reference.txt", "reference")
    write(root / "docs" / "notes.md", "# Notes\n")
    return root


@pytest.fixture
def install_config(temp_dir: Path) -> InstallConfig:
    """Install config pointing into the temporary directory."""
    return InstallConfig(
        global_dir=str(temp_dir / "global"),
        local_dir=str(temp_dir / "project" / ".opencode"),
    )


@pytest.fixture
def project_dir(temp_dir: Path) -> Path:
    """Working directory for docs and the local install root."""
    project = temp_dir / "project"
    project.mkdir(exist_ok=True)
    return project
