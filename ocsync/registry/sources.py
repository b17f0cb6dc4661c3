# OCSYNC Registry Sources
# Load registry documents from a local directory or a GitHub repository

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

from ocsync.config.defaults import CONFIG_FILENAME
from ocsync.config.loader import load_config, parse_config_text
from ocsync.config.schema import AppConfig
from ocsync.exceptions import FetchError, RegistryError
from ocsync.registry.model import Registry, validate_registry
from ocsync.registry.writer import REGISTRY_FILENAME
from ocsync.sync.fetch import ContentSource, HttpContentSource, LocalContentSource, RetryPolicy, fetch_with_retry

RAW_HOST = "https://raw.githubusercontent.com"
DEFAULT_BRANCHES = ("main", "master")


@dataclass
class LoadedRegistry:
    """A registry together with its configuration and content source."""

    registry: Registry
    config: AppConfig
    source: ContentSource
    origin: str


def parse_registry_json(text: str | bytes, origin: str) -> Registry:
    """
    Parse and validate registry JSON.

    Raises:
        RegistryError: If the document is not valid JSON or not a valid registry.
    """
    try:
        data: Any = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RegistryError(f"Invalid registry JSON in {origin}: {e}") from e
    if not isinstance(data, dict):
        raise RegistryError(f"Registry in {origin} must be a JSON object")

    try:
        registry = Registry.from_dict(data)
    except (ValueError, TypeError, AttributeError) as e:
        raise RegistryError(f"Invalid registry in {origin}: {e}") from e

    errors = validate_registry(registry)
    if errors:
        raise RegistryError(f"Invalid registry in {origin}: " + "; ".join(errors))
    return registry


def load_local_registry(path: Path, *, cwd: Optional[Path] = None) -> LoadedRegistry:
    """
    Load a registry from a directory (or its registry.json).

    Item sources are read relative to the registry directory.

    Raises:
        RegistryError: If registry.json is missing or invalid.
    """
    path = path.expanduser()
    registry_file = path if path.is_file() else path / REGISTRY_FILENAME
    registry_dir = registry_file.parent

    if not registry_file.exists():
        raise RegistryError(f"Registry not found: {registry_file}")

    try:
        text = registry_file.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise RegistryError(f"{registry_file} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise RegistryError(f"Cannot read {registry_file}: {e}") from e

    registry = parse_registry_json(text, str(registry_file))
    config = load_config(registry_dir / CONFIG_FILENAME, cwd=cwd)
    return LoadedRegistry(
        registry=registry,
        config=config,
        source=LocalContentSource(registry_dir),
        origin=str(registry_dir),
    )


def parse_repo_url(repo_url: str) -> Optional[tuple[str, str]]:
    """Extract (owner, repo) from a github.com URL."""
    parsed = urlparse(repo_url)
    if parsed.hostname != "github.com":
        return None
    parts = [p for p in parsed.path.split("/") if p]
    if len(parts) < 2:
        return None
    repo = parts[1][:-4] if parts[1].endswith(".git") else parts[1]
    return parts[0], repo


def raw_base_url(owner: str, repo: str, branch: str) -> str:
    """Raw content base URL for a branch."""
    return f"{RAW_HOST}/{owner}/{repo}/{branch}/"


def load_remote_registry(
    repo_url: str,
    *,
    source: Optional[HttpContentSource] = None,
    retry: RetryPolicy = RetryPolicy(),
    cwd: Optional[Path] = None,
) -> LoadedRegistry:
    """
    Load a registry from a GitHub repository.

    Tries each default branch in turn; relative item paths are rewritten to
    absolute raw URLs.

    Raises:
        RegistryError: If the URL is not a GitHub repository or no branch holds a registry.
    """
    parsed = parse_repo_url(repo_url)
    if parsed is None:
        raise RegistryError(f"Not a GitHub repository URL: {repo_url}")

    owner, repo = parsed
    http = source or HttpContentSource()
    failures: list[str] = []

    for branch in DEFAULT_BRANCHES:
        base = raw_base_url(owner, repo, branch)
        try:
            text = fetch_with_retry(http, base + REGISTRY_FILENAME, retry)
        except FetchError as e:
            failures.append(f"{branch}: {e}")
            continue

        registry = parse_registry_json(text, base + REGISTRY_FILENAME).with_base(base)
        config = _fetch_remote_config(http, base + CONFIG_FILENAME, retry, cwd=cwd)
        return LoadedRegistry(registry=registry, config=config, source=http, origin=base)

    raise RegistryError(f"No registry found in {repo_url} ({'; '.join(failures)})")


def _fetch_remote_config(
    source: ContentSource,
    url: str,
    retry: RetryPolicy,
    *,
    cwd: Optional[Path] = None,
) -> AppConfig:
    """Fetch the optional companion config; absent means defaults."""
    try:
        text = fetch_with_retry(source, url, retry)
    except FetchError:
        return load_config(None, cwd=cwd)
    try:
        decoded = text.decode("utf-8")
    except UnicodeDecodeError as e:
        raise RegistryError(f"{url} is not valid UTF-8: {e}") from e
    return parse_config_text(decoded, cwd=cwd)


def load_registry(reference: str, *, cwd: Optional[Path] = None) -> LoadedRegistry:
    """Load a registry from a GitHub URL or a local path."""
    if reference.startswith(("http://", "https://")):
        return load_remote_registry(reference, cwd=cwd)
    return load_local_registry(Path(reference), cwd=cwd)
