# OCSYNC Registry Writer
# Write registry.json and its companion registry.yaml

import json
from dataclasses import dataclass
from pathlib import Path

from ocsync.config.defaults import CONFIG_FILENAME, generate_default_config, registry_config_template
from ocsync.exceptions import FilesystemError
from ocsync.registry.model import Registry
from ocsync.utils.paths import atomic_write

REGISTRY_FILENAME = "registry.json"


@dataclass
class RegistryInputs:
    """User-supplied metadata for a new registry."""

    name: str
    description: str = ""
    repo_url: str = ""


def write_registry_files(root: Path, inputs: RegistryInputs, registry: Registry) -> tuple[Path, Path]:
    """
    Write registry.json and registry.yaml into root.

    Existing files are replaced.

    Returns:
        Paths of the registry and config files.

    Raises:
        FilesystemError: If a file cannot be written.
    """
    registry_path = root / REGISTRY_FILENAME
    config_path = root / CONFIG_FILENAME
    config = registry_config_template(inputs.name, about=inputs.description, link=inputs.repo_url)

    for path, content in (
        (registry_path, json.dumps(registry.to_dict(), indent=2) + "\n"),
        (config_path, generate_default_config(config)),
    ):
        try:
            atomic_write(path, content)
        except OSError as e:
            raise FilesystemError(str(path), e.strerror or str(e)) from e
    return registry_path, config_path
