# OCSYNC Default Configuration
# Default configuration as Python dict and YAML generator

import os
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "registry.yaml"
LOCAL_DIR_NAME = ".opencode"


def get_global_install_dir() -> Path:
    """
    Get the global install directory.

    Honors OPENCODE_CONFIG_DIR, then XDG_CONFIG_HOME, then ~/.config.
    """
    override = os.environ.get("OPENCODE_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base).expanduser() / "opencode"


def get_default_config() -> dict[str, Any]:
    """Build the default configuration dict for the current environment."""
    return {
        "ui": {
            "brand": "Opencode",
            "product": "Workflows",
            "about": {
                "lines": ["Configure this registry to show your own about text."],
                "emphasis": "",
                "link": "",
                "link_note": "",
                "footer": "Press any key to return...",
            },
        },
        "install": {
            "global_dir": str(get_global_install_dir()),
            "local_dir": str(Path.cwd() / LOCAL_DIR_NAME),
            "prefix_types": ["agent", "skill", "command"],
        },
    }


def registry_config_template(
    brand: str,
    *,
    about: str = "",
    link: str = "",
) -> dict[str, Any]:
    """
    Companion configuration written next to a generated registry.

    Install dirs stay portable (~ and relative) and are normalized on load.
    """
    return {
        "ui": {
            "brand": brand,
            "product": "Workflows",
            "about": {
                "lines": [about],
                "emphasis": "",
                "link": link,
                "link_note": "",
                "footer": "Press any key to return...",
            },
        },
        "install": {
            "global_dir": "~/.config/opencode",
            "local_dir": LOCAL_DIR_NAME,
            "prefix_types": ["agent", "skill", "command"],
        },
    }


def generate_default_config(config: dict[str, Any] | None = None) -> str:
    """Generate configuration as YAML string with comments."""
    header = """# ocsync registry configuration
#
# Sits next to registry.json and is merged over built-in defaults.
#
# install.global_dir:   install root used with --global
# install.local_dir:    install root used with --local (relative to the project)
# install.prefix_types: item types installed under the install root;
#                       other types (docs) land relative to the working directory

"""
    data = config if config is not None else registry_config_template("Opencode")
    return header + yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
