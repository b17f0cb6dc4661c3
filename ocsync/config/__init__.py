# OCSYNC Configuration Module
# Handles YAML-based companion configuration loading, validation, and defaults

from ocsync.config.defaults import (
    CONFIG_FILENAME,
    generate_default_config,
    get_default_config,
    get_global_install_dir,
    registry_config_template,
)
from ocsync.config.loader import (
    build_config,
    get_config_path,
    load_config,
    merge_config,
    parse_config_text,
    validate_config_file,
)
from ocsync.config.schema import AboutConfig, AppConfig, InstallConfig, InstallMode, UiConfig

__all__ = [
    # Schema
    "AppConfig",
    "AboutConfig",
    "UiConfig",
    "InstallConfig",
    "InstallMode",
    # Loader
    "load_config",
    "parse_config_text",
    "build_config",
    "merge_config",
    "get_config_path",
    "validate_config_file",
    # Defaults
    "CONFIG_FILENAME",
    "get_default_config",
    "get_global_install_dir",
    "registry_config_template",
    "generate_default_config",
]
