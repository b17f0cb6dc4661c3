# OCSYNC Configuration Loader
# Load, merge and validate the registry companion configuration

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from ocsync.config.defaults import CONFIG_FILENAME, get_default_config
from ocsync.config.schema import AppConfig
from ocsync.exceptions import RegistryError
from ocsync.utils.paths import expand_path


def get_config_path(registry_dir: Path) -> Path:
    """Get the path of the companion configuration for a registry directory."""
    return registry_dir / CONFIG_FILENAME


def load_config(config_path: Optional[Path] = None, *, cwd: Optional[Path] = None) -> AppConfig:
    """
    Load configuration from a YAML file merged over defaults.

    A missing file yields the defaults.

    Args:
        config_path: Optional path to the companion config file.
        cwd: Directory used to resolve relative install dirs.

    Returns:
        AppConfig: Validated configuration object.

    Raises:
        RegistryError: If the file is not valid YAML or fails validation.
    """
    data: dict[str, Any] | None = None

    if config_path is not None and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise RegistryError(f"Invalid YAML in {config_path}: {e}") from e
        except UnicodeDecodeError as e:
            raise RegistryError(f"{config_path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise RegistryError(f"Cannot read {config_path}: {e}") from e

    return build_config(data, cwd=cwd)


def parse_config_text(text: str, *, cwd: Optional[Path] = None) -> AppConfig:
    """
    Parse configuration from YAML text merged over defaults.

    Raises:
        RegistryError: If the text is not valid YAML or fails validation.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise RegistryError(f"Invalid YAML configuration: {e}") from e
    return build_config(data, cwd=cwd)


def build_config(data: Optional[dict[str, Any]], *, cwd: Optional[Path] = None) -> AppConfig:
    """Merge raw data over defaults, normalize install dirs and validate."""
    if data is not None and not isinstance(data, dict):
        raise RegistryError("Configuration must be a mapping")

    merged = merge_config(get_default_config(), data)
    install = merged["install"]
    install["global_dir"] = str(expand_path(install["global_dir"], base=cwd))
    install["local_dir"] = str(expand_path(install["local_dir"], base=cwd))

    try:
        return AppConfig.model_validate(merged)
    except ValidationError as e:
        raise RegistryError(f"Invalid configuration: {_format_errors(e)}") from e


def merge_config(base: dict[str, Any], override: Optional[dict[str, Any]]) -> dict[str, Any]:
    """
    Merge override values into base section by section.

    Args:
        base: Full configuration dict.
        override: Partial configuration dict (may be None).

    Returns:
        New merged dict; inputs are not modified.

    Raises:
        RegistryError: If a section in override is not a mapping.
    """
    base_ui = base.get("ui", {})
    result = {
        "ui": {**base_ui, "about": dict(base_ui.get("about", {}))},
        "install": dict(base.get("install", {})),
    }
    if not override:
        return result

    ui_override = _section(override, "ui", "ui")
    if ui_override:
        about_override = _section(ui_override, "about", "ui.about")
        result["ui"] = {
            **result["ui"],
            **{k: v for k, v in ui_override.items() if k != "about"},
            "about": {**result["ui"]["about"], **about_override},
        }

    install_override = _section(override, "install", "install")
    if install_override:
        result["install"] = {**result["install"], **install_override}

    return result


def _section(data: dict[str, Any], key: str, label: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise RegistryError(f"{label} must be a mapping")
    return value


def validate_config_file(config_path: Path) -> tuple[bool, list[str]]:
    """
    Validate a configuration file without raising.

    Args:
        config_path: Path to config file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]
    except UnicodeDecodeError as e:
        return False, [f"Configuration is not valid UTF-8: {e}"]

    if data is None:
        return False, ["Configuration file is empty"]
    if not isinstance(data, dict):
        return False, ["Configuration must be a mapping"]

    errors: list[str] = []
    try:
        AppConfig.model_validate(merge_config(get_default_config(), data))
    except RegistryError as e:
        errors.append(str(e))
    except ValidationError as e:
        for error in e.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

    return len(errors) == 0, errors


def _format_errors(error: ValidationError) -> str:
    return "; ".join(
        f"{' -> '.join(str(part) for part in e['loc'])}: {e['msg']}" for e in error.errors()
    )
