# tenantsync Configuration Loader
# Load, save, and validate YAML configuration files

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from tenantsync.config.defaults import generate_default_config, get_default_config
from tenantsync.config.schema import TenantSyncConfig

CONFIG_ENV = "TENANTSYNC_CONFIG"
TOKEN_ENV = "TENANTSYNC_TOKEN"


def get_config_dir() -> Path:
    """Get the tenantsync configuration directory."""
    return Path.home() / ".config" / "tenantsync"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    # Allow override via environment variable
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> TenantSyncConfig:
    """
    Load configuration from YAML file.

    Values from the file are merged over the defaults. A token in
    ``$TENANTSYNC_TOKEN`` takes precedence over the file.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        TenantSyncConfig: Validated, immutable configuration object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValidationError: If config file is invalid.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\nRun 'tenantsync config init' to create one."
        )

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}

    merged = _merge_with_defaults(data)

    token = os.environ.get(TOKEN_ENV)
    if token:
        merged["provider"]["token"] = token

    return TenantSyncConfig.model_validate(merged)


def save_config(config: TenantSyncConfig, config_path: Optional[Path] = None) -> Path:
    """
    Save configuration to YAML file.

    Credentials are never written back.

    Args:
        config: Configuration object to save.
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Path: Path where config was saved.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    # Use mode='json' to serialize Enums as their string values
    data = config.model_dump(exclude_none=True, mode="json")
    for secret in ("token", "password"):
        data["provider"].pop(secret, None)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    return config_path


def ensure_config_exists(config_path: Optional[Path] = None, *, force: bool = False) -> tuple[Path, bool]:
    """
    Ensure configuration file exists, creating default if needed.

    Args:
        config_path: Optional path to config file.
        force: Overwrite an existing file.

    Returns:
        Tuple of (config_path, was_created).
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists() and not force:
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(generate_default_config(), encoding="utf-8")
    return config_path, True


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a configuration file.

    Args:
        config_path: Path to config file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    if data is None:
        return False, ["Configuration file is empty"]

    if not isinstance(data, dict):
        return False, ["Configuration root must be a mapping"]

    errors: list[str] = []
    if "provider" not in data:
        errors.append("Missing 'provider' section")
    if "project_path" not in data:
        errors.append("Missing 'project_path'")
    if errors:
        return False, errors

    try:
        TenantSyncConfig.model_validate(_merge_with_defaults(data))
    except ValidationError as e:
        for error in e.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}" if loc else error["msg"])
        return False, errors

    return True, []


def _merge_with_defaults(data: dict[str, Any]) -> dict[str, Any]:
    """Merge loaded data with default values for missing keys."""
    result = get_default_config()

    if "provider" in data:
        result["provider"] = {**result["provider"], **(data["provider"] or {})}

    if "output" in data:
        result["output"] = {**result["output"], **(data["output"] or {})}

    for key in ("project_path", "concurrency"):
        if key in data:
            result[key] = data[key]

    return result
