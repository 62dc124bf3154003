# tenantsync Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from tenantsync.config.defaults import DEFAULT_CONFIG, generate_default_config, get_default_config
from tenantsync.config.loader import (
    ensure_config_exists,
    get_config_path,
    load_config,
    save_config,
    validate_config_file,
)
from tenantsync.config.schema import (
    AuthMethod,
    OutputConfig,
    ProviderConfig,
    ProviderType,
    TenantSyncConfig,
)

__all__ = [
    # Schema
    "TenantSyncConfig",
    "ProviderConfig",
    "OutputConfig",
    "ProviderType",
    "AuthMethod",
    # Loader
    "load_config",
    "save_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    # Defaults
    "DEFAULT_CONFIG",
    "get_default_config",
    "generate_default_config",
]
