# tenantsync Default Configuration
# Default configuration as Python dict and YAML generator

import copy
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "provider": {
        "type": "tfvc",
        "instance": "my-instance",
        "collection": "DefaultCollection",
        "repository": "",
        "branch": "master",
        "auth_method": "pat",
        "timeout": 30.0,
        "page_size": 100,
    },
    "project_path": "$/MyProject/tenant",
    "concurrency": 8,
    "output": {
        "verbose": False,
        "colored": True,
    },
}


def get_default_config() -> dict[str, Any]:
    """Return a deep copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def generate_default_config() -> str:
    """Generate default configuration as YAML string with comments."""
    header = """# tenantsync Configuration
#
# Connects to the version-control provider holding the tenant configuration.
#
# Provider types:
#   - tfvc: Team Foundation Version Control (project_path like "$/Project/tenant")
#   - git:  Azure DevOps Git repository (project_path like "/tenant")
#
# Authentication:
#   - pat:   personal access token in provider.token or $TENANTSYNC_TOKEN
#   - basic: provider.username / provider.password

"""
    return header + yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)
