# tenantsync Providers Module
# Version-control backends behind the ProviderClient interface

from typing import Optional

import httpx

from tenantsync.config.schema import ProviderConfig, ProviderType
from tenantsync.providers.base import ChangedPath, ProviderClient, SourceRef, TreeNode
from tenantsync.providers.git import GitProvider
from tenantsync.providers.tfvc import TfvcProvider

__all__ = [
    "ProviderClient",
    "ChangedPath",
    "TreeNode",
    "SourceRef",
    "TfvcProvider",
    "GitProvider",
    "create_provider",
]


def create_provider(config: ProviderConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> ProviderClient:
    """
    Create the provider selected by configuration.

    Args:
        config: Provider configuration.
        transport: Optional httpx transport override.

    Returns:
        Unauthenticated provider instance.
    """
    if config.type == ProviderType.GIT:
        return GitProvider(config, transport=transport)
    return TfvcProvider(config, transport=transport)
