# tenantsync Errors
# Exception taxonomy shared by the core engine and provider adapters

from typing import Optional


class TenantSyncError(Exception):
    """Base exception for all tenantsync errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ProviderUnavailable(TenantSyncError):
    """Network, authentication or HTTP failure during a provider call."""

    def __init__(
        self,
        message: str,
        operation: str = "",
        path: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.operation = operation
        self.path = path
        self.status_code = status_code
        super().__init__(message)


class ItemNotFoundError(TenantSyncError):
    """The provider has no item at the requested path."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Item not found: {path}")


class ContentDecodeError(TenantSyncError):
    """Content of a relevant file could not be decoded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to decode {path}: {reason}")


class BundleConflictError(TenantSyncError):
    """Two files were materialized into the same bundle slot."""

    def __init__(self, category: str, identifier: Optional[str], slot: Optional[str]):
        self.category = category
        self.identifier = identifier
        self.slot = slot
        target = "/".join(part for part in (category, identifier, slot) if part)
        super().__init__(f"Duplicate content for {target}")
