# tenantsync Engine
# Wires configuration, provider and core components together

from collections.abc import Mapping
from typing import Any, Optional

from tenantsync.config.schema import TenantSyncConfig
from tenantsync.core.bundle import ConfigBundle
from tenantsync.core.classifier import DEFAULT_RULES, CategoryRule, PathClassifier
from tenantsync.core.decoder import ContentDecoder
from tenantsync.core.detector import ChangeDetector
from tenantsync.core.materializer import TreeMaterializer
from tenantsync.providers import create_provider
from tenantsync.providers.base import ProviderClient, SourceRef


class TenantSync:
    """
    Entry point used by the deployment stage.

    Exposes ``has_changes`` and ``get_changes`` over a single provider
    session. Use as an async context manager to close the session.
    """

    def __init__(
        self,
        config: TenantSyncConfig,
        provider: Optional[ProviderClient] = None,
        rules: tuple[CategoryRule, ...] = DEFAULT_RULES,
    ):
        """
        Initialize engine.

        Args:
            config: tenantsync configuration.
            provider: Optional provider (created from config if not provided).
            rules: Category rules for the classifier.
        """
        self.config = config
        self.provider = provider or create_provider(config.provider)
        self.classifier = PathClassifier(config.project_path, rules)
        self.detector = ChangeDetector(self.provider, self.classifier)
        self.materializer = TreeMaterializer(
            self.provider,
            self.classifier,
            ContentDecoder(),
            concurrency=config.concurrency,
        )

    async def has_changes(self, commit_ref: str, repo_ref: Optional[str] = None) -> bool:
        """Check if a commit touches tenant configuration."""
        return await self.detector.has_changes(commit_ref, repo_ref)

    async def get_changes(self, ref: SourceRef | Mapping[str, Any]) -> ConfigBundle:
        """Materialize the tenant configuration for a project/changeset."""
        return await self.materializer.get_changes(ref)

    async def aclose(self) -> None:
        """Close the provider session."""
        await self.provider.aclose()

    async def __aenter__(self) -> "TenantSync":
        await self.provider.authenticate()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
