# tenantsync Change Detector
# Decides whether a commit touches tenant configuration

import logging
from typing import Optional

from tenantsync.core.classifier import PathClassifier
from tenantsync.providers.base import ProviderClient

logger = logging.getLogger(__name__)


class ChangeDetector:
    """Answers "does this commit affect tenant configuration?"."""

    def __init__(self, provider: ProviderClient, classifier: PathClassifier):
        self.provider = provider
        self.classifier = classifier

    async def has_changes(self, commit_ref: str, repo_ref: Optional[str] = None) -> bool:
        """
        Check if a commit changed any relevant path.

        Provider failures propagate unchanged.

        Args:
            commit_ref: Commit SHA or changeset id.
            repo_ref: Repository reference, for providers hosting several repositories.

        Returns:
            True if at least one changed path is relevant.
        """
        changes = await self.provider.list_changed_paths(commit_ref, repo_ref)

        for change in changes:
            match = self.classifier.classify(change.path, change.is_folder)
            if match is not None:
                logger.debug("Commit %s touches %s (%s)", commit_ref, change.path, match.category)
                return True

        logger.debug("Commit %s: none of %d changed paths are relevant", commit_ref, len(changes))
        return False
