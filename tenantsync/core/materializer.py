# tenantsync Tree Materializer
# Walks the project tree and assembles the tenant ConfigBundle

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Iterable, Mapping
from typing import Any, Optional, TypeVar

from tenantsync.core.bundle import BundleBuilder, ConfigBundle
from tenantsync.core.classifier import Layout, MatchKind, PathClassifier, PathMatch
from tenantsync.core.decoder import ContentDecoder
from tenantsync.errors import ItemNotFoundError
from tenantsync.providers.base import ProviderClient, SourceRef, TreeNode
from tenantsync.utils.paths import join_path, resolve_child

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_all(aws: Iterable[Awaitable[T]]) -> list[T]:
    """
    Await all awaitables concurrently, failing fast.

    The first exception cancels every task still running and is
    re-raised unchanged.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return []
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class TreeMaterializer:
    """
    Materializes the tenant configuration below the project root.

    The tree is walked breadth-first with an explicit work queue. Each
    level of folders is listed concurrently, then the relevant files
    found on that level are fetched concurrently. Every path is
    processed at most once.
    """

    def __init__(
        self,
        provider: ProviderClient,
        classifier: PathClassifier,
        decoder: Optional[ContentDecoder] = None,
        concurrency: int = 8,
    ):
        """
        Initialize materializer.

        Args:
            provider: Version-control provider.
            classifier: Path classifier bound to the project root.
            decoder: Content decoder (default JSON/text decoder).
            concurrency: Maximum concurrent provider requests.
        """
        self.provider = provider
        self.classifier = classifier
        self.decoder = decoder or ContentDecoder()
        self.concurrency = max(1, concurrency)

    async def get_changes(self, ref: SourceRef | Mapping[str, Any]) -> ConfigBundle:
        """
        Build the ConfigBundle for a project/changeset.

        Any provider or decode failure aborts the whole call.

        Args:
            ref: SourceRef or mapping with ``project`` and ``changeset_id``.

        Returns:
            Immutable ConfigBundle.
        """
        source = SourceRef.coerce(ref)
        root = self.classifier.project_path
        semaphore = asyncio.Semaphore(self.concurrency)
        builder = BundleBuilder()
        visited: set[str] = {root}

        await self._fetch_documents(source, builder, visited, semaphore)

        queue: deque[TreeNode] = deque([TreeNode(path=root, is_folder=True)])
        folder_count = 0
        file_count = 0

        while queue:
            batch = list(queue)
            queue.clear()
            folder_count += len(batch)

            listings = await run_all(self._list(node.path, source, semaphore) for node in batch)

            pending: list[PathMatch] = []
            for parent, children in zip(batch, listings):
                for child in children:
                    path = resolve_child(parent.path, child.path)
                    if path in visited:
                        continue
                    visited.add(path)

                    match = self.classifier.classify(path, child.is_folder)
                    if match is None:
                        logger.debug("Skipping unrelated path %s", path)
                        continue

                    if child.is_folder:
                        if match.kind == MatchKind.GROUP:
                            builder.register_group(match)
                        queue.append(TreeNode(path=path, is_folder=True, size=child.size))
                    elif match.is_file:
                        pending.append(match)

            await run_all(self._fetch(match, source, builder, semaphore) for match in pending)
            file_count += len(pending)

        bundle = builder.build()
        logger.info(
            "Materialized %d files from %d folders under %s into %s",
            file_count,
            folder_count,
            root,
            ", ".join(bundle.categories) or "an empty bundle",
        )
        return bundle

    async def _fetch_documents(
        self,
        source: SourceRef,
        builder: BundleBuilder,
        visited: set[str],
        semaphore: asyncio.Semaphore,
    ) -> None:
        """Fetch document categories (tenant.json) directly, without listing."""
        for rule in self.classifier.rules:
            if rule.layout != Layout.DOCUMENT:
                continue

            path = join_path(self.classifier.project_path, rule.pattern)
            match = self.classifier.classify(path, is_folder=False)
            if match is None or match.category != rule.category:
                continue

            visited.add(path)
            try:
                await self._fetch(match, source, builder, semaphore)
            except ItemNotFoundError:
                logger.debug("No %s document at %s", rule.category, path)

    async def _list(self, path: str, source: SourceRef, semaphore: asyncio.Semaphore) -> list[TreeNode]:
        async with semaphore:
            return await self.provider.list_tree(path, source)

    async def _fetch(
        self,
        match: PathMatch,
        source: SourceRef,
        builder: BundleBuilder,
        semaphore: asyncio.Semaphore,
    ) -> None:
        async with semaphore:
            raw = await self.provider.fetch_content(match.path, source)
        builder.insert(match, self.decoder.decode(match.path, raw))
