# tenantsync Provider Interface
# Capability interface the core engine consumes, plus shared HTTP plumbing

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from tenantsync.config.schema import AuthMethod, ProviderConfig
from tenantsync.errors import ItemNotFoundError, ProviderUnavailable

logger = logging.getLogger(__name__)

API_VERSION = "5.0"


@dataclass(frozen=True)
class ChangedPath:
    """A path touched by a commit/changeset."""

    path: str
    is_folder: Optional[bool] = None


@dataclass(frozen=True)
class TreeNode:
    """One child entry of a tree listing."""

    path: str
    is_folder: bool = False
    size: int = 0


@dataclass(frozen=True)
class SourceRef:
    """Project and changeset/commit to materialize."""

    project: str
    changeset_id: Optional[str] = None

    @classmethod
    def coerce(cls, ref: SourceRef | Mapping[str, Any]) -> SourceRef:
        """Build a SourceRef from a mapping with ``project`` and ``changeset_id``/``changesetId``."""
        if isinstance(ref, SourceRef):
            return ref
        changeset_id = ref.get("changeset_id", ref.get("changesetId"))
        return cls(project=str(ref["project"]), changeset_id=None if changeset_id is None else str(changeset_id))


class ProviderClient(ABC):
    """
    Version-control backend as seen by the core engine.

    Concrete providers supply the four operations below. The core never
    depends on a concrete provider.
    """

    name = "provider"

    @abstractmethod
    async def authenticate(self) -> None:
        """Establish an authenticated session with the backend."""

    @abstractmethod
    async def list_changed_paths(self, commit_ref: str, repo_ref: Optional[str] = None) -> list[ChangedPath]:
        """List every path changed by a commit/changeset."""

    @abstractmethod
    async def list_tree(self, root_path: str, ref: Optional[SourceRef] = None) -> list[TreeNode]:
        """List the direct children of a folder."""

    @abstractmethod
    async def fetch_content(self, path: str, ref: Optional[SourceRef] = None) -> Any:
        """Fetch raw content for a file (string or ``{"content": ...}`` envelope)."""

    async def aclose(self) -> None:
        """Release resources held by the provider."""

    async def __aenter__(self) -> ProviderClient:
        await self.authenticate()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class AzureDevOpsProvider(ProviderClient):
    """
    Shared HTTP plumbing for Azure DevOps REST providers.

    Parameters
    ----------
    config:
        Provider section of the tenantsync configuration.
    transport:
        Optional httpx transport (used to inject mock transports).
    """

    def __init__(self, config: ProviderConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        """Collection URL of the Azure DevOps instance."""
        if self.config.base_url:
            return self.config.base_url.rstrip("/")
        return f"https://{self.config.instance}.visualstudio.com/{self.config.collection}"

    def _auth(self) -> httpx.BasicAuth:
        if self.config.auth_method == AuthMethod.BASIC:
            return httpx.BasicAuth(self.config.username or "", self.config.password or "")
        # Personal access tokens go in the password field with an empty user
        return httpx.BasicAuth("", self.config.token or "")

    async def authenticate(self) -> None:
        if self._client is not None:
            return
        if self.config.auth_method == AuthMethod.PAT and not self.config.token:
            raise ProviderUnavailable("No access token configured", operation="authenticate")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=self._auth(),
            timeout=httpx.Timeout(self.config.timeout),
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        logger.debug("Opened %s session for %s", self.name, self.base_url)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _session(self) -> httpx.AsyncClient:
        """Return the authenticated HTTP client, opening it if needed."""
        await self.authenticate()
        if self._client is None:
            raise ProviderUnavailable(f"{self.name} session is not open", operation="authenticate")
        return self._client

    async def _get(self, url: str, params: dict[str, Any], *, operation: str, path: Optional[str] = None) -> Any:
        """
        Issue a GET request and return the decoded JSON body.

        Raises:
            ItemNotFoundError: On HTTP 404 when a path is given.
            ProviderUnavailable: On any other HTTP or transport failure.
        """
        client = await self._session()

        query = {**params, "api-version": API_VERSION}
        try:
            response = await client.get(url, params=query)
        except httpx.HTTPError as e:
            raise ProviderUnavailable(f"{self.name} {operation} failed: {e}", operation=operation, path=path) from e

        if response.status_code == 404 and path is not None:
            raise ItemNotFoundError(path)
        if response.is_error:
            raise ProviderUnavailable(
                f"{self.name} {operation} failed with HTTP {response.status_code}",
                operation=operation,
                path=path,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderUnavailable(
                f"{self.name} {operation} returned a non-JSON response", operation=operation, path=path
            ) from e

    async def _get_paged(
        self, url: str, params: dict[str, Any], *, key: str, operation: str, top: str = "$top", skip: str = "$skip"
    ) -> list[dict[str, Any]]:
        """Collect ``key`` records across pages until a short page is returned."""
        page_size = self.config.page_size
        records: list[dict[str, Any]] = []
        offset = 0
        while True:
            body = await self._get(url, {**params, top: page_size, skip: offset}, operation=operation)
            page = body.get(key, []) if isinstance(body, Mapping) else body
            records.extend(page)
            if len(page) < page_size:
                return records
            offset += page_size


def changed_path_from_record(record: Mapping[str, Any]) -> Optional[ChangedPath]:
    """Build a ChangedPath from an Azure DevOps change record (``{"item": {...}}``)."""
    item = record.get("item") or {}
    path = item.get("path")
    if not path:
        return None
    is_folder = item.get("isFolder")
    if is_folder is None and "gitObjectType" in item:
        is_folder = item["gitObjectType"] == "tree"
    return ChangedPath(path=path, is_folder=is_folder)


def tree_node_from_record(record: Mapping[str, Any]) -> TreeNode:
    """Build a TreeNode from an Azure DevOps item record."""
    is_folder = record.get("isFolder")
    if is_folder is None:
        is_folder = record.get("gitObjectType") == "tree"
    return TreeNode(path=record["path"], is_folder=bool(is_folder), size=int(record.get("size") or 0))
