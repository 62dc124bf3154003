# tenantsync Git Provider
# Distributed version control: Azure DevOps Git repositories

from typing import Any, Optional

from tenantsync.providers.base import (
    AzureDevOpsProvider,
    ChangedPath,
    SourceRef,
    TreeNode,
    changed_path_from_record,
    tree_node_from_record,
)
from tenantsync.utils.paths import normalize_path


class GitProvider(AzureDevOpsProvider):
    """
    Azure DevOps Git REST provider.

    Commits are addressed by SHA; item paths are repository paths such
    as ``/tenant/rules/rule1.js``. The configured branch is used as the
    version when a SourceRef carries no changeset id.
    """

    name = "git"

    def _repository_url(self, repo_ref: Optional[str] = None, project: Optional[str] = None) -> str:
        repository = repo_ref or self.config.repository
        url = f"_apis/git/repositories/{repository}"
        return f"{project}/{url}" if project else url

    def _version_params(self, ref: Optional[SourceRef]) -> dict[str, Any]:
        if ref is not None and ref.changeset_id:
            return {"versionDescriptor.version": ref.changeset_id, "versionDescriptor.versionType": "commit"}
        return {"versionDescriptor.version": self.config.branch, "versionDescriptor.versionType": "branch"}

    async def list_changed_paths(self, commit_ref: str, repo_ref: Optional[str] = None) -> list[ChangedPath]:
        records = await self._get_paged(
            f"{self._repository_url(repo_ref)}/commits/{commit_ref}/changes",
            {},
            key="changes",
            operation="list changes",
            top="top",
            skip="skip",
        )
        changes = [changed_path_from_record(record) for record in records]
        return [change for change in changes if change is not None]

    async def list_tree(self, root_path: str, ref: Optional[SourceRef] = None) -> list[TreeNode]:
        params = {"scopePath": root_path, "recursionLevel": "OneLevel", **self._version_params(ref)}
        project = ref.project if ref is not None else None
        body = await self._get(f"{self._repository_url(project=project)}/items", params, operation="list tree", path=root_path)

        root = normalize_path(root_path)
        nodes = [tree_node_from_record(record) for record in body.get("value", [])]
        return [node for node in nodes if normalize_path(node.path) != root]

    async def fetch_content(self, path: str, ref: Optional[SourceRef] = None) -> Any:
        params = {"path": path, "includeContent": "true", "$format": "json", **self._version_params(ref)}
        project = ref.project if ref is not None else None
        return await self._get(f"{self._repository_url(project=project)}/items", params, operation="fetch content", path=path)
