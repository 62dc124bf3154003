# tenantsync TFVC Provider
# Centralized version control: Azure DevOps Team Foundation Version Control

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


class TfvcProvider(AzureDevOpsProvider):
    """
    TFVC REST provider.

    Changesets are addressed by number; item paths are server paths
    such as ``$/Project/tenant/rules/rule1.js``.
    """

    name = "tfvc"

    async def list_changed_paths(self, commit_ref: str, repo_ref: Optional[str] = None) -> list[ChangedPath]:
        records = await self._get_paged(
            f"_apis/tfvc/changesets/{commit_ref}/changes",
            {},
            key="value",
            operation="list changes",
        )
        changes = [changed_path_from_record(record) for record in records]
        return [change for change in changes if change is not None]

    async def list_tree(self, root_path: str, ref: Optional[SourceRef] = None) -> list[TreeNode]:
        params: dict[str, Any] = {"scopePath": root_path, "recursionLevel": "OneLevel"}
        if ref is not None and ref.changeset_id:
            params["versionDescriptor.version"] = ref.changeset_id
            params["versionDescriptor.versionType"] = "changeset"

        url = f"{ref.project}/_apis/tfvc/items" if ref is not None and ref.project else "_apis/tfvc/items"
        body = await self._get(url, params, operation="list tree", path=root_path)

        root = normalize_path(root_path)
        nodes = [tree_node_from_record(record) for record in body.get("value", [])]
        # OneLevel listings include the folder itself
        return [node for node in nodes if normalize_path(node.path) != root]

    async def fetch_content(self, path: str, ref: Optional[SourceRef] = None) -> Any:
        params: dict[str, Any] = {"path": path, "includeContent": "true"}
        if ref is not None and ref.changeset_id:
            params["versionDescriptor.version"] = ref.changeset_id
            params["versionDescriptor.versionType"] = "changeset"
        return await self._get("_apis/tfvc/items", params, operation="fetch content", path=path)
