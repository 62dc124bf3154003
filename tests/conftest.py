# tenantsync Test Fixtures
# Pytest fixtures and an in-memory provider for tenantsync tests

import json
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any, Optional

import pytest
import yaml

from tenantsync.core.classifier import PathClassifier
from tenantsync.errors import ItemNotFoundError
from tenantsync.providers.base import ChangedPath, ProviderClient, SourceRef, TreeNode
from tenantsync.utils.paths import join_path, normalize_path

PROJECT_PATH = "$/TFVC-test/tenant"

RULE1_SCRIPT = "function (user, context, callback) {\n  callback(null, user, context);\n}\n"
RULE2_SCRIPT = "function (user, context, callback) {\n  context.idToken.foo = 'bar';\n  callback(null, user, context);\n}\n"
LOGIN_SCRIPT = "function login(email, password, callback) {\n  callback(null, { email });\n}\n"
GET_USER_SCRIPT = "function getByEmail(email, callback) {\n  callback(null);\n}\n"
LOGIN_PAGE = "<html>\n  <body>Login</body>\n</html>\n"

TENANT_SETTINGS = {"friendly_name": "Test tenant", "support_email": "support@example.com", "flags": {"a": True}}
RULE1_METADATA = {"enabled": True, "order": 10, "stage": "login_success"}
DB1_SETTINGS = {"enabled_clients": ["app1", "app2"], "options": {"requires_username": False}}
LOGIN_PAGE_METADATA = {"enabled": True}


class FakeProvider(ProviderClient):
    """In-memory provider serving a fixed tree."""

    name = "fake"

    def __init__(
        self,
        tree: dict[str, list[TreeNode]],
        contents: dict[str, Any],
        changes: Optional[dict[str, list[ChangedPath]]] = None,
        failures: Optional[dict[str, BaseException]] = None,
    ):
        self.tree = tree
        self.contents = contents
        self.changes = changes or {}
        self.failures = failures or {}
        self.authenticated = False
        self.closed = False
        self.listed: list[str] = []
        self.fetched: list[str] = []
        self.refs: list[Optional[SourceRef]] = []

    async def authenticate(self) -> None:
        self.authenticated = True

    async def aclose(self) -> None:
        self.closed = True

    async def list_changed_paths(self, commit_ref: str, repo_ref: Optional[str] = None) -> list[ChangedPath]:
        if commit_ref in self.failures:
            raise self.failures[commit_ref]
        return list(self.changes.get(commit_ref, []))

    async def list_tree(self, root_path: str, ref: Optional[SourceRef] = None) -> list[TreeNode]:
        self.listed.append(root_path)
        self.refs.append(ref)
        if root_path in self.failures:
            raise self.failures[root_path]
        if root_path not in self.tree:
            raise ItemNotFoundError(root_path)
        return list(self.tree[root_path])

    async def fetch_content(self, path: str, ref: Optional[SourceRef] = None) -> Any:
        self.fetched.append(path)
        if path in self.failures:
            raise self.failures[path]
        if path not in self.contents:
            raise ItemNotFoundError(path)
        return {"content": self.contents[path]}


def build_tree(
    root: str,
    files: dict[str, Any],
    empty_folders: tuple[str, ...] = (),
) -> tuple[dict[str, list[TreeNode]], dict[str, str]]:
    """
    Build provider tree listings and contents from relative file paths.

    Dict/list values are serialized as JSON, strings are stored verbatim.
    """
    root = normalize_path(root)
    tree: dict[str, list[TreeNode]] = {root: []}
    contents: dict[str, str] = {}

    def ensure_folder(relative: str) -> str:
        path = join_path(root, relative)
        if path in tree:
            return path
        parent_rel, _, _ = relative.rpartition("/")
        parent = ensure_folder(parent_rel) if parent_rel else root
        tree[path] = []
        tree[parent].append(TreeNode(path=path, is_folder=True))
        return path

    for relative in empty_folders:
        ensure_folder(relative)

    for relative, content in files.items():
        parent_rel, _, _ = relative.rpartition("/")
        parent = ensure_folder(parent_rel) if parent_rel else root
        path = join_path(root, relative)
        text = content if isinstance(content, str) else json.dumps(content)
        contents[path] = text
        tree[parent].append(TreeNode(path=path, is_folder=False, size=len(text)))

    return tree, contents


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("TENANTSYNC_CONFIG", raising=False)
    monkeypatch.delenv("TENANTSYNC_TOKEN", raising=False)
    return home


@pytest.fixture
def classifier() -> PathClassifier:
    """Classifier bound to the TFVC test project."""
    return PathClassifier(PROJECT_PATH)


@pytest.fixture
def tenant_files() -> dict[str, Any]:
    """Relative path -> content of the test tenant repository."""
    return {
        "tenant.json": TENANT_SETTINGS,
        "readme.md": "# Tenant\n",
        "rules/rule1.js": RULE1_SCRIPT,
        "rules/rule1.json": RULE1_METADATA,
        "rules/rule2.js": RULE2_SCRIPT,
        "rules/notes.txt": "not a rule",
        "database-connections/db1/login.js": LOGIN_SCRIPT,
        "database-connections/db1/get_user.js": GET_USER_SCRIPT,
        "database-connections/db1/database.json": DB1_SETTINGS,
        "pages/login.html": LOGIN_PAGE,
        "pages/login.json": LOGIN_PAGE_METADATA,
        "scripts/deploy.sh": "#!/bin/sh\n",
    }


@pytest.fixture
def expected_bundle() -> dict[str, Any]:
    """Bundle expected from materializing the test tenant repository."""
    return {
        "settings": TENANT_SETTINGS,
        "rules": {
            "rule1": {"script": RULE1_SCRIPT, "metadata": RULE1_METADATA},
            "rule2": {"script": RULE2_SCRIPT},
        },
        "databases": {
            "db1": {
                "scripts": {"login": LOGIN_SCRIPT, "get_user": GET_USER_SCRIPT},
                "metadata": {"database": DB1_SETTINGS},
            },
            "db2": {"scripts": {}, "metadata": {}},
        },
        "pages": {
            "login": {"html": LOGIN_PAGE, "metadata": LOGIN_PAGE_METADATA},
        },
    }


@pytest.fixture
def make_provider():
    """Factory building a FakeProvider from relative file paths."""

    def factory(
        files: dict[str, Any],
        empty_folders: tuple[str, ...] = (),
        changes: Optional[dict[str, list[ChangedPath]]] = None,
        failures: Optional[dict[str, BaseException]] = None,
        root: str = PROJECT_PATH,
    ) -> FakeProvider:
        tree, contents = build_tree(root, files, empty_folders)
        return FakeProvider(tree, contents, changes=changes, failures=failures)

    return factory


@pytest.fixture
def tenant_provider(make_provider, tenant_files: dict[str, Any]) -> FakeProvider:
    """FakeProvider serving the test tenant repository."""
    return make_provider(tenant_files, empty_folders=("database-connections/db2",))


@pytest.fixture
def sample_config() -> dict:
    """Create sample configuration dict."""
    return {
        "provider": {
            "type": "tfvc",
            "instance": "test-instance",
            "collection": "defaultCollection",
            "auth_method": "pat",
            "token": "secret_token",
        },
        "project_path": PROJECT_PATH,
        "concurrency": 4,
        "output": {"verbose": False, "colored": True},
    }


@pytest.fixture
def config_file(temp_home: Path, sample_config: dict) -> Path:
    """Create a configuration file."""
    config_dir = temp_home / ".config" / "tenantsync"
    config_dir.mkdir(parents=True)
    config_path = config_dir / "config.yaml"

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(sample_config, f, default_flow_style=False)

    return config_path
