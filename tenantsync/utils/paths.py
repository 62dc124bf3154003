# tenantsync Path Utilities
# String helpers for provider paths (TFVC "$/..." and Git "/..." style)

import posixpath


def normalize_path(path: str) -> str:
    """
    Normalize a provider path.

    Converts backslashes to forward slashes and strips trailing slashes.
    A lone "/" or "$/" root is kept as-is.

    Args:
        path: Raw path as reported by the provider.

    Returns:
        Normalized path string.
    """
    path = path.replace("\\", "/")
    while len(path) > 1 and path.endswith("/") and path != "$/":
        path = path[:-1]
    return path


def join_path(base: str, *parts: str) -> str:
    """Join path segments with a single "/" separator."""
    result = normalize_path(base)
    for part in parts:
        part = part.strip("/")
        if not part:
            continue
        result = f"{result}/{part}" if not result.endswith("/") else f"{result}{part}"
    return result


def relative_to(path: str, root: str) -> str | None:
    """
    Get path relative to root.

    Args:
        path: Path to trim.
        root: Root path.

    Returns:
        Relative path ("" for the root itself), or None if path is outside root.
    """
    path = normalize_path(path)
    root = normalize_path(root)
    if path == root:
        return ""
    prefix = root if root.endswith("/") else root + "/"
    if not path.startswith(prefix):
        return None
    return path[len(prefix) :]


def basename(path: str) -> str:
    """Get the last segment of a path."""
    return posixpath.basename(normalize_path(path))


def split_extension(name: str) -> tuple[str, str]:
    """
    Split a file name or relative path into stem and extension.

    Args:
        name: File name or relative path.

    Returns:
        Tuple of (stem, extension). Extension is lowercased and includes the dot.
    """
    stem, ext = posixpath.splitext(name)
    return stem, ext.lower()


def resolve_child(parent: str, child: str) -> str:
    """
    Resolve a listed child path against the folder it was listed from.

    Providers sometimes report children with paths that are not rooted
    under the requested folder (relative or differently prefixed paths).
    Such children are re-rooted as ``parent/<basename>``.

    Args:
        parent: Folder that was listed.
        child: Path reported for the child.

    Returns:
        Child path rooted under parent.
    """
    child = normalize_path(child)
    if relative_to(child, parent) is not None:
        return child
    return join_path(parent, basename(child))
