# tenantsync Utilities Module
# Helper functions for provider path handling

from tenantsync.utils.paths import (
    basename,
    join_path,
    normalize_path,
    relative_to,
    resolve_child,
    split_extension,
)

__all__ = [
    "normalize_path",
    "join_path",
    "relative_to",
    "basename",
    "split_extension",
    "resolve_child",
]
