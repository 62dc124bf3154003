"""tenantsync - tenant configuration from version control.

Detects whether a commit touches tenant configuration (rules, database
connection scripts, pages, settings, ...) and materializes the
configuration tree of a TFVC or Git repository into a normalized bundle
ready for deployment.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "TenantSync",
    "ConfigBundle",
    "PathClassifier",
    "ContentDecoder",
    "ChangeDetector",
    "TreeMaterializer",
    "TenantSyncConfig",
    "load_config",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name == "TenantSync":
        from tenantsync.engine import TenantSync

        return TenantSync
    if name in ("ConfigBundle", "PathClassifier", "ContentDecoder", "ChangeDetector", "TreeMaterializer"):
        from tenantsync import core

        return getattr(core, name)
    if name in ("TenantSyncConfig", "load_config"):
        from tenantsync import config

        return getattr(config, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
