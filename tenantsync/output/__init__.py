# tenantsync Output Module
# Rich console output

from tenantsync.output.console import Console, create_console

__all__ = [
    "Console",
    "create_console",
]
