# OCSYNC Output Module
# Rich console output

from ocsync.output.console import Console, create_console

__all__ = [
    "Console",
    "create_console",
]
