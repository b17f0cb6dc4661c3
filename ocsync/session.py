# OCSYNC Sync Session
# Owns the registry, selection and installed set of one sync run

from pathlib import Path
from typing import Optional

from ocsync.config.schema import AppConfig, InstallMode
from ocsync.registry.model import Item, Registry
from ocsync.registry.resolver import find_installed_items
from ocsync.selection.catalog import build_catalog_tree
from ocsync.selection.engine import SelectionEngine
from ocsync.sync.diff import Changes, compute_changes
from ocsync.sync.executor import ProgressCallback, SyncExecutor, SyncResult


class SyncSession:
    """
    State of one registry sync.

    The session owns the catalog tree and its selection. Changes are derived
    from the selection and the installed set on demand; executing them
    re-detects what is installed.
    """

    def __init__(
        self,
        registry: Registry,
        config: AppConfig,
        mode: InstallMode = InstallMode.LOCAL,
        *,
        cwd: Optional[Path] = None,
    ):
        """
        Initialize session.

        Args:
            registry: Loaded registry.
            config: Effective configuration of the registry.
            mode: Install mode.
            cwd: Working directory for unprefixed item types.
        """
        self.registry = registry
        self.config = config
        self.mode = mode
        self.cwd = cwd
        self.installed: list[Item] = []
        self.engine = SelectionEngine([])
        self.refresh_installed()

    @property
    def items(self) -> list[Item]:
        """Items offered in the current mode."""
        return [node.item for node in self.engine.nodes_with_items()]

    def refresh_installed(self) -> list[Item]:
        """
        Re-detect installed items and reset the selection to them.

        Returns:
            The installed items.
        """
        self.engine = SelectionEngine(build_catalog_tree(self.registry, self.mode))
        self.installed = find_installed_items(self.items, self.mode, self.config.install, cwd=self.cwd)
        self.engine.select_items(item.key for item in self.installed)
        return self.installed

    def set_mode(self, mode: InstallMode) -> None:
        """Switch install mode and re-detect installed items."""
        self.mode = mode
        self.refresh_installed()

    def changes(self) -> Changes:
        """Changes from the installed set to the current selection."""
        return compute_changes(self.engine.selected_items(), self.installed)

    def execute(
        self,
        executor: SyncExecutor,
        on_progress: Optional[ProgressCallback] = None,
    ) -> SyncResult:
        """
        Apply the current changes and re-detect installed items.

        The selection after execution reflects what is on disk.
        """
        result = executor.apply(self.changes(), self.mode, on_progress)
        self.refresh_installed()
        return result
