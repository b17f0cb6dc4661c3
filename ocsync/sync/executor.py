# OCSYNC Sync Executor
# Apply changes: remove stale items, then download sequentially with pacing

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from ocsync.config.schema import InstallConfig, InstallMode
from ocsync.exceptions import FilesystemError, OcsyncError, RegistryError
from ocsync.registry.model import Item, ItemType
from ocsync.registry.resolver import resolve_target_path
from ocsync.sync.diff import Changes
from ocsync.sync.fetch import ContentSource, RetryPolicy, fetch_with_retry
from ocsync.utils.paths import atomic_write, safe_delete

DOWNLOAD_DELAY_SECONDS = 0.5

SKIPPED_FILES = frozenset(
    {
        "package.json",
        "package-lock.json",
        "pnpm-lock.yaml",
        "yarn.lock",
        "bun.lock",
        "bun.lockb",
    }
)

DOC_EXTENSIONS = (".md", ".mdx", ".markdown")

ProgressCallback = Callable[[str], None]


class SyncOperation(str, Enum):
    """Operation applied to one item."""

    INSTALL = "install"
    REFRESH = "refresh"
    REMOVE = "remove"


@dataclass
class ItemResult:
    """Outcome of one operation."""

    item: Item
    operation: SyncOperation
    success: bool
    path: Optional[Path] = None
    error: Optional[str] = None


@dataclass
class SyncResult:
    """Outcome of applying a set of changes."""

    results: list[ItemResult] = field(default_factory=list)
    skipped: list[Item] = field(default_factory=list)
    cancelled: bool = False

    @property
    def success(self) -> bool:
        """Check if every attempted operation succeeded."""
        return not self.failed

    @property
    def failed(self) -> list[ItemResult]:
        return [r for r in self.results if not r.success]

    def count(self, operation: SyncOperation) -> int:
        """Number of successful operations of a kind."""
        return sum(1 for r in self.results if r.success and r.operation == operation)


def should_skip_item(item: Item) -> bool:
    """
    Check if the executor leaves an item alone.

    Dotfiles and lockfiles/manifests are never synced, and docs must be
    markdown.
    """
    basename = item.key.rsplit("/", 1)[-1]
    if basename.startswith("."):
        return True
    if basename in SKIPPED_FILES:
        return True
    if item.type == ItemType.DOC:
        return not basename.lower().endswith(DOC_EXTENSIONS)
    return False


class SyncExecutor:
    """
    Sequential sync executor.

    Removals run first, then installs and refreshes are downloaded one at a
    time with a fixed pause between downloads. A failing item is recorded
    and the queue continues.
    """

    def __init__(
        self,
        source: ContentSource,
        install: InstallConfig,
        *,
        delay: float = DOWNLOAD_DELAY_SECONDS,
        retry: RetryPolicy = RetryPolicy(),
        sleep: Callable[[float], None] = time.sleep,
        cwd: Optional[Path] = None,
    ):
        """
        Initialize executor.

        Args:
            source: Where item content is fetched from.
            install: Install path policy.
            delay: Pause in seconds between two downloads.
            retry: Retry policy for each fetch.
            sleep: Sleep function (injectable for tests).
            cwd: Working directory for unprefixed item types.
        """
        self.source = source
        self.install = install
        self.delay = delay
        self.retry = retry
        self.sleep = sleep
        self.cwd = cwd
        self._cancelled = False

    def cancel(self) -> None:
        """
        Stop before the next item. An item in progress is finished.

        A cancel issued before apply stops that run before its first item.
        """
        self._cancelled = True

    def apply(
        self,
        changes: Changes,
        mode: InstallMode,
        on_progress: Optional[ProgressCallback] = None,
    ) -> SyncResult:
        """
        Apply changes to the install directory.

        Args:
            changes: Items to install, refresh and remove.
            mode: Global or local install.
            on_progress: Called with one line per completed operation.

        Returns:
            SyncResult with one ItemResult per attempted operation.
        """
        try:
            return self._run(changes, mode, on_progress)
        finally:
            self._cancelled = False

    def _run(
        self,
        changes: Changes,
        mode: InstallMode,
        on_progress: Optional[ProgressCallback],
    ) -> SyncResult:
        result = SyncResult()
        if self._cancelled:
            result.cancelled = True
            return result
        report = on_progress or (lambda message: None)

        for item in changes.remove:
            if self._cancelled:
                result.cancelled = True
                return result
            if should_skip_item(item):
                result.skipped.append(item)
                continue
            item_result = self._remove(item, mode)
            result.results.append(item_result)
            if item_result.success:
                report(f"Removed {item.name}")

        queue: list[tuple[Item, SyncOperation]] = []
        for operation, items in ((SyncOperation.INSTALL, changes.install), (SyncOperation.REFRESH, changes.refresh)):
            for item in items:
                if should_skip_item(item):
                    result.skipped.append(item)
                else:
                    queue.append((item, operation))

        for position, (item, operation) in enumerate(queue, start=1):
            if self._cancelled:
                result.cancelled = True
                return result
            item_result = self._download(item, operation, mode)
            result.results.append(item_result)
            if item_result.success:
                report(f"Synced {position}/{len(queue)}: {item.name}")
            if position < len(queue) and self.delay > 0:
                self.sleep(self.delay)

        return result

    def _remove(self, item: Item, mode: InstallMode) -> ItemResult:
        path = resolve_target_path(item, mode, self.install, cwd=self.cwd)
        try:
            safe_delete(path, missing_ok=True)
        except OSError as e:
            error = FilesystemError(str(path), e.strerror or str(e))
            return ItemResult(item=item, operation=SyncOperation.REMOVE, success=False, path=path, error=str(error))
        return ItemResult(item=item, operation=SyncOperation.REMOVE, success=True, path=path)

    def _download(self, item: Item, operation: SyncOperation, mode: InstallMode) -> ItemResult:
        path = resolve_target_path(item, mode, self.install, cwd=self.cwd)
        try:
            for location, dest in self._plan(item, path):
                content = fetch_with_retry(self.source, location, self.retry, sleep=self.sleep)
                self._write(dest, content)
        except OcsyncError as e:
            return ItemResult(item=item, operation=operation, success=False, path=path, error=str(e))
        return ItemResult(item=item, operation=operation, success=True, path=path)

    def _plan(self, item: Item, path: Path) -> list[tuple[str, Path]]:
        """Source locations and destinations of every file of an item."""
        if not item.is_directory:
            return [(item.source_path, path)]
        if not item.files:
            raise RegistryError(f"{item.name}: skill lists no files")
        base = item.source_path.rstrip("/")
        return [(f"{base}/{name}", path / name) for name in item.files]

    def _write(self, dest: Path, content: bytes) -> None:
        try:
            atomic_write(dest, content)
        except OSError as e:
            raise FilesystemError(str(dest), e.strerror or str(e)) from e

