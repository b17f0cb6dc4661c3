# OCSYNC Sync Module
# Diff computation, content sources and the sequential sync executor

from ocsync.sync.diff import Changes, compute_changes
from ocsync.sync.executor import (
    DOWNLOAD_DELAY_SECONDS,
    ItemResult,
    SyncExecutor,
    SyncOperation,
    SyncResult,
    should_skip_item,
)
from ocsync.sync.fetch import (
    ContentSource,
    HttpContentSource,
    LocalContentSource,
    RetryPolicy,
    fetch_with_retry,
    open_content_source,
)

__all__ = [
    # Diff
    "Changes",
    "compute_changes",
    # Executor
    "SyncExecutor",
    "SyncOperation",
    "SyncResult",
    "ItemResult",
    "DOWNLOAD_DELAY_SECONDS",
    "should_skip_item",
    # Fetch
    "ContentSource",
    "HttpContentSource",
    "LocalContentSource",
    "RetryPolicy",
    "fetch_with_retry",
    "open_content_source",
]
