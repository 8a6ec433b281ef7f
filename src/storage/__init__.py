"""
On-disk cache for cliphistd.

Blob files, per-selection index logs and the lock file all live in a single
owner-only cache directory.
"""

from storage.cache_dir import CacheDirectory
from storage.content_store import ContentStore
from storage.index_log import IndexLog
from storage.lock import CacheLock, LockTimeoutError

__all__ = [
    'CacheDirectory',
    'CacheLock',
    'ContentStore',
    'IndexLog',
    'LockTimeoutError',
]
