import logging
from pathlib import Path
from typing import Optional

import portalocker

logger = logging.getLogger(__name__)


class LockTimeoutError(RuntimeError):
    """Another daemon held the cache lock for longer than the allowed wait."""


class CacheLock:
    """Exclusive advisory lock over one pass of the daemon.

    Only guards against a second daemon using the same cache directory.
    """

    def __init__(self, path: Path, timeout: float = 2.0):
        self.path = path
        self.timeout = timeout
        self._lock: Optional[portalocker.Lock] = None

    def acquire(self) -> None:
        lock = portalocker.Lock(
            str(self.path),
            mode="a",
            timeout=self.timeout,
            fail_when_locked=False,
            flags=portalocker.LockFlags.EXCLUSIVE | portalocker.LockFlags.NON_BLOCKING,
        )
        try:
            lock.acquire()
        except portalocker.LockException as exc:
            raise LockTimeoutError(
                f"Timed out after {self.timeout}s waiting for {self.path}") from exc
        self._lock = lock

    def release(self) -> None:
        if self._lock is not None:
            self._lock.release()
            self._lock = None

    @property
    def held(self) -> bool:
        return self._lock is not None

    def __enter__(self) -> "CacheLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
