import logging
import threading
from typing import Dict, Optional

from clipboard import ActiveWindow, ChangeNotifier, SelectionBackend, get_selection_backend
from models.selection_state import SelectionTracker
from services.capture import CaptureOutcome, CapturePipeline
from services.config import DaemonConfig
from services.eviction import EvictionManager
from storage import CacheDirectory, CacheLock, ContentStore, IndexLog, LockTimeoutError

logger = logging.getLogger(__name__)


class ClipboardService:
    """The daemon loop: wait for a change, then capture every selection under the lock."""

    def __init__(
        self,
        config: DaemonConfig,
        cache: CacheDirectory,
        backend: SelectionBackend,
        notifier: Optional[ChangeNotifier] = None,
        window: Optional[ActiveWindow] = None,
    ) -> None:
        self.config = config
        self.cache = cache
        self.backend = backend
        self.selections = list(config.selections)
        self._stop_event = threading.Event()
        self._enabled = threading.Event()
        self._enabled.set()

        cache.ensure()
        self.store = ContentStore(cache.path)
        self.logs: Dict[str, IndexLog] = {
            selection: IndexLog(cache.index_path(selection), self.store)
            for selection in self.selections
        }
        self.tracker = SelectionTracker.for_selections(self.selections)
        self.pipeline = CapturePipeline(
            self.store,
            self.logs,
            self.tracker,
            backend,
            self.selections,
            own_clipboard=config.own_clipboard,
        )
        self.eviction = EvictionManager(self.store, config.max_clips, self.logs)
        self.lock = CacheLock(cache.lock_path, timeout=config.lock_timeout)
        self.notifier = notifier or ChangeNotifier(
            self.selections, interval=config.sleep_interval, stop_event=self._stop_event)
        self.window = window or ActiveWindow(config.ignore_window)

    @classmethod
    def from_config(cls, config: DaemonConfig) -> "ClipboardService":
        cache = CacheDirectory.for_user(config.cache_base)
        return cls(config, cache, get_selection_backend())

    @property
    def enabled(self) -> bool:
        return self._enabled.is_set()

    def enable(self) -> None:
        if not self.enabled:
            logger.info("Clipboard capture enabled")
        self._enabled.set()

    def disable(self) -> None:
        if self.enabled:
            logger.info("Clipboard capture disabled")
        self._enabled.clear()

    def stop(self) -> None:
        """Ask the loop to return once the current pass has finished."""
        self._stop_event.set()
        self.notifier.interrupt()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def process_pass(self) -> Dict[str, CaptureOutcome]:
        """Capture and evict every selection once; raises LockTimeoutError."""
        outcomes: Dict[str, CaptureOutcome] = {}
        with self.lock:
            record = self.enabled and not self.window.is_ignored()
            for selection in self.selections:
                try:
                    content = self.backend.read(selection)
                    outcome = self.pipeline.capture(selection, content, record=record)
                    self.eviction.evict(self.logs[selection])
                except OSError as e:
                    logger.error(f"{selection}: skipping after storage error: {e}")
                    continue
                outcomes[selection] = outcome
                logger.debug(f"{selection}: {outcome.value}")
        return outcomes

    def run_once(self) -> Dict[str, CaptureOutcome]:
        return self.process_pass()

    def run_forever(self) -> None:
        logger.info(
            f"Watching {', '.join(self.selections)} into {self.cache.path}")
        while not self._stop_event.is_set():
            self.notifier.wait()
            if self._stop_event.is_set():
                break
            self._iterate()

    def _iterate(self) -> Optional[Dict[str, CaptureOutcome]]:
        try:
            return self.process_pass()
        except LockTimeoutError as e:
            logger.warning(f"{e}; skipping this pass")
            return None
