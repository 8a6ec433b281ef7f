import enum
import logging
import time
from typing import Callable, Dict, Sequence

from clipboard.base import SelectionBackend
from models.clip import IndexEntry, is_blank, is_possible_partial, summarize
from models.selection_state import SelectionTracker
from storage.content_store import ContentStore
from storage.index_log import IndexLog

logger = logging.getLogger(__name__)

CLIPBOARD = "clipboard"


class CaptureOutcome(str, enum.Enum):
    BLANK = "blank"
    UNCHANGED = "unchanged"
    SUSPENDED = "suspended"
    NEW = "new"
    MERGED = "merged"
    DUPLICATE = "duplicate"


class CapturePipeline:
    """Turns one selection read into store and index mutations.

    Must be driven while the cache lock is held.
    """

    def __init__(
        self,
        store: ContentStore,
        logs: Dict[str, IndexLog],
        tracker: SelectionTracker,
        backend: SelectionBackend,
        selections: Sequence[str],
        own_clipboard: bool = False,
        clock: Callable[[], int] = time.time_ns,
    ) -> None:
        self.store = store
        self.logs = logs
        self.tracker = tracker
        self.backend = backend
        self.selections = list(selections)
        self.own_clipboard_enabled = own_clipboard
        self._clock = clock

    def capture(self, selection: str, content: bytes, record: bool = True) -> CaptureOutcome:
        if is_blank(content):
            return CaptureOutcome.BLANK

        state = self.tracker.state(selection)
        if content == state.last_content:
            return CaptureOutcome.UNCHANGED

        if not record:
            state.last_content = content
            return CaptureOutcome.SUSPENDED

        index_log = self.logs[selection]
        merged = False
        if is_possible_partial(state.last_content, content):
            logger.debug(f"{selection}: previous clip is a possible partial of the new one")
            removed = index_log.rollback_last_entry(
                state.last_entry_size,
                expected=state.last_entry_text,
                is_referenced=self.is_referenced,
            )
            merged = removed is not None

        state.last_content = content
        entry = IndexEntry(timestamp=self._clock(), summary=summarize(content))

        if content != self.tracker.last_content_any:
            state.last_blob_id = self.store.put(content)
            index_log.append(entry.timestamp, entry.summary)
            outcome = CaptureOutcome.MERGED if merged else CaptureOutcome.NEW
            logger.info(f"{selection}: captured {entry.summary[:60]!r}")
        else:
            outcome = CaptureOutcome.DUPLICATE
            logger.debug(f"{selection}: already stored from another selection")

        # Tracked even when nothing was written so the next rollback is sized right.
        self.tracker.last_content_any = content
        state.last_entry_text = entry.text
        state.last_entry_size = entry.size

        self.own_clipboard(selection)
        return outcome

    def is_referenced(self, blob_id: str) -> bool:
        return any(blob_id in index_log.blob_ids() for index_log in self.logs.values())

    def own_clipboard(self, selection: str) -> bool:
        """Re-take ownership of CLIPBOARD so it outlives the copying app.

        PRIMARY is left alone: owning it clears highlighting in some apps.
        """
        if not self.own_clipboard_enabled:
            return False
        if selection != CLIPBOARD or CLIPBOARD not in self.selections:
            return False

        data = self.backend.read(CLIPBOARD)
        if not data:
            return False
        return self.backend.write(CLIPBOARD, data)
