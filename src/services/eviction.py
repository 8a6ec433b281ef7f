import logging
from typing import Dict, List, Optional, Set

from models.clip import IndexEntry
from storage.content_store import ContentStore
from storage.index_log import IndexLog

logger = logging.getLogger(__name__)


class EvictionManager:

    def __init__(
        self,
        store: ContentStore,
        max_clips: int,
        logs: Optional[Dict[str, IndexLog]] = None,
    ) -> None:
        self.store = store
        self.max_clips = max_clips
        self.logs = logs or {}

    def evict(self, index_log: IndexLog) -> List[IndexEntry]:
        if self.max_clips <= 0:
            return []

        entries = index_log.entries()
        if len(entries) <= self.max_clips:
            return []

        retained = {entry.blob_id for entry in entries[-self.max_clips:]}
        retained |= self._sibling_blob_ids(index_log)
        stale = entries[:-self.max_clips]
        logger.debug(f"{index_log.path.name}: removing {len(stale)} old clips")
        for entry in stale:
            # A live line with the same summary still points at this blob.
            if entry.blob_id not in retained:
                self.store.delete(entry.blob_id)

        index_log.compact_to_last_n(self.max_clips)
        return stale

    def _sibling_blob_ids(self, index_log: IndexLog) -> Set[str]:
        blob_ids: Set[str] = set()
        for other in self.logs.values():
            if other.path != index_log.path:
                blob_ids |= other.blob_ids()
        return blob_ids
