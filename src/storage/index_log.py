import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Set

from models.clip import IndexEntry
from storage.content_store import ContentStore

logger = logging.getLogger(__name__)


class IndexLog:
    """Append-only history of one selection, one ``<time_ns> <summary>`` per line.

    Line order is the authoritative history order. Callers hold the cache
    lock around every mutation.
    """

    def __init__(self, path: Path, store: ContentStore):
        self.path = path
        self.store = store

    def entries(self) -> List[IndexEntry]:
        entries: List[IndexEntry] = []
        for raw_line in self._read_lines():
            entry = IndexEntry.parse(raw_line)
            if entry is None:
                logger.debug(f"{self.path.name}: skipping malformed line {raw_line!r}")
                continue
            entries.append(entry)
        return entries

    def __len__(self) -> int:
        return len(self.entries())

    def append(self, timestamp: int, summary: str) -> IndexEntry:
        entry = IndexEntry(timestamp=timestamp, summary=summary)
        with self.path.open("ab") as handle:
            handle.write(entry.line)
        return entry

    def rollback_last_entry(
        self,
        byte_length: int,
        expected: Optional[str] = None,
        is_referenced: Optional[Callable[[str], bool]] = None,
    ) -> Optional[IndexEntry]:
        """Cut the trailing ``byte_length`` bytes and delete their blob.

        The span must hold exactly one complete entry line (and match
        ``expected`` when given); otherwise the log is left untouched.
        The blob survives when ``is_referenced`` reports another live line
        still pointing at it.
        """
        if byte_length <= 0 or not self.path.exists():
            return None

        with self.path.open("r+b") as handle:
            handle.seek(0, os.SEEK_END)
            file_size = handle.tell()
            if byte_length > file_size:
                logger.debug(
                    f"{self.path.name}: rollback of {byte_length} bytes exceeds log size {file_size}")
                return None

            handle.seek(file_size - byte_length)
            tail = handle.read(byte_length)
            preceding = b"\n"
            if file_size > byte_length:
                handle.seek(file_size - byte_length - 1)
                preceding = handle.read(1)

            text = tail.decode("utf-8", errors="replace")
            if preceding != b"\n" or not text.endswith("\n") or "\n" in text[:-1]:
                logger.debug(f"{self.path.name}: tail is not a single entry, not rolling back")
                return None

            entry = IndexEntry.parse(text)
            if entry is None or (expected is not None and entry.text != expected):
                logger.debug(f"{self.path.name}: tail does not match last entry, not rolling back")
                return None

            handle.truncate(file_size - byte_length)

        if is_referenced is not None and is_referenced(entry.blob_id):
            logger.debug(f"{self.path.name}: blob {entry.blob_id} still referenced, keeping it")
        else:
            self.store.delete(entry.blob_id)
        return entry

    def compact_to_last_n(self, n: int) -> List[IndexEntry]:
        """Keep the newest ``n`` entries minus consecutive repeats.

        Returns the older entries that were dropped. Malformed lines are
        discarded. The new contents are written to a sibling temp file and
        renamed over the log.
        """
        entries = self.entries()
        dropped = entries[:-n] if n > 0 else entries
        kept = entries[-n:] if n > 0 else []

        deduped: List[IndexEntry] = []
        for entry in kept:
            if deduped and deduped[-1] == entry:
                continue
            deduped.append(entry)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "wb") as handle:
                for entry in deduped:
                    handle.write(entry.line)
            os.replace(tmp_name, self.path)
        except OSError:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

        return dropped

    def blob_ids(self) -> Set[str]:
        return {entry.blob_id for entry in self.entries()}

    def _read_lines(self) -> List[str]:
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            return []
        text = data.decode("utf-8", errors="replace")
        return [line for line in text.split("\n") if line]
