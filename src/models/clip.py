import hashlib
from dataclasses import dataclass
from typing import Optional

SUMMARY_LIMIT = 300


def is_blank(content: bytes) -> bool:
    return not content.strip()


def summarize(content: bytes, limit: int = SUMMARY_LIMIT) -> str:
    """Return the one-line summary used both as index text and blob key.

    The first line holding a non-whitespace character is truncated to
    ``limit`` characters; multi-line clips get a `` (N lines)`` suffix.
    """
    text = content.decode("utf-8", errors="replace").rstrip("\n")
    lines = text.split("\n")

    first_line = ""
    for line in lines:
        if line.strip():
            first_line = line[:limit]
            break

    if len(lines) > 1:
        return f"{first_line} ({len(lines)} lines)"
    return first_line


def blob_id_for(summary: str) -> str:
    # Keyed on the summary, so clips sharing a truncated first line collide.
    return hashlib.md5(summary.encode("utf-8")).hexdigest()


def is_possible_partial(previous: bytes, current: bytes) -> bool:
    """True when ``previous`` looks like an incomplete read of ``current``.

    Selection transfers can be observed mid-write, leaving a prefix or a
    suffix of the final content as the previous capture.
    """
    if not previous:
        return False
    return current.startswith(previous) or current.endswith(previous)


@dataclass(frozen=True)
class IndexEntry:
    """One line of a selection's index log."""
    timestamp: int
    summary: str

    @property
    def blob_id(self) -> str:
        return blob_id_for(self.summary)

    @property
    def text(self) -> str:
        return f"{self.timestamp} {self.summary}"

    @property
    def line(self) -> bytes:
        return f"{self.text}\n".encode("utf-8")

    @property
    def size(self) -> int:
        return len(self.line)

    @classmethod
    def parse(cls, line: str) -> Optional["IndexEntry"]:
        line = line.rstrip("\n")
        stamp, sep, summary = line.partition(" ")
        if not sep or not stamp.isdigit():
            return None
        return cls(timestamp=int(stamp), summary=summary)
