"""Data models shared by the storage and service layers."""

from models.clip import (
    IndexEntry,
    blob_id_for,
    is_blank,
    is_possible_partial,
    summarize,
)
from models.selection_state import SelectionState, SelectionTracker

__all__ = [
    'IndexEntry',
    'SelectionState',
    'SelectionTracker',
    'blob_id_for',
    'is_blank',
    'is_possible_partial',
    'summarize',
]
