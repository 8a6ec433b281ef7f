"""Service layer for cliphistd."""

from .capture import CaptureOutcome, CapturePipeline
from .clipboard_service import ClipboardService
from .config import DaemonConfig
from .eviction import EvictionManager

__all__ = [
    "CaptureOutcome",
    "CapturePipeline",
    "ClipboardService",
    "DaemonConfig",
    "EvictionManager",
]
